import logging
import threading
from typing import Callable, Optional

from jobsync.models import BatchResult

logger = logging.getLogger(__name__)


class SyncScheduler:
    """Runs a sync job every `interval_seconds`, never two at once.

    Each tick starts the job on a worker thread. A tick that arrives while
    the previous run still holds the lock is skipped.
    """

    def __init__(self, job: Callable[[], BatchResult], interval_seconds: float):
        self.job = job
        self.interval_seconds = interval_seconds
        self._run_lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.last_result: Optional[BatchResult] = None

    @property
    def is_running(self) -> bool:
        return self._run_lock.locked()

    def run_once(self) -> Optional[BatchResult]:
        """Run the job unless a run is already in progress; None means skipped"""
        if not self._run_lock.acquire(blocking=False):
            logger.warning("Previous sync run still in progress, skipping this tick")
            return None
        try:
            logger.info("Starting sync run")
            try:
                result = self.job()
            except Exception as e:
                logger.exception("Sync run crashed")
                result = BatchResult.aborted(str(e))
            self.last_result = result
            if result.success:
                logger.info(
                    "Sync run finished: %d created, %d updated, %d failed",
                    result.created,
                    result.updated,
                    result.failed,
                )
            else:
                logger.error("Sync run failed: %s", result.error)
            return result
        finally:
            self._run_lock.release()

    def tick(self) -> threading.Thread:
        worker = threading.Thread(target=self.run_once, name="sync-run", daemon=True)
        worker.start()
        return worker

    def run_forever(self, run_immediately: bool = True):
        """Block, firing a tick every interval until stop() is called"""
        if run_immediately:
            self.tick()
        while not self._stop.wait(self.interval_seconds):
            self.tick()

    def start(self, run_immediately: bool = True):
        self._stop.clear()
        self._thread = threading.Thread(
            target=self.run_forever, args=(run_immediately,), name="sync-scheduler", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
