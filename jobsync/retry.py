import logging
import time
from typing import Callable

import httpx

logger = logging.getLogger(__name__)


def is_transient(response: httpx.Response) -> bool:
    return response.status_code == 429 or response.status_code >= 500


def send_with_retry(
    send: Callable[[], httpx.Response],
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
) -> httpx.Response:
    """Call `send` until it returns a non-transient response.

    Rate limits, 5xx answers and transport errors are retried with
    exponential backoff. Once retries run out the last response is returned
    so the caller can raise_for_status, or the transport error is re-raised.
    """
    attempt = 0
    while True:
        try:
            response = send()
        except httpx.TransportError as e:
            if attempt >= max_retries:
                raise
            logger.warning("Transport error (%s), retry %d/%d", e, attempt + 1, max_retries)
        else:
            if not is_transient(response) or attempt >= max_retries:
                return response
            logger.warning("HTTP %d, retry %d/%d", response.status_code, attempt + 1, max_retries)

        time.sleep(min(base_delay * 2**attempt, max_delay))
        attempt += 1
