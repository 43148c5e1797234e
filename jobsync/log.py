import logging

from rich.logging import RichHandler


def setup_logging(level: str = "INFO"):
    """Route all jobsync loggers through a rich console handler"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(name)s  %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
