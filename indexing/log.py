"""Console logging through rich."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "INFO") -> None:
    handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)
    logging.basicConfig(level=level.upper(), format="%(message)s", datefmt="[%X]", handlers=[handler], force=True)
    # requests/googleapiclient are chatty at INFO
    for noisy in ("urllib3", "googleapiclient.discovery_cache", "apscheduler.executors"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
