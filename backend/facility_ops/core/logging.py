import logging
import sys

from facility_ops.core.config import settings


def setup_logging() -> None:
    """Configure the root logger once for the whole service."""
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
