"""Logging setup shared by the API and the HTML views"""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger.

    Args:
        level: Level name such as "DEBUG" or "WARNING"
    """
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # Keep SQL echo out of the application log unless DEBUG asks for it
    if level.upper() != "DEBUG":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
