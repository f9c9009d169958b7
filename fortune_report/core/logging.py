import logging
import sys

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def configure_logging(level: str = "INFO"):
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=log_level, format=LOG_FORMAT, stream=sys.stdout)
    # aiohttp 的访问日志太吵
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger(__name__).info(f"Logging configured with level: {level.upper()}")
