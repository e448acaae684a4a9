import os
import sys

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
    "<level>{message}</level>"
)
LOG_FILE = "logs/tokensec_{time:YYYY-MM-DD}.log"


def setup_logger(*, json_logs: bool = False, level: str = "INFO") -> None:
    """Configure loguru sinks for the risk engine.

    The LOG_LEVEL env var overrides ``level`` for the console. The file
    sink keeps DEBUG so skipped stages and provider timeouts can be
    reviewed afterwards.
    """
    console_level = os.getenv("LOG_LEVEL", level).upper()
    logger.remove()

    if json_logs:
        logger.add(sys.stdout, serialize=True, level=console_level)
    else:
        logger.add(sys.stdout, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    logger.add(
        LOG_FILE,
        level="DEBUG",
        rotation="20 MB",
        retention="7 days",
        compression="gz",
        serialize=json_logs,
        enqueue=True,
    )
