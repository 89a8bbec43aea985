import sys
import logging
from pathlib import Path
from loguru import logger

from app.core.config import settings

# Possible values: "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"
DEFAULT_LEVEL = settings.log.level.upper()

LOG_DIR = Path(__file__).parent / "logs"
LOG_FILE = LOG_DIR / "portal.log"

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level:<8}</level> | "
    "<cyan>{file}:{function}:{line}</cyan> | "
    "<level>{message}</level>"
)

FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level:<8} | "
    "{file}:{function}:{line} | {message}"
)

# Loggers of the libraries we run on; their records are routed into loguru
EXTERNAL_LOGGERS = [
    "uvicorn",
    "uvicorn.error",
    "uvicorn.access",
    "fastapi",
    "httpx",
    "httpcore",
]


class InterceptHandler(logging.Handler):
    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(level: str = DEFAULT_LEVEL, to_file: bool = settings.log.to_file) -> None:
    """Replace loguru's default sink and redirect stdlib logging into it."""
    logger.remove()

    logger.add(
        sys.stdout,
        level=level,
        format=CONSOLE_FORMAT,
        colorize=True,
    )

    if to_file:
        LOG_DIR.mkdir(exist_ok=True)
        logger.add(
            str(LOG_FILE),
            level=level,
            rotation="5 MB",
            retention=10,
            compression="zip",
            encoding="utf-8",
            format=FILE_FORMAT,
            backtrace=True,
            diagnose=False,
            enqueue=True,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for name in EXTERNAL_LOGGERS:
        ext_logger = logging.getLogger(name)
        ext_logger.handlers.clear()
        ext_logger.addHandler(InterceptHandler())
        ext_logger.setLevel(level)
        ext_logger.propagate = False
