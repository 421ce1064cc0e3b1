import sys
from loguru import logger
from pathlib import Path
from typing import Optional

PACKAGE = "script_studio"

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

_configured: Optional[tuple] = None

def setup_logger(log_level: str = "INFO", log_file: Optional[Path] = None):
    """Route this package's records to stderr and, optionally, a session file.

    Records from other libraries are left out of both sinks. Calling again
    with the same settings is a no-op.
    """
    global _configured

    settings = (log_level.upper(), Path(log_file) if log_file else None)
    if _configured == settings:
        return logger

    logger.remove()

    # stdout belongs to the interactive session
    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=settings[0],
        filter=PACKAGE,
        colorize=True,
    )

    if settings[1]:
        settings[1].parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            settings[1],
            format=FILE_FORMAT,
            level="DEBUG",
            filter=PACKAGE,
            rotation="10 MB",
            retention="7 days",
        )

    _configured = settings
    return logger
