import os
import sys
from pathlib import Path

from loguru import logger

# Flag to track if logging has been configured
_logging_configured = False

LOG_DIR_NAME = ".goresolve"


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes")


def setup_logging(level="INFO", suppress_console=None, enable_file_logging=None, force=False):
    """
    Configures the global logger.

    Console logging goes to stderr. File logging is opt-in via
    GORESOLVE_FILE_LOGGING=1 or enable_file_logging=True.

    Args:
        level: Logging level (default: INFO)
        suppress_console: If True, suppress console logging. If None, check GORESOLVE_MACHINE_MODE env var.
        enable_file_logging: If True, enable file logging. If None, check GORESOLVE_FILE_LOGGING env var.
        force: Reconfigure even if logging was already set up (the CLI uses this for --verbose).
    """
    global _logging_configured

    if _logging_configured and not force:
        return
    _logging_configured = True

    logger.remove()

    if suppress_console is None:
        suppress_console = _env_flag("GORESOLVE_MACHINE_MODE")

    if not suppress_console:
        logger.add(
            sys.stderr,
            level=level,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
            colorize=True
        )

    if enable_file_logging is None:
        enable_file_logging = _env_flag("GORESOLVE_FILE_LOGGING")

    if enable_file_logging:
        log_dir = Path.cwd() / LOG_DIR_NAME / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_dir / "goresolve.log",
            level="INFO",
            rotation="10 MB",
            retention="1 day",
            compression="gz",
            catch=True,
            serialize=False
        )


# Configure the logger on import (will check env var for machine mode)
setup_logging()
