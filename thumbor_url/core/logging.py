import logging
import sys
from typing import Optional

from loguru import logger
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogConfig(BaseSettings):
    """Logging configuration"""

    model_config = SettingsConfigDict(env_prefix="THUMBOR_URL_LOG_")

    # Logging level
    LEVEL: str = "INFO"

    # Logging format
    FORMAT: str = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>"
    )

    # Whether to serialize the log message to JSON
    JSON: bool = False

    # Optional log file, rotated at 10 MB
    FILE: Optional[str] = None


class InterceptHandler(logging.Handler):
    """
    Intercept handler to route standard logging to loguru.
    """

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).bind(name=record.name).log(
            level, record.getMessage()
        )


def get_logger(name: str):
    """Get a logger instance with the specified name.

    Args:
        name: The name of the logger, typically the module name.

    Returns:
        A logger instance bound with the specified name.
    """
    return logger.bind(name=name)


def setup_logging(log_config: Optional[LogConfig] = None) -> None:
    """Configure logging with loguru.

    The library never calls this itself; applications embedding thumbor-url
    call it once at startup if they want its debug output.
    """
    log_config = log_config or LogConfig()

    # Remove default configuration
    logger.remove()

    # Records logged without a bound name still render
    logger.configure(extra={"name": "thumbor_url"})

    logger.add(
        sys.stdout,
        enqueue=True,
        backtrace=True,
        level=log_config.LEVEL,
        format=log_config.FORMAT,
        serialize=log_config.JSON,
    )

    if log_config.FILE:
        logger.add(
            log_config.FILE,
            rotation="10 MB",
            retention="1 week",
            enqueue=True,
            backtrace=True,
            level=log_config.LEVEL,
            format=log_config.FORMAT,
            serialize=log_config.JSON,
        )

    # Intercept standard logging
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    logger.bind(name="logging").info("Logging configuration completed")
