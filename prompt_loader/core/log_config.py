"""Logging configuration for the prompt loader."""
import logging
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_LOGGER = "prompt_loader"
DEFAULT_FORMAT = "%(asctime)s - [%(name)s] - %(levelname)s - %(message)s"


class LogSettings(BaseSettings):
    """Logging configuration with environment variable support."""

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = DEFAULT_FORMAT

    model_config = SettingsConfigDict(
        env_prefix="PROMPT_LOADER_",
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> logging.Logger:
    """
    Attach a console handler to the package logger.

    Args:
        level: Log level name; defaults to PROMPT_LOADER_LOG_LEVEL or INFO
        fmt: Record format; defaults to PROMPT_LOADER_LOG_FORMAT

    Returns:
        Configured package logger
    """
    settings = LogSettings()
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel((level or settings.LOG_LEVEL).upper())

    # Remove handlers from a previous call
    for handler in list(logger.handlers):
        if getattr(handler, "_prompt_loader_handler", False):
            logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(fmt or settings.LOG_FORMAT))
    console_handler._prompt_loader_handler = True
    logger.addHandler(console_handler)

    return logger
