"""Shared configuration, logging and exceptions."""
from .config import CompositionOrder, PromptLoaderSettings, load_settings
from .exceptions import (
    InvalidPromptPathError,
    MissingArgumentError,
    PromptLoaderError,
    PromptNotFoundError,
    PromptParseError,
    SetNotFoundError,
)
from .log_config import configure_logging

__all__ = [
    "CompositionOrder",
    "PromptLoaderSettings",
    "load_settings",
    "configure_logging",
    "PromptLoaderError",
    "SetNotFoundError",
    "PromptNotFoundError",
    "MissingArgumentError",
    "PromptParseError",
    "InvalidPromptPathError",
]
