"""Prompt loader: file-based prompt discovery, cascading and composition."""
from .core import (
    CompositionOrder,
    InvalidPromptPathError,
    MissingArgumentError,
    PromptLoaderError,
    PromptLoaderSettings,
    PromptNotFoundError,
    PromptParseError,
    SetNotFoundError,
    configure_logging,
    load_settings,
)
from .prompts import (
    ROOT_BUCKET,
    NameMap,
    Prompt,
    PromptComposer,
    PromptContext,
    PromptDefinition,
    PromptFormat,
    PromptService,
    PromptSet,
    build_set_tree,
    combine_prompts,
    load_definitions,
    load_prompt,
    scan_prompts,
)

__version__ = "0.1.0"

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
    "ROOT_BUCKET",
    "NameMap",
    "Prompt",
    "PromptFormat",
    "PromptSet",
    "PromptComposer",
    "PromptContext",
    "PromptDefinition",
    "PromptService",
    "build_set_tree",
    "combine_prompts",
    "load_definitions",
    "load_prompt",
    "scan_prompts",
]
