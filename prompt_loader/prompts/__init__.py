"""Prompt resolution and composition.

This module provides:
- scan_prompts / build_set_tree: Load prompt folders with cascading overrides
- PromptComposer: Ordered, optionally headed composition of a prompt set
- PromptService: Instance-based loading and combining with one settings object
- PromptContext: Fluent load -> select -> combine chain
- Definitions: Structured YAML/JSON prompts with arguments

Directory structure:
    PromptSets/
    ├── system.md            # Global Root bucket
    ├── Sales/
    │   ├── instructions.md  # Sales Root bucket
    │   └── Enterprise/      # Sub-set, inherits Sales Root
    └── ...

Usage:
    from prompt_loader.prompts import PromptContext

    text = (
        PromptContext.from_folder("PromptSets")
        .load()
        .get("Sales/Enterprise")
        .combine_with_root()
        .separate_with("\\n\\n{filename}:\\n")
        .as_string()
    )
"""
from .models import ROOT_BUCKET, NameMap, Prompt, PromptCollection, PromptFormat, PromptSet, SetTree
from .formats import classify_format, split_prompt_name
from .scanner import load_prompt, resolve_prompt_folder, scan_directory, scan_prompts
from .tree import build_set_tree, inherit_prompts
from .composer import PromptComposer, combine_prompts, create_prompt_composer
from .service import PromptService
from .context import (
    PromptContext,
    PromptPath,
    SetRoot,
    SetSubset,
    SetSubsetPrompt,
    SinglePrompt,
    parse_prompt_path,
)
from .definitions import (
    DefinitionComposer,
    PromptArgument,
    PromptDefinition,
    PromptMessage,
    load_definitions,
    parse_definition,
)

__all__ = [
    "ROOT_BUCKET",
    "NameMap",
    "Prompt",
    "PromptCollection",
    "PromptFormat",
    "PromptSet",
    "SetTree",
    "classify_format",
    "split_prompt_name",
    "load_prompt",
    "resolve_prompt_folder",
    "scan_directory",
    "scan_prompts",
    "build_set_tree",
    "inherit_prompts",
    "PromptComposer",
    "combine_prompts",
    "create_prompt_composer",
    "PromptService",
    "PromptContext",
    "PromptPath",
    "SetRoot",
    "SetSubset",
    "SetSubsetPrompt",
    "SinglePrompt",
    "parse_prompt_path",
    "DefinitionComposer",
    "PromptArgument",
    "PromptDefinition",
    "PromptMessage",
    "load_definitions",
    "parse_definition",
]
