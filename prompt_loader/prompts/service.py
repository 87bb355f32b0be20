"""Prompt Service.

Instance-based entry point over the scanner, tree builder and composer. It
remembers the results of the last load so callers can keep one service around
and read ``prompts`` / ``prompt_sets`` afterwards.
"""
import asyncio
import logging
from typing import Mapping, Optional, Union

from ..core.config import PromptLoaderSettings
from .composer import PromptComposer
from .models import NameMap, Prompt, PromptCollection, PromptSet, SetTree
from .scanner import PathLike, load_prompt, resolve_prompt_folder, scan_prompts
from .tree import build_set_tree

logger = logging.getLogger(__name__)


class PromptService:
    """Loads prompts and prompt sets, and combines them, using one settings object.

    Example:
        service = PromptService(load_settings("prompt_loader.yaml"))
        tree = service.load_prompt_sets()
        text = service.get_combined_prompts(tree["Sales"], "Root")
    """

    def __init__(self, settings: Optional[PromptLoaderSettings] = None):
        self._settings = settings or PromptLoaderSettings()
        self._composer = PromptComposer(self._settings)
        self.prompts: PromptCollection = NameMap()
        self.prompt_sets: SetTree = NameMap()

    @property
    def settings(self) -> PromptLoaderSettings:
        return self._settings

    @property
    def composer(self) -> PromptComposer:
        return self._composer

    def _cascade(self, cascade_override: Optional[bool]) -> bool:
        return self._settings.cascade_override if cascade_override is None else cascade_override

    def load_prompts(
        self,
        cascade_override: Optional[bool] = None,
        prompts_folder: Optional[PathLike] = None,
    ) -> PromptCollection:
        """Scan the prompts folder (or the given folder) recursively."""
        folder = resolve_prompt_folder(prompts_folder or self._settings.prompts_folder)
        self.prompts = scan_prompts(
            folder,
            self._settings.supported_prompt_extensions,
            cascade_override=self._cascade(cascade_override),
            allowed_names=self._settings.allowed_names(),
        )
        logger.info(f"Loaded {len(self.prompts)} prompts from {folder}")
        return self.prompts

    def load_prompt_sets(
        self,
        cascade_override: Optional[bool] = None,
        prompt_set_folder: Optional[PathLike] = None,
    ) -> SetTree:
        """Build the set tree for the prompt-set folder (or the given folder)."""
        folder = resolve_prompt_folder(prompt_set_folder or self._settings.prompt_set_folder)
        self.prompt_sets = build_set_tree(
            folder,
            self._settings.supported_prompt_extensions,
            cascade_override=self._cascade(cascade_override),
            allowed_names=self._settings.allowed_names(),
        )
        logger.info(f"Loaded {len(self.prompt_sets)} prompt sets from {folder}")
        return self.prompt_sets

    def load_prompt(self, file_path: PathLike) -> Optional[Prompt]:
        """Load one prompt file; None if missing or unsupported."""
        return load_prompt(file_path, self._settings.supported_prompt_extensions)

    def get_combined_prompts(
        self,
        prompt_sets: Union[Mapping[str, PromptSet], PromptSet],
        set_name: Optional[Union[str, PromptSet]] = None,
        separator: Optional[str] = None,
    ) -> str:
        """Combine prompts.

        Two call forms:
        - ``get_combined_prompts(buckets, "Refund")`` looks the set up by name
          and falls back to the mapping's Root set (SetNotFoundError if absent).
        - ``get_combined_prompts(prompt_set, root_set)`` combines a set with an
          optional fallback set.
        """
        if isinstance(prompt_sets, PromptSet):
            fallback = set_name if isinstance(set_name, PromptSet) else None
            return self._composer.combine(prompt_sets, fallback=fallback, separator=separator)
        if not isinstance(set_name, str):
            raise TypeError("set_name is required when combining from a mapping of sets")
        return self._composer.combine_named(prompt_sets, set_name, separator=separator)

    async def load_prompts_async(
        self,
        cascade_override: Optional[bool] = None,
        prompts_folder: Optional[PathLike] = None,
    ) -> PromptCollection:
        return await asyncio.to_thread(self.load_prompts, cascade_override, prompts_folder)

    async def load_prompt_sets_async(
        self,
        cascade_override: Optional[bool] = None,
        prompt_set_folder: Optional[PathLike] = None,
    ) -> SetTree:
        return await asyncio.to_thread(self.load_prompt_sets, cascade_override, prompt_set_folder)

    async def load_prompt_async(self, file_path: PathLike) -> Optional[Prompt]:
        return await asyncio.to_thread(self.load_prompt, file_path)
