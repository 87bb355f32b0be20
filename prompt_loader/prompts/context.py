"""Fluent prompt context.

Chains loading, selection and combination::

    text = (
        PromptContext.from_folder("PromptSets")
        .with_config("prompt_loader.yaml")
        .load()
        .get("Sales")
        .combine_with_root()
        .as_string()
    )

``get`` accepts ``set``, ``set/subset``, ``set/prompt`` or
``set/subset/prompt``. The path is parsed once into a PromptPath variant and
each variant has one resolution rule.
"""
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from ..core.config import PromptLoaderSettings, load_settings
from ..core.exceptions import InvalidPromptPathError
from .models import ROOT_BUCKET, PromptCollection, PromptSet, SetTree
from .scanner import PathLike, prompt_name
from .service import PromptService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SinglePrompt:
    """A prompt loaded on its own (``from_file``)."""
    name: str


@dataclass(frozen=True)
class SetRoot:
    """The Root bucket of a set."""
    set_name: str


@dataclass(frozen=True)
class SetSubset:
    """A named bucket of a set."""
    set_name: str
    subset: str


@dataclass(frozen=True)
class SetSubsetPrompt:
    """One prompt inside a bucket of a set."""
    set_name: str
    subset: str
    prompt: str


PromptPath = Union[SinglePrompt, SetRoot, SetSubset, SetSubsetPrompt]


def parse_prompt_path(path: str, prompt_sets: Optional[Mapping[str, Mapping[str, PromptSet]]] = None) -> PromptPath:
    """Parse a slash-separated path against a loaded set tree.

    One segment names a set if the tree has it, else a single prompt. Two
    segments name a bucket if the set has one by that name, else a prompt in
    the set's Root bucket.

    Raises:
        InvalidPromptPathError: For empty paths or more than three segments.
    """
    parts = [part for part in path.split("/") if part]
    tree = prompt_sets if prompt_sets is not None else {}

    if len(parts) == 1:
        if parts[0] in tree:
            return SetRoot(parts[0])
        return SinglePrompt(parts[0])

    if len(parts) == 2:
        set_name, second = parts
        buckets = tree.get(set_name)
        if buckets is not None and second in buckets:
            return SetSubset(set_name, second)
        return SetSubsetPrompt(set_name, ROOT_BUCKET, second)

    if len(parts) == 3:
        return SetSubsetPrompt(*parts)

    raise InvalidPromptPathError(
        f"Path must be in the format 'set', 'set/subset', or 'set/subset/prompt': {path!r}"
    )


class PromptContext:
    """Stateful builder over PromptService for one source (a file or a folder)."""

    def __init__(self, settings: Optional[PromptLoaderSettings] = None):
        self._service = PromptService(settings)
        self._file: Optional[str] = None
        self._folder: Optional[str] = None
        self._cascade_override: Optional[bool] = None
        self._selection: Optional[PromptPath] = None
        self._separator: Optional[str] = None
        self._combine_with_root = False

    # -- construction -----------------------------------------------------

    @classmethod
    def from_file(cls, file: PathLike = "", cascade_override: Optional[bool] = None) -> "PromptContext":
        ctx = cls()
        ctx._file = str(file) if file else None
        ctx._cascade_override = cascade_override
        return ctx

    @classmethod
    def from_folder(cls, folder: PathLike = "", cascade_override: Optional[bool] = None) -> "PromptContext":
        ctx = cls()
        ctx._folder = str(folder) if folder else None
        ctx._cascade_override = cascade_override
        return ctx

    def with_settings(self, settings: PromptLoaderSettings) -> "PromptContext":
        """Replace the settings; already loaded prompts are kept."""
        previous = self._service
        self._service = PromptService(settings)
        self._service.prompts = previous.prompts
        self._service.prompt_sets = previous.prompt_sets
        return self

    def with_config(self, config: Union[PathLike, Mapping[str, Any]]) -> "PromptContext":
        """Replace the settings from a YAML/JSON file path or a dictionary."""
        if isinstance(config, Mapping):
            return self.with_settings(PromptLoaderSettings.from_dict(config))
        return self.with_settings(load_settings(config))

    # -- loading ----------------------------------------------------------

    def load(self) -> "PromptContext":
        """Load the configured source: the single file, or the folder's set tree."""
        if self._file:
            prompt = self._service.load_prompt(self._file)
            if prompt is not None:
                name = prompt_name(self._file, self.settings.supported_prompt_extensions)
                self._service.prompts[name] = prompt
            else:
                logger.warning(f"Prompt file not loaded: {self._file}")
        else:
            self._service.load_prompt_sets(self._cascade_override, self._folder)
        return self

    async def load_async(self) -> "PromptContext":
        """Async variant of load(); file reads run in a worker thread."""
        if self._file:
            prompt = await self._service.load_prompt_async(self._file)
            if prompt is not None:
                name = prompt_name(self._file, self.settings.supported_prompt_extensions)
                self._service.prompts[name] = prompt
            else:
                logger.warning(f"Prompt file not loaded: {self._file}")
        else:
            await self._service.load_prompt_sets_async(self._cascade_override, self._folder)
        return self

    # -- selection --------------------------------------------------------

    def get(self, path: str) -> "PromptContext":
        self._selection = parse_prompt_path(path, self._service.prompt_sets)
        return self

    def combine_with_root(self) -> "PromptContext":
        self._combine_with_root = True
        return self

    def separate_with(self, separator: str = "") -> "PromptContext":
        self._separator = separator
        return self

    # -- output -----------------------------------------------------------

    def _root_set(self) -> Optional[PromptSet]:
        buckets = self._service.prompt_sets.get(ROOT_BUCKET)
        return buckets.get(ROOT_BUCKET) if buckets is not None else None

    def _bucket(self, set_name: str, subset: str) -> Optional[PromptSet]:
        buckets = self._service.prompt_sets.get(set_name)
        return buckets.get(subset) if buckets is not None else None

    def _combine(self, prompt_set: Optional[PromptSet]) -> str:
        if prompt_set is None:
            return ""
        fallback = self._root_set() if self._combine_with_root else None
        return self._service.composer.combine(prompt_set, fallback=fallback, separator=self._separator)

    def _resolve(self, selection: PromptPath) -> str:
        if isinstance(selection, SinglePrompt):
            prompt = self._service.prompts.get(selection.name)
            return prompt.text if prompt is not None else ""

        if isinstance(selection, SetRoot):
            return self._combine(self._bucket(selection.set_name, ROOT_BUCKET))

        if isinstance(selection, SetSubset):
            return self._combine(self._bucket(selection.set_name, selection.subset))

        bucket = self._bucket(selection.set_name, selection.subset)
        if bucket is not None and selection.prompt in bucket.prompts:
            return bucket.prompts[selection.prompt].text
        root = self._root_set() if self._combine_with_root else None
        if root is not None and selection.prompt in root.prompts:
            return root.prompts[selection.prompt].text
        return ""

    def as_string(self) -> str:
        """Text of the current selection; empty if nothing matches."""
        if self._selection is None:
            return ""
        return self._resolve(self._selection)

    def __str__(self) -> str:
        return self.as_string()

    # -- state ------------------------------------------------------------

    @property
    def settings(self) -> PromptLoaderSettings:
        return self._service.settings

    @property
    def service(self) -> PromptService:
        return self._service

    @property
    def prompts(self) -> PromptCollection:
        return self._service.prompts

    @property
    def prompt_sets(self) -> SetTree:
        return self._service.prompt_sets

    @property
    def selection(self) -> Optional[PromptPath]:
        return self._selection


__all__ = [
    "PromptContext",
    "PromptPath",
    "SinglePrompt",
    "SetRoot",
    "SetSubset",
    "SetSubsetPrompt",
    "parse_prompt_path",
]
