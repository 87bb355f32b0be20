"""Value types for loaded prompts and prompt sets."""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Generic, Iterator, List, MutableMapping, Optional, Tuple, TypeVar

import yaml

ROOT_BUCKET = "Root"

# {name} or {{name}}
_VARIABLE_RE = re.compile(r"\{\{\s*(\w+)\s*\}\}|(?<!\{)\{(\w+)\}(?!\})")

V = TypeVar("V")


class PromptFormat(str, Enum):
    """Content format derived from a prompt file's extension."""
    PLAIN = "plain"
    MARKDOWN = "markdown"
    TEMPLATE = "template"
    STRUCTURED_DATA = "structured_data"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Prompt:
    """A single prompt: raw file text plus its format."""

    text: str
    format: PromptFormat = PromptFormat.PLAIN

    def has_variables(self) -> bool:
        """True if the text contains ``{name}`` or ``{{name}}`` placeholders."""
        return _VARIABLE_RE.search(self.text) is not None

    def variables(self) -> List[str]:
        """Placeholder names in order of first appearance."""
        seen: List[str] = []
        for match in _VARIABLE_RE.finditer(self.text):
            name = match.group(1) or match.group(2)
            if name not in seen:
                seen.append(name)
        return seen

    def to_yaml(self) -> str:
        return yaml.safe_dump(
            {"text": self.text, "format": self.format.value},
            sort_keys=False,
            allow_unicode=True,
        )


class NameMap(MutableMapping[str, V], Generic[V]):
    """Mapping with case-insensitive string keys.

    Iteration yields keys in insertion order, spelled as first inserted.
    Re-assigning an existing key keeps its position and original spelling.
    """

    def __init__(self, items: Optional[Dict[str, V]] = None):
        self._store: Dict[str, Tuple[str, V]] = {}
        if items:
            self.update(items)

    def __getitem__(self, key: str) -> V:
        return self._store[key.casefold()][1]

    def __setitem__(self, key: str, value: V) -> None:
        folded = key.casefold()
        existing = self._store.get(folded)
        self._store[folded] = (existing[0] if existing else key, value)

    def __delitem__(self, key: str) -> None:
        del self._store[key.casefold()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.casefold() in self._store

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._store.values())

    def __len__(self) -> int:
        return len(self._store)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, NameMap):
            return {k: v for k, (_, v) in self._store.items()} == {
                k: v for k, (_, v) in other._store.items()
            }
        if isinstance(other, dict):
            return self == NameMap(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"NameMap({dict(self.items())!r})"

    def copy(self) -> "NameMap[V]":
        clone: NameMap[V] = NameMap()
        clone._store = dict(self._store)
        return clone


PromptCollection = NameMap[Prompt]


@dataclass
class PromptSet:
    """The resolved prompts of one directory level."""

    name: str
    prompts: PromptCollection = field(default_factory=NameMap)

    def __len__(self) -> int:
        return len(self.prompts)


# top-level folder -> bucket -> set
SetTree = NameMap[NameMap[PromptSet]]
