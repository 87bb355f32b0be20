"""Extension handling: format classification and prompt name derivation."""
from typing import Iterable, Optional, Tuple

from ..core.config import normalize_extension
from .models import PromptFormat

_FORMATS = {
    ".jinja": PromptFormat.TEMPLATE,
    ".jinja2": PromptFormat.TEMPLATE,
    ".yml": PromptFormat.STRUCTURED_DATA,
    ".yaml": PromptFormat.STRUCTURED_DATA,
    ".md": PromptFormat.MARKDOWN,
    ".prompt.md": PromptFormat.MARKDOWN,
    ".txt": PromptFormat.PLAIN,
    ".prompt": PromptFormat.PLAIN,
}


def classify_format(extension: str) -> PromptFormat:
    """Map a file extension to its format; unknown extensions give UNKNOWN."""
    return _FORMATS.get(normalize_extension(extension or ""), PromptFormat.UNKNOWN)


def split_prompt_name(filename: str, extensions: Iterable[str]) -> Optional[Tuple[str, str]]:
    """Split a filename into (prompt name, recognized extension).

    The longest matching extension wins, so ``system.prompt.md`` yields
    ``("system", ".prompt.md")`` when ``.prompt.md`` is recognized.

    Returns:
        None if no recognized extension matches or the name would be empty.
    """
    lowered = filename.lower()
    best = ""
    for ext in extensions:
        ext = normalize_extension(ext)
        if ext and lowered.endswith(ext) and len(ext) > len(best):
            best = ext
    if not best:
        return None
    name = filename[: -len(best)]
    if not name:
        return None
    return name, best
