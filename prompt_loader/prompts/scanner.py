"""Directory scanner and single-file loader.

The scanner is the only part of the engine that touches the filesystem for
flat prompt folders. Missing folders and files are not errors: they produce
empty results so optional prompt locations need no exception handling.
"""
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple, Union

from ..core.config import DEFAULT_EXTENSIONS
from .formats import classify_format, split_prompt_name
from .models import NameMap, Prompt, PromptCollection

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _allowed_set(allowed_names: Optional[Iterable[str]]) -> Optional[Set[str]]:
    if not allowed_names:
        return None
    names = {name.casefold() for name in allowed_names}
    return names or None


def _read_prompt(path: Path, extension: str) -> Optional[Prompt]:
    """Read a prompt file, logging and returning None if it cannot be read."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Skipping unreadable prompt file {path}: {e}")
        return None
    return Prompt(text=text, format=classify_format(extension))


def candidate_files(
    folder: Path,
    extensions: Iterable[str],
    recursive: bool,
) -> List[Tuple[Path, str, str]]:
    """Collect (path, name, extension) for recognized files, shallowest first."""
    extensions = list(extensions)
    pattern = folder.rglob("*") if recursive else folder.glob("*")

    candidates = []
    for path in pattern:
        if not path.is_file():
            continue
        split = split_prompt_name(path.name, extensions)
        if split is None:
            continue
        name, ext = split
        candidates.append((path, name, ext))

    def _order(item: Tuple[Path, str, str]):
        relative = item[0].relative_to(folder)
        return len(relative.parts), relative.as_posix().lower()

    candidates.sort(key=_order)
    return candidates


def scan_prompts(
    folder: PathLike,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    cascade_override: bool = True,
    allowed_names: Optional[Iterable[str]] = None,
) -> PromptCollection:
    """Recursively load every recognized prompt file under a folder.

    Files are processed shallowest first. When two files share a name, the
    deeper one replaces the shallower one if ``cascade_override`` is true;
    otherwise the first (shallowest) one is kept.

    Args:
        folder: Folder to scan. A missing folder gives an empty collection.
        extensions: Recognized extensions (case-insensitive).
        cascade_override: Whether deeper files override shallower ones.
        allowed_names: If non-empty, only these prompt names are loaded.

    Returns:
        Prompts keyed case-insensitively by file name without extension.
    """
    root = Path(folder)
    prompts: PromptCollection = NameMap()
    if not root.is_dir():
        logger.debug(f"Prompt folder not found, nothing to scan: {root}")
        return prompts

    allowed = _allowed_set(allowed_names)
    for path, name, ext in candidate_files(root, extensions, recursive=True):
        if allowed is not None and name.casefold() not in allowed:
            continue
        if name in prompts and not cascade_override:
            continue
        prompt = _read_prompt(path, ext)
        if prompt is None:
            continue
        prompts[name] = prompt

    logger.debug(f"Scanned {len(prompts)} prompts from {root}")
    return prompts


def scan_directory(
    folder: PathLike,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    allowed_names: Optional[Iterable[str]] = None,
) -> PromptCollection:
    """Load the recognized prompt files directly inside a folder (no recursion)."""
    root = Path(folder)
    prompts: PromptCollection = NameMap()
    if not root.is_dir():
        return prompts

    allowed = _allowed_set(allowed_names)
    for path, name, ext in candidate_files(root, extensions, recursive=False):
        if allowed is not None and name.casefold() not in allowed:
            continue
        prompt = _read_prompt(path, ext)
        if prompt is not None:
            prompts[name] = prompt
    return prompts


def load_prompt(
    file_path: PathLike,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
) -> Optional[Prompt]:
    """Load a single prompt file.

    Returns:
        The prompt, or None if the file is missing or its extension is not
        recognized.
    """
    path = Path(file_path)
    if not path.is_file():
        return None
    split = split_prompt_name(path.name, extensions)
    if split is None:
        logger.debug(f"Unsupported prompt extension: {path}")
        return None
    return _read_prompt(path, split[1])


def prompt_name(file_path: PathLike, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> str:
    """Prompt name a file would be registered under."""
    path = Path(file_path)
    split = split_prompt_name(path.name, extensions)
    return split[0] if split else path.stem


def resolve_prompt_folder(folder: PathLike) -> Path:
    """Resolve a relative prompt folder against the working directory or its parents.

    Returns the first existing ``<dir>/<folder>`` walking up to five parent
    levels, else the folder relative to the working directory.
    """
    relative = Path(folder)
    if relative.is_absolute():
        return relative
    directory = Path.cwd()
    for _ in range(6):
        candidate = directory / relative
        if candidate.is_dir():
            return candidate.resolve()
        directory = directory.parent
    return (Path.cwd() / relative).resolve()
