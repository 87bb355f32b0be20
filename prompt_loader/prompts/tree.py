"""Set tree builder.

Turns a prompt-set folder into a two-level tree::

    PromptSets/
    ├── system.md                  -> tree["Root"]["Root"]
    ├── Sales/
    │   ├── instructions.md        -> tree["Sales"]["Root"]
    │   └── Enterprise/
    │       └── examples.md        -> tree["Sales"]["Enterprise"]
    └── CustomerService/
        ├── Refund/                -> tree["CustomerService"]["Refund"]
        └── Policy/                -> tree["CustomerService"]["Policy"]

Each sub-set inherits the prompts of its set's Root bucket. Folders deeper
than set/sub-set are not descended into.
"""
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from ..core.config import DEFAULT_EXTENSIONS
from .models import ROOT_BUCKET, NameMap, PromptCollection, PromptSet, SetTree
from .scanner import PathLike, scan_directory

logger = logging.getLogger(__name__)


def _subdirectories(folder: Path) -> List[Path]:
    """Immediate subdirectories in name order, without the reserved bucket name."""
    directories = []
    for path in sorted(folder.iterdir(), key=lambda p: p.name.lower()):
        if not path.is_dir():
            continue
        if path.name.casefold() == ROOT_BUCKET.casefold():
            logger.warning(
                f"Skipping folder {path}: '{ROOT_BUCKET}' is reserved for files "
                f"placed directly in a folder"
            )
            continue
        directories.append(path)
    return directories


def inherit_prompts(
    parent: PromptCollection,
    child: PromptCollection,
    cascade_override: bool = True,
) -> PromptCollection:
    """Return a copy of ``child`` with the parent's prompts cascaded into it.

    Parent prompts always fill gaps. For names present in both, the child's
    own prompt wins when ``cascade_override`` is true and the parent's prompt
    wins when it is false.
    """
    merged = child.copy()
    for name, prompt in parent.items():
        if name not in merged or not cascade_override:
            merged[name] = prompt
    return merged


def build_set_tree(
    root_folder: PathLike,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    cascade_override: bool = True,
    allowed_names: Optional[Iterable[str]] = None,
) -> SetTree:
    """Build the set tree for a prompt-set folder.

    Args:
        root_folder: Folder holding the prompt sets. Missing folders give an
            empty tree.
        extensions: Recognized extensions (case-insensitive).
        cascade_override: Whether a sub-set's own prompts override same-named
            prompts of its parent set.
        allowed_names: If non-empty, only these prompt names are loaded.

    Returns:
        Mapping of set name -> bucket name -> PromptSet.
    """
    root = Path(root_folder)
    tree: SetTree = NameMap()
    if not root.is_dir():
        logger.debug(f"Prompt set folder not found: {root}")
        return tree

    extensions = list(extensions)
    allowed_names = list(allowed_names) if allowed_names else None

    root_prompts = scan_directory(root, extensions, allowed_names)
    if root_prompts:
        tree[ROOT_BUCKET] = NameMap({ROOT_BUCKET: PromptSet(ROOT_BUCKET, root_prompts)})

    for set_dir in _subdirectories(root):
        buckets: NameMap[PromptSet] = NameMap()

        # Only files directly in the set folder form its Root bucket
        set_prompts = scan_directory(set_dir, extensions, allowed_names)
        if set_prompts:
            buckets[ROOT_BUCKET] = PromptSet(ROOT_BUCKET, set_prompts)

        for sub_dir in _subdirectories(set_dir):
            own = scan_directory(sub_dir, extensions, allowed_names)
            prompts = inherit_prompts(set_prompts, own, cascade_override)
            buckets[sub_dir.name] = PromptSet(sub_dir.name, prompts)

        tree[set_dir.name] = buckets
        logger.debug(
            f"Loaded prompt set '{set_dir.name}' with buckets: {', '.join(buckets) or '(none)'}"
        )

    return tree
