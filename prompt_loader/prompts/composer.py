"""Prompt Composer.

Joins the prompts of a set into one string. The order comes from the
configured prompt list (a priority, not a filter), the separator from the
call, the settings, or a newline.

Separator templates containing ``{filename}`` become per-entry headers::

    composer = PromptComposer(PromptLoaderSettings(prompt_list=["system", "instructions"]))
    composer.combine(sales, fallback=root, separator="\\n\\n{filename}:\\n")
    # "System:\\n<system text>\\n\\nInstructions:\\n<instructions text>"
"""
import logging
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from ..core.config import CompositionOrder, PromptLoaderSettings
from ..core.exceptions import SetNotFoundError
from .models import ROOT_BUCKET, Prompt, PromptSet

logger = logging.getLogger(__name__)

HEADER_TOKEN = "{filename}"
DEFAULT_SEPARATOR = "\n"


def header_name(key: str) -> str:
    """Readable header for a prompt key: first dotted segment, capitalized."""
    first = key.split(".")[0]
    if not first:
        return first
    return first[0].upper() + first[1:].lower()


def resolve_order(
    prompt_set: PromptSet,
    fallback: Optional[PromptSet] = None,
    ordered_keys: Optional[Sequence[str]] = None,
    order: CompositionOrder = CompositionOrder.CONFIGURED,
) -> List[str]:
    """Keys to compose, in output order.

    Configured keys come first (those found in the set or the fallback), then
    the set's remaining keys, in scan order or sorted for LEXICAL. INSERTION
    ignores the configured keys.
    """
    keys: List[str] = []
    seen = set()

    if ordered_keys and order is not CompositionOrder.INSERTION:
        for key in ordered_keys:
            folded = key.casefold()
            if folded in seen:
                continue
            if key in prompt_set.prompts or (fallback is not None and key in fallback.prompts):
                keys.append(key)
                seen.add(folded)

    remaining = [key for key in prompt_set.prompts if key.casefold() not in seen]
    if order is CompositionOrder.LEXICAL:
        remaining.sort(key=str.casefold)
    keys.extend(remaining)
    return keys


def _resolve_entries(
    keys: Iterable[str],
    prompt_set: PromptSet,
    fallback: Optional[PromptSet],
) -> List[Tuple[str, Prompt]]:
    entries = []
    for key in keys:
        prompt = prompt_set.prompts.get(key)
        if prompt is None and fallback is not None:
            prompt = fallback.prompts.get(key)
        if prompt is None:
            continue
        entries.append((key, prompt))
    return entries


def join_entries(entries: Sequence[Tuple[str, Prompt]], separator: str) -> str:
    """Join resolved (key, prompt) pairs with a separator or header template."""
    if HEADER_TOKEN not in separator:
        return separator.join(prompt.text for _, prompt in entries).rstrip()

    parts = []
    for index, (key, prompt) in enumerate(entries):
        header = separator.replace(HEADER_TOKEN, header_name(key))
        needs_newline = not header.endswith("\n")
        if index == 0:
            header = header.lstrip()
        parts.append(header)
        if needs_newline:
            parts.append("\n")
        parts.append(prompt.text)
    return "".join(parts).rstrip()


def combine_prompts(
    prompt_set: PromptSet,
    fallback: Optional[PromptSet] = None,
    ordered_keys: Optional[Sequence[str]] = None,
    separator: Optional[str] = None,
    order: CompositionOrder = CompositionOrder.CONFIGURED,
) -> str:
    """Combine a set's prompts into one string.

    Args:
        prompt_set: Set whose prompts are composed.
        fallback: Set consulted for keys the set does not define.
        ordered_keys: Priority order of prompt names.
        separator: Joiner or header template; newline if None.
        order: Ordering mode for keys beyond ``ordered_keys``.

    Returns:
        The composed text with trailing whitespace removed.
    """
    keys = resolve_order(prompt_set, fallback, ordered_keys, order)
    entries = _resolve_entries(keys, prompt_set, fallback)
    return join_entries(entries, DEFAULT_SEPARATOR if separator is None else separator)


class PromptComposer:
    """Combines prompt sets using the ordering and separator from settings.

    Example:
        composer = PromptComposer(settings)
        text = composer.combine_named(tree["Sales"], "Root")
    """

    def __init__(self, settings: Optional[PromptLoaderSettings] = None):
        """Initialize the composer.

        Args:
            settings: Loader settings supplying prompt_list, prompt_separator
                and composition_order. Defaults to a fresh settings object.
        """
        self._settings = settings or PromptLoaderSettings()

    @property
    def settings(self) -> PromptLoaderSettings:
        return self._settings

    def _separator(self, separator: Optional[str]) -> str:
        if separator is not None:
            return separator
        if self._settings.prompt_separator is not None:
            return self._settings.prompt_separator
        return DEFAULT_SEPARATOR

    def combine(
        self,
        prompt_set: PromptSet,
        fallback: Optional[PromptSet] = None,
        ordered_keys: Optional[Sequence[str]] = None,
        separator: Optional[str] = None,
    ) -> str:
        """Combine a set, optionally backed by a fallback set.

        ``ordered_keys`` defaults to the configured prompt list and
        ``separator`` to the configured separator, then a newline.
        """
        if ordered_keys is None:
            ordered_keys = self._settings.prompt_list
        composed = combine_prompts(
            prompt_set,
            fallback=fallback,
            ordered_keys=ordered_keys,
            separator=self._separator(separator),
            order=self._settings.composition_order,
        )
        logger.debug(
            f"Composed prompt set '{prompt_set.name}' "
            f"(fallback={fallback.name if fallback else None}), length={len(composed)}"
        )
        return composed

    def combine_named(
        self,
        prompt_sets: Mapping[str, PromptSet],
        set_name: str,
        separator: Optional[str] = None,
    ) -> str:
        """Combine a set picked by name, using the mapping's Root set as fallback.

        Raises:
            SetNotFoundError: If ``set_name`` is not in ``prompt_sets``.
        """
        prompt_set = prompt_sets.get(set_name)
        if prompt_set is None:
            logger.error(f"Prompt set not found: {set_name}")
            raise SetNotFoundError(set_name)
        fallback = prompt_sets.get(ROOT_BUCKET)
        return self.combine(prompt_set, fallback=fallback, separator=separator)


def create_prompt_composer(settings: Optional[PromptLoaderSettings] = None) -> PromptComposer:
    """Create a PromptComposer instance."""
    return PromptComposer(settings=settings)
