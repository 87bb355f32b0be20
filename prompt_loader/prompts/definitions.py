"""Structured prompt definitions.

YAML or JSON prompt files can describe a full prompt rather than a bare block
of text::

    name: summarize-error
    description: Summarize an error log
    arguments:
      - name: log
        required: true
    messages:
      - role: system
        content: You are a concise assistant.
      - role: user
        content: "Summarize this log: {{ log }}"

This module turns resolved prompts into PromptDefinition objects and fills in
their arguments. It sits on top of the engine; scanning and composition never
depend on it.
"""
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..core.exceptions import MissingArgumentError, PromptNotFoundError, PromptParseError
from .formats import classify_format
from .models import NameMap, Prompt, PromptFormat
from .scanner import PathLike, candidate_files

logger = logging.getLogger(__name__)

DEFINITION_EXTENSIONS = [".yml", ".yaml", ".json"]

# Used when a folder holds no structured definitions
TEXT_EXTENSIONS = [".txt", ".md"]

_ARGUMENT_RE = re.compile(r"\{\{([^{}]+)\}\}")


class PromptArgument(BaseModel):
    """An argument a prompt accepts."""
    name: str
    description: Optional[str] = None
    required: bool = False


class PromptMessage(BaseModel):
    """One chat message of a prompt definition."""
    role: str = "user"
    content: str = ""


class PromptDefinition(BaseModel):
    """A named prompt with arguments, messages and model hints."""
    model_config = ConfigDict(protected_namespaces=())

    name: str = ""
    description: Optional[str] = None
    arguments: List[PromptArgument] = Field(default_factory=list)
    messages: List[PromptMessage] = Field(default_factory=list)
    model: Optional[str] = None
    model_parameters: Dict[str, Any] = Field(default_factory=dict)

    def compose(self) -> "DefinitionComposer":
        return DefinitionComposer(self)


def _normalize_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    # camelCase files use modelParameters
    if "modelParameters" in data and "model_parameters" not in data:
        data = dict(data)
        data["model_parameters"] = data.pop("modelParameters")
    return data


def _parse_structured(text: str, as_json: bool) -> Any:
    if as_json:
        return json.loads(text)
    return yaml.safe_load(text)


def parse_definition(prompt: Prompt, name: str, as_json: bool = False) -> PromptDefinition:
    """Turn a resolved prompt into a PromptDefinition.

    Structured prompts (YAML, or JSON when ``as_json``) are parsed as
    definitions; any other format becomes a single user message holding the
    prompt text.

    Raises:
        PromptParseError: If structured text is malformed or not a mapping.
    """
    if prompt.format is not PromptFormat.STRUCTURED_DATA and not as_json:
        return PromptDefinition(
            name=name,
            description=f"Prompt loaded from {name}",
            messages=[PromptMessage(role="user", content=prompt.text)],
        )

    try:
        data = _parse_structured(prompt.text, as_json)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise PromptParseError(f"Invalid structured prompt '{name}': {e}") from e

    if not isinstance(data, dict):
        raise PromptParseError(f"Structured prompt '{name}' must be a mapping")

    try:
        definition = PromptDefinition(**_normalize_keys(data))
    except ValidationError as e:
        raise PromptParseError(f"Invalid prompt definition '{name}': {e}") from e

    if not definition.name:
        definition.name = name
    return definition


def load_definitions(
    folder: PathLike,
    extensions: Iterable[str] = DEFINITION_EXTENSIONS,
) -> NameMap[PromptDefinition]:
    """Parse every structured prompt file under a folder.

    Files that fail to parse are logged and skipped. Definitions are keyed by
    their ``name`` (the file name if the file has none); later files replace
    earlier ones with the same name. A folder with no structured definitions
    falls back to its ``.txt`` and ``.md`` files, each becoming one user
    message.
    """
    root = Path(folder)
    definitions: NameMap[PromptDefinition] = NameMap()
    if not root.is_dir():
        return definitions

    for path, name, ext in candidate_files(root, extensions, recursive=True):
        try:
            text = path.read_text(encoding="utf-8")
            prompt = Prompt(text=text, format=PromptFormat.STRUCTURED_DATA)
            definition = parse_definition(prompt, name, as_json=ext == ".json")
        except (OSError, UnicodeDecodeError, PromptParseError) as e:
            logger.error(f"Error loading prompt from {path}: {e}")
            continue
        definitions[definition.name] = definition

    if not definitions:
        definitions = _load_text_definitions(root)

    logger.debug(f"Loaded {len(definitions)} prompt definitions from {root}")
    return definitions


def _load_text_definitions(root: Path) -> NameMap[PromptDefinition]:
    """Wrap each text or markdown file in a single-message definition."""
    definitions: NameMap[PromptDefinition] = NameMap()
    for path, name, ext in candidate_files(root, TEXT_EXTENSIONS, recursive=True):
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error loading prompt from {path}: {e}")
            continue
        definition = parse_definition(Prompt(text=text, format=classify_format(ext)), name)
        definition.description = f"Prompt loaded from {path.name}"
        definitions[name] = definition
    return definitions


def replace_arguments(text: str, arguments: Dict[str, str]) -> str:
    """Replace ``{{ name }}`` placeholders; unknown names are left as-is."""
    if not text or not arguments:
        return text
    lookup = {key.casefold(): value for key, value in arguments.items()}

    def _repl(match: "re.Match[str]") -> str:
        value = lookup.get(match.group(1).strip().casefold())
        return match.group(0) if value is None else value

    return _ARGUMENT_RE.sub(_repl, text)


class DefinitionComposer:
    """Fills a PromptDefinition's arguments and produces its messages.

    Example:
        messages = (
            definitions["summarize-error"].compose()
            .with_argument("log", "Error: Connection timeout")
            .compose()
        )
    """

    def __init__(self, definition: PromptDefinition):
        self._definition = definition
        self._arguments: Dict[str, str] = {}

    def with_argument(self, name: str, value: str) -> "DefinitionComposer":
        self._arguments[name] = value
        return self

    def with_arguments(self, arguments: Dict[str, str]) -> "DefinitionComposer":
        for name, value in arguments.items():
            self.with_argument(name, value)
        return self

    def missing_arguments(self) -> List[str]:
        supplied = {name.casefold() for name in self._arguments}
        return [
            arg.name for arg in self._definition.arguments
            if arg.required and arg.name.casefold() not in supplied
        ]

    def compose(self) -> List[PromptMessage]:
        """Validate arguments and return the messages with placeholders filled.

        Raises:
            MissingArgumentError: Naming every required argument not supplied.
        """
        missing = self.missing_arguments()
        if missing:
            raise MissingArgumentError(self._definition.name, missing)

        return [
            PromptMessage(role=message.role, content=replace_arguments(message.content, self._arguments))
            for message in self._definition.messages
        ]


def get_definition(definitions: NameMap[PromptDefinition], name: str) -> PromptDefinition:
    """Look up a definition by name.

    Raises:
        PromptNotFoundError: If no definition has that name.
    """
    definition = definitions.get(name)
    if definition is None:
        raise PromptNotFoundError(name)
    return definition
