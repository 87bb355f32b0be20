"""Configuration management for the prompt loader.

Settings are read from ``PROMPT_LOADER_*`` environment variables (and an
optional ``.env`` file), or built explicitly from a dictionary or a YAML/JSON
file. A settings object is passed to every engine call; nothing here is global.
"""
import json
import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Dict, List, Mapping, Optional, Union

import yaml
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = [".txt", ".prompt", ".yml", ".jinja", ".jinja2", ".prompt.md", ".md"]

# Keys used by appsettings-style config files
_LEGACY_KEYS = {
    "PromptsFolder": "prompts_folder",
    "PromptSetFolder": "prompt_set_folder",
    "SupportedPromptExtensions": "supported_prompt_extensions",
    "PromptList": "prompt_list",
    "ConstrainPromptList": "constrain_prompt_list",
    "PromptSeparator": "prompt_separator",
    "CascadeOverride": "cascade_override",
    "PromptListType": "composition_order",
    "CompositionOrder": "composition_order",
}


class CompositionOrder(str, Enum):
    """How the composer orders the entries of a set."""
    CONFIGURED = "configured"  # prompt_list first, then remaining keys as scanned
    LEXICAL = "lexical"        # prompt_list first, then remaining keys sorted
    INSERTION = "insertion"    # scan order only, prompt_list ignored

    @classmethod
    def parse(cls, value: Union[str, "CompositionOrder", None]) -> "CompositionOrder":
        """Parse a case-insensitive order name; unknown names mean CONFIGURED."""
        if isinstance(value, cls):
            return value
        if not value:
            return cls.CONFIGURED
        normalized = str(value).strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        if normalized not in ("named", "numbered"):
            logger.warning(f"Unknown composition order '{value}', using configured order")
        return cls.CONFIGURED


def _split_list(value: Any) -> Any:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


def normalize_extension(extension: str) -> str:
    """Lowercase an extension and make sure it starts with a dot."""
    ext = extension.strip().lower()
    if ext and not ext.startswith("."):
        ext = f".{ext}"
    return ext


class PromptLoaderSettings(BaseSettings):
    """Prompt discovery and composition options."""

    prompts_folder: str = "Prompts"
    prompt_set_folder: str = "PromptSets"
    supported_prompt_extensions: Annotated[List[str], NoDecode] = list(DEFAULT_EXTENSIONS)
    prompt_list: Annotated[List[str], NoDecode] = []
    constrain_prompt_list: bool = False
    prompt_separator: Optional[str] = None
    cascade_override: bool = True
    composition_order: CompositionOrder = CompositionOrder.CONFIGURED

    model_config = SettingsConfigDict(
        env_prefix="PROMPT_LOADER_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("supported_prompt_extensions", mode="before")
    @classmethod
    def _parse_extensions(cls, value: Any) -> Any:
        value = _split_list(value)
        if value is None:
            return list(DEFAULT_EXTENSIONS)
        extensions = [normalize_extension(str(ext)) for ext in value]
        extensions = [ext for ext in extensions if ext]
        return extensions or list(DEFAULT_EXTENSIONS)

    @field_validator("prompt_list", mode="before")
    @classmethod
    def _parse_prompt_list(cls, value: Any) -> Any:
        value = _split_list(value)
        return [] if value is None else value

    @field_validator("composition_order", mode="before")
    @classmethod
    def _parse_order(cls, value: Any) -> CompositionOrder:
        return CompositionOrder.parse(value)

    def allowed_names(self) -> Optional[List[str]]:
        """Names the scanner may accept, or None when unconstrained."""
        if self.constrain_prompt_list and self.prompt_list:
            return list(self.prompt_list)
        return None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "PromptLoaderSettings":
        """Create settings from a dictionary (e.g. parsed YAML or JSON).

        Accepts snake_case field names as well as the PascalCase keys of
        appsettings-style files, optionally nested under ``PromptLoader``.
        """
        if not data:
            return cls()

        section = data.get("PromptLoader") or data.get("prompt_loader")
        if isinstance(section, Mapping):
            merged: Dict[str, Any] = {k: v for k, v in data.items() if k in _LEGACY_KEYS}
            merged.update(section)
            data = merged

        values: Dict[str, Any] = {}
        for key, value in data.items():
            field_name = _LEGACY_KEYS.get(key, key)
            if field_name in cls.model_fields:
                values[field_name] = value
        return cls(**values)


def load_settings(path: Union[str, Path]) -> PromptLoaderSettings:
    """Load settings from a YAML or JSON file.

    Args:
        path: Config file path. ``.json`` files are parsed as JSON, anything
            else as YAML.

    Returns:
        Parsed settings, or defaults if the file does not exist.
    """
    config_path = Path(path)
    if not config_path.exists():
        logger.warning(f"Config file not found: {config_path}")
        return PromptLoaderSettings()

    text = config_path.read_text(encoding="utf-8")
    try:
        if config_path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        logger.error(f"Failed to parse {config_path}: {e}")
        return PromptLoaderSettings()

    logger.debug(f"Loaded prompt loader config from {config_path}")
    return PromptLoaderSettings.from_dict(data or {})


__all__ = [
    "CompositionOrder",
    "DEFAULT_EXTENSIONS",
    "PromptLoaderSettings",
    "load_settings",
    "normalize_extension",
]
