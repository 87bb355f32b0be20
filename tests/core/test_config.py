"""Tests for prompt loader settings."""
import json
import logging

import pytest

from prompt_loader.core.config import (
    DEFAULT_EXTENSIONS,
    CompositionOrder,
    PromptLoaderSettings,
    load_settings,
    normalize_extension,
)


class TestDefaults:
    """Test default settings values."""

    def test_default_values(self):
        """Test that unset fields take their documented defaults."""
        settings = PromptLoaderSettings()

        assert settings.prompts_folder == "Prompts"
        assert settings.prompt_set_folder == "PromptSets"
        assert settings.supported_prompt_extensions == DEFAULT_EXTENSIONS
        assert settings.prompt_list == []
        assert settings.constrain_prompt_list is False
        assert settings.prompt_separator is None
        assert settings.cascade_override is True
        assert settings.composition_order is CompositionOrder.CONFIGURED

    def test_extensions_are_normalized(self):
        """Test extensions get a leading dot and lowercase."""
        settings = PromptLoaderSettings(supported_prompt_extensions=["TXT", ".Md", " "])
        assert settings.supported_prompt_extensions == [".txt", ".md"]

    def test_empty_extensions_fall_back_to_defaults(self):
        settings = PromptLoaderSettings(supported_prompt_extensions=[])
        assert settings.supported_prompt_extensions == DEFAULT_EXTENSIONS

    def test_normalize_extension(self):
        assert normalize_extension("Prompt.MD") == ".prompt.md"
        assert normalize_extension(".txt") == ".txt"
        assert normalize_extension("") == ""


class TestEnvironment:
    """Test environment variable overrides."""

    def test_env_overrides(self, monkeypatch):
        """Test PROMPT_LOADER_* variables populate settings."""
        monkeypatch.setenv("PROMPT_LOADER_PROMPT_LIST", "system, instructions")
        monkeypatch.setenv("PROMPT_LOADER_SUPPORTED_PROMPT_EXTENSIONS", "txt,md")
        monkeypatch.setenv("PROMPT_LOADER_CASCADE_OVERRIDE", "false")
        monkeypatch.setenv("PROMPT_LOADER_COMPOSITION_ORDER", "lexical")

        settings = PromptLoaderSettings()

        assert settings.prompt_list == ["system", "instructions"]
        assert settings.supported_prompt_extensions == [".txt", ".md"]
        assert settings.cascade_override is False
        assert settings.composition_order is CompositionOrder.LEXICAL


class TestCompositionOrder:
    """Test composition order parsing."""

    @pytest.mark.parametrize("value,expected", [
        ("configured", CompositionOrder.CONFIGURED),
        ("LEXICAL", CompositionOrder.LEXICAL),
        ("Insertion", CompositionOrder.INSERTION),
        ("Named", CompositionOrder.CONFIGURED),
        ("numbered", CompositionOrder.CONFIGURED),
        (None, CompositionOrder.CONFIGURED),
        (CompositionOrder.LEXICAL, CompositionOrder.LEXICAL),
    ])
    def test_parse(self, value, expected):
        assert CompositionOrder.parse(value) is expected

    def test_unknown_value_warns(self, caplog):
        """Test unknown names log a warning and use the configured order."""
        with caplog.at_level(logging.WARNING):
            assert CompositionOrder.parse("random") is CompositionOrder.CONFIGURED
        assert "Unknown composition order" in caplog.text


class TestAllowedNames:
    """Test prompt list constraint."""

    def test_unconstrained(self):
        settings = PromptLoaderSettings(prompt_list=["system"])
        assert settings.allowed_names() is None

    def test_constrained(self):
        settings = PromptLoaderSettings(prompt_list=["system"], constrain_prompt_list=True)
        assert settings.allowed_names() == ["system"]

    def test_constrained_with_empty_list(self):
        """Test an empty list never constrains."""
        settings = PromptLoaderSettings(constrain_prompt_list=True)
        assert settings.allowed_names() is None


class TestFromDict:
    """Test building settings from dictionaries."""

    def test_snake_case_keys(self):
        settings = PromptLoaderSettings.from_dict({
            "prompt_list": ["system"],
            "prompt_separator": "\n\n",
            "unknown_key": 1,
        })
        assert settings.prompt_list == ["system"]
        assert settings.prompt_separator == "\n\n"

    def test_pascal_case_section(self):
        """Test appsettings-style files nested under PromptLoader."""
        settings = PromptLoaderSettings.from_dict({
            "PromptLoader": {
                "PromptsFolder": "MyPrompts",
                "PromptList": ["system", "instructions"],
                "ConstrainPromptList": True,
                "CascadeOverride": False,
                "PromptListType": "Named",
            }
        })
        assert settings.prompts_folder == "MyPrompts"
        assert settings.prompt_list == ["system", "instructions"]
        assert settings.constrain_prompt_list is True
        assert settings.cascade_override is False
        assert settings.composition_order is CompositionOrder.CONFIGURED

    def test_empty(self):
        assert PromptLoaderSettings.from_dict(None) == PromptLoaderSettings()


class TestLoadSettings:
    """Test loading settings files."""

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "prompt_loader.yaml"
        path.write_text("prompt_list:\n  - system\ncomposition_order: insertion\n")

        settings = load_settings(path)

        assert settings.prompt_list == ["system"]
        assert settings.composition_order is CompositionOrder.INSERTION

    def test_json_file(self, tmp_path):
        path = tmp_path / "appsettings.json"
        path.write_text(json.dumps({"PromptLoader": {"PromptSeparator": "---"}}))

        assert load_settings(path).prompt_separator == "---"

    def test_missing_file_returns_defaults(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            settings = load_settings(tmp_path / "missing.yaml")
        assert settings == PromptLoaderSettings()
        assert "Config file not found" in caplog.text

    def test_malformed_file_returns_defaults(self, tmp_path, caplog):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with caplog.at_level(logging.ERROR):
            settings = load_settings(path)

        assert settings == PromptLoaderSettings()
        assert "Failed to parse" in caplog.text
