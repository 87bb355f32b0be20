"""Shared test fixtures for prompt loader tests."""
import sys
from pathlib import Path
from typing import Dict

import pytest

# Add package root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from prompt_loader.core.config import PromptLoaderSettings


def write_files(root: Path, files: Dict[str, str]) -> Path:
    """Create files (relative posix paths -> text) under root."""
    for relative, text in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


# =============================================================================
# Prompt folders
# =============================================================================

@pytest.fixture
def prompts_folder(tmp_path):
    """Flat prompt folder with one nested override."""
    return write_files(tmp_path / "Prompts", {
        "a.txt": "A1",
        "greeting.md": "Hello",
        "sub/a.txt": "A2",
        "sub/deeper/farewell.prompt": "Bye",
        "notes.log": "ignored",
    })


@pytest.fixture
def prompt_sets_folder(tmp_path):
    """Prompt-set folder with a global Root, sets and sub-sets."""
    return write_files(tmp_path / "PromptSets", {
        "system.md": "Global system",
        "instructions.md": "Global instructions",
        "Sales/system.md": "Sales system",
        "Sales/instructions.md": "Sales instructions",
        "Sales/Enterprise/system.md": "Enterprise system",
        "Sales/Enterprise/examples.md": "Enterprise examples",
        "CustomerService/Refund/policy.txt": "Refund policy",
        "CustomerService/Policy/rules.txt": "Policy rules",
    })


@pytest.fixture
def settings():
    """Settings with the usual system -> instructions priority."""
    return PromptLoaderSettings(prompt_list=["system", "instructions"])


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep PROMPT_LOADER_* variables from leaking into settings."""
    import os
    for key in list(os.environ):
        if key.startswith("PROMPT_LOADER_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def make_files(tmp_path):
    """Factory writing a {relative path: text} dict under tmp_path."""
    def _make(files: Dict[str, str], folder: str = "files") -> Path:
        return write_files(tmp_path / folder, files)
    return _make
