"""Custom exceptions for the prompt loader."""
from typing import Iterable


class PromptLoaderError(Exception):
    """Base exception for the prompt loader."""
    pass


class SetNotFoundError(PromptLoaderError, KeyError):
    """Raised when a requested prompt set is not in the supplied mapping."""

    def __init__(self, set_name: str):
        self.set_name = set_name
        super().__init__(f"Prompt set '{set_name}' not found.")

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return self.args[0]


class PromptNotFoundError(PromptLoaderError, KeyError):
    """Raised when a named prompt definition is not available."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Prompt '{name}' not found.")

    def __str__(self) -> str:
        return self.args[0]


class MissingArgumentError(PromptLoaderError):
    """Raised when required prompt arguments were never supplied.

    All absent arguments are reported together.
    """

    def __init__(self, prompt_name: str, missing: Iterable[str]):
        self.prompt_name = prompt_name
        self.missing = list(missing)
        super().__init__(
            f"Missing required arguments for prompt '{prompt_name}': "
            f"{', '.join(self.missing)}"
        )


class PromptParseError(PromptLoaderError):
    """Raised when a structured prompt file cannot be parsed."""
    pass


class InvalidPromptPathError(PromptLoaderError, ValueError):
    """Raised when a prompt path has no usable segments or too many."""
    pass
