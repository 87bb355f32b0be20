"""Tests for PromptService."""
import pytest

from prompt_loader.core.config import PromptLoaderSettings
from prompt_loader.core.exceptions import SetNotFoundError
from prompt_loader.prompts.service import PromptService


class TestLoading:
    """Test loading through the service."""

    def test_load_prompt_sets(self, prompt_sets_folder, settings):
        service = PromptService(settings)

        tree = service.load_prompt_sets(prompt_set_folder=prompt_sets_folder)

        assert tree is service.prompt_sets
        assert set(tree) == {"Root", "Sales", "CustomerService"}

    def test_load_prompt_sets_from_settings_folder(self, prompt_sets_folder, monkeypatch):
        """Test the configured folder is resolved against the working directory."""
        monkeypatch.chdir(prompt_sets_folder.parent)
        tree = PromptService().load_prompt_sets()
        assert "Sales" in tree

    def test_cascade_argument_overrides_settings(self, prompt_sets_folder):
        service = PromptService(PromptLoaderSettings(cascade_override=True))

        tree = service.load_prompt_sets(cascade_override=False, prompt_set_folder=prompt_sets_folder)

        assert tree["Sales"]["Enterprise"].prompts["system"].text == "Sales system"

    def test_load_prompts(self, prompts_folder):
        service = PromptService()

        prompts = service.load_prompts(prompts_folder=prompts_folder)

        assert prompts is service.prompts
        assert prompts["a"].text == "A2"

    def test_constrained_prompt_list(self, prompts_folder):
        service = PromptService(PromptLoaderSettings(prompt_list=["greeting"], constrain_prompt_list=True))
        assert list(service.load_prompts(prompts_folder=prompts_folder)) == ["greeting"]

    def test_load_single_prompt(self, prompts_folder):
        assert PromptService().load_prompt(prompts_folder / "greeting.md").text == "Hello"
        assert PromptService().load_prompt(prompts_folder / "missing.md") is None


class TestGetCombinedPrompts:
    """Test both combine call forms."""

    def test_by_name(self, prompt_sets_folder, settings):
        """Test a named sub-set combines with its set's Root bucket."""
        service = PromptService(settings)
        tree = service.load_prompt_sets(prompt_set_folder=prompt_sets_folder)

        composed = service.get_combined_prompts(tree["Sales"], "Enterprise")

        assert composed == "Enterprise system\nSales instructions\nEnterprise examples"

    def test_with_explicit_root_set(self, prompt_sets_folder, settings):
        service = PromptService(settings)
        tree = service.load_prompt_sets(prompt_set_folder=prompt_sets_folder)

        composed = service.get_combined_prompts(tree["CustomerService"]["Refund"], tree["Root"]["Root"])

        assert composed == "Global system\nGlobal instructions\nRefund policy"

    def test_set_without_fallback(self, prompt_sets_folder, settings):
        service = PromptService(settings)
        tree = service.load_prompt_sets(prompt_set_folder=prompt_sets_folder)

        assert service.get_combined_prompts(tree["CustomerService"]["Refund"]) == "Refund policy"

    def test_separator_argument(self, prompt_sets_folder, settings):
        service = PromptService(settings)
        tree = service.load_prompt_sets(prompt_set_folder=prompt_sets_folder)

        composed = service.get_combined_prompts(tree["Root"], "Root", separator="\n\n{filename}:\n")

        assert composed == "System:\nGlobal system\n\nInstructions:\nGlobal instructions"

    def test_missing_set(self, prompt_sets_folder, settings):
        service = PromptService(settings)
        tree = service.load_prompt_sets(prompt_set_folder=prompt_sets_folder)

        with pytest.raises(SetNotFoundError):
            service.get_combined_prompts(tree["Sales"], "Refund")

    def test_mapping_requires_name(self, prompt_sets_folder):
        service = PromptService()
        tree = service.load_prompt_sets(prompt_set_folder=prompt_sets_folder)

        with pytest.raises(TypeError):
            service.get_combined_prompts(tree["Sales"])


class TestAsync:
    """Test async loading variants."""

    @pytest.mark.asyncio
    async def test_load_prompt_sets_async(self, prompt_sets_folder, settings):
        service = PromptService(settings)

        tree = await service.load_prompt_sets_async(prompt_set_folder=prompt_sets_folder)

        assert tree is service.prompt_sets
        assert "Enterprise" in tree["Sales"]

    @pytest.mark.asyncio
    async def test_load_prompts_async(self, prompts_folder):
        prompts = await PromptService().load_prompts_async(prompts_folder=prompts_folder)
        assert prompts["farewell"].text == "Bye"

    @pytest.mark.asyncio
    async def test_load_prompt_async(self, prompts_folder):
        prompt = await PromptService().load_prompt_async(prompts_folder / "a.txt")
        assert prompt.text == "A1"
