"""Unit tests for the prompt surface (launchpad.prompts)."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from conftest import ScriptedPrompter
from launchpad.config import HostingChoice
from launchpad.prompts import RichPrompter, gather_request


class TestGatherRequest:
    @pytest.mark.unit
    def test_all_values_prompted(self):
        prompter = ScriptedPrompter(text=["my-app", "out"], select=["bun", "cloudflare"])
        request = gather_request(prompter, cwd=Path("/work/site"))
        assert request.package_name == "my-app"
        assert request.destination == Path("out")
        assert request.package_manager == "bun"
        assert request.hosting is HostingChoice.CLOUDFLARE
        assert len(prompter.asked) == 4

    @pytest.mark.unit
    def test_defaults_follow_cwd(self):
        prompter = ScriptedPrompter()
        request = gather_request(prompter, cwd=Path("/work/site"))
        assert request.package_name == "site"
        assert request.destination == Path(".")
        assert request.package_manager == "pnpm"
        assert request.hosting is HostingChoice.NETLIFY

    @pytest.mark.unit
    def test_supplied_values_are_not_asked(self):
        prompter = ScriptedPrompter()
        request = gather_request(
            prompter,
            package_name="demo",
            destination="build/demo",
            package_manager="npm",
            hosting="none",
        )
        assert prompter.asked == []
        assert request.package_name == "demo"
        assert request.hosting is HostingChoice.NONE

    @pytest.mark.unit
    def test_blank_name_is_rejected(self):
        prompter = ScriptedPrompter(text=["   "])
        with pytest.raises(ValidationError):
            gather_request(prompter, destination=".", package_manager="npm", hosting="none")


class TestRichPrompter:
    @pytest.mark.unit
    def test_text_passes_default(self):
        with patch("launchpad.prompts.Prompt.ask", return_value="typed") as ask:
            assert RichPrompter().text("Name?", default="x") == "typed"
        assert ask.call_args.kwargs["default"] == "x"

    @pytest.mark.unit
    def test_select_restricts_choices(self):
        with patch("launchpad.prompts.Prompt.ask", return_value="yarn") as ask:
            assert RichPrompter().select("PM?", ["npm", "yarn"], default="npm") == "yarn"
        assert ask.call_args.kwargs["choices"] == ["npm", "yarn"]

    @pytest.mark.unit
    def test_checkbox_parses_comma_list(self):
        with patch("launchpad.prompts.Prompt.ask", return_value="gsap, three"):
            assert RichPrompter().checkbox("Extras?", ["gsap", "three"]) == ["gsap", "three"]

    @pytest.mark.unit
    def test_checkbox_blank_means_none(self):
        with patch("launchpad.prompts.Prompt.ask", return_value=""):
            assert RichPrompter().checkbox("Extras?", ["gsap"]) == []

    @pytest.mark.unit
    def test_checkbox_reasks_on_unknown(self):
        with patch("launchpad.prompts.Prompt.ask", side_effect=["gsap,lodash", "gsap"]) as ask:
            assert RichPrompter().checkbox("Extras?", ["gsap", "three"]) == ["gsap"]
        assert ask.call_count == 2

    @pytest.mark.unit
    def test_confirm(self):
        with patch("launchpad.prompts.Confirm.ask", return_value=True) as ask:
            assert RichPrompter().confirm("Sure?", default=False) is True
        assert ask.call_args.kwargs["default"] is False
