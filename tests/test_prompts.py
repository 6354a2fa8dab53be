"""Unit tests for the interactive prompts (kickstart.prompts).

Tests cover:
- validate_project_name (empty, whitespace, collisions with files/dirs/links)
- read_project_name re-prompting and cancellation
- get_key key mapping
- select_with_arrows navigation, wrap-around and cancellation
- select_template
"""

from __future__ import annotations

import io
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import readchar
from rich.console import Console

from kickstart.errors import PromptCancelled
from kickstart.prompts import (
    EMPTY_NAME_MESSAGE,
    EXISTS_MESSAGE,
    get_key,
    read_project_name,
    select_template,
    select_with_arrows,
    validate_project_name,
)
from kickstart.scaffolder.registry import TemplateFile, TemplateDescriptor, TemplateRegistry

pytestmark = pytest.mark.unit


@pytest.fixture
def quiet_console() -> Console:
    return Console(file=io.StringIO(), force_terminal=False, width=100)


def _keys(*keys: str):
    return patch("kickstart.prompts.get_key", side_effect=list(keys))


# ---------------------------------------------------------------------------
# validate_project_name
# ---------------------------------------------------------------------------


class TestValidateProjectName:
    def test_valid(self, workspace: Path):
        assert validate_project_name("demo", workspace) is None

    @pytest.mark.parametrize("name", ["", "   ", "\t"])
    def test_empty(self, workspace: Path, name: str):
        assert validate_project_name(name, workspace) == EMPTY_NAME_MESSAGE

    def test_existing_directory(self, workspace: Path):
        (workspace / "demo").mkdir()
        assert validate_project_name("demo", workspace) == EXISTS_MESSAGE

    def test_existing_file(self, workspace: Path):
        (workspace / "demo").write_text("", encoding="utf-8")
        assert validate_project_name("demo", workspace) == EXISTS_MESSAGE

    def test_dangling_symlink_counts_as_existing(self, workspace: Path):
        (workspace / "demo").symlink_to(workspace / "nowhere")
        assert validate_project_name("demo", workspace) == EXISTS_MESSAGE

    def test_relative_to_given_cwd(self, workspace: Path, tmp_path: Path):
        (tmp_path / "elsewhere").mkdir()
        assert validate_project_name("elsewhere", workspace) is None


# ---------------------------------------------------------------------------
# read_project_name
# ---------------------------------------------------------------------------


class TestReadProjectName:
    def test_returns_first_valid_answer(self, workspace: Path, quiet_console: Console):
        ask = MagicMock(return_value="demo")
        assert read_project_name(workspace, console=quiet_console, ask=ask) == "demo"
        ask.assert_called_once()

    def test_strips_whitespace(self, workspace: Path, quiet_console: Console):
        ask = MagicMock(return_value="  demo  ")
        assert read_project_name(workspace, console=quiet_console, ask=ask) == "demo"

    def test_reprompts_until_valid(self, workspace: Path, quiet_console: Console):
        (workspace / "taken").mkdir()
        ask = MagicMock(side_effect=["", "taken", "fresh"])

        assert read_project_name(workspace, console=quiet_console, ask=ask) == "fresh"
        assert ask.call_count == 3
        output = quiet_console.file.getvalue()
        assert EMPTY_NAME_MESSAGE in output
        assert EXISTS_MESSAGE in output

    def test_none_answer_is_empty(self, workspace: Path, quiet_console: Console):
        ask = MagicMock(side_effect=[None, "demo"])
        assert read_project_name(workspace, console=quiet_console, ask=ask) == "demo"

    @pytest.mark.parametrize("exc", [EOFError, KeyboardInterrupt])
    def test_cancel(self, workspace: Path, quiet_console: Console, exc: type[BaseException]):
        ask = MagicMock(side_effect=exc)
        with pytest.raises(PromptCancelled):
            read_project_name(workspace, console=quiet_console, ask=ask)

    def test_default_prompt_uses_rich(self, workspace: Path, quiet_console: Console):
        with patch("kickstart.prompts.Prompt.ask", return_value="demo") as mock_ask:
            assert read_project_name(workspace, console=quiet_console) == "demo"
        assert "Enter the project name:" in mock_ask.call_args.args[0]


# ---------------------------------------------------------------------------
# get_key
# ---------------------------------------------------------------------------


class TestGetKey:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (readchar.key.UP, "up"),
            (readchar.key.CTRL_P, "up"),
            (readchar.key.DOWN, "down"),
            (readchar.key.CTRL_N, "down"),
            (readchar.key.ENTER, "enter"),
            (readchar.key.CR, "enter"),
            ("\x1b", "escape"),
            ("q", "q"),
        ],
    )
    def test_mapping(self, raw: str, expected: str):
        with patch("kickstart.prompts.readchar.readkey", return_value=raw):
            assert get_key() == expected

    def test_ctrl_c_interrupts(self):
        with patch("kickstart.prompts.readchar.readkey", return_value=readchar.key.CTRL_C):
            with pytest.raises(KeyboardInterrupt):
                get_key()


# ---------------------------------------------------------------------------
# select_with_arrows / select_template
# ---------------------------------------------------------------------------

OPTIONS = {"a": "Alpha", "b": "Beta", "c": "Gamma"}


class TestSelectWithArrows:
    def test_enter_selects_first(self, quiet_console: Console):
        with _keys("enter"):
            assert select_with_arrows(OPTIONS, console=quiet_console) == "a"

    def test_down_moves(self, quiet_console: Console):
        with _keys("down", "down", "enter"):
            assert select_with_arrows(OPTIONS, console=quiet_console) == "c"

    def test_up_wraps_around(self, quiet_console: Console):
        with _keys("up", "enter"):
            assert select_with_arrows(OPTIONS, console=quiet_console) == "c"

    def test_default_key(self, quiet_console: Console):
        with _keys("enter"):
            assert select_with_arrows(OPTIONS, default_key="b", console=quiet_console) == "b"

    def test_other_keys_ignored(self, quiet_console: Console):
        with _keys("x", "down", "z", "enter"):
            assert select_with_arrows(OPTIONS, console=quiet_console) == "b"

    def test_escape_cancels(self, quiet_console: Console):
        with _keys("down", "escape"):
            with pytest.raises(PromptCancelled):
                select_with_arrows(OPTIONS, console=quiet_console)

    def test_ctrl_c_cancels(self, quiet_console: Console):
        with patch("kickstart.prompts.get_key", side_effect=KeyboardInterrupt):
            with pytest.raises(PromptCancelled):
                select_with_arrows(OPTIONS, console=quiet_console)

    def test_no_options(self, quiet_console: Console):
        with pytest.raises(PromptCancelled):
            select_with_arrows({}, console=quiet_console)


class TestSelectTemplate:
    def test_returns_template_id(self, registry: TemplateRegistry, quiet_console: Console):
        with _keys("enter"):
            assert select_template(registry, console=quiet_console) == "nodejs"
        assert "Node.js - A basic Node.js project with Express" in quiet_console.file.getvalue()

    def test_offers_descriptors_in_registry_order(self, quiet_console: Console):
        files = (TemplateFile(path="index.js", source="nodejs/index.js.j2"),)
        registry = TemplateRegistry(
            [
                TemplateDescriptor(id="one", display_name="One", files=files),
                TemplateDescriptor(id="two", display_name="Two", files=files),
            ]
        )
        with patch("kickstart.prompts.select_with_arrows", return_value="two") as mock_select:
            assert select_template(registry, console=quiet_console) == "two"
        options = mock_select.call_args.args[0]
        assert list(options) == ["one", "two"]
        assert mock_select.call_args.kwargs["prompt_text"] == "Select a template:"
