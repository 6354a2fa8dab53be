"""Interactive prompts: template selection and project name entry.

Selection uses arrow keys (read with ``readchar``) over a Rich ``Live``
panel.  The project name prompt loops until the name is valid or the user
cancels.  Nothing here touches the filesystem beyond existence checks.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from kickstart.errors import PromptCancelled
from kickstart.scaffolder.registry import TemplateRegistry
from kickstart.utils import console as default_console

TEMPLATE_PROMPT = "Select a template:"
NAME_PROMPT = "Enter the project name:"
EMPTY_NAME_MESSAGE = "Project name cannot be empty!"
EXISTS_MESSAGE = "Folder already exists!"


# ---------------------------------------------------------------------------
# Key handling
# ---------------------------------------------------------------------------


def get_key() -> str:
    """Get a single keypress in a cross-platform way using readchar."""
    key = readchar.readkey()

    if key == readchar.key.UP or key == readchar.key.CTRL_P:
        return "up"
    if key == readchar.key.DOWN or key == readchar.key.CTRL_N:
        return "down"

    if key in (readchar.key.ENTER, readchar.key.CR, readchar.key.LF):
        return "enter"

    if key == readchar.key.ESC or key == "\x1b":
        return "escape"

    if key == readchar.key.CTRL_C:
        raise KeyboardInterrupt

    return key


def select_with_arrows(
    options: dict[str, str],
    prompt_text: str = "Select an option",
    default_key: str | None = None,
    console: Console | None = None,
) -> str:
    """Single-choice selection using arrow keys with a Rich Live display.

    Args:
        options: Mapping of returned key -> label shown to the user.
        prompt_text: Panel title.
        default_key: Key highlighted initially (first option otherwise).

    Returns:
        The selected key.

    Raises:
        PromptCancelled: On Esc, Ctrl-C or when there is nothing to select.
    """
    console = console or default_console
    option_keys = list(options.keys())
    if not option_keys:
        raise PromptCancelled("Nothing to select")

    if default_key and default_key in option_keys:
        selected_index = option_keys.index(default_key)
    else:
        selected_index = 0

    def create_selection_panel() -> Panel:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="cyan", justify="left", width=3)
        table.add_column(style="white", justify="left")

        for i, key in enumerate(option_keys):
            pointer = "▶" if i == selected_index else " "
            table.add_row(pointer, f"[cyan]{options[key]}[/cyan]")

        table.add_row("", "")
        table.add_row("", "[dim]Use ↑/↓ to navigate, Enter to select, Esc to cancel[/dim]")

        return Panel(
            table,
            title=f"[bold]{prompt_text}[/bold]",
            border_style="cyan",
            padding=(1, 2),
        )

    console.print()
    with Live(
        create_selection_panel(), console=console, transient=True, auto_refresh=False
    ) as live:
        while True:
            try:
                key = get_key()
            except KeyboardInterrupt:
                console.print("[yellow]Selection cancelled[/yellow]")
                raise PromptCancelled() from None

            if key == "up":
                selected_index = (selected_index - 1) % len(option_keys)
            elif key == "down":
                selected_index = (selected_index + 1) % len(option_keys)
            elif key == "enter":
                break
            elif key == "escape":
                console.print("[yellow]Selection cancelled[/yellow]")
                raise PromptCancelled()

            live.update(create_selection_panel(), refresh=True)

    selected_key = option_keys[selected_index]
    console.print(f"[bold]{prompt_text}[/bold] [cyan]{options[selected_key]}[/cyan]")
    return selected_key


# ---------------------------------------------------------------------------
# Prompt flow
# ---------------------------------------------------------------------------


def select_template(registry: TemplateRegistry, console: Console | None = None) -> str:
    """Ask the user to pick a template; returns its id."""
    options = {d.id: d.choice_label for d in registry.descriptors()}
    return select_with_arrows(options, prompt_text=TEMPLATE_PROMPT, console=console)


def validate_project_name(name: str, cwd: str | Path) -> str | None:
    """Return ``None`` if *name* is usable under *cwd*, else the reason."""
    if not name or not name.strip():
        return EMPTY_NAME_MESSAGE
    if os.path.lexists(Path(cwd) / name):
        return EXISTS_MESSAGE
    return None


def read_project_name(
    cwd: str | Path,
    console: Console | None = None,
    ask: Callable[[str], str] | None = None,
) -> str:
    """Prompt for a project name until it passes :func:`validate_project_name`.

    Args:
        cwd: Directory the project will be created in.
        ask: Callable that shows a prompt and returns one line of input;
            defaults to ``rich.prompt.Prompt.ask``.

    Raises:
        PromptCancelled: On end-of-input or Ctrl-C.
    """
    console = console or default_console
    if ask is None:
        def ask(message: str) -> str:
            return Prompt.ask(message, console=console, default="", show_default=False)

    while True:
        try:
            raw = ask(f"[bold]{NAME_PROMPT}[/bold]")
        except (EOFError, KeyboardInterrupt):
            console.print()
            raise PromptCancelled("Cancelled") from None

        name = (raw or "").strip()
        problem = validate_project_name(name, cwd)
        if problem is None:
            return name
        console.print(f"[red]>> {problem}[/red]")
