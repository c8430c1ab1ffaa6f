"""
termx command line: run a widget from the shell and print the result.

    termx select "Favourite language" Go Python Rust
    termx multiselect Toppings cheese ham olives --min 1 --max 2
    termx spinner --seconds 3 --style growing
"""
from __future__ import annotations

import sys
import time
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table as RichTable

from .animation import SPINNER_STYLES
from .components import (
    ComboBox,
    Confirm,
    Input,
    Menu,
    MenuItem,
    MultiSelect,
    Password,
    ProgressBar,
    Select,
    Spinner,
    Table,
)
from .components.base import Widget
from .config import Settings
from .errors import CancellationError, NotATerminalError, TerminalReadError
from .log import setup_logging_from_settings
from .validators import chain, email, min_length, required

app = typer.Typer(
    name="termx",
    help="termx — interactive terminal widgets",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

EXIT_CANCELLED = 130
EXIT_NO_TTY = 2


def _settings() -> Settings:
    settings = Settings.from_env()
    setup_logging_from_settings(settings)
    return settings


def _run(widget: Widget):
    """Run a widget, mapping cancellation and terminal errors to exit codes."""
    try:
        return widget.run()
    except CancellationError:
        err_console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(EXIT_CANCELLED)
    except NotATerminalError as exc:
        err_console.print(f"[red]{exc}[/red]")
        raise typer.Exit(EXIT_NO_TTY)
    except TerminalReadError as exc:
        err_console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)


@app.command("select")
def select_cmd(
    label: str = typer.Argument(..., help="Prompt shown above the list"),
    options: List[str] = typer.Argument(..., help="Options to choose from"),
    default: Optional[str] = typer.Option(None, "--default", "-d", help="Initially highlighted option"),
    case_sensitive: bool = typer.Option(False, "--case-sensitive", help="Case-sensitive filtering"),
) -> None:
    """Pick one option from a filterable list."""
    settings = _settings()
    value = _run(Select(label, options, default=default, case_sensitive=case_sensitive, settings=settings))
    console.print(value)


@app.command("multiselect")
def multiselect_cmd(
    label: str = typer.Argument(..., help="Prompt shown above the list"),
    options: List[str] = typer.Argument(..., help="Options to choose from"),
    min_select: int = typer.Option(0, "--min", help="Minimum number of selections"),
    max_select: Optional[int] = typer.Option(None, "--max", help="Maximum number of selections"),
    placeholder: str = typer.Option("", "--placeholder", help="Shown while nothing is selected"),
) -> None:
    """Pick any number of options from a filterable checklist."""
    settings = _settings()
    values = _run(MultiSelect(
        label, options,
        min_select=min_select, max_select=max_select, placeholder=placeholder,
        settings=settings,
    ))
    for value in values:
        console.print(value)


@app.command("combobox")
def combobox_cmd(
    label: str = typer.Argument(..., help="Prompt shown above the field"),
    options: List[str] = typer.Argument(..., help="Suggestions"),
    strict: bool = typer.Option(False, "--strict", help="Only accept one of the suggestions"),
    placeholder: str = typer.Option("", "--placeholder"),
) -> None:
    """Type a value with suggestions."""
    settings = _settings()
    value = _run(ComboBox(label, options, allow_custom=not strict, placeholder=placeholder, settings=settings))
    console.print(value)


@app.command("input")
def input_cmd(
    label: str = typer.Argument(..., help="Prompt shown above the field"),
    placeholder: str = typer.Option("", "--placeholder"),
    password: bool = typer.Option(False, "--password", help="Mask the typed text"),
    is_required: bool = typer.Option(False, "--required", help="Reject empty input"),
    min_len: Optional[int] = typer.Option(None, "--min-length"),
    max_len: Optional[int] = typer.Option(None, "--max-length"),
    is_email: bool = typer.Option(False, "--email", help="Require an email address"),
) -> None:
    """Read a line of text."""
    settings = _settings()
    checks = []
    if is_required:
        checks.append(required())
    if min_len is not None:
        checks.append(min_length(min_len))
    if is_email:
        checks.append(email())
    widget_cls = Password if password else Input
    widget = widget_cls(
        label,
        placeholder=placeholder,
        max_length=max_len,
        validator=chain(*checks) if checks else None,
        settings=settings,
    )
    console.print(_run(widget))


@app.command("confirm")
def confirm_cmd(
    question: str = typer.Argument(..., help="Yes/no question"),
    default: bool = typer.Option(False, "--default-yes", help="Highlight Yes initially"),
) -> None:
    """Ask a yes/no question; exits 0 for yes and 1 for no."""
    settings = _settings()
    answer = _run(Confirm(question, default=default, settings=settings))
    console.print("yes" if answer else "no")
    raise typer.Exit(0 if answer else 1)


@app.command("menu")
def menu_cmd(
    title: str = typer.Argument(..., help="Menu title"),
    items: List[str] = typer.Argument(..., help="Items as 'label' or 'label=shortcut'; '-' adds a separator"),
) -> None:
    """Choose an entry from a menu."""
    settings = _settings()
    entries: list[MenuItem] = []
    for raw in items:
        if raw == "-":
            entries.append(MenuItem(separator=True))
            continue
        label, _, shortcut = raw.partition("=")
        entries.append(MenuItem(id=label, label=label, shortcut=shortcut))
    chosen = _run(Menu(title, entries, settings=settings))
    console.print(chosen.id)


@app.command("table")
def table_cmd(
    headers: str = typer.Argument(..., help="Comma-separated column headers"),
    rows: List[str] = typer.Argument(..., help="Comma-separated rows"),
    pick: bool = typer.Option(False, "--pick", help="Choose a row interactively"),
) -> None:
    """Show a table, or pick a row from it."""
    settings = _settings()
    columns = [h.strip() for h in headers.split(",")]
    try:
        table = Table(columns, [[c.strip() for c in r.split(",")] for r in rows], settings=settings)
    except ValueError as exc:
        raise typer.BadParameter(str(exc))
    if not pick:
        out = RichTable(*columns)
        for row in table.rows:
            out.add_row(*row)
        console.print(out)
        return
    index = _run(table)
    console.print(index)


@app.command("spinner")
def spinner_cmd(
    seconds: float = typer.Option(2.0, "--seconds", "-s", help="How long to spin"),
    style: str = typer.Option("dots", "--style", help=f"One of: {', '.join(SPINNER_STYLES)}"),
    label: str = typer.Option("Working...", "--label"),
) -> None:
    """Show a spinner for a while."""
    settings = _settings()
    try:
        spinner = Spinner(label, style=style, settings=settings)
    except ValueError as exc:
        raise typer.BadParameter(str(exc))
    spinner.start()
    try:
        time.sleep(seconds)
    except KeyboardInterrupt:
        spinner.stop_with_error("Interrupted")
        raise typer.Exit(EXIT_CANCELLED)
    spinner.stop_with_message("Done")


@app.command("progress")
def progress_cmd(
    steps: int = typer.Option(20, "--steps", help="Number of steps"),
    delay: float = typer.Option(0.1, "--delay", help="Seconds per step"),
    label: str = typer.Option("Progress", "--label"),
    animate: bool = typer.Option(False, "--animate", help="Draw a spinner in front of the bar"),
) -> None:
    """Fill a progress bar step by step."""
    settings = _settings()
    try:
        bar = ProgressBar(steps, label=label, settings=settings)
    except ValueError as exc:
        raise typer.BadParameter(str(exc))
    if animate:
        bar.start()
    try:
        for _ in range(steps):
            time.sleep(delay)
            bar.increment()
    except KeyboardInterrupt:
        bar.stop()
        raise typer.Exit(EXIT_CANCELLED)
    bar.finish()


def main() -> None:
    app()


if __name__ == "__main__":
    sys.exit(main())
