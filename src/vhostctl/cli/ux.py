"""
Terminal output for vhostctl commands.

Output goes through a single rich console. Prompts use questionary and are
only shown when both stdin and stdout are terminals outside CI.
NO_COLOR and FORCE_COLOR are honoured.
"""

from __future__ import annotations

import os
import sys
from contextlib import contextmanager
from typing import Iterator, Mapping, Sequence

import questionary
from questionary import Style as QStyle
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.theme import Theme

from vhostctl.orchestration.results import StepStatus

THEME = Theme(
    {
        "info": "cyan",
        "success": "green",
        "warning": "yellow",
        "error": "bold red",
        "url": "bold cyan",
        "muted": "dim",
    }
)

PROMPT_STYLE = QStyle(
    [
        ("qmark", "fg:cyan bold"),
        ("question", "bold"),
        ("answer", "fg:green"),
    ]
)

CI_ENV_VARS = ("CI", "GITHUB_ACTIONS", "GITLAB_CI", "JENKINS_URL", "BUILDKITE")

STATUS_MARKS: Mapping[StepStatus, tuple[str, str]] = {
    "ok": ("✓", "success"),
    "warning": ("⚠", "warning"),
    "failed": ("✗", "error"),
    "skipped": ("-", "muted"),
}

console = Console(
    theme=THEME,
    force_terminal=True if os.environ.get("FORCE_COLOR") else None,
    no_color="NO_COLOR" in os.environ,
)


def is_interactive() -> bool:
    """Whether it is safe to prompt the user."""
    if any(os.environ.get(name) for name in CI_ENV_VARS):
        return False
    return sys.stdin.isatty() and sys.stdout.isatty()


@contextmanager
def spinner(message: str) -> Iterator[None]:
    """Transient spinner around a blocking operation."""
    progress = Progress(
        SpinnerColumn(),
        TextColumn("{task.description}"),
        console=console,
        transient=True,
    )
    with progress:
        progress.add_task(message, total=None)
        yield


def success(message: str) -> None:
    console.print(f"[success]✓ {message}[/success]")


def error(message: str) -> None:
    console.print(f"[error]✗ {message}[/error]")


def warning(message: str) -> None:
    console.print(f"[warning]⚠ {message}[/warning]")


def info(message: str) -> None:
    console.print(f"[info]ℹ {message}[/info]")


def header(title: str) -> None:
    console.print()
    console.print(Panel.fit(f"[bold]{title}[/bold]", border_style="cyan"))


def step_line(label: str, status: StepStatus) -> None:
    """One row of a provisioning or teardown summary."""
    mark, style = STATUS_MARKS[status]
    suffix = " skipped" if status == "skipped" else ""
    console.print(f"  [{style}]{mark} {label}{suffix}[/{style}]")


def site_table(columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
    table = Table(show_header=True, header_style="bold")
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*row)
    console.print(table)


def key_values(items: Mapping[str, str], title: str | None = None) -> None:
    if title:
        console.print(f"\n[bold]{title}[/bold]")
    width = max((len(key) for key in items), default=0)
    for key, value in items.items():
        console.print(f"  [info]{key + ':':<{width + 1}}[/info] {value}")


def confirm(message: str, default: bool = False) -> bool:
    """Yes/no prompt; an interrupted prompt counts as no."""
    answer = questionary.confirm(message, default=default, style=PROMPT_STYLE).ask()
    return bool(answer)
