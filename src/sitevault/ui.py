"""UI utilities."""

import os
import select
import sys
import time
from typing import TYPE_CHECKING

import questionary
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .messages import INFO_NO_ENTRIES, INFO_PASSWORD_HIDDEN
from .models import PlaintextCredential

if TYPE_CHECKING:
    from .store import CredentialStore


console = Console()

# Clean questionary style - minimal highlighting
select_style = questionary.Style(
    [
        ("qmark", "fg:#5f87af bold"),  # Question mark
        ("question", "bold"),  # Question text
        ("instruction", "fg:#6c6c6c"),  # Instructions
        ("answer", "fg:#5f87af bold"),  # User's answer
    ]
)


def success(message: str) -> None:
    """Display success message."""
    console.print(f"[green]✓[/green] {message}")


def error(message: str) -> None:
    """Display error message."""
    console.print(f"[red]✗[/red] {message}")


def info(message: str) -> None:
    """Display info message."""
    console.print(f"[blue]i[/blue] {message}")


def warning(message: str) -> None:
    """Display warning message."""
    console.print(f"[yellow]![/yellow] {message}")


def confirm(message: str, default: bool = False) -> bool:
    """Ask for confirmation."""
    result = questionary.confirm(message, default=default, style=select_style).ask()
    return result if result is not None else False


def show_store_table(store: "CredentialStore", title: str = "Credential Store") -> None:
    """Display site, user and username for every credential."""
    rows = sorted(store.list(), key=lambda r: (r[0].lower(), r[1].lower()))
    if not rows:
        info(INFO_NO_ENTRIES)
        return

    table = Table(title=title, show_lines=False)
    table.add_column("Site", style="cyan bold", no_wrap=True)
    table.add_column("User", style="magenta")
    table.add_column("Username", style="green")

    for site, user, credential in rows:
        table.add_row(site, user, credential.username)

    console.print(table)
    console.print(
        f"[dim]Total: {len(rows)} credentials, {len(store.sites)} sites[/dim]"
    )


def show_credential_panel(
    site: str, user: str, view: PlaintextCredential, show_password: bool = False
) -> None:
    """Display credential details, masking the password unless asked."""
    content = [f"[green]Username:[/green] {view.username}"]
    if show_password:
        content.append(f"[yellow]Password:[/yellow] {view.password}")
    else:
        content.append(f"[yellow]Password:[/yellow] {'•' * 12}")

    panel = Panel(
        "\n".join(content),
        title=f"{site} / {user}",
        border_style="cyan",
        expand=False,
    )
    console.print(panel)


def _stdin_is_terminal() -> bool:
    try:
        return sys.stdin.isatty()
    except (AttributeError, ValueError):
        return False


def _wait_for_key(seconds: int) -> None:
    """Wait up to ``seconds``, returning early when a key is pressed.

    Key presses are only detected on a POSIX terminal; elsewhere this sleeps.
    """
    if os.name != "posix" or not _stdin_is_terminal():
        time.sleep(seconds)
        return

    import termios
    import tty

    fd = sys.stdin.fileno()
    saved = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd)
        ready, _, _ = select.select([fd], [], [], seconds)
        if ready:
            # Swallow the key so it does not reach the shell
            os.read(fd, 1)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


def reveal_password(password: str, seconds: int) -> None:
    """Show a password for ``seconds`` then erase it from the screen.

    Any key (or Ctrl+C) erases it early.
    """
    text = Text.assemble(("Password: ", "yellow"), (password, "bold"))
    try:
        with Live(text, console=console, transient=True, auto_refresh=False):
            _wait_for_key(seconds)
    except KeyboardInterrupt:
        pass
    info(INFO_PASSWORD_HIDDEN)
