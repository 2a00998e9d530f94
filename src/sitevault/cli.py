"""CLI using Typer."""

import os
import sys
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from . import __version__, auth, messages, ui
from .cli_helpers import (
    check_password_limits,
    cli_errors,
    create_master_key,
    key_file_exists,
    session_scope,
    unlock,
)
from .config import config
from .importer import import_file
from .log import configure_logging
from .rotation import rotate
from .storage import commit_rotation, load_fingerprint, load_store, save_store
from .store import CredentialExistsError, CredentialNotFoundError

app = typer.Typer(
    name="sitevault",
    help="Local credential vault encrypted under a master password",
    add_completion=False,
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    rich_markup_mode="rich",
)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"sitevault {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    store: Annotated[
        Optional[str],
        typer.Option(
            "--store",
            "-s",
            help="Path to store file (default: ~/.sitevault/store.json)",
        ),
    ] = None,
    key_file: Annotated[
        Optional[str],
        typer.Option(
            "--key-file",
            "-k",
            help="Path to master key fingerprint (default: ~/.sitevault/master.key)",
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-d", help="Enable debug logging")
    ] = False,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
):
    """Apply global options."""
    if store:
        config.store_path = os.path.expanduser(store)
    if key_file:
        config.key_path = os.path.expanduser(key_file)
    configure_logging("DEBUG" if verbose else config.log_level)


@app.command("init", help="Set the master password", rich_help_panel="Master Key")
def init_store():
    """Create the master password and write its fingerprint."""
    if key_file_exists():
        ui.error(messages.ERROR_ALREADY_INITIALIZED.format(path=config.key_path))
        raise typer.Exit(1)
    with cli_errors():
        create_master_key().wipe()


@app.command("add", help="Add credentials", rich_help_panel="Credentials")
def add_credential(
    site: Annotated[str, typer.Argument(help="Site identifier")],
    user: Annotated[str, typer.Argument(help="User identifier")],
    username: Annotated[str, typer.Argument(help="Login name for the site")],
):
    """Add credentials, prompting for the password twice."""
    with session_scope(save=True) as session:
        if (site, user) in session.store:
            raise CredentialExistsError(site, user)
        password = auth.prompt_credential_password(confirm=True)
        session.store.add(site, user, username, password, session.key)
    ui.success(messages.SUCCESS_ADDED.format(site=site, user=user))


@app.command("get", help="Show credentials", rich_help_panel="Credentials")
def get_credential(
    site: Annotated[str, typer.Argument(help="Site identifier")],
    user: Annotated[str, typer.Argument(help="User identifier")],
    show_password: Annotated[
        bool, typer.Option("--show", "-p", help="Print the password in the output")
    ] = False,
    seconds: Annotated[
        int,
        typer.Option(
            "--seconds",
            "-t",
            min=0,
            help="Seconds to display the password (any key hides it)",
        ),
    ] = config.REVEAL_SECONDS,
):
    """Show the username and reveal the password briefly."""
    with session_scope() as session:
        view = session.store.get(site, user, session.key)

    ui.show_credential_panel(site, user, view, show_password=show_password)
    if not show_password:
        ui.reveal_password(view.password, seconds)


@app.command("update", help="Replace credentials", rich_help_panel="Credentials")
def update_credential(
    site: Annotated[str, typer.Argument(help="Site identifier")],
    user: Annotated[str, typer.Argument(help="User identifier")],
    username: Annotated[str, typer.Argument(help="Login name for the site")],
):
    """Replace username and password for existing credentials."""
    with session_scope(save=True) as session:
        if (site, user) not in session.store:
            raise CredentialNotFoundError(site, user)
        password = auth.prompt_credential_password(confirm=True)
        session.store.update(site, user, username, password, session.key)
    ui.success(messages.SUCCESS_UPDATED.format(site=site, user=user))


@app.command("delete", help="Delete credentials", rich_help_panel="Credentials")
def delete_credential(
    site: Annotated[str, typer.Argument(help="Site identifier")],
    user: Annotated[str, typer.Argument(help="User identifier")],
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Skip confirmation prompt")
    ] = False,
):
    """Delete credentials with confirmation."""
    with session_scope(save=True) as session:
        if (site, user) in session.store and not force:
            if not ui.confirm(f"Delete {site} / {user}?", default=False):
                ui.info(messages.INFO_CANCELLED)
                return
        session.store.delete(site, user)
    ui.success(messages.SUCCESS_DELETED.format(site=site, user=user))


@app.command("list", help="List stored credentials", rich_help_panel="Credentials")
def list_credentials():
    """List site, user and username without decrypting passwords."""
    with session_scope() as session:
        ui.show_store_table(session.store)


@app.command(
    "import", help="Import a plaintext credential feed", rich_help_panel="Store"
)
def import_credentials(
    input_file: Annotated[
        str, typer.Argument(help="File with lines: site user username password")
    ],
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Replace a non-empty store")
    ] = False,
):
    """Build the store from a feed file, replacing the current store."""
    input_path = Path(input_file).expanduser()
    if not input_path.exists():
        ui.error(messages.ERROR_FILE_NOT_FOUND.format(path=input_file))
        raise typer.Exit(1)

    with session_scope() as session:
        if len(session.store) and not force:
            ui.error(
                messages.ERROR_STORE_NOT_EMPTY.format(
                    path=config.store_path, count=len(session.store)
                )
            )
            raise typer.Exit(1)
        imported = import_file(str(input_path), session.key)
        save_store(config.store_path, imported)

    ui.success(
        messages.SUCCESS_IMPORTED.format(count=len(imported), sites=len(imported.sites))
    )


@app.command("rotate", help="Change the master password", rich_help_panel="Master Key")
def rotate_master_password():
    """Re-encrypt every credential under a new master password."""
    with cli_errors():
        store = load_store(config.store_path)
        stored_fingerprint = load_fingerprint(config.key_path)
        if stored_fingerprint is None:
            ui.error(messages.ERROR_NOT_INITIALIZED)
            raise typer.Exit(1)

        with unlock(stored_fingerprint) as old_key:
            new_password = auth.prompt_new_master_password()
            problem = check_password_limits(new_password)
            if problem:
                ui.error(problem)
                raise typer.Exit(1)
            rotated, new_fingerprint = rotate(store, old_key, new_password)

        config.ensure_store_dir()
        commit_rotation(config.store_path, config.key_path, rotated, new_fingerprint)

    ui.success(messages.SUCCESS_ROTATED.format(count=len(rotated)))


def main() -> None:
    """Main entry point."""
    try:
        app()
    except KeyboardInterrupt:
        ui.error(messages.ERROR_OPERATION_CANCELLED)
        sys.exit(1)


if __name__ == "__main__":
    main()
