"""CLI helpers: unlocking the store and mapping errors to exit codes."""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import typer

from . import auth, messages, ui
from .config import Config, config
from .crypto import (
    AuthError,
    CryptoError,
    InvalidMasterPasswordError,
    MasterKey,
    derive_key,
    fingerprint,
    verify_password,
)
from .importer import FeedImportError
from .rotation import RotationError
from .storage import (
    StorageError,
    load_fingerprint,
    load_store,
    save_fingerprint,
    save_store,
)
from .store import CredentialStore, StoreError

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """An unlocked store and its master key for one command."""

    store: CredentialStore
    key: MasterKey

    def save(self) -> None:
        """Write the store back to disk."""
        save_store(config.store_path, self.store)

    def close(self) -> None:
        """Wipe the master key."""
        self.key.wipe()


@contextmanager
def cli_errors() -> Iterator[None]:
    """Report core errors on the console and exit with status 1."""
    try:
        yield
    except (
        StoreError,
        CryptoError,
        AuthError,
        FeedImportError,
        RotationError,
        StorageError,
    ) as e:
        ui.error(str(e))
        raise typer.Exit(1)
    except auth.PasswordMismatchError as e:
        ui.error(str(e))
        raise typer.Exit(1)
    except (KeyboardInterrupt, EOFError):
        ui.error(messages.ERROR_OPERATION_CANCELLED)
        raise typer.Exit(1)


def check_password_limits(password: str) -> Optional[str]:
    """Return an error message if the password breaks the size limits."""
    if not password:
        return messages.ERROR_EMPTY_PASSWORD
    if len(password) > Config.MAX_PASSWORD_LENGTH:
        return messages.ERROR_PASSWORD_TOO_LONG.format(limit=Config.MAX_PASSWORD_LENGTH)
    if len(password.encode("utf-8")) > Config.MAX_PASSWORD_BYTES:
        return messages.ERROR_PASSWORD_TOO_LARGE.format(limit=Config.MAX_PASSWORD_BYTES)
    return None


def create_master_key() -> MasterKey:
    """Prompt for a new master password and persist its fingerprint."""
    ui.info(messages.INFO_CREATING.format(path=config.store_path))
    master_password = auth.prompt_create_master_password()
    problem = check_password_limits(master_password)
    if problem:
        ui.error(problem)
        raise typer.Exit(1)

    key = derive_key(master_password)
    config.ensure_store_dir()
    save_fingerprint(config.key_path, fingerprint(key))
    ui.success(messages.SUCCESS_CREATED)
    return key


def unlock(stored_fingerprint: bytes) -> MasterKey:
    """Verify the master password, retrying interactively.

    A password taken from the environment gets a single attempt.
    """
    max_attempts = 1 if auth.master_password_from_env() else Config.MAX_PASSWORD_ATTEMPTS
    attempts = 0

    while attempts < max_attempts:
        master_password = auth.prompt_unlock_store()
        try:
            return verify_password(master_password, stored_fingerprint)
        except InvalidMasterPasswordError:
            attempts += 1
            remaining = max_attempts - attempts
            if remaining > 0:
                ui.error(messages.ERROR_ATTEMPTS_REMAINING.format(remaining=remaining))

    if max_attempts > 1:
        ui.error(messages.ERROR_MAX_ATTEMPTS)
    raise InvalidMasterPasswordError()


def open_session() -> Session:
    """Load the store and unlock it, creating a master password on first use."""
    store = load_store(config.store_path)
    stored_fingerprint = load_fingerprint(config.key_path)

    if stored_fingerprint is None:
        if len(store):
            raise StorageError(
                messages.ERROR_KEY_FILE_MISSING.format(path=config.key_path)
            )
        key = create_master_key()
    else:
        key = unlock(stored_fingerprint)
        logger.debug("Unlocked store with %d credentials", len(store))

    return Session(store=store, key=key)


@contextmanager
def session_scope(save: bool = False) -> Iterator[Session]:
    """Open a session, optionally save on success, always wipe the key."""
    with cli_errors():
        session = open_session()
        try:
            yield session
            if save:
                session.save()
        finally:
            session.close()


def key_file_exists() -> bool:
    return Path(config.key_path).exists()
