"""Authentication utilities for secure password input."""

import getpass
import os
import sys
from typing import Optional

from .config import Config


class PasswordMismatchError(ValueError):
    """Raised when a password and its confirmation differ."""

    pass


def get_master_password(
    prompt: str = "Enter master password: ", confirm: bool = False
) -> str:
    """Securely prompt for master password without echo."""
    env_password = os.getenv(Config.MASTER_PASSWORD_ENV)
    if env_password is not None:
        return env_password

    return _read_secret(prompt, "Confirm master password: " if confirm else None)


def _read_secret(prompt: str, confirm_prompt: Optional[str] = None) -> str:
    try:
        secret = getpass.getpass(prompt)

        if confirm_prompt:
            secret_confirm = getpass.getpass(confirm_prompt)
            if secret != secret_confirm:
                raise PasswordMismatchError("Passwords do not match")

        return secret

    except (KeyboardInterrupt, EOFError):
        print("\nPassword prompt cancelled", file=sys.stderr)
        raise


def master_password_from_env() -> bool:
    """True when the master password is supplied by the environment."""
    return os.getenv(Config.MASTER_PASSWORD_ENV) is not None


def prompt_create_master_password() -> str:
    """Prompt user to create a new master password with confirmation."""
    print("\nCreating credential store - you will need a master password.")
    print(
        "IMPORTANT: Choose a strong password you will remember. "
        "If lost, stored credentials cannot be recovered."
    )
    print()
    return get_master_password(prompt="Create master password: ", confirm=True)


def prompt_unlock_store() -> str:
    """Prompt user to unlock an existing store with the master password."""
    return get_master_password(prompt="Enter master password to unlock: ")


def prompt_new_master_password() -> str:
    """Prompt for the replacement master password during rotation.

    Always interactive: the environment variable holds the current password.
    """
    return _read_secret("New master password: ", "Confirm new master password: ")


def prompt_credential_password(confirm: bool = True) -> str:
    """Prompt for a credential password, confirming it when newly set."""
    return _read_secret("Enter password: ", "Confirm password: " if confirm else None)
