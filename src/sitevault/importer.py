"""Bulk import of a plaintext credential feed.

Feed format, one credential per line:

    <site> <user> <username> <password>

Fields are separated by whitespace; a value containing whitespace cannot be
represented. Later lines overwrite earlier ones for the same site/user.
"""

import logging
from typing import Iterable, Union

from .crypto import MasterKey, encrypt
from .models import Credential
from .storage import StorageError
from .store import CredentialStore

logger = logging.getLogger(__name__)

FIELDS_PER_LINE = 4


class FeedImportError(Exception):
    """Base exception for bulk import errors."""

    pass


class MalformedLineError(FeedImportError):
    """Raised when a feed line does not have exactly four fields.

    The offending line is never echoed since it may contain a password.
    """

    def __init__(self, line_number: int, field_count: int):
        super().__init__(
            f"Line {line_number}: expected {FIELDS_PER_LINE} fields "
            f"(site user username password), got {field_count}"
        )
        self.line_number = line_number
        self.field_count = field_count


def import_feed(
    lines: Union[str, Iterable[str]], key: MasterKey
) -> CredentialStore:
    """Build a store from feed lines, encrypting each password on insertion.

    A whole feed passed as one string is split into lines first. Every line,
    blank ones included, must hold four fields.

    Raises:
        MalformedLineError: If a line does not split into four fields.
    """
    if isinstance(lines, str):
        lines = lines.splitlines()

    store = CredentialStore()
    imported = 0
    for line_number, line in enumerate(lines, 1):
        tokens = line.split()
        if len(tokens) != FIELDS_PER_LINE:
            raise MalformedLineError(line_number, len(tokens))

        site, user, username, password = tokens
        # Last write wins, unlike CredentialStore.add
        store.sites.setdefault(site, {})[user] = Credential(
            username=username, password=encrypt(password, key)
        )
        imported += 1

    logger.debug(
        "Imported %d lines into %d credentials across %d sites",
        imported,
        len(store),
        len(store.sites),
    )
    return store


def import_file(path: str, key: MasterKey) -> CredentialStore:
    """Read a feed file and import it.

    Raises:
        StorageError: If the file cannot be read.
        MalformedLineError: If a line is malformed.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            lines = f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise StorageError(f"Failed to read import file '{path}': {e}") from e
    return import_feed(lines, key)
