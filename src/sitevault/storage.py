"""Persistence of the credential store and the master key fingerprint.

Both files are written atomically: a temp file in the destination directory
is written, restricted to 0600 and moved over the target with ``os.replace``.
"""

import json
import logging
import os
import stat
import tempfile
from typing import Optional

from .crypto import MalformedFingerprintError, decode_fingerprint, encode_fingerprint
from .store import CredentialStore, StoreFormatError

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base exception for reading or writing store files."""

    pass


class StoreCorruptedError(StorageError):
    """Raised when a store or key file exists but cannot be parsed."""

    pass


def _read_text(path: str) -> Optional[str]:
    """Read a UTF-8 file, returning None if it does not exist."""
    if not os.path.exists(path):
        return None
    try:
        with open(path, "rb") as f:
            raw_content = f.read()
    except OSError as e:
        raise StorageError(f"Failed to read '{path}': {e}") from e

    try:
        return raw_content.decode("utf-8")
    except UnicodeDecodeError:
        raise StoreCorruptedError(f"File '{path}' has invalid encoding") from None


def _write_temp(path: str, content: str) -> str:
    """Write content to a 0600 temp file beside ``path`` and return its name."""
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    temp_fd, temp_path = tempfile.mkstemp(
        dir=directory, prefix=".sitevault_tmp_", suffix=".tmp"
    )
    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(temp_path, stat.S_IRUSR | stat.S_IWUSR)
    except OSError:
        _cleanup_temp(temp_path)
        raise
    return temp_path


def _cleanup_temp(temp_path: str) -> None:
    """Remove temporary file if it exists."""
    try:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
    except OSError as e:
        logger.warning("Could not remove temporary file %s: %s", temp_path, e)


def _atomic_write(path: str, content: str) -> None:
    try:
        temp_path = _write_temp(path, content)
    except OSError as e:
        raise StorageError(f"Failed to write '{path}': {e}") from e
    try:
        os.replace(temp_path, path)
    except OSError as e:
        _cleanup_temp(temp_path)
        raise StorageError(f"Failed to write '{path}': {e}") from e


def _serialize_store(store: CredentialStore) -> str:
    return json.dumps(store.to_dict(), indent=2, sort_keys=True)


def load_store(path: str) -> CredentialStore:
    """Load the credential store; a missing or empty file is an empty store."""
    content = _read_text(path)
    if content is None or not content.strip():
        logger.debug("No store at %s, starting empty", path)
        return CredentialStore()

    try:
        store = CredentialStore.from_dict(json.loads(content))
    except (json.JSONDecodeError, StoreFormatError) as e:
        raise StoreCorruptedError(f"Store file '{path}' is corrupted: {e}") from e

    logger.debug(
        "Loaded %d credentials across %d sites from %s",
        len(store),
        len(store.sites),
        path,
    )
    return store


def save_store(path: str, store: CredentialStore) -> None:
    """Write the whole credential store atomically."""
    _atomic_write(path, _serialize_store(store))
    logger.debug("Saved %d credentials to %s", len(store), path)


def load_fingerprint(path: str) -> Optional[bytes]:
    """Read the stored master key fingerprint, or None if there is none."""
    content = _read_text(path)
    if content is None:
        return None
    try:
        return decode_fingerprint(content)
    except MalformedFingerprintError as e:
        raise StoreCorruptedError(f"Key file '{path}' is corrupted: {e}") from e


def save_fingerprint(path: str, value: bytes) -> None:
    """Write the master key fingerprint atomically."""
    _atomic_write(path, encode_fingerprint(value) + "\n")
    logger.debug("Saved master key fingerprint to %s", path)


def commit_rotation(
    store_path: str, key_path: str, store: CredentialStore, value: bytes
) -> None:
    """Persist a rotated store together with its new fingerprint.

    Both temp files are written before anything is replaced. If the key file
    cannot be replaced after the store was, the previous store file is put
    back so the old store and old fingerprint stay a matching pair.

    The rollback only covers an OSError raised here. If the process dies
    between the two replaces, the rotated store is left next to the old
    fingerprint and the new master password is needed to read it.
    """
    temp_paths = []
    backup_path = None
    try:
        store_temp = _write_temp(store_path, _serialize_store(store))
        temp_paths.append(store_temp)
        key_temp = _write_temp(key_path, encode_fingerprint(value) + "\n")
        temp_paths.append(key_temp)

        if os.path.exists(store_path):
            with open(store_path, "r", encoding="utf-8") as f:
                backup_path = _write_temp(store_path, f.read())
            temp_paths.append(backup_path)

        os.replace(store_temp, store_path)
        try:
            os.replace(key_temp, key_path)
        except OSError:
            if backup_path is not None:
                os.replace(backup_path, store_path)
            else:
                os.unlink(store_path)
            raise
    except OSError as e:
        raise StorageError(f"Failed to save rotated store: {e}") from e
    finally:
        for temp_path in temp_paths:
            _cleanup_temp(temp_path)

    logger.info("Committed rotated store (%d credentials)", len(store))
