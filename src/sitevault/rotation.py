"""Master password rotation - re-encrypt every credential under a new key.

Rotation is all-or-nothing. Every stored password is decrypted under the old
key before anything is re-encrypted, and the result is a new store; the input
store is never modified. If any credential fails to decrypt, nothing is
produced and the caller keeps the old store and the old fingerprint.

Security Note:
    Decrypted passwords are held in bytearrays and zeroed in a ``finally``
    block whether rotation completes or aborts. Never log plaintext.
"""

import logging
from typing import List, Tuple

from .crypto import (
    CryptoError,
    MasterKey,
    decrypt_bytes,
    derive_key,
    encrypt_bytes,
    fingerprint,
    wipe,
)
from .models import Credential
from .store import CredentialStore

logger = logging.getLogger(__name__)


class RotationError(Exception):
    """Base exception for master password rotation."""

    pass


class RotationAbortedError(RotationError):
    """Raised when a credential cannot be decrypted under the old key."""

    def __init__(self, site: str, user: str, cause: CryptoError):
        super().__init__(
            f"Rotation aborted, nothing was changed: cannot decrypt "
            f"site '{site}' user '{user}': {cause}"
        )
        self.site = site
        self.user = user
        self.cause = cause


def rotate(
    store: CredentialStore, old_key: MasterKey, new_password: str
) -> Tuple[CredentialStore, bytes]:
    """Re-encrypt a store under the key derived from ``new_password``.

    Args:
        store: Store encrypted under ``old_key``. Left unchanged.
        old_key: Current master key.
        new_password: New master password.

    Returns:
        The re-encrypted store and the fingerprint to persist with it.

    Raises:
        RotationAbortedError: If any stored password fails to decrypt.
    """
    records = list(store.list())
    logger.info("Starting master key rotation (%d credentials)", len(records))

    new_key = derive_key(new_password)
    plaintexts: List[bytearray] = []
    try:
        for site, user, credential in records:
            try:
                plaintexts.append(decrypt_bytes(credential.password, old_key))
            except CryptoError as e:
                logger.warning("Rotation aborted at %s/%s: %s", site, user, e)
                raise RotationAbortedError(site, user, e) from e

        rotated = CredentialStore()
        for (site, user, credential), plaintext in zip(records, plaintexts):
            rotated.sites.setdefault(site, {})[user] = Credential(
                username=credential.username,
                password=encrypt_bytes(plaintext, new_key),
            )

        new_fingerprint = fingerprint(new_key)
    finally:
        for plaintext in plaintexts:
            wipe(plaintext)
        new_key.wipe()

    logger.info("Master key rotation complete")
    return rotated, new_fingerprint
