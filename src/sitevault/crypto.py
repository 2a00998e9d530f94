"""Cryptographic operations for the credential store.

Key derivation:
    key = SHA-256(utf8(master_password))

The persisted fingerprint is the derived key itself, so verifying a password
reproduces the encryption key in the same step. This is a fast, unsalted hash:
anyone holding the fingerprint file can brute-force the master password
offline. A slow salted verifier would change the fingerprint file format.

Envelope format for each encrypted field:
    base64( nonce[12] || AES-256-GCM ciphertext || tag[16] )

Security Note:
    Never log plaintext, keys, fingerprints or envelopes.
"""

import base64
import binascii
import hashlib
import hmac
import logging
import os
from typing import Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

logger = logging.getLogger(__name__)

KEY_LENGTH = 32  # AES-256
NONCE_LENGTH = 12  # 96-bit GCM nonce
TAG_LENGTH = 16
FINGERPRINT_LENGTH = KEY_LENGTH


class CryptoError(Exception):
    """Base exception for cryptographic operations."""

    pass


class MalformedEnvelopeError(CryptoError):
    """Raised when an envelope is not base64 or too short to hold a nonce."""

    pass


class AuthenticationFailedError(CryptoError):
    """Raised when the GCM tag does not verify (wrong key or tampered data)."""

    pass


class InvalidEncodingError(CryptoError):
    """Raised when decrypted bytes are not valid UTF-8."""

    pass


class EncryptionError(CryptoError):
    """Raised when the AEAD primitive fails to encrypt."""

    pass


class MalformedFingerprintError(CryptoError):
    """Raised when a stored fingerprint cannot be decoded."""

    pass


class AuthError(Exception):
    """Base exception for master password authentication."""

    pass


class InvalidMasterPasswordError(AuthError):
    """Raised when a master password does not match the stored fingerprint."""

    def __init__(self, message: str = "Invalid master password"):
        super().__init__(message)


class MasterKey:
    """A 32-byte symmetric key held in a wipeable buffer.

    The key compares in constant time, never shows its bytes in ``repr`` and
    refuses to be used after :meth:`wipe`. Use it as a context manager to
    wipe it when the block exits.
    """

    __slots__ = ("_buffer", "_wiped")

    def __init__(self, material: Union[bytes, bytearray]):
        if len(material) != KEY_LENGTH:
            raise ValueError(f"Master key must be {KEY_LENGTH} bytes")
        self._buffer = bytearray(material)
        self._wiped = False

    @property
    def material(self) -> bytearray:
        """Raw key buffer for the AEAD primitive."""
        if self._wiped:
            raise ValueError("Master key has been wiped")
        return self._buffer

    @property
    def wiped(self) -> bool:
        return self._wiped

    def wipe(self) -> None:
        """Overwrite the key material with zeros."""
        wipe(self._buffer)
        self._wiped = True

    def __bytes__(self) -> bytes:
        return bytes(self.material)

    def __len__(self) -> int:
        return KEY_LENGTH

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MasterKey):
            return NotImplemented
        return hmac.compare_digest(self.material, other.material)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        state = "wiped" if self._wiped else "redacted"
        return f"MasterKey(<{state}>)"

    def __enter__(self) -> "MasterKey":
        return self

    def __exit__(self, *exc_info) -> None:
        self.wipe()


def wipe(buffer: bytearray) -> None:
    """Zero a mutable buffer in place."""
    for i in range(len(buffer)):
        buffer[i] = 0


# ---------------------------------------------------------------------------
# Key derivation
# ---------------------------------------------------------------------------


def derive_key(master_password: str) -> MasterKey:
    """Derive the 32-byte master key from a password with SHA-256."""
    digest = hashlib.sha256(master_password.encode("utf-8")).digest()
    return MasterKey(digest)


def fingerprint(key: MasterKey) -> bytes:
    """Return the value persisted to verify future passwords.

    The fingerprint and the key come from the same hash, so this is the key.
    """
    return bytes(key.material)


def verify_password(master_password: str, stored_fingerprint: bytes) -> MasterKey:
    """Derive a key and check it against the stored fingerprint.

    Raises:
        InvalidMasterPasswordError: If the password does not match.
    """
    key = derive_key(master_password)
    if hmac.compare_digest(key.material, stored_fingerprint):
        return key
    key.wipe()
    logger.debug("Master password verification failed")
    raise InvalidMasterPasswordError()


def encode_fingerprint(value: bytes) -> str:
    """Text form of a fingerprint for the key file."""
    return base64.b64encode(value).decode("ascii")


def decode_fingerprint(text: str) -> bytes:
    """Parse the text form of a fingerprint.

    Raises:
        MalformedFingerprintError: If the text is not base64 of 32 bytes.
    """
    try:
        value = base64.b64decode(text.strip(), validate=True)
    except (binascii.Error, ValueError, TypeError, AttributeError) as e:
        raise MalformedFingerprintError("Fingerprint is not valid base64") from e
    if len(value) != FINGERPRINT_LENGTH:
        raise MalformedFingerprintError(
            f"Fingerprint must be {FINGERPRINT_LENGTH} bytes, got {len(value)}"
        )
    return value


# ---------------------------------------------------------------------------
# Envelope encryption
# ---------------------------------------------------------------------------


def generate_nonce() -> bytes:
    """Generate a random 96-bit nonce for AES-GCM."""
    return os.urandom(NONCE_LENGTH)


def encrypt_bytes(data: Union[bytes, bytearray], key: MasterKey) -> str:
    """Encrypt raw bytes into a base64 envelope."""
    material = key.material
    nonce = generate_nonce()
    try:
        sealed = AESGCM(material).encrypt(nonce, bytes(data), None)
    except (ValueError, TypeError, OverflowError) as e:
        raise EncryptionError(f"Encryption failed: {e}") from e
    return base64.b64encode(nonce + sealed).decode("ascii")


def decrypt_bytes(envelope: str, key: MasterKey) -> bytearray:
    """Decrypt a base64 envelope into a wipeable buffer.

    Raises:
        MalformedEnvelopeError: If the envelope is not base64 or shorter than
            a nonce.
        AuthenticationFailedError: If the tag does not verify.
    """
    try:
        raw = base64.b64decode(envelope, validate=True)
    except (binascii.Error, ValueError, TypeError) as e:
        raise MalformedEnvelopeError("Encrypted field is not valid base64") from e

    if len(raw) < NONCE_LENGTH:
        raise MalformedEnvelopeError("Encrypted field too short")

    nonce, sealed = raw[:NONCE_LENGTH], raw[NONCE_LENGTH:]
    try:
        plaintext = AESGCM(key.material).decrypt(nonce, sealed, None)
    except InvalidTag:
        raise AuthenticationFailedError(
            "Decryption failed - wrong master key or tampered data"
        ) from None
    return bytearray(plaintext)


def encrypt(plaintext: str, key: MasterKey) -> str:
    """Encrypt a text value into a base64 envelope."""
    return encrypt_bytes(plaintext.encode("utf-8"), key)


def decrypt(envelope: str, key: MasterKey) -> str:
    """Decrypt a base64 envelope back into text.

    Raises:
        MalformedEnvelopeError: If the envelope cannot be parsed.
        AuthenticationFailedError: If the key is wrong or the data was altered.
        InvalidEncodingError: If the plaintext is not valid UTF-8.
    """
    buffer = decrypt_bytes(envelope, key)
    try:
        return buffer.decode("utf-8")
    except UnicodeDecodeError:
        raise InvalidEncodingError("Decrypted data is not valid UTF-8") from None
    finally:
        wipe(buffer)
