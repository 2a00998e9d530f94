"""SiteVault credential manager."""

__version__ = "0.2.0"

# ruff: noqa: E402
from .crypto import (
    AuthenticationFailedError,
    AuthError,
    CryptoError,
    InvalidEncodingError,
    InvalidMasterPasswordError,
    MalformedEnvelopeError,
    MasterKey,
    decrypt,
    derive_key,
    encrypt,
    verify_password,
)
from .importer import FeedImportError, MalformedLineError, import_feed
from .models import Credential, PlaintextCredential
from .rotation import RotationAbortedError, RotationError, rotate
from .store import (
    CredentialExistsError,
    CredentialNotFoundError,
    CredentialStore,
    StoreError,
)

__all__ = [
    "Credential",
    "CredentialStore",
    "MasterKey",
    "PlaintextCredential",
    "derive_key",
    "verify_password",
    "encrypt",
    "decrypt",
    "import_feed",
    "rotate",
    "AuthError",
    "InvalidMasterPasswordError",
    "CryptoError",
    "MalformedEnvelopeError",
    "AuthenticationFailedError",
    "InvalidEncodingError",
    "StoreError",
    "CredentialNotFoundError",
    "CredentialExistsError",
    "FeedImportError",
    "MalformedLineError",
    "RotationError",
    "RotationAbortedError",
]
