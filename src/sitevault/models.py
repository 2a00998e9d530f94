"""Data models for stored credentials."""

from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class Credential:
    """A stored credential: clear username plus an encrypted password envelope.

    Instances are immutable; an update replaces the whole credential.
    """

    username: str
    password: str  # base64(nonce || ciphertext || tag)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON storage."""
        return {"username": self.username, "password": self.password}

    @classmethod
    def from_dict(cls, data: dict) -> "Credential":
        """Create Credential from dictionary."""
        username = data["username"]
        password = data["password"]
        if not isinstance(username, str) or not isinstance(password, str):
            raise TypeError("Credential fields must be strings")
        return cls(username=username, password=password)


@dataclass(frozen=True)
class PlaintextCredential:
    """Decrypted view of a credential returned by a lookup."""

    username: str
    password: str = field(repr=False)


SiteUser = Dict[str, Credential]
