"""Credential store - in-memory site/user mapping of encrypted credentials."""

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from .crypto import CryptoError, MasterKey, decrypt, encrypt
from .models import Credential, PlaintextCredential, SiteUser

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base exception for credential store errors."""

    def __init__(self, message: str, site: str = "", user: str = ""):
        super().__init__(message)
        self.site = site
        self.user = user


class CredentialNotFoundError(StoreError):
    """Raised when no credential exists for a site/user pair."""

    def __init__(self, site: str, user: str):
        super().__init__(
            f"No credentials for site '{site}' user '{user}'", site=site, user=user
        )


class CredentialExistsError(StoreError):
    """Raised when adding a credential that already exists."""

    def __init__(self, site: str, user: str):
        super().__init__(
            f"Credentials already exist for site '{site}' user '{user}' "
            "- use update instead",
            site=site,
            user=user,
        )


class CredentialDecryptionError(StoreError):
    """Raised when a stored password cannot be decrypted."""

    def __init__(self, site: str, user: str, cause: CryptoError):
        super().__init__(
            f"Cannot decrypt credentials for site '{site}' user '{user}': {cause}",
            site=site,
            user=user,
        )
        self.cause = cause


class StoreFormatError(StoreError):
    """Raised when serialized store data has the wrong shape."""

    pass


class CredentialStore:
    """Credentials keyed by site, then by user.

    Passwords are held only as encrypted envelopes. The master key is passed
    to each operation that needs it; the store never keeps a key. A site
    with no users left is removed.
    """

    def __init__(self, sites: Optional[Dict[str, SiteUser]] = None):
        self.sites: Dict[str, SiteUser] = {}
        for site, users in (sites or {}).items():
            if users:
                self.sites[site] = dict(users)

    def _lookup(self, site: str, user: str) -> Credential:
        credential = self.sites.get(site, {}).get(user)
        if credential is None:
            raise CredentialNotFoundError(site, user)
        return credential

    def add(
        self, site: str, user: str, username: str, password: str, key: MasterKey
    ) -> None:
        """Encrypt and insert a new credential.

        Raises:
            CredentialExistsError: If the site/user pair is already present.
        """
        if (site, user) in self:
            raise CredentialExistsError(site, user)
        credential = Credential(username=username, password=encrypt(password, key))
        self.sites.setdefault(site, {})[user] = credential
        logger.debug("Added credentials for %s/%s", site, user)

    def get(self, site: str, user: str, key: MasterKey) -> PlaintextCredential:
        """Return the username and decrypted password for a site/user pair.

        Raises:
            CredentialNotFoundError: If the pair is absent.
            CredentialDecryptionError: If the stored password cannot be decrypted.
        """
        credential = self._lookup(site, user)
        try:
            password = decrypt(credential.password, key)
        except CryptoError as e:
            raise CredentialDecryptionError(site, user, e) from e
        return PlaintextCredential(username=credential.username, password=password)

    def update(
        self, site: str, user: str, username: str, password: str, key: MasterKey
    ) -> None:
        """Replace an existing credential with a freshly encrypted one.

        Raises:
            CredentialNotFoundError: If the pair is absent.
        """
        self._lookup(site, user)
        self.sites[site][user] = Credential(
            username=username, password=encrypt(password, key)
        )
        logger.debug("Updated credentials for %s/%s", site, user)

    def delete(self, site: str, user: str) -> None:
        """Remove a credential, dropping the site once it has no users.

        Raises:
            CredentialNotFoundError: If the pair is absent.
        """
        self._lookup(site, user)
        users = self.sites[site]
        del users[user]
        if not users:
            del self.sites[site]
        logger.debug("Deleted credentials for %s/%s", site, user)

    def list(self) -> Iterator[Tuple[str, str, Credential]]:
        """Yield (site, user, credential) without decrypting anything."""
        snapshot = [
            (site, user, credential)
            for site, users in self.sites.items()
            for user, credential in users.items()
        ]
        yield from snapshot

    def site_names(self) -> List[str]:
        """Get all site names, sorted."""
        return sorted(self.sites)

    def copy(self) -> "CredentialStore":
        """Independent copy (credentials are immutable and shared)."""
        return CredentialStore(self.sites)

    def to_dict(self) -> dict:
        """Convert to the nested dictionary used for JSON storage."""
        return {
            site: {user: credential.to_dict() for user, credential in users.items()}
            for site, users in self.sites.items()
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CredentialStore":
        """Create a store from its JSON dictionary form.

        Sites with no users are dropped.

        Raises:
            StoreFormatError: If the data does not have the expected shape.
        """
        if not isinstance(data, dict):
            raise StoreFormatError("Store data must be a mapping of sites")

        sites: Dict[str, SiteUser] = {}
        for site, users in data.items():
            if not isinstance(users, dict):
                raise StoreFormatError(
                    f"Site '{site}' must map users to credentials", site=site
                )
            parsed: SiteUser = {}
            for user, entry in users.items():
                try:
                    parsed[user] = Credential.from_dict(entry)
                except (KeyError, TypeError) as e:
                    raise StoreFormatError(
                        f"Invalid credential for site '{site}' user '{user}'",
                        site=site,
                        user=user,
                    ) from e
            if parsed:
                sites[site] = parsed
        return cls(sites)

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        site, user = item
        return user in self.sites.get(site, {})

    def __len__(self) -> int:
        return sum(len(users) for users in self.sites.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CredentialStore):
            return NotImplemented
        return self.sites == other.sites

    def __repr__(self) -> str:
        return f"CredentialStore(sites={len(self.sites)}, credentials={len(self)})"
