"""Shared pytest fixtures for all tests."""

import os
import tempfile
from typing import Generator

import pytest

from sitevault.config import config
from sitevault.crypto import MasterKey, derive_key
from sitevault.store import CredentialStore

# ============================================================================
# File System Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Provide a temporary directory that's automatically cleaned up."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def store_path(temp_dir: str) -> str:
    """Provide a temporary store file path."""
    return os.path.join(temp_dir, "store.json")


@pytest.fixture
def key_path(temp_dir: str) -> str:
    """Provide a temporary fingerprint file path."""
    return os.path.join(temp_dir, "master.key")


@pytest.fixture
def isolated_config(store_path: str, key_path: str, monkeypatch):
    """Point the global config at temporary files."""
    monkeypatch.setattr(config, "store_path", store_path)
    monkeypatch.setattr(config, "key_path", key_path)
    monkeypatch.delenv(config.MASTER_PASSWORD_ENV, raising=False)
    return config


# ============================================================================
# Key Fixtures
# ============================================================================


@pytest.fixture
def master_password() -> str:
    """Standard master password for tests."""
    return "correct horse"


@pytest.fixture
def master_key(master_password: str) -> MasterKey:
    """Key derived from the standard master password."""
    return derive_key(master_password)


@pytest.fixture
def other_key() -> MasterKey:
    """A key that does not match the standard one."""
    return derive_key("battery staple")


# ============================================================================
# Store Fixtures
# ============================================================================


@pytest.fixture
def store() -> CredentialStore:
    """Provide an empty credential store."""
    return CredentialStore()


@pytest.fixture
def populated_store(store: CredentialStore, master_key: MasterKey) -> CredentialStore:
    """Provide a store with sample credentials across two sites."""
    store.add("example.com", "alice", "alice@example.com", "p@ss1", master_key)
    store.add("example.com", "bob", "bob@example.com", "hunter2", master_key)
    store.add("github.com", "dev", "octocat", "GitHubToken456!", master_key)
    return store
