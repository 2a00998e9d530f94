"""Configuration management for SiteVault."""

import os
from pathlib import Path


class Config:
    """Configuration settings for SiteVault."""

    DEFAULT_STORE_PATH = "~/.sitevault/store.json"
    DEFAULT_KEY_PATH = "~/.sitevault/master.key"
    STORE_PATH_ENV = "SITEVAULT_STORE_PATH"
    KEY_PATH_ENV = "SITEVAULT_KEY_PATH"
    MASTER_PASSWORD_ENV = "SITEVAULT_MASTER_PASSWORD"
    LOG_LEVEL_ENV = "SITEVAULT_LOG_LEVEL"
    DEFAULT_LOG_LEVEL = "WARNING"

    # Security constants
    MAX_PASSWORD_ATTEMPTS = 3
    MAX_PASSWORD_LENGTH = 128  # Maximum character count
    MAX_PASSWORD_BYTES = 512  # Maximum byte length (UTF-8 encoded)

    # Seconds a decrypted password stays on screen
    REVEAL_SECONDS = 10

    def __init__(self):
        """Initialize configuration with environment variable support."""
        self.store_path = self._get_path(self.STORE_PATH_ENV, self.DEFAULT_STORE_PATH)
        self.key_path = self._get_path(self.KEY_PATH_ENV, self.DEFAULT_KEY_PATH)
        self.log_level = os.getenv(self.LOG_LEVEL_ENV, self.DEFAULT_LOG_LEVEL).upper()

    def _get_path(self, env_var: str, default: str) -> str:
        """Get a file path from environment or use default."""
        env_path = os.getenv(env_var)
        if env_path:
            return os.path.expanduser(env_path)
        return os.path.expanduser(default)

    def get_store_dir(self) -> Path:
        """Get the directory containing the store file."""
        return Path(self.store_path).parent

    def ensure_store_dir(self) -> None:
        """Ensure the store and key file directories exist."""
        self.get_store_dir().mkdir(parents=True, exist_ok=True)
        Path(self.key_path).parent.mkdir(parents=True, exist_ok=True)


config = Config()
