"""Configuration management for Nerest CLI."""

import json
import os
import shutil
from pathlib import Path
from typing import Optional

from common.constants import CHUNK_SIZE_BYTES, DEFAULT_TIMEOUT_SECONDS
from common.logging_config import get_logger

logger = get_logger(__name__)


class Config:
    """Manages CLI configuration stored in JSON file."""

    DEFAULT_CONFIG = {
        "base_url": "http://localhost:8000",
        "secret": "",
        "prefix": "",
        "timeout": DEFAULT_TIMEOUT_SECONDS,
        "chunk_size": CHUNK_SIZE_BYTES,
    }

    ENV_OVERRIDES = {
        "base_url": "NEREST_URL",
        "secret": "NEREST_SECRET",
        "prefix": "NEREST_PREFIX",
    }

    def __init__(self, config_path: Path):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.nerest/config.json)
        """
        self.config_path = config_path
        self.data = self._load()
        self._apply_env_overrides()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            import tempfile
            self.config_path = Path(tempfile.gettempdir()) / '.nerest' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                config = self.DEFAULT_CONFIG.copy()
                config.update(data)
                return config
            except (json.JSONDecodeError, OSError) as e:
                backup_path = self.config_path.with_suffix('.json.bak')
                logger.warning(f"Unreadable config at {self.config_path}: {e}; backing up to {backup_path}")
                try:
                    shutil.copy(self.config_path, backup_path)
                except OSError as copy_error:
                    logger.warning(f"Config backup failed: {copy_error}")
                return self.DEFAULT_CONFIG.copy()
        else:
            config = self.DEFAULT_CONFIG.copy()
            try:
                with open(self.config_path, 'w') as f:
                    json.dump(config, f, indent=2)
            except OSError as e:
                logger.warning(f"Could not write default config to {self.config_path}: {e}")
            return config

    def _apply_env_overrides(self) -> None:
        for key, env_var in self.ENV_OVERRIDES.items():
            value = os.environ.get(env_var)
            if value is not None:
                self.data[key] = value

    def save(self) -> None:
        """Save current configuration to file."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except OSError as e:
            logger.warning(f"Could not save config to {self.config_path}: {e}")

    def get_base_url(self) -> str:
        """
        Get server base URL.

        Returns:
            Base URL string (e.g., "http://localhost:8000")
        """
        return str(self.data.get('base_url') or self.DEFAULT_CONFIG['base_url']).rstrip('/')

    def get_secret(self) -> Optional[str]:
        """
        Get the shared signing secret.

        Returns:
            Secret string or None if not set
        """
        return self.data.get('secret') or None

    def get_prefix(self) -> str:
        return self.data.get('prefix') or ""

    def get_timeout(self) -> float:
        """
        Get request timeout in seconds.

        Returns:
            Timeout value in seconds
        """
        return float(self.data.get('timeout', DEFAULT_TIMEOUT_SECONDS))

    def get_chunk_size(self) -> int:
        return int(self.data.get('chunk_size', CHUNK_SIZE_BYTES))
