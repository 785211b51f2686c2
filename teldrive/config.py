"""Configuration management for the Teldrive driver."""

import json
import os
import shutil
from pathlib import Path
from typing import Optional

from common.constants import (
    COOKIE_PREFIX,
    DEFAULT_CHUNK_SIZE_MIB,
    DEFAULT_UPLOAD_CONCURRENCY,
    MAX_CHUNK_SIZE_MIB,
    MIN_CHUNK_SIZE_MIB,
)
from common.logging_config import get_logger
from teldrive.exceptions import ConfigError

logger = get_logger(__name__)


class Config:
    """Driver settings backed by an optional JSON file."""

    DEFAULT_CONFIG = {
        "url": "http://localhost:8080",
        "cookie": "",
        "chunk_size": DEFAULT_CHUNK_SIZE_MIB,
        "upload_concurrency": DEFAULT_UPLOAD_CONCURRENCY,
        "channel_id": 0,
        "encrypt_files": False,
        "upload_host": "",
        "timeout": 60,
        "max_retries": 0,
        "retry_backoff_multiplier": 2,
    }

    ENV_OVERRIDES = {
        "url": "TELDRIVE_URL",
        "cookie": "TELDRIVE_COOKIE",
    }

    def __init__(self, config_path: Optional[Path] = None, **overrides):
        """
        Initialize configuration.

        Args:
            config_path: Path to config JSON file (typically ~/.teldrive/config.json).
                None keeps the settings in memory only.
            **overrides: Values applied on top of file and environment
        """
        self.config_path = config_path
        self.data = self._load()
        for key, env_var in self.ENV_OVERRIDES.items():
            value = os.environ.get(env_var)
            if value:
                self.data[key] = value
        self.data.update(overrides)

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        config = self.DEFAULT_CONFIG.copy()
        if self.config_path is None:
            return config

        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if not self.config_path.exists():
            try:
                with open(self.config_path, 'w') as f:
                    json.dump(config, f, indent=2)
            except OSError as e:
                logger.warning(f"Could not write default config to {self.config_path}: {e}")
            return config

        try:
            with open(self.config_path, 'r') as f:
                data = json.load(f)
            config.update(data)
            return config
        except (json.JSONDecodeError, OSError) as e:
            backup_path = self.config_path.with_suffix('.json.bak')
            logger.warning(f"Config file {self.config_path} unreadable ({e}), backing up to {backup_path}")
            try:
                shutil.copy(self.config_path, backup_path)
            except OSError as copy_error:
                logger.warning(f"Could not back up config file: {copy_error}")
            return self.DEFAULT_CONFIG.copy()

    def save(self) -> None:
        """Save current configuration to file."""
        if self.config_path is None:
            return
        with open(self.config_path, 'w') as f:
            json.dump(self.data, f, indent=2)

    def validate(self) -> None:
        """
        Normalize defaults and check bounds.

        A chunk size or concurrency of 0 falls back to the default.

        Raises:
            ConfigError: If the url is missing, a number is not whole, or a value is out of range
        """
        url = str(self.data.get('url') or '').strip().rstrip('/')
        if not url:
            raise ConfigError("url is required")
        self.data['url'] = url

        if not self.data.get('chunk_size'):
            self.data['chunk_size'] = DEFAULT_CHUNK_SIZE_MIB
        chunk_size = self._as_int('chunk_size')
        if chunk_size < MIN_CHUNK_SIZE_MIB:
            raise ConfigError(f"chunk size must be at least {MIN_CHUNK_SIZE_MIB} MiB")
        if chunk_size > MAX_CHUNK_SIZE_MIB:
            raise ConfigError(f"chunk size must be at most {MAX_CHUNK_SIZE_MIB} MiB")
        self.data['chunk_size'] = chunk_size

        if not self.data.get('upload_concurrency'):
            self.data['upload_concurrency'] = DEFAULT_UPLOAD_CONCURRENCY
        concurrency = self._as_int('upload_concurrency')
        if concurrency < 1:
            raise ConfigError("upload concurrency must be positive")
        self.data['upload_concurrency'] = concurrency

        self.data.setdefault('max_retries', 0)
        max_retries = self._as_int('max_retries')
        if max_retries < 0:
            raise ConfigError("max_retries must not be negative")
        self.data['max_retries'] = max_retries

    def _as_int(self, key: str) -> int:
        """
        Read a whole number setting.

        Accepts ints, integral floats such as 4.0 and digit strings such as "20".

        Raises:
            ConfigError: If the value is not a whole number
        """
        value = self.data[key]
        if isinstance(value, bool):
            raise ConfigError(f"{key} must be a whole number, got {value!r}")
        if isinstance(value, float):
            if not value.is_integer():
                raise ConfigError(f"{key} must be a whole number, got {value!r}")
            return int(value)
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigError(f"{key} must be a whole number, got {value!r}") from None

    def get_base_url(self) -> str:
        """
        Get the API base URL without trailing slash.

        Returns:
            Base URL string (e.g., "https://drive.example.com")
        """
        return str(self.data.get('url', '')).rstrip('/')

    def get_cookie(self) -> str:
        """
        Get the raw credential.

        Returns:
            Cookie string, expected as "access_token=<token>"
        """
        return self.data.get('cookie') or ''

    def set_cookie(self, cookie: str) -> None:
        """
        Set the credential. Call save() to persist it.

        Args:
            cookie: Cookie string starting with "access_token="
        """
        if not cookie.startswith(COOKIE_PREFIX):
            cookie = COOKIE_PREFIX + cookie
        self.data['cookie'] = cookie

    def get_chunk_size_mib(self) -> int:
        return int(self.data.get('chunk_size') or DEFAULT_CHUNK_SIZE_MIB)

    def get_upload_concurrency(self) -> int:
        return int(self.data.get('upload_concurrency') or DEFAULT_UPLOAD_CONCURRENCY)

    def get_channel_id(self) -> int:
        return int(self.data.get('channel_id') or 0)

    def get_encrypt_files(self) -> bool:
        return bool(self.data.get('encrypt_files', False))

    def get_upload_host(self) -> str:
        """
        Get the optional upload API host.

        Returns:
            Host URL without trailing slash, or "" to use the base URL
        """
        return str(self.data.get('upload_host') or '').rstrip('/')

    def get_timeout(self) -> float:
        """
        Get request timeout in seconds.

        Returns:
            Timeout value in seconds
        """
        return float(self.data.get('timeout', 60))

    def get_retry_config(self) -> dict:
        """
        Get retry configuration.

        Returns:
            Dictionary with 'max_retries' and 'retry_backoff_multiplier'
        """
        return {
            'max_retries': int(self.data.get('max_retries', 0)),
            'retry_backoff_multiplier': self.data.get('retry_backoff_multiplier', 2),
        }
