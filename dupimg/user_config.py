"""
User configuration for dupimg.

Every setting is resolved in this order (first hit wins):
1. Command-line option (applied by the CLI on top of these defaults)
2. Environment variable (DUPIMG_*)
3. Config file ``config.json`` in the config dir (~/.dupimg, or DUPIMG_CONFIG_DIR)
4. Built-in default from config.py

Example config.json:
{
    "default_threshold": 95,
    "default_workers": 8,
    "file_pattern": "*.jpg",
    "cache_dir": null,
    "errors_file": "errors.txt"
}

A null value in the file means "use the default".
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, NamedTuple, Optional

from .config import (
    DEFAULT_CACHE_DIR,
    DEFAULT_PATTERN,
    DEFAULT_THRESHOLD,
    DEFAULT_WORKERS,
    ERRORS_FILE,
)

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = 'DUPIMG_CONFIG_DIR'
CONFIG_FILE_NAME = 'config.json'


class Setting(NamedTuple):
    default: Any
    env_var: str
    convert: Callable[[Any], Any]


SETTINGS = {
    'default_threshold': Setting(DEFAULT_THRESHOLD, 'DUPIMG_THRESHOLD', float),
    'default_workers': Setting(DEFAULT_WORKERS, 'DUPIMG_WORKERS', int),
    'file_pattern': Setting(DEFAULT_PATTERN, 'DUPIMG_PATTERN', str),
    'cache_dir': Setting(DEFAULT_CACHE_DIR, 'DUPIMG_CACHE_DIR', str),
    'errors_file': Setting(ERRORS_FILE, 'DUPIMG_ERRORS_FILE', str),
}


class UserConfig:
    """
    Process-wide configuration (singleton).

    The config file is read on first access and cached until ``reload()``.
    A value that cannot be converted to the setting's type is logged and
    replaced by the default.
    """

    _instance: Optional['UserConfig'] = None
    _file_data: Optional[dict] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def config_dir(self) -> Path:
        env_dir = os.getenv(CONFIG_DIR_ENV)
        return Path(env_dir) if env_dir else Path.home() / '.dupimg'

    @property
    def config_file_path(self) -> Path:
        return self.config_dir / CONFIG_FILE_NAME

    def _read_file(self) -> dict:
        path = self.config_file_path
        if not path.exists():
            return {}
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring config file {path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring config file {path}: not a JSON object")
            return {}
        logger.debug(f"Loaded configuration from {path}")
        return data

    def _file(self) -> dict:
        if self._file_data is None:
            self._file_data = self._read_file()
        return self._file_data

    def reload(self):
        """Forget the cached config file so the next access re-reads it."""
        self._file_data = None

    def get(self, key: str) -> Any:
        """
        Resolve a setting by name.

        Raises:
            KeyError: If ``key`` is not a known setting
        """
        setting = SETTINGS[key]

        raw = os.getenv(setting.env_var)
        source = setting.env_var
        if raw is None:
            raw = self._file().get(key)
            source = str(self.config_file_path)
        if raw is None:
            return setting.default

        try:
            return setting.convert(raw)
        except (TypeError, ValueError):
            logger.warning(f"Invalid {key} {raw!r} from {source}, using {setting.default!r}")
            return setting.default

    @property
    def default_threshold(self) -> float:
        """Similarity threshold in percent."""
        return self.get('default_threshold')

    @property
    def default_workers(self) -> int:
        """Fingerprint worker count."""
        return self.get('default_workers')

    @property
    def file_pattern(self) -> str:
        """Filename pattern for folder enumeration."""
        return self.get('file_pattern')

    @property
    def cache_dir(self) -> str:
        """Directory holding the cache registry and cache files."""
        return self.get('cache_dir')

    @property
    def errors_file(self) -> str:
        """Fingerprint error report path."""
        return self.get('errors_file')

    def as_dict(self) -> dict:
        """Every setting with its resolved value."""
        return {key: self.get(key) for key in SETTINGS}

    def create_example_config(self) -> bool:
        """Write a config.json holding the built-in defaults."""
        example = {key: setting.default for key, setting in SETTINGS.items()}
        example['cache_dir'] = None

        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, 'w', encoding='utf-8') as f:
                json.dump(example, f, indent=2)
        except OSError as e:
            logger.error(f"Failed to create example config: {e}")
            return False
        logger.info(f"Created example config file at {self.config_file_path}")
        return True


_user_config = UserConfig()


def get_user_config() -> UserConfig:
    """Get the global UserConfig instance."""
    return _user_config
