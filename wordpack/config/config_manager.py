"""Runtime settings for the command-line builder: JSON file plus WORDPACK_* environment."""

import copy
import json
import logging
import os
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional

from ..exceptions import InputError

logger = logging.getLogger(__name__)

ENV_PREFIX = "WORDPACK_"


class SettingsManager:
    """
    Process-wide settings store.

    Lookup order is default, then ``settings.json``, then ``WORDPACK_<KEY>``
    environment variables. Only explicit ``set()``/``reset()`` calls write
    the file back.

    Usage:
        settings = SettingsManager()
        settings.get("TARGET_LANG")            # "vi"
        settings.set("SET_TYPE", "bidirectional")
    """

    _instance: Optional["SettingsManager"] = None
    _lock: Lock = Lock()

    DEFAULT_SETTINGS_FILE: str = "settings.json"

    DEFAULTS: Dict[str, Any] = {
        "SOURCE_LANG": "en",
        "TARGET_LANG": "vi",
        "DECK_NAME": "",
        "SET_TYPE": "basic",
        "ORIENTATION": "audio",
        "GENERATE_SOURCE_AUDIO": True,
        "GENERATE_TARGET_AUDIO": True,
        "CONCURRENCY": 4,
        "CSV_FILE": "vocabulary.csv",
        "OUTPUT_DIR": "data/output",
        "LOG_LEVEL": "INFO",
    }

    # Keys restricted to a fixed set of values
    CHOICES: Dict[str, tuple] = {
        "SET_TYPE": ("basic", "bidirectional"),
        "ORIENTATION": ("audio", "source", "target"),
        "LOG_LEVEL": ("DEBUG", "INFO", "WARNING", "ERROR"),
    }

    def __new__(cls, settings_file: Optional[str] = None) -> "SettingsManager":
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    instance = super().__new__(cls)
                    instance._initialized = False
                    cls._instance = instance
        return cls._instance

    def __init__(self, settings_file: Optional[str] = None) -> None:
        """
        Args:
            settings_file: JSON file path, 'settings.json' in the working
                           directory when omitted. Ignored after the first
                           construction of the singleton.
        """
        if getattr(self, "_initialized", False):
            return

        self._path = Path(settings_file or self.DEFAULT_SETTINGS_FILE)
        self._values: Dict[str, Any] = {}
        self._file_lock = Lock()

        self._load()
        self._initialized = True

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        values = copy.deepcopy(self.DEFAULTS)

        for key, value in self._read_file().items():
            if self._accepts(key, value):
                values[key] = value
            else:
                logger.warning("Ignoring invalid setting %s=%r in %s", key, value, self._path)

        for key in self.DEFAULTS:
            raw = os.environ.get(ENV_PREFIX + key)
            if raw is None:
                continue
            value = self._coerce(key, raw)
            if self._accepts(key, value):
                values[key] = value
            else:
                logger.warning("Ignoring invalid environment value %s%s=%r", ENV_PREFIX, key, raw)

        self._values = values

    def _read_file(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load settings file %s: %s", self._path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Settings file %s does not hold an object", self._path)
            return {}
        return data

    def _write_file(self) -> None:
        with self._file_lock:
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                with open(self._path, "w", encoding="utf-8") as f:
                    json.dump(self._values, f, indent=2, ensure_ascii=False)
            except OSError as e:
                logger.warning("Could not save settings file %s: %s", self._path, e)

    def _coerce(self, key: str, raw: str) -> Any:
        """Convert an environment string to the type of the key's default."""
        default = self.DEFAULTS.get(key)
        if isinstance(default, bool):
            return raw.strip().lower() in ("true", "1", "yes", "on")
        if isinstance(default, int):
            try:
                return int(raw)
            except ValueError:
                return default
        if key == "LOG_LEVEL":
            return raw.strip().upper()
        return raw.strip()

    def _accepts(self, key: str, value: Any) -> bool:
        choices = self.CHOICES.get(key)
        if choices is not None:
            return value in choices
        if key == "CONCURRENCY":
            return isinstance(value, int) and not isinstance(value, bool) and value > 0
        return True

    def get(self, key: str, default: Any = None) -> Any:
        return copy.deepcopy(self._values.get(key, default))

    def set(self, key: str, value: Any, persist: bool = True) -> None:
        """
        Change a setting.

        Raises:
            InputError: Value outside the allowed choices for the key
        """
        if not self._accepts(key, value):
            raise InputError(f"Invalid value for {key}", {"value": value, "allowed": self.CHOICES.get(key)})
        self._values[key] = value
        if persist:
            self._write_file()

    def get_all(self) -> Dict[str, Any]:
        return copy.deepcopy(self._values)

    def reset(self, key: Optional[str] = None) -> None:
        """Restore one key, or every key when ``key`` is None, to its default and save."""
        if key is None:
            self._values = copy.deepcopy(self.DEFAULTS)
        elif key in self.DEFAULTS:
            self._values[key] = copy.deepcopy(self.DEFAULTS[key])
        self._write_file()

    def reload(self) -> None:
        """Re-read the settings file and environment."""
        self._load()

    @classmethod
    def reset_instance(cls) -> None:
        """Forget the singleton so the next construction reloads (tests)."""
        with cls._lock:
            cls._instance = None
