"""Settings file for completion limits and the default SQL dialect.

Settings live in a single JSON object, ``~/.querycomplete/settings.json`` by
default. ``QUERYCOMPLETE_CONFIG_DIR`` moves the directory and
``QUERYCOMPLETE_SETTINGS_PATH`` points at a specific file.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from querycomplete.shared.core.ranking import CompletionLimits

_logger = logging.getLogger(__name__)

LIMITS_KEY = "completion_limits"
DIALECT_KEY = "default_dialect"


def config_dir() -> Path:
    override = os.environ.get("QUERYCOMPLETE_CONFIG_DIR", "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".querycomplete"


def _resolve_settings_path() -> Path:
    override = os.environ.get("QUERYCOMPLETE_SETTINGS_PATH", "").strip()
    if override:
        return Path(override).expanduser()
    return config_dir() / "settings.json"


def _check_limits(value: Any) -> None:
    if not isinstance(value, dict):
        raise ValueError(f"{LIMITS_KEY} must be an object of limit names to values")
    for name, limit in value.items():
        if name not in CompletionLimits.__dataclass_fields__:
            raise ValueError(f"Unknown completion limit: {name}")
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise ValueError(f"Completion limit {name} must be a positive integer")


def _check_dialect(value: Any) -> None:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{DIALECT_KEY} must be a non-empty string")


# Known keys are validated before they are written
_VALIDATORS = {LIMITS_KEY: _check_limits, DIALECT_KEY: _check_dialect}


class SettingsStore:
    """Read and write completion settings."""

    def __init__(self, file_path: Path | None = None) -> None:
        self._file_path = file_path or _resolve_settings_path()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def exists(self) -> bool:
        return self._file_path.exists()

    def load_all(self) -> dict[str, Any]:
        """Load all settings.

        Returns:
            Dictionary of settings, or empty dict if the file is missing,
            unreadable or does not hold a JSON object.
        """
        try:
            raw = self._file_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError) as e:
            _logger.debug("Cannot read settings file %s: %s", self._file_path, e)
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            _logger.debug("Ignoring unreadable settings file %s", self._file_path)
            return {}
        if not isinstance(data, dict):
            _logger.debug("Settings file %s does not hold an object", self._file_path)
            return {}
        return data

    def save_all(self, settings: dict[str, Any]) -> None:
        """Write all settings, replacing the file in one step.

        Raises:
            TypeError: If a value cannot be serialized to JSON.
        """
        payload = json.dumps(settings, indent=2, sort_keys=True) + "\n"

        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        tmp = tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self._file_path.parent,
            prefix=f".{self._file_path.name}.",
            suffix=".tmp",
            delete=False,
        )
        try:
            with tmp:
                tmp.write(payload)
            os.replace(tmp.name, self._file_path)
        except OSError:
            Path(tmp.name).unlink(missing_ok=True)
            raise

    def get(self, key: str, default: Any = None) -> Any:
        return self.load_all().get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Store one setting.

        Raises:
            ValueError: If a known key is given an invalid value.
        """
        check = _VALIDATORS.get(key)
        if check:
            check(value)
        settings = self.load_all()
        settings[key] = value
        self.save_all(settings)

    def delete(self, key: str) -> bool:
        """Delete a specific setting.

        Returns:
            True if key existed and was deleted, False otherwise.
        """
        settings = self.load_all()
        if key in settings:
            del settings[key]
            self.save_all(settings)
            return True
        return False

    def load_completion_limits(self) -> CompletionLimits:
        return CompletionLimits.from_settings(self.get(LIMITS_KEY))

    def set_completion_limit(self, name: str, value: int) -> CompletionLimits:
        """Update one limit and return the resulting limits.

        Raises:
            ValueError: If the name is not a known limit or the value is not positive.
        """
        _check_limits({name: value})
        current = self.get(LIMITS_KEY)
        # Invalid hand-edited entries are dropped on update
        limits = {k: v for k, v in current.items() if _is_valid_limit(k, v)} if isinstance(current, dict) else {}
        limits[name] = value
        self.set(LIMITS_KEY, limits)
        return CompletionLimits.from_settings(limits)

    def default_dialect(self, fallback: str = "postgres") -> str:
        value = self.get(DIALECT_KEY)
        return value if isinstance(value, str) and value else fallback


def _is_valid_limit(name: str, value: Any) -> bool:
    try:
        _check_limits({name: value})
    except ValueError:
        return False
    return True


def load_completion_limits() -> CompletionLimits:
    """Load completion limits from the default settings file."""
    return SettingsStore().load_completion_limits()
