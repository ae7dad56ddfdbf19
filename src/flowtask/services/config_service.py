"""Configuration service for FlowTask.

``ConfigService`` owns ``config.json`` in the platform config directory:

- the file is created with defaults on first use
- values are read and written by dotted key (``ai.model``,
  ``recurrence.default_time``) and validated through the pydantic models
- single keys or the whole file can be reset to defaults
- ``ui.timezone`` decides the reference time for relative phrases
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from functools import lru_cache
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import tzlocal
from platformdirs import user_config_dir
from pydantic import BaseModel, ValidationError

from flowtask.models.config_models import AppConfig
from flowtask.utils.logger import get_logger

CONFIG_FILE = "config.json"


class ConfigService:
    """Read, validate and persist the FlowTask configuration."""

    def __init__(self):
        self.config_dir = Path(user_config_dir("flowtask"))
        self.config_path = self.config_dir / CONFIG_FILE
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """The loaded configuration, read from disk on first access."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Parse config.json, writing the defaults when it does not exist yet.

        Raises:
            RuntimeError: If the file fails validation
        """
        if self._config is not None:
            return self._config

        try:
            raw = self.config_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            self._config = AppConfig()
            self.save_config()
            get_logger().info("wrote default config to %s", self.config_path)
            return self._config

        try:
            self._config = AppConfig.model_validate_json(raw)
        except ValidationError as e:
            raise RuntimeError(f"Failed to load config from {self.config_path}: {e}") from e
        return self._config

    def save_config(self) -> None:
        """Write the in-memory configuration back to config.json."""
        if self._config is None:
            raise RuntimeError("Configuration has not been loaded")

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            self.config_path.write_text(self._config.model_dump_json(indent=4), encoding="utf-8")
        except OSError as e:
            raise RuntimeError(f"Failed to save config to {self.config_path}: {e}") from e

    def get(self, key: str) -> Any:
        """Value at a dotted key, or None when the key does not exist."""
        return self._lookup(self.config, key)

    def set(self, key: str, value: Any) -> None:
        """Validate and persist *value* at a dotted key.

        Raises:
            KeyError: If the key does not exist
            ValueError: If the value fails validation
        """
        if not self._has_key(key):
            raise KeyError(key)

        *parents, leaf = key.split(".")
        updated = self.config.model_dump()
        section = updated
        for k in parents:
            section = section[k]
        section[leaf] = value

        try:
            self._config = AppConfig.model_validate(updated)
        except ValidationError as e:
            raise ValueError(f"Invalid value for '{key}': {e.errors()[0]['msg']}") from e
        self.save_config()
        get_logger().info("config %s set to %r", key, value)

    def reset(self, key: str | None = None) -> None:
        """Reset one key, or the whole configuration, to defaults."""
        if key is None:
            self._config = AppConfig()
            self.save_config()
            return
        default_value = self._lookup(AppConfig(), key)
        if default_value is None:
            raise KeyError(key)
        self.set(key, default_value)

    def reference_timezone(self) -> tzinfo:
        """Timezone that relative phrases ("tomorrow") are resolved in."""
        name = self.config.ui.timezone
        if name and name != "local":
            try:
                return ZoneInfo(name)
            except (ZoneInfoNotFoundError, ValueError):
                get_logger().warning("unknown timezone %r, using local", name)
        return tzlocal.get_localzone()

    def now(self) -> datetime:
        """Current time in the reference timezone."""
        return datetime.now(self.reference_timezone())

    @staticmethod
    def _lookup(config: BaseModel, key: str) -> Any:
        value: Any = config
        for k in key.split("."):
            if isinstance(value, BaseModel) and k in type(value).model_fields:
                value = getattr(value, k)
            else:
                return None
        return value

    @staticmethod
    def _has_key(key: str) -> bool:
        *parents, leaf = key.split(".")
        model: Any = AppConfig
        for k in parents:
            fields = getattr(model, "model_fields", None)
            field = fields.get(k) if fields else None
            if field is None:
                return False
            model = field.annotation
        return hasattr(model, "model_fields") and leaf in model.model_fields


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service
