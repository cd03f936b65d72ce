"""Unified settings — caller overrides, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — overrides passed by the embedding application
  2. Env vars     — ``BLOGCORE_*`` prefix (``BLOGCORE_STORE__FILENAME``)
  3. TOML file    — ``blogcore.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a :class:`TomlSettingsSource` fed by
:func:`blogcore.config.discovery.find_config`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from blogcore.config.discovery import find_config
from blogcore.config.models import StoreConfig


class ConfigError(ValueError):
    """Raised when a blogcore.toml file cannot be parsed."""


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``blogcore.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise ConfigError(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# TOML path handed to settings_customise_sources during construction.
_tls = threading.local()


class BlogSettings(BaseSettings):
    """Settings for an embedded blog store.

    Attributes:
        root: Directory that relative store paths resolve against (parent of
            ``blogcore.toml``, or CWD if no config was found).
        config_path: The TOML file that was loaded, if any.
        verbose: DEBUG logging for the ``blogcore`` logger.
        log_json: JSON log lines instead of console rendering.
        store: The ``[store]`` section.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "BLOGCORE_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    verbose: bool = False
    log_json: bool = False

    store: StoreConfig = Field(default_factory=StoreConfig)

    @property
    def store_path(self) -> Path:
        """Backing file location; an absolute ``store.filename`` wins over *root*."""
        return self.root / self.store.filename

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def load(
        cls,
        *,
        config_path: Path | str | None = None,
        root: Path | None = None,
        **overrides: Any,
    ) -> BlogSettings:
        """Build settings, discovering ``blogcore.toml`` unless *config_path* is given.

        *root* defaults to the config file's directory, or the CWD when no
        file is found. *overrides* take priority over every other source.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(root)

        resolved_root = root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                root=resolved_root,
                config_path=toml_path,
                **overrides,
            )
        finally:
            _tls.toml_path = None
