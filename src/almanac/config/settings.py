"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs:   CLI flags passed by Click
  2. Env vars:      ``ALMANAC_*`` prefix
  3. TOML file:     ``almanac.toml`` discovered via walk-up
  4. Code defaults: baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from almanac.config.discovery import find_config
from almanac.config.models import AlmanacConfig, InputConfig, ResolverConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from an ``almanac.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                raise click.ClickException(f"Invalid TOML in {toml_path}: {exc}") from exc
            try:
                AlmanacConfig.model_validate(self._data)
            except ValidationError as exc:
                raise click.ClickException(f"Invalid config in {toml_path}: {exc}") from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Pydantic builds sources from a classmethod, so the TOML path for the
# current construction is handed over through thread-local storage.
_tls = threading.local()


class AlmanacSettings(BaseSettings):
    """Settings for the almanac CLI, frozen after construction.

    Attributes:
        root: Directory relative input paths resolve against (parent of
            ``almanac.toml``, or CWD if no config was found).
        config_path: The TOML file in use, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "ALMANAC_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    input: InputConfig = Field(default_factory=InputConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **cli_flags: Any,
    ) -> AlmanacSettings:
        """Construct settings from a CLI invocation.

        Uses the explicit *config_path* when given, otherwise walks up from
        *root* (or CWD) for ``almanac.toml``.
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
            return cls(root=resolved_root, config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None

    def input_path(self, override: Path | None = None) -> Path:
        """The data file to read.

        An explicit *override* is used as given; the configured ``[input] path``
        resolves against :attr:`root`.
        """
        if override is not None:
            return override
        path = Path(self.input.path)
        return path if path.is_absolute() else self.root / path
