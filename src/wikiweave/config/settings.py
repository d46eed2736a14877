"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``WIKIWEAVE_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``wikiweave.toml`` discovered via walk-up
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from wikiweave.config.discovery import find_config
from wikiweave.config.models import BacklinksConfig, CorpusConfig, TransclusionConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``wikiweave.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# The TOML path is handed to settings_customise_sources, which pydantic
# calls as a classmethod with no per-instance arguments.
_tls = threading.local()


class WikiSettings(BaseSettings):
    """Unified settings for the wikiweave CLI.

    Attributes:
        corpus_root: Directory holding the Markdown corpus (``--root``,
            else the config file's directory, else CWD).
        config_path: The TOML file in use, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "WIKIWEAVE_",
        "env_nested_delimiter": "__",
    }

    corpus_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    corpus: CorpusConfig = Field(default_factory=CorpusConfig)
    backlinks: BacklinksConfig = Field(default_factory=BacklinksConfig)
    transclusion: TransclusionConfig = Field(default_factory=TransclusionConfig)

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
        corpus_root: Path | None = None,
        **cli_flags: Any,
    ) -> WikiSettings:
        """Construct settings from a CLI invocation.

        Discovers ``wikiweave.toml`` via walk-up from *corpus_root* (or
        uses the explicit *config_path*) and merges CLI flags as the
        highest-priority overrides.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if not p.is_file():
                msg = f"Config file not found: {config_path}"
                raise click.ClickException(msg)
            toml_path = p
        else:
            toml_path = find_config(corpus_root)

        # Without --root, the config file's directory is the corpus; with
        # neither, WIKIWEAVE_CORPUS_ROOT or the CWD applies.
        if corpus_root is None and toml_path is not None:
            corpus_root = toml_path.parent
        if corpus_root is not None:
            cli_flags["corpus_root"] = corpus_root

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None
