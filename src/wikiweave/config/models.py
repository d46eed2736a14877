"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, wikiweave.toml only contains
overrides. An empty file (or none at all) is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from wikiweave.domain.backlinks import DEFAULT_CONTEXT_RADIUS
from wikiweave.domain.transclusion import DEFAULT_MAX_DEPTH


class CorpusConfig(BaseModel):
    """[corpus] section."""

    model_config = {"frozen": True}

    extensions: list[str] = Field(default_factory=lambda: [".md"])
    skip_dirs: list[str] = Field(
        default_factory=lambda: [".git", ".obsidian", ".trash", "node_modules"]
    )
    journal_dir: str = "journal"

    @field_validator("extensions")
    @classmethod
    def _dotted(cls, value: list[str]) -> list[str]:
        return [ext if ext.startswith(".") else f".{ext}" for ext in value]


class BacklinksConfig(BaseModel):
    """[backlinks] section."""

    model_config = {"frozen": True}

    context_radius: int = Field(default=DEFAULT_CONTEXT_RADIUS, ge=0)


class TransclusionConfig(BaseModel):
    """[transclusion] section."""

    model_config = {"frozen": True}

    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=0)
