"""Page content — frontmatter parsing and CorpusFile construction.

Only the keys the link engine needs are read from frontmatter: ``title``,
``tags`` and ``aliases``. Everything else is ignored. ``tags`` and
``aliases`` may be YAML lists or comma-separated strings.

Pure functions: callers hand in already-read text. File I/O lives in
:mod:`wikiweave.infrastructure.filesystem`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field, field_validator
from ruamel.yaml import YAML

from wikiweave.domain.resolve import is_valid_alias, normalize_path
from wikiweave.domain.types import CorpusFile, path_stem

_FRONTMATTER_DELIMITER = "---"


def _new_yaml() -> YAML:
    """Create a fresh round-trip YAML parser.

    ruamel.yaml's YAML object is stateful; a new instance per call keeps
    a failed load from leaking into the next file.
    """
    y = YAML()
    y.preserve_quotes = True
    return y


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Split YAML frontmatter from a Markdown body.

    Expects ``---`` on the first line; the next ``---`` line closes the
    YAML block. Handles ``\\n`` and ``\\r\\n`` line endings.

    Returns:
        ``(frontmatter_dict, body_text)``. Without valid delimiters the
        result is ``({}, content)``.

    Raises:
        ruamel.yaml.error.YAMLError: The frontmatter block is not valid YAML.
    """
    normalized = content.replace("\r\n", "\n")
    lines = normalized.split("\n")
    if not lines or lines[0].strip() != _FRONTMATTER_DELIMITER:
        return {}, content

    end_idx: int | None = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == _FRONTMATTER_DELIMITER:
            end_idx = i
            break

    if end_idx is None:
        return {}, content

    yaml_block = "\n".join(lines[1:end_idx])
    body = "\n".join(lines[end_idx + 1 :])
    if body.startswith("\n"):
        body = body[1:]

    loaded = _new_yaml().load(yaml_block)
    fm: dict[str, Any] = dict(loaded) if isinstance(loaded, dict) else {}
    return fm, body


def _string_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple, set)):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    return [str(value).strip()]


class PageFrontmatter(BaseModel):
    """The frontmatter keys the link engine reads."""

    model_config = {"frozen": True, "extra": "ignore"}

    title: str | None = None
    tags: list[str] = Field(default_factory=list)
    aliases: list[str] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("tags", "aliases", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> list[str]:
        return _string_list(value)


@dataclass(frozen=True)
class ParsedPage:
    """A CorpusFile plus non-fatal issues found while building it."""

    file: CorpusFile
    warnings: list[str] = field(default_factory=list)


def build_corpus_file(path: str, text: str) -> ParsedPage:
    """Turn one file's raw text into a :class:`CorpusFile`.

    The title falls back to the file name stem. Aliases that contain
    wikilink syntax (``[[``, ``]]``, ``|``) are dropped with a warning.
    """
    fm_data, body = parse_frontmatter(text)
    fm = PageFrontmatter.model_validate(fm_data)
    normalized_path = normalize_path(path)

    warnings: list[str] = []
    aliases: list[str] = []
    for alias in fm.aliases:
        if is_valid_alias(alias):
            aliases.append(alias)
        else:
            warnings.append(f"{normalized_path}: ignoring invalid alias {alias!r}")

    corpus_file = CorpusFile(
        path=normalized_path,
        title=fm.title or path_stem(normalized_path),
        raw_content=body,
        tags=frozenset(fm.tags),
        aliases=tuple(aliases),
    )
    return ParsedPage(file=corpus_file, warnings=warnings)
