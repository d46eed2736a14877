"""Value types shared by the parser, resolver, indexer and processors.

Corpus files are frozen pydantic models (they cross the infrastructure
boundary and are validated on load). Everything derived from them at
request time is a frozen dataclass: created per pass, never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


def path_stem(path: str) -> str:
    """File name without directory or extension: ``a/b/Page.md`` -> ``Page``."""
    name = path.rsplit("/", 1)[-1]
    return name.rsplit(".", 1)[0] if "." in name else name


class CorpusFile(BaseModel):
    """Immutable snapshot of one Markdown file in the corpus.

    ``raw_content`` is the body with frontmatter already stripped.
    """

    model_config = {"frozen": True}

    path: str
    title: str
    raw_content: str = ""
    tags: frozenset[str] = Field(default_factory=frozenset)
    aliases: tuple[str, ...] = ()

    @property
    def stem(self) -> str:
        return path_stem(self.path)


class LinkKind(StrEnum):
    """Discriminator for parsed link tokens."""

    WIKILINK = "wikilink"
    EMBED = "embed"


@dataclass(frozen=True)
class TextSpan:
    """A run of plain text between link tokens."""

    raw: str
    start: int
    end: int


@dataclass(frozen=True)
class LinkToken:
    """A ``[[...]]`` or ``![[...]]`` construct found in text."""

    kind: LinkKind
    target: str
    raw: str
    start: int
    end: int
    block_ref: str | None = None
    heading_ref: str | None = None
    alias: str | None = None

    @property
    def span(self) -> tuple[int, int]:
        return (self.start, self.end)

    @property
    def is_embed(self) -> bool:
        return self.kind is LinkKind.EMBED

    @property
    def label(self) -> str:
        """Target with its fragment, e.g. ``Page#^blk`` or ``Page#Heading``."""
        if self.block_ref is not None:
            return f"{self.target}#^{self.block_ref}"
        if self.heading_ref is not None:
            return f"{self.target}#{self.heading_ref}"
        return self.target

    @property
    def display(self) -> str:
        return self.alias or self.label


@dataclass(frozen=True)
class ResolvedLink:
    """A link token paired with its corpus target (None = broken link)."""

    token: LinkToken
    target_file: CorpusFile | None

    @property
    def resolved(self) -> bool:
        return self.target_file is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": str(self.token.kind),
            "target": self.token.label,
            "alias": self.token.alias,
            "resolved": self.resolved,
            "path": self.target_file.path if self.target_file else None,
            "title": self.target_file.title if self.target_file else None,
        }


@dataclass(frozen=True)
class Backlink:
    """Reverse edge: *source_file* links to the queried target."""

    source_file: str
    source_title: str
    context: str
    occurrences: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_file": self.source_file,
            "source_title": self.source_title,
            "context": self.context,
            "occurrences": self.occurrences,
        }


class BlockKind(StrEnum):
    """How a block was delimited in its file."""

    PARAGRAPH = "paragraph"
    HEADING = "heading"


@dataclass(frozen=True)
class Block:
    """An addressable sub-range of one file. Identity is ``(file, id)``."""

    id: str
    file: str
    file_title: str
    content: str
    start_offset: int
    end_offset: int
    kind: BlockKind = BlockKind.PARAGRAPH
    line: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": str(self.kind),
            "file": self.file,
            "file_title": self.file_title,
            "content": self.content,
            "start_offset": self.start_offset,
            "end_offset": self.end_offset,
            "line": self.line,
        }
