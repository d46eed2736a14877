"""Filesystem access for the Markdown corpus.

INVARIANT: Files are truth. Nothing derived from them (link graph,
backlinks, blocks) is written back or cached between requests.

Pure parsing lives in :mod:`wikiweave.domain.content` (correct
dependency direction: infrastructure -> domain). This module handles
file discovery, path safety, and reading.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path

from ruamel.yaml.error import YAMLError

from wikiweave.domain.content import ParsedPage, build_corpus_file
from wikiweave.domain.resolve import normalize_path


class CorpusUnavailableError(LookupError):
    """A requested corpus file is missing, unreadable, or malformed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


def resolve_corpus_path(root: Path, relative_path: str) -> Path:
    """Map a corpus-relative path to a filesystem path under *root*.

    Raises:
        CorpusUnavailableError: The path escapes *root*.
    """
    normalized = normalize_path(relative_path)
    result = root / normalized
    if not result.resolve().is_relative_to(root.resolve()):
        raise CorpusUnavailableError(normalized, "path escapes corpus root")
    return result


def find_content_files(
    root: Path,
    *,
    extensions: Iterable[str] = (".md",),
    skip_dirs: Iterable[str] = (),
) -> list[Path]:
    """Discover corpus files in enumeration order.

    Within each directory, files come first (sorted by name), then each
    subdirectory is walked in name order. This order is what the
    resolver's first-occurrence tie-break refers to.
    """
    wanted = frozenset(extensions)
    skipped = frozenset(skip_dirs)
    if not root.is_dir():
        return []
    return list(_walk(root, wanted, skipped))


def _walk(directory: Path, wanted: frozenset[str], skipped: frozenset[str]) -> Iterator[Path]:
    entries = sorted(directory.iterdir(), key=lambda p: p.name)
    for entry in entries:
        if entry.is_file() and entry.suffix in wanted:
            yield entry
    for entry in entries:
        if entry.is_dir() and entry.name not in skipped:
            yield from _walk(entry, wanted, skipped)


def relative_corpus_path(root: Path, path: Path) -> str:
    """Corpus-relative, ``/``-separated form of *path*."""
    return path.relative_to(root).as_posix()


def read_corpus_file(root: Path, relative_path: str) -> ParsedPage:
    """Read and parse one corpus file.

    Raises:
        CorpusUnavailableError: Missing file, unreadable bytes, or
            frontmatter that is not valid YAML.
    """
    path = resolve_corpus_path(root, relative_path)
    normalized = normalize_path(relative_path)
    if not path.is_file():
        raise CorpusUnavailableError(normalized, "file not found")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CorpusUnavailableError(normalized, f"unreadable ({exc})") from exc
    try:
        return build_corpus_file(normalized, text)
    except YAMLError as exc:
        raise CorpusUnavailableError(normalized, f"invalid frontmatter ({exc})") from exc
