"""Vault — read-only access to the Markdown corpus on disk.

The Vault is the single dependency injected into every service. Each
call to :meth:`Vault.snapshot` reads the corpus afresh and returns an
immutable :class:`CorpusSnapshot`; nothing is cached between calls, so
every request sees current file contents.

A file that cannot be loaded is skipped (and logged) during a snapshot,
never failing the whole corpus. Reading one specific file with
:meth:`Vault.read_file` raises :class:`CorpusUnavailableError` instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import cached_property
from typing import TYPE_CHECKING

from wikiweave.domain.resolve import CorpusIndex, normalize_path
from wikiweave.infrastructure.filesystem import (
    CorpusUnavailableError,
    find_content_files,
    read_corpus_file,
    relative_corpus_path,
)
from wikiweave.infrastructure.graph.engine import GraphEngine

if TYPE_CHECKING:
    from pathlib import Path

    from wikiweave.config.settings import WikiSettings
    from wikiweave.domain.types import CorpusFile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CorpusSnapshot:
    """A materialized corpus plus any files skipped while loading it."""

    index: CorpusIndex
    warnings: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @cached_property
    def graph(self) -> GraphEngine:
        """Link graph over this snapshot (built lazily on first use)."""
        return GraphEngine(self.index)


class Vault:
    """Repository over the corpus directory named by :class:`WikiSettings`.

    Constructed once at CLI startup and stored on the Click context.
    Services receive the Vault via their :class:`BaseService` constructor.
    """

    def __init__(self, settings: WikiSettings) -> None:
        self._settings = settings

    @property
    def root(self) -> Path:
        """The corpus root directory."""
        return self._settings.corpus_root

    @property
    def settings(self) -> WikiSettings:
        """The resolved settings for this vault."""
        return self._settings

    def find_content(self) -> list[Path]:
        """Discover corpus files in enumeration order."""
        corpus_cfg = self._settings.corpus
        return find_content_files(
            self.root,
            extensions=corpus_cfg.extensions,
            skip_dirs=corpus_cfg.skip_dirs,
        )

    def snapshot(self) -> CorpusSnapshot:
        """Load every corpus file into a fresh :class:`CorpusIndex`."""
        files: list[CorpusFile] = []
        warnings: list[str] = []
        skipped: list[str] = []
        for path in self.find_content():
            relative = relative_corpus_path(self.root, path)
            try:
                parsed = read_corpus_file(self.root, relative)
            except CorpusUnavailableError as exc:
                logger.warning("Skipping corpus file %s: %s", exc.path, exc.reason)
                skipped.append(exc.path)
                warnings.append(f"Skipped {exc.path}: {exc.reason}")
                continue
            files.append(parsed.file)
            warnings.extend(parsed.warnings)

        index = CorpusIndex(files, journal_dir=self._settings.corpus.journal_dir)
        for title, paths in index.duplicate_titles().items():
            logger.debug("Title %r shared by %s; links resolve to %s", title, paths, paths[0])
        logger.debug("Loaded corpus snapshot: %d files, %d skipped", len(index), len(skipped))
        return CorpusSnapshot(index=index, warnings=warnings, skipped=skipped)

    def read_file(self, relative_path: str) -> CorpusFile:
        """Read one corpus file.

        Raises:
            CorpusUnavailableError: The file is missing or unreadable, has a
                disallowed extension, sits in a skipped directory, or lies
                outside the corpus root.
        """
        corpus_cfg = self._settings.corpus
        if not any(relative_path.endswith(ext) for ext in corpus_cfg.extensions):
            raise CorpusUnavailableError(relative_path, "not a corpus file type")
        directories = normalize_path(relative_path).split("/")[:-1]
        if any(part in corpus_cfg.skip_dirs for part in directories):
            raise CorpusUnavailableError(relative_path, "inside a skipped directory")
        return read_corpus_file(self.root, relative_path).file
