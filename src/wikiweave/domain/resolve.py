"""Title/path resolver — map a link target name to one corpus file.

Resolution order (first match wins):

1. Exact path, only for path-like names (``/`` or ``\\`` separator, or a
   file extension); ``.md`` is appended when missing.
2. Title, case-insensitive.
3. Alias, case-insensitive.
4. Daily-note date ``YYYY-MM-DD`` -> ``{journal_dir}/{date}.md``, ahead of
   any other file with the same stem.
5. File name stem, case-insensitive.

Ties on titles, aliases and stems are broken by corpus enumeration
order. That policy is deterministic but arbitrary: it does not reflect
relevance, and files sharing a title are a common source of surprising
backlinks (see :meth:`CorpusIndex.duplicate_titles`).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator

from wikiweave.domain.links import extract_links
from wikiweave.domain.types import CorpusFile, ResolvedLink

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".md"
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_EXTENSION_PATTERN = re.compile(r"\.[A-Za-z0-9]{1,8}$")


def normalize_path(value: str) -> str:
    """Normalize a corpus-relative path: ``/`` separators, no leading ``./`` or ``/``."""
    normalized = value.strip().replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized.lstrip("/")


def looks_like_path(name: str) -> bool:
    """Whether *name* should be tried as a path before title lookups."""
    return "/" in name or "\\" in name or _EXTENSION_PATTERN.search(name) is not None


def is_valid_alias(alias: str) -> bool:
    """An alias must be non-blank and free of wikilink syntax characters."""
    if not alias or not alias.strip():
        return False
    return not ("[[" in alias or "]]" in alias or "|" in alias)


class CorpusIndex:
    """Ordered, immutable view of the corpus with first-wins lookup tables.

    Built fresh per request from the file snapshot. *files* must have
    unique paths; a repeated path keeps its first occurrence.
    """

    def __init__(
        self,
        files: Iterable[CorpusFile],
        *,
        journal_dir: str = "journal",
    ) -> None:
        self._files: list[CorpusFile] = []
        self._by_path: dict[str, CorpusFile] = {}
        self._by_title: dict[str, CorpusFile] = {}
        self._by_alias: dict[str, CorpusFile] = {}
        self._by_stem: dict[str, CorpusFile] = {}
        self._title_counts: dict[str, int] = {}
        self._journal_dir = normalize_path(journal_dir).rstrip("/")

        for corpus_file in files:
            if corpus_file.path in self._by_path:
                logger.warning("Duplicate corpus path ignored: %s", corpus_file.path)
                continue
            self._files.append(corpus_file)
            self._by_path[corpus_file.path] = corpus_file

            title_key = corpus_file.title.casefold()
            self._by_title.setdefault(title_key, corpus_file)
            self._title_counts[title_key] = self._title_counts.get(title_key, 0) + 1
            for alias in corpus_file.aliases:
                self._by_alias.setdefault(alias.casefold(), corpus_file)
            self._by_stem.setdefault(corpus_file.stem.casefold(), corpus_file)

    def __iter__(self) -> Iterator[CorpusFile]:
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and normalize_path(path) in self._by_path

    @property
    def files(self) -> list[CorpusFile]:
        return list(self._files)

    def get(self, path: str) -> CorpusFile | None:
        """Exact lookup by corpus-relative path."""
        return self._by_path.get(normalize_path(path))

    def resolve(self, name: str) -> CorpusFile | None:
        """Return the best-matching file for a link target, or None."""
        name = name.strip()
        if not name:
            return None

        if looks_like_path(name):
            found = self._lookup_path(name)
            if found is not None:
                return found

        key = name.casefold()
        found = self._by_title.get(key)
        if found is not None:
            if self._title_counts.get(key, 0) > 1:
                logger.debug(
                    "Ambiguous title %r resolved to first match %s", name, found.path
                )
            return found

        found = self._by_alias.get(key)
        if found is not None:
            return found

        if _DATE_PATTERN.match(name):
            found = self._by_path.get(f"{self._journal_dir}/{name}{DEFAULT_EXTENSION}")
            if found is not None:
                return found

        return self._by_stem.get(key.removesuffix(DEFAULT_EXTENSION))

    def _lookup_path(self, name: str) -> CorpusFile | None:
        path = normalize_path(name)
        found = self._by_path.get(path)
        if found is None and not path.endswith(DEFAULT_EXTENSION):
            found = self._by_path.get(path + DEFAULT_EXTENSION)
        return found

    def duplicate_titles(self) -> dict[str, list[str]]:
        """Map each title shared by several files to their paths, in order."""
        groups: dict[str, list[str]] = {}
        for corpus_file in self._files:
            key = corpus_file.title.casefold()
            if self._title_counts.get(key, 0) > 1:
                title = self._by_title[key].title
                groups.setdefault(title, []).append(corpus_file.path)
        return groups


def resolve_links(text: str, corpus: CorpusIndex) -> list[ResolvedLink]:
    """Parse *text* and resolve every link token against *corpus*."""
    return [
        ResolvedLink(token=token, target_file=corpus.resolve(token.target))
        for token in extract_links(text)
    ]
