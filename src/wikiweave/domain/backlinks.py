"""Backlink indexer — invert resolved links across the corpus.

There is no persisted link index: every query rescans the corpus
snapshot, so results always reflect the current file contents at
O(files x content length) cost per query. Results follow corpus
enumeration order and exclude self-links.
"""

from __future__ import annotations

import re

from wikiweave.domain.links import extract_links
from wikiweave.domain.resolve import CorpusIndex, resolve_links
from wikiweave.domain.types import Backlink, CorpusFile, LinkToken, ResolvedLink

DEFAULT_CONTEXT_RADIUS = 80
_PARAGRAPH_BREAK = re.compile(r"\n[ \t]*\n")
_ELLIPSIS = "..."


def link_context(
    text: str,
    start: int,
    end: int,
    *,
    radius: int = DEFAULT_CONTEXT_RADIUS,
) -> str:
    """Excerpt of *text* around ``text[start:end]``.

    Takes up to *radius* characters on each side, never crossing the
    enclosing paragraph. Whitespace is collapsed and ``...`` marks a cut
    made inside the paragraph.
    """
    para_start = 0
    for match in _PARAGRAPH_BREAK.finditer(text, 0, start):
        para_start = match.end()
    next_break = _PARAGRAPH_BREAK.search(text, end)
    para_end = next_break.start() if next_break else len(text)

    lo = max(para_start, start - radius)
    hi = min(para_end, end + radius)
    snippet = " ".join(text[lo:hi].split())
    if lo > para_start:
        snippet = _ELLIPSIS + snippet
    if hi < para_end:
        snippet += _ELLIPSIS
    return snippet


def _matching_tokens(
    source: CorpusFile,
    target: CorpusFile,
    corpus: CorpusIndex,
) -> list[LinkToken]:
    matches: list[LinkToken] = []
    for token in extract_links(source.raw_content):
        resolved = corpus.resolve(token.target)
        if resolved is not None and resolved.path == target.path:
            matches.append(token)
    return matches


def _to_backlink(
    source: CorpusFile,
    tokens: list[LinkToken],
    *,
    radius: int,
) -> Backlink:
    first = tokens[0]
    return Backlink(
        source_file=source.path,
        source_title=source.title,
        context=link_context(source.raw_content, first.start, first.end, radius=radius),
        occurrences=len(tokens),
    )


def get_backlinks(
    target_path: str,
    corpus: CorpusIndex,
    *,
    context_radius: int = DEFAULT_CONTEXT_RADIUS,
) -> list[Backlink]:
    """Return one Backlink per other file linking to *target_path*.

    Wikilinks and embeds both count. The context comes from the first
    matching link in each source; ``occurrences`` counts all of them.
    An unknown *target_path* yields an empty list.
    """
    target = corpus.get(target_path)
    if target is None:
        return []

    backlinks: list[Backlink] = []
    for source in corpus:
        if source.path == target.path:
            continue
        tokens = _matching_tokens(source, target, corpus)
        if tokens:
            backlinks.append(_to_backlink(source, tokens, radius=context_radius))
    return backlinks


def build_backlink_map(
    corpus: CorpusIndex,
    *,
    context_radius: int = DEFAULT_CONTEXT_RADIUS,
) -> dict[str, list[Backlink]]:
    """Invert every resolved link in one pass: target path -> backlinks.

    Equivalent to calling :func:`get_backlinks` for every file, without
    rescanning the corpus per target.
    """
    grouped: dict[str, dict[str, tuple[CorpusFile, list[LinkToken]]]] = {}
    for source in corpus:
        for link in resolve_links(source.raw_content, corpus):
            if link.target_file is None or link.target_file.path == source.path:
                continue
            per_source = grouped.setdefault(link.target_file.path, {})
            per_source.setdefault(source.path, (source, []))[1].append(link.token)

    return {
        target_path: [
            _to_backlink(source, tokens, radius=context_radius)
            for source, tokens in per_source.values()
        ]
        for target_path, per_source in grouped.items()
    }


def get_outgoing_links(path: str, corpus: CorpusIndex) -> list[ResolvedLink]:
    """Resolve every link in the file at *path* (empty if unknown)."""
    source = corpus.get(path)
    if source is None:
        return []
    return resolve_links(source.raw_content, corpus)


def find_block_references(
    target_path: str,
    block_id: str,
    corpus: CorpusIndex,
    *,
    context_radius: int = DEFAULT_CONTEXT_RADIUS,
) -> list[Backlink]:
    """Files that link to or embed ``target#^block_id``, with counts.

    Unlike :func:`get_backlinks`, the target file itself is included:
    a page may embed one of its own blocks.
    """
    target = corpus.get(target_path)
    if target is None:
        return []

    references: list[Backlink] = []
    for source in corpus:
        tokens = [
            token
            for token in _matching_tokens(source, target, corpus)
            if token.block_ref == block_id
        ]
        if tokens:
            references.append(_to_backlink(source, tokens, radius=context_radius))
    return references
