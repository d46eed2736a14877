"""Transclusion processor — expand ``![[...]]`` embeds recursively.

Each embed is replaced by the text it points at: the whole file for
``![[Page]]``, one block for ``![[Page#^id]]``, one heading section for
``![[Page#Heading]]``. Substituted text is parsed again, so embeds nest.
The rewrite is textual: heading levels and offsets are not reconciled.

Expansion never raises for content problems. Instead it substitutes a
visible placeholder:

- ``[broken embed: X]``: the target (or its block/heading) does not exist.
- ``[circular embed: X]``: the ``(path, fragment)`` key is already being
  expanded further up the current recursion path.
- ``[embed depth exceeded: X]``: expanding would go past ``max_depth``.

Recursion state lives on a :class:`TransclusionPass` created per
top-level call, so concurrent calls share nothing.
"""

from __future__ import annotations

import logging
from typing import TypeAlias

from wikiweave.domain.blocks import block_key, blocks_by_id, get_blocks
from wikiweave.domain.links import tokenize
from wikiweave.domain.resolve import CorpusIndex
from wikiweave.domain.types import Block, CorpusFile, LinkToken

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 8

BROKEN_EMBED = "[broken embed: {label}]"
CIRCULAR_EMBED = "[circular embed: {label}]"
DEPTH_EXCEEDED = "[embed depth exceeded: {label}]"

_ExpansionKey: TypeAlias = tuple[str, str | None]


class TransclusionPass:
    """One depth-first expansion over a corpus snapshot.

    Attributes:
        deepest: Deepest nesting level actually expanded (0 = no embeds).
        placeholders: Number of placeholders emitted during the pass.
    """

    def __init__(
        self,
        corpus: CorpusIndex,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        source_path: str | None = None,
    ) -> None:
        if max_depth < 0:
            msg = f"max_depth must be >= 0, got {max_depth}"
            raise ValueError(msg)
        self._corpus = corpus
        self._max_depth = max_depth
        self._active: set[_ExpansionKey] = set()
        self._block_cache: dict[str, dict[str, Block]] = {}
        self.deepest = 0
        self.placeholders = 0

        if source_path is not None:
            source = corpus.get(source_path)
            if source is not None:
                self._active.add((source.path, None))

    def run(self, content: str) -> str:
        return self._expand(content, 0)

    def _expand(self, text: str, depth: int) -> str:
        parts: list[str] = []
        for part in tokenize(text):
            if isinstance(part, LinkToken) and part.is_embed:
                parts.append(self._substitute(part, depth))
            else:
                parts.append(part.raw)
        return "".join(parts)

    def _substitute(self, token: LinkToken, depth: int) -> str:
        target = self._corpus.resolve(token.target)
        if target is None:
            return self._placeholder(BROKEN_EMBED, token)

        fragment = block_key(block_ref=token.block_ref, heading_ref=token.heading_ref)
        key: _ExpansionKey = (target.path, fragment)
        if key in self._active:
            logger.debug("Circular embed %s at depth %d", token.label, depth)
            return self._placeholder(CIRCULAR_EMBED, token)
        if depth >= self._max_depth:
            logger.debug("Embed depth limit %d reached at %s", self._max_depth, token.label)
            return self._placeholder(DEPTH_EXCEEDED, token)

        content = self._content_for(target, token, fragment)
        if content is None:
            return self._placeholder(BROKEN_EMBED, token)

        self._active.add(key)
        try:
            self.deepest = max(self.deepest, depth + 1)
            return self._expand(content, depth + 1)
        finally:
            self._active.discard(key)

    def _content_for(
        self,
        target: CorpusFile,
        token: LinkToken,
        fragment: str | None,
    ) -> str | None:
        if fragment is None:
            if token.block_ref is not None or token.heading_ref is not None:
                return None
            return target.raw_content.rstrip()

        blocks = self._block_cache.get(target.path)
        if blocks is None:
            blocks = blocks_by_id(get_blocks(target.path, target.raw_content, target.title))
            self._block_cache[target.path] = blocks
        block = blocks.get(fragment)
        return block.content if block is not None else None

    def _placeholder(self, template: str, token: LinkToken) -> str:
        self.placeholders += 1
        return template.format(label=token.label)


def process_transclusions(
    content: str,
    corpus: CorpusIndex,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    source_path: str | None = None,
) -> str:
    """Return *content* with every embed expanded against *corpus*.

    Args:
        content: Raw Markdown body to rewrite.
        corpus: Snapshot used to resolve embed targets.
        max_depth: Maximum nesting of embedded content.
        source_path: Path of the file *content* came from, if any. Marks
            that file as already being expanded, so a page embedding
            itself is reported as circular right away.
    """
    return TransclusionPass(corpus, max_depth=max_depth, source_path=source_path).run(content)
