"""ContentService — the content-fetch request and its single facets.

``get_content`` is what a page view needs: the file's metadata, its body
with embeds expanded, its blocks, its backlinks and its outgoing links.
Backlinks, blocks and transclusion are independent pure functions of the
same snapshot, so their order here does not matter.
"""

from __future__ import annotations

from typing import Any

from wikiweave.domain.backlinks import find_block_references, get_backlinks
from wikiweave.domain.blocks import get_blocks
from wikiweave.domain.resolve import resolve_links
from wikiweave.domain.transclusion import TransclusionPass
from wikiweave.domain.types import Backlink, Block, CorpusFile
from wikiweave.infrastructure.filesystem import CorpusUnavailableError
from wikiweave.infrastructure.vault import CorpusSnapshot
from wikiweave.services.base import BaseService
from wikiweave.services.result import ServiceResult
from wikiweave.services.telemetry import trace_span, traced


def _file_header(corpus_file: CorpusFile) -> dict[str, Any]:
    return {
        "path": corpus_file.path,
        "title": corpus_file.title,
        "tags": sorted(corpus_file.tags),
        "aliases": list(corpus_file.aliases),
    }


class ContentService(BaseService):
    """Content fetch plus backlink, block and embed queries for one file."""

    # ------------------------------------------------------------------
    # get_content — everything a page view needs
    # ------------------------------------------------------------------

    @traced
    def get_content(self, path: str) -> ServiceResult:
        """Fetch one file with expanded content, blocks, backlinks and links."""
        op = "get_content"
        try:
            target = self._vault.read_file(path)
        except CorpusUnavailableError as exc:
            return self._unavailable(op, exc)

        snapshot = self._snapshot()
        backlinks = self._backlinks(target, snapshot)
        blocks = self._blocks(target)
        content, embed_stats = self._expand(target, snapshot)
        links = resolve_links(target.raw_content, snapshot.index)

        data = _file_header(target)
        data.update(
            {
                "content": content,
                "raw_content": target.raw_content,
                "backlinks": [b.to_dict() for b in backlinks],
                "blocks": [b.to_dict() for b in blocks],
                "links": [link.to_dict() for link in links],
                "embeds": embed_stats,
            }
        )
        return ServiceResult(ok=True, op=op, data=data, warnings=snapshot.warnings)

    # ------------------------------------------------------------------
    # Single facets
    # ------------------------------------------------------------------

    @traced
    def backlinks(self, path: str) -> ServiceResult:
        """Files linking to *path*, in corpus order, with context snippets."""
        op = "backlinks"
        try:
            target = self._vault.read_file(path)
        except CorpusUnavailableError as exc:
            return self._unavailable(op, exc)

        snapshot = self._snapshot()
        items = [b.to_dict() for b in self._backlinks(target, snapshot)]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": target.path,
                "title": target.title,
                "count": len(items),
                "items": items,
            },
            warnings=snapshot.warnings,
        )

    @traced
    def blocks(self, path: str) -> ServiceResult:
        """Addressable paragraph and heading blocks of *path*."""
        op = "blocks"
        try:
            target = self._vault.read_file(path)
        except CorpusUnavailableError as exc:
            return self._unavailable(op, exc)

        items = [b.to_dict() for b in self._blocks(target)]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": target.path,
                "title": target.title,
                "count": len(items),
                "items": items,
            },
        )

    @traced
    def render(self, path: str) -> ServiceResult:
        """Body of *path* with every embed expanded."""
        op = "render"
        try:
            target = self._vault.read_file(path)
        except CorpusUnavailableError as exc:
            return self._unavailable(op, exc)

        snapshot = self._snapshot()
        content, embed_stats = self._expand(target, snapshot)
        data = _file_header(target)
        data.update({"content": content, "embeds": embed_stats})
        return ServiceResult(ok=True, op=op, data=data, warnings=snapshot.warnings)

    @traced
    def block_references(self, path: str, block_id: str) -> ServiceResult:
        """Files that link to or embed block ``block_id`` of *path*."""
        op = "block_references"
        try:
            target = self._vault.read_file(path)
        except CorpusUnavailableError as exc:
            return self._unavailable(op, exc)

        known = {block.id for block in self._blocks(target)}
        if block_id not in known:
            return ServiceResult.failure(
                op,
                "NOT_FOUND",
                f"Block '{block_id}' not found in '{target.path}'",
                path=target.path,
                block_id=block_id,
            )

        snapshot = self._snapshot()
        with trace_span("block_references"):
            refs = find_block_references(
                target.path,
                block_id,
                snapshot.index,
                context_radius=self._vault.settings.backlinks.context_radius,
            )
        items = [ref.to_dict() for ref in refs]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": target.path,
                "block_id": block_id,
                "count": len(items),
                "items": items,
            },
            warnings=snapshot.warnings,
        )

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def _backlinks(self, target: CorpusFile, snapshot: CorpusSnapshot) -> list[Backlink]:
        with trace_span("backlinks") as span:
            backlinks = get_backlinks(
                target.path,
                snapshot.index,
                context_radius=self._vault.settings.backlinks.context_radius,
            )
            if span:
                span.annotate("count", len(backlinks))
        return backlinks

    def _blocks(self, target: CorpusFile) -> list[Block]:
        with trace_span("blocks") as span:
            blocks = get_blocks(target.path, target.raw_content, target.title)
            if span:
                span.annotate("count", len(blocks))
        return blocks

    def _expand(self, target: CorpusFile, snapshot: CorpusSnapshot) -> tuple[str, dict[str, int]]:
        with trace_span("transclusions") as span:
            expansion = TransclusionPass(
                snapshot.index,
                max_depth=self._vault.settings.transclusion.max_depth,
                source_path=target.path,
            )
            content = expansion.run(target.raw_content)
            stats = {"deepest": expansion.deepest, "placeholders": expansion.placeholders}
            if span:
                for key, value in stats.items():
                    span.annotate(key, value)
        return content, stats
