"""BaseService — shared foundation for wikiweave services.

Every service receives a :class:`Vault` at construction time and loads a
fresh corpus snapshot per operation. Services never raise for content
problems; they return a :class:`ServiceResult`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from wikiweave.services.result import ServiceResult
from wikiweave.services.telemetry import trace_span

if TYPE_CHECKING:
    from wikiweave.infrastructure.filesystem import CorpusUnavailableError
    from wikiweave.infrastructure.vault import CorpusSnapshot, Vault


class BaseService:
    """Base for service-layer classes.

    Usage::

        class ContentService(BaseService):
            def backlinks(self, path: str) -> ServiceResult:
                snapshot = self._snapshot()
                ...
    """

    def __init__(self, vault: Vault) -> None:
        self._vault = vault

    def _snapshot(self) -> CorpusSnapshot:
        """Load the corpus inside a ``load_corpus`` telemetry span."""
        with trace_span("load_corpus") as span:
            snapshot = self._vault.snapshot()
            if span:
                span.annotate("files", len(snapshot.index))
                span.annotate("skipped", len(snapshot.skipped))
        return snapshot

    @staticmethod
    def _unavailable(op: str, exc: CorpusUnavailableError) -> ServiceResult:
        """Translate a missing/unreadable file into a NOT_FOUND result."""
        return ServiceResult.failure(
            op,
            "NOT_FOUND",
            f"File '{exc.path}' is unavailable: {exc.reason}",
            path=exc.path,
            reason=exc.reason,
        )
