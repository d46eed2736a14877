"""GraphService — corpus-wide link analysis over a NetworkX DiGraph.

The graph is built lazily from the request's corpus snapshot
(``snapshot.graph.graph``); nothing is persisted between requests.
"""

from __future__ import annotations

from typing import Any

import networkx as nx

from wikiweave.domain.resolve import resolve_links
from wikiweave.services.base import BaseService
from wikiweave.services.result import ServiceResult
from wikiweave.services.telemetry import trace_span, traced


def _node_item(g: nx.DiGraph, node: str, **extra: Any) -> dict[str, Any]:
    return {"path": node, "title": g.nodes[node].get("title", ""), **extra}


class GraphService(BaseService):
    """Handles link-graph queries."""

    # ------------------------------------------------------------------
    # neighbors — direct links in and out of one file
    # ------------------------------------------------------------------

    @traced
    def neighbors(self, path: str) -> ServiceResult:
        """Files *path* links to (``outgoing``) and files linking to it (``incoming``)."""
        snapshot = self._snapshot()
        target = snapshot.index.get(path)
        if target is None:
            return ServiceResult.failure(
                "neighbors",
                "NOT_FOUND",
                f"File '{path}' not found in corpus",
                path=path,
            )

        with trace_span("build_graph"):
            g = snapshot.graph.graph
        outgoing = [
            _node_item(g, node, weight=g.edges[target.path, node]["weight"])
            for node in g.successors(target.path)
        ]
        incoming = [
            _node_item(g, node, weight=g.edges[node, target.path]["weight"])
            for node in g.predecessors(target.path)
        ]
        return ServiceResult(
            ok=True,
            op="neighbors",
            data={
                "path": target.path,
                "title": target.title,
                "outgoing": outgoing,
                "incoming": incoming,
                "count": len(set(g.successors(target.path)) | set(g.predecessors(target.path))),
            },
            warnings=snapshot.warnings,
        )

    # ------------------------------------------------------------------
    # orphans — no resolved links in either direction
    # ------------------------------------------------------------------

    @traced
    def orphans(self) -> ServiceResult:
        """Files with no resolved links in or out, in corpus order."""
        snapshot = self._snapshot()
        with trace_span("build_graph"):
            g = snapshot.graph.graph
        items = [_node_item(g, node) for node in g.nodes if g.degree(node) == 0]
        return ServiceResult(
            ok=True,
            op="orphans",
            data={"count": len(items), "items": items},
            warnings=snapshot.warnings,
        )

    # ------------------------------------------------------------------
    # hubs — heavily connected files
    # ------------------------------------------------------------------

    @traced
    def hubs(self, *, threshold: int = 3) -> ServiceResult:
        """Files whose distinct in + out neighbour count is at least *threshold*."""
        if threshold < 1:
            return ServiceResult.failure(
                "hubs",
                "INVALID_ARGUMENT",
                f"threshold must be >= 1, got {threshold}",
            )

        snapshot = self._snapshot()
        with trace_span("build_graph"):
            g = snapshot.graph.graph

        items: list[dict[str, Any]] = []
        for node in g.nodes:
            connections = len(set(g.successors(node)) | set(g.predecessors(node)))
            if connections >= threshold:
                items.append(
                    _node_item(
                        g,
                        node,
                        connections=connections,
                        in_degree=g.in_degree(node),
                        out_degree=g.out_degree(node),
                    )
                )
        items.sort(key=lambda item: item["connections"], reverse=True)
        return ServiceResult(
            ok=True,
            op="hubs",
            data={"threshold": threshold, "count": len(items), "items": items},
            warnings=snapshot.warnings,
        )

    # ------------------------------------------------------------------
    # broken — unresolved link targets
    # ------------------------------------------------------------------

    @traced
    def broken(self) -> ServiceResult:
        """Every link whose target matches no file, grouped by source file."""
        snapshot = self._snapshot()
        items: list[dict[str, Any]] = []
        total = 0
        with trace_span("resolve_links"):
            for source in snapshot.index:
                targets = [
                    link.token.label
                    for link in resolve_links(source.raw_content, snapshot.index)
                    if not link.resolved
                ]
                if targets:
                    total += len(targets)
                    items.append({"path": source.path, "title": source.title, "targets": targets})
        return ServiceResult(
            ok=True,
            op="broken",
            data={"count": len(items), "links": total, "items": items},
            warnings=snapshot.warnings,
        )
