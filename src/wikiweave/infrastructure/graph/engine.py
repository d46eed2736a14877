"""GraphEngine — lazy-built NetworkX graph from one corpus snapshot.

Rebuilt per request, no cross-request cache. Nodes are corpus paths;
an edge ``a -> b`` means some link in ``a`` resolves to ``b``. Self-links
and unresolved links do not become edges.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeAlias

import networkx as nx

from wikiweave.domain.resolve import resolve_links

if TYPE_CHECKING:
    from wikiweave.domain.resolve import CorpusIndex

_Graph: TypeAlias = nx.DiGraph


class GraphEngine:
    """Lazy-loading link graph over a :class:`CorpusIndex`."""

    def __init__(self, corpus: CorpusIndex) -> None:
        self._corpus = corpus
        self._graph: _Graph | None = None

    @property
    def graph(self) -> _Graph:
        """Return the graph, building it on first access."""
        if self._graph is None:
            self._graph = self._build()
        return self._graph

    def _build(self) -> _Graph:
        """Add every file as a node, then one weighted edge per linked pair.

        ``weight`` counts all links between the pair; ``embeds`` counts
        the subset that are ``![[...]]`` embeds.
        """
        g: _Graph = nx.DiGraph()
        for corpus_file in self._corpus:
            g.add_node(corpus_file.path, title=corpus_file.title)

        for source in self._corpus:
            for link in resolve_links(source.raw_content, self._corpus):
                target = link.target_file
                if target is None or target.path == source.path:
                    continue
                if g.has_edge(source.path, target.path):
                    attrs = g.edges[source.path, target.path]
                    attrs["weight"] += 1
                    attrs["embeds"] += int(link.token.is_embed)
                else:
                    g.add_edge(
                        source.path,
                        target.path,
                        weight=1,
                        embeds=int(link.token.is_embed),
                    )
        return g
