"""Tests for the backlink indexer and link context snippets."""

from __future__ import annotations

from tests.conftest import corpus, page
from wikiweave.domain.backlinks import (
    build_backlink_map,
    find_block_references,
    get_backlinks,
    get_outgoing_links,
    link_context,
)
from wikiweave.domain.types import Backlink


class TestGetBacklinks:
    def test_corpus_order_and_context(self) -> None:
        idx = corpus(
            page("A.md", "I like [[Target]] a lot."),
            page("B.md", "nothing here"),
            page("C.md", "See ![[Target]]"),
            page("Target.md", "the target"),
        )
        assert get_backlinks("Target.md", idx) == [
            Backlink("A.md", "A", "I like [[Target]] a lot.", 1),
            Backlink("C.md", "C", "See ![[Target]]", 1),
        ]

    def test_excludes_self_links(self) -> None:
        idx = corpus(page("Target.md", "I link to [[Target]] myself"))
        assert get_backlinks("Target.md", idx) == []

    def test_one_entry_per_source_with_count(self) -> None:
        idx = corpus(
            page("A.md", "First [[Target]].\n\nSecond [[Target|again]] and ![[Target#^b]]."),
            page("Target.md"),
        )
        (backlink,) = get_backlinks("Target.md", idx)
        assert backlink.occurrences == 3
        assert backlink.context == "First [[Target]]."

    def test_links_resolved_through_alias(self) -> None:
        idx = corpus(
            page("A.md", "Doing [[work]] today"),
            page("notes/Projects.md", aliases=("Work",)),
        )
        (backlink,) = get_backlinks("notes/Projects.md", idx)
        assert backlink.source_file == "A.md"

    def test_ambiguous_title_counts_only_for_first_match(self) -> None:
        idx = corpus(
            page("first/Dup.md", title="Dup"),
            page("second/Dup.md", title="Dup"),
            page("A.md", "[[Dup]]"),
        )
        assert len(get_backlinks("first/Dup.md", idx)) == 1
        assert get_backlinks("second/Dup.md", idx) == []

    def test_unknown_target(self) -> None:
        idx = corpus(page("A.md", "[[Missing]]"))
        assert get_backlinks("Missing.md", idx) == []

    def test_links_in_code_are_ignored(self) -> None:
        idx = corpus(page("A.md", "`[[Target]]`"), page("Target.md"))
        assert get_backlinks("Target.md", idx) == []

    def test_links_in_tilde_fence_are_ignored(self) -> None:
        idx = corpus(page("A.md", "~~~\n[[Target]]\n~~~\n"), page("Target.md"))
        assert get_backlinks("Target.md", idx) == []

    def test_context_radius_from_argument(self) -> None:
        idx = corpus(page("A.md", "0123456789 [[Target]] 0123456789"), page("Target.md"))
        (backlink,) = get_backlinks("Target.md", idx, context_radius=3)
        assert backlink.context == "...89 [[Target]] 01..."


class TestLinkContext:
    def test_whole_paragraph_when_short(self) -> None:
        text = "Intro para.\n\nThe [[Link]] is here.\n\nOutro."
        start = text.index("[[")
        assert link_context(text, start, start + 8) == "The [[Link]] is here."

    def test_collapses_whitespace(self) -> None:
        text = "line one\nwith   [[Link]]\n  and more"
        start = text.index("[[")
        assert link_context(text, start, start + 8) == "line one with [[Link]] and more"

    def test_truncation_marks_both_sides(self) -> None:
        text = "a" * 100 + "[[L]]" + "b" * 100
        ctx = link_context(text, 100, 105, radius=10)
        assert ctx == "..." + "a" * 10 + "[[L]]" + "b" * 10 + "..."

    def test_zero_radius(self) -> None:
        text = "before [[L]] after"
        assert link_context(text, 7, 12, radius=0) == "...[[L]]..."


class TestBuildBacklinkMap:
    def test_matches_per_target_queries(self) -> None:
        idx = corpus(
            page("A.md", "[[B]] [[C]] [[B]]"),
            page("B.md", "[[A]] [[B]]"),
            page("C.md", "[[Nowhere]]"),
        )
        mapping = build_backlink_map(idx)
        for target in ("A.md", "B.md", "C.md"):
            assert mapping.get(target, []) == get_backlinks(target, idx)
        assert mapping["B.md"][0].occurrences == 2


class TestOutgoingLinks:
    def test_resolved_and_broken(self) -> None:
        idx = corpus(page("A.md", "[[B]] [[Missing]]"), page("B.md"))
        links = get_outgoing_links("A.md", idx)
        assert [(link.token.target, link.resolved) for link in links] == [
            ("B", True),
            ("Missing", False),
        ]

    def test_unknown_path(self) -> None:
        assert get_outgoing_links("nope.md", corpus()) == []


class TestBlockReferences:
    def test_filters_on_block_id(self) -> None:
        idx = corpus(
            page("A.md", "![[T#^core]] and [[T#^other]]"),
            page("B.md", "[[T#^core]] [[T#^core|again]]"),
            page("C.md", "[[T]]"),
            page("T.md", "Text\n^core\n\nself ![[T#^core]]"),
        )
        refs = find_block_references("T.md", "core", idx)
        assert [(r.source_file, r.occurrences) for r in refs] == [
            ("A.md", 1),
            ("B.md", 2),
            ("T.md", 1),
        ]

    def test_unknown_target(self) -> None:
        assert find_block_references("T.md", "x", corpus()) == []
