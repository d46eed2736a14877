"""Tests for ContentService — page fetch, backlinks, blocks and embeds."""

from __future__ import annotations

from pathlib import Path

from tests.conftest import write_page
from wikiweave.config.settings import WikiSettings
from wikiweave.infrastructure.vault import Vault
from wikiweave.services.content import ContentService


class TestGetContent:
    def test_page_view(self, vault: Vault) -> None:
        result = ContentService(vault).get_content("Home.md")
        assert result.ok
        assert result.op == "get_content"
        d = result.data
        assert d["path"] == "Home.md"
        assert d["title"] == "Home"
        assert d["tags"] == ["index"]
        assert d["content"] == (
            "Welcome. See [[Projects]] and [[Ideas]].\n\nCore idea: Ideas are cheap.\n"
        )
        assert d["raw_content"].endswith("Core idea: ![[Ideas#^core]]\n")
        assert [b["source_file"] for b in d["backlinks"]] == ["Ideas.md", "notes/Projects.md"]
        assert d["blocks"] == []
        assert [(lnk["target"], lnk["path"]) for lnk in d["links"]] == [
            ("Projects", "notes/Projects.md"),
            ("Ideas", "Ideas.md"),
            ("Ideas#^core", "Ideas.md"),
        ]
        assert d["embeds"] == {"deepest": 1, "placeholders": 0}

    def test_missing_file(self, vault: Vault) -> None:
        result = ContentService(vault).get_content("Nope.md")
        assert not result.ok
        assert result.error.code == "NOT_FOUND"
        assert result.error.detail["path"] == "Nope.md"

    def test_file_in_skipped_directory(self, vault: Vault, corpus_root: Path) -> None:
        write_page(corpus_root, ".obsidian/Loop.md", "Again: ![[Home]]")
        result = ContentService(vault).get_content(".obsidian/Loop.md")
        assert not result.ok
        assert result.error.code == "NOT_FOUND"
        assert result.error.detail["reason"] == "inside a skipped directory"

    def test_self_embed_is_circular(self, vault: Vault, corpus_root: Path) -> None:
        write_page(corpus_root, "Loop.md", "Again: ![[Loop]]")
        result = ContentService(vault).get_content("Loop.md")
        assert result.data["content"] == "Again: [circular embed: Loop]"
        assert result.data["embeds"]["placeholders"] == 1

    def test_skipped_files_become_warnings(self, vault: Vault, corpus_root: Path) -> None:
        write_page(corpus_root, "Bad.md", "---\ntitle: [oops\n---\n")
        result = ContentService(vault).get_content("Home.md")
        assert result.ok
        assert any("Bad.md" in w for w in result.warnings)

    def test_max_depth_from_settings(self, corpus_root: Path) -> None:
        (corpus_root / "wikiweave.toml").write_text("[transclusion]\nmax_depth = 0\n")
        vault = Vault(WikiSettings.from_cli(corpus_root=corpus_root))
        result = ContentService(vault).render("Home.md")
        assert "[embed depth exceeded: Ideas#^core]" in result.data["content"]


class TestBacklinks:
    def test_backlinks(self, vault: Vault) -> None:
        result = ContentService(vault).backlinks("notes/Projects.md")
        assert result.ok
        assert result.data["count"] == 2
        items = result.data["items"]
        assert [i["source_file"] for i in items] == ["Home.md", "journal/2024-01-15.md"]
        assert items[1]["context"] == "Worked on [[Work]] today."

    def test_occurrences(self, vault: Vault) -> None:
        result = ContentService(vault).backlinks("Ideas.md")
        (item,) = result.data["items"]
        assert item["source_file"] == "Home.md"
        assert item["occurrences"] == 2

    def test_no_backlinks(self, vault: Vault) -> None:
        result = ContentService(vault).backlinks("Orphan.md")
        assert result.ok
        assert result.data["items"] == []

    def test_context_radius_from_settings(self, corpus_root: Path) -> None:
        (corpus_root / "wikiweave.toml").write_text("[backlinks]\ncontext_radius = 5\n")
        vault = Vault(WikiSettings.from_cli(corpus_root=corpus_root))
        result = ContentService(vault).backlinks("notes/Projects.md")
        assert result.data["items"][1]["context"] == "...d on [[Work]] toda..."


class TestBlocks:
    def test_blocks(self, vault: Vault) -> None:
        result = ContentService(vault).blocks("Ideas.md")
        assert result.ok
        items = result.data["items"]
        assert [(b["id"], b["kind"]) for b in items] == [
            ("core", "paragraph"),
            ("open-questions", "heading"),
        ]
        assert items[0]["content"] == "Ideas are cheap."

    def test_missing_file(self, vault: Vault) -> None:
        assert ContentService(vault).blocks("Nope.md").error.code == "NOT_FOUND"


class TestRender:
    def test_render(self, vault: Vault) -> None:
        result = ContentService(vault).render("Home.md")
        assert result.op == "render"
        assert result.data["content"].endswith("Core idea: Ideas are cheap.\n")
        assert "backlinks" not in result.data

    def test_broken_embed(self, vault: Vault, corpus_root: Path) -> None:
        write_page(corpus_root, "Page.md", "![[NoSuchPage]]")
        result = ContentService(vault).render("Page.md")
        assert result.ok
        assert result.data["content"] == "[broken embed: NoSuchPage]"


class TestBlockReferences:
    def test_references(self, vault: Vault) -> None:
        result = ContentService(vault).block_references("Ideas.md", "core")
        assert result.ok
        assert result.data["block_id"] == "core"
        assert [i["source_file"] for i in result.data["items"]] == ["Home.md"]

    def test_heading_embeds_are_not_block_refs(self, vault: Vault, corpus_root: Path) -> None:
        write_page(corpus_root, "Q.md", "See ![[Ideas#Open Questions]]")
        result = ContentService(vault).block_references("Ideas.md", "open-questions")
        assert result.ok
        assert result.data["items"] == []

    def test_unknown_block(self, vault: Vault) -> None:
        result = ContentService(vault).block_references("Ideas.md", "nope")
        assert not result.ok
        assert result.error.code == "NOT_FOUND"
        assert result.error.detail == {"path": "Ideas.md", "block_id": "nope"}
