"""Tests for corpus file discovery and reading."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.conftest import write_page
from wikiweave.infrastructure.filesystem import (
    CorpusUnavailableError,
    find_content_files,
    read_corpus_file,
    relative_corpus_path,
    resolve_corpus_path,
)


class TestFindContentFiles:
    def test_files_before_subdirectories(self, tmp_path: Path) -> None:
        for name in ("b.md", "a.md", "sub/z.md", "sub/deeper/y.md", "aaa/x.md"):
            write_page(tmp_path, name, "")
        found = [relative_corpus_path(tmp_path, p) for p in find_content_files(tmp_path)]
        assert found == ["a.md", "b.md", "aaa/x.md", "sub/z.md", "sub/deeper/y.md"]

    def test_extension_filter(self, tmp_path: Path) -> None:
        write_page(tmp_path, "note.md", "")
        write_page(tmp_path, "image.png", "")
        write_page(tmp_path, "other.markdown", "")
        found = find_content_files(tmp_path, extensions=[".md", ".markdown"])
        assert [p.name for p in found] == ["note.md", "other.markdown"]

    def test_skip_dirs(self, tmp_path: Path) -> None:
        write_page(tmp_path, "keep.md", "")
        write_page(tmp_path, ".obsidian/workspace.md", "")
        found = find_content_files(tmp_path, skip_dirs=[".obsidian"])
        assert [p.name for p in found] == ["keep.md"]

    def test_missing_root(self, tmp_path: Path) -> None:
        assert find_content_files(tmp_path / "nope") == []


class TestResolveCorpusPath:
    def test_inside_root(self, tmp_path: Path) -> None:
        assert resolve_corpus_path(tmp_path, "notes/a.md") == tmp_path / "notes" / "a.md"

    def test_traversal_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(CorpusUnavailableError, match="escapes"):
            resolve_corpus_path(tmp_path, "../outside.md")


class TestReadCorpusFile:
    def test_reads_and_parses(self, tmp_path: Path) -> None:
        write_page(tmp_path, "notes/a.md", "---\ntitle: Alpha\n---\nBody")
        parsed = read_corpus_file(tmp_path, "notes/a.md")
        assert parsed.file.path == "notes/a.md"
        assert parsed.file.title == "Alpha"
        assert parsed.file.raw_content == "Body"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(CorpusUnavailableError) as exc_info:
            read_corpus_file(tmp_path, "missing.md")
        assert exc_info.value.path == "missing.md"
        assert exc_info.value.reason == "file not found"

    def test_invalid_utf8(self, tmp_path: Path) -> None:
        (tmp_path / "bad.md").write_bytes(b"\xff\xfe\x00bad")
        with pytest.raises(CorpusUnavailableError, match="unreadable"):
            read_corpus_file(tmp_path, "bad.md")

    def test_invalid_frontmatter(self, tmp_path: Path) -> None:
        write_page(tmp_path, "bad.md", "---\ntitle: [oops\n---\nBody")
        with pytest.raises(CorpusUnavailableError, match="invalid frontmatter"):
            read_corpus_file(tmp_path, "bad.md")

    def test_error_is_lookup_error(self) -> None:
        assert issubclass(CorpusUnavailableError, LookupError)
