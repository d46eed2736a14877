"""Shared pytest fixtures and test helpers for wikiweave tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from wikiweave.config.settings import WikiSettings
from wikiweave.domain.resolve import CorpusIndex
from wikiweave.domain.types import CorpusFile
from wikiweave.infrastructure.vault import Vault
from wikiweave.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer env vars out of config discovery."""
    monkeypatch.delenv("WIKIWEAVE_CONFIG", raising=False)
    monkeypatch.delenv("WIKIWEAVE_CORPUS_ROOT", raising=False)


@pytest.fixture(autouse=True)
def _restore_global_state() -> Generator[None]:
    """Undo logging and telemetry changes made by CLI invocations."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    wiki_level = logging.getLogger("wikiweave").level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("wikiweave").setLevel(wiki_level)
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def corpus_root(tmp_path: Path) -> Path:
    """Temporary corpus directory with a small linked wiki.

    Layout::

        Home.md             links to Projects and Ideas, embeds a block
        Ideas.md            block ^core, heading "Open Questions"
        Orphan.md           no links in or out
        notes/Projects.md   links back to Home, alias "Work"
        journal/2024-01-15.md
    """
    write_page(
        tmp_path,
        "Home.md",
        "---\ntitle: Home\ntags: [index]\n---\n"
        "Welcome. See [[Projects]] and [[Ideas]].\n\n"
        "Core idea: ![[Ideas#^core]]\n",
    )
    write_page(
        tmp_path,
        "Ideas.md",
        "Ideas are cheap.\n^core\n\n"
        "## Open Questions\n\nWhat next?\n\n"
        "Back to [[Home]].\n",
    )
    write_page(tmp_path, "Orphan.md", "Nobody links here.\n")
    write_page(
        tmp_path,
        "notes/Projects.md",
        "---\naliases: [Work]\n---\nCurrent work, from [[Home]].\n",
    )
    write_page(tmp_path, "journal/2024-01-15.md", "Worked on [[Work]] today.\n")
    return tmp_path


@pytest.fixture
def vault(corpus_root: Path) -> Vault:
    """Vault over the sample corpus."""
    settings = WikiSettings.from_cli(corpus_root=corpus_root)
    return Vault(settings)


@pytest.fixture
def _isolated_corpus(corpus_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the sample corpus so the CLI picks it up by default.

    Use via ``@pytest.mark.usefixtures("_isolated_corpus")`` on command
    test classes.
    """
    monkeypatch.chdir(corpus_root)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def write_page(root: Path, relative_path: str, text: str) -> Path:
    """Write a corpus file, creating parent directories."""
    path = root / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def page(path: str, content: str = "", *, title: str | None = None, **kwargs: object) -> CorpusFile:
    """Build an in-memory CorpusFile (title defaults to the file stem)."""
    stem = path.rsplit("/", 1)[-1].removesuffix(".md")
    return CorpusFile(path=path, title=title or stem, raw_content=content, **kwargs)


def corpus(*files: CorpusFile, journal_dir: str = "journal") -> CorpusIndex:
    """Build a CorpusIndex in the given enumeration order."""
    return CorpusIndex(files, journal_dir=journal_dir)
