"""Block extractor — addressable paragraphs and heading sections.

Two kinds of block share one id space per file:

- **paragraph**: a run of non-blank lines closed by a ``^block-id``
  marker. The marker may trail the last line (``text ^id``) or sit on
  its own line directly below. The block content is the run with the
  marker stripped.
- **heading**: an ATX heading and everything below it up to the next
  heading of the same or a higher level. The id is the slugified
  heading text, so ``[[Page#My Heading]]`` looks up ``my-heading``.

Blocks are returned in document order. On duplicate ids the first block
wins and later ones are dropped silently. Lines inside a closed fenced
code block (the same fences the link parser treats as code) are never
headings or markers.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from wikiweave.domain.links import fenced_spans, find_block_marker, strip_block_marker
from wikiweave.domain.types import Block, BlockKind

_HEADING_PATTERN = re.compile(r"^(?P<hashes>#{1,6})[ \t]+(?P<text>.+?)(?:[ \t]+#+)?[ \t]*$")


def slugify_heading(text: str) -> str:
    """Slug used as a heading block id: ``"My Heading!"`` -> ``"my-heading"``."""
    slug = text.strip().lower()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-{2,}", "-", slug)
    return slug.strip("-")


def block_key(*, block_ref: str | None = None, heading_ref: str | None = None) -> str | None:
    """Id to look up for a link fragment (``#^id`` or ``#Heading``)."""
    if block_ref is not None:
        return block_ref
    if heading_ref is not None:
        return slugify_heading(heading_ref) or None
    return None


@dataclass
class _Heading:
    level: int
    slug: str
    line_index: int


def _line_offsets(lines: list[str]) -> list[int]:
    offsets: list[int] = []
    position = 0
    for line in lines:
        offsets.append(position)
        position += len(line) + 1
    return offsets


def _fenced_lines(content: str, offsets: list[int]) -> set[int]:
    fenced: set[int] = set()
    for start, end in fenced_spans(content):
        fenced.update(i for i, offset in enumerate(offsets) if start <= offset < end)
    return fenced


def get_blocks(file_path: str, content: str, title: str) -> list[Block]:
    """Extract every paragraph and heading block from one file's content."""
    lines = content.split("\n")
    offsets = _line_offsets(lines)
    candidates: list[Block] = []
    headings: list[_Heading] = []

    fenced = _fenced_lines(content, offsets)
    run_start: int | None = None
    for index, line in enumerate(lines):
        if index in fenced:
            if run_start is None:
                run_start = index
            continue

        heading = _HEADING_PATTERN.match(line)
        if heading is not None:
            slug = slugify_heading(heading.group("text"))
            if slug:
                headings.append(_Heading(len(heading.group("hashes")), slug, index))
            run_start = None
            continue

        if not line.strip():
            run_start = None
            continue

        if run_start is None:
            run_start = index
        block_id = find_block_marker(line)
        if block_id is None:
            continue

        body_lines = [*lines[run_start:index], strip_block_marker(line)]
        candidates.append(
            Block(
                id=block_id,
                file=file_path,
                file_title=title,
                content="\n".join(body_lines).strip(),
                start_offset=offsets[run_start],
                end_offset=offsets[index] + len(line),
                kind=BlockKind.PARAGRAPH,
                line=run_start + 1,
            )
        )
        run_start = None

    candidates.extend(_heading_blocks(headings, offsets, content, file_path, title))
    candidates.sort(key=lambda block: block.start_offset)
    return list(blocks_by_id(candidates).values())


def _heading_blocks(
    headings: list[_Heading],
    offsets: list[int],
    content: str,
    file_path: str,
    title: str,
) -> list[Block]:
    blocks: list[Block] = []
    for position, heading in enumerate(headings):
        end_offset = len(content)
        for following in headings[position + 1 :]:
            if following.level <= heading.level:
                end_offset = offsets[following.line_index] - 1
                break
        start_offset = offsets[heading.line_index]
        blocks.append(
            Block(
                id=heading.slug,
                file=file_path,
                file_title=title,
                content=content[start_offset:end_offset].rstrip(),
                start_offset=start_offset,
                end_offset=end_offset,
                kind=BlockKind.HEADING,
                line=heading.line_index + 1,
            )
        )
    return blocks


def blocks_by_id(blocks: Iterable[Block]) -> dict[str, Block]:
    """First-wins id -> Block map, preserving order."""
    index: dict[str, Block] = {}
    for block in blocks:
        index.setdefault(block.id, block)
    return index
