"""Link syntax parser — tokenize wikilinks, embeds and block markers.

Pure functions, no infrastructure dependencies. :func:`tokenize` is the
single scanner; every other helper here is a filter over it, so the
backlink indexer, block extractor and transclusion processor all agree
on what counts as a link.

Recognized forms::

    [[Target]]  [[Target|Alias]]  [[Target#Heading]]  [[Target#^block-id]]
    ![[Target]] ![[Target#Heading]] ![[Target#^block-id]]
    Some paragraph text ^block-id

Code is opaque: fenced blocks and inline code spans are emitted as plain
text even when they contain ``[[...]]``. A fence opens with ```` ``` ````
or ``~~~`` indented at most three spaces and closes with the same marker;
an unclosed fence hides nothing. Brackets do not nest: the first ``]]``
after ``[[`` closes the token, so ``[[a[b]]`` targets ``a[b``.
"""

from __future__ import annotations

import re
import secrets
from collections.abc import Iterator

from wikiweave.domain.types import LinkKind, LinkToken, TextSpan

_TOKEN_PATTERN = re.compile(
    r"(?P<fence>^[ \t]{0,3}(?P<mark>```|~~~)[^\n]*\n.*?^[ \t]{0,3}(?P=mark)[^\n]*$)"
    r"|(?P<code>`[^`\n]+`)"
    r"|(?P<bang>!)?\[\[(?P<inner>[^\]\n]+)\]\]",
    re.MULTILINE | re.DOTALL,
)

# ``^id`` at the end of a line.
_BLOCK_MARKER_PATTERN = re.compile(r"\s*\^(?P<id>[A-Za-z0-9_-]+)\s*$")
_BLOCK_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def tokenize(text: str) -> Iterator[TextSpan | LinkToken]:
    """Lazily split *text* into plain-text spans and link tokens.

    The parts partition the input: joining every part's ``raw`` gives
    back *text* exactly. Adjacent plain text is merged into one span.
    Malformed constructs (unterminated ``[[``, empty target) stay text.
    """
    pending_start = 0
    for match in _TOKEN_PATTERN.finditer(text):
        inner = match.group("inner")
        if inner is None:
            continue
        token = _build_token(match, inner)
        if token is None:
            continue
        if match.start() > pending_start:
            yield TextSpan(
                raw=text[pending_start : match.start()],
                start=pending_start,
                end=match.start(),
            )
        yield token
        pending_start = match.end()

    if pending_start < len(text):
        yield TextSpan(raw=text[pending_start:], start=pending_start, end=len(text))


def _build_token(match: re.Match[str], inner: str) -> LinkToken | None:
    """Parse ``target[#ref][|alias]``; return None when the target is empty."""
    target_part, _, alias = inner.partition("|")
    target, has_ref, ref = target_part.partition("#")
    target = target.strip()
    if not target:
        return None

    block_ref: str | None = None
    heading_ref: str | None = None
    ref = ref.strip()
    if has_ref and ref:
        if ref.startswith("^"):
            block_ref = ref[1:].strip() or None
        else:
            heading_ref = ref

    return LinkToken(
        kind=LinkKind.EMBED if match.group("bang") else LinkKind.WIKILINK,
        target=target,
        raw=match.group(0),
        start=match.start(),
        end=match.end(),
        block_ref=block_ref,
        heading_ref=heading_ref,
        alias=alias.strip() or None,
    )


def extract_links(text: str) -> list[LinkToken]:
    """Return every wikilink and embed token in *text*, in order."""
    return [part for part in tokenize(text) if isinstance(part, LinkToken)]


def extract_embeds(text: str) -> list[LinkToken]:
    """Return only the ``![[...]]`` tokens in *text*."""
    return [token for token in extract_links(text) if token.is_embed]


def has_transclusions(text: str) -> bool:
    """Whether *text* contains at least one embed."""
    return any(isinstance(part, LinkToken) and part.is_embed for part in tokenize(text))


def fenced_spans(text: str) -> list[tuple[int, int]]:
    """``(start, end)`` offsets of every closed fenced code block in *text*."""
    return [
        (match.start(), match.end())
        for match in _TOKEN_PATTERN.finditer(text)
        if match.group("fence") is not None
    ]


# ---------------------------------------------------------------------------
# Block-id markers
# ---------------------------------------------------------------------------


def find_block_marker(line: str) -> str | None:
    """Return the block id of a trailing ``^id`` marker on *line*, if any."""
    match = _BLOCK_MARKER_PATTERN.search(line)
    return match.group("id") if match else None


def strip_block_marker(line: str) -> str:
    """Remove a trailing ``^id`` marker (and the whitespace before it)."""
    match = _BLOCK_MARKER_PATTERN.search(line)
    if match is None:
        return line
    return line[: match.start()].rstrip()


def is_valid_block_id(value: str) -> bool:
    """Check *value* against the block-id charset ``[A-Za-z0-9_-]+``."""
    return _BLOCK_ID_PATTERN.match(value) is not None


def generate_block_id() -> str:
    """Return a fresh random block id (8 lowercase hex chars)."""
    return secrets.token_hex(4)
