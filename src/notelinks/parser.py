"""WikiLink / hyperlink reference scanner and YAML-frontmatter parser."""

from __future__ import annotations

import bisect
import re
from collections.abc import Iterable
from pathlib import Path, PurePosixPath
from typing import Any
from urllib.parse import unquote, urlsplit

import yaml

from notelinks.note import Position, ReferenceKind, Span

# [[Target]], [[Target|Alias]] or [[Target#Heading]]
_WIKILINK_RE = re.compile(r"\[\[([^\[\]|#\n]+)(?:[|#][^\[\]\n]*)?\]\]")
# [label](destination) or [label](<destination> "title")
_HYPERLINK_RE = re.compile(
    r"\[[^\[\]\n]*\]\(\s*(?:<([^<>\n]+)>|([^\s()]+))(?:\s+\"[^\"\n]*\")?\s*\)"
)
# YAML front-matter block
_FRONTMATTER_RE = re.compile(r"^---[ \t]*\n(.*?)\n---[ \t]*\n", re.DOTALL)
# http:, mailto:, file: ...
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Split YAML front-matter from body text.

    Returns ``(metadata_dict, body)``; ``metadata_dict`` is empty when there
    is no front-matter block or it does not parse to a mapping.
    """
    match = _FRONTMATTER_RE.match(content)
    if not match:
        return {}, content
    try:
        meta = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError:
        meta = {}
    if not isinstance(meta, dict):
        meta = {}
    return meta, content[match.end() :]


def note_title(content: str, path: Path) -> str:
    """Frontmatter ``title`` of a note, falling back to the filename stem."""
    meta, _ = parse_frontmatter(content)
    title = meta.get("title")
    return str(title) if title else path.stem


def resolve_wikilink(
    identifier: str,
    *,
    default_extension: str = ".md",
    extensions: Iterable[str] = (".md",),
) -> str:
    """Map a ``[[identifier]]`` to the note basename it refers to.

    ``[[b]]`` -> ``b.md``; ``[[dir/b.md]]`` -> ``b.md``.
    """
    name = identifier.strip()
    if not name.endswith(tuple(extensions)):
        name += default_extension
    return PurePosixPath(name).name


def resolve_hyperlink(destination: str) -> str | None:
    """Basename of a relative link destination, or ``None`` for URLs."""
    if _SCHEME_RE.match(destination) or destination.startswith("//"):
        return None
    path = unquote(urlsplit(destination).path)
    if not path:
        return None
    return PurePosixPath(path).name


def _position(line_starts: list[int], offset: int) -> Position:
    line = bisect.bisect_right(line_starts, offset) - 1
    return Position(line, offset - line_starts[line])


def _line_starts(text: str) -> list[int]:
    starts = [0]
    starts.extend(m.end() for m in re.finditer(r"\n", text))
    return starts


def scan(
    text: str,
    target: str,
    kind: ReferenceKind,
    *,
    default_extension: str = ".md",
    extensions: Iterable[str] = (".md",),
) -> list[Span]:
    """Return the span of every *kind* reference in *text* that points at *target*.

    Spans are returned in text order and never overlap. Text that only looks
    like a reference is ignored.
    """
    if not text or not target:
        return []
    extensions = tuple(extensions)

    if kind is ReferenceKind.WIKILINK:
        pattern = _WIKILINK_RE
    else:
        pattern = _HYPERLINK_RE

    line_starts: list[int] | None = None
    spans: list[Span] = []
    for m in pattern.finditer(text):
        if kind is ReferenceKind.WIKILINK:
            resolved = resolve_wikilink(
                m.group(1), default_extension=default_extension, extensions=extensions
            )
        else:
            resolved = resolve_hyperlink(m.group(1) or m.group(2))
        if resolved != target:
            continue
        if line_starts is None:
            line_starts = _line_starts(text)
        spans.append(Span(_position(line_starts, m.start()), _position(line_starts, m.end())))
    return spans
