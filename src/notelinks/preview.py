"""One-line text previews for backlink hits."""

from __future__ import annotations

import re

from notelinks.note import Position

#: Characters of context shown before the reference.
LOOKBEHIND = 12
#: Starts below this column show the whole line instead.
MIN_TRUNCATE = 20

_LINE_SPLIT_RE = re.compile(r"\r?\n")


def preview_start(character: int) -> int:
    """Column where the preview of a reference at *character* begins."""
    start = character - LOOKBEHIND
    if start < MIN_TRUNCATE:
        return 0
    return start


def preview_line(text: str, position: Position) -> str:
    """Source line containing *position*, trimmed to start near the reference."""
    lines = _LINE_SPLIT_RE.split(text or "")
    if not 0 <= position.line < len(lines):
        return ""
    return lines[position.line][preview_start(position.character) :]
