"""Core data model: reference kinds, positions, spans and hits."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Any


class ReferenceKind(enum.Enum):
    """The two supported link syntaxes."""

    WIKILINK = "wikilink"  # [[name]]
    HYPERLINK = "hyperlink"  # [label](path/name.md)


@dataclass(frozen=True, order=True)
class Position:
    """Zero-indexed ``(line, character)`` location inside a note."""

    line: int
    character: int


@dataclass(frozen=True)
class Span:
    """Matched reference text; ``end`` is exclusive."""

    start: Position
    end: Position


@dataclass(frozen=True)
class Hit:
    """One reference found in *source* that points at *target*."""

    source: Path
    span: Span
    target: str
    kind: ReferenceKind

    @property
    def source_name(self) -> str:
        """Basename of the source note, used as its identity."""
        return note_basename(self.source)

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.source_name,
            "line": self.span.start.line,
            "character": self.span.start.character,
            "end_line": self.span.end.line,
            "end_character": self.span.end.character,
            "kind": self.kind.value,
            "target": self.target,
        }


@dataclass(frozen=True)
class FileGroup:
    """All hits coming from one source file, ordered by position."""

    file: str
    hits: tuple[Hit, ...]

    def __len__(self) -> int:
        return len(self.hits)


#: Ordered by file basename.
BacklinkTree = list[FileGroup]


def note_basename(path: str | PurePath) -> str:
    """Filename component of *path* (``notes/a.md`` -> ``a.md``)."""
    return PurePath(path).name
