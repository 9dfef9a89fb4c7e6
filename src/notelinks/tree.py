"""Grouping of backlink hits into a file/position tree.

A flat hit list such as::

    a.md  (3, 1)
    b.md  (0, 4)
    a.md  (1, 7)

becomes one :class:`FileGroup` per source file, files in name order and hits
in position order::

    a.md
      (1, 7)
      (3, 1)
    b.md
      (0, 4)

The resulting tree is exposed to presentation code as plain
:class:`FileNode` / :class:`HitNode` values.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from notelinks.note import BacklinkTree, FileGroup, Hit
from notelinks.preview import preview_line


def group(hits: Iterable[Hit]) -> BacklinkTree:
    """Partition *hits* by source basename and order files and positions.

    Files sort by ordinal string comparison; hits sort by ``(line,
    character)`` with ties kept in input order. Nothing is deduplicated.
    """
    by_file: dict[str, list[Hit]] = {}
    for hit in hits:
        by_file.setdefault(hit.source_name, []).append(hit)
    return [
        FileGroup(file=name, hits=tuple(sorted(by_file[name], key=lambda h: h.span.start)))
        for name in sorted(by_file)
    ]


def _tooltip(*parts: str | None) -> str:
    return ": ".join(p for p in parts if p)


# ---------------------------------------------------------------------------
# Tree nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FileNode:
    """Top-level node: one source file and its hits."""

    group: FileGroup
    title: str = ""

    @property
    def label(self) -> str:
        return self.group.file

    @property
    def description(self) -> str:
        count = len(self.group.hits)
        return f"{count} {'Reference' if count == 1 else 'References'}"

    @property
    def tooltip(self) -> str:
        return _tooltip(self.group.file, self.title, self.description)


@dataclass(frozen=True)
class HitNode:
    """Leaf node: one reference with its line preview."""

    hit: Hit
    preview: str = ""

    @property
    def label(self) -> str:
        # editors count lines from 1
        return f"{self.hit.span.start.line + 1}:"

    @property
    def tooltip(self) -> str:
        return _tooltip(self.hit.source_name, f"line {self.hit.span.start.line}", self.preview)


TreeNode = FileNode | HitNode


def file_nodes(tree: BacklinkTree, titles: Mapping[str, str] | None = None) -> list[FileNode]:
    """Top-level nodes for *tree*; *titles* maps file basename to display title."""
    titles = titles or {}
    return [FileNode(group=g, title=titles.get(g.file, "")) for g in tree]


def hit_nodes(file_group: FileGroup, texts: Mapping[Path, str]) -> list[HitNode]:
    """Leaf nodes for *file_group*.

    Each hit is previewed from its own source note in *texts* (path -> text);
    a missing source gives an empty preview.
    """
    return [
        HitNode(hit=h, preview=preview_line(texts.get(h.source, ""), h.span.start))
        for h in file_group.hits
    ]
