"""Backlinks panel for notelinks.

Shows every note that links *to* the currently-selected note, as a tree of
:class:`~notelinks.tree.FileNode` entries whose children are
:class:`~notelinks.tree.HitNode` entries.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import polars as pl

from notelinks.corpus import DirectoryCorpus, NoteCorpus
from notelinks.index import resolve_backlinks
from notelinks.note import BacklinkTree, note_basename
from notelinks.parser import note_title
from notelinks.settings import Settings
from notelinks.tree import FileNode, HitNode, file_nodes, group, hit_nodes

logger = logging.getLogger(__name__)

EMPTY_WORKSPACE_NOTICE = "No refs in empty workspace"

_TABLE_SCHEMA = {
    "file": pl.Utf8,
    "line": pl.Int64,
    "character": pl.Int64,
    "end_line": pl.Int64,
    "end_character": pl.Int64,
    "kind": pl.Utf8,
    "target": pl.Utf8,
}


def backlinks_table(tree: BacklinkTree) -> pl.DataFrame:
    """Flatten *tree* into a Polars DataFrame, one row per hit, in tree order."""
    rows = [hit.to_dict() for file_group in tree for hit in file_group.hits]
    return pl.DataFrame(rows, schema=_TABLE_SCHEMA)


def _log_notice(message: str) -> None:
    logger.info(message)


class BacklinksPanel:
    """Query-per-render backlinks view over a note workspace.

    Nothing is cached between renders. :meth:`invalidate` (or selecting
    another note) marks in-flight renders as stale so their results are
    dropped when they finish.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        corpus: NoteCorpus | None = None,
        notify: Callable[[str], None] = _log_notice,
    ) -> None:
        self.settings = settings
        self.notify = notify
        if corpus is None and settings.workspace_root is not None:
            corpus = DirectoryCorpus(
                settings.workspace_root, settings.extensions, settings.exclude_dirs
            )
        self._corpus = corpus
        self._active: Path | None = None
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def on_note_select(self, path: Path | None) -> None:
        self._active = Path(path) if path is not None else None
        self.invalidate()

    def invalidate(self) -> None:
        """Signal that the workspace changed; the host should render again."""
        self._generation += 1

    async def tree(self) -> BacklinkTree:
        """Grouped backlinks of the active note (empty when there is none)."""
        if self._active is None:
            return []
        if self._corpus is None or not self._has_workspace():
            self.notify(EMPTY_WORKSPACE_NOTICE)
            return []
        hits = await resolve_backlinks(
            note_basename(self._active),
            self._corpus,
            default_extension=self.settings.default_extension,
            extensions=self.settings.extensions,
        )
        return group(hits)

    async def render(self) -> list[FileNode]:
        generation = self._generation
        backlink_tree = await self.tree()

        titles: dict[str, str] = {}
        for file_group in backlink_tree:
            source = file_group.hits[0].source
            text = await self._read(source)
            if text is not None:
                titles[file_group.file] = note_title(text, source)

        if generation != self._generation:
            logger.debug("Dropping stale backlinks render (generation %d)", generation)
            return []
        return file_nodes(backlink_tree, titles)

    async def children(self, node: FileNode) -> list[HitNode]:
        """Leaf nodes of *node*, with a line preview for each hit."""
        if not node.group.hits or self._corpus is None:
            return []
        # same-basename notes share a group, so read every distinct source
        texts: dict[Path, str] = {}
        for hit in node.group.hits:
            if hit.source not in texts:
                texts[hit.source] = await self._read(hit.source) or ""
        return hit_nodes(node.group, texts)

    def _has_workspace(self) -> bool:
        root = self.settings.workspace_root
        return root is None or root.is_dir()

    async def _read(self, path: Path) -> str | None:
        try:
            return await self._corpus.read_text(path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Cannot read %s for preview: %s", path, exc)
            return None
