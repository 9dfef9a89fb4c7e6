"""Note corpus: candidate-file enumeration and content access."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE_DIRS = ("node_modules",)


def list_candidate_notes(
    root: Path | None,
    extensions: Iterable[str] = (".md",),
    *,
    exclude: Path | None = None,
    exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
) -> list[Path]:
    """Return every note file under *root*, sorted by path.

    Hidden directories and *exclude_dirs* are skipped. *exclude* drops a
    single file (normally the active note) when the caller asks for it.
    ``root=None`` means no workspace and yields an empty list.
    """
    if root is None:
        return []
    root = Path(root)
    if not root.is_dir():
        logger.info("Workspace root %s is not a directory", root)
        return []

    suffixes = tuple(extensions)
    skipped = set(exclude_dirs)
    excluded = exclude.resolve() if exclude is not None else None

    result: list[Path] = []
    for path in root.rglob("*"):
        rel_parts = path.relative_to(root).parts[:-1]
        if any(p.startswith(".") or p in skipped for p in rel_parts):
            continue
        if not path.name.endswith(suffixes) or not path.is_file():
            continue
        if excluded is not None and path.resolve() == excluded:
            continue
        result.append(path)
    return sorted(result)


@runtime_checkable
class NoteCorpus(Protocol):
    """Supplies candidate notes and their text.

    ``read_text`` signals a per-file failure by raising ``OSError`` or
    ``UnicodeDecodeError``; it never aborts enumeration.
    """

    def list_notes(self) -> list[Path]: ...

    async def read_text(self, path: Path) -> str: ...


class DirectoryCorpus:
    """A :class:`NoteCorpus` backed by a workspace directory on disk."""

    def __init__(
        self,
        root: Path,
        extensions: Iterable[str] = (".md",),
        exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
    ) -> None:
        self.root = Path(root)
        self.extensions = tuple(extensions)
        self.exclude_dirs = tuple(exclude_dirs)

    def list_notes(self) -> list[Path]:
        return list_candidate_notes(self.root, self.extensions, exclude_dirs=self.exclude_dirs)

    async def read_text(self, path: Path) -> str:
        return await asyncio.to_thread(path.read_text, encoding="utf-8")
