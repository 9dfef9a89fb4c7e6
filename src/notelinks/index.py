"""Backlink resolution: every reference to a note, across the corpus."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from notelinks.corpus import NoteCorpus
from notelinks.note import Hit, ReferenceKind
from notelinks.parser import scan

logger = logging.getLogger(__name__)


async def _scan_corpus(
    target: str,
    corpus: NoteCorpus,
    kind: ReferenceKind,
    default_extension: str,
    extensions: tuple[str, ...],
) -> list[Hit]:
    hits: list[Hit] = []
    for path in await asyncio.to_thread(corpus.list_notes):
        try:
            text = await corpus.read_text(path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping unreadable note %s: %s", path, exc)
            continue
        for span in scan(
            text, target, kind, default_extension=default_extension, extensions=extensions
        ):
            hits.append(Hit(source=path, span=span, target=target, kind=kind))
    return hits


async def resolve_backlinks(
    target: str | None,
    corpus: NoteCorpus | None,
    *,
    default_extension: str = ".md",
    extensions: Iterable[str] = (".md",),
) -> list[Hit]:
    """Return every hit in *corpus* referring to the note named *target*.

    Both reference kinds are scanned concurrently and joined before
    returning; the order of the result is not meaningful, see
    :func:`notelinks.tree.group`. A missing *target* (no active note) or
    *corpus* (no workspace) gives an empty list.
    """
    if not target or corpus is None:
        return []
    exts = tuple(extensions)
    results = await asyncio.gather(
        *(_scan_corpus(target, corpus, kind, default_extension, exts) for kind in ReferenceKind)
    )
    hits = [hit for kind_hits in results for hit in kind_hits]
    logger.debug("Resolved %d backlink(s) for %s", len(hits), target)
    return hits


def resolve_backlinks_sync(
    target: str | None,
    corpus: NoteCorpus | None,
    *,
    default_extension: str = ".md",
    extensions: Iterable[str] = (".md",),
) -> list[Hit]:
    """Blocking wrapper around :func:`resolve_backlinks`."""
    return asyncio.run(
        resolve_backlinks(
            target, corpus, default_extension=default_extension, extensions=extensions
        )
    )
