"""notelinks: backlink index for plain-text note collections."""

from notelinks.backlinks import BacklinksPanel, backlinks_table
from notelinks.corpus import DirectoryCorpus, NoteCorpus, list_candidate_notes
from notelinks.index import resolve_backlinks, resolve_backlinks_sync
from notelinks.note import FileGroup, Hit, Position, ReferenceKind, Span
from notelinks.parser import parse_frontmatter, scan
from notelinks.preview import preview_line
from notelinks.settings import Settings, SettingsError, load_settings
from notelinks.tree import FileNode, HitNode, TreeNode, group

__all__ = [
    "BacklinksPanel",
    "backlinks_table",
    "DirectoryCorpus",
    "NoteCorpus",
    "list_candidate_notes",
    "resolve_backlinks",
    "resolve_backlinks_sync",
    "FileGroup",
    "Hit",
    "Position",
    "ReferenceKind",
    "Span",
    "parse_frontmatter",
    "scan",
    "preview_line",
    "Settings",
    "SettingsError",
    "load_settings",
    "FileNode",
    "HitNode",
    "TreeNode",
    "group",
]
