"""Unit tests for notelinks.backlinks (panel facade + table view)."""

import asyncio
from pathlib import Path

import polars as pl
import pytest

from notelinks.backlinks import EMPTY_WORKSPACE_NOTICE, BacklinksPanel, backlinks_table
from notelinks.corpus import DirectoryCorpus
from notelinks.index import resolve_backlinks
from notelinks.settings import Settings
from notelinks.tree import group


@pytest.fixture()
def workspace(tmp_path: Path) -> Path:
    (tmp_path / "a.md").write_text(
        "---\ntitle: Alpha\n---\nsee [[b]] and [c](b.md)\n", encoding="utf-8"
    )
    (tmp_path / "b.md").write_text("root note", encoding="utf-8")
    (tmp_path / "c.md").write_text("[[b]]\n\n" + "w" * 30 + " [[b]]\n", encoding="utf-8")
    return tmp_path


@pytest.fixture()
def panel(workspace: Path) -> BacklinksPanel:
    return BacklinksPanel(Settings(workspace_root=workspace))


class _SwitchingCorpus(DirectoryCorpus):
    """Selects another note on the panel while a render is reading files."""

    panel: BacklinksPanel

    async def read_text(self, path: Path) -> str:
        self.panel.on_note_select(self.root / "c.md")
        return await super().read_text(path)


# ---------------------------------------------------------------------------
# render
# ---------------------------------------------------------------------------


class TestRender:
    def test_no_active_note(self, panel: BacklinksPanel):
        assert asyncio.run(panel.render()) == []

    def test_file_nodes(self, panel: BacklinksPanel, workspace: Path):
        panel.on_note_select(workspace / "b.md")
        nodes = asyncio.run(panel.render())
        assert [n.label for n in nodes] == ["a.md", "c.md"]
        assert [n.description for n in nodes] == ["2 References", "2 References"]
        assert [n.title for n in nodes] == ["Alpha", "c"]
        assert nodes[0].tooltip == "a.md: Alpha: 2 References"

    def test_no_workspace_notifies(self, workspace: Path):
        notices: list[str] = []
        panel = BacklinksPanel(Settings(), notify=notices.append)
        panel.on_note_select(workspace / "b.md")
        assert asyncio.run(panel.render()) == []
        assert notices == [EMPTY_WORKSPACE_NOTICE]

    def test_missing_workspace_root_notifies(self, tmp_path: Path):
        notices: list[str] = []
        panel = BacklinksPanel(Settings(workspace_root=tmp_path / "gone"), notify=notices.append)
        panel.on_note_select(tmp_path / "gone" / "b.md")
        assert asyncio.run(panel.render()) == []
        assert notices == [EMPTY_WORKSPACE_NOTICE]

    def test_no_active_note_does_not_notify(self):
        notices: list[str] = []
        panel = BacklinksPanel(Settings(), notify=notices.append)
        assert asyncio.run(panel.render()) == []
        assert notices == []

    def test_render_is_fresh_each_time(self, panel: BacklinksPanel, workspace: Path):
        panel.on_note_select(workspace / "b.md")
        assert len(asyncio.run(panel.render())) == 2
        (workspace / "d.md").write_text("[[b]]", encoding="utf-8")
        panel.invalidate()
        assert [n.label for n in asyncio.run(panel.render())] == ["a.md", "c.md", "d.md"]

    def test_stale_render_dropped(self, workspace: Path):
        corpus = _SwitchingCorpus(workspace)
        panel = BacklinksPanel(Settings(workspace_root=workspace), corpus=corpus)
        corpus.panel = panel
        panel.on_note_select(workspace / "b.md")
        assert asyncio.run(panel.render()) == []

    def test_invalidate_bumps_generation(self, panel: BacklinksPanel):
        before = panel.generation
        panel.invalidate()
        assert panel.generation == before + 1


# ---------------------------------------------------------------------------
# children
# ---------------------------------------------------------------------------


class TestChildren:
    def test_hit_nodes_with_previews(self, panel: BacklinksPanel, workspace: Path):
        panel.on_note_select(workspace / "b.md")
        nodes = asyncio.run(panel.render())
        c_node = nodes[1]
        children = asyncio.run(panel.children(c_node))
        assert [n.label for n in children] == ["1:", "3:"]
        assert children[0].preview == "[[b]]"
        # reference at column 31 -> preview starts at column 19, below threshold
        assert children[1].preview == "w" * 30 + " [[b]]"

    def test_same_basename_sources_previewed_separately(self, tmp_path: Path):
        (tmp_path / "b.md").write_text("root note", encoding="utf-8")
        for rel, content in [("x/a.md", "alpha [[b]]"), ("y/a.md", "one\ntwo\nbeta [[b]]")]:
            (tmp_path / rel).parent.mkdir()
            (tmp_path / rel).write_text(content, encoding="utf-8")
        panel = BacklinksPanel(Settings(workspace_root=tmp_path))
        panel.on_note_select(tmp_path / "b.md")
        (node,) = asyncio.run(panel.render())
        children = asyncio.run(panel.children(node))
        assert [n.preview for n in children] == ["alpha [[b]]", "beta [[b]]"]

    def test_unreadable_source_gives_empty_previews(self, panel: BacklinksPanel, workspace: Path):
        panel.on_note_select(workspace / "b.md")
        nodes = asyncio.run(panel.render())
        (workspace / "a.md").unlink()
        children = asyncio.run(panel.children(nodes[0]))
        assert [n.preview for n in children] == ["", ""]


# ---------------------------------------------------------------------------
# backlinks_table
# ---------------------------------------------------------------------------


class TestBacklinksTable:
    def test_rows_in_tree_order(self, workspace: Path):
        hits = asyncio.run(resolve_backlinks("b.md", DirectoryCorpus(workspace)))
        df = backlinks_table(group(hits))
        assert isinstance(df, pl.DataFrame)
        assert df["file"].to_list() == ["a.md", "a.md", "c.md", "c.md"]
        assert df["kind"].to_list() == ["wikilink", "hyperlink", "wikilink", "wikilink"]
        assert df["line"].to_list() == [3, 3, 0, 2]

    def test_empty_tree(self):
        df = backlinks_table([])
        assert df.height == 0
        assert "character" in df.columns
