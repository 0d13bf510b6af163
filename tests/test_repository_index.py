"""
Tests for jrn/services/repository_index.py.

Traversal tests run on a pyfakefs filesystem; mutation tests use tmp_path.
"""
import os
from pathlib import Path

import pytest

from jrn.config import Config, ConfigScope, ScopedSetting
from jrn.domain import EntryFilter, TimeStamp
from jrn.exit_codes import (
    EditorLaunchError,
    EntryExistsError,
    EntryIOError,
    InvalidRegexError,
    NoEntriesFoundError,
    TagFormatError,
)
from jrn.ignore import IgnoreMatcher
from jrn.services import RepositoryIndex

STAMP = TimeStamp(2024, 3, 5, 9, 30)


class FakeEditor:
    """Records launches and optionally writes the file like a user saving."""

    def __init__(self, save_text=None, error=None):
        self.save_text = save_text
        self.error = error
        self.launched = []

    def launch(self, path):
        self.launched.append(Path(path))
        if self.error:
            raise self.error
        if self.save_text is not None:
            Path(path).write_text(self.save_text, encoding="utf-8")


def make_index(root, config=None, ignore=None, clock=STAMP, editor=None):
    return RepositoryIndex(
        config or Config(),
        ignore or IgnoreMatcher(),
        root=root,
        clock=lambda: clock,
        editor=editor or FakeEditor(),
    )


class TestScan:
    """Building the index from a directory tree."""

    def test_mixed_directory(self, fs):
        fs.create_file("/journal/.git/config")
        fs.create_file("/journal/2024-03-05_0930-foo.txt")
        fs.create_file("/journal/notes.md")

        index = make_index("/journal")

        assert len(index) == 1
        entry = index.entries[0]
        assert entry.file_path == Path("/journal/2024-03-05_0930-foo.txt")
        assert entry.creation_time == STAMP
        assert entry.tags == ("foo",)
        assert index.tags.count("foo") == 1
        assert len(index.tags) == 1

    def test_nested_directories_sorted(self, fs):
        fs.create_file("/journal/2024/03/2024-03-05_0930-work")
        fs.create_file("/journal/2023/2023-12-31_2359-work_home")
        fs.create_file("/journal/2024-01-01_0000")

        index = make_index("/journal")

        assert [e.name for e in index] == [
            "2023-12-31_2359-work_home",
            "2024-01-01_0000",
            "2024-03-05_0930-work",
        ]
        assert index.tags.sorted() == [(2, "work"), (1, "home")]

    def test_ignored_directory_pruned(self, fs):
        fs.create_file("/journal/.trash/2024-03-05_0930-gone")
        fs.create_file("/journal/archive/2024-03-05_0931-old")
        fs.create_file("/journal/2024-03-05_0932-kept")

        index = make_index("/journal", ignore=IgnoreMatcher(["archive"]))

        assert [e.name for e in index] == ["2024-03-05_0932-kept"]

    def test_root_not_checked_against_ignore_rules(self, fs):
        fs.create_file("/.journal/2024-03-05_0930")
        index = make_index("/.journal")
        assert len(index) == 1

    def test_symlinked_directory_not_followed(self, fs):
        fs.create_file("/elsewhere/2024-03-05_0930-linked")
        fs.create_dir("/journal")
        fs.create_symlink("/journal/link", "/elsewhere")

        index = make_index("/journal")

        assert len(index) == 0

    def test_custom_markers(self, fs):
        fs.create_file("/journal/2024-03-05_0930+a,b")
        fs.create_file("/journal/2024-03-05_0931-a_b")
        config = Config([
            ScopedSetting(ConfigScope.LOCAL, "tag_start", "+"),
            ScopedSetting(ConfigScope.LOCAL, "tag_delimiter", ","),
        ])

        index = make_index("/journal", config=config)

        assert [e.tags for e in index] == [("a", "b"), ("-a_b",)]

    def test_names_without_tag_start(self, fs):
        fs.create_file("/journal/2024-03-05_0930foo")
        index = make_index("/journal")
        assert [e.tags for e in index] == [("foo",)]
        assert index.tags.count("foo") == 1

    def test_empty_directory(self, fs):
        fs.create_dir("/journal")
        index = make_index("/journal")
        assert index.entries == []
        assert index.latest is None


class TestListEntries:
    """Filtering and limiting."""

    @pytest.fixture
    def index(self, fs):
        for name in [
            "2024-03-01_0800-work",
            "2024-03-02_0800-home",
            "2024-03-03_0800-work_urgent",
            "2024-04-01_0800-work",
        ]:
            fs.create_file(f"/journal/{name}")
        return make_index("/journal")

    def test_all(self, index):
        assert len(index.list_entries()) == 4
        assert len(index.list_entries(".*")) == 4

    def test_regex(self, index):
        names = [e.name for e in index.list_entries("^2024-03.*work")]
        assert names == ["2024-03-01_0800-work", "2024-03-03_0800-work_urgent"]

    def test_limit_keeps_most_recent(self, index):
        names = [e.name for e in index.list_entries("work", limit=2)]
        assert names == ["2024-03-03_0800-work_urgent", "2024-04-01_0800-work"]

    def test_limit_larger_than_matches(self, index):
        assert len(index.list_entries("home", limit=10)) == 1

    def test_limit_zero(self, index):
        assert index.list_entries(limit=0) == []

    def test_negative_limit(self, index):
        with pytest.raises(ValueError):
            index.list_entries(limit=-1)

    def test_fixed(self, index):
        assert index.list_entries("03-0", fixed=True)[0].name == "2024-03-01_0800-work"
        assert index.list_entries(".", fixed=True) == []

    def test_filter_object(self, index):
        assert len(index.list_entries(EntryFilter.substring("urgent"))) == 1

    def test_invalid_regex(self, index):
        with pytest.raises(InvalidRegexError):
            index.list_entries("[")

    def test_list_tags(self, index):
        assert index.list_tags() == [(3, "work"), (1, "home"), (1, "urgent")]
        assert index.list_tags("^u") == [(1, "urgent")]
        assert index.list_tags("or", fixed=True) == [(3, "work")]


class TestCreateEntry:
    """create_entry on a real directory."""

    def test_quick_create(self, tmp_path):
        index = make_index(tmp_path)
        entry = index.create_entry(["work"], skip_edit=True)

        assert entry.file_path == tmp_path / "2024-03-05_0930-work"
        assert entry.file_path.read_text(encoding="utf-8") == ""
        assert index.entries == [entry]
        assert index.tags.count("work") == 1
        assert index.editor.launched == []

    def test_content_written(self, tmp_path):
        index = make_index(tmp_path)
        entry = index.create_entry(content="Dear diary", skip_edit=True)
        assert entry.file_path.read_text(encoding="utf-8") == "Dear diary"
        assert entry.tags == ()

    def test_content_then_editor(self, tmp_path):
        index = make_index(tmp_path)
        entry = index.create_entry(content="draft")
        assert index.editor.launched == [entry.file_path]

    def test_config_tags_added(self, tmp_path):
        config = Config([ScopedSetting(ConfigScope.LOCAL, "tags", "daily")])
        index = make_index(tmp_path, config=config)
        entry = index.create_entry(["work"], skip_edit=True)
        assert entry.tags == ("work", "daily")
        assert entry.name == "2024-03-05_0930-work_daily"

    def test_inserted_in_order(self, tmp_path):
        (tmp_path / "2030-01-01_0000").write_text("")
        (tmp_path / "2020-01-01_0000").write_text("")
        index = make_index(tmp_path)
        index.create_entry(skip_edit=True)
        assert [str(e.creation_time) for e in index] == [
            "2020-01-01_0000", "2024-03-05_0930", "2030-01-01_0000"
        ]

    def test_collision(self, tmp_path):
        index = make_index(tmp_path)
        index.create_entry(["work"], content="first", skip_edit=True)

        with pytest.raises(EntryExistsError):
            index.create_entry(["work"], content="second", skip_edit=True)

        assert len(index) == 1
        assert index.tags.count("work") == 1
        assert (tmp_path / "2024-03-05_0930-work").read_text(encoding="utf-8") == "first"

    def test_collision_with_extension(self, tmp_path):
        (tmp_path / "2024-03-05_0930-foo.txt").write_text("first")
        index = make_index(tmp_path)

        with pytest.raises(EntryExistsError):
            index.create_entry(["foo"], content="new", skip_edit=True)

        assert sorted(p.name for p in tmp_path.iterdir()) == ["2024-03-05_0930-foo.txt"]
        assert len(index) == 1
        assert index.tags.count("foo") == 1

    def test_collision_with_reordered_tags(self, tmp_path):
        (tmp_path / "2024-03-05_0930-b_a").write_text("")
        index = make_index(tmp_path)
        with pytest.raises(EntryExistsError):
            index.create_entry(["a", "b"], skip_edit=True)

    def test_collision_with_file_created_after_scan(self, tmp_path):
        index = make_index(tmp_path)
        (tmp_path / "2024-03-05_0930-foo.md").write_text("")
        with pytest.raises(EntryExistsError):
            index.create_entry(["foo"], skip_edit=True)
        assert len(index) == 0

    def test_same_minute_different_tags(self, tmp_path):
        (tmp_path / "2024-03-05_0930-foo.txt").write_text("")
        index = make_index(tmp_path)
        entry = index.create_entry(["bar"], skip_edit=True)
        assert entry.name == "2024-03-05_0930-bar"
        assert len(index) == 2

    def test_same_entry_in_subdirectory_is_not_a_collision(self, tmp_path):
        (tmp_path / "2024").mkdir()
        (tmp_path / "2024" / "2024-03-05_0930-foo").write_text("")
        index = make_index(tmp_path)
        entry = index.create_entry(["foo"], skip_edit=True)
        assert entry.file_path == tmp_path / "2024-03-05_0930-foo"

    def test_collision_with_editor(self, tmp_path):
        (tmp_path / "2024-03-05_0930").write_text("")
        index = make_index(tmp_path)
        with pytest.raises(EntryExistsError):
            index.create_entry()
        assert index.editor.launched == []

    def test_editor_saves(self, tmp_path):
        index = make_index(tmp_path, editor=FakeEditor(save_text="written in editor"))
        entry = index.create_entry(["idea"])
        assert entry.file_path.read_text(encoding="utf-8") == "written in editor"
        assert index.tags.count("idea") == 1

    def test_editor_closed_without_saving(self, tmp_path):
        index = make_index(tmp_path)
        assert index.create_entry(["idea"]) is None
        assert len(index) == 0
        assert "idea" not in index.tags

    def test_editor_failure(self, tmp_path):
        index = make_index(tmp_path, editor=FakeEditor(error=EditorLaunchError("boom")))
        with pytest.raises(EditorLaunchError):
            index.create_entry()
        assert len(index) == 0

    def test_invalid_tag(self, tmp_path):
        index = make_index(tmp_path)
        with pytest.raises(TagFormatError):
            index.create_entry(["bad_tag"], skip_edit=True)
        assert list(tmp_path.iterdir()) == []


class TestPushTag:
    """Renaming entries to add a tag."""

    def test_push_to_latest(self, tmp_path):
        (tmp_path / "2024-03-01_0800-work").write_text("old")
        (tmp_path / "2024-03-02_0800").write_text("new")
        index = make_index(tmp_path)

        entry = index.push_tag("followup")

        assert entry.name == "2024-03-02_0800-followup"
        assert entry.file_path.read_text() == "new"
        assert not (tmp_path / "2024-03-02_0800").exists()
        assert index.latest == entry
        assert index.tags.count("followup") == 1

    def test_push_keeps_extension(self, tmp_path):
        (tmp_path / "2024-03-01_0800-work.md").write_text("")
        index = make_index(tmp_path)
        entry = index.push_tag("done")
        assert entry.name == "2024-03-01_0800-work_done.md"
        assert index.codec.decode(entry.name) == (entry.creation_time, ("work", "done"))

    def test_push_with_descriptor(self, tmp_path):
        (tmp_path / "2024-03-01_0800-work").write_text("")
        (tmp_path / "2024-03-02_0800-home").write_text("")
        index = make_index(tmp_path)

        entry = index.push_tag("urgent", "work")

        assert entry.name == "2024-03-01_0800-work_urgent"
        assert [e.name for e in index] == ["2024-03-01_0800-work_urgent", "2024-03-02_0800-home"]

    def test_existing_tag_is_noop(self, tmp_path):
        (tmp_path / "2024-03-01_0800-work").write_text("")
        index = make_index(tmp_path)
        entry = index.push_tag("work")
        assert entry.name == "2024-03-01_0800-work"
        assert index.tags.count("work") == 1

    def test_empty_index(self, tmp_path):
        with pytest.raises(NoEntriesFoundError):
            make_index(tmp_path).push_tag("x")

    def test_descriptor_without_match(self, tmp_path):
        (tmp_path / "2024-03-01_0800").write_text("")
        with pytest.raises(NoEntriesFoundError):
            make_index(tmp_path).push_tag("x", "^1999")

    def test_invalid_tag_leaves_index_alone(self, tmp_path):
        (tmp_path / "2024-03-01_0800").write_text("")
        index = make_index(tmp_path)
        with pytest.raises(TagFormatError):
            index.push_tag("a_b")
        assert len(index.tags) == 0
        assert (tmp_path / "2024-03-01_0800").exists()

    def test_rename_failure_rolls_back(self, tmp_path, monkeypatch):
        (tmp_path / "2024-03-01_0800-work").write_text("")
        index = make_index(tmp_path)

        def fail_rename(self, target):
            raise PermissionError("read-only")

        monkeypatch.setattr(Path, "rename", fail_rename)
        with pytest.raises(EntryIOError):
            index.push_tag("followup")

        assert "followup" not in index.tags
        assert index.tags.count("work") == 1
        assert index.latest.name == "2024-03-01_0800-work"

    def test_target_entry_taken_with_other_extension(self, tmp_path):
        (tmp_path / "2024-03-05_0930-foo.txt").write_text("")
        (tmp_path / "2024-03-05_0930-foo_bar").write_text("taken")
        index = make_index(tmp_path)

        with pytest.raises(EntryExistsError):
            index.push_tag("bar", r"foo\.txt$")

        assert (tmp_path / "2024-03-05_0930-foo.txt").exists()
        assert index.tags.count("bar") == 1
        assert index.tags.count("foo") == 2

    def test_existing_tags_not_revalidated(self, tmp_path):
        (tmp_path / "2024-03-05_0930-v1.2-rc").write_text("")
        index = make_index(tmp_path)
        assert index.latest.tags == ("v1.2-rc",)

        entry = index.push_tag("shipped")

        assert entry.name == "2024-03-05_0930-v1.2-rc_shipped"
        assert index.codec.decode(entry.name) == (entry.creation_time, ("v1.2-rc", "shipped"))

    def test_new_tag_still_validated(self, tmp_path):
        (tmp_path / "2024-03-05_0930-v1.2-rc").write_text("")
        index = make_index(tmp_path)
        with pytest.raises(TagFormatError):
            index.push_tag("v2.0")

    def test_push_onto_name_without_tag_start(self, tmp_path):
        (tmp_path / "2024-03-05_0930foo").write_text("")
        index = make_index(tmp_path)
        entry = index.push_tag("bar")
        assert entry.name == "2024-03-05_0930-foo_bar"
        assert entry.tags == ("foo", "bar")

    def test_target_name_taken(self, tmp_path):
        (tmp_path / "2024-03-01_0800").write_text("")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "2024-03-01_0800").write_text("")
        (tmp_path / "sub" / "2024-03-01_0800-x").write_text("")
        index = make_index(tmp_path)

        with pytest.raises(EntryExistsError):
            index.push_tag("x", "^2024-03-01_0800$")


class TestRemoveLatest:
    """Deleting the newest entry."""

    def test_remove(self, tmp_path):
        (tmp_path / "2024-03-01_0800-work").write_text("")
        (tmp_path / "2024-03-02_0800-work_home").write_text("")
        index = make_index(tmp_path)

        removed = index.remove_latest()

        assert removed.name == "2024-03-02_0800-work_home"
        assert not removed.file_path.exists()
        assert [e.name for e in index] == ["2024-03-01_0800-work"]
        assert index.tags.sorted() == [(1, "work")]

    def test_empty(self, tmp_path):
        assert make_index(tmp_path).remove_latest() is None

    def test_already_deleted(self, tmp_path):
        path = tmp_path / "2024-03-01_0800"
        path.write_text("")
        index = make_index(tmp_path)
        os.remove(path)
        assert index.remove_latest().file_path == path
        assert len(index) == 0

    def test_delete_failure_restores(self, tmp_path, monkeypatch):
        (tmp_path / "2024-03-02_0800-work").write_text("")
        index = make_index(tmp_path)

        def fail_unlink(self, missing_ok=False):
            raise PermissionError("read-only")

        monkeypatch.setattr(Path, "unlink", fail_unlink)
        with pytest.raises(EntryIOError):
            index.remove_latest()

        assert index.latest.name == "2024-03-02_0800-work"
        assert index.tags.count("work") == 1
