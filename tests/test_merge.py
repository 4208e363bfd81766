"""Tests for lifesync.merge.engine."""

from __future__ import annotations

from dataclasses import dataclass

from lifesync.merge.engine import ImportMode, ImportOptions, apply_import, merge
from lifesync.models import Dataset, Goal, Project, Sprint, Story
from lifesync.settings import build_settings, default_settings


@dataclass
class Item:
    key: str
    v: int


def key(item: Item) -> str:
    return item.key


class TestMerge:
    def test_existing_wins_on_collision(self):
        result = merge([Item("x", 1)], [Item("x", 2)], ImportMode.MERGE, key)
        assert result == [Item("x", 1)]

    def test_new_items_appended_in_import_order(self):
        existing = [Item("a", 1), Item("b", 1)]
        imported = [Item("d", 2), Item("a", 2), Item("c", 2)]
        result = merge(existing, imported, ImportMode.MERGE, key)
        assert result == [Item("a", 1), Item("b", 1), Item("d", 2), Item("c", 2)]

    def test_idempotent(self):
        a = [Item("a", 1), Item("b", 1)]
        b = [Item("b", 2), Item("c", 2)]
        once = merge(a, b, ImportMode.MERGE, key)
        assert merge(once, b, ImportMode.MERGE, key) == once

    def test_overwrite_is_imported(self):
        imported = [Item("z", 9)]
        assert merge([Item("a", 1)], imported, ImportMode.OVERWRITE, key) == imported

    def test_overwrite_with_empty_import_clears(self):
        assert merge([Item("a", 1)], [], ImportMode.OVERWRITE, key) == []

    def test_empty_import_is_noop(self):
        existing = [Item("a", 1)]
        assert merge(existing, [], ImportMode.MERGE, key) == existing

    def test_empty_existing(self):
        imported = [Item("a", 1), Item("b", 2)]
        assert merge([], imported, ImportMode.MERGE, key) == imported

    def test_duplicates_inside_import_are_kept(self):
        imported = [Item("a", 1), Item("a", 2)]
        assert merge([], imported, ImportMode.MERGE, key) == imported

    def test_inputs_not_modified(self):
        existing = [Item("a", 1)]
        imported = [Item("b", 2)]
        merge(existing, imported, ImportMode.MERGE, key)
        assert existing == [Item("a", 1)]
        assert imported == [Item("b", 2)]


def _story(story_id: str, title: str) -> Story:
    return Story(id=story_id, title=title, created_at="x", updated_at="x")


class TestApplyImport:
    def test_stories_dedup_by_trimmed_title(self):
        existing = Dataset(stories=[_story("1", "Run")])
        imported = Dataset(stories=[_story("2", " Run "), _story("3", "Swim")])
        result = apply_import(existing, imported, ImportOptions())
        assert [s.id for s in result.stories] == ["1", "3"]

    def test_unselected_collection_passes_through(self):
        existing = Dataset(goals=[Goal(id="g1", title="Old")])
        imported = Dataset(goals=[Goal(id="g2", title="New")])
        options = ImportOptions(mode=ImportMode.OVERWRITE, import_goals=False)
        assert apply_import(existing, imported, options).goals == existing.goals

    def test_sprints_not_imported_by_default(self):
        existing = Dataset()
        imported = Dataset(sprints=[Sprint(id="Week-1-2025")])
        assert apply_import(existing, imported, ImportOptions()).sprints == []

    def test_overwrite_only_touches_selected(self):
        existing = Dataset(stories=[_story("1", "Run")], projects=[Project(id="p", name="Garden")])
        imported = Dataset(stories=[_story("2", "Swim")])
        options = ImportOptions.only("stories", mode=ImportMode.OVERWRITE)
        result = apply_import(existing, imported, options)
        assert [s.id for s in result.stories] == ["2"]
        assert [p.name for p in result.projects] == ["Garden"]

    def test_boards_and_columns_always_from_existing(self, sample_dataset: Dataset):
        imported = Dataset(boards=[], columns=[])
        options = ImportOptions(mode=ImportMode.OVERWRITE)
        result = apply_import(sample_dataset, imported, options)
        assert result.boards == sample_dataset.boards
        assert result.columns == sample_dataset.columns

    def test_settings_left_alone_by_default(self):
        existing = Dataset(settings=default_settings())
        imported = Dataset(settings=build_settings(theme="dark"))
        assert apply_import(existing, imported, ImportOptions()).settings is existing.settings

    def test_settings_replaced_wholesale(self):
        existing = Dataset(settings=default_settings())
        imported = Dataset(settings=build_settings(theme="dark"))
        result = apply_import(existing, imported, ImportOptions(import_settings=True))
        assert result.settings is imported.settings
        assert result.settings.roles == []

    def test_missing_imported_settings_keep_existing(self):
        existing = Dataset(settings=default_settings())
        result = apply_import(existing, Dataset(), ImportOptions(import_settings=True))
        assert result.settings is existing.settings

    def test_existing_not_modified(self):
        existing = Dataset(stories=[_story("1", "Run")])
        apply_import(existing, Dataset(stories=[_story("2", "Swim")]), ImportOptions())
        assert [s.id for s in existing.stories] == ["1"]

    def test_result_does_not_share_lists(self, sample_dataset: Dataset):
        result = apply_import(sample_dataset, Dataset(), ImportOptions.only("stories"))
        result.goals.append(Goal(id="g9", title="Added later"))
        result.boards.clear()
        result.stories.clear()
        assert len(sample_dataset.goals) == 1
        assert sample_dataset.boards
        assert len(sample_dataset.stories) == 2

    def test_reimport_is_idempotent(self, sample_dataset: Dataset):
        imported = Dataset(stories=[_story("9", "New story")], goals=[Goal(id="g9", title="New goal")])
        once = apply_import(sample_dataset, imported, ImportOptions())
        twice = apply_import(once, imported, ImportOptions())
        assert twice == once


class TestImportOptions:
    def test_defaults(self):
        options = ImportOptions()
        assert options.mode is ImportMode.MERGE
        assert options.import_stories
        assert not options.import_sprints
        assert not options.import_settings

    def test_only(self):
        options = ImportOptions.only("goals", "settings")
        assert options.import_goals
        assert options.import_settings
        assert not options.import_stories
        assert not options.import_roles
