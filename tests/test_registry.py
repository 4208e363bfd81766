"""Tests for lifesync.codec.registry."""

from __future__ import annotations

import pytest

from lifesync.codec.registry import all_kinds, get_kind, kind_for_collection, kind_for_sheet
from lifesync.codec.schema import SHEET_SCHEMAS
from lifesync.merge.engine import ImportOptions
from lifesync.models import Assignment, Dataset, Goal, Project, SchoolClass, Sprint, Story


class TestLookup:
    def test_every_sheet_has_a_kind(self):
        assert {kind.sheet for kind in all_kinds()} == set(SHEET_SCHEMAS)

    def test_every_collection_is_a_dataset_field(self):
        fields = set(Dataset.__dataclass_fields__)
        for kind in all_kinds():
            assert kind.collection in fields

    def test_every_kind_has_an_import_flag(self):
        options = ImportOptions()
        for kind in all_kinds():
            assert hasattr(options, kind.import_flag)

    def test_get_kind(self):
        assert get_kind("story").entity_type is Story
        assert get_kind("important_date").record_key == "importantDates"

    def test_unknown_tag(self):
        with pytest.raises(KeyError):
            get_kind("habit")

    def test_by_sheet_and_collection(self):
        assert kind_for_sheet("Goals").tag == "goal"
        assert kind_for_collection("important_dates").sheet == "ImportantDates"
        assert kind_for_sheet("Nope") is None
        assert kind_for_collection("nope") is None


class TestDedupKeys:
    def test_title_is_trimmed(self):
        key_of = get_kind("story").key_of
        assert key_of(Story(id="a", title="  Run ")) == key_of(Story(id="b", title="Run"))

    def test_key_ignores_id(self):
        key_of = get_kind("goal").key_of
        assert key_of(Goal(id="a", title="G")) == key_of(Goal(id="b", title="G"))

    def test_project_by_name(self):
        assert get_kind("project").key_of(Project(id="p", name=" Garden ")) == "Garden"

    def test_sprint_by_id(self):
        assert get_kind("sprint").key_of(Sprint(id="Week-3-2025", iso_week=3)) == "Week-3-2025"

    def test_class_composite(self):
        cls = SchoolClass(id="c", title="Linear Algebra", class_code="MATH 313")
        assert get_kind("class").key_of(cls) == "Linear Algebra-MATH 313"

    def test_assignment_composite(self):
        assignment = Assignment(id="a", class_id="class-1", title="Problem set 1")
        assert get_kind("assignment").key_of(assignment) == "class-1-Problem set 1"
