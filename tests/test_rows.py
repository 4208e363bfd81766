"""Tests for lifesync.codec.rows and lifesync.codec.schema."""

from __future__ import annotations

from lifesync.codec.registry import all_kinds, get_kind
from lifesync.codec.rows import decode_row, encode_row, from_record, to_record
from lifesync.codec.schema import (
    GOAL_SCHEMA,
    SPRINT_SCHEMA,
    STORY_SCHEMA,
    attr_name,
    column_names,
    sheet_header,
)
from lifesync.models import ChecklistItem, Dataset, Goal, Repeat, Sprint, Story


class TestSchema:
    def test_attr_name(self):
        assert attr_name("scheduledDate") == "scheduled_date"
        assert attr_name("id") == "id"
        assert attr_name("isoWeek") == "iso_week"

    def test_every_column_maps_to_a_model_field(self):
        for kind in all_kinds():
            fields = set(kind.entity_type.__dataclass_fields__)
            for column in kind.schema:
                assert column.attr in fields, f"{kind.sheet}.{column.name}"

    def test_story_header_order(self):
        header = column_names(STORY_SCHEMA)
        assert header[:4] == ["id", "title", "description", "labels"]
        assert header[-3:] == ["deleted", "repeat", "subtasks"]

    def test_settings_header(self):
        assert sheet_header("Settings") == ["key", "value"]
        assert sheet_header("Sprints") == ["id", "isoWeek", "year", "startDate", "endDate"]


class TestEncode:
    def test_one_cell_per_column(self, sample_dataset: Dataset):
        for kind in all_kinds():
            for entity in getattr(sample_dataset, kind.collection):
                assert len(kind.encode(entity)) == len(kind.schema)

    def test_cell_formats(self, sample_story: Story):
        row = dict(zip(column_names(STORY_SCHEMA), encode_row(sample_story, STORY_SCHEMA)))
        assert row["labels"] == '["workout"]'
        assert row["weight"] == "3"
        assert row["deleted"] == "false"
        assert row["dueDate"] == ""
        assert row["repeat"] == '{"cadence":"weekly","count":4}'
        assert row["checklist"] == (
            '[{"id":"c1","text":"Stretch","done":true},{"id":"c2","text":"Run","done":false}]'
        )


class TestRoundTrip:
    def test_every_kind(self, sample_dataset: Dataset):
        for kind in all_kinds():
            for entity in getattr(sample_dataset, kind.collection):
                assert kind.decode(kind.encode(entity)) == entity, kind.tag

    def test_blank_optional_normalizes_to_none(self):
        story = Story(id="s", title="t", location="", created_at="x", updated_at="x")
        decoded = decode_row(encode_row(story, STORY_SCHEMA), STORY_SCHEMA, Story)
        assert decoded.location is None

    def test_records(self, sample_dataset: Dataset):
        for kind in all_kinds():
            for entity in getattr(sample_dataset, kind.collection):
                assert kind.from_record(kind.to_record(entity)) == entity, kind.tag


class TestRaggedRows:
    def test_empty_row(self):
        story = decode_row([], STORY_SCHEMA, Story)
        assert story.id
        assert story.title == ""
        assert story.weight == 1
        assert story.priority == "medium"
        assert story.size == "M"
        assert story.status == "backlog"
        assert story.labels == []
        assert story.deleted is False
        assert story.repeat is None
        assert story.created_at

    def test_short_row_keeps_what_is_there(self):
        story = decode_row(["s1", "Read a book", "Fiction"], STORY_SCHEMA, Story)
        assert story.id == "s1"
        assert story.title == "Read a book"
        assert story.description == "Fiction"
        assert story.checklist == []

    def test_sprint_defaults(self):
        sprint = decode_row(["Week-1-2025"], SPRINT_SCHEMA, Sprint)
        assert sprint.iso_week == 1
        assert sprint.year > 2000
        assert sprint.start_date == ""


class TestMalformedCells:
    def test_bad_number_uses_default(self):
        row = ["s1", "t", "", "", "", "heavy"]
        assert decode_row(row, STORY_SCHEMA, Story).weight == 1

    def test_bad_json_list_is_empty(self):
        row = ["s1", "t", "", "[not json"]
        assert decode_row(row, STORY_SCHEMA, Story).labels == []

    def test_deeply_nested_list_is_empty(self):
        row = ["s1", "t", "", "[" * 100000 + "]" * 100000]
        assert decode_row(row, STORY_SCHEMA, Story).labels == []

    def test_checklist_items_become_objects(self):
        row = [""] * len(STORY_SCHEMA)
        row[column_names(STORY_SCHEMA).index("checklist")] = '[{"id":"a","text":"Pack","done":true}, 3]'
        story = decode_row(row, STORY_SCHEMA, Story)
        assert story.checklist == [ChecklistItem("a", "Pack", True)]

    def test_repeat_not_an_object(self):
        row = [""] * len(STORY_SCHEMA)
        row[column_names(STORY_SCHEMA).index("repeat")] = '"weekly"'
        assert decode_row(row, STORY_SCHEMA, Story).repeat is None

    def test_repeat_object(self):
        row = [""] * len(STORY_SCHEMA)
        row[column_names(STORY_SCHEMA).index("repeat")] = '{"cadence":"monthly"}'
        assert decode_row(row, STORY_SCHEMA, Story).repeat == Repeat("monthly")


class TestFallbacks:
    def test_goal_name_falls_back_to_title(self):
        goal = decode_row(["g1", "Learn Spanish"], GOAL_SCHEMA, Goal)
        assert goal.name == "Learn Spanish"

    def test_goal_name_kept_when_present(self):
        goal = decode_row(["g1", "Learn Spanish", "Spanish B2"], GOAL_SCHEMA, Goal)
        assert goal.name == "Spanish B2"


class TestRecords:
    def test_unset_optionals_omitted(self):
        story = Story(id="s", title="t", created_at="x", updated_at="x")
        record = to_record(story, STORY_SCHEMA)
        assert "roleId" not in record
        assert "repeat" not in record
        assert record["labels"] == []

    def test_nested_values_are_plain(self, sample_story: Story):
        record = get_kind("story").to_record(sample_story)
        assert record["checklist"][0] == {"id": "c1", "text": "Stretch", "done": True}
        assert record["repeat"] == {"cadence": "weekly", "count": 4}

    def test_from_record_missing_keys(self):
        story = from_record({"title": "Only a title"}, STORY_SCHEMA, Story)
        assert story.title == "Only a title"
        assert story.weight == 1
        assert story.id
