"""Section layouts for the interchange document.

Each section of the document carries one entity kind in a compact,
human-editable column set (not the full sheet schema). ``SectionFormat`` holds
the built-in header list for a section and knows how to turn a
label -> cell mapping into an entity and back.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping

from lifesync.codec.coerce import (
    as_delimited,
    as_identifier,
    as_int,
    as_optional_text,
    as_text,
    as_timestamp,
    current_year,
    delimited_cell,
    int_cell,
    new_id,
    text_cell,
)
from lifesync.codec.registry import EntityKind, get_kind
from lifesync.codec.schema import attr_name

HEADER_VERSION = 1


class FieldType(str, Enum):
    TEXT = "text"
    OPTIONAL = "optional"
    INT = "int"
    LIST = "list"  # "; "-separated
    ID = "id"
    TIMESTAMP = "timestamp"


@dataclass(frozen=True)
class DocField:
    label: str
    attr: str | None = None  # None: accepted on read, ignored, written blank
    field_type: FieldType = FieldType.TEXT
    default: Any = ""
    reader: Callable[[str], Any] | None = None

    def read(self, raw: str) -> Any:
        if self.reader is not None:
            return self.reader(raw)
        default = self.default() if callable(self.default) else self.default
        if self.field_type is FieldType.OPTIONAL:
            return as_optional_text(raw)
        if self.field_type is FieldType.INT:
            return as_int(raw, default)
        if self.field_type is FieldType.LIST:
            return as_delimited(raw)
        if self.field_type is FieldType.ID:
            return as_identifier(raw)
        if self.field_type is FieldType.TIMESTAMP:
            return as_timestamp(raw)
        return as_text(raw, default)

    def write(self, entity: Any) -> str:
        if self.attr is None:
            return ""
        value = getattr(entity, self.attr, None)
        if self.field_type is FieldType.LIST:
            return delimited_cell(value)
        if self.field_type is FieldType.INT:
            return int_cell(value)
        return text_cell(value)


@dataclass(frozen=True)
class SectionFormat:
    name: str  # lowercased section name, e.g. "important dates"
    kind_tag: str
    header_label: str  # literal first cell of a human-readable header line
    fields: tuple[DocField, ...]

    @property
    def kind(self) -> EntityKind:
        return get_kind(self.kind_tag)

    @property
    def headers(self) -> list[str]:
        return [f.label for f in self.fields]

    @property
    def required(self) -> str:
        """Label of the field a data line must fill to be kept."""
        return self.fields[0].label

    @property
    def marker(self) -> str:
        return f"=== {self.name.upper()} ==="

    def canonical_label(self, cell: str) -> str | None:
        """The built-in spelling of ``cell`` if it names one of this section's columns."""
        wanted = cell.strip().lower()
        for f in self.fields:
            if f.label.lower() == wanted:
                return f.label
        return None

    def decode(self, named: Mapping[str, str]) -> Any:
        """Build an entity from a label -> cell mapping. Missing labels read as blank."""
        values: dict[str, Any] = {}
        for f in self.fields:
            if f.attr is not None:
                values[f.attr] = f.read(named.get(f.label, ""))
        values.setdefault("id", new_id())
        for column in self.kind.schema:
            if column.fallback and not values.get(column.attr):
                values[column.attr] = values.get(attr_name(column.fallback), "")
        return self.kind.entity_type(**values)

    def encode(self, entity: Any) -> list[str]:
        return [f.write(entity) for f in self.fields]


def _bucketlist_type(raw: str) -> str:
    return "experience" if (raw or "Experience").lower() == "experience" else "location"


_BUCKETLIST_STATUSES = {"pending": "not-started", "completed": "completed", "in-progress": "in-progress"}


def _bucketlist_status(raw: str) -> str:
    return _BUCKETLIST_STATUSES.get(raw, "not-started")


_CREATED = DocField("Created At", "created_at", FieldType.TIMESTAMP)
_UPDATED = DocField("Updated At", "updated_at", FieldType.TIMESTAMP)
_IGNORED_TIMESTAMPS = (DocField("Created At"), DocField("Updated At"))

STORIES = SectionFormat("stories", "story", "Story", (
    DocField("Title", "title"),
    DocField("Description", "description"),
    DocField("Priority", "priority", default="Q4"),
    DocField("Type", "type", default="Intellectual"),
    DocField("Size", "size", default="M"),
    DocField("Weight", "weight", FieldType.INT, default=1),
    DocField("Status", "status", default="backlog"),
    DocField("SprintId", "sprint_id", FieldType.OPTIONAL),
    DocField("RoleId", "role_id", FieldType.OPTIONAL),
    DocField("VisionId", "vision_id", FieldType.OPTIONAL),
    DocField("ProjectId", "project_id", FieldType.OPTIONAL),
    DocField("GoalId", "goal_id", FieldType.OPTIONAL),
    DocField("Labels", "labels", FieldType.LIST),
    DocField("Task Categories", "task_categories", FieldType.LIST),
    DocField("Due Date", "due_date", FieldType.OPTIONAL),
    DocField("Scheduled Date", "scheduled_date", FieldType.OPTIONAL),
    DocField("Location", "location", FieldType.OPTIONAL),
    _CREATED,
    _UPDATED,
))

GOALS = SectionFormat("goals", "goal", "Goal", (
    DocField("Title", "title"),
    DocField("Description", "description", FieldType.OPTIONAL),
    DocField("Category", "category", default="target"),
    DocField("Type", "goal_type", default="Spiritual"),
    DocField("Priority", "priority", default="medium"),
    DocField("Status", "status", default="backlog"),
    DocField("Target Date"),
    DocField("Story Ids", "story_ids", FieldType.LIST),
    _CREATED,
    _UPDATED,
))

PROJECTS = SectionFormat("projects", "project", "Project", (
    DocField("Name", "name"),
    DocField("Description", "description"),
    DocField("Status", "status", default="active"),
    DocField("Priority", "priority", default="medium"),
    DocField("Start Date", "start_date", FieldType.OPTIONAL),
    DocField("End Date", "end_date", FieldType.OPTIONAL),
    DocField("Story Ids", "story_ids", FieldType.LIST),
    _CREATED,
    _UPDATED,
))

VISIONS = SectionFormat("visions", "vision", "Vision", (
    DocField("Title", "title"),
    DocField("Description", "description", FieldType.OPTIONAL),
    DocField("Type", "type", default="Spiritual"),
    DocField("Priority"),
    DocField("Order", "order", FieldType.INT, default=0),
    *_IGNORED_TIMESTAMPS,
))

BUCKETLIST = SectionFormat("bucketlist", "bucketlist", "Bucketlist Item", (
    DocField("Title", "title"),
    DocField("Description", "description", FieldType.OPTIONAL),
    DocField("Type", "bucketlist_type", reader=_bucketlist_type),
    DocField("Priority", "priority", default="Q2"),
    DocField("Status", "status", reader=_bucketlist_status),
    _CREATED,
    _UPDATED,
))

IMPORTANT_DATES = SectionFormat("important dates", "important_date", "Important Date", (
    DocField("Title", "title"),
    DocField("Date", "date"),
    _CREATED,
    _UPDATED,
))

TRADITIONS = SectionFormat("traditions", "tradition", "Tradition", (
    DocField("Title", "title"),
    DocField("Description", "description"),
    DocField("Type", "traditional_category", default="Spiritual"),
    _CREATED,
    _UPDATED,
))

SPRINTS = SectionFormat("sprints", "sprint", "Sprint", (
    DocField("Id", "id", FieldType.ID),
    DocField("Iso Week", "iso_week", FieldType.INT, default=1),
    DocField("Year", "year", FieldType.INT, default=current_year),
    DocField("Start Date", "start_date"),
    DocField("End Date", "end_date"),
    *_IGNORED_TIMESTAMPS,
))

ROLES = SectionFormat("roles", "role", "Role", (
    DocField("Name", "name"),
    DocField("Color", "color", default="#6B7280"),
))

LABELS = SectionFormat("labels", "label", "Label", (
    DocField("Name", "name"),
    DocField("Color", "color", default="#6B7280"),
))

# Document order
SECTIONS: dict[str, SectionFormat] = {
    section.name: section
    for section in (
        STORIES, GOALS, PROJECTS, VISIONS, BUCKETLIST,
        IMPORTANT_DATES, TRADITIONS, SPRINTS, ROLES, LABELS,
    )
}


def get_section(name: str) -> SectionFormat | None:
    """Look up a section by marker name, case-insensitively."""
    return SECTIONS.get(name.strip().lower())
