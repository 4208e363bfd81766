"""Column layouts for every sheet in the tabular store.

A schema is an ordered tuple of ``Column`` descriptors. Position in the tuple is
the column's position in a row; the descriptor says how the cell is coerced in
each direction. Column names are the wire names written to the sheet header.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from lifesync.codec.coerce import current_year
from lifesync.models import ChecklistItem, Repeat

SCHEMA_VERSION = 1

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def attr_name(column_name: str) -> str:
    """``scheduledDate`` -> ``scheduled_date``."""
    return _CAMEL_BOUNDARY.sub("_", column_name).lower()


class CellType(str, Enum):
    TEXT = "text"  # required string, default when blank
    OPTIONAL = "optional"  # trimmed string, None when blank
    INT = "int"
    BOOL = "bool"
    LIST = "list"  # JSON array
    JSON = "json"  # any JSON value, None when blank
    ID = "id"  # generated when blank
    TIMESTAMP = "timestamp"  # current time when blank


@dataclass(frozen=True)
class Column:
    name: str
    cell_type: CellType = CellType.TEXT
    default: Any = ""  # value, or zero-arg callable, used by TEXT and INT
    fallback: str | None = None  # column whose value fills a blank cell
    item_type: type | None = None  # dataclass built from JSON objects

    @property
    def attr(self) -> str:
        return attr_name(self.name)

    def default_value(self) -> Any:
        return self.default() if callable(self.default) else self.default


Schema = tuple[Column, ...]


def _opt(*names: str) -> list[Column]:
    return [Column(name, CellType.OPTIONAL) for name in names]


_ID = Column("id", CellType.ID)
_TIMESTAMPS = [Column("createdAt", CellType.TIMESTAMP), Column("updatedAt", CellType.TIMESTAMP)]

STORY_SCHEMA: Schema = (
    _ID,
    Column("title"),
    Column("description"),
    Column("labels", CellType.LIST),
    Column("priority", default="medium"),
    Column("weight", CellType.INT, default=1),
    Column("size", default="M"),
    Column("type"),
    Column("status", default="backlog"),
    *_opt("roleId", "visionId", "projectId", "dueDate", "sprintId", "scheduled"),
    Column("taskCategories", CellType.LIST),
    *_opt("scheduledDate", "location", "goalId"),
    Column("checklist", CellType.LIST, item_type=ChecklistItem),
    *_TIMESTAMPS,
    Column("deleted", CellType.BOOL),
    Column("repeat", CellType.JSON, item_type=Repeat),
    Column("subtasks", CellType.LIST),
)

GOAL_SCHEMA: Schema = (
    _ID,
    Column("title"),
    Column("name", fallback="title"),
    *_opt("description", "visionId"),
    Column("category", default="target"),
    Column("goalType"),
    *_opt("roleId"),
    Column("priority", default="medium"),
    Column("status", default="icebox"),
    Column("order", CellType.INT, default=0),
    Column("storyIds", CellType.LIST),
    *_opt("projectId"),
    Column("completed", CellType.BOOL),
    *_TIMESTAMPS,
)

PROJECT_SCHEMA: Schema = (
    _ID,
    Column("name"),
    Column("description"),
    Column("status", default="Icebox"),
    Column("priority", default="medium"),
    *_opt("type", "roleId", "visionId"),
    Column("order", CellType.INT, default=0),
    *_opt("startDate", "endDate"),
    Column("storyIds", CellType.LIST),
    *_TIMESTAMPS,
)

VISION_SCHEMA: Schema = (
    _ID,
    Column("title"),
    Column("name", fallback="title"),
    *_opt("description"),
    Column("type"),
    Column("order", CellType.INT, default=0),
)

BUCKETLIST_SCHEMA: Schema = (
    _ID,
    Column("title"),
    *_opt("description"),
    Column("completed", CellType.BOOL),
    *_opt("completedAt", "category"),
    Column("priority", default="medium"),
    Column("bucketlistType", default="experience"),
    *_opt("status", "roleId", "visionId", "dueDate"),
    Column("order", CellType.INT, default=0),
    *_opt("country", "state", "city", "experienceCategory"),
    *_TIMESTAMPS,
)

IMPORTANT_DATE_SCHEMA: Schema = (
    _ID,
    Column("title"),
    Column("date"),
    *_opt("endDate"),
    Column("isRequired", CellType.BOOL),
    *_opt("category"),
    *_TIMESTAMPS,
)

TRADITION_SCHEMA: Schema = (
    _ID,
    Column("title"),
    Column("description"),
    Column("traditionType"),
    Column("traditionalCategory"),
    *_TIMESTAMPS,
)

SPRINT_SCHEMA: Schema = (
    _ID,
    Column("isoWeek", CellType.INT, default=1),
    Column("year", CellType.INT, default=current_year),
    Column("startDate"),
    Column("endDate"),
)

ROLE_SCHEMA: Schema = (
    _ID,
    Column("name"),
    Column("color", default="#6B7280"),
)

LABEL_SCHEMA: Schema = ROLE_SCHEMA

CLASS_SCHEMA: Schema = (
    _ID,
    Column("title"),
    Column("classCode"),
    Column("semester", default="Fall"),
    Column("year", CellType.INT, default=current_year),
    Column("creditHours", CellType.INT, default=3),
    Column("classType", default="Major"),
    Column("schedule", CellType.LIST),
    Column("assignmentIds", CellType.LIST),
    *_TIMESTAMPS,
)

ASSIGNMENT_SCHEMA: Schema = (
    _ID,
    Column("classId"),
    Column("title"),
    Column("type"),
    *_opt("description", "dueDate", "dueTime"),
    Column("status", default="not-started"),
    Column("weight", CellType.INT, default=3),
    Column("recurrencePattern", CellType.JSON),
    *_opt("storyId"),
    *_TIMESTAMPS,
)

SETTINGS_COLUMNS: tuple[str, ...] = ("key", "value")

SHEET_SCHEMAS: dict[str, Schema] = {
    "Stories": STORY_SCHEMA,
    "Goals": GOAL_SCHEMA,
    "Projects": PROJECT_SCHEMA,
    "Visions": VISION_SCHEMA,
    "Bucketlist": BUCKETLIST_SCHEMA,
    "ImportantDates": IMPORTANT_DATE_SCHEMA,
    "Traditions": TRADITION_SCHEMA,
    "Sprints": SPRINT_SCHEMA,
    "Roles": ROLE_SCHEMA,
    "Labels": LABEL_SCHEMA,
    "Classes": CLASS_SCHEMA,
    "Assignments": ASSIGNMENT_SCHEMA,
}


def column_names(schema: Schema) -> list[str]:
    """The header row for a schema."""
    return [column.name for column in schema]


def sheet_header(sheet_name: str) -> list[str]:
    if sheet_name == "Settings":
        return list(SETTINGS_COLUMNS)
    return column_names(SHEET_SCHEMAS[sheet_name])

