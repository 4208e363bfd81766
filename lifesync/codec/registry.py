"""Entity-kind registry.

Each kind of entity gets one ``EntityKind`` bundle holding everything generic
code needs: its sheet schema, its row codec, its structural validator and its
merge key. The document parser, the backup reader, the workbook and the merge
orchestration all look kinds up here instead of branching on the entity type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

from lifesync.codec import schema as schemas
from lifesync.codec import validators
from lifesync.codec.rows import Row, decode_row, encode_row, from_record, to_record
from lifesync.models import (
    Assignment,
    BucketlistItem,
    Goal,
    ImportantDate,
    Label,
    Project,
    Role,
    SchoolClass,
    Sprint,
    Story,
    Tradition,
    Vision,
)


def title_key(entity: Any) -> str:
    return entity.title.strip()


def name_key(entity: Any) -> str:
    return entity.name.strip()


def id_key(entity: Any) -> str:
    return entity.id


def class_key(entity: SchoolClass) -> str:
    return f"{entity.title}-{entity.class_code}"


def assignment_key(entity: Assignment) -> str:
    return f"{entity.class_id}-{entity.title}"


@dataclass(frozen=True)
class EntityKind:
    tag: str
    entity_type: type
    sheet: str  # sheet name in the tabular store
    collection: str  # Dataset attribute
    record_key: str  # key in backup files
    schema: schemas.Schema
    validate: Callable[[Any], bool]
    key_of: Callable[[Any], str]

    @property
    def columns(self) -> list[str]:
        return schemas.column_names(self.schema)

    @property
    def import_flag(self) -> str:
        """Name of the ImportOptions attribute that selects this collection."""
        return f"import_{self.collection}"

    def encode(self, entity: Any) -> Row:
        return encode_row(entity, self.schema)

    def decode(self, row: Sequence[Any]) -> Any:
        return decode_row(row, self.schema, self.entity_type)

    def to_record(self, entity: Any) -> dict[str, Any]:
        return to_record(entity, self.schema)

    def from_record(self, record: Mapping[str, Any]) -> Any:
        return from_record(record, self.schema, self.entity_type)


_KINDS: dict[str, EntityKind] = {
    kind.tag: kind
    for kind in (
        EntityKind("story", Story, "Stories", "stories", "stories",
                   schemas.STORY_SCHEMA, validators.validate_story, title_key),
        EntityKind("goal", Goal, "Goals", "goals", "goals",
                   schemas.GOAL_SCHEMA, validators.validate_goal, title_key),
        EntityKind("project", Project, "Projects", "projects", "projects",
                   schemas.PROJECT_SCHEMA, validators.validate_project, name_key),
        EntityKind("vision", Vision, "Visions", "visions", "visions",
                   schemas.VISION_SCHEMA, validators.validate_vision, title_key),
        EntityKind("bucketlist", BucketlistItem, "Bucketlist", "bucketlist", "bucketlist",
                   schemas.BUCKETLIST_SCHEMA, validators.validate_bucketlist_item, title_key),
        EntityKind("important_date", ImportantDate, "ImportantDates", "important_dates",
                   "importantDates", schemas.IMPORTANT_DATE_SCHEMA,
                   validators.validate_important_date, title_key),
        EntityKind("tradition", Tradition, "Traditions", "traditions", "traditions",
                   schemas.TRADITION_SCHEMA, validators.validate_tradition, title_key),
        EntityKind("sprint", Sprint, "Sprints", "sprints", "sprints",
                   schemas.SPRINT_SCHEMA, validators.validate_sprint, id_key),
        EntityKind("role", Role, "Roles", "roles", "roles",
                   schemas.ROLE_SCHEMA, validators.validate_role, name_key),
        EntityKind("label", Label, "Labels", "labels", "labels",
                   schemas.LABEL_SCHEMA, validators.validate_label, name_key),
        EntityKind("class", SchoolClass, "Classes", "classes", "classes",
                   schemas.CLASS_SCHEMA, validators.validate_class, class_key),
        EntityKind("assignment", Assignment, "Assignments", "assignments", "assignments",
                   schemas.ASSIGNMENT_SCHEMA, validators.validate_assignment, assignment_key),
    )
}


def get_kind(tag: str) -> EntityKind:
    """Look up a kind by tag. Raises KeyError for unknown tags."""
    return _KINDS[tag]


def all_kinds() -> list[EntityKind]:
    return list(_KINDS.values())


def kind_for_sheet(sheet: str) -> EntityKind | None:
    for kind in _KINDS.values():
        if kind.sheet == sheet:
            return kind
    return None


def kind_for_collection(collection: str) -> EntityKind | None:
    for kind in _KINDS.values():
        if kind.collection == collection:
            return kind
    return None
