"""Core data models for lifesync.

Field names are the snake_case form of the wire column names used by the
spreadsheet and backup formats (``roleId`` -> ``role_id``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from lifesync.codec.coerce import as_bool, as_int, as_text, current_year, now_iso

if TYPE_CHECKING:
    from lifesync.settings import Settings


@dataclass
class ChecklistItem:
    id: str
    text: str
    done: bool = False

    def to_dict(self) -> dict:
        return {"id": self.id, "text": self.text, "done": self.done}

    @classmethod
    def from_dict(cls, data: dict) -> ChecklistItem:
        return cls(
            id=as_text(data.get("id")),
            text=as_text(data.get("text")),
            done=as_bool(data.get("done")),
        )


@dataclass
class Repeat:
    cadence: str = "none"  # "none" | "weekly" | "biweekly" | "monthly"
    count: int | None = None

    def to_dict(self) -> dict:
        data: dict = {"cadence": self.cadence}
        if self.count is not None:
            data["count"] = self.count
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Repeat:
        count = data.get("count")
        return cls(
            cadence=as_text(data.get("cadence"), "none"),
            count=as_int(count) if count is not None else None,
        )


@dataclass
class Story:
    id: str
    title: str
    description: str = ""
    labels: list[str] = field(default_factory=list)  # label ids
    priority: str = "medium"  # "Q1".."Q4" | "high" | "medium" | "low"
    weight: int = 1  # 1 | 3 | 5 | 8 | 13 | 21
    size: str = "M"  # "XS" | "S" | "M" | "L" | "XL"
    type: str = ""
    status: str = "backlog"
    role_id: str | None = None
    vision_id: str | None = None
    project_id: str | None = None
    due_date: str | None = None
    sprint_id: str | None = None
    scheduled: str | None = None
    task_categories: list[str] = field(default_factory=list)
    scheduled_date: str | None = None
    location: str | None = None
    goal_id: str | None = None
    checklist: list[ChecklistItem] = field(default_factory=list)
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)
    deleted: bool = False
    repeat: Repeat | None = None
    subtasks: list[str] = field(default_factory=list)  # child story ids


@dataclass
class Goal:
    id: str
    title: str
    name: str = ""  # alias for title
    description: str | None = None
    vision_id: str | None = None
    category: str = "target"  # "target" | "lifestyle-value"
    goal_type: str = ""
    role_id: str | None = None
    priority: str = "medium"
    status: str = "icebox"
    order: int = 0
    story_ids: list[str] = field(default_factory=list)
    project_id: str | None = None
    completed: bool = False
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)


@dataclass
class Project:
    id: str
    name: str
    description: str = ""
    status: str = "Icebox"
    priority: str = "medium"
    type: str | None = None
    role_id: str | None = None
    vision_id: str | None = None
    order: int = 0
    start_date: str | None = None
    end_date: str | None = None
    story_ids: list[str] = field(default_factory=list)
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)


@dataclass
class Vision:
    id: str
    title: str
    name: str = ""  # alias for title
    description: str | None = None
    type: str = ""
    order: int = 0


@dataclass
class BucketlistItem:
    id: str
    title: str
    description: str | None = None
    completed: bool = False
    completed_at: str | None = None
    category: str | None = None
    priority: str = "medium"
    bucketlist_type: str = "experience"  # "location" | "experience"
    status: str | None = None  # "not-started" | "in-progress" | "completed" | "on-hold"
    role_id: str | None = None
    vision_id: str | None = None
    due_date: str | None = None
    order: int = 0
    country: str | None = None
    state: str | None = None
    city: str | None = None
    experience_category: str | None = None
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)


@dataclass
class ImportantDate:
    id: str
    title: str
    date: str = ""  # ISO date
    end_date: str | None = None
    is_required: bool = False
    category: str | None = None
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)


@dataclass
class Tradition:
    id: str
    title: str
    description: str = ""
    tradition_type: str = ""  # Holiday, Celebration, Traditional
    traditional_category: str = ""  # Social, Spiritual, Physical, Intellectual
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)


@dataclass
class Sprint:
    id: str  # "Week-<isoWeek>-<year>"
    iso_week: int = 1
    year: int = field(default_factory=current_year)
    start_date: str = ""  # Monday
    end_date: str = ""  # Sunday


@dataclass
class Role:
    id: str
    name: str
    color: str = "#6B7280"


@dataclass
class Label:
    id: str
    name: str
    color: str = "#6B7280"


@dataclass
class SchoolClass:
    id: str
    title: str
    class_code: str = ""
    semester: str = "Fall"
    year: int = field(default_factory=current_year)
    credit_hours: int = 3
    class_type: str = "Major"
    schedule: list[dict] = field(default_factory=list)
    assignment_ids: list[str] = field(default_factory=list)
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)


@dataclass
class Assignment:
    id: str
    class_id: str
    title: str
    type: str = ""
    description: str | None = None
    due_date: str | None = None
    due_time: str | None = None
    status: str = "not-started"
    weight: int = 3
    recurrence_pattern: dict | None = None
    story_id: str | None = None
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)


@dataclass
class Board:
    id: str
    name: str
    columns: list[str] = field(default_factory=list)  # column ids in order

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "columns": list(self.columns)}

    @classmethod
    def from_dict(cls, data: dict) -> Board:
        columns = data.get("columns")
        return cls(
            id=as_text(data.get("id")),
            name=as_text(data.get("name")),
            columns=[str(c) for c in columns] if isinstance(columns, list) else [],
        )


@dataclass
class BoardColumn:
    id: str
    name: str
    story_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "storyIds": list(self.story_ids)}

    @classmethod
    def from_dict(cls, data: dict) -> BoardColumn:
        story_ids = data.get("storyIds")
        return cls(
            id=as_text(data.get("id")),
            name=as_text(data.get("name")),
            story_ids=[str(s) for s in story_ids] if isinstance(story_ids, list) else [],
        )


@dataclass
class Dataset:
    """Every collection the planner exchanges, plus settings and layout."""

    stories: list[Story] = field(default_factory=list)
    goals: list[Goal] = field(default_factory=list)
    projects: list[Project] = field(default_factory=list)
    visions: list[Vision] = field(default_factory=list)
    bucketlist: list[BucketlistItem] = field(default_factory=list)
    important_dates: list[ImportantDate] = field(default_factory=list)
    traditions: list[Tradition] = field(default_factory=list)
    sprints: list[Sprint] = field(default_factory=list)
    roles: list[Role] = field(default_factory=list)
    labels: list[Label] = field(default_factory=list)
    classes: list[SchoolClass] = field(default_factory=list)
    assignments: list[Assignment] = field(default_factory=list)
    boards: list[Board] = field(default_factory=list)
    columns: list[BoardColumn] = field(default_factory=list)
    settings: Settings | None = None
    exported_at: str | None = None

    def counts(self) -> dict[str, int]:
        """Item count per entity collection."""
        from lifesync.codec.registry import all_kinds

        return {kind.collection: len(getattr(self, kind.collection)) for kind in all_kinds()}
