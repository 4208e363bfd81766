"""Shared test fixtures for lifesync."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from lifesync.models import (
    Assignment,
    Board,
    BoardColumn,
    BucketlistItem,
    ChecklistItem,
    Dataset,
    Goal,
    ImportantDate,
    Label,
    Project,
    Repeat,
    Role,
    SchoolClass,
    Sprint,
    Story,
    Tradition,
    Vision,
)
from lifesync.settings import default_settings
from lifesync.storage.db import get_connection
from lifesync.storage.repository import Workbook

STAMP = "2025-01-06T09:00:00.000Z"


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "test.db"


@pytest.fixture
def db_conn(db_path: Path) -> sqlite3.Connection:
    conn = get_connection(db_path)
    yield conn
    conn.close()


@pytest.fixture
def workbook(db_conn: sqlite3.Connection) -> Workbook:
    return Workbook(db_conn)


@pytest.fixture
def sample_story() -> Story:
    return Story(
        id="story-1",
        title="Morning run",
        description="5k around the park, easy pace",
        labels=["workout"],
        priority="Q2",
        weight=3,
        size="S",
        type="Physical",
        status="todo",
        role_id="individual",
        vision_id="vision-1",
        sprint_id="Week-2-2025",
        task_categories=["Actions"],
        scheduled_date="2025-01-07",
        location="Riverside park",
        checklist=[ChecklistItem("c1", "Stretch", True), ChecklistItem("c2", "Run", False)],
        created_at=STAMP,
        updated_at=STAMP,
        repeat=Repeat("weekly", 4),
        subtasks=["story-2"],
    )


@pytest.fixture
def sample_goal() -> Goal:
    return Goal(
        id="goal-1",
        title="Run a half marathon",
        name="Run a half marathon",
        description="Spring race",
        category="target",
        goal_type="Physical",
        priority="high",
        status="in-progress",
        order=2,
        story_ids=["story-1"],
        created_at=STAMP,
        updated_at=STAMP,
    )


@pytest.fixture
def sample_dataset(sample_story: Story, sample_goal: Goal) -> Dataset:
    """One or two items in every collection, plus layout and settings."""
    return Dataset(
        stories=[sample_story, Story(id="story-2", title="Buy shoes", created_at=STAMP, updated_at=STAMP)],
        goals=[sample_goal],
        projects=[Project(id="project-1", name="Garden beds", story_ids=["story-2"],
                          created_at=STAMP, updated_at=STAMP)],
        visions=[Vision(id="vision-1", title="Healthy body", name="Healthy body", type="Physical", order=1)],
        bucketlist=[BucketlistItem(id="bucket-1", title="See the northern lights", bucketlist_type="location",
                                   country="Norway", created_at=STAMP, updated_at=STAMP)],
        important_dates=[ImportantDate(id="date-1", title="Finals week", date="2025-05-05",
                                       end_date="2025-05-09", is_required=True, category="School",
                                       created_at=STAMP, updated_at=STAMP)],
        traditions=[Tradition(id="tradition-1", title="Christmas Eve pajamas", tradition_type="Holiday",
                              traditional_category="Social", created_at=STAMP, updated_at=STAMP)],
        sprints=[Sprint(id="Week-2-2025", iso_week=2, year=2025, start_date="2025-01-06", end_date="2025-01-12")],
        roles=[Role(id="individual", name="Individual/Development", color="#3B82F6")],
        labels=[Label(id="workout", name="workout", color="#EF4444")],
        classes=[SchoolClass(id="class-1", title="Linear Algebra", class_code="MATH 313", year=2025,
                             schedule=[{"day": "Mon", "time": "09:00"}], assignment_ids=["assignment-1"],
                             created_at=STAMP, updated_at=STAMP)],
        assignments=[Assignment(id="assignment-1", class_id="class-1", title="Problem set 1", type="homework",
                                due_date="2025-01-10", recurrence_pattern={"frequency": "weekly"},
                                created_at=STAMP, updated_at=STAMP)],
        boards=[Board(id="board-1", name="Main", columns=["col-1"])],
        columns=[BoardColumn(id="col-1", name="To Do", story_ids=["story-1"])],
        settings=default_settings(),
    )
