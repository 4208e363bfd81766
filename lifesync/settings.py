"""Planner settings: a versioned struct built from named fragments.

Defaults are grouped into small fragment functions (one per area of the
planner) that each return a partial mapping of field values.
``build_settings`` composes any number of fragments plus explicit overrides, and
``default_settings`` composes all of them.

Settings travel as a camelCase mapping in backups and as ``key, value`` rows in
the tabular store, one row per top-level key with the value JSON-encoded. Keys
this struct does not model are carried through untouched in ``extra``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Mapping, Sequence

from lifesync.codec.coerce import as_int, as_text, json_cell
from lifesync.models import Label, Role

logger = logging.getLogger(__name__)

SETTINGS_VERSION = 1

Fragment = Mapping[str, Any]


@dataclass
class ColorOption:
    name: str
    color: str
    time_estimate: str | None = None  # story sizes only, e.g. "1 hour"

    def to_dict(self) -> dict:
        data = {"name": self.name, "color": self.color}
        if self.time_estimate is not None:
            data["timeEstimate"] = self.time_estimate
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ColorOption:
        estimate = data.get("timeEstimate")
        return cls(
            name=as_text(data.get("name")),
            color=as_text(data.get("color"), "#6B7280"),
            time_estimate=estimate if isinstance(estimate, str) else None,
        )


@dataclass
class Settings:
    version: int = SETTINGS_VERSION
    theme: str = "system"
    roles: list[Role] = field(default_factory=list)
    labels: list[Label] = field(default_factory=list)
    story_types: list[ColorOption] = field(default_factory=list)
    story_sizes: list[ColorOption] = field(default_factory=list)
    task_categories: list[ColorOption] = field(default_factory=list)
    vision_types: list[ColorOption] = field(default_factory=list)
    goal_categories: list[ColorOption] = field(default_factory=list)
    goal_types: list[ColorOption] = field(default_factory=list)
    goal_statuses: list[ColorOption] = field(default_factory=list)
    bucketlist_types: list[ColorOption] = field(default_factory=list)
    bucketlist_categories: list[ColorOption] = field(default_factory=list)
    project_types: list[ColorOption] = field(default_factory=list)
    project_sizes: list[ColorOption] = field(default_factory=list)
    tradition_types: list[ColorOption] = field(default_factory=list)
    traditional_categories: list[ColorOption] = field(default_factory=list)
    important_date_types: list[ColorOption] = field(default_factory=list)
    countries: list[str] = field(default_factory=list)
    us_states: list[str] = field(default_factory=list)
    experience_categories: list[str] = field(default_factory=list)
    priority_colors: dict[str, str] = field(default_factory=dict)
    bucketlist_priority_colors: dict[str, str] = field(default_factory=dict)
    project_priority_colors: dict[str, str] = field(default_factory=dict)
    role_to_type_map: dict[str, str] = field(default_factory=dict)
    status_colors: dict[str, str] = field(default_factory=dict)
    size_colors: dict[str, str] = field(default_factory=dict)
    chart_colors: dict[str, str] = field(default_factory=dict)
    weight_base_color: str = "#3B82F6"
    assignment_weight_base_color: str = "#3B82F6"
    roadmap_scheduled_color: str = "#8B5CF6"
    rules: list[dict] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)  # unmodelled keys (ui, layout, ...)


def _palette(*pairs: tuple[str, str]) -> list[ColorOption]:
    return [ColorOption(name, color) for name, color in pairs]


_HIGH_MEDIUM_LOW = {"high": "#EF4444", "medium": "#F59E0B", "low": "#6B7280"}
_SIZE_SCALE = (("XS", "#10B981"), ("S", "#3B82F6"), ("M", "#F59E0B"), ("L", "#EF4444"), ("XL", "#8B5CF6"))
_LIFE_AREAS = (
    ("Spiritual", "#8B5CF6"),
    ("Physical", "#EF4444"),
    ("Intellectual", "#3B82F6"),
    ("Social", "#10B981"),
)


# --- fragments ---------------------------------------------------------------


def identity_fragment() -> Fragment:
    """Theme, roles, labels and how roles map to story types."""
    return {
        "theme": "system",
        "roles": [
            Role("disciple", "Disciple of Christ", "#8B5CF6"),
            Role("individual", "Individual/Development", "#3B82F6"),
            Role("family", "Family Member", "#F59E0B"),
            Role("friend", "Friend", "#10B981"),
            Role("student", "Student", "#3B82F6"),
            Role("employer", "Employer", "#EF4444"),
            Role("future-employer", "Future Employer", "#8B5CF6"),
        ],
        "labels": [
            Label("workout", "workout", "#EF4444"),
            Label("study", "study", "#3B82F6"),
            Label("family", "family", "#F59E0B"),
            Label("spiritual", "spiritual", "#8B5CF6"),
        ],
        "role_to_type_map": {
            "disciple": "Spiritual",
            "individual": "Intellectual",
            "family": "Social",
            "friend": "Social",
            "student": "Intellectual",
            "employer": "Social",
            "future-employer": "Social",
        },
    }


def story_fragment() -> Fragment:
    estimates = ("15 min", "30 min", "1 hour", "2-4 hours", "1+ days")
    return {
        "story_types": _palette(*_LIFE_AREAS),
        "story_sizes": [
            ColorOption(name, color, estimate)
            for (name, color), estimate in zip(_SIZE_SCALE, estimates)
        ],
        "task_categories": _palette(
            ("Decisions", "#8B5CF6"),
            ("Actions", "#10B981"),
            ("Involve Others", "#F59E0B"),
            ("Buying", "#EF4444"),
            ("Travel", "#3B82F6"),
        ),
        "size_colors": dict(_SIZE_SCALE),
        "status_colors": {
            "icebox": "#6B7280",
            "backlog": "#3B82F6",
            "todo": "#F59E0B",
            "progress": "#F97316",
            "review": "#8B5CF6",
            "done": "#10B981",
        },
        "weight_base_color": "#3B82F6",
        "roadmap_scheduled_color": "#8B5CF6",
    }


def goal_fragment() -> Fragment:
    return {
        "vision_types": _palette(*_LIFE_AREAS),
        "goal_categories": _palette(("Target", "#3B82F6"), ("Lifestyle/Value", "#10B981")),
        "goal_types": _palette(*_LIFE_AREAS, ("Financial", "#F59E0B"), ("Protector", "#81E6D9")),
        "goal_statuses": _palette(
            ("Icebox", "#6B7280"),
            ("Backlog", "#3B82F6"),
            ("To Do", "#F59E0B"),
            ("In Progress", "#10B981"),
            ("Review", "#8B5CF6"),
            ("Done", "#22C55E"),
        ),
    }


def bucketlist_fragment() -> Fragment:
    return {
        "bucketlist_types": _palette(("Location", "#3B82F6"), ("Experience", "#10B981")),
        "bucketlist_categories": _palette(
            ("Adventure", "#EF4444"),
            ("Travel", "#3B82F6"),
            ("Learning", "#8B5CF6"),
            ("Experience", "#10B981"),
            ("Achievement", "#F59E0B"),
            ("Personal", "#EC4899"),
        ),
        "bucketlist_priority_colors": dict(_HIGH_MEDIUM_LOW),
        "countries": list(COUNTRIES),
        "us_states": list(US_STATES),
        "experience_categories": list(EXPERIENCE_CATEGORIES),
    }


def project_fragment() -> Fragment:
    return {
        "project_types": _palette(
            ("Code", "#3B82F6"),
            ("Organization", "#8B5CF6"),
            ("Creative", "#10B981"),
            ("Work", "#EF4444"),
            ("Personal", "#F59E0B"),
            ("Learning", "#8B5CF6"),
            ("Health", "#22C55E"),
        ),
        "project_sizes": _palette(*_SIZE_SCALE),
        "project_priority_colors": dict(_HIGH_MEDIUM_LOW),
    }


def tradition_fragment() -> Fragment:
    return {
        "tradition_types": _palette(
            ("Spiritual", "#8B5CF6"),
            ("Physical", "#10B981"),
            ("Intellectual", "#F59E0B"),
            ("Social", "#3B82F6"),
        ),
        "traditional_categories": _palette(
            ("Christmas", "#EF4444"),
            ("Birthday", "#F59E0B"),
            ("New Year", "#8B5CF6"),
            ("Easter", "#10B981"),
            ("Thanksgiving", "#F97316"),
            ("Halloween", "#7C3AED"),
            ("Valentine's Day", "#EC4899"),
            ("Anniversary", "#06B6D4"),
        ),
        "important_date_types": _palette(("School", "#3B82F6"), ("Work", "#EF4444"), ("Other", "#6B7280")),
    }


def color_fragment() -> Fragment:
    return {
        "priority_colors": {
            "Q1": "#EF4444",  # urgent & important
            "Q2": "#10B981",  # important, not urgent
            "Q3": "#F59E0B",  # urgent, not important
            "Q4": "#6B7280",
            **_HIGH_MEDIUM_LOW,
        },
        "chart_colors": {"ideal": "#8884d8", "actual": "#82ca9d"},
        "assignment_weight_base_color": "#3B82F6",
    }


DEFAULT_FRAGMENTS: tuple[Callable[[], Fragment], ...] = (
    identity_fragment,
    story_fragment,
    goal_fragment,
    bucketlist_fragment,
    project_fragment,
    tradition_fragment,
    color_fragment,
)


def build_settings(*fragments: Fragment, **overrides: Any) -> Settings:
    """Compose fragments left to right; later fragments and overrides win."""
    merged: dict[str, Any] = {}
    for fragment in fragments:
        merged.update(fragment)
    merged.update(overrides)
    unknown = set(merged) - {f.name for f in fields(Settings)}
    if unknown:
        raise TypeError(f"Unknown settings fields: {', '.join(sorted(unknown))}")
    return Settings(**merged)


def default_settings() -> Settings:
    return build_settings(*(fragment() for fragment in DEFAULT_FRAGMENTS))


# --- wire conversion ---------------------------------------------------------


def _camel(attr: str) -> str:
    head, *rest = attr.split("_")
    return head + "".join(part.capitalize() for part in rest)


_ROLE_LISTS: dict[str, type] = {"roles": Role, "labels": Label}
_KEYS: dict[str, str] = {_camel(f.name): f.name for f in fields(Settings) if f.name != "extra"}


def settings_to_dict(settings: Settings) -> dict[str, Any]:
    """Settings -> camelCase mapping, with ``extra`` keys merged back in."""
    data: dict[str, Any] = dict(settings.extra)
    for key, attr in _KEYS.items():
        value = getattr(settings, attr)
        if attr in _ROLE_LISTS:
            value = [{"id": item.id, "name": item.name, "color": item.color} for item in value]
        elif isinstance(value, list):
            value = [item.to_dict() if isinstance(item, ColorOption) else item for item in value]
        elif isinstance(value, dict):
            value = dict(value)
        data[key] = value
    return data


def settings_from_dict(data: Mapping[str, Any]) -> Settings:
    """camelCase mapping -> Settings.

    Keys that are missing, or present with the wrong shape, keep their default
    value. Unknown keys are preserved in ``extra``.
    """
    settings = default_settings()
    for key, value in data.items():
        attr = _KEYS.get(key)
        if attr is None:
            settings.extra[key] = value
            continue
        coerced = _coerce_field(attr, value, getattr(settings, attr))
        if coerced is None:
            logger.warning(f"Ignoring settings key {key!r} with unexpected value type")
            continue
        setattr(settings, attr, coerced)
    return settings


def _coerce_field(attr: str, value: Any, current: Any) -> Any:
    if attr == "version":
        return as_int(value, SETTINGS_VERSION)
    if isinstance(current, str):
        return value if isinstance(value, str) else None
    if isinstance(current, dict):
        return dict(value) if isinstance(value, Mapping) else None
    if not isinstance(value, list):
        return None
    if attr in _ROLE_LISTS:
        item_type = _ROLE_LISTS[attr]
        return [
            item_type(
                id=as_text(item.get("id")),
                name=as_text(item.get("name")),
                color=as_text(item.get("color"), "#6B7280"),
            )
            for item in value
            if isinstance(item, Mapping)
        ]
    if attr in ("countries", "us_states", "experience_categories"):
        return [item for item in value if isinstance(item, str)]
    if attr == "rules":
        return [item for item in value if isinstance(item, Mapping)]
    return [ColorOption.from_dict(item) for item in value if isinstance(item, Mapping)]


def settings_to_rows(settings: Settings) -> list[list[str]]:
    """One ``[key, json_value]`` row per settings key."""
    return [[key, json_cell(value)] for key, value in settings_to_dict(settings).items()]


def rows_to_settings(rows: Sequence[Sequence[Any]]) -> Settings:
    """Inverse of ``settings_to_rows``. Values that are not JSON are kept as raw strings."""
    data: dict[str, Any] = {}
    for row in rows:
        key = as_text(row[0]).strip() if row else ""
        if not key:
            continue
        raw = row[1] if len(row) > 1 else ""
        if raw == "" or raw is None:
            continue
        try:
            data[key] = json.loads(raw) if isinstance(raw, str) else raw
        except (json.JSONDecodeError, ValueError):
            data[key] = raw
    return settings_from_dict(data)


COUNTRIES = (
    "United States", "Canada", "Mexico", "United Kingdom", "France", "Germany", "Italy", "Spain",
    "Japan", "China", "India", "Australia", "Brazil", "Argentina", "Chile", "Peru",
    "South Africa", "Egypt", "Morocco", "Nigeria", "Kenya", "Thailand", "Vietnam",
    "Indonesia", "Philippines", "South Korea", "Singapore", "Malaysia", "New Zealand",
)

US_STATES = (
    "Alabama", "Alaska", "Arizona", "Arkansas", "California", "Colorado", "Connecticut",
    "Delaware", "Florida", "Georgia", "Hawaii", "Idaho", "Illinois", "Indiana", "Iowa",
    "Kansas", "Kentucky", "Louisiana", "Maine", "Maryland", "Massachusetts", "Michigan",
    "Minnesota", "Mississippi", "Missouri", "Montana", "Nebraska", "Nevada", "New Hampshire",
    "New Jersey", "New Mexico", "New York", "North Carolina", "North Dakota", "Ohio",
    "Oklahoma", "Oregon", "Pennsylvania", "Rhode Island", "South Carolina", "South Dakota",
    "Tennessee", "Texas", "Utah", "Vermont", "Virginia", "Washington", "West Virginia",
    "Wisconsin", "Wyoming",
)

EXPERIENCE_CATEGORIES = (
    "Adventure", "Cultural", "Educational", "Entertainment", "Food & Drink", "Nature",
    "Sports", "Wellness", "Art & Music", "History", "Technology", "Business",
    "Volunteer", "Spiritual", "Social", "Personal Growth",
)
