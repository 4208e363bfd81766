"""Structural validators for untyped records.

Each ``validate_<kind>`` answers one question: does this value have the shape of
that entity kind? Required fields must be present with the right primitive
type; optional fields may be missing or None. Nothing here checks that values
make sense together or that referenced ids exist.

Validators never raise. A False result means "not this kind", and the caller
decides whether to drop the value or fall back to a default.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

Check = Callable[[Any], bool]


def is_str(value: Any) -> bool:
    return isinstance(value, str)


def is_number(value: Any) -> bool:
    # bool is an int subclass but never a count
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def is_list(value: Any) -> bool:
    return isinstance(value, list)


def is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def optional(check: Check) -> Check:
    return lambda value: value is None or check(value)


def _conforms(value: Any, shape: Mapping[str, Check]) -> bool:
    if not isinstance(value, Mapping):
        return False
    for key, check in shape.items():
        if not check(value.get(key)):
            return False
    return True


_TIMESTAMPED = {"createdAt": is_str, "updatedAt": is_str}

STORY_SHAPE: dict[str, Check] = {
    "id": is_str,
    "title": is_str,
    "description": is_str,
    "labels": is_list,
    "priority": is_str,
    "weight": is_number,
    "size": is_str,
    "type": is_str,
    "status": is_str,
    "checklist": is_list,
    **_TIMESTAMPED,
    "taskCategories": optional(is_list),
    "deleted": optional(is_bool),
    "subtasks": optional(is_list),
}

GOAL_SHAPE: dict[str, Check] = {
    "id": is_str,
    "title": is_str,
    "category": is_str,
    "goalType": is_str,
    "priority": is_str,
    "status": is_str,
    "order": is_number,
    "storyIds": is_list,
    "completed": is_bool,
    **_TIMESTAMPED,
}

PROJECT_SHAPE: dict[str, Check] = {
    "id": is_str,
    "name": is_str,
    "description": is_str,
    "status": is_str,
    "priority": is_str,
    "order": is_number,
    "storyIds": is_list,
    **_TIMESTAMPED,
}

VISION_SHAPE: dict[str, Check] = {
    "id": is_str,
    "title": is_str,
    "type": is_str,
    "order": is_number,
}

BUCKETLIST_SHAPE: dict[str, Check] = {
    "id": is_str,
    "title": is_str,
    "completed": is_bool,
    "priority": is_str,
    "bucketlistType": is_str,
    **_TIMESTAMPED,
}

IMPORTANT_DATE_SHAPE: dict[str, Check] = {
    "id": is_str,
    "title": is_str,
    "date": is_str,
    "endDate": optional(is_str),
    "isRequired": optional(is_bool),
    "category": optional(is_str),
    **_TIMESTAMPED,
}

TRADITION_SHAPE: dict[str, Check] = {
    "id": is_str,
    "title": is_str,
    "description": is_str,
    "traditionType": is_str,
    "traditionalCategory": is_str,
    **_TIMESTAMPED,
}

SPRINT_SHAPE: dict[str, Check] = {
    "id": is_str,
    "isoWeek": is_number,
    "year": is_number,
    "startDate": is_str,
    "endDate": is_str,
}

ROLE_SHAPE: dict[str, Check] = {"id": is_str, "name": is_str, "color": is_str}

LABEL_SHAPE = ROLE_SHAPE

CLASS_SHAPE: dict[str, Check] = {
    "id": is_str,
    "title": is_str,
    "classCode": is_str,
    "semester": is_str,
    "year": is_number,
    "creditHours": is_number,
    "classType": is_str,
    "schedule": optional(is_list),
    "assignmentIds": optional(is_list),
    **_TIMESTAMPED,
}

ASSIGNMENT_SHAPE: dict[str, Check] = {
    "id": is_str,
    "classId": is_str,
    "title": is_str,
    "type": is_str,
    "status": is_str,
    "weight": is_number,
    "recurrencePattern": optional(is_mapping),
    **_TIMESTAMPED,
}

SETTINGS_SHAPE: dict[str, Check] = {
    "theme": is_str,
    "roles": is_list,
    "labels": is_list,
    "storyTypes": optional(is_list),
    "storySizes": optional(is_list),
    "priorityColors": optional(is_mapping),
    "statusColors": optional(is_mapping),
    "version": optional(is_number),
}


def validate_story(value: Any) -> bool:
    return _conforms(value, STORY_SHAPE)


def validate_goal(value: Any) -> bool:
    return _conforms(value, GOAL_SHAPE)


def validate_project(value: Any) -> bool:
    return _conforms(value, PROJECT_SHAPE)


def validate_vision(value: Any) -> bool:
    return _conforms(value, VISION_SHAPE)


def validate_bucketlist_item(value: Any) -> bool:
    return _conforms(value, BUCKETLIST_SHAPE)


def validate_important_date(value: Any) -> bool:
    return _conforms(value, IMPORTANT_DATE_SHAPE)


def validate_tradition(value: Any) -> bool:
    return _conforms(value, TRADITION_SHAPE)


def validate_sprint(value: Any) -> bool:
    return _conforms(value, SPRINT_SHAPE)


def validate_role(value: Any) -> bool:
    return _conforms(value, ROLE_SHAPE)


def validate_label(value: Any) -> bool:
    return _conforms(value, LABEL_SHAPE)


def validate_class(value: Any) -> bool:
    return _conforms(value, CLASS_SHAPE)


def validate_assignment(value: Any) -> bool:
    return _conforms(value, ASSIGNMENT_SHAPE)


def validate_settings(value: Any) -> bool:
    return _conforms(value, SETTINGS_SHAPE)
