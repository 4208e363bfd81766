"""Merge imported collections into existing ones.

``merge`` reconciles one collection. ``apply_import`` runs it for every
collection selected in ``ImportOptions``, replaces settings wholesale when asked
to, and carries board layout through from the existing dataset.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Hashable, Sequence, TypeVar

from lifesync.codec.registry import all_kinds
from lifesync.models import Dataset

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ImportMode(str, Enum):
    MERGE = "merge"
    OVERWRITE = "overwrite"


@dataclass
class ImportOptions:
    mode: ImportMode = ImportMode.MERGE
    import_stories: bool = True
    import_goals: bool = True
    import_projects: bool = True
    import_visions: bool = True
    import_bucketlist: bool = True
    import_important_dates: bool = True
    import_traditions: bool = True
    import_sprints: bool = False  # sprints are generated locally
    import_roles: bool = True
    import_labels: bool = True
    import_classes: bool = True
    import_assignments: bool = True
    import_settings: bool = False  # keep local preferences by default

    @classmethod
    def only(cls, *collections: str, mode: ImportMode = ImportMode.MERGE) -> ImportOptions:
        """Options selecting exactly the named collections."""
        options = cls(mode=mode, import_settings="settings" in collections)
        for kind in all_kinds():
            setattr(options, kind.import_flag, kind.collection in collections)
        return options


def merge(
    existing: Sequence[T],
    imported: Sequence[T],
    mode: ImportMode,
    key_of: Callable[[T], Hashable],
) -> list[T]:
    """Combine two collections of the same kind.

    In overwrite mode the result is ``imported``. In merge mode it is
    ``existing`` followed by the imported items whose key is not already taken
    by an existing item; on a key collision the existing item wins. Collisions
    among the imported items themselves are not resolved here.
    """
    if mode is ImportMode.OVERWRITE:
        return list(imported)
    taken = {key_of(item) for item in existing}
    return [*existing, *(item for item in imported if key_of(item) not in taken)]


def apply_import(existing: Dataset, imported: Dataset, options: ImportOptions) -> Dataset:
    """Merge every selected collection of ``imported`` into ``existing``.

    Neither input is modified, and the result holds its own lists. Unselected
    collections, boards and board columns are copies of those in ``existing``.
    """
    result = dataclasses.replace(
        existing,
        boards=list(existing.boards),
        columns=list(existing.columns),
        **{kind.collection: list(getattr(existing, kind.collection)) for kind in all_kinds()},
    )
    for kind in all_kinds():
        if not getattr(options, kind.import_flag, False):
            continue
        before = getattr(existing, kind.collection)
        merged = merge(before, getattr(imported, kind.collection), options.mode, kind.key_of)
        setattr(result, kind.collection, merged)
        logger.debug(
            f"{kind.collection}: {len(before)} existing, "
            f"{len(merged) - len(before):+d} after {options.mode.value}"
        )

    if options.import_settings and imported.settings is not None:
        result.settings = imported.settings
    return result
