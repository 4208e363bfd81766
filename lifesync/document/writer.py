"""Write a Dataset as a multi-section interchange document."""

from __future__ import annotations

from lifesync.document.sections import SECTIONS
from lifesync.document.tokenizer import join_cells
from lifesync.models import Dataset


def write_document(dataset: Dataset, include_headers: bool = True) -> str:
    """Render every non-empty collection as a ``=== NAME ===`` section.

    With ``include_headers`` each section starts with a line of its column
    labels, which the parser recognises and uses as the column mapping.
    """
    lines: list[str] = []
    for section in SECTIONS.values():
        entities = getattr(dataset, section.kind.collection)
        if not entities:
            continue
        lines.append(section.marker)
        if include_headers:
            lines.append(join_cells(section.headers))
        lines.extend(join_cells(section.encode(entity)) for entity in entities)
    return "\n".join(lines) + "\n" if lines else ""
