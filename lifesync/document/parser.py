"""Parse the multi-section interchange document into a Dataset.

The document is a sequence of ``=== NAME ===`` markers, each followed by
comma-separated data lines for that section. Each section starts with its
built-in header list. A header line, if present, replaces that list for the
rest of the section, so files whose columns were reordered or trimmed by hand
still decode correctly. Parsing never raises: unknown sections, stray lines and
rows without their required field are skipped and logged at debug level.
"""

from __future__ import annotations

import logging

from lifesync.document.sections import SectionFormat, get_section
from lifesync.document.tokenizer import MARKER, SEPARATOR, iter_records, tokenize_line
from lifesync.models import Dataset

logger = logging.getLogger(__name__)



def parse_document(text: str) -> Dataset:
    dataset = Dataset()
    section: SectionFormat | None = None
    header: list[str] = []
    seen_data = False

    for record in iter_records(text):
        marker = MARKER.match(record.strip())
        if marker:
            section = get_section(marker.group(1))
            if section is None:
                logger.debug(f"Ignoring unknown section: {marker.group(1)!r}")
            else:
                header = section.headers
                seen_data = False
            continue
        if section is None or SEPARATOR not in record:
            continue

        cells = tokenize_line(record)
        detected = detect_header(section, cells, allow_column_labels=not seen_data)
        if detected is not None:
            logger.debug(f"Header line in {section.name!r}: {cells}")
            if detected:
                header = detected
            continue

        seen_data = True
        named = {
            label: cells[index] if index < len(cells) else ""
            for index, label in enumerate(header)
            if label
        }
        if not named.get(section.required):
            logger.debug(f"Skipping {section.name!r} row without {section.required}")
            continue
        getattr(dataset, section.kind.collection).append(section.decode(named))

    logger.debug(f"Parsed document: {dataset.counts()}")
    return dataset


def detect_header(
    section: SectionFormat, cells: list[str], allow_column_labels: bool = True
) -> list[str] | None:
    """Recognise a header line.

    Returns None for a data line. For a header line, returns the column
    mapping it declares, or an empty list when the built-in mapping should stay
    active. Two shapes are recognised:

    * the first cell is the section's literal label (``Story``, ``Goal``, ...);
      if every other cell names a known column, the literal stands for the
      first built-in column and the rest are taken in their given order.
    * every non-empty cell names a known column (case-insensitive), the
      required column is among them and at least two columns are named. Only
      checked before the first data line of the section, when
      ``allow_column_labels`` is set.
    """
    if cells and cells[0] == section.header_label:
        rest = [section.canonical_label(cell) if cell else "" for cell in cells[1:]]
        if not any(rest) or any(label is None for label in rest):
            return []
        return [section.required, *rest]

    if not allow_column_labels or not any(cells):
        return None
    labels = [section.canonical_label(cell) if cell else "" for cell in cells]
    if any(label is None for label in labels):
        return None
    named = [label for label in labels if label]
    if section.required not in named or len(named) < 2:
        return None
    return labels
