"""Quote-aware splitting of interchange text into records and cells."""

from __future__ import annotations

import re
from typing import Iterator

QUOTE = '"'
SEPARATOR = ","
MARKER = re.compile(r"^=== (.+?) ===$")


def tokenize_line(line: str) -> list[str]:
    """Split one record into trimmed cells.

    Commas inside double quotes do not separate cells, and a doubled quote
    inside a quoted cell is a literal quote::

        >>> tokenize_line('a,"b,c","d""e"')
        ['a', 'b,c', 'd"e']
    """
    cells: list[str] = []
    current: list[str] = []
    in_quotes = False
    index = 0
    while index < len(line):
        char = line[index]
        if char == QUOTE:
            if in_quotes and line[index + 1 : index + 2] == QUOTE:
                current.append(QUOTE)
                index += 1
            else:
                in_quotes = not in_quotes
        elif char == SEPARATOR and not in_quotes:
            cells.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        index += 1
    cells.append("".join(current).strip())
    return cells


def iter_records(text: str) -> Iterator[str]:
    """Yield logical records, rejoining quoted cells that span physical lines.

    Blank lines between records are dropped. A section marker always starts a
    new record, so an unmatched quote never reaches past the next marker. An
    unterminated quote at end of input yields whatever was collected.
    """
    pending: str | None = None
    for line in text.splitlines():
        if pending is not None:
            if not MARKER.match(line.strip()):
                pending = f"{pending}\n{line}"
                if pending.count(QUOTE) % 2 == 0:
                    yield pending
                    pending = None
                continue
            yield pending
            pending = None
        if not line.strip():
            continue
        if line.count(QUOTE) % 2 and not MARKER.match(line.strip()):
            pending = line
            continue
        yield line
    if pending is not None:
        yield pending


def quote_cell(value: str) -> str:
    """Quote a cell when it holds a separator, a quote or a line break."""
    if any(char in value for char in (SEPARATOR, QUOTE, "\n", "\r")):
        return QUOTE + value.replace(QUOTE, QUOTE * 2) + QUOTE
    return value


def join_cells(cells: list[str]) -> str:
    return SEPARATOR.join(quote_cell(cell) for cell in cells)
