"""Elastic tab stops for re-printed Go declarations.

The printer marks alignment cells with ``\\v`` and leading indentation with
``\\t``. Consecutive lines at the same indentation form a block; within a
block, a column is aligned across the run of lines that all terminate a cell
in that column, exactly like text/tabwriter with DiscardEmptyColumns. A line
starting with ``\\f`` opens a new block even when the indentation matches.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

CELL = "\v"
SECTION = "\f"


@dataclass
class _Line:
    indent: int
    cells: List[str]
    widths: List[int] = field(default_factory=list)


def align(text: str, padding: int = 1) -> str:
    """Resolve cell separators in ``text`` into space padding."""
    if CELL not in text:
        return text.replace(SECTION, "")

    blocks: List[List[_Line]] = []
    current: List[_Line] = []
    for raw in text.split("\n"):
        section_break = raw.startswith(SECTION)
        raw = raw.lstrip(SECTION)
        content = raw.lstrip("\t")
        line = _Line(indent=len(raw) - len(content), cells=content.split(CELL))
        line.widths = [0] * (len(line.cells) - 1)
        if current and (section_break or line.indent != current[-1].indent or not content):
            blocks.append(current)
            current = []
        current.append(line)
    if current:
        blocks.append(current)

    output: List[str] = []
    for block in blocks:
        _format(block, 0, len(block), 0, padding)
        output.extend(_render(line) for line in block)
    return "\n".join(output)


def _format(lines: List[_Line], line0: int, line1: int, column: int, padding: int) -> None:
    this = line0
    while this < line1:
        if column >= len(lines[this].cells) - 1:
            this += 1
            continue
        start = this
        width = 0
        discardable = True
        while this < line1 and column < len(lines[this].cells) - 1:
            cell = lines[this].cells[column]
            width = max(width, len(cell) + padding)
            if cell:
                discardable = False
            this += 1
        if discardable:
            width = 0
        for index in range(start, this):
            lines[index].widths[column] = width
        _format(lines, start, this, column + 1, padding)


def _render(line: _Line) -> str:
    parts = ["\t" * line.indent]
    for cell, width in zip(line.cells, line.widths):
        parts.append(cell.ljust(width))
    parts.append(line.cells[-1])
    return "".join(parts)


__all__ = ["CELL", "SECTION", "align"]
