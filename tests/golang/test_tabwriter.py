"""Tests for elastic tab stop alignment."""

from __future__ import annotations

from godocgen.golang.tabwriter import CELL, SECTION, align


def test_align_pads_columns_to_widest_cell() -> None:
    text = f"a{CELL}int\nlong{CELL}string"

    assert align(text) == "a    int\nlong string"


def test_align_without_cells_only_drops_section_markers() -> None:
    assert align(f"x\n{SECTION}y") == "x\ny"


def test_align_breaks_blocks_on_indentation() -> None:
    text = f"\ta{CELL}b\n\tccc{CELL}d\ne{CELL}f"

    assert align(text) == "\ta   b\n\tccc d\ne f"


def test_align_breaks_blocks_on_section_marker() -> None:
    text = f"\tlonger{CELL}1\n{SECTION}\tx{CELL}2"

    assert align(text) == "\tlonger 1\n\tx 2"


def test_align_discards_empty_columns() -> None:
    text = f"a{CELL}{CELL}x\nbb{CELL}{CELL}y"

    assert align(text) == "a  x\nbb y"


def test_align_column_ends_where_cell_run_ends() -> None:
    text = f"ID{CELL}string{CELL}`json:\"id\"`\nTags{CELL}[]string"

    assert align(text) == "ID   string `json:\"id\"`\nTags []string"
