"""Workbook extraction.

Turns the sheets of an uploaded rate sheet into a :class:`PricingModel`.
Detection is heuristic: a section header row names a term, the row below it
holds the column labels, and rate/price pairs follow until a blank row or the
next section. Which rows count as headers is decided by the pattern tables in
``tpo_pricing.patterns``.
"""
from __future__ import annotations

import logging
import math
import re
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Union

import pandas as pd

from tpo_pricing.models import GridRow, GridTable, PricingModel, Program, TabularSheet, TermKey
from tpo_pricing.patterns import (
    SheetFormat,
    cell_text,
    classify_row,
    classify_sheet,
    ends_block,
    get_format,
)
from tpo_pricing.presets import PROGRAM_LABELS

logger = logging.getLogger(__name__)

_NON_NUMERIC = re.compile(r"[^\d.\-]")


class ExtractionError(ValueError):
    """No usable pricing section could be extracted from the workbook."""

    def __init__(self, message: str, sheets: Optional[List[str]] = None):
        super().__init__(message)
        self.sheets = list(sheets or [])


def parse_number(value) -> Optional[float]:
    """Parse a cell into a finite float, keeping only digits, ``.`` and ``-``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        v = float(value)
    else:
        s = _NON_NUMERIC.sub("", str(value))
        if not s:
            return None
        try:
            v = float(s)
        except ValueError:
            return None
    return v if math.isfinite(v) else None


def is_blank(row) -> bool:
    return all(cell_text(v) == "" for v in (row or []))


def _cell(row, idx: int):
    return row[idx] if idx < len(row) else None


def find_column(header, predicate: Callable[[object], bool]) -> Optional[int]:
    for idx, label in enumerate(header or []):
        if predicate(label):
            return idx
    return None


def read_grid_rows(
    rows: TabularSheet, start: int, rate_col: int, price_col: int, fmt: SheetFormat
) -> Tuple[List[GridRow], int]:
    """Read rate/price pairs from ``start`` until a blank row or a block boundary.

    Returns the parsed rows and the index of the row that stopped the scan.
    """
    grid: List[GridRow] = []
    r = start
    while r < len(rows):
        row = rows[r] or []
        if is_blank(row) or ends_block(row, fmt):
            break
        rate = parse_number(_cell(row, rate_col))
        price = parse_number(_cell(row, price_col))
        if rate is not None and price is not None and rate > 0:
            grid.append(GridRow(rate=rate, price=price))
        r += 1
    return grid, r


def scan_sheet(rows: TabularSheet, fmt: SheetFormat, sheet_name: str = "") -> List[Tuple[TermKey, List[GridRow]]]:
    """Find every section in a sheet and return ``(term, rows)`` in sheet order."""
    sections: List[Tuple[TermKey, List[GridRow]]] = []
    i = 0
    while i < len(rows):
        term = classify_row(rows[i], fmt)
        if term is None:
            i += 1
            continue
        header = rows[i + 1] if i + 1 < len(rows) else []
        rate_col = find_column(header, fmt.rate_label)
        price_col = find_column(header, fmt.price_label)
        if rate_col is None or price_col is None:
            logger.warning(
                "Skipping %s section at row %d of sheet %r: rate/30-day columns not found",
                term,
                i + 1,
                sheet_name,
            )
            i += 1
            continue
        grid, end = read_grid_rows(rows, i + 2, rate_col, price_col, fmt)
        sections.append((term, grid))
        i = max(end, i + 2)
    return sections


def extract(
    sheets: Mapping[str, TabularSheet],
    fmt: Union[SheetFormat, str, None] = None,
    extracted_at: Optional[datetime] = None,
) -> PricingModel:
    """Build a pricing model from ``{sheet name: rows}``.

    Sheets are visited in mapping order; when two sheets supply the same
    program/term/tier slot the first one wins.
    """
    if not isinstance(fmt, SheetFormat):
        fmt = get_format(fmt)

    programs: Dict[str, Program] = {}
    source_sheet: Optional[str] = None
    for idx, (name, rows) in enumerate(sheets.items()):
        if fmt.first_sheet_only and idx > 0:
            break
        classified = classify_sheet(name, fmt)
        if classified is None:
            logger.debug("Ignoring sheet %r: no program rule matched", name)
            continue
        program_id, high_balance = classified
        logger.debug("Sheet %r classified as %s (high balance=%s)", name, program_id, high_balance)
        for term, grid_rows in scan_sheet(rows or [], fmt, name):
            if not grid_rows:
                logger.warning("Section %s on sheet %r has no parsable rate/price rows", term, name)
                continue
            program = programs.get(program_id) or Program(
                id=program_id, label=PROGRAM_LABELS.get(program_id, program_id)
            )
            target = program.high_balance_grids if high_balance else program.grids
            if term in target:
                logger.info(
                    "Ignoring duplicate %s %s grid on sheet %r; keeping sheet %r",
                    program_id,
                    term,
                    name,
                    target[term].source_sheet_name,
                )
                continue
            target[term] = GridTable(source_sheet_name=name, rows=grid_rows)
            programs[program_id] = program
            source_sheet = source_sheet or name

    if not programs:
        raise ExtractionError("no recognizable pricing section found", sheets=list(sheets))

    kwargs = {"extracted_at": extracted_at} if extracted_at is not None else {}
    model = PricingModel(source_sheet_name=source_sheet or "", programs=programs, **kwargs)
    logger.info(
        "Extracted %d program(s), %d grid(s) using format %s",
        len(model.programs),
        len(model.summary()),
        fmt.name,
    )
    return model


def frame_to_rows(df: pd.DataFrame) -> TabularSheet:
    """Convert a header-less DataFrame into rows of plain cell values."""
    return [
        [None if pd.isna(v) else v for v in row]
        for row in df.itertuples(index=False, name=None)
    ]


def read_workbook(source, filename: Optional[str] = None) -> Dict[str, TabularSheet]:
    """Read an ``.xlsx``/``.xls``/``.csv`` upload into ``{sheet name: rows}``.

    ``source`` may be a path or a file-like object such as a Streamlit upload.
    Sheet order follows the workbook.
    """
    name = filename or getattr(source, "name", None) or str(source)
    suffix = Path(name).suffix.lower()
    try:
        if suffix == ".csv":
            frames = {Path(name).stem or "Sheet1": pd.read_csv(source, header=None, dtype=object, skip_blank_lines=False)}
        else:
            engine = "xlrd" if suffix == ".xls" else None
            frames = pd.read_excel(source, sheet_name=None, header=None, dtype=object, engine=engine)
    except Exception as exc:
        raise ExtractionError(f"could not read workbook {Path(name).name!r}: {exc}") from exc
    return {str(sheet): frame_to_rows(df) for sheet, df in frames.items()}


def extract_workbook(source, filename: Optional[str] = None, fmt: Union[SheetFormat, str, None] = None) -> PricingModel:
    return extract(read_workbook(source, filename), fmt=fmt)
