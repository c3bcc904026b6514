"""Pattern tables used to recognize rate sheet layouts.

Each rate sheet format revision is described by a :class:`SheetFormat`:
ordered rules that classify sheet names into programs, ordered rules that
recognize section headers by term, and predicates that pick the rate and
price columns out of a column header row. The scan loop in
``tpo_pricing.extractor`` is shared by every format; adding a revision means
adding a table here, not another copy of the loop.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Pattern, Tuple

from tpo_pricing.models import ProgramId, TermKey

_SEPARATORS = re.compile(r"[-_]+")
_WHITESPACE = re.compile(r"\s+")


def cell_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def normalize_text(values: Iterable) -> str:
    """Join cell values into lower-case text with ``-``/``_`` folded to spaces."""
    text = " ".join(t for t in (cell_text(v) for v in values) if t)
    text = _SEPARATORS.sub(" ", text.lower())
    return _WHITESPACE.sub(" ", text).strip()


@dataclass(frozen=True)
class SectionRule:
    term: TermKey
    pattern: Pattern

    def match(self, text: str) -> Optional[TermKey]:
        return self.term if self.pattern.search(text) else None


@dataclass(frozen=True)
class SheetRule:
    program: ProgramId
    pattern: Pattern

    def match(self, text: str) -> Optional[ProgramId]:
        return self.program if self.pattern.search(text) else None


def is_rate_label(label) -> bool:
    return cell_text(label).lower().startswith("rate")


def is_price_label(label) -> bool:
    # The 30-day lock column is the price basis for every term.
    return "30" in cell_text(label)


@dataclass(frozen=True)
class SheetFormat:
    name: str
    sheet_rules: Tuple[SheetRule, ...]
    section_rules: Tuple[SectionRule, ...]
    high_balance: Optional[Pattern] = None
    # Rows that end a block without starting a new section.
    boundary: Optional[Pattern] = None
    rate_label: Callable[[object], bool] = is_rate_label
    price_label: Callable[[object], bool] = is_price_label
    first_sheet_only: bool = False


def _term(n: int) -> Pattern:
    return re.compile(rf"\b{n}\s*(?:yr|year)s?\b")


TERM_RULES: Tuple[SectionRule, ...] = (
    # ARM first: ARM headers often mention a 30 year amortization.
    SectionRule("arm", re.compile(r"\barms?\b")),
    SectionRule("30yr", _term(30)),
    SectionRule("20yr", _term(20)),
    SectionRule("15yr", _term(15)),
    SectionRule("10yr", _term(10)),
)

PROGRAM_RULES: Tuple[SheetRule, ...] = (
    # "non conforming" would otherwise classify as conventional.
    SheetRule("jumbo", re.compile(r"jumbo|non ?conf")),
    SheetRule("fha", re.compile(r"\bfha\b")),
    SheetRule("va", re.compile(r"\bva\b")),
    SheetRule("usda", re.compile(r"usda|rural")),
    SheetRule("conventional", re.compile(r"conv|conforming|agency|fannie|freddie|fnma|fhlmc")),
)

HIGH_BALANCE = re.compile(r"high ?bal|\bhb\b|super ?conforming")

V1 = SheetFormat(
    name="v1",
    sheet_rules=(SheetRule("conventional", re.compile(r"")),),
    section_rules=(SectionRule("30yr", re.compile(r"conforming 30 ?(?:yr|year)s? fixed")),),
    boundary=re.compile(r"\bconforming\b"),
    first_sheet_only=True,
)

V2 = SheetFormat(
    name="v2",
    sheet_rules=PROGRAM_RULES,
    section_rules=TERM_RULES,
    high_balance=HIGH_BALANCE,
)

FORMATS: Dict[str, SheetFormat] = {f.name: f for f in (V1, V2)}
DEFAULT_FORMAT = "v2"


def get_format(name: Optional[str] = None) -> SheetFormat:
    key = name or DEFAULT_FORMAT
    if key not in FORMATS:
        raise ValueError(f"Unknown rate sheet format {key!r}; expected one of {sorted(FORMATS)}")
    return FORMATS[key]


def classify_sheet(sheet_name: str, fmt: SheetFormat) -> Optional[Tuple[ProgramId, bool]]:
    """Return ``(program, is_high_balance)`` for a sheet name, or ``None``."""
    text = normalize_text([sheet_name])
    for rule in fmt.sheet_rules:
        program = rule.match(text)
        if program:
            high_balance = bool(fmt.high_balance and fmt.high_balance.search(text))
            return program, high_balance
    return None


def ends_block(row, fmt: SheetFormat) -> bool:
    """True when a row inside a grid closes it: a new section or a boundary row."""
    if classify_row(row, fmt):
        return True
    if fmt.boundary is None:
        return False
    return bool(fmt.boundary.search(normalize_text(row or [])))


def classify_row(row, fmt: SheetFormat) -> Optional[TermKey]:
    """Return the term a section header row announces, or ``None``."""
    text = normalize_text(row or [])
    if not text:
        return None
    for rule in fmt.section_rules:
        term = rule.match(text)
        if term:
            return term
    return None
