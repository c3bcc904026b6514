"""Pricing decision engine.

Given the current :class:`PricingModel` and a :class:`Scenario`, pick the
grid for the scenario's program, term and loan-amount tier, choose the row
whose price (plus broker compensation) lands closest to par, apply the
adjustment lookups and compute the monthly P&I payment.
"""
from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, Mapping, Optional

from pydantic import TypeAdapter

from tpo_pricing.adjustments import AdjustmentLookup, checked_adjustment, no_llpa, no_payup
from tpo_pricing.amortization import monthly_payment
from tpo_pricing.models import (
    Adjustments,
    GridRow,
    GridTable,
    LoanLimit,
    PricingModel,
    PricingResult,
    Scenario,
)
from tpo_pricing.presets import (
    BROKER_COMP_POINTS,
    HIGH_BALANCE_PROGRAMS,
    LOAN_LIMITS,
    PAR_PRICE,
    PROGRAM_LABELS,
    TERM_AMORTIZATION_YEARS,
    TERM_LABELS,
)

logger = logging.getLogger(__name__)

_LIMITS_ADAPTER = TypeAdapter(Dict[int, LoanLimit])


class PricingError(Exception):
    """Base class for query failures. The current model is never modified."""

    code = "PRICING_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NoPricingModel(PricingError):
    code = "NO_PRICING_MODEL"


class GridUnavailable(PricingError):
    code = "GRID_UNAVAILABLE"


class ProgramUnavailable(GridUnavailable):
    code = "PROGRAM_UNAVAILABLE"


class NoRowsInGrid(PricingError):
    code = "NO_ROWS_IN_GRID"


def coerce_limits(limits: Optional[Mapping]) -> Dict[int, LoanLimit]:
    """Validate a limit table keyed by unit count; ``None`` means the presets."""
    return _LIMITS_ADAPTER.validate_python(LOAN_LIMITS if limits is None else limits)


def limit_for_units(limits: Mapping[int, LoanLimit], units: int) -> LoanLimit:
    """Return the limits for ``units``, falling back to the 1-unit entry."""
    if units in limits:
        return limits[units]
    if 1 in limits:
        return limits[1]
    raise ValueError("loan limit table has no entry for 1 unit")


def is_high_balance(program_id: str, loan_amount: float, limit: LoanLimit) -> bool:
    """Two-way tier decision: standard at or below the conforming limit, high balance above.

    Loans above ``high_balance_limit`` still route to the high-balance grid.
    """
    if program_id not in HIGH_BALANCE_PROGRAMS:
        return False
    return loan_amount > limit.conforming_limit


def select_grid(model: Optional[PricingModel], scenario: Scenario, high_balance: bool) -> GridTable:
    if model is None or not model.programs:
        raise NoPricingModel("No rate sheet has been loaded yet. Upload one in Admin.")
    program = model.programs.get(scenario.program_id)
    if program is None:
        raise ProgramUnavailable(
            f"No {PROGRAM_LABELS.get(scenario.program_id, scenario.program_id)} pricing in the current rate sheet."
        )
    grids = program.high_balance_grids if high_balance else program.grids
    table = grids.get(scenario.term_key)
    if table is None or not table.rows:
        tier = "high balance " if high_balance else ""
        raise GridUnavailable(
            f"No {tier}{program.label} {TERM_LABELS.get(scenario.term_key, scenario.term_key)} "
            "pricing in the current rate sheet."
        )
    return table


def select_best_row(
    rows: Iterable[GridRow], broker_comp: float = BROKER_COMP_POINTS, par: float = PAR_PRICE
) -> Optional[GridRow]:
    """Return the row whose price plus broker comp is closest to par.

    Ties go to the first row in grid order; rows are not assumed sorted.
    """
    best = None
    best_distance = math.inf
    for row in rows:
        if not (math.isfinite(row.rate) and math.isfinite(row.price)):
            continue
        distance = abs(row.price + broker_comp - par)
        if distance < best_distance:
            best, best_distance = row, distance
    return best


def price(
    model: Optional[PricingModel],
    scenario: Scenario,
    llpa: AdjustmentLookup = no_llpa,
    payup: AdjustmentLookup = no_payup,
    limits: Optional[Mapping] = None,
    broker_comp: float = BROKER_COMP_POINTS,
) -> PricingResult:
    """Price ``scenario`` against ``model``.

    Raises a :class:`PricingError` subclass when no pricing applies.
    """
    table_limits = coerce_limits(limits)
    limit = limit_for_units(table_limits, scenario.property_unit_count or 1)
    high_balance = is_high_balance(scenario.program_id, scenario.loan_amount, limit)
    logger.debug(
        "Routing %s %s loan of %.2f to %s grid (conforming limit %.2f)",
        scenario.program_id,
        scenario.term_key,
        scenario.loan_amount,
        "high balance" if high_balance else "standard",
        limit.conforming_limit,
    )

    table = select_grid(model, scenario, high_balance)
    row = select_best_row(table.rows, broker_comp)
    if row is None:
        logger.error(
            "Grid %s/%s from sheet %r has %d rows but none are selectable",
            scenario.program_id,
            scenario.term_key,
            table.source_sheet_name,
            len(table.rows),
        )
        raise NoRowsInGrid("The selected pricing grid has no usable rows.")

    llpa_pts = checked_adjustment(llpa, scenario, "llpa")
    payup_pts = checked_adjustment(payup, scenario, "payup")
    years = TERM_AMORTIZATION_YEARS[scenario.term_key]
    return PricingResult(
        program_id=scenario.program_id,
        term_key=scenario.term_key,
        high_balance=high_balance,
        rate=row.rate,
        base_price=row.price,
        adjustments=Adjustments(llpa=llpa_pts, payup=payup_pts, broker_comp=broker_comp),
        final_price=row.price - llpa_pts + payup_pts + broker_comp,
        amortization_years=years,
        monthly_principal_and_interest=monthly_payment(scenario.loan_amount, row.rate, years),
    )
