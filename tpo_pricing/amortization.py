"""Monthly principal and interest for a fully amortizing loan."""
from __future__ import annotations

import math
from typing import Optional


def _finite(x) -> Optional[float]:
    """Return ``x`` as a float, or ``None`` when it is missing or not finite."""
    try:
        v = float(x)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(v):
        return None
    return v


def monthly_payment(principal, annual_rate_pct, term_years) -> Optional[float]:
    """Calculate the fully amortizing monthly principal-and-interest payment.

    ``principal`` is the starting loan amount, ``annual_rate_pct`` is the
    nominal yearly interest rate (e.g. ``6.5`` for 6.5%), and ``term_years`` is
    the amortization period in years.

    Returns ``None`` when the payment is undefined: a non-finite input, a
    non-positive principal or term, or a negative rate. Callers must check
    before trusting the result.
    """

    L = _finite(principal)
    rate = _finite(annual_rate_pct)
    years = _finite(term_years)
    if L is None or rate is None or years is None:
        return None
    if L <= 0 or rate < 0 or years <= 0:
        return None
    n = int(round(years * 12))
    if n <= 0:
        return None
    r = rate / 100 / 12
    if r == 0:
        return L / n
    return (r * L) / (1 - (1 + r) ** (-n))
