"""Assorted utility helpers."""
import math


def _positive(x):
    try:
        v = float(x)
    except (TypeError, ValueError):
        return 0.0
    return v if math.isfinite(v) and v > 0 else 0.0


def fill_loan_or_ltv(purchase_price, loan_amount, ltv):
    """Fill in whichever of loan amount or LTV is missing from the other two.

    Returns ``(loan_amount, ltv)``. Values the user entered are never
    overwritten; a missing value stays ``None`` when it cannot be derived.
    """
    pp = _positive(purchase_price)
    loan = _positive(loan_amount) or None
    pct = _positive(ltv) or None
    if pp and loan and pct is None:
        pct = round(loan / pp * 100, 2)
    if pp and pct and loan is None:
        loan = float(round(pp * pct / 100))
    return loan, pct


def fmt_money(num):
    if num is None or not math.isfinite(num):
        return "–"
    return f"${num:,.2f}"


def fmt_rate(num):
    if num is None or not math.isfinite(num):
        return "–"
    return f"{num:.3f}%"


def fmt_price(num):
    if num is None or not math.isfinite(num):
        return "–"
    return f"{num:.3f}"
