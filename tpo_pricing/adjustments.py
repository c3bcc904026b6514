"""Pluggable price adjustment lookups.

An adjustment lookup is any callable taking a :class:`Scenario` and returning
a non-negative number of price points. LLPAs are costs subtracted from price;
payups are credits added to it. Real adjustment tables are not wired yet, so
the defaults return zero.
"""
from __future__ import annotations

import math
from typing import Callable

from tpo_pricing.models import Scenario

AdjustmentLookup = Callable[[Scenario], float]


def no_llpa(scenario: Scenario) -> float:
    return 0.0


def no_payup(scenario: Scenario) -> float:
    return 0.0


def checked_adjustment(lookup: AdjustmentLookup, scenario: Scenario, name: str) -> float:
    """Call ``lookup`` and validate that it returned a finite, non-negative value."""
    value = float(lookup(scenario))
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"{name} adjustment must be a finite non-negative number, got {value!r}")
    return value
