from __future__ import annotations
from typing import Literal, List, Dict, Any, Mapping, Optional
from pydantic import BaseModel, Field

from tpo_pricing.engine import coerce_limits, is_high_balance, limit_for_units
from tpo_pricing.models import Scenario
from tpo_pricing.presets import HIGH_BALANCE_PROGRAMS


class RuleResult(BaseModel):
    code: str
    severity: Literal["info", "warn", "critical"]
    message: str
    context: Dict[str, Any] = Field(default_factory=dict)


def evaluate_rules(
    scenario: Scenario, limits: Optional[Mapping] = None, model_loaded: bool = True
) -> List[RuleResult]:
    res: List[RuleResult] = []

    if not model_loaded:
        res.append(
            RuleResult(
                code="NO_PRICING_MODEL",
                severity="critical",
                message="No rate sheet loaded; upload one in Admin.",
            )
        )

    limit = limit_for_units(coerce_limits(limits), scenario.property_unit_count or 1)
    if is_high_balance(scenario.program_id, scenario.loan_amount, limit):
        res.append(
            RuleResult(
                code="HIGH_BALANCE_TIER",
                severity="info",
                message="Loan amount exceeds the conforming limit; priced off the high balance grid.",
                context={"conforming_limit": limit.conforming_limit},
            )
        )
        # Still priced off the high balance grid; there is no jumbo routing.
        if scenario.loan_amount > limit.high_balance_limit:
            res.append(
                RuleResult(
                    code="ABOVE_HIGH_BALANCE_LIMIT",
                    severity="warn",
                    message="Loan amount exceeds the high balance limit; confirm program eligibility.",
                    context={
                        "loan_amount": scenario.loan_amount,
                        "high_balance_limit": limit.high_balance_limit,
                    },
                )
            )
    elif scenario.program_id not in HIGH_BALANCE_PROGRAMS and scenario.loan_amount > limit.conforming_limit:
        res.append(
            RuleResult(
                code="ABOVE_CONFORMING_LIMIT",
                severity="info",
                message="Loan amount exceeds the conforming limit; this program has no high balance tier.",
                context={"conforming_limit": limit.conforming_limit},
            )
        )

    ltv = scenario.ltv
    if ltv is None and scenario.purchase_price:
        ltv = 100.0 * scenario.loan_amount / scenario.purchase_price
    if ltv is not None and ltv > 97:
        res.append(
            RuleResult(
                code="LTV_OVER_97",
                severity="warn",
                message="LTV above 97%.",
                context={"ltv": ltv},
            )
        )

    if scenario.ltv is not None and scenario.purchase_price:
        implied = 100.0 * scenario.loan_amount / scenario.purchase_price
        if abs(implied - scenario.ltv) > 0.5:
            res.append(
                RuleResult(
                    code="LTV_MISMATCH",
                    severity="info",
                    message="Entered LTV does not match loan amount / purchase price.",
                    context={"entered": scenario.ltv, "implied": implied},
                )
            )

    if scenario.fico_score < 620:
        res.append(
            RuleResult(
                code="LOW_FICO",
                severity="warn",
                message="Credit score below 620.",
                context={"fico": scenario.fico_score},
            )
        )

    return res


def has_blocking(res: List[RuleResult]) -> bool:
    return any(r.severity == "critical" for r in res)
