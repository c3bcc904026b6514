from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

ProgramId = Literal["conventional", "fha", "va", "usda", "jumbo"]
TermKey = Literal["30yr", "20yr", "15yr", "10yr", "arm"]

Cell = Union[str, float, int, None]
TabularSheet = List[List[Cell]]

_MULTI_UNIT = re.compile(
    r"\b[2-4]\s*(?:-|to)\s*[2-4]\b|\b[2-4]\s*-?\s*units?\b|duplex|triplex|fourplex|quadplex|multi",
    re.IGNORECASE,
)


def units_from_property_type(property_type: Optional[str]) -> int:
    """Classify free-text property type into a unit count for limit lookup.

    Any 2–4 unit description maps to ``2``; everything else is a single unit.
    """
    if property_type and _MULTI_UNIT.search(str(property_type)):
        return 2
    return 1


class GridRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    rate: float = Field(gt=0, allow_inf_nan=False)
    price: float = Field(allow_inf_nan=False)


class GridTable(BaseModel):
    source_sheet_name: str = ""
    rows: List[GridRow] = Field(default_factory=list)


class Program(BaseModel):
    id: ProgramId
    label: str = ""
    grids: Dict[TermKey, GridTable] = Field(default_factory=dict)
    high_balance_grids: Dict[TermKey, GridTable] = Field(default_factory=dict)

    def has_rows(self) -> bool:
        tables = list(self.grids.values()) + list(self.high_balance_grids.values())
        return any(t.rows for t in tables)


class PricingModel(BaseModel):
    extracted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source_sheet_name: str = ""
    programs: Dict[ProgramId, Program] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _programs_have_rows(self):
        for key, prog in self.programs.items():
            if prog.id != key:
                raise ValueError(f"program stored under {key!r} has id {prog.id!r}")
            if not prog.has_rows():
                raise ValueError(f"program {key!r} has no grid rows")
        return self

    def summary(self) -> List[dict]:
        """Flatten the model into one record per populated grid for display."""
        out = []
        for pid, prog in self.programs.items():
            for tier, tables in (("standard", prog.grids), ("high_balance", prog.high_balance_grids)):
                for term, table in tables.items():
                    out.append(
                        {
                            "program": pid,
                            "term": term,
                            "tier": tier,
                            "rows": len(table.rows),
                            "sheet": table.source_sheet_name,
                        }
                    )
        return out


class Scenario(BaseModel):
    program_id: ProgramId
    term_key: TermKey
    loan_amount: float = Field(gt=0, allow_inf_nan=False)
    property_type: str = "sfr"
    property_unit_count: Optional[int] = Field(default=None, ge=1, le=4)
    occupancy: str = "primary"
    purpose: str = "purchase"
    fico_score: int = Field(default=760, ge=300, le=850)
    purchase_price: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    ltv: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)

    @model_validator(mode="after")
    def _derive_unit_count(self):
        if self.property_unit_count is None:
            self.property_unit_count = units_from_property_type(self.property_type)
        return self


class LoanLimit(BaseModel):
    conforming_limit: float = Field(gt=0, allow_inf_nan=False)
    high_balance_limit: float = Field(gt=0, allow_inf_nan=False)


class Adjustments(BaseModel):
    model_config = ConfigDict(frozen=True)

    llpa: float = 0.0
    payup: float = 0.0
    broker_comp: float = 0.0


class PricingResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    program_id: ProgramId
    term_key: TermKey
    high_balance: bool
    rate: float
    base_price: float
    adjustments: Adjustments
    final_price: float
    amortization_years: int
    monthly_principal_and_interest: Optional[float]
