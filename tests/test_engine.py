import pytest
from pydantic import ValidationError

from tpo_pricing.amortization import monthly_payment
from tpo_pricing.engine import (
    GridUnavailable,
    NoPricingModel,
    NoRowsInGrid,
    ProgramUnavailable,
    coerce_limits,
    is_high_balance,
    limit_for_units,
    price,
    select_best_row,
)
from tpo_pricing.models import GridRow, GridTable, PricingModel, Program, Scenario


def _table(*pairs):
    return GridTable(source_sheet_name="test", rows=[GridRow(rate=r, price=p) for r, p in pairs])


@pytest.fixture
def model():
    standard = _table((6.0, 98.5), (6.5, 100.2), (7.0, 102.0))
    high_balance = _table((6.25, 97.0), (6.75, 97.6))
    return PricingModel(
        source_sheet_name="test",
        programs={
            "conventional": Program(
                id="conventional",
                label="Conventional",
                grids={"30yr": standard, "arm": _table((5.875, 97.5))},
                high_balance_grids={"30yr": high_balance},
            ),
            "fha": Program(
                id="fha",
                label="FHA",
                grids={"30yr": _table((5.75, 97.4))},
                high_balance_grids={"30yr": _table((6.0, 97.7))},
            ),
            "va": Program(id="va", label="VA", grids={"30yr": _table((5.5, 97.5))}),
        },
    )


def _scenario(**kw):
    base = {"program_id": "conventional", "term_key": "30yr", "loan_amount": 300000}
    base.update(kw)
    return Scenario(**base)


def test_best_row_closest_to_par_after_broker_comp(model):
    res = price(model, _scenario())
    assert res.rate == 6.0
    assert res.base_price == 98.5
    assert res.adjustments.broker_comp == 2.5
    assert res.final_price == pytest.approx(101.0)
    assert res.high_balance is False


def test_select_best_row_ties_go_to_first_occurrence():
    rows = [GridRow(rate=6.25, price=97.0), GridRow(rate=6.5, price=98.0)]
    assert select_best_row(rows).rate == 6.25
    assert select_best_row(list(reversed(rows))).rate == 6.5


def test_select_best_row_does_not_assume_sorted_rows():
    rows = [GridRow(rate=7.0, price=102.0), GridRow(rate=6.0, price=98.5), GridRow(rate=6.5, price=100.2)]
    assert select_best_row(rows).rate == 6.0


@pytest.mark.parametrize(
    "loan,high_balance,rate",
    [
        (832750, False, 6.0),
        (832751, True, 6.75),
        (1249125, True, 6.75),
        (2000000, True, 6.75),
    ],
)
def test_tier_boundary_single_unit(model, loan, high_balance, rate):
    res = price(model, _scenario(loan_amount=loan))
    assert res.high_balance is high_balance
    assert res.rate == rate


def test_fha_is_tier_eligible(model):
    assert price(model, _scenario(program_id="fha", loan_amount=900000)).rate == 6.0


def test_va_is_never_high_balance(model):
    res = price(model, _scenario(program_id="va", loan_amount=1500000))
    assert res.high_balance is False
    assert res.rate == 5.5


def test_multi_unit_property_uses_two_unit_limits(model):
    res = price(model, _scenario(loan_amount=900000, property_type="2-4 Unit"))
    assert res.high_balance is False
    assert price(model, _scenario(loan_amount=900000)).high_balance is True


def test_missing_unit_count_falls_back_to_single_unit(model):
    limits = {1: {"conforming_limit": 500000, "high_balance_limit": 750000}}
    res = price(model, _scenario(loan_amount=600000, property_unit_count=3), limits=limits)
    assert res.high_balance is True


def test_limit_helpers():
    limits = coerce_limits({"1": {"conforming_limit": 1, "high_balance_limit": 2}})
    assert limit_for_units(limits, 4).conforming_limit == 1
    assert is_high_balance("conventional", 2, limits[1]) is True
    assert is_high_balance("jumbo", 2, limits[1]) is False
    with pytest.raises(ValueError):
        limit_for_units({}, 2)


def test_monthly_payment_uses_term_amortization(model):
    res = price(model, _scenario())
    assert res.amortization_years == 30
    assert res.monthly_principal_and_interest == pytest.approx(monthly_payment(300000, 6.0, 30))
    arm = price(model, _scenario(term_key="arm"))
    assert arm.amortization_years == 30
    assert arm.monthly_principal_and_interest == pytest.approx(monthly_payment(300000, 5.875, 30))


def test_adjustments_are_injected(model):
    res = price(model, _scenario(), llpa=lambda s: 0.25, payup=lambda s: 0.125)
    assert res.rate == 6.0
    assert res.adjustments.llpa == 0.25
    assert res.adjustments.payup == 0.125
    assert res.final_price == pytest.approx(98.5 - 0.25 + 0.125 + 2.5)


def test_adjustment_lookup_receives_scenario(model):
    seen = []
    price(model, _scenario(fico_score=700), llpa=lambda s: seen.append(s.fico_score) or 0.0)
    assert seen == [700]


def test_negative_adjustment_rejected(model):
    with pytest.raises(ValueError):
        price(model, _scenario(), payup=lambda s: -0.5)


def test_no_model(model):
    with pytest.raises(NoPricingModel):
        price(None, _scenario())
    with pytest.raises(NoPricingModel):
        price(PricingModel(), _scenario())


def test_program_unavailable_is_grid_unavailable(model):
    with pytest.raises(ProgramUnavailable):
        price(model, _scenario(program_id="usda"))
    with pytest.raises(GridUnavailable):
        price(model, _scenario(program_id="jumbo"))


def test_grid_unavailable_for_missing_term(model):
    with pytest.raises(GridUnavailable) as err:
        price(model, _scenario(term_key="15yr"))
    assert err.value.code == "GRID_UNAVAILABLE"
    with pytest.raises(GridUnavailable):
        price(model, _scenario(program_id="va", term_key="arm"))


def test_no_selectable_rows():
    bad = GridTable.model_construct(
        source_sheet_name="bad", rows=[GridRow.model_construct(rate=6.0, price=float("nan"))]
    )
    model = PricingModel(programs={"conventional": Program(id="conventional", grids={"30yr": bad})})
    with pytest.raises(NoRowsInGrid):
        price(model, _scenario())


def test_result_is_immutable(model):
    res = price(model, _scenario())
    with pytest.raises(ValidationError):
        res.rate = 5.0


def test_scenario_validation():
    with pytest.raises(ValidationError):
        _scenario(loan_amount=0)
    with pytest.raises(ValidationError):
        _scenario(program_id="heloc")
    with pytest.raises(ValidationError):
        _scenario(property_unit_count=5)
    assert _scenario(property_type="Duplex").property_unit_count == 2
    assert _scenario(property_type="Condo").property_unit_count == 1


def test_explicit_unit_count_overrides_property_type(model):
    res = price(model, _scenario(loan_amount=900000, property_type="sfr", property_unit_count=4))
    assert res.high_balance is False
