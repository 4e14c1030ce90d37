"""Tests for the HPP calculator."""

import pytest

from pasarantar.models.catalog import CostComponent
from pasarantar.models.hpp import HPPComponentLine, HPPInput
from pasarantar.services.hpp_calculator import (
    PRICE_ROUNDING_STEP,
    calculate_hpp,
    components_total,
    round_up_price,
)


@pytest.fixture
def daging_calc():
    """1kg beef at Rp 100.000, 10% shrinkage, four packaging items at Rp 500."""
    return HPPInput(
        base_material_name="Daging Sapi",
        base_material_cost=100000,
        shrinkage_percent=10,
        components=[
            HPPComponentLine(name="Plastik Vakum", cost=500),
            HPPComponentLine(name="Label", cost=500),
            HPPComponentLine(name="Es Batu", cost=500),
            HPPComponentLine(name="Karet", cost=500),
        ],
        margin_percent=30,
    )


def test_calculate_hpp_full_breakdown(daging_calc):
    """Every intermediate value is exposed."""
    result = calculate_hpp(daging_calc)

    assert result.shrinkage_cost == pytest.approx(10000)
    assert result.cost_after_shrinkage == pytest.approx(110000)
    assert result.components_total_cost == pytest.approx(2000)
    assert result.total_hpp == pytest.approx(112000)
    assert result.profit == pytest.approx(33600)
    assert result.selling_price == pytest.approx(145600)
    assert result.rounded_price == 146000


def test_rounded_price_is_int(daging_calc):
    assert isinstance(calculate_hpp(daging_calc).rounded_price, int)


def test_calculate_hpp_is_repeatable_and_leaves_input_alone(daging_calc):
    before = daging_calc.model_copy(deep=True)

    first = calculate_hpp(daging_calc)
    second = calculate_hpp(daging_calc)

    assert first == second
    assert daging_calc == before
    assert [line.cost for line in daging_calc.components] == [500, 500, 500, 500]


def test_no_components():
    result = calculate_hpp(HPPInput(base_material_cost=50000, margin_percent=20))

    assert result.components_total_cost == 0
    assert result.shrinkage_cost == 0
    assert result.total_hpp == pytest.approx(50000)
    assert result.rounded_price == 60000


def test_zero_margin_prices_at_cost():
    result = calculate_hpp(HPPInput(base_material_cost=12300, margin_percent=0))

    assert result.profit == 0
    assert result.selling_price == pytest.approx(12300)
    assert result.rounded_price == 12500


def test_negative_margin_prices_below_cost():
    """The margin is not clamped."""
    result = calculate_hpp(HPPInput(base_material_cost=10000, margin_percent=-20))

    assert result.profit == pytest.approx(-2000)
    assert result.selling_price == pytest.approx(8000)
    assert result.rounded_price == 8000


def test_component_qty_multiplies_cost():
    lines = [
        HPPComponentLine(name="Bumbu", cost=1500, qty=2),
        HPPComponentLine(name="Box", cost=2000, qty=1),
    ]
    assert components_total(lines) == pytest.approx(5000)


def test_add_component_returns_copy():
    component = CostComponent(id="cc_abc", name="Plastik", cost=750)
    calc = HPPInput(base_material_cost=10000)

    updated = calc.add_component(component, qty=2)

    assert calc.components == []
    assert len(updated.components) == 1
    assert updated.components[0].component_id == "cc_abc"
    assert updated.components[0].cost == 750
    assert updated.components[0].qty == 2


def test_component_cost_is_a_snapshot():
    """Changing the library component later does not change the calculation."""
    component = CostComponent(id="cc_abc", name="Plastik", cost=750)
    calc = HPPInput(base_material_cost=10000).add_component(component)

    component.cost = 5000

    assert calculate_hpp(calc).components_total_cost == pytest.approx(750)


@pytest.mark.parametrize("amount,expected", [
    (0, 0),
    (1, 500),
    (500, 500),
    (500.01, 1000),
    (145600, 146000),
    (146000, 146000),
])
def test_round_up_price(amount, expected):
    assert round_up_price(amount) == expected


def test_round_up_price_properties():
    for amount in [1, 499, 999.5, 12345.67, 99999]:
        rounded = round_up_price(amount)
        assert rounded % PRICE_ROUNDING_STEP == 0
        assert rounded >= amount
        assert rounded - amount < PRICE_ROUNDING_STEP


def test_shrinkage_out_of_range_rejected():
    with pytest.raises(ValueError):
        HPPInput(base_material_cost=1000, shrinkage_percent=120)
