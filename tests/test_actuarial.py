"""Tests for the life-expectancy and VPW tables."""

import pytest

from retirement_drawdown.calculators import actuarial


def test_life_expectancy_table():
    assert actuarial.life_expectancy(55) == 40
    assert actuarial.life_expectancy(65) == 25
    assert actuarial.life_expectancy(75) == 12
    assert actuarial.life_expectancy(85) == 9
    assert actuarial.life_expectancy(95) >= 2


def test_life_expectancy_never_below_two():
    for age in range(90, 130):
        assert actuarial.life_expectancy(age) >= 2


@pytest.mark.parametrize("years, expected", [(30, 4.2), (20, 5.5), (10, 8.6)])
def test_vpw_percentage_default_allocation(years, expected):
    assert actuarial.vpw_percentage(years, 60) == pytest.approx(expected, abs=0.01)


def test_vpw_increases_across_breakpoints():
    breakpoints = [30, 25, 20, 15, 10, 5, 4]
    pcts = [actuarial.vpw_percentage(y) for y in breakpoints]
    assert all(later > earlier for earlier, later in zip(pcts, pcts[1:]))


def test_vpw_capped_at_100():
    for years in range(-60, 60):
        assert actuarial.vpw_percentage(years) <= 100


def test_vpw_uses_stock_allocation():
    assert actuarial.vpw_percentage(30, 100) == pytest.approx(5.0)
    assert actuarial.vpw_percentage(30, 0) == pytest.approx(3.0)
