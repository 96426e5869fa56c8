import pytest

from PumpSelectorTool import formulas as F
from PumpSelectorTool.anchors import ANCHORS, DERATING_POINTS


def test_unbalance_balanced_supply():
    assert F.voltage_unbalance_pct(460, 460, 460) == 0.0


def test_unbalance_nema_example():
    # avg 459 V, max deviation 9 V
    assert F.voltage_unbalance_pct(460, 467, 450) == pytest.approx(9 / 459 * 100)


def test_unbalance_rejects_non_positive():
    with pytest.raises(ValueError):
        F.voltage_unbalance_pct(460, 0, 460)


@pytest.mark.parametrize("pct,expected", [
    (0.0, 1.0),
    (1.0, 1.0),
    (1.5, 0.98),
    (2.0, 0.96),
    (2.75, 0.915),
    (4.9, 0.768),
    (5.0, 0.76),
    (6.0, 0.76),
])
def test_derating_factor(pct, expected):
    assert F.derating_factor(pct) == pytest.approx(expected, abs=1e-9)


def test_derating_factor_unrounded():
    assert F.derating_factor(1.96078, digits=None) == pytest.approx(0.98 - 0.46078 * 0.04)


def test_derating_curve_is_monotonic():
    factors = [f for _, f in DERATING_POINTS]
    assert all(b <= a for a, b in zip(factors, factors[1:]))
    assert factors[-1] == ANCHORS["DERATE_FLOOR"]


def test_derated_power():
    assert F.derated_power(50, 0.9) == pytest.approx(45)
    with pytest.raises(ValueError):
        F.derated_power(0, 0.9)


def test_unbalance_limit():
    assert not F.unbalance_exceeds_limit(5.0)
    assert F.unbalance_exceeds_limit(5.01)


def test_lerp_degenerate_segment():
    assert F.lerp(1.0, (1.0, 3.0), (1.0, 5.0)) == 3.0


def test_pi_and_dar():
    assert F.polarization_index(r_1min=1.5, r_10min=4.5) == pytest.approx(3.0)
    assert F.dielectric_absorption_ratio(r_30s=1.0, r_1min=1.5) == pytest.approx(1.5)
    assert F.polarization_index(0, 4.5) is None
    assert F.dielectric_absorption_ratio(0, 1.5) is None


@pytest.mark.parametrize("value,expected", [
    (0.99, "Dangerous"), (1.0, "Questionable"), (1.99, "Questionable"),
    (2.0, "Good"), (4.0, "Good"), (4.01, "Excellent"), (None, "N/A"),
])
def test_pi_condition(value, expected):
    assert F.index_condition(value, "PI") == expected


@pytest.mark.parametrize("value,expected", [
    (0.5, "Bad"), (1.0, "Questionable"), (1.24, "Questionable"),
    (1.25, "Good"), (1.6, "Good"), (1.61, "Excellent"),
])
def test_dar_condition(value, expected):
    assert F.index_condition(value, "DAR") == expected


def test_condition_kind_checked():
    with pytest.raises(ValueError):
        F.index_condition(1.0, "XYZ")
