from typing import Literal, Optional, Sequence, Tuple

from .anchors import ANCHORS, DERATING_POINTS

# =============================
# Motor supply: voltage unbalance and derating (NEMA MG-1)
# =============================

def average(values: Sequence[float]) -> float:
    if not values:
        raise ValueError("values must not be empty")
    return sum(values) / len(values)

def voltage_unbalance_pct(vab: float, vbc: float, vca: float) -> float:
    """
    NEMA percent voltage unbalance:
        U% = max |V_i - V_avg| / V_avg * 100
    Args:
        vab, vbc, vca: line-to-line voltages [V]
    Returns:
        float: unbalance [%]
    """
    voltages = (vab, vbc, vca)
    if any(v <= 0 for v in voltages):
        raise ValueError("line voltages must be > 0")
    v_avg = average(voltages)
    max_dev = max(abs(v - v_avg) for v in voltages)
    return max_dev / v_avg * 100.0

def lerp(x: float, p0: Tuple[float, float], p1: Tuple[float, float]) -> float:
    """Linear interpolation of y at x between points p0=(x0, y0) and p1=(x1, y1)."""
    (x0, y0), (x1, y1) = p0, p1
    if x1 == x0:
        return y0
    return y0 + (x - x0) * (y1 - y0) / (x1 - x0)

def derating_factor(unbalance_pct: float, digits: Optional[int] = 3) -> float:
    """
    Motor derating factor Fr for a given % voltage unbalance.
    1.0 up to 1 %, pinned to the last curve point from 5 % on, linear
    interpolation on anchors.DERATING_POINTS in between.
    """
    if unbalance_pct <= float(ANCHORS["UNBALANCE_NO_DERATE_PCT"]):
        return 1.0
    if unbalance_pct >= float(ANCHORS["UNBALANCE_MAX_PCT"]):
        return float(ANCHORS["DERATE_FLOOR"])
    pts = DERATING_POINTS
    lo, hi = pts[-2], pts[-1]
    for a, b in zip(pts, pts[1:]):
        if a[0] <= unbalance_pct < b[0]:
            lo, hi = a, b
            break
    fr = lerp(unbalance_pct, lo, hi)
    return round(fr, digits) if digits is not None else fr

def derated_power(nominal_power: float, factor: float) -> float:
    """Usable motor power = nominal power * Fr (same unit as nominal_power)."""
    if nominal_power <= 0:
        raise ValueError("nominal_power > 0")
    return nominal_power * factor

def unbalance_exceeds_limit(unbalance_pct: float) -> bool:
    return unbalance_pct > float(ANCHORS["UNBALANCE_MAX_PCT"])

# =============================
# Insulation resistance indices (IEEE 43)
# =============================

def polarization_index(r_1min: float, r_10min: float) -> Optional[float]:
    """PI = R(10 min) / R(1 min); None when R(1 min) is not positive."""
    if r_1min <= 0:
        return None
    return r_10min / r_1min

def dielectric_absorption_ratio(r_30s: float, r_1min: float) -> Optional[float]:
    """DAR = R(60 s) / R(30 s); None when R(30 s) is not positive."""
    if r_30s <= 0:
        return None
    return r_1min / r_30s

def index_condition(value: Optional[float], kind: Literal["PI", "DAR"]) -> str:
    """
    Condition band for an insulation index.
    PI:  <1 Dangerous, 1..<2 Questionable, 2..4 Good, >4 Excellent
    DAR: <1 Bad, 1..<1.25 Questionable, 1.25..1.6 Good, >1.6 Excellent
    Upper edges of the Good band are inclusive.
    """
    if value is None:
        return "N/A"
    if kind == "PI":
        low_label = "Dangerous"
        q, good, exc = ANCHORS["PI_QUESTIONABLE"], ANCHORS["PI_GOOD"], ANCHORS["PI_EXCELLENT_ABOVE"]
    elif kind == "DAR":
        low_label = "Bad"
        q, good, exc = ANCHORS["DAR_QUESTIONABLE"], ANCHORS["DAR_GOOD"], ANCHORS["DAR_EXCELLENT_ABOVE"]
    else:
        raise ValueError("kind must be 'PI' or 'DAR'")
    if value < q:
        return low_label
    if value < good:
        return "Questionable"
    if value <= exc:
        return "Good"
    return "Excellent"

def seconds_to_minutes(t_s: float) -> float:
    return t_s / 60.0
