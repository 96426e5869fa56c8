"""
Frozen reference tables for the electrical calculators with brief origin notes.

These values reproduce the published tables the tool was built against.
Tests assert against them directly; update this file deliberately and adjust
tests together with it.
"""

# NEMA MG-1 derating curve: (% voltage unbalance, derating factor)
DERATING_POINTS: tuple[tuple[float, float], ...] = (
    (0.0, 1.00),
    (0.5, 1.00),
    (1.0, 1.00),
    (1.5, 0.98),
    (2.0, 0.96),
    (2.5, 0.93),
    (3.0, 0.90),
    (3.5, 0.87),
    (4.0, 0.83),
    (4.5, 0.80),
    (5.0, 0.76),
)

ANCHORS: dict[str, float | int | str] = {
    # Derating clamps
    "UNBALANCE_NO_DERATE_PCT": 1.0,   # at or below: factor 1.0
    "UNBALANCE_MAX_PCT": 5.0,         # at or above: factor pinned to the last point
    "DERATE_FLOOR": 0.76,

    # IEEE 43 polarization index bands (lower edges)
    "PI_QUESTIONABLE": 1.0,
    "PI_GOOD": 2.0,
    "PI_EXCELLENT_ABOVE": 4.0,

    # IEEE 43 dielectric absorption ratio bands (lower edges)
    "DAR_QUESTIONABLE": 1.0,
    "DAR_GOOD": 1.25,
    "DAR_EXCELLENT_ABOVE": 1.6,

    # Reading times [s]
    "T_DAR_SHORT_S": 30,
    "T_ONE_MIN_S": 60,
    "T_TEN_MIN_S": 600,
}

# Origins (free-text for docs)
ORIGINS: dict[str, str] = {
    "DERATING_POINTS": "NEMA MG-1 Part 14.35 derating curve, read at 0.5 % steps",
    "UNBALANCE_MAX_PCT": "NEMA MG-1 advises against operation above 5 % unbalance",
    "PI_GOOD": "IEEE Std 43-2013 minimum PI for class B and higher insulation",
    "DAR_GOOD": "Common field practice table for the 60 s / 30 s ratio",
}
