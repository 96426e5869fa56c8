"""
Pump selection engine. Pure functions over an immutable brand catalog.

For every series of a brand the engine answers one question: which is the
first catalog model that delivers at least the requested pressure at the
nearest tabulated flow at or above the requested flow? Every series yields an
outcome; failures are reported as NoMatch values, never raised.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union
import logging

from .schemas import Brand, PumpModel, PumpSeries, OperatingPointRequest

log = logging.getLogger(__name__)


class NoMatchReason(str, Enum):
    FLOW_OUT_OF_ENVELOPE = "flow_out_of_envelope"
    NO_TABULATED_FLOW = "no_tabulated_flow"
    NO_QUALIFYING_MODEL = "no_qualifying_model"


@dataclass(frozen=True)
class Match:
    model: PumpModel
    delivered_flow: float      # tabulated breakpoint, never interpolated
    delivered_pressure: float


@dataclass(frozen=True)
class NoMatch:
    reason: NoMatchReason
    message: str


SelectionOutcome = Union[Match, NoMatch]


def ceiling_breakpoint_index(breakpoints: Sequence[float], flow: float) -> Optional[int]:
    """Index of the first breakpoint >= flow, else the last one; None when empty.

    Breakpoints are trusted to be ascending.
    """
    if not breakpoints:
        return None
    for i, bp in enumerate(breakpoints):
        if bp >= flow:
            return i
    return len(breakpoints) - 1


def pressure_at(model: PumpModel, index: int) -> Optional[float]:
    """Bounds-checked pressure lookup; None when the row does not cover index."""
    if 0 <= index < len(model.pressures):
        return model.pressures[index]
    return None


def select_in_series(series: PumpSeries, request: OperatingPointRequest) -> SelectionOutcome:
    flow, pressure = request.flow, request.pressure

    if flow < series.min_flow or flow > series.max_flow:
        return NoMatch(
            NoMatchReason.FLOW_OUT_OF_ENVELOPE,
            f"Series {series.name}: requested flow {flow:g} {series.flow_unit} is outside "
            f"the operating range {series.min_flow:g}-{series.max_flow:g} {series.flow_unit}.",
        )

    idx = ceiling_breakpoint_index(series.flow_breakpoints, flow)
    if idx is None:
        return NoMatch(
            NoMatchReason.NO_TABULATED_FLOW,
            f"Series {series.name}: no tabulated flow points.",
        )
    bp = series.flow_breakpoints[idx]

    for model in series.models:
        p = pressure_at(model, idx)
        if p is None:
            log.debug("series %s: model %s has no pressure at column %d, skipped", series.name, model.name, idx)
            continue
        if p >= pressure:
            return Match(model=model, delivered_flow=bp, delivered_pressure=p)

    return NoMatch(
        NoMatchReason.NO_QUALIFYING_MODEL,
        f"Series {series.name}: no model reaches {pressure:g} {series.pressure_unit} "
        f"at {bp:g} {series.flow_unit}.",
    )


def select_pumps(brand: Brand, request: OperatingPointRequest) -> List[Tuple[PumpSeries, SelectionOutcome]]:
    """Return (series, outcome) for every series of the brand, in catalog order."""
    return [(s, select_in_series(s, request)) for s in brand.series]


def curve_points(series: PumpSeries, model: PumpModel) -> List[dict]:
    """Performance curve of one model: breakpoint flow vs pressure (None where missing)."""
    return [
        {"flow": bp, "pressure": pressure_at(model, i)}
        for i, bp in enumerate(series.flow_breakpoints)
    ]
