"""
Thin, stable API for a UI or report layer.

Contracts (do not change signatures during UI work):
  - select_pumps(brand_name, flow, pressure) -> dict
  - list_brands() -> list
  - voltage_unbalance(vab, vbc, vca, motor_hp=None, nominal_voltage=None) -> dict
  - insulation_indices(test) -> dict
  - build_series_entry(text) -> dict
  - add_series_to_catalog(text, catalog_path, replace=False) -> dict

All functions return plain dicts/lists ready for JSON. Inputs are validated via
Pydantic schemas; ValidationError propagates to the caller.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional
import logging
import os

from . import catalog as CAT
from . import config as C
from . import formulas as F
from . import io
from .errors import BackendError, CatalogError
from .schemas import (
    Brand, OperatingPointRequest, SeriesDraft,
    VoltageReadings, InsulationTest,
)
from .selection import Match, select_pumps as _select_pumps, curve_points

__all__ = [
    "BackendError", "CatalogError",
    "select_pumps", "list_brands", "voltage_unbalance", "insulation_indices",
    "build_series_entry", "add_series_to_catalog",
]

log = logging.getLogger(__name__)


def select_pumps(
        brand_name: str,
        flow: float,
        pressure: float,
        registry: Optional[Dict[str, Brand]] = None,
) -> Dict[str, Any]:
    """Run the selection engine for one duty point against one brand.

    Returns:
        {
            "brand": str,
            "request": {"flow": float, "pressure": float},
            "units": {"flow": str, "pressure": str},
            "results": [one row per series, catalog order],
            "match_count": int,
            "message": str,
        }
    """
    request = OperatingPointRequest(flow=flow, pressure=pressure)
    brand = CAT.get_brand(brand_name, registry)
    try:
        outcomes = _select_pumps(brand, request)
    except Exception:
        log.exception("select_pumps failed for brand %s", brand_name)
        raise

    results: List[Dict[str, Any]] = []
    for series, outcome in outcomes:
        row: Dict[str, Any] = {
            "series": series.name,
            "flow_unit": series.flow_unit,
            "pressure_unit": series.pressure_unit,
            "status": "match" if isinstance(outcome, Match) else "no_match",
            "model": None,
            "power_rating": None,
            "delivered_flow": None,
            "delivered_pressure": None,
            "reason": None,
            "message": None,
            "curve": [],
        }
        if isinstance(outcome, Match):
            row.update(
                model=outcome.model.name,
                power_rating=outcome.model.power_rating,
                delivered_flow=outcome.delivered_flow,
                delivered_pressure=outcome.delivered_pressure,
                message=(f"Series {series.name}: {outcome.model.name} ({outcome.model.power_rating} HP) delivers "
                         f"{outcome.delivered_flow:g} {series.flow_unit} @ {outcome.delivered_pressure:g} {series.pressure_unit}."),
                curve=curve_points(series, outcome.model),
            )
        else:
            row.update(reason=outcome.reason.value, message=outcome.message)
        results.append(row)

    n = sum(1 for r in results if r["status"] == "match")
    if n:
        summary = f"Found {n} suitable model(s) for brand {brand.name}."
    else:
        summary = f"No {brand.name} model meets the requested duty point."
    # Units of the first matching series win; brand defaults otherwise
    first = next((r for r in results if r["status"] == "match"), None)
    units = {
        "flow": first["flow_unit"] if first else brand.default_flow_unit,
        "pressure": first["pressure_unit"] if first else brand.default_pressure_unit,
    }
    return {
        "brand": brand.name,
        "request": {"flow": request.flow, "pressure": request.pressure},
        "units": units,
        "results": results,
        "match_count": n,
        "message": summary,
    }


def list_brands(registry: Optional[Dict[str, Brand]] = None) -> List[Dict[str, Any]]:
    registry = CAT.default_registry() if registry is None else registry
    return [
        {
            "name": b.name,
            "series_count": len(b.series),
            "series": [s.name for s in b.series],
            "default_flow_unit": b.default_flow_unit,
            "default_pressure_unit": b.default_pressure_unit,
        }
        for b in registry.values()
    ]


def voltage_unbalance(
        vab: float,
        vbc: float,
        vca: float,
        motor_hp: Optional[float] = None,
        nominal_voltage: Optional[float] = None,
) -> Dict[str, Any]:
    """Percent unbalance (NEMA), derating factor and, given motor_hp, the derated power."""
    v = VoltageReadings(vab=vab, vbc=vbc, vca=vca, motor_hp=motor_hp, nominal_voltage=nominal_voltage)
    unbalance = F.voltage_unbalance_pct(v.vab, v.vbc, v.vca)
    # Derate from the unrounded unbalance, report both rounded
    factor = F.derating_factor(unbalance, digits=C.DERATING_DIGITS)
    out: Dict[str, Any] = {
        "voltages": {"vab": v.vab, "vbc": v.vbc, "vca": v.vca},
        "average_voltage": F.average((v.vab, v.vbc, v.vca)),
        "unbalance_pct": round(unbalance, C.UNBALANCE_DIGITS),
        "derating_factor": factor,
        "exceeds_limit": F.unbalance_exceeds_limit(unbalance),
        "motor_hp": v.motor_hp,
        "derated_hp": None,
        "nominal_voltage": v.nominal_voltage,
    }
    if v.motor_hp is not None:
        out["derated_hp"] = F.derated_power(v.motor_hp, factor)
    return out


def insulation_indices(test: Dict[str, Any]) -> Dict[str, Any]:
    """PI / DAR with IEEE 43 condition bands from timed resistance readings.

    test: {"readings": {seconds: GOhm, ...}, optional tester_name, motor_id, motor_serial}
    """
    t = InsulationTest.model_validate(test)
    r = t.readings
    t30, t60, t600 = C.REQUIRED_READINGS_S
    pi = F.polarization_index(r[t60], r[t600])
    dar = F.dielectric_absorption_ratio(r[t30], r[t60])
    pi = round(pi, C.INDEX_DIGITS) if pi is not None else None
    dar = round(dar, C.INDEX_DIGITS) if dar is not None else None
    return {
        "tester_name": t.tester_name,
        "motor_id": t.motor_id,
        "motor_serial": t.motor_serial,
        "polarization_index": pi,
        "pi_condition": F.index_condition(pi, "PI"),
        "dielectric_absorption_ratio": dar,
        "dar_condition": F.index_condition(dar, "DAR"),
        "curve": [
            {"time_min": F.seconds_to_minutes(ts), "resistance": r[ts]}
            for ts in sorted(r)
        ],
    }


def build_series_entry(text: str) -> Dict[str, Any]:
    """Parse and validate an editor sheet; return {"brand": str, "series": catalog entry dict}."""
    draft = SeriesDraft.model_validate(io.parse_series_sheet(text))
    return {"brand": draft.brand, "series": draft.to_series().model_dump(mode="json")}


def add_series_to_catalog(text: str, catalog_path: str, replace: bool = False) -> Dict[str, Any]:
    """Merge an editor sheet into a brand catalog file, creating the file for a new brand."""
    draft = SeriesDraft.model_validate(io.parse_series_sheet(text))
    series = draft.to_series()
    if os.path.exists(catalog_path):
        brand = CAT.load_brand(catalog_path)
        if brand.name != draft.brand:
            raise CatalogError(
                f"Sheet is for brand '{draft.brand}' but '{catalog_path}' holds brand '{brand.name}'")
    else:
        brand = Brand(
            name=draft.brand,
            default_flow_unit=draft.flow_unit,
            default_pressure_unit=draft.pressure_unit,
        )
    created = not any(s.name == series.name for s in brand.series)
    brand = CAT.merge_series(brand, series, replace=replace)
    CAT.dump_brand(brand, catalog_path)
    log.info("%s series %s in %s", "added" if created else "replaced", series.name, catalog_path)
    CAT.reset_registry_cache()
    return {
        "brand": brand.name,
        "series": series.name,
        "action": "added" if created else "replaced",
        "series_count": len(brand.series),
        "path": catalog_path,
    }
