"""
Parser for catalog-editor text sheets describing one pump series.

Sheet layout (sections in this order, keys case-insensitive):

    [SERIES]
    brand: Panelli
    name: 95PR08
    flow_unit: l/s
    pressure_unit: metros
    min_flow: 0
    max_flow: 0,7
    [FLOWS]
    0,1; 0,2; 0,3
    [MODELS]
    95PR0806; 0.5; 51; 48; 45

Decimal commas are normalized. Returns a dict consumable by schemas.SeriesDraft.
"""
from __future__ import annotations

from typing import Any, Dict, List

_SECTIONS = ("[SERIES]", "[FLOWS]", "[MODELS]")
_REQUIRED_KEYS = ("brand", "name", "min_flow", "max_flow")
_NUMERIC_KEYS = ("min_flow", "max_flow")
_KNOWN_KEYS = _REQUIRED_KEYS + ("flow_unit", "pressure_unit")


def _norm_number(s: str) -> float:
    s_clean = s.strip().replace("\u00A0", "").replace(" ", "").replace(",", ".")
    try:
        return float(s_clean)
    except ValueError as e:
        raise ValueError(f"Invalid numeric value: '{s}'") from e


def _parse_kv(lines: List[str]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for ln in lines:
        if ":" not in ln:
            raise ValueError(f"Expected 'key: value' in [SERIES]: '{ln}'")
        k, v = ln.split(":", 1)
        key = k.strip().lower()
        if key not in _KNOWN_KEYS:
            raise ValueError(f"Unknown key '{key}' in [SERIES]: '{ln}'")
        out[key] = v.strip()
    return out


def _split_cells(ln: str) -> List[str]:
    # ';' separates cells so ',' stays free for decimal commas
    return [p.strip() for p in ln.split(";") if p.strip()]


def parse_series_sheet(text: str) -> Dict[str, Any]:
    lines = [ln.strip() for ln in text.splitlines()]
    lines = [ln for ln in lines if ln and not ln.startswith("#")]
    upper = [ln.upper() for ln in lines]
    idx = {name: (upper.index(name) if name in upper else -1) for name in _SECTIONS}
    missing = [name.strip("[]") for name, i in idx.items() if i == -1]
    if missing:
        raise ValueError(f"Invalid series sheet: missing sections {missing}")
    s_idx, f_idx, m_idx = idx["[SERIES]"], idx["[FLOWS]"], idx["[MODELS]"]
    if not s_idx < f_idx < m_idx:
        raise ValueError("Invalid series sheet: sections must appear as [SERIES], [FLOWS], [MODELS]")

    kv = _parse_kv(lines[s_idx + 1 : f_idx])
    absent = [k for k in _REQUIRED_KEYS if not kv.get(k)]
    if absent:
        raise ValueError(f"Invalid series sheet: missing keys {absent}")

    flows: List[float] = []
    for ln in lines[f_idx + 1 : m_idx]:
        flows.extend(_norm_number(c) for c in _split_cells(ln))

    models: List[Dict[str, Any]] = []
    # Model rows: name;power;p1;p2;...
    for ln in lines[m_idx + 1 :]:
        parts = _split_cells(ln)
        if len(parts) < 3:
            raise ValueError(f"Malformed model row (need name; power; pressures...): '{ln}'")
        models.append({
            "name": parts[0],
            "power_rating": parts[1].replace(",", "."),
            "pressures": [_norm_number(p) for p in parts[2:]],
        })

    series: Dict[str, Any] = {
        "brand": kv["brand"],
        "name": kv["name"],
        "flow_breakpoints": flows,
        "models": models,
    }
    for k in _NUMERIC_KEYS:
        series[k] = _norm_number(kv[k])
    if kv.get("flow_unit"):
        series["flow_unit"] = kv["flow_unit"]
    if kv.get("pressure_unit"):
        series["pressure_unit"] = kv["pressure_unit"]
    return series
