"""
Brand catalogs stored as JSON data files, one brand per file.

Catalogs are validated with the pydantic models in schemas.py and audited once
at load time for the table invariants the selection engine relies on. The
engine itself never re-checks them.
"""
from __future__ import annotations

from typing import Dict, List, Optional
import glob
import json
import logging
import os

from pydantic import ValidationError

from . import config as C
from .errors import CatalogError
from .schemas import Brand, PumpSeries

log = logging.getLogger(__name__)

_registry_cache: Optional[Dict[str, Brand]] = None


def _read_json(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_brand(path: str) -> Brand:
    try:
        data = _read_json(path)
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"Cannot read catalog '{path}': {e}") from e
    try:
        return Brand.model_validate(data)
    except ValidationError as e:
        raise CatalogError(f"Invalid catalog '{path}':\n{e}") from e


def catalog_issues(brand: Brand) -> List[str]:
    """Return human-readable table defects found in the brand; empty when clean."""
    issues: List[str] = []
    for s in brand.series:
        where = f"{brand.name}/{s.name}"
        n = len(s.flow_breakpoints)
        if n == 0:
            issues.append(f"{where}: no flow breakpoints")
        for a, b in zip(s.flow_breakpoints, s.flow_breakpoints[1:]):
            if b <= a:
                issues.append(f"{where}: breakpoints not strictly increasing ({a:g} then {b:g})")
                break
        if s.min_flow > s.max_flow:
            issues.append(f"{where}: min_flow {s.min_flow:g} > max_flow {s.max_flow:g}")
        names = set()
        for m in s.models:
            if m.name in names:
                issues.append(f"{where}: duplicate model '{m.name}'")
            names.add(m.name)
            if len(m.pressures) != n:
                issues.append(f"{where}: model {m.name} has {len(m.pressures)} pressure(s) for {n} breakpoint(s)")
    return issues


def _audit(brand: Brand, source: str, strict: bool) -> None:
    issues = catalog_issues(brand)
    if not issues:
        return
    if strict:
        raise CatalogError(f"Catalog '{source}' failed audit:\n" + "\n".join(" - " + i for i in issues))
    for i in issues:
        log.warning("catalog %s: %s", os.path.basename(source), i)


def load_registry(directory: Optional[str] = None, strict: Optional[bool] = None) -> Dict[str, Brand]:
    """Load every *.json catalog in directory (sorted by file name), keyed by brand name."""
    directory = directory or C.CATALOG_DIR
    strict = C.STRICT_CATALOG if strict is None else strict
    paths = sorted(glob.glob(os.path.join(directory, "*.json")))
    registry: Dict[str, Brand] = {}
    for path in paths:
        brand = load_brand(path)
        if brand.name in registry:
            raise CatalogError(f"Brand '{brand.name}' defined twice (second in '{path}')")
        _audit(brand, path, strict)
        registry[brand.name] = brand
    log.debug("loaded %d brand catalog(s) from %s", len(registry), directory)
    return registry


def default_registry() -> Dict[str, Brand]:
    global _registry_cache
    if _registry_cache is None:
        _registry_cache = load_registry()
    return _registry_cache


def reset_registry_cache() -> None:
    global _registry_cache
    _registry_cache = None


def get_brand(name: str, registry: Optional[Dict[str, Brand]] = None) -> Brand:
    registry = default_registry() if registry is None else registry
    try:
        return registry[name]
    except KeyError:
        known = ", ".join(registry) or "none"
        raise CatalogError(f"Unknown brand '{name}' (known: {known})") from None


def merge_series(brand: Brand, series: PumpSeries, replace: bool = False) -> Brand:
    """Return a new Brand with series appended, or swapped in place when replace=True."""
    existing = [s.name for s in brand.series]
    if series.name in existing:
        if not replace:
            raise CatalogError(f"Series '{series.name}' already exists in brand '{brand.name}'")
        new_series = tuple(series if s.name == series.name else s for s in brand.series)
    else:
        new_series = brand.series + (series,)
    return brand.model_copy(update={"series": new_series})


def dump_brand(brand: Brand, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(brand.model_dump(mode="json"), f, ensure_ascii=False, indent=2)
        f.write("\n")
