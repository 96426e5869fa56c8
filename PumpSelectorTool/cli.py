"""
Command-line front end for the backend (no GUI).

Usage examples:
  python -m PumpSelectorTool.cli select --flow 0.25 --pressure 60
  python -m PumpSelectorTool.cli unbalance --vab 460 --vbc 467 --vca 450 --motor-hp 50
  python -m PumpSelectorTool.cli insulation --input readings.json --output report.json
  python -m PumpSelectorTool.cli catalog-add --input sheet.txt --catalog PumpSelectorTool/data/panelli.json

Commands:
  - select: best-fit model per series of a brand for one duty point
  - brands: list the loaded brand catalogs
  - unbalance: NEMA voltage unbalance and motor derating factor
  - insulation: polarization index / dielectric absorption ratio from a JSON readings file
  - catalog-add: validate an editor sheet and merge it into a brand JSON catalog
  - catalog-check: audit catalog files and report table defects
"""
from __future__ import annotations

import argparse
import csv
import json
import logging
import os
import sys
from typing import Any, Dict, List

from pydantic import ValidationError

from . import api
from . import catalog as CAT
from . import config as C
from .errors import BackendError


def _read_json(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _write_csv_rows(path: str, rows: List[Dict[str, Any]]) -> None:
    keys: List[str] = []
    for r in rows:
        for k in r:
            if k not in keys:
                keys.append(k)
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(keys)
        for r in rows:
            w.writerow(["" if r.get(k) is None else r.get(k) for k in keys])


def _write_output(obj: Any, path: str | None) -> None:
    if not path:
        json.dump(obj, sys.stdout, ensure_ascii=False)
        sys.stdout.write("\n")
        return
    ext = os.path.splitext(path)[1].lower()
    if ext == ".json":
        with open(path, "w", encoding="utf-8") as f:
            json.dump(obj, f, ensure_ascii=False)
    elif ext == ".csv":
        if isinstance(obj, list):
            _write_csv_rows(path, obj)
        elif isinstance(obj, dict) and all(not isinstance(v, (list, dict)) for v in obj.values()):
            _write_csv_rows(path, [obj])
        elif isinstance(obj, dict) and isinstance(obj.get("results"), list):
            # Selection table: nested curve points are not tabular
            _write_csv_rows(path, [{k: v for k, v in r.items() if k != "curve"} for r in obj["results"]])
        elif isinstance(obj, dict) and isinstance(obj.get("curve"), list):
            _write_csv_rows(path, obj["curve"])
        else:
            raise SystemExit("This output cannot be written as CSV (use .json)")
    else:
        raise SystemExit(f"Unsupported output extension: {ext} (use .json or .csv)")


def _registry(args: argparse.Namespace):
    if getattr(args, "catalog_dir", None):
        return CAT.load_registry(args.catalog_dir)
    return None


def cmd_select(args: argparse.Namespace) -> int:
    out = api.select_pumps(args.brand, args.flow, args.pressure, registry=_registry(args))
    if args.matches_only:
        out["results"] = [r for r in out["results"] if r["status"] == "match"]
    _write_output(out, args.output)
    return 0


def cmd_brands(args: argparse.Namespace) -> int:
    _write_output(api.list_brands(registry=_registry(args)), args.output)
    return 0


def cmd_unbalance(args: argparse.Namespace) -> int:
    out = api.voltage_unbalance(args.vab, args.vbc, args.vca,
                                motor_hp=args.motor_hp, nominal_voltage=args.nominal_voltage)
    _write_output(out, args.output)
    return 0


def cmd_insulation(args: argparse.Namespace) -> int:
    data = _read_json(args.input)
    out = api.insulation_indices(data)
    _write_output(out, args.output)
    return 0


def cmd_catalog_add(args: argparse.Namespace) -> int:
    text = _read_text(args.input)
    if args.dry_run:
        out = api.build_series_entry(text)
    else:
        out = api.add_series_to_catalog(text, args.catalog, replace=args.replace)
    _write_output(out, args.output)
    return 0


def cmd_catalog_check(args: argparse.Namespace) -> int:
    directory = args.catalog_dir or C.CATALOG_DIR
    registry = CAT.load_registry(directory, strict=False)
    report = {name: CAT.catalog_issues(b) for name, b in registry.items()}
    _write_output(report, args.output)
    return 1 if any(report.values()) else 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="PumpSelectorTool.cli", description="Pump selection and motor check backend CLI (no GUI)")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_sel = sub.add_parser("select", help="Select the best-fit model per series for a duty point")
    p_sel.add_argument("--flow", type=float, required=True, help="Requested flow (series flow unit)")
    p_sel.add_argument("--pressure", type=float, required=True, help="Requested pressure/head (series pressure unit)")
    p_sel.add_argument("--brand", default=C.DEFAULT_BRAND)
    p_sel.add_argument("--catalog-dir", required=False, help="Directory of brand JSON catalogs")
    p_sel.add_argument("--matches-only", action="store_true", help="Drop series without a match from the output")
    p_sel.add_argument("--output", required=False, help="Output file (.json or .csv)")
    p_sel.set_defaults(func=cmd_select)

    p_br = sub.add_parser("brands", help="List loaded brand catalogs")
    p_br.add_argument("--catalog-dir", required=False, help="Directory of brand JSON catalogs")
    p_br.add_argument("--output", required=False, help="Output file (.json or .csv)")
    p_br.set_defaults(func=cmd_brands)

    p_vu = sub.add_parser("unbalance", help="Voltage unbalance and derating factor")
    p_vu.add_argument("--vab", type=float, required=True)
    p_vu.add_argument("--vbc", type=float, required=True)
    p_vu.add_argument("--vca", type=float, required=True)
    p_vu.add_argument("--motor-hp", type=float, required=False)
    p_vu.add_argument("--nominal-voltage", type=float, required=False)
    p_vu.add_argument("--output", required=False, help="Output file (.json or .csv)")
    p_vu.set_defaults(func=cmd_unbalance)

    p_ir = sub.add_parser("insulation", help="PI / DAR from a JSON readings file")
    p_ir.add_argument("--input", required=True, help="Path to JSON input file")
    p_ir.add_argument("--output", required=False, help="Output file (.json or .csv)")
    p_ir.set_defaults(func=cmd_insulation)

    p_add = sub.add_parser("catalog-add", help="Merge an editor sheet into a brand catalog file")
    p_add.add_argument("--input", required=True, help="Path to the series sheet (text)")
    p_add.add_argument("--catalog", required=False, help="Brand catalog JSON to create or update")
    p_add.add_argument("--replace", action="store_true", help="Replace a series with the same name")
    p_add.add_argument("--dry-run", action="store_true", help="Validate and print the entry without writing")
    p_add.add_argument("--output", required=False, help="Output file (.json)")
    p_add.set_defaults(func=cmd_catalog_add)

    p_chk = sub.add_parser("catalog-check", help="Audit catalogs for table defects (exit 1 on issues)")
    p_chk.add_argument("--catalog-dir", required=False, help="Directory of brand JSON catalogs")
    p_chk.add_argument("--output", required=False, help="Output file (.json)")
    p_chk.set_defaults(func=cmd_catalog_check)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    if args.func is cmd_catalog_add and not args.dry_run and not args.catalog:
        parser.error("catalog-add needs --catalog unless --dry-run is given")
    try:
        return args.func(args)
    except (BackendError, ValidationError, ValueError, OSError) as e:
        sys.stderr.write(f"error: {e}\n")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
