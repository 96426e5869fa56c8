"""Small hand-built catalogs and editor sheets shared by the tests."""
from __future__ import annotations

from typing import List, Optional, Sequence

from PumpSelectorTool.schemas import Brand, PumpModel, PumpSeries


def make_model(name: str, pressures: Sequence[float], power: str = "1") -> PumpModel:
    return PumpModel(name=name, power_rating=power, pressures=list(pressures))


def make_series(
        name: str = "S1",
        breakpoints: Sequence[float] = (1.0, 2.0, 3.0),
        models: Optional[List[PumpModel]] = None,
        min_flow: float = 0.0,
        max_flow: float = 3.0,
) -> PumpSeries:
    if models is None:
        models = [
            make_model(f"{name}-A", [30, 20, 10], "1"),
            make_model(f"{name}-B", [60, 40, 20], "2"),
        ]
    return PumpSeries(
        name=name,
        flow_unit="l/s",
        pressure_unit="metros",
        min_flow=min_flow,
        max_flow=max_flow,
        flow_breakpoints=list(breakpoints),
        models=models,
    )


def make_brand(*series: PumpSeries, name: str = "TestBrand") -> Brand:
    return Brand(name=name, series=list(series))


SHEET_95PR08 = """
# Panelli 95PR08, first three columns only
[SERIES]
Brand: Panelli
Name: 95PR08X
flow_unit: l/s
pressure_unit: metros
min_flow: 0
max_flow: 0,7

[FLOWS]
0,1; 0,2; 0,3

[MODELS]
95PR0806X; 0,5; 51; 48; 45
95PR0809X; 0.75; 77; 72; 68
"""


def sheet_for(brand: str, series: str) -> str:
    return SHEET_95PR08.replace("Brand: Panelli", f"Brand: {brand}").replace("Name: 95PR08X", f"Name: {series}")
