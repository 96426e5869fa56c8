from __future__ import annotations
from typing import Optional, List, Dict, Tuple, Annotated
from pydantic import BaseModel, Field, ConfigDict, model_validator

from .config import REQUIRED_READINGS_S

# Common helpers
Positive = Annotated[float, Field(gt=0)]
NonNegative = Annotated[float, Field(ge=0)]
Name = Annotated[str, Field(min_length=1)]


# Catalog models
class PumpModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)
    name: Name
    power_rating: str  # free form, e.g. "1.5" (HP); never parsed
    pressures: Tuple[float, ...]


class PumpSeries(BaseModel):
    """One product line sharing a performance table.

    Shape defects (no breakpoints, unsorted breakpoints, short pressure rows)
    are accepted here; catalog.catalog_issues reports them and the selection
    engine tolerates them. Non-finite numbers are rejected. Tables are tuples
    so series, models and selection outcomes stay hashable.
    """
    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)
    name: Name
    flow_unit: str
    pressure_unit: str
    min_flow: float
    max_flow: float
    flow_breakpoints: Tuple[float, ...]
    models: Tuple[PumpModel, ...]


class Brand(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    name: Name
    default_flow_unit: str = "l/s"
    default_pressure_unit: str = "metros"
    series: Tuple[PumpSeries, ...] = ()

    @model_validator(mode="after")
    def check_unique_series_names(self) -> "Brand":
        seen = set()
        for s in self.series:
            if s.name in seen:
                raise ValueError(f"Duplicate series name '{s.name}' in brand '{self.name}'")
            seen.add(s.name)
        return self

    def get_series(self, name: str) -> Optional[PumpSeries]:
        for s in self.series:
            if s.name == name:
                return s
        return None


class OperatingPointRequest(BaseModel):
    """Requested duty point. Units are implied by the series being searched."""
    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)
    flow: Positive
    pressure: Positive


# Catalog editor drafts (stricter than the catalog models)
class ModelDraft(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: Name
    power_rating: Name
    pressures: Annotated[List[float], Field(min_length=1)]


class SeriesDraft(BaseModel):
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)
    brand: Name
    name: Name
    flow_unit: Name = "l/s"
    pressure_unit: Name = "metros"
    min_flow: NonNegative
    max_flow: Positive
    flow_breakpoints: Annotated[List[float], Field(min_length=1)]
    models: Annotated[List[ModelDraft], Field(min_length=1)]

    @model_validator(mode="after")
    def check_table(self) -> "SeriesDraft":
        if self.max_flow <= self.min_flow:
            raise ValueError("max_flow must be greater than min_flow")
        bps = self.flow_breakpoints
        for a, b in zip(bps, bps[1:]):
            if b <= a:
                raise ValueError(f"flow points must be strictly increasing ({a} then {b})")
        n = len(bps)
        bad = [m.name for m in self.models if len(m.pressures) != n]
        if bad:
            raise ValueError(f"each model needs exactly {n} pressure value(s); check {', '.join(bad)}")
        return self

    def to_series(self) -> PumpSeries:
        return PumpSeries(
            name=self.name,
            flow_unit=self.flow_unit,
            pressure_unit=self.pressure_unit,
            min_flow=self.min_flow,
            max_flow=self.max_flow,
            flow_breakpoints=tuple(self.flow_breakpoints),
            models=tuple(PumpModel(name=m.name, power_rating=m.power_rating, pressures=tuple(m.pressures)) for m in self.models),
        )


# Electrical calculators
class VoltageReadings(BaseModel):
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)
    vab: Positive
    vbc: Positive
    vca: Positive
    motor_hp: Optional[Positive] = None
    nominal_voltage: Optional[Positive] = None


class InsulationTest(BaseModel):
    model_config = ConfigDict(extra="allow", allow_inf_nan=False)
    tester_name: Optional[str] = None
    motor_id: Optional[str] = None
    motor_serial: Optional[str] = None
    # resistance [GOhm] keyed by elapsed seconds
    readings: Dict[int, Positive]

    @model_validator(mode="after")
    def check_required_times(self) -> "InsulationTest":
        missing = [t for t in REQUIRED_READINGS_S if t not in self.readings]
        if missing:
            raise ValueError(f"missing readings at {missing} s")
        return self
