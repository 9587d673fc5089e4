"""Validated calculator inputs and the form metadata of the reference UI."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import Industry


class SliderRange(BaseModel):
    """Bounds and step of one form slider."""

    model_config = ConfigDict(frozen=True)

    min: float
    max: float
    step: float

    def clamp(self, value: float) -> float:
        return min(max(value, self.min), self.max)


FORM_RANGES: dict[str, SliderRange] = {
    "employees": SliderRange(min=1, max=200, step=1),
    "hourlyWage": SliderRange(min=15, max=150, step=1),
    "hoursRepetitive": SliderRange(min=0, max=35, step=0.5),
}


class CalculatorInputs(BaseModel):
    """User-supplied parameters for one calculation.

    Wire names are camelCase (``hourlyWage``); Python attributes are
    snake_case. Zero values are valid and produce zero savings. Negative
    or non-finite values are rejected here so the engine never sees them.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    employees: int = Field(ge=0, description="Staff whose time is in scope")
    hourly_wage: float = Field(
        ge=0, allow_inf_nan=False, description="Fully-loaded hourly labor cost (EUR)"
    )
    hours_repetitive: float = Field(
        ge=0,
        allow_inf_nan=False,
        description="Hours per employee per week spent on repetitive tasks",
    )
    industry: Industry = Industry.SERVICES

    def clamped(self) -> CalculatorInputs:
        """Return a copy with each numeric field pulled into the slider range."""
        return self.model_copy(
            update={
                "employees": int(FORM_RANGES["employees"].clamp(self.employees)),
                "hourly_wage": FORM_RANGES["hourlyWage"].clamp(self.hourly_wage),
                "hours_repetitive": FORM_RANGES["hoursRepetitive"].clamp(
                    self.hours_repetitive
                ),
            }
        )

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


FORM_DEFAULTS = CalculatorInputs(
    employees=10,
    hourly_wage=25,
    hours_repetitive=5,
    industry=Industry.SERVICES,
)


def form_metadata() -> dict[str, Any]:
    """Everything a client needs to build the calculator form."""
    return {
        "industries": [industry.value for industry in Industry],
        "defaults": FORM_DEFAULTS.to_dict(),
        "ranges": {name: rng.model_dump() for name, rng in FORM_RANGES.items()},
    }
