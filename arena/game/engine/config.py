from pathlib import Path
from typing import Dict, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class EngineConfig(BaseModel):
    """Tunable constants of the hit, critical and damage formulas."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    accuracy_floor: float = Field(
        default=0.05, ge=0.0, le=1.0, description="Lowest possible hit chance"
    )
    accuracy_ceiling: float = Field(
        default=1.0, ge=0.0, le=1.0, description="Highest possible hit chance"
    )
    accuracy_speed_divisor: float = Field(
        default=1000.0,
        gt=0.0,
        description="Speed gap (defender minus attacker) that costs 100% accuracy",
    )
    base_crit_rate: float = Field(
        default=0.05, ge=0.0, le=1.0, description="Critical chance at 50 speed"
    )
    crit_speed_divisor: float = Field(
        default=400.0,
        gt=0.0,
        description="Speed above 50 that adds 100% critical chance",
    )
    crit_floor: float = Field(default=0.01, ge=0.0, le=1.0)
    crit_ceiling: float = Field(default=0.30, ge=0.0, le=1.0)
    crit_multiplier: float = Field(
        default=1.5, ge=1.0, description="Damage multiplier on a critical hit"
    )
    variance_min: float = Field(
        default=0.85, gt=0.0, description="Lower bound of the damage roll"
    )
    variance_max: float = Field(
        default=1.0, gt=0.0, description="Upper bound of the damage roll"
    )
    stat_ratio_floor: float = Field(
        default=0.25,
        ge=0.0,
        description="Attack/defense ratio is clamped here before the square root",
    )
    min_damage: int = Field(
        default=1, ge=1, description="Damage dealt by any non-immune damaging hit"
    )
    status_durations: Dict[str, int] = Field(
        default_factory=dict,
        description="Per-status duration overrides keyed by status name",
    )

    @model_validator(mode="after")
    def _check_ranges(self) -> "EngineConfig":
        if self.accuracy_floor > self.accuracy_ceiling:
            raise ValueError("accuracy_floor must not exceed accuracy_ceiling")
        if self.crit_floor > self.crit_ceiling:
            raise ValueError("crit_floor must not exceed crit_ceiling")
        if self.variance_min > self.variance_max:
            raise ValueError("variance_min must not exceed variance_max")
        for name, turns in self.status_durations.items():
            if turns < 1:
                raise ValueError(f"Duration for {name} must be at least 1 turn")
        return self


DEFAULT_ENGINE_CONFIG = EngineConfig()


def load_engine_config(path: Union[str, Path]) -> EngineConfig:
    with open(path, "r") as f:
        return EngineConfig.model_validate_json(f.read())
