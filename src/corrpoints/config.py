"""Configuration schema and loader for correspondence fitting runs."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from corrpoints.transforms.base import FIXED_DEGREES, TransformFamily


class LoggingConfig(BaseModel):
    level: str = Field("INFO")
    output: str = Field("stdout")


class FitSettings(BaseModel):
    family: TransformFamily
    degree: Optional[int] = Field(None, ge=1)

    @model_validator(mode="after")
    def check_degree(self) -> "FitSettings":
        if self.family is TransformFamily.POLYN:
            if self.degree is None:
                raise ValueError("degree is required for the polyn family")
        elif self.family is TransformFamily.PROJECTIVE:
            if self.degree is not None:
                raise ValueError("projective transforms take no degree")
        elif self.degree is not None and self.degree != FIXED_DEGREES[self.family]:
            raise ValueError(f"{self.family.value} transforms have degree {FIXED_DEGREES[self.family]}")
        return self


class CorrespondenceSet(BaseModel):
    from_points: List[List[float]] = Field(..., min_length=1)
    to_points: List[List[float]] = Field(..., min_length=1)

    @field_validator("from_points", "to_points")
    @classmethod
    def check_pairs(cls, value: List[List[float]]) -> List[List[float]]:
        bad = [index for index, point in enumerate(value) if len(point) != 2]
        if bad:
            raise ValueError(f"points must be [x, y] pairs; bad entries at {bad}")
        return value

    @model_validator(mode="after")
    def check_lengths(self) -> "CorrespondenceSet":
        if len(self.from_points) != len(self.to_points):
            raise ValueError(
                f"from_points has {len(self.from_points)} entries but to_points has {len(self.to_points)}"
            )
        return self

    @property
    def n_points(self) -> int:
        return len(self.from_points)


class OutputConfig(BaseModel):
    transform_path: Optional[Path] = None

    @field_validator("transform_path", mode="before")
    @classmethod
    def ensure_parent(cls, value: Optional[str | Path]) -> Optional[Path]:
        if value is None:
            return None
        path = Path(value)
        path.parent.mkdir(parents=True, exist_ok=True)
        return path


class CorrPointsConfig(BaseModel):
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    fit: FitSettings
    correspondences: CorrespondenceSet
    output: OutputConfig = Field(default_factory=OutputConfig)


def load_config(path: str | Path) -> CorrPointsConfig:
    """Load configuration from YAML file."""
    with open(path, "r", encoding="utf-8") as handle:
        raw: Dict[str, object] = yaml.safe_load(handle)
    return CorrPointsConfig.model_validate(raw)
