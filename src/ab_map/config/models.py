from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False


# ----------------- TURN GEOMETRY ---------------------


class CornerModel(BaseModel):
    """Tuning for tracing a sidewalk corner along the intersection polygon."""

    model_config = ConfigDict(extra="forbid")
    match_threshold: float = 0.5  # corner -> polygon vertex snap distance
    smoothing_threshold: float = 1.0  # collapse points closer than this
    max_length_ratio: float = 10.0  # vs. the straight baseline

    @field_validator("match_threshold", "smoothing_threshold", "max_length_ratio")
    @classmethod
    def _positive(cls, v: float, info: ValidationInfo) -> float:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v


# ----------------- SPLITTING ---------------------


class RoundaboutModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    tag: str = "junction"
    value: str = "roundabout"


# ------------------------------------------------------------------


class MapModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    driving_side: Literal["right", "left"] = "right"
    corners: CornerModel = Field(default_factory=CornerModel)
    roundabout: RoundaboutModel = Field(default_factory=RoundaboutModel)


class BuildModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    run_id: str = "local"
    log: LogModel = LogModel()
    map: MapModel = Field(default_factory=MapModel)
