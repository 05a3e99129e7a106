from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

SunlightCondition = Literal["FULL_SUN", "PARTIAL_SHADE", "FULL_SHADE"]
UnplacedReason = Literal["insufficient_sunlight", "insufficient_space", "incompatible"]

# 100 ft; anything wider cannot fit the largest supported garden
MAX_SPACING_INCHES = 1200.0


def normalize_plant_type(value: str) -> str:
    return value.strip().lower()


class Plant(BaseModel):
    id: str
    type: str
    spacing_inches: float = Field(gt=0, le=MAX_SPACING_INCHES)
    sunlight_needs: SunlightCondition
    days_to_maturity: int = 60
    companion_plant_types: list[str] = []
    incompatible_plant_types: list[str] = []
    watering_frequency_days: int = 3
    fertilizing_frequency_days: int = 14

    @field_validator("type")
    @classmethod
    def normalize_type(cls, v: str) -> str:
        return normalize_plant_type(v)

    @field_validator("companion_plant_types", "incompatible_plant_types")
    @classmethod
    def normalize_type_set(cls, v: list[str]) -> list[str]:
        # Stored as a sorted set so serialization is stable.
        return sorted({normalize_plant_type(t) for t in v})

    @property
    def footprint_sq_ft(self) -> float:
        side_ft = self.spacing_inches / 12
        return side_ft * side_ft


class Zone(BaseModel):
    id: str
    area: float = Field(gt=0)
    sunlight_condition: SunlightCondition
    assigned_plant_ids: list[str] = []


class Garden(BaseModel):
    id: str
    area: float
    zones: list[Zone]
    plants: list[Plant]

    @model_validator(mode="after")
    def check_unique_ids(self) -> "Garden":
        zone_ids = [z.id for z in self.zones]
        if len(zone_ids) != len(set(zone_ids)):
            raise ValueError("zone ids must be unique within a garden")
        plant_ids = [p.id for p in self.plants]
        if len(plant_ids) != len(set(plant_ids)):
            raise ValueError("plant ids must be unique within a garden")
        return self


class PlantPlacement(BaseModel):
    plant_id: str
    x_ft: float
    y_ft: float
    spacing_inches: float


class ZoneLayout(BaseModel):
    id: str
    area: float
    sunlight_condition: SunlightCondition
    target_area: float
    assigned_plant_ids: list[str]
    placements: list[PlantPlacement]


class UnplacedPlant(BaseModel):
    plant_id: str
    reason: UnplacedReason
    zone_id: Optional[str] = None


class Layout(BaseModel):
    garden_id: str
    zones: list[ZoneLayout]
    unplaced: list[UnplacedPlant] = []
    space_utilization_percent: float = Field(ge=0, le=100)
    generated_at: datetime
