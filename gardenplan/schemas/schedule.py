import uuid
from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

from gardenplan.schemas.garden import Plant

TaskType = Literal[
    "WATERING",
    "FERTILIZING",
    "PRUNING",
    "HARVESTING",
    "PEST_CONTROL",
    "WEEDING",
    "SOIL_AMENDMENT",
    "SUPPORT_ADJUSTMENT",
]


def _new_task_id() -> str:
    return str(uuid.uuid4())


class CareTask(BaseModel):
    id: str = Field(default_factory=_new_task_id)
    plant_id: str
    task_type: TaskType
    due_date: date
    completed: bool = False
    completed_date: Optional[date] = None
    priority: int = Field(default=3, ge=1, le=5)
    frequency_days: Optional[int] = Field(default=None, gt=0)
    notes: Optional[str] = None
    notification_enabled: bool = True
    estimated_duration_minutes: int = Field(default=15, ge=5)

    @model_validator(mode="after")
    def check_completion(self) -> "CareTask":
        # Early completion is allowed, so completed_date is not compared to due_date.
        if self.completed and self.completed_date is None:
            raise ValueError("completed tasks must have a completed_date")
        if not self.completed and self.completed_date is not None:
            raise ValueError("pending tasks must not have a completed_date")
        return self


class EnvironmentalFactors(BaseModel):
    """Current growing conditions used to tighten or delay care intervals."""

    temperature_c: float
    humidity_percent: float = Field(ge=0, le=100)
    rainfall_mm: float = Field(ge=0)
    wind_speed_kmh: float = Field(ge=0)


class CompletionResult(BaseModel):
    completed: CareTask
    next_task: CareTask


# ── Request bodies for the HTTP adapter ───────────────────────────────────────


class GenerateScheduleRequest(BaseModel):
    plant: Plant
    start_date: date
    include_harvest: bool = False
    environment: Optional[EnvironmentalFactors] = None


class MaintenanceScheduleRequest(BaseModel):
    plant: Plant
    start_date: date
    # Unconstrained so a non-positive horizon reaches the service's typed error.
    days_ahead: int = 30
    environment: Optional[EnvironmentalFactors] = None


class CompleteTaskRequest(BaseModel):
    task: CareTask
    completion_date: date
    environment: Optional[EnvironmentalFactors] = None


class RescheduleRequest(BaseModel):
    task: CareTask
    new_due_date: date


class PriorityUpdateRequest(BaseModel):
    task: CareTask
    # Unconstrained here so out-of-range values reach the service's typed error.
    priority: int


class OverdueRequest(BaseModel):
    tasks: list[CareTask]
    as_of: date


class PruneRequest(BaseModel):
    tasks: list[CareTask]
    today: date


# ── Reminders ─────────────────────────────────────────────────────────────────


class ReminderPreferences(BaseModel):
    enabled: bool = True
    reminder_time: str = Field(default="09:00", pattern=r"^([01]?\d|2[0-3]):[0-5]\d$")
    quiet_hours_start: Optional[str] = Field(default="22:00", pattern=r"^([01]?\d|2[0-3]):[0-5]\d$")
    quiet_hours_end: Optional[str] = Field(default="06:00", pattern=r"^([01]?\d|2[0-3]):[0-5]\d$")


class ReminderRequest(BaseModel):
    task_id: str
    plant_id: str
    task_type: TaskType
    deliver_at: datetime
    title: str
    body: str


class ReminderPlanRequest(BaseModel):
    tasks: list[CareTask]
    preferences: Optional[ReminderPreferences] = None


class DispatchResult(BaseModel):
    task_id: str
    status: Literal["sent", "failed"]
    error: Optional[str] = None
