"""
Typed errors for layout optimization and care scheduling.

Service entry points return these instead of raising them across the
boundary — callers check `isinstance(result, GardenPlanError)`. Each error
carries a stable `code` and a `context` dict the host can render.
"""
from datetime import date
from typing import Any, Optional


class GardenPlanError(Exception):
    code: str = "garden_plan_error"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "context": self.context}


# ── Layout optimization ───────────────────────────────────────────────────────


class OptimizationError(GardenPlanError):
    code = "optimization_error"


class InvalidArea(OptimizationError):
    code = "invalid_area"

    def __init__(self, area: float, minimum: float, maximum: float) -> None:
        super().__init__(
            f"Garden area must be between {minimum:g} and {maximum:g} sq ft (got {area:g})",
            area=area, minimum=minimum, maximum=maximum,
        )


class InvalidZones(OptimizationError):
    code = "invalid_zones"

    def __init__(self, reason: str, zone_id: Optional[str] = None, **context: Any) -> None:
        super().__init__(reason, zone_id=zone_id, **context)


class NoPlants(OptimizationError):
    code = "no_plants"

    def __init__(self) -> None:
        super().__init__("Garden must have at least one plant to lay out")


class InsufficientSpace(OptimizationError):
    code = "insufficient_space"

    def __init__(self, required: float, available: float) -> None:
        super().__init__(
            f"Requested plants need {required:.2f} sq ft but the garden has {available:g} sq ft",
            required=round(required, 2), available=available,
        )


class BelowTarget(OptimizationError):
    code = "below_target"

    def __init__(self, utilization: float, minimum: float) -> None:
        super().__init__(
            f"Space utilization {utilization:.2f}% is below the {minimum:g}% target",
            utilization=utilization, minimum=minimum,
        )


class IncompatiblePlants(OptimizationError):
    code = "incompatible_plants"

    def __init__(self, zone_id: str, plant_ids: list[str]) -> None:
        super().__init__(
            f"Zone {zone_id} contains incompatible plants: {', '.join(plant_ids)}",
            zone_id=zone_id, plant_ids=plant_ids,
        )


# ── Care scheduling ───────────────────────────────────────────────────────────


class ScheduleError(GardenPlanError):
    code = "schedule_error"


class InvalidPlant(ScheduleError):
    code = "invalid_plant"

    def __init__(self, plant_id: str, reason: str) -> None:
        super().__init__(f"Plant {plant_id}: {reason}", plant_id=plant_id)


class AlreadyCompleted(ScheduleError):
    code = "already_completed"

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task {task_id} is already completed", task_id=task_id)


class PastDate(ScheduleError):
    code = "past_date"

    def __init__(self, new_due_date: date, today: date) -> None:
        super().__init__(
            f"New due date {new_due_date.isoformat()} must be after {today.isoformat()}",
            new_due_date=new_due_date.isoformat(), today=today.isoformat(),
        )


class InvalidPriority(ScheduleError):
    code = "invalid_priority"

    def __init__(self, priority: int) -> None:
        super().__init__(f"Priority must be between 1 and 5 (got {priority})", priority=priority)


class InvalidHorizon(ScheduleError):
    code = "invalid_horizon"

    def __init__(self, days_ahead: int) -> None:
        super().__init__(f"Schedule horizon must be at least one day (got {days_ahead})", days_ahead=days_ahead)
