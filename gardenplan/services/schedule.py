"""
Care schedule generator.

Produces recurring CareTasks for a plant and moves them through their
lifecycle: Pending → Completed (spawning the next occurrence) or
Pending → Pending with a new due date (reschedule). Tasks are immutable
pydantic models — every transition returns a new instance.

Current growing conditions, when supplied, shorten intervals in hot or
humid weather and push weather-dependent work back a day in wind or
heavy rain.

Entry points return a ScheduleError instead of raising it.
"""
import logging
import math
from datetime import date, timedelta
from typing import Iterable, Optional

from gardenplan.core.errors import (
    AlreadyCompleted,
    InvalidHorizon,
    InvalidPlant,
    InvalidPriority,
    PastDate,
    ScheduleError,
)
from gardenplan.schemas.garden import Plant
from gardenplan.schemas.schedule import CareTask, CompletionResult, EnvironmentalFactors, TaskType

logger = logging.getLogger(__name__)

MIN_PRIORITY = 1
MAX_PRIORITY = 5
DEFAULT_PRIORITY = 3
DEFAULT_GRACE_DAYS = 3
MAX_SCHEDULE_DAYS = 90

# Days between occurrences when the plant does not say otherwise
TASK_FREQUENCY_DAYS: dict[str, int] = {
    "WATERING": 3,
    "FERTILIZING": 14,
    "PRUNING": 14,
    "HARVESTING": 7,
    "PEST_CONTROL": 7,
    "WEEDING": 7,
    "SOIL_AMENDMENT": 30,
    "SUPPORT_ADJUSTMENT": 14,
}

# 1 is the most urgent
TASK_PRIORITIES: dict[str, int] = {
    "WATERING": 2,
    "PEST_CONTROL": 1,
    "HARVESTING": 2,
}

# Days past due before a task counts as overdue, keyed by priority
GRACE_DAYS: dict[int, int] = {1: 1, 2: 2, 3: 3, 4: 5, 5: 7}

# Tie-break for tasks due the same day
_TYPE_ORDER: dict[str, int] = {"WATERING": 0, "FERTILIZING": 1}

# Harvest follows maturity, not a fixed interval
MAINTENANCE_TASK_TYPES: list[str] = [t for t in TASK_FREQUENCY_DAYS if t != "HARVESTING"]


def priority_for(task_type: TaskType) -> int:
    return TASK_PRIORITIES.get(task_type, DEFAULT_PRIORITY)


def grace_days(priority: int) -> int:
    return GRACE_DAYS.get(priority, DEFAULT_GRACE_DAYS)


def _type_rank(task_type: str) -> int:
    return _TYPE_ORDER.get(task_type, len(_TYPE_ORDER))


# ── Environmental adjustment ──────────────────────────────────────────────────

HOT_TEMPERATURE_C = 30.0
HUMID_PERCENT = 80.0
STRESS_INTERVAL_FACTOR = 0.8

HIGH_WIND_KMH = 20.0
HEAVY_RAIN_MM = 10.0
WEATHER_DELAY_DAYS = 1
WEATHER_DEPENDENT_TASKS = frozenset({"WATERING", "FERTILIZING", "PRUNING"})

DRY_RAINFALL_MM = 5.0


def adjusted_interval(interval_days: int, env: Optional[EnvironmentalFactors] = None) -> int:
    """Hot or humid conditions shorten the interval by a fifth, never below one day."""
    if env is None:
        return interval_days
    if env.temperature_c > HOT_TEMPERATURE_C or env.humidity_percent > HUMID_PERCENT:
        return max(1, math.floor(interval_days * STRESS_INTERVAL_FACTOR))
    return interval_days


def weather_delay_days(task_type: TaskType, env: Optional[EnvironmentalFactors] = None) -> int:
    if env is None or task_type not in WEATHER_DEPENDENT_TASKS:
        return 0
    if env.wind_speed_kmh > HIGH_WIND_KMH or env.rainfall_mm > HEAVY_RAIN_MM:
        return WEATHER_DELAY_DAYS
    return 0


def environmental_priority(task_type: TaskType, env: Optional[EnvironmentalFactors] = None) -> int:
    """Default priority for `task_type`; watering gets more urgent in heat and drought."""
    priority = priority_for(task_type)
    if env is not None and task_type == "WATERING":
        if env.temperature_c > HOT_TEMPERATURE_C:
            priority -= 1
        if env.rainfall_mm < DRY_RAINFALL_MM:
            priority -= 1
    return max(MIN_PRIORITY, min(priority, MAX_PRIORITY))


def next_due_date(
    task_type: TaskType,
    from_date: date,
    interval_days: int,
    env: Optional[EnvironmentalFactors] = None,
) -> date:
    days = adjusted_interval(interval_days, env) + weather_delay_days(task_type, env)
    return from_date + timedelta(days=days)


def _new_task(
    plant_id: str,
    task_type: TaskType,
    due: date,
    frequency_days: Optional[int],
    env: Optional[EnvironmentalFactors] = None,
) -> CareTask:
    return CareTask(
        plant_id=plant_id,
        task_type=task_type,
        due_date=due,
        priority=environmental_priority(task_type, env),
        frequency_days=frequency_days,
    )


# ── Generation ────────────────────────────────────────────────────────────────


def _check_frequencies(plant: Plant) -> Optional[InvalidPlant]:
    if plant.watering_frequency_days <= 0:
        return InvalidPlant(plant.id, "watering frequency must be a positive number of days")
    if plant.fertilizing_frequency_days <= 0:
        return InvalidPlant(plant.id, "fertilizing frequency must be a positive number of days")
    return None


def _plant_interval(plant: Plant, task_type: str) -> int:
    if task_type == "WATERING":
        return plant.watering_frequency_days
    if task_type == "FERTILIZING":
        return plant.fertilizing_frequency_days
    return TASK_FREQUENCY_DAYS[task_type]


def generate_initial_schedule(
    plant: Plant,
    start_date: date,
    env: Optional[EnvironmentalFactors] = None,
) -> list[CareTask] | ScheduleError:
    """One WATERING and one FERTILIZING task, each due one interval after `start_date`."""
    invalid = _check_frequencies(plant)
    if invalid:
        return invalid

    tasks = [
        _new_task(
            plant.id, task_type,
            next_due_date(task_type, start_date, _plant_interval(plant, task_type), env),
            _plant_interval(plant, task_type),
            env,
        )
        for task_type in ("WATERING", "FERTILIZING")
    ]
    logger.debug("schedule: generated %d tasks for plant %s from %s", len(tasks), plant.id, start_date)
    return tasks


def generate_maintenance_schedule(
    plant: Plant,
    start_date: date,
    days_ahead: int,
    env: Optional[EnvironmentalFactors] = None,
) -> list[CareTask] | ScheduleError:
    """
    Every recurring care task for `plant` due before `start_date + days_ahead`.

    The horizon is capped at MAX_SCHEDULE_DAYS. Wind or heavy rain delays
    only the first occurrence of each task type; hot or humid conditions
    shorten every interval. Results are ordered by due date, then priority.
    """
    if days_ahead < 1:
        return InvalidHorizon(days_ahead)
    invalid = _check_frequencies(plant)
    if invalid:
        return invalid

    if days_ahead > MAX_SCHEDULE_DAYS:
        logger.debug("schedule: horizon %d capped at %d days", days_ahead, MAX_SCHEDULE_DAYS)
        days_ahead = MAX_SCHEDULE_DAYS
    end = start_date + timedelta(days=days_ahead)

    tasks: list[CareTask] = []
    for task_type in MAINTENANCE_TASK_TYPES:
        interval = _plant_interval(plant, task_type)
        step = timedelta(days=adjusted_interval(interval, env))
        due = next_due_date(task_type, start_date, interval, env)
        while due < end:
            tasks.append(_new_task(plant.id, task_type, due, interval, env))
            due += step

    tasks.sort(key=lambda t: (t.due_date, t.priority, _type_rank(t.task_type), t.task_type))
    logger.debug(
        "schedule: generated %d maintenance tasks for plant %s over %d days",
        len(tasks), plant.id, days_ahead,
    )
    return tasks


def schedule_harvest(plant: Plant, start_date: date) -> CareTask | ScheduleError:
    if plant.days_to_maturity <= 0:
        return InvalidPlant(plant.id, "days to maturity must be positive")
    return _new_task(
        plant.id, "HARVESTING",
        start_date + timedelta(days=plant.days_to_maturity),
        TASK_FREQUENCY_DAYS["HARVESTING"],
    )


# ── Transitions ───────────────────────────────────────────────────────────────


def complete_task(
    task: CareTask,
    completion_date: date,
    env: Optional[EnvironmentalFactors] = None,
) -> CompletionResult | ScheduleError:
    """
    Mark `task` done on `completion_date` and spawn its next occurrence.

    Early completion is allowed. The next occurrence is due one interval
    after the completion date, using the task type's default interval
    when the task carries none, adjusted for `env` when given.
    """
    if task.completed:
        return AlreadyCompleted(task.id)

    done = task.model_copy(update={"completed": True, "completed_date": completion_date})

    interval = task.frequency_days or TASK_FREQUENCY_DAYS[task.task_type]
    next_task = CareTask(
        plant_id=task.plant_id,
        task_type=task.task_type,
        due_date=next_due_date(task.task_type, completion_date, interval, env),
        priority=task.priority,
        frequency_days=task.frequency_days,
        notification_enabled=task.notification_enabled,
        estimated_duration_minutes=task.estimated_duration_minutes,
    )

    logger.debug(
        "schedule: task %s completed on %s, next due %s",
        task.id, completion_date, next_task.due_date,
    )
    return CompletionResult(completed=done, next_task=next_task)




def reschedule(task: CareTask, new_due_date: date, today: Optional[date] = None) -> CareTask | ScheduleError:
    today = today or date.today()
    if new_due_date <= today:
        return PastDate(new_due_date, today)
    return task.model_copy(update={"due_date": new_due_date, "completed": False, "completed_date": None})


def update_priority(task: CareTask, priority: int) -> CareTask | ScheduleError:
    if not MIN_PRIORITY <= priority <= MAX_PRIORITY:
        return InvalidPriority(priority)
    return task.model_copy(update={"priority": priority})


def toggle_notifications(task: CareTask) -> CareTask:
    return task.model_copy(update={"notification_enabled": not task.notification_enabled})


# ── Queries ───────────────────────────────────────────────────────────────────


def is_overdue(task: CareTask, as_of: date) -> bool:
    if task.completed:
        return False
    return as_of > task.due_date + timedelta(days=grace_days(task.priority))


def list_overdue(tasks: Iterable[CareTask], as_of: date) -> list[CareTask]:
    """Overdue tasks, oldest first; same-day ties go by priority, then watering before fertilizing."""
    overdue = [t for t in tasks if is_overdue(t, as_of)]
    return sorted(
        overdue,
        key=lambda t: (t.due_date, t.priority, _type_rank(t.task_type), t.id),
    )
