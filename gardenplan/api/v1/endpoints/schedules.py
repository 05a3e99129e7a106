from datetime import date

from fastapi import APIRouter, status

from gardenplan.core.deps import raise_for_error
from gardenplan.core.errors import ScheduleError
from gardenplan.schemas.schedule import (
    CareTask,
    CompleteTaskRequest,
    CompletionResult,
    GenerateScheduleRequest,
    MaintenanceScheduleRequest,
    OverdueRequest,
    PriorityUpdateRequest,
    PruneRequest,
    ReminderPlanRequest,
    ReminderRequest,
    RescheduleRequest,
)
from gardenplan.services import schedule as schedule_service
from gardenplan.services.reminders import plan_reminders
from gardenplan.services.retention import prune_tasks

router = APIRouter(prefix="/schedules", tags=["schedules"])


@router.post("/generate", response_model=list[CareTask], status_code=status.HTTP_201_CREATED)
async def generate_schedule(data: GenerateScheduleRequest):
    tasks = schedule_service.generate_initial_schedule(data.plant, data.start_date, env=data.environment)
    if isinstance(tasks, ScheduleError):
        raise_for_error(tasks)

    if data.include_harvest:
        harvest = schedule_service.schedule_harvest(data.plant, data.start_date)
        if isinstance(harvest, ScheduleError):
            raise_for_error(harvest)
        tasks.append(harvest)
    return tasks


@router.post("/maintenance", response_model=list[CareTask])
async def maintenance_schedule(data: MaintenanceScheduleRequest):
    tasks = schedule_service.generate_maintenance_schedule(
        data.plant, data.start_date, data.days_ahead, env=data.environment,
    )
    if isinstance(tasks, ScheduleError):
        raise_for_error(tasks)
    return tasks


@router.post("/complete", response_model=CompletionResult)
async def complete_task(data: CompleteTaskRequest):
    result = schedule_service.complete_task(data.task, data.completion_date, env=data.environment)
    if isinstance(result, ScheduleError):
        raise_for_error(result)
    return result


@router.post("/reschedule", response_model=CareTask)
async def reschedule_task(data: RescheduleRequest):
    result = schedule_service.reschedule(data.task, data.new_due_date, today=date.today())
    if isinstance(result, ScheduleError):
        raise_for_error(result)
    return result


@router.post("/priority", response_model=CareTask)
async def update_task_priority(data: PriorityUpdateRequest):
    result = schedule_service.update_priority(data.task, data.priority)
    if isinstance(result, ScheduleError):
        raise_for_error(result)
    return result


@router.post("/notifications/toggle", response_model=CareTask)
async def toggle_task_notifications(task: CareTask):
    return schedule_service.toggle_notifications(task)


@router.post("/overdue", response_model=list[CareTask])
async def list_overdue_tasks(data: OverdueRequest):
    return schedule_service.list_overdue(data.tasks, data.as_of)


@router.post("/reminders", response_model=list[ReminderRequest])
async def plan_task_reminders(data: ReminderPlanRequest):
    """Reminder requests for the host's notification service, earliest first."""
    return plan_reminders(data.tasks, data.preferences)


@router.post("/prune", response_model=list[CareTask])
async def prune_schedule(data: PruneRequest):
    """Tasks still inside the retention window — the host deletes the rest."""
    return prune_tasks(data.tasks, data.today)
