"""
Reminder planning and dispatch.

Turns pending CareTasks into "deliver no earlier than T" requests for the
host's notification collaborator. Delivery times are naive local datetimes:
the task's due date at the user's reminder time, pushed past the quiet
window when it lands inside it.

dispatch_reminders never raises on a failed send — it logs the error and
reports "failed" for that request instead.
"""
import logging
from datetime import datetime, time, timedelta
from typing import Iterable, Optional, Protocol

from gardenplan.core.config import settings
from gardenplan.schemas.schedule import CareTask, DispatchResult, ReminderPreferences, ReminderRequest

logger = logging.getLogger(__name__)

_TASK_LABELS: dict[str, str] = {
    "WATERING": "Water",
    "FERTILIZING": "Fertilize",
    "PRUNING": "Prune",
    "HARVESTING": "Harvest",
    "PEST_CONTROL": "Check for pests on",
    "WEEDING": "Weed around",
    "SOIL_AMENDMENT": "Amend the soil for",
    "SUPPORT_ADJUSTMENT": "Adjust supports for",
}


class ReminderSender(Protocol):
    async def send(self, request: ReminderRequest) -> None: ...


def default_preferences() -> ReminderPreferences:
    return ReminderPreferences(
        reminder_time=settings.REMINDER_TIME,
        quiet_hours_start=settings.QUIET_HOURS_START,
        quiet_hours_end=settings.QUIET_HOURS_END,
    )


def _parse_hhmm(value: str) -> time:
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def _in_quiet_hours(moment: time, start: time, end: time) -> bool:
    if start == end:
        return False
    if start < end:
        return start <= moment < end
    # Window wraps midnight, e.g. 22:00–06:00
    return moment >= start or moment < end


def delivery_time(due: datetime, prefs: ReminderPreferences) -> datetime:
    """Earliest moment at or after `due` that is outside the quiet window."""
    if not prefs.quiet_hours_start or not prefs.quiet_hours_end:
        return due
    start = _parse_hhmm(prefs.quiet_hours_start)
    end = _parse_hhmm(prefs.quiet_hours_end)
    if not _in_quiet_hours(due.time(), start, end):
        return due

    resume = datetime.combine(due.date(), end)
    if resume <= due:
        resume += timedelta(days=1)
    return resume


def plan_reminder(task: CareTask, prefs: Optional[ReminderPreferences] = None) -> Optional[ReminderRequest]:
    """Build the reminder for `task`, or None when nothing should be sent."""
    prefs = prefs or default_preferences()
    if task.completed or not task.notification_enabled or not prefs.enabled:
        return None

    due = datetime.combine(task.due_date, _parse_hhmm(prefs.reminder_time))
    label = _TASK_LABELS.get(task.task_type, task.task_type.replace("_", " ").title())
    return ReminderRequest(
        task_id=task.id,
        plant_id=task.plant_id,
        task_type=task.task_type,
        deliver_at=delivery_time(due, prefs),
        title=f"{label} plant {task.plant_id}",
        body=task.notes or f"{label} plant {task.plant_id} — due {task.due_date.isoformat()}",
    )


def plan_reminders(tasks: Iterable[CareTask], prefs: Optional[ReminderPreferences] = None) -> list[ReminderRequest]:
    planned = [r for r in (plan_reminder(t, prefs) for t in tasks) if r is not None]
    return sorted(planned, key=lambda r: (r.deliver_at, r.task_id))


async def dispatch_reminders(
    requests: Iterable[ReminderRequest], sender: ReminderSender
) -> list[DispatchResult]:
    """Hand each request to `sender` and record whether it was accepted."""
    results: list[DispatchResult] = []
    for request in requests:
        try:
            await sender.send(request)
        except Exception as exc:
            logger.warning("dispatch_reminders: send failed for task %s: %s", request.task_id, exc)
            results.append(DispatchResult(task_id=request.task_id, status="failed", error=str(exc)))
            continue
        results.append(DispatchResult(task_id=request.task_id, status="sent"))
    return results
