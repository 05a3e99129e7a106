from datetime import date, datetime

from gardenplan.schemas.schedule import CareTask, ReminderPreferences, ReminderRequest
from gardenplan.services.reminders import (
    delivery_time,
    dispatch_reminders,
    plan_reminder,
    plan_reminders,
)


def _task(**kwargs) -> CareTask:
    fields = {"plant_id": "p1", "task_type": "WATERING", "due_date": date(2024, 5, 4)}
    fields.update(kwargs)
    return CareTask(**fields)


class RecordingSender:
    def __init__(self, fail_for: set[str] = frozenset()):
        self.sent: list[ReminderRequest] = []
        self.fail_for = fail_for

    async def send(self, request: ReminderRequest) -> None:
        if request.task_id in self.fail_for:
            raise ConnectionError("push gateway unavailable")
        self.sent.append(request)


def test_reminder_at_default_time():
    reminder = plan_reminder(_task(id="t1"))

    assert reminder.deliver_at == datetime(2024, 5, 4, 9, 0)
    assert reminder.title == "Water plant p1"
    assert (reminder.task_id, reminder.task_type) == ("t1", "WATERING")


def test_reminder_uses_task_notes_as_body():
    assert plan_reminder(_task(notes="Deep soak")).body == "Deep soak"


def test_late_reminder_deferred_to_next_morning():
    prefs = ReminderPreferences(reminder_time="23:00")
    assert plan_reminder(_task(), prefs).deliver_at == datetime(2024, 5, 5, 6, 0)


def test_early_reminder_deferred_to_end_of_quiet_hours():
    prefs = ReminderPreferences(reminder_time="05:30")
    assert plan_reminder(_task(), prefs).deliver_at == datetime(2024, 5, 4, 6, 0)


def test_daytime_quiet_window():
    prefs = ReminderPreferences(quiet_hours_start="12:00", quiet_hours_end="14:00")
    assert delivery_time(datetime(2024, 5, 4, 13, 15), prefs) == datetime(2024, 5, 4, 14, 0)
    assert delivery_time(datetime(2024, 5, 4, 14, 0), prefs) == datetime(2024, 5, 4, 14, 0)
    assert delivery_time(datetime(2024, 5, 4, 11, 59), prefs) == datetime(2024, 5, 4, 11, 59)


def test_no_quiet_hours():
    prefs = ReminderPreferences(reminder_time="23:30", quiet_hours_start=None, quiet_hours_end=None)
    assert plan_reminder(_task(), prefs).deliver_at == datetime(2024, 5, 4, 23, 30)


def test_no_reminder_for_completed_or_muted_tasks():
    assert plan_reminder(_task(completed=True, completed_date=date(2024, 5, 4))) is None
    assert plan_reminder(_task(notification_enabled=False)) is None
    assert plan_reminder(_task(), ReminderPreferences(enabled=False)) is None


def test_plan_reminders_sorted_by_delivery():
    tasks = [
        _task(id="late", due_date=date(2024, 5, 9)),
        _task(id="muted", notification_enabled=False),
        _task(id="soon", due_date=date(2024, 5, 2)),
    ]

    assert [r.task_id for r in plan_reminders(tasks)] == ["soon", "late"]


async def test_dispatch_records_failures_without_raising():
    requests = plan_reminders([_task(id="a"), _task(id="b", due_date=date(2024, 5, 5))])
    sender = RecordingSender(fail_for={"a"})

    results = await dispatch_reminders(requests, sender)

    assert [(r.task_id, r.status) for r in results] == [("a", "failed"), ("b", "sent")]
    assert results[0].error == "push gateway unavailable"
    assert [r.task_id for r in sender.sent] == ["b"]
