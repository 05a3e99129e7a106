"""
Care task retention.

Completed tasks are kept for a year after completion; pending tasks are
dropped once they are more than 30 days past due. Pure housekeeping — the
host decides when to run it and deletes whatever is not returned.
"""
import logging
from datetime import date, timedelta
from typing import Iterable

from gardenplan.schemas.schedule import CareTask

logger = logging.getLogger(__name__)

COMPLETED_RETENTION_DAYS = 365
STALE_RETENTION_DAYS = 30


def is_retained(task: CareTask, today: date) -> bool:
    if task.completed:
        return task.completed_date >= today - timedelta(days=COMPLETED_RETENTION_DAYS)
    return task.due_date >= today - timedelta(days=STALE_RETENTION_DAYS)


def prune_tasks(tasks: Iterable[CareTask], today: date) -> list[CareTask]:
    tasks = list(tasks)
    kept = [t for t in tasks if is_retained(t, today)]
    if len(kept) != len(tasks):
        logger.info("prune_tasks: dropped %d of %d tasks", len(tasks) - len(kept), len(tasks))
    return kept
