from __future__ import annotations
from typing import List, Sequence

import structlog
from sqlalchemy.orm import Session

from ..db import models
from ..domain.enums import Priority, TaskStatus
from ..repositories.task_repository import SqlAlchemyTaskRepository, TaskRepository
from .task_service import TaskNotFound

log = structlog.get_logger(__name__)


def in_date_window(task: models.Task, start_date: int, end_date: int) -> bool:
    """Whether a task belongs in the [start_date, end_date] window.

    Cancelled tasks never do. A task due inside the window does; so does a
    task due before the window that is still not completed. Tasks due after
    end_date, or without a deadline, never match.
    """
    if task.status == TaskStatus.CANCELLED.value:
        return False
    deadline = task.task_deadline_time
    if deadline is None:
        return False
    in_range = start_date <= deadline <= end_date
    active_before_start = deadline < start_date and task.status != TaskStatus.COMPLETED.value
    return in_range or active_before_start


class TaskQueryService:
    def __init__(self, repository: TaskRepository | None = None):
        self.repo = repository or SqlAlchemyTaskRepository()

    def find_by_id(self, db: Session, task_id: int) -> models.Task:
        task = self.repo.find_by_id(db, task_id)
        if task is None:
            raise TaskNotFound(task_id)
        return task

    def get_tasks_by_priority(self, db: Session, priority: Priority | str) -> List[models.Task]:
        return self.repo.find_by_priority(db, Priority(priority).value)

    def fetch_tasks_by_date(self, db: Session, assignee_ids: Sequence[int], start_date: int, end_date: int) -> List[models.Task]:
        tasks = self.repo.find_by_assignee_id_in(db, assignee_ids)
        filtered = [t for t in tasks if in_date_window(t, start_date, end_date)]
        log.info("tasks_fetched_by_date", total_before=len(tasks), total_after=len(filtered))
        return filtered
