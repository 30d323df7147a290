"""Task lifecycle operations: create, update, reassign, prioritize, comment.

Every mutation appends exactly one activity entry, except a description-only
update, which appends none. Batches run item by item and each item is saved
before the next one starts; there is no rollback of earlier items.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

import structlog
from prometheus_client import Counter
from sqlalchemy.orm import Session

from ..db import models
from ..domain.catalog import DEFAULT_CATALOG, TaskCatalog
from ..domain.clock import Clock, epoch_millis
from ..domain.enums import Priority, ReferenceType, TaskKind, TaskStatus
from ..repositories.task_repository import SqlAlchemyTaskRepository, TaskRepository

log = structlog.get_logger(__name__)

TASKS_CREATED = Counter(
    "workforce_tasks_created_total", "Tasks created", ["source"]
)
TASKS_CANCELLED = Counter(
    "workforce_tasks_cancelled_total", "Tasks cancelled by reassignment"
)
REASSIGNMENTS = Counter(
    "workforce_reassignments_total", "assign-by-reference calls", ["reference_type"]
)

NEW_TASK_DESCRIPTION = "New task created."
REASSIGNED_TASK_DESCRIPTION = "Task reassigned by assign-by-ref"


class TaskNotFound(Exception):
    def __init__(self, task_id):
        self.task_id = task_id
        super().__init__(f"Task not found with id: {task_id}")


class InvalidTaskStatus(Exception):
    def __init__(self, value):
        self.value = value
        super().__init__(f"Unknown task status: {value}")


@dataclass
class CreateTaskItem:
    reference_id: int
    reference_type: ReferenceType
    task_kind: TaskKind
    assignee_id: int
    priority: Priority
    task_deadline_time: int


@dataclass
class UpdateTaskItem:
    task_id: int
    status: Optional[TaskStatus] = None
    description: Optional[str] = None


@dataclass
class ItemOutcome:
    """Result of one batch item: the saved task, or the error that aborted it."""
    index: int
    task: Optional[models.Task] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchResult:
    outcomes: List[ItemOutcome] = field(default_factory=list)

    @property
    def tasks(self) -> List[models.Task]:
        return [o.task for o in self.outcomes if o.ok]

    @property
    def failures(self) -> List[ItemOutcome]:
        return [o for o in self.outcomes if not o.ok]


class TaskService:
    def __init__(
        self,
        repository: TaskRepository | None = None,
        catalog: TaskCatalog | None = None,
        clock: Clock | None = None,
    ):
        self.repo = repository or SqlAlchemyTaskRepository()
        self.catalog = catalog or DEFAULT_CATALOG
        self.clock = clock or epoch_millis

    # --- helpers ---

    def _get(self, db: Session, task_id: int) -> models.Task:
        task = self.repo.find_by_id(db, task_id)
        if task is None:
            raise TaskNotFound(task_id)
        return task

    def _record(self, task: models.Task, description: str) -> None:
        task.activity_history.append(
            models.TaskActivity(description=description, timestamp=self.clock())
        )

    def _new_task(self, reference_id, reference_type, task_kind, assignee_id, description,
                  priority=None, task_deadline_time=None) -> models.Task:
        return models.Task(
            reference_id=reference_id,
            reference_type=ReferenceType(reference_type).value,
            task_kind=TaskKind(task_kind).value,
            assignee_id=assignee_id,
            priority=Priority(priority).value if priority is not None else None,
            task_deadline_time=task_deadline_time,
            status=TaskStatus.ASSIGNED.value,
            description=description,
        )

    # --- operations ---

    def create_tasks(self, db: Session, items: Iterable[CreateTaskItem]) -> BatchResult:
        result = BatchResult()
        for index, item in enumerate(items):
            task = self._new_task(
                item.reference_id,
                item.reference_type,
                item.task_kind,
                item.assignee_id,
                NEW_TASK_DESCRIPTION,
                priority=item.priority,
                task_deadline_time=item.task_deadline_time,
            )
            self._record(task, "Created")
            saved = self.repo.save(db, task)
            TASKS_CREATED.labels(source="create").inc()
            result.outcomes.append(ItemOutcome(index=index, task=saved))
        log.info("tasks_created", count=len(result.tasks))
        return result

    def update_tasks(self, db: Session, items: Iterable[UpdateTaskItem]) -> BatchResult:
        result = BatchResult()
        for index, item in enumerate(items):
            try:
                status = _coerce_status(item.status)
                task = self._get(db, item.task_id)
            except (InvalidTaskStatus, TaskNotFound) as e:
                log.warning("task_update_skipped", task_id=item.task_id, reason=str(e))
                result.outcomes.append(ItemOutcome(index=index, error=e))
                continue
            if status is not None:
                task.status = status.value
                self._record(task, f"Status changed to {status.value}")
            if item.description is not None:
                # Description changes are not recorded in the activity history.
                task.description = item.description
            result.outcomes.append(ItemOutcome(index=index, task=self.repo.save(db, task)))
        log.info("tasks_updated", updated=len(result.tasks), failed=len(result.failures))
        return result

    def assign_by_reference(self, db: Session, reference_id: int, reference_type: ReferenceType | str, assignee_id: int) -> str:
        """Cancel every open task of each applicable kind and create a fresh one for the assignee.

        Completed tasks are left untouched. Already-cancelled tasks are
        cancelled again, so they get another activity entry.
        """
        kinds = self.catalog.kinds_for(reference_type)
        ref_type = getattr(reference_type, "value", reference_type)
        if not kinds:
            log.warning("reassignment_without_task_kinds", reference_id=reference_id, reference_type=ref_type)
        existing = self.repo.find_by_reference_id_and_reference_type(db, reference_id, ref_type)

        for kind in kinds:
            stale = [
                t for t in existing
                if t.task_kind == kind.value and t.status != TaskStatus.COMPLETED.value
            ]
            for task in stale:
                task.status = TaskStatus.CANCELLED.value
                self._record(task, "Cancelled by reassignment")
                self.repo.save(db, task)
                TASKS_CANCELLED.inc()
                log.info("task_cancelled_by_reassignment", task_id=task.id, task_kind=kind.value)

            task = self._new_task(reference_id, ref_type, kind, assignee_id, REASSIGNED_TASK_DESCRIPTION)
            self._record(task, f"Assigned to user {assignee_id}")
            self.repo.save(db, task)
            TASKS_CREATED.labels(source="reassignment").inc()

        REASSIGNMENTS.labels(reference_type=ref_type).inc()
        log.info(
            "tasks_reassigned",
            reference_id=reference_id,
            reference_type=ref_type,
            assignee_id=assignee_id,
            kinds=len(kinds),
        )
        return f"Tasks reassigned and old assignments cancelled for reference {reference_id}"

    def update_priority(self, db: Session, task_id: int, priority: Priority | str) -> models.Task:
        task = self._get(db, task_id)
        value = Priority(priority).value
        task.priority = value
        self._record(task, f"Priority changed to {value}")
        return self.repo.save(db, task)

    def add_comment(self, db: Session, task_id: int, user_id: int, comment: str) -> models.Task:
        task = self._get(db, task_id)
        task.comments.append(
            models.TaskComment(user_id=user_id, comment=comment, timestamp=self.clock())
        )
        self._record(task, f"Comment added by user {user_id}")
        return self.repo.save(db, task)


def _coerce_status(value) -> Optional[TaskStatus]:
    if value is None:
        return None
    try:
        return TaskStatus(value)
    except ValueError:
        raise InvalidTaskStatus(value) from None
