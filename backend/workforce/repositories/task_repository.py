from __future__ import annotations
from typing import Protocol, List, Optional, Sequence
from datetime import datetime, timezone
from sqlalchemy.orm import Session

from ..db import models


class TaskRepository(Protocol):
    """Task Store. Upsert and lookups only; tasks are never deleted."""

    def find_by_id(self, db: Session, task_id: int) -> Optional[models.Task]: ...
    def save(self, db: Session, task: models.Task) -> models.Task: ...
    def find_by_reference_id_and_reference_type(self, db: Session, reference_id: int, reference_type: str) -> List[models.Task]: ...
    def find_by_assignee_id_in(self, db: Session, assignee_ids: Sequence[int]) -> List[models.Task]: ...
    def find_by_priority(self, db: Session, priority: str) -> List[models.Task]: ...


class SqlAlchemyTaskRepository:
    """SQLAlchemy-backed Task Store. Every list comes back in insertion (id) order."""

    def find_by_id(self, db: Session, task_id: int) -> Optional[models.Task]:
        return db.query(models.Task).filter(models.Task.id == task_id).first()

    def save(self, db: Session, task: models.Task) -> models.Task:
        task.updated_at = datetime.now(timezone.utc)
        db.add(task)
        db.commit()
        db.refresh(task)
        return task

    def find_by_reference_id_and_reference_type(self, db: Session, reference_id: int, reference_type: str) -> List[models.Task]:
        return (
            db.query(models.Task)
            .filter(models.Task.reference_id == reference_id, models.Task.reference_type == _value(reference_type))
            .order_by(models.Task.id)
            .all()
        )

    def find_by_assignee_id_in(self, db: Session, assignee_ids: Sequence[int]) -> List[models.Task]:
        if not assignee_ids:
            return []
        return (
            db.query(models.Task)
            .filter(models.Task.assignee_id.in_(list(assignee_ids)))
            .order_by(models.Task.id)
            .all()
        )

    def find_by_priority(self, db: Session, priority: str) -> List[models.Task]:
        return (
            db.query(models.Task)
            .filter(models.Task.priority == _value(priority))
            .order_by(models.Task.id)
            .all()
        )


def _value(enum_or_str) -> str:
    return getattr(enum_or_str, "value", enum_or_str)
