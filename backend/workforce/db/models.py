from sqlalchemy import Column, String, DateTime, Integer, BigInteger, ForeignKey, Index
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from .session import Base


def utcnow():
    return datetime.now(timezone.utc)

class Task(Base):
    __tablename__ = "tasks"
    id = Column(Integer, primary_key=True, autoincrement=True)
    reference_id = Column(BigInteger, nullable=False)
    reference_type = Column(String, nullable=False)
    task_kind = Column(String, nullable=False)
    description = Column(String, nullable=True)
    status = Column(String, nullable=False, default="ASSIGNED", index=True)
    assignee_id = Column(BigInteger, nullable=True, index=True)
    task_deadline_time = Column(BigInteger, nullable=True)  # epoch millis; unset on reassignment
    priority = Column(String, nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    # No delete-orphan cascade: dropping an entry from either list fails at flush.
    activity_history = relationship(
        "TaskActivity",
        order_by="TaskActivity.id",
        cascade="save-update, merge",
        lazy="selectin",
    )
    comments = relationship(
        "TaskComment",
        order_by="TaskComment.id",
        cascade="save-update, merge",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_tasks_reference", "reference_id", "reference_type"),
    )

class TaskActivity(Base):
    __tablename__ = "task_activities"
    id = Column(Integer, primary_key=True, autoincrement=True)
    task_id = Column(Integer, ForeignKey("tasks.id"), nullable=False, index=True)
    description = Column(String, nullable=False)
    timestamp = Column(BigInteger, nullable=False)

class TaskComment(Base):
    __tablename__ = "task_comments"
    id = Column(Integer, primary_key=True, autoincrement=True)
    task_id = Column(Integer, ForeignKey("tasks.id"), nullable=False, index=True)
    user_id = Column(BigInteger, nullable=False)
    comment = Column(String, nullable=False)
    timestamp = Column(BigInteger, nullable=False)
