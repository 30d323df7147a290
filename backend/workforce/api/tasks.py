from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from sqlalchemy.orm import Session

from ..db.session import get_db
from ..db import models
from ..domain.enums import Priority, ReferenceType, TaskKind, TaskStatus
from ..errors import NotFoundError
from ..services.task_service import TaskService, TaskNotFound, InvalidTaskStatus, CreateTaskItem, UpdateTaskItem
from ..services.task_query_service import TaskQueryService

router = APIRouter(prefix="/task-mgmt", tags=["tasks"])


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class TaskCreateItem(_CamelModel):
    reference_id: int = Field(..., alias="referenceId")
    reference_type: ReferenceType = Field(..., alias="referenceType")
    task: TaskKind
    assignee_id: int = Field(..., alias="assigneeId")
    priority: Priority
    task_deadline_time: int = Field(..., alias="taskDeadlineTime")

class TaskCreateRequest(_CamelModel):
    requests: List[TaskCreateItem] = Field(..., min_length=1)

class TaskUpdateItem(_CamelModel):
    task_id: int = Field(..., alias="taskId")
    task_status: Optional[TaskStatus] = Field(default=None, alias="taskStatus")
    description: Optional[str] = None

class TaskUpdateRequest(_CamelModel):
    requests: List[TaskUpdateItem] = Field(..., min_length=1)

class AssignByReferenceRequest(_CamelModel):
    reference_id: int = Field(..., alias="referenceId")
    reference_type: ReferenceType = Field(..., alias="referenceType")
    assignee_id: int = Field(..., alias="assigneeId")

class TaskFetchByDateRequest(_CamelModel):
    assignee_ids: List[int] = Field(..., alias="assigneeIds")
    start_date: int = Field(..., alias="startDate")
    end_date: int = Field(..., alias="endDate")

class PriorityUpdate(BaseModel):
    priority: Priority

class CommentCreate(_CamelModel):
    user_id: int = Field(..., alias="userId")
    comment: str = Field(..., min_length=1)


class ActivityOut(BaseModel):
    description: str
    timestamp: int

class CommentOut(_CamelModel):
    user_id: int = Field(..., alias="userId")
    comment: str
    timestamp: int

class TaskOut(_CamelModel):
    id: int
    reference_id: int = Field(..., alias="referenceId")
    reference_type: ReferenceType = Field(..., alias="referenceType")
    task: TaskKind
    description: Optional[str] = None
    status: TaskStatus
    assignee_id: Optional[int] = Field(None, alias="assigneeId")
    task_deadline_time: Optional[int] = Field(None, alias="taskDeadlineTime")
    priority: Optional[Priority] = None
    comments: List[CommentOut] = Field(default_factory=list)
    activity_history: List[ActivityOut] = Field(default_factory=list, alias="activityHistory")

class TaskListOut(BaseModel):
    data: List[TaskOut]

class UpdateFailureOut(_CamelModel):
    index: int
    task_id: int = Field(..., alias="taskId")
    code: str
    message: str

class TaskUpdateOut(BaseModel):
    data: List[TaskOut]
    failures: List[UpdateFailureOut] = Field(default_factory=list)

class MessageOut(BaseModel):
    message: str


def to_task_out(task: models.Task) -> TaskOut:
    return TaskOut(
        id=task.id,
        referenceId=task.reference_id,
        referenceType=task.reference_type,
        task=task.task_kind,
        description=task.description,
        status=task.status,
        assigneeId=task.assignee_id,
        taskDeadlineTime=task.task_deadline_time,
        priority=task.priority,
        comments=[
            CommentOut(userId=c.user_id, comment=c.comment, timestamp=c.timestamp)
            for c in task.comments
        ],
        activityHistory=[
            ActivityOut(description=a.description, timestamp=a.timestamp)
            for a in task.activity_history
        ],
    )


def _failure_code(error: Exception) -> str:
    if isinstance(error, InvalidTaskStatus):
        return "INVALID_TASK_STATUS"
    return "TASK_NOT_FOUND"


def get_task_service() -> TaskService:
    return TaskService()

def get_task_query_service() -> TaskQueryService:
    return TaskQueryService()


@router.post("/create", response_model=TaskListOut, status_code=201)
def create_tasks(body: TaskCreateRequest, db: Session = Depends(get_db), service: TaskService = Depends(get_task_service)):
    result = service.create_tasks(db, [
        CreateTaskItem(
            reference_id=item.reference_id,
            reference_type=item.reference_type,
            task_kind=item.task,
            assignee_id=item.assignee_id,
            priority=item.priority,
            task_deadline_time=item.task_deadline_time,
        )
        for item in body.requests
    ])
    return TaskListOut(data=[to_task_out(t) for t in result.tasks])

@router.post("/update", response_model=TaskUpdateOut)
def update_tasks(body: TaskUpdateRequest, db: Session = Depends(get_db), service: TaskService = Depends(get_task_service)):
    result = service.update_tasks(db, [
        UpdateTaskItem(task_id=item.task_id, status=item.task_status, description=item.description)
        for item in body.requests
    ])
    failures = [
        UpdateFailureOut(index=o.index, taskId=body.requests[o.index].task_id, code=_failure_code(o.error), message=str(o.error))
        for o in result.failures
    ]
    return TaskUpdateOut(data=[to_task_out(t) for t in result.tasks], failures=failures)

@router.post("/assign-by-ref", response_model=MessageOut)
def assign_by_reference(body: AssignByReferenceRequest, db: Session = Depends(get_db), service: TaskService = Depends(get_task_service)):
    message = service.assign_by_reference(db, body.reference_id, body.reference_type, body.assignee_id)
    return MessageOut(message=message)

@router.post("/fetch-by-date/v2", response_model=TaskListOut)
def fetch_by_date(body: TaskFetchByDateRequest, db: Session = Depends(get_db), queries: TaskQueryService = Depends(get_task_query_service)):
    tasks = queries.fetch_tasks_by_date(db, body.assignee_ids, body.start_date, body.end_date)
    return TaskListOut(data=[to_task_out(t) for t in tasks])

@router.get("/priority/{priority}", response_model=TaskListOut)
def get_tasks_by_priority(priority: Priority, db: Session = Depends(get_db), queries: TaskQueryService = Depends(get_task_query_service)):
    return TaskListOut(data=[to_task_out(t) for t in queries.get_tasks_by_priority(db, priority)])

@router.get("/{task_id}", response_model=TaskOut)
def get_task(task_id: int, db: Session = Depends(get_db), queries: TaskQueryService = Depends(get_task_query_service)):
    try:
        task = queries.find_by_id(db, task_id)
    except TaskNotFound as e:
        raise NotFoundError("TASK_NOT_FOUND", str(e))
    return to_task_out(task)

@router.put("/{task_id}/priority", response_model=MessageOut)
def update_priority(task_id: int, body: PriorityUpdate, db: Session = Depends(get_db), service: TaskService = Depends(get_task_service)):
    try:
        service.update_priority(db, task_id, body.priority)
    except TaskNotFound as e:
        raise NotFoundError("TASK_NOT_FOUND", str(e))
    return MessageOut(message="Priority updated successfully")

@router.post("/{task_id}/comments", response_model=MessageOut, status_code=201)
def add_comment(task_id: int, body: CommentCreate, db: Session = Depends(get_db), service: TaskService = Depends(get_task_service)):
    try:
        service.add_comment(db, task_id, body.user_id, body.comment)
    except TaskNotFound as e:
        raise NotFoundError("TASK_NOT_FOUND", str(e))
    return MessageOut(message="Comment added successfully")
