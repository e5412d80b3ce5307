"""Task Service - task ID generation and the task lifecycle.

Task IDs look like ``25-CA-0007``: two-digit year, the first two letters of
the department name, and a per-(year, department) sequence. IDs are
generated only when the caller supplies none, and never change afterwards.

Completion stamping: moving a task into ``completed`` from any other status
sets ``completed_at`` to the current time. Leaving ``completed`` does not
clear the stamp, and updates that keep a task completed never change it.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from laundry.core.errors import ConflictError, NotFoundError
from laundry.models.department import Department
from laundry.models.task import Task, TaskStatus
from laundry.models.user import User
from laundry.schemas.pagination import paginate_query
from laundry.schemas.task import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

UNKNOWN_DEPARTMENT_CODE = "XX"
SEQUENCE_WIDTH = 4


def department_code(name: Optional[str]) -> str:
    """First two characters of a department name, upper-cased."""
    if not name:
        return UNKNOWN_DEPARTMENT_CODE
    return name[:2].upper()


def next_sequence(existing_ids: List[str], prefix: str) -> int:
    """One past the highest numeric suffix among IDs starting with ``prefix``."""
    highest = 0
    for task_id in existing_ids:
        if not task_id.startswith(prefix):
            continue
        suffix = task_id[len(prefix):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return highest + 1


def generate_task_id(db: Session, department_id: int, now: Optional[datetime] = None) -> str:
    """Build the next ``{YY}-{DEPT}-{NNNN}`` task ID for a department."""
    now = now or datetime.now(timezone.utc)
    department = db.get(Department, department_id)
    code = department_code(department.name if department else None)
    prefix = f"{now.year % 100:02d}-{code}-"

    existing = [
        row[0]
        for row in db.query(Task.task_id).filter(Task.task_id.like(f"{prefix}%")).all()
    ]
    sequence = next_sequence(existing, prefix)
    return f"{prefix}{sequence:0{SEQUENCE_WIDTH}d}"


class TaskService:
    """Service for laundry task creation, updates and queries."""

    def __init__(self, db: Session, max_retries: int = 5):
        self.db = db
        self.max_retries = max_retries

    # ===== REFERENCE CHECKS =====

    def _require_department(self, department_id: int) -> Department:
        department = self.db.get(Department, department_id)
        if department is None:
            raise NotFoundError("Department", department_id)
        return department

    def _require_user(self, user_id: int, role: str = "User") -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError(role, user_id)
        return user

    # ===== LIFECYCLE =====

    def create(self, data: TaskCreate, now: Optional[datetime] = None) -> Task:
        """Create a task, generating its ID when none is supplied.

        The insert runs inside a savepoint. When a generated ID collides with
        a concurrent insert, the savepoint is rolled back and a fresh ID is
        generated, up to ``max_retries`` times.
        """
        now = now or datetime.now(timezone.utc)

        self._require_department(data.department_id)
        self._require_user(data.requested_by_id, "Requesting user")
        if data.assigned_to_id is not None:
            self._require_user(data.assigned_to_id, "Assigned user")

        values = data.model_dump(exclude={"task_id"})
        if data.status == TaskStatus.COMPLETED:
            values["completed_at"] = now

        if data.task_id is not None:
            if self.db.query(Task.id).filter(Task.task_id == data.task_id).first():
                raise ConflictError(f"Task ID {data.task_id} already exists")
            task = self._insert(Task(task_id=data.task_id, **values))
            if task is None:
                raise ConflictError(f"Task ID {data.task_id} already exists")
        else:
            task = None
            for attempt in range(1, self.max_retries + 1):
                task_id = generate_task_id(self.db, data.department_id, now)
                task = self._insert(Task(task_id=task_id, **values))
                if task is not None:
                    break
                logger.warning(f"Task ID {task_id} taken by a concurrent insert (attempt {attempt})")
            if task is None:
                raise ConflictError("Could not allocate a unique task ID, please retry")

        self.db.commit()
        self.db.refresh(task)
        logger.info(f"Created task {task.task_id} (id={task.id}) for department {task.department_id}")
        return task

    def _insert(self, task: Task) -> Optional[Task]:
        """Insert inside a savepoint. Returns None on a uniqueness violation."""
        savepoint = self.db.begin_nested()
        try:
            self.db.add(task)
            self.db.flush()
        except IntegrityError:
            savepoint.rollback()
            return None
        savepoint.commit()
        return task

    def update(self, task_id: int, data: TaskUpdate, now: Optional[datetime] = None) -> Task:
        """Apply a partial update; stamps ``completed_at`` on entering completed."""
        task = self.get(task_id, for_update=True)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("department_id") is not None:
            self._require_department(changes["department_id"])
        if changes.get("assigned_to_id") is not None:
            self._require_user(changes["assigned_to_id"], "Assigned user")

        # Non-nullable columns cannot be cleared
        for field in ("description", "department_id", "status", "priority", "due_date"):
            if field in changes and changes[field] is None:
                del changes[field]

        if changes.get("status") == TaskStatus.COMPLETED and task.status != TaskStatus.COMPLETED:
            task.completed_at = now or datetime.now(timezone.utc)

        for field, value in changes.items():
            setattr(task, field, value)

        self.db.commit()
        self.db.refresh(task)
        logger.info(f"Updated task {task.task_id} (id={task.id}): {', '.join(changes) or 'no changes'}")
        return task

    def delete(self, task_id: int) -> None:
        task = self.get(task_id)
        self.db.delete(task)
        self.db.commit()
        logger.info(f"Deleted task {task.task_id} (id={task_id})")

    # ===== QUERIES =====

    def get(self, task_id: int, for_update: bool = False) -> Task:
        task = self.db.get(Task, task_id, with_for_update=for_update or None, populate_existing=for_update)
        if task is None:
            raise NotFoundError("Task", task_id)
        return task

    def get_by_task_id(self, task_id: str) -> Task:
        task = self.db.query(Task).filter(Task.task_id == task_id).first()
        if task is None:
            raise NotFoundError("Task", task_id)
        return task

    def list(
        self,
        offset: int = 0,
        limit: int = 20,
        status: Optional[TaskStatus] = None,
        department_id: Optional[int] = None,
        assigned_to_id: Optional[int] = None,
    ) -> Tuple[List[Task], int]:
        query = self.db.query(Task)
        if status is not None:
            query = query.filter(Task.status == status)
        if department_id is not None:
            query = query.filter(Task.department_id == department_id)
        if assigned_to_id is not None:
            query = query.filter(Task.assigned_to_id == assigned_to_id)
        query = query.order_by(Task.created_at.desc(), Task.id.desc())
        return paginate_query(query, offset, limit)

    def count_by_status(self) -> Dict[str, int]:
        """Task counts for every status, zero-filled."""
        counts = {status.value: 0 for status in TaskStatus}
        rows = self.db.query(Task.status, func.count(Task.id)).group_by(Task.status).all()
        for status, count in rows:
            counts[TaskStatus(status).value] = count
        return counts
