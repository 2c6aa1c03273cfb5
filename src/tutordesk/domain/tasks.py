"""Task board domain service."""

from typing import Optional, Sequence

from tutordesk.database import mappers
from tutordesk.database.base import RecordStore
from tutordesk.domain.access import can_edit, filter_visible, require_admin
from tutordesk.domain.entities import (
    Collection,
    NotFound,
    Task,
    TaskStatus,
    UpdateResult,
    Updated,
)
from tutordesk.domain.errors import (
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
    record_not_editable,
    required_field,
)
from tutordesk.domain.session import Session


class TaskService:
    """Service for managing tasks."""

    def __init__(self, store: RecordStore):
        """Initialize task service.

        Args:
            store: Record store instance
        """
        self.store = store

    def add_task(self, session: Session, title: str, description: str, assignees: Sequence[str]) -> str:
        """Create a task in the "todo" column (administrator only).

        Returns:
            Task ID
        """
        require_admin(session.staff)
        if not (title or "").strip():
            raise ValidationError(required_field("Title"))
        assignees = tuple(dict.fromkeys(a.strip() for a in assignees if a.strip()))
        if not assignees:
            raise ValidationError(required_field("Assignee"))

        task = Task(
            id=self.store.new_id(Collection.TASKS),
            title=title.strip(),
            description=(description or "").strip(),
            assignees=assignees,
            status=TaskStatus.TODO,
        )
        self.store.insert_document(Collection.TASKS, task.id, mappers.task_to_document(task))
        return task.id

    def update_status(self, session: Session, task_id: str, status: TaskStatus) -> UpdateResult:
        """Move a task to another column (assignee or administrator)."""
        doc = self.store.get_document(Collection.TASKS, task_id)
        if doc is None:
            return NotFound(Collection.TASKS, task_id)
        task = mappers.task_to_domain(doc)
        if not can_edit(session.staff, task):
            raise PermissionDeniedError(record_not_editable("task", task_id))

        try:
            self.store.update_document(Collection.TASKS, task_id, {"status": TaskStatus(status).value})
        except NotFoundError:
            return NotFound(Collection.TASKS, task_id)
        return Updated(Collection.TASKS, task_id)

    def list_tasks(self, session: Session, status: Optional[TaskStatus] = None) -> list[Task]:
        """Tasks visible to the session."""
        tasks = [mappers.task_to_domain(doc) for doc in self.store.list_documents(Collection.TASKS)]
        tasks = filter_visible(session.staff, tasks)
        if status is not None:
            tasks = [t for t in tasks if t.status == status]
        return tasks
