"""
Account and task repositories over the key-value store.

Each mutating call reads the whole collection, changes it in memory and writes
it back. Tasks are always addressed by (task id, owner id); a task owned by
another account is indistinguishable from a missing one.
"""
import logging
from typing import List, Optional, Dict, Any

from .errors import NotFoundError
from .schema import Account, Task, TaskStatus, make_id, utc_now, advance_timestamp
from .store import KeyValueStore, USERS_KEY, TASKS_KEY

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "description", "status")


class AccountRepository:
    """Registered accounts. Accounts are never mutated or deleted."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def list_all(self) -> List[Account]:
        return [Account.from_dict(r) for r in self.store.read_collection(USERS_KEY)]

    def get(self, account_id: str) -> Optional[Account]:
        for account in self.list_all():
            if account.id == account_id:
                return account
        return None

    def find_by_username(self, username: str) -> Optional[Account]:
        """Exact, case-sensitive username match."""
        for account in self.list_all():
            if account.username == username:
                return account
        return None

    def find_by_credentials(self, username: str, password: str) -> Optional[Account]:
        for account in self.list_all():
            if account.username == username and account.password == password:
                return account
        return None

    def create(self, username: str, password: str) -> Account:
        """Append a new account. Uniqueness is checked by the caller."""
        records = self.store.read_collection(USERS_KEY)
        account = Account(id=make_id("user"), username=username, password=password)
        records.append(account.to_dict())
        self.store.write_collection(USERS_KEY, records)
        return account


class TaskRepository:
    """CRUD over the task collection, scoped by owning account."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def _load(self) -> List[Dict[str, Any]]:
        return self.store.read_collection(TASKS_KEY)

    def _save(self, records: List[Dict[str, Any]]) -> None:
        self.store.write_collection(TASKS_KEY, records)

    @staticmethod
    def _find_index(records: List[Dict[str, Any]], account_id: str, task_id: str) -> int:
        for i, record in enumerate(records):
            if record.get("id") == task_id and record.get("userId") == account_id:
                return i
        raise NotFoundError("Task not found")

    def list_tasks(self, account_id: str) -> List[Task]:
        """All tasks owned by `account_id`, in insertion order."""
        return [Task.from_dict(r) for r in self._load() if r.get("userId") == account_id]

    def create_task(
        self,
        account_id: str,
        title: str,
        description: str = "",
        status: TaskStatus = TaskStatus.PENDING,
    ) -> Task:
        """Append a new task. The title is not re-validated here."""
        now = utc_now()
        task = Task(
            id=make_id("task"),
            title=title,
            description=description or "",
            status=status,
            user_id=account_id,
            created_at=now,
            updated_at=now,
        )
        records = self._load()
        records.append(task.to_dict())
        self._save(records)
        logger.info(f"Created task {task.id} for {account_id}")
        return task

    def update_task(self, account_id: str, task_id: str, fields: Dict[str, Any]) -> Task:
        """
        Apply the present fields among title/description/status.

        Other keys are ignored. updatedAt is always refreshed, even when no
        field changes.
        """
        records = self._load()
        index = self._find_index(records, account_id, task_id)
        task = Task.from_dict(records[index])

        if "title" in fields:
            task.title = fields["title"]
        if "description" in fields:
            task.description = fields["description"] or ""
        if "status" in fields:
            task.status = fields["status"]
        task.updated_at = advance_timestamp(task.updated_at)

        records[index] = task.to_dict()
        self._save(records)
        logger.info(f"Updated task {task_id} ({', '.join(k for k in UPDATABLE_FIELDS if k in fields) or 'touch'})")
        return task

    def delete_task(self, account_id: str, task_id: str) -> None:
        records = self._load()
        index = self._find_index(records, account_id, task_id)
        del records[index]
        self._save(records)
        logger.info(f"Deleted task {task_id}")

    def tasks_by_status(self, account_id: str) -> Dict[TaskStatus, List[Task]]:
        """Group an account's tasks into board columns (every column present)."""
        return group_by_status(self.list_tasks(account_id))

    def stats(self, account_id: str) -> Dict[str, int]:
        """Total count plus one count per status value."""
        return count_by_status(self.list_tasks(account_id))


def group_by_status(tasks: List[Task]) -> Dict[TaskStatus, List[Task]]:
    columns: Dict[TaskStatus, List[Task]] = {status: [] for status in TaskStatus}
    for task in tasks:
        columns[task.status].append(task)
    return columns


def count_by_status(tasks: List[Task]) -> Dict[str, int]:
    stats = {"total": len(tasks)}
    for status in TaskStatus:
        stats[status.value] = sum(1 for t in tasks if t.status == status)
    return stats
