"""
TaskManagerAPI: REST-shaped request/response shim over the local store.

Each method mirrors one endpoint:

    register(credentials)              → {success, data: {user, token}}
    login(credentials)                 → {success, data: {user, token}}
    list_tasks(token)                  → {success, data: [Task]}
    create_task(token, task_data)      → {success, data: Task}
    update_task(token, task_id, data)  → {success, data: Task}
    delete_task(token, task_id)        → {success}

Every call sleeps for a simulated network latency first (scaled by
latency_scale; 0 disables it). Domain errors come back as
ApiResponse(success=False, error=...) and are never raised to the caller.
"""
import logging
import time
from functools import wraps
from typing import Callable, Optional, Dict, Any

from .errors import TaskBoardError, ValidationError, AuthorizationError
from .identity import IdentityService
from .repository import AccountRepository, TaskRepository
from .schema import ApiResponse, TaskStatus
from .store import KeyValueStore

logger = logging.getLogger(__name__)

# Simulated round-trip per endpoint, in seconds
LATENCY = {
    "register": 0.5,
    "login": 0.5,
    "list_tasks": 0.3,
    "create_task": 0.4,
    "update_task": 0.4,
    "delete_task": 0.3,
}


def endpoint(name: str):
    """Decorator: simulate latency, then turn TaskBoardError into a failed response."""
    def decorator(f):
        @wraps(f)
        def decorated(self, *args, **kwargs):
            self._simulate_latency(name)
            try:
                return f(self, *args, **kwargs)
            except TaskBoardError as e:
                return ApiResponse.fail(str(e))
        return decorated
    return decorator


def _parse_status(value: Any, default: Optional[TaskStatus] = None) -> TaskStatus:
    if value is None or value == "":
        if default is None:
            raise ValidationError(f"Invalid status: {value}")
        return default
    try:
        return TaskStatus.parse(value)
    except ValueError:
        raise ValidationError(f"Invalid status: {value}")


class TaskManagerAPI:
    """Fake backend: accounts, tokens and tasks over one KeyValueStore."""

    def __init__(
        self,
        store: KeyValueStore,
        identity: Optional[IdentityService] = None,
        latency_scale: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.store = store
        self.identity = identity or IdentityService()
        self.accounts = AccountRepository(store)
        self.tasks = TaskRepository(store)
        self.latency_scale = latency_scale
        self._sleep = sleep

    def _simulate_latency(self, name: str) -> None:
        delay = LATENCY.get(name, 0.0) * self.latency_scale
        if delay > 0:
            self._sleep(delay)

    def _authorize(self, token: Optional[str]) -> str:
        """Resolve a token to its account id before any store access."""
        account_id = self.identity.validate_token(token)
        if not account_id:
            raise AuthorizationError("Invalid token")
        return account_id

    # ── Accounts ─────────────────────────────────────────────────────────────

    @endpoint("register")
    def register(self, credentials: Dict[str, Any]) -> ApiResponse:
        username = credentials.get("username", "")
        password = credentials.get("password", "")
        if self.accounts.find_by_username(username) is not None:
            raise ValidationError("Username already exists")

        account = self.accounts.create(username, password)
        token = self.identity.issue_token(account.id)
        logger.info(f"Registered account {account.id} ({username})")
        return ApiResponse.ok({"user": account.public(), "token": token})

    @endpoint("login")
    def login(self, credentials: Dict[str, Any]) -> ApiResponse:
        username = credentials.get("username", "")
        account = self.accounts.find_by_credentials(username, credentials.get("password", ""))
        if account is None:
            logger.warning(f"Failed login for {username!r}")
            raise ValidationError("Invalid credentials")

        token = self.identity.issue_token(account.id)
        logger.info(f"Login for account {account.id}")
        return ApiResponse.ok({"user": account.public(), "token": token})

    # ── Tasks ────────────────────────────────────────────────────────────────

    @endpoint("list_tasks")
    def list_tasks(self, token: Optional[str]) -> ApiResponse:
        account_id = self._authorize(token)
        return ApiResponse.ok(self.tasks.list_tasks(account_id))

    @endpoint("create_task")
    def create_task(self, token: Optional[str], task_data: Dict[str, Any]) -> ApiResponse:
        account_id = self._authorize(token)
        status = _parse_status(task_data.get("status"), default=TaskStatus.PENDING)
        task = self.tasks.create_task(
            account_id,
            title=task_data.get("title", ""),
            description=task_data.get("description", ""),
            status=status,
        )
        return ApiResponse.ok(task)

    @endpoint("update_task")
    def update_task(self, token: Optional[str], task_id: str, updates: Dict[str, Any]) -> ApiResponse:
        account_id = self._authorize(token)
        fields: Dict[str, Any] = {}
        if updates.get("title") is not None:
            fields["title"] = updates["title"]
        if updates.get("description") is not None:
            fields["description"] = updates["description"]
        if updates.get("status") is not None:
            fields["status"] = _parse_status(updates["status"])
        task = self.tasks.update_task(account_id, task_id, fields)
        return ApiResponse.ok(task)

    @endpoint("delete_task")
    def delete_task(self, token: Optional[str], task_id: str) -> ApiResponse:
        account_id = self._authorize(token)
        self.tasks.delete_task(account_id, task_id)
        return ApiResponse.ok()
