"""
TaskBoard schema: accounts, tasks and the request/response envelope.

Task columns:
  Pending → In Progress → Completed

Any column may move to any other; there is no enforced workflow. Records are
persisted with camelCase keys (id, userId, createdAt, updatedAt) so the
stored shape stays independent of Python attribute names.
"""
import time
import uuid
from enum import Enum
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any


def utc_now() -> str:
    """ISO-8601 UTC timestamp with microsecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def advance_timestamp(previous: str) -> str:
    """Current UTC time, pushed past `previous` if the clock has not moved."""
    now = datetime.now(timezone.utc)
    try:
        prev = datetime.fromisoformat(previous)
    except (TypeError, ValueError):
        return now.isoformat(timespec="microseconds")
    if prev.tzinfo is None:
        prev = prev.replace(tzinfo=timezone.utc)
    if now <= prev:
        now = prev + timedelta(microseconds=1)
    return now.isoformat(timespec="microseconds")


def make_id(prefix: str) -> str:
    """Generate a sortable unique ID (ms-precision timestamp + random hex)."""
    ts = int(time.time() * 1000)
    rand = uuid.uuid4().hex[:8]
    return f"{prefix}-{ts}-{rand}"


class TaskStatus(Enum):
    """Board columns, in display order."""
    PENDING = "pending"
    IN_PROGRESS = "progress"
    COMPLETED = "completed"

    @property
    def title(self) -> str:
        return _STATUS_TITLES[self]

    @classmethod
    def parse(cls, value: Any) -> "TaskStatus":
        """Strict conversion from a boundary value (or member name)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
            try:
                return cls[value.strip().upper().replace("-", "_")]
            except KeyError:
                pass
        raise ValueError(f"Invalid status: {value}")

    @classmethod
    def from_str(cls, value: Any) -> "TaskStatus":
        """Lenient conversion for stored records; unknown values read as PENDING."""
        try:
            return cls.parse(value)
        except ValueError:
            return cls.PENDING


_STATUS_TITLES = {
    TaskStatus.PENDING: "Pending",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.COMPLETED: "Completed",
}


@dataclass
class Account:
    """A registered identity. Password is stored in clear text."""
    id: str
    username: str
    password: str = ""
    created_at: str = field(default_factory=utc_now)

    def public(self) -> "Account":
        """Copy with the password blanked, safe to return or persist in a session."""
        return replace(self, password="")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "password": self.password,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Account":
        return cls(
            id=data.get("id", ""),
            username=data.get("username", ""),
            password=data.get("password", "") or "",
            created_at=data.get("createdAt") or utc_now(),
        )


@dataclass
class Task:
    """A unit of tracked work owned by exactly one account."""
    id: str
    title: str
    user_id: str
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    created_at: str = field(default_factory=utc_now)
    updated_at: str = ""

    def __post_init__(self):
        if not self.updated_at:
            self.updated_at = self.created_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value if isinstance(self.status, TaskStatus) else self.status,
            "userId": self.user_id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        created_at = data.get("createdAt") or utc_now()
        return cls(
            id=data.get("id", ""),
            title=data.get("title", ""),
            description=data.get("description") or "",
            status=TaskStatus.from_str(data.get("status")),
            user_id=data.get("userId", ""),
            created_at=created_at,
            updated_at=data.get("updatedAt") or created_at,
        )


def _serialize(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    return value


@dataclass
class ApiResponse:
    """Envelope returned by every TaskManagerAPI call."""
    success: bool
    data: Any = None
    error: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None, message: Optional[str] = None) -> "ApiResponse":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, error: str) -> "ApiResponse":
        return cls(success=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-shaped dict; absent keys are omitted."""
        out: Dict[str, Any] = {"success": self.success}
        if self.data is not None:
            out["data"] = _serialize(self.data)
        if self.error is not None:
            out["error"] = self.error
        if self.message is not None:
            out["message"] = self.message
        return out
