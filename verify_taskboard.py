#!/usr/bin/env python3
"""
Quick verification that the task board works end-to-end.
"""
import sys
import tempfile
from pathlib import Path

from taskboard.api import TaskManagerAPI
from taskboard.session import Session
from taskboard.store import KeyValueStore


def fail(message: str):
    print(f"❌ {message}")
    sys.exit(1)


def main():
    print("=" * 60)
    print("TaskBoard Verification")
    print("=" * 60)

    db_path = Path(tempfile.mkdtemp()) / "taskboard_verify.db"

    print("\n[1/6] Creating SQLite key-value store...")
    store = KeyValueStore(str(db_path))
    api = TaskManagerAPI(store)
    session = Session(api, store)
    print("✅ Store created")

    print("\n[2/6] Registering alice...")
    response = session.register("alice", "pw1")
    if not response.success:
        fail(f"Register failed: {response.error}")
    print(f"✅ Signed in as {session.user.username} ({session.user.id})")

    print("\n[3/6] Creating a task...")
    created = api.create_task(session.token, {"title": "Buy milk", "description": ""})
    if not created.success:
        fail(f"Create failed: {created.error}")
    task = created.data
    print(f"✅ Task {task.id}: {task.title} [{task.status.value}]")

    print("\n[4/6] Moving it to In Progress...")
    updated = api.update_task(session.token, task.id, {"status": "progress"})
    if not updated.success:
        fail(f"Update failed: {updated.error}")
    print(f"✅ Status: {updated.data.status.value}, updated {updated.data.updated_at}")

    print("\n[5/6] Restoring the session from storage...")
    restored = Session(api, store)
    if not restored.restore_session():
        fail("Session was not restored")
    listed = api.list_tasks(restored.token)
    print(f"✅ {restored.user.username} sees {len(listed.data)} task(s)")

    print("\n[6/6] Deleting the task...")
    api.delete_task(restored.token, task.id)
    remaining = api.list_tasks(restored.token).data
    if remaining:
        fail(f"{len(remaining)} task(s) left after delete")
    print("✅ Board is empty")

    print("\n" + "=" * 60)
    print("✅ ALL CHECKS PASSED")
    print("=" * 60)
    print(f"Test database: {db_path}")


if __name__ == "__main__":
    main()
