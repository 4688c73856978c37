#!/usr/bin/env python3
"""
TaskBoard Server
----------------
Serves the task board for a single user session. The board talks to the
in-process TaskManagerAPI shim; nothing here exposes the shim over HTTP.

Usage:
    taskboard-server --port 3000
    taskboard-server --db ~/boards/work.db --config taskboard.yaml

Routes:
    GET  /                     → login/register page, or the board
    POST /login, /register, /logout
    POST /tasks                → create task
    GET  /tasks/<id>/edit      → edit form
    POST /tasks/<id>           → update task
    POST /tasks/<id>/status    → move task to another column
    POST /tasks/<id>/delete    → delete task
    GET  /health               → JSON: { status, db, authenticated }
"""
import argparse
import logging
import os
import sys
from functools import wraps
from typing import Optional

from flask import Flask, flash, jsonify, redirect, render_template, request, url_for
from jinja2 import DictLoader

from .api import TaskManagerAPI
from .config import Config
from .identity import IdentityService
from .repository import count_by_status, group_by_status
from .schema import TaskStatus
from .session import Session
from .store import KeyValueStore
from .templates import PLAIN_ERROR, TEMPLATES

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s [taskboard] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def create_app(config: Optional[Config] = None, store: Optional[KeyValueStore] = None) -> Flask:
    """
    Build the board application.

    The store is constructed once here (unless injected) and handed to the
    API shim and the session; nothing reaches it through module globals.
    """
    if config is None:
        config = Config.load()
    else:
        config.resolve()

    if store is None:
        store = KeyValueStore(config.db_path)
    identity = IdentityService(ttl_seconds=config.token_ttl_seconds)
    api = TaskManagerAPI(store, identity=identity, latency_scale=config.latency_scale)
    session = Session(api, store)
    session.restore_session()

    app = Flask(__name__)
    app.secret_key = config.secret_key
    app.jinja_loader = DictLoader(TEMPLATES)
    app.extensions["taskboard"] = {"store": store, "api": api, "session": session}

    @app.context_processor
    def inject_session():
        return {"session_state": session, "statuses": list(TaskStatus)}

    # ── Decorators ───────────────────────────────────────────────────────────

    def interaction(f):
        """Log and swallow unexpected errors so the board stays usable."""
        @wraps(f)
        def decorated(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except Exception:
                logger.exception(f"Error handling {request.method} {request.path}")
                if request.endpoint == "index":
                    # Redirecting back here would loop
                    return PLAIN_ERROR, 500, {"Content-Type": "text/html; charset=utf-8"}
                flash("An unexpected error occurred", "error")
                return redirect(url_for("index"))
        return decorated

    def require_login(f):
        """Send anonymous visitors back to the login page."""
        @wraps(f)
        def decorated(*args, **kwargs):
            if not session.is_authenticated:
                flash("Please log in first", "error")
                return redirect(url_for("index"))
            return f(*args, **kwargs)
        return decorated

    def report(response, success_message: str):
        if response.success:
            flash(success_message, "message")
        else:
            flash(response.error or "Request failed", "error")
        return redirect(url_for("index"))

    def form_status(default: Optional[TaskStatus] = None) -> Optional[str]:
        value = request.form.get("status", "").strip()
        if not value and default is not None:
            return default.value
        return value or None

    # ── Routes ───────────────────────────────────────────────────────────────

    @app.route("/")
    @interaction
    def index():
        if not session.is_authenticated:
            return render_template("auth.html")

        response = api.list_tasks(session.token)
        tasks = response.data if response.success else []
        if not response.success:
            flash(f"Could not load tasks: {response.error}", "error")

        return render_template(
            "board.html",
            columns=group_by_status(tasks),
            stats=count_by_status(tasks),
            default_status=TaskStatus.PENDING,
        )

    @app.route("/login", methods=["POST"])
    @interaction
    def login():
        username = request.form.get("username", "").strip()
        response = session.login(username, request.form.get("password", ""))
        return report(response, f"Welcome, {username}!")

    @app.route("/register", methods=["POST"])
    @interaction
    def register():
        username = request.form.get("username", "").strip()
        password = request.form.get("password", "")
        if not username or not password:
            flash("Username and password are required", "error")
            return redirect(url_for("index"))
        response = session.register(username, password)
        return report(response, f"Account created. Welcome, {username}!")

    @app.route("/logout", methods=["POST"])
    @interaction
    def logout():
        session.logout()
        flash("You have been logged out", "message")
        return redirect(url_for("index"))

    @app.route("/tasks", methods=["POST"])
    @interaction
    @require_login
    def create_task():
        title = request.form.get("title", "").strip()
        if not title:
            flash("Title is required", "error")
            return redirect(url_for("index"))
        response = api.create_task(session.token, {
            "title": title,
            "description": request.form.get("description", "").strip(),
            "status": form_status(default=TaskStatus.PENDING),
        })
        return report(response, "Task created")

    @app.route("/tasks/<task_id>/edit", methods=["GET"])
    @interaction
    @require_login
    def edit_task(task_id):
        response = api.list_tasks(session.token)
        if not response.success:
            flash(response.error or "Request failed", "error")
            return redirect(url_for("index"))
        task = next((t for t in response.data if t.id == task_id), None)
        if task is None:
            flash("Task not found", "error")
            return redirect(url_for("index"))
        return render_template("edit.html", task=task)

    @app.route("/tasks/<task_id>", methods=["POST"])
    @interaction
    @require_login
    def update_task(task_id):
        updates = {}
        if "title" in request.form:
            title = request.form["title"].strip()
            if not title:
                flash("Title is required", "error")
                return redirect(url_for("edit_task", task_id=task_id))
            updates["title"] = title
        if "description" in request.form:
            updates["description"] = request.form["description"].strip()
        status = form_status()
        if status:
            updates["status"] = status
        response = api.update_task(session.token, task_id, updates)
        return report(response, "Task updated")

    @app.route("/tasks/<task_id>/status", methods=["POST"])
    @interaction
    @require_login
    def move_task(task_id):
        status = form_status()
        if not status:
            flash("Status is required", "error")
            return redirect(url_for("index"))
        response = api.update_task(session.token, task_id, {"status": status})
        return report(response, "Task moved")

    @app.route("/tasks/<task_id>/delete", methods=["POST"])
    @interaction
    @require_login
    def delete_task(task_id):
        response = api.delete_task(session.token, task_id)
        return report(response, "Task deleted")

    @app.route("/health")
    def health():
        return jsonify({
            "status": "ok",
            "db": store.db_path,
            "authenticated": session.is_authenticated,
        })

    return app


# ── Main ─────────────────────────────────────────────────────────────────────

def main(argv=None):
    parser = argparse.ArgumentParser(description="TaskBoard Server")
    parser.add_argument("--host", help="Bind address (default from config: 127.0.0.1)")
    parser.add_argument("--port", type=int, help="Port (default from config: 3000)")
    parser.add_argument("--db", help="Path to taskboard.db (overrides TASKBOARD_DB env var)")
    parser.add_argument("--config", help="Path to taskboard.yaml")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)")
    args = parser.parse_args(argv)

    if args.db:
        os.environ["TASKBOARD_DB"] = args.db

    config = Config.load(args.config)
    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port
    if args.log_level:
        config.log_level = args.log_level

    configure_logging(config.log_level)
    app = create_app(config)
    logger.info(f"TaskBoard on http://{config.host}:{config.port} (db: {config.db_path})")

    # Single execution context: the store does unguarded read-modify-write
    app.run(host=config.host, port=config.port, debug=False, threaded=False)


if __name__ == "__main__":
    main()
