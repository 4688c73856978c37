"""Jinja templates for the board, registered on the app through a DictLoader."""

LAYOUT = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>TaskBoard</title>
  <style>
    body { font-family: system-ui, sans-serif; margin: 0; background: #f4f5fb; }
    header { display: flex; justify-content: space-between; align-items: center;
             padding: 12px 24px; background: #fff; border-bottom: 1px solid #ddd; }
    main { max-width: 1200px; margin: 0 auto; padding: 24px; }
    .flash { padding: 8px 12px; margin-bottom: 8px; border-radius: 4px; background: #e8f0fe; }
    .flash.error { background: #fde8e8; }
    .stats, .columns { display: grid; grid-template-columns: repeat(4, 1fr); gap: 16px; margin-bottom: 24px; }
    .columns { grid-template-columns: repeat(3, 1fr); }
    .stat, .card, .column, form.panel { background: #fff; border-radius: 6px; padding: 12px; }
    .column.pending { border-top: 4px solid #eab308; }
    .column.progress { border-top: 4px solid #3b82f6; }
    .column.completed { border-top: 4px solid #22c55e; }
    .card { margin-bottom: 8px; border: 1px solid #e5e7eb; }
    .muted { color: #6b7280; font-size: 0.85em; }
    .inline { display: inline; }
  </style>
</head>
<body>
  <header>
    <strong>TaskBoard</strong>
    {% if session_state.is_authenticated %}
    <span>
      {{ session_state.user.username }}
      <form class="inline" method="post" action="{{ url_for('logout') }}">
        <button type="submit">Log out</button>
      </form>
    </span>
    {% endif %}
  </header>
  <main>
    {% for category, message in get_flashed_messages(with_categories=true) %}
    <div class="flash {{ category }}">{{ message }}</div>
    {% endfor %}
    {% block content %}{% endblock %}
  </main>
</body>
</html>
"""

AUTH = """{% extends "layout.html" %}
{% block content %}
<div class="columns" style="grid-template-columns: 1fr 1fr;">
  <form class="panel" method="post" action="{{ url_for('login') }}">
    <h2>Log in</h2>
    <p><input name="username" placeholder="Username" required></p>
    <p><input name="password" type="password" placeholder="Password" required></p>
    <button type="submit">Log in</button>
  </form>
  <form class="panel" method="post" action="{{ url_for('register') }}">
    <h2>Create account</h2>
    <p><input name="username" placeholder="Username" required></p>
    <p><input name="password" type="password" placeholder="Password" required></p>
    <button type="submit">Register</button>
  </form>
</div>
{% endblock %}
"""

MACROS = """{% macro status_select(statuses, selected) %}
<select name="status">
  {% for s in statuses %}
  <option value="{{ s.value }}" {% if s == selected %}selected{% endif %}>{{ s.title }}</option>
  {% endfor %}
</select>
{% endmacro %}
"""

BOARD = """{% extends "layout.html" %}
{% from "macros.html" import status_select %}
{% block content %}
<div class="stats">
  <div class="stat"><div class="muted">Total tasks</div><h2>{{ stats.total }}</h2></div>
  {% for s in statuses %}
  <div class="stat"><div class="muted">{{ s.title }}</div><h2>{{ stats[s.value] }}</h2></div>
  {% endfor %}
</div>

<form class="panel" method="post" action="{{ url_for('create_task') }}">
  <h3>New task</h3>
  <input name="title" placeholder="Title" required>
  <input name="description" placeholder="Description">
  {{ status_select(statuses, default_status) }}
  <button type="submit">Add</button>
</form>
<br>

<div class="columns">
  {% for s in statuses %}
  <div class="column {{ s.value }}">
    <h3>{{ s.title }} <span class="muted">({{ columns[s]|length }})</span></h3>
    {% for task in columns[s] %}
    <div class="card">
      <strong>{{ task.title }}</strong>
      {% if task.description %}<p>{{ task.description }}</p>{% endif %}
      <div class="muted">Created {{ task.created_at[:16]|replace("T", " ") }}</div>
      {% if task.updated_at != task.created_at %}
      <div class="muted">Updated {{ task.updated_at[:16]|replace("T", " ") }}</div>
      {% endif %}
      <form class="inline" method="post" action="{{ url_for('move_task', task_id=task.id) }}">
        {{ status_select(statuses, task.status) }}
        <button type="submit">Move</button>
      </form>
      <a href="{{ url_for('edit_task', task_id=task.id) }}">Edit</a>
      <form class="inline" method="post" action="{{ url_for('delete_task', task_id=task.id) }}">
        <button type="submit">Delete</button>
      </form>
    </div>
    {% else %}
    <p class="muted">No tasks</p>
    {% endfor %}
  </div>
  {% endfor %}
</div>
{% endblock %}
"""

EDIT = """{% extends "layout.html" %}
{% from "macros.html" import status_select %}
{% block content %}
<form class="panel" method="post" action="{{ url_for('update_task', task_id=task.id) }}">
  <h3>Edit task</h3>
  <p><input name="title" value="{{ task.title }}" required></p>
  <p><textarea name="description">{{ task.description }}</textarea></p>
  <p>{{ status_select(statuses, task.status) }}</p>
  <button type="submit">Save</button>
  <a href="{{ url_for('index') }}">Cancel</a>
</form>
{% endblock %}
"""

# Served without Jinja when the board itself fails to render
PLAIN_ERROR = """<!doctype html>
<html lang="en">
<head><meta charset="utf-8"><title>TaskBoard</title></head>
<body>
  <p>An unexpected error occurred while loading the board.</p>
  <p><a href="/">Try again</a></p>
</body>
</html>
"""

TEMPLATES = {
    "layout.html": LAYOUT,
    "auth.html": AUTH,
    "board.html": BOARD,
    "edit.html": EDIT,
    "macros.html": MACROS,
}
