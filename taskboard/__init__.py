# TaskBoard: per-account task tracking with a local persistence shim.
#
# Components:
#   schema.py     - Data model (Account, Task, TaskStatus, ApiResponse)
#   errors.py     - Error taxonomy shared by every layer
#   store.py      - SQLite-backed key-value store (whole-collection snapshots)
#   identity.py   - Unsigned, expiring session tokens
#   repository.py - Account and task CRUD scoped by owner
#   api.py        - TaskManagerAPI: REST-like request/response shim
#   session.py    - Current authenticated identity, persisted across restarts
#   config.py     - YAML + environment configuration
#   server.py     - Flask board (view layer) and CLI entry point
