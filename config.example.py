# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TODO_APP_NAME": "App name used in logs (default: todolist).",
    "TODO_APP_TITLE": "Title shown above the list (default: Extended To-Do List).",
    "TODO_LOG_LEVEL": "Console logging level (default: WARNING).",
    # Paths (gitignored)
    "TODO_DATA_DIR": "Local data directory (default: .local/todolist).",
    # Storage
    "TODO_STORAGE_BACKEND": "sqlite | file | memory (default: sqlite).",
    "TODO_STORAGE_PATH": (
        "SQLite file or value directory (default: <data_dir>/storage.sqlite3, <data_dir>/kv for file)."
    ),
    "TODO_STORAGE_KEY": "Key holding the serialized task list (default: tasks).",
    "TODO_BACKUP_CORRUPT": "Copy undecodable stored data to <key>.corrupt (true/false).",
    "TODO_FLUSH_TIMEOUT_SECONDS": "Seconds to wait for the final save on exit (default: 10).",
}
