# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKLINE_APP_NAME": "App display name (default: taskline).",
    "TASKLINE_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Connectors
    "TASKLINE_CONSOLE_ENABLED": "Start the interactive console when no command is given (true/false).",
    # Storage
    "TASKLINE_STORE_BACKEND": "Task store backend: sqlite (default) or memory.",
    "TASKLINE_DATA_DIR": "Local data directory for the database and logs (default: .local/taskline).",
    "TASKLINE_TASKS_DB_PATH": "SQLite path (default: <data_dir>/tasks.sqlite3).",
    # Query tuning
    "TASKLINE_DUE_SOON_HOURS": "Width of the 'Due soon' period in hours (default: 48).",
}
