# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "CHECKLIST_APP_NAME": "App display name (default: checklist).",
    "CHECKLIST_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Connectors
    "CHECKLIST_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
    # Paths (gitignored)
    "CHECKLIST_DATA_DIR": "Local data directory (default: .local/checklist).",
    "CHECKLIST_DB_PATH": "SQLite store path (default: <data_dir>/checklist.sqlite3).",
    "CHECKLIST_LOG_DIR": "Directory for checklist.log (default: <data_dir>).",
    # SQLite
    "CHECKLIST_JOURNAL_MODE": "SQLite journal mode (default: WAL).",
    "CHECKLIST_BUSY_TIMEOUT": "Seconds to wait on a locked database (default: 30).",
}
