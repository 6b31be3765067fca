# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Use:
- .env (local, gitignored)
- config_local.py (local project registry override, gitignored)

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TALLY_APP_NAME": "App display name in logs (default: task-tally).",
    "TALLY_LOG_LEVEL": "Console logging level (default: INFO).",
    "TALLY_DATA_DIR": "Local data directory for task_tally.log (default: .local/task_tally).",
    # Asana
    "TALLY_ASANA_ACCESS_TOKEN": "Asana personal access token (ASANA_ACCESS_TOKEN also accepted).",
    "TALLY_ASANA_BASE_URL": "Asana API base URL (default: https://app.asana.com/api/1.0).",
    "TALLY_PAGE_LIMIT": "Tasks per page, 1..100 (default: 100).",
    "TALLY_COMPLETED_SINCE": "Lower bound for top-level listing (default: 1970-01-01T00:00:00.000Z).",
    "TALLY_HTTP_TIMEOUT_SECONDS": "Per-request timeout (default: 30).",
    # Google Sheets
    "TALLY_GOOGLE_CREDENTIALS_PATH": "Service-account JSON path (default: credentials.json).",
    "TALLY_SPREADSHEET_KEY": "Key of the spreadsheet to write (the id in its URL).",
    # Schedule
    "TALLY_SYNC_INTERVAL_SECONDS": "Pause between sync cycles for `task-tally run` (default: 3600).",
    # Projects
    "TALLY_PROJECTS": "Registry: '<project_gid>=<sheet name>!<row>' entries separated by ';' or newlines.",
}
