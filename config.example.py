# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets; keep them in `.env` (local, gitignored). See `.env.example`.
"""

ENV_VARS = {
    # App / logging
    "DAYPLANNER_APP_NAME": "App display name (default: dayplanner).",
    "DAYPLANNER_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    "DAYPLANNER_ENV": "development | production | test (default: development).",
    # Paths (gitignored)
    "DAYPLANNER_DATA_DIR": "Local data directory (default: .local/dayplanner).",
    "DAYPLANNER_DB_PATH": "SQLite database for users and tasks (default: <data_dir>/dayplanner.sqlite3).",
    "DAYPLANNER_SESSION_PATH": "Console client's local session file (default: <data_dir>/session.json).",
    # Server / auth
    "DAYPLANNER_JWT_SECRET_KEY": "Secret used to sign session tokens (required to serve; JWT_SECRET_KEY also accepted).",
    "DAYPLANNER_SESSION_TTL_SECONDS": "Lifetime of the session cookie and the local session (default: 3600, min 60).",
    "DAYPLANNER_COOKIE_NAME": "Session cookie name (default: token).",
    "DAYPLANNER_COOKIE_SECURE": "Send the cookie only over HTTPS (default: true in production).",
    "DAYPLANNER_HOST": "Bind host for dayplanner-server (default: 127.0.0.1).",
    "DAYPLANNER_PORT": "Bind port for dayplanner-server (default: 8000).",
    # Client
    "DAYPLANNER_API_URL": "Base URL the console client talks to (default: http://<host>:<port>).",
    "DAYPLANNER_REQUEST_TIMEOUT_SECONDS": "HTTP timeout for client requests (default: 10).",
    "DAYPLANNER_SESSION_CHECK_INTERVAL_SECONDS": "How often the client checks session expiry (default: 60).",
    "DAYPLANNER_REMINDER_INTERVAL_SECONDS": "How often the client scans for due reminders (default: 5).",
}
