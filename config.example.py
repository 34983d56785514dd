# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a
local .env file, see tiny_tasks/config.py). This file keeps the repo
self-documenting without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TINY_TASKS_APP_NAME": "App display name (default: Tiny Tasks).",
    "TINY_TASKS_LOG_LEVEL": "Console logging level (default: INFO).",
    "TINY_TASKS_DATA_DIR": "Directory for tiny_tasks.log (default: .local/tiny_tasks).",
    # Remote task store
    "TINY_TASKS_API_URL": "Task resource URL (default: http://localhost:3000/tasks).",
    "API_URL": "Unprefixed fallback for TINY_TASKS_API_URL.",
    "TINY_TASKS_HTTP_TIMEOUT_SECONDS": "Request timeout; unset keeps the httpx default.",
}
