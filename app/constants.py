"""
Constants for validation limits, analytics windows and notification texts.
"""
from __future__ import annotations

# Task field limits
MAX_TITLE_LEN = 200
MAX_DESCRIPTION_LEN = 2000
MAX_ATTACHMENTS = 20

# Auth
MIN_PASSWORD_LEN = 6
JWT_ALGORITHM = "HS256"
DEFAULT_TOKEN_TTL_MINUTES = 60

# Analytics: trailing window for created-per-day trends
TRENDS_WINDOW_DAYS = 7

# WebSocket heartbeat (seconds)
WS_HEARTBEAT_SECONDS = 30.0

# Notification texts ({title}, {status})
MSG_TASK_SHARED = 'Task "{title}" has been shared with you'
MSG_TASK_STATUS_CHANGED = 'Task "{title}" is now {status}'
