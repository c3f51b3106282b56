"""Constants for the reminder engine."""

import os

# Logging
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")

# Timeouts
REQUEST_TIMEOUT: float = float(os.environ.get("REQUEST_TIMEOUT", "60.0"))

# Repository backend used by the tool server ("eventkit" or "memory")
REMINDERS_BACKEND: str = os.environ.get("REMINDERS_BACKEND", "eventkit")

# Pagination defaults
DEFAULT_PAGINATION_LIMIT: int = 20
DEFAULT_PAGINATION_OFFSET: int = 0

# Subtasks are stored as checkbox lines under a marker line in notes
SUBTASK_MARKER: str = "Subtasks:"
SUBTASK_OPEN_PREFIX: str = "- [ ] "
SUBTASK_DONE_PREFIX: str = "- [x] "

# Location triggers
DEFAULT_LOCATION_RADIUS: float = 100.0
MAX_LOCATION_RADIUS: float = 10000.0

# Strict format accepted for absolute alarm times
ALARM_DATE_FORMAT: str = "%Y-%m-%d %H:%M"
