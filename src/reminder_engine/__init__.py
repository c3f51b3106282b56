"""Query and mutation engine for reminders, served over MCP."""

from .clock import Clock, FixedClock, SystemClock
from .exceptions import (
    AccessDeniedError,
    NoListAvailableError,
    NotFoundError,
    ParseError,
    PermissionTimeoutError,
    RemindersError,
    StoreError,
)
from .filters import ReminderFilter, apply_filters
from .models import (
    Alarm,
    AlarmKind,
    BatchResult,
    Frequency,
    LocationTrigger,
    OperationResult,
    OperationStatus,
    Priority,
    PriorityBand,
    Proximity,
    RecurrenceRule,
    Reminder,
    ReminderList,
    ReminderStats,
)
from .normalizers import extract_tags, parse_date, parse_priority
from .ranking import sort_reminders
from .repository import InMemoryRepository, Repository
from .service import ReminderService

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Service
    "ReminderService",
    "Repository",
    "InMemoryRepository",
    # Clock
    "Clock",
    "SystemClock",
    "FixedClock",
    # Engine
    "ReminderFilter",
    "apply_filters",
    "sort_reminders",
    "extract_tags",
    "parse_date",
    "parse_priority",
    # Models
    "Priority",
    "PriorityBand",
    "Proximity",
    "LocationTrigger",
    "Alarm",
    "AlarmKind",
    "Frequency",
    "RecurrenceRule",
    "ReminderList",
    "Reminder",
    "ReminderStats",
    "OperationResult",
    "OperationStatus",
    "BatchResult",
    # Exceptions
    "RemindersError",
    "ParseError",
    "NotFoundError",
    "NoListAvailableError",
    "StoreError",
    "AccessDeniedError",
    "PermissionTimeoutError",
]
