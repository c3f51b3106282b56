"""Pydantic models for reminders, lists and their attachments."""

from datetime import datetime, timedelta
from enum import Enum, IntEnum

from pydantic import BaseModel, Field, field_validator, model_validator

from .constants import DEFAULT_LOCATION_RADIUS, MAX_LOCATION_RADIUS
from .normalizers import extract_tags


class Priority(IntEnum):
    """Named priority values matching Apple's EKReminderPriority.

    Any integer from 0 to 9 is a valid priority; these are the values the
    Reminders app UI writes:
    - NONE (0): No priority flag
    - HIGH (1): !!! in UI
    - MEDIUM (5): !! in UI
    - LOW (9): ! in UI
    """

    NONE = 0
    HIGH = 1
    MEDIUM = 5
    LOW = 9


class PriorityBand(str, Enum):
    """Three-level symbolic view of a 0-9 priority."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    NONE = "None"

    @classmethod
    def from_priority(cls, priority: int) -> "PriorityBand":
        if 1 <= priority <= 4:
            return cls.HIGH
        if priority == 5:
            return cls.MEDIUM
        if 6 <= priority <= 9:
            return cls.LOW
        return cls.NONE

    @property
    def glyph(self) -> str:
        return _BAND_GLYPHS[self]


_BAND_GLYPHS = {
    PriorityBand.HIGH: "!!!",
    PriorityBand.MEDIUM: "!!",
    PriorityBand.LOW: "!",
    PriorityBand.NONE: "",
}


class Proximity(str, Enum):
    """Trigger proximity for location-based reminders.

    Maps to EKAlarmProximity constants:
    - ENTER: Trigger when arriving at the location
    - LEAVE: Trigger when departing from the location
    """

    ENTER = "enter"
    LEAVE = "leave"


class LocationTrigger(BaseModel):
    """Location trigger for a reminder alarm.

    Creates a geofence that triggers the reminder when the user
    enters or leaves the specified location. Coordinates are optional,
    but latitude and longitude must be given together.
    """

    title: str = Field(description="Display name for the location (e.g., 'Home', 'Work')")
    latitude: float | None = Field(default=None, description="Latitude coordinate (-90 to 90)")
    longitude: float | None = Field(
        default=None, description="Longitude coordinate (-180 to 180)"
    )
    radius: float = Field(
        default=DEFAULT_LOCATION_RADIUS,
        description="Geofence radius in meters (default 100m)",
    )
    proximity: Proximity = Field(
        default=Proximity.ENTER,
        description="When to trigger: 'enter' or 'leave' the location",
    )

    @field_validator("latitude")
    @classmethod
    def validate_latitude(cls, v: float | None) -> float | None:
        """Validate latitude is in valid range."""
        if v is not None and not -90 <= v <= 90:
            raise ValueError("Latitude must be between -90 and 90")
        return v

    @field_validator("longitude")
    @classmethod
    def validate_longitude(cls, v: float | None) -> float | None:
        """Validate longitude is in valid range."""
        if v is not None and not -180 <= v <= 180:
            raise ValueError("Longitude must be between -180 and 180")
        return v

    @field_validator("radius")
    @classmethod
    def validate_radius(cls, v: float) -> float:
        """Validate radius is positive and reasonable."""
        if v <= 0:
            raise ValueError("Radius must be positive")
        if v > MAX_LOCATION_RADIUS:
            raise ValueError("Radius cannot exceed 10,000 meters (10km)")
        return v

    @model_validator(mode="after")
    def validate_coordinates(self) -> "LocationTrigger":
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("Latitude and longitude must be given together")
        return self

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None


class AlarmKind(str, Enum):
    RELATIVE = "relative"
    ABSOLUTE = "absolute"
    LOCATION = "location"


class Alarm(BaseModel):
    """A reminder alarm: minutes before the due date, a fixed time, or a place."""

    kind: AlarmKind = Field(description="Which trigger this alarm uses")
    minutes_before: int | None = Field(
        default=None, ge=0, description="Minutes before the due date (relative alarms)"
    )
    absolute_date: datetime | None = Field(
        default=None, description="Trigger time (absolute alarms)"
    )
    location: LocationTrigger | None = Field(
        default=None, description="Geofence (location alarms)"
    )

    @model_validator(mode="after")
    def validate_trigger(self) -> "Alarm":
        required = {
            AlarmKind.RELATIVE: self.minutes_before,
            AlarmKind.ABSOLUTE: self.absolute_date,
            AlarmKind.LOCATION: self.location,
        }
        if required[self.kind] is None:
            raise ValueError(f"{self.kind.value} alarm is missing its trigger")
        return self

    @classmethod
    def relative(cls, minutes_before: int) -> "Alarm":
        return cls(kind=AlarmKind.RELATIVE, minutes_before=minutes_before)

    @classmethod
    def absolute(cls, when: datetime) -> "Alarm":
        return cls(kind=AlarmKind.ABSOLUTE, absolute_date=when)

    @classmethod
    def at_location(cls, location: LocationTrigger) -> "Alarm":
        return cls(kind=AlarmKind.LOCATION, location=location)

    def trigger_date(self, due_date: datetime | None) -> datetime | None:
        """When a time-based alarm fires; None for location alarms."""
        if self.kind == AlarmKind.ABSOLUTE:
            return self.absolute_date
        if self.kind == AlarmKind.RELATIVE and due_date is not None:
            return due_date - timedelta(minutes=self.minutes_before or 0)
        return None


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class RecurrenceRule(BaseModel):
    """Repeat schedule. Without an end date or count it repeats forever."""

    frequency: Frequency = Field(description="daily, weekly, monthly or yearly")
    interval: int = Field(default=1, ge=1, description="Repeat every N periods")
    end_date: datetime | None = Field(default=None, description="Stop after this date")
    occurrence_count: int | None = Field(
        default=None, ge=1, description="Stop after this many occurrences"
    )

    @model_validator(mode="after")
    def validate_end(self) -> "RecurrenceRule":
        if self.end_date is not None and self.occurrence_count is not None:
            raise ValueError("Recurrence end is either a date or a count, not both")
        return self

    @property
    def is_unbounded(self) -> bool:
        return self.end_date is None and self.occurrence_count is None


class ReminderList(BaseModel):
    """A Reminders list (calendar in EventKit terms)."""

    id: str = Field(description="Unique identifier for the list")
    title: str = Field(description="Display title of the list")
    color: str | None = Field(
        default=None, description="Hex color code (e.g., #FF5733)"
    )
    source: str | None = Field(
        default=None, description="Account the list lives in (e.g., iCloud)"
    )
    is_default: bool = Field(
        default=False, description="Whether this is the default list for new reminders"
    )

    @field_validator("color")
    @classmethod
    def validate_hex_color(cls, v: str | None) -> str | None:
        """Validate hex color format."""
        if v is None:
            return None
        v = v.strip()
        if not v.startswith("#"):
            v = f"#{v}"
        hex_part = v[1:]
        if len(hex_part) not in (3, 6):
            raise ValueError("Color must be 3 or 6 hex digits")
        try:
            int(hex_part, 16)
        except ValueError as e:
            raise ValueError("Color must contain valid hex digits") from e
        # Normalize to 6 digits uppercase
        if len(hex_part) == 3:
            hex_part = "".join(c * 2 for c in hex_part)
        return f"#{hex_part.upper()}"


class Reminder(BaseModel):
    """A reminder item."""

    id: str | None = Field(
        default=None, description="Unique identifier, assigned by the store on save"
    )
    title: str = Field(min_length=1, description="Title, including any #tags")
    reminder_list: ReminderList = Field(description="The list this reminder belongs to")
    notes: str | None = Field(default=None, description="Additional notes/description")
    url: str | None = Field(default=None, description="Associated URL")
    is_completed: bool = Field(
        default=False, description="Whether the reminder is done"
    )
    completion_date: datetime | None = Field(
        default=None, description="When the reminder was completed"
    )
    due_date: datetime | None = Field(
        default=None, description="Due date/time for the reminder"
    )
    start_date: datetime | None = Field(
        default=None, description="Start date for the reminder"
    )
    priority: int = Field(
        default=Priority.NONE,
        ge=0,
        le=9,
        description="Priority 0-9 (0=none, 1-4=high, 5=medium, 6-9=low)",
    )
    alarms: list[Alarm] = Field(default_factory=list, description="Alarms in order")
    recurrence_rules: list[RecurrenceRule] = Field(
        default_factory=list, description="Recurrence rules in order"
    )
    creation_date: datetime | None = Field(
        default=None, description="When the reminder was created"
    )
    last_modified_date: datetime | None = Field(
        default=None, description="When the reminder was last modified"
    )

    @property
    def priority_band(self) -> PriorityBand:
        return PriorityBand.from_priority(self.priority)

    @property
    def has_url(self) -> bool:
        return self.url is not None

    @property
    def has_notes(self) -> bool:
        return bool(self.notes)

    @property
    def has_alarms(self) -> bool:
        return len(self.alarms) > 0

    @property
    def clean_title(self) -> str:
        """Title with its tags removed."""
        return extract_tags(self.title)[0]

    @property
    def tags(self) -> list[str]:
        """Tags from the title, then any extra tags left in notes."""
        tags = extract_tags(self.title)[1]
        for tag in extract_tags(self.notes)[1]:
            if tag not in tags:
                tags.append(tag)
        return tags


class Subtask(BaseModel):
    """A checkbox line inside a reminder's notes."""

    text: str
    done: bool = False


class ReminderDetails(BaseModel):
    """A reminder together with the values derived from it for display."""

    reminder: Reminder
    priority_band: PriorityBand
    priority_glyph: str
    is_overdue: bool
    tags: list[str] = Field(default_factory=list)
    subtasks: list[Subtask] = Field(default_factory=list)


class ListSummary(BaseModel):
    """A list with its reminder counts."""

    reminder_list: ReminderList
    total: int = 0
    completed: int = 0


class ReminderSection(BaseModel):
    """The filtered, ranked reminders of one list."""

    reminder_list: ReminderList
    reminders: list[Reminder] = Field(default_factory=list)


class OperationStatus(str, Enum):
    """Outcome of a single-record write command."""

    CREATED = "created"
    UPDATED = "updated"
    COMPLETED = "completed"
    DELETED = "deleted"
    NO_CHANGES = "no_changes"
    UNCHANGED = "unchanged"
    ALREADY_COMPLETED = "already_completed"
    ALREADY_EXISTS = "already_exists"
    NOTHING_TO_REMOVE = "nothing_to_remove"
    INVALID_INPUT = "invalid_input"
    FAILED = "failed"


class OperationResult(BaseModel):
    """Result of a write command on one reminder."""

    status: OperationStatus
    message: str
    reminder: Reminder | None = None
    count: int = Field(default=0, description="Entries added or removed")
    ignored_fields: list[str] = Field(
        default_factory=list, description="Supplied fields that could not be parsed"
    )

    @property
    def changed(self) -> bool:
        return self.status in (
            OperationStatus.CREATED,
            OperationStatus.UPDATED,
            OperationStatus.COMPLETED,
            OperationStatus.DELETED,
        )


class BatchResult(BaseModel):
    """Result of a batch operation."""

    successes: int = Field(description="Number of successful operations")
    failures: int = Field(description="Number of failed operations")
    failed_names: list[str] = Field(
        default_factory=list, description="Names of items that failed"
    )
    errors: list[str] = Field(
        default_factory=list, description="Error messages for failed operations"
    )
    results: list[OperationResult] = Field(
        default_factory=list, description="Per-item outcomes, in input order"
    )

    @property
    def total(self) -> int:
        """Total number of items processed."""
        return self.successes + self.failures

    @property
    def all_succeeded(self) -> bool:
        """Whether all operations succeeded."""
        return self.failures == 0


class TagCount(BaseModel):
    tag: str
    count: int


class ReminderStats(BaseModel):
    """Aggregate statistics over a set of reminders."""

    list_count: int = 0
    total: int = 0
    completed: int = 0
    incomplete: int = 0
    completion_percentage: float = 0.0
    overdue: int = 0
    high_priority: int = Field(default=0, description="Incomplete with priority 1-4")
    medium_priority: int = Field(default=0, description="Incomplete with priority 5")
    low_priority: int = Field(default=0, description="Incomplete with priority 6-9")
    with_url: int = 0
    with_notes: int = 0
    with_alarms: int = 0
    due_today: int = 0
    due_tomorrow: int = 0
    due_this_week: int = 0
