"""Converter functions for EventKit <-> engine models."""

from datetime import datetime, time
from typing import Any

from AppKit import NSColor
from CoreLocation import CLLocation
from EventKit import (
    EKAlarm,
    EKAlarmProximityEnter,
    EKAlarmProximityLeave,
    EKRecurrenceEnd,
    EKRecurrenceFrequencyDaily,
    EKRecurrenceFrequencyMonthly,
    EKRecurrenceFrequencyWeekly,
    EKRecurrenceFrequencyYearly,
    EKRecurrenceRule,
    EKStructuredLocation,
)
from Foundation import NSURL, NSDate, NSDateComponents
from Quartz import CGColorGetComponents, CGColorGetNumberOfComponents

from .constants import DEFAULT_LOCATION_RADIUS
from .models import (
    Alarm,
    AlarmKind,
    Frequency,
    LocationTrigger,
    Proximity,
    RecurrenceRule,
    Reminder,
    ReminderList,
)

# NSDateComponents reports unset fields as NSIntegerMax
UNDEFINED_COMPONENT = 0x7FFFFFFF

_FREQUENCY_TO_EK = {
    Frequency.DAILY: EKRecurrenceFrequencyDaily,
    Frequency.WEEKLY: EKRecurrenceFrequencyWeekly,
    Frequency.MONTHLY: EKRecurrenceFrequencyMonthly,
    Frequency.YEARLY: EKRecurrenceFrequencyYearly,
}
_EK_TO_FREQUENCY = {v: k for k, v in _FREQUENCY_TO_EK.items()}


# Dates


def datetime_to_nsdate(dt: datetime) -> NSDate:
    return NSDate.dateWithTimeIntervalSince1970_(dt.timestamp())


def nsdate_to_datetime(nsdate: Any) -> datetime | None:
    if nsdate is None:
        return None
    return datetime.fromtimestamp(nsdate.timeIntervalSince1970())


def datetime_to_components(dt: datetime) -> NSDateComponents:
    """Due/start date components; midnight is written as a date-only value."""
    components = NSDateComponents.alloc().init()
    components.setYear_(dt.year)
    components.setMonth_(dt.month)
    components.setDay_(dt.day)
    if dt.time() != time.min:
        components.setHour_(dt.hour)
        components.setMinute_(dt.minute)
        components.setSecond_(dt.second)
    return components


def components_to_datetime(components: Any) -> datetime | None:
    """Rebuild a datetime from NSDateComponents.

    A missing year, month or day yields None; missing time fields read as 0.
    """
    if components is None:
        return None
    date_part = (components.year(), components.month(), components.day())
    if UNDEFINED_COMPONENT in date_part:
        return None
    time_part = [
        0 if value == UNDEFINED_COMPONENT else value
        for value in (components.hour(), components.minute(), components.second())
    ]
    return datetime(*date_part, *time_part)


# Colors


def hex_to_cgcolor(color: str) -> Any:
    """CGColor for a ``#RGB`` or ``#RRGGBB`` list color."""
    digits = color.strip().lstrip("#")
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    red, green, blue = (channel / 255.0 for channel in bytes.fromhex(digits))
    return NSColor.colorWithCalibratedRed_green_blue_alpha_(red, green, blue, 1.0).CGColor()


def cgcolor_to_hex(cgcolor: Any) -> str | None:
    """``#RRGGBB`` for an RGB or grayscale CGColor.

    iCloud sync can shift each channel slightly, so round trips aren't exact.
    """
    if cgcolor is None:
        return None
    count = CGColorGetNumberOfComponents(cgcolor)
    components = CGColorGetComponents(cgcolor)
    if count >= 3:
        channels = components[:3]
    elif count == 2:
        # gray + alpha
        channels = [components[0]] * 3
    else:
        return None
    return "#" + "".join(f"{int(c * 255):02X}" for c in channels)


# Calendars


def ek_calendar_to_list(calendar: Any, is_default: bool = False) -> ReminderList:
    """Convert EKCalendar (reminder list) to a ReminderList.

    Must run on the worker thread that fetched ``calendar``.
    """
    source = calendar.source()
    return ReminderList(
        id=calendar.calendarIdentifier(),
        title=str(calendar.title()) if calendar.title() else "",
        color=cgcolor_to_hex(calendar.CGColor()),
        source=str(source.title()) if source is not None else None,
        is_default=is_default,
    )


# Alarms


def location_trigger_to_ek_alarm(location: LocationTrigger) -> Any:
    """Geofence alarm for ``location``; coordinates are optional."""
    place = EKStructuredLocation.locationWithTitle_(location.title)
    if location.has_coordinates:
        cl_location = CLLocation.alloc().initWithLatitude_longitude_(
            location.latitude,
            location.longitude,
        )
        place.setGeoLocation_(cl_location)
    place.setRadius_(location.radius)

    # alarmWithAbsoluteDate_ requires a non-nil date, so use alloc/init
    alarm = EKAlarm.alloc().init()
    alarm.setStructuredLocation_(place)

    alarm.setProximity_(
        EKAlarmProximityLeave
        if location.proximity == Proximity.LEAVE
        else EKAlarmProximityEnter
    )

    return alarm


def alarm_to_ek_alarm(alarm: Alarm) -> Any:
    if alarm.kind == AlarmKind.LOCATION:
        return location_trigger_to_ek_alarm(alarm.location)
    if alarm.kind == AlarmKind.ABSOLUTE:
        return EKAlarm.alarmWithAbsoluteDate_(datetime_to_nsdate(alarm.absolute_date))
    # Relative offsets are in seconds, negative meaning "before"
    return EKAlarm.alarmWithRelativeOffset_(-float(alarm.minutes_before * 60))


def ek_alarm_to_alarm(alarm: Any) -> Alarm:
    """Convert an EKAlarm to an Alarm of the matching kind."""
    place = alarm.structuredLocation()
    if place is not None:
        geo = place.geoLocation()
        title = place.title()
        radius = place.radius()
        return Alarm.at_location(
            LocationTrigger(
                title=str(title) if title else "Location",
                latitude=geo.coordinate().latitude if geo else None,
                longitude=geo.coordinate().longitude if geo else None,
                radius=float(radius) if radius > 0 else DEFAULT_LOCATION_RADIUS,
                proximity=(
                    Proximity.LEAVE
                    if alarm.proximity() == EKAlarmProximityLeave
                    else Proximity.ENTER
                ),
            )
        )

    absolute = alarm.absoluteDate()
    if absolute is not None:
        return Alarm.absolute(nsdate_to_datetime(absolute))

    return Alarm.relative(max(0, int(-alarm.relativeOffset() / 60)))


# Recurrence


def recurrence_rule_to_ek(rule: RecurrenceRule) -> Any:
    end = None
    if rule.end_date is not None:
        end = EKRecurrenceEnd.recurrenceEndWithEndDate_(datetime_to_nsdate(rule.end_date))
    elif rule.occurrence_count is not None:
        end = EKRecurrenceEnd.recurrenceEndWithOccurrenceCount_(rule.occurrence_count)
    return EKRecurrenceRule.alloc().initRecurrenceWithFrequency_interval_end_(
        _FREQUENCY_TO_EK[rule.frequency], rule.interval, end
    )


def ek_recurrence_to_rule(rule: Any) -> RecurrenceRule:
    end = rule.recurrenceEnd()
    end_date = None
    occurrence_count = None
    if end is not None:
        end_date = nsdate_to_datetime(end.endDate())
        if end_date is None and end.occurrenceCount() > 0:
            occurrence_count = int(end.occurrenceCount())
    return RecurrenceRule(
        frequency=_EK_TO_FREQUENCY.get(rule.frequency(), Frequency.DAILY),
        interval=max(1, int(rule.interval())),
        end_date=end_date,
        occurrence_count=occurrence_count,
    )


# Reminders


def ek_reminder_to_model(reminder: Any, reminder_list: ReminderList) -> Reminder:
    """Snapshot an EKReminder as a Reminder owned by ``reminder_list``.

    Priorities outside 0-9 read as 0. Must run on the fetching thread.
    """
    url = reminder.URL()
    priority = int(reminder.priority())

    return Reminder(
        id=str(reminder.calendarItemIdentifier()),
        title=str(reminder.title()) if reminder.title() else "Untitled",
        reminder_list=reminder_list,
        notes=str(reminder.notes()) if reminder.notes() else None,
        url=str(url.absoluteString()) if url else None,
        is_completed=bool(reminder.isCompleted()),
        completion_date=nsdate_to_datetime(reminder.completionDate()),
        due_date=components_to_datetime(reminder.dueDateComponents()),
        start_date=components_to_datetime(reminder.startDateComponents()),
        priority=priority if 0 <= priority <= 9 else 0,
        alarms=[ek_alarm_to_alarm(a) for a in (reminder.alarms() or [])],
        recurrence_rules=[
            ek_recurrence_to_rule(r) for r in (reminder.recurrenceRules() or [])
        ],
        creation_date=nsdate_to_datetime(reminder.creationDate()),
        last_modified_date=nsdate_to_datetime(reminder.lastModifiedDate()),
    )


def apply_model_to_ek_reminder(source: Reminder, reminder: Any, calendar: Any) -> None:
    """Write every engine-owned field of ``source`` onto an EKReminder.

    Alarms and recurrence rules are replaced wholesale.
    """
    reminder.setTitle_(source.title)
    reminder.setCalendar_(calendar)
    reminder.setNotes_(source.notes)
    reminder.setURL_(NSURL.URLWithString_(source.url) if source.url else None)
    reminder.setDueDateComponents_(
        datetime_to_components(source.due_date) if source.due_date else None
    )
    reminder.setStartDateComponents_(
        datetime_to_components(source.start_date) if source.start_date else None
    )
    reminder.setPriority_(source.priority)
    reminder.setCompleted_(source.is_completed)
    if source.is_completed and source.completion_date is not None:
        reminder.setCompletionDate_(datetime_to_nsdate(source.completion_date))

    for alarm in list(reminder.alarms() or []):
        reminder.removeAlarm_(alarm)
    for alarm in source.alarms:
        reminder.addAlarm_(alarm_to_ek_alarm(alarm))

    for rule in list(reminder.recurrenceRules() or []):
        reminder.removeRecurrenceRule_(rule)
    for rule in source.recurrence_rules:
        reminder.addRecurrenceRule_(recurrence_rule_to_ek(rule))
