"""
Form Mapping
Validates dashboard forms and maps them to school API payloads. Every check
here runs before any request is sent.
"""
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from schooldesk.errors import FormValidationError
from schooldesk.models.announcement import Announcement, AnnouncementForm, AudienceScope
from schooldesk.models.calendar_event import CalendarEventForm, EventType
from schooldesk.models.leave_request import LeaveRequestCreate
from schooldesk.services.audience import resolve_event_classes, resolve_target_classes

REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields"
TARGET_ROLE_MESSAGE = "Please select at least one target role"
EXPIRY_MESSAGE = "Expiry must be after the publish time"
CLASS_SELECTION_MESSAGE = "Please select at least one class"
EVENT_TIME_MESSAGE = "End time must be after start time"
LEAVE_REASON_MESSAGE = "Please provide a reason for the leave"
LEAVE_DATES_MESSAGE = "End date cannot be before start date"


def school_timezone(offset_minutes: int) -> timezone:
    return timezone(timedelta(minutes=offset_minutes))


def local_datetime(d: date, t: time, offset_minutes: int) -> datetime:
    return datetime.combine(d, t, tzinfo=school_timezone(offset_minutes))


def to_utc_iso(moment: datetime) -> str:
    """UTC timestamp in the API's format: 2026-10-20T03:30:00.000Z"""
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def validate_announcement_form(form: AnnouncementForm, offset_minutes: int) -> Tuple[datetime, datetime]:
    """Return the publish/expiry moments, or raise on the first failed rule"""
    if (
        not form.title.strip()
        or not form.content.strip()
        or form.publish_date is None
        or form.publish_time is None
        or form.expires_date is None
        or form.expires_time is None
    ):
        raise FormValidationError(REQUIRED_FIELDS_MESSAGE)

    if not form.target_roles:
        raise FormValidationError(TARGET_ROLE_MESSAGE)

    publish_at = local_datetime(form.publish_date, form.publish_time, offset_minutes)
    expires_at = local_datetime(form.expires_date, form.expires_time, offset_minutes)
    if expires_at <= publish_at:
        raise FormValidationError(EXPIRY_MESSAGE)

    return publish_at, expires_at


def announcement_payload(form: AnnouncementForm, offset_minutes: int) -> Dict[str, Any]:
    publish_at, expires_at = validate_announcement_form(form, offset_minutes)
    return {
        "title": form.title.strip(),
        "content": form.content.strip(),
        "announcement_type": form.announcement_type.value,
        "priority": form.priority.value,
        "target_roles": [role.value for role in form.target_roles],
        "target_classes": resolve_target_classes(form.scope, form.target_classes),
        "publish_at": to_utc_iso(publish_at),
        "expires_at": to_utc_iso(expires_at),
        "is_featured": form.is_featured,
    }


def form_from_announcement(announcement: Announcement, offset_minutes: int) -> AnnouncementForm:
    """Prefill the edit form, showing times in the school's local time"""
    tz = school_timezone(offset_minutes)
    publish = _in_zone(announcement.publish_at, tz)
    expires = _in_zone(announcement.expires_at, tz)
    return AnnouncementForm(
        title=announcement.title,
        content=announcement.content,
        announcement_type=announcement.announcement_type,
        priority=announcement.priority,
        target_roles=announcement.target_roles,
        target_classes=announcement.target_classes,
        scope=AudienceScope.CLASSES if announcement.target_classes else AudienceScope.SCHOOL,
        publish_date=publish.date() if publish else None,
        publish_time=publish.time().replace(second=0, microsecond=0) if publish else None,
        expires_date=expires.date() if expires else None,
        expires_time=expires.time().replace(second=0, microsecond=0) if expires else None,
        is_featured=announcement.is_featured,
    )


def _in_zone(moment: Optional[datetime], tz: timezone) -> Optional[datetime]:
    if moment is None:
        return None
    if moment.tzinfo is None:
        # API timestamps without an offset are UTC
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz)


def event_payload(form: CalendarEventForm) -> Dict[str, Any]:
    if not form.title.strip() or not form.description.strip() or form.event_date is None:
        raise FormValidationError(REQUIRED_FIELDS_MESSAGE)

    if form.event_type == EventType.CLASS_SPECIFIC and not any(form.class_division_ids):
        raise FormValidationError(CLASS_SELECTION_MESSAGE)

    if form.start_time and form.end_time and _parse_time(form.end_time) <= _parse_time(form.start_time):
        raise FormValidationError(EVENT_TIME_MESSAGE)

    payload: Dict[str, Any] = {
        "title": form.title.strip(),
        "description": form.description.strip(),
        "event_date": form.event_date.isoformat(),
        "event_type": form.event_type.value,
        "event_category": form.event_category.value,
        "is_single_day": form.is_single_day,
    }
    if form.start_time:
        payload["start_time"] = form.start_time
    if form.end_time:
        payload["end_time"] = form.end_time
    payload.update(resolve_event_classes(form.event_type, form.class_division_ids))
    return payload


def _parse_time(value: str) -> time:
    try:
        return time.fromisoformat(value)
    except ValueError:
        raise FormValidationError(f"Invalid time: {value}")


def leave_request_payload(request: LeaveRequestCreate) -> Dict[str, Any]:
    if not request.reason.strip():
        raise FormValidationError(LEAVE_REASON_MESSAGE)
    if request.end_date < request.start_date:
        raise FormValidationError(LEAVE_DATES_MESSAGE)

    payload: Dict[str, Any] = {
        "student_id": request.student_id,
        "start_date": request.start_date.isoformat(),
        "end_date": request.end_date.isoformat(),
        "reason": request.reason.strip(),
    }
    if request.additional_notes:
        payload["additional_notes"] = request.additional_notes
    return payload


def days_ago_iso(days: int, now: Optional[datetime] = None) -> str:
    """UTC timestamp `days` before now, used as a feed's start_date"""
    now = now or datetime.now(timezone.utc)
    return to_utc_iso(now - timedelta(days=days))
