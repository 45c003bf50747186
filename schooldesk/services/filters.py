"""
List Filters
Date presets and the client-side filtering applied to fetched lists
"""
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import List, Optional, Sequence

from schooldesk.config import settings
from schooldesk.models.announcement import Announcement
from schooldesk.models.common import DateRange
from schooldesk.models.leave_request import LeaveRequest
from schooldesk.services.forms import school_timezone

ALL = "all"


class DatePreset(str, Enum):
    TODAY = "today"
    TOMORROW = "tomorrow"
    THIS_WEEK = "this-week"
    NEXT_WEEK = "next-week"
    THIS_MONTH = "this-month"
    NEXT_MONTH = "next-month"
    LAST_30_DAYS = "last-30-days"


def school_today(now: Optional[datetime] = None) -> date:
    """Calendar date at the school, not on the server"""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(school_timezone(settings.SCHOOL_UTC_OFFSET_MINUTES)).date()


def _start_of_week(day: date) -> date:
    # Weeks start on Monday
    return day - timedelta(days=day.weekday())


def _start_of_month(day: date) -> date:
    return day.replace(day=1)


def _end_of_month(day: date) -> date:
    next_month = (day.replace(day=28) + timedelta(days=4)).replace(day=1)
    return next_month - timedelta(days=1)


def preset_range(preset: DatePreset, today: Optional[date] = None) -> DateRange:
    """
    start_date/end_date for a preset.

    Depends only on `today`, so applying the same preset twice on the same
    day yields the same pair.
    """
    today = today or school_today()

    if preset == DatePreset.TODAY:
        start = end = today
    elif preset == DatePreset.TOMORROW:
        start = end = today + timedelta(days=1)
    elif preset == DatePreset.THIS_WEEK:
        start = _start_of_week(today)
        end = start + timedelta(days=6)
    elif preset == DatePreset.NEXT_WEEK:
        start = _start_of_week(today) + timedelta(days=7)
        end = start + timedelta(days=6)
    elif preset == DatePreset.THIS_MONTH:
        start = _start_of_month(today)
        end = _end_of_month(today)
    elif preset == DatePreset.NEXT_MONTH:
        start = _end_of_month(today) + timedelta(days=1)
        end = _end_of_month(start)
    elif preset == DatePreset.LAST_30_DAYS:
        start = today - timedelta(days=30)
        end = today
    else:
        raise ValueError(f"Unknown date preset: {preset}")

    return DateRange(start_date=start.isoformat(), end_date=end.isoformat())


def _contains(haystack: Optional[str], needle: str) -> bool:
    return needle in (haystack or "").lower()


def filter_announcements(
    announcements: Sequence[Announcement],
    search: str = "",
    status: str = ALL,
    announcement_type: str = ALL,
    priority: str = ALL,
) -> List[Announcement]:
    """Search title/content/author name and narrow by status, type, priority"""
    needle = (search or "").strip().lower()
    result = []
    for a in announcements:
        if needle:
            creator_name = a.creator.full_name if a.creator else ""
            if not (
                _contains(a.title, needle)
                or _contains(a.content, needle)
                or _contains(creator_name, needle)
            ):
                continue
        if status != ALL and a.status.value != status:
            continue
        if announcement_type != ALL and a.announcement_type.value != announcement_type:
            continue
        if priority != ALL and a.priority.value != priority:
            continue
        result.append(a)
    return result


def filter_leave_requests(
    requests: Sequence[LeaveRequest],
    search: str = "",
    class_label: str = ALL,
) -> List[LeaveRequest]:
    """Only requests with student data; search over student, class and reason"""
    needle = (search or "").strip().lower()
    result = []
    for r in requests:
        if r.student is None:
            continue
        label = r.student.class_label
        if needle and not (
            _contains(r.student.full_name, needle)
            or _contains(label, needle)
            or _contains(r.reason, needle)
        ):
            continue
        if class_label != ALL and label != class_label:
            continue
        result.append(r)
    return result


def leave_class_labels(requests: Sequence[LeaveRequest]) -> List[str]:
    labels = {r.student.class_label for r in requests if r.student and r.student.class_label}
    return sorted(labels)
