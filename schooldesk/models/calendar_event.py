"""
Calendar Event Model
Schemas for school calendar events
"""
from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel
from enum import Enum

from schooldesk.models.common import ApprovalStatus, Creator


class EventType(str, Enum):
    """Audience of a calendar event"""
    SCHOOL_WIDE = "school_wide"
    CLASS_SPECIFIC = "class_specific"
    TEACHER_SPECIFIC = "teacher_specific"


class EventCategory(str, Enum):
    GENERAL = "general"
    ACADEMIC = "academic"
    SPORTS = "sports"
    CULTURAL = "cultural"
    HOLIDAY = "holiday"
    EXAM = "exam"
    MEETING = "meeting"
    OTHER = "other"


class CalendarEvent(BaseModel):
    """Calendar event as returned by the school API"""
    id: str
    title: str
    description: str = ""
    event_date: datetime
    event_type: EventType
    event_category: EventCategory = EventCategory.GENERAL
    is_single_day: bool = True
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    timezone: str = "Asia/Kolkata"

    class_division_id: Optional[str] = None
    class_division_ids: List[str] = []
    is_multi_class: bool = False
    class_division_names: List[str] = []

    status: ApprovalStatus = ApprovalStatus.PENDING
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    created_by: Optional[str] = None
    creator: Optional[Creator] = None
    created_at: Optional[datetime] = None

    @property
    def creator_id(self) -> Optional[str]:
        if self.creator:
            return self.creator.id
        return self.created_by


class CalendarEventForm(BaseModel):
    """Create/edit form for a calendar event"""
    title: str = ""
    description: str = ""
    event_date: Optional[date] = None
    event_type: EventType = EventType.SCHOOL_WIDE
    event_category: EventCategory = EventCategory.GENERAL
    class_division_ids: List[str] = []
    is_single_day: bool = True
    start_time: Optional[str] = None
    end_time: Optional[str] = None


class EventFilters(BaseModel):
    """Server-side filters for the events list"""
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    class_division_id: Optional[str] = None
    event_type: Optional[EventType] = None
    event_category: Optional[EventCategory] = None
    status: Optional[ApprovalStatus] = None
    use_ist: Optional[bool] = None
    page: Optional[int] = None
    limit: Optional[int] = None
