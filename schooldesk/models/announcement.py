"""
Announcement Model
Schemas for school announcements and the forms that create them
"""
from datetime import date, datetime, time
from typing import List, Optional
from pydantic import BaseModel
from enum import Enum

from schooldesk.models.common import ApprovalStatus, Creator, Pagination


class AnnouncementType(str, Enum):
    """Kinds of announcement"""
    NOTIFICATION = "notification"
    CIRCULAR = "circular"
    GENERAL = "general"


class Priority(str, Enum):
    """Announcement priority"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TargetRole(str, Enum):
    """Audiences an announcement can address"""
    TEACHER = "teacher"
    PARENT = "parent"
    STUDENT = "student"
    ADMIN = "admin"


class AudienceScope(str, Enum):
    """Whole school or selected class divisions"""
    SCHOOL = "school"
    CLASSES = "classes"


class Attachment(BaseModel):
    id: str
    filename: str
    original_filename: str
    file_path: str
    file_size: int
    mime_type: str
    uploaded_at: Optional[datetime] = None


class Announcement(BaseModel):
    """Announcement as returned by the school API"""
    id: str
    title: str
    content: str
    announcement_type: AnnouncementType
    status: ApprovalStatus
    priority: Priority

    # Audience
    target_roles: List[str] = []
    target_classes: List[str] = []
    target_departments: List[str] = []

    # Publication window
    publish_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    is_published: bool = False
    is_featured: bool = False
    view_count: int = 0

    # Workflow
    created_by: Optional[str] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejected_by: Optional[str] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    creator: Optional[Creator] = None
    approver: Optional[Creator] = None
    rejector: Optional[Creator] = None

    attachments: List[Attachment] = []

    # Metadata
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def creator_id(self) -> Optional[str]:
        if self.creator:
            return self.creator.id
        return self.created_by


class AnnouncementForm(BaseModel):
    """
    Create/edit form as the dashboard submits it.

    Everything is optional here; required fields are checked by the workflow
    so the dashboard gets its own validation messages instead of a 422 dump.
    """
    title: str = ""
    content: str = ""
    announcement_type: AnnouncementType = AnnouncementType.NOTIFICATION
    priority: Priority = Priority.MEDIUM
    target_roles: List[TargetRole] = []
    target_classes: List[str] = []
    scope: Optional[AudienceScope] = None  # None keeps target_classes as given
    publish_date: Optional[date] = None
    publish_time: Optional[time] = time(9, 0)
    expires_date: Optional[date] = None
    expires_time: Optional[time] = time(17, 0)
    is_featured: bool = False

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Parent-teacher meeting",
                "content": "Meeting in the main hall.",
                "announcement_type": "notification",
                "priority": "medium",
                "target_roles": ["parent"],
                "target_classes": [],
                "scope": "school",
                "publish_date": "2026-10-20",
                "publish_time": "09:00",
                "expires_date": "2026-10-25",
                "expires_time": "17:00",
                "is_featured": False,
            }
        }


class RejectRequest(BaseModel):
    """Body of a reject action"""
    reason: str = ""


class AnnouncementFilters(BaseModel):
    """Server-side filters for the announcements list"""
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    status: Optional[ApprovalStatus] = None
    announcement_type: Optional[AnnouncementType] = None
    priority: Optional[Priority] = None
    is_featured: Optional[bool] = None
    page: Optional[int] = None
    limit: Optional[int] = None


class AnnouncementPage(BaseModel):
    """One page of announcements"""
    announcements: List[Announcement]
    pagination: Pagination
