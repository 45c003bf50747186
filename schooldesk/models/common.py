"""
Shared Models
Envelope, pagination and the approval status shared by reviewable records
"""
from typing import Any, List, Optional
from pydantic import BaseModel
from enum import Enum

from schooldesk.models.notice import Notice


class ApprovalStatus(str, Enum):
    """Lifecycle status of announcements, events and leave requests"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class ReviewAction(str, Enum):
    """Actions a reviewer can take on a pending record"""
    APPROVE = "approve"
    REJECT = "reject"


class Envelope(BaseModel):
    """Response envelope used by every school API endpoint"""
    status: str
    data: Any = None
    message: Optional[str] = None
    cached: bool = False

    @property
    def ok(self) -> bool:
        return self.status == "success"


class Pagination(BaseModel):
    """Pagination block returned by list endpoints"""
    page: int = 1
    limit: int = 20
    total: int = 0
    total_pages: int = 1
    has_next: bool = False
    has_prev: bool = False


class Creator(BaseModel):
    """Author, approver or rejector reference"""
    id: str
    role: str
    full_name: str


class DateRange(BaseModel):
    """Inclusive date window sent as start_date/end_date"""
    start_date: str
    end_date: str


class StatusCounts(BaseModel):
    """Per-status totals shown above review lists"""
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0


class ClassOption(BaseModel):
    """A class division the user can target"""
    id: str
    division: str
    class_name: str
    class_level: str
    academic_year: str


class ClassOptionList(BaseModel):
    classes: List[ClassOption]


class ReviewItem(BaseModel):
    """A record plus the review actions the current user may take on it"""
    record: Any
    status_label: str
    actions: List[ReviewAction] = []


class ReviewBoard(BaseModel):
    """Overview and pending tabs of a review page"""
    overview: List[ReviewItem]
    pending: List[ReviewItem]
    counts: StatusCounts


class WorkflowOutcome(BaseModel):
    """Result of a create/edit/review action"""
    record: Any = None
    notice: Notice
    redirect_to: Optional[str] = None
    board: Optional[ReviewBoard] = None
