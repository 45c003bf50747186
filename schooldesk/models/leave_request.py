"""
Leave Request Model
Student leave requests submitted by parents and reviewed by staff
"""
from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field

from schooldesk.models.common import ApprovalStatus


class LeaveClassLevel(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    sequence_number: Optional[int] = None


class LeaveClassDivision(BaseModel):
    id: Optional[str] = None
    division: Optional[str] = None
    level: Optional[LeaveClassLevel] = None


class LeaveAcademicRecord(BaseModel):
    roll_number: Optional[str] = None
    class_division: Optional[LeaveClassDivision] = None


class LeaveStudent(BaseModel):
    id: str
    full_name: str
    admission_number: Optional[str] = None
    student_academic_records: List[LeaveAcademicRecord] = []

    @property
    def class_label(self) -> Optional[str]:
        """'Class 5 Division A' for the first academic record, if complete"""
        if not self.student_academic_records:
            return None
        division = self.student_academic_records[0].class_division
        if not division or not division.division or not division.level:
            return None
        if division.level.sequence_number is None:
            return None
        return f"Class {division.level.sequence_number} Division {division.division}"


class LeaveParent(BaseModel):
    id: str
    full_name: str
    phone_number: Optional[str] = None
    email: Optional[str] = None


class LeaveRequest(BaseModel):
    """Leave request as returned by the school API"""
    id: str
    student_id: str
    start_date: date
    end_date: date
    reason: str
    status: ApprovalStatus = ApprovalStatus.PENDING
    reviewed_by: Optional[str] = None
    urgency: Optional[str] = None
    additional_notes: Optional[str] = None
    student: Optional[LeaveStudent] = None
    parent: Optional[LeaveParent] = None

    @property
    def total_days(self) -> int:
        return (self.end_date - self.start_date).days + 1


class LeaveRequestCreate(BaseModel):
    """Schema for submitting a leave request"""
    student_id: str = Field(..., min_length=1)
    start_date: date
    end_date: date
    reason: str = ""
    additional_notes: Optional[str] = None


class LeaveFilters(BaseModel):
    status: Optional[ApprovalStatus] = None
    student_id: Optional[str] = None
    class_division_id: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    page: Optional[int] = None
    limit: Optional[int] = None


class LeaveRequestList(BaseModel):
    """Leave requests with summary counts"""
    leave_requests: List[LeaveRequest]
    total: int
    pending: int
    approved: int
    rejected: int
    classes: List[str] = []
