"""
Academic Model
Subjects and teachers used to fill the dashboard's pickers
"""
from typing import List, Optional
from pydantic import BaseModel
from enum import Enum


class Subject(BaseModel):
    id: str
    code: Optional[str] = None
    name: str
    is_active: Optional[bool] = None


class Teacher(BaseModel):
    """Staff member with a teacher record"""
    teacher_id: str
    user_id: Optional[str] = None
    staff_id: Optional[str] = None
    full_name: str
    phone_number: Optional[str] = None
    email: Optional[str] = None
    department: Optional[str] = None
    designation: Optional[str] = None
    is_active: bool = True


class AssignMode(str, Enum):
    REPLACE = "replace"
    APPEND = "append"


class SubjectAssignment(BaseModel):
    """Subjects to give a teacher"""
    subjects: List[str]
    mode: AssignMode = AssignMode.REPLACE

    class Config:
        json_schema_extra = {
            "example": {
                "subjects": ["Mathematics", "Science"],
                "mode": "append"
            }
        }


class SubjectAssignmentResult(BaseModel):
    teacher_id: str
    teacher_name: Optional[str] = None
    assigned_subjects: List[str] = []
    previous_subjects: List[str] = []
    total_subjects: int = 0
    mode: AssignMode = AssignMode.REPLACE
