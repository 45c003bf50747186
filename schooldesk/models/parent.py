"""
Parent Model
Parents, students and the relationship mappings between them
"""
from typing import List, Optional
from pydantic import BaseModel, EmailStr
from enum import Enum

from schooldesk.models.common import Pagination


class Relationship(str, Enum):
    """Canonical parent-to-student relationships, in display order"""
    FATHER = "father"
    MOTHER = "mother"
    GUARDIAN = "guardian"
    GRANDPARENT = "grandparent"
    OTHER = "other"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class AccessLevel(str, Enum):
    FULL = "full"
    RESTRICTED = "restricted"
    READONLY = "readonly"


class ParentRef(BaseModel):
    id: str
    full_name: str
    phone_number: Optional[str] = None
    email: Optional[str] = None


class ParentMapping(BaseModel):
    """Link between a student and one parent"""
    id: str
    relationship: str
    is_primary_guardian: bool = False
    access_level: str = AccessLevel.FULL.value
    parent: Optional[ParentRef] = None


class Student(BaseModel):
    id: str
    full_name: str
    admission_number: Optional[str] = None
    status: Optional[str] = None
    parent_mappings: List[ParentMapping] = []


class ParentChild(BaseModel):
    id: str
    full_name: str
    admission_number: Optional[str] = None
    relationship: Optional[str] = None
    is_primary_guardian: Optional[bool] = None


class Parent(BaseModel):
    id: str
    full_name: str
    phone_number: Optional[str] = None
    email: Optional[str] = None
    role: str = "parent"
    is_registered: Optional[bool] = None
    children: List[ParentChild] = []


class ParentList(BaseModel):
    parents: List[Parent]
    pagination: Optional[Pagination] = None


class LinkParentRequest(BaseModel):
    """Link an existing parent to a student"""
    parent_id: str
    relationship: Relationship
    is_primary_guardian: bool = True
    access_level: AccessLevel = AccessLevel.FULL


class StudentLink(BaseModel):
    """One student entry of a new parent's registration"""
    admission_number: str
    relationship: Relationship = Relationship.FATHER
    is_primary_guardian: bool = False


class CreateParentRequest(BaseModel):
    """Schema for creating a parent, optionally linked to students"""
    full_name: str
    phone_number: str
    email: Optional[EmailStr] = None
    initial_password: Optional[str] = None
    student_details: List[StudentLink] = []


class RelationshipOptions(BaseModel):
    """Relationships still free for a student"""
    student_id: str
    available: List[Relationship]
    blocked: bool
    message: Optional[str] = None
