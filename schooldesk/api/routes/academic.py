"""
Academic Routes
Class, subject and teacher lookups for the dashboard's pickers
"""
from fastapi import APIRouter, Depends
from typing import List

from schooldesk.models.academic import Subject, SubjectAssignment, SubjectAssignmentResult, Teacher
from schooldesk.models.common import ClassOptionList
from schooldesk.models.user import AuthSession
from schooldesk.api.routes.auth import get_auth_session
from schooldesk.services.academic import AcademicService
from schooldesk.services.school_api import SchoolApiClient, get_school_api

router = APIRouter()


def get_academic_service(
    api: SchoolApiClient = Depends(get_school_api),
    session: AuthSession = Depends(get_auth_session),
) -> AcademicService:
    return AcademicService(api, session)


@router.get("/classes", response_model=ClassOptionList)
def get_classes(service: AcademicService = Depends(get_academic_service)):
    """Class divisions with level and academic year"""
    return ClassOptionList(classes=service.class_options())


@router.get("/subjects", response_model=List[Subject])
def get_subjects(service: AcademicService = Depends(get_academic_service)):
    return service.subjects()


@router.get("/teachers", response_model=List[Teacher])
def get_teachers(service: AcademicService = Depends(get_academic_service)):
    return service.teachers()


@router.post("/teachers/{teacher_id}/subjects", response_model=SubjectAssignmentResult)
def assign_subjects(
    teacher_id: str,
    assignment: SubjectAssignment,
    service: AcademicService = Depends(get_academic_service),
):
    """Assign subjects to a teacher (Admin/Principal only)"""
    return service.assign_subjects(teacher_id, assignment)
