"""
Student Routes
Student details and linking parents to students
"""
from fastapi import APIRouter, Depends

from schooldesk.models.common import WorkflowOutcome
from schooldesk.models.parent import LinkParentRequest, RelationshipOptions, Student
from schooldesk.models.user import AuthSession
from schooldesk.api.routes.auth import get_auth_session
from schooldesk.services.parents import ParentService
from schooldesk.services.school_api import SchoolApiClient, get_school_api

router = APIRouter()


def get_parent_service(
    api: SchoolApiClient = Depends(get_school_api),
    session: AuthSession = Depends(get_auth_session),
) -> ParentService:
    return ParentService(api, session)


@router.get("/{student_id}", response_model=Student)
def get_student(student_id: str, service: ParentService = Depends(get_parent_service)):
    """Student with current parent mappings"""
    return service.get_student(student_id)


@router.get("/{student_id}/relationships", response_model=RelationshipOptions)
def get_relationship_options(student_id: str, service: ParentService = Depends(get_parent_service)):
    """Relationship types still free for this student"""
    return service.relationship_options(student_id)


@router.post("/{student_id}/parents", response_model=WorkflowOutcome)
def link_parent(
    student_id: str,
    request: LinkParentRequest,
    service: ParentService = Depends(get_parent_service),
):
    """Link an existing parent to the student"""
    return service.link_parent(student_id, request)


@router.delete("/{student_id}/parents/{mapping_id}", response_model=WorkflowOutcome)
def unlink_parent(student_id: str, mapping_id: str, service: ParentService = Depends(get_parent_service)):
    return service.unlink(student_id, mapping_id)
