"""
Parent Service
Parent accounts and their links to students, with the guard that keeps each
relationship type unique per student
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

from schooldesk.errors import (
    PRIMARY_GUARDIAN_EXISTS,
    ApiError,
    FormValidationError,
    GuardianConflict,
    PermissionDenied,
)
from schooldesk.models.common import Pagination, WorkflowOutcome
from schooldesk.models.notice import Notice
from schooldesk.models.parent import (
    CreateParentRequest,
    LinkParentRequest,
    Parent,
    ParentList,
    ParentMapping,
    Relationship,
    RelationshipOptions,
    Student,
)
from schooldesk.models.user import AuthSession, Role
from schooldesk.services.school_api import SchoolApiClient

logger = logging.getLogger(__name__)

ALL_ASSIGNED_MESSAGE = "All relationship types are already assigned to this student."
GUARDIAN_CONFLICT_MESSAGE = (
    "This student already has a primary guardian. Please set this parent as a "
    "secondary guardian or remove the existing primary guardian first."
)
PRIMARY_GUARDIAN_REQUIRED_MESSAGE = "Please mark exactly one student as the primary guardian"
# Older API versions only report the conflict in the message text
GUARDIAN_CONFLICT_TEXT = "already has a primary guardian"

MANAGER_ROLES = (Role.ADMIN, Role.PRINCIPAL)


def available_relationships(mappings: Sequence[ParentMapping]) -> List[Relationship]:
    """Canonical relationships not yet used by the student's mappings, in order"""
    taken = {m.relationship.lower() for m in mappings}
    return [r for r in Relationship if r.value not in taken]


def relationship_options(student: Student) -> RelationshipOptions:
    available = available_relationships(student.parent_mappings)
    return RelationshipOptions(
        student_id=student.id,
        available=available,
        blocked=not available,
        message=None if available else ALL_ASSIGNED_MESSAGE,
    )


def is_guardian_conflict(error: ApiError) -> bool:
    return error.code == PRIMARY_GUARDIAN_EXISTS or GUARDIAN_CONFLICT_TEXT in (error.message or "")


class ParentService:
    """Student/parent management for admins and principals"""

    def __init__(self, api: SchoolApiClient, session: AuthSession):
        self.api = api
        self.session = session

    def _require_manager(self):
        if self.session.role not in MANAGER_ROLES:
            raise PermissionDenied("You don't have permission to manage parents")

    def get_student(self, student_id: str) -> Student:
        self._require_manager()
        envelope = self.api.get(f"/api/students/{student_id}", token=self.session.token)
        data = envelope.data or {}
        if not data.get("student"):
            raise ApiError("Failed to fetch student details", endpoint=f"/api/students/{student_id}")
        return Student(**data["student"])

    def relationship_options(self, student_id: str) -> RelationshipOptions:
        return relationship_options(self.get_student(student_id))

    def link_parent(self, student_id: str, request: LinkParentRequest) -> WorkflowOutcome:
        """
        Link an existing parent to a student.

        The relationship must still be free for the student. A second primary
        guardian is refused by the school API and surfaces as GuardianConflict.
        """
        self._require_manager()

        options = relationship_options(self.get_student(student_id))
        if options.blocked:
            raise FormValidationError(ALL_ASSIGNED_MESSAGE)
        if request.relationship not in options.available:
            raise FormValidationError(
                f"{request.relationship.label} is already assigned to this student"
            )

        payload = {
            "parent_id": request.parent_id,
            "students": [
                {
                    "student_id": student_id,
                    "relationship": request.relationship.value,
                    "is_primary_guardian": request.is_primary_guardian,
                    "access_level": request.access_level.value,
                }
            ],
        }
        try:
            self.api.post("/api/academic/link-students", payload, token=self.session.token)
        except ApiError as e:
            if is_guardian_conflict(e):
                logger.info("Primary guardian conflict linking parent %s to student %s", request.parent_id, student_id)
                raise GuardianConflict(GUARDIAN_CONFLICT_MESSAGE, status_code=e.status_code, endpoint=e.endpoint) from e
            raise

        logger.info(
            "Parent %s linked to student %s as %s (primary=%s)",
            request.parent_id, student_id, request.relationship.value, request.is_primary_guardian,
        )

        try:
            student = self.get_student(student_id)
        except ApiError as e:
            logger.warning("Student %s refresh failed after linking: %s", student_id, e.message)
            return WorkflowOutcome(
                notice=Notice.error("Parent linked successfully, but failed to refresh student data", title="Warning"),
            )
        return WorkflowOutcome(
            record=student,
            notice=Notice(title="Parent Linked Successfully", description="The parent has been linked to the student"),
        )

    def unlink(self, student_id: str, mapping_id: str) -> WorkflowOutcome:
        self._require_manager()
        self.api.delete(f"/api/parent-student/mappings/{mapping_id}", token=self.session.token)
        logger.info("Parent mapping %s removed from student %s", mapping_id, student_id)
        return WorkflowOutcome(
            record=self.get_student(student_id),
            notice=Notice.success("Parent unlinked successfully"),
        )

    def list_parents(self, search: Optional[str] = None, page: int = 1, limit: Optional[int] = None) -> ParentList:
        self._require_manager()
        params = {"search": search or None, "page": page, "limit": limit}
        envelope = self.api.get("/api/parent-student/parents", token=self.session.token, params=params)
        data: Dict[str, Any] = envelope.data or {}
        pagination = data.get("pagination")
        return ParentList(
            parents=[Parent(**p) for p in data.get("parents", [])],
            pagination=Pagination(**pagination) if pagination else None,
        )

    def get_parent(self, parent_id: str) -> Parent:
        self._require_manager()
        envelope = self.api.get(f"/api/parent-student/parents/{parent_id}", token=self.session.token)
        data = envelope.data or {}
        if not data.get("parent"):
            raise ApiError("Failed to fetch parent details", endpoint=f"/api/parent-student/parents/{parent_id}")
        return Parent(**data["parent"])

    def create_parent(self, request: CreateParentRequest) -> WorkflowOutcome:
        self._require_manager()
        if not request.full_name.strip() or not request.phone_number.strip():
            raise FormValidationError("Please fill in all required fields")
        if request.student_details:
            primaries = [s for s in request.student_details if s.is_primary_guardian]
            if len(primaries) != 1:
                raise FormValidationError(PRIMARY_GUARDIAN_REQUIRED_MESSAGE)

        payload = request.model_dump(mode="json", exclude_none=True)
        payload["full_name"] = request.full_name.strip()
        payload["phone_number"] = request.phone_number.strip()
        if not request.student_details:
            payload.pop("student_details", None)

        envelope = self.api.post("/api/auth/create-parent", payload, token=self.session.token)
        data = envelope.data or {}
        parent = Parent(**data["parent"]) if data.get("parent") else None

        logger.info("Parent account created by %s", self.session.user.id)
        return WorkflowOutcome(record=parent, notice=Notice.success("Parent created successfully!"))
