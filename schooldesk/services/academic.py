"""
Academic Service
Lookups for class, subject and teacher pickers
"""
import logging
from typing import List, Optional

from schooldesk.errors import ApiError, FormValidationError, PermissionDenied
from schooldesk.models.academic import Subject, SubjectAssignment, SubjectAssignmentResult, Teacher
from schooldesk.models.common import ClassOption
from schooldesk.models.user import AuthSession, Role
from schooldesk.services.school_api import SchoolApiClient

logger = logging.getLogger(__name__)


class AcademicService:
    def __init__(self, api: SchoolApiClient, session: AuthSession):
        self.api = api
        self.session = session

    def subjects(self) -> List[Subject]:
        envelope = self.api.get("/api/academic/subjects", token=self.session.token)
        return [Subject(**s) for s in (envelope.data or {}).get("subjects", [])]

    def class_options(self) -> List[ClassOption]:
        """
        Class divisions with their level and academic year.

        Each division needs its own details call; a division whose details
        cannot be loaded is left out rather than failing the whole picker.
        """
        envelope = self.api.get("/api/academic/class-divisions", token=self.session.token)
        divisions = (envelope.data or {}).get("class_divisions", [])

        options = []
        for division in divisions:
            option = self._class_option(division["id"])
            if option is not None:
                options.append(option)
        return options

    def _class_option(self, division_id: str) -> Optional[ClassOption]:
        try:
            envelope = self.api.get(f"/api/students/class/{division_id}/details", token=self.session.token)
            details = (envelope.data or {})["class_division"]
            return ClassOption(
                id=division_id,
                division=details["division"],
                class_name=details["class_level"]["name"],
                class_level=details["class_level"]["name"],
                academic_year=details["academic_year"]["year_name"],
            )
        except (ApiError, KeyError, TypeError) as e:
            logger.warning("Skipping class division %s: %s", division_id, e)
            return None

    def teachers(self) -> List[Teacher]:
        envelope = self.api.get("/api/academic/teachers", token=self.session.token)
        return [Teacher(**t) for t in (envelope.data or {}).get("teachers", [])]

    def assign_subjects(self, teacher_id: str, assignment: SubjectAssignment) -> SubjectAssignmentResult:
        if self.session.role not in (Role.ADMIN, Role.PRINCIPAL):
            raise PermissionDenied("You don't have permission to assign subjects")
        subjects = [s.strip() for s in assignment.subjects if s.strip()]
        if not subjects:
            raise FormValidationError("Please select at least one subject")

        envelope = self.api.post(
            f"/api/academic/teachers/{teacher_id}/subjects",
            {"subjects": subjects, "mode": assignment.mode.value},
            token=self.session.token,
        )
        logger.info("Subjects %s for teacher %s (%s)", subjects, teacher_id, assignment.mode.value)
        data = envelope.data or {}
        data.setdefault("teacher_id", teacher_id)
        return SubjectAssignmentResult(**data)
