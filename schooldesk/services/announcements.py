"""
Announcement Service
Feed, review board, create/edit and approve/reject for announcements
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from schooldesk.config import settings
from schooldesk.errors import ApiError, FormValidationError
from schooldesk.models.announcement import (
    Announcement,
    AnnouncementFilters,
    AnnouncementForm,
    AnnouncementPage,
    AnnouncementType,
    Priority,
)
from schooldesk.models.common import (
    ApprovalStatus,
    Pagination,
    ReviewAction,
    ReviewBoard,
    WorkflowOutcome,
)
from schooldesk.models.notice import Notice
from schooldesk.models.user import AuthSession
from schooldesk.services.approval import ANNOUNCEMENT_POLICY, WorkflowEvent, build_board
from schooldesk.services.filters import ALL, filter_announcements
from schooldesk.services.forms import announcement_payload, days_ago_iso, form_from_announcement
from schooldesk.services.school_api import SchoolApiClient

logger = logging.getLogger(__name__)

REJECTION_REASON_MESSAGE = "Please provide a reason for rejection"


def _page(data: Optional[Dict[str, Any]]) -> AnnouncementPage:
    data = data or {}
    announcements = [Announcement(**a) for a in data.get("announcements", [])]
    pagination = data.get("pagination") or {"total": len(announcements)}
    return AnnouncementPage(announcements=announcements, pagination=Pagination(**pagination))


def _announcement(data: Optional[Dict[str, Any]]) -> Optional[Announcement]:
    if data and data.get("announcement"):
        return Announcement(**data["announcement"])
    return None


class AnnouncementService:
    """Announcement workflow for one signed-in user"""

    def __init__(self, api: SchoolApiClient, session: AuthSession):
        self.api = api
        self.session = session
        self.policy = ANNOUNCEMENT_POLICY
        self.utc_offset = settings.SCHOOL_UTC_OFFSET_MINUTES

    @property
    def list_path(self) -> str:
        if self.policy.can_review(self.session.role):
            return "/admin/announcements"
        return "/announcements"

    def list(self, filters: Optional[AnnouncementFilters] = None) -> AnnouncementPage:
        params = filters.model_dump() if filters else None
        envelope = self.api.get("/api/announcements", token=self.session.token, params=params)
        return _page(envelope.data)

    def teacher_feed(
        self,
        page: int = 1,
        announcement_type: Optional[AnnouncementType] = None,
        priority: Optional[Priority] = None,
        search: str = "",
        now: Optional[datetime] = None,
    ) -> AnnouncementPage:
        """Announcements addressed to the teacher, last N days by default"""
        params = {
            "page": page,
            "limit": settings.DEFAULT_PAGE_SIZE,
            "announcement_type": announcement_type,
            "priority": priority,
            "start_date": days_ago_iso(settings.TEACHER_FEED_DAYS, now),
        }
        envelope = self.api.get(
            "/api/announcements/teacher/announcements",
            token=self.session.token,
            params=params,
        )
        result = _page(envelope.data)
        # Only the search term is filtered here; the rest is server-side
        if search:
            result.announcements = filter_announcements(result.announcements, search=search)
        return result

    def get(self, announcement_id: str) -> Announcement:
        envelope = self.api.get(f"/api/announcements/{announcement_id}", token=self.session.token)
        announcement = _announcement(envelope.data)
        if announcement is None:
            raise ApiError("Failed to fetch announcement details", endpoint=f"/api/announcements/{announcement_id}")
        return announcement

    def edit_form(self, announcement_id: str) -> AnnouncementForm:
        return form_from_announcement(self.get(announcement_id), self.utc_offset)

    def board(
        self,
        search: str = "",
        status: str = ALL,
        announcement_type: str = ALL,
        priority: str = ALL,
    ) -> ReviewBoard:
        """Overview and pending tabs; both collections are fetched fresh"""
        self.policy.require_reviewer(self.session.role)

        everything = self.list().announcements
        pending = self.list(AnnouncementFilters(status=ApprovalStatus.PENDING)).announcements
        overview = filter_announcements(everything, search, status, announcement_type, priority)
        return build_board(overview, pending, self.policy, self.session.role, counted=everything)

    def create(self, form: AnnouncementForm) -> WorkflowOutcome:
        expected = self.policy.initial_status(self.session.role)
        payload = announcement_payload(form, self.utc_offset)

        envelope = self.api.post("/api/announcements", payload, token=self.session.token)
        data = envelope.data or {}
        announcement = _announcement(data)
        auto_approved = data.get("auto_approved", expected == ApprovalStatus.APPROVED)

        logger.info(
            "Announcement created by %s (%s), auto_approved=%s",
            self.session.user.id, self.session.role.value, auto_approved,
        )
        if auto_approved:
            notice = Notice.success("Announcement created and auto-approved successfully")
        else:
            notice = Notice.success("Announcement created successfully and pending approval")
        return WorkflowOutcome(record=announcement, notice=notice, redirect_to=self.list_path)

    def edit(self, announcement_id: str, form: AnnouncementForm) -> WorkflowOutcome:
        """Save changes; the school API moves the announcement back to pending"""
        current = self.get(announcement_id)
        self.policy.next_status(current.status, WorkflowEvent.EDIT, self.session.user, current.creator_id)
        payload = announcement_payload(form, self.utc_offset)

        envelope = self.api.put(f"/api/announcements/{announcement_id}", payload, token=self.session.token)
        updated = _announcement(envelope.data)

        logger.info("Announcement %s edited by %s, resubmitted for approval", announcement_id, self.session.user.id)
        return WorkflowOutcome(
            record=updated,
            notice=Notice.success("Announcement updated successfully and moved to pending for re-approval"),
            redirect_to=self.list_path,
        )

    def approve(self, announcement_id: str) -> WorkflowOutcome:
        return self._review(announcement_id, ReviewAction.APPROVE)

    def reject(self, announcement_id: str, reason: str) -> WorkflowOutcome:
        return self._review(announcement_id, ReviewAction.REJECT, reason)

    def _review(self, announcement_id: str, action: ReviewAction, reason: Optional[str] = None) -> WorkflowOutcome:
        self.policy.require_reviewer(self.session.role)
        if action == ReviewAction.REJECT and not (reason or "").strip():
            raise FormValidationError(REJECTION_REASON_MESSAGE)

        current = self.get(announcement_id)
        self.policy.next_status(
            current.status, WorkflowEvent(action.value), self.session.user, current.creator_id, reason
        )

        body = {"action": action.value}
        if action == ReviewAction.REJECT:
            body["rejection_reason"] = reason.strip()
        envelope = self.api.patch(f"/api/announcements/{announcement_id}/approval", body, token=self.session.token)
        record = _announcement(envelope.data)

        if action == ReviewAction.APPROVE:
            notice = Notice.success("Announcement approved successfully")
        else:
            notice = Notice.success("Announcement rejected successfully")
        return WorkflowOutcome(record=record, notice=notice, board=self._refreshed_board())

    def _refreshed_board(self) -> Optional[ReviewBoard]:
        # The action already went through; a failed refresh only leaves the lists stale
        try:
            return self.board()
        except ApiError as e:
            logger.warning("Review board refresh failed after action: %s", e.message)
            return None
