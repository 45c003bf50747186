"""
Leave Request Service
Parents submit leave requests; admins, principals and teachers review them
"""
import logging
from typing import Any, Dict, List, Optional

from schooldesk.errors import ApiError, FormValidationError, PermissionDenied
from schooldesk.models.common import ApprovalStatus, ReviewAction, WorkflowOutcome
from schooldesk.models.leave_request import LeaveFilters, LeaveRequest, LeaveRequestCreate, LeaveRequestList
from schooldesk.models.notice import Notice
from schooldesk.models.user import AuthSession
from schooldesk.services.approval import LEAVE_POLICY, WorkflowEvent, status_counts
from schooldesk.services.filters import ALL, filter_leave_requests, leave_class_labels
from schooldesk.services.forms import leave_request_payload
from schooldesk.services.school_api import SchoolApiClient

logger = logging.getLogger(__name__)

ACCESS_DENIED_MESSAGE = "You don't have permission to access leave requests."


def _leave_requests(data: Optional[Dict[str, Any]]) -> List[LeaveRequest]:
    return [LeaveRequest(**r) for r in (data or {}).get("leave_requests", [])]


def _leave_request(data: Optional[Dict[str, Any]]) -> Optional[LeaveRequest]:
    if data and data.get("leave_request"):
        return LeaveRequest(**data["leave_request"])
    return None


class LeaveRequestService:
    def __init__(self, api: SchoolApiClient, session: AuthSession):
        self.api = api
        self.session = session
        self.policy = LEAVE_POLICY

    def list(
        self,
        filters: Optional[LeaveFilters] = None,
        search: str = "",
        class_label: str = ALL,
    ) -> LeaveRequestList:
        """
        Fetch leave requests for the review page.

        Counts describe every request with student data; the search and
        class filters only narrow the returned list.
        """
        if not self.policy.can_review(self.session.role):
            raise PermissionDenied(ACCESS_DENIED_MESSAGE)

        params = filters.model_dump() if filters else None
        envelope = self.api.get("/api/leave-requests", token=self.session.token, params=params)
        fetched = filter_leave_requests(_leave_requests(envelope.data))
        counts = status_counts(fetched)

        return LeaveRequestList(
            leave_requests=filter_leave_requests(fetched, search, class_label),
            total=counts.total,
            pending=counts.pending,
            approved=counts.approved,
            rejected=counts.rejected,
            classes=leave_class_labels(fetched),
        )

    def get(self, request_id: str) -> LeaveRequest:
        envelope = self.api.get(f"/api/leave-requests/{request_id}", token=self.session.token)
        leave_request = _leave_request(envelope.data)
        if leave_request is None:
            raise ApiError("Failed to fetch leave request", endpoint=f"/api/leave-requests/{request_id}")
        return leave_request

    def create(self, request: LeaveRequestCreate) -> WorkflowOutcome:
        self.policy.initial_status(self.session.role)
        payload = leave_request_payload(request)

        envelope = self.api.post("/api/leave-requests", payload, token=self.session.token)
        logger.info("Leave request submitted by %s for student %s", self.session.user.id, request.student_id)
        return WorkflowOutcome(
            record=_leave_request(envelope.data),
            notice=Notice.success("Leave request submitted successfully"),
        )

    def approve(self, request_id: str) -> WorkflowOutcome:
        return self._review(request_id, ReviewAction.APPROVE)

    def reject(self, request_id: str, reason: str) -> WorkflowOutcome:
        return self._review(request_id, ReviewAction.REJECT, reason)

    def _review(self, request_id: str, action: ReviewAction, reason: Optional[str] = None) -> WorkflowOutcome:
        if not self.policy.can_review(self.session.role):
            raise PermissionDenied(ACCESS_DENIED_MESSAGE)
        if action == ReviewAction.REJECT and not (reason or "").strip():
            raise FormValidationError("Please provide a reason for rejection")

        current = self.get(request_id)
        target = self.policy.next_status(current.status, WorkflowEvent(action.value), self.session.user, reason=reason)

        body: Dict[str, Any] = {"status": target.value}
        if target == ApprovalStatus.REJECTED:
            body["rejection_reason"] = reason.strip()
        envelope = self.api.put(f"/api/leave-requests/{request_id}/status", body, token=self.session.token)

        return WorkflowOutcome(
            record=_leave_request(envelope.data),
            notice=Notice.success(f"Leave request {target.value} successfully"),
        )
