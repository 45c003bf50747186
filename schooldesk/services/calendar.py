"""
Calendar Service
School calendar events: listing, date presets, review board and approvals
"""
import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from schooldesk.errors import ApiError, FormValidationError
from schooldesk.models.calendar_event import CalendarEvent, CalendarEventForm, EventFilters
from schooldesk.models.common import ApprovalStatus, ReviewAction, ReviewBoard, WorkflowOutcome
from schooldesk.models.notice import Notice
from schooldesk.models.user import AuthSession
from schooldesk.services.approval import EVENT_POLICY, WorkflowEvent, build_board
from schooldesk.services.filters import DatePreset, preset_range
from schooldesk.services.forms import event_payload
from schooldesk.services.school_api import SchoolApiClient

logger = logging.getLogger(__name__)


def _events(data: Optional[Dict[str, Any]]) -> List[CalendarEvent]:
    return [CalendarEvent(**e) for e in (data or {}).get("events", [])]


def _sort_key(event: CalendarEvent) -> datetime:
    moment = event.event_date
    if moment.tzinfo is None:
        # API timestamps without an offset are UTC
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def _event(data: Optional[Dict[str, Any]]) -> Optional[CalendarEvent]:
    if data and data.get("event"):
        return CalendarEvent(**data["event"])
    return None


class CalendarService:
    """Calendar event workflow for one signed-in user"""

    def __init__(self, api: SchoolApiClient, session: AuthSession):
        self.api = api
        self.session = session
        self.policy = EVENT_POLICY

    def list(self, filters: Optional[EventFilters] = None) -> List[CalendarEvent]:
        filters = filters or EventFilters()
        if filters.use_ist is None:
            filters = filters.model_copy(update={"use_ist": True})
        envelope = self.api.get("/api/calendar/events", token=self.session.token, params=filters.model_dump())
        return _events(envelope.data)

    def by_preset(
        self,
        preset: DatePreset,
        filters: Optional[EventFilters] = None,
        today: Optional[date] = None,
    ) -> List[CalendarEvent]:
        window = preset_range(preset, today)
        filters = (filters or EventFilters()).model_copy(update=window.model_dump())
        return self.list(filters)

    def teacher_events(self, filters: Optional[EventFilters] = None) -> List[CalendarEvent]:
        params = filters.model_dump() if filters else None
        envelope = self.api.get("/api/calendar/events/teacher", token=self.session.token, params=params)
        return _events(envelope.data)

    def get(self, event_id: str) -> CalendarEvent:
        envelope = self.api.get(f"/api/calendar/events/{event_id}", token=self.session.token)
        event = _event(envelope.data)
        if event is None:
            raise ApiError("Failed to fetch event details", endpoint=f"/api/calendar/events/{event_id}")
        return event

    def board(self) -> ReviewBoard:
        self.policy.require_reviewer(self.session.role)
        everything = self.list()
        pending = self.list(EventFilters(status=ApprovalStatus.PENDING))
        # Newest first, like the approvals page
        pending.sort(key=_sort_key, reverse=True)
        return build_board(everything, pending, self.policy, self.session.role)

    def create(self, form: CalendarEventForm) -> WorkflowOutcome:
        expected = self.policy.initial_status(self.session.role)
        payload = event_payload(form)

        envelope = self.api.post("/api/calendar/events", payload, token=self.session.token)
        event = _event(envelope.data)
        status = event.status if event else expected

        logger.info("Calendar event created by %s (%s), status=%s", self.session.user.id, self.session.role.value, status.value)
        if status == ApprovalStatus.APPROVED:
            notice = Notice.success("Event created successfully")
        else:
            notice = Notice.success("Event created successfully and sent for approval")
        return WorkflowOutcome(record=event, notice=notice, redirect_to="/calendar")

    def edit(self, event_id: str, form: CalendarEventForm) -> WorkflowOutcome:
        current = self.get(event_id)
        self.policy.next_status(current.status, WorkflowEvent.EDIT, self.session.user, current.creator_id)
        payload = event_payload(form)

        envelope = self.api.put(f"/api/calendar/events/{event_id}", payload, token=self.session.token)
        return WorkflowOutcome(
            record=_event(envelope.data),
            notice=Notice.success("Event updated successfully"),
            redirect_to="/calendar",
        )

    def approve(self, event_id: str) -> WorkflowOutcome:
        return self._review(event_id, ReviewAction.APPROVE)

    def reject(self, event_id: str, reason: str) -> WorkflowOutcome:
        return self._review(event_id, ReviewAction.REJECT, reason)

    def _review(self, event_id: str, action: ReviewAction, reason: Optional[str] = None) -> WorkflowOutcome:
        self.policy.require_reviewer(self.session.role)
        if action == ReviewAction.REJECT and not (reason or "").strip():
            raise FormValidationError("Please provide a reason for rejection")

        current = self.get(event_id)
        self.policy.next_status(current.status, WorkflowEvent(action.value), self.session.user, current.creator_id, reason)

        if action == ReviewAction.APPROVE:
            envelope = self.api.post(f"/api/calendar/events/{event_id}/approve", {}, token=self.session.token)
            notice = Notice(title="Event Approved", description="The event has been successfully approved.")
        else:
            envelope = self.api.post(
                f"/api/calendar/events/{event_id}/reject",
                {"rejection_reason": reason.strip()},
                token=self.session.token,
            )
            notice = Notice(title="Event Rejected", description="The event has been rejected.")

        try:
            board = self.board()
        except ApiError as e:
            logger.warning("Event board refresh failed after %s: %s", action.value, e.message)
            board = None
        return WorkflowOutcome(record=_event(envelope.data), notice=notice, board=board)
