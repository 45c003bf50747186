"""
Calendar Routes
Endpoints for school calendar events
"""
from fastapi import APIRouter, Depends, status
from typing import List

from schooldesk.models.announcement import RejectRequest
from schooldesk.models.calendar_event import CalendarEvent, CalendarEventForm, EventFilters
from schooldesk.models.common import ReviewBoard, WorkflowOutcome
from schooldesk.models.user import AuthSession
from schooldesk.api.routes.auth import get_auth_session
from schooldesk.services.calendar import CalendarService
from schooldesk.services.filters import DatePreset
from schooldesk.services.school_api import SchoolApiClient, get_school_api

router = APIRouter()


def get_calendar_service(
    api: SchoolApiClient = Depends(get_school_api),
    session: AuthSession = Depends(get_auth_session),
) -> CalendarService:
    return CalendarService(api, session)


@router.get("/", response_model=List[CalendarEvent])
def get_events(filters: EventFilters = Depends(), service: CalendarService = Depends(get_calendar_service)):
    return service.list(filters)


@router.get("/teacher", response_model=List[CalendarEvent])
def get_teacher_events(filters: EventFilters = Depends(), service: CalendarService = Depends(get_calendar_service)):
    """Events relevant to the signed-in teacher"""
    return service.teacher_events(filters)


@router.get("/preset/{preset}", response_model=List[CalendarEvent])
def get_events_for_preset(
    preset: DatePreset,
    filters: EventFilters = Depends(),
    service: CalendarService = Depends(get_calendar_service),
):
    """Events in a named window such as this-week or next-month"""
    return service.by_preset(preset, filters)


@router.get("/board", response_model=ReviewBoard)
def get_review_board(service: CalendarService = Depends(get_calendar_service)):
    """All events and those awaiting approval (Admin/Principal only)"""
    return service.board()


@router.get("/{event_id}", response_model=CalendarEvent)
def get_event(event_id: str, service: CalendarService = Depends(get_calendar_service)):
    return service.get(event_id)


@router.post("/", response_model=WorkflowOutcome, status_code=status.HTTP_201_CREATED)
def create_event(form: CalendarEventForm, service: CalendarService = Depends(get_calendar_service)):
    return service.create(form)


@router.put("/{event_id}", response_model=WorkflowOutcome)
def update_event(event_id: str, form: CalendarEventForm, service: CalendarService = Depends(get_calendar_service)):
    return service.edit(event_id, form)


@router.post("/{event_id}/approve", response_model=WorkflowOutcome)
def approve_event(event_id: str, service: CalendarService = Depends(get_calendar_service)):
    return service.approve(event_id)


@router.post("/{event_id}/reject", response_model=WorkflowOutcome)
def reject_event(event_id: str, body: RejectRequest, service: CalendarService = Depends(get_calendar_service)):
    return service.reject(event_id, body.reason)
