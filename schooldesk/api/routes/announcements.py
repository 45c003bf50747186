"""
Announcement Routes
Endpoints for school announcements and their approval
"""
from fastapi import APIRouter, Depends, Query, status
from typing import Optional

from schooldesk.models.announcement import (
    Announcement,
    AnnouncementFilters,
    AnnouncementForm,
    AnnouncementPage,
    AnnouncementType,
    Priority,
    RejectRequest,
)
from schooldesk.models.common import ReviewBoard, WorkflowOutcome
from schooldesk.models.user import AuthSession
from schooldesk.api.routes.auth import get_auth_session
from schooldesk.services.announcements import AnnouncementService
from schooldesk.services.filters import ALL
from schooldesk.services.school_api import SchoolApiClient, get_school_api

router = APIRouter()


def get_announcement_service(
    api: SchoolApiClient = Depends(get_school_api),
    session: AuthSession = Depends(get_auth_session),
) -> AnnouncementService:
    return AnnouncementService(api, session)


@router.get("/", response_model=AnnouncementPage)
def get_announcements(
    filters: AnnouncementFilters = Depends(),
    service: AnnouncementService = Depends(get_announcement_service),
):
    """Announcements visible to the current user"""
    return service.list(filters)


@router.get("/teacher", response_model=AnnouncementPage)
def get_teacher_announcements(
    page: int = 1,
    announcement_type: Optional[AnnouncementType] = None,
    priority: Optional[Priority] = None,
    search: str = "",
    service: AnnouncementService = Depends(get_announcement_service),
):
    """Teacher feed, limited to recent announcements"""
    return service.teacher_feed(page, announcement_type, priority, search)


@router.get("/board", response_model=ReviewBoard)
def get_review_board(
    search: str = "",
    status_filter: str = Query(ALL, alias="status"),
    announcement_type: str = ALL,
    priority: str = ALL,
    service: AnnouncementService = Depends(get_announcement_service),
):
    """Overview and pending tabs (Admin/Principal only)"""
    return service.board(search, status_filter, announcement_type, priority)


@router.get("/{announcement_id}", response_model=Announcement)
def get_announcement(announcement_id: str, service: AnnouncementService = Depends(get_announcement_service)):
    return service.get(announcement_id)


@router.get("/{announcement_id}/form", response_model=AnnouncementForm)
def get_announcement_form(announcement_id: str, service: AnnouncementService = Depends(get_announcement_service)):
    """Edit form prefilled in school-local time"""
    return service.edit_form(announcement_id)


@router.post("/", response_model=WorkflowOutcome, status_code=status.HTTP_201_CREATED)
def create_announcement(form: AnnouncementForm, service: AnnouncementService = Depends(get_announcement_service)):
    """Create an announcement; auto-approved for Admin/Principal"""
    return service.create(form)


@router.put("/{announcement_id}", response_model=WorkflowOutcome)
def update_announcement(
    announcement_id: str,
    form: AnnouncementForm,
    service: AnnouncementService = Depends(get_announcement_service),
):
    """Edit an announcement and resubmit it for approval"""
    return service.edit(announcement_id, form)


@router.post("/{announcement_id}/approve", response_model=WorkflowOutcome)
def approve_announcement(announcement_id: str, service: AnnouncementService = Depends(get_announcement_service)):
    return service.approve(announcement_id)


@router.post("/{announcement_id}/reject", response_model=WorkflowOutcome)
def reject_announcement(
    announcement_id: str,
    body: RejectRequest,
    service: AnnouncementService = Depends(get_announcement_service),
):
    return service.reject(announcement_id, body.reason)
