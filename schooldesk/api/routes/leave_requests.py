"""
Leave Request Routes
Student leave requests from parents, reviewed by school staff
"""
from fastapi import APIRouter, Depends, Query, status

from schooldesk.models.announcement import RejectRequest
from schooldesk.models.common import WorkflowOutcome
from schooldesk.models.leave_request import LeaveFilters, LeaveRequest, LeaveRequestCreate, LeaveRequestList
from schooldesk.models.user import AuthSession
from schooldesk.api.routes.auth import get_auth_session
from schooldesk.services.filters import ALL
from schooldesk.services.leave_requests import LeaveRequestService
from schooldesk.services.school_api import SchoolApiClient, get_school_api

router = APIRouter()


def get_leave_service(
    api: SchoolApiClient = Depends(get_school_api),
    session: AuthSession = Depends(get_auth_session),
) -> LeaveRequestService:
    return LeaveRequestService(api, session)


@router.get("/", response_model=LeaveRequestList)
def get_leave_requests(
    filters: LeaveFilters = Depends(),
    search: str = "",
    class_label: str = Query(ALL, alias="class"),
    service: LeaveRequestService = Depends(get_leave_service),
):
    """Leave requests with per-status counts (Admin/Principal/Teacher)"""
    return service.list(filters, search, class_label)


@router.get("/{request_id}", response_model=LeaveRequest)
def get_leave_request(request_id: str, service: LeaveRequestService = Depends(get_leave_service)):
    return service.get(request_id)


@router.post("/", response_model=WorkflowOutcome, status_code=status.HTTP_201_CREATED)
def create_leave_request(request: LeaveRequestCreate, service: LeaveRequestService = Depends(get_leave_service)):
    """Submit a leave request (Parent only)"""
    return service.create(request)


@router.post("/{request_id}/approve", response_model=WorkflowOutcome)
def approve_leave_request(request_id: str, service: LeaveRequestService = Depends(get_leave_service)):
    return service.approve(request_id)


@router.post("/{request_id}/reject", response_model=WorkflowOutcome)
def reject_leave_request(
    request_id: str,
    body: RejectRequest,
    service: LeaveRequestService = Depends(get_leave_service),
):
    return service.reject(request_id, body.reason)
