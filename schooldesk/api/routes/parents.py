"""
Parent Routes
Parent accounts (Admin/Principal only)
"""
from fastapi import APIRouter, Depends, status
from typing import Optional

from schooldesk.models.common import WorkflowOutcome
from schooldesk.models.parent import CreateParentRequest, Parent, ParentList
from schooldesk.api.routes.students import get_parent_service
from schooldesk.services.parents import ParentService

router = APIRouter()


@router.get("/", response_model=ParentList)
def get_parents(
    search: Optional[str] = None,
    page: int = 1,
    limit: Optional[int] = None,
    service: ParentService = Depends(get_parent_service),
):
    return service.list_parents(search, page, limit)


@router.get("/{parent_id}", response_model=Parent)
def get_parent(parent_id: str, service: ParentService = Depends(get_parent_service)):
    return service.get_parent(parent_id)


@router.post("/", response_model=WorkflowOutcome, status_code=status.HTTP_201_CREATED)
def create_parent(request: CreateParentRequest, service: ParentService = Depends(get_parent_service)):
    """Create a parent account, optionally linked to students by admission number"""
    return service.create_parent(request)
