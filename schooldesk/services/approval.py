"""
Approval Workflow
Pending / approved / rejected lifecycle shared by announcements, calendar
events and leave requests.

    (create) --teacher--------------> pending
    (create) --admin/principal------> approved   (auto-approved)
    pending  --approve--------------> approved
    pending  --reject(reason)-------> rejected
    approved/rejected --edit--------> pending    (resubmitted for approval)

Only reviewer roles may move a record away from pending. The school API is
the real authority; these checks stop the dashboard from offering or sending
actions that would be refused anyway.
"""
import logging
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from schooldesk.errors import FormValidationError, PermissionDenied, TransitionNotAllowed
from schooldesk.models.common import (
    ApprovalStatus,
    ReviewAction,
    ReviewBoard,
    ReviewItem,
    StatusCounts,
)
from schooldesk.models.user import Role, User

logger = logging.getLogger(__name__)


class WorkflowEvent(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"
    EDIT = "edit"


TRANSITIONS = {
    (ApprovalStatus.PENDING, WorkflowEvent.APPROVE): ApprovalStatus.APPROVED,
    (ApprovalStatus.PENDING, WorkflowEvent.REJECT): ApprovalStatus.REJECTED,
    (ApprovalStatus.PENDING, WorkflowEvent.EDIT): ApprovalStatus.PENDING,
    (ApprovalStatus.APPROVED, WorkflowEvent.EDIT): ApprovalStatus.PENDING,
    (ApprovalStatus.REJECTED, WorkflowEvent.EDIT): ApprovalStatus.PENDING,
}


class ApprovalPolicy:
    """Who may author, review and edit one kind of reviewable record"""

    def __init__(
        self,
        name: str,
        reviewer_roles: Iterable[Role],
        author_roles: Iterable[Role],
        auto_approve_roles: Iterable[Role] = (),
    ):
        self.name = name
        self.reviewer_roles = frozenset(reviewer_roles)
        self.author_roles = frozenset(author_roles)
        self.auto_approve_roles = frozenset(auto_approve_roles)

    def can_review(self, role: Role) -> bool:
        return role in self.reviewer_roles

    def can_author(self, role: Role) -> bool:
        return role in self.author_roles

    def require_reviewer(self, role: Role) -> None:
        if not self.can_review(role):
            raise PermissionDenied(f"You don't have permission to review {self.name}s")

    def initial_status(self, role: Role) -> ApprovalStatus:
        """Status the school API assigns to a record created by `role`"""
        if not self.can_author(role):
            raise PermissionDenied(f"You don't have permission to create {self.name}s")
        if role in self.auto_approve_roles:
            return ApprovalStatus.APPROVED
        return ApprovalStatus.PENDING

    def can_edit(self, actor: User, status: ApprovalStatus, creator_id: Optional[str]) -> bool:
        # Reviewers edit at any status; authors only while still pending
        if self.can_review(actor.role):
            return True
        return creator_id is not None and actor.id == creator_id and status == ApprovalStatus.PENDING

    def review_actions(self, status: ApprovalStatus, role: Role) -> List[ReviewAction]:
        if status != ApprovalStatus.PENDING or not self.can_review(role):
            return []
        return [ReviewAction.APPROVE, ReviewAction.REJECT]

    def next_status(
        self,
        current: ApprovalStatus,
        event: WorkflowEvent,
        actor: User,
        creator_id: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> ApprovalStatus:
        """Validate one transition and return the resulting status"""
        if event == WorkflowEvent.EDIT:
            if not self.can_edit(actor, current, creator_id):
                raise PermissionDenied(f"You don't have permission to edit this {self.name}")
        else:
            self.require_reviewer(actor.role)

        target = TRANSITIONS.get((current, event))
        if target is None:
            raise TransitionNotAllowed(
                f"Cannot {event.value} a {self.name} that is already {current.value}"
            )

        if event == WorkflowEvent.REJECT and not (reason or "").strip():
            raise FormValidationError("Please provide a reason for rejection")

        logger.info(
            "%s transition %s -> %s by %s (%s)",
            self.name, current.value, target.value, actor.id, actor.role.value,
        )
        return target


ANNOUNCEMENT_POLICY = ApprovalPolicy(
    "announcement",
    reviewer_roles=[Role.ADMIN, Role.PRINCIPAL],
    author_roles=[Role.TEACHER, Role.ADMIN, Role.PRINCIPAL],
    auto_approve_roles=[Role.ADMIN, Role.PRINCIPAL],
)

EVENT_POLICY = ApprovalPolicy(
    "event",
    reviewer_roles=[Role.ADMIN, Role.PRINCIPAL],
    author_roles=[Role.TEACHER, Role.ADMIN, Role.PRINCIPAL],
    auto_approve_roles=[Role.ADMIN, Role.PRINCIPAL],
)

# Teachers review leave for their own classes; parents submit
LEAVE_POLICY = ApprovalPolicy(
    "leave request",
    reviewer_roles=[Role.ADMIN, Role.PRINCIPAL, Role.TEACHER],
    author_roles=[Role.PARENT],
)


def status_counts(records: Sequence) -> StatusCounts:
    counts = StatusCounts(total=len(records))
    for record in records:
        status = record.status
        if status == ApprovalStatus.PENDING:
            counts.pending += 1
        elif status == ApprovalStatus.APPROVED:
            counts.approved += 1
        elif status == ApprovalStatus.REJECTED:
            counts.rejected += 1
    return counts


def review_items(records: Sequence, policy: ApprovalPolicy, role: Role) -> List[ReviewItem]:
    return [
        ReviewItem(
            record=record,
            status_label=record.status.label,
            actions=policy.review_actions(record.status, role),
        )
        for record in records
    ]


def build_board(
    overview: Sequence,
    pending: Sequence,
    policy: ApprovalPolicy,
    role: Role,
    counted: Optional[Sequence] = None,
) -> ReviewBoard:
    """
    Assemble the overview/pending tabs.

    `counted` is the unfiltered overview list when search filters were
    applied; counts always describe everything fetched, and the pending count
    comes from the pending collection so both tabs agree after a refetch.
    """
    counts = status_counts(counted if counted is not None else overview)
    counts.pending = len(pending)
    return ReviewBoard(
        overview=review_items(overview, policy, role),
        pending=review_items(pending, policy, role),
        counts=counts,
    )
