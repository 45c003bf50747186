"""
Approval workflow tests
"""
import unittest

from schooldesk.errors import FormValidationError, PermissionDenied, TransitionNotAllowed
from schooldesk.models.common import ApprovalStatus, ReviewAction
from schooldesk.models.user import Role, User
from schooldesk.services.approval import (
    ANNOUNCEMENT_POLICY,
    EVENT_POLICY,
    LEAVE_POLICY,
    WorkflowEvent,
    build_board,
)

from stub_api import make_session


class _Record:
    def __init__(self, status):
        self.status = status


class ApprovalPolicyTestCase(unittest.TestCase):
    def setUp(self):
        self.admin = make_session(Role.ADMIN).user
        self.principal = make_session(Role.PRINCIPAL).user
        self.teacher = make_session(Role.TEACHER).user

    def test_initial_status_by_role(self):
        self.assertEqual(ANNOUNCEMENT_POLICY.initial_status(Role.TEACHER), ApprovalStatus.PENDING)
        self.assertEqual(ANNOUNCEMENT_POLICY.initial_status(Role.ADMIN), ApprovalStatus.APPROVED)
        self.assertEqual(ANNOUNCEMENT_POLICY.initial_status(Role.PRINCIPAL), ApprovalStatus.APPROVED)
        self.assertEqual(LEAVE_POLICY.initial_status(Role.PARENT), ApprovalStatus.PENDING)

    def test_parent_cannot_author_announcements(self):
        with self.assertRaises(PermissionDenied):
            ANNOUNCEMENT_POLICY.initial_status(Role.PARENT)
        with self.assertRaises(PermissionDenied):
            EVENT_POLICY.initial_status(Role.PARENT)

    def test_review_actions_only_for_pending_and_reviewers(self):
        self.assertEqual(
            ANNOUNCEMENT_POLICY.review_actions(ApprovalStatus.PENDING, Role.ADMIN),
            [ReviewAction.APPROVE, ReviewAction.REJECT],
        )
        self.assertEqual(ANNOUNCEMENT_POLICY.review_actions(ApprovalStatus.PENDING, Role.TEACHER), [])
        self.assertEqual(ANNOUNCEMENT_POLICY.review_actions(ApprovalStatus.APPROVED, Role.ADMIN), [])
        self.assertEqual(ANNOUNCEMENT_POLICY.review_actions(ApprovalStatus.REJECTED, Role.PRINCIPAL), [])

    def test_teacher_reviews_leave_but_not_announcements(self):
        self.assertTrue(LEAVE_POLICY.can_review(Role.TEACHER))
        self.assertFalse(ANNOUNCEMENT_POLICY.can_review(Role.TEACHER))
        self.assertFalse(LEAVE_POLICY.can_review(Role.PARENT))

    def test_approve_and_reject_pending(self):
        self.assertEqual(
            ANNOUNCEMENT_POLICY.next_status(ApprovalStatus.PENDING, WorkflowEvent.APPROVE, self.admin),
            ApprovalStatus.APPROVED,
        )
        self.assertEqual(
            ANNOUNCEMENT_POLICY.next_status(
                ApprovalStatus.PENDING, WorkflowEvent.REJECT, self.principal, reason="Wrong date"
            ),
            ApprovalStatus.REJECTED,
        )

    def test_reject_requires_reason(self):
        with self.assertRaises(FormValidationError):
            ANNOUNCEMENT_POLICY.next_status(ApprovalStatus.PENDING, WorkflowEvent.REJECT, self.admin, reason="  ")

    def test_teacher_cannot_approve(self):
        with self.assertRaises(PermissionDenied):
            ANNOUNCEMENT_POLICY.next_status(ApprovalStatus.PENDING, WorkflowEvent.APPROVE, self.teacher)

    def test_cannot_approve_twice(self):
        with self.assertRaises(TransitionNotAllowed):
            ANNOUNCEMENT_POLICY.next_status(ApprovalStatus.APPROVED, WorkflowEvent.APPROVE, self.admin)
        with self.assertRaises(TransitionNotAllowed):
            ANNOUNCEMENT_POLICY.next_status(ApprovalStatus.REJECTED, WorkflowEvent.REJECT, self.admin, reason="x")

    def test_edit_returns_to_pending(self):
        for status in ApprovalStatus:
            self.assertEqual(
                ANNOUNCEMENT_POLICY.next_status(status, WorkflowEvent.EDIT, self.admin),
                ApprovalStatus.PENDING,
            )

    def test_creator_edits_only_while_pending(self):
        creator = User(id="t-9", full_name="Ms Rao", role=Role.TEACHER)
        self.assertEqual(
            ANNOUNCEMENT_POLICY.next_status(ApprovalStatus.PENDING, WorkflowEvent.EDIT, creator, creator_id="t-9"),
            ApprovalStatus.PENDING,
        )
        with self.assertRaises(PermissionDenied):
            ANNOUNCEMENT_POLICY.next_status(ApprovalStatus.APPROVED, WorkflowEvent.EDIT, creator, creator_id="t-9")
        with self.assertRaises(PermissionDenied):
            ANNOUNCEMENT_POLICY.next_status(ApprovalStatus.PENDING, WorkflowEvent.EDIT, creator, creator_id="t-1")


class ReviewBoardTestCase(unittest.TestCase):
    def test_counts_and_actions(self):
        records = [
            _Record(ApprovalStatus.PENDING),
            _Record(ApprovalStatus.APPROVED),
            _Record(ApprovalStatus.REJECTED),
            _Record(ApprovalStatus.APPROVED),
        ]
        pending = [records[0]]
        board = build_board(records, pending, ANNOUNCEMENT_POLICY, Role.ADMIN)

        self.assertEqual(board.counts.total, 4)
        self.assertEqual(board.counts.pending, 1)
        self.assertEqual(board.counts.approved, 2)
        self.assertEqual(board.counts.rejected, 1)
        self.assertEqual(board.pending[0].actions, [ReviewAction.APPROVE, ReviewAction.REJECT])
        self.assertEqual(board.overview[1].status_label, "Approved")
        self.assertEqual(board.overview[1].actions, [])

    def test_non_reviewer_sees_no_actions(self):
        pending = [_Record(ApprovalStatus.PENDING)]
        board = build_board(pending, pending, ANNOUNCEMENT_POLICY, Role.TEACHER)
        self.assertTrue(all(item.actions == [] for item in board.pending))
