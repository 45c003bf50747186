"""
Announcement workflow tests against a stubbed school API
"""
import unittest
from datetime import date, datetime, time, timezone

from schooldesk.errors import ApiError, FormValidationError, PermissionDenied, TransitionNotAllowed
from schooldesk.models.announcement import AnnouncementForm, AudienceScope
from schooldesk.models.common import ApprovalStatus, ReviewAction
from schooldesk.models.user import Role
from schooldesk.services.announcements import AnnouncementService

from stub_api import fail, make_session, ok, stub_client


class FakeAnnouncementStore:
    """Minimal in-memory stand-in for the announcements endpoints"""

    def __init__(self, stub):
        self.items = {}
        self.next_id = 1
        stub.on("GET", "/api/announcements", self.list)
        stub.on("POST", "/api/announcements", self.create)

    def add(self, **fields):
        announcement_id = f"a{self.next_id}"
        self.next_id += 1
        record = {
            "id": announcement_id,
            "title": "Untitled",
            "content": "",
            "announcement_type": "notification",
            "priority": "medium",
            "status": "pending",
            "target_roles": ["parent"],
            "target_classes": [],
            "creator": {"id": "teacher-1", "role": "teacher", "full_name": "Test teacher"},
            "publish_at": "2026-10-20T03:30:00.000Z",
            "expires_at": "2026-10-25T11:30:00.000Z",
        }
        record.update(fields)
        self.items[announcement_id] = record
        return record

    def serve(self, stub, announcement_id):
        path = f"/api/announcements/{announcement_id}"
        stub.on("GET", path, lambda call: ok({"announcement": self.items[announcement_id]}))
        stub.on("PUT", path, lambda call: self.update(announcement_id, call))
        stub.on("PATCH", f"{path}/approval", lambda call: self.review(announcement_id, call))

    def list(self, call):
        wanted = call["query"].get("status", [None])[0]
        items = [a for a in self.items.values() if wanted is None or a["status"] == wanted]
        return ok({"announcements": items, "pagination": {"page": 1, "limit": 20, "total": len(items)}})

    def create(self, call):
        role = call["authorization"].split("-")[1]
        status = "approved" if role in ("admin", "principal") else "pending"
        record = self.add(**call["json"], status=status)
        return ok({"announcement": record, "auto_approved": status == "approved"})

    def update(self, announcement_id, call):
        self.items[announcement_id].update(call["json"], status="pending")
        return ok({"announcement": self.items[announcement_id], "status_changed": True, "requires_reapproval": True})

    def review(self, announcement_id, call):
        body = call["json"]
        record = self.items[announcement_id]
        if body["action"] == "approve":
            record["status"] = "approved"
        else:
            record.update(status="rejected", rejection_reason=body["rejection_reason"])
        return ok({"announcement": record})


def form(**overrides):
    values = dict(
        title="Annual day rehearsal",
        content="All participants in the auditorium.",
        target_roles=["teacher", "parent"],
        scope=AudienceScope.SCHOOL,
        publish_date=date(2026, 10, 20),
        publish_time=time(9, 0),
        expires_date=date(2026, 10, 22),
        expires_time=time(17, 0),
    )
    values.update(overrides)
    return AnnouncementForm(**values)


class AnnouncementWorkflowTestCase(unittest.TestCase):
    def setUp(self):
        self.api, self.stub = stub_client()
        self.store = FakeAnnouncementStore(self.stub)
        self.teacher = AnnouncementService(self.api, make_session(Role.TEACHER))
        self.admin = AnnouncementService(self.api, make_session(Role.ADMIN))

    def test_teacher_creates_then_admin_approves(self):
        outcome = self.teacher.create(form())

        self.assertEqual(outcome.record.status, ApprovalStatus.PENDING)
        self.assertEqual(outcome.notice.description, "Announcement created successfully and pending approval")
        self.assertEqual(outcome.redirect_to, "/announcements")
        sent = self.stub.calls_to("POST", "/api/announcements")[0]["json"]
        self.assertEqual(
            sorted(sent),
            sorted([
                "title", "content", "announcement_type", "priority", "target_roles",
                "target_classes", "publish_at", "expires_at", "is_featured",
            ]),
        )
        self.assertEqual(sent["target_classes"], [])

        announcement_id = outcome.record.id
        self.store.serve(self.stub, announcement_id)
        board = self.admin.board()
        self.assertEqual([item.record.id for item in board.pending], [announcement_id])
        self.assertEqual(board.pending[0].actions, [ReviewAction.APPROVE, ReviewAction.REJECT])

        approved = self.admin.approve(announcement_id)
        self.assertEqual(self.stub.calls_to("PATCH", f"/api/announcements/{announcement_id}/approval")[0]["json"], {"action": "approve"})
        self.assertEqual(approved.notice.description, "Announcement approved successfully")
        self.assertEqual(approved.board.pending, [])
        self.assertEqual(approved.board.overview[0].status_label, "Approved")
        self.assertEqual(approved.board.counts.approved, 1)

    def test_admin_creation_is_auto_approved(self):
        outcome = self.admin.create(form())
        self.assertEqual(outcome.record.status, ApprovalStatus.APPROVED)
        self.assertEqual(outcome.notice.description, "Announcement created and auto-approved successfully")
        self.assertEqual(outcome.redirect_to, "/admin/announcements")

    def test_validation_happens_before_any_request(self):
        with self.assertRaises(FormValidationError) as ctx:
            self.teacher.create(form(target_roles=[]))
        self.assertEqual(ctx.exception.message, "Please select at least one target role")
        self.assertEqual(self.stub.calls, [])

    def test_parent_cannot_create(self):
        parent = AnnouncementService(self.api, make_session(Role.PARENT))
        with self.assertRaises(PermissionDenied):
            parent.create(form())
        self.assertEqual(self.stub.calls, [])

    def test_editing_approved_announcement_resets_to_pending(self):
        record = self.store.add(title="Bus timings", status="approved")
        self.store.serve(self.stub, record["id"])

        outcome = self.admin.edit(record["id"], form(title="Bus timings (revised)"))
        self.assertEqual(outcome.record.status, ApprovalStatus.PENDING)
        self.assertEqual(outcome.notice.description, "Announcement updated successfully and moved to pending for re-approval")
        self.assertEqual(outcome.redirect_to, "/admin/announcements")

        board = self.admin.board()
        self.assertEqual([item.record.id for item in board.pending], [record["id"]])
        self.assertEqual(board.overview[0].status_label, "Pending")

    def test_teacher_cannot_edit_after_approval(self):
        record = self.store.add(status="approved", creator={"id": "teacher-1", "role": "teacher", "full_name": "T"})
        self.store.serve(self.stub, record["id"])
        with self.assertRaises(PermissionDenied):
            self.teacher.edit(record["id"], form())
        self.assertEqual(self.stub.calls_to("PUT", f"/api/announcements/{record['id']}"), [])

    def test_reject_sends_reason(self):
        record = self.store.add()
        self.store.serve(self.stub, record["id"])

        outcome = self.admin.reject(record["id"], "  Dates clash with exams ")
        body = self.stub.calls_to("PATCH", f"/api/announcements/{record['id']}/approval")[0]["json"]
        self.assertEqual(body, {"action": "reject", "rejection_reason": "Dates clash with exams"})
        self.assertEqual(outcome.record.status, ApprovalStatus.REJECTED)

    def test_reject_without_reason_makes_no_request(self):
        with self.assertRaises(FormValidationError):
            self.admin.reject("a1", " ")
        self.assertEqual(self.stub.calls, [])

    def test_teacher_cannot_review(self):
        with self.assertRaises(PermissionDenied):
            self.teacher.approve("a1")
        with self.assertRaises(PermissionDenied):
            self.teacher.board()
        self.assertEqual(self.stub.calls, [])

    def test_cannot_approve_already_approved(self):
        record = self.store.add(status="approved")
        self.store.serve(self.stub, record["id"])
        with self.assertRaises(TransitionNotAllowed):
            self.admin.approve(record["id"])

    def test_failed_refresh_keeps_the_result(self):
        record = self.store.add()
        self.store.serve(self.stub, record["id"])
        self.stub.on("GET", "/api/announcements", fail(500, "Database timeout"))

        outcome = self.admin.approve(record["id"])
        self.assertEqual(outcome.record.status, ApprovalStatus.APPROVED)
        self.assertIsNone(outcome.board)

    def test_api_failure_surfaces_message(self):
        self.stub.on("POST", "/api/announcements", fail(400, "Publish date is in the past"))
        with self.assertRaises(ApiError) as ctx:
            self.teacher.create(form())
        self.assertEqual(ctx.exception.message, "Publish date is in the past")


class TeacherFeedTestCase(unittest.TestCase):
    def test_feed_window_and_search(self):
        api, stub = stub_client()
        store = FakeAnnouncementStore(stub)
        items = [
            store.add(title="Staff meeting", status="approved"),
            store.add(title="Lab safety", status="approved"),
        ]
        stub.on(
            "GET",
            "/api/announcements/teacher/announcements",
            ok({"announcements": items, "pagination": {"page": 1, "limit": 20, "total": 2}}),
        )
        service = AnnouncementService(api, make_session(Role.TEACHER))

        page = service.teacher_feed(search="lab", now=datetime(2026, 10, 19, 6, 0, tzinfo=timezone.utc))

        self.assertEqual([a.title for a in page.announcements], ["Lab safety"])
        query = stub.calls[0]["query"]
        self.assertEqual(query["start_date"], ["2026-09-19T06:00:00.000Z"])
        self.assertEqual(query["limit"], ["20"])
