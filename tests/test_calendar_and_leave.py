"""
Calendar event and leave request workflow tests
"""
import unittest
from datetime import date

from schooldesk.errors import FormValidationError, PermissionDenied
from schooldesk.models.calendar_event import CalendarEventForm, EventType
from schooldesk.models.common import ApprovalStatus
from schooldesk.models.leave_request import LeaveRequestCreate
from schooldesk.models.user import Role
from schooldesk.services.calendar import CalendarService
from schooldesk.services.filters import DatePreset
from schooldesk.services.leave_requests import ACCESS_DENIED_MESSAGE, LeaveRequestService

from stub_api import make_session, ok, stub_client


def event(id, status="pending", event_date="2026-11-05T00:00:00Z"):
    return {
        "id": id,
        "title": f"Event {id}",
        "event_date": event_date,
        "event_type": "school_wide",
        "status": status,
        "created_by": "teacher-1",
    }


class CalendarTestCase(unittest.TestCase):
    def setUp(self):
        self.api, self.stub = stub_client()
        self.events = {"e1": event("e1"), "e2": event("e2", status="approved")}

        def list_events(call):
            wanted = call["query"].get("status", [None])[0]
            return ok({"events": [e for e in self.events.values() if wanted is None or e["status"] == wanted]})

        self.stub.on("GET", "/api/calendar/events", list_events)
        self.stub.on("GET", "/api/calendar/events/e1", lambda call: ok({"event": self.events["e1"]}))

    def test_list_uses_ist_and_preset_window(self):
        service = CalendarService(self.api, make_session(Role.TEACHER))
        service.by_preset(DatePreset.THIS_WEEK, today=date(2026, 10, 21))

        query = self.stub.calls[0]["query"]
        self.assertEqual(query["use_ist"], ["true"])
        self.assertEqual(query["start_date"], ["2026-10-19"])
        self.assertEqual(query["end_date"], ["2026-10-25"])

    def test_teacher_event_is_pending(self):
        self.stub.on("POST", "/api/calendar/events", lambda call: ok({"event": dict(event("e3"), title=call["json"]["title"])}))
        service = CalendarService(self.api, make_session(Role.TEACHER))
        form = CalendarEventForm(
            title="Science fair",
            description="Class projects",
            event_date=date(2026, 11, 5),
            event_type=EventType.CLASS_SPECIFIC,
            class_division_ids=["c1", "c2"],
        )
        outcome = service.create(form)

        self.assertEqual(outcome.record.status, ApprovalStatus.PENDING)
        self.assertEqual(outcome.notice.description, "Event created successfully and sent for approval")
        self.assertEqual(self.stub.calls[0]["json"]["class_division_ids"], ["c1", "c2"])

    def test_approve_then_refetch(self):
        def approve(call):
            self.events["e1"]["status"] = "approved"
            return ok({"event": self.events["e1"]})

        self.stub.on("POST", "/api/calendar/events/e1/approve", approve)
        service = CalendarService(self.api, make_session(Role.PRINCIPAL))

        outcome = service.approve("e1")
        self.assertEqual(outcome.notice.title, "Event Approved")
        self.assertEqual(outcome.board.pending, [])
        self.assertEqual(outcome.board.counts.approved, 2)

    def test_reject_sends_reason(self):
        self.stub.on("POST", "/api/calendar/events/e1/reject", lambda call: ok({"event": dict(self.events["e1"], status="rejected")}))
        service = CalendarService(self.api, make_session(Role.ADMIN))

        service.reject("e1", "Clashes with exams")
        self.assertEqual(
            self.stub.calls_to("POST", "/api/calendar/events/e1/reject")[0]["json"],
            {"rejection_reason": "Clashes with exams"},
        )

    def test_board_sorts_mixed_offsets(self):
        self.events["e3"] = event("e3", event_date="2026-11-07T09:00:00")
        self.events["e4"] = event("e4", event_date="2026-11-06T10:00:00+05:30")
        board = CalendarService(self.api, make_session(Role.ADMIN)).board()

        self.assertEqual([item.record.id for item in board.pending], ["e3", "e4", "e1"])

    def test_teacher_cannot_see_board(self):
        with self.assertRaises(PermissionDenied):
            CalendarService(self.api, make_session(Role.TEACHER)).board()


def leave_request(id, status="pending"):
    return {
        "id": id,
        "student_id": "s1",
        "start_date": "2026-10-20",
        "end_date": "2026-10-22",
        "reason": "Fever",
        "status": status,
        "student": {
            "id": "s1",
            "full_name": "Riya Sharma",
            "student_academic_records": [
                {"class_division": {"division": "A", "level": {"name": "Grade 5", "sequence_number": 5}}}
            ],
        },
    }


class LeaveRequestTestCase(unittest.TestCase):
    def setUp(self):
        self.api, self.stub = stub_client()
        self.stub.on(
            "GET",
            "/api/leave-requests",
            ok({"leave_requests": [leave_request("l1"), leave_request("l2", "approved"), leave_request("l3", "rejected")]}),
        )

    def test_list_counts_and_classes(self):
        service = LeaveRequestService(self.api, make_session(Role.TEACHER))
        result = service.list(search="riya")

        self.assertEqual((result.total, result.pending, result.approved, result.rejected), (3, 1, 1, 1))
        self.assertEqual(result.classes, ["Class 5 Division A"])
        self.assertEqual(len(result.leave_requests), 3)

    def test_parent_cannot_review(self):
        service = LeaveRequestService(self.api, make_session(Role.PARENT))
        with self.assertRaises(PermissionDenied) as ctx:
            service.list()
        self.assertEqual(ctx.exception.message, ACCESS_DENIED_MESSAGE)

    def test_parent_submits(self):
        self.stub.on("POST", "/api/leave-requests", lambda call: ok({"leave_request": leave_request("l9")}))
        service = LeaveRequestService(self.api, make_session(Role.PARENT))

        outcome = service.create(
            LeaveRequestCreate(student_id="s1", start_date=date(2026, 10, 20), end_date=date(2026, 10, 22), reason="Fever")
        )
        self.assertEqual(outcome.record.id, "l9")

    def test_teacher_cannot_submit(self):
        service = LeaveRequestService(self.api, make_session(Role.TEACHER))
        with self.assertRaises(PermissionDenied):
            service.create(LeaveRequestCreate(student_id="s1", start_date=date(2026, 10, 20), end_date=date(2026, 10, 20), reason="x"))

    def test_reject_puts_status(self):
        self.stub.on("GET", "/api/leave-requests/l1", ok({"leave_request": leave_request("l1")}))
        self.stub.on("PUT", "/api/leave-requests/l1/status", ok({"leave_request": leave_request("l1", "rejected")}))
        service = LeaveRequestService(self.api, make_session(Role.TEACHER))

        outcome = service.reject("l1", "Exams that week")
        self.assertEqual(
            self.stub.calls_to("PUT", "/api/leave-requests/l1/status")[0]["json"],
            {"status": "rejected", "rejection_reason": "Exams that week"},
        )
        self.assertEqual(outcome.notice.description, "Leave request rejected successfully")

    def test_reject_requires_reason(self):
        service = LeaveRequestService(self.api, make_session(Role.ADMIN))
        with self.assertRaises(FormValidationError):
            service.reject("l1", "")
        self.assertEqual(self.stub.calls, [])
