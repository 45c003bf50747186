import unittest

from schooldesk.models.announcement import AudienceScope
from schooldesk.models.calendar_event import EventType
from schooldesk.services.audience import resolve_event_classes, resolve_target_classes


class AudienceTestCase(unittest.TestCase):
    def test_school_scope_clears_selection(self):
        self.assertEqual(resolve_target_classes(AudienceScope.SCHOOL, ["c1", "c2"]), [])

    def test_class_scope_drops_duplicates(self):
        self.assertEqual(resolve_target_classes(AudienceScope.CLASSES, ["c1", "c2", "c1"]), ["c1", "c2"])

    def test_class_scope_may_be_empty(self):
        self.assertEqual(resolve_target_classes(AudienceScope.CLASSES, []), [])

    def test_no_scope_keeps_selection(self):
        self.assertEqual(resolve_target_classes(None, ["c3"]), ["c3"])

    def test_single_class_event_sends_both_fields(self):
        self.assertEqual(
            resolve_event_classes(EventType.CLASS_SPECIFIC, ["c1"]),
            {"class_division_ids": ["c1"], "class_division_id": "c1"},
        )

    def test_multi_class_event(self):
        self.assertEqual(
            resolve_event_classes(EventType.CLASS_SPECIFIC, ["c1", "c2"]),
            {"class_division_ids": ["c1", "c2"]},
        )

    def test_school_wide_and_teacher_events_send_no_classes(self):
        self.assertEqual(resolve_event_classes(EventType.SCHOOL_WIDE, ["c1"]), {})
        self.assertEqual(resolve_event_classes(EventType.TEACHER_SPECIFIC, ["c1"]), {})
