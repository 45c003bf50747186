"""
Audience Targeting
Turns the dashboard's scope toggle and class picks into the class fields the
school API stores.
"""
from typing import Any, Dict, Iterable, List, Optional

from schooldesk.models.announcement import AudienceScope
from schooldesk.models.calendar_event import EventType


def _unique(ids: Iterable[str]) -> List[str]:
    seen = set()
    result = []
    for class_id in ids:
        if class_id and class_id not in seen:
            seen.add(class_id)
            result.append(class_id)
    return result


def resolve_target_classes(scope: Optional[AudienceScope], selected: Iterable[str]) -> List[str]:
    """
    School scope always clears the selection, whatever was picked before.
    Class scope keeps the picks, which may be empty ("all classes").
    No scope means the form has no toggle; the picks go through unchanged.
    """
    if scope == AudienceScope.SCHOOL:
        return []
    return _unique(selected)


def resolve_event_classes(event_type: EventType, selected: Iterable[str]) -> Dict[str, Any]:
    """Class fields of an event payload for the given event type"""
    if event_type != EventType.CLASS_SPECIFIC:
        return {}

    class_ids = _unique(selected)
    fields: Dict[str, Any] = {"class_division_ids": class_ids}
    if len(class_ids) == 1:
        # older API versions only read the single-class field
        fields["class_division_id"] = class_ids[0]
    return fields
