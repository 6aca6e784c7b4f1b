"""
Component Type Detector

Decides which component kind a decoded JSON object represents.

Resolution order:
1. ``type`` tag equal to a kind's wire name
2. ``type`` tag (case-insensitive) found in TYPE_ALIASES
3. HEURISTIC_RULES, first match wins

The heuristic order is behavior: objects that match several rules (for
example both ``buttons`` and ``options``) resolve to whichever rule comes
first. Reordering HEURISTIC_RULES changes how producer output is rendered.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .normalizers import first_present, has_any, is_object_list
from .schemas.components import ComponentKind

logger = logging.getLogger(__name__)

RawObject = Dict[str, Any]

K = ComponentKind

TYPE_ALIASES: Dict[str, ComponentKind] = {
    **dict.fromkeys(("schedule", "agenda", "meetings", "calendarschedule"), K.CALENDAR_SCHEDULE),
    **dict.fromkeys(("todo", "todos", "checklist", "tasks"), K.TASKS),
    **dict.fromkeys(("snippet", "codeblock", "code"), K.CODE),
    **dict.fromkeys(("link", "url", "preview", "linkpreview"), K.LINK_PREVIEW),
    **dict.fromkeys(("person", "contact", "user"), K.CONTACT),
    **dict.fromkeys(("map", "place", "location", "address"), K.LOCATION),
    **dict.fromkeys(("graph", "chart", "stats"), K.CHART),
    **dict.fromkeys(("attachment", "document", "file"), K.FILE),
    **dict.fromkeys(("form", "input", "survey"), K.FORM),
    **dict.fromkeys(("buttons", "actions", "buttongroup"), K.BUTTON_GROUP),
    **dict.fromkeys(("button", "action", "cta"), K.BUTTON),
    **dict.fromkeys(("options", "choices", "select", "picker"), K.OPTIONS),
    **dict.fromkeys(("email", "emaildraft", "mail"), K.EMAIL_DRAFT),
    **dict.fromkeys(("event", "meeting", "calendarevent", "calendar"), K.CALENDAR_EVENT),
}

# Tags that may mean either a single event or a whole day's schedule
AMBIGUOUS_CALENDAR_TAGS = ("calendar",)


class DetectionSource(str, Enum):
    EXPLICIT = "explicit"
    ALIAS = "alias"
    HEURISTIC = "heuristic"


@dataclass(frozen=True)
class DetectionResult:
    kind: ComponentKind
    source: DetectionSource
    rule: str

    @property
    def tagged(self) -> bool:
        """True when the kind came from the producer's own type tag."""
        return self.source is not DetectionSource.HEURISTIC


@dataclass(frozen=True)
class HeuristicRule:
    """One entry of the heuristic chain: a named field-shape predicate."""
    name: str
    kind: ComponentKind
    matches: Callable[[RawObject], bool]


# === Heuristic predicates ===

def _has_digit(value: Any) -> bool:
    return isinstance(value, str) and any(char.isdigit() for char in value)


def _looks_like_schedule(obj: RawObject) -> bool:
    events = obj.get("events")
    return is_object_list(events) and has_any(events[0], ("time", "start", "startTime"))


def _looks_like_tasks(obj: RawObject) -> bool:
    items = first_present(obj, ("items", "tasks", "todos"))
    return is_object_list(items) and has_any(
        items[0], ("done", "completed", "checked", "status", "priority", "due")
    )


def _looks_like_code(obj: RawObject) -> bool:
    if has_any(obj, ("code",)):
        return True
    return has_any(obj, ("language",)) and has_any(obj, ("content", "snippet", "source"))


def _looks_like_contact(obj: RawObject) -> bool:
    return has_any(obj, ("name",)) and has_any(obj, ("email", "phone", "tel"))


def _looks_like_location(obj: RawObject) -> bool:
    return (
        has_any(obj, ("lat",)) and has_any(obj, ("lng",))
        or has_any(obj, ("latitude",)) and has_any(obj, ("longitude",))
        or isinstance(obj.get("coordinates"), dict)
    )


def _looks_like_link(obj: RawObject) -> bool:
    return has_any(obj, ("url",)) and has_any(obj, ("title", "description", "preview"))


def _looks_like_chart(obj: RawObject) -> bool:
    data = obj.get("data")
    return is_object_list(data) and has_any(data[0], ("value", "count", "amount"))


def _looks_like_file(obj: RawObject) -> bool:
    name = first_present(obj, ("name", "filename", "file"))
    if not isinstance(name, str):
        return False
    return "." in name or has_any(obj, ("size", "url", "download"))


def _looks_like_form(obj: RawObject) -> bool:
    return is_object_list(obj.get("fields"))


def _looks_like_button_group(obj: RawObject) -> bool:
    return is_object_list(obj.get("buttons"))


def _looks_like_options(obj: RawObject) -> bool:
    options = first_present(obj, ("options", "choices"))
    return isinstance(options, list) and bool(options) and isinstance(options[0], (dict, str))


def _looks_like_button(obj: RawObject) -> bool:
    return has_any(obj, ("label",)) and has_any(obj, ("action", "id", "onClick"))


def _looks_like_email(obj: RawObject) -> bool:
    return has_any(obj, ("to", "recipients")) and has_any(obj, ("subject",))


def _looks_like_event(obj: RawObject) -> bool:
    if not has_any(obj, ("title",)):
        return False
    has_date_and_time = isinstance(obj.get("date"), str) and isinstance(obj.get("time"), str)
    return _has_digit(obj.get("startDate")) or _has_digit(obj.get("start")) or has_date_and_time


HEURISTIC_RULES: List[HeuristicRule] = [
    HeuristicRule("events_with_times", K.CALENDAR_SCHEDULE, _looks_like_schedule),
    HeuristicRule("items_with_status", K.TASKS, _looks_like_tasks),
    HeuristicRule("code_or_language", K.CODE, _looks_like_code),
    HeuristicRule("name_with_email_or_phone", K.CONTACT, _looks_like_contact),
    HeuristicRule("coordinates", K.LOCATION, _looks_like_location),
    HeuristicRule("url_with_title", K.LINK_PREVIEW, _looks_like_link),
    HeuristicRule("data_with_values", K.CHART, _looks_like_chart),
    HeuristicRule("filename", K.FILE, _looks_like_file),
    HeuristicRule("fields", K.FORM, _looks_like_form),
    HeuristicRule("buttons", K.BUTTON_GROUP, _looks_like_button_group),
    HeuristicRule("options_or_choices", K.OPTIONS, _looks_like_options),
    HeuristicRule("label_with_action", K.BUTTON, _looks_like_button),
    HeuristicRule("recipients_with_subject", K.EMAIL_DRAFT, _looks_like_email),
    HeuristicRule("title_with_date", K.CALENDAR_EVENT, _looks_like_event),
]


class TypeDetector:
    """
    Maps a decoded JSON object to a ComponentKind.

    The rule list is injectable so alternative orderings can be evaluated
    in isolation; the default is HEURISTIC_RULES.
    """

    def __init__(self, rules: Optional[List[HeuristicRule]] = None):
        self.rules = list(rules) if rules is not None else HEURISTIC_RULES

    def detect(self, obj: RawObject) -> Optional[ComponentKind]:
        result = self.analyze(obj)
        return result.kind if result else None

    def analyze(self, obj: RawObject) -> Optional[DetectionResult]:
        """
        Detect the component kind along with how it was decided.

        Args:
            obj: Decoded JSON object

        Returns:
            DetectionResult, or None when nothing matches (caller keeps the
            span as text)
        """
        tag = obj.get("type")
        if isinstance(tag, str):
            tagged = self._from_type_tag(tag, obj)
            if tagged is not None:
                logger.debug(f"DETECTOR: '{tag}' tag -> {tagged.kind.value} ({tagged.source.value})")
                return tagged

        for rule in self.rules:
            if rule.matches(obj):
                logger.debug(f"DETECTOR: heuristic '{rule.name}' -> {rule.kind.value}")
                return DetectionResult(rule.kind, DetectionSource.HEURISTIC, rule.name)

        logger.info(f"DETECTOR: Could not detect component type for keys {sorted(obj.keys())}")
        return None

    def _from_type_tag(self, tag: str, obj: RawObject) -> Optional[DetectionResult]:
        try:
            return DetectionResult(ComponentKind(tag), DetectionSource.EXPLICIT, tag)
        except ValueError:
            pass

        lowered = tag.lower()
        kind = TYPE_ALIASES.get(lowered)
        if kind is None:
            return None

        if lowered in AMBIGUOUS_CALENDAR_TAGS and is_object_list(obj.get("events")):
            kind = K.CALENDAR_SCHEDULE
        return DetectionResult(kind, DetectionSource.ALIAS, lowered)
