#!/usr/bin/env python3
"""
Test suite for TypeDetector: type tags, alias table, calendar ambiguity
and the ordered heuristic chain.
"""

import pytest

from content_engine.schemas import ComponentKind
from content_engine.type_detector import (
    DetectionSource,
    HEURISTIC_RULES,
    TYPE_ALIASES,
    TypeDetector,
)


@pytest.fixture
def detector():
    return TypeDetector()


class TestTypeTags:
    """Explicit and aliased ``type`` tags."""

    def test_exact_wire_name(self, detector):
        result = detector.analyze({"type": "linkPreview", "url": "https://example.com"})

        assert result.kind == ComponentKind.LINK_PREVIEW
        assert result.source == DetectionSource.EXPLICIT
        assert result.tagged

    @pytest.mark.parametrize("tag,expected", [
        ("TODO", ComponentKind.TASKS),
        ("Checklist", ComponentKind.TASKS),
        ("agenda", ComponentKind.CALENDAR_SCHEDULE),
        ("snippet", ComponentKind.CODE),
        ("person", ComponentKind.CONTACT),
        ("map", ComponentKind.LOCATION),
        ("graph", ComponentKind.CHART),
        ("attachment", ComponentKind.FILE),
        ("survey", ComponentKind.FORM),
        ("actions", ComponentKind.BUTTON_GROUP),
        ("cta", ComponentKind.BUTTON),
        ("picker", ComponentKind.OPTIONS),
        ("mail", ComponentKind.EMAIL_DRAFT),
        ("meeting", ComponentKind.CALENDAR_EVENT),
    ])
    def test_alias_is_case_insensitive(self, detector, tag, expected):
        result = detector.analyze({"type": tag})

        assert result.kind == expected
        assert result.source == DetectionSource.ALIAS

    def test_every_kind_has_an_alias(self):
        assert set(TYPE_ALIASES.values()) == set(ComponentKind)

    def test_tag_wins_over_heuristics(self, detector):
        """A tasks tag is not reclassified even when the fields look like code."""
        obj = {"type": "tasks", "code": "print(1)", "language": "python"}
        assert detector.detect(obj) == ComponentKind.TASKS

    def test_unknown_tag_falls_back_to_heuristics(self, detector):
        result = detector.analyze({"type": "widget", "lat": 1.5, "lng": 2.5})

        assert result.kind == ComponentKind.LOCATION
        assert result.source == DetectionSource.HEURISTIC
        assert not result.tagged

    def test_non_string_tag_ignored(self, detector):
        assert detector.detect({"type": 3, "code": "x"}) == ComponentKind.CODE


class TestCalendarAmbiguity:
    """Schedule versus single event."""

    def test_events_list_without_tag_is_schedule(self, detector):
        obj = {"title": "X", "events": [{"time": "9am"}]}
        assert detector.detect(obj) == ComponentKind.CALENDAR_SCHEDULE

    def test_calendar_tag_with_events_is_schedule(self, detector):
        obj = {"type": "calendar", "events": [{"title": "Standup"}]}
        assert detector.detect(obj) == ComponentKind.CALENDAR_SCHEDULE

    def test_calendar_tag_without_events_is_event(self, detector):
        assert detector.detect({"type": "calendar", "title": "Review"}) == ComponentKind.CALENDAR_EVENT

    def test_calendar_tag_with_empty_events_is_event(self, detector):
        assert detector.detect({"type": "calendar", "events": []}) == ComponentKind.CALENDAR_EVENT

    def test_event_needs_a_date_with_digits(self, detector):
        assert detector.detect({"title": "Sync", "startDate": "2024-05-01T10:00"}) == ComponentKind.CALENDAR_EVENT
        assert detector.detect({"title": "Sync", "date": "Friday", "time": "noon"}) == ComponentKind.CALENDAR_EVENT
        assert detector.detect({"title": "Sync", "startDate": "tomorrow"}) is None


class TestHeuristicOrder:
    """First matching rule wins, in declaration order."""

    def test_rule_order(self):
        assert [rule.kind for rule in HEURISTIC_RULES] == [
            ComponentKind.CALENDAR_SCHEDULE,
            ComponentKind.TASKS,
            ComponentKind.CODE,
            ComponentKind.CONTACT,
            ComponentKind.LOCATION,
            ComponentKind.LINK_PREVIEW,
            ComponentKind.CHART,
            ComponentKind.FILE,
            ComponentKind.FORM,
            ComponentKind.BUTTON_GROUP,
            ComponentKind.OPTIONS,
            ComponentKind.BUTTON,
            ComponentKind.EMAIL_DRAFT,
            ComponentKind.CALENDAR_EVENT,
        ]

    def test_buttons_before_options(self, detector):
        obj = {"buttons": [{"label": "Yes"}], "options": ["a", "b"]}
        assert detector.detect(obj) == ComponentKind.BUTTON_GROUP

    def test_contact_before_file(self, detector):
        assert detector.detect({"name": "report.pdf", "email": "a@b.com"}) == ComponentKind.CONTACT

    def test_code_before_link(self, detector):
        obj = {"code": "x = 1", "url": "https://example.com", "title": "Example"}
        assert detector.detect(obj) == ComponentKind.CODE

    @pytest.mark.parametrize("obj,expected", [
        ({"items": [{"text": "a", "done": False}]}, ComponentKind.TASKS),
        ({"language": "go", "source": "package main"}, ComponentKind.CODE),
        ({"latitude": 1, "longitude": 2}, ComponentKind.LOCATION),
        ({"coordinates": {"lat": 1, "lng": 2}}, ComponentKind.LOCATION),
        ({"url": "https://a.io", "description": "A"}, ComponentKind.LINK_PREVIEW),
        ({"data": [{"label": "Q1", "count": 3}]}, ComponentKind.CHART),
        ({"filename": "notes.txt"}, ComponentKind.FILE),
        ({"name": "archive", "size": 1024}, ComponentKind.FILE),
        ({"fields": [{"label": "Name"}]}, ComponentKind.FORM),
        ({"choices": ["red", "blue"]}, ComponentKind.OPTIONS),
        ({"label": "Go", "onClick": "go"}, ComponentKind.BUTTON),
        ({"recipients": ["a@b.com"], "subject": "Hi"}, ComponentKind.EMAIL_DRAFT),
    ])
    def test_heuristics(self, detector, obj, expected):
        assert detector.detect(obj) == expected

    def test_null_values_count_as_absent(self, detector):
        assert detector.detect({"name": "Ann", "email": None}) is None

    def test_coordinates_must_be_an_object(self, detector):
        assert detector.detect({"coordinates": [1, 2]}) is None

    def test_nothing_matches(self, detector):
        assert detector.analyze({"foo": 1}) is None

    def test_injected_rules(self):
        assert TypeDetector(rules=[]).detect({"code": "x"}) is None

    def test_rule_name_reported(self, detector):
        assert detector.analyze({"code": "x"}).rule == "code_or_language"
