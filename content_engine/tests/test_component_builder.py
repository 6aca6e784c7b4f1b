#!/usr/bin/env python3
"""
Test suite for ComponentBuilder and the normalization helpers it uses.

Covers alias lookups, coercion of loosely typed values, meeting URL and
attendee extraction, date parsing, and the drop/fail rules per kind.
"""

import pytest
from datetime import datetime, timezone

from content_engine.component_builder import ComponentBuilder, build_location
from content_engine.normalizers import (
    as_float,
    extract_meeting_url,
    first_present,
    normalize_attendees,
    parse_date,
    resolve_id,
)
from content_engine.schemas import (
    ButtonLayout,
    ButtonStyle,
    ChartType,
    ComponentKind,
    FormFieldType,
    TaskPriority,
)


@pytest.fixture
def builder():
    return ComponentBuilder()


class TestNormalizers:
    """Shared lookup and coercion helpers."""

    def test_first_present_skips_null(self):
        assert first_present({"a": None, "b": 2}, ("a", "b")) == 2
        assert first_present({}, ("a",), default="x") == "x"

    def test_first_present_does_not_skip_wrong_type(self):
        assert first_present({"a": 5, "b": "text"}, ("a", "b")) == 5

    @pytest.mark.parametrize("value,expected", [
        (37.77, 37.77),
        (3, 3.0),
        ("-122.41", -122.41),
        (" 1.5 ", 1.5),
        (True, None),
        ("abc", None),
        ("nan", None),
        (None, None),
    ])
    def test_as_float(self, value, expected):
        assert as_float(value) == expected

    def test_resolve_id(self):
        assert resolve_id({"id": "evt-1"}) == "evt-1"
        assert resolve_id({"id": 42}) == "42"

        generated = resolve_id({})
        assert len(generated) == 32
        assert generated != resolve_id({})


class TestDates:
    """Loose date parsing."""

    @pytest.mark.parametrize("text,expected", [
        ("2024-03-05T14:30:00", datetime(2024, 3, 5, 14, 30)),
        ("2024-03-05 14:30", datetime(2024, 3, 5, 14, 30)),
        ("2024-03-05", datetime(2024, 3, 5)),
        ("03/05/2024", datetime(2024, 3, 5)),
        ("25/12/2024", datetime(2024, 12, 25)),
        ("2024-03-05T14:30:00+00:00", datetime(2024, 3, 5, 14, 30, tzinfo=timezone.utc)),
    ])
    def test_supported_formats(self, text, expected):
        assert parse_date(text) == expected

    @pytest.mark.parametrize("value", ["tomorrow", "", 20240305, None])
    def test_unparseable_is_none(self, value):
        assert parse_date(value) is None


class TestMeetingUrl:
    """Video-call link extraction."""

    def test_known_key(self):
        assert extract_meeting_url({"hangoutLink": "https://meet.google.com/abc"}) == "https://meet.google.com/abc"

    def test_zoom_key_needs_zoom_url(self):
        assert extract_meeting_url({"zoom": "https://example.com/x"}) is None
        assert extract_meeting_url({"zoom": "https://zoom.us/j/1"}) == "https://zoom.us/j/1"

    def test_conference_data_video_entry(self):
        event = {"conferenceData": {"entryPoints": [
            {"entryPointType": "phone", "uri": "tel:+100"},
            {"entryPointType": "video", "uri": "https://meet.google.com/xyz"},
        ]}}
        assert extract_meeting_url(event) == "https://meet.google.com/xyz"

    def test_generic_url_must_be_http(self):
        assert extract_meeting_url({"link": "https://example.com/call"}) == "https://example.com/call"
        assert extract_meeting_url({"url": "room 4"}) is None


class TestAttendees:
    """Attendee display strings."""

    def test_string_list(self):
        assert normalize_attendees({"attendees": ["Ann", "Bob"]}) == ["Ann", "Bob"]

    def test_object_list(self):
        event = {"participants": [
            {"name": "Ann", "email": "ann@x.com"},
            {"email": "bob@x.com"},
            {"displayName": "cat@x.com", "email": "cat@x.com"},
            {"emailAddress": "dan@x.com"},
            {"role": "optional"},
        ]}
        assert normalize_attendees(event) == ["Ann (ann@x.com)", "bob@x.com", "cat@x.com", "dan@x.com"]

    def test_comma_separated(self):
        assert normalize_attendees({"guests": "Ann, Bob ,Cat"}) == ["Ann", "Bob", "Cat"]

    def test_missing(self):
        assert normalize_attendees({}) == []


class TestCalendarBuilders:
    """calendarSchedule and calendarEvent."""

    def test_schedule(self, builder):
        data = builder.build(ComponentKind.CALENDAR_SCHEDULE, {
            "date": "2024-03-05",
            "events": [
                {"time": "9:00", "title": "Standup", "duration": 15, "meetingUrl": "https://meet.example/1"},
                {"start": "13:00", "name": "Lunch", "attendees": "Ann, Bob"},
            ],
        })

        assert data.title == "Schedule"
        assert data.date == "2024-03-05"
        assert [event.title for event in data.events] == ["Standup", "Lunch"]
        assert data.events[0].duration == 15
        assert data.events[0].meet_url == "https://meet.example/1"
        assert data.events[1].time == "13:00"
        assert data.events[1].attendees == ["Ann", "Bob"]

    def test_schedule_event_defaults(self, builder):
        data = builder.build(ComponentKind.CALENDAR_SCHEDULE, {"events": [{"location": "Room 1"}]})

        event = data.events[0]
        assert event.title == "Untitled"
        assert event.time is None

    def test_schedule_duration_text(self, builder):
        data = builder.build(ComponentKind.CALENDAR_SCHEDULE, {"events": [{"duration": "1h"}]})

        assert data.events[0].duration is None
        assert data.events[0].duration_text == "1h"

    def test_schedule_without_events_fails(self, builder):
        assert builder.build(ComponentKind.CALENDAR_SCHEDULE, {"events": []}) is None

    def test_event_dates(self, builder):
        data = builder.build(ComponentKind.CALENDAR_EVENT, {
            "title": "Review",
            "start": "2024-03-05 14:30",
            "end": "2024-03-05 15:30",
            "notes": "Bring slides",
        })

        assert data.start_date == datetime(2024, 3, 5, 14, 30)
        assert data.end_date == datetime(2024, 3, 5, 15, 30)
        assert data.description == "Bring slides"

    def test_event_end_defaults_to_start(self, builder):
        data = builder.build(ComponentKind.CALENDAR_EVENT, {"title": "Review", "startDate": "2024-03-05"})
        assert data.end_date == data.start_date == datetime(2024, 3, 5)

    def test_event_unparseable_date(self, builder):
        data = builder.build(ComponentKind.CALENDAR_EVENT, {"startDate": "soon"})

        assert data.title == "Event"
        assert data.start_date is None
        assert data.end_date is None


class TestTasksBuilder:
    """tasks normalization."""

    def test_aliases_and_dropping(self, builder):
        data = builder.build(ComponentKind.TASKS, {
            "todos": [
                {"task": "Buy milk", "completed": True, "priority": "urgent", "dueDate": "Fri"},
                {"done": False},
                {"title": "Call Bob", "priority": 2},
            ],
        })

        assert data.title == "Tasks"
        assert [item.text for item in data.items] == ["Buy milk", "Call Bob"]
        assert data.items[0].done is True
        assert data.items[0].priority == TaskPriority.HIGH
        assert data.items[0].due == "Fri"
        assert data.items[1].priority == TaskPriority.MEDIUM
        assert data.items[1].done is False

    def test_no_usable_items(self, builder):
        assert builder.build(ComponentKind.TASKS, {"items": [{"done": True}]}) is None
        assert builder.build(ComponentKind.TASKS, {}) is None


class TestCardBuilders:
    """code, contact, location, linkPreview, file."""

    def test_code(self, builder):
        data = builder.build(ComponentKind.CODE, {"snippet": "print(1)", "lang": "python", "lineNumbers": True})

        assert data.code == "print(1)"
        assert data.language == "python"
        assert data.show_line_numbers is True

    def test_code_without_code_fails(self, builder):
        assert builder.build(ComponentKind.CODE, {"language": "python"}) is None

    def test_contact_defaults(self, builder):
        data = builder.build(ComponentKind.CONTACT, {"tel": "555-0100", "company": "Acme"})

        assert data.name == "Unknown"
        assert data.phone == "555-0100"
        assert data.role == "Acme"

    def test_bare_location(self, builder):
        data = builder.build(ComponentKind.LOCATION, {"lat": 37.77, "lng": -122.41})

        assert data.lat == 37.77
        assert data.lng == -122.41
        assert data.name is None
        assert data.address is None

    def test_location_nested_coordinates(self):
        data = build_location({"coordinates": {"latitude": "48.85", "lon": 2.35}, "place": "Paris"})

        assert data.lat == 48.85
        assert data.lng == 2.35
        assert data.name == "Paris"

    def test_location_at_origin_fails(self, builder):
        assert builder.build(ComponentKind.LOCATION, {"lat": 0, "lng": 0}) is None
        assert builder.build(ComponentKind.LOCATION, {"name": "Nowhere"}) is None

    def test_link_preview(self, builder):
        data = builder.build(ComponentKind.LINK_PREVIEW, {"url": "https://a.io", "summary": "A site"})

        assert data.url == "https://a.io"
        assert data.description == "A site"

    def test_link_preview_needs_string_url(self, builder):
        assert builder.build(ComponentKind.LINK_PREVIEW, {"url": 5, "title": "x"}) is None

    def test_file(self, builder):
        data = builder.build(ComponentKind.FILE, {"type": "file", "filename": "q1.pdf", "size": 2048})

        assert data.name == "q1.pdf"
        assert data.size == "2048"
        assert data.mime_type is None

    def test_file_mime_from_type(self, builder):
        data = builder.build(ComponentKind.FILE, {"name": "a.png", "type": "image/png"})
        assert data.mime_type == "image/png"


class TestChartBuilder:
    """chart normalization."""

    def test_points_and_type(self, builder):
        data = builder.build(ComponentKind.CHART, {
            "chartType": "Donut",
            "values": [{"name": "A", "amount": "3.5"}, {"value": 2}, {"label": "B", "y": True}],
        })

        assert data.chart_type == ChartType.PIE
        assert [(p.label, p.value) for p in data.data] == [("A", 3.5), ("B", 0.0)]

    def test_unknown_chart_type_is_bar(self, builder):
        data = builder.build(ComponentKind.CHART, {"type": "chart", "data": [{"label": "A", "value": 1}]})
        assert data.chart_type == ChartType.BAR

    def test_no_labelled_points_fails(self, builder):
        assert builder.build(ComponentKind.CHART, {"data": [{"value": 1}]}) is None


class TestInputBuilders:
    """form, button, buttonGroup, options, emailDraft."""

    def test_form(self, builder):
        data = builder.build(ComponentKind.FORM, {
            "title": "RSVP",
            "inputs": [
                {"name": "guests", "label": "Guests", "type": "integer", "default": 2},
                {"label": "Meal", "type": "dropdown", "choices": [{"label": "Fish"}, {"value": "Veg"}]},
                {"placeholder": "no label"},
            ],
            "submit": "Send",
        })

        assert [field.label for field in data.fields] == ["Guests", "Meal"]
        assert data.fields[0].id == "guests"
        assert data.fields[0].field_type == FormFieldType.NUMBER
        assert data.fields[0].default_value == "2"
        assert data.fields[1].field_type == FormFieldType.SELECT
        assert data.fields[1].options == ["Fish", "Veg"]
        assert data.submit_label == "Send"

    def test_button(self, builder):
        data = builder.build(ComponentKind.BUTTON, {"text": "Delete", "variant": "destructive"})

        assert data.label == "Delete"
        assert data.action == "Delete"
        assert data.style == ButtonStyle.DANGER

    def test_button_without_label_fails(self, builder):
        assert builder.build(ComponentKind.BUTTON, {"action": "go"}) is None

    def test_button_group(self, builder):
        data = builder.build(ComponentKind.BUTTON_GROUP, {
            "layout": "column",
            "buttons": [
                {"label": "Yes", "action": "confirm", "style": "default"},
                {"label": "No", "action": "reject"},
                {"action": "orphan"},
            ],
        })

        assert data.layout == ButtonLayout.VERTICAL
        assert [button.id for button in data.buttons] == ["confirm", "reject"]
        assert data.buttons[0].style == ButtonStyle.PRIMARY
        assert data.buttons[1].style == ButtonStyle.SECONDARY

    def test_options_from_strings_and_objects(self, builder):
        data = builder.build(ComponentKind.OPTIONS, {
            "question": "Pick a slot",
            "multiple": "yes",
            "choices": ["9am", {"value": "2pm", "text": "2:00 PM", "checked": True}, {"id": "x"}],
        })

        assert data.prompt == "Pick a slot"
        assert data.allow_multiple is True
        assert [(o.id, o.label, o.selected) for o in data.options] == [
            ("9am", "9am", False),
            ("2pm", "2:00 PM", True),
        ]

    def test_email_draft_recipient_shapes(self, builder):
        assert builder.build(ComponentKind.EMAIL_DRAFT, {"to": "a@b.com"}).to == ["a@b.com"]
        assert builder.build(ComponentKind.EMAIL_DRAFT, {"recipients": ["c@d.com"]}).to == ["c@d.com"]

        data = builder.build(ComponentKind.EMAIL_DRAFT, {
            "to": ["a@b.com"], "subject": "Hi", "message": "Body", "cc": ["e@f.com"], "html": True,
        })
        assert data.subject == "Hi"
        assert data.body == "Body"
        assert data.cc == ["e@f.com"]
        assert data.is_html is True

    def test_email_without_recipients_fails(self, builder):
        assert builder.build(ComponentKind.EMAIL_DRAFT, {"to": [], "subject": "Hi"}) is None


class TestBuilderErrors:
    """The dispatcher never raises."""

    def test_builder_exception_is_contained(self):
        def explode(obj):
            raise ValueError("boom")

        builder = ComponentBuilder(builders={ComponentKind.CODE: explode})
        assert builder.build(ComponentKind.CODE, {"code": "x"}) is None
