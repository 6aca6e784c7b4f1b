#!/usr/bin/env python3
"""
Component Builder - normalizes loosely-typed JSON into canonical records

Each logical field is read from an ordered tuple of alias keys declared in
the tables below (first present key wins, see normalizers.first_present),
then coerced to the record's type. Elements missing required data are
dropped; if a component ends up without its required data the builder
returns None and the caller keeps the JSON as text.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from .normalizers import (
    as_bool,
    as_float,
    as_int,
    as_non_empty_str,
    as_object_list,
    as_str,
    as_str_list,
    extract_meeting_url,
    first_present,
    normalize_attendees,
    parse_date,
    resolve_id,
)
from .schemas.components import (
    ButtonData,
    ButtonGroupData,
    ButtonLayout,
    ButtonStyle,
    CalendarEventData,
    CalendarScheduleData,
    CanonicalData,
    ChartData,
    ChartPointData,
    ChartType,
    CodeData,
    ComponentKind,
    ContactData,
    EmailDraftData,
    FileData,
    FormData,
    FormFieldData,
    FormFieldType,
    LinkPreviewData,
    LocationData,
    OptionItemData,
    OptionsData,
    TaskItemData,
    TaskPriority,
    TasksData,
)

logger = logging.getLogger(__name__)

RawObject = Dict[str, Any]

# === Alias tables ===

SCHEDULE_ALIASES = {
    "events": ("events", "items", "meetings"),
    "title": ("title", "name"),
    "date": ("date",),
}

SCHEDULE_EVENT_ALIASES = {
    "time": ("time", "start", "startTime"),
    "end_time": ("endTime", "end"),
    "title": ("title", "name", "subject"),
    "subtitle": ("subtitle", "type", "category"),
    "description": ("description",),
    "duration": ("duration",),
    "location": ("location", "place", "venue"),
    "account": ("account", "calendar", "calendarName"),
}

EVENT_ALIASES = {
    "title": ("title", "name", "subject"),
    "start_date": ("startDate", "start", "date"),
    "end_date": ("endDate", "end"),
    "time": ("time", "startTime"),
    "end_time": ("endTime", "end"),
    "subtitle": ("subtitle",),
    "description": ("description", "notes", "body"),
    "duration": ("duration",),
    "location": ("location", "place", "venue"),
    "account": ("account", "calendar", "calendarName"),
}

TASKS_ALIASES = {
    "items": ("items", "tasks", "todos"),
    "title": ("title", "name"),
}

TASK_ITEM_ALIASES = {
    "text": ("text", "title", "name", "task", "description"),
    "done": ("done", "completed", "checked"),
    "due": ("due", "dueDate", "deadline"),
    "priority": ("priority", "importance"),
}

CODE_ALIASES = {
    "code": ("code", "content", "snippet", "source"),
    "language": ("language", "lang"),
    "filename": ("filename", "file", "name"),
    "show_line_numbers": ("showLineNumbers", "lineNumbers"),
}

CONTACT_ALIASES = {
    "name": ("name", "fullName", "displayName"),
    "role": ("role", "title", "position", "company"),
    "email": ("email", "mail"),
    "phone": ("phone", "tel", "mobile"),
    "avatar": ("avatar", "image", "photo", "picture"),
}

LOCATION_ALIASES = {
    "lat": ("lat", "latitude"),
    "lng": ("lng", "longitude", "lon"),
    "name": ("name", "title", "place"),
    "address": ("address", "formattedAddress", "street"),
}

LINK_ALIASES = {
    "url": ("url",),
    "title": ("title", "name"),
    "description": ("description", "summary", "excerpt"),
    "image": ("image", "thumbnail", "preview", "og:image"),
    "domain": ("domain", "site", "host"),
}

CHART_ALIASES = {
    "data": ("data", "values", "points"),
    "chart_type": ("chartType", "type", "kind"),
    "title": ("title", "name"),
}

CHART_POINT_ALIASES = {
    "label": ("label", "name", "x"),
    "value": ("value", "count", "amount", "y"),
    "color": ("color", "colour"),
}

FILE_ALIASES = {
    "name": ("name", "filename", "file"),
    "size": ("size", "fileSize"),
    "url": ("url", "download", "link"),
    "mime_type": ("mimeType", "contentType", "fileType"),
}

FORM_ALIASES = {
    "fields": ("fields", "inputs"),
    "title": ("title", "name"),
    "submit_label": ("submitLabel", "submit", "action"),
}

FORM_FIELD_ALIASES = {
    "id": ("id", "name"),
    "label": ("label", "name", "title"),
    "field_type": ("type", "inputType"),
    "placeholder": ("placeholder", "hint"),
    "required": ("required",),
    "options": ("options", "choices"),
    "default_value": ("defaultValue", "default", "value"),
}

BUTTON_GROUP_ALIASES = {
    "buttons": ("buttons", "actions"),
    "layout": ("layout", "direction"),
}

BUTTON_ALIASES = {
    "label": ("label", "text", "title"),
    "action": ("action", "onClick", "id"),
    "style": ("style", "variant"),
    "icon": ("icon", "symbol"),
    "disabled": ("disabled",),
}

OPTIONS_ALIASES = {
    "options": ("options", "choices", "items"),
    "prompt": ("prompt", "question", "title"),
    "allow_multiple": ("allowMultiple", "multiple"),
}

OPTION_ITEM_ALIASES = {
    "id": ("id", "value"),
    "label": ("label", "text", "title", "name"),
    "description": ("description", "subtitle", "hint"),
    "icon": ("icon", "symbol"),
    "selected": ("selected", "checked"),
}

EMAIL_ALIASES = {
    "subject": ("subject", "title"),
    "body": ("body", "content", "message"),
    "is_html": ("isHTML", "html"),
}

# === Enumerated value tables ===

PRIORITY_VALUES = {
    **dict.fromkeys(("high", "urgent", "critical", "1"), TaskPriority.HIGH),
    **dict.fromkeys(("medium", "normal", "2"), TaskPriority.MEDIUM),
    **dict.fromkeys(("low", "3"), TaskPriority.LOW),
}

CHART_TYPE_VALUES = {
    **dict.fromkeys(("pie", "donut"), ChartType.PIE),
    "line": ChartType.LINE,
}

FIELD_TYPE_VALUES = {
    **dict.fromkeys(("textarea", "multiline", "long"), FormFieldType.TEXTAREA),
    **dict.fromkeys(("select", "dropdown", "picker"), FormFieldType.SELECT),
    **dict.fromkeys(("number", "integer", "decimal"), FormFieldType.NUMBER),
    **dict.fromkeys(("email", "mail"), FormFieldType.EMAIL),
    **dict.fromkeys(("phone", "tel"), FormFieldType.PHONE),
    **dict.fromkeys(("date", "datetime"), FormFieldType.DATE),
}

BUTTON_STYLE_VALUES = {
    **dict.fromkeys(("primary", "main", "default"), ButtonStyle.PRIMARY),
    **dict.fromkeys(("danger", "destructive", "delete", "red"), ButtonStyle.DANGER),
}

LAYOUT_VALUES = {
    **dict.fromkeys(("vertical", "column"), ButtonLayout.VERTICAL),
    "grid": ButtonLayout.GRID,
}


def _lookup(obj: RawObject, aliases: Dict[str, tuple], field: str) -> Any:
    return first_present(obj, aliases[field])


def _str_field(obj: RawObject, aliases: Dict[str, tuple], field: str) -> Optional[str]:
    return as_str(_lookup(obj, aliases, field))


def _enum_value(value: Any, table: Dict[str, Any], default: Any = None) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        return default
    return table.get(value.strip().lower(), default)


# === Builders ===

def _build_schedule_event(event: RawObject) -> CalendarEventData:
    duration = _lookup(event, SCHEDULE_EVENT_ALIASES, "duration")
    return CalendarEventData(
        id=resolve_id(event),
        time=_str_field(event, SCHEDULE_EVENT_ALIASES, "time"),
        end_time=_str_field(event, SCHEDULE_EVENT_ALIASES, "end_time"),
        title=_str_field(event, SCHEDULE_EVENT_ALIASES, "title") or "Untitled",
        subtitle=_str_field(event, SCHEDULE_EVENT_ALIASES, "subtitle"),
        description=_str_field(event, SCHEDULE_EVENT_ALIASES, "description"),
        duration=as_int(duration),
        duration_text=as_str(duration),
        meet_url=extract_meeting_url(event),
        location=_str_field(event, SCHEDULE_EVENT_ALIASES, "location"),
        account=_str_field(event, SCHEDULE_EVENT_ALIASES, "account"),
        attendees=normalize_attendees(event),
    )


def build_calendar_schedule(obj: RawObject) -> Optional[CalendarScheduleData]:
    events = [
        _build_schedule_event(event)
        for event in as_object_list(_lookup(obj, SCHEDULE_ALIASES, "events"))
    ]
    if not events:
        logger.info("BUILDER: calendarSchedule has no events")
        return None

    return CalendarScheduleData(
        id=resolve_id(obj),
        title=_str_field(obj, SCHEDULE_ALIASES, "title") or "Schedule",
        date=_str_field(obj, SCHEDULE_ALIASES, "date"),
        events=events,
    )


def build_calendar_event(obj: RawObject) -> Optional[CalendarEventData]:
    start_date = parse_date(_lookup(obj, EVENT_ALIASES, "start_date"))
    end_raw = _lookup(obj, EVENT_ALIASES, "end_date")
    end_date = parse_date(end_raw) if isinstance(end_raw, str) else start_date
    duration = _lookup(obj, EVENT_ALIASES, "duration")

    return CalendarEventData(
        id=resolve_id(obj),
        title=_str_field(obj, EVENT_ALIASES, "title") or "Event",
        time=_str_field(obj, EVENT_ALIASES, "time"),
        end_time=_str_field(obj, EVENT_ALIASES, "end_time"),
        subtitle=_str_field(obj, EVENT_ALIASES, "subtitle"),
        description=_str_field(obj, EVENT_ALIASES, "description"),
        duration=as_int(duration),
        duration_text=as_str(duration),
        meet_url=extract_meeting_url(obj),
        location=_str_field(obj, EVENT_ALIASES, "location"),
        account=_str_field(obj, EVENT_ALIASES, "account"),
        attendees=normalize_attendees(obj),
        start_date=start_date,
        end_date=end_date,
    )


def _build_task_item(item: RawObject) -> Optional[TaskItemData]:
    text = as_non_empty_str(_lookup(item, TASK_ITEM_ALIASES, "text"))
    if text is None:
        return None
    return TaskItemData(
        id=resolve_id(item),
        text=text,
        done=as_bool(_lookup(item, TASK_ITEM_ALIASES, "done")) or False,
        due=_str_field(item, TASK_ITEM_ALIASES, "due"),
        priority=_enum_value(_lookup(item, TASK_ITEM_ALIASES, "priority"), PRIORITY_VALUES),
    )


def build_tasks(obj: RawObject) -> Optional[TasksData]:
    items = [
        task for task in map(_build_task_item, as_object_list(_lookup(obj, TASKS_ALIASES, "items")))
        if task is not None
    ]
    if not items:
        logger.info("BUILDER: tasks has no usable items")
        return None

    return TasksData(
        id=resolve_id(obj),
        title=_str_field(obj, TASKS_ALIASES, "title") or "Tasks",
        items=items,
    )


def build_code(obj: RawObject) -> Optional[CodeData]:
    code = as_non_empty_str(_lookup(obj, CODE_ALIASES, "code"))
    if code is None:
        return None
    return CodeData(
        id=resolve_id(obj),
        code=code,
        language=_str_field(obj, CODE_ALIASES, "language"),
        filename=_str_field(obj, CODE_ALIASES, "filename"),
        show_line_numbers=as_bool(_lookup(obj, CODE_ALIASES, "show_line_numbers")) or False,
    )


def build_contact(obj: RawObject) -> Optional[ContactData]:
    return ContactData(
        id=resolve_id(obj),
        name=_str_field(obj, CONTACT_ALIASES, "name") or "Unknown",
        role=_str_field(obj, CONTACT_ALIASES, "role"),
        email=_str_field(obj, CONTACT_ALIASES, "email"),
        phone=_str_field(obj, CONTACT_ALIASES, "phone"),
        avatar=_str_field(obj, CONTACT_ALIASES, "avatar"),
    )


def build_location(obj: RawObject) -> Optional[LocationData]:
    coordinates = obj.get("coordinates")
    source = coordinates if isinstance(coordinates, dict) else obj

    lat = as_float(_lookup(source, LOCATION_ALIASES, "lat")) or 0.0
    lng = as_float(_lookup(source, LOCATION_ALIASES, "lng")) or 0.0
    if lat == 0 and lng == 0:
        logger.info("BUILDER: location has no usable coordinates")
        return None

    return LocationData(
        id=resolve_id(obj),
        lat=lat,
        lng=lng,
        name=_str_field(obj, LOCATION_ALIASES, "name"),
        address=_str_field(obj, LOCATION_ALIASES, "address"),
    )


def build_link_preview(obj: RawObject) -> Optional[LinkPreviewData]:
    url = _str_field(obj, LINK_ALIASES, "url")
    if url is None:
        return None
    return LinkPreviewData(
        id=resolve_id(obj),
        url=url,
        title=_str_field(obj, LINK_ALIASES, "title"),
        description=_str_field(obj, LINK_ALIASES, "description"),
        image=_str_field(obj, LINK_ALIASES, "image"),
        domain=_str_field(obj, LINK_ALIASES, "domain"),
    )


def _build_chart_point(point: RawObject) -> Optional[ChartPointData]:
    label = as_non_empty_str(_lookup(point, CHART_POINT_ALIASES, "label"))
    if label is None:
        return None
    return ChartPointData(
        label=label,
        value=as_float(_lookup(point, CHART_POINT_ALIASES, "value")) or 0.0,
        color=_str_field(point, CHART_POINT_ALIASES, "color"),
    )


def build_chart(obj: RawObject) -> Optional[ChartData]:
    points = [
        point for point in map(_build_chart_point, as_object_list(_lookup(obj, CHART_ALIASES, "data")))
        if point is not None
    ]
    if not points:
        logger.info("BUILDER: chart has no labelled data points")
        return None

    return ChartData(
        id=resolve_id(obj),
        chart_type=_enum_value(_lookup(obj, CHART_ALIASES, "chart_type"), CHART_TYPE_VALUES, ChartType.BAR),
        title=_str_field(obj, CHART_ALIASES, "title"),
        data=points,
    )


def build_file(obj: RawObject) -> Optional[FileData]:
    size = _lookup(obj, FILE_ALIASES, "size")
    if isinstance(size, (int, float)) and not isinstance(size, bool):
        size = str(size)

    mime_type = _str_field(obj, FILE_ALIASES, "mime_type")
    if mime_type is None:
        # "type" is usually the component tag; only a MIME-looking value counts
        tag = as_str(obj.get("type"))
        mime_type = tag if tag and "/" in tag else None

    return FileData(
        id=resolve_id(obj),
        name=_str_field(obj, FILE_ALIASES, "name") or "Unknown",
        size=as_str(size),
        url=_str_field(obj, FILE_ALIASES, "url"),
        mime_type=mime_type,
    )


def _field_options(value: Any) -> Optional[List[str]]:
    options = as_str_list(value)
    if options is not None:
        return options
    if isinstance(value, list):
        labels = [as_str(first_present(item, ("label", "value", "text"))) for item in as_object_list(value)]
        labels = [label for label in labels if label]
        return labels or None
    return None


def _build_form_field(field: RawObject) -> Optional[FormFieldData]:
    label = as_non_empty_str(_lookup(field, FORM_FIELD_ALIASES, "label"))
    if label is None:
        return None

    default_value = _lookup(field, FORM_FIELD_ALIASES, "default_value")
    if isinstance(default_value, (int, float)) and not isinstance(default_value, bool):
        default_value = str(default_value)

    return FormFieldData(
        id=resolve_id(field, FORM_FIELD_ALIASES["id"]),
        label=label,
        field_type=_enum_value(
            _lookup(field, FORM_FIELD_ALIASES, "field_type"), FIELD_TYPE_VALUES, FormFieldType.TEXT
        ),
        placeholder=_str_field(field, FORM_FIELD_ALIASES, "placeholder"),
        required=as_bool(_lookup(field, FORM_FIELD_ALIASES, "required")) or False,
        options=_field_options(_lookup(field, FORM_FIELD_ALIASES, "options")),
        default_value=as_str(default_value),
    )


def build_form(obj: RawObject) -> Optional[FormData]:
    fields = [
        field for field in map(_build_form_field, as_object_list(_lookup(obj, FORM_ALIASES, "fields")))
        if field is not None
    ]
    if not fields:
        logger.info("BUILDER: form has no labelled fields")
        return None

    return FormData(
        id=resolve_id(obj),
        title=_str_field(obj, FORM_ALIASES, "title"),
        fields=fields,
        submit_label=_str_field(obj, FORM_ALIASES, "submit_label") or "Submit",
    )


def _button_from(obj: RawObject, id_keys: tuple) -> Optional[ButtonData]:
    label = as_non_empty_str(_lookup(obj, BUTTON_ALIASES, "label"))
    if label is None:
        return None
    return ButtonData(
        id=resolve_id(obj, id_keys),
        label=label,
        action=_str_field(obj, BUTTON_ALIASES, "action") or label,
        style=_enum_value(_lookup(obj, BUTTON_ALIASES, "style"), BUTTON_STYLE_VALUES, ButtonStyle.SECONDARY),
        icon=_str_field(obj, BUTTON_ALIASES, "icon"),
        disabled=as_bool(_lookup(obj, BUTTON_ALIASES, "disabled")) or False,
    )


def build_button(obj: RawObject) -> Optional[ButtonData]:
    return _button_from(obj, ("id",))


def build_button_group(obj: RawObject) -> Optional[ButtonGroupData]:
    buttons = [
        button
        for button in (
            _button_from(entry, ("id", "action"))
            for entry in as_object_list(_lookup(obj, BUTTON_GROUP_ALIASES, "buttons"))
        )
        if button is not None
    ]
    if not buttons:
        logger.info("BUILDER: buttonGroup has no labelled buttons")
        return None

    return ButtonGroupData(
        id=resolve_id(obj),
        buttons=buttons,
        layout=_enum_value(
            _lookup(obj, BUTTON_GROUP_ALIASES, "layout"), LAYOUT_VALUES, ButtonLayout.HORIZONTAL
        ),
    )


def _build_option(option: Any) -> Optional[OptionItemData]:
    if isinstance(option, str):
        return OptionItemData(id=option, label=option) if option else None
    if not isinstance(option, dict):
        return None

    label = as_non_empty_str(_lookup(option, OPTION_ITEM_ALIASES, "label"))
    if label is None:
        return None
    return OptionItemData(
        id=resolve_id(option, OPTION_ITEM_ALIASES["id"]),
        label=label,
        description=_str_field(option, OPTION_ITEM_ALIASES, "description"),
        icon=_str_field(option, OPTION_ITEM_ALIASES, "icon"),
        selected=as_bool(_lookup(option, OPTION_ITEM_ALIASES, "selected")) or False,
    )


def build_options(obj: RawObject) -> Optional[OptionsData]:
    raw_options = _lookup(obj, OPTIONS_ALIASES, "options")
    if not isinstance(raw_options, list):
        raw_options = []
    options = [option for option in map(_build_option, raw_options) if option is not None]
    if not options:
        logger.info("BUILDER: options has no labelled choices")
        return None

    return OptionsData(
        id=resolve_id(obj),
        prompt=_str_field(obj, OPTIONS_ALIASES, "prompt"),
        options=options,
        allow_multiple=as_bool(_lookup(obj, OPTIONS_ALIASES, "allow_multiple")) or False,
    )


def _recipients(obj: RawObject) -> Optional[List[str]]:
    to = obj.get("to")
    recipients = as_str_list(to)
    if recipients is None and isinstance(to, str):
        recipients = [to]
    if recipients is None:
        recipients = as_str_list(obj.get("recipients"))
    return recipients or None


def build_email_draft(obj: RawObject) -> Optional[EmailDraftData]:
    to = _recipients(obj)
    if to is None:
        logger.info("BUILDER: emailDraft has no recipients")
        return None

    return EmailDraftData(
        id=resolve_id(obj),
        to=to,
        subject=_str_field(obj, EMAIL_ALIASES, "subject") or "",
        body=_str_field(obj, EMAIL_ALIASES, "body") or "",
        cc=as_str_list(obj.get("cc")),
        bcc=as_str_list(obj.get("bcc")),
        is_html=as_bool(_lookup(obj, EMAIL_ALIASES, "is_html")) or False,
    )


BUILDERS: Dict[ComponentKind, Callable[[RawObject], Optional[CanonicalData]]] = {
    ComponentKind.CALENDAR_SCHEDULE: build_calendar_schedule,
    ComponentKind.TASKS: build_tasks,
    ComponentKind.CODE: build_code,
    ComponentKind.CONTACT: build_contact,
    ComponentKind.LOCATION: build_location,
    ComponentKind.LINK_PREVIEW: build_link_preview,
    ComponentKind.CHART: build_chart,
    ComponentKind.FILE: build_file,
    ComponentKind.FORM: build_form,
    ComponentKind.BUTTON_GROUP: build_button_group,
    ComponentKind.BUTTON: build_button,
    ComponentKind.OPTIONS: build_options,
    ComponentKind.EMAIL_DRAFT: build_email_draft,
    ComponentKind.CALENDAR_EVENT: build_calendar_event,
}


class ComponentBuilder:
    """Dispatches a detected kind to its builder function."""

    def __init__(self, builders: Optional[Dict[ComponentKind, Callable]] = None):
        self.builders = dict(BUILDERS)
        if builders:
            self.builders.update(builders)

    def build(self, kind: ComponentKind, obj: RawObject) -> Optional[CanonicalData]:
        """
        Normalize ``obj`` into the canonical record for ``kind``.

        Returns:
            The record, or None if required data is missing. Never raises.
        """
        builder = self.builders.get(kind)
        if builder is None:
            logger.warning(f"BUILDER: No builder registered for {kind}")
            return None

        try:
            data = builder(obj)
        except (ValidationError, ValueError, TypeError) as e:
            logger.warning(f"BUILDER: {kind.value} normalization failed: {e}")
            return None

        if data is not None:
            logger.debug(f"BUILDER: Built {kind.value} {data.id}")
        return data
