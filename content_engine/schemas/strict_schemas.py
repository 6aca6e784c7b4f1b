"""
Strict Component Schemas

Exact-field-name schemas for producers that follow the documented component
format. These are only consulted when an object carries an explicit type tag
but the alias builders could not normalize it. No aliasing happens here:
field names must match, dates must be ISO-8601, and a component whose
schema allows a missing id gets a prefixed generated one.

Each schema converts to the same canonical record the builders produce.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .components import (
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


def _prefixed_id(prefix: str):
    return lambda: f"{prefix}-{uuid.uuid4().hex[:8]}"


def _iso_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise ValueError("date must be an ISO-8601 string")
    return datetime.fromisoformat(value)


class StrictComponent(BaseModel):
    """Base for strict schemas: every component names its own type."""
    type: str

    def to_canonical(self) -> CanonicalData:
        raise NotImplementedError


# === Buttons ===

class StrictButton(StrictComponent):
    id: str
    label: str
    action: str
    style: Optional[Literal["primary", "secondary", "destructive", "danger"]] = None
    icon: Optional[str] = None
    disabled: Optional[bool] = None

    def to_canonical(self) -> ButtonData:
        style = ButtonStyle.SECONDARY
        if self.style == "primary":
            style = ButtonStyle.PRIMARY
        elif self.style in ("destructive", "danger"):
            style = ButtonStyle.DANGER
        return ButtonData(
            id=self.id,
            label=self.label,
            action=self.action,
            style=style,
            icon=self.icon,
            disabled=bool(self.disabled),
        )


class StrictGroupButton(StrictButton):
    type: Optional[str] = None


class StrictButtonGroup(StrictComponent):
    id: str
    buttons: List[StrictGroupButton]
    layout: Optional[Literal["horizontal", "vertical", "grid"]] = None

    def to_canonical(self) -> ButtonGroupData:
        return ButtonGroupData(
            id=self.id,
            buttons=[button.to_canonical() for button in self.buttons],
            layout=ButtonLayout(self.layout or "horizontal"),
        )


# === Calendar ===

class StrictCalendarActions(BaseModel):
    addToCalendar: Optional[bool] = None
    decline: Optional[bool] = None
    propose: Optional[bool] = None


class StrictCalendarEvent(StrictComponent):
    id: str
    title: str
    startDate: datetime
    endDate: datetime
    location: Optional[str] = None
    description: Optional[str] = None
    attendees: Optional[List[str]] = None
    actions: Optional[StrictCalendarActions] = None

    @field_validator("startDate", "endDate", mode="before")
    @classmethod
    def require_iso_date(cls, v):
        return _iso_datetime(v)

    def to_canonical(self) -> CalendarEventData:
        return CalendarEventData(
            id=self.id,
            title=self.title,
            start_date=self.startDate,
            end_date=self.endDate,
            location=self.location,
            description=self.description,
            attendees=self.attendees or [],
        )


class StrictScheduleEvent(BaseModel):
    id: str
    time: str
    title: str
    duration: Optional[int] = None
    subtitle: Optional[str] = None
    meet: Optional[str] = None
    location: Optional[str] = None


class StrictCalendarSchedule(StrictComponent):
    id: str = Field(default_factory=_prefixed_id("schedule"))
    title: str
    date: str
    events: List[StrictScheduleEvent]

    def to_canonical(self) -> CalendarScheduleData:
        return CalendarScheduleData(
            id=self.id,
            title=self.title,
            date=self.date,
            events=[
                CalendarEventData(
                    id=event.id,
                    time=event.time,
                    title=event.title,
                    duration=event.duration,
                    subtitle=event.subtitle,
                    meet_url=event.meet,
                    location=event.location,
                )
                for event in self.events
            ],
        )


# === Email ===

class StrictAttachment(BaseModel):
    name: str
    size: Optional[int] = None
    mimeType: Optional[str] = None


class StrictEmailDraft(StrictComponent):
    id: str
    to: List[str]
    subject: str
    body: str
    cc: Optional[List[str]] = None
    bcc: Optional[List[str]] = None
    isHTML: Optional[bool] = None
    attachments: Optional[List[StrictAttachment]] = None

    def to_canonical(self) -> EmailDraftData:
        return EmailDraftData(
            id=self.id,
            to=self.to,
            subject=self.subject,
            body=self.body,
            cc=self.cc,
            bcc=self.bcc,
            is_html=bool(self.isHTML),
        )


# === Forms and choices ===

class StrictFormField(BaseModel):
    id: str
    label: str
    type: Literal["text", "textarea", "select", "number", "email", "phone", "date"]
    required: Optional[bool] = None
    placeholder: Optional[str] = None
    options: Optional[List[str]] = None
    defaultValue: Optional[str] = None


class StrictForm(StrictComponent):
    id: str = Field(default_factory=_prefixed_id("form"))
    title: Optional[str] = None
    fields: List[StrictFormField]
    submitLabel: Optional[str] = None

    def to_canonical(self) -> FormData:
        return FormData(
            id=self.id,
            title=self.title,
            fields=[
                FormFieldData(
                    id=field.id,
                    label=field.label,
                    field_type=FormFieldType(field.type),
                    placeholder=field.placeholder,
                    required=bool(field.required),
                    options=field.options,
                    default_value=field.defaultValue,
                )
                for field in self.fields
            ],
            submit_label=self.submitLabel or "Submit",
        )


class StrictOptionItem(BaseModel):
    id: str
    label: str
    description: Optional[str] = None
    icon: Optional[str] = None
    selected: Optional[bool] = None


class StrictOptions(StrictComponent):
    id: str
    options: List[StrictOptionItem]
    prompt: Optional[str] = None
    allowMultiple: Optional[bool] = None
    required: Optional[bool] = None

    def to_canonical(self) -> OptionsData:
        return OptionsData(
            id=self.id,
            prompt=self.prompt,
            options=[
                OptionItemData(
                    id=option.id,
                    label=option.label,
                    description=option.description,
                    icon=option.icon,
                    selected=bool(option.selected),
                )
                for option in self.options
            ],
            allow_multiple=bool(self.allowMultiple),
        )


class StrictTaskItem(BaseModel):
    id: str
    text: str
    due: Optional[str] = None
    priority: Optional[Literal["high", "medium", "low"]] = None
    done: Optional[bool] = None


class StrictTasks(StrictComponent):
    id: str = Field(default_factory=_prefixed_id("tasks"))
    title: str
    items: List[StrictTaskItem]

    def to_canonical(self) -> TasksData:
        return TasksData(
            id=self.id,
            title=self.title,
            items=[
                TaskItemData(
                    id=item.id,
                    text=item.text,
                    due=item.due,
                    priority=TaskPriority(item.priority) if item.priority else None,
                    done=bool(item.done),
                )
                for item in self.items
            ],
        )


# === Content cards ===

class StrictCode(StrictComponent):
    id: str = Field(default_factory=_prefixed_id("code"))
    code: str
    language: Optional[str] = None
    filename: Optional[str] = None
    showLineNumbers: Optional[bool] = None

    def to_canonical(self) -> CodeData:
        return CodeData(
            id=self.id,
            code=self.code,
            language=self.language,
            filename=self.filename,
            show_line_numbers=bool(self.showLineNumbers),
        )


class StrictLinkPreview(StrictComponent):
    id: str = Field(default_factory=_prefixed_id("link"))
    url: str
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    domain: Optional[str] = None

    def to_canonical(self) -> LinkPreviewData:
        return LinkPreviewData(
            id=self.id,
            url=self.url,
            title=self.title,
            description=self.description,
            image=self.image,
            domain=self.domain,
        )


class StrictFile(StrictComponent):
    id: str = Field(default_factory=_prefixed_id("file"))
    name: str
    size: Optional[str] = None
    fileType: Optional[str] = None
    url: Optional[str] = None
    thumbnail: Optional[str] = None
    actions: Optional[List[str]] = None

    def to_canonical(self) -> FileData:
        return FileData(
            id=self.id,
            name=self.name,
            size=self.size,
            url=self.url,
            mime_type=self.fileType,
        )


class StrictContact(StrictComponent):
    id: str = Field(default_factory=_prefixed_id("contact"))
    name: str
    role: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    avatar: Optional[str] = None
    actions: Optional[List[str]] = None

    def to_canonical(self) -> ContactData:
        return ContactData(
            id=self.id,
            name=self.name,
            role=self.role,
            email=self.email,
            phone=self.phone,
            avatar=self.avatar,
        )


class StrictChartPoint(BaseModel):
    label: str
    value: float
    color: Optional[str] = None


class StrictChart(StrictComponent):
    id: str = Field(default_factory=_prefixed_id("chart"))
    chartType: Literal["bar", "line", "pie"]
    data: List[StrictChartPoint]
    title: Optional[str] = None

    def to_canonical(self) -> ChartData:
        return ChartData(
            id=self.id,
            chart_type=ChartType(self.chartType),
            title=self.title,
            data=[
                ChartPointData(label=point.label, value=point.value, color=point.color)
                for point in self.data
            ],
        )


class StrictLocation(StrictComponent):
    id: str = Field(default_factory=_prefixed_id("loc"))
    lat: float
    lng: float
    name: Optional[str] = None
    address: Optional[str] = None
    actions: Optional[List[str]] = None

    def to_canonical(self) -> LocationData:
        return LocationData(
            id=self.id,
            lat=self.lat,
            lng=self.lng,
            name=self.name,
            address=self.address,
        )


STRICT_SCHEMAS = {
    ComponentKind.BUTTON: StrictButton,
    ComponentKind.BUTTON_GROUP: StrictButtonGroup,
    ComponentKind.CALENDAR_EVENT: StrictCalendarEvent,
    ComponentKind.CALENDAR_SCHEDULE: StrictCalendarSchedule,
    ComponentKind.EMAIL_DRAFT: StrictEmailDraft,
    ComponentKind.OPTIONS: StrictOptions,
    ComponentKind.TASKS: StrictTasks,
    ComponentKind.FORM: StrictForm,
    ComponentKind.CODE: StrictCode,
    ComponentKind.LINK_PREVIEW: StrictLinkPreview,
    ComponentKind.FILE: StrictFile,
    ComponentKind.CONTACT: StrictContact,
    ComponentKind.CHART: StrictChart,
    ComponentKind.LOCATION: StrictLocation,
}


def decode_strict(kind: ComponentKind, obj: Dict[str, Any]) -> Optional[CanonicalData]:
    """
    Validate ``obj`` against the strict schema for ``kind``.

    Args:
        kind: Kind decided from the object's type tag
        obj: Decoded JSON object

    Returns:
        Canonical record, or None if the object does not satisfy the schema
    """
    schema = STRICT_SCHEMAS.get(kind)
    if schema is None:
        return None

    try:
        return schema.model_validate(obj).to_canonical()
    except (ValidationError, ValueError) as e:
        logger.warning(f"STRICT: Failed to parse {kind.value}: {e}")
        return None
