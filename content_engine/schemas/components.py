"""
Canonical Component Schemas

Pydantic models for the normalized record produced for each interactive
component kind. Whatever field names the upstream agent used, the builders
and the strict decoder both end up producing one of these models, so the
rendering layer only ever sees one shape per kind.

Every record carries an ``id``: the producer's own id when it sent one,
otherwise a generated token. Action callbacks from the rendering layer
reference components by this id.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ComponentKind(str, Enum):
    """Closed set of interactive component kinds, valued by their wire names."""
    CALENDAR_SCHEDULE = "calendarSchedule"
    TASKS = "tasks"
    CODE = "code"
    CONTACT = "contact"
    LOCATION = "location"
    LINK_PREVIEW = "linkPreview"
    CHART = "chart"
    FILE = "file"
    FORM = "form"
    BUTTON_GROUP = "buttonGroup"
    BUTTON = "button"
    OPTIONS = "options"
    EMAIL_DRAFT = "emailDraft"
    CALENDAR_EVENT = "calendarEvent"


class TaskPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ChartType(str, Enum):
    BAR = "bar"
    LINE = "line"
    PIE = "pie"


class FormFieldType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    NUMBER = "number"
    EMAIL = "email"
    PHONE = "phone"
    DATE = "date"


class ButtonStyle(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    DANGER = "danger"


class ButtonLayout(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    GRID = "grid"


class CanonicalModel(BaseModel):
    """Base for all canonical records: immutable once built."""
    model_config = ConfigDict(frozen=True)


# === Calendar ===

class CalendarEventData(CanonicalModel):
    """
    A single calendar event.

    Used both as a standalone ``calendarEvent`` component and as an entry
    of a ``calendarSchedule``. Schedule entries carry display strings in
    ``time``/``end_time``; standalone events also carry parsed dates.
    """
    id: str
    title: str
    time: Optional[str] = None
    end_time: Optional[str] = None
    subtitle: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[int] = Field(None, description="Duration in minutes")
    duration_text: Optional[str] = Field(None, description="Duration as the producer wrote it")
    meet_url: Optional[str] = None
    location: Optional[str] = None
    account: Optional[str] = None
    attendees: List[str] = Field(default_factory=list)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class CalendarScheduleData(CanonicalModel):
    """A day's agenda: an ordered list of events."""
    id: str
    title: str = "Schedule"
    date: Optional[str] = None
    events: List[CalendarEventData] = Field(..., min_length=1)


# === Tasks ===

class TaskItemData(CanonicalModel):
    id: str
    text: str = Field(..., min_length=1)
    done: bool = False
    due: Optional[str] = None
    priority: Optional[TaskPriority] = None


class TasksData(CanonicalModel):
    id: str
    title: str = "Tasks"
    items: List[TaskItemData] = Field(..., min_length=1)


# === Content cards ===

class CodeData(CanonicalModel):
    id: str
    code: str = Field(..., min_length=1)
    language: Optional[str] = None
    filename: Optional[str] = None
    show_line_numbers: bool = False


class ContactData(CanonicalModel):
    id: str
    name: str = "Unknown"
    role: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    avatar: Optional[str] = None


class LocationData(CanonicalModel):
    id: str
    lat: float
    lng: float
    name: Optional[str] = None
    address: Optional[str] = None


class LinkPreviewData(CanonicalModel):
    id: str
    url: str
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    domain: Optional[str] = None


class ChartPointData(CanonicalModel):
    label: str = Field(..., min_length=1)
    value: float = 0.0
    color: Optional[str] = None


class ChartData(CanonicalModel):
    id: str
    chart_type: ChartType = ChartType.BAR
    title: Optional[str] = None
    data: List[ChartPointData] = Field(..., min_length=1)


class FileData(CanonicalModel):
    id: str
    name: str = "Unknown"
    size: Optional[str] = None
    url: Optional[str] = None
    mime_type: Optional[str] = None


# === Inputs ===

class FormFieldData(CanonicalModel):
    id: str
    label: str = Field(..., min_length=1)
    field_type: FormFieldType = FormFieldType.TEXT
    placeholder: Optional[str] = None
    required: bool = False
    options: Optional[List[str]] = None
    default_value: Optional[str] = None


class FormData(CanonicalModel):
    id: str
    title: Optional[str] = None
    fields: List[FormFieldData] = Field(..., min_length=1)
    submit_label: str = "Submit"


class ButtonData(CanonicalModel):
    """
    A tappable button. ``action`` is what gets reported back through the
    action callback; it falls back to the label when the producer gave none.
    """
    id: str
    label: str = Field(..., min_length=1)
    action: str
    style: ButtonStyle = ButtonStyle.SECONDARY
    icon: Optional[str] = None
    disabled: bool = False


class ButtonGroupData(CanonicalModel):
    id: str
    buttons: List[ButtonData] = Field(..., min_length=1)
    layout: ButtonLayout = ButtonLayout.HORIZONTAL


class OptionItemData(CanonicalModel):
    id: str
    label: str = Field(..., min_length=1)
    description: Optional[str] = None
    icon: Optional[str] = None
    selected: bool = False


class OptionsData(CanonicalModel):
    id: str
    prompt: Optional[str] = None
    options: List[OptionItemData] = Field(..., min_length=1)
    allow_multiple: bool = False


class EmailDraftData(CanonicalModel):
    id: str
    to: List[str] = Field(..., min_length=1)
    subject: str = ""
    body: str = ""
    cc: Optional[List[str]] = None
    bcc: Optional[List[str]] = None
    is_html: bool = False


CanonicalData = Union[
    CalendarScheduleData,
    TasksData,
    CodeData,
    ContactData,
    LocationData,
    LinkPreviewData,
    ChartData,
    FileData,
    FormData,
    ButtonGroupData,
    ButtonData,
    OptionsData,
    EmailDraftData,
    CalendarEventData,
]

# Which record type each kind resolves to
DATA_MODELS = {
    ComponentKind.CALENDAR_SCHEDULE: CalendarScheduleData,
    ComponentKind.TASKS: TasksData,
    ComponentKind.CODE: CodeData,
    ComponentKind.CONTACT: ContactData,
    ComponentKind.LOCATION: LocationData,
    ComponentKind.LINK_PREVIEW: LinkPreviewData,
    ComponentKind.CHART: ChartData,
    ComponentKind.FILE: FileData,
    ComponentKind.FORM: FormData,
    ComponentKind.BUTTON_GROUP: ButtonGroupData,
    ComponentKind.BUTTON: ButtonData,
    ComponentKind.OPTIONS: OptionsData,
    ComponentKind.EMAIL_DRAFT: EmailDraftData,
    ComponentKind.CALENDAR_EVENT: CalendarEventData,
}
