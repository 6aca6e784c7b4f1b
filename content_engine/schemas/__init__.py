"""
Schemas for parsed message content.

Usage:
    from content_engine.schemas import ParsedMessage, TextBlock, ComponentBlock

    message = ParsedMessage(blocks=parser.parse(content))
    for component in message.get_components(ComponentKind.TASKS):
        ...
"""

from .components import (
    ComponentKind,
    CanonicalData,
    DATA_MODELS,
    CalendarScheduleData,
    CalendarEventData,
    TasksData,
    TaskItemData,
    TaskPriority,
    CodeData,
    ContactData,
    LocationData,
    LinkPreviewData,
    ChartData,
    ChartPointData,
    ChartType,
    FileData,
    FormData,
    FormFieldData,
    FormFieldType,
    ButtonData,
    ButtonGroupData,
    ButtonStyle,
    ButtonLayout,
    OptionsData,
    OptionItemData,
    EmailDraftData,
)
from .blocks import TextBlock, ComponentBlock, ContentBlock, ParsedMessage
from .strict_schemas import STRICT_SCHEMAS, StrictComponent, decode_strict

__all__ = [
    "ComponentKind",
    "CanonicalData",
    "DATA_MODELS",
    "CalendarScheduleData",
    "CalendarEventData",
    "TasksData",
    "TaskItemData",
    "TaskPriority",
    "CodeData",
    "ContactData",
    "LocationData",
    "LinkPreviewData",
    "ChartData",
    "ChartPointData",
    "ChartType",
    "FileData",
    "FormData",
    "FormFieldData",
    "FormFieldType",
    "ButtonData",
    "ButtonGroupData",
    "ButtonStyle",
    "ButtonLayout",
    "OptionsData",
    "OptionItemData",
    "EmailDraftData",
    "TextBlock",
    "ComponentBlock",
    "ContentBlock",
    "ParsedMessage",
    "STRICT_SCHEMAS",
    "StrictComponent",
    "decode_strict",
]
