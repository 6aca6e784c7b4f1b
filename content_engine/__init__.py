"""
Content engine: splits chat messages into text and interactive component
blocks, tolerating loosely structured JSON from the producing agent.
"""

from .content_parser import BlockAssembler, ContentParser
from .schemas import ComponentBlock, ComponentKind, ContentBlock, ParsedMessage, TextBlock

__all__ = [
    "BlockAssembler",
    "ContentParser",
    "ComponentBlock",
    "ComponentKind",
    "ContentBlock",
    "ParsedMessage",
    "TextBlock",
]
