"""
Content Block Schemas

A parsed message is an ordered list of content blocks: either literal text
or a resolved interactive component. Blocks keep the exact substring they
were built from so the original message can be reconstructed.
"""

from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .components import CanonicalData, ComponentKind, DATA_MODELS


class TextBlock(BaseModel):
    """
    Literal message text.

    ``content`` is the verbatim substring of the message (including any
    surrounding newlines); ``text`` is the trimmed form meant for display.
    """
    model_config = ConfigDict(frozen=True)

    block_type: Literal["text"] = "text"
    content: str = Field(..., description="Verbatim text backing this block")

    @property
    def text(self) -> str:
        return self.content.strip()


class ComponentBlock(BaseModel):
    """A JSON span resolved into a typed interactive component."""
    model_config = ConfigDict(frozen=True)

    block_type: Literal["component"] = "component"
    kind: ComponentKind
    data: CanonicalData
    raw_json: str = Field(..., description="The JSON span exactly as it appeared in the message")

    @model_validator(mode="after")
    def check_data_matches_kind(self) -> "ComponentBlock":
        expected = DATA_MODELS[self.kind]
        if not isinstance(self.data, expected):
            raise ValueError(
                f"{self.kind.value} component needs {expected.__name__}, got {type(self.data).__name__}"
            )
        return self

    @property
    def id(self) -> str:
        return self.data.id


ContentBlock = Union[TextBlock, ComponentBlock]


class ParsedMessage(BaseModel):
    """
    Ordered block list for one message.

    Thin container handed to the rendering layer; the helpers let a host
    route an action callback ``(component_id, action)`` back to its block.
    """
    blocks: List[ContentBlock] = Field(default_factory=list)

    def get_block_types(self) -> List[str]:
        """Block type per block, using the component kind for components."""
        return [
            block.kind.value if isinstance(block, ComponentBlock) else block.block_type
            for block in self.blocks
        ]

    def get_components(self, kind: Optional[ComponentKind] = None) -> List[ComponentBlock]:
        """
        Get component blocks, optionally filtered by kind.

        Args:
            kind: Only return components of this kind

        Returns:
            Component blocks in message order
        """
        return [
            block for block in self.blocks
            if isinstance(block, ComponentBlock) and (kind is None or block.kind == kind)
        ]

    def find_component(self, component_id: str) -> Optional[ComponentBlock]:
        for block in self.get_components():
            if block.id == component_id:
                return block
        return None

    def reconstruct(self) -> str:
        """Concatenate the backing substrings of every block."""
        return "".join(
            block.content if isinstance(block, TextBlock) else block.raw_json
            for block in self.blocks
        )
