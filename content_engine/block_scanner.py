#!/usr/bin/env python3
"""
Block Scanner - splits message text into text and JSON-candidate segments

Handles messages like:
- "Here's your day: {...} Anything else?"
- "```json {...} ```"
- several JSON objects interleaved with prose

The scan is a single pass per candidate with brace counting that ignores
braces inside JSON strings. Input comes from a remote producer, so the
total length, the span of one candidate and the number of candidates are
all capped (see ParserConfig).
"""

import re
import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from .config import ParserConfig

logger = logging.getLogger(__name__)

FENCED_BLOCK_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


@dataclass(frozen=True)
class TextSegment:
    """Literal text between (or around) JSON candidates"""
    text: str


@dataclass(frozen=True)
class JsonCandidate:
    """A balanced {...} span, not yet decoded"""
    text: str


RawSegment = Union[TextSegment, JsonCandidate]


class BlockScanner:
    """
    Splits message content into an ordered list of raw segments.

    Concatenating the segments gives back the fence-unwrapped content,
    minus whitespace-only gaps between candidates.
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        self.config = config or ParserConfig()

    def scan(self, content: str) -> List[RawSegment]:
        """
        Split content into text segments and JSON candidates.

        Args:
            content: Raw message text

        Returns:
            Segments in message order
        """
        if len(content) > self.config.max_content_length:
            logger.warning(
                f"SCANNER: Content too large ({len(content)} chars > "
                f"{self.config.max_content_length}), returning as text"
            )
            return [TextSegment(content)]

        processed = self.unwrap_fenced_json(content)
        segments: List[RawSegment] = []
        position = 0
        candidate_count = 0

        while True:
            open_brace = processed.find("{", position)
            if open_brace == -1:
                break

            if candidate_count >= self.config.max_candidates:
                logger.warning(
                    f"SCANNER: Candidate limit ({self.config.max_candidates}) reached, "
                    f"folding remaining {len(processed) - position} chars into text"
                )
                remaining = processed[position:]
                if remaining:
                    segments.append(TextSegment(remaining))
                position = len(processed)
                break

            end = self.find_json_end(processed, open_brace)
            if end is None:
                logger.debug(f"SCANNER: No matching brace for '{{' at {open_brace}, rest is text")
                segments.append(TextSegment(processed[position:]))
                position = len(processed)
                break

            text_before = processed[position:open_brace]
            if text_before.strip():
                segments.append(TextSegment(text_before))

            segments.append(JsonCandidate(processed[open_brace:end]))
            candidate_count += 1
            position = end

        if candidate_count == 0:
            # No JSON extracted: hand back the input untouched, fences included
            return [TextSegment(content)]

        remaining = processed[position:]
        if remaining.strip():
            segments.append(TextSegment(remaining))

        logger.debug(f"SCANNER: {len(segments)} segments, {candidate_count} JSON candidates")
        return segments

    def find_json_end(self, content: str, start: int) -> Optional[int]:
        """
        Find the end of the balanced JSON object opening at ``start``.

        Braces only count outside strings; inside a string a backslash
        escapes the next character, so ``\\"`` does not close the string.

        Args:
            content: Text to scan
            start: Index of an opening brace

        Returns:
            Index just past the matching closing brace, or None if the input
            ends first or the span exceeds max_candidate_length
        """
        if content[start] != "{":
            return None

        limit = min(len(content), start + self.config.max_candidate_length)
        depth = 0
        in_string = False
        escape_next = False

        for index in range(start, limit):
            char = content[index]

            if escape_next:
                escape_next = False
            elif char == "\\" and in_string:
                escape_next = True
            elif char == '"':
                in_string = not in_string
            elif not in_string:
                if char == "{":
                    depth += 1
                elif char == "}":
                    depth -= 1
                    if depth == 0:
                        return index + 1

        if limit < len(content):
            logger.warning(
                f"SCANNER: Candidate at {start} exceeds {self.config.max_candidate_length} chars, abandoning"
            )
        return None

    @staticmethod
    def unwrap_fenced_json(content: str) -> str:
        """
        Replace fenced code blocks holding a JSON object with their inner text.

        Fences whose trimmed body does not start with '{' are left alone.
        Matches are replaced right-to-left so earlier offsets stay valid.
        """
        if "```" not in content:
            return content

        result = content
        for match in reversed(list(FENCED_BLOCK_PATTERN.finditer(content))):
            inner = match.group(1).strip()
            if inner.startswith("{"):
                result = result[:match.start()] + inner + result[match.end():]
        return result
