#!/usr/bin/env python3
"""
Content Parser - turns a chat message into an ordered list of content blocks

Pipeline per message:
    ParseCache.get -> BlockScanner.scan -> per JSON candidate:
    json.loads -> TypeDetector.analyze -> ComponentBuilder.build
    (-> strict schema fallback for tagged objects) -> BlockAssembler
    -> ParseCache.set

Nothing here raises to the caller: every degraded path (bad JSON, unknown
shape, failed normalization) keeps the original substring as text.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from .block_scanner import BlockScanner, JsonCandidate
from .cache import ParseCache, ParseCacheConfig
from .component_builder import ComponentBuilder
from .config import ParserConfig, config_manager
from .schemas.blocks import ComponentBlock, ContentBlock, ParsedMessage, TextBlock
from .schemas.components import CanonicalData, ComponentKind
from .schemas.strict_schemas import decode_strict
from .type_detector import TypeDetector

logger = logging.getLogger(__name__)


class BlockAssembler:
    """Collects blocks in message order"""

    def __init__(self):
        self._blocks: List[ContentBlock] = []
        self.component_count = 0
        self.unresolved_count = 0

    def add_text(self, text: str) -> None:
        self._blocks.append(TextBlock(content=text))

    def add_component(self, kind: ComponentKind, data: CanonicalData, raw_json: str) -> None:
        self._blocks.append(ComponentBlock(kind=kind, data=data, raw_json=raw_json))
        self.component_count += 1

    def add_unresolved(self, raw_json: str) -> None:
        """A JSON candidate that could not become a component stays as text"""
        self._blocks.append(TextBlock(content=raw_json))
        self.unresolved_count += 1

    def build(self) -> List[ContentBlock]:
        return list(self._blocks)


class ContentParser:
    """
    Parses message content into text and component blocks.

    Collaborators are injectable so tests can count calls or swap rules;
    by default everything is built from the given (or loaded) ParserConfig.
    The cache belongs to this parser instance.
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        cache: Optional[ParseCache] = None,
        scanner: Optional[BlockScanner] = None,
        detector: Optional[TypeDetector] = None,
        builder: Optional[ComponentBuilder] = None,
    ):
        self.config = config or config_manager.get_config()
        if cache is None:
            cache = ParseCache(
                ParseCacheConfig(max_size=self.config.cache_size, enabled=self.config.enable_cache)
            )
        self.cache = cache
        self.scanner = scanner or BlockScanner(self.config)
        self.detector = detector or TypeDetector()
        self.builder = builder or ComponentBuilder()

    def parse(self, content: str) -> List[ContentBlock]:
        """
        Parse a message into blocks.

        Args:
            content: Raw message text

        Returns:
            Ordered list of TextBlock / ComponentBlock
        """
        cached = self.cache.get(content)
        if cached is not None:
            logger.debug(f"PARSER: Cache hit ({len(cached)} blocks)")
            return cached

        assembler = BlockAssembler()
        for segment in self.scanner.scan(content):
            if isinstance(segment, JsonCandidate):
                self._resolve_candidate(segment.text, assembler)
            else:
                assembler.add_text(segment.text)

        blocks = assembler.build()
        if assembler.component_count or assembler.unresolved_count:
            logger.info(
                f"PARSER: {len(blocks)} blocks, {assembler.component_count} components, "
                f"{assembler.unresolved_count} unresolved JSON spans"
            )

        self.cache.set(content, blocks)
        return blocks

    def parse_message(self, content: str) -> ParsedMessage:
        return ParsedMessage(blocks=self.parse(content))

    def clear_cache(self) -> None:
        """Drop all cached results, e.g. when conversation history is cleared"""
        self.cache.clear()

    def cache_stats(self) -> Dict[str, Any]:
        return self.cache.get_stats()

    def _resolve_candidate(self, raw_json: str, assembler: BlockAssembler) -> None:
        try:
            resolved = self._resolve(raw_json)
        except Exception as e:
            # One bad candidate must not lose the rest of the message
            logger.error(f"PARSER: Unexpected error resolving JSON span: {e}", exc_info=True)
            resolved = None

        if resolved is None:
            assembler.add_unresolved(raw_json)
        else:
            kind, data = resolved
            assembler.add_component(kind, data, raw_json)

    def _resolve(self, raw_json: str) -> Optional[tuple]:
        try:
            obj = json.loads(raw_json)
        except json.JSONDecodeError as e:
            logger.warning(f"PARSER: JSON decode failed ({e.msg} at {e.pos}), keeping as text")
            return None
        except (ValueError, RecursionError) as e:
            # Oversized integer literals and very deep nesting
            logger.warning(f"PARSER: JSON decode rejected ({type(e).__name__}: {e}), keeping as text")
            return None

        if not isinstance(obj, dict):
            logger.warning(f"PARSER: JSON span is {type(obj).__name__}, not an object")
            return None

        detection = self.detector.analyze(obj)
        if detection is None:
            return None

        data = self.builder.build(detection.kind, obj)
        if data is None and detection.tagged and self.config.enable_strict_fallback:
            logger.debug(f"PARSER: Trying strict {detection.kind.value} schema")
            data = decode_strict(detection.kind, obj)

        if data is None:
            logger.warning(f"PARSER: Could not build {detection.kind.value}, keeping as text")
            return None

        logger.info(f"PARSER: Resolved {detection.kind.value} via {detection.source.value} '{detection.rule}'")
        return detection.kind, data
