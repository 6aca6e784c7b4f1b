"""
Content Parsing API Endpoints

REST surface over ContentParser: parse a message into blocks, inspect and
clear the parse cache, and decode component action strings.
"""

from fastapi import APIRouter, HTTPException, Depends, Request
from pydantic import BaseModel, Field
from typing import Dict, Any, List, Optional
import logging
from datetime import datetime

from ..actions import ActionFormatError, parse_action
from ..content_parser import ContentParser

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/api/content", tags=["content"])

# Pydantic models for request/response
class ParseRequest(BaseModel):
    """Request model for message parsing."""
    content: str

class ParseResponse(BaseModel):
    """Response model for message parsing."""
    blocks: List[Dict[str, Any]]
    block_types: List[str]
    component_count: int

class ActionDecodeRequest(BaseModel):
    """Request model for action decoding."""
    component_id: str = Field(..., min_length=1)
    action: str

class ActionDecodeResponse(BaseModel):
    """Response model for a decoded action."""
    component_id: str
    verb: str
    target: Optional[str] = None
    targets: List[str] = Field(default_factory=list)
    payload: Optional[Dict[str, Any]] = None

# Dependency to get the app-owned parser
def get_content_parser(request: Request) -> ContentParser:
    """Get the ContentParser owned by the running app."""
    parser = getattr(request.app.state, "content_parser", None)
    if parser is None:
        raise HTTPException(status_code=503, detail="Content parser not initialized")
    return parser

@router.get("/health", summary="Check content parser health")
async def health_check(parser: ContentParser = Depends(get_content_parser)) -> Dict[str, Any]:
    """
    Check the health of the content parser.

    Returns:
        Health status, active limits and cache statistics
    """
    return {
        "status": "healthy",
        "config": parser.config.to_dict(),
        "cache": parser.cache_stats(),
        "timestamp": datetime.now().isoformat()
    }

@router.post("/parse", response_model=ParseResponse,
             summary="Parse a message into text and component blocks")
def parse_content(request: ParseRequest,
                  parser: ContentParser = Depends(get_content_parser)) -> ParseResponse:
    """
    Parse message content.

    Args:
        request: Message content to parse

    Returns:
        Serialized blocks in message order with their block types
    """
    message = parser.parse_message(request.content)
    return ParseResponse(
        blocks=[block.model_dump(mode="json") for block in message.blocks],
        block_types=message.get_block_types(),
        component_count=len(message.get_components())
    )

@router.delete("/cache", summary="Clear the parse cache")
def clear_cache(parser: ContentParser = Depends(get_content_parser)) -> Dict[str, Any]:
    """Clear cached parse results, e.g. after conversation history is purged."""
    parser.clear_cache()
    logger.info("Parse cache cleared via API")
    return {"cleared": True, "timestamp": datetime.now().isoformat()}

@router.get("/cache/stats", summary="Get parse cache statistics")
def cache_stats(parser: ContentParser = Depends(get_content_parser)) -> Dict[str, Any]:
    return parser.cache_stats()

@router.post("/actions/decode", response_model=ActionDecodeResponse,
             summary="Decode a component action string")
async def decode_action(request: ActionDecodeRequest) -> ActionDecodeResponse:
    """
    Decode an action reported by a rendered component.

    Raises:
        HTTPException: 400 if the action string is malformed
    """
    try:
        action = parse_action(request.component_id, request.action)
    except ActionFormatError as e:
        logger.warning(f"Rejected action for {request.component_id}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    return ActionDecodeResponse(**action.to_dict())
