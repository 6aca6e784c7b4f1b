from .content import router as content_router, get_content_parser

__all__ = ["content_router", "get_content_parser"]
