from fastapi import FastAPI
from dotenv import load_dotenv
from typing import Optional
import logging

from .config import config_manager
from .content_parser import ContentParser
from .routers import content_router

# Load environment variables
load_dotenv()

config = config_manager.get_config()

# Set up logging
logging.basicConfig(level=getattr(logging, config.log_level))
logger = logging.getLogger(__name__)


def create_app(parser: Optional[ContentParser] = None) -> FastAPI:
    """Build the API app around one parser instance (a fresh one if not given)."""
    app = FastAPI(title="Content Engine")
    app.state.content_parser = parser or ContentParser(config)
    app.include_router(content_router)

    @app.get("/")
    async def root():
        return {"message": "Content Engine API", "status": "running"}

    return app


app = create_app()
logger.info(f"Content engine ready: {config.to_dict()}")
