import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from ..clients.http_client import close_shared_client, initialize_shared_client
from ..clients.llm_client import GenerationClient
from ..services.fortune import FortuneReportService
from ..services.prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    logger.info(f"Fortune report service starting up with {settings!r}")
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set; report requests will fail with a configuration error.")

    session = initialize_shared_client()
    client = GenerationClient(settings, session, SYSTEM_PROMPT)
    app.state.report_service = FortuneReportService(settings, client)
    try:
        yield
    finally:
        logger.info("Fortune report service shutting down...")
        await close_shared_client()
