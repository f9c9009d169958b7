import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from fortune_report.core.config import Settings, get_settings
from fortune_report.core.errors import MethodNotAllowed, ReportError
from fortune_report.core.lifespan import lifespan
from fortune_report.core.logging import configure_logging
from fortune_report.core.monitor import attach_monitor_file
from fortune_report.routers import fortune

logger = logging.getLogger(__name__)


async def report_error_handler(request: Request, exc: ReportError) -> JSONResponse:
    headers = {"Allow": "POST"} if isinstance(exc, MethodNotAllowed) else None
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message}, headers=headers)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    if settings.monitor_log_file:
        attach_monitor_file(settings.monitor_log_file)

    app = FastAPI(
        title="Auspicious Year Report",
        description="Generates a personalised 2026 Auspicious Year Report from a date of birth.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ReportError, report_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    app.include_router(fortune.router, prefix="/api", tags=["fortune"])

    @app.get("/health", tags=["meta"])
    async def healthcheck():
        return {"status": "ok"}

    return app


app = create_app()


def run():
    import uvicorn

    settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
