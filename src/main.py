"""FastAPI application entry point."""

import logging
import structlog
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from src.api.forms import router as forms_router
from src.config import settings
from src.database import create_engine, create_session_factory, init_db
from src.exceptions import BootstrapError
from src.notifications.email import get_email_client
from src.notifications.submission import SubmissionNotifier
from src.schemas.submission import SubmissionFailed

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.dev.ConsoleRenderer() if settings.environment == "development"
        else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        getattr(logging, settings.log_level.upper(), logging.INFO)
    ),
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown.

    Tables are created before the first request is served. If that fails
    the error propagates and the server never starts accepting traffic.
    """
    logger.info(
        "app_starting",
        environment=settings.environment,
        notify_email_to=settings.notify_email_to,
    )

    engine = create_engine(settings)
    try:
        await init_db(engine)
    except BootstrapError as e:
        logger.error("schema_init_failed", error=str(e))
        await engine.dispose()
        raise

    http = httpx.AsyncClient()
    app.state.session_factory = create_session_factory(engine)
    app.state.notifier = SubmissionNotifier(get_email_client(settings, http))

    yield

    logger.info("app_shutting_down")
    await http.aclose()
    await engine.dispose()


app = FastAPI(
    title="Referral Intake API",
    description="Form intake for the disaster-recovery referral service",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(forms_router)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_error",
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return JSONResponse(status_code=500, content=SubmissionFailed().model_dump())


@app.get("/", response_class=PlainTextResponse)
async def health_check() -> str:
    """Health check endpoint."""
    return "OK"


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.main:app", host=settings.host, port=settings.port)
