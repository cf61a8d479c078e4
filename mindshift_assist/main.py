# Load environment variables before anything else
from dotenv import load_dotenv  # # Import dotenv loader
load_dotenv()  # # Ensure credentials and Datadog keys are present at import time

from mindshift_assist.infrastructure.config.settings import Settings, get_settings

# Datadog auto-instrumentation (must be before any framework imports)
if get_settings().telemetry_enabled:
    from ddtrace import patch_all  # # Auto-instrument all supported libraries
    patch_all()

import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

# Datadog LLM Observability (agentless mode)
from ddtrace.llmobs import LLMObs

from mindshift_assist.api.routers import assistance as assistance_router
from mindshift_assist.application.orchestrators.assistance_orchestrator import AssistanceOrchestrator
from mindshift_assist.infrastructure.factories.orchestrator_factory import build_assistance_orchestrator

# Structured JSON logger integration
from mindshift_assist.infrastructure.telemetry import configure_observability_logger


def _validate_env() -> None:
    # # Ensure required Datadog keys for agentless ingestion
    required = ["DD_API_KEY"]
    missing = [k for k in required if not os.getenv(k)]
    if missing:
        raise RuntimeError(
            f"Missing required environment variables for Datadog LLMObs: {missing}. "
            "Check that .env is present or set MINDSHIFT_TELEMETRY_ENABLED=false."
        )


def _ensure_ml_app(settings: Settings) -> str:
    # # Ensure ML application name exists for Datadog correlation
    ml_app = os.getenv("DD_LLMOBS_ML_APP")
    if ml_app:
        return ml_app

    # # Fallback to safe normalized name
    fallback = settings.app_name.replace(" ", "_").lower()
    os.environ["DD_LLMOBS_ML_APP"] = fallback
    return fallback


def create_app(
    settings: Optional[Settings] = None,
    orchestrator: Optional[AssistanceOrchestrator] = None,
) -> FastAPI:
    settings = settings or get_settings()
    if settings.telemetry_enabled:
        _validate_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # # Configure JSON logging + Datadog trace correlation
        configure_observability_logger()

        if settings.telemetry_enabled:
            # # Enable Datadog LLM Observability (agentless)
            LLMObs.enable(ml_app=_ensure_ml_app(settings))

        yield

        app.state.orchestrator.close()

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
    )

    # # One orchestrator per process, shared by every request
    app.state.orchestrator = orchestrator or build_assistance_orchestrator(settings)

    # # Attach routers
    app.include_router(assistance_router.router)

    @app.get("/health", tags=["health"])
    def health() -> dict:
        return {
            "status": "ok",
            "app": settings.app_name,
            "environment": settings.environment,
            "llm_provider": settings.llm_provider,
        }

    return app


# # ASGI application instance
app = create_app()
