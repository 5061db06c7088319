"""
Local HTTP surface for the host and UI collaborators.

The host posts interception-feed commands to ``/api/messages``; the
UI queries tab snapshots and scores and calls the pure analysers.
Everything stays in memory and the server binds to loopback by
default.
"""

from __future__ import annotations

import contextlib
from collections.abc import AsyncGenerator
from typing import Any

import fastapi
import pydantic
from fastapi import exceptions
from fastapi.middleware import cors

from network_clarity import config
from network_clarity.analysis import cookies, explanations, pii_detector, privacy_score
from network_clarity.models import cookies as cookie_models
from network_clarity.models import explanations as explanation_models
from network_clarity.models import messages, pii, score, tracking
from network_clarity.sessions import dispatcher, registry
from network_clarity.utils import logger

log = logger.create_logger("Server")


def create_app(settings: config.Settings | None = None) -> fastapi.FastAPI:
    """Build the FastAPI app with its own session registry.

    Args:
        settings: Runtime settings; read from the environment when
            omitted.
    """
    settings = settings or config.Settings()

    @contextlib.asynccontextmanager
    async def lifespan(_app: fastapi.FastAPI) -> AsyncGenerator[None]:
        """Log server start on startup."""
        log.section("Network Clarity Engine Started")
        log.info("Environment", {"env": settings.environment, "host": settings.host, "port": settings.port})
        settings.warn_if_exposed()
        yield

    app = fastapi.FastAPI(title="Network Clarity Engine", lifespan=lifespan)
    app.state.settings = settings
    app.state.sessions = registry.SessionRegistry()
    app.state.dispatcher = dispatcher.Dispatcher(app.state.sessions)

    # ============================================================================
    # Middleware
    # ============================================================================

    app.add_middleware(
        cors.CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    return app


def _dispatcher(request: fastapi.Request) -> dispatcher.Dispatcher:
    return request.app.state.dispatcher


def _sessions(request: fastapi.Request) -> registry.SessionRegistry:
    return request.app.state.sessions


router = fastapi.APIRouter(prefix="/api")

# ============================================================================
# Sessions
# ============================================================================


@router.post("/messages", response_model=messages.MessageResponse)
async def post_message(
    request: fastapi.Request,
    payload: dict[str, Any] = fastapi.Body(...),
) -> messages.MessageResponse:
    """Dispatch one interception-feed event or UI command."""
    try:
        command = messages.COMMAND_ADAPTER.validate_python(payload)
    except pydantic.ValidationError as error:
        raise exceptions.RequestValidationError(error.errors()) from error
    return await _dispatcher(request).dispatch(command)


@router.get("/tabs/{tab_id}", response_model=messages.MessageResponse)
async def get_tab(request: fastapi.Request, tab_id: int) -> messages.MessageResponse:
    """Snapshot of a tab session (``data`` is null when unknown)."""
    return await _dispatcher(request).dispatch(messages.GetTabData(tab_id=tab_id))


@router.delete("/tabs/{tab_id}", response_model=messages.MessageResponse)
async def clear_tab(request: fastapi.Request, tab_id: int) -> messages.MessageResponse:
    """Drop a tab's records, keeping its page URL."""
    return await _dispatcher(request).dispatch(messages.ClearTab(tab_id=tab_id))


@router.get("/tabs/{tab_id}/score", response_model=score.PrivacyScoreResult)
async def get_tab_score(request: fastapi.Request, tab_id: int) -> score.PrivacyScoreResult:
    """Privacy score of a tab's current page."""
    session = _sessions(request).get(tab_id)
    if session is None:
        raise fastapi.HTTPException(status_code=404, detail=f"No session for tab {tab_id}")
    return privacy_score.calculate_privacy_score(session.stats)


# ============================================================================
# Analysers
# ============================================================================


@router.post("/analyze/pii", response_model=pii.PIIDetectionResult)
async def analyze_pii(body: messages.PIIAnalysisRequest) -> pii.PIIDetectionResult:
    """Scan a URL and bodies for personal data."""
    return pii_detector.analyze_pii(body.request_body, body.response_body, body.url)


@router.post("/analyze/cookies", response_model=cookie_models.CookieReport)
async def analyze_cookies(body: messages.CookieAnalysisRequest) -> cookie_models.CookieReport:
    """Explain the cookies sent and set by a request."""
    return cookies.analyze_cookies(body.cookie_header, body.set_cookie_headers)


@router.post("/analyze/score", response_model=score.PrivacyScoreResult)
async def analyze_score(stats: tracking.TabStats) -> score.PrivacyScoreResult:
    """Score arbitrary tab statistics."""
    return privacy_score.calculate_privacy_score(stats)


# ============================================================================
# Explanations
# ============================================================================


@router.get("/explain/status/{code}", response_model=explanation_models.StatusExplanation)
async def explain_status(code: int) -> explanation_models.StatusExplanation:
    return explanations.get_status_explanation(code)


@router.get("/explain/type/{resource_type}", response_model=explanation_models.TypeExplanation)
async def explain_type(resource_type: str) -> explanation_models.TypeExplanation:
    return explanations.get_type_explanation(resource_type)


@router.get("/explain/header/{name}", response_model=explanation_models.HeaderExplanation)
async def explain_header(name: str) -> explanation_models.HeaderExplanation:
    return explanations.get_header_explanation(name)


app = create_app()
