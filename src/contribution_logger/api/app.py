"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from urllib.parse import unquote

from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import (
    HTMLResponse,
    JSONResponse,
    PlainTextResponse,
    RedirectResponse,
)
from starlette.middleware.sessions import SessionMiddleware

from contribution_logger.api.auth import (
    LoginRequired,
    redirect_to_login,
    require_login,
)
from contribution_logger.api.auth import router as identity_router
from contribution_logger.api.pages import render_home, render_log_form
from contribution_logger.app_logging import configure_logging, log_requests
from contribution_logger.containers import AppContainer
from contribution_logger.domain.contributions import DeletionKey
from contribution_logger.services.forms import ContributionFormError, parse_iso_date
from contribution_logger.services.sanitize import clean, clean_recent_for_presentation

MISSING_DATE = 'Missing parameter: "date". Must be in this format: YYYY-MM-DD.'
MISSING_TEAM = (
    'Missing parameter: "team". '
    "E.g. webmaker, openbadges, opennews, appmaker, sciencelab, engagement"
)
MISSING_BUCKET = (
    'Missing parameter: "bucket". '
    "E.g. code, content, events, training, community, testing, apis"
)
_PREFILL_FIELDS = ("team", "type", "description", "date")
_LOGGED_URL = "/log-em#logged"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        SessionMiddleware,
        secret_key=container.settings.session_secret,
        https_only=container.settings.environment == "production",
    )
    app.middleware("http")(log_requests)
    app.add_exception_handler(LoginRequired, redirect_to_login)
    app.include_router(identity_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    async def home(request: Request) -> Response:
        """Send signed-in users on to their target, otherwise show sign-in."""
        session = request.session
        if session.get("authorized"):
            target = session.pop("targetURL", None)
            return RedirectResponse(
                target or "/log-em", status_code=status.HTTP_303_SEE_OTHER
            )
        return HTMLResponse(
            render_home(
                current_user=clean(session.get("email")),
                authorized=bool(session.get("authorized")),
            )
        )

    @app.get("/log-em", response_class=HTMLResponse)
    async def log_em_form(
        request: Request, email: str = Depends(require_login)
    ) -> HTMLResponse:
        """Render the logging form, pre-filled from the query string."""
        state_container: AppContainer = request.app.state.container
        values = {}
        for name in _PREFILL_FIELDS:
            raw = request.query_params.get(name)
            if raw:
                values[name] = clean(unquote(raw))
        try:
            entries = await state_container.contribution_service.recently_logged(email)
        except Exception:
            logger.exception("Failed to load recent entries", extra={"email": email})
            entries = []
        domain_suffix = "@" + state_container.settings.allowed_email_domain
        return HTMLResponse(
            render_log_form(
                current_user=clean(email),
                username=clean(email.replace(domain_suffix, "")),
                values=values,
                recent=clean_recent_for_presentation(entries),
            )
        )

    @app.post("/log-em")
    async def log_em_submit(
        request: Request, email: str = Depends(require_login)
    ) -> RedirectResponse:
        """Store a submitted entry; failures are only logged."""
        state_container: AppContainer = request.app.state.container
        form = await request.form()
        try:
            await state_container.form_service.process_form(form, email)
        except ContributionFormError as exc:
            logger.warning("Rejected contribution form: %s", exc)
        except Exception:
            logger.exception("Failed to log contribution", extra={"email": email})
        return RedirectResponse(_LOGGED_URL, status_code=status.HTTP_303_SEE_OTHER)

    @app.get("/delete")
    async def delete_entry(
        request: Request, email: str = Depends(require_login)
    ) -> RedirectResponse:
        """Delete one of the user's entries by its composite key."""
        state_container: AppContainer = request.app.state.container
        query = request.query_params
        key = DeletionKey(
            logged_by=email,
            contributor_id=query.get("contributor_id", ""),
            contribution_date=query.get("contribution_date", ""),
            mofo_team=query.get("mofo_team", ""),
            data_bucket=query.get("data_bucket", ""),
        )
        try:
            await state_container.contribution_service.delete_item(key)
            logger.info("deleted %s", email)
        except Exception:
            logger.exception("Failed to delete contribution", extra={"email": email})
        return RedirectResponse(_LOGGED_URL, status_code=status.HTTP_303_SEE_OTHER)

    @app.get("/api")
    async def contributor_counts(request: Request) -> Response:
        """Public aggregate contributor counts for a date, team and bucket."""
        state_container: AppContainer = request.app.state.container
        query = request.query_params
        day = parse_iso_date(query.get("date"))
        if day is None:
            return PlainTextResponse(MISSING_DATE)
        team = query.get("team")
        if not team:
            return PlainTextResponse(MISSING_TEAM)
        bucket = query.get("bucket")
        if not bucket:
            return PlainTextResponse(MISSING_BUCKET)
        try:
            counts = await state_container.contribution_service.get_contributor_counts(
                day, team, bucket
            )
        except Exception:
            logger.exception(
                "Failed to count contributors",
                extra={"team": team, "bucket": bucket},
            )
            return JSONResponse(
                {"error": "Counts are unavailable right now."},
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        return JSONResponse(jsonable_encoder(asdict(counts)))

    return app
