"""Session gate and identity provider endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

if TYPE_CHECKING:
    from contribution_logger.containers import AppContainer

router = APIRouter(prefix="/persona", tags=["identity"])


class LoginRequired(Exception):
    """Raised when a protected route is hit without an authorized session."""


class VerifyRequest(BaseModel):
    """Body posted by the sign-in widget."""

    assertion: str = ""


async def require_login(request: Request) -> str:
    """Return the session email, or remember the target and send to login."""
    if request.session.get("authorized"):
        return str(request.session.get("email") or "")
    target = request.url.path
    if request.url.query:
        target = f"{target}?{request.url.query}"
    request.session["targetURL"] = target
    raise LoginRequired


async def redirect_to_login(request: Request, exc: LoginRequired) -> RedirectResponse:
    """Exception handler turning ``LoginRequired`` into a redirect."""
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)


@router.post("/verify")
async def verify(payload: VerifyRequest, request: Request) -> dict[str, str]:
    """Verify an identity assertion and authorize the session."""
    container: AppContainer = request.app.state.container
    return await container.identity_service.login(request.session, payload.assertion)


@router.post("/logout")
async def logout(request: Request) -> dict[str, str]:
    """Drop the session identity."""
    container: AppContainer = request.app.state.container
    return container.identity_service.logout(request.session)
