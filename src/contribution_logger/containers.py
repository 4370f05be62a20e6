"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from contribution_logger.adapters.persona_verifier_client import HttpxPersonaVerifier
from contribution_logger.adapters.supabase_contribution_repository import (
    SupabaseContributionRepository,
)
from contribution_logger.config import Settings
from contribution_logger.services.contributions import ContributionService
from contribution_logger.services.forms import FormService
from contribution_logger.services.identity import IdentityService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    contribution_service: ContributionService
    form_service: FormService
    identity_service: IdentityService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    contribution_service = ContributionService(
        repository=SupabaseContributionRepository(supabase_client),
        recent_limit=resolved_settings.recent_limit,
    )
    verifier = HttpxPersonaVerifier.create(resolved_settings.persona_verifier_url)
    identity_service = IdentityService(
        verifier=verifier,
        audience=resolved_settings.audience,
        allowed_domain=resolved_settings.allowed_email_domain,
    )

    async def close_resources() -> None:
        await verifier.close()

    return AppContainer(
        settings=resolved_settings,
        contribution_service=contribution_service,
        form_service=FormService(contribution_service),
        identity_service=identity_service,
        close_resources=close_resources,
    )
