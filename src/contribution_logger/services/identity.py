"""Session login and logout responses for the identity provider."""

import logging
from collections.abc import MutableMapping
from dataclasses import dataclass

from contribution_logger.adapters.persona_verifier_client import (
    IdentityVerificationError,
    IdentityVerifier,
)
from contribution_logger.services.sanitize import is_allowed_email

logger = logging.getLogger(__name__)

Session = MutableMapping[str, object]


@dataclass
class IdentityService:
    """Applies verified identities to browser sessions."""

    verifier: IdentityVerifier
    audience: str
    allowed_domain: str

    @property
    def rejection_reason(self) -> str:
        return (
            f"Only users with a {self.allowed_domain} email address "
            "may use this tool"
        )

    async def login(self, session: Session, assertion: str) -> dict[str, str]:
        """Verify an assertion and authorize the session when allowed."""
        try:
            email = await self.verifier.verify(assertion, self.audience)
        except IdentityVerificationError as exc:
            logger.warning("Identity verification failed: %s", exc)
            return {"status": "failure", "reason": str(exc)}
        return self.verify_response(session, email)

    def verify_response(self, session: Session, email: str) -> dict[str, str]:
        """Authorize the session for allowed emails."""
        if is_allowed_email(email, self.allowed_domain):
            session["authorized"] = True
            session["email"] = email
            return {"status": "okay", "email": email}
        logger.info("Login attempt by: %s", email)
        return {"status": "failure", "reason": self.rejection_reason}

    def logout(self, session: Session) -> dict[str, str]:
        """Forget the session identity and report success."""
        session["email"] = None
        return self.logout_response(session)

    def logout_response(self, session: Session) -> dict[str, str]:
        """Clear the authorized flag."""
        if session.get("authorized"):
            session["authorized"] = None
        return {"status": "okay"}
