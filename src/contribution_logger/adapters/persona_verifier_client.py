"""Persona remote verification client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class IdentityVerificationError(Exception):
    """Raised when an identity assertion cannot be verified."""


class IdentityVerifier(Protocol):
    """Interface for verifying identity assertions."""

    async def verify(self, assertion: str, audience: str) -> str:
        """Return the verified email for an assertion."""


@dataclass
class HttpxPersonaVerifier(IdentityVerifier):
    """Persona verifier implemented with httpx."""

    verifier_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, verifier_url: str) -> "HttpxPersonaVerifier":
        """Create a verifier with a managed httpx session."""
        return cls(verifier_url=verifier_url, http_client=httpx.AsyncClient())

    async def verify(self, assertion: str, audience: str) -> str:
        """Verify an assertion against the remote verifier."""
        if not assertion:
            raise IdentityVerificationError("need assertion")
        try:
            response = await self.http_client.post(
                self.verifier_url,
                data={"assertion": assertion, "audience": audience},
                timeout=10,
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise IdentityVerificationError(f"verifier unavailable: {exc}") from exc
        if not isinstance(payload, dict):
            raise IdentityVerificationError("unexpected verifier response")
        if payload.get("status") != "okay" or not payload.get("email"):
            reason = payload.get("reason") or "assertion rejected"
            raise IdentityVerificationError(str(reason))
        return str(payload["email"])

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()
