"""Shared test fixtures."""

import threading
from dataclasses import dataclass, field
from datetime import date

import pytest
from fastapi.testclient import TestClient

from contribution_logger.adapters.persona_verifier_client import (
    IdentityVerificationError,
    IdentityVerifier,
)
from contribution_logger.api.app import create_app
from contribution_logger.config import Settings
from contribution_logger.containers import AppContainer
from contribution_logger.domain.contributions import (
    ContributionLogEntry,
    ContributorActivity,
    DeletionKey,
)
from contribution_logger.services.contributions import (
    ContributionRepository,
    ContributionService,
)
from contribution_logger.services.forms import FormService
from contribution_logger.services.identity import IdentityService

STAFF_EMAIL = "jane@mozillafoundation.org"


@dataclass
class InMemoryContributionRepository(ContributionRepository):
    """In-memory contribution repository for tests."""

    entries: list[ContributionLogEntry] = field(default_factory=list)
    activity_calls: list[tuple[str, str, date]] = field(default_factory=list)
    fail_writes: bool = False
    fail_reads: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def insert_entry(self, entry: ContributionLogEntry) -> None:
        if self.fail_writes:
            raise RuntimeError("store unavailable")
        with self._lock:
            self.entries.append(entry)

    def delete_entry(self, key: DeletionKey) -> None:
        if self.fail_writes:
            raise RuntimeError("store unavailable")
        with self._lock:
            for index, entry in enumerate(self.entries):
                if _matches(entry, key):
                    del self.entries[index]
                    return

    def list_recent_entries(
        self, logged_by: str, limit: int
    ) -> list[ContributionLogEntry]:
        if self.fail_reads:
            raise RuntimeError("store unavailable")
        mine = [entry for entry in self.entries if entry.logged_by == logged_by]
        return list(reversed(mine))[:limit]

    def list_contributor_activity(
        self, team: str, bucket: str, until: date
    ) -> list[ContributorActivity]:
        self.activity_calls.append((team, bucket, until))
        if self.fail_reads:
            raise RuntimeError("store unavailable")
        return [
            ContributorActivity(
                contributor_id=entry.contributor_id,
                contribution_date=entry.contribution_date,
            )
            for entry in self.entries
            if entry.mofo_team == team
            and entry.data_bucket == bucket
            and entry.contribution_date <= until
        ]


def _matches(entry: ContributionLogEntry, key: DeletionKey) -> bool:
    return (
        entry.logged_by == key.logged_by
        and entry.contributor_id == key.contributor_id
        and entry.contribution_date.isoformat() == key.contribution_date
        and entry.mofo_team == key.mofo_team
        and entry.data_bucket == key.data_bucket
    )


@dataclass
class FakeIdentityVerifier(IdentityVerifier):
    """Treats the assertion as the verified email."""

    calls: list[tuple[str, str]] = field(default_factory=list)

    async def verify(self, assertion: str, audience: str) -> str:
        self.calls.append((assertion, audience))
        if not assertion or assertion == "bad-assertion":
            raise IdentityVerificationError("assertion rejected")
        return assertion


def make_entry(**overrides: object) -> ContributionLogEntry:
    values: dict[str, object] = {
        "logged_by": STAFF_EMAIL,
        "contributor_id": "contributor@example.org",
        "contribution_date": date(2024, 3, 1),
        "mofo_team": "webmaker",
        "data_bucket": "code",
        "description": "Fixed a bug",
        "type": "github",
    }
    values.update(overrides)
    return ContributionLogEntry(**values)  # type: ignore[arg-type]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        session_secret="session-secret",
        host="http://localhost",
        port=5000,
    )


@pytest.fixture
def repository() -> InMemoryContributionRepository:
    return InMemoryContributionRepository()


@pytest.fixture
def verifier() -> FakeIdentityVerifier:
    return FakeIdentityVerifier()


@pytest.fixture
def container(
    settings: Settings,
    repository: InMemoryContributionRepository,
    verifier: FakeIdentityVerifier,
) -> AppContainer:
    contribution_service = ContributionService(
        repository=repository, recent_limit=settings.recent_limit
    )
    identity_service = IdentityService(
        verifier=verifier,
        audience=settings.audience,
        allowed_domain=settings.allowed_email_domain,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        contribution_service=contribution_service,
        form_service=FormService(contribution_service),
        identity_service=identity_service,
        close_resources=close_resources,
    )


@pytest.fixture
def client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container), follow_redirects=False)


def sign_in(client: TestClient, email: str = STAFF_EMAIL) -> dict[str, str]:
    response = client.post("/persona/verify", json={"assertion": email})
    assert response.status_code == 200
    return response.json()
