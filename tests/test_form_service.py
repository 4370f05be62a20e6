"""Tests for form processing."""

import asyncio
from datetime import date

import pytest

from contribution_logger.services.contributions import ContributionService
from contribution_logger.services.forms import (
    ContributionFormError,
    FormService,
    parse_iso_date,
)
from tests.conftest import STAFF_EMAIL, InMemoryContributionRepository

FORM = {
    "contributor_id": " contributor@example.org ",
    "contribution_date": "2024-03-01",
    "mofo_team": "webmaker",
    "data_bucket": "code",
    "description": "Mentored a new contributor",
    "type": "mentoring",
    "logged_by": "intruder@example.org",
}


def test_process_form_persists_entry_owned_by_identity() -> None:
    repo = InMemoryContributionRepository()
    service = FormService(ContributionService(repo))

    entry = asyncio.run(service.process_form(FORM, STAFF_EMAIL))

    assert repo.entries == [entry]
    assert entry.logged_by == STAFF_EMAIL
    assert entry.contributor_id == "contributor@example.org"
    assert entry.contribution_date == date(2024, 3, 1)


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("contributor_id", ""),
        ("mofo_team", "  "),
        ("data_bucket", None),
        ("contribution_date", "2024-02-30"),
        ("contribution_date", "March 1"),
    ],
)
def test_process_form_rejects_invalid_fields(field: str, value: object) -> None:
    repo = InMemoryContributionRepository()
    service = FormService(ContributionService(repo))
    form = {**FORM, field: value}

    with pytest.raises(ContributionFormError):
        asyncio.run(service.process_form(form, STAFF_EMAIL))

    assert repo.entries == []


def test_process_form_propagates_store_failures() -> None:
    repo = InMemoryContributionRepository(fail_writes=True)
    service = FormService(ContributionService(repo))

    with pytest.raises(RuntimeError):
        asyncio.run(service.process_form(FORM, STAFF_EMAIL))


def test_parse_iso_date_is_strict() -> None:
    assert parse_iso_date("2024-02-29") == date(2024, 2, 29)
    assert parse_iso_date("2023-02-29") is None
    assert parse_iso_date("2024-2-9") is None
    assert parse_iso_date("20240209") is None
    assert parse_iso_date(None) is None
