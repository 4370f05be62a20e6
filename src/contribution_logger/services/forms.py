"""Turns submitted logging forms into stored entries."""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime

from contribution_logger.domain.contributions import ContributionLogEntry
from contribution_logger.services.contributions import ContributionService

_REQUIRED_FIELDS = ("contributor_id", "mofo_team", "data_bucket")
_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


class ContributionFormError(ValueError):
    """Raised when a submitted form cannot become a log entry."""


@dataclass
class FormService:
    """Validates logging forms and hands entries to the data layer."""

    contribution_service: ContributionService

    async def process_form(
        self, form: Mapping[str, object], logged_by: str
    ) -> ContributionLogEntry:
        """Build an entry owned by ``logged_by`` and persist it."""
        entry = build_entry(form, logged_by)
        await self.contribution_service.insert(entry)
        return entry


def build_entry(form: Mapping[str, object], logged_by: str) -> ContributionLogEntry:
    """Validate form fields and return the entry they describe."""
    if not logged_by:
        raise ContributionFormError("Missing identity for logged entry")
    fields = {name: _field(form, name) for name in _REQUIRED_FIELDS}
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise ContributionFormError(f"Missing form fields: {', '.join(missing)}")
    return ContributionLogEntry(
        logged_by=logged_by,
        contributor_id=fields["contributor_id"],
        contribution_date=_parse_date(_field(form, "contribution_date")),
        mofo_team=fields["mofo_team"],
        data_bucket=fields["data_bucket"],
        description=_field(form, "description"),
        type=_field(form, "type"),
    )


def parse_iso_date(raw: str | None) -> date | None:
    """Parse a strict YYYY-MM-DD calendar date, or return None."""
    if not raw or not _ISO_DATE.fullmatch(raw.strip()):
        return None
    try:
        return datetime.strptime(raw.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def _parse_date(raw: str) -> date:
    parsed = parse_iso_date(raw)
    if parsed is None:
        raise ContributionFormError(
            f"Invalid contribution_date {raw!r}, expected YYYY-MM-DD"
        )
    return parsed


def _field(form: Mapping[str, object], name: str) -> str:
    value = form.get(name)
    if value is None:
        return ""
    return str(value).strip()
