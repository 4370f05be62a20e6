"""Contribution log data access."""

import asyncio
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol

from contribution_logger.domain.contributions import (
    ContributionLogEntry,
    ContributorActivity,
    ContributorCounts,
    DeletionKey,
)

ACTIVE_WINDOW_DAYS = 365
NEW_CONTRIBUTOR_WINDOW_DAYS = 7


class ContributionRepository(Protocol):
    """Persistence interface for logged contributions."""

    def insert_entry(self, entry: ContributionLogEntry) -> None:
        """Store a new entry."""

    def delete_entry(self, key: DeletionKey) -> None:
        """Delete at most one entry matching the key."""

    def list_recent_entries(
        self, logged_by: str, limit: int
    ) -> list[ContributionLogEntry]:
        """Return the most recently logged entries for a user, newest first."""

    def list_contributor_activity(
        self, team: str, bucket: str, until: date
    ) -> list[ContributorActivity]:
        """Return contributor activity on or before a date."""


@dataclass
class ContributionService:
    """Async facade over the contribution repository.

    Repository calls are blocking, so each one runs in a worker thread.
    """

    repository: ContributionRepository
    recent_limit: int = 20

    async def insert(self, entry: ContributionLogEntry) -> None:
        """Persist a new entry."""
        await asyncio.to_thread(self.repository.insert_entry, entry)

    async def recently_logged(self, email: str) -> list[ContributionLogEntry]:
        """Return the user's most recent entries."""
        return await asyncio.to_thread(
            self.repository.list_recent_entries, email, self.recent_limit
        )

    async def delete_item(self, key: DeletionKey) -> None:
        """Delete an entry by its composite key."""
        await asyncio.to_thread(self.repository.delete_entry, key)

    async def get_contributor_counts(
        self, day: date, team: str, bucket: str
    ) -> ContributorCounts:
        """Return active and new contributor counts as of a day."""
        activity = await asyncio.to_thread(
            self.repository.list_contributor_activity, team, bucket, day
        )
        return _count_contributors(day, team, bucket, activity)


def _count_contributors(
    day: date, team: str, bucket: str, activity: list[ContributorActivity]
) -> ContributorCounts:
    active_since = day - timedelta(days=ACTIVE_WINDOW_DAYS - 1)
    new_since = day - timedelta(days=NEW_CONTRIBUTOR_WINDOW_DAYS - 1)
    first_seen: dict[str, date] = {}
    active: set[str] = set()
    for row in activity:
        if row.contribution_date > day:
            continue
        seen = first_seen.get(row.contributor_id)
        if seen is None or row.contribution_date < seen:
            first_seen[row.contributor_id] = row.contribution_date
        if row.contribution_date >= active_since:
            active.add(row.contributor_id)
    new = {
        contributor
        for contributor, first in first_seen.items()
        if first >= new_since
    }
    return ContributorCounts(
        date=day,
        team=team,
        bucket=bucket,
        total_active_contributors=len(active),
        new_contributors_7_days=len(new),
    )
