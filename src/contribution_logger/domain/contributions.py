"""Domain models for contribution logging."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class ContributionLogEntry:
    """A single logged contribution, owned by the staff member who logged it."""

    logged_by: str
    contributor_id: str
    contribution_date: date
    mofo_team: str
    data_bucket: str
    description: str
    type: str


@dataclass(frozen=True)
class DeletionKey:
    """Composite key identifying a logged entry for deletion.

    ``contribution_date`` stays the raw string from the request. A value that
    is not a YYYY-MM-DD date matches no entry and deletes nothing.
    """

    logged_by: str
    contributor_id: str
    contribution_date: str
    mofo_team: str
    data_bucket: str


@dataclass(frozen=True)
class ContributorActivity:
    """Contributor id and date pair used for aggregate counts."""

    contributor_id: str
    contribution_date: date


@dataclass(frozen=True)
class ContributorCounts:
    """Aggregate contributor counts for a team and data bucket."""

    date: date
    team: str
    bucket: str
    total_active_contributors: int
    new_contributors_7_days: int


@dataclass(frozen=True)
class RecentEntry:
    """Display-ready view of a logged entry."""

    contributor_id: str
    contribution_date: str
    mofo_team: str
    data_bucket: str
    description: str
    type: str
    delete_query: str
    repeat_query: str
