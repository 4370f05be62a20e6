"""Supabase repository for logged contributions."""

from dataclasses import dataclass
from datetime import date

from supabase import Client

from contribution_logger.domain.contributions import (
    ContributionLogEntry,
    ContributorActivity,
    DeletionKey,
)
from contribution_logger.services.contributions import ContributionRepository
from contribution_logger.services.forms import parse_iso_date

_ENTRY_COLUMNS = (
    "logged_by, contributor_id, contribution_date, mofo_team, data_bucket, "
    "description, type"
)


@dataclass
class SupabaseContributionRepository(ContributionRepository):
    """Supabase implementation for the contributions table."""

    client: Client

    def insert_entry(self, entry: ContributionLogEntry) -> None:
        """Insert a single contribution row."""
        response = (
            self.client.table("contributions")
            .insert(
                {
                    "logged_by": entry.logged_by,
                    "contributor_id": entry.contributor_id,
                    "contribution_date": entry.contribution_date.isoformat(),
                    "mofo_team": entry.mofo_team,
                    "data_bucket": entry.data_bucket,
                    "description": entry.description,
                    "type": entry.type,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to log contribution")

    def delete_entry(self, key: DeletionKey) -> None:
        """Delete the first row matching the composite key, if any."""
        if parse_iso_date(key.contribution_date) is None:
            return
        response = (
            self.client.table("contributions")
            .select("id")
            .eq("logged_by", key.logged_by)
            .eq("contributor_id", key.contributor_id)
            .eq("contribution_date", key.contribution_date)
            .eq("mofo_team", key.mofo_team)
            .eq("data_bucket", key.data_bucket)
            .limit(1)
            .execute()
        )
        if not response.data:
            return
        self.client.table("contributions").delete().eq(
            "id", response.data[0]["id"]
        ).execute()

    def list_recent_entries(
        self, logged_by: str, limit: int
    ) -> list[ContributionLogEntry]:
        """Return the latest rows logged by a user."""
        response = (
            self.client.table("contributions")
            .select(_ENTRY_COLUMNS)
            .eq("logged_by", logged_by)
            .order("created_at", desc=True)
            .order("contribution_date", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]

    def list_contributor_activity(
        self, team: str, bucket: str, until: date
    ) -> list[ContributorActivity]:
        """Return contributor ids and dates for a team and bucket."""
        response = (
            self.client.table("contributions")
            .select("contributor_id, contribution_date")
            .eq("mofo_team", team)
            .eq("data_bucket", bucket)
            .lte("contribution_date", until.isoformat())
            .execute()
        )
        return [
            ContributorActivity(
                contributor_id=str(row["contributor_id"]),
                contribution_date=date.fromisoformat(str(row["contribution_date"])),
            )
            for row in response.data or []
        ]


def _parse_entry(row: dict[str, object]) -> ContributionLogEntry:
    return ContributionLogEntry(
        logged_by=str(row.get("logged_by", "")),
        contributor_id=str(row.get("contributor_id", "")),
        contribution_date=date.fromisoformat(str(row["contribution_date"])),
        mofo_team=str(row.get("mofo_team", "")),
        data_bucket=str(row.get("data_bucket", "")),
        description=str(row.get("description") or ""),
        type=str(row.get("type") or ""),
    )
