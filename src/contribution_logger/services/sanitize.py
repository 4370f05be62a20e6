"""Input cleaning and presentation helpers."""

import html
import re
from collections.abc import Iterable
from urllib.parse import urlencode

from contribution_logger.domain.contributions import ContributionLogEntry, RecentEntry

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def clean(value: object) -> str:
    """Return a string that is safe to interpolate into HTML."""
    if value is None:
        return ""
    text = _CONTROL_CHARS.sub("", str(value).strip())
    return html.escape(text, quote=True)


def ends_with(value: str, suffix: str) -> bool:
    """Return true when value ends exactly with suffix."""
    if not suffix or len(suffix) > len(value):
        return False
    return value[-len(suffix) :] == suffix


def is_allowed_email(email: str | None, domain: str) -> bool:
    """Return true when the email belongs to the given domain."""
    if not email:
        return False
    return ends_with(email.strip().lower(), "@" + domain.lower())


def clean_recent_for_presentation(
    entries: Iterable[ContributionLogEntry] | None,
) -> list[RecentEntry]:
    """Map stored entries into cleaned rows for the logging page."""
    recent = []
    for entry in entries or []:
        day = entry.contribution_date.isoformat()
        delete_query = urlencode(
            {
                "contributor_id": entry.contributor_id,
                "contribution_date": day,
                "mofo_team": entry.mofo_team,
                "data_bucket": entry.data_bucket,
            }
        )
        repeat_query = urlencode(
            {
                "team": entry.mofo_team,
                "type": entry.type,
                "description": entry.description,
                "date": day,
            }
        )
        recent.append(
            RecentEntry(
                contributor_id=clean(entry.contributor_id),
                contribution_date=clean(day),
                mofo_team=clean(entry.mofo_team),
                data_bucket=clean(entry.data_bucket),
                description=clean(entry.description),
                type=clean(entry.type),
                delete_query=clean(delete_query),
                repeat_query=clean(repeat_query),
            )
        )
    return recent
