"""
Advisory schedule conflict check.

Every event is assumed to last ASSUMED_EVENT_DURATION. Conflicts are
reported back to the caller but never block the write.
"""

from datetime import timedelta
from typing import Iterable, List

from services.coach_entries import ScheduledEvent

ASSUMED_EVENT_DURATION = timedelta(hours=1)


def overlaps(a: ScheduledEvent, b: ScheduledEvent) -> bool:
    return (
        a.starts_at < b.starts_at + ASSUMED_EVENT_DURATION
        and a.starts_at + ASSUMED_EVENT_DURATION > b.starts_at
    )


def find_conflicts(candidate: ScheduledEvent, existing: Iterable[ScheduledEvent]) -> List[ScheduledEvent]:
    """Existing events overlapping the candidate, in start order. The candidate itself is skipped."""
    conflicts = [
        event for event in existing
        if not (candidate.id is not None and event.id == candidate.id) and overlaps(candidate, event)
    ]
    return sorted(conflicts, key=lambda e: (e.starts_at, e.title))
