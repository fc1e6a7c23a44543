"""
Same-day scheduling conflict detection across several users.

A user's conflicts on a date are the events they organize on that date
followed by the events they attend as an accepted participant on that date,
each event listed once.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

from services.common.logging_config import get_logger
from services.events.services.day_window import (
    as_utc,
    local_day_window,
    parse_calendar_date,
)
from services.events.services.event_store import ConflictStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class EventSummary:
    id: str
    title: str
    scheduled_time: datetime


def merge_unique(*sources: Iterable) -> List:
    """
    Concatenate event lists, keeping the first occurrence of each event id.

    Order is preserved; nothing is re-sorted after the merge.
    """
    merged: Dict[str, object] = {}
    for source in sources:
        for event in source:
            if event.id not in merged:
                merged[event.id] = event
    return list(merged.values())


class ConflictResolver:
    """
    Computes, per user, the events that user is already committed to on a day.

    Args:
        store: Read access to events and participation records
        day_boundary_timezone: IANA zone for day boundaries; None means the
            server process's local timezone
        max_concurrency: Upper bound on users processed at once (1 = sequential)
    """

    def __init__(
        self,
        store: ConflictStore,
        *,
        day_boundary_timezone: Optional[str] = None,
        max_concurrency: int = 8,
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.store = store
        self.day_boundary_timezone = day_boundary_timezone
        self.max_concurrency = max_concurrency

    async def resolve_conflicts(
        self, user_ids: Sequence[str], date: Optional[str]
    ) -> Dict[str, List[EventSummary]]:
        """
        Map every requested user to their conflicting events on ``date``.

        Returns an empty mapping, without touching storage, when ``user_ids``
        is empty or ``date`` is missing or unparseable. Any storage error
        fails the whole call.
        """
        # Duplicate ids collapse to their first occurrence
        users = list(dict.fromkeys(user_ids or []))
        day = parse_calendar_date(date)
        if not users or day is None:
            return {}

        start, end = local_day_window(day, self.day_boundary_timezone)
        logger.debug(
            "Resolving conflicts",
            users=len(users),
            day=day.isoformat(),
            window_start=start.isoformat(),
            window_end=end.isoformat(),
        )

        participations = await self.store.find_accepted_participations(users)
        attending: Dict[str, Dict[str, None]] = {}
        for participation in participations:
            attending.setdefault(participation.user_id, {})[
                participation.event_id
            ] = None

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def resolve_user(user_id: str) -> List[EventSummary]:
            async with semaphore:
                return await self._resolve_user(
                    user_id, list(attending.get(user_id, {})), start, end
                )

        results = await asyncio.gather(
            *(resolve_user(user_id) for user_id in users), return_exceptions=True
        )

        conflicts: Dict[str, List[EventSummary]] = {}
        for user_id, result in zip(users, results):
            if isinstance(result, BaseException):
                logger.error(
                    "Conflict lookup failed",
                    user_id=user_id,
                    error=str(result),
                )
                raise result
            conflicts[user_id] = result
        return conflicts

    async def _resolve_user(
        self,
        user_id: str,
        attending_ids: List[str],
        start: datetime,
        end: datetime,
    ) -> List[EventSummary]:
        created = await self.store.find_events_in_range(
            start, end, created_by_id=user_id
        )
        attended = []
        if attending_ids:
            attended = await self.store.find_events_in_range(
                start, end, event_ids=attending_ids
            )

        return [
            EventSummary(
                id=event.id,
                title=event.title,
                scheduled_time=as_utc(event.scheduled_time),
            )
            for event in merge_unique(created, attended)
        ]
