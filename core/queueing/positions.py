"""
Queue position assignment.

Waiting interviews of one company are split into committee, external and
internal buckets. Each bucket is ordered by priority (highest first) and then
by arrival, and the buckets are interleaved with a fixed per-cycle quota
(3 committee, 2 external, 2 internal by default) so committee members are
served often while neither student group is starved.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Sequence

from core.queueing.priority import QueueBucket, queue_bucket
from core.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InterleaveQuota:
    """How many entries each bucket contributes per cycle."""

    committee: int = 3
    external: int = 2
    internal: int = 2

    def __post_init__(self):
        if min(self.committee, self.external, self.internal) < 1:
            raise ValueError("Interleave quotas must be at least 1")

    def cycle(self) -> tuple[tuple[QueueBucket, int], ...]:
        return (
            (QueueBucket.COMMITTEE, self.committee),
            (QueueBucket.EXTERNAL, self.external),
            (QueueBucket.INTERNAL, self.internal),
        )


DEFAULT_QUOTA = InterleaveQuota()


@dataclass(frozen=True)
class QueueEntry:
    """The facts about a waiting interview that decide its place."""

    interview_id: int
    priority: int
    created_at: datetime
    bucket: QueueBucket

    def sort_key(self) -> tuple:
        return (-self.priority, self.created_at, self.interview_id)


def order_waiting(
    entries: Iterable[QueueEntry], quota: InterleaveQuota = DEFAULT_QUOTA
) -> list[QueueEntry]:
    """
    Produce the total order of a company's waiting set.

    Each bucket is sorted once and then consumed through an index cursor, so
    the interleave is linear in the number of entries.
    """
    buckets: dict[QueueBucket, list[QueueEntry]] = {bucket: [] for bucket in QueueBucket}
    for entry in entries:
        buckets[entry.bucket].append(entry)
    for members in buckets.values():
        members.sort(key=QueueEntry.sort_key)

    cursors = {bucket: 0 for bucket in QueueBucket}
    remaining = sum(len(members) for members in buckets.values())
    ordered: list[QueueEntry] = []

    while remaining:
        for bucket, take in quota.cycle():
            members = buckets[bucket]
            start = cursors[bucket]
            stop = min(start + take, len(members))
            ordered.extend(members[start:stop])
            cursors[bucket] = stop
            remaining -= stop - start

    return ordered


def number_positions(ordered: Sequence[QueueEntry]) -> dict[int, int]:
    """Map interview ids to 1-based positions."""
    return {entry.interview_id: index for index, entry in enumerate(ordered, start=1)}


class PositionAssigner:
    """Recomputes and persists the queue positions of one company."""

    def __init__(self, store, quota: InterleaveQuota = DEFAULT_QUOTA):
        self.store = store
        self.quota = quota

    async def assign_positions(self, company_id: int) -> dict[int, int]:
        """
        Renumber the WAITING interviews of ``company_id`` as 1..N.

        Runs inside the caller's transaction and must be called while the
        company's queue lock is held. In-progress interviews are not part of
        the reordering. Returns the new positions keyed by interview id.
        """
        waiting = await self.store.list_waiting_with_candidates(company_id)
        if not waiting:
            return {}

        entries = [
            QueueEntry(
                interview_id=interview.id,
                priority=interview.priority,
                created_at=ensure_utc(interview.created_at),
                bucket=queue_bucket(candidate),
            )
            for interview, candidate in waiting
        ]
        positions = number_positions(order_waiting(entries, self.quota))
        await self.store.update_positions(positions)

        logger.debug(
            f"Reassigned {len(positions)} queue positions for company {company_id}"
        )
        return positions
