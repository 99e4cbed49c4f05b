"""Room occupancy: who may run a room and which interview occupies it."""

import logging
from typing import Optional

from core.queueing.errors import AccessDenied, NotFound, RoomBusy
from database.models.rooms import Room

logger = logging.getLogger(__name__)


class RoomCoordinator:
    """
    Guards the at-most-one-interview-per-room rule.

    Only touches ``Room.current_interview_id``; interview state is sequenced
    by the lifecycle controller.
    """

    def __init__(self, store):
        self.store = store

    @staticmethod
    def is_authorized(room: Room, committee_member_id: int) -> bool:
        return committee_member_id in room.committee_member_ids

    async def room_for_company(self, company_id: int) -> Optional[Room]:
        return await self.store.get_room_for_company(company_id)

    async def room_for_member(self, committee_member_id: int) -> Optional[Room]:
        return await self.store.get_room_for_member(committee_member_id)

    async def _load(self, room_id: int) -> Room:
        room = await self.store.get_room(room_id)
        if room is None:
            raise NotFound("Room not found", room_id=room_id)
        return room

    async def claim(
        self,
        room_id: int,
        interview_id: int,
        committee_member_id: Optional[int],
    ) -> Room:
        """
        Put ``interview_id`` into the room.

        ``committee_member_id=None`` skips the staffing check; it is reserved
        for administrative overrides.
        """
        room = await self._load(room_id)
        if committee_member_id is not None and not self.is_authorized(
            room, committee_member_id
        ):
            logger.warning(
                f"Committee member {committee_member_id} denied access to room {room_id}"
            )
            raise AccessDenied(room_id=room_id, committee_member_id=committee_member_id)

        if room.current_interview_id is not None:
            raise RoomBusy(room_id=room_id, current_interview_id=room.current_interview_id)

        if not await self.store.set_room_interview_if_free(room_id, interview_id):
            # Another writer got there between the read and the update
            raise RoomBusy(room_id=room_id)

        logger.info(f"Room {room_id} claimed by interview {interview_id}")
        return room

    async def release(self, room_id: int) -> None:
        """Free the room. Releasing a free room is a no-op."""
        room = await self._load(room_id)
        previous = room.current_interview_id
        await self.store.clear_room_interview(room_id)
        if previous is not None:
            logger.info(f"Room {room_id} released by interview {previous}")
