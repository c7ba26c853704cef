from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import or_

from ..errors import AuthorizationFailure
from ..extensions import db
from ..models import ChatRoom, Client, Message, Specialist


class RoomAccessGuard:
    """Participant checks run on every room-scoped socket action.

    Nothing is cached per connection: rooms live in the store and may disappear,
    and a connection may probe ids it was never admitted to.
    """

    def find_chat_room(self, user_id: int, room_id: int) -> Optional[ChatRoom]:
        return (
            db.session.query(ChatRoom)
            .join(Client, ChatRoom.client_id == Client.id)
            .join(Specialist, ChatRoom.specialist_id == Specialist.id)
            .filter(
                ChatRoom.id == room_id,
                or_(Client.user_id == user_id, Specialist.user_id == user_id),
            )
            .first()
        )

    def can_join_chat_room(self, user_id: int, room_id: int) -> bool:
        return self.find_chat_room(user_id, room_id) is not None

    def can_join_notification_channel(self, user_id: int, target_user_id: int) -> bool:
        return user_id == target_user_id

    def require_chat_room(self, user_id: int, room_id: int) -> ChatRoom:
        room = self.find_chat_room(user_id, room_id)
        if room is None:
            logging.info("guard: user %s denied chat room %s", user_id, room_id)
            raise AuthorizationFailure("Chat room not found or access denied")
        return room

    def find_accessible_message(
        self, user_id: int, message_id: int, room_id: int
    ) -> Optional[Message]:
        """Message ``message_id`` if it sits in ``room_id`` and the user participates there."""
        return (
            db.session.query(Message)
            .join(ChatRoom, Message.chat_room_id == ChatRoom.id)
            .join(Client, ChatRoom.client_id == Client.id)
            .join(Specialist, ChatRoom.specialist_id == Specialist.id)
            .filter(
                Message.id == message_id,
                Message.chat_room_id == room_id,
                or_(Client.user_id == user_id, Specialist.user_id == user_id),
            )
            .first()
        )
