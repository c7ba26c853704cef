"""
Push side of the realtime layer, used by REST handlers and services only.

Every call is fire-and-forget. The persisted write has already succeeded by
the time anything is pushed, so a push that cannot be delivered (socket layer
not attached yet, transport error) is logged and dropped, never raised.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Optional, Union

from .channels import chat_channel, notifications_channel, user_channel

if TYPE_CHECKING:
    from ..models import Message, Notification
    from .service import Realtime


class OutboundEmitter:
    def __init__(self, realtime: Realtime) -> None:
        self._realtime = realtime

    def _emit(self, event: str, payload: dict, to: Optional[Union[str, list[str]]] = None) -> bool:
        if not self._realtime.ready:
            logging.warning("emitter: realtime layer not initialized, skipping emit %s (to=%s)", event, to)
            return False
        try:
            self._realtime.socketio.emit(event, payload, to=to)
        except Exception:
            logging.exception("emitter: emit %s failed (to=%s)", event, to)
            return False
        return True

    def emit_to_room(self, room: str, event: str, payload: dict) -> bool:
        return self._emit(event, payload, to=room)

    def emit_to_rooms(self, rooms: Iterable[str], event: str, payload: dict) -> bool:
        # One emit so a connection sitting in several of the rooms gets it once
        return self._emit(event, payload, to=list(dict.fromkeys(rooms)))

    def emit_to_user(self, user_id: int, event: str, payload: dict) -> bool:
        return self._emit(event, payload, to=user_channel(user_id))

    def emit_to_all(self, event: str, payload: dict) -> bool:
        return self._emit(event, payload)

    def emit_new_message(self, message: Message, recipient_id: Optional[int] = None) -> bool:
        rooms = [chat_channel(message.chat_room_id)]
        if recipient_id is not None:
            rooms.append(user_channel(recipient_id))
        return self.emit_to_rooms(rooms, "chat:message:new", message.to_dict())

    def emit_message_read(self, message: Message, read_by: int) -> bool:
        payload = {
            "messageId": message.id,
            "roomId": message.chat_room_id,
            "readBy": read_by,
            "readAt": message.to_dict()["readAt"],
        }
        return self.emit_to_rooms(
            [chat_channel(message.chat_room_id), user_channel(message.sender_id)],
            "chat:message:read",
            payload,
        )

    def emit_new_notification(self, notification: Notification) -> bool:
        return self.emit_to_rooms(
            [user_channel(notification.user_id), notifications_channel(notification.user_id)],
            "notification:new",
            notification.to_dict(),
        )

    def emit_notification_update(self, notification: Notification) -> bool:
        return self.emit_to_rooms(
            [user_channel(notification.user_id), notifications_channel(notification.user_id)],
            "notification:updated",
            notification.to_dict(),
        )
