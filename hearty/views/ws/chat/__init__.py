from __future__ import annotations

from typing import TYPE_CHECKING

from .join import register as register_chat_join
from .leave import register as register_chat_leave
from .typing_indicator import register as register_chat_typing
from .message_read import register as register_message_read

if TYPE_CHECKING:
    from ....realtime import Realtime

__all__ = ["register_socket_handlers"]


def register_socket_handlers(realtime: Realtime) -> None:
    register_chat_join(realtime)
    register_chat_leave(realtime)
    register_chat_typing(realtime)
    register_message_read(realtime)
