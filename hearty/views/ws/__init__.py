from __future__ import annotations

from typing import TYPE_CHECKING

from . import chat, notifications, presence
from .session import register_connect, register_disconnect, register_logout

if TYPE_CHECKING:
    from ...realtime import Realtime

__all__ = ["register_socket_handlers"]


def register_socket_handlers(realtime: Realtime) -> None:
    # connect first: the handshake check must be in place before any room handler
    register_connect(realtime)
    register_disconnect(realtime)
    register_logout(realtime)
    chat.register_socket_handlers(realtime)
    notifications.register_socket_handlers(realtime)
    presence.register_socket_handlers(realtime)
