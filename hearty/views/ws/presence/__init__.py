from __future__ import annotations

from typing import TYPE_CHECKING

from .update import register as register_presence_update
from .lookup import register as register_presence_lookup
from .chat_presence import register as register_chat_presence

if TYPE_CHECKING:
    from ....realtime import Realtime

__all__ = ["register_socket_handlers"]


def register_socket_handlers(realtime: Realtime) -> None:
    register_presence_update(realtime)
    register_presence_lookup(realtime)
    register_chat_presence(realtime)
