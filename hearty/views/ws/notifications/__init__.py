from __future__ import annotations

from typing import TYPE_CHECKING

from .subscribe import register as register_subscribe
from .mark_read import register as register_mark_read
from .unread_count import register as register_unread_count

if TYPE_CHECKING:
    from ....realtime import Realtime

__all__ = ["register_socket_handlers"]


def register_socket_handlers(realtime: Realtime) -> None:
    register_subscribe(realtime)
    register_mark_read(realtime)
    register_unread_count(realtime)
