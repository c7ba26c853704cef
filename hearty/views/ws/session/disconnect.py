from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from flask import request

from ....lib.utils import isoformat, utcnow
from ....realtime.presence import PresenceStatus

if TYPE_CHECKING:
    from ....realtime import Realtime


def register(realtime: Realtime) -> None:
    socketio = realtime.socketio

    @socketio.on("disconnect")
    def _on_disconnect(*_args):
        sid = request.sid
        try:
            conn = realtime.connections.close(sid)
            if conn is None or conn.user_id is None:
                logging.warning("disconnect: no connection record for sid=%s", sid)
                return

            user_id = conn.user_id
            # Unconditional: a second live connection of the same user is overwritten too
            realtime.presence.set_presence(user_id, PresenceStatus.OFFLINE.value, sid)
            logging.info("disconnect: user=%s sid=%s", user_id, sid)
            realtime.broadcast(
                "user:offline",
                {
                    "userId": user_id,
                    "status": PresenceStatus.OFFLINE.value,
                    "timestamp": isoformat(utcnow()),
                },
                skip_sid=sid,
            )
            realtime.prune_presence()
        except Exception:
            logging.exception("disconnect handler error (sid=%s)", sid)
