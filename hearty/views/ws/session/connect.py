from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from flask import request
from flask_socketio import ConnectionRefusedError

from ....errors import AuthFailure
from ....lib.utils import isoformat, utcnow
from ....realtime.auth import authenticate_handshake
from ....realtime.channels import user_channel
from ....realtime.presence import PresenceStatus

if TYPE_CHECKING:
    from ....realtime import Realtime


def register(realtime: Realtime) -> None:
    socketio = realtime.socketio

    @socketio.on("connect")
    def _on_connect(auth=None):
        sid = request.sid
        # Authentication runs before anything is recorded for this socket
        try:
            identity = authenticate_handshake(auth)
        except AuthFailure as e:
            logging.info("connect: refused sid=%s: %s", sid, e.message)
            raise ConnectionRefusedError(e.message)

        realtime.connections.open(sid, identity)
        try:
            realtime.join(sid, user_channel(identity.user_id))
            realtime.connections.activate(sid)
            realtime.presence.set_presence(identity.user_id, PresenceStatus.ONLINE.value, sid)
        except Exception:
            logging.exception("connect: activation failed for user=%s sid=%s", identity.user_id, sid)
            realtime.connections.close(sid)
            raise ConnectionRefusedError("Connection setup failed")

        logging.info("connect: user=%s (%s) sid=%s", identity.user_id, identity.role, sid)
        realtime.broadcast(
            "user:online",
            {
                "userId": identity.user_id,
                "status": PresenceStatus.ONLINE.value,
                "timestamp": isoformat(utcnow()),
            },
            skip_sid=sid,
        )
