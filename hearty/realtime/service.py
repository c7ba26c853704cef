from __future__ import annotations

import logging
from typing import Optional, Union

from flask import Flask
from flask_socketio import SocketIO, join_room, leave_room

from .connections import ConnectionRegistry, MemoryConnectionRegistry
from .emitter import OutboundEmitter
from .guard import RoomAccessGuard
from .presence import PresenceStore, create_presence_store


class Realtime:
    """The process-wide socket service.

    Built once by the application factory and handed explicitly to every socket
    handler group and REST blueprint that needs to push or query live state.
    ``ready`` flips only after the transport is attached and handlers are
    registered; the emitter drops pushes until then.
    """

    def __init__(
        self,
        presence: Optional[PresenceStore] = None,
        connections: Optional[ConnectionRegistry] = None,
        guard: Optional[RoomAccessGuard] = None,
    ) -> None:
        self.socketio = SocketIO()
        self.presence = presence
        self.connections: ConnectionRegistry = (
            connections if connections is not None else MemoryConnectionRegistry()
        )
        self.guard = guard or RoomAccessGuard()
        self.emitter = OutboundEmitter(self)
        self.presence_ttl_seconds = 0
        self.ready = False

    def init_app(self, app: Flask, allowed_origins: Union[str, list[str]] = "*") -> None:
        if self.presence is None:
            self.presence = create_presence_store(app.config)
        self.presence_ttl_seconds = int(app.config.get("PRESENCE_TTL_SECONDS", 0) or 0)

        self.socketio.init_app(
            app,
            cors_allowed_origins=allowed_origins,
            async_mode=app.config.get("SOCKETIO_ASYNC_MODE") or "gevent",
            ping_interval=app.config.get("SOCKETIO_PING_INTERVAL", 25),
            ping_timeout=app.config.get("SOCKETIO_PING_TIMEOUT", 60),
            logger=False,
            engineio_logger=False,
        )

        from ..views.ws import register_socket_handlers

        register_socket_handlers(self)
        app.extensions["realtime"] = self
        self.ready = True
        app.logger.info(
            "realtime: socket layer ready (async_mode=%s, presence=%s)",
            self.socketio.async_mode,
            type(self.presence).__name__,
        )

    def join(self, sid: str, channel: str) -> bool:
        join_room(channel, sid=sid)
        return self.connections.join(sid, channel)

    def leave(self, sid: str, channel: str) -> bool:
        leave_room(channel, sid=sid)
        return self.connections.leave(sid, channel)

    def reply(self, sid: str, event: str, payload: dict) -> None:
        self.socketio.emit(event, payload, to=sid)

    def emit_error(self, sid: str, message: str) -> None:
        self.socketio.emit("error", {"message": message}, to=sid)

    def broadcast(self, event: str, payload: dict, skip_sid: Optional[str] = None) -> None:
        """Emit to every connection of the process, optionally excluding one."""
        self.socketio.emit(event, payload, skip_sid=skip_sid)

    def broadcast_to(self, room: Union[str, list[str]], event: str, payload: dict, skip_sid: Optional[str] = None) -> None:
        self.socketio.emit(event, payload, to=room, skip_sid=skip_sid)

    def prune_presence(self) -> None:
        if self.presence_ttl_seconds <= 0:
            return
        try:
            removed = self.presence.prune(self.presence_ttl_seconds)
            if removed:
                logging.info("realtime: pruned %s stale presence records", removed)
        except Exception:
            logging.exception("realtime: presence prune failed")
