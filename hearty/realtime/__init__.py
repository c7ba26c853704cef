from .service import Realtime
from .connections import Connection, ConnectionRegistry, ConnectionState, MemoryConnectionRegistry
from .emitter import OutboundEmitter
from .guard import RoomAccessGuard
from .presence import (
    MemoryPresenceStore,
    PresenceRecord,
    PresenceStatus,
    PresenceStore,
    RedisPresenceStore,
)

__all__ = [
    "Realtime",
    "Connection",
    "ConnectionRegistry",
    "ConnectionState",
    "MemoryConnectionRegistry",
    "OutboundEmitter",
    "RoomAccessGuard",
    "MemoryPresenceStore",
    "PresenceRecord",
    "PresenceStatus",
    "PresenceStore",
    "RedisPresenceStore",
]
