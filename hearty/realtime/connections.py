from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..security import Identity


class ConnectionState(Enum):
    CONNECTING = "connecting"
    AUTHENTICATED = "authenticated"
    ACTIVE = "active"
    DISCONNECTED = "disconnected"


_TRANSITIONS = {
    ConnectionState.CONNECTING: {ConnectionState.AUTHENTICATED, ConnectionState.DISCONNECTED},
    ConnectionState.AUTHENTICATED: {ConnectionState.ACTIVE, ConnectionState.DISCONNECTED},
    ConnectionState.ACTIVE: {ConnectionState.DISCONNECTED},
    ConnectionState.DISCONNECTED: set(),
}


@dataclass
class Connection:
    sid: str
    identity: Optional[Identity] = None
    state: ConnectionState = ConnectionState.CONNECTING
    rooms: set[str] = field(default_factory=set)

    @property
    def user_id(self) -> Optional[int]:
        return self.identity.user_id if self.identity else None

    def transition(self, target: ConnectionState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise ValueError(f"connection {self.sid}: cannot go from {self.state.value} to {target.value}")
        self.state = target


class ConnectionRegistry(ABC):
    """Live connections of this process and the channels each one holds.

    Membership is connection-scoped: closing a connection drops all of its
    channels. The registry mirrors what the transport's own room manager holds
    so handlers and tests can reason about memberships without reaching into it.
    """

    @abstractmethod
    def open(self, sid: str, identity: Identity) -> Connection:
        ...

    @abstractmethod
    def activate(self, sid: str) -> Connection:
        ...

    @abstractmethod
    def get(self, sid: str) -> Optional[Connection]:
        ...

    @abstractmethod
    def join(self, sid: str, channel: str) -> bool:
        """Add ``channel`` to the connection; False when already joined or unknown."""

    @abstractmethod
    def leave(self, sid: str, channel: str) -> bool:
        ...

    @abstractmethod
    def members(self, channel: str) -> set[str]:
        ...

    @abstractmethod
    def connections_for_user(self, user_id: int) -> list[Connection]:
        ...

    @abstractmethod
    def close(self, sid: str) -> Optional[Connection]:
        """Release every channel, mark the connection disconnected and forget it."""

    @abstractmethod
    def __len__(self) -> int:
        ...


class MemoryConnectionRegistry(ConnectionRegistry):
    def __init__(self) -> None:
        self._connections: dict[str, Connection] = {}
        self._channels: dict[str, set[str]] = {}

    def open(self, sid: str, identity: Identity) -> Connection:
        conn = Connection(sid=sid)
        conn.identity = identity
        conn.transition(ConnectionState.AUTHENTICATED)
        self._connections[sid] = conn
        return conn

    def activate(self, sid: str) -> Connection:
        conn = self._connections[sid]
        conn.transition(ConnectionState.ACTIVE)
        return conn

    def get(self, sid: str) -> Optional[Connection]:
        return self._connections.get(sid)

    def join(self, sid: str, channel: str) -> bool:
        conn = self._connections.get(sid)
        if conn is None or channel in conn.rooms:
            return False
        conn.rooms.add(channel)
        self._channels.setdefault(channel, set()).add(sid)
        return True

    def leave(self, sid: str, channel: str) -> bool:
        conn = self._connections.get(sid)
        if conn is None or channel not in conn.rooms:
            return False
        conn.rooms.discard(channel)
        members = self._channels.get(channel)
        if members is not None:
            members.discard(sid)
            if not members:
                del self._channels[channel]
        return True

    def members(self, channel: str) -> set[str]:
        return set(self._channels.get(channel, ()))

    def connections_for_user(self, user_id: int) -> list[Connection]:
        return [c for c in self._connections.values() if c.user_id == user_id]

    def close(self, sid: str) -> Optional[Connection]:
        conn = self._connections.get(sid)
        if conn is None:
            return None
        for channel in list(conn.rooms):
            self.leave(sid, channel)
        conn.transition(ConnectionState.DISCONNECTED)
        del self._connections[sid]
        return conn

    def __len__(self) -> int:
        return len(self._connections)
