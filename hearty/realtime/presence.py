"""
Presence registry: advisory online/away/offline status per user.

Presence is only used for display, never for access control. Writes are
unconditional upserts (last writer wins), so two connections of the same user
may race: whichever connect/disconnect/update lands last decides the status.
Records are kept after a user goes offline so ``lastSeen`` stays answerable;
``prune`` drops old offline records when a TTL is configured.

Stores are swapped behind ``PresenceStore`` without touching handler code. All
writes happen on the single event-processing context of this process.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from ..helpers.redis import get_redis_client
from ..lib.utils import isoformat, utcnow


class PresenceStatus(str, Enum):
    ONLINE = "online"
    AWAY = "away"
    OFFLINE = "offline"


# Statuses a client may request explicitly; offline only comes from a disconnect
CLIENT_SETTABLE_STATUSES = frozenset({PresenceStatus.ONLINE.value, PresenceStatus.AWAY.value})


@dataclass
class PresenceRecord:
    user_id: int
    status: str
    last_seen: datetime
    connection_id: Optional[str] = None

    def to_dict(self):
        return {
            "userId": self.user_id,
            "status": self.status,
            "lastSeen": isoformat(self.last_seen),
        }


class PresenceStore(ABC):
    @abstractmethod
    def set_presence(
        self, user_id: int, status: str, connection_id: Optional[str] = None
    ) -> PresenceRecord:
        ...

    @abstractmethod
    def get_presence(self, user_id: int) -> Optional[PresenceRecord]:
        ...

    @abstractmethod
    def list_online(self) -> list[PresenceRecord]:
        ...

    @abstractmethod
    def prune(self, max_age_seconds: int) -> int:
        """Remove offline records older than ``max_age_seconds``; return how many."""

    def is_online(self, user_id: int) -> bool:
        record = self.get_presence(user_id)
        return bool(record and record.status == PresenceStatus.ONLINE.value)


class MemoryPresenceStore(PresenceStore):
    def __init__(self) -> None:
        self._records: dict[int, PresenceRecord] = {}

    def set_presence(self, user_id, status, connection_id=None):
        record = PresenceRecord(
            user_id=user_id,
            status=PresenceStatus(status).value,
            last_seen=utcnow(),
            connection_id=connection_id,
        )
        self._records[user_id] = record
        return record

    def get_presence(self, user_id):
        return self._records.get(user_id)

    def list_online(self):
        return [r for r in self._records.values() if r.status == PresenceStatus.ONLINE.value]

    def prune(self, max_age_seconds):
        cutoff = utcnow() - timedelta(seconds=max_age_seconds)
        stale = [
            uid
            for uid, r in self._records.items()
            if r.status == PresenceStatus.OFFLINE.value and r.last_seen < cutoff
        ]
        for uid in stale:
            del self._records[uid]
        return len(stale)

    def __len__(self) -> int:
        return len(self._records)


class RedisPresenceStore(PresenceStore):
    """Presence kept in Redis hashes, one per user, plus an index set of user ids."""

    def __init__(self, client, prefix: str = "presence") -> None:
        self._redis = client
        self._prefix = prefix

    def _user_key(self, user_id: int) -> str:
        return f"{self._prefix}:user:{user_id}"

    def _index_key(self) -> str:
        return f"{self._prefix}:users"

    @staticmethod
    def _to_epoch(value: datetime) -> float:
        return value.replace(tzinfo=timezone.utc).timestamp()

    @staticmethod
    def _from_epoch(value: str) -> datetime:
        return datetime.fromtimestamp(float(value), timezone.utc).replace(tzinfo=None)

    def _decode(self, user_id: int, fields: dict) -> Optional[PresenceRecord]:
        if not fields:
            return None
        return PresenceRecord(
            user_id=user_id,
            status=fields.get("status", PresenceStatus.OFFLINE.value),
            last_seen=self._from_epoch(fields.get("last_seen", "0")),
            connection_id=fields.get("connection_id") or None,
        )

    def set_presence(self, user_id, status, connection_id=None):
        record = PresenceRecord(
            user_id=user_id,
            status=PresenceStatus(status).value,
            last_seen=utcnow(),
            connection_id=connection_id,
        )
        pipe = self._redis.pipeline()
        pipe.hset(
            self._user_key(user_id),
            mapping={
                "status": record.status,
                "last_seen": str(self._to_epoch(record.last_seen)),
                "connection_id": connection_id or "",
            },
        )
        pipe.sadd(self._index_key(), user_id)
        pipe.execute()
        return record

    def get_presence(self, user_id):
        return self._decode(user_id, self._redis.hgetall(self._user_key(user_id)))

    def _all_records(self) -> list[PresenceRecord]:
        user_ids = sorted(int(uid) for uid in self._redis.smembers(self._index_key()))
        if not user_ids:
            return []
        pipe = self._redis.pipeline()
        for uid in user_ids:
            pipe.hgetall(self._user_key(uid))
        records = []
        for uid, fields in zip(user_ids, pipe.execute()):
            record = self._decode(uid, fields)
            if record:
                records.append(record)
        return records

    def list_online(self):
        return [r for r in self._all_records() if r.status == PresenceStatus.ONLINE.value]

    def prune(self, max_age_seconds):
        cutoff = utcnow() - timedelta(seconds=max_age_seconds)
        stale = [
            r.user_id
            for r in self._all_records()
            if r.status == PresenceStatus.OFFLINE.value and r.last_seen < cutoff
        ]
        if stale:
            pipe = self._redis.pipeline()
            for uid in stale:
                pipe.delete(self._user_key(uid))
                pipe.srem(self._index_key(), uid)
            pipe.execute()
        return len(stale)


def create_presence_store(config) -> PresenceStore:
    backend = (config.get("PRESENCE_BACKEND") or "memory").lower()
    if backend == "redis":
        client = get_redis_client(config.get("REDIS_URL", ""))
        if client is not None:
            return RedisPresenceStore(client)
        logging.warning("create_presence_store: Redis not available, using in-memory presence")
    elif backend != "memory":
        logging.warning("create_presence_store: unknown backend %r, using in-memory presence", backend)
    return MemoryPresenceStore()
