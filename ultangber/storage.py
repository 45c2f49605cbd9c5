from __future__ import annotations
import logging
import os
import threading
import time
from collections import OrderedDict
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Protocol

from redis import Redis
from redis.exceptions import LockError

from .models.session import GameSession

logger = logging.getLogger(__name__)

REDIS_URL = os.getenv("REDIS_URL")
MAX_SESSIONS = int(os.getenv("MAX_SESSIONS", "50"))
LOG_LIMIT = int(os.getenv("LOG_LIMIT", "500"))
LOCK_TTL = int(os.getenv("LOCK_TTL", "30"))  # seconds a crashed worker can hold a game

INDEX = "game:index"  # sorted-set: member=sid, score=last touch (unix seconds)


def _k(sid: str) -> str:
    return f"game:{sid}"


def _log_k(sid: str) -> str:
    return f"game:{sid}:log"


def _lock_k(sid: str) -> str:
    return f"game:{sid}:lock"


class SessionBusy(Exception):
    """Another request is already changing this game."""


class GameStore(Protocol):
    def get(self, sid: str) -> Optional[GameSession]: ...
    def save(self, sess: GameSession) -> None: ...
    def delete(self, sid: str) -> bool: ...
    def list_all(self) -> List[GameSession]: ...


class LogStore(Protocol):
    def append(self, sid: str, line: str) -> None: ...
    def list(self, sid: str, limit: int) -> List[str]: ...
    def clear(self, sid: str) -> None: ...


class MemoryGameStore:
    """In-process LRU store; sessions are kept as JSON so callers never share instances."""

    def __init__(self, max_sessions: int = MAX_SESSIONS) -> None:
        self._data: "OrderedDict[str, str]" = OrderedDict()
        self._lock = threading.Lock()
        self._max = max_sessions

    def get(self, sid: str) -> Optional[GameSession]:
        with self._lock:
            raw = self._data.get(sid)
            if raw is None:
                return None
            self._data.move_to_end(sid)
        return GameSession.model_validate_json(raw)

    def save(self, sess: GameSession) -> None:
        raw = sess.model_dump_json()
        with self._lock:
            self._data[sess.id] = raw
            self._data.move_to_end(sess.id)
            while len(self._data) > self._max:
                self._data.popitem(last=False)

    def delete(self, sid: str) -> bool:
        with self._lock:
            return self._data.pop(sid, None) is not None

    def list_all(self) -> List[GameSession]:
        with self._lock:
            raws = list(reversed(self._data.values()))
        return [GameSession.model_validate_json(r) for r in raws]


class MemoryLogStore:
    def __init__(self, limit: int = LOG_LIMIT) -> None:
        self._data: Dict[str, List[str]] = {}
        self._lock = threading.Lock()
        self._limit = limit

    def append(self, sid: str, line: str) -> None:
        with self._lock:
            lines = self._data.setdefault(sid, [])
            lines.append(line)
            del lines[: -self._limit]

    def list(self, sid: str, limit: int) -> List[str]:
        with self._lock:
            return list(self._data.get(sid, [])[-limit:])

    def clear(self, sid: str) -> None:
        with self._lock:
            self._data.pop(sid, None)


class RedisGameStore:
    """Cross-worker store; least-recently-used games are evicted past max_sessions."""

    def __init__(self, r: Redis, max_sessions: int = MAX_SESSIONS) -> None:
        self.r = r
        self._max = max_sessions

    def _touch(self, sid: str) -> None:
        # update "last used" timestamp
        self.r.zadd(INDEX, {sid: time.time()})

    def _enforce_cap(self) -> None:
        count = self.r.zcard(INDEX)
        if count <= self._max:
            return
        # ZPOPMIN with count returns [(sid, score), ...] oldest first
        evicted = self.r.zpopmin(INDEX, count - self._max)
        if not evicted:
            return
        pipe = self.r.pipeline()
        for sid, _ in evicted:
            pipe.delete(_k(sid))
            pipe.delete(_log_k(sid))
        pipe.execute()

    def get(self, sid: str) -> Optional[GameSession]:
        raw = self.r.get(_k(sid))
        if raw is None:
            # cleanup stale index entry if it exists
            self.r.zrem(INDEX, sid)
            return None
        self._touch(sid)
        return GameSession.model_validate_json(raw)

    def save(self, sess: GameSession) -> None:
        self.r.set(_k(sess.id), sess.model_dump_json())
        self._touch(sess.id)
        self._enforce_cap()

    def delete(self, sid: str) -> bool:
        pipe = self.r.pipeline()
        pipe.delete(_k(sid))
        pipe.zrem(INDEX, sid)
        res = pipe.execute()
        # res[0] is DEL result (0/1)
        return bool(res and res[0])

    def list_all(self) -> List[GameSession]:
        sids = self.r.zrevrange(INDEX, 0, -1)
        if not sids:
            return []
        raw_sessions = self.r.mget([_k(sid) for sid in sids])
        sessions = []
        stale_sids = []
        for sid, raw in zip(sids, raw_sessions):
            if raw:
                sessions.append(GameSession.model_validate_json(raw))
            else:
                stale_sids.append(sid)
        if stale_sids:
            self.r.zrem(INDEX, *stale_sids)
        return sessions


class SessionLocks(Protocol):
    def acquire(self, sid: str) -> bool: ...
    def release(self, sid: str) -> None: ...
    def forget(self, sid: str) -> None: ...


class MemoryLocks:
    def __init__(self) -> None:
        self._held: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def acquire(self, sid: str) -> bool:
        with self._guard:
            lock = self._held.setdefault(sid, threading.Lock())
        return lock.acquire(blocking=False)

    def release(self, sid: str) -> None:
        with self._guard:
            lock = self._held.get(sid)
        if lock is not None and lock.locked():
            lock.release()

    def forget(self, sid: str) -> None:
        with self._guard:
            self._held.pop(sid, None)


class RedisLocks:
    """One redis lock per game, expiring after ttl so a dead worker cannot wedge it."""

    def __init__(self, r: Redis, ttl: int = LOCK_TTL) -> None:
        self.r = r
        self._ttl = ttl
        self._held: Dict[str, object] = {}
        self._guard = threading.Lock()

    def acquire(self, sid: str) -> bool:
        lock = self.r.lock(_lock_k(sid), timeout=self._ttl)
        if not lock.acquire(blocking=False):
            return False
        with self._guard:
            self._held[sid] = lock
        return True

    def release(self, sid: str) -> None:
        with self._guard:
            lock = self._held.pop(sid, None)
        if lock is None:
            return
        try:
            lock.release()
        except LockError as e:
            # expired while held; someone else may own it now
            logger.warning("lock on game %s lapsed before release: %s", sid, e)

    def forget(self, sid: str) -> None:
        pass


class RedisLogStore:
    def __init__(self, r: Redis, limit: int = LOG_LIMIT) -> None:
        self.r = r
        self._limit = limit

    def append(self, sid: str, line: str) -> None:
        pipe = self.r.pipeline()
        pipe.rpush(_log_k(sid), line)
        pipe.ltrim(_log_k(sid), -self._limit, -1)
        pipe.execute()

    def list(self, sid: str, limit: int) -> List[str]:
        return self.r.lrange(_log_k(sid), -limit, -1)

    def clear(self, sid: str) -> None:
        self.r.delete(_log_k(sid))


r: Optional[Redis] = Redis.from_url(REDIS_URL, decode_responses=True) if REDIS_URL else None
store: GameStore = RedisGameStore(r) if r is not None else MemoryGameStore()
logs: LogStore = RedisLogStore(r) if r is not None else MemoryLogStore()
locks: SessionLocks = RedisLocks(r) if r is not None else MemoryLocks()


def backend_name() -> str:
    return "redis" if r is not None else "memory"


def ping() -> bool:
    if r is None:
        return True
    return bool(r.ping())


def save(sess: GameSession) -> None:
    store.save(sess)


def get(sid: str) -> Optional[GameSession]:
    return store.get(sid)


def delete(sid: str) -> bool:
    logs.clear(sid)
    locks.forget(sid)
    return store.delete(sid)


def list_all() -> List[GameSession]:
    return store.list_all()


@contextmanager
def session_lock(sid: str) -> Iterator[None]:
    """Hold the game for one request; a second request meanwhile gets SessionBusy."""
    if not locks.acquire(sid):
        raise SessionBusy(sid)
    try:
        yield
    finally:
        locks.release(sid)
