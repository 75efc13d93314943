from __future__ import annotations

import time
from typing import Protocol, Sequence, Type

import redis
from redis.backoff import ExponentialBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError
from redis.retry import Retry

# Errors that indicate a stale / broken connection and are safe to retry.
_RETRY_ERRORS: Sequence[Type[Exception]] = (
    RedisConnectionError,
    RedisTimeoutError,
    ConnectionResetError,
)

_RETRY = Retry(ExponentialBackoff(cap=0.5, base=0.05), retries=3)


class KeyValueClient(Protocol):
    """The slice of the redis-py client API the preference store relies on."""

    def get(self, name: str) -> bytes | None: ...

    def set(self, name: str, value: bytes, ex: int | None = None) -> bool | None: ...

    def delete(self, *names: str) -> int: ...


def make_redis_client(redis_url: str) -> redis.Redis:
    """Bytes client (decode_responses=False); payloads are gzip'd JSON."""
    return redis.Redis.from_url(
        redis_url,
        decode_responses=False,
        health_check_interval=10,
        socket_keepalive=True,
        socket_connect_timeout=2,
        socket_timeout=5,
        retry=_RETRY,
        retry_on_error=list(_RETRY_ERRORS),
    )


class InMemoryKeyValue:
    """
    Process-local stand-in for Redis, for sessions that run without one.
    Honors `ex` expiry lazily on read.
    """

    def __init__(self) -> None:
        self._data: dict[str, tuple[bytes, float | None]] = {}

    def get(self, name: str) -> bytes | None:
        entry = self._data.get(name)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and time.monotonic() >= expires_at:
            del self._data[name]
            return None
        return value

    def set(self, name: str, value: bytes, ex: int | None = None) -> bool:
        expires_at = time.monotonic() + int(ex) if ex else None
        self._data[name] = (bytes(value), expires_at)
        return True

    def delete(self, *names: str) -> int:
        removed = 0
        for name in names:
            if self._data.pop(name, None) is not None:
                removed += 1
        return removed


def make_kv_client(redis_url: str | None) -> KeyValueClient:
    return make_redis_client(redis_url) if redis_url else InMemoryKeyValue()
