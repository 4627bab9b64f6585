from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator, Dict, Optional


class AsyncMemoryPubSub:
    def __init__(self, broker: "AsyncMemoryRedis") -> None:
        self._broker = broker
        self._queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self.channels: set[str] = set()

    async def subscribe(self, *channels: str) -> None:
        for channel in channels:
            self._broker._subscribers.setdefault(channel, set()).add(self)
            self.channels.add(channel)
            self._queue.put_nowait({"type": "subscribe", "channel": channel, "data": len(self.channels)})

    async def unsubscribe(self, *channels: str) -> None:
        for channel in channels or tuple(self.channels):
            subs = self._broker._subscribers.get(channel)
            if subs is not None:
                subs.discard(self)
                if not subs:
                    self._broker._subscribers.pop(channel, None)
            self.channels.discard(channel)

    def _deliver(self, channel: str, data: Any) -> None:
        self._queue.put_nowait({"type": "message", "channel": channel, "data": data})

    async def get_message(self, ignore_subscribe_messages: bool = False, timeout: float = 0.0) -> Optional[dict[str, Any]]:
        while True:
            try:
                message = await asyncio.wait_for(self._queue.get(), timeout=timeout or None)
            except asyncio.TimeoutError:
                return None
            if ignore_subscribe_messages and message["type"] != "message":
                continue
            return message

    async def listen(self) -> AsyncIterator[dict[str, Any]]:
        while self.channels:
            yield await self._queue.get()

    async def aclose(self) -> None:
        await self.unsubscribe()


class AsyncMemoryRedis:
    def __init__(self) -> None:
        self._kv: Dict[str, Any] = {}
        self._hash: Dict[str, Dict[str, Any]] = {}
        self._sets: Dict[str, set] = {}
        self._subscribers: Dict[str, set[AsyncMemoryPubSub]] = {}
        self._lock = asyncio.Lock()

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        return None

    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            return None if key not in self._kv else str(self._kv[key])

    async def set(self, key: str, value: Any, nx: bool | None = None) -> bool:
        async with self._lock:
            if nx and key in self._kv:
                return False
            self._kv[key] = value
            return True

    async def incr(self, key: str) -> int:
        async with self._lock:
            cur = int(self._kv.get(key, 0)) + 1
            self._kv[key] = cur
            return cur

    async def hset(self, key: str, field: Optional[str] = None, value: Any = None, mapping: Optional[Dict[str, Any]] = None) -> int:
        mapping = dict(mapping or {})
        if field is not None:
            mapping[field] = value
        async with self._lock:
            h = self._hash.setdefault(key, {})
            added = len([k for k in mapping if k not in h])
            h.update({k: str(v) for k, v in mapping.items()})
            return added

    async def hgetall(self, key: str) -> Dict[str, Any]:
        async with self._lock:
            return dict(self._hash.get(key, {}))

    async def hexists(self, key: str, field: str) -> bool:
        async with self._lock:
            return field in self._hash.get(key, {})

    async def hincrby(self, key: str, field: str, amount: int = 1) -> int:
        async with self._lock:
            h = self._hash.setdefault(key, {})
            cur = int(h.get(field, 0)) + amount
            h[field] = str(cur)
            return cur

    async def sadd(self, key: str, *members: Any) -> int:
        async with self._lock:
            s = self._sets.setdefault(key, set())
            before = len(s)
            for m in members:
                s.add(str(m))
            return len(s) - before

    async def srem(self, key: str, *members: Any) -> int:
        async with self._lock:
            s = self._sets.setdefault(key, set())
            before = len(s)
            for m in members:
                s.discard(str(m))
            return before - len(s)

    async def smembers(self, key: str) -> set:
        async with self._lock:
            return set(self._sets.get(key, set()))

    async def sismember(self, key: str, member: Any) -> bool:
        async with self._lock:
            return str(member) in self._sets.get(key, set())

    async def scard(self, key: str) -> int:
        async with self._lock:
            return len(self._sets.get(key, set()))

    async def delete(self, *keys: str) -> int:
        async with self._lock:
            existed = 0
            for key in keys:
                found = False
                for store in (self._kv, self._hash, self._sets):
                    if store.pop(key, None) is not None:
                        found = True
                existed += int(found)
            return existed

    async def publish(self, channel: str, message: Any) -> int:
        subs = list(self._subscribers.get(channel, ()))
        for sub in subs:
            sub._deliver(channel, message)
        return len(subs)

    def pubsub(self) -> AsyncMemoryPubSub:
        return AsyncMemoryPubSub(self)
