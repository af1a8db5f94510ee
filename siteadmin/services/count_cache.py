"""
计数缓存 (Count Cache)

用于列表页状态标签角标（all / active / suspended / closed）的聚合计数。

L1: 进程内缓存，条目为 {value, fetched_at}，超过 TTL 视为过期
L2: Redis（可选，COUNT_CACHE_REDIS_ENABLED 开启），出错时降级为仅 L1

失效规则：
- 时间：超过 TTL 后下一次读取重新查询
- 事件：任何成功的新增 / 修改 / 删除都会调用 invalidate()
"""

import asyncio
import json
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Optional

import redis.asyncio as redis

from siteadmin.core.config import settings
from siteadmin.core.logging import get_logger

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CacheEntry:
    """缓存条目"""

    value: Any
    fetched_at: datetime

    def is_fresh(self, ttl: timedelta, now: datetime) -> bool:
        return now - self.fetched_at < ttl


class CountCache:
    """带 TTL 与显式失效的计数缓存"""

    def __init__(
        self,
        ttl_seconds: Optional[int] = None,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
        clock: Clock = _utcnow,
    ):
        self.ttl = timedelta(seconds=ttl_seconds or settings.COUNT_CACHE_TTL_SECONDS)
        self.prefix = prefix or settings.COUNT_CACHE_PREFIX
        self._entries: dict[str, CacheEntry] = {}
        self._redis = redis_client
        self._clock = clock
        self._locks: dict[str, asyncio.Lock] = {}
        # 每次失效递增，查询期间发生失效时不写回旧值
        self._generations: dict[str, int] = {}
        self._generation = 0

    def _make_key(self, key: str) -> str:
        return f"{self.prefix}:counts:{key}"

    def _version(self, key: str) -> tuple[int, int]:
        return self._generation, self._generations.get(key, 0)

    async def get(self, key: str) -> Optional[Any]:
        """
        获取缓存值

        查询顺序: L1 -> L2 -> None
        """
        entry = self._entries.get(key)
        if entry is not None:
            if entry.is_fresh(self.ttl, self._clock()):
                logger.debug("count_cache_hit", level="L1", key=key)
                return entry.value
            del self._entries[key]

        if self._redis is not None:
            try:
                raw_value = await self._redis.get(self._make_key(key))
                if raw_value is not None:
                    value = json.loads(raw_value)
                    self._entries[key] = CacheEntry(value, self._clock())
                    logger.debug("count_cache_hit", level="L2", key=key)
                    return value
            except Exception as e:
                logger.warning("redis_get_error", key=key, error=str(e))

        logger.debug("count_cache_miss", key=key)
        return None

    async def set(self, key: str, value: Any) -> None:
        """同时写入 L1 和 L2"""
        self._entries[key] = CacheEntry(value, self._clock())

        if self._redis is not None:
            try:
                await self._redis.setex(
                    self._make_key(key),
                    int(self.ttl.total_seconds()),
                    json.dumps(value, ensure_ascii=False, default=str),
                )
            except Exception as e:
                logger.warning("redis_set_error", key=key, error=str(e))

    async def invalidate(self, key: Optional[str] = None) -> None:
        """使指定 key（为空时全部）失效"""
        if key is not None:
            self._generations[key] = self._generations.get(key, 0) + 1
        else:
            self._generation += 1
        keys = [key] if key is not None else list(self._entries.keys())
        for k in keys:
            self._entries.pop(k, None)

        if self._redis is not None:
            try:
                if key is not None:
                    await self._redis.delete(self._make_key(key))
                else:
                    async for full_key in self._redis.scan_iter(match=self._make_key("*")):
                        await self._redis.delete(full_key)
            except Exception as e:
                logger.warning("redis_delete_error", key=key, error=str(e))

        logger.debug("count_cache_invalidated", key=key or "*")

    async def get_or_fetch(self, key: str, factory: Callable[[], Awaitable[Any]]) -> Any:
        """获取缓存，不存在或已过期则调用 factory 重新查询并缓存"""
        value = await self.get(key)
        if value is not None:
            return value

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            # 等锁期间可能已被其他请求填充
            value = await self.get(key)
            if value is not None:
                return value
            version = self._version(key)
            value = await factory()
            if value is not None and self._version(key) == version:
                await self.set(key, value)
        return value

    async def close(self) -> None:
        """关闭连接"""
        if self._redis is not None:
            await self._redis.close()
            self._redis = None


# 全局缓存实例
_cache: Optional[CountCache] = None


def get_count_cache() -> CountCache:
    """获取计数缓存单例"""
    global _cache
    if _cache is None:
        redis_client = None
        if settings.COUNT_CACHE_REDIS_ENABLED:
            redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
            )
        _cache = CountCache(redis_client=redis_client)
    return _cache


class CountKeys:
    """计数缓存 Key 常量"""

    SITE_COUNTS = "site_counts"
