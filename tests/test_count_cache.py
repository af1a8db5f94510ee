"""
计数缓存测试
"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from siteadmin.services.count_cache import CountCache
from tests.utils import FakeClock


class TestLocalCache:
    """进程内缓存测试"""

    @pytest.mark.asyncio
    async def test_set_and_get(self, count_cache):
        await count_cache.set("k", {"all": 3})
        assert await count_cache.get("k") == {"all": 3}

    @pytest.mark.asyncio
    async def test_miss(self, count_cache):
        assert await count_cache.get("missing") is None

    @pytest.mark.asyncio
    async def test_entry_expires_after_ttl(self, count_cache, clock):
        """测试超过 TTL 后条目过期"""
        await count_cache.set("k", 1)

        clock.advance(299)
        assert await count_cache.get("k") == 1

        clock.advance(2)
        assert await count_cache.get("k") is None

    @pytest.mark.asyncio
    async def test_invalidate_single_key(self, count_cache):
        await count_cache.set("a", 1)
        await count_cache.set("b", 2)

        await count_cache.invalidate("a")

        assert await count_cache.get("a") is None
        assert await count_cache.get("b") == 2

    @pytest.mark.asyncio
    async def test_invalidate_all(self, count_cache):
        await count_cache.set("a", 1)
        await count_cache.set("b", 2)

        await count_cache.invalidate()

        assert await count_cache.get("a") is None
        assert await count_cache.get("b") is None

    @pytest.mark.asyncio
    async def test_get_or_fetch_calls_factory_once(self, count_cache):
        """测试并发读取只触发一次查询"""
        calls = 0

        async def factory():
            nonlocal calls
            calls += 1
            await asyncio.sleep(0)
            return {"all": 7}

        results = await asyncio.gather(*(count_cache.get_or_fetch("k", factory) for _ in range(5)))

        assert results == [{"all": 7}] * 5
        assert calls == 1

    @pytest.mark.asyncio
    async def test_get_or_fetch_refetches_after_invalidate(self, count_cache):
        factory = AsyncMock(side_effect=[{"all": 1}, {"all": 2}])

        assert await count_cache.get_or_fetch("k", factory) == {"all": 1}
        await count_cache.invalidate("k")
        assert await count_cache.get_or_fetch("k", factory) == {"all": 2}
        assert factory.await_count == 2

    @pytest.mark.asyncio
    async def test_invalidate_during_fetch_discards_result(self, count_cache):
        """测试查询期间发生失效时，旧结果不写入缓存"""
        started = asyncio.Event()
        release = asyncio.Event()

        async def factory():
            started.set()
            await release.wait()
            return {"all": 1}

        fetch = asyncio.create_task(count_cache.get_or_fetch("site_counts", factory))
        await started.wait()
        await count_cache.invalidate("site_counts")
        release.set()

        assert await fetch == {"all": 1}
        assert await count_cache.get("site_counts") is None

    @pytest.mark.asyncio
    async def test_invalidate_all_during_fetch_discards_result(self, count_cache):
        started = asyncio.Event()
        release = asyncio.Event()

        async def factory():
            started.set()
            await release.wait()
            return {"all": 1}

        fetch = asyncio.create_task(count_cache.get_or_fetch("site_counts", factory))
        await started.wait()
        await count_cache.invalidate()
        release.set()
        await fetch

        assert await count_cache.get("site_counts") is None


class TestRedisLayer:
    """Redis 二级缓存测试"""

    @pytest.fixture
    def mock_redis(self):
        redis_client = MagicMock()
        redis_client.get = AsyncMock(return_value=None)
        redis_client.setex = AsyncMock()
        redis_client.delete = AsyncMock()
        redis_client.close = AsyncMock()
        return redis_client

    @pytest.fixture
    def cache(self, mock_redis):
        return CountCache(ttl_seconds=60, redis_client=mock_redis, prefix="test", clock=FakeClock())

    @pytest.mark.asyncio
    async def test_set_writes_through(self, cache, mock_redis):
        await cache.set("site_counts", {"all": 1})

        mock_redis.setex.assert_awaited_once_with(
            "test:counts:site_counts", 60, json.dumps({"all": 1})
        )

    @pytest.mark.asyncio
    async def test_l2_hit_populates_l1(self, cache, mock_redis):
        """测试 L1 未命中时读取 L2 并回填 L1"""
        mock_redis.get.return_value = json.dumps({"all": 9})

        assert await cache.get("site_counts") == {"all": 9}
        mock_redis.get.return_value = None
        assert await cache.get("site_counts") == {"all": 9}
        assert mock_redis.get.await_count == 1

    @pytest.mark.asyncio
    async def test_redis_errors_degrade_to_local(self, cache, mock_redis):
        """测试 Redis 出错时降级为仅本地缓存"""
        mock_redis.get.side_effect = ConnectionError("redis down")
        mock_redis.setex.side_effect = ConnectionError("redis down")
        mock_redis.delete.side_effect = ConnectionError("redis down")

        assert await cache.get("k") is None
        await cache.set("k", 1)
        assert await cache.get("k") == 1
        await cache.invalidate("k")
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_invalidate_deletes_redis_key(self, cache, mock_redis):
        await cache.invalidate("site_counts")
        mock_redis.delete.assert_awaited_once_with("test:counts:site_counts")

    @pytest.mark.asyncio
    async def test_close(self, cache, mock_redis):
        await cache.close()
        mock_redis.close.assert_awaited_once()
