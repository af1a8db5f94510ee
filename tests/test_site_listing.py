"""
站点列表测试

验证场景：
1. 分页：每页不超过 page_size，total_count 为筛选后总数，各页之和等于总数
2. 搜索：name / url 不区分大小写的子串匹配
3. 弱引用：一页数据只做一次文件查询，无 logo 或查询失败时 logo_url 为 None
4. 计数：缓存命中、TTL 过期、显式失效
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import event, text
from sqlalchemy.exc import OperationalError

from siteadmin.core.errors import ValidationFailed
from siteadmin.schemas.site import SiteFilter
from siteadmin.services.site_listing import SiteListingService, page_range
from siteadmin.services.site_registration import SiteRegistrationService
from siteadmin.services.weak_refs import WeakReferenceResolver
from tests.utils import add_file, add_site, registration_payload

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def listing(db_session, count_cache):
    return SiteListingService(db_session, count_cache)


@pytest.fixture
def statements(test_engine):
    """记录所有执行的 SQL"""
    captured: list[str] = []

    def _capture(conn, cursor, statement, parameters, context, executemany):
        captured.append(statement)

    event.listen(test_engine.sync_engine, "before_cursor_execute", _capture)
    yield captured
    event.remove(test_engine.sync_engine, "before_cursor_execute", _capture)


def test_page_range():
    assert page_range(1, 10) == (0, 9)
    assert page_range(3, 10) == (20, 29)
    assert page_range(2, 1) == (1, 1)


@pytest.mark.asyncio
async def test_pagination_covers_all_rows(listing, db_session):
    """测试分页遍历：各页之和等于总数且不重复"""
    for i in range(25):
        await add_site(db_session, name=f"Site {i:02d}", created_at=BASE_TIME + timedelta(minutes=i))

    seen: list[str] = []
    for page in (1, 2, 3):
        result = await listing.list_sites(page=page, page_size=10)
        assert result.error is None
        assert result.total_count == 25
        assert len(result.data) <= 10
        seen.extend(row.site_seq for row in result.data)

    assert len(seen) == 25
    assert len(set(seen)) == 25


@pytest.mark.asyncio
async def test_list_orders_newest_first(listing, db_session):
    for i in range(3):
        await add_site(db_session, name=f"Site {i}", created_at=BASE_TIME + timedelta(days=i))

    result = await listing.list_sites(page=1, page_size=10)

    assert [row.name for row in result.data] == ["Site 2", "Site 1", "Site 0"]


@pytest.mark.asyncio
async def test_page_beyond_end(listing, db_session):
    """测试超出末页：返回空列表，total_count 仍为筛选后总数"""
    for i in range(3):
        await add_site(db_session, name=f"Site {i}")

    result = await listing.list_sites(page=5, page_size=10)

    assert result.data == []
    assert result.total_count == 3


@pytest.mark.asyncio
async def test_empty_table(listing):
    result = await listing.list_sites()
    assert result.data == []
    assert result.total_count == 0


@pytest.mark.asyncio
async def test_search_is_case_insensitive(listing, db_session):
    """测试搜索对 name 或 url 做不区分大小写的子串匹配"""
    await add_site(db_session, name="ALPHA Casino", url="https://a.example.com")
    await add_site(db_session, name="Beta", url="https://Alpha-mirror.example.com")
    await add_site(db_session, name="Gamma", url="https://gamma.example.com")

    result = await listing.list_sites(SiteFilter(search="alpha"))

    assert result.total_count == 2
    assert {row.name for row in result.data} == {"ALPHA Casino", "Beta"}


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(listing, db_session):
    await add_site(db_session, name="100% Bonus")
    await add_site(db_session, name="Plain")

    result = await listing.list_sites(SiteFilter(search="%"))

    assert [row.name for row in result.data] == ["100% Bonus"]


@pytest.mark.asyncio
async def test_filters_combine_with_search(listing, db_session):
    """测试精确筛选与搜索 AND 组合"""
    await add_site(db_session, name="Alpha", type="casino", status="active", is_recommend=True)
    await add_site(db_session, name="Alpha Sports", type="sports", status="active")
    await add_site(db_session, name="Alpha Closed", type="casino", status="closed")

    result = await listing.list_sites(SiteFilter(type="casino", status="active", search="alpha"))
    assert [row.name for row in result.data] == ["Alpha"]

    result = await listing.list_sites(SiteFilter(is_recommend=True))
    assert [row.name for row in result.data] == ["Alpha"]


@pytest.mark.asyncio
async def test_invalid_page_arguments(listing):
    result = await listing.list_sites(page=0)
    assert isinstance(result.error, ValidationFailed)

    result = await listing.list_sites(page_size=101)
    assert isinstance(result.error, ValidationFailed)


@pytest.mark.asyncio
async def test_logo_urls_resolved_in_one_batch(listing, db_session, statements):
    """测试 [A, 无, B] 三行只做一次文件查询，中间行 logo_url 为 None"""
    file_a = await add_file(db_session, "https://cdn.test/a.png")
    file_b = await add_file(db_session, "https://cdn.test/b.png", file_path="sites/logos/b.png")
    await add_site(db_session, name="B", logo_image=file_b.file_seq, created_at=BASE_TIME)
    await add_site(db_session, name="None", created_at=BASE_TIME + timedelta(hours=1))
    await add_site(db_session, name="A", logo_image=file_a.file_seq, created_at=BASE_TIME + timedelta(hours=2))
    statements.clear()

    result = await listing.list_sites(page=1, page_size=10)

    assert [row.name for row in result.data] == ["A", "None", "B"]
    assert [row.logo_url for row in result.data] == [
        "https://cdn.test/a.png",
        None,
        "https://cdn.test/b.png",
    ]
    file_queries = [s for s in statements if "FROM files" in s]
    assert len(file_queries) == 1


@pytest.mark.asyncio
async def test_no_logo_lookup_when_page_has_no_logos(listing, db_session, statements):
    await add_site(db_session, name="Plain")
    statements.clear()

    result = await listing.list_sites()

    assert result.data[0].logo_url is None
    assert not [s for s in statements if "FROM files" in s]


@pytest.mark.asyncio
async def test_dangling_logo_resolves_to_none(listing, db_session):
    await add_site(db_session, name="Dangling", logo_image="missing")

    result = await listing.list_sites()

    assert result.data[0].logo_image == "missing"
    assert result.data[0].logo_url is None


@pytest.mark.asyncio
async def test_resolver_failure_returns_empty_map(db_session):
    """测试弱引用查询失败时返回空映射，不影响列表"""
    resolver = WeakReferenceResolver(db_session)
    with patch.object(
        db_session,
        "execute",
        AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("timeout"))),
    ):
        urls = await resolver.resolve_urls(["a", "b"])

    assert urls == {}


@pytest.mark.asyncio
async def test_list_sites_survives_logo_lookup_failure(listing, db_session):
    """测试列表中的 logo 查询失败时列表照常返回，logo_url 为 None"""
    file = await add_file(db_session, "https://cdn.test/a.png")
    await add_site(db_session, name="With Logo", logo_image=file.file_seq)
    await add_site(db_session, name="Plain", created_at=BASE_TIME)
    await db_session.execute(text("DROP TABLE file_details"))
    await db_session.execute(text("DROP TABLE files"))
    await db_session.commit()

    result = await listing.list_sites()

    assert result.error is None
    assert result.total_count == 2
    assert {row.name for row in result.data} == {"With Logo", "Plain"}
    assert all(row.logo_url is None for row in result.data)


@pytest.mark.asyncio
async def test_list_sites_survives_resolver_exception(listing, db_session):
    await add_site(db_session, name="Logo", logo_image="file-1")
    original_execute = db_session.execute

    async def execute(statement, *args, **kwargs):
        if "files" in str(statement):
            raise OperationalError("SELECT", {}, Exception("timeout"))
        return await original_execute(statement, *args, **kwargs)

    with patch.object(db_session, "execute", side_effect=execute):
        result = await listing.list_sites()

    assert result.ok
    assert result.data[0].name == "Logo"
    assert result.data[0].logo_image == "file-1"
    assert result.data[0].logo_url is None


@pytest.mark.asyncio
async def test_resolver_skips_empty_ids(db_session, statements):
    resolver = WeakReferenceResolver(db_session)
    assert await resolver.resolve_urls([None, None]) == {}
    assert statements == []


@pytest.mark.asyncio
async def test_fetch_all_sites(listing, db_session):
    await add_site(db_session, name="Old", created_at=BASE_TIME)
    await add_site(db_session, name="New", created_at=BASE_TIME + timedelta(days=1))

    result = await listing.fetch_all_sites()

    assert [site.name for site in result.data] == ["New", "Old"]


# ============================================================
# 状态计数
# ============================================================


@pytest.mark.asyncio
async def test_site_counts(listing, db_session):
    await add_site(db_session, status="active")
    await add_site(db_session, status="active")
    await add_site(db_session, status="suspended")
    await add_site(db_session, status="closed")

    result = await listing.site_counts()

    assert result.data.to_dict() == {"all": 4, "active": 2, "suspended": 1, "closed": 1}


@pytest.mark.asyncio
async def test_site_counts_are_cached_until_ttl(listing, db_session, clock):
    """测试计数在 TTL 内走缓存，过期后重新查询"""
    await add_site(db_session, status="active")
    first = await listing.site_counts()
    assert first.data.all == 1

    # 绕过服务直接写入，缓存不会失效
    await add_site(db_session, status="active")
    cached = await listing.site_counts()
    assert cached.data.all == 1

    clock.advance(301)
    refreshed = await listing.site_counts()
    assert refreshed.data.all == 2


@pytest.mark.asyncio
async def test_site_counts_invalidated_by_registration(listing, db_session, count_cache):
    """测试注册成功后计数立即刷新"""
    assert (await listing.site_counts()).data.all == 0

    registration = SiteRegistrationService(db_session, count_cache)
    await registration.register_site(registration_payload())

    assert (await listing.site_counts()).data.all == 1
