"""
站点列表（筛选 + 分页 + 计数）

- type / status / is_recommend 精确匹配
- search 对 name 或 url 做不区分大小写的子串匹配，与其他条件 AND 组合
- 页码从 1 开始，行区间 [(page-1)*page_size, page*page_size-1]
- 当前页与筛选后的总数在同一次查询中返回（count(*) OVER ()）
- 一页数据取回后批量解析 logo URL
- 状态标签计数按类别各查一次，结果缓存（TTL + 显式失效）
"""

from typing import Optional

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from siteadmin.core.errors import ValidationFailed
from siteadmin.core.logging import get_logger
from siteadmin.core.results import PageResult, Result, SiteCounts, contract
from siteadmin.database.models import Site, SiteStatus
from siteadmin.schemas.site import SiteFilter, SiteWithLogo
from siteadmin.services.count_cache import CountCache, CountKeys, get_count_cache
from siteadmin.services.weak_refs import WeakReferenceResolver

logger = get_logger(__name__)

MAX_PAGE_SIZE = 100


def page_range(page: int, page_size: int) -> tuple[int, int]:
    """页码转换为闭区间行号 (from, to)"""
    start = (page - 1) * page_size
    return start, start + page_size - 1


def apply_site_filter(stmt: Select, site_filter: Optional[SiteFilter]) -> Select:
    """为查询添加站点筛选条件"""
    if site_filter is None:
        return stmt

    if site_filter.type is not None:
        stmt = stmt.where(Site.type == site_filter.type.value)
    if site_filter.status is not None:
        stmt = stmt.where(Site.status == site_filter.status.value)
    if site_filter.is_recommend is not None:
        stmt = stmt.where(Site.is_recommend == site_filter.is_recommend)

    search = (site_filter.search or "").strip()
    if search:
        stmt = stmt.where(
            or_(
                Site.name.icontains(search, autoescape=True),
                Site.url.icontains(search, autoescape=True),
            )
        )
    return stmt


class SiteListingService:
    """站点列表与计数"""

    def __init__(self, session: AsyncSession, count_cache: Optional[CountCache] = None):
        self.session = session
        self.count_cache = count_cache or get_count_cache()
        self.resolver = WeakReferenceResolver(session)

    @contract("list_sites", lambda e: PageResult(error=e))
    async def list_sites(
        self,
        site_filter: Optional[SiteFilter] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> PageResult[SiteWithLogo]:
        """筛选 + 分页获取站点列表（附带 logo URL）"""
        if page < 1:
            raise ValidationFailed("page must be >= 1")
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValidationFailed(f"page_size must be between 1 and {MAX_PAGE_SIZE}")

        start, end = page_range(page, page_size)

        total_col = func.count().over().label("total_count")
        stmt = apply_site_filter(select(Site, total_col), site_filter)
        stmt = (
            stmt.order_by(Site.created_at.desc(), Site.site_seq.desc())
            .offset(start)
            .limit(end - start + 1)
        )
        rows = (await self.session.execute(stmt)).all()

        sites = [row[0] for row in rows]
        if rows:
            total_count = rows[0].total_count
        elif start > 0:
            # 超出末页时窗口计数不可用，单独计数
            total_count = await self._count(site_filter)
        else:
            total_count = 0

        data = await self.resolver.attach_logo_urls(sites)
        return PageResult(data=data, total_count=total_count)

    @contract("fetch_all_sites", lambda e: Result(error=e))
    async def fetch_all_sites(self) -> Result[list[Site]]:
        """获取全部站点（按创建时间倒序）"""
        result = await self.session.scalars(select(Site).order_by(Site.created_at.desc()))
        return Result(data=list(result.all()))

    @contract("site_counts", lambda e: Result(error=e))
    async def site_counts(self) -> Result[SiteCounts]:
        """状态标签计数（走缓存）"""
        value = await self.count_cache.get_or_fetch(CountKeys.SITE_COUNTS, self._fetch_counts)
        return Result(data=SiteCounts(**value))

    async def _fetch_counts(self) -> dict[str, int]:
        counts = {"all": await self._count(None)}
        for site_status in (SiteStatus.ACTIVE, SiteStatus.SUSPENDED, SiteStatus.CLOSED):
            counts[site_status.value] = await self._count(SiteFilter(status=site_status))
        logger.debug("site_counts_fetched", **counts)
        return counts

    async def _count(self, site_filter: Optional[SiteFilter]) -> int:
        stmt = apply_site_filter(select(func.count()).select_from(Site), site_filter)
        return await self.session.scalar(stmt) or 0
