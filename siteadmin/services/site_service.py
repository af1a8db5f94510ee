"""
站点管理服务 (Site Service)

单表的读取与修改：站点、运营信息、入金优惠、站点活动。
所有成功的写操作都会使站点计数缓存失效。
"""

from typing import Any, Optional, TypeVar

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from siteadmin.core.errors import NotFoundError
from siteadmin.core.logging import get_logger
from siteadmin.core.results import Result, contract
from siteadmin.database.base import Base, utcnow
from siteadmin.database.models import (
    Site,
    SiteDepositPromotion,
    SiteEvent,
    SiteInfo,
    SiteStatus,
)
from siteadmin.schemas.site import (
    PromotionCreate,
    PromotionResponse,
    PromotionUpdate,
    SiteCreate,
    SiteDetail,
    SiteEventCreate,
    SiteEventUpdate,
    SiteInfoResponse,
    SiteInfoUpdate,
    SiteUpdate,
)
from siteadmin.services.count_cache import CountCache, CountKeys, get_count_cache

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


def _values(payload: BaseModel, exclude_unset: bool = True) -> dict[str, Any]:
    """默认只取显式提交的字段，枚举转换为字符串值"""
    values = payload.model_dump(exclude_unset=exclude_unset)
    return {k: getattr(v, "value", v) for k, v in values.items()}


class SiteService:
    """站点 CRUD"""

    def __init__(self, session: AsyncSession, count_cache: Optional[CountCache] = None):
        self.session = session
        self.count_cache = count_cache or get_count_cache()

    async def _changed(self) -> None:
        await self.count_cache.invalidate(CountKeys.SITE_COUNTS)

    async def _get_or_404(self, model: type[ModelT], **criteria: Any) -> ModelT:
        stmt = select(model).filter_by(**criteria)
        obj = await self.session.scalar(stmt)
        if obj is None:
            raise NotFoundError(f"{model.__name__} not found: {criteria}")
        return obj

    async def _apply(self, obj: ModelT, values: dict[str, Any]) -> ModelT:
        for key, value in values.items():
            setattr(obj, key, value)
        obj.updated_at = utcnow()
        await self.session.commit()
        await self.session.refresh(obj)
        return obj

    # ============================================================
    # 站点
    # ============================================================

    @contract("fetch_site", lambda e: Result(error=e))
    async def fetch_site(self, site_seq: str) -> Result[Site]:
        """获取站点"""
        return Result(data=await self._get_or_404(Site, site_seq=site_seq))

    @contract("fetch_site_with_info", lambda e: Result(error=e))
    async def fetch_site_with_info(self, site_seq: str) -> Result[SiteDetail]:
        """获取站点详情（运营信息可能不存在，优惠按创建时间倒序）"""
        site = await self._get_or_404(Site, site_seq=site_seq)

        info = await self.session.scalar(select(SiteInfo).where(SiteInfo.site_seq == site_seq))
        if info is None:
            logger.warning("site_info_missing", site_seq=site_seq)

        promotions = await self.session.scalars(
            select(SiteDepositPromotion)
            .where(SiteDepositPromotion.site_seq == site_seq)
            .order_by(SiteDepositPromotion.created_at.desc())
        )

        detail = SiteDetail.model_validate(site)
        detail.site_info = SiteInfoResponse.model_validate(info) if info else None
        detail.promotions = [PromotionResponse.model_validate(p) for p in promotions.all()]
        return Result(data=detail)

    @contract("create_site", lambda e: Result(error=e))
    async def create_site(self, data: SiteCreate) -> Result[Site]:
        """旧版创建：只写 Site，不写运营信息"""
        site = Site(**_values(data, exclude_unset=False), subscriber_count=0, view_count=0)
        self.session.add(site)
        await self.session.commit()
        await self.session.refresh(site)
        await self._changed()
        logger.info("site_created", site_seq=site.site_seq)
        return Result(data=site)

    @contract("update_site", lambda e: Result(error=e))
    async def update_site(self, site_seq: str, updates: SiteUpdate) -> Result[Site]:
        """修改站点"""
        site = await self._get_or_404(Site, site_seq=site_seq)
        site = await self._apply(site, _values(updates))
        await self._changed()
        logger.info("site_updated", site_seq=site_seq)
        return Result(data=site)

    async def update_site_status(self, site_seq: str, status: SiteStatus) -> Result[Site]:
        return await self.update_site(site_seq, SiteUpdate(status=status))

    async def update_site_recommend(
        self,
        site_seq: str,
        is_recommend: bool,
        recommend_order: Optional[int] = None,
    ) -> Result[Site]:
        return await self.update_site(
            site_seq,
            SiteUpdate(is_recommend=is_recommend, recommend_order=recommend_order or 0),
        )

    @contract("update_site_info", lambda e: Result(error=e))
    async def update_site_info(self, site_seq: str, updates: SiteInfoUpdate) -> Result[SiteInfo]:
        """修改运营信息"""
        info = await self._get_or_404(SiteInfo, site_seq=site_seq)
        info = await self._apply(info, _values(updates))
        await self._changed()
        return Result(data=info)

    # ============================================================
    # 入金优惠（注册后可自由增删，不限制最少数量）
    # ============================================================

    @contract("add_promotion", lambda e: Result(error=e))
    async def add_promotion(
        self, site_seq: str, data: PromotionCreate
    ) -> Result[SiteDepositPromotion]:
        """新增优惠"""
        await self._get_or_404(Site, site_seq=site_seq)
        promotion = SiteDepositPromotion(site_seq=site_seq, **_values(data, exclude_unset=False))
        self.session.add(promotion)
        await self.session.commit()
        await self.session.refresh(promotion)
        await self._changed()
        return Result(data=promotion)

    @contract("update_promotion", lambda e: Result(error=e))
    async def update_promotion(
        self, promotion_seq: str, updates: PromotionUpdate
    ) -> Result[SiteDepositPromotion]:
        """修改优惠"""
        promotion = await self._get_or_404(SiteDepositPromotion, promotion_seq=promotion_seq)
        promotion = await self._apply(promotion, _values(updates))
        await self._changed()
        return Result(data=promotion)

    @contract("delete_promotion", lambda e: Result(error=e))
    async def delete_promotion(self, promotion_seq: str) -> Result[None]:
        """删除优惠"""
        promotion = await self._get_or_404(SiteDepositPromotion, promotion_seq=promotion_seq)
        await self.session.delete(promotion)
        await self.session.commit()
        await self._changed()
        return Result()

    # ============================================================
    # 站点活动
    # ============================================================

    @contract("fetch_site_events", lambda e: Result(error=e))
    async def fetch_site_events(self, site_seq: str) -> Result[list[SiteEvent]]:
        """获取站点活动（按 display_order 升序）"""
        result = await self.session.scalars(
            select(SiteEvent)
            .where(SiteEvent.site_seq == site_seq)
            .order_by(SiteEvent.display_order.asc(), SiteEvent.created_at.asc())
        )
        return Result(data=list(result.all()))

    @contract("add_site_event", lambda e: Result(error=e))
    async def add_site_event(self, site_seq: str, data: SiteEventCreate) -> Result[SiteEvent]:
        """新增活动（浏览数从 0 开始）"""
        await self._get_or_404(Site, site_seq=site_seq)
        event = SiteEvent(site_seq=site_seq, view_count=0, **_values(data, exclude_unset=False))
        self.session.add(event)
        await self.session.commit()
        await self.session.refresh(event)
        await self._changed()
        logger.info("site_event_created", site_seq=site_seq, site_event_seq=event.site_event_seq)
        return Result(data=event)

    @contract("update_site_event", lambda e: Result(error=e))
    async def update_site_event(
        self, site_event_seq: str, updates: SiteEventUpdate
    ) -> Result[SiteEvent]:
        """修改活动"""
        event = await self._get_or_404(SiteEvent, site_event_seq=site_event_seq)
        event = await self._apply(event, _values(updates))
        await self._changed()
        return Result(data=event)

    @contract("delete_site_event", lambda e: Result(error=e))
    async def delete_site_event(self, site_event_seq: str) -> Result[None]:
        """删除活动（缩略图文件不随之删除）"""
        event = await self._get_or_404(SiteEvent, site_event_seq=site_event_seq)
        await self.session.delete(event)
        await self.session.commit()
        await self._changed()
        return Result()
