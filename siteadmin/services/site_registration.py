"""
站点注册 Saga

一次注册写入 Site + SiteInfo + N 条 SiteDepositPromotion：

1. 写 Site（计数清零、未推荐、logo 取自输入）      失败 → 直接返回
2. 写 SiteInfo                                   失败 → 删除 Site，返回错误
3. 批量写入优惠（按提交顺序）                      失败 → 删除 Site（级联删除 SiteInfo），返回错误
4. 返回 Site

任一步骤失败只执行一次补偿（删除 Site），不重试。
SiteInfo 写入失败时不清理已上传的 logo 对象，由调用方决定是否复用。
"""

from typing import Any, Union

from pydantic import ValidationError
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from siteadmin.core.errors import ValidationFailed
from siteadmin.core.logging import get_logger
from siteadmin.core.results import Result, contract
from siteadmin.database.models import (
    DepositType,
    Site,
    SiteDepositPromotion,
    SiteInfo,
)
from siteadmin.schemas.site import SiteRegistrationData
from siteadmin.services.count_cache import CountCache, CountKeys, get_count_cache
from siteadmin.services.saga import SagaContext, SagaRunner, SagaStep

logger = get_logger(__name__)

CRYPTO_METHOD = "가상화폐 지원"
STANDARD_METHOD = "일반 입출금"
PROMOTION_DESCRIPTION = "입플 프로모션"
PROMOTION_TERMS = "이용 약관에 따라 적용됩니다."
PROMOTION_VALID_DAYS = 30


def promotion_name(bonus_rate: float, bonus_amount: float) -> str:
    """由比例与金额合成优惠名称，例如 3+2 입플"""
    return f"{_format_number(bonus_rate)}+{_format_number(bonus_amount)} 입플"


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


class SiteRegistrationService:
    """站点注册（聚合创建）"""

    def __init__(self, session: AsyncSession, count_cache: CountCache | None = None):
        self.session = session
        self.count_cache = count_cache or get_count_cache()

    @contract("register_site", lambda e: Result(error=e))
    async def register_site(
        self,
        data: Union[SiteRegistrationData, dict[str, Any]],
    ) -> Result[Site]:
        """注册站点（Site + SiteInfo + 优惠）"""
        if not isinstance(data, SiteRegistrationData):
            try:
                data = SiteRegistrationData.model_validate(data)
            except ValidationError as e:
                raise ValidationFailed(str(e)) from e

        runner = SagaRunner(
            name="register_site",
            steps=[
                SagaStep("site", self._insert_site, compensation=self._delete_site),
                # SiteInfo 与优惠随 Site 级联删除，无需单独补偿
                SagaStep("site_info", self._insert_site_info),
                SagaStep("promotions", self._insert_promotions),
            ],
            on_step_error=self.session.rollback,
        )
        ctx = await runner.run({"data": data})

        site: Site = ctx["site"]
        await self.count_cache.invalidate(CountKeys.SITE_COUNTS)
        logger.info(
            "site_registered",
            site_seq=site.site_seq,
            promotions=len(data.promotions),
        )
        return Result(data=site)

    # ============================================================
    # Saga 步骤
    # ============================================================

    async def _insert_site(self, ctx: SagaContext) -> Site:
        data: SiteRegistrationData = ctx["data"]
        site = Site(
            name=data.name,
            url=data.url,
            type=data.type.value,
            status=data.status.value,
            is_recommend=False,
            recommend_order=0,
            avg_rating=0.0,
            subscriber_count=0,
            view_count=0,
            logo_image=data.logo_image or None,
        )
        self.session.add(site)
        await self.session.commit()
        await self.session.refresh(site)
        return site

    async def _insert_site_info(self, ctx: SagaContext) -> SiteInfo:
        data: SiteRegistrationData = ctx["data"]
        method = CRYPTO_METHOD if data.is_crypto else STANDARD_METHOD
        info = SiteInfo(
            site_seq=ctx["site"].site_seq,
            deposit_min=data.deposit_min,
            first_bonus=data.first_bonus,
            repeat_bonus=data.repeat_bonus,
            daily_first_bonus=data.daily_first_bonus,
            casino_payback=data.casino_payback,
            slot_payback=data.slot_payback,
            sport_payback=data.sport_payback,
            rolling_rate=data.rolling_rate,
            bet_limit_min=data.bet_limit_min,
            bet_limit_max=data.bet_limit_max,
            casino_comp=data.casino_comp,
            slot_comp=data.slot_comp,
            casino_bonus=data.casino_bonus,
            slot_bonus=data.slot_bonus,
            sport_bonus=data.sport_bonus,
            site_feature=data.site_feature,
            deposit_method=method,
            withdrawal_method=method,
        )
        self.session.add(info)
        await self.session.commit()
        return info

    async def _insert_promotions(self, ctx: SagaContext) -> list[SiteDepositPromotion]:
        data: SiteRegistrationData = ctx["data"]
        site_seq = ctx["site"].site_seq
        # 按提交顺序写入，不去重
        promotions = [
            SiteDepositPromotion(
                site_seq=site_seq,
                promotion_name=promotion_name(draft.bonus_rate, draft.bonus_amount),
                deposit_type=DepositType.FIRST.value,
                bonus_rate=draft.bonus_rate,
                bonus_amount=draft.bonus_amount,
                max_bonus=0,
                min_deposit=0,
                rollover_requirement=0,
                valid_days=PROMOTION_VALID_DAYS,
                description=PROMOTION_DESCRIPTION,
                terms_conditions=PROMOTION_TERMS,
                is_active=True,
                display_order=0,
            )
            for draft in data.promotions
        ]
        self.session.add_all(promotions)
        await self.session.commit()
        return promotions

    async def _delete_site(self, ctx: SagaContext) -> None:
        await self.session.execute(
            delete(Site).where(Site.site_seq == ctx["site"].site_seq)
        )
        await self.session.commit()
