"""
站点注册测试
"""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from siteadmin.core.errors import RemoteCallError, SagaStepFailed, ValidationFailed
from siteadmin.database.models import Site, SiteDepositPromotion, SiteInfo
from siteadmin.schemas.site import SiteRegistrationData
from siteadmin.services.site_registration import (
    CRYPTO_METHOD,
    PROMOTION_VALID_DAYS,
    STANDARD_METHOD,
    SiteRegistrationService,
    promotion_name,
)
from tests.utils import count_rows, registration_payload


def test_promotion_name():
    """测试优惠名称合成"""
    assert promotion_name(3, 2) == "3+2 입플"
    assert promotion_name(3.0, 2.0) == "3+2 입플"
    assert promotion_name(10, 2.5) == "10+2.5 입플"


@pytest.fixture
def service(db_session, count_cache):
    return SiteRegistrationService(db_session, count_cache)


@pytest.mark.asyncio
async def test_register_site_happy_path(service, db_session):
    """测试注册成功：站点、运营信息、优惠各写入一次"""
    result = await service.register_site(registration_payload())

    assert result.error is None
    site = result.data
    assert site.name == "Alpha Casino"
    assert site.subscriber_count == 0
    assert site.view_count == 0
    assert site.is_recommend is False
    assert site.recommend_order == 0
    assert site.avg_rating == 0.0
    assert site.logo_image is None

    info = await db_session.scalar(select(SiteInfo).where(SiteInfo.site_seq == site.site_seq))
    assert info is not None
    assert info.deposit_min == 10000
    assert info.deposit_method == CRYPTO_METHOD
    assert info.withdrawal_method == CRYPTO_METHOD

    promotions = (
        await db_session.scalars(
            select(SiteDepositPromotion).where(SiteDepositPromotion.site_seq == site.site_seq)
        )
    ).all()
    assert len(promotions) == 1
    promotion = promotions[0]
    assert promotion.promotion_name == "3+2 입플"
    assert promotion.deposit_type == "first"
    assert promotion.bonus_rate == 3
    assert promotion.bonus_amount == 2
    assert promotion.valid_days == PROMOTION_VALID_DAYS
    assert promotion.is_active is True
    assert promotion.display_order == 0


@pytest.mark.asyncio
async def test_register_site_standard_payment_method(service, db_session):
    """测试非加密货币站点使用普通出入金方式"""
    result = await service.register_site(registration_payload(is_crypto=False))

    info = await db_session.scalar(select(SiteInfo).where(SiteInfo.site_seq == result.data.site_seq))
    assert info.deposit_method == STANDARD_METHOD
    assert info.withdrawal_method == STANDARD_METHOD


@pytest.mark.asyncio
async def test_register_site_keeps_order_and_duplicates(service, db_session):
    """测试优惠按提交顺序写入且不去重"""
    payload = registration_payload(
        promotions=[
            {"bonus_rate": 3, "bonus_amount": 2},
            {"bonus_rate": 5, "bonus_amount": 3},
            {"bonus_rate": 3, "bonus_amount": 2},
        ]
    )
    result = await service.register_site(payload)

    assert result.error is None
    names = (
        await db_session.scalars(
            select(SiteDepositPromotion.promotion_name).where(
                SiteDepositPromotion.site_seq == result.data.site_seq
            )
        )
    ).all()
    assert sorted(names) == ["3+2 입플", "3+2 입플", "5+3 입플"]


@pytest.mark.asyncio
async def test_register_site_with_logo(service):
    """测试 logo 文件 ID 原样写入站点"""
    result = await service.register_site(registration_payload(logo_image="file-1"))
    assert result.data.logo_image == "file-1"


@pytest.mark.asyncio
async def test_register_site_accepts_model(service):
    """测试直接传入已校验的模型"""
    data = SiteRegistrationData.model_validate(registration_payload())
    result = await service.register_site(data)
    assert result.ok


@pytest.mark.asyncio
async def test_register_site_requires_promotion(service, db_session):
    """测试没有优惠时本地校验失败，不写入任何数据"""
    result = await service.register_site(registration_payload(promotions=[]))

    assert isinstance(result.error, ValidationFailed)
    assert result.data is None
    assert await count_rows(db_session, Site) == 0


@pytest.mark.asyncio
async def test_site_info_failure_compensates(service, db_session):
    """测试运营信息写入失败：站点被删除，数据库无残留"""
    with patch.object(
        service,
        "_insert_site_info",
        AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("disk full"))),
    ):
        result = await service.register_site(registration_payload())

    assert isinstance(result.error, SagaStepFailed)
    assert isinstance(result.error, RemoteCallError)
    assert result.error.step == "site_info"
    assert result.data is None
    assert await count_rows(db_session, Site) == 0
    assert await count_rows(db_session, SiteInfo) == 0
    assert await count_rows(db_session, SiteDepositPromotion) == 0


@pytest.mark.asyncio
async def test_promotion_failure_compensates(service, db_session):
    """测试优惠写入失败：站点与已写入的运营信息一并删除"""
    with patch.object(
        service,
        "_insert_promotions",
        AsyncMock(side_effect=RuntimeError("promotion insert failed")),
    ):
        result = await service.register_site(registration_payload())

    assert isinstance(result.error, SagaStepFailed)
    assert result.error.step == "promotions"
    assert result.error.message == "promotion insert failed"
    assert await count_rows(db_session, Site) == 0
    assert await count_rows(db_session, SiteInfo) == 0
    assert await count_rows(db_session, SiteDepositPromotion) == 0


@pytest.mark.asyncio
async def test_site_insert_failure_returns_error(service, db_session):
    """测试站点写入失败时直接返回错误"""
    with patch.object(
        service,
        "_insert_site",
        AsyncMock(side_effect=RuntimeError("site insert failed")),
    ):
        result = await service.register_site(registration_payload())

    assert result.error.step == "site"
    assert await count_rows(db_session, Site) == 0


@pytest.mark.asyncio
async def test_register_site_invalidates_counts(service, count_cache):
    """测试注册成功后计数缓存失效"""
    await count_cache.set("site_counts", {"all": 0, "active": 0, "suspended": 0, "closed": 0})

    result = await service.register_site(registration_payload())

    assert result.ok
    assert await count_cache.get("site_counts") is None
