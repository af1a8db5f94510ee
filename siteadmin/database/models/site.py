"""
站点聚合模型

Site 为聚合根；SiteInfo / SiteDepositPromotion / SiteEvent 为子表，
通过 site_seq 外键 ON DELETE CASCADE 随站点一起删除。

logo_image / thumbnail_image 是弱引用（仅保存文件 ID，不建外键），
删除站点或活动时数据库不会级联删除文件，由应用层决定清理策略。
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from siteadmin.database.base import Base, TimestampMixin, new_uuid


class SiteType(str, Enum):
    """站点类型"""
    CASINO = "casino"
    SPORTS = "sports"
    HOLDEM = "holdem"
    SPORT = "sport"
    MIXED = "mixed"


class SiteStatus(str, Enum):
    """站点状态"""
    ACTIVE = "active"
    SUSPENDED = "suspended"
    CLOSED = "closed"


class DepositType(str, Enum):
    """充值类型"""
    FIRST = "first"
    REPEAT = "repeat"
    SPECIAL = "special"


class EventType(str, Enum):
    """活动类型"""
    BONUS = "bonus"
    CASHBACK = "cashback"
    TOURNAMENT = "tournament"
    SPECIAL = "special"
    SEASONAL = "seasonal"


class EventStatus(str, Enum):
    """活动状态"""
    BEFORE = "before"
    ONGOING = "ongoing"
    ENDED = "ended"


class Site(Base, TimestampMixin):
    """站点（聚合根）"""

    __tablename__ = "sites"

    site_seq: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    url: Mapped[str] = mapped_column(String(500), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SiteStatus.ACTIVE.value, index=True
    )

    # 推荐
    is_recommend: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    recommend_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # 计数
    subscriber_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    avg_rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    # 弱引用：files.file_seq（无外键约束）
    logo_image: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    def __repr__(self) -> str:
        return f"<Site(site_seq={self.site_seq}, name={self.name}, status={self.status})>"


class SiteInfo(Base, TimestampMixin):
    """站点运营信息（与 Site 一对一）"""

    __tablename__ = "site_infos"

    site_info_seq: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    site_seq: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("sites.site_seq", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    deposit_min: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    first_bonus: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    repeat_bonus: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    daily_first_bonus: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    # 返水 / 流水
    casino_payback: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    slot_payback: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    sport_payback: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    rolling_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    # 投注限额
    bet_limit_min: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bet_limit_max: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    casino_comp: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    slot_comp: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    casino_bonus: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    slot_bonus: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    sport_bonus: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    site_feature: Mapped[Optional[str]] = mapped_column(Text)
    deposit_method: Mapped[Optional[str]] = mapped_column(String(100))
    withdrawal_method: Mapped[Optional[str]] = mapped_column(String(100))

    def __repr__(self) -> str:
        return f"<SiteInfo(site_seq={self.site_seq})>"


class SiteDepositPromotion(Base, TimestampMixin):
    """充值优惠（与 Site 一对多）"""

    __tablename__ = "site_deposit_promotions"

    promotion_seq: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    site_seq: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("sites.site_seq", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    promotion_name: Mapped[str] = mapped_column(String(200), nullable=False)
    deposit_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DepositType.FIRST.value
    )
    bonus_rate: Mapped[float] = mapped_column(Float, nullable=False)
    bonus_amount: Mapped[float] = mapped_column(Float, nullable=False)
    min_deposit: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_bonus: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rollover_requirement: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    valid_days: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    description: Mapped[Optional[str]] = mapped_column(Text)
    terms_conditions: Mapped[Optional[str]] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<SiteDepositPromotion(promotion_seq={self.promotion_seq}, name={self.promotion_name})>"


class SiteEvent(Base, TimestampMixin):
    """站点活动（与 Site 一对多）"""

    __tablename__ = "site_events"

    site_event_seq: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    site_seq: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("sites.site_seq", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    event_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=EventType.BONUS.value
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=EventStatus.BEFORE.value
    )
    start_date: Mapped[Optional[datetime]] = mapped_column(nullable=True)
    end_date: Mapped[Optional[datetime]] = mapped_column(nullable=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # 弱引用：files.file_seq（无外键约束，删除站点时不清理）
    thumbnail_image: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    def __repr__(self) -> str:
        return f"<SiteEvent(site_event_seq={self.site_event_seq}, name={self.name})>"
