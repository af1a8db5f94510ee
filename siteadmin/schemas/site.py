"""
站点相关的请求 / 响应模型
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from siteadmin.database.models import (
    DepositType,
    EventStatus,
    EventType,
    SiteStatus,
    SiteType,
)


# ============================================================
# 注册向导
# ============================================================


class PromotionDraft(BaseModel):
    """入金优惠草稿（3+2 中的 3 与 2）"""

    bonus_rate: float = Field(..., ge=0)
    bonus_amount: float = Field(..., ge=0)


class SiteRegistrationData(BaseModel):
    """站点注册向导提交的数据（Site + SiteInfo + 优惠）"""

    # 基本信息
    name: str = Field(..., min_length=1, max_length=200)
    url: str = Field(..., min_length=1, max_length=500)
    type: SiteType = SiteType.CASINO
    status: SiteStatus = SiteStatus.ACTIVE

    # 运营信息
    deposit_min: int = Field(0, ge=0)
    first_bonus: float = 0
    repeat_bonus: float = 0
    daily_first_bonus: float = 0
    casino_payback: float = 0
    slot_payback: float = 0
    sport_payback: float = 0
    rolling_rate: float = 0
    bet_limit_min: int = Field(0, ge=0)
    bet_limit_max: int = Field(0, ge=0)
    casino_comp: float = 0
    slot_comp: float = 0
    casino_bonus: float = 0
    slot_bonus: float = 0
    sport_bonus: float = 0
    site_feature: Optional[str] = None
    is_crypto: bool = False

    # 入金优惠（至少一条）
    promotions: List[PromotionDraft] = Field(..., min_length=1)

    # 已上传的 logo 文件 ID
    logo_image: Optional[str] = None


class SiteCreate(BaseModel):
    """旧版站点创建（不含运营信息）"""

    name: str = Field(..., min_length=1, max_length=200)
    url: str = Field(..., min_length=1, max_length=500)
    type: SiteType = SiteType.CASINO
    status: SiteStatus = SiteStatus.ACTIVE
    is_recommend: bool = False
    recommend_order: int = 0
    avg_rating: float = 0.0
    logo_image: Optional[str] = None


# ============================================================
# 更新 / 筛选
# ============================================================


class SiteFilter(BaseModel):
    """站点列表筛选条件"""

    type: Optional[SiteType] = None
    status: Optional[SiteStatus] = None
    is_recommend: Optional[bool] = None
    search: Optional[str] = None


class SiteUpdate(BaseModel):
    """站点更新请求"""

    name: Optional[str] = None
    url: Optional[str] = None
    type: Optional[SiteType] = None
    is_recommend: Optional[bool] = None
    recommend_order: Optional[int] = None
    status: Optional[SiteStatus] = None
    subscriber_count: Optional[int] = None
    view_count: Optional[int] = None
    avg_rating: Optional[float] = None
    logo_image: Optional[str] = None


class SiteInfoUpdate(BaseModel):
    """运营信息更新请求"""

    deposit_min: Optional[int] = None
    first_bonus: Optional[float] = None
    repeat_bonus: Optional[float] = None
    daily_first_bonus: Optional[float] = None
    casino_payback: Optional[float] = None
    slot_payback: Optional[float] = None
    sport_payback: Optional[float] = None
    rolling_rate: Optional[float] = None
    bet_limit_min: Optional[int] = None
    bet_limit_max: Optional[int] = None
    casino_comp: Optional[float] = None
    slot_comp: Optional[float] = None
    casino_bonus: Optional[float] = None
    slot_bonus: Optional[float] = None
    sport_bonus: Optional[float] = None
    site_feature: Optional[str] = None
    deposit_method: Optional[str] = None
    withdrawal_method: Optional[str] = None


class PromotionCreate(BaseModel):
    """入金优惠新增请求"""

    promotion_name: str = Field(..., min_length=1, max_length=200)
    deposit_type: DepositType = DepositType.FIRST
    bonus_rate: float = Field(..., ge=0)
    bonus_amount: float = Field(..., ge=0)
    min_deposit: int = 0
    max_bonus: int = 0
    rollover_requirement: float = 0
    valid_days: int = 30
    description: Optional[str] = None
    terms_conditions: Optional[str] = None
    is_active: bool = True
    display_order: int = 0


class PromotionUpdate(BaseModel):
    """入金优惠更新请求"""

    promotion_name: Optional[str] = None
    deposit_type: Optional[DepositType] = None
    bonus_rate: Optional[float] = None
    bonus_amount: Optional[float] = None
    min_deposit: Optional[int] = None
    max_bonus: Optional[int] = None
    rollover_requirement: Optional[float] = None
    valid_days: Optional[int] = None
    description: Optional[str] = None
    terms_conditions: Optional[str] = None
    is_active: Optional[bool] = None
    display_order: Optional[int] = None


class SiteEventCreate(BaseModel):
    """站点活动新增请求"""

    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    event_type: EventType = EventType.BONUS
    status: EventStatus = EventStatus.BEFORE
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_featured: bool = False
    display_order: int = 0
    thumbnail_image: Optional[str] = None


class SiteEventUpdate(BaseModel):
    """站点活动更新请求"""

    name: Optional[str] = None
    description: Optional[str] = None
    event_type: Optional[EventType] = None
    status: Optional[EventStatus] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_featured: Optional[bool] = None
    display_order: Optional[int] = None
    view_count: Optional[int] = None
    thumbnail_image: Optional[str] = None


# ============================================================
# 响应
# ============================================================


class SiteResponse(BaseModel):
    """站点响应"""

    site_seq: str
    name: str
    url: str
    type: str
    status: str
    is_recommend: bool
    recommend_order: int
    subscriber_count: int
    view_count: int
    avg_rating: float
    logo_image: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SiteWithLogo(SiteResponse):
    """列表行：附带解析后的 logo URL"""

    logo_url: Optional[str] = None


class SiteInfoResponse(BaseModel):
    """运营信息响应"""

    site_info_seq: str
    site_seq: str
    deposit_min: int
    first_bonus: float
    repeat_bonus: float
    daily_first_bonus: float
    casino_payback: float
    slot_payback: float
    sport_payback: float
    rolling_rate: float
    bet_limit_min: int
    bet_limit_max: int
    casino_comp: float
    slot_comp: float
    casino_bonus: float
    slot_bonus: float
    sport_bonus: float
    site_feature: Optional[str] = None
    deposit_method: Optional[str] = None
    withdrawal_method: Optional[str] = None

    model_config = {"from_attributes": True}


class PromotionResponse(BaseModel):
    """入金优惠响应"""

    promotion_seq: str
    site_seq: str
    promotion_name: str
    deposit_type: str
    bonus_rate: float
    bonus_amount: float
    min_deposit: int
    max_bonus: int
    rollover_requirement: float
    valid_days: int
    description: Optional[str] = None
    terms_conditions: Optional[str] = None
    is_active: bool
    display_order: int

    model_config = {"from_attributes": True}


class SiteEventResponse(BaseModel):
    """站点活动响应"""

    site_event_seq: str
    site_seq: str
    name: str
    description: Optional[str] = None
    event_type: str
    status: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_featured: bool
    display_order: int
    view_count: int
    thumbnail_image: Optional[str] = None

    model_config = {"from_attributes": True}


class SiteDetail(SiteResponse):
    """站点详情（含运营信息与优惠）"""

    site_info: Optional[SiteInfoResponse] = None
    promotions: List[PromotionResponse] = Field(default_factory=list)


class SitePage(BaseModel):
    """分页响应"""

    data: List[SiteWithLogo]
    total_count: int
    page: int
    page_size: int


class DeletionPreviewResponse(BaseModel):
    """删除预览响应"""

    site: SiteResponse
    logo_image: Optional[dict[str, str]] = None
    site_info: List[SiteInfoResponse] = Field(default_factory=list)
    promotions: List[PromotionResponse] = Field(default_factory=list)
    events: List[SiteEventResponse] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class SiteCountsResponse(BaseModel):
    """状态标签计数响应"""

    all: int
    active: int
    suspended: int
    closed: int


class FileUploadResponse(BaseModel):
    """图片上传响应"""

    file_id: str
    file_url: str
