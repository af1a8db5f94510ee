"""
站点 API

站点注册、列表、详情、修改、删除，以及站点下的优惠与活动
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, status

from siteadmin.api.deps import (
    get_deletion_manager,
    get_listing_service,
    get_registration_service,
    get_site_service,
    raise_for_error,
)
from siteadmin.database.models import (
    Site,
    SiteDepositPromotion,
    SiteEvent,
    SiteInfo,
    SiteStatus,
    SiteType,
)
from siteadmin.schemas.site import (
    DeletionPreviewResponse,
    PromotionCreate,
    PromotionResponse,
    SiteCountsResponse,
    SiteCreate,
    SiteDetail,
    SiteEventCreate,
    SiteEventResponse,
    SiteFilter,
    SiteInfoResponse,
    SiteInfoUpdate,
    SitePage,
    SiteRegistrationData,
    SiteResponse,
    SiteUpdate,
)
from siteadmin.services.site_deletion import SiteDeletionManager
from siteadmin.services.site_listing import MAX_PAGE_SIZE, SiteListingService
from siteadmin.services.site_registration import SiteRegistrationService
from siteadmin.services.site_service import SiteService

router = APIRouter()

Listing = Annotated[SiteListingService, Depends(get_listing_service)]
Sites = Annotated[SiteService, Depends(get_site_service)]


@router.get("", response_model=SitePage)
async def list_sites(
    listing: Listing,
    type: Optional[SiteType] = Query(None, description="按类型筛选"),
    site_status: Optional[SiteStatus] = Query(None, alias="status", description="按状态筛选"),
    is_recommend: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, description="名称或 URL 关键字"),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
) -> SitePage:
    """获取站点列表（分页）"""
    site_filter = SiteFilter(
        type=type,
        status=site_status,
        is_recommend=is_recommend,
        search=search,
    )
    result = await listing.list_sites(site_filter, page=page, page_size=page_size)
    raise_for_error(result.error)
    return SitePage(
        data=result.data or [],
        total_count=result.total_count,
        page=page,
        page_size=page_size,
    )


@router.get("/counts", response_model=SiteCountsResponse)
async def site_counts(listing: Listing) -> dict[str, int]:
    """状态标签计数"""
    result = await listing.site_counts()
    raise_for_error(result.error)
    return result.data.to_dict()


@router.post("", response_model=SiteResponse, status_code=status.HTTP_201_CREATED)
async def register_site(
    data: SiteRegistrationData,
    service: Annotated[SiteRegistrationService, Depends(get_registration_service)],
) -> Site:
    """注册站点（站点 + 运营信息 + 入金优惠）"""
    result = await service.register_site(data)
    raise_for_error(result.error)
    return result.data


@router.post("/legacy", response_model=SiteResponse, status_code=status.HTTP_201_CREATED)
async def create_site(data: SiteCreate, sites: Sites) -> Site:
    """旧版创建（只写站点）"""
    result = await sites.create_site(data)
    raise_for_error(result.error)
    return result.data


@router.get("/{site_seq}", response_model=SiteDetail)
async def get_site(site_seq: str, sites: Sites) -> SiteDetail:
    """获取站点详情"""
    result = await sites.fetch_site_with_info(site_seq)
    raise_for_error(result.error)
    return result.data


@router.patch("/{site_seq}", response_model=SiteResponse)
async def update_site(site_seq: str, data: SiteUpdate, sites: Sites) -> Site:
    """修改站点"""
    result = await sites.update_site(site_seq, data)
    raise_for_error(result.error)
    return result.data


@router.patch("/{site_seq}/info", response_model=SiteInfoResponse)
async def update_site_info(site_seq: str, data: SiteInfoUpdate, sites: Sites) -> SiteInfo:
    """修改运营信息"""
    result = await sites.update_site_info(site_seq, data)
    raise_for_error(result.error)
    return result.data


@router.get("/{site_seq}/deletion-preview", response_model=DeletionPreviewResponse)
async def preview_site_deletion(
    site_seq: str,
    manager: Annotated[SiteDeletionManager, Depends(get_deletion_manager)],
) -> DeletionPreviewResponse:
    """删除预览"""
    result = await manager.preview_site_deletion(site_seq)
    raise_for_error(result.error)
    return DeletionPreviewResponse.model_validate(result.data)


@router.delete("/{site_seq}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_site(
    site_seq: str,
    manager: Annotated[SiteDeletionManager, Depends(get_deletion_manager)],
) -> None:
    """删除站点（级联删除子表并清理 logo）"""
    result = await manager.delete_site(site_seq)
    raise_for_error(result.error)


# ============================================================
# 站点下的优惠与活动
# ============================================================


@router.post(
    "/{site_seq}/promotions",
    response_model=PromotionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_promotion(
    site_seq: str, data: PromotionCreate, sites: Sites
) -> SiteDepositPromotion:
    """新增入金优惠"""
    result = await sites.add_promotion(site_seq, data)
    raise_for_error(result.error)
    return result.data


@router.get("/{site_seq}/events", response_model=List[SiteEventResponse])
async def list_site_events(site_seq: str, sites: Sites) -> List[SiteEvent]:
    """获取站点活动"""
    result = await sites.fetch_site_events(site_seq)
    raise_for_error(result.error)
    return result.data


@router.post(
    "/{site_seq}/events",
    response_model=SiteEventResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_site_event(site_seq: str, data: SiteEventCreate, sites: Sites) -> SiteEvent:
    """新增站点活动"""
    result = await sites.add_site_event(site_seq, data)
    raise_for_error(result.error)
    return result.data
