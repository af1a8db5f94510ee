"""
入金优惠 API
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from siteadmin.api.deps import get_site_service, raise_for_error
from siteadmin.database.models import SiteDepositPromotion
from siteadmin.schemas.site import PromotionResponse, PromotionUpdate
from siteadmin.services.site_service import SiteService

router = APIRouter()

Sites = Annotated[SiteService, Depends(get_site_service)]


@router.patch("/{promotion_seq}", response_model=PromotionResponse)
async def update_promotion(
    promotion_seq: str, data: PromotionUpdate, sites: Sites
) -> SiteDepositPromotion:
    """修改优惠"""
    result = await sites.update_promotion(promotion_seq, data)
    raise_for_error(result.error)
    return result.data


@router.delete("/{promotion_seq}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_promotion(promotion_seq: str, sites: Sites) -> None:
    """删除优惠"""
    result = await sites.delete_promotion(promotion_seq)
    raise_for_error(result.error)
