"""
站点活动 API
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from siteadmin.api.deps import get_site_service, raise_for_error
from siteadmin.database.models import SiteEvent
from siteadmin.schemas.site import SiteEventResponse, SiteEventUpdate
from siteadmin.services.site_service import SiteService

router = APIRouter()

Sites = Annotated[SiteService, Depends(get_site_service)]


@router.patch("/{site_event_seq}", response_model=SiteEventResponse)
async def update_site_event(
    site_event_seq: str, data: SiteEventUpdate, sites: Sites
) -> SiteEvent:
    """修改活动"""
    result = await sites.update_site_event(site_event_seq, data)
    raise_for_error(result.error)
    return result.data


@router.delete("/{site_event_seq}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_site_event(site_event_seq: str, sites: Sites) -> None:
    """删除活动"""
    result = await sites.delete_site_event(site_event_seq)
    raise_for_error(result.error)
