from siteadmin.schemas.site import (
    DeletionPreviewResponse,
    FileUploadResponse,
    PromotionCreate,
    PromotionDraft,
    PromotionResponse,
    PromotionUpdate,
    SiteCountsResponse,
    SiteCreate,
    SiteDetail,
    SiteEventCreate,
    SiteEventResponse,
    SiteEventUpdate,
    SiteFilter,
    SiteInfoResponse,
    SiteInfoUpdate,
    SitePage,
    SiteRegistrationData,
    SiteResponse,
    SiteUpdate,
    SiteWithLogo,
)
from siteadmin.schemas.user import UserListFilter, UserResponse, UserUpdate

__all__ = [
    "DeletionPreviewResponse",
    "FileUploadResponse",
    "PromotionCreate",
    "PromotionDraft",
    "PromotionResponse",
    "PromotionUpdate",
    "SiteCountsResponse",
    "SiteCreate",
    "SiteDetail",
    "SiteEventCreate",
    "SiteEventResponse",
    "SiteEventUpdate",
    "SiteFilter",
    "SiteInfoResponse",
    "SiteInfoUpdate",
    "SitePage",
    "SiteRegistrationData",
    "SiteResponse",
    "SiteUpdate",
    "SiteWithLogo",
    "UserListFilter",
    "UserResponse",
    "UserUpdate",
]
