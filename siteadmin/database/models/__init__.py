"""
数据库模型
"""

from siteadmin.database.models.file import StoredFile, StoredFileDetail
from siteadmin.database.models.site import (
    DepositType,
    EventStatus,
    EventType,
    Site,
    SiteDepositPromotion,
    SiteEvent,
    SiteInfo,
    SiteStatus,
    SiteType,
)
from siteadmin.database.models.user import UserInfo, UserRole

__all__ = [
    # Site
    "Site",
    "SiteInfo",
    "SiteDepositPromotion",
    "SiteEvent",
    "SiteType",
    "SiteStatus",
    "DepositType",
    "EventType",
    "EventStatus",
    # File
    "StoredFile",
    "StoredFileDetail",
    # User
    "UserInfo",
    "UserRole",
]
