"""
业务服务层
"""

from siteadmin.services.count_cache import CountCache, CountKeys, get_count_cache
from siteadmin.services.file_upload import FileUploadService, ImageBlob
from siteadmin.services.object_storage import (
    HttpObjectStorage,
    ObjectStorage,
    get_object_storage,
)
from siteadmin.services.saga import SagaRunner, SagaStep
from siteadmin.services.site_deletion import SiteDeletionManager
from siteadmin.services.site_listing import SiteListingService
from siteadmin.services.site_registration import SiteRegistrationService
from siteadmin.services.site_service import SiteService
from siteadmin.services.user_service import UserService
from siteadmin.services.weak_refs import WeakReferenceResolver

__all__ = [
    "CountCache",
    "CountKeys",
    "get_count_cache",
    "FileUploadService",
    "ImageBlob",
    "HttpObjectStorage",
    "ObjectStorage",
    "get_object_storage",
    "SagaRunner",
    "SagaStep",
    "SiteDeletionManager",
    "SiteListingService",
    "SiteRegistrationService",
    "SiteService",
    "UserService",
    "WeakReferenceResolver",
]
