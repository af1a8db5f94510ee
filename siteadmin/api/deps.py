"""
API 依赖注入

提供数据库会话、对象存储、计数缓存与各业务服务
"""

from typing import Annotated, Optional, Union

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from siteadmin.core.errors import (
    AdminCoreError,
    NotFoundError,
    RemoteCallError,
    ValidationFailed,
)
from siteadmin.database.engine import get_db
from siteadmin.services.count_cache import CountCache, get_count_cache
from siteadmin.services.file_upload import FileUploadService
from siteadmin.services.object_storage import ObjectStorage, get_object_storage
from siteadmin.services.site_deletion import SiteDeletionManager
from siteadmin.services.site_listing import SiteListingService
from siteadmin.services.site_registration import SiteRegistrationService
from siteadmin.services.site_service import SiteService
from siteadmin.services.user_service import UserService

DbSession = Annotated[AsyncSession, Depends(get_db)]


def get_storage() -> ObjectStorage:
    """对象存储依赖（测试中可覆盖）"""
    return get_object_storage()


def get_cache() -> CountCache:
    """计数缓存依赖（测试中可覆盖）"""
    return get_count_cache()


Storage = Annotated[ObjectStorage, Depends(get_storage)]
Cache = Annotated[CountCache, Depends(get_cache)]


def get_file_service(db: DbSession, storage: Storage) -> FileUploadService:
    return FileUploadService(db, storage)


def get_registration_service(db: DbSession, cache: Cache) -> SiteRegistrationService:
    return SiteRegistrationService(db, cache)


def get_listing_service(db: DbSession, cache: Cache) -> SiteListingService:
    return SiteListingService(db, cache)


def get_site_service(db: DbSession, cache: Cache) -> SiteService:
    return SiteService(db, cache)


def get_deletion_manager(
    db: DbSession,
    files: Annotated[FileUploadService, Depends(get_file_service)],
    cache: Cache,
) -> SiteDeletionManager:
    return SiteDeletionManager(db, files, cache)


def get_user_service(db: DbSession) -> UserService:
    return UserService(db)


def raise_for_error(error: Optional[Union[AdminCoreError, str]]) -> None:
    """
    将结果对象中的错误转换为 HTTP 异常

    - NotFoundError → 404
    - ValidationFailed → 422
    - 其他 RemoteCallError → 502
    - 其余错误 → 500
    """
    if error is None:
        return

    if isinstance(error, str):
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=error)

    if isinstance(error, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, ValidationFailed):
        code = status.HTTP_422_UNPROCESSABLE_ENTITY
    elif isinstance(error, RemoteCallError):
        code = status.HTTP_502_BAD_GATEWAY
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    raise HTTPException(status_code=code, detail=error.message)
