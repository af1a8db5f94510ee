"""
站点删除（级联删除 + 弱引用清理）

数据库会级联删除 SiteInfo / SiteDepositPromotion / SiteEvent，
但 logo_image 是弱引用，不会被级联，因此删除前显式清理 logo 文件：

1. 读取 Site.logo_image
2. 有 logo 时删除文件（对象 + 元数据），失败只记录日志，不中断删除
3. 删除 Site

活动缩略图（SiteEvent.thumbnail_image）不做清理，见 DESIGN.md。
"""

from typing import Any, Optional

from pydantic import BaseModel
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from siteadmin.core.errors import NotFoundError
from siteadmin.core.logging import get_logger
from siteadmin.core.results import DeletionPreview, Result, contract
from siteadmin.database.models import (
    Site,
    SiteDepositPromotion,
    SiteEvent,
    SiteInfo,
    StoredFile,
    StoredFileDetail,
)
from siteadmin.schemas.site import (
    PromotionResponse,
    SiteEventResponse,
    SiteInfoResponse,
    SiteResponse,
)
from siteadmin.services.count_cache import CountCache, CountKeys, get_count_cache
from siteadmin.services.file_upload import FileUploadService

logger = get_logger(__name__)


class SiteDeletionManager:
    """站点删除与删除预览"""

    def __init__(
        self,
        session: AsyncSession,
        files: FileUploadService,
        count_cache: Optional[CountCache] = None,
    ):
        self.session = session
        self.files = files
        self.count_cache = count_cache or get_count_cache()

    @contract("delete_site", lambda e: Result(error=e))
    async def delete_site(self, site_seq: str) -> Result[None]:
        """删除站点及其 logo 文件"""
        log = logger.bind(site_seq=site_seq)

        row = (
            await self.session.execute(
                select(Site.site_seq, Site.logo_image).where(Site.site_seq == site_seq)
            )
        ).one_or_none()
        if row is None:
            raise NotFoundError(f"Site not found: {site_seq}")

        if row.logo_image:
            try:
                deleted = await self.files.delete_image(row.logo_image)
                if not deleted.success:
                    log.warning("logo_delete_failed", file_seq=row.logo_image, error=deleted.error)
            except Exception as e:
                log.warning("logo_delete_error", file_seq=row.logo_image, error=str(e))

        await self.session.execute(delete(Site).where(Site.site_seq == site_seq))
        await self.session.commit()

        await self.count_cache.invalidate(CountKeys.SITE_COUNTS)
        log.info("site_deleted", had_logo=bool(row.logo_image))
        return Result()

    @contract("preview_site_deletion", lambda e: Result(error=e))
    async def preview_site_deletion(self, site_seq: str) -> Result[DeletionPreview]:
        """
        删除预览（只读）

        返回站点、logo 文件与各子表数据；任一子表查询失败时视为空列表。
        """
        site = await self.session.scalar(select(Site).where(Site.site_seq == site_seq))
        if site is None:
            raise NotFoundError(f"Site not found: {site_seq}")

        # 子表查询失败会回滚会话，已加载的行先转换为响应模型
        preview = DeletionPreview(site=SiteResponse.model_validate(site))

        if preview.site.logo_image:
            logo = (
                await self.session.execute(
                    select(StoredFile.file_seq, StoredFile.file_url, StoredFileDetail.file_path)
                    .outerjoin(StoredFileDetail, StoredFileDetail.file_seq == StoredFile.file_seq)
                    .where(StoredFile.file_seq == preview.site.logo_image)
                )
            ).one_or_none()
            if logo is not None:
                preview.logo_image = {
                    "file_seq": logo.file_seq,
                    "file_url": logo.file_url,
                    "file_path": logo.file_path or "",
                }

        preview.site_info = await self._children(SiteInfo, SiteInfoResponse, site_seq)
        preview.promotions = await self._children(
            SiteDepositPromotion, PromotionResponse, site_seq
        )
        preview.events = await self._children(SiteEvent, SiteEventResponse, site_seq)
        return Result(data=preview)

    async def _children(
        self, model: Any, schema: type[BaseModel], site_seq: str
    ) -> list[BaseModel]:
        try:
            result = await self.session.scalars(select(model).where(model.site_seq == site_seq))
            return [schema.model_validate(row) for row in result.all()]
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.warning(
                "deletion_preview_child_failed",
                table=model.__tablename__,
                site_seq=site_seq,
                error=str(e),
            )
            return []
