"""
弱引用解析 (Weak-Reference Resolver)

Site.logo_image / SiteEvent.thumbnail_image 只保存文件 ID。
列表页对一页数据做一次 IN (...) 批量查询解析 URL，避免 N+1。
"""

from typing import Iterable, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from siteadmin.core.logging import get_logger
from siteadmin.database.models import Site, StoredFile
from siteadmin.schemas.site import SiteWithLogo

logger = get_logger(__name__)


class WeakReferenceResolver:
    """文件 ID → URL 批量解析"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def resolve_urls(self, file_ids: Iterable[Optional[str]]) -> dict[str, str]:
        """
        批量解析文件 URL

        Args:
            file_ids: 文件 ID（可包含 None 与重复值）

        Returns:
            {file_seq: file_url}，无法解析的 ID 不出现在结果中
        """
        ids = list(dict.fromkeys(fid for fid in file_ids if fid))
        if not ids:
            return {}

        try:
            result = await self.session.execute(
                select(StoredFile.file_seq, StoredFile.file_url).where(
                    StoredFile.file_seq.in_(ids)
                )
            )
        except SQLAlchemyError as e:
            # 解析失败不影响列表本身，URL 置空
            await self.session.rollback()
            logger.warning("weak_ref_resolve_failed", ids=len(ids), error=str(e))
            return {}

        return {row.file_seq: row.file_url for row in result}

    async def attach_logo_urls(self, sites: Sequence[Site]) -> list[SiteWithLogo]:
        """为每个站点附加 logo_url（无 logo 或无法解析时为 None）"""
        # 先转换为响应模型，解析失败回滚会话时已加载的行会过期
        rows = [SiteWithLogo.model_validate(site) for site in sites]
        urls = await self.resolve_urls(row.logo_image for row in rows)
        for row in rows:
            row.logo_url = urls.get(row.logo_image) if row.logo_image else None
        return rows
