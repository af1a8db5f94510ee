"""
测试替身与数据构造工具
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from siteadmin.core.errors import StorageError
from siteadmin.database.models import Site, StoredFile, StoredFileDetail
from siteadmin.services.object_storage import ObjectStorage


class FakeObjectStorage(ObjectStorage):
    """内存对象存储，记录调用并可注入失败"""

    def __init__(self, base_url: str = "https://storage.test", default_bucket: str = "file"):
        self.base_url = base_url
        self.default_bucket = default_bucket
        self.objects: dict[tuple[str, str], bytes] = {}
        self.upload_calls: list[tuple[str, str]] = []
        self.remove_calls: list[tuple[str, list[str]]] = []
        self.fail_upload = False
        self.fail_remove = False

    async def upload(
        self,
        path: str,
        content: bytes,
        content_type: str,
        bucket: Optional[str] = None,
    ) -> str:
        bucket = bucket or self.default_bucket
        self.upload_calls.append((bucket, path))
        if self.fail_upload:
            raise StorageError("upload rejected", status_code=500)
        if (bucket, path) in self.objects:
            raise StorageError("The resource already exists", status_code=409)
        self.objects[(bucket, path)] = content
        return path

    def public_url(self, path: str, bucket: Optional[str] = None) -> str:
        bucket = bucket or self.default_bucket
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{path}"

    async def remove(self, paths: list[str], bucket: Optional[str] = None) -> None:
        bucket = bucket or self.default_bucket
        self.remove_calls.append((bucket, list(paths)))
        if self.fail_remove:
            raise StorageError("remove rejected", status_code=500)
        for path in paths:
            self.objects.pop((bucket, path), None)


class FakeClock:
    """可手动推进的时钟"""

    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)



# ============================================================
# 数据构造
# ============================================================


def registration_payload(**overrides: Any) -> dict[str, Any]:
    """站点注册向导的典型提交数据"""
    payload: dict[str, Any] = {
        "name": "Alpha Casino",
        "url": "https://alpha.example.com",
        "type": "casino",
        "status": "active",
        "deposit_min": 10000,
        "first_bonus": 10,
        "repeat_bonus": 5,
        "site_feature": "24h support",
        "is_crypto": True,
        "promotions": [{"bonus_rate": 3, "bonus_amount": 2}],
    }
    payload.update(overrides)
    return payload


async def add_site(session: AsyncSession, **fields: Any) -> Site:
    """直接写入一条站点（不经过注册流程）"""
    values: dict[str, Any] = {
        "name": "Site",
        "url": "https://site.example.com",
        "type": "casino",
        "status": "active",
    }
    values.update(fields)
    site = Site(**values)
    session.add(site)
    await session.commit()
    await session.refresh(site)
    return site


async def add_file(session: AsyncSession, file_url: str, file_path: str = "sites/logos/a.png") -> StoredFile:
    """直接写入一对文件元数据"""
    stored = StoredFile(file_name="a.png", file_url=file_url, file_type="image/png")
    session.add(stored)
    await session.commit()
    session.add(
        StoredFileDetail(
            file_seq=stored.file_seq,
            file_name="a.png",
            file_path=file_path,
            file_size=3,
            file_extension="png",
        )
    )
    await session.commit()
    return stored


async def count_rows(session: AsyncSession, model: Any) -> int:
    return await session.scalar(select(func.count()).select_from(model)) or 0
