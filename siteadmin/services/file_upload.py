"""
图片上传服务（对象存储 + 元数据协调）

上传：本地校验 → 上传对象 → 写 StoredFile → 写 StoredFileDetail
- 对象上传失败：不写任何元数据
- StoredFile 写入失败：已上传对象保留
- StoredFileDetail 写入失败：删除刚写入的 StoredFile（对象保留）

删除：查 StoredFileDetail 取路径 → 删除对象 → 删除 StoredFile（Detail 级联删除）
- 对象删除失败时元数据保持不变
"""

import secrets
import time
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from siteadmin.core.config import settings
from siteadmin.core.errors import NotFoundError, ValidationFailed
from siteadmin.core.logging import get_logger
from siteadmin.core.results import DeleteResult, UploadResult, contract
from siteadmin.database.models import StoredFile, StoredFileDetail
from siteadmin.services.object_storage import ObjectStorage
from siteadmin.services.saga import SagaContext, SagaRunner, SagaStep

logger = get_logger(__name__)


@dataclass
class ImageBlob:
    """待上传的二进制图片"""

    file_name: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        if "." not in self.file_name:
            return ""
        return self.file_name.rsplit(".", 1)[1].lower()


def validate_image(blob: ImageBlob, max_size_mb: Optional[int] = None) -> None:
    """本地前置校验（大小、MIME 类型），不发起任何远程调用"""
    max_size_mb = max_size_mb or settings.UPLOAD_MAX_SIZE_MB
    if blob.size > max_size_mb * 1024 * 1024:
        raise ValidationFailed(f"File size must be {max_size_mb}MB or less")
    if not (blob.content_type or "").startswith("image/"):
        raise ValidationFailed("Only image files can be uploaded")


def build_storage_path(folder: str, extension: str) -> str:
    """生成防冲突的存储路径：{folder}/{毫秒时间戳}-{随机串}.{扩展名}"""
    name = f"{int(time.time() * 1000)}-{secrets.token_hex(8)}"
    if extension:
        name = f"{name}.{extension}"
    return f"{folder.strip('/')}/{name}"


class FileUploadService:
    """图片上传 / 删除"""

    def __init__(
        self,
        session: AsyncSession,
        storage: ObjectStorage,
        max_size_mb: Optional[int] = None,
    ):
        self.session = session
        self.storage = storage
        self.max_size_mb = max_size_mb or settings.UPLOAD_MAX_SIZE_MB

    # ============================================================
    # 上传
    # ============================================================

    @contract("upload_image", lambda e: UploadResult(success=False, error=e.message, cause=e))
    async def upload_image(
        self,
        blob: ImageBlob,
        bucket: Optional[str] = None,
        folder: Optional[str] = None,
    ) -> UploadResult:
        """上传图片并写入元数据"""
        validate_image(blob, self.max_size_mb)

        bucket = bucket or self.storage.default_bucket
        path = build_storage_path(folder or settings.UPLOAD_FOLDER, blob.extension)

        runner = SagaRunner(
            name="upload_image",
            steps=[
                # 元数据写入失败时对象不回收（见 DESIGN.md）
                SagaStep("upload", self._upload_blob),
                SagaStep("file", self._insert_file, compensation=self._delete_file),
                SagaStep("detail", self._insert_detail),
            ],
            on_step_error=self.session.rollback,
        )
        ctx = await runner.run({"blob": blob, "bucket": bucket, "path": path})

        stored: StoredFile = ctx["file"]
        logger.info("image_uploaded", file_seq=stored.file_seq, path=path)
        return UploadResult(success=True, file_url=stored.file_url, file_id=stored.file_seq)

    async def _upload_blob(self, ctx: SagaContext) -> str:
        blob: ImageBlob = ctx["blob"]
        stored_path = await self.storage.upload(
            ctx["path"], blob.content, blob.content_type, bucket=ctx["bucket"]
        )
        ctx["file_url"] = self.storage.public_url(stored_path, bucket=ctx["bucket"])
        return stored_path

    async def _insert_file(self, ctx: SagaContext) -> StoredFile:
        blob: ImageBlob = ctx["blob"]
        stored = StoredFile(
            file_name=blob.file_name,
            file_url=ctx["file_url"],
            file_type=blob.content_type,
        )
        self.session.add(stored)
        await self.session.commit()
        return stored

    async def _insert_detail(self, ctx: SagaContext) -> StoredFileDetail:
        blob: ImageBlob = ctx["blob"]
        detail = StoredFileDetail(
            file_seq=ctx["file"].file_seq,
            file_name=blob.file_name,
            file_path=ctx["upload"],
            file_size=blob.size,
            file_extension=blob.extension,
            file_sn=0,
        )
        self.session.add(detail)
        await self.session.commit()
        return detail

    async def _delete_file(self, ctx: SagaContext) -> None:
        await self.session.execute(
            delete(StoredFile).where(StoredFile.file_seq == ctx["file"].file_seq)
        )
        await self.session.commit()

    # ============================================================
    # 删除
    # ============================================================

    @contract("delete_image", lambda e: DeleteResult(success=False, error=e.message, cause=e))
    async def delete_image(self, file_id: str, bucket: Optional[str] = None) -> DeleteResult:
        """删除图片对象及其元数据"""
        file_path = await self.session.scalar(
            select(StoredFileDetail.file_path).where(StoredFileDetail.file_seq == file_id)
        )
        if file_path is None:
            raise NotFoundError(f"File does not exist: {file_id}")

        # 对象删除失败时直接返回，元数据保持不变
        await self.storage.remove([file_path], bucket=bucket)

        await self.session.execute(delete(StoredFile).where(StoredFile.file_seq == file_id))
        await self.session.commit()

        logger.info("image_deleted", file_seq=file_id, path=file_path)
        return DeleteResult(success=True)
