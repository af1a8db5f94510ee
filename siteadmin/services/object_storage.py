"""
对象存储客户端

通过 HTTP 访问托管的对象存储服务（bucket + path 寻址）：
- 上传：POST /storage/v1/object/{bucket}/{path}（x-upsert: false，不覆盖已有对象）
- 公开 URL：/storage/v1/object/public/{bucket}/{path}
- 删除：DELETE /storage/v1/object/{bucket}，body {"prefixes": [...]}

不使用版本管理与分片上传。
"""

from abc import ABC, abstractmethod
from typing import Optional

import httpx

from siteadmin.core.config import settings
from siteadmin.core.errors import StorageError
from siteadmin.core.logging import get_logger

logger = get_logger(__name__)


class ObjectStorage(ABC):
    """对象存储抽象"""

    default_bucket: str

    @abstractmethod
    async def upload(
        self,
        path: str,
        content: bytes,
        content_type: str,
        bucket: Optional[str] = None,
    ) -> str:
        """上传对象，返回存储路径；失败抛出 StorageError"""

    @abstractmethod
    def public_url(self, path: str, bucket: Optional[str] = None) -> str:
        """获取对象的公开 URL"""

    @abstractmethod
    async def remove(self, paths: list[str], bucket: Optional[str] = None) -> None:
        """按路径删除对象；失败抛出 StorageError"""


class HttpObjectStorage(ObjectStorage):
    """基于 httpx 的对象存储客户端"""

    def __init__(
        self,
        base_url: str,
        service_key: str,
        default_bucket: str = "file",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.default_bucket = default_bucket
        self._service_key = service_key
        self._timeout = timeout
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._service_key}",
            "apikey": self._service_key,
        }

    def _object_url(self, bucket: str, path: str = "") -> str:
        url = f"{self.base_url}/storage/v1/object/{bucket}"
        return f"{url}/{path.lstrip('/')}" if path else url

    async def upload(
        self,
        path: str,
        content: bytes,
        content_type: str,
        bucket: Optional[str] = None,
    ) -> str:
        bucket = bucket or self.default_bucket
        headers = {
            **self._headers(),
            "Content-Type": content_type,
            "cache-control": "max-age=3600",
            "x-upsert": "false",
        }

        try:
            response = await self._get_client().post(
                self._object_url(bucket, path),
                content=content,
                headers=headers,
            )
        except httpx.HTTPError as e:
            logger.error("storage_upload_error", bucket=bucket, path=path, error=str(e))
            raise StorageError(f"Storage upload failed: {e}") from e

        if response.is_error:
            message = _error_message(response)
            logger.error(
                "storage_upload_rejected",
                bucket=bucket,
                path=path,
                status_code=response.status_code,
                error=message,
            )
            raise StorageError(message, status_code=response.status_code)

        logger.info("storage_uploaded", bucket=bucket, path=path, size=len(content))
        return path

    def public_url(self, path: str, bucket: Optional[str] = None) -> str:
        bucket = bucket or self.default_bucket
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{path.lstrip('/')}"

    async def remove(self, paths: list[str], bucket: Optional[str] = None) -> None:
        bucket = bucket or self.default_bucket

        try:
            response = await self._get_client().request(
                "DELETE",
                self._object_url(bucket),
                json={"prefixes": paths},
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            logger.error("storage_remove_error", bucket=bucket, paths=paths, error=str(e))
            raise StorageError(f"Storage delete failed: {e}") from e

        if response.is_error:
            message = _error_message(response)
            logger.error(
                "storage_remove_rejected",
                bucket=bucket,
                paths=paths,
                status_code=response.status_code,
                error=message,
            )
            raise StorageError(message, status_code=response.status_code)

        logger.info("storage_removed", bucket=bucket, paths=paths)

    async def close(self) -> None:
        """关闭连接"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)


# 全局存储客户端实例
_storage: Optional[HttpObjectStorage] = None


def get_object_storage() -> HttpObjectStorage:
    """获取对象存储客户端单例"""
    global _storage
    if _storage is None:
        _storage = HttpObjectStorage(
            base_url=settings.STORAGE_URL,
            service_key=settings.STORAGE_SERVICE_KEY,
            default_bucket=settings.STORAGE_BUCKET,
            timeout=settings.STORAGE_TIMEOUT,
        )
    return _storage


async def close_object_storage() -> None:
    """关闭对象存储客户端"""
    global _storage
    if _storage is not None:
        await _storage.close()
        _storage = None
