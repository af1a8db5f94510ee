"""
统一返回结构

所有对外契约都返回结果对象而不是抛出异常：
- Result: { data, error }
- PageResult: { data, total_count, error }
- UploadResult / DeleteResult: 文件操作结果

调用方必须以 error 是否为 None 作为唯一判断依据。
"""

from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Awaitable, Callable, Generic, List, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from siteadmin.core.errors import AdminCoreError, RemoteCallError, UnexpectedError
from siteadmin.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class Result(Generic[T]):
    """单条 / 单次操作结果"""

    data: Optional[T] = None
    error: Optional[AdminCoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class PageResult(Generic[T]):
    """分页列表结果"""

    data: Optional[List[T]] = None
    total_count: int = 0
    error: Optional[AdminCoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class UploadResult:
    """图片上传结果"""

    success: bool
    file_url: Optional[str] = None
    file_id: Optional[str] = None
    error: Optional[str] = None
    cause: Optional[AdminCoreError] = field(default=None, repr=False)


@dataclass
class DeleteResult:
    """图片删除结果"""

    success: bool
    error: Optional[str] = None
    cause: Optional[AdminCoreError] = field(default=None, repr=False)


@dataclass
class SiteCounts:
    """站点数量统计（状态标签角标）"""

    all: int = 0
    active: int = 0
    suspended: int = 0
    closed: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "all": self.all,
            "active": self.active,
            "suspended": self.suspended,
            "closed": self.closed,
        }


@dataclass
class DeletionPreview:
    """删除预览：删除前展示将被移除的数据"""

    site: Any = None
    logo_image: Optional[dict[str, str]] = None
    site_info: List[Any] = field(default_factory=list)
    promotions: List[Any] = field(default_factory=list)
    events: List[Any] = field(default_factory=list)


def contract(
    operation: str,
    on_error: Callable[[AdminCoreError], R],
) -> Callable[[Callable[..., Awaitable[R]]], Callable[..., Awaitable[R]]]:
    """
    契约边界装饰器

    捕获方法内的所有异常并转换为统一的结果对象。
    若实例持有 AsyncSession，数据库错误后会先回滚，保证会话可继续使用。

    Usage:
        @contract("fetch_site", lambda e: Result(error=e))
        async def fetch_site(self, site_seq: str) -> Result[Site]:
            ...
    """

    def decorator(func: Callable[..., Awaitable[R]]) -> Callable[..., Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> R:
            try:
                return await func(*args, **kwargs)
            except AdminCoreError as e:
                logger.warning(f"{operation}_failed", error=e.message, error_type=type(e).__name__)
                return on_error(e)
            except SQLAlchemyError as e:
                await _rollback_owner(args)
                logger.error(f"{operation}_failed", error=str(e), error_type=type(e).__name__)
                return on_error(RemoteCallError(str(e)))
            except Exception as e:
                await _rollback_owner(args)
                logger.exception(f"{operation}_unexpected_error", error=str(e))
                return on_error(UnexpectedError(str(e) or "Unknown error"))

        return wrapper

    return decorator


async def _rollback_owner(args: tuple) -> None:
    owner = args[0] if args else None
    session = getattr(owner, "session", None)
    if isinstance(session, AsyncSession):
        try:
            await session.rollback()
        except SQLAlchemyError as e:
            logger.warning("session_rollback_failed", error=str(e))
