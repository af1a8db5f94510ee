"""
会员管理服务
"""

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from siteadmin.core.errors import NotFoundError
from siteadmin.core.logging import get_logger
from siteadmin.core.results import Result, contract
from siteadmin.database.base import utcnow
from siteadmin.database.models import UserInfo, UserRole
from siteadmin.schemas.user import UserListFilter, UserUpdate

logger = get_logger(__name__)


class UserService:
    """会员查询与修改"""

    def __init__(self, session: AsyncSession):
        self.session = session

    @contract("fetch_all_users", lambda e: Result(error=e))
    async def fetch_all_users(self) -> Result[list[UserInfo]]:
        """获取全部会员"""
        return await self.fetch_filtered_users(UserListFilter())

    @contract("fetch_filtered_users", lambda e: Result(error=e))
    async def fetch_filtered_users(self, user_filter: UserListFilter) -> Result[list[UserInfo]]:
        """按权限、审批状态与关键字（姓名 / 邮箱 / 昵称）筛选会员"""
        stmt = select(UserInfo)

        if user_filter.role is not None:
            stmt = stmt.where(UserInfo.role == user_filter.role.value)
        if user_filter.approval_yn is not None:
            stmt = stmt.where(UserInfo.approval_yn == user_filter.approval_yn)

        search = (user_filter.search or "").strip()
        if search:
            stmt = stmt.where(
                or_(
                    UserInfo.name.icontains(search, autoescape=True),
                    UserInfo.email.icontains(search, autoescape=True),
                    UserInfo.nick_name.icontains(search, autoescape=True),
                )
            )

        result = await self.session.scalars(stmt.order_by(UserInfo.created_at.desc()))
        return Result(data=list(result.all()))

    @contract("fetch_user", lambda e: Result(error=e))
    async def fetch_user(self, user_id: str) -> Result[UserInfo]:
        """获取会员"""
        user = await self.session.scalar(select(UserInfo).where(UserInfo.id == user_id))
        if user is None:
            raise NotFoundError(f"User not found: {user_id}")
        return Result(data=user)

    @contract("update_user", lambda e: Result(error=e))
    async def update_user(self, user_id: str, updates: UserUpdate) -> Result[UserInfo]:
        """修改会员信息"""
        user = await self.session.scalar(select(UserInfo).where(UserInfo.id == user_id))
        if user is None:
            raise NotFoundError(f"User not found: {user_id}")

        for key, value in updates.model_dump(exclude_unset=True).items():
            setattr(user, key, getattr(value, "value", value))
        user.updated_at = utcnow()

        await self.session.commit()
        await self.session.refresh(user)
        logger.info("user_updated", user_id=user_id, fields=sorted(updates.model_fields_set))
        return Result(data=user)

    async def update_approval_status(self, user_id: str, approval_yn: bool) -> Result[UserInfo]:
        return await self.update_user(user_id, UserUpdate(approval_yn=approval_yn))

    async def update_user_role(self, user_id: str, role: UserRole) -> Result[UserInfo]:
        return await self.update_user(user_id, UserUpdate(role=role))

    async def update_user_points(self, user_id: str, point_balance: int) -> Result[UserInfo]:
        return await self.update_user(user_id, UserUpdate(point_balance=point_balance))

    async def update_user_exp(self, user_id: str, current_exp: int) -> Result[UserInfo]:
        return await self.update_user(user_id, UserUpdate(current_exp=current_exp))
