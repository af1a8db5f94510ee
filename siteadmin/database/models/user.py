"""
会员模型
"""

from enum import Enum

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from siteadmin.database.base import Base, TimestampMixin, new_uuid


class UserRole(str, Enum):
    """会员权限"""
    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class UserInfo(Base, TimestampMixin):
    """会员信息"""

    __tablename__ = "user_infos"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    uid: Mapped[str] = mapped_column(String(36), nullable=False, unique=True)  # 认证服务主体 ID
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    nick_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    # 等级 / 经验
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    current_exp: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_exp: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # 积分
    point_balance: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_earned_point: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_used_point: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    role: Mapped[str] = mapped_column(String(20), nullable=False, default=UserRole.USER.value)
    approval_yn: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<UserInfo(id={self.id}, email={self.email}, role={self.role})>"
