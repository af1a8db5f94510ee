"""
会员相关的请求 / 响应模型
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from siteadmin.database.models import UserRole


class UserListFilter(BaseModel):
    """会员列表筛选条件（search 匹配姓名、邮箱、昵称）"""

    role: Optional[UserRole] = None
    approval_yn: Optional[bool] = None
    search: Optional[str] = None


class UserUpdate(BaseModel):
    """会员信息更新请求"""

    level: Optional[int] = None
    current_exp: Optional[int] = None
    point_balance: Optional[int] = None
    role: Optional[UserRole] = None
    approval_yn: Optional[bool] = None


class UserResponse(BaseModel):
    """会员响应"""

    id: str
    uid: str
    email: str
    name: str
    nick_name: str
    level: int
    current_exp: int
    total_exp: int
    point_balance: int
    total_earned_point: int
    total_used_point: int
    role: str
    approval_yn: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
