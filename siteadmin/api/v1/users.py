"""
会员 API
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query

from siteadmin.api.deps import get_user_service, raise_for_error
from siteadmin.database.models import UserInfo, UserRole
from siteadmin.schemas.user import UserListFilter, UserResponse, UserUpdate
from siteadmin.services.user_service import UserService

router = APIRouter()

Users = Annotated[UserService, Depends(get_user_service)]


@router.get("", response_model=List[UserResponse])
async def list_users(
    users: Users,
    role: Optional[UserRole] = Query(None, description="按权限筛选"),
    approval_yn: Optional[bool] = Query(None, description="按审批状态筛选"),
    search: Optional[str] = Query(None, description="姓名、邮箱或昵称关键字"),
) -> List[UserInfo]:
    """获取会员列表"""
    user_filter = UserListFilter(role=role, approval_yn=approval_yn, search=search)
    result = await users.fetch_filtered_users(user_filter)
    raise_for_error(result.error)
    return result.data


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, users: Users) -> UserInfo:
    """获取会员"""
    result = await users.fetch_user(user_id)
    raise_for_error(result.error)
    return result.data


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(user_id: str, data: UserUpdate, users: Users) -> UserInfo:
    """修改会员（等级、经验、积分、权限、审批）"""
    result = await users.update_user(user_id, data)
    raise_for_error(result.error)
    return result.data
