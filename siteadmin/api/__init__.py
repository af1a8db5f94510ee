"""
API 路由模块

统一注册所有 API 路由
"""

from fastapi import APIRouter

from siteadmin.api.v1 import events, files, promotions, sites, users

router = APIRouter()

# 站点
router.include_router(sites.router, prefix="/v1/sites", tags=["站点"])
router.include_router(promotions.router, prefix="/v1/promotions", tags=["入金优惠"])
router.include_router(events.router, prefix="/v1/events", tags=["站点活动"])

# 文件
router.include_router(files.router, prefix="/v1/files", tags=["文件"])

# 会员
router.include_router(users.router, prefix="/v1/users", tags=["会员"])
