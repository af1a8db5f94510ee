"""
站点管理后台 - Core 主入口

职责:
- 站点注册（站点 + 运营信息 + 入金优惠）
- 站点列表、状态计数、详情与修改
- 站点删除与 logo 文件清理
- 图片上传 / 删除
- 会员管理
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from siteadmin.api import router as api_router
from siteadmin.core.config import settings
from siteadmin.core.logging import get_logger, setup_logging
from siteadmin.database.engine import check_db, close_db
from siteadmin.services.count_cache import get_count_cache
from siteadmin.services.object_storage import close_object_storage

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理"""
    setup_logging()
    logger.info("app_starting", env=settings.ENV)
    yield
    await get_count_cache().close()
    await close_object_storage()
    await close_db()
    logger.info("app_stopped")


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title=settings.APP_NAME,
        description="站点注册、列表、删除与文件管理",
        version="0.1.0",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    async def health_check() -> dict:
        """健康检查端点"""
        try:
            await check_db()
            database = "healthy"
        except Exception as e:
            logger.warning("health_check_db_failed", error=str(e))
            database = "unhealthy"
        return {
            "status": "healthy" if database == "healthy" else "unhealthy",
            "service": "siteadmin-core",
            "version": "0.1.0",
            "database": database,
        }

    return app


app = create_app()
