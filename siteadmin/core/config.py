"""
应用配置

使用 pydantic-settings 管理环境变量配置
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """应用配置类"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # 基础配置
    ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    APP_NAME: str = "Sport Community Admin"

    # 服务配置
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # 数据库配置（DATABASE_URL 非空时优先使用）
    DATABASE_URL: str = ""
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "siteadmin"
    POSTGRES_PASSWORD: str = "siteadmin"
    POSTGRES_DB: str = "siteadmin"

    # 数据库连接池配置
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800  # 30 分钟

    # Redis 配置（计数缓存二级存储，默认关闭）
    REDIS_URL: str = "redis://localhost:6379/0"
    COUNT_CACHE_REDIS_ENABLED: bool = False
    COUNT_CACHE_TTL_SECONDS: int = 300  # 5 分钟
    COUNT_CACHE_PREFIX: str = "siteadmin"

    # 对象存储配置
    STORAGE_URL: str = "http://localhost:54321"
    STORAGE_SERVICE_KEY: str = ""
    STORAGE_BUCKET: str = "file"
    STORAGE_TIMEOUT: float = 10.0

    # 上传配置
    UPLOAD_MAX_SIZE_MB: int = 5
    UPLOAD_FOLDER: str = "sites/logos"

    # CORS 配置
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"

    @property
    def database_url(self) -> str:
        """构建异步数据库连接 URL"""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )


@lru_cache
def get_settings() -> Settings:
    """获取配置单例"""
    return Settings()


settings = get_settings()
