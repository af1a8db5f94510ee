"""
数据库模块

提供 SQLAlchemy 2.0 异步数据库支持
"""

from siteadmin.database.base import Base, TimestampMixin
from siteadmin.database.engine import (
    async_session_maker,
    check_db,
    close_db,
    engine,
    get_db,
)

__all__ = [
    # Engine
    "engine",
    "async_session_maker",
    "get_db",
    "check_db",
    "close_db",
    # Base
    "Base",
    "TimestampMixin",
]
