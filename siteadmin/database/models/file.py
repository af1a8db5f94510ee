"""
文件元数据模型

一个上传的二进制对象对应一对 StoredFile + StoredFileDetail。
StoredFileDetail 通过外键 ON DELETE CASCADE 依附于 StoredFile，
没有 Detail 的 StoredFile 属于写入一半的非法状态。
"""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from siteadmin.database.base import Base, TimestampMixin, new_uuid


class StoredFile(Base, TimestampMixin):
    """文件"""

    __tablename__ = "files"

    file_seq: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    file_type: Mapped[str] = mapped_column(String(100), nullable=False)

    def __repr__(self) -> str:
        return f"<StoredFile(file_seq={self.file_seq}, file_name={self.file_name})>"


class StoredFileDetail(Base, TimestampMixin):
    """文件详情（存储路径、大小、扩展名）"""

    __tablename__ = "file_details"

    file_detail_seq: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    file_seq: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("files.file_seq", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_path: Mapped[str] = mapped_column(String(1000), nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False)
    file_extension: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    file_sn: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<StoredFileDetail(file_seq={self.file_seq}, file_path={self.file_path})>"
