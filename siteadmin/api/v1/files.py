"""
文件 API

图片上传与删除（对象存储 + 文件元数据）
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from siteadmin.api.deps import get_file_service, raise_for_error
from siteadmin.schemas.site import FileUploadResponse
from siteadmin.services.file_upload import FileUploadService, ImageBlob

router = APIRouter()

Files = Annotated[FileUploadService, Depends(get_file_service)]


@router.post("/images", response_model=FileUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_image(
    files: Files,
    file: UploadFile = File(...),
    bucket: Optional[str] = Form(None),
    folder: Optional[str] = Form(None),
) -> FileUploadResponse:
    """上传图片"""
    blob = ImageBlob(
        file_name=file.filename or "upload",
        content_type=file.content_type or "",
        content=await file.read(),
    )

    result = await files.upload_image(blob, bucket=bucket, folder=folder)
    if not result.success:
        raise_for_error(result.cause or result.error)
    return FileUploadResponse(file_id=result.file_id, file_url=result.file_url)


@router.delete("/{file_seq}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_image(
    file_seq: str,
    files: Files,
    bucket: Optional[str] = None,
) -> None:
    """删除图片"""
    result = await files.delete_image(file_seq, bucket=bucket)
    if not result.success:
        raise_for_error(result.cause or result.error)
