from typing import Any

from fastapi import APIRouter, Depends, File, Response, UploadFile
from fastapi import status as http_status

from src.adapters.fs.filestore import FileSystemStore
from src.api.deps import get_api_version, get_current_user, get_file_store, get_upload_rules
from src.api.schemas import ApiResponse, UploadResponse, envelope
from src.components.upload import (
    UploadImageInput,
    UploadRules,
    run_delete_image,
    run_upload_image,
)
from src.domain.user import UserEntity

router = APIRouter()


@router.post(
    "/image", response_model=ApiResponse[UploadResponse], status_code=http_status.HTTP_201_CREATED
)
async def upload_image(
    file: UploadFile = File(...),
    _: UserEntity = Depends(get_current_user),
    store: FileSystemStore = Depends(get_file_store),
    rules: UploadRules = Depends(get_upload_rules),
    version: str = Depends(get_api_version),
) -> dict[str, Any]:
    """Upload a JPG, PNG or WebP image."""
    data = await file.read()
    inp = UploadImageInput(
        filename=file.filename or "", content_type=file.content_type, data=data
    )
    result = run_upload_image(inp, store, rules)
    return envelope(
        UploadResponse(
            url=result.url, public_id=result.public_id, format=result.format, bytes=result.bytes
        ),
        version,
    )


@router.delete("/image/{public_id:path}", status_code=http_status.HTTP_204_NO_CONTENT)
def delete_image(
    public_id: str,
    _: UserEntity = Depends(get_current_user),
    store: FileSystemStore = Depends(get_file_store),
    rules: UploadRules = Depends(get_upload_rules),
) -> Response:
    run_delete_image(public_id, store, rules)
    return Response(status_code=http_status.HTTP_204_NO_CONTENT)
