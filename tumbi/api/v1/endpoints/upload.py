"""Image upload endpoint."""

from typing import List, Optional
from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status

from tumbi.api.deps import get_current_user
from tumbi.core.config import settings
from tumbi.core.logging import get_logger
from tumbi.core.rate_limit import limiter
from tumbi.models.user import User
from tumbi.schemas.common import UploadResponse
from tumbi.services.storage_service import ObjectStore, StorageError, get_object_store

logger = get_logger(__name__)
router = APIRouter()


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


@router.post("", response_model=UploadResponse)
@limiter.limit(settings.RATE_LIMIT_UPLOAD)
async def upload_images(
    request: Request,
    photos: Optional[List[UploadFile]] = File(None),
    current_user: User = Depends(get_current_user),
    store: ObjectStore = Depends(get_object_store)
):
    """
    Store one or more images (multipart field `photos`).

    Every file is checked before any is stored. URLs come back in
    submission order.
    """
    files = [photo for photo in (photos or []) if photo.filename]
    if not files:
        raise _bad_request("No files were uploaded.")

    payloads = []
    for photo in files:
        if not photo.content_type or not photo.content_type.startswith("image/"):
            raise _bad_request(f"{photo.filename} is not an image.")
        data = await photo.read()
        if not data:
            raise _bad_request(f"{photo.filename} is empty.")
        if len(data) > settings.MAX_UPLOAD_BYTES:
            raise _bad_request(
                f"{photo.filename} is larger than {settings.MAX_UPLOAD_BYTES // (1024 * 1024)}MB."
            )
        payloads.append((photo, data))

    urls = []
    try:
        for photo, data in payloads:
            url = await store.put_image(
                data,
                owner_id=current_user.id,
                filename=photo.filename,
                content_type=photo.content_type,
            )
            urls.append(url)
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Image storage is unavailable. Please try again."
        )

    logger.info(f"User {current_user.id} uploaded {len(urls)} image(s)")
    return UploadResponse(message="Files uploaded successfully.", urls=urls)
