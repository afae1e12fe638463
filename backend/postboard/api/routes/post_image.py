"""Post Image Route — out-of-band upload channel for post images.

Invariants:
    - Always requires a valid bearer token (401 otherwise), unlike the operation endpoint
    - Only image/png, image/jpg and image/jpeg are stored; anything else, or no file,
      answers 200 "No file provided!" rather than an error
    - old_path (when a file IS stored) deletes the previously stored image first
    - The file is on disk before the 201 response is sent
"""

import logging

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status

from postboard.api.dependencies import get_image_store
from postboard.core.domain_types import ACCEPTED_IMAGE_TYPES, Identity
from postboard.core.enforce_access import require_identity
from postboard.infrastructure.image_store import LocalImageStore
from postboard.schemas.operations import ImageStored
from postboard.services.authorization_guard import get_identity

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/post-image", tags=["images"])


def is_accepted_image(upload: UploadFile | None) -> bool:
    return (
        upload is not None
        and bool(upload.filename)
        and upload.content_type in ACCEPTED_IMAGE_TYPES
    )


@router.put("", status_code=status.HTTP_201_CREATED)
async def upload_post_image(
    response: Response,
    image: UploadFile | None = File(None),
    old_path: str | None = Form(None),
    identity: Identity | None = Depends(get_identity),
    images: LocalImageStore = Depends(get_image_store),
):
    """Store one image and return its path."""
    require_identity(identity)
    if not is_accepted_image(image):
        if image is not None:
            logger.info(f"Dropped upload with content type {image.content_type}")
        response.status_code = status.HTTP_200_OK
        return {"message": "No file provided!"}

    if old_path:
        await images.delete(old_path)
    path = await images.save(await image.read(), image.filename)
    return ImageStored(message="File stored.", file_path=path)
