import logging
from typing import Optional, Union

from fastapi import Request
from starlette.datastructures import UploadFile

from modules.shared.errors import ValidationError
from .storage import ImageStorage
from .utils import MAX_IMAGE_BYTES, check_media_type, check_size

logger = logging.getLogger("uploads.manager")


def get_image_storage(request: Request) -> ImageStorage:
    return request.app.state.image_storage


async def read_image(image: Union[UploadFile, str, None]) -> tuple[bytes, str]:
    """Validate the attached image and return its bytes and media type.

    Nothing is persisted here, so a rejected file never reaches the storage backend.
    """
    # a plain text field under the image name carries no file
    if not isinstance(image, UploadFile) or not image.filename:
        raise ValidationError("Error: Image upload is required.")

    media_type = check_media_type(image.content_type)
    # one extra byte is enough to tell an oversized upload apart
    data = await image.read(MAX_IMAGE_BYTES + 1)
    check_size(data)
    if not data:
        raise ValidationError("Error: Uploaded image is empty.")
    logger.debug("Accepted image %s (%s, %d bytes)", image.filename, media_type, len(data))
    return data, media_type


async def store_image(storage: ImageStorage, data: bytes, media_type: str, original_filename: Optional[str]) -> str:
    url = await storage.save(data, media_type, original_filename)
    logger.info("Image stored at %s", url)
    return url
