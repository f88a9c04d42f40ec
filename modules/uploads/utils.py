import re
import time
import random
from pathlib import Path
from typing import Optional

from modules.shared.errors import UnsupportedMediaError, ValidationError

IMAGE_FIELD_NAME = "incidentImage"
MAX_IMAGE_BYTES = 5 * 1024 * 1024

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
}

_EXTENSION_PATTERN = re.compile(r"^\.[a-z0-9]{1,10}$")


def check_media_type(content_type: Optional[str]) -> str:
    """Return the normalized media type or raise if it is not an accepted image type"""
    media_type = (content_type or "").split(";")[0].strip().lower()
    if media_type not in ALLOWED_IMAGE_TYPES:
        raise UnsupportedMediaError(
            "Only JPEG and PNG image files are allowed!",
            f"received content type '{content_type or 'unknown'}'",
        )
    return media_type


def check_size(data: bytes) -> None:
    if len(data) > MAX_IMAGE_BYTES:
        raise ValidationError("Image file is too large. Maximum size is 5MB.")


def extension_for(original_filename: Optional[str], media_type: str) -> str:
    """Keep the original extension when it looks sane, otherwise derive one from the media type"""
    suffix = Path(original_filename or "").suffix.lower()
    if _EXTENSION_PATTERN.match(suffix):
        return suffix
    return ALLOWED_IMAGE_TYPES.get(media_type, "")


def generate_filename(original_filename: Optional[str], media_type: str) -> str:
    """e.g. incidentImage-1718000000000-482913377.jpg"""
    timestamp = int(time.time() * 1000)
    suffix = random.randint(0, 999_999_999)
    return f"{IMAGE_FIELD_NAME}-{timestamp}-{suffix}{extension_for(original_filename, media_type)}"
