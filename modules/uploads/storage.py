import io
import logging
from pathlib import Path
from typing import Optional

import cloudinary
import cloudinary.uploader
from starlette.concurrency import run_in_threadpool

from modules.shared.config import Settings
from modules.shared.errors import StorageError
from .utils import generate_filename

logger = logging.getLogger("uploads.storage")

LOCAL_URL_PREFIX = "/uploads"


class ImageStorage:
    """Stores image bytes somewhere durable and returns the URL they are served from."""

    async def save(self, data: bytes, media_type: str, original_filename: Optional[str] = None) -> str:
        raise NotImplementedError


class LocalImageStorage(ImageStorage):
    """Writes images into a directory that the app serves statically under /uploads."""

    MAX_NAME_ATTEMPTS = 5

    def __init__(self, directory: str, url_prefix: str = LOCAL_URL_PREFIX):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self.url_prefix = url_prefix.rstrip("/")

    def _write(self, data: bytes, media_type: str, original_filename: Optional[str]) -> str:
        for _ in range(self.MAX_NAME_ATTEMPTS):
            file_name = generate_filename(original_filename, media_type)
            try:
                # "x" refuses to overwrite an existing upload
                with (self.directory / file_name).open("xb") as buffer:
                    buffer.write(data)
                return file_name
            except FileExistsError:
                logger.warning("Generated filename %s already exists, retrying", file_name)
        raise StorageError("Could not allocate a unique filename for the upload.")

    async def save(self, data: bytes, media_type: str, original_filename: Optional[str] = None) -> str:
        try:
            file_name = await run_in_threadpool(self._write, data, media_type, original_filename)
        except OSError as e:
            logger.exception("Failed to write upload to %s", self.directory)
            raise StorageError("Failed to store uploaded image.", str(e)) from e
        logger.info("Stored upload %s (%d bytes) in %s", file_name, len(data), self.directory)
        return f"{self.url_prefix}/{file_name}"


class CloudinaryImageStorage(ImageStorage):
    """Uploads images to a Cloudinary folder and returns the secure URL."""

    def __init__(self, cloud_name: str, api_key: str, api_secret: str, folder: Optional[str] = None):
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )
        self.folder = folder

    async def save(self, data: bytes, media_type: str, original_filename: Optional[str] = None) -> str:
        public_id = Path(generate_filename(original_filename, media_type)).stem
        upload_options = {
            "resource_type": "image",
            "public_id": public_id,
            "overwrite": False,
        }
        if self.folder:
            upload_options["folder"] = self.folder

        try:
            result = await run_in_threadpool(
                cloudinary.uploader.upload,
                io.BytesIO(data),
                **upload_options,
            )
        except Exception as e:
            logger.exception("Cloudinary upload failed")
            raise StorageError("Failed to store uploaded image.", str(e)) from e

        secure_url = result.get("secure_url") or result.get("url")
        if not secure_url:
            raise StorageError("Cloudinary upload did not return a URL")
        logger.info("Cloudinary upload successful: %s", secure_url)
        return secure_url


def build_image_storage(settings: Settings) -> ImageStorage:
    if settings.upload_backend == "cloudinary":
        logger.info("Using Cloudinary image storage (folder=%s)", settings.cloudinary_folder)
        return CloudinaryImageStorage(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            folder=settings.cloudinary_folder,
        )
    logger.info("Using local image storage in %s", settings.upload_dir)
    return LocalImageStorage(settings.upload_dir)
