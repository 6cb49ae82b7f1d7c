"""
Client for the external media store (Cloudinary).

The client holds nothing but its configuration. Credentials are passed to the Cloudinary SDK on
every call instead of through its global config, and every call is a single request with no
retries.
"""
import logging
from typing import Any, Dict, Optional

import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from ..journal.models import MediaType
from .data import MediaDeleteResult, MediaStoreConfig, MediaUploadResult

logger = logging.getLogger(__name__)


class MediaStoreConfigurationError(ValueError):
    """
    Raised when the media store client is requested but provider credentials are not configured.
    """


class PayloadTooLarge(ValueError):
    """
    Raised when a file exceeds the maximum upload size. Raised before any call to the provider.
    """


class MediaUploadFailed(Exception):
    """
    Raised when the media store rejects an upload or cannot be reached.
    """


class MediaDeleteFailed(Exception):
    """
    Raised when the media store fails to destroy an asset.
    """


def infer_media_type(
    resource_type: Optional[str], content_type: Optional[str] = None
) -> MediaType:
    if resource_type == "video":
        return MediaType.VIDEO
    if content_type is not None and content_type.startswith("video/"):
        return MediaType.VIDEO
    return MediaType.IMAGE


def resource_type_for(media_type: MediaType) -> str:
    if media_type == MediaType.VIDEO:
        return "video"
    return "image"


class MediaStoreClient:
    def __init__(self, config: MediaStoreConfig) -> None:
        self.config = config

    def _options(self) -> Dict[str, Any]:
        return {
            "cloud_name": self.config.cloud_name,
            "api_key": self.config.api_key,
            "api_secret": self.config.api_secret,
            "upload_prefix": self.config.upload_prefix,
            "timeout": self.config.timeout_seconds,
        }

    def check_payload_size(self, size: int) -> None:
        if size > self.config.max_payload_bytes:
            limit_mb = self.config.max_payload_bytes // (1024 * 1024)
            raise PayloadTooLarge(
                f"File size exceeds the {limit_mb}MB limit "
                f"(uploaded: {size / (1024 * 1024):.2f}MB)"
            )

    def upload(
        self, filename: str, content: bytes, content_type: Optional[str] = None
    ) -> MediaUploadResult:
        """
        Uploads a single file. Size is checked locally before the provider is contacted.
        """
        self.check_payload_size(len(content))

        try:
            response = cloudinary.uploader.upload(
                (filename, content),
                folder=self.config.folder,
                resource_type="auto",
                **self._options(),
            )
        except CloudinaryError as e:
            logger.error(f"Media store rejected upload of {filename}: {str(e)}")
            raise MediaUploadFailed(str(e))

        try:
            return MediaUploadResult(
                url=response.get("secure_url") or response["url"],
                public_id=response["public_id"],
                media_type=infer_media_type(response.get("resource_type"), content_type),
                width=response.get("width"),
                height=response.get("height"),
                format=response.get("format"),
                bytes=response.get("bytes"),
                resource_type=response.get("resource_type"),
                original_filename=response.get("original_filename"),
            )
        except Exception as e:
            logger.error(f"Unexpected media store upload response for {filename}: {str(e)}")
            raise MediaUploadFailed("Unexpected response from media store")

    def delete(self, public_id: str, resource_type: str = "image") -> MediaDeleteResult:
        """
        Destroys an asset by public_id. A "not found" result from the provider is returned to the
        caller rather than raised, so repeated deletes are harmless.
        """
        try:
            response = cloudinary.uploader.destroy(
                public_id, resource_type=resource_type, **self._options()
            )
        except CloudinaryError as e:
            logger.error(f"Media store failed to delete {public_id}: {str(e)}")
            raise MediaDeleteFailed(str(e))

        try:
            result = MediaDeleteResult(result=response["result"])
        except Exception as e:
            logger.error(f"Unexpected media store delete response for {public_id}: {str(e)}")
            raise MediaDeleteFailed("Unexpected response from media store")

        if result.result != "ok":
            logger.warning(f"Media store delete for {public_id} returned: {result.result}")
        return result
