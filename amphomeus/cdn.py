"""
Media store client shared by the whole process
"""
import os
from typing import Callable, Iterator, Optional

from .media.client import MediaStoreClient, MediaStoreConfigurationError
from .media.data import MediaStoreConfig
from .utils.settings import (
    AMPHOMEUS_MEDIA_TIMEOUT_SECONDS,
    CLOUDINARY_UPLOAD_PREFIX,
    CLOUDINARY_UPLOAD_FOLDER,
    MEDIA_MAX_PAYLOAD_BYTES,
)

_media_store_client: Optional[MediaStoreClient] = None


def media_store_config_from_env() -> MediaStoreConfig:
    """
    Builds media store configuration from environment variables. Requires:
    - CLOUDINARY_CLOUD_NAME
    - CLOUDINARY_API_KEY
    - CLOUDINARY_API_SECRET
    """
    cloud_name = os.environ.get("CLOUDINARY_CLOUD_NAME")
    api_key = os.environ.get("CLOUDINARY_API_KEY")
    api_secret = os.environ.get("CLOUDINARY_API_SECRET")
    if not cloud_name or not api_key or not api_secret:
        raise MediaStoreConfigurationError(
            "CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY and CLOUDINARY_API_SECRET environment "
            "variables must be set"
        )
    return MediaStoreConfig(
        cloud_name=cloud_name,
        api_key=api_key,
        api_secret=api_secret,
        folder=CLOUDINARY_UPLOAD_FOLDER,
        upload_prefix=CLOUDINARY_UPLOAD_PREFIX,
        timeout_seconds=AMPHOMEUS_MEDIA_TIMEOUT_SECONDS,
        max_payload_bytes=MEDIA_MAX_PAYLOAD_BYTES,
    )


def media_store_client_from_env() -> MediaStoreClient:
    """
    Returns the process-wide media store client, creating it on first use.
    """
    global _media_store_client
    if _media_store_client is None:
        _media_store_client = MediaStoreClient(media_store_config_from_env())
    return _media_store_client


def yield_media_store_client_from_env() -> MediaStoreClient:
    """
    Yields the media store client. As per FastAPI docs:
    https://fastapi.tiangolo.com/tutorial/dependencies/dependencies-with-yield/
    """
    client = media_store_client_from_env()
    yield client


def yield_media_store_provider_from_env() -> Iterator[Callable[[], MediaStoreClient]]:
    """
    Yields a callable returning the media store client instead of the client itself. Handlers
    that only sometimes touch the media store resolve it lazily, so they keep working when the
    media store is not configured.
    """
    yield media_store_client_from_env
