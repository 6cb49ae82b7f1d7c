"""
Media store data structures
"""
from typing import Optional

from pydantic import BaseModel

from ..data import CamelModel
from ..journal.models import MediaType


class MediaStoreConfig(BaseModel):
    """
    Everything the media store client needs to talk to the provider. Built once at process start.
    """

    cloud_name: str
    api_key: str
    api_secret: str
    folder: str = "amphomeus"
    upload_prefix: str = "https://api.cloudinary.com"
    timeout_seconds: float = 10.0
    max_payload_bytes: int = 10 * 1024 * 1024


class MediaUploadResult(CamelModel):
    url: str
    public_id: str
    media_type: MediaType
    width: Optional[int] = None
    height: Optional[int] = None
    format: Optional[str] = None
    bytes: Optional[int] = None
    resource_type: Optional[str] = None
    original_filename: Optional[str] = None


class MediaDeleteRequest(CamelModel):
    public_id: Optional[str] = None
    resource_type: str = "image"


class MediaDeleteResult(CamelModel):
    result: str
