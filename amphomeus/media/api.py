"""
Media store endpoints: upload files before a journal is saved and delete stored assets.
"""
import logging
from typing import Optional

from fastapi import Body, Depends, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .. import cdn
from ..data import VersionResponse
from ..middleware import AuthProviderMiddleware
from ..utils.settings import (
    CORS_ALLOWED_ORIGINS,
    DOCS_PATHS,
    DOCS_TARGET_PATH,
    AMPHOMEUS_OPENAPI_LIST,
)
from ..utils.validation import request_validation_exception_handler
from .client import MediaDeleteFailed, MediaStoreClient, MediaUploadFailed, PayloadTooLarge
from .data import MediaDeleteRequest, MediaDeleteResult, MediaUploadResult
from .version import AMPHOMEUS_MEDIA_VERSION

SUBMODULE_NAME = "media"

logger = logging.getLogger(__name__)

tags_metadata = [{"name": "media", "description": "Media store uploads and deletes."}]

app = FastAPI(
    title=f"Amphomeus {SUBMODULE_NAME} submodule",
    description="Amphomeus API endpoints to manage journal media in the media store.",
    version=AMPHOMEUS_MEDIA_VERSION,
    openapi_tags=tags_metadata,
    openapi_url=f"/{DOCS_TARGET_PATH}/openapi.json"
    if SUBMODULE_NAME in AMPHOMEUS_OPENAPI_LIST
    else None,
    docs_url=None,
    redoc_url=f"/{DOCS_TARGET_PATH}",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(AuthProviderMiddleware, whitelist=DOCS_PATHS)
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)


@app.get("/version", response_model=VersionResponse)
async def version() -> VersionResponse:
    return VersionResponse(version=AMPHOMEUS_MEDIA_VERSION)


@app.post("/upload", tags=["media"], response_model=MediaUploadResult)
async def upload_media(
    request: Request,
    file: Optional[UploadFile] = File(None),
    media_store: MediaStoreClient = Depends(cdn.yield_media_store_client_from_env),
) -> MediaUploadResult:
    """
    Uploads a single file to the media store. Files over 10MB are rejected without contacting
    the provider.
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No file provided")

    try:
        if file.size is not None:
            media_store.check_payload_size(file.size)
        # One byte past the limit is enough to tell an oversized file apart
        content = await file.read(media_store.config.max_payload_bytes + 1)
        return media_store.upload(
            filename=file.filename or "upload",
            content=content,
            content_type=file.content_type,
        )
    except PayloadTooLarge as e:
        raise HTTPException(status_code=400, detail=str(e))
    except MediaUploadFailed as e:
        logger.error(f"Upload failed for user={request.state.user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Upload failed: {str(e)}")
    finally:
        await file.close()


@app.post("/delete", tags=["media"], response_model=MediaDeleteResult)
async def delete_media(
    request: Request,
    delete_request: MediaDeleteRequest = Body(...),
    media_store: MediaStoreClient = Depends(cdn.yield_media_store_client_from_env),
) -> MediaDeleteResult:
    """
    Deletes a stored asset by its public id.
    """
    if not delete_request.public_id:
        raise HTTPException(status_code=400, detail="Public ID is required")

    try:
        return media_store.delete(
            delete_request.public_id, resource_type=delete_request.resource_type
        )
    except MediaDeleteFailed as e:
        logger.error(
            f"Delete of {delete_request.public_id} failed for user={request.state.user_id}: "
            f"{str(e)}"
        )
        raise HTTPException(status_code=500, detail="Failed to delete media")
