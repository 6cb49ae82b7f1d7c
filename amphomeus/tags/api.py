import logging
from typing import List

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from .. import db
from ..data import VersionResponse
from ..journal.data import TagResponse
from ..journal.representations import tag_representation
from ..middleware import AuthProviderMiddleware
from ..utils.settings import (
    CORS_ALLOWED_ORIGINS,
    DOCS_PATHS,
    DOCS_TARGET_PATH,
    AMPHOMEUS_OPENAPI_LIST,
)
from ..utils.validation import request_validation_exception_handler
from . import actions
from .version import AMPHOMEUS_TAGS_VERSION

SUBMODULE_NAME = "tags"

logger = logging.getLogger(__name__)

tags_metadata = [{"name": "tags", "description": "Journal tags."}]

app = FastAPI(
    title=f"Amphomeus {SUBMODULE_NAME} submodule",
    description="Amphomeus API endpoints to work with journal tags.",
    version=AMPHOMEUS_TAGS_VERSION,
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
    return VersionResponse(version=AMPHOMEUS_TAGS_VERSION)


@app.get("/", tags=["tags"], response_model=List[TagResponse])
async def list_tags(
    request: Request, db_session: Session = Depends(db.yield_db_read_only_session)
) -> List[TagResponse]:
    """
    All known tags ordered by name. Used to populate gallery filters.
    """
    try:
        tags = await actions.list_tags(db_session)
    except Exception as e:
        logger.error(f"Error listing tags for user={request.state.user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch tags")
    return [tag_representation(tag) for tag in tags]
