import logging
from datetime import date
from typing import Callable, List, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Path, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from .. import cdn, db
from ..data import VersionResponse
from ..media.client import MediaStoreClient
from ..middleware import AuthProviderMiddleware
from ..tags.actions import TagReconciliationFailed
from ..utils.settings import (
    CORS_ALLOWED_ORIGINS,
    DOCS_PATHS,
    DOCS_TARGET_PATH,
    AMPHOMEUS_OPENAPI_LIST,
)
from ..utils.validation import request_validation_exception_handler
from . import actions, gallery
from .data import (
    CreateJournalRequest,
    DeleteJournalResponse,
    JournalResponse,
    UpdateJournalRequest,
)
from .representations import journal_representation
from .version import AMPHOMEUS_JOURNALS_VERSION

SUBMODULE_NAME = "journals"

logger = logging.getLogger(__name__)

tags_metadata = [
    {"name": "journals", "description": "Operations with journals."},
    {"name": "gallery", "description": "Filtered journal listing."},
]

app = FastAPI(
    title=f"Amphomeus {SUBMODULE_NAME} submodule",
    description="Amphomeus API endpoints to work with journals, their media and tags.",
    version=AMPHOMEUS_JOURNALS_VERSION,
    openapi_tags=tags_metadata,
    openapi_url=f"/{DOCS_TARGET_PATH}/openapi.json"
    if SUBMODULE_NAME in AMPHOMEUS_OPENAPI_LIST
    else None,
    docs_url=None,
    redoc_url=f"/{DOCS_TARGET_PATH}",
)

# Important to save consistency for middlewares (stack queue)
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
    """
    Amphomeus journals submodule version.
    """
    return VersionResponse(version=AMPHOMEUS_JOURNALS_VERSION)


@app.get("/", tags=["gallery"], response_model=List[JournalResponse])
async def list_journals(
    request: Request,
    search: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    tags: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db_session: Session = Depends(db.yield_db_read_only_session),
) -> List[JournalResponse]:
    """
    List journals with their media and tags.

    - **search**: Case-insensitive substring of the title
    - **sort**: date_desc (default), date_asc, title_asc or title_desc
    - **tags**: Comma separated tag ids, journals with any of them match
    - **startDate**, **endDate**: Inclusive date range (YYYY-MM-DD)
    """
    filters = gallery.GalleryFilters(
        search=search,
        tag_ids=gallery.parse_tag_ids(tags),
        start_date=start_date,
        end_date=end_date,
        sort=gallery.GallerySort.parse(sort),
    )
    try:
        journals = await gallery.list_journals(db_session, filters)
        return [journal_representation(journal) for journal in journals]
    except Exception as e:
        logger.error(f"Error listing journals for user={request.state.user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch journals")


@app.post("/", tags=["journals"], status_code=201, response_model=JournalResponse)
async def create_journal(
    request: Request,
    create_request: CreateJournalRequest = Body(...),
    db_session: Session = Depends(db.yield_connection_from_env),
) -> JournalResponse:
    """
    Creates a journal with its media and tags. Media must already be uploaded to the media store.
    """
    try:
        journal = await actions.create_journal(db_session, create_request)
        return journal_representation(journal)
    except actions.JournalValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TagReconciliationFailed as e:
        logger.error(f"Error reconciling tags on journal creation: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to create journal")
    except Exception as e:
        logger.error(f"Error creating journal for user={request.state.user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to create journal")


@app.get("/{journal_id}", tags=["journals"], response_model=JournalResponse)
async def get_journal(
    request: Request,
    journal_id: str = Path(...),
    db_session: Session = Depends(db.yield_db_read_only_session),
) -> JournalResponse:
    """
    Retrieves the journal with the given ID.
    """
    try:
        journal = await actions.get_journal(db_session, journal_id)
        return journal_representation(journal)
    except actions.JournalNotFound:
        logger.info(f"Journal not found with ID={journal_id}")
        raise HTTPException(status_code=404, detail="Journal not found")
    except Exception as e:
        logger.error(f"Error fetching journal {journal_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch journal")


@app.put("/{journal_id}", tags=["journals"], response_model=JournalResponse)
async def update_journal(
    request: Request,
    journal_id: str = Path(...),
    update_request: UpdateJournalRequest = Body(...),
    db_session: Session = Depends(db.yield_connection_from_env),
    media_store_provider: Callable[[], MediaStoreClient] = Depends(
        cdn.yield_media_store_provider_from_env
    ),
) -> JournalResponse:
    """
    Updates the journal from the full state of the edit form.

    Media listed in mediaToDelete are removed from the journal and from the media store, media
    without an id are added and tags are replaced by the given list.
    """
    try:
        journal = await actions.update_journal(
            db_session, media_store_provider, journal_id, update_request
        )
        return journal_representation(journal)
    except actions.JournalNotFound:
        logger.info(f"Journal not found with ID={journal_id}")
        raise HTTPException(status_code=404, detail="Journal not found")
    except actions.JournalValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TagReconciliationFailed as e:
        logger.error(f"Error reconciling tags on journal {journal_id} update: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to update journal")
    except Exception as e:
        logger.error(
            f"Error updating journal {journal_id} for user={request.state.user_id}: {str(e)}"
        )
        raise HTTPException(status_code=500, detail="Failed to update journal")


@app.delete("/{journal_id}", tags=["journals"], response_model=DeleteJournalResponse)
async def delete_journal(
    request: Request,
    journal_id: str = Path(...),
    db_session: Session = Depends(db.yield_connection_from_env),
    media_store_provider: Callable[[], MediaStoreClient] = Depends(
        cdn.yield_media_store_provider_from_env
    ),
) -> DeleteJournalResponse:
    """
    Deletes the journal and its media. Media store failures do not prevent the deletion.
    """
    try:
        await actions.delete_journal(db_session, media_store_provider, journal_id)
    except actions.JournalNotFound:
        logger.info(f"Journal not found with ID={journal_id}")
        raise HTTPException(status_code=404, detail="Journal not found")
    except Exception as e:
        logger.error(
            f"Error deleting journal {journal_id} for user={request.state.user_id}: {str(e)}"
        )
        raise HTTPException(status_code=500, detail="Failed to delete journal")

    return DeleteJournalResponse(message="Journal deleted successfully")
