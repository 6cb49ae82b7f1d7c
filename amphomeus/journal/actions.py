"""
Journal-related actions in Amphomeus
"""
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..media.client import (
    MediaDeleteFailed,
    MediaStoreClient,
    MediaStoreConfigurationError,
    resource_type_for,
)
from ..tags.actions import TagReconciliationFailed, reconcile_tags
from .data import CreateJournalRequest, MediaInput, UpdateJournalRequest
from .models import Journal, Media, MediaType

logger = logging.getLogger(__name__)


class JournalNotFound(Exception):
    """
    Raised on actions that involve journals which are not present in the database.
    """


class JournalValidationError(ValueError):
    """
    Raised when a journal request is missing a required field.
    """


class JournalPersistenceError(Exception):
    """
    Raised when the database fails to store or remove a journal.
    """


def ensure_title(title: Optional[str]) -> str:
    if title is None or not title.strip():
        raise JournalValidationError("Title is required")
    return title


def normalize_date(value: Optional[datetime]) -> Optional[datetime]:
    """
    Journal dates are stored as naive UTC timestamps.
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def media_from_input(media_input: MediaInput) -> Media:
    return Media(
        url=media_input.url,
        public_id=media_input.public_id,
        media_type=media_input.media_type,
        caption=media_input.caption or None,
        width=media_input.width or None,
        height=media_input.height or None,
    )


def purge_media_assets(
    media_store_provider: Callable[[], MediaStoreClient],
    assets: List[Tuple[str, MediaType]],
) -> int:
    """
    Best-effort removal of assets from the media store. Failures are logged and skipped, the
    database stays the source of truth and orphaned assets are tolerated.

    The media store client is only requested when there are assets to remove. A media store
    without credentials counts as a failed delete for every asset.

    Returns the number of successful deletions.
    """
    if not assets:
        return 0

    try:
        media_store = media_store_provider()
    except MediaStoreConfigurationError as e:
        logger.error(f"Skipping removal of {len(assets)} media assets: {str(e)}")
        return 0

    deleted = 0
    for public_id, media_type in assets:
        try:
            result = media_store.delete(
                public_id, resource_type=resource_type_for(media_type)
            )
            logger.info(f"Media store delete for public_id={public_id}: {result.result}")
            deleted += 1
        except MediaDeleteFailed as e:
            logger.error(f"Error deleting media public_id={public_id}: {str(e)}")
        except Exception as e:
            logger.error(
                f"Unexpected error deleting media public_id={public_id}: {str(e)}"
            )
    return deleted


async def get_journal(db_session: Session, journal_id: str) -> Journal:
    """
    Returns the journal with its media and tags. Raises JournalNotFound if there is no such journal.
    """
    journal = (
        db_session.query(Journal)
        .options(selectinload(Journal.media), selectinload(Journal.tags))
        .filter(Journal.id == journal_id)
        .one_or_none()
    )
    if journal is None:
        raise JournalNotFound(f"Did not find journal with id: {journal_id}")
    return journal


async def create_journal(
    db_session: Session, create_request: CreateJournalRequest
) -> Journal:
    """
    Creates a journal together with its media rows and tag associations. Media binaries are
    expected to be in the media store already.

    Tags, journal, media and associations are written in one transaction: if anything fails
    nothing is stored.
    """
    title = ensure_title(create_request.title)

    try:
        tags = await reconcile_tags(db_session, create_request.tags)
        journal = Journal(
            title=title,
            content=create_request.content or None,
            location=create_request.location or None,
            media=[media_from_input(item) for item in create_request.media],
            tags=tags,
        )
        if create_request.date is not None:
            journal.date = normalize_date(create_request.date)
        db_session.add(journal)
        db_session.commit()
    except TagReconciliationFailed:
        db_session.rollback()
        raise
    except SQLAlchemyError as e:
        db_session.rollback()
        logger.error(f"Error creating journal: {str(e)}")
        raise JournalPersistenceError(str(e))

    return await get_journal(db_session, journal.id)


async def update_journal(
    db_session: Session,
    media_store_provider: Callable[[], MediaStoreClient],
    journal_id: str,
    update_request: UpdateJournalRequest,
) -> Journal:
    """
    Updates a journal from the full desired state sent by the edit form.

    Media listed in media_to_delete are removed first, limited to this journal, and their assets
    are removed from the media store on a best-effort basis. Then scalar fields are overwritten,
    media without an id are appended and the tag associations are replaced by the given tags.
    Media with an id are kept as they are.
    """
    journal = await get_journal(db_session, journal_id)
    title = ensure_title(update_request.title)

    if update_request.media_to_delete:
        deleted_media = (
            db_session.query(Media)
            .filter(Media.journal_id == journal.id)
            .filter(Media.id.in_(update_request.media_to_delete))
            .all()
        )
        assets = [(media.public_id, media.media_type) for media in deleted_media]
        try:
            for media in deleted_media:
                journal.media.remove(media)
            db_session.commit()
        except SQLAlchemyError as e:
            db_session.rollback()
            logger.error(f"Error deleting media of journal {journal_id}: {str(e)}")
            raise JournalPersistenceError(str(e))

        purge_media_assets(media_store_provider, [asset for asset in assets if asset[0]])

    try:
        tags = await reconcile_tags(db_session, update_request.tags)

        journal.title = title
        journal.content = update_request.content or None
        journal.location = update_request.location or None
        if update_request.date is not None:
            journal.date = normalize_date(update_request.date)
        for item in update_request.media:
            if item.id is None:
                journal.media.append(media_from_input(item))
        journal.tags = tags

        db_session.commit()
    except TagReconciliationFailed:
        db_session.rollback()
        raise
    except SQLAlchemyError as e:
        db_session.rollback()
        logger.error(f"Error updating journal {journal_id}: {str(e)}")
        raise JournalPersistenceError(str(e))

    db_session.expire_all()
    return await get_journal(db_session, journal_id)


async def delete_journal(
    db_session: Session,
    media_store_provider: Callable[[], MediaStoreClient],
    journal_id: str,
) -> Journal:
    """
    Deletes the journal and its media rows. Assets are removed from the media store first on a
    best-effort basis, the database delete happens regardless of their outcome. Tags stay.
    """
    journal = await get_journal(db_session, journal_id)

    assets = [
        (media.public_id, media.media_type) for media in journal.media if media.public_id
    ]
    deleted = purge_media_assets(media_store_provider, assets)
    logger.info(
        f"Removed {deleted} of {len(assets)} media assets of journal {journal_id} from media store"
    )

    try:
        db_session.delete(journal)
        db_session.commit()
    except SQLAlchemyError as e:
        db_session.rollback()
        logger.error(f"Error deleting journal {journal_id}: {str(e)}")
        raise JournalPersistenceError(str(e))

    return journal
