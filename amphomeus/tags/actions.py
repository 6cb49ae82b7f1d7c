"""
Tag-related actions in Amphomeus
"""
import logging
from typing import Dict, List

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..journal.models import Tag, new_id

logger = logging.getLogger(__name__)


class TagReconciliationFailed(Exception):
    """
    Raised when tags could not be found or created in the database.
    """


def clean_tag_names(tag_names: List[str]) -> List[str]:
    """
    Strips tag names, drops blank ones and repeats. Matching stays case-sensitive, so "Beach" and
    "beach" are two different tags.
    """
    cleaned: List[str] = []
    for tag_name in tag_names:
        if tag_name is None:
            continue
        name = tag_name.strip()
        if name and name not in cleaned:
            cleaned.append(name)
    return cleaned


def _insert_missing_tags_statement(db_session: Session, names: List[str]):
    dialect_name = db_session.get_bind().dialect.name
    if dialect_name == "postgresql":
        insert = postgresql.insert
    elif dialect_name == "sqlite":
        insert = sqlite.insert
    else:
        raise TagReconciliationFailed(
            f"Unsupported database dialect for tag reconciliation: {dialect_name}"
        )
    return (
        insert(Tag)
        .values([{"id": new_id(), "name": name} for name in names])
        .on_conflict_do_nothing(index_elements=["name"])
    )


async def reconcile_tags(db_session: Session, tag_names: List[str]) -> List[Tag]:
    """
    Finds or creates a tag for every given name and returns the tags in the order the names were
    provided.

    Missing tags are inserted with a single INSERT ... ON CONFLICT DO NOTHING, so concurrent
    requests introducing the same new tag cannot produce duplicates. Runs inside the caller's
    transaction and does not commit.
    """
    names = clean_tag_names(tag_names)
    if not names:
        return []

    try:
        db_session.execute(_insert_missing_tags_statement(db_session, names))
        tags = db_session.query(Tag).filter(Tag.name.in_(names)).all()
    except SQLAlchemyError as e:
        logger.error(f"Error reconciling tags {names}: {str(e)}")
        raise TagReconciliationFailed(str(e))

    tags_by_name: Dict[str, Tag] = {tag.name: tag for tag in tags}
    missing = [name for name in names if name not in tags_by_name]
    if missing:
        raise TagReconciliationFailed(f"Tags missing after reconciliation: {missing}")

    return [tags_by_name[name] for name in names]


async def list_tags(db_session: Session) -> List[Tag]:
    """
    Returns all known tags ordered by name.
    """
    return db_session.query(Tag).order_by(Tag.name).all()
