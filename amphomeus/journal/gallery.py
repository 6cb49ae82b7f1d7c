"""
Gallery listing: filtered and sorted journals with their media and tags.
"""
import logging
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field
from sqlalchemy.orm import Query, Session, selectinload

from .models import Journal, Tag

logger = logging.getLogger(__name__)


class GallerySort(Enum):
    date_desc = "date_desc"
    date_asc = "date_asc"
    title_asc = "title_asc"
    title_desc = "title_desc"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "GallerySort":
        """
        Unknown or missing values sort newest first.
        """
        if raw is None:
            return cls.date_desc
        try:
            return cls(raw)
        except ValueError:
            logger.info(f"Unknown gallery sort option {raw}, using {cls.date_desc.value}")
            return cls.date_desc


class GalleryFilters(BaseModel):
    search: Optional[str] = None
    tag_ids: List[str] = Field(default_factory=list)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    sort: GallerySort = GallerySort.date_desc


def parse_tag_ids(raw: Optional[str]) -> List[str]:
    """
    Splits comma separated tag ids from the query string.
    """
    if raw is None:
        return []
    return [tag_id.strip() for tag_id in raw.split(",") if tag_id.strip()]


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_gallery_query(db_session: Session, filters: GalleryFilters) -> Query:
    """
    All supplied filters are combined with AND. The tag filter matches journals carrying at least
    one of the requested tags. The end date covers the whole calendar day.
    """
    query = db_session.query(Journal).options(
        selectinload(Journal.media), selectinload(Journal.tags)
    )

    if filters.search:
        query = query.filter(
            Journal.title.ilike(f"%{_escape_like(filters.search)}%", escape="\\")
        )

    if filters.tag_ids:
        query = query.filter(Journal.tags.any(Tag.id.in_(filters.tag_ids)))

    if filters.start_date is not None:
        query = query.filter(
            Journal.date >= datetime.combine(filters.start_date, time.min)
        )

    if filters.end_date is not None:
        next_day = filters.end_date + timedelta(days=1)
        query = query.filter(Journal.date < datetime.combine(next_day, time.min))

    if filters.sort == GallerySort.date_asc:
        query = query.order_by(Journal.date.asc(), Journal.id.asc())
    elif filters.sort == GallerySort.title_asc:
        query = query.order_by(Journal.title.asc(), Journal.id.asc())
    elif filters.sort == GallerySort.title_desc:
        query = query.order_by(Journal.title.desc(), Journal.id.desc())
    else:
        query = query.order_by(Journal.date.desc(), Journal.id.desc())

    return query


async def list_journals(db_session: Session, filters: GalleryFilters) -> List[Journal]:
    """
    Returns every journal matching the filters. No limit is applied.
    """
    return build_gallery_query(db_session, filters).all()
