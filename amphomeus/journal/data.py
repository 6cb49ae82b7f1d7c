"""
Journal-related data structures
"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from ..data import CamelModel
from .models import MediaType


class MediaInput(CamelModel):
    """
    Media item sent along with a journal. Items carrying an id already exist in the journal, items
    without one were just uploaded to the media store.
    """

    id: Optional[str] = None
    url: str
    public_id: str
    media_type: MediaType
    caption: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


class CreateJournalRequest(CamelModel):
    # title is Optional to answer a missing title with 400 instead of a schema error
    title: Optional[str] = None
    content: Optional[str] = None
    location: Optional[str] = None
    date: Optional[datetime] = None
    media: List[MediaInput] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)


class UpdateJournalRequest(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None
    location: Optional[str] = None
    date: Optional[datetime] = None
    media: List[MediaInput] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    media_to_delete: List[str] = Field(default_factory=list)


class MediaResponse(CamelModel):
    id: str
    url: str
    public_id: str
    media_type: MediaType
    caption: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    created_at: Optional[datetime] = None
    journal_id: str


class TagResponse(CamelModel):
    id: str
    name: str
    created_at: Optional[datetime] = None


class JournalResponse(CamelModel):
    id: str
    title: str
    content: Optional[str] = None
    date: datetime
    location: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    media: List[MediaResponse] = Field(default_factory=list)
    tags: List[TagResponse] = Field(default_factory=list)


class DeleteJournalResponse(CamelModel):
    message: str
