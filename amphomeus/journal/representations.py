"""
Conversion of journal models into API responses.
"""
from .data import JournalResponse, MediaResponse, TagResponse
from .models import Journal, Media, Tag


def media_representation(media: Media) -> MediaResponse:
    return MediaResponse(
        id=media.id,
        url=media.url,
        public_id=media.public_id,
        media_type=media.media_type,
        caption=media.caption,
        width=media.width,
        height=media.height,
        created_at=media.created_at,
        journal_id=media.journal_id,
    )


def tag_representation(tag: Tag) -> TagResponse:
    return TagResponse(id=tag.id, name=tag.name, created_at=tag.created_at)


def journal_representation(journal: Journal) -> JournalResponse:
    return JournalResponse(
        id=journal.id,
        title=journal.title,
        content=journal.content,
        date=journal.date,
        location=journal.location,
        created_at=journal.created_at,
        updated_at=journal.updated_at,
        media=[media_representation(media) for media in journal.media],
        tags=[tag_representation(tag) for tag in journal.tags],
    )
