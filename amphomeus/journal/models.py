"""
SQLAlchemy models for journal-related tables.
"""
import uuid
from enum import Enum, unique

from sqlalchemy import (
    Column,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import expression

"""
Naming conventions doc
https://docs.sqlalchemy.org/en/13/core/constraints.html#configuring-constraint-naming-conventions
"""
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}
metadata = MetaData(naming_convention=convention)
Base = declarative_base(metadata=metadata)


class utcnow(expression.FunctionElement):
    type = DateTime()
    inherit_cache = True


@compiles(utcnow, "postgresql")
def pg_utcnow(element, compiler, **kwargs):
    return "TIMEZONE('utc', statement_timestamp())"


@compiles(utcnow, "sqlite")
def sqlite_utcnow(element, compiler, **kwargs):
    return "CURRENT_TIMESTAMP"


def new_id() -> str:
    return str(uuid.uuid4())


@unique
class MediaType(Enum):
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"


journal_tags = Table(
    "journal_tags",
    Base.metadata,
    Column(
        "journal_id",
        String(36),
        ForeignKey("journals.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        String(36),
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
)


class Journal(Base):  # type: ignore
    __tablename__ = "journals"

    id = Column(String(36), primary_key=True, default=new_id, nullable=False)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=True)
    date = Column(
        DateTime(timezone=True), server_default=utcnow(), nullable=False, index=True
    )
    location = Column(String, nullable=True)
    created_at = Column(
        DateTime(timezone=True), server_default=utcnow(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=utcnow(),
        onupdate=utcnow(),
        nullable=False,
    )

    media = relationship(
        "Media",
        back_populates="journal",
        cascade="all, delete-orphan",
        order_by="Media.created_at",
    )
    tags = relationship("Tag", secondary=journal_tags, back_populates="journals")


class Media(Base):  # type: ignore
    __tablename__ = "media"

    id = Column(String(36), primary_key=True, default=new_id, nullable=False)
    url = Column(String, nullable=False)
    public_id = Column(String, nullable=False)
    media_type = Column(SQLEnum(MediaType, name="media_type"), nullable=False)
    caption = Column(String, nullable=True)
    width = Column(Integer, nullable=True)
    height = Column(Integer, nullable=True)
    created_at = Column(
        DateTime(timezone=True), server_default=utcnow(), nullable=False
    )
    journal_id = Column(
        String(36),
        ForeignKey("journals.id", name="fk_media_journals_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    journal = relationship("Journal", back_populates="media")


class Tag(Base):  # type: ignore
    __tablename__ = "tags"

    id = Column(String(36), primary_key=True, default=new_id, nullable=False)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(
        DateTime(timezone=True), server_default=utcnow(), nullable=False
    )

    journals = relationship("Journal", secondary=journal_tags, back_populates="tags")
