"""Journals, media and tags

Revision ID: 5c1f0a7d2e34
Revises:
Create Date: 2026-10-19 10:12:41.508233

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "5c1f0a7d2e34"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "journals",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column(
            "date",
            sa.DateTime(timezone=True),
            server_default=sa.text("TIMEZONE('utc', statement_timestamp())"),
            nullable=False,
        ),
        sa.Column("location", sa.String(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("TIMEZONE('utc', statement_timestamp())"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("TIMEZONE('utc', statement_timestamp())"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_journals")),
    )
    op.create_index(op.f("ix_journals_date"), "journals", ["date"], unique=False)

    op.create_table(
        "tags",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("TIMEZONE('utc', statement_timestamp())"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_tags")),
        sa.UniqueConstraint("name", name=op.f("uq_tags_name")),
    )

    op.create_table(
        "media",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("url", sa.String(), nullable=False),
        sa.Column("public_id", sa.String(), nullable=False),
        sa.Column(
            "media_type",
            sa.Enum("IMAGE", "VIDEO", name="media_type"),
            nullable=False,
        ),
        sa.Column("caption", sa.String(), nullable=True),
        sa.Column("width", sa.Integer(), nullable=True),
        sa.Column("height", sa.Integer(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("TIMEZONE('utc', statement_timestamp())"),
            nullable=False,
        ),
        sa.Column("journal_id", sa.String(length=36), nullable=False),
        sa.ForeignKeyConstraint(
            ["journal_id"],
            ["journals.id"],
            name="fk_media_journals_id",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_media")),
    )
    op.create_index(op.f("ix_media_journal_id"), "media", ["journal_id"], unique=False)

    op.create_table(
        "journal_tags",
        sa.Column("journal_id", sa.String(length=36), nullable=False),
        sa.Column("tag_id", sa.String(length=36), nullable=False),
        sa.ForeignKeyConstraint(
            ["journal_id"],
            ["journals.id"],
            name=op.f("fk_journal_tags_journal_id_journals"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["tag_id"],
            ["tags.id"],
            name=op.f("fk_journal_tags_tag_id_tags"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("journal_id", "tag_id", name=op.f("pk_journal_tags")),
    )
    op.create_index(
        op.f("ix_journal_tags_tag_id"), "journal_tags", ["tag_id"], unique=False
    )


def downgrade():
    op.drop_index(op.f("ix_journal_tags_tag_id"), table_name="journal_tags")
    op.drop_table("journal_tags")
    op.drop_index(op.f("ix_media_journal_id"), table_name="media")
    op.drop_table("media")
    op.drop_table("tags")
    op.drop_index(op.f("ix_journals_date"), table_name="journals")
    op.drop_table("journals")
    sa.Enum(name="media_type").drop(op.get_bind(), checkfirst=False)
