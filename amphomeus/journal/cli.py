"""
Amphomeus Journal CLI
"""
import argparse
import asyncio
import json
from datetime import date
from typing import Any, Dict, List

from .. import cdn
from ..db import SessionLocal
from ..tags import actions as tags_actions
from . import actions, gallery
from .models import Journal, Tag


def journal_as_json_dict(journal: Journal) -> Dict[str, Any]:
    return {
        "id": journal.id,
        "title": journal.title,
        "content": journal.content,
        "date": str(journal.date),
        "location": journal.location,
        "created_at": str(journal.created_at),
        "updated_at": str(journal.updated_at),
        "media": [
            {
                "id": media.id,
                "url": media.url,
                "public_id": media.public_id,
                "media_type": media.media_type.value,
                "caption": media.caption,
            }
            for media in journal.media
        ],
        "tags": [tag.name for tag in journal.tags],
    }


def tags_as_json_dict(tags: List[Tag]) -> List[Dict[str, Any]]:
    return [
        {"id": tag.id, "name": tag.name, "created_at": str(tag.created_at)}
        for tag in tags
    ]


def journals_list_handler(args: argparse.Namespace) -> None:
    """
    Handler for "journals list" subcommand.
    """
    filters = gallery.GalleryFilters(
        search=args.search,
        tag_ids=gallery.parse_tag_ids(args.tags),
        start_date=args.start_date,
        end_date=args.end_date,
        sort=gallery.GallerySort.parse(args.sort),
    )
    session = SessionLocal()
    try:
        journals = asyncio.run(gallery.list_journals(session, filters))
        print(json.dumps([journal_as_json_dict(journal) for journal in journals]))
    finally:
        session.close()


def journals_get_handler(args: argparse.Namespace) -> None:
    """
    Handler for "journals get" subcommand.
    """
    session = SessionLocal()
    try:
        journal = asyncio.run(actions.get_journal(session, args.id))
        print(json.dumps(journal_as_json_dict(journal)))
    finally:
        session.close()


def journals_delete_handler(args: argparse.Namespace) -> None:
    """
    Handler for "journals delete" subcommand. Removes media assets from the media store as well.
    """
    session = SessionLocal()
    try:
        journal = asyncio.run(actions.get_journal(session, args.id))
        deleted_json = {"id": journal.id, "title": journal.title, "deleted": True}
        asyncio.run(
            actions.delete_journal(session, cdn.media_store_client_from_env, args.id)
        )
        print(json.dumps(deleted_json))
    finally:
        session.close()


def tags_list_handler(args: argparse.Namespace) -> None:
    """
    Handler for "tags list" subcommand.
    """
    session = SessionLocal()
    try:
        tags = asyncio.run(tags_actions.list_tags(session))
        print(json.dumps(tags_as_json_dict(tags)))
    finally:
        session.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Administrative actions for Amphomeus")
    parser.set_defaults(func=lambda _: parser.print_help())
    subcommands = parser.add_subparsers(description="Amphomeus commands")

    # Journals module
    parser_journals = subcommands.add_parser("journals", description="Amphomeus journals")
    parser_journals.set_defaults(func=lambda _: parser_journals.print_help())
    subcommands_journals = parser_journals.add_subparsers(
        description="Journals commands"
    )

    parser_journals_list = subcommands_journals.add_parser(
        "list", description="List journals as the gallery shows them"
    )
    parser_journals_list.add_argument(
        "-s", "--search", required=False, help="Substring of journal title"
    )
    parser_journals_list.add_argument(
        "-t", "--tags", required=False, help="Comma separated tag ids"
    )
    parser_journals_list.add_argument(
        "--start-date",
        type=date.fromisoformat,
        required=False,
        help="First day to include (YYYY-MM-DD)",
    )
    parser_journals_list.add_argument(
        "--end-date",
        type=date.fromisoformat,
        required=False,
        help="Last day to include (YYYY-MM-DD)",
    )
    parser_journals_list.add_argument(
        "--sort",
        choices=[sort.value for sort in gallery.GallerySort],
        default=gallery.GallerySort.date_desc.value,
        help="Sort order",
    )
    parser_journals_list.set_defaults(func=journals_list_handler)

    parser_journals_get = subcommands_journals.add_parser(
        "get", description="Get journal by id"
    )
    parser_journals_get.add_argument("-i", "--id", required=True, help="Journal id")
    parser_journals_get.set_defaults(func=journals_get_handler)

    parser_journals_delete = subcommands_journals.add_parser(
        "delete", description="Delete journal with its media"
    )
    parser_journals_delete.add_argument("-i", "--id", required=True, help="Journal id")
    parser_journals_delete.set_defaults(func=journals_delete_handler)

    # Tags module
    parser_tags = subcommands.add_parser("tags", description="Amphomeus tags")
    parser_tags.set_defaults(func=lambda _: parser_tags.print_help())
    subcommands_tags = parser_tags.add_subparsers(description="Tags commands")
    parser_tags_list = subcommands_tags.add_parser("list", description="List all tags")
    parser_tags_list.set_defaults(func=tags_list_handler)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
