"""
State controllers behind the journal forms and the gallery page.

Controllers hold form state, talk to the API only through AmphomeusClient and report failures
through their error attribute instead of raising.
"""
import logging
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel

from .client import AmphomeusAPIError, AmphomeusClient

logger = logging.getLogger(__name__)


MISSING_TITLE_ERROR = "Please provide a title for your journal"


def parse_timestamp(raw: str) -> datetime:
    """
    Parses an ISO 8601 timestamp as sent by the API. A trailing "Z" is read as UTC.
    """
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    return datetime.fromisoformat(raw)


class SelectedFile(BaseModel):
    """
    File picked in the form and not uploaded yet.
    """

    name: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


class JournalForm:
    """
    Fields, file selection and tag editing shared by the new and edit journal forms.
    """

    def __init__(self, client: AmphomeusClient) -> None:
        self.client = client

        self.title = ""
        self.content = ""
        self.location = ""
        self.date: Optional[datetime] = None

        self.files: List[SelectedFile] = []
        self.is_dragging = False

        self.tag_input = ""
        self.tags: List[str] = []
        self.known_tags: List[Dict[str, Any]] = []
        self.is_suggestions_visible = False

        self.is_submitting = False
        self.error: Optional[str] = None

    def load_known_tags(self) -> None:
        try:
            self.known_tags = self.client.list_tags()
        except AmphomeusAPIError as e:
            logger.error(f"Failed to fetch tags: {e.message}")

    # Files
    def add_files(self, files: Iterable[SelectedFile]) -> None:
        """
        Adds files to the selection, skipping files whose name and size are already selected.
        """
        for selected_file in files:
            if any(
                existing.name == selected_file.name
                and existing.size == selected_file.size
                for existing in self.files
            ):
                continue
            self.files.append(selected_file)

    def remove_file(self, index: int) -> None:
        if 0 <= index < len(self.files):
            del self.files[index]

    def handle_drag_over(self) -> None:
        self.is_dragging = True

    def handle_drag_leave(self) -> None:
        self.is_dragging = False

    def handle_drop(self, files: Iterable[SelectedFile]) -> None:
        self.is_dragging = False
        self.add_files(files)

    # Tags
    def _add_tag(self, tag_name: str) -> None:
        if tag_name not in self.tags:
            self.tags.append(tag_name)

    def handle_tag_enter(self) -> None:
        tag_name = self.tag_input.strip()
        if not tag_name:
            return
        self._add_tag(tag_name)
        self.tag_input = ""

    def remove_tag(self, tag_name: str) -> None:
        self.tags = [tag for tag in self.tags if tag != tag_name]

    def select_suggested_tag(self, tag_name: str) -> None:
        self._add_tag(tag_name)
        self.tag_input = ""
        self.is_suggestions_visible = False

    @property
    def tag_suggestions(self) -> List[Dict[str, Any]]:
        """
        Known tags whose names contain the current tag input, case-insensitively, excluding
        tags that are already selected.
        """
        needle = self.tag_input.strip().lower()
        if not needle:
            return []
        return [
            tag
            for tag in self.known_tags
            if needle in tag["name"].lower() and tag["name"] not in self.tags
        ]

    # Submission
    def _upload_files(self) -> Optional[List[Dict[str, Any]]]:
        """
        Uploads selected files one by one. Stops at the first failure, sets the error and
        returns None.
        """
        media_items: List[Dict[str, Any]] = []
        for selected_file in self.files:
            try:
                uploaded = self.client.upload_media(
                    selected_file.name,
                    selected_file.content,
                    content_type=selected_file.content_type,
                )
            except AmphomeusAPIError as e:
                logger.error(f"Error uploading file {selected_file.name}: {e.message}")
                self.error = (
                    f"Failed to upload file: {selected_file.name}. "
                    "Please try again or remove the file."
                )
                return None
            media_items.append(
                {
                    "url": uploaded["url"],
                    "publicId": uploaded["publicId"],
                    "mediaType": uploaded["mediaType"],
                    "width": uploaded.get("width"),
                    "height": uploaded.get("height"),
                }
            )
        return media_items

    def _payload(self, media: List[Dict[str, Any]]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "title": self.title,
            "content": self.content,
            "location": self.location,
            "media": media,
            "tags": list(self.tags),
        }
        if self.date is not None:
            payload["date"] = self.date.isoformat()
        return payload

    def _save(self, uploaded_media: List[Dict[str, Any]]) -> Dict[str, Any]:
        raise NotImplementedError()

    def submit(self) -> Optional[Dict[str, Any]]:
        """
        Validates the title, uploads selected files and saves the journal. Returns the saved
        journal, or None with error set when anything failed. Nothing is sent to the journal
        endpoints if an upload fails.
        """
        if not self.title.strip():
            self.error = MISSING_TITLE_ERROR
            return None

        self.is_submitting = True
        self.error = None
        try:
            uploaded_media = self._upload_files()
            if uploaded_media is None:
                return None
            return self._save(uploaded_media)
        except AmphomeusAPIError as e:
            logger.error(f"Error saving journal: {e.message}")
            self.error = e.message
            return None
        finally:
            self.is_submitting = False


class NewJournalForm(JournalForm):
    def _save(self, uploaded_media: List[Dict[str, Any]]) -> Dict[str, Any]:
        return self.client.create_journal(self._payload(uploaded_media))


class EditJournalForm(JournalForm):
    """
    Edits an existing journal. Existing media can be marked for deletion, new files are
    uploaded on submit.
    """

    def __init__(self, client: AmphomeusClient, journal_id: str) -> None:
        super().__init__(client)
        self.journal_id = journal_id
        self.existing_media: List[Dict[str, Any]] = []
        self.media_to_delete: List[str] = []
        self.is_loading = False

    def load(self) -> bool:
        self.is_loading = True
        self.error = None
        try:
            journal = self.client.get_journal(self.journal_id)
        except AmphomeusAPIError as e:
            logger.error(f"Error loading journal {self.journal_id}: {e.message}")
            self.error = e.message
            return False
        finally:
            self.is_loading = False

        self.title = journal["title"]
        self.content = journal.get("content") or ""
        self.location = journal.get("location") or ""
        raw_date = journal.get("date")
        try:
            self.date = parse_timestamp(raw_date) if raw_date else None
        except ValueError:
            logger.error(f"Journal {self.journal_id} has malformed date: {raw_date}")
            self.error = "Failed to load journal"
            return False
        self.existing_media = list(journal.get("media", []))
        self.tags = [tag["name"] for tag in journal.get("tags", [])]
        self.media_to_delete = []

        self.load_known_tags()
        return True

    def toggle_media_deletion(self, media_id: str) -> None:
        if media_id in self.media_to_delete:
            self.media_to_delete.remove(media_id)
        else:
            self.media_to_delete.append(media_id)

    @property
    def remaining_media(self) -> List[Dict[str, Any]]:
        return [
            media
            for media in self.existing_media
            if media["id"] not in self.media_to_delete
        ]

    def _save(self, uploaded_media: List[Dict[str, Any]]) -> Dict[str, Any]:
        existing = [
            {
                "id": media["id"],
                "url": media["url"],
                "publicId": media["publicId"],
                "mediaType": media["mediaType"],
                "caption": media.get("caption"),
                "width": media.get("width"),
                "height": media.get("height"),
            }
            for media in self.remaining_media
        ]
        payload = self._payload(existing + uploaded_media)
        payload["mediaToDelete"] = list(self.media_to_delete)
        journal = self.client.update_journal(self.journal_id, payload)

        self.existing_media = list(journal.get("media", []))
        self.media_to_delete = []
        self.files = []
        return journal


class GalleryView:
    """
    Filter state and listing of the gallery page.
    """

    def __init__(self, client: AmphomeusClient) -> None:
        self.client = client
        self.search = ""
        self.sort = "date_desc"
        self.selected_tag_ids: List[str] = []
        self.start_date: Optional[date] = None
        self.end_date: Optional[date] = None

        self.journals: List[Dict[str, Any]] = []
        self.all_tags: List[Dict[str, Any]] = []
        self.is_loading = False
        self.error: Optional[str] = None

    def load_tags(self) -> None:
        try:
            self.all_tags = self.client.list_tags()
        except AmphomeusAPIError as e:
            logger.error(f"Failed to fetch tags: {e.message}")

    def refresh(self) -> bool:
        self.is_loading = True
        self.error = None
        try:
            self.journals = self.client.list_journals(
                search=self.search or None,
                sort=self.sort,
                tag_ids=sorted(self.selected_tag_ids),
                start_date=self.start_date,
                end_date=self.end_date,
            )
            return True
        except AmphomeusAPIError as e:
            logger.error(f"Error fetching journals: {e.message}")
            self.error = e.message
            return False
        finally:
            self.is_loading = False

    def toggle_tag(self, tag_id: str) -> None:
        if tag_id in self.selected_tag_ids:
            self.selected_tag_ids.remove(tag_id)
        else:
            self.selected_tag_ids.append(tag_id)

    def clear_filters(self) -> None:
        self.search = ""
        self.sort = "date_desc"
        self.selected_tag_ids = []
        self.start_date = None
        self.end_date = None

    @property
    def has_filters(self) -> bool:
        return bool(
            self.search
            or self.selected_tag_ids
            or self.start_date is not None
            or self.end_date is not None
        )

    @property
    def is_empty(self) -> bool:
        return (
            not self.journals
            and not self.is_loading
            and self.error is None
            and not self.has_filters
        )

    def delete_journal(self, journal_id: str, confirmed: bool = False) -> bool:
        """
        Deletes the journal only when the user confirmed it. Returns True if it was deleted.
        """
        if not confirmed:
            return False
        try:
            self.client.delete_journal(journal_id)
        except AmphomeusAPIError as e:
            logger.error(f"Error deleting journal {journal_id}: {e.message}")
            self.error = e.message
            return False
        self.journals = [
            journal for journal in self.journals if journal["id"] != journal_id
        ]
        return True
