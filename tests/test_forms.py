from datetime import datetime, timezone
from unittest import mock

from amphomeus.client import AmphomeusAPIError, AmphomeusClient
from amphomeus.forms import (
    MISSING_TITLE_ERROR,
    EditJournalForm,
    GalleryView,
    NewJournalForm,
    SelectedFile,
    parse_timestamp,
)


def fake_client():
    return mock.MagicMock(spec=AmphomeusClient)


def uploaded(public_id, media_type="IMAGE"):
    return {
        "url": f"https://res.cloudinary.test/{public_id}",
        "publicId": public_id,
        "mediaType": media_type,
        "width": 640,
        "height": 480,
    }


def test_add_files_skips_duplicates():
    form = NewJournalForm(fake_client())
    photo = SelectedFile(name="a.jpg", content=b"1234", content_type="image/jpeg")

    form.add_files([photo, SelectedFile(name="a.jpg", content=b"abcd")])
    form.add_files([SelectedFile(name="a.jpg", content=b"12345")])

    assert [(f.name, f.size) for f in form.files] == [("a.jpg", 4), ("a.jpg", 5)]

    form.remove_file(0)
    assert [f.size for f in form.files] == [5]
    form.remove_file(7)
    assert len(form.files) == 1


def test_drag_and_drop():
    form = NewJournalForm(fake_client())

    form.handle_drag_over()
    assert form.is_dragging
    form.handle_drag_leave()
    assert not form.is_dragging

    form.handle_drag_over()
    form.handle_drop([SelectedFile(name="b.png", content=b"png")])
    assert not form.is_dragging
    assert [f.name for f in form.files] == ["b.png"]


def test_tag_editing():
    form = NewJournalForm(fake_client())

    form.tag_input = "  beach "
    form.handle_tag_enter()
    form.tag_input = "beach"
    form.handle_tag_enter()
    form.tag_input = "   "
    form.handle_tag_enter()

    assert form.tags == ["beach"]
    assert form.tag_input == "   "

    form.select_suggested_tag("sunset")
    assert form.tags == ["beach", "sunset"]
    assert form.tag_input == ""

    form.remove_tag("beach")
    assert form.tags == ["sunset"]


def test_tag_suggestions():
    form = NewJournalForm(fake_client())
    form.known_tags = [
        {"id": "1", "name": "Beach"},
        {"id": "2", "name": "beachfront"},
        {"id": "3", "name": "mountain"},
    ]
    form.tags = ["beachfront"]

    form.tag_input = "BEA"
    assert [tag["name"] for tag in form.tag_suggestions] == ["Beach"]

    form.tag_input = ""
    assert form.tag_suggestions == []


def test_submit_requires_title():
    client = fake_client()
    form = NewJournalForm(client)
    form.title = "  "

    assert form.submit() is None
    assert form.error == MISSING_TITLE_ERROR
    client.upload_media.assert_not_called()
    client.create_journal.assert_not_called()


def test_submit_uploads_then_creates():
    client = fake_client()
    client.upload_media.side_effect = [uploaded("a"), uploaded("b", "VIDEO")]
    client.create_journal.return_value = {"id": "j1", "title": "Beach Day"}
    form = NewJournalForm(client)
    form.title = "Beach Day"
    form.content = "Sunny"
    form.location = "Nice"
    form.date = datetime(2024, 7, 1, 12, 0)
    form.tags = ["beach", "summer"]
    form.add_files(
        [
            SelectedFile(name="a.jpg", content=b"a", content_type="image/jpeg"),
            SelectedFile(name="b.mp4", content=b"bb", content_type="video/mp4"),
        ]
    )

    journal = form.submit()

    assert journal == {"id": "j1", "title": "Beach Day"}
    assert form.error is None
    assert not form.is_submitting
    assert client.upload_media.call_count == 2
    payload = client.create_journal.call_args[0][0]
    assert payload["title"] == "Beach Day"
    assert payload["date"] == "2024-07-01T12:00:00"
    assert payload["tags"] == ["beach", "summer"]
    assert [media["publicId"] for media in payload["media"]] == ["a", "b"]
    assert payload["media"][1]["mediaType"] == "VIDEO"


def test_submit_stops_on_first_failed_upload():
    client = fake_client()
    client.upload_media.side_effect = [
        uploaded("a"),
        AmphomeusAPIError("Upload failed", status_code=500),
    ]
    form = NewJournalForm(client)
    form.title = "Trip"
    form.add_files(
        [
            SelectedFile(name="a.jpg", content=b"a"),
            SelectedFile(name="b.jpg", content=b"bb"),
            SelectedFile(name="c.jpg", content=b"ccc"),
        ]
    )

    assert form.submit() is None

    assert form.error == (
        "Failed to upload file: b.jpg. Please try again or remove the file."
    )
    assert client.upload_media.call_count == 2
    client.create_journal.assert_not_called()
    assert not form.is_submitting
    assert len(form.files) == 3


def test_submit_reports_save_error():
    client = fake_client()
    client.create_journal.side_effect = AmphomeusAPIError("Failed to create journal")
    form = NewJournalForm(client)
    form.title = "Trip"

    assert form.submit() is None
    assert form.error == "Failed to create journal"


def edited_journal():
    return {
        "id": "j1",
        "title": "City walk",
        "content": None,
        "location": "Lyon",
        "date": "2024-05-04T10:00:00",
        "media": [
            {"id": "m1", "url": "u1", "publicId": "p1", "mediaType": "IMAGE"},
            {"id": "m2", "url": "u2", "publicId": "p2", "mediaType": "VIDEO"},
        ],
        "tags": [{"id": "t1", "name": "city"}],
    }


def test_edit_form_load():
    client = fake_client()
    client.get_journal.return_value = edited_journal()
    client.list_tags.return_value = [{"id": "t1", "name": "city"}]
    form = EditJournalForm(client, "j1")

    assert form.load()

    assert form.title == "City walk"
    assert form.content == ""
    assert form.location == "Lyon"
    assert form.date == datetime(2024, 5, 4, 10, 0)
    assert form.tags == ["city"]
    assert [media["id"] for media in form.existing_media] == ["m1", "m2"]
    assert form.known_tags == [{"id": "t1", "name": "city"}]



def test_edit_form_load_utc_date_with_z_suffix():
    client = fake_client()
    journal = edited_journal()
    journal["date"] = "2024-05-04T10:00:00.123456Z"
    client.get_journal.return_value = journal
    client.list_tags.return_value = []
    form = EditJournalForm(client, "j1")

    assert form.load()

    assert form.date == datetime(2024, 5, 4, 10, 0, 0, 123456, tzinfo=timezone.utc)


def test_edit_form_load_malformed_date():
    client = fake_client()
    journal = edited_journal()
    journal["date"] = "May 4th"
    client.get_journal.return_value = journal
    form = EditJournalForm(client, "j1")

    assert not form.load()

    assert form.error == "Failed to load journal"


def test_parse_timestamp():
    assert parse_timestamp("2024-05-04T10:00:00Z").tzinfo == timezone.utc
    offset = parse_timestamp("2024-05-04T10:00:00+02:00").utcoffset()
    assert offset.total_seconds() == 7200
    assert parse_timestamp("2024-05-04T10:00:00") == datetime(2024, 5, 4, 10, 0)

def test_edit_form_load_missing_journal():
    client = fake_client()
    client.get_journal.side_effect = AmphomeusAPIError("Journal not found", 404)
    form = EditJournalForm(client, "missing")

    assert not form.load()
    assert form.error == "Journal not found"
    assert not form.is_loading


def test_edit_form_submit_sends_remaining_and_deleted_media():
    client = fake_client()
    client.get_journal.return_value = edited_journal()
    client.list_tags.return_value = []
    client.upload_media.return_value = uploaded("p3")
    client.update_journal.return_value = {
        "id": "j1",
        "title": "City walk",
        "media": [{"id": "m1"}, {"id": "m3"}],
    }
    form = EditJournalForm(client, "j1")
    form.load()

    form.toggle_media_deletion("m2")
    form.toggle_media_deletion("m1")
    form.toggle_media_deletion("m1")
    form.add_files([SelectedFile(name="new.jpg", content=b"new")])

    journal = form.submit()

    assert journal["id"] == "j1"
    journal_id, payload = client.update_journal.call_args[0]
    assert journal_id == "j1"
    assert payload["mediaToDelete"] == ["m2"]
    assert [media.get("id") for media in payload["media"]] == ["m1", None]
    assert payload["media"][1]["publicId"] == "p3"
    assert form.media_to_delete == []
    assert form.files == []


def test_gallery_refresh_and_filters():
    client = fake_client()
    client.list_journals.return_value = [{"id": "j1"}, {"id": "j2"}]
    gallery = GalleryView(client)
    gallery.search = "beach"
    gallery.toggle_tag("t2")
    gallery.toggle_tag("t1")

    assert gallery.refresh()

    client.list_journals.assert_called_once_with(
        search="beach",
        sort="date_desc",
        tag_ids=["t1", "t2"],
        start_date=None,
        end_date=None,
    )
    assert [journal["id"] for journal in gallery.journals] == ["j1", "j2"]
    assert gallery.has_filters

    gallery.toggle_tag("t2")
    assert gallery.selected_tag_ids == ["t1"]

    gallery.clear_filters()
    assert not gallery.has_filters
    assert gallery.sort == "date_desc"


def test_gallery_refresh_error():
    client = fake_client()
    client.list_journals.side_effect = AmphomeusAPIError("Failed to fetch journals")
    gallery = GalleryView(client)

    assert not gallery.refresh()
    assert gallery.error == "Failed to fetch journals"
    assert not gallery.is_loading
    assert not gallery.is_empty


def test_gallery_is_empty():
    client = fake_client()
    client.list_journals.return_value = []
    gallery = GalleryView(client)

    gallery.refresh()

    assert gallery.is_empty


def test_gallery_delete_requires_confirmation():
    client = fake_client()
    gallery = GalleryView(client)
    gallery.journals = [{"id": "j1"}, {"id": "j2"}]

    assert not gallery.delete_journal("j1")
    client.delete_journal.assert_not_called()

    assert gallery.delete_journal("j1", confirmed=True)
    client.delete_journal.assert_called_once_with("j1")
    assert gallery.journals == [{"id": "j2"}]


def test_gallery_delete_failure_keeps_journal():
    client = fake_client()
    client.delete_journal.side_effect = AmphomeusAPIError("Failed to delete journal")
    gallery = GalleryView(client)
    gallery.journals = [{"id": "j1"}]

    assert not gallery.delete_journal("j1", confirmed=True)
    assert gallery.error == "Failed to delete journal"
    assert gallery.journals == [{"id": "j1"}]
