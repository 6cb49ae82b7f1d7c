from datetime import date
from unittest import mock

import pytest
import requests

from amphomeus.client import AmphomeusAPIError, AmphomeusClient, app_url_from_env


def api_response(status_code=200, body=None):
    response = mock.Mock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.json.return_value = body
    return response


def test_app_url_from_env(monkeypatch):
    monkeypatch.setenv("AMPHOMEUS_APP_URL", "https://amphomeus.example.com/")
    assert app_url_from_env() == "https://amphomeus.example.com"

    monkeypatch.delenv("AMPHOMEUS_APP_URL")
    monkeypatch.setenv("PORT", "3001")
    assert app_url_from_env() == "http://localhost:3001"

    monkeypatch.delenv("PORT")
    assert app_url_from_env() == "http://localhost:8000"


def test_list_journals_query_params():
    amphomeus_client = AmphomeusClient("http://api.test", access_token="token")

    with mock.patch(
        "amphomeus.client.requests.request", return_value=api_response(body=[])
    ) as request:
        amphomeus_client.list_journals(
            search="beach",
            sort="title_asc",
            tag_ids=["t1", "t2"],
            start_date=date(2024, 3, 1),
            end_date=date(2024, 3, 10),
        )

    args, kwargs = request.call_args
    assert args[0] == "get"
    assert kwargs["url"] == "http://api.test/journals/"
    assert kwargs["headers"] == {"Authorization": "Bearer token"}
    assert kwargs["params"] == {
        "search": "beach",
        "sort": "title_asc",
        "tags": "t1,t2",
        "startDate": "2024-03-01",
        "endDate": "2024-03-10",
    }


def test_error_detail_is_raised():
    amphomeus_client = AmphomeusClient("http://api.test")

    with mock.patch(
        "amphomeus.client.requests.request",
        return_value=api_response(400, {"detail": "Title is required"}),
    ):
        with pytest.raises(AmphomeusAPIError) as excinfo:
            amphomeus_client.create_journal({"title": ""})

    assert excinfo.value.message == "Title is required"
    assert excinfo.value.status_code == 400


def test_unparseable_error_uses_default_message():
    amphomeus_client = AmphomeusClient("http://api.test")
    response = api_response(502)
    response.json.side_effect = ValueError("not json")

    with mock.patch("amphomeus.client.requests.request", return_value=response):
        with pytest.raises(AmphomeusAPIError) as excinfo:
            amphomeus_client.delete_journal("j1")

    assert excinfo.value.message == "Failed to delete journal"


def test_connection_error():
    amphomeus_client = AmphomeusClient("http://api.test")

    with mock.patch(
        "amphomeus.client.requests.request",
        side_effect=requests.ConnectionError("refused"),
    ):
        with pytest.raises(AmphomeusAPIError) as excinfo:
            amphomeus_client.list_tags()

    assert excinfo.value.message == "Failed to fetch tags"
