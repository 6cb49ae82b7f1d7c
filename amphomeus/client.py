"""
HTTP client for the Amphomeus API, used by the journal forms and the gallery view.
"""
import logging
import os
from datetime import date
from enum import Enum, unique
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 30


@unique
class Method(Enum):
    get = "get"
    post = "post"
    put = "put"
    delete = "delete"


class AmphomeusAPIError(Exception):
    """
    Raised when the Amphomeus API answers with a non-2xx status or cannot be reached.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def app_url_from_env() -> str:
    app_url = os.environ.get("AMPHOMEUS_APP_URL")
    if app_url:
        return app_url.rstrip("/")
    return f"http://localhost:{os.environ.get('PORT', '8000')}"


def _error_detail(response: requests.Response, default_message: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default_message
    if isinstance(body, dict):
        detail = body.get("detail")
        if isinstance(detail, str) and detail:
            return detail
    return default_message


class AmphomeusClient:
    def __init__(
        self, app_url: Optional[str] = None, access_token: Optional[str] = None
    ) -> None:
        self.app_url = app_url.rstrip("/") if app_url else app_url_from_env()
        self.access_token = access_token

    def _call(
        self,
        method: Method,
        path: str,
        default_error: str,
        **kwargs: Any,
    ) -> Any:
        headers: Dict[str, str] = {}
        if self.access_token is not None:
            headers["Authorization"] = f"Bearer {self.access_token}"
        try:
            r = requests.request(
                method.value,
                url=f"{self.app_url}{path}",
                headers=headers,
                timeout=REQUEST_TIMEOUT_SECONDS,
                **kwargs,
            )
        except requests.RequestException as e:
            logger.error(f"Error reaching Amphomeus API at {path}: {str(e)}")
            raise AmphomeusAPIError(default_error)

        if not r.ok:
            raise AmphomeusAPIError(
                _error_detail(r, default_error), status_code=r.status_code
            )
        return r.json()

    def list_journals(
        self,
        search: Optional[str] = None,
        sort: Optional[str] = None,
        tag_ids: Optional[List[str]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, str] = {}
        if search:
            params["search"] = search
        if sort:
            params["sort"] = sort
        if tag_ids:
            params["tags"] = ",".join(tag_ids)
        if start_date is not None:
            params["startDate"] = start_date.isoformat()
        if end_date is not None:
            params["endDate"] = end_date.isoformat()
        return self._call(
            Method.get, "/journals/", "Failed to fetch journals", params=params
        )

    def get_journal(self, journal_id: str) -> Dict[str, Any]:
        return self._call(Method.get, f"/journals/{journal_id}", "Failed to fetch journal")

    def create_journal(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._call(
            Method.post, "/journals/", "Failed to create journal", json=payload
        )

    def update_journal(self, journal_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._call(
            Method.put,
            f"/journals/{journal_id}",
            "Failed to update journal",
            json=payload,
        )

    def delete_journal(self, journal_id: str) -> Dict[str, Any]:
        return self._call(
            Method.delete, f"/journals/{journal_id}", "Failed to delete journal"
        )

    def list_tags(self) -> List[Dict[str, Any]]:
        return self._call(Method.get, "/tags/", "Failed to fetch tags")

    def upload_media(
        self, filename: str, content: bytes, content_type: Optional[str] = None
    ) -> Dict[str, Any]:
        files = {"file": (filename, content, content_type or "application/octet-stream")}
        return self._call(
            Method.post, "/media/upload", "Failed to upload media", files=files
        )

    def delete_media(
        self, public_id: str, resource_type: str = "image"
    ) -> Dict[str, Any]:
        return self._call(
            Method.post,
            "/media/delete",
            "Failed to delete media",
            json={"publicId": public_id, "resourceType": resource_type},
        )
