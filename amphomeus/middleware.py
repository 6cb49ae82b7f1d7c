import os
import logging
import json
from typing import Callable, Awaitable, List, Optional

import requests

from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import Request, Response

logger = logging.getLogger(__name__)

AUTH_PROVIDER_TIMEOUT_SECONDS = 5


class AuthProviderMiddleware(BaseHTTPMiddleware):
    """
    Checks the authorization header on the request against the external auth provider. If it
    represents a verified user, adds user_id, token and auth_headers attributes to the
    request.state. Otherwise responds with a 403 error.
    """

    def __init__(self, app, whitelist: Optional[List[str]] = None):
        self.whitelist: List[str] = []
        if whitelist is not None:
            self.whitelist = whitelist
        super().__init__(app)

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ):
        if request.url.path in self.whitelist:
            return await call_next(request)

        auth_url = os.environ.get("AMPHOMEUS_AUTH_URL", "").rstrip("/")
        if auth_url == "":
            logger.error("AMPHOMEUS_AUTH_URL environment variable was not set")
            return Response(status_code=500, content="Internal server error")

        auth_endpoint = f"{auth_url}/auth"

        authorization_header = request.headers.get("authorization")
        if authorization_header is None:
            return Response(
                status_code=403, content="No authorization header passed with request"
            )

        headers = {"Authorization": authorization_header}
        user_token_list = authorization_header.split()
        if len(user_token_list) != 2:
            return Response(status_code=403, content="Wrong authorization header")
        user_token: str = user_token_list[-1]
        try:
            r = requests.get(
                auth_endpoint, headers=headers, timeout=AUTH_PROVIDER_TIMEOUT_SECONDS
            )
            if r.status_code in (401, 403):
                return Response(status_code=403, content="Invalid access token")
            r.raise_for_status()
            response = r.json()
            user_id: Optional[str] = response.get("user_id")
            verified: Optional[bool] = response.get("verified")
            if user_id is None:
                logger.error(
                    f"Auth provider returned invalid response: {json.dumps(response)}"
                )
                return Response(status_code=500, content="Internal server error")
            if not verified:
                logger.info(f"Attempted gallery access by unverified account: {user_id}")
                return Response(
                    status_code=403,
                    content="Only verified accounts can access journals",
                )
        except requests.HTTPError as e:
            logger.error(f"Error interacting with auth provider: {str(e)}")
            return Response(status_code=500, content="Internal server error")
        except Exception as e:
            logger.error(f"Error processing auth provider response: {str(e)}")
            return Response(status_code=500, content="Internal server error")

        request.state.auth_headers = headers
        request.state.user_id = user_id
        request.state.token = user_token
        return await call_next(request)


class MountRootSlashMiddleware(BaseHTTPMiddleware):
    """
    Routes requests for a bare mount prefix (e.g. "/journals") to the root of the mounted
    application ("/journals/") instead of answering with a 307 redirect.
    """

    def __init__(self, app, prefixes: List[str]):
        self.prefixes = [prefix.rstrip("/") for prefix in prefixes]
        super().__init__(app)

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ):
        path = request.scope["path"]
        if path in self.prefixes:
            request.scope["path"] = f"{path}/"
            raw_path = request.scope.get("raw_path")
            if raw_path is not None:
                request.scope["raw_path"] = raw_path + b"/"
        return await call_next(request)
