"""
Top-level Amphomeus API
"""
import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .data import PingResponse, VersionResponse
from .journal.api import app as journal_api
from .middleware import MountRootSlashMiddleware
from .media.api import app as media_api
from .tags.api import app as tags_api
from .utils.settings import CORS_ALLOWED_ORIGINS
from .version import AMPHOMEUS_VERSION

LOG_LEVEL = logging.INFO
if os.getenv("AMPHOMEUS_DEBUG", "").lower() == "true":
    LOG_LEVEL = logging.DEBUG

LOG_FORMAT = "[%(levelname)s] %(name)s (Source: %(pathname)s:%(lineno)d, Time: %(asctime)s) - %(message)s"
logging.basicConfig(format=LOG_FORMAT, level=LOG_LEVEL)

app = FastAPI(openapi_url=None)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MountRootSlashMiddleware, prefixes=["/journals", "/tags"])


@app.get("/ping", response_model=PingResponse)
async def ping() -> PingResponse:
    return PingResponse(status="ok")


@app.get("/version", response_model=VersionResponse)
async def version() -> VersionResponse:
    return VersionResponse(version=AMPHOMEUS_VERSION)


app.mount("/journals", journal_api)
app.mount("/media", media_api)
app.mount("/tags", tags_api)
