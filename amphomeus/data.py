"""
Pydantic schemas for the Amphomeus HTTP API
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PingResponse(BaseModel):
    """
    Schema for ping response.
    """

    status: str


class VersionResponse(BaseModel):
    """
    Schema for responses on /version endpoint.
    """

    version: str


class CamelModel(BaseModel):
    """
    Base for request and response bodies exchanged with the gallery UI, which speaks camelCase.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
