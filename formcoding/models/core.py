"""Core models for request/response handling."""

from enum import StrEnum


class BodyType(StrEnum):
    """Body content type classification for request parsing."""

    PYDANTIC = "pydantic"
    JSONABLE = "jsonable"
    RAW = "raw"


class ContentType(StrEnum):
    """Content-Type header values used by routes."""

    APPLICATION_JSON = "application/json"
    FORM_URLENCODED = "application/x-www-form-urlencoded"
    MULTIPART_FORM_DATA = "multipart/form-data"
    TEXT_PLAIN = "text/plain"
    TEXT_HTML = "text/html"
    APPLICATION_XML = "application/xml"
    OCTET_STREAM = "application/octet-stream"

    # Short aliases
    JSON = "application/json"
    HTML = "text/html"
    XML = "application/xml"
