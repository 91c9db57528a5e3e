"""Errors raised while validating or encoding multipart uploads.

The taxonomy is closed: every validation or framing failure surfaces as
exactly one of the ``MultipartError`` subclasses below. Errors compare by
value so callers can match on them directly::

    try:
        upload.apply(data)
    except MultipartError as err:
        if err == ContentMismatch("image/jpeg"):
            ...
"""

from typing import Any


class MultipartError(Exception):
    """Base class for multipart upload failures."""

    code: str = "multipart_error"

    def _fields(self) -> tuple[Any, ...]:
        return ()

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._fields() == other._fields()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self._fields()))

    def __repr__(self) -> str:
        args = ", ".join(repr(value) for value in self._fields())
        return f"{type(self).__name__}({args})"


class EmptyData(MultipartError):
    """No file data was provided."""

    code = "empty_data"

    def __init__(self) -> None:
        super().__init__("Empty file data")


class FileTooLarge(MultipartError):
    """File size exceeds the configured maximum."""

    code = "file_too_large"

    def __init__(self, size: int, max_size: int) -> None:
        self.size = size
        self.max_size = max_size
        super().__init__(f"File size {size} exceeds maximum allowed size of {max_size} bytes")

    def _fields(self) -> tuple[Any, ...]:
        return (self.size, self.max_size)


class InvalidContentType(MultipartError):
    """The provided content type is not recognized."""

    code = "invalid_content_type"

    def __init__(self, content_type: str) -> None:
        self.content_type = content_type
        super().__init__(f"Invalid content type: {content_type}")

    def _fields(self) -> tuple[Any, ...]:
        return (self.content_type,)


class ContentMismatch(MultipartError):
    """File content does not match the expected type.

    ``detected`` is usually ``None``: validators only check the signature of
    the expected type and never try to sniff what the content actually is.
    """

    code = "content_mismatch"

    def __init__(self, expected: str, detected: str | None = None) -> None:
        self.expected = expected
        self.detected = detected
        super().__init__(
            f"Content type mismatch. Expected: {expected}, Detected: {detected or 'unknown'}"
        )

    def _fields(self) -> tuple[Any, ...]:
        return (self.expected, self.detected)


class MalformedBoundary(MultipartError):
    """The multipart boundary format is invalid."""

    code = "malformed_boundary"

    def __init__(self) -> None:
        super().__init__("Malformed multipart boundary")


class EncodingError(MultipartError):
    """Failed to encode multipart form data."""

    code = "encoding_error"

    def __init__(self) -> None:
        super().__init__("Failed to encode multipart form data")
