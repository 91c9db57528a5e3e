"""Single-file multipart/form-data upload encoder.

``FileUpload`` is bound to one field name, filename and ``FileType``. As a
conversion it is a validation gate on ``apply`` and an RFC 7578 framer on
``unapply``::

    upload = FileUpload("avatar", "profile.jpg", FileType.image(ImageKind.JPEG))
    upload.apply(data)      # -> data, or raises a MultipartError
    upload.unapply(data)    # -> framed body for a request with upload.content_type

Validation order is fixed: empty data, then size, then content. The payload
is framed verbatim; if it happens to contain the boundary string the body is
ambiguous to a parser; the payload is never scanned for the boundary.
"""

from dataclasses import dataclass

from beartype import beartype

from formcoding.core.settings import settings
from formcoding.multipart.boundary import BoundaryGenerator, default_generator, is_valid_boundary
from formcoding.multipart.conversion import Conversion
from formcoding.multipart.errors import EmptyData, FileTooLarge, MalformedBoundary
from formcoding.multipart.file_types import CSV, EXCEL, PDF, FileType, ImageKind
from formcoding.multipart.form_field import CRLF, FormField, encode_text


class FileUpload(Conversion[bytes, bytes]):
    """Validates one uploaded file and frames it as a multipart/form-data body."""

    @beartype
    def __init__(
        self,
        field_name: str | None,
        filename: str,
        file_type: FileType,
        max_size: int | None = None,
        boundary: str | None = None,
        generator: BoundaryGenerator | None = None,
    ) -> None:
        if boundary is not None and not is_valid_boundary(boundary):
            raise MalformedBoundary()

        self.field_name = settings.DEFAULT_FIELD_NAME if field_name is None else field_name
        self.filename = filename
        self.file_type = file_type
        self.max_size = settings.MAX_FILE_SIZE if max_size is None else max_size
        self.boundary = boundary or (generator or default_generator).generate()

    def __repr__(self) -> str:
        return (
            f"FileUpload(field_name={self.field_name!r}, filename={self.filename!r}, "
            f"content_type={self.file_type.content_type!r}, max_size={self.max_size})"
        )

    @property
    def content_type(self) -> str:
        """Content-Type header value for the framed body."""
        return f"multipart/form-data; boundary={self.boundary}"

    # -------------------------------------------------------------------------
    # Convenience constructors
    # -------------------------------------------------------------------------

    @classmethod
    def csv(cls, field_name: str | None = None, filename: str | None = None, max_size: int | None = None) -> "FileUpload":
        return cls(field_name, filename or "file.csv", CSV, max_size)

    @classmethod
    def pdf(cls, field_name: str | None = None, filename: str | None = None, max_size: int | None = None) -> "FileUpload":
        return cls(field_name, filename or "file.pdf", PDF, max_size)

    @classmethod
    def excel(cls, field_name: str | None = None, filename: str | None = None, max_size: int | None = None) -> "FileUpload":
        return cls(field_name, filename or "file.xlsx", EXCEL, max_size)

    @classmethod
    def jpeg(cls, field_name: str | None = None, filename: str | None = None, max_size: int | None = None) -> "FileUpload":
        return cls(field_name, filename or "file.jpg", FileType.image(ImageKind.JPEG), max_size)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self, data: bytes) -> None:
        """Raise the first failure among empty data, size limit and content check."""
        if not data:
            raise EmptyData()

        if len(data) > self.max_size:
            raise FileTooLarge(size=len(data), max_size=self.max_size)

        self.file_type.validate(data)

    # -------------------------------------------------------------------------
    # Framing
    # -------------------------------------------------------------------------

    def append_boundary(self, body: bytearray) -> None:
        body += encode_text(f"--{self.boundary}{CRLF}")

    def append_headers(self, body: bytearray) -> None:
        field = FormField(
            name=self.field_name,
            filename=self.filename,
            content_type=self.file_type.content_type,
        )
        body += encode_text(field.header_block())

    def append_closing_boundary(self, body: bytearray) -> None:
        body += encode_text(f"{CRLF}--{self.boundary}--{CRLF}")

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def apply(self, input: bytes) -> bytes:
        """Validate uploaded bytes and return them unchanged."""
        self.validate(input)
        return input

    def unapply(self, output: bytes) -> bytes:
        """Validate file bytes and wrap them in boundary, headers and closing boundary."""
        self.validate(output)

        body = bytearray()
        self.append_boundary(body)
        self.append_headers(body)
        body += output
        self.append_closing_boundary(body)
        return bytes(body)


@dataclass(frozen=True, slots=True)
class FileUploadData:
    """A file ready to upload: the bytes plus where and how to send them."""

    filename: str
    file_type: FileType
    data: bytes
    field_name: str | None = None
    max_size: int | None = None

    def __post_init__(self) -> None:
        if self.field_name is None:
            object.__setattr__(self, "field_name", settings.DEFAULT_FIELD_NAME)

    @classmethod
    def csv(cls, data: bytes, filename: str = "file.csv", field_name: str | None = None, max_size: int | None = None) -> "FileUploadData":
        return cls(filename=filename, file_type=CSV, data=data, field_name=field_name, max_size=max_size)

    @classmethod
    def pdf(cls, data: bytes, filename: str = "file.pdf", field_name: str | None = None, max_size: int | None = None) -> "FileUploadData":
        return cls(filename=filename, file_type=PDF, data=data, field_name=field_name, max_size=max_size)

    def uploader(self) -> FileUpload:
        return FileUpload(self.field_name, self.filename, self.file_type, self.max_size)

    def form_field(self) -> FormField:
        return FormField(
            name=self.field_name,
            data=self.data,
            filename=self.filename,
            content_type=self.file_type.content_type,
        )

    def encode(self) -> tuple[str, bytes]:
        """Validate and frame the file; returns ``(content_type, body)``."""
        upload = self.uploader()
        return upload.content_type, upload.unapply(self.data)
