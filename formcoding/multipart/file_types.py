"""File-type descriptors and content validators.

Each descriptor pairs a MIME content type and a canonical extension with a
validator: a pure function over the uploaded bytes that returns ``None`` when
the content is acceptable and raises ``ContentMismatch`` otherwise.

Validators fall into three groups:

- no validation, for formats where sniffing is not implemented;
- UTF-8 validation, for line-oriented text (CSV);
- magic-number validation, comparing fixed-offset byte signatures.

Buffers shorter than a signature simply do not match it.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum

from formcoding.multipart.errors import ContentMismatch, InvalidContentType

Validator = Callable[[bytes], None]
Predicate = Callable[[bytes], bool]


def accept_any(data: bytes) -> None:
    """Validator for formats that are supported but not content-checked."""


def _matches(data: bytes, signature: bytes, offset: int = 0) -> bool:
    return data[offset : offset + len(signature)] == signature


def signature_validator(content_type: str, *signatures: bytes, offset: int = 0) -> Validator:
    """Build a validator accepting data that starts with any of ``signatures``."""

    def validate(data: bytes) -> None:
        if not any(_matches(data, signature, offset) for signature in signatures):
            raise ContentMismatch(expected=content_type)

    return validate


def utf8_validator(content_type: str) -> Validator:
    """Build a validator accepting data that decodes as UTF-8."""

    def validate(data: bytes) -> None:
        try:
            bytes(data).decode("utf-8")
        except UnicodeDecodeError:
            raise ContentMismatch(expected=content_type) from None

    return validate


def _riff_validator(content_type: str, form_type: bytes) -> Validator:
    # bytes 4-7 hold the container size and are not checked
    def validate(data: bytes) -> None:
        if not (_matches(data, b"RIFF") and _matches(data, form_type, offset=8)):
            raise ContentMismatch(expected=content_type)

    return validate


def _ftyp_validator(content_type: str, brand: bytes) -> Validator:
    # ISOBMFF: box size, then b"ftyp", then the major brand
    def validate(data: bytes) -> None:
        if len(data) < 12 or not (_matches(data, b"ftyp", offset=4) and _matches(data, brand, offset=8)):
            raise ContentMismatch(expected=content_type)

    return validate


@dataclass(frozen=True, slots=True)
class ImageType:
    """Image format descriptor with a magic-number validator.

    Not a ``FileType`` itself; use ``FileType.image`` to adapt it.
    """

    content_type: str
    file_extension: str
    validate: Validator = field(default=accept_any, repr=False)


@dataclass(frozen=True, slots=True)
class FileType:
    """Content type, extension and validator for an accepted upload format."""

    content_type: str
    file_extension: str
    validate: Validator = field(default=accept_any, repr=False)

    @classmethod
    def image(cls, image_type: "ImageType | ImageKind") -> "FileType":
        """Adapt an image descriptor, or a built-in image kind, to a ``FileType``."""
        if isinstance(image_type, ImageKind):
            image_type = IMAGE_TYPES[image_type]
        return cls(
            content_type=image_type.content_type,
            file_extension=image_type.file_extension,
            validate=image_type.validate,
        )

    @classmethod
    def custom(cls, content_type: str, file_extension: str, predicate: Predicate) -> "FileType":
        """Wrap a caller-supplied byte predicate; a falsy result is a content mismatch."""

        def validate(data: bytes) -> None:
            if not predicate(data):
                raise ContentMismatch(expected=content_type)

        return cls(content_type=content_type, file_extension=file_extension, validate=validate)


class ImageKind(StrEnum):
    """Built-in image formats."""

    JPEG = "jpeg"
    PNG = "png"
    GIF = "gif"
    WEBP = "webp"
    TIFF = "tiff"
    BMP = "bmp"
    HEIC = "heic"
    AVIF = "avif"


class FileKind(StrEnum):
    """Built-in non-image formats."""

    CSV = "csv"
    PDF = "pdf"
    EXCEL = "excel"
    JSON = "json"
    TEXT = "text"
    DOCX = "docx"
    DOC = "doc"
    ZIP = "zip"
    MP3 = "mp3"
    WAV = "wav"
    MP4 = "mp4"
    SQLITE = "sqlite"
    SWIFT = "swift"
    JAVASCRIPT = "javascript"
    TTF = "ttf"
    SVG = "svg"


# -----------------------------------------------------------------------------
# Images
# -----------------------------------------------------------------------------

JPEG = ImageType("image/jpeg", "jpg", signature_validator("image/jpeg", b"\xff\xd8\xff"))
PNG = ImageType("image/png", "png", signature_validator("image/png", b"\x89PNG\r\n\x1a\n"))
GIF = ImageType("image/gif", "gif", signature_validator("image/gif", b"GIF87a", b"GIF89a"))
WEBP = ImageType("image/webp", "webp", _riff_validator("image/webp", b"WEBP"))
TIFF = ImageType(
    "image/tiff",
    "tiff",
    signature_validator("image/tiff", b"II\x2a\x00", b"MM\x00\x2a"),  # Intel, Motorola
)
BMP = ImageType("image/bmp", "bmp", signature_validator("image/bmp", b"BM"))
HEIC = ImageType("image/heic", "heic", _ftyp_validator("image/heic", b"heic"))
AVIF = ImageType("image/avif", "avif", _ftyp_validator("image/avif", b"avif"))

IMAGE_TYPES: dict[ImageKind, ImageType] = {
    ImageKind.JPEG: JPEG,
    ImageKind.PNG: PNG,
    ImageKind.GIF: GIF,
    ImageKind.WEBP: WEBP,
    ImageKind.TIFF: TIFF,
    ImageKind.BMP: BMP,
    ImageKind.HEIC: HEIC,
    ImageKind.AVIF: AVIF,
}

# -----------------------------------------------------------------------------
# Documents, media and source files
# -----------------------------------------------------------------------------

CSV = FileType("text/csv", "csv", utf8_validator("text/csv"))
PDF = FileType("application/pdf", "pdf", signature_validator("application/pdf", b"%PDF"))
EXCEL = FileType("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet", "xlsx")
JSON = FileType("application/json", "json")
TEXT = FileType("text/plain", "txt")
DOCX = FileType("application/vnd.openxmlformats-officedocument.wordprocessingml.document", "docx")
DOC = FileType("application/msword", "doc")
ZIP = FileType("application/zip", "zip")
MP3 = FileType("audio/mpeg", "mp3")
WAV = FileType("audio/wav", "wav")
MP4 = FileType("video/mp4", "mp4")
SQLITE = FileType("application/x-sqlite3", "sqlite")
SWIFT = FileType("text/x-swift", "swift")
JAVASCRIPT = FileType("application/javascript", "js")
TTF = FileType("font/ttf", "ttf")
SVG = FileType("image/svg+xml", "svg")

FILE_TYPES: dict[FileKind, FileType] = {
    FileKind.CSV: CSV,
    FileKind.PDF: PDF,
    FileKind.EXCEL: EXCEL,
    FileKind.JSON: JSON,
    FileKind.TEXT: TEXT,
    FileKind.DOCX: DOCX,
    FileKind.DOC: DOC,
    FileKind.ZIP: ZIP,
    FileKind.MP3: MP3,
    FileKind.WAV: WAV,
    FileKind.MP4: MP4,
    FileKind.SQLITE: SQLITE,
    FileKind.SWIFT: SWIFT,
    FileKind.JAVASCRIPT: JAVASCRIPT,
    FileKind.TTF: TTF,
    FileKind.SVG: SVG,
}


def file_type_for(kind: FileKind | ImageKind) -> FileType:
    """Look up a built-in descriptor, adapting image kinds."""
    if isinstance(kind, ImageKind):
        return FileType.image(kind)
    return FILE_TYPES[kind]


def file_type_for_content_type(content_type: str) -> FileType:
    """Find the built-in descriptor for a MIME type, ignoring parameters and case."""
    mime = content_type.split(";", 1)[0].strip().lower()
    for file_type in FILE_TYPES.values():
        if file_type.content_type == mime:
            return file_type
    for image_type in IMAGE_TYPES.values():
        if image_type.content_type == mime:
            return FileType.image(image_type)
    raise InvalidContentType(content_type)
