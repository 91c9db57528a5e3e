"""Tests for file-type descriptors and magic-number validators."""

import pytest

from formcoding.multipart import file_types as ft
from formcoding.multipart.errors import ContentMismatch, InvalidContentType
from formcoding.multipart.file_types import FileKind, FileType, ImageKind, ImageType

# -----------------------------------------------------------------------------
# Signature samples
# -----------------------------------------------------------------------------

VALID_SAMPLES: list[tuple[FileType, bytes]] = [
    (ft.PDF, b"%PDF-1.7\n%\xe2\xe3\xcf\xd3"),
    (FileType.image(ft.JPEG), b"\xff\xd8\xff\xe0\x00\x10JFIF"),
    (FileType.image(ft.PNG), b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"),
    (FileType.image(ft.GIF), b"GIF87a\x01\x00\x01\x00"),
    (FileType.image(ft.GIF), b"GIF89a\x01\x00\x01\x00"),
    (FileType.image(ft.WEBP), b"RIFF\x24\x00\x00\x00WEBPVP8 "),
    (FileType.image(ft.TIFF), b"II\x2a\x00\x08\x00\x00\x00"),
    (FileType.image(ft.TIFF), b"MM\x00\x2a\x00\x00\x00\x08"),
    (FileType.image(ft.BMP), b"BM\x36\x00\x0c\x00"),
    (FileType.image(ft.HEIC), b"\x00\x00\x00\x18ftypheic\x00\x00\x00\x00"),
    (FileType.image(ft.AVIF), b"\x00\x00\x00\x1cftypavif\x00\x00\x00\x00"),
]

# Signature length checked by each sample, and where it starts
CHECKED_RANGES = {
    "application/pdf": range(0, 4),
    "image/jpeg": range(0, 3),
    "image/png": range(0, 8),
    "image/gif": range(0, 6),
    "image/webp": [0, 1, 2, 3, 8, 9, 10, 11],
    "image/tiff": range(0, 4),
    "image/bmp": range(0, 2),
    "image/heic": range(4, 12),
    "image/avif": range(4, 12),
}


def _flip(data: bytes, index: int) -> bytes:
    altered = bytearray(data)
    altered[index] ^= 0xFF
    return bytes(altered)


# -----------------------------------------------------------------------------
# Magic numbers
# -----------------------------------------------------------------------------


class TestMagicNumbers:
    """Tests for signature based validators."""

    @pytest.mark.parametrize(("file_type", "data"), VALID_SAMPLES)
    def test_valid_signature_passes(self, file_type: FileType, data: bytes) -> None:
        """Verify matching prefixes validate."""
        assert file_type.validate(data) is None

    @pytest.mark.parametrize(("file_type", "data"), VALID_SAMPLES)
    def test_any_altered_signature_byte_fails(self, file_type: FileType, data: bytes) -> None:
        """Verify altering any checked byte reports a content mismatch."""
        for index in CHECKED_RANGES[file_type.content_type]:
            with pytest.raises(ContentMismatch) as exc_info:
                file_type.validate(_flip(data, index))
            assert exc_info.value == ContentMismatch(expected=file_type.content_type, detected=None)

    @pytest.mark.parametrize(("file_type", "data"), VALID_SAMPLES)
    def test_truncated_buffer_is_mismatch(self, file_type: FileType, data: bytes) -> None:
        """Verify buffers shorter than the signature fail as mismatches."""
        with pytest.raises(ContentMismatch):
            file_type.validate(data[:1])

    def test_webp_container_size_not_checked(self) -> None:
        """Verify bytes 4-7 of a RIFF header are ignored."""
        FileType.image(ft.WEBP).validate(b"RIFF\xff\xff\xff\xffWEBP")

    def test_wav_riff_is_not_webp(self) -> None:
        """Verify RIFF containers of another form type are rejected."""
        with pytest.raises(ContentMismatch):
            FileType.image(ft.WEBP).validate(b"RIFF\x24\x00\x00\x00WAVEfmt ")

    def test_heic_brand_is_not_avif(self) -> None:
        """Verify ftyp brands are not interchangeable."""
        heic = b"\x00\x00\x00\x18ftypheic\x00\x00\x00\x00"
        with pytest.raises(ContentMismatch) as exc_info:
            FileType.image(ft.AVIF).validate(heic)
        assert exc_info.value.expected == "image/avif"

    def test_pdf_rejects_plain_text(self) -> None:
        """Verify the PDF check rejects text."""
        with pytest.raises(ContentMismatch) as exc_info:
            ft.PDF.validate(b"Not a PDF")
        assert exc_info.value == ContentMismatch("application/pdf")

    def test_validators_accept_bytearray(self) -> None:
        """Verify validators do not require immutable bytes."""
        ft.PDF.validate(bytearray(b"%PDF-1.4"))


# -----------------------------------------------------------------------------
# Text and unchecked formats
# -----------------------------------------------------------------------------


class TestTextAndUncheckedTypes:
    """Tests for UTF-8 and pass-through validators."""

    def test_csv_accepts_utf8(self) -> None:
        """Verify UTF-8 CSV passes."""
        ft.CSV.validate("name,city\nÅse,Tromsø\n".encode())

    def test_csv_rejects_invalid_utf8(self) -> None:
        """Verify invalid UTF-8 is a CSV content mismatch."""
        with pytest.raises(ContentMismatch) as exc_info:
            ft.CSV.validate(b"name\n\xff\xfe\xfa")
        assert exc_info.value == ContentMismatch("text/csv")
        assert exc_info.value.__cause__ is None

    @pytest.mark.parametrize(
        "kind",
        [kind for kind in FileKind if kind not in (FileKind.CSV, FileKind.PDF)],
    )
    def test_unchecked_types_accept_anything(self, kind: FileKind) -> None:
        """Verify formats without sniffing accept arbitrary bytes."""
        ft.file_type_for(kind).validate(b"\x00\xff arbitrary")


# -----------------------------------------------------------------------------
# Descriptors and registry
# -----------------------------------------------------------------------------


class TestDescriptors:
    """Tests for FileType/ImageType construction and lookups."""

    def test_image_adapter_copies_fields(self) -> None:
        """Verify FileType.image keeps content type, extension and validator."""
        file_type = FileType.image(ft.PNG)
        assert file_type.content_type == "image/png"
        assert file_type.file_extension == "png"
        assert file_type.validate is ft.PNG.validate

    def test_image_adapter_accepts_kind(self) -> None:
        """Verify FileType.image resolves an ImageKind."""
        assert FileType.image(ImageKind.JPEG) == FileType.image(ft.JPEG)
        assert FileType.image(ImageKind.JPEG) == FileType("image/jpeg", "jpg", ft.JPEG.validate)

    def test_equality_includes_validator(self) -> None:
        """Verify descriptors with the same metadata but different checks differ."""
        permissive = FileType.custom("application/pdf", "pdf", lambda data: True)

        assert permissive != ft.PDF
        assert FileType("image/jpeg", "jpg") != FileType.image(ImageKind.JPEG)
        assert ft.file_type_for(FileKind.PDF) == ft.PDF

    def test_image_type_is_not_file_type(self) -> None:
        """Verify ImageType and FileType stay distinct types."""
        assert not isinstance(ft.JPEG, FileType)
        assert isinstance(ft.JPEG, ImageType)

    def test_default_validator_accepts(self) -> None:
        """Verify descriptors without a validator accept any data."""
        FileType("application/xml", "xml").validate(b"anything")

    def test_descriptors_are_frozen(self) -> None:
        """Verify descriptors cannot be mutated."""
        with pytest.raises(AttributeError):
            ft.PDF.content_type = "text/plain"  # type: ignore[misc]

    def test_custom_predicate(self) -> None:
        """Verify custom descriptors wrap a byte predicate."""
        xml = FileType.custom("application/xml", "xml", lambda data: data.startswith(b"<?xml"))
        xml.validate(b'<?xml version="1.0"?><a/>')
        with pytest.raises(ContentMismatch) as exc_info:
            xml.validate(b"<a/>")
        assert exc_info.value == ContentMismatch("application/xml")

    @pytest.mark.parametrize(
        ("kind", "content_type", "extension"),
        [
            (FileKind.CSV, "text/csv", "csv"),
            (FileKind.PDF, "application/pdf", "pdf"),
            (FileKind.EXCEL, "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet", "xlsx"),
            (FileKind.JSON, "application/json", "json"),
            (FileKind.TEXT, "text/plain", "txt"),
            (FileKind.JAVASCRIPT, "application/javascript", "js"),
            (ImageKind.JPEG, "image/jpeg", "jpg"),
            (ImageKind.TIFF, "image/tiff", "tiff"),
        ],
    )
    def test_registry_lookup(self, kind, content_type: str, extension: str) -> None:
        """Verify built-in kinds resolve to the expected descriptors."""
        file_type = ft.file_type_for(kind)
        assert file_type.content_type == content_type
        assert file_type.file_extension == extension

    def test_lookup_by_content_type(self) -> None:
        """Verify content type lookup ignores parameters and case."""
        assert ft.file_type_for_content_type("Text/CSV; charset=utf-8") is ft.CSV
        assert ft.file_type_for_content_type("image/png").content_type == "image/png"

    def test_lookup_unknown_content_type(self) -> None:
        """Verify unknown content types raise InvalidContentType."""
        with pytest.raises(InvalidContentType) as exc_info:
            ft.file_type_for_content_type("application/x-unknown")
        assert exc_info.value == InvalidContentType("application/x-unknown")
