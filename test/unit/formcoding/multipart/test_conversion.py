"""Tests for the Conversion abstraction."""

import pytest
from pydantic import BaseModel

from formcoding.multipart.conversion import Conversion, Identity, MappedConversion
from formcoding.multipart.errors import ContentMismatch
from formcoding.multipart.file_types import PDF
from formcoding.multipart.file_upload import FileUpload
from formcoding.multipart.form_conversion import FormConversion


class Utf8(Conversion[bytes, str]):
    """Sample conversion between bytes and text."""

    def apply(self, input: bytes) -> str:
        return input.decode("utf-8")

    def unapply(self, output: str) -> bytes:
        return output.encode("utf-8")


class Upper(Conversion[str, str]):
    """Sample conversion that is not a true inverse."""

    def apply(self, input: str) -> str:
        return input.upper()

    def unapply(self, output: str) -> str:
        return output.lower()


class TestConversion:
    """Tests for Conversion composition."""

    def test_abstract(self) -> None:
        """Verify Conversion cannot be instantiated directly."""
        with pytest.raises(TypeError):
            Conversion()  # type: ignore[abstract]

    def test_identity(self) -> None:
        """Verify Identity passes values through."""
        value = object()
        assert Identity().apply(value) is value
        assert Identity().unapply(value) is value

    def test_map_runs_in_sequence(self) -> None:
        """Verify map applies upstream first and unapplies downstream first."""
        chained = Utf8().map(Upper())
        assert isinstance(chained, MappedConversion)
        assert chained.apply(b"abc") == "ABC"
        assert chained.unapply("ABC") == b"abc"

    def test_map_with_file_upload(self) -> None:
        """Verify a file upload can sit behind an identity conversion."""
        chained = Identity().map(FileUpload.pdf())
        assert chained.apply(b"%PDF-1.4") == b"%PDF-1.4"
        with pytest.raises(ContentMismatch):
            chained.unapply(b"not pdf")

    def test_core_types_are_conversions(self) -> None:
        """Verify encoders implement the Conversion interface."""

        class Model(BaseModel):
            a: int

        assert isinstance(FileUpload("f", "a.pdf", PDF), Conversion)
        assert isinstance(FormConversion(Model), Conversion)
