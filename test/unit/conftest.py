"""Test fixtures for multipart-form-coding unit tests."""

import random
from dataclasses import dataclass, field

import pytest

from formcoding.core.router import CONVERSION_ENDPOINTS
from formcoding.multipart.boundary import BoundaryGenerator


# -----------------------------------------------------------------------------
# Mock classes for Robyn Request
# -----------------------------------------------------------------------------


@dataclass
class MockHeaders:
    """Mock Headers object for Robyn Request."""

    _data: dict = field(default_factory=dict)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._data.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._data[key] = value


@dataclass
class MockRequest:
    """Mock Request object for Robyn."""

    body: bytes | str = b""
    headers: MockHeaders = field(default_factory=MockHeaders)
    method: str = "POST"
    path: str = "/"


@pytest.fixture
def make_mock_request():
    """Factory fixture to create mock requests."""

    def _make(body: bytes | str = b"", content_type: str | None = None) -> MockRequest:
        request = MockRequest(body=body)
        if content_type:
            request.headers["content-type"] = content_type
        return request

    return _make


# -----------------------------------------------------------------------------
# Payload fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def jpeg_bytes() -> bytes:
    """Smallest JFIF-looking prefix."""
    return bytes([0xFF, 0xD8, 0xFF, 0xE0, 0x00, 0x10])


@pytest.fixture
def png_bytes() -> bytes:
    return b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR"


@pytest.fixture
def seeded_generator() -> BoundaryGenerator:
    """Deterministic boundary generator."""
    return BoundaryGenerator(rng=random.Random(7578))


@pytest.fixture
def conversion_endpoints():
    """Snapshot and restore the router's conversion endpoint registry."""
    saved = dict(CONVERSION_ENDPOINTS)
    CONVERSION_ENDPOINTS.clear()
    yield CONVERSION_ENDPOINTS
    CONVERSION_ENDPOINTS.clear()
    CONVERSION_ENDPOINTS.update(saved)
