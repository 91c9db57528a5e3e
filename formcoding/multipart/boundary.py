"""Multipart boundary generation."""

import random
import re
import string
import uuid

BOUNDARY_PREFIX = "Boundary-"
BOUNDARY_ALPHABET = string.ascii_letters + string.digits
BOUNDARY_RANDOM_LENGTH = 15

# RFC 2046 section 5.1.1: 1-70 bchars, last one not a space
_RFC_BOUNDARY = re.compile(r"[0-9A-Za-z'()+_,\-./:=? ]{0,69}[0-9A-Za-z'()+_,\-./:=?]")


class BoundaryGenerator:
    """Produces ``Boundary-`` tokens followed by 15 random alphanumerics.

    The random source is injectable so tests can seed it; by default it draws
    from the operating system's entropy pool. Tokens only need to avoid
    accidental collisions, they are not secrets.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.SystemRandom()

    def generate(self) -> str:
        suffix = "".join(self._rng.choices(BOUNDARY_ALPHABET, k=BOUNDARY_RANDOM_LENGTH))
        return f"{BOUNDARY_PREFIX}{suffix}"


default_generator = BoundaryGenerator()


def generate_boundary() -> str:
    """Generate a 24-character boundary with the process-wide generator."""
    return default_generator.generate()


def generate_uuid_boundary() -> str:
    """Boundary used by record serialization: ``Boundary-`` plus an upper-case UUID4."""
    return f"{BOUNDARY_PREFIX}{str(uuid.uuid4()).upper()}"


def is_valid_boundary(boundary: str) -> bool:
    """Check a boundary received from outside against RFC 2046 syntax."""
    return _RFC_BOUNDARY.fullmatch(boundary) is not None
