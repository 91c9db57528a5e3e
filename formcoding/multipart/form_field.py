"""A single multipart/form-data field and its header rendering."""

from dataclasses import dataclass

from formcoding.multipart.errors import EncodingError

CRLF = "\r\n"

# Same escaping browsers apply to names and filenames in Content-Disposition
_HEADER_ESCAPES = str.maketrans({'"': "%22", "\r": "%0D", "\n": "%0A"})


def escape_header_param(value: str) -> str:
    """Percent-escape characters that would break out of a quoted header parameter."""
    return value.translate(_HEADER_ESCAPES)


def encode_text(text: str) -> bytes:
    """UTF-8 encode framing text, reporting failures as ``EncodingError``."""
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError:
        raise EncodingError() from None


@dataclass(frozen=True, slots=True)
class FormField:
    """One field of a multipart body: a name, optional file metadata and raw data."""

    name: str
    data: bytes = b""
    filename: str | None = None
    content_type: str | None = None

    def header_block(self) -> str:
        """Content-Disposition (and Content-Type, if any) followed by the blank line."""
        disposition = f'Content-Disposition: form-data; name="{escape_header_param(self.name)}"'
        if self.filename is not None:
            disposition += f'; filename="{escape_header_param(self.filename)}"'
        lines = [disposition]
        if self.content_type is not None:
            lines.append(f"Content-Type: {self.content_type}")
        return CRLF.join(lines) + CRLF + CRLF

    def encode(self, boundary: str) -> bytes:
        """Render ``--boundary``, headers, data and the trailing CRLF."""
        head = encode_text(f"--{boundary}{CRLF}{self.header_block()}")
        return head + bytes(self.data) + CRLF.encode("ascii")
