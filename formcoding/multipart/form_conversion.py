"""Record serialization into a simplified multipart body.

``FormConversion`` is meant for routes that submit plain forms, not files.
Its two directions are asymmetric:

- ``unapply`` writes each non-null field of a record as its own part with
  a ``Content-Disposition`` header and the value as text (booleans as
  ``"1"``/``"0"``). There is no Content-Type per part, no filename and no
  array support, so the body is only meant for round trips between our own
  services, not for generic multipart parsers.
- ``apply`` does **not** read that format back. It decodes a URL-encoded
  form body with ``FormDecoder``. For real multipart uploads use
  ``FileUpload``.

Part order follows the record's field order but callers must not rely on it.
"""

from typing import Any

from pydantic import BaseModel

from formcoding.form.coding import FormDecoder, render_value, to_field_map
from formcoding.multipart.boundary import generate_uuid_boundary
from formcoding.multipart.conversion import Conversion
from formcoding.multipart.form_field import CRLF, FormField, encode_text


class FormConversion[M: BaseModel](Conversion[bytes, M]):
    """URL-encoded form in, simplified multipart out."""

    def __init__(self, model: type[M], decoder: FormDecoder | None = None) -> None:
        self.model = model
        self.decoder = decoder or FormDecoder()
        self.boundary = generate_uuid_boundary()

    def __repr__(self) -> str:
        return f"FormConversion({self.model.__name__})"

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    def fields(self, record: M | Any) -> list[FormField]:
        """Non-null top-level fields of ``record`` rendered as text parts."""
        return [
            FormField(name=key, data=encode_text(render_value(value)))
            for key, value in to_field_map(record).items()
            if value is not None
        ]

    def apply(self, input: bytes) -> M:
        """Decode a URL-encoded form body into the model."""
        return self.decoder.decode(self.model, input)

    def unapply(self, output: M) -> bytes:
        """Serialize the record's fields as multipart parts."""
        body = bytearray()
        for field in self.fields(output):
            body += field.encode(self.boundary)
        body += encode_text(f"--{self.boundary}--{CRLF}")
        return bytes(body)
