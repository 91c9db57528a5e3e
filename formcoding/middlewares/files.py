"""OpenAPI middleware documenting conversion-backed request bodies."""

import orjson
from robyn import Response

from formcoding.core.logger import LogIcon, logger
from formcoding.core.router import CONVERSION_ENDPOINTS
from formcoding.middlewares.base import BaseMiddleware
from formcoding.models.core import ContentType
from formcoding.multipart.conversion import Conversion
from formcoding.multipart.file_upload import FileUpload
from formcoding.multipart.form_conversion import FormConversion


def request_body_schema(conversion: Conversion) -> dict | None:
    """OpenAPI requestBody for a conversion, or None when it has no known shape."""
    match conversion:
        case FileUpload():
            content_type = conversion.file_type.content_type
            return {
                "content": {
                    content_type: {
                        "schema": {
                            "type": "string",
                            "format": "binary",
                            "description": f"{conversion.filename} (max {conversion.max_size} bytes)",
                        }
                    }
                },
                "required": True,
            }
        case FormConversion():
            return {
                "content": {ContentType.FORM_URLENCODED.value: {"schema": conversion.model.model_json_schema()}},
                "required": True,
            }
        case _:
            return None


class ConversionOpenAPIMiddleware(BaseMiddleware):
    """Patches OpenAPI responses with request bodies of conversion endpoints."""

    endpoints = frozenset(["/openapi.json"])

    def after(self, response: Response) -> Response:
        """Replace requestBody of every conversion endpoint in the OpenAPI document."""
        if not CONVERSION_ENDPOINTS:
            return response

        try:
            document = orjson.loads(response.description)
        except orjson.JSONDecodeError:
            logger.warning("OpenAPI response is not JSON, skipping patch", icon=LogIcon.WARNING)
            return response

        paths = document.get("paths", {})
        for endpoint, conversion in CONVERSION_ENDPOINTS.items():
            if endpoint not in paths or (request_body := request_body_schema(conversion)) is None:
                continue
            for method in paths[endpoint]:
                paths[endpoint][method]["requestBody"] = request_body

        response.description = orjson.dumps(document).decode()
        return response
