"""Router with automatic body parsing, conversion, validation and response handling."""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Annotated, Any, get_args, get_origin

import orjson
from pydantic import BaseModel, ValidationError
from robyn import Request, Response, SubRouter, status_codes
from robyn.robyn import HttpMethod
from robyn.types import Body

from formcoding.core.logger import LogIcon, logger
from formcoding.form.coding import FormDecodingError
from formcoding.models.core import BodyType, ContentType
from formcoding.multipart.conversion import Conversion
from formcoding.multipart.errors import MultipartError

CONVERSION_ENDPOINTS: dict[str, Conversion] = {}


def conversion_from_annotation(annotation: Any) -> Conversion | None:
    """Return the Conversion carried in ``Annotated[T, conversion]``, if any."""
    if get_origin(annotation) is not Annotated:
        return None
    for metadata in get_args(annotation)[1:]:
        if isinstance(metadata, Conversion):
            return metadata
    return None


def parse_endpoint_signature(
    sig: inspect.Signature,
) -> tuple[dict[str, tuple[BodyType, type | None]], dict[str, Conversion]]:
    """Parse function signature for body and conversion parameters."""
    parsed: dict[str, tuple[BodyType, type | None]] = {}
    conversions: dict[str, Conversion] = {}

    for name, param in sig.parameters.items():
        annotation = param.annotation

        if conversion := conversion_from_annotation(annotation):
            conversions[name] = conversion
            continue

        match annotation:
            case type() if issubclass(annotation, BaseModel):
                parsed[name] = (BodyType.PYDANTIC, type(annotation.__name__, (annotation, Body), {}))
            case type() if issubclass(annotation, Body):
                parsed[name] = (BodyType.JSONABLE, annotation)
            case type() if annotation is dict:
                parsed[name] = (BodyType.JSONABLE, None)
            case _ if name == "body":
                parsed[name] = (BodyType.JSONABLE, None)

    return parsed, conversions


def parse_request_body(
    body_config: dict[str, tuple[BodyType, type | None]],
    kwargs: dict[str, Any],
) -> Response | None:
    """Parse JSON/Pydantic body parameters."""
    for param_name, (body_type, model_cls) in body_config.items():
        if param_name not in kwargs:
            continue
        raw = kwargs[param_name]
        if not isinstance(raw, (str, bytes)):
            continue

        match body_type:
            case BodyType.PYDANTIC if model_cls:
                try:
                    kwargs[param_name] = model_cls.model_validate_json(raw)  # type: ignore[union-attr]
                except ValidationError as ex:
                    return Response(status_code=422, headers={}, description=ex.json())
            case BodyType.JSONABLE:
                try:
                    kwargs[param_name] = orjson.loads(raw)
                except orjson.JSONDecodeError as ex:
                    return Response(status_code=422, headers={}, description=str(ex))
            case BodyType.RAW:
                pass
    return None


def raw_request_body(request: Request) -> bytes:
    """Request body as bytes; Robyn hands over text bodies as str."""
    body = getattr(request, "body", b"") or b""
    return body.encode("utf-8") if isinstance(body, str) else bytes(body)


def rejection_response(error: MultipartError) -> Response:
    """Map a multipart error to a 422 JSON response."""
    return Response(
        status_code=status_codes.HTTP_422_UNPROCESSABLE_ENTITY,
        headers={"content-type": ContentType.APPLICATION_JSON},
        description=orjson.dumps({"error": error.code, "detail": str(error)}).decode(),
    )


def parse_request_conversions(
    conversions: dict[str, Conversion],
    request: Request,
    kwargs: dict[str, Any],
) -> Response | None:
    """Run each conversion's ``apply`` over the raw request body."""
    if not conversions:
        return None

    raw = raw_request_body(request)
    for param_name, conversion in conversions.items():
        try:
            kwargs[param_name] = conversion.apply(raw)
        except MultipartError as ex:
            logger.warning("Request body rejected", icon=LogIcon.FORBIDDEN, error=ex.code, size=len(raw))
            return rejection_response(ex)
        except FormDecodingError as ex:
            logger.warning("Form body rejected", icon=LogIcon.FORBIDDEN, model=ex.model.__name__)
            return Response(
                status_code=status_codes.HTTP_422_UNPROCESSABLE_ENTITY,
                headers={"content-type": ContentType.APPLICATION_JSON},
                description=orjson.dumps({"error": "invalid_form", "detail": ex.errors}, default=str).decode(),
            )

    return None


def parse_response(result: Any) -> Response:
    """Convert handler result to Response."""
    match result:
        case Response():
            return result
        case BaseModel():
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={"content-type": ContentType.APPLICATION_JSON},
                description=result.model_dump_json(indent=4),
            )
        case dict():
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={"content-type": ContentType.APPLICATION_JSON},
                description=orjson.dumps(result).decode(),
            )
        case bytes():
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={"content-type": ContentType.OCTET_STREAM},
                description=result,
            )
        case _:
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={},
                description=str(result),
            )


HTTP_METHODS = (
    HttpMethod.GET,
    HttpMethod.POST,
    HttpMethod.PUT,
    HttpMethod.DELETE,
    HttpMethod.PATCH,
    HttpMethod.HEAD,
    HttpMethod.OPTIONS,
    HttpMethod.TRACE,
    HttpMethod.CONNECT,
)


def _create_method_wrapper(original_method: Callable, router_prefix: str = "") -> Callable:
    @wraps(original_method)
    def method_wrapper(*args, **kwargs) -> Callable:
        endpoint = args[0] if args else kwargs.get("endpoint", "")
        decorator = original_method(*args, **kwargs)

        def handler_decorator(handler: Callable) -> Callable:
            sig = inspect.signature(handler)
            body_config, conversions = parse_endpoint_signature(sig)
            has_request_param = "request" in sig.parameters

            if conversions:
                full_path = f"{router_prefix}{endpoint}".replace("//", "/")
                CONVERSION_ENDPOINTS[full_path] = next(iter(conversions.values()))

            @wraps(handler)
            async def wrapped_handler(request: Request, **h_kwargs):
                if error := parse_request_body(body_config, h_kwargs):
                    return error

                if error := parse_request_conversions(conversions, request, h_kwargs):
                    return error

                # Pass request to handler only if it declared it
                if has_request_param:
                    h_kwargs["request"] = request

                result = await handler(**h_kwargs)
                return parse_response(result)

            # Build signature: always include request for Robyn injection
            new_params = [inspect.Parameter("request", inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=Request)]
            for name, param in sig.parameters.items():
                if name == "request" or name in conversions:
                    continue
                if name in body_config:
                    new_params.append(param.replace(annotation=body_config[name][1]))
                else:
                    new_params.append(param)

            wrapped_handler.__signature__ = sig.replace(parameters=new_params)  # type: ignore[attr-defined]
            return decorator(wrapped_handler)

        return handler_decorator

    return method_wrapper


class Router(SubRouter):
    """Enhanced SubRouter with automatic body parsing, conversions and response handling."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._prefix = kwargs.get("prefix", "")
        self._wrap_methods()

    def _wrap_methods(self) -> None:
        """Wrap HTTP methods with parsing logic."""
        for method in HTTP_METHODS:
            method_name = str(method).split(".")[-1].lower()
            if hasattr(self, method_name):
                original_method = getattr(self, method_name)
                wrapped_method = _create_method_wrapper(original_method, self._prefix)
                setattr(self, method_name, wrapped_method)
