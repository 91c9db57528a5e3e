"""Upload and form submission endpoints.

``/files/avatar`` takes the raw image bytes as the request body (for example
``curl --data-binary @photo.jpg``) and gates them through a JPEG
``FileUpload``. ``/forms/profile`` takes a URL-encoded form.
"""

from typing import Annotated

from pydantic import BaseModel

from formcoding.core.logger import LogIcon, logger
from formcoding.core.router import Router
from formcoding.multipart.file_types import FileType, ImageKind
from formcoding.multipart.file_upload import FileUpload
from formcoding.multipart.form_conversion import FormConversion

router = Router(__file__, prefix="/")


class UploadResponse(BaseModel):
    """Accepted upload summary."""

    field: str
    filename: str
    content_type: str
    size: int


class Profile(BaseModel):
    """Profile form submitted as application/x-www-form-urlencoded."""

    name: str
    bio: str | None = None
    age: int | None = None
    newsletter: bool = False
    tags: list[str] = []


avatar_upload = FileUpload("avatar", "profile.jpg", FileType.image(ImageKind.JPEG))
profile_form = FormConversion(Profile)


@router.post("/files/avatar")
async def upload_avatar(avatar: Annotated[bytes, avatar_upload]) -> UploadResponse:
    logger.info("Avatar accepted", icon=LogIcon.UPLOAD, size=len(avatar))
    return UploadResponse(
        field=avatar_upload.field_name,
        filename=avatar_upload.filename,
        content_type=avatar_upload.file_type.content_type,
        size=len(avatar),
    )


@router.post("/forms/profile")
async def submit_profile(profile: Annotated[Profile, profile_form]) -> Profile:
    logger.info("Profile form accepted", icon=LogIcon.FORM, name=profile.name)
    return profile
