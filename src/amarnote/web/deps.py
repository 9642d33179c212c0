from typing import Annotated, cast

from fastapi import Depends, Request, UploadFile
from pydantic import BaseModel

from amarnote.app import App
from amarnote.errors import ValidationError


class TextUpload(BaseModel):
    """An uploaded file decoded as UTF-8 text."""

    filename: str
    text: str


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def read_text_upload(file: UploadFile) -> TextUpload:
    """Decode an uploaded file, tolerating a byte-order mark."""
    raw = await file.read()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise ValidationError(f"File is not UTF-8 text: {file.filename}") from None
    return TextUpload(filename=file.filename or "", text=text)


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
TextUploadDep = Annotated[TextUpload, Depends(read_text_upload)]
