from enum import StrEnum

from pydantic import BaseModel


class ExportFormat(StrEnum):
    MARKDOWN = "md"
    JSON = "json"
    TEXT = "txt"


MEDIA_TYPES = {
    ExportFormat.MARKDOWN: "text/markdown",
    ExportFormat.JSON: "application/json",
    ExportFormat.TEXT: "text/plain",
}


class ExportFile(BaseModel):
    """Rendered export, ready to be downloaded."""

    filename: str
    media_type: str
    content: str
