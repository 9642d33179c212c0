from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        app.openapi_schema = get_openapi(
            title="AmarNote API",
            version="0.1.0",
            summary="Local note store with version history, tasks and private notes",
            routes=app.routes,
        )
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Note not found: 3f2a9c", "type": "not_found"},
                {"message": "Version index 7 out of range for note 3f2a9c (2 versions)", "type": "out_of_range"},
                {"message": "Storage quota exceeded", "type": "storage_quota_exceeded"},
            ]
        }
    }


class CountResponse(BaseModel):
    """Number of notes affected by a bulk operation."""

    count: int
