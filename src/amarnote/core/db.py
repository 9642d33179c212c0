from typing import Any, Self

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StoredModel(BaseModel):
    """Base for records persisted in the key-value store.

    Attributes are snake_case in Python and camelCase on the wire, matching the
    editor's export format.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
        json_schema_serialization_defaults_required=True,
    )

    def to_store(self) -> dict[str, Any]:
        """Convert the model to a JSON-compatible dictionary for storage."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_store(cls, value: dict[str, Any]) -> Self:
        return cls.model_validate(value)

    @classmethod
    def from_store_many(cls, values: list[dict[str, Any] | None]) -> list[Self]:
        """Validate a batch read, skipping keys that vanished in between."""
        return [cls.model_validate(value) for value in values if value is not None]
