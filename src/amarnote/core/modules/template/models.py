from pydantic import Field

from amarnote.core.db import StoredModel
from amarnote.core.modules.content.models import Content
from amarnote.utils import now_ms

TEMPLATE_KEY_PREFIX = "template_"


def template_key(template_id: str) -> str:
    return f"{TEMPLATE_KEY_PREFIX}{template_id}"


class CustomTemplate(StoredModel):
    """Reusable note skeleton saved from an existing note."""

    id: str
    title: str
    icon: str = ""
    content: Content
    created_at: int = Field(default_factory=now_ms)
