import structlog

from amarnote.core.core import Service
from amarnote.core.modules.note.models import Note
from amarnote.core.modules.template.models import TEMPLATE_KEY_PREFIX, CustomTemplate, template_key
from amarnote.errors import NotFoundError
from amarnote.utils import generate_id, now_ms

logger = structlog.get_logger(__name__)


class TemplateService(Service):
    """Custom templates stored next to notes in the key-value store."""

    async def create_template_from_note(self, note_id: str) -> CustomTemplate:
        note = await self.core.services.note.get_note(note_id)
        template = CustomTemplate(
            id=generate_id(),
            title=note.title,
            icon=note.icon,
            content=note.content.model_copy(deep=True),
        )
        await self.store.set(template_key(template.id), template.to_store())
        logger.info("template_created", template_id=template.id, note_id=note_id)
        return template

    async def get_template(self, template_id: str) -> CustomTemplate:
        value = await self.store.get(template_key(template_id))
        if value is None:
            raise NotFoundError(f"Template not found: {template_id}")
        return CustomTemplate.from_store(value)

    async def list_templates(self) -> list[CustomTemplate]:
        """Newest first."""
        keys = await self.store.list_keys(TEMPLATE_KEY_PREFIX)
        if not keys:
            return []
        templates = CustomTemplate.from_store_many(await self.store.get_many(keys))
        return sorted(templates, key=lambda template: template.created_at, reverse=True)

    async def delete_template(self, template_id: str) -> None:
        await self.get_template(template_id)
        await self.store.delete(template_key(template_id))
        logger.info("template_deleted", template_id=template_id)

    async def create_note_from_template(self, template_id: str) -> Note:
        template = await self.get_template(template_id)
        notes = self.core.services.note
        now = now_ms()
        note = Note(
            id=notes.new_note_id(),
            title=template.title,
            icon=template.icon,
            content=template.content.model_copy(update={"time": now}, deep=True),
            created_at=now,
            updated_at=now,
        )
        return await notes.insert_note(note)
