"""Tests for custom templates."""

import pytest

from amarnote.core.modules.content.models import Content
from amarnote.core.modules.note.models import NoteUpdate
from amarnote.core.modules.template.models import template_key
from amarnote.errors import NotFoundError

CONTENT = Content.model_validate(
    {"time": 5, "blocks": [{"type": "checklist", "data": {"items": [{"text": "morning walk"}]}}]}
)


@pytest.fixture
async def template(services):
    note = await services.note.create_note()
    await services.note.update_note(note.id, NoteUpdate(title="Routine", icon="🌅", content=CONTENT))
    return await services.template.create_template_from_note(note.id)


class TestTemplates:
    """Tests for TemplateService."""

    async def test_create_from_note(self, template, store):
        """Test that a template copies the note's title, icon and content."""
        assert (template.title, template.icon) == ("Routine", "🌅")
        assert template.content.same_blocks(CONTENT)
        assert await store.get(template_key(template.id)) is not None

    async def test_templates_are_not_notes(self, services, template):
        """Test that templates do not show up among notes."""
        assert len(await services.note.get_all_notes()) == 1
        assert [t.id for t in await services.template.list_templates()] == [template.id]

    async def test_note_from_template(self, services, template):
        """Test that a new note starts from the template's content."""
        note = await services.template.create_note_from_template(template.id)

        assert note.title == "Routine"
        assert note.content.same_blocks(CONTENT)
        assert note.content.time == note.created_at
        assert note.history == []

    async def test_delete(self, services, template):
        await services.template.delete_template(template.id)

        assert await services.template.list_templates() == []
        with pytest.raises(NotFoundError):
            await services.template.get_template(template.id)

    async def test_missing_note(self, services):
        with pytest.raises(NotFoundError):
            await services.template.create_template_from_note("missing")
