"""Tests for anonymous note management."""

import pytest

from amarnote.core.modules.content.models import Content
from amarnote.core.modules.note.models import ANONYMOUS_ID_PREFIX, ContentProtection, NoteUpdate
from amarnote.core.modules.privacy.codec import encode_content, is_encoded
from amarnote.core.modules.privacy.models import ANONYMOUS_TAGS, ANONYMOUS_TITLE, PrivacySettings
from amarnote.errors import NotFoundError
from amarnote.utils import HOUR_MS

SECRET = Content.model_validate({"blocks": [{"type": "paragraph", "data": {"text": "গোপন কথা"}}]})


class TestCreateAnonymousNote:
    """Tests for PrivacyService.create_anonymous_note."""

    async def test_defaults(self, services):
        """Test that an anonymous note gets the prefix, tags and default title."""
        note = await services.privacy.create_anonymous_note()

        assert note.id.startswith(ANONYMOUS_ID_PREFIX)
        assert note.title == ANONYMOUS_TITLE
        assert note.tags == list(ANONYMOUS_TAGS)
        assert note.is_anonymous is True
        assert note.auto_delete_at is None
        assert note.protection == ContentProtection.NONE

    async def test_obfuscated_with_expiry(self, services):
        """Test that content is stored obfuscated and the expiry follows creation."""
        settings = PrivacySettings(encrypt_content=True, auto_delete_after=HOUR_MS)

        note = await services.privacy.create_anonymous_note("diary", SECRET, settings)

        assert is_encoded(note.content)
        assert note.protection == ContentProtection.OBFUSCATED
        assert note.auto_delete_at == note.created_at + HOUR_MS
        assert (await services.privacy.reveal_note(note.id)).content == SECRET

    async def test_reveal_does_not_persist(self, services):
        """Test that revealing leaves the stored content obfuscated."""
        note = await services.privacy.create_anonymous_note(content=SECRET, settings=PrivacySettings(encrypt_content=True))

        await services.privacy.reveal_note(note.id)

        assert is_encoded((await services.note.get_note(note.id)).content)


class TestAnonymity:
    """Tests for make_anonymous and remove_anonymity."""

    async def test_make_anonymous_rekeys(self, services):
        """Test that the note moves under an anonymous id and gains the privacy tags."""
        note = await services.note.create_note()

        anonymous = await services.privacy.make_anonymous(note.id)

        assert anonymous.id.startswith(ANONYMOUS_ID_PREFIX)
        assert anonymous.is_anonymous is True
        assert set(ANONYMOUS_TAGS) <= set(anonymous.tags)
        assert await services.note.find_note(note.id) is None

    async def test_remove_anonymity(self, services):
        """Test that the note returns to a regular id without tags or expiry."""
        note = await services.privacy.create_anonymous_note(settings=PrivacySettings(auto_delete_after=HOUR_MS))

        regular = await services.privacy.remove_anonymity(note.id)

        assert not regular.id.startswith(ANONYMOUS_ID_PREFIX)
        assert regular.is_anonymous is False
        assert regular.tags == []
        assert regular.auto_delete_at is None

    async def test_missing_note(self, services):
        with pytest.raises(NotFoundError):
            await services.privacy.make_anonymous("missing")


class TestPurgeExpired:
    """Tests for PrivacyService.purge_expired."""

    async def test_deletes_expired_anonymous_notes(self, services):
        """Test that only anonymous notes past their deadline are deleted."""
        await services.note.import_notes(
            [
                {"id": "anon_expired", "isAnonymous": True, "autoDeleteAt": 1, "content": {"blocks": []}},
                {"id": "regular", "autoDeleteAt": 1, "content": {"blocks": []}},
            ]
        )
        fresh = await services.privacy.create_anonymous_note(settings=PrivacySettings(auto_delete_after=HOUR_MS))

        result = await services.privacy.purge_expired()

        assert result.deleted == ["anon_expired"]
        assert result.failures == []
        remaining = {n.id for n in await services.note.get_all_notes()}
        assert remaining == {"regular", fresh.id}


class TestProtectionFollowsContent:
    """Tests for the protection marker after content changes."""

    async def test_plain_content_clears_protection(self, services):
        """Test that writing plain content over an obfuscated note drops the marker."""
        note = await services.privacy.create_anonymous_note(content=SECRET, settings=PrivacySettings(encrypt_content=True))

        updated = await services.note.update_note(note.id, NoteUpdate(content=SECRET))

        assert updated.protection == ContentProtection.NONE
        assert (await services.note.get_note(note.id)).protection == ContentProtection.NONE

    async def test_imported_sentinel_is_marked(self, services):
        """Test that imported obfuscated content is recognised as such."""
        encoded = encode_content(SECRET).model_dump(mode="json")

        result = await services.note.import_notes([{"id": "anon_x", "content": encoded, "protection": "none"}])

        assert result.imported[0].protection == ContentProtection.OBFUSCATED
