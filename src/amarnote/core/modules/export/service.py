"""Export notes to Markdown, JSON or plain text, and import notes from files."""

import json
from pathlib import PurePath
from typing import Any

import structlog

from amarnote.core.core import Service
from amarnote.core.modules.content.markdown import from_markdown, markdown_title, to_markdown
from amarnote.core.modules.content.text import extract_plain_text
from amarnote.core.modules.export.models import MEDIA_TYPES, ExportFile, ExportFormat
from amarnote.core.modules.note.models import DEFAULT_TITLE, ImportResult, Note
from amarnote.errors import ValidationError
from amarnote.utils import sanitize_filename

logger = structlog.get_logger(__name__)

NOTE_SEPARATOR = "\n\n---\n\n"
BULK_EXPORT_NAME = "amarnote-export"


def render_notes(notes: Note | list[Note], export_format: ExportFormat) -> str:
    """Render one note or several.

    JSON keeps the stored camelCase shape: an object for a single note, an
    array otherwise. Text formats join notes with a horizontal rule.
    """
    if export_format == ExportFormat.JSON:
        data = notes.to_store() if isinstance(notes, Note) else [note.to_store() for note in notes]
        return json.dumps(data, indent=2, ensure_ascii=False)

    notes = [notes] if isinstance(notes, Note) else notes
    if export_format == ExportFormat.TEXT:
        return NOTE_SEPARATOR.join(extract_plain_text(note.content) for note in notes)
    return NOTE_SEPARATOR.join(to_markdown(note.content) for note in notes)


def parse_import_file(filename: str, text: str, markdown_note_id: str) -> list[Any]:
    """Note-shaped entries from an uploaded file's text.

    A Markdown file becomes a single note titled after its first header, or
    after the file name when it has none.
    """
    path = PurePath(filename)
    suffix = path.suffix.lower()

    if suffix == ".md":
        content = from_markdown(text)
        return [
            {
                "id": markdown_note_id,
                "title": markdown_title(content, path.stem or DEFAULT_TITLE),
                "content": content.model_dump(mode="json", by_alias=True),
            }
        ]

    if suffix == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {filename}: {e.msg}") from None
        entries = data
        if isinstance(data, dict):
            # A single exported note is an object of its own
            entries = data.get("notes", [data] if "id" in data else None)
        if not isinstance(entries, list):
            raise ValidationError("Invalid file format: expected a list of notes or an object with a 'notes' list")
        return entries

    raise ValidationError(f"Unsupported file format: {suffix or filename}")


class ExportService(Service):
    async def export_notes(self, note_ids: list[str] | None, export_format: ExportFormat) -> ExportFile:
        """Export the given notes, or every non-trashed note when no ids are given."""
        notes_service = self.core.services.note
        if note_ids:
            notes = [await notes_service.get_note(note_id) for note_id in note_ids]
        else:
            notes = [note for note in await notes_service.get_all_notes() if not note.is_trashed]

        if len(notes) == 1:
            filename = sanitize_filename(f"{notes[0].title}.{export_format.value}")
            content = render_notes(notes[0], export_format)
        else:
            filename = f"{BULK_EXPORT_NAME}.{export_format.value}"
            content = render_notes(notes, export_format)

        logger.debug("notes_exported", count=len(notes), format=export_format.value)
        return ExportFile(filename=filename, media_type=MEDIA_TYPES[export_format], content=content)

    async def import_file(self, filename: str, text: str) -> ImportResult:
        entries = parse_import_file(filename, text, self.core.services.note.new_note_id())
        return await self.core.services.note.import_notes(entries)
