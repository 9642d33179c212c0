"""Reversible obfuscation of note content.

The payload is plain base64 of the content's JSON. It hides text from casual
viewing (note lists, shoulder surfing) and anyone holding the payload can
read it back. It is not a security boundary.
"""

import base64
import binascii
import json
import re

import structlog

from amarnote.core.modules.content.models import Content, ParagraphBlock, TextData
from amarnote.errors import EncodingError

logger = structlog.get_logger(__name__)

SENTINEL_RE = re.compile(r"^\[ENCRYPTED:(.+)\]$", re.DOTALL)


def encode_content(content: Content) -> Content:
    """Wrap the whole content into a single sentinel paragraph."""
    try:
        payload = json.dumps(content.model_dump(mode="json", by_alias=True), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Content cannot be obfuscated: {e}") from e
    encoded = base64.b64encode(payload.encode("utf-8")).decode("ascii")
    return Content(
        version=content.version,
        time=content.time,
        blocks=[ParagraphBlock(data=TextData(text=f"[ENCRYPTED:{encoded}]"))],
    )


def _payload(content: Content) -> str | None:
    if len(content.blocks) != 1 or not isinstance(content.blocks[0], ParagraphBlock):
        return None
    match = SENTINEL_RE.match(content.blocks[0].data.text)
    return match.group(1) if match else None


def is_encoded(content: Content) -> bool:
    return _payload(content) is not None


def decode_content(content: Content) -> Content:
    """Unwrap obfuscated content.

    Content that is not wrapped, or whose payload is corrupt, comes back
    unchanged so a bad payload never destroys the note.
    """
    payload = _payload(content)
    if payload is None:
        return content
    try:
        raw = base64.b64decode(payload, validate=True).decode("utf-8")
        return Content.model_validate(json.loads(raw))
    except (binascii.Error, ValueError) as e:
        logger.warning("content_decode_failed", error=str(e))
        return content
