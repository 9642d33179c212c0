"""Plain-text views of block content: diff text, search text, reading time."""

import html
import json
import math
import re

from amarnote.core.modules.content.models import (
    Block,
    ChecklistBlock,
    CodeBlock,
    Content,
    HeaderBlock,
    ListBlock,
    ParagraphBlock,
    QuoteBlock,
    TableBlock,
)

WORDS_PER_MINUTE = 225

_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")


def block_text(block: Block) -> str:
    """Text of a single block, used both for diffs and for plain-text extraction.

    Unknown block types fall back to a deterministic JSON rendering of their data.
    """
    match block:
        case ParagraphBlock() | HeaderBlock() | QuoteBlock():
            return block.data.text
        case ListBlock():
            return " ".join(block.data.items)
        case ChecklistBlock():
            return " ".join(item.text for item in block.data.items)
        case CodeBlock():
            return block.data.code
        case TableBlock():
            return " ".join(str(cell) for row in block.data.content for cell in row)
        case _:
            return json.dumps(block.model_dump(by_alias=True)["data"], sort_keys=True, ensure_ascii=False)


def strip_html(text: str) -> str:
    return html.unescape(_TAG_RE.sub("", text))


def extract_plain_text(content: Content) -> str:
    """Space-joined text of every block with markup removed and whitespace collapsed."""
    text = " ".join(strip_html(block_text(block)) for block in content.blocks)
    return _WHITESPACE_RE.sub(" ", text).strip()


def count_words(content: Content) -> int:
    text = extract_plain_text(content)
    return len(text.split()) if text else 0


def count_chars(content: Content) -> int:
    return len(extract_plain_text(content))


def calculate_reading_time(content: Content) -> int:
    """Minutes needed to read the note; 0 for an empty note."""
    words = count_words(content)
    if words == 0:
        return 0
    return math.ceil(words / WORDS_PER_MINUTE)
