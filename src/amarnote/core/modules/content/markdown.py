"""Markdown conversion for block content.

The conversion is lossy by nature of the format: blocks without a Markdown
equivalent (math, drawings, embeds, custom widgets) degrade to a link or to
their text, and adjacent lists of the same kind merge on the way back.
"""

import re

from amarnote.core.modules.content.models import (
    Block,
    ChecklistBlock,
    ChecklistData,
    ChecklistItem,
    CodeBlock,
    CodeData,
    Content,
    EmbedBlock,
    HeaderBlock,
    HeaderData,
    ListBlock,
    ListData,
    ListStyle,
    ParagraphBlock,
    QuoteBlock,
    QuoteData,
    TableBlock,
    TextData,
    UnknownBlock,
)
from amarnote.utils import now_ms

MAX_HEADER_LEVEL = 4
FENCE = "```"

_HEADER_RE = re.compile(r"^(#+)")
_BULLET_RE = re.compile(r"^[-*+](?:\s|$)")
_CHECKLIST_RE = re.compile(r"^\[([xX ])\](?:\s+(.*))?$")
_ORDERED_RE = re.compile(r"^\d+\.(?:\s|$)")


def block_to_markdown(block: Block) -> str:
    match block:
        case ParagraphBlock():
            return block.data.text
        case HeaderBlock():
            return f"{'#' * block.data.level} {block.data.text}"
        case ListBlock():
            if block.data.style == ListStyle.ORDERED:
                return "\n".join(f"{i}. {item}" for i, item in enumerate(block.data.items, start=1))
            return "\n".join(f"- {item}" for item in block.data.items)
        case ChecklistBlock():
            return "\n".join(f"- [{'x' if item.checked else ' '}] {item.text}" for item in block.data.items)
        case QuoteBlock():
            return f"> {block.data.text}"
        case CodeBlock():
            return f"{FENCE}{block.data.language}\n{block.data.code}\n{FENCE}"
        case TableBlock():
            rows = block.data.content
            if not rows:
                return ""
            lines = ["| " + " | ".join(str(cell) for cell in row) + " |" for row in rows]
            lines.insert(1, "| " + " | ".join("---" for _ in rows[0]) + " |")
            return "\n".join(lines)
        case EmbedBlock():
            return f"[Embedded Content]({block.data.source})" if block.data.source else ""
        case UnknownBlock():
            text = block.data.get("text")
            return text if isinstance(text, str) else ""
    return ""


def to_markdown(content: Content) -> str:
    """Render blocks as Markdown, separated by blank lines. Blocks that render empty are dropped."""
    parts = [block_to_markdown(block) for block in content.blocks]
    return "\n\n".join(part for part in parts if part)


def from_markdown(markdown: str) -> Content:
    """Parse Markdown line by line into blocks.

    Fenced code keeps its interior lines verbatim, contiguous list items of
    the same kind merge into one block, every other non-blank line becomes a
    paragraph.
    """
    blocks: list[Block] = []
    code_lines: list[str] = []
    code_language = ""
    in_code = False

    for raw_line in markdown.splitlines():
        line = raw_line.strip()

        if line.startswith(FENCE):
            if in_code:
                blocks.append(CodeBlock(data=CodeData(code="\n".join(code_lines), language=code_language)))
                in_code = False
            else:
                in_code = True
                code_language = line[len(FENCE) :].strip()
                code_lines = []
            continue

        if in_code:
            code_lines.append(raw_line)
            continue

        if not line:
            continue

        header = _HEADER_RE.match(line)
        if header:
            level = len(header.group(1))
            blocks.append(HeaderBlock(data=HeaderData(text=line[level:].strip(), level=min(level, MAX_HEADER_LEVEL))))
            continue

        if line.startswith(">"):
            blocks.append(QuoteBlock(data=QuoteData(text=line[1:].strip())))
            continue

        if _BULLET_RE.match(line):
            text = line[1:].strip()
            checklist = _CHECKLIST_RE.match(text)
            last = blocks[-1] if blocks else None
            if checklist:
                item = ChecklistItem(text=checklist.group(2) or "", checked=checklist.group(1).lower() == "x")
                if isinstance(last, ChecklistBlock):
                    last.data.items.append(item)
                else:
                    blocks.append(ChecklistBlock(data=ChecklistData(items=[item])))
            elif isinstance(last, ListBlock) and last.data.style == ListStyle.UNORDERED:
                last.data.items.append(text)
            else:
                blocks.append(ListBlock(data=ListData(style=ListStyle.UNORDERED, items=[text])))
            continue

        if _ORDERED_RE.match(line):
            text = _ORDERED_RE.sub("", line, count=1).strip()
            last = blocks[-1] if blocks else None
            if isinstance(last, ListBlock) and last.data.style == ListStyle.ORDERED:
                last.data.items.append(text)
            else:
                blocks.append(ListBlock(data=ListData(style=ListStyle.ORDERED, items=[text])))
            continue

        blocks.append(ParagraphBlock(data=TextData(text=line)))

    # An unterminated fence still keeps what was typed
    if in_code:
        blocks.append(CodeBlock(data=CodeData(code="\n".join(code_lines), language=code_language)))

    return Content(time=now_ms(), blocks=blocks)


def markdown_title(content: Content, fallback: str) -> str:
    """First non-empty header text, or the fallback."""
    for block in content.blocks:
        if isinstance(block, HeaderBlock) and block.data.text:
            return block.data.text
    return fallback
