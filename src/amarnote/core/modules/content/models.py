"""Block-tree content produced and consumed by the editor surface."""

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator


class BlockType(StrEnum):
    """Block types the engine understands natively."""

    PARAGRAPH = "paragraph"
    HEADER = "header"
    LIST = "list"
    CHECKLIST = "checklist"
    QUOTE = "quote"
    CODE = "code"
    TABLE = "table"
    EMBED = "embed"


class ListStyle(StrEnum):
    ORDERED = "ordered"
    UNORDERED = "unordered"


class BlockData(BaseModel):
    """Base for per-type block data. Unknown editor properties are kept as-is."""

    model_config = ConfigDict(extra="allow")


class TextData(BlockData):
    text: str = ""


class HeaderData(BlockData):
    text: str = ""
    level: int = Field(1, ge=1, le=6)


class ListData(BlockData):
    style: ListStyle = ListStyle.UNORDERED
    items: list[str] = Field(default_factory=list)

    @field_validator("items", mode="before")
    @classmethod
    def flatten_nested_items(cls, value: Any) -> Any:
        # Nested-list editor output stores items as {"content": ..., "items": [...]}
        if isinstance(value, list):
            return [item.get("content", "") if isinstance(item, dict) else item for item in value]
        return value


class ChecklistItem(BaseModel):
    text: str = ""
    checked: bool = False


class ChecklistData(BlockData):
    items: list[ChecklistItem] = Field(default_factory=list)


class QuoteData(BlockData):
    text: str = ""
    caption: str = ""


class CodeData(BlockData):
    code: str = ""
    language: str = ""


class TableData(BlockData):
    content: list[list[str]] = Field(default_factory=list)
    with_headings: bool = Field(False, alias="withHeadings")

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class EmbedData(BlockData):
    service: str = ""
    source: str = ""
    embed: str = ""
    caption: str = ""


class BaseBlock(BaseModel):
    id: str | None = None
    tunes: dict[str, Any] | None = None


class ParagraphBlock(BaseBlock):
    type: Literal["paragraph"] = "paragraph"
    data: TextData = Field(default_factory=TextData)


class HeaderBlock(BaseBlock):
    type: Literal["header"] = "header"
    data: HeaderData = Field(default_factory=HeaderData)


class ListBlock(BaseBlock):
    type: Literal["list"] = "list"
    data: ListData = Field(default_factory=ListData)


class ChecklistBlock(BaseBlock):
    type: Literal["checklist"] = "checklist"
    data: ChecklistData = Field(default_factory=ChecklistData)


class QuoteBlock(BaseBlock):
    type: Literal["quote"] = "quote"
    data: QuoteData = Field(default_factory=QuoteData)


class CodeBlock(BaseBlock):
    type: Literal["code"] = "code"
    data: CodeData = Field(default_factory=CodeData)


class TableBlock(BaseBlock):
    type: Literal["table"] = "table"
    data: TableData = Field(default_factory=TableData)


class EmbedBlock(BaseBlock):
    type: Literal["embed"] = "embed"
    data: EmbedData = Field(default_factory=EmbedData)


class UnknownBlock(BaseBlock):
    """Any block type without a native model (math, drawing, custom widgets)."""

    type: str
    data: dict[str, Any] = Field(default_factory=dict)


UNKNOWN_TAG = "unknown"
KNOWN_BLOCK_TYPES = frozenset(block_type.value for block_type in BlockType)


def _block_tag(value: Any) -> str:
    block_type = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    if isinstance(value, UnknownBlock) or block_type not in KNOWN_BLOCK_TYPES:
        return UNKNOWN_TAG
    return str(block_type)


Block = Annotated[
    Annotated[ParagraphBlock, Tag("paragraph")]
    | Annotated[HeaderBlock, Tag("header")]
    | Annotated[ListBlock, Tag("list")]
    | Annotated[ChecklistBlock, Tag("checklist")]
    | Annotated[QuoteBlock, Tag("quote")]
    | Annotated[CodeBlock, Tag("code")]
    | Annotated[TableBlock, Tag("table")]
    | Annotated[EmbedBlock, Tag("embed")]
    | Annotated[UnknownBlock, Tag(UNKNOWN_TAG)],
    Discriminator(_block_tag),
]


class Content(BaseModel):
    """Ordered block tree; the single source of truth for note text."""

    version: str | None = None
    time: int | None = None
    blocks: list[Block] = Field(default_factory=list)

    def same_blocks(self, other: "Content") -> bool:
        """Structural equality of the blocks, ignoring editor save metadata."""
        return [b.model_dump(by_alias=True) for b in self.blocks] == [b.model_dump(by_alias=True) for b in other.blocks]


def empty_content() -> Content:
    return Content(blocks=[ParagraphBlock()])
