"""Block and inline token models produced by the markdown tokenizers"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BlockTypeEnum(str, Enum):
    """Kinds of block-level token a markdown document is split into"""
    heading = "heading"
    paragraph = "paragraph"
    code_block = "code_block"
    blockquote = "blockquote"
    list = "list"
    hr = "hr"
    table = "table"
    image = "image"


class InlineTypeEnum(str, Enum):
    """Kinds of inline token found inside a block's text"""
    text = "text"
    strong = "strong"
    em = "em"
    code = "code"
    link = "link"
    image = "image"
    strikethrough = "strikethrough"


class Token(BaseModel):
    """A block-level token; kind-specific fields stay None for other kinds."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: BlockTypeEnum
    content: str = ""
    level: Optional[int] = None                 # heading level (1-6)
    ordered: Optional[bool] = None              # lists
    items: Optional[list[str]] = None           # lists; raw item text, not inline-parsed
    rows: Optional[list[list[str]]] = None      # tables
    has_header: Optional[bool] = Field(default=None, alias="hasHeader")
    src: Optional[str] = None                   # images
    alt: Optional[str] = None                   # images
    language: Optional[str] = None              # fenced code blocks
    map: Optional[tuple[int, int]] = None       # [start, end) source lines consumed


class InlineToken(BaseModel):
    """An inline token; containers keep their raw inner text in content."""
    model_config = ConfigDict(frozen=True)

    type: InlineTypeEnum
    content: str = ""
    children: Optional[list["InlineToken"]] = None
    href: Optional[str] = None
    src: Optional[str] = None
    alt: Optional[str] = None


CONTAINER_TYPES = frozenset({
    InlineTypeEnum.strong,
    InlineTypeEnum.em,
    InlineTypeEnum.link,
    InlineTypeEnum.strikethrough,
})
