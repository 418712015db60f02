"""Render-ready document tree: block tokens with inline content parsed and URLs resolved"""

import logging
from typing import Optional

from pydantic import BaseModel, Field

from poche.core.inline import parse_inline
from poche.core.models import BlockTypeEnum, InlineToken, InlineTypeEnum, Token
from poche.core.tokenize import tokenize
from poche.core.utils.entities import decode_html_entities
from poche.core.utils.urls import is_valid_image_url, resolve_url


logger = logging.getLogger(__name__)

INLINE_BLOCKS = {BlockTypeEnum.heading, BlockTypeEnum.paragraph}
# Quotes nested deeper than this keep their remaining content as plain text.
MAX_QUOTE_DEPTH = 32


class RenderBlock(BaseModel):
    """A block token plus the inline trees a renderer walks to draw it."""
    token: Token
    inline: Optional[list[InlineToken]] = None          # heading, paragraph
    items: Optional[list[list[InlineToken]]] = None     # list items
    rows: Optional[list[list[list[InlineToken]]]] = None  # table cells
    children: Optional[list["RenderBlock"]] = None      # blockquote body


class Document(BaseModel):
    base_url: Optional[str] = None
    blocks: list[RenderBlock] = Field(default_factory=list)


class _Preparer:
    """Walks tokens for one build_document call; holds only that call's options."""

    def __init__(self, base_url: Optional[str], decode_entities: bool):
        self.base_url = base_url
        self.decode_entities = decode_entities

    def _src(self, src: Optional[str]) -> Optional[str]:
        """Resolved image src, or None when the source should not be rendered."""
        if not is_valid_image_url(src):
            logger.debug("Dropped invalid image source %r", src)
            return None
        url = resolve_url(src, self.base_url)
        if url is None:
            logger.debug("Dropped unresolvable image source %r", src)
        return url

    def inline(self, text: str) -> list[InlineToken]:
        return self._walk(parse_inline(text))

    def _walk(self, tokens: list[InlineToken]) -> list[InlineToken]:
        prepared: list[InlineToken] = []
        for token in tokens:
            update: dict = {}
            if token.type == InlineTypeEnum.image:
                src = self._src(token.src)
                if src is None:
                    continue
                update["src"] = src
            elif token.type == InlineTypeEnum.link:
                update["href"] = resolve_url(token.href, self.base_url)
            elif token.type == InlineTypeEnum.text and self.decode_entities:
                update["content"] = decode_html_entities(token.content) or token.content
            if token.children is not None:
                update["children"] = self._walk(token.children)
            prepared.append(token.model_copy(update=update) if update else token)
        return prepared

    def blocks(self, tokens: list[Token], depth: int = 0) -> list[RenderBlock]:
        prepared: list[RenderBlock] = []
        for token in tokens:
            block = self._block(token, depth)
            if block is not None:
                prepared.append(block)
        return prepared

    def _block(self, token: Token, depth: int) -> Optional[RenderBlock]:
        if token.type in INLINE_BLOCKS:
            return RenderBlock(token=token, inline=self.inline(token.content))
        if token.type == BlockTypeEnum.list:
            return RenderBlock(token=token, items=[self.inline(item) for item in token.items or []])
        if token.type == BlockTypeEnum.table:
            rows = [[self.inline(cell) for cell in row] for row in token.rows or []]
            return RenderBlock(token=token, rows=rows)
        if token.type == BlockTypeEnum.blockquote:
            return RenderBlock(token=token, children=self._quote(token.content, depth + 1))
        if token.type == BlockTypeEnum.image:
            src = self._src(token.src)
            if src is None:
                return None
            return RenderBlock(token=token.model_copy(update={"src": src}))
        return RenderBlock(token=token)

    def _quote(self, content: str, depth: int) -> list[RenderBlock]:
        if depth < MAX_QUOTE_DEPTH:
            return self.blocks(tokenize(content), depth)
        logger.debug("Blockquote nesting exceeds %d levels; keeping the rest as text", MAX_QUOTE_DEPTH)
        text = Token(type=BlockTypeEnum.paragraph, content=content)
        return [RenderBlock(token=text, inline=[InlineToken(type=InlineTypeEnum.text, content=content)])]


def build_document(markdown: str, base_url: Optional[str] = None, decode_entities: bool = False) -> Document:
    """Tokenize markdown and prepare every block for rendering.

    Textual blocks, list items, and table cells are inline-parsed; blockquote
    bodies are tokenized again as nested documents. Link targets and image
    sources are resolved against base_url; a link that cannot be resolved
    gets href None, and invalid or unresolvable images are dropped. Quotes
    nested past MAX_QUOTE_DEPTH end in a plain-text paragraph.
    """
    preparer = _Preparer(base_url, decode_entities)
    return Document(base_url=base_url, blocks=preparer.blocks(tokenize(markdown)))
