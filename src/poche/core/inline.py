"""Inline tokenizer: recursive prefix matching of emphasis, code, links, and images"""

import re
from typing import Callable, Optional

from poche.core.models import CONTAINER_TYPES, InlineToken, InlineTypeEnum


# Every pattern is used with re.match, so it is anchored at the start of the
# remaining text and table order is precedence.
IMAGE_RE = re.compile(r'!\[([^\]]*)\]\(([^)]+)\)')
LINK_RE = re.compile(r'\[([^\]]+)\]\(([^)]+)\)')
STRONG_STAR_RE = re.compile(r'\*\*((?:[^*]|\*[^*]+\*)+?)\*\*')
STRONG_UNDERSCORE_RE = re.compile(r'__([^_]+)__')
STRIKE_RE = re.compile(r'~~([^~]+)~~')
EM_STAR_RE = re.compile(r'\*([^*]+)\*')
EM_UNDERSCORE_RE = re.compile(r'_([^_]+)_')
CODE_RE = re.compile(r'`([^`]+)`')
TEXT_RE = re.compile(r'[^*_`\[!~]+')


def _image(m: re.Match) -> InlineToken:
    return InlineToken(type=InlineTypeEnum.image, alt=m.group(1), src=m.group(2))


def _link(m: re.Match) -> InlineToken:
    return InlineToken(
        type=InlineTypeEnum.link,
        content=m.group(1),
        href=m.group(2),
        children=parse_inline(m.group(1)),
    )


def _container(kind: InlineTypeEnum) -> Callable[[re.Match], InlineToken]:
    def build(m: re.Match) -> InlineToken:
        return InlineToken(type=kind, content=m.group(1), children=parse_inline(m.group(1)))
    return build


def _leaf(kind: InlineTypeEnum, group: int) -> Callable[[re.Match], InlineToken]:
    def build(m: re.Match) -> InlineToken:
        return InlineToken(type=kind, content=m.group(group))
    return build


INLINE_RULES: tuple[tuple[re.Pattern, Callable[[re.Match], InlineToken]], ...] = (
    (IMAGE_RE,             _image),
    (LINK_RE,              _link),
    (STRONG_STAR_RE,       _container(InlineTypeEnum.strong)),
    (STRONG_UNDERSCORE_RE, _container(InlineTypeEnum.strong)),
    (STRIKE_RE,            _container(InlineTypeEnum.strikethrough)),
    (EM_STAR_RE,           _container(InlineTypeEnum.em)),
    (EM_UNDERSCORE_RE,     _container(InlineTypeEnum.em)),
    (CODE_RE,              _leaf(InlineTypeEnum.code, 1)),
    (TEXT_RE,              _leaf(InlineTypeEnum.text, 0)),
)


def _next_token(remaining: str) -> tuple[InlineToken, int]:
    """Return the first matching token at the head of remaining and the length it consumed."""
    for pattern, build in INLINE_RULES:
        m = pattern.match(remaining)
        if m:
            return build(m), m.end()
    # A lone delimiter that opens nothing is literal text.
    return InlineToken(type=InlineTypeEnum.text, content=remaining[0]), 1


def parse_inline(text: str) -> list[InlineToken]:
    """Parse inline markdown into a token tree. Total: any string yields a token list."""
    tokens: list[InlineToken] = []
    remaining = text or ''
    while remaining:
        token, consumed = _next_token(remaining)
        tokens.append(token)
        remaining = remaining[consumed:]
    return tokens


def plain_text(tokens: Optional[list[InlineToken]]) -> str:
    """Concatenate the visible text of an inline token tree, dropping markup and images."""
    parts: list[str] = []
    for token in tokens or []:
        if token.type in CONTAINER_TYPES:
            parts.append(plain_text(token.children))
        elif token.type in (InlineTypeEnum.text, InlineTypeEnum.code):
            parts.append(token.content)
    return ''.join(parts)
