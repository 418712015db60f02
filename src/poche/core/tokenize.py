"""Block tokenizer: split a markdown document into an ordered list of block tokens

Lines are scanned once with a cursor. At each non-blank line the rules in
BLOCK_RULES are tried in order and the first whose predicate accepts the line
consumes one or more lines. A rule may consume lines without emitting a token
(an all-separator table).
"""

import logging
import re
from typing import Callable, Optional

from poche.core.models import BlockTypeEnum, Token


logger = logging.getLogger(__name__)

HR_RE = re.compile(r'^(\*{3,}|-{3,}|_{3,})$')
HEADING_RE = re.compile(r'^(#{1,6})\s+(.+)$')
HEADING_START_RE = re.compile(r'^#{1,6}\s+')
FENCE = '```'
INDENT_RE = re.compile(r'^(\s{4}|\t)')
QUOTE_MARK_RE = re.compile(r'^>\s?')
QUOTE_BREAK_RE = re.compile(r'^[#\-*\d]')
BULLET_RE = re.compile(r'^\s*[-*+]\s+')
ORDERED_RE = re.compile(r'^\s*\d+\.\s+')
TABLE_SEPARATOR_RE = re.compile(r'^\|?[\s\-:|]+\|?$')
IMAGE_RE = re.compile(r'^!\[([^\]]*)\]\(([^)]+)\)$')

# (start, end, token or None); end is exclusive
Consumed = tuple[int, int, Optional[Token]]
Rule = tuple[str, Callable[[str], bool], Callable[[list[str], int], Consumed]]


def _is_blank(line: str) -> bool:
    return line.strip() == ''


def _is_hr(line: str) -> bool:
    return bool(HR_RE.match(line.strip()))


def _is_fence(line: str) -> bool:
    return line.strip().startswith(FENCE)


def _is_quote(line: str) -> bool:
    return line.strip().startswith('>')


def _is_table_row(line: str) -> bool:
    return '|' in line


def _is_image(line: str) -> bool:
    return bool(IMAGE_RE.match(line.strip()))


def _starts_other_block(line: str) -> bool:
    """True for lines that end a paragraph: heading, fence, quote, list, or hr starts."""
    return bool(
        HEADING_START_RE.match(line)
        or _is_fence(line)
        or _is_quote(line)
        or BULLET_RE.match(line)
        or ORDERED_RE.match(line)
        or HR_RE.match(line)
    )


def _hr(lines: list[str], i: int) -> Consumed:
    return i, i + 1, Token(type=BlockTypeEnum.hr, map=(i, i + 1))


def _heading(lines: list[str], i: int) -> Consumed:
    m = HEADING_RE.match(lines[i])
    return i, i + 1, Token(
        type=BlockTypeEnum.heading,
        level=len(m.group(1)),
        content=m.group(2).strip(),
        map=(i, i + 1),
    )


def _fenced_code(lines: list[str], i: int) -> Consumed:
    start = i
    language = lines[i].strip()[len(FENCE):].strip() or None
    i += 1
    code: list[str] = []
    while i < len(lines) and not _is_fence(lines[i]):
        code.append(lines[i])
        i += 1
    if i < len(lines):
        i += 1  # closing fence
    else:
        logger.debug("Unterminated code fence at line %d runs to end of input", start)
    return start, i, Token(
        type=BlockTypeEnum.code_block,
        content='\n'.join(code),
        language=language,
        map=(start, i),
    )


def _indented_code(lines: list[str], i: int) -> Consumed:
    start = i
    code: list[str] = []
    while i < len(lines) and (INDENT_RE.match(lines[i]) or _is_blank(lines[i])):
        code.append(INDENT_RE.sub('', lines[i], count=1))
        i += 1
    return start, i, Token(
        type=BlockTypeEnum.code_block,
        content='\n'.join(code).strip(),
        map=(start, i),
    )


def _blockquote(lines: list[str], i: int) -> Consumed:
    start = i
    quoted: list[str] = []
    while i < len(lines):
        line = lines[i]
        continues = quoted and not _is_blank(line) and not QUOTE_BREAK_RE.match(line)
        if not (_is_quote(line) or continues):
            break
        quoted.append(QUOTE_MARK_RE.sub('', line, count=1))
        i += 1
    return start, i, Token(
        type=BlockTypeEnum.blockquote,
        content='\n'.join(quoted).strip(),
        map=(start, i),
    )


def _list_of(marker: re.Pattern, ordered: bool) -> Callable[[list[str], int], Consumed]:
    """Build a handler that collects consecutive lines starting with marker."""
    def handler(lines: list[str], i: int) -> Consumed:
        start = i
        items: list[str] = []
        while i < len(lines) and marker.match(lines[i]):
            items.append(marker.sub('', lines[i], count=1).strip())
            i += 1
        return start, i, Token(
            type=BlockTypeEnum.list,
            ordered=ordered,
            items=items,
            map=(start, i),
        )
    return handler


def _split_cells(row: str) -> list[str]:
    """Split a table row on pipes; an empty first or last cell is an edge pipe and dropped."""
    cells = [cell.strip() for cell in row.split('|')]
    last = len(cells) - 1
    return [c for idx, c in enumerate(cells) if 0 < idx < last or c]


def _table(lines: list[str], i: int) -> Consumed:
    start = i
    while i < len(lines) and _is_table_row(lines[i]):
        i += 1

    rows: list[list[str]] = []
    has_header = False
    for j, row in enumerate(lines[start:i]):
        if TABLE_SEPARATOR_RE.match(row):
            has_header = j == 1
            continue
        cells = _split_cells(row)
        if cells:
            rows.append(cells)

    if not rows:
        logger.debug("Dropped table with no data rows at lines %d-%d", start, i)
        return start, i, None
    return start, i, Token(
        type=BlockTypeEnum.table,
        rows=rows,
        has_header=has_header,
        map=(start, i),
    )


def _image(lines: list[str], i: int) -> Consumed:
    m = IMAGE_RE.match(lines[i].strip())
    return i, i + 1, Token(
        type=BlockTypeEnum.image,
        alt=m.group(1),
        src=m.group(2),
        map=(i, i + 1),
    )


def _paragraph(lines: list[str], i: int) -> Consumed:
    """Collect lines up to a blank line or another block start; the first line is always taken."""
    start = i
    para = [lines[i]]
    i += 1
    while i < len(lines) and not _is_blank(lines[i]) and not _starts_other_block(lines[i]):
        para.append(lines[i])
        i += 1
    content = ' '.join(para).strip()
    token = Token(type=BlockTypeEnum.paragraph, content=content, map=(start, i)) if content else None
    return start, i, token


BLOCK_RULES: tuple[Rule, ...] = (
    ("hr",            _is_hr,                                   _hr),
    ("heading",       lambda line: bool(HEADING_RE.match(line)), _heading),
    ("fenced_code",   _is_fence,                                _fenced_code),
    ("indented_code", lambda line: bool(INDENT_RE.match(line)), _indented_code),
    ("blockquote",    _is_quote,                                _blockquote),
    ("bullet_list",   lambda line: bool(BULLET_RE.match(line)),  _list_of(BULLET_RE, ordered=False)),
    ("ordered_list",  lambda line: bool(ORDERED_RE.match(line)), _list_of(ORDERED_RE, ordered=True)),
    ("table",         _is_table_row,                            _table),
    ("image",         _is_image,                                _image),
    ("paragraph",     lambda line: True,                        _paragraph),
)


def tokenize(markdown: str) -> list[Token]:
    """Tokenize a markdown document into block tokens in document order. Never raises."""
    lines = markdown.split('\n')
    tokens: list[Token] = []
    i = 0

    while i < len(lines):
        if _is_blank(lines[i]):
            i += 1
            continue
        for _name, applies, handler in BLOCK_RULES:
            if applies(lines[i]):
                _start, i, token = handler(lines, i)
                if token is not None:
                    tokens.append(token)
                break

    return tokens
