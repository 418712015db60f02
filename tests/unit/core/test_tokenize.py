"""Unit tests for core/tokenize.py"""

import pytest

from poche.core.models import BlockTypeEnum
from poche.core.tokenize import tokenize


def _covered_lines(markdown: str) -> list[int]:
    """Source line indices claimed by token ranges, plus blank lines outside them."""
    lines = markdown.split('\n')
    claimed: list[int] = []
    for tok in tokenize(markdown):
        start, end = tok.map
        claimed.extend(range(start, end))
    assert len(claimed) == len(set(claimed)), "token line ranges overlap"
    blank = [i for i, line in enumerate(lines) if line.strip() == '' and i not in claimed]
    return sorted(claimed + blank)


def test_sample_token_types(sample_tokens):
    """The sample document yields one token per block, in document order."""
    assert [t.type for t in sample_tokens] == [
        BlockTypeEnum.heading,
        BlockTypeEnum.paragraph,
        BlockTypeEnum.heading,
        BlockTypeEnum.list,
        BlockTypeEnum.code_block,
        BlockTypeEnum.blockquote,
        BlockTypeEnum.table,
        BlockTypeEnum.image,
        BlockTypeEnum.hr,
        BlockTypeEnum.paragraph,
    ]


def test_sample_lines_partitioned(sample_md):
    """Every line is consumed by exactly one token or skipped as blank."""
    covered = _covered_lines(sample_md)
    assert covered == list(range(len(sample_md.split('\n'))))


def test_heading():
    """A '## ' line becomes a level-2 heading with trimmed content."""
    tokens = tokenize("## Title\n")
    assert len(tokens) == 1
    assert tokens[0].type == BlockTypeEnum.heading
    assert tokens[0].level == 2
    assert tokens[0].content == "Title"


@pytest.mark.parametrize("md,level", [
    ("# One", 1),
    ("###### Six", 6),
    ("###   spaced   ", 3),
])
def test_heading_levels(md, level):
    """Heading level is the number of leading '#' characters."""
    tokens = tokenize(md)
    assert tokens[0].type == BlockTypeEnum.heading
    assert tokens[0].level == level


@pytest.mark.parametrize("md", ["####### Seven", "#NoSpace", "  # indented"])
def test_not_headings(md):
    """Seven hashes, no space after the hashes, or leading spaces do not make a heading."""
    tokens = tokenize(md)
    assert tokens[0].type != BlockTypeEnum.heading


def test_fenced_code_preserves_literal_content():
    """Fenced code keeps its lines verbatim and records the language tag."""
    tokens = tokenize("```js\nconst x = 1;\n```\n")
    assert len(tokens) == 1
    assert tokens[0].type == BlockTypeEnum.code_block
    assert tokens[0].language == "js"
    assert tokens[0].content == "const x = 1;"


def test_fenced_code_keeps_blank_lines_and_markup():
    """Blank lines and markdown syntax inside a fence are not interpreted."""
    tokens = tokenize("```\n# not a heading\n\n- not a list\n```\nafter")
    assert tokens[0].content == "# not a heading\n\n- not a list"
    assert tokens[0].language is None
    assert tokens[1].type == BlockTypeEnum.paragraph
    assert tokens[1].content == "after"


def test_unterminated_fence_runs_to_eof():
    """An unclosed fence swallows the rest of the document."""
    tokens = tokenize("```py\na = 1\n\n## still code")
    assert len(tokens) == 1
    assert tokens[0].content == "a = 1\n\n## still code"
    assert tokens[0].map == (0, 4)


def test_indented_code_block():
    """Four-space or tab indented lines form a code block with one indent level removed."""
    tokens = tokenize("    def f():\n        return 1\n\n\tx = 2\n\nafter")
    assert tokens[0].type == BlockTypeEnum.code_block
    assert tokens[0].content == "def f():\n    return 1\n\nx = 2"
    assert tokens[0].language is None
    assert tokens[1].content == "after"


def test_blockquote_strips_markers():
    """Leading '> ' or '>' is removed from each quoted line."""
    tokens = tokenize("> first\n>second\n")
    assert len(tokens) == 1
    assert tokens[0].type == BlockTypeEnum.blockquote
    assert tokens[0].content == "first\nsecond"


def test_blockquote_lazy_continuation():
    """A following plain line continues the quote; a list start ends it."""
    tokens = tokenize("> quoted\nlazy line\n- item\n")
    assert tokens[0].content == "quoted\nlazy line"
    assert tokens[1].type == BlockTypeEnum.list


def test_blockquote_ends_at_blank_line():
    tokens = tokenize("> quoted\n\nplain")
    assert [t.type for t in tokens] == [BlockTypeEnum.blockquote, BlockTypeEnum.paragraph]


def test_unordered_list():
    """Consecutive '-' lines become one unordered list."""
    tokens = tokenize("- a\n- b\n")
    assert len(tokens) == 1
    assert tokens[0].type == BlockTypeEnum.list
    assert tokens[0].ordered is False
    assert tokens[0].items == ["a", "b"]


def test_unordered_list_mixed_markers():
    """'-', '*' and '+' markers (optionally indented) all continue the same list."""
    tokens = tokenize("* a\n+ b\n  - c")
    assert tokens[0].items == ["a", "b", "c"]


def test_ordered_list():
    tokens = tokenize("1. first\n2. second\n10. tenth")
    assert tokens[0].ordered is True
    assert tokens[0].items == ["first", "second", "tenth"]


def test_list_kinds_split():
    """An ordered line ends an unordered list and starts a new ordered one."""
    tokens = tokenize("- a\n1. b")
    assert [(t.type, t.ordered) for t in tokens] == [
        (BlockTypeEnum.list, False),
        (BlockTypeEnum.list, True),
    ]


@pytest.mark.parametrize("md", ["---", "***", "___", "  -----  ", "*****"])
def test_horizontal_rule(md):
    tokens = tokenize(md)
    assert len(tokens) == 1
    assert tokens[0].type == BlockTypeEnum.hr
    assert tokens[0].content == ""


def test_table_with_header():
    """A separator on the second line marks the first row as header."""
    tokens = tokenize("|A|B|\n|-|-|\n|1|2|\n")
    assert len(tokens) == 1
    assert tokens[0].type == BlockTypeEnum.table
    assert tokens[0].has_header is True
    assert tokens[0].rows == [["A", "B"], ["1", "2"]]


def test_table_without_header():
    tokens = tokenize("a | b\nc | d")
    assert tokens[0].has_header is False
    assert tokens[0].rows == [["a", "b"], ["c", "d"]]


def test_table_keeps_inner_empty_cells():
    """Only an empty first or last cell is dropped; empty cells in between survive."""
    tokens = tokenize("| a || c |")
    assert tokens[0].rows == [["a", "", "c"]]


def test_table_separator_only_emits_nothing():
    """A table of only separator lines consumes its lines without a token."""
    tokens = tokenize("|---|---|\n\nafter")
    assert [t.content for t in tokens] == ["after"]
    assert tokenize("|---|---|") == []


def test_standalone_image():
    tokens = tokenize("  ![A chart](https://a.com/c.png)  ")
    assert len(tokens) == 1
    assert tokens[0].type == BlockTypeEnum.image
    assert tokens[0].alt == "A chart"
    assert tokens[0].src == "https://a.com/c.png"


def test_image_with_trailing_text_is_paragraph():
    tokens = tokenize("![a](b.png) and more")
    assert tokens[0].type == BlockTypeEnum.paragraph


def test_paragraph_joins_lines():
    """Consecutive plain lines join with single spaces."""
    tokens = tokenize("one\ntwo\n  three  \n")
    assert len(tokens) == 1
    assert tokens[0].type == BlockTypeEnum.paragraph
    assert tokens[0].content == "one two   three"


@pytest.mark.parametrize("follow,kind", [
    ("# Head", BlockTypeEnum.heading),
    ("```", BlockTypeEnum.code_block),
    ("> quote", BlockTypeEnum.blockquote),
    ("- item", BlockTypeEnum.list),
    ("1. item", BlockTypeEnum.list),
    ("---", BlockTypeEnum.hr),
])
def test_paragraph_stops_at_block_start(follow, kind):
    tokens = tokenize(f"text\n{follow}")
    assert tokens[0].type == BlockTypeEnum.paragraph
    assert tokens[0].content == "text"
    assert tokens[1].type == kind


def test_paragraph_absorbs_table_like_line():
    """Pipe lines after paragraph text continue the paragraph rather than starting a table."""
    tokens = tokenize("text\na | b")
    assert len(tokens) == 1
    assert tokens[0].content == "text a | b"


def test_heading_precedes_table():
    """A '#' line containing pipes is still a heading."""
    tokens = tokenize("# A | B")
    assert tokens[0].type == BlockTypeEnum.heading
    assert tokens[0].content == "A | B"


@pytest.mark.parametrize("md", ["# ", "#\t", "##  \t"])
def test_heading_marker_without_text_makes_progress(md):
    """A bare heading marker degrades to a paragraph instead of stalling."""
    tokens = tokenize(md)
    assert all(t.type in (BlockTypeEnum.paragraph, BlockTypeEnum.heading) for t in tokens)


@pytest.mark.parametrize("md", [
    "",
    "   ",
    "\n\n\n",
    "****",
    "||||",
    "> ",
    "```",
    "\t",
    "# \n#\t\n- \n1.",
    "![]()\n[x](\n**",
    "\r\n\r\n",
])
def test_totality(md):
    """Any input returns a list of tokens without raising."""
    assert isinstance(tokenize(md), list)


@pytest.mark.parametrize("md", [
    "# H\n\npara\nmore\n\n- a\n- b\n\n> q\n\n```\ncode\n```\n",
    "    code\n\n\n    more\ntext\n***\n1. x\n",
    "> a\n> b\nc\n# d\n![i](s.png)\n",
])
def test_coverage_partitions_lines(md):
    """Token line ranges plus blank lines cover each source line exactly once."""
    assert _covered_lines(md) == list(range(len(md.split('\n'))))


def test_paragraph_retokenize_idempotent():
    """Re-tokenizing a paragraph's joined content yields the same paragraph."""
    first = tokenize("some *emphasis*\nacross lines\nhere")[0]
    again = tokenize(first.content)
    assert len(again) == 1
    assert again[0].type == first.type
    assert again[0].content == first.content


def test_wire_format_uses_camel_case_alias():
    """has_header serializes as hasHeader and unset kind fields are omitted."""
    data = tokenize("|A|\n|-|\n|1|")[0].model_dump(by_alias=True, exclude_none=True)
    assert data["hasHeader"] is True
    assert "level" not in data
    assert data["type"] == "table"
