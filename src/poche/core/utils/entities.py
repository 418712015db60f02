"""HTML entity decoding for extracted article text"""

import re
from types import MappingProxyType
from typing import Optional


NAMED_ENTITIES = MappingProxyType({
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "apos": "'",
    "nbsp": " ",
    "rsquo": "'",
    "lsquo": "'",
    "rdquo": '"',
    "ldquo": '"',
    "mdash": "—",
    "ndash": "–",
    "hellip": "…",
})

ENTITY_RE = re.compile(r'&(?:#x([0-9a-fA-F]+)|#(\d+)|([a-zA-Z]+));')


def _replace(m: re.Match) -> str:
    hex_code, dec_code, name = m.groups()
    if name is not None:
        return NAMED_ENTITIES.get(name, m.group(0))
    code = int(hex_code, 16) if hex_code is not None else int(dec_code)
    try:
        return chr(code)
    except (ValueError, OverflowError):
        return m.group(0)


def decode_html_entities(text: Optional[str]) -> Optional[str]:
    """Decode known named and all numeric entities in a single pass; None for empty input."""
    if not text:
        return None
    return ENTITY_RE.sub(_replace, text)
