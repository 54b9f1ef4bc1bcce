"""
Line classifier for report markup.

Both the on-screen renderer and the document exporter read markup through
this module, so a line is a heading, bullet, body or blank in exactly the
same way everywhere.

Markup grammar:
    *TEXT*      heading (trimmed line wrapped in the delimiter, length > 2)
    . TEXT      bullet
    • TEXT      bullet
    (empty)     blank separator
    anything    body text

Input may also be HTML from the rich text editor. Block-level tags are
turned into line breaks first, list items gain a bullet marker and heading
tags gain the heading delimiter, so editor output and plain markup classify
identically.
"""

import re
from typing import List

from .config import BULLET_MARKERS, HEADING_DELIMITER
from .models import Block, BlockKind

_BLOCK_TAG = r"</?(?:p|div|br|li|ul|ol|h[1-6])\b[^>]*>"
_BLOCK_TAG_PATTERN = re.compile(_BLOCK_TAG, re.IGNORECASE)
# Line breaks between two block tags are layout, not content
_BETWEEN_BLOCK_TAGS = re.compile(rf"({_BLOCK_TAG})\s+(?={_BLOCK_TAG})", re.IGNORECASE)
_SPACES_AROUND_BLOCK_TAG = re.compile(rf"[ \t]*({_BLOCK_TAG})[ \t]*", re.IGNORECASE)

_BR_TAG = re.compile(r"<br\s*/?>", re.IGNORECASE)
_LIST_ITEM_OPEN = re.compile(r"<li\b[^>]*>", re.IGNORECASE)
_HEADING_OPEN = re.compile(r"<h[1-6]\b[^>]*>", re.IGNORECASE)
_HEADING_CLOSE = re.compile(r"</h[1-6]\s*>", re.IGNORECASE)
_BLOCK_CLOSE = re.compile(r"</(?:p|div|li)\s*>", re.IGNORECASE)
# A tag opens with a name and stays on one line, so "x < y" is text
_ANY_TAG = re.compile(r"</?[A-Za-z][^<>\n]*>")

# &amp; goes last so "&amp;lt;" decodes to the literal text "&lt;"
_ENTITIES = (
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&amp;", "&"),
)


def normalize_markup(text: str) -> str:
    """
    Convert editor HTML into plain markup lines.

    Plain markup passes through unchanged apart from entity decoding and
    line-ending normalization.

    Args:
        text: Raw markup or HTML

    Returns:
        Plain markup text
    """
    if not text:
        return ""

    text = text.replace("\r\n", "\n").replace("\r", "\n")

    if _BLOCK_TAG_PATTERN.search(text):
        text = _BETWEEN_BLOCK_TAGS.sub(r"\1", text)
        text = _SPACES_AROUND_BLOCK_TAG.sub(r"\1", text)
        text = _BR_TAG.sub("\n", text)
        text = _LIST_ITEM_OPEN.sub(BULLET_MARKERS[1], text)
        text = _HEADING_OPEN.sub(HEADING_DELIMITER + " ", text)
        text = _HEADING_CLOSE.sub(" " + HEADING_DELIMITER + "\n", text)
        text = _BLOCK_CLOSE.sub("\n", text)

    for entity, replacement in _ENTITIES:
        text = text.replace(entity, replacement)

    # Repeat until stable so "<<b>b>" cannot leave a tag behind
    while True:
        stripped = _ANY_TAG.sub("", text)
        if stripped == text:
            return stripped
        text = stripped


def classify_line(line: str) -> Block:
    """Classify a single normalized line."""
    stripped = line.strip()

    if not stripped:
        return Block(kind=BlockKind.BLANK)

    if (
        len(stripped) > 2
        and stripped.startswith(HEADING_DELIMITER)
        and stripped.endswith(HEADING_DELIMITER)
    ):
        return Block(kind=BlockKind.HEADING, text=stripped[1:-1].strip())

    for marker in BULLET_MARKERS:
        if stripped.startswith(marker):
            return Block(kind=BlockKind.BULLET, text=stripped[len(marker):].strip())

    return Block(kind=BlockKind.BODY, text=stripped)


def classify(text: str) -> List[Block]:
    """
    Classify markup text into an ordered list of blocks.

    Never raises: anything unrecognized becomes body text.

    Args:
        text: Markup text or editor HTML

    Returns:
        One block per line, in source order
    """
    return [classify_line(line) for line in normalize_markup(text).splitlines()]
