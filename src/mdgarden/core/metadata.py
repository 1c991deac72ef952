"""Heading, block-anchor and front-matter extraction from raw note text"""

import logging
import re
from typing import Any

import yaml
from markdown_it import MarkdownIt

from mdgarden.core.models import BlockAnchor, Heading, NoteMetadata
from mdgarden.core.regexes import FRONTMATTER_RE


logger = logging.getLogger(__name__)

TRAILING_ANCHOR_RE = re.compile(r'(?:^|\s)\^([\w-]+)\s*$')
LONE_ANCHOR_RE = re.compile(r'^\s*\^([\w-]+)\s*$')

_TOP_LEVEL_BLOCKS = {
    'paragraph_open', 'heading_open', 'bullet_list_open', 'ordered_list_open',
    'blockquote_open', 'table_open', 'fence', 'code_block', 'html_block',
}


def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def _heading_level(token) -> int | None:
    """Return the heading level (1-6) for a heading_open token, else None."""
    if token.type == 'heading_open' and token.tag and token.tag[0] == 'h' and token.tag[1:].isdigit():
        return int(token.tag[1:])
    return None


def split_frontmatter(text: str) -> tuple[dict[str, Any], str, int]:
    """Return (frontmatter_dict, body, body_line_offset).

    Invalid or non-mapping YAML is logged and treated as empty; a note with
    a broken header still compiles.
    """
    m = FRONTMATTER_RE.match(text)
    if not m:
        return {}, text, 0
    try:
        fm = yaml.safe_load(m.group(1)) or {}
    except yaml.YAMLError as e:
        logger.warning("Invalid YAML frontmatter: %s", e)
        fm = {}
    if not isinstance(fm, dict):
        logger.warning("Invalid YAML frontmatter: expected a mapping, got %s", type(fm).__name__)
        fm = {}
    return fm, text[m.end():], text[:m.end()].count('\n')


def _block_anchors(tokens: list, lines: list[str], offset: int) -> dict[str, BlockAnchor]:
    blocks: dict[str, BlockAnchor] = {}
    previous = None  # map of the last top-level block

    for tok in tokens:
        if not tok.map or tok.nesting == -1:
            continue
        start, end = tok.map

        if tok.type in ('paragraph_open', 'list_item_open'):
            if tok.type == 'list_item_open':
                # loose items can end on a blank line
                while end - 1 > start and end - 1 < len(lines) and not lines[end - 1].strip():
                    end -= 1
            last = lines[end - 1] if end - 1 < len(lines) else ''
            lone = LONE_ANCHOR_RE.match(last)
            if tok.type == 'paragraph_open' and lone and end - start == 1:
                if previous is not None:
                    blocks.setdefault(lone.group(1), BlockAnchor(
                        id=lone.group(1), start=previous[0] + offset, end=previous[1] - 1 + offset))
            elif m := TRAILING_ANCHOR_RE.search(last):
                anchor = BlockAnchor(id=m.group(1), start=start + offset, end=end - 1 + offset)
                known = blocks.get(anchor.id)
                if known is None:
                    blocks[anchor.id] = anchor
                elif tok.type == 'list_item_open' and known.start <= anchor.start and anchor.end <= known.end:
                    # an outer item's range ends on its last nested item; the innermost item owns the marker
                    blocks[anchor.id] = anchor

        if tok.level == 0 and tok.type in _TOP_LEVEL_BLOCKS:
            if not (tok.type == 'paragraph_open' and LONE_ANCHOR_RE.match(lines[start] if start < len(lines) else '')):
                previous = (start, end)

    return blocks


def build_metadata(text: str, parser_config: str = 'gfm-like') -> NoteMetadata:
    """Parse a note's raw text into headings, block anchors and front-matter.

    Line numbers refer to the raw text, front-matter included.
    """
    frontmatter, body, offset = split_frontmatter(text)
    tokens = _make_parser(parser_config).parse(body)
    lines = body.split('\n')

    headings = []
    for i, tok in enumerate(tokens):
        level = _heading_level(tok)
        if level is None or not tok.map:
            continue
        headings.append(Heading(text=tokens[i + 1].content, level=level, line=tok.map[0] + offset))

    return NoteMetadata(
        headings=headings,
        blocks=_block_anchors(tokens, lines, offset),
        frontmatter=frontmatter,
    )
