"""Unit tests for core/metadata.py"""

from mdgarden.core.metadata import build_metadata, split_frontmatter


NOTE = """\
---
title: Meta
---
# One

First paragraph ^para1

## Two

- item a ^item-a
- item b

> quoted

^quote

```
# not a heading ^nope
```
"""


def test_split_frontmatter_offset():
    """Body line offset counts the lines consumed by the front-matter."""
    fm, body, offset = split_frontmatter("---\na: 1\n---\nbody\n")
    assert fm == {"a": 1}
    assert offset == 2
    assert body == "\nbody\n"


def test_split_frontmatter_invalid_yaml_is_empty():
    fm, body, _ = split_frontmatter("---\nkey: [unclosed\n---\nbody\n")
    assert fm == {}
    assert body == "\nbody\n"


def test_headings_use_raw_line_numbers():
    meta = build_metadata(NOTE)
    assert [(h.text, h.level, h.line) for h in meta.headings] == [("One", 1, 3), ("Two", 2, 7)]


def test_frontmatter_parsed():
    assert build_metadata(NOTE).frontmatter == {"title": "Meta"}


def test_trailing_block_anchor():
    anchor = build_metadata(NOTE).blocks["para1"]
    assert (anchor.start, anchor.end) == (5, 5)


def test_list_item_block_anchor():
    anchor = build_metadata(NOTE).blocks["item-a"]
    assert (anchor.start, anchor.end) == (9, 9)


def test_lone_anchor_refers_to_previous_block():
    """A paragraph holding only ^id tags the block before it."""
    anchor = build_metadata(NOTE).blocks["quote"]
    assert (anchor.start, anchor.end) == (12, 12)


def test_anchor_inside_code_fence_ignored():
    assert "nope" not in build_metadata(NOTE).blocks


def test_nested_list_item_anchor_is_innermost():
    """A marker on a nested item tags that item, not its parent."""
    anchor = build_metadata("- outer\n  - inner ^x\n- other\n").blocks["x"]
    assert (anchor.start, anchor.end) == (1, 1)


def test_multi_paragraph_list_item_anchor_covers_item():
    anchor = build_metadata("- first\n\n  second ^y\n\nafter\n").blocks["y"]
    assert (anchor.start, anchor.end) == (0, 2)
