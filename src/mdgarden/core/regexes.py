"""Shared patterns and span scanners for the text passes.

Passes never re-derive fence boundaries themselves: they ask
`protected_spans` for the regions to leave alone and test matches with
`inside_any`.
"""

import re


Span = tuple[int, int]

FRONTMATTER_RE = re.compile(r'^\s*?---\n(.*?)\n---', re.DOTALL)
CODE_FENCE_RE  = re.compile(r'```.*?```', re.DOTALL)
INLINE_CODE_RE = re.compile(r'`[^`\n]+`')
DRAWING_RE     = re.compile(r'<script type="application/json" class="excalidraw-scene".*?</script>', re.DOTALL)
COMMENT_RE     = re.compile(r'%%.+?%%', re.DOTALL)
BLOCKREF_RE    = re.compile(r'(?:^|(?<=\s))\^[\w-]+[ \t]*$', re.MULTILINE)

EMBED_RE    = re.compile(r'!\[\[(.+?)\]\]')
WIKILINK_RE = re.compile(r'(?<!!)\[\[(.+?)\]\]')

IMAGE_EXTENSIONS = ('png', 'jpg', 'jpeg', 'gif', 'webp')
_IMAGE_EXT = '|'.join(IMAGE_EXTENSIONS)

# Names, metadata and alt text never contain brackets or newlines, which
# keeps one match from running into the next embed on the line.
_NAME = r'[^\[\]\n]*?'
_PATH = r'[^()\n]*?'

TRANSCLUDED_IMAGE_RE = re.compile(
    rf'!\[\[({_NAME})(\.({_IMAGE_EXT}))\|({_NAME})\]\]|!\[\[({_NAME})(\.({_IMAGE_EXT}))\]\]', re.IGNORECASE)
LINKED_IMAGE_RE = re.compile(rf'!\[({_NAME})\]\(({_PATH})(\.({_IMAGE_EXT}))\)', re.IGNORECASE)
TRANSCLUDED_SVG_RE = re.compile(
    rf'!\[\[({_NAME})(\.(svg))\|({_NAME})\]\]|!\[\[({_NAME})(\.(svg))\]\]', re.IGNORECASE)
LINKED_SVG_RE = re.compile(rf'!\[({_NAME})\]\(({_PATH})(\.(svg))\)', re.IGNORECASE)


def find_spans(pattern: re.Pattern, text: str) -> list[Span]:
    return [m.span() for m in pattern.finditer(text)]


def protected_spans(text: str, frontmatter: bool = False) -> list[Span]:
    """Spans of code fences, inline code and rendered drawings (plus front-matter if asked)."""
    fences = find_spans(CODE_FENCE_RE, text)
    spans = fences + [s for s in find_spans(INLINE_CODE_RE, text) if not inside_any(s, fences)]
    spans += find_spans(DRAWING_RE, text)
    if frontmatter and (m := FRONTMATTER_RE.match(text)):
        spans.append(m.span())
    return sorted(spans)


def inside_any(span: Span, regions: list[Span]) -> bool:
    start, end = span
    return any(r_start <= start and end <= r_end for r_start, r_end in regions)


def inner_text(match: str) -> str:
    """Text between the first '[' pair and the first ']' of an embed or link."""
    start = match.index('[') + 2 if '[[' in match else match.index('[') + 1
    return match[start:match.index(']')]


def strip_frontmatter(text: str) -> str:
    return FRONTMATTER_RE.sub('', text, count=1)
