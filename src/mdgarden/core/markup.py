"""Pure text passes: block ids, comment stripping, link canonicalization, heading syntax"""

import logging
import re

from mdgarden.core.links import parse_reference
from mdgarden.core.regexes import COMMENT_RE, WIKILINK_RE, inside_any, protected_spans
from mdgarden.core.vault import Vault


logger = logging.getLogger(__name__)

LONE_BLOCK_ID_RE = re.compile(r'\n\^([\w-]+)\n')
TRAILING_BLOCK_ID_RE = re.compile(r' \^([\w-]+)(?=[ \t]*$)', re.MULTILINE)
HEADING_SYNTAX_RE = re.compile(r'^(#+)([^\s#].*)$', re.MULTILINE)


def create_block_ids(text: str) -> str:
    """Turn ^id markers into '{ #id}' attribute anchors.

    The lone-line form runs first so its marker is gone before the
    trailing form looks for ' ^id'.
    """
    text = LONE_BLOCK_ID_RE.sub(lambda m: f"{{ #{m.group(1)}}}\n\n", text)
    return TRAILING_BLOCK_ID_RE.sub(lambda m: f"\n{{ #{m.group(1)}}}\n", text)


def remove_comments(text: str) -> str:
    """Drop %%comments%% except those inside code or a rendered drawing."""
    protected = protected_spans(text)
    parts, last = [], 0
    for m in COMMENT_RE.finditer(text):
        if inside_any(m.span(), protected):
            continue
        parts.append(text[last:m.start()])
        last = m.end()
    parts.append(text[last:])
    return ''.join(parts)


def fix_heading_syntax(text: str) -> str:
    """'#Title' -> '# Title' so a title renders as a heading."""
    return HEADING_SYNTAX_RE.sub(r'\1 \2', text)


def canonicalize_links(text: str, vault: Vault, origin_path: str) -> str:
    """Rewrite [[links]] outside code and front-matter to full vault paths.

    Resolved markdown targets become '[[dir/name#frag\\|display]]';
    unresolved ones keep their name but get the pipe escaped so the
    display text still renders. Links to non-markdown files are untouched.
    """
    protected = protected_spans(text, frontmatter=True)
    parts, last = [], 0
    for m in WIKILINK_RE.finditer(text):
        if inside_any(m.span(), protected):
            continue
        try:
            replacement = _canonical_link(m.group(1), vault, origin_path)
        except Exception as e:
            logger.debug("Skipping link %s: %s", m.group(0), e)
            continue
        if replacement is None:
            continue
        parts.append(text[last:m.start()])
        parts.append(replacement)
        last = m.end()
    parts.append(text[last:])
    return ''.join(parts)


def _canonical_link(inner: str, vault: Vault, origin_path: str) -> str | None:
    name, _, display = inner.partition('|')
    if name.endswith('\\'):
        name = name[:-1]
    display = display or name
    reference = parse_reference(name)

    linked = vault.first_linkpath_dest(reference.target, origin_path)
    if linked is None:
        return f"[[{reference.link}\\|{display}]]"
    if linked.extension != 'md':
        return None
    extensionless = linked.path[:linked.path.rindex('.')]
    return f"[[{extensionless}{reference.fragment}\\|{display}]]"
