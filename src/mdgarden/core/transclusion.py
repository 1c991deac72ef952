"""Recursive inlining of embedded notes, headers and blocks"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from mdgarden.core.links import resolve
from mdgarden.core.markup import fix_heading_syntax
from mdgarden.core.models import CompileContext, Note, NoteKind, Reference
from mdgarden.core.regexes import BLOCKREF_RE, EMBED_RE, inner_text, strip_frontmatter
from mdgarden.core.utils.slug import slugify

if TYPE_CHECKING:
    from mdgarden.core.compiler import NoteCompiler


logger = logging.getLogger(__name__)

TITLE_VARIABLE = "{{title}}"

LINK_ICON = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24" fill="none" '
    'stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round" '
    'class="svg-icon lucide-link"><path d="M10 13a5 5 0 0 0 7.54.54l3-3a5 5 0 0 0-7.07-7.07l-1.72 1.71">'
    '</path><path d="M14 11a5 5 0 0 0-7.54-.54l-3 3a5 5 0 0 0 7.07 7.07l1.71-1.71"></path></svg>'
)


def slice_block(text: str, note: Note, block_id: str) -> str:
    """Lines of the block tagged ^block_id, with the tag removed. Unknown ids keep the full text."""
    anchor = note.metadata.blocks.get(block_id)
    if anchor is None:
        return text
    lines = text.split('\n')[anchor.start:anchor.end + 1]
    return '\n'.join(lines).replace(f"^{block_id}", "", 1)


def slice_header(text: str, note: Note, header: str) -> str:
    """From the heading to the next heading of the same or a shallower level.

    Unknown headings keep the full text.
    """
    headings = note.metadata.headings
    found = next((h for h in headings if h.text == header), None)
    if found is None:
        return text
    after = headings[headings.index(found) + 1:]
    cut_to = next((h for h in after if h.level <= found.level), None)
    lines = text.split('\n')
    end = cut_to.line if cut_to else len(lines)
    return '\n'.join(lines[found.line:end])


def section_id(reference: Reference) -> str:
    if reference.block is not None:
        return f"#{slugify(reference.block)}"
    if reference.header is not None:
        return f"#{slugify(reference.header)}"
    return ""


def transclusion_title(display: str | None, note: Note) -> str | None:
    if not display:
        return None
    return fix_heading_syntax(display.replace(TITLE_VARIABLE, note.basename))


def embed_envelope(body: str, title: str | None, link_href: str | None) -> str:
    title_section = f'<div class="markdown-embed-title">\n\n{title}\n\n</div>\n' if title else ""
    link = ""
    if link_href:
        link = f'<a class="markdown-embed-link" href="{link_href}" aria-label="Open link">{LINK_ICON}</a>'
    return (
        f'\n<div class="transclusion internal-embed is-loaded">{link}<div class="markdown-embed">\n\n'
        f'{title_section}\n\n'
        f'{body}'
        '\n\n</div></div>\n'
    )


class TransclusionResolver:
    """Inlines ![[embeds]] up to `max_depth` levels deep.

    There is no visited set: a cycle repeats until the depth bound and the
    deepest embed is left as literal markup.
    """

    def __init__(self, compiler: NoteCompiler, max_depth: int = 4):
        self.compiler = compiler
        self.max_depth = max_depth

    def resolve(self, text: str, ctx: CompileContext) -> str:
        if ctx.depth >= self.max_depth:
            return text

        published: set[str] | None = None

        def is_published(note: Note) -> bool:
            # read the publish set once per call, and only when an embed resolves
            nonlocal published
            if published is None:
                published = {n.path for n in self.compiler.published_notes()}
            return note.path in published

        transcluded = text
        for match in [m.group(0) for m in EMBED_RE.finditer(text)]:
            try:
                replacement = self._expand(match, ctx, is_published)
            except Exception as e:
                logger.warning("Failed to transclude %s in %s: %s", match, ctx.source.path, e)
                continue
            if replacement is not None:
                transcluded = transcluded.replace(match, replacement, 1)

        return transcluded

    def _expand(self, match: str, ctx: CompileContext, is_published: Callable[[Note], bool]) -> str | None:
        inner = inner_text(match)
        target = resolve(inner, ctx.source.vault, ctx.source.path)
        if target is None:
            logger.debug("Can't find transcluded file for %s", match)
            return None

        note, reference = target.note, target.reference
        if note.kind == NoteKind.drawing:
            number = ctx.drawings.next()
            return self.compiler.drawings.compile(
                note, include_support_script=number == 1,
                id_suffix=str(number), include_frontmatter=False,
            )

        text = note.text
        if reference.block is not None:
            text = slice_block(text, note, reference.block)
        elif reference.header is not None:
            text = slice_header(text, note, reference.header)

        text = strip_frontmatter(text)
        text = self.compiler.custom_filters(note, ctx)(text)
        text = BLOCKREF_RE.sub("", text)

        link_href = None
        if is_published(note):
            link_href = self.compiler.note_url(note) + section_id(reference)

        title = transclusion_title(inner.split('|')[1] if '|' in inner else None, note)
        text = embed_envelope(text, title, link_href)

        if EMBED_RE.search(text):
            text = self.resolve(text, ctx.descend(note))
        return text
