"""Note compiler: ordered text passes plus final image extraction"""

import logging
from typing import Callable

from mdgarden.config import Settings
from mdgarden.core.assets import convert_image_links
from mdgarden.core.drawing import DrawingCompiler
from mdgarden.core.filters import apply_filters
from mdgarden.core.frontmatter import FrontmatterCompiler
from mdgarden.core.markup import canonicalize_links, create_block_ids, remove_comments
from mdgarden.core.models import CompileContext, CompiledNote, Note, NoteKind
from mdgarden.core.queries import QueryEvaluator, convert_queries
from mdgarden.core.regexes import FRONTMATTER_RE
from mdgarden.core.svg import create_svg_embeds
from mdgarden.core.transclusion import TransclusionResolver
from mdgarden.core.urls import note_url
from mdgarden.core.vault import Vault


logger = logging.getLogger(__name__)

Step = Callable[[Note, CompileContext], Callable[[str], str]]


class NoteCompiler:
    """Compiles one note at a time into (text, assets).

    Every pass is a method `step(note, ctx)` returning a text -> text
    function; `compile` threads the note text through them in order.
    """

    def __init__(
        self,
        settings: Settings,
        vault: Vault,
        frontmatter: FrontmatterCompiler | None = None,
        drawings: DrawingCompiler | None = None,
        queries: QueryEvaluator | None = None,
        published: Callable[[], list[Note]] | None = None,
        ):
        self.settings = settings
        self.vault = vault
        self.frontmatter = frontmatter or FrontmatterCompiler(settings)
        self.drawings = drawings or DrawingCompiler()
        self.queries = queries
        self._published = published or (lambda: vault.published_notes(settings.publish_key))
        self.transclusions = TransclusionResolver(self, settings.max_depth)

    def published_notes(self) -> list[Note]:
        return self._published()

    def note_url(self, note: Note) -> str:
        return note_url(note, self.settings.path_rewrite_rules,
                        self.settings.permalink_key, self.settings.slugify_enabled)

    # ORDER MATTERS: transclusion before links, comments late, front-matter first.
    @property
    def steps(self) -> list[Step]:
        return [
            self.convert_frontmatter,
            self.custom_filters,
            self.block_ids,
            self.transcluded_text,
            self.computed_queries,
            self.full_path_links,
            self.comments,
            self.svg_embeds,
        ]

    def compile(self, note: Note) -> CompiledNote:
        """Compile a note. Drawing notes bypass the markdown passes entirely."""
        ctx = CompileContext(source=note)
        if note.kind == NoteKind.drawing:
            return CompiledNote(text=self.drawings.compile(note, include_support_script=True))

        text = note.text
        for step in self.steps:
            text = step(note, ctx)(text)

        text, assets = convert_image_links(text, note.vault, note.path)
        logger.debug("Compiled %s: %d asset(s), %d notice(s)", note.path, len(assets), len(ctx.notices))
        return CompiledNote(text=text, assets=assets, notices=ctx.notices)

    def convert_frontmatter(self, note: Note, ctx: CompileContext) -> Callable[[str], str]:
        def _step(text: str) -> str:
            compiled = self.frontmatter.compile(note)
            if FRONTMATTER_RE.match(text):
                return FRONTMATTER_RE.sub(lambda _m: compiled, text, count=1)
            return f"{compiled}\n{text}"
        return _step

    def custom_filters(self, note: Note, ctx: CompileContext) -> Callable[[str], str]:
        return lambda text: apply_filters(text, self.settings.custom_filters, ctx.notify)

    def block_ids(self, note: Note, ctx: CompileContext) -> Callable[[str], str]:
        return create_block_ids

    def transcluded_text(self, note: Note, ctx: CompileContext) -> Callable[[str], str]:
        return lambda text: self.transclusions.resolve(text, ctx)

    def computed_queries(self, note: Note, ctx: CompileContext) -> Callable[[str], str]:
        return lambda text: convert_queries(text, note.path, self.queries, self.settings, ctx.notify)

    def full_path_links(self, note: Note, ctx: CompileContext) -> Callable[[str], str]:
        return lambda text: canonicalize_links(text, note.vault, note.path)

    def comments(self, note: Note, ctx: CompileContext) -> Callable[[str], str]:
        return remove_comments

    def svg_embeds(self, note: Note, ctx: CompileContext) -> Callable[[str], str]:
        return lambda text: create_svg_embeds(text, note.vault, note.path)
