"""Data models shared by the note compiler passes"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import TYPE_CHECKING, Any, Optional

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from mdgarden.core.vault import Vault


DRAWING_SUFFIX = ".excalidraw.md"
DRAWING_FRONTMATTER_KEY = "excalidraw-plugin"


class Heading(BaseModel):
    """A heading as located in the raw note text (0-based line number)."""
    text: str
    level: int
    line: int


class BlockAnchor(BaseModel):
    """Line range (inclusive) of the block an author tagged with ^id."""
    id: str
    start: int
    end: int


class NoteMetadata(BaseModel):
    headings: list[Heading] = Field(default_factory=list)
    blocks: dict[str, BlockAnchor] = Field(default_factory=dict)
    frontmatter: dict[str, Any] = Field(default_factory=dict)


class NoteKind(str, Enum):
    markdown = "markdown"
    drawing = "drawing"


@dataclass
class Note:
    """A document in the vault, addressed by its vault-relative POSIX path.

    Text and metadata are read from the owning vault on first access.
    """
    path: str
    vault: Vault = field(repr=False, compare=False)

    @property
    def name(self) -> str:
        return self.path.rsplit('/', 1)[-1]

    @property
    def basename(self) -> str:
        """File name without its final extension ('a/b.excalidraw.md' -> 'b.excalidraw')."""
        name = self.name
        return name[:name.rindex('.')] if '.' in name else name

    @property
    def extension(self) -> str:
        return self.name.rsplit('.', 1)[-1].lower() if '.' in self.name else ''

    @cached_property
    def text(self) -> str:
        return self.vault.read_text(self.path)

    @cached_property
    def metadata(self) -> NoteMetadata:
        return self.vault.metadata(self.path)

    @property
    def frontmatter(self) -> dict[str, Any]:
        return self.metadata.frontmatter

    @property
    def kind(self) -> NoteKind:
        if self.name.endswith(DRAWING_SUFFIX):
            return NoteKind.drawing
        if self.extension == 'md' and DRAWING_FRONTMATTER_KEY in self.frontmatter:
            return NoteKind.drawing
        return NoteKind.markdown


@dataclass(frozen=True)
class Reference:
    """Parsed form of the text between [[ and ]]."""
    target: str                      # note name or path, fragment removed
    header: Optional[str] = None     # 'Header' from name#Header
    block: Optional[str] = None      # 'id' from name#^id
    display: Optional[str] = None    # opaque display segments joined by '|'
    size: Optional[str] = None       # trailing numeric segment

    @property
    def fragment(self) -> str:
        if self.block is not None:
            return f"#^{self.block}"
        if self.header is not None:
            return f"#{self.header}"
        return ""

    @property
    def link(self) -> str:
        """Target plus fragment, as the author wrote it."""
        return f"{self.target}{self.fragment}"


@dataclass(frozen=True)
class ResolvedTarget:
    reference: Reference
    note: Note


class Asset(BaseModel):
    """A binary file to publish: canonical path plus base64 content."""
    path: str
    content: str


class CompiledNote(BaseModel):
    text: str
    assets: list[Asset] = Field(default_factory=list)
    notices: list[str] = Field(default_factory=list)


@dataclass
class DrawingTally:
    """Running count of drawing embeds seen during one top-level compile."""
    count: int = 0

    def next(self) -> int:
        self.count += 1
        return self.count


@dataclass(frozen=True)
class CompileContext:
    """Per-call compile state. The tally and notices are shared by every
    recursive call of one top-level compile and by nothing else."""
    source: Note
    depth: int = 0
    drawings: DrawingTally = field(default_factory=DrawingTally)
    notices: list[str] = field(default_factory=list)

    def descend(self, source: Note) -> CompileContext:
        return CompileContext(source=source, depth=self.depth + 1,
                              drawings=self.drawings, notices=self.notices)

    def notify(self, message: str) -> None:
        self.notices.append(message)
