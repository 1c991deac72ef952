"""Content store: note/asset reads, cached metadata, and link path lookup"""

from __future__ import annotations

import logging
import posixpath
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from mdgarden.core.metadata import build_metadata
from mdgarden.core.models import Note, NoteMetadata


logger = logging.getLogger(__name__)


class Vault(ABC):
    """A tree of notes and assets addressed by vault-relative POSIX paths."""

    parser_config: str = 'gfm-like'

    @abstractmethod
    def list_files(self) -> list[str]:
        raise NotImplementedError

    @abstractmethod
    def read_text(self, path: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def read_binary(self, path: str) -> bytes:
        raise NotImplementedError

    def metadata(self, path: str) -> NoteMetadata:
        return build_metadata(self.read_text(path), self.parser_config)

    def exists(self, path: str) -> bool:
        return path in self.list_files()

    def get_note(self, path: str) -> Note:
        if not self.exists(path):
            raise FileNotFoundError(path)
        return Note(path=path, vault=self)

    def first_linkpath_dest(self, linkpath: str, source_path: str) -> Note | None:
        """Resolve a link path the way the editor does, nearest to source_path wins.

        Tries the link as written, then with '.md' appended. Returns None
        when nothing matches.
        """
        linkpath = linkpath.strip()
        if not linkpath:
            return Note(path=source_path, vault=self) if self.exists(source_path) else None

        files = self.list_files()
        by_lower = {f.lower(): f for f in files}
        source_dir = posixpath.dirname(source_path)

        for name in (linkpath, f"{linkpath}.md"):
            if name.startswith(('./', '../')):
                rel = posixpath.normpath(posixpath.join(source_dir, name))
                if rel.lower() in by_lower:
                    return Note(path=by_lower[rel.lower()], vault=self)
                continue

            name = name.lstrip('/')
            if name.lower() in by_lower:
                return Note(path=by_lower[name.lower()], vault=self)

            suffix = f"/{name.lower()}"
            candidates = [f for f in files if f.lower().endswith(suffix)]
            if candidates:
                best = min(candidates, key=lambda f: _distance(f, source_dir))
                return Note(path=best, vault=self)
        return None

    def published_notes(self, publish_key: str = 'dg-publish') -> list[Note]:
        """Markdown notes whose front-matter flags them for publishing.

        A note that cannot be read or decoded is logged and left out.
        """
        notes = []
        for path in self.list_files():
            if not path.endswith('.md'):
                continue
            note = Note(path=path, vault=self)
            try:
                flagged = note.frontmatter.get(publish_key) is True
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Skipping unreadable note %s: %s", path, e)
                continue
            if flagged:
                notes.append(note)
        return notes


def _distance(candidate: str, source_dir: str) -> tuple[int, int, str]:
    """Sort key: longest shared folder prefix, then shallowest, then lexical."""
    cand_parts = posixpath.dirname(candidate).split('/') if '/' in candidate else []
    src_parts = source_dir.split('/') if source_dir else []
    shared = 0
    for a, b in zip(cand_parts, src_parts):
        if a != b:
            break
        shared += 1
    return -shared, len(cand_parts), candidate


class FileVault(Vault):
    """Vault backed by a directory on disk. Metadata is cached per path."""

    def __init__(self, root: Path | str, parser_config: str = 'gfm-like'):
        self.root = Path(root)
        self.parser_config = parser_config
        self._files: list[str] | None = None
        self._metadata: dict[str, NoteMetadata] = {}

    def list_files(self) -> list[str]:
        if self._files is None:
            self._files = sorted(
                p.relative_to(self.root).as_posix()
                for p in self.root.rglob('*')
                if p.is_file() and not any(part.startswith('.') for part in p.relative_to(self.root).parts)
            )
        return self._files

    def exists(self, path: str) -> bool:
        return path in set(self.list_files())

    def read_text(self, path: str) -> str:
        return (self.root / path).read_text(encoding='utf-8')

    def read_binary(self, path: str) -> bytes:
        return (self.root / path).read_bytes()

    def metadata(self, path: str) -> NoteMetadata:
        if path not in self._metadata:
            self._metadata[path] = super().metadata(path)
        return self._metadata[path]


@dataclass
class MemoryVault(Vault):
    """In-memory vault. Explicit metadata entries take precedence over parsing."""
    files: dict[str, str | bytes] = field(default_factory=dict)
    overrides: dict[str, NoteMetadata] = field(default_factory=dict)

    def list_files(self) -> list[str]:
        return sorted(self.files)

    def exists(self, path: str) -> bool:
        return path in self.files

    def read_text(self, path: str) -> str:
        if path not in self.files:
            raise FileNotFoundError(path)
        content = self.files[path]
        return content.decode('utf-8') if isinstance(content, bytes) else content

    def read_binary(self, path: str) -> bytes:
        if path not in self.files:
            raise FileNotFoundError(path)
        content = self.files[path]
        return content.encode('utf-8') if isinstance(content, str) else content

    def metadata(self, path: str) -> NoteMetadata:
        if path in self.overrides:
            return self.overrides[path]
        return super().metadata(path)
