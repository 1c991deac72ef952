"""Batch build: compile the publish set, write outputs, record the ledger"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from sqlmodel import Session

from mdgarden.core.compiler import NoteCompiler
from mdgarden.core.export import note_output_path, write_compiled
from mdgarden.core.models import Note
from mdgarden.core.utils.hashing import sha256
from mdgarden.crud.ledger import forget_note, get_all_notes, publish_status, record_note


logger = logging.getLogger(__name__)


@dataclass
class BuildReport:
    counts: dict[str, int] = field(default_factory=lambda: {"created": 0, "updated": 0, "unchanged": 0})
    changes: list[tuple[str, str]] = field(default_factory=list)     # (status, path)
    failures: list[tuple[str, str]] = field(default_factory=list)    # (path, error)
    notices: list[str] = field(default_factory=list)
    pruned: list[str] = field(default_factory=list)


def run_build(
    compiler: NoteCompiler,
    notes: list[Note],
    output_dir: Path,
    engine,
    prune: bool = False,
    ) -> BuildReport:
    """Compile each note, write it under output_dir and record it in the ledger.

    A note that fails to compile is reported in `failures` and does not
    stop the rest of the batch. With `prune`, ledger entries and output
    files of notes no longer in `notes` are removed.
    """
    report = BuildReport()
    compiled_at = datetime.now()
    with Session(engine) as session:
        for note in notes:
            try:
                compiled = compiler.compile(note)
                write_compiled(output_dir, note.path, compiled)
            except Exception as e:
                logger.error("Failed to compile %s: %s", note.path, e)
                report.failures.append((note.path, str(e)))
                continue
            _, status = record_note(session, note.path, compiled, compiled_at)
            report.counts[status] += 1
            report.notices.extend(compiled.notices)
            if status != 'unchanged':
                report.changes.append((status, note.path))
        if prune:
            report.pruned = _prune(session, {n.path for n in notes}, output_dir)
        session.commit()
    return report


def _prune(session: Session, keep: set[str], output_dir: Path) -> list[str]:
    pruned = []
    for entry in get_all_notes(session):
        if entry.path in keep:
            continue
        note_output_path(output_dir, entry.path).unlink(missing_ok=True)
        forget_note(session, entry.path)
        pruned.append(entry.path)
    return sorted(pruned)


def run_status(compiler: NoteCompiler, notes: list[Note], engine) -> dict[str, list[str]]:
    """Compile the publish set in memory and classify it against the ledger."""
    hashes = {}
    for note in notes:
        try:
            hashes[note.path] = sha256(compiler.compile(note).text)
        except Exception as e:
            logger.error("Failed to compile %s: %s", note.path, e)
            hashes[note.path] = ""  # still selected; never matches a stored hash
    with Session(engine) as session:
        return publish_status(session, hashes)
