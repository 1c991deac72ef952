"""Publish ledger persistence: record compiled notes/assets and classify publish status"""

from datetime import datetime

from sqlmodel import Session, select

from mdgarden.core.models import CompiledNote
from mdgarden.core.utils.hashing import sha256
from mdgarden.crud.models import PublishedAsset, PublishedNote


def get_by_path(session: Session, path: str) -> PublishedNote | None:
    """Return the ledger entry for a note path, or None if never published."""
    return session.exec(select(PublishedNote).where(PublishedNote.path == path)).one_or_none()


def get_all_notes(session: Session) -> list[PublishedNote]:
    return list(session.exec(select(PublishedNote)).all())


def _record_assets(session: Session, note_path: str, compiled: CompiledNote, compiled_at: datetime) -> None:
    for asset in compiled.assets:
        row = session.get(PublishedAsset, asset.path)
        digest = sha256(asset.content)
        if row is None:
            row = PublishedAsset(path=asset.path, hash=digest, note_path=note_path, compiled_at=compiled_at)
        elif row.hash != digest or row.note_path != note_path:
            row.hash = digest
            row.note_path = note_path
            row.compiled_at = compiled_at
        session.add(row)


def record_note(
    session: Session,
    path: str,
    compiled: CompiledNote,
    compiled_at: datetime | None = None,
    ) -> tuple[PublishedNote, str]:
    """Upsert the ledger entry for a compiled note.

    Returns (entry, status) where status is 'created', 'updated', or 'unchanged'.
    Flushes but does not commit; the caller controls the transaction.
    """
    compiled_at = compiled_at or datetime.now()
    digest = sha256(compiled.text)
    entry = get_by_path(session, path)

    if entry and entry.hash == digest:
        _record_assets(session, path, compiled, compiled_at)
        session.flush()
        return entry, 'unchanged'

    status = 'updated' if entry else 'created'
    entry = entry or PublishedNote(path=path, hash=digest)
    entry.hash = digest
    entry.asset_count = len(compiled.assets)
    entry.compiled_at = compiled_at
    session.add(entry)
    _record_assets(session, path, compiled, compiled_at)
    session.flush()
    return entry, status


def forget_note(session: Session, path: str) -> bool:
    """Drop a note's ledger entry. Returns False if there was none."""
    entry = get_by_path(session, path)
    if entry is None:
        return False
    session.delete(entry)
    session.flush()
    return True


def publish_status(session: Session, compiled_hashes: dict[str, str]) -> dict[str, list[str]]:
    """Classify notes by comparing current compiled hashes with the ledger.

    compiled_hashes maps note path -> sha256 of its compiled text for every
    note currently selected for publishing.
    """
    known = {n.path: n.hash for n in get_all_notes(session)}
    status: dict[str, list[str]] = {"unpublished": [], "changed": [], "published": [], "deleted": []}
    for path, digest in sorted(compiled_hashes.items()):
        if path not in known:
            status["unpublished"].append(path)
        elif known[path] != digest:
            status["changed"].append(path)
        else:
            status["published"].append(path)
    status["deleted"] = sorted(p for p in known if p not in compiled_hashes)
    return status
