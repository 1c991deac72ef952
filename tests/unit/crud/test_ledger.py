"""Unit tests for crud/ledger.py"""

from mdgarden.core.models import CompiledNote
from mdgarden.core.utils.hashing import sha256
from mdgarden.crud.ledger import forget_note, get_all_notes, get_by_path, publish_status, record_note
from mdgarden.crud.models import PublishedAsset


def test_record_note_created(session, compiled):
    entry, status = record_note(session, "a.md", compiled)
    assert status == "created"
    assert entry.hash == sha256(compiled.text)
    assert entry.asset_count == 1


def test_record_note_unchanged(session, compiled):
    record_note(session, "a.md", compiled)
    _, status = record_note(session, "a.md", compiled)
    assert status == "unchanged"
    assert len(get_all_notes(session)) == 1


def test_record_note_updated(session, compiled):
    record_note(session, "a.md", compiled)
    entry, status = record_note(session, "a.md", CompiledNote(text="changed"))
    assert status == "updated"
    assert entry.hash == sha256("changed")
    assert entry.asset_count == 0


def test_assets_recorded_by_publish_path(session, compiled):
    record_note(session, "a.md", compiled)
    row = session.get(PublishedAsset, "/img/user/pic.png")
    assert row.note_path == "a.md"
    assert row.hash == sha256("aGVsbG8=")


def test_shared_asset_tracks_last_note(session, compiled):
    """Two notes embedding the same image share one asset row."""
    record_note(session, "a.md", compiled)
    record_note(session, "b.md", compiled)
    assert session.get(PublishedAsset, "/img/user/pic.png").note_path == "b.md"


def test_forget_note(session, compiled):
    record_note(session, "a.md", compiled)
    assert forget_note(session, "a.md") is True
    assert get_by_path(session, "a.md") is None
    assert forget_note(session, "a.md") is False


def test_publish_status_groups(session, compiled):
    record_note(session, "same.md", compiled)
    record_note(session, "edited.md", compiled)
    record_note(session, "removed.md", compiled)
    status = publish_status(session, {
        "same.md": sha256(compiled.text),
        "edited.md": sha256("new text"),
        "new.md": sha256("anything"),
    })
    assert status == {
        "unpublished": ["new.md"],
        "changed": ["edited.md"],
        "published": ["same.md"],
        "deleted": ["removed.md"],
    }


def test_publish_status_empty_ledger(session):
    status = publish_status(session, {"a.md": "x"})
    assert status["unpublished"] == ["a.md"]
    assert status["deleted"] == []
