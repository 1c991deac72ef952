"""Unit tests for core/drawing.py"""

import pytest

from mdgarden.core.drawing import SUPPORT_SCRIPT, DrawingCompiler
from mdgarden.core.models import NoteKind
from mdgarden.core.vault import MemoryVault


def _note(text, path="d.excalidraw.md"):
    return MemoryVault(files={path: text}).get_note(path)


def test_drawing_kind_by_suffix():
    assert _note("x").kind == NoteKind.drawing
    assert _note("x", path="plain.md").kind == NoteKind.markdown


def test_json_scene_normalized_and_escaped():
    note = _note('```json\n{"a":  "</script>"}\n```\n')
    out = DrawingCompiler().compile(note, include_support_script=False, id_suffix="3")
    assert '<div id="excalidraw-plugin-3" class="excalidraw-plugin"></div>' in out
    assert 'data-compressed="false">{"a": "<\\/script>"}</script>' in out
    assert '<script>renderExcalidraw("3");</script>' in out
    assert SUPPORT_SCRIPT not in out


def test_compressed_scene_kept_verbatim():
    note = _note("```compressed-json\nN4Ig\nLAr\n```\n")
    out = DrawingCompiler().compile(note)
    assert 'data-compressed="true">N4Ig\nLAr</script>' in out
    assert out.startswith(SUPPORT_SCRIPT)


def test_frontmatter_optional():
    note = _note('---\nexcalidraw-plugin: parsed\n---\n```json\n{}\n```\n')
    assert DrawingCompiler().compile(note).startswith("---\n")
    assert not DrawingCompiler().compile(note, include_frontmatter=False).startswith("---")


def test_missing_scene_raises():
    with pytest.raises(ValueError):
        DrawingCompiler().compile(_note("no data here"))
