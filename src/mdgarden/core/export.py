"""Write compiled notes and decoded images to the output directory"""

import base64
from pathlib import Path

from mdgarden.core.models import CompiledNote


NOTES_DIR = "notes"


def note_output_path(output_dir: Path, note_path: str) -> Path:
    return output_dir / NOTES_DIR / note_path


def asset_output_path(output_dir: Path, publish_path: str) -> Path:
    """'/img/user/a/b.png' -> output_dir/img/user/a/b.png"""
    return output_dir / publish_path.lstrip('/')


def write_compiled(output_dir: Path, note_path: str, compiled: CompiledNote) -> tuple[Path, list[Path]]:
    """Write a compiled note and its assets, mirroring the vault layout.

    Assets are written last-wins when several notes share one image.
    Returns (note_file, asset_files).
    """
    note_file = note_output_path(output_dir, note_path)
    note_file.parent.mkdir(parents=True, exist_ok=True)
    note_file.write_text(compiled.text, encoding='utf-8')

    asset_files = []
    for asset in compiled.assets:
        dest = asset_output_path(output_dir, asset.path)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(base64.b64decode(asset.content))
        asset_files.append(dest)
    return note_file, asset_files
