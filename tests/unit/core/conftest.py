"""Shared fixtures for core unit tests"""

import pytest

from mdgarden.config import Settings
from mdgarden.core.compiler import NoteCompiler
from mdgarden.core.vault import MemoryVault


PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"

SAMPLE_SVG = '<svg xmlns="http://www.w3.org/2000/svg" width="10" height="10"><rect width="5" height="5"/></svg>'


@pytest.fixture(name="settings")
def settings_fixture():
    return Settings()


@pytest.fixture(name="vault")
def vault_fixture():
    """A small vault: two notes in folders, an image, and an svg."""
    return MemoryVault(files={
        "home.md": "---\ndg-publish: true\n---\n# Home\n\nSee [[Topic]].\n",
        "notes/Topic.md": "---\ndg-publish: true\n---\n# Topic\n\nTopic body.\n",
        "notes/Draft.md": "# Draft\n\nNot published.\n",
        "assets/pic.png": PNG_BYTES,
        "assets/logo.svg": SAMPLE_SVG,
    })


@pytest.fixture(name="compiler")
def compiler_fixture(settings, vault):
    return NoteCompiler(settings, vault)
