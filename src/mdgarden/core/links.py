"""Bracket reference parsing and note resolution"""

import re

from mdgarden.core.models import Reference, ResolvedTarget
from mdgarden.core.vault import Vault


_SIZE_RE = re.compile(r'^\s*[+-]?\d')


def is_size(token: str) -> bool:
    """True if token starts like an integer ('200', '200px'), the way image sizes are written."""
    return bool(_SIZE_RE.match(token))


def parse_reference(inner: str) -> Reference:
    """Parse 'name#Header|display|200' style text found between [[ and ]].

    Only one level of fragment is supported: 'a#b#c' targets header 'b'.
    """
    name, *rest = inner.split('|')
    if name.endswith('\\'):
        name = name[:-1]

    size = None
    if rest and is_size(rest[-1]):
        size = rest.pop()
    display = '|'.join(rest) if rest else None

    header = block = None
    if '#^' in name:
        name, block = name.split('#^', 1)
    elif '#' in name:
        parts = name.split('#')
        name, header = parts[0], parts[1]
    return Reference(target=name, header=header, block=block, display=display, size=size)


def resolve(inner: str, vault: Vault, origin_path: str) -> ResolvedTarget | None:
    """Resolve reference text to a markdown note, or None if it has no markdown target."""
    reference = parse_reference(inner)
    note = vault.first_linkpath_dest(reference.target, origin_path)
    if note is None or note.extension != 'md':
        return None
    return ResolvedTarget(reference=reference, note=note)
