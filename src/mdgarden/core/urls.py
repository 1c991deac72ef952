"""Public URL computation for published notes"""

from mdgarden.config import PathRewriteRule
from mdgarden.core.models import Note
from mdgarden.core.utils.slug import slugify


def garden_path(vault_path: str, rules: list[PathRewriteRule]) -> str:
    """Apply the first rewrite rule whose prefix matches vault_path."""
    for rule in rules:
        if vault_path and vault_path.startswith(rule.from_):
            new_path = vault_path.replace(rule.from_, rule.to, 1)
            return new_path[1:] if new_path.startswith('/') else new_path
    return vault_path


def url_path(file_path: str, slugify_path: bool = True) -> str:
    """'Folder/My Note.md' -> 'folder/my-note/' (extension dropped, trailing slash)."""
    if not file_path:
        return file_path
    extensionless = file_path[:file_path.rindex('.')] if '.' in file_path else file_path
    if not slugify_path:
        return f"{extensionless}/"
    return '/'.join(slugify(part) for part in extensionless.split('/')) + '/'


def sanitize_permalink(permalink: str) -> str:
    if not permalink.endswith('/'):
        permalink += '/'
    if not permalink.startswith('/'):
        permalink = '/' + permalink
    return permalink


def note_url(note: Note, rules: list[PathRewriteRule], permalink_key: str = 'dg-permalink',
             slugify_path: bool = True) -> str:
    """Public URL of a note: its sanitized permalink if set, else the rewritten garden path."""
    permalink = note.frontmatter.get(permalink_key)
    if permalink:
        return sanitize_permalink(str(permalink))
    return '/' + url_path(garden_path(note.path, rules), slugify_path)
