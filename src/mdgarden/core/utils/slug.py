"""Slug generation for garden URLs and section anchors"""

import re
import unicodedata


_CAMEL_RE = re.compile(r'([a-z\d])([A-Z])')
_SEPARATOR_RE = re.compile(r'[^A-Za-z\d]+')


def slugify(text: str, lowercase: bool = True) -> str:
    """Convert text to a hyphen-separated URL-safe slug.

    'fooBar & Baz' -> 'foo-bar-and-baz'. Accents are folded to ASCII and
    anything else outside [A-Za-z0-9] becomes a single hyphen.
    """
    text = unicodedata.normalize('NFKD', text).encode('ascii', 'ignore').decode('ascii')
    text = _CAMEL_RE.sub(r'\1 \2', text).replace('&', ' and ')
    if lowercase:
        text = text.lower()
    return _SEPARATOR_RE.sub('-', text).strip('-')
