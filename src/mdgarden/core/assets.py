"""Image discovery, base64 extraction, and publish-path rewriting"""

import base64
import logging
from urllib.parse import quote, unquote

from mdgarden.core.links import is_size
from mdgarden.core.models import Asset, Note
from mdgarden.core.regexes import LINKED_IMAGE_RE, TRANSCLUDED_IMAGE_RE, inner_text
from mdgarden.core.vault import Vault


logger = logging.getLogger(__name__)

IMAGE_ROOT = "/img/user/"
_URI_SAFE = ";,/?:@&=+$-_.!~*'()#"


def publish_path(vault_path: str) -> str:
    """Canonical publish path of an asset; depends only on its vault path."""
    return f"{IMAGE_ROOT}{vault_path}"


def encode_uri(path: str) -> str:
    return quote(path, safe=_URI_SAFE)


def _split_meta(tokens: list[str]) -> tuple[str, str | None]:
    """Split the '|' tokens after an image name into (metadata, size).

    A trailing integer-like token is the size and the tokens before it are
    metadata; otherwise every token is metadata.
    """
    if not tokens:
        return "", None
    if is_size(tokens[-1]):
        return " ".join(tokens[:-1]), tokens[-1]
    return " ".join(tokens), None


def _alt_text(name: str, meta: str, size: str | None) -> str:
    return "|".join(part for part in (name, meta, size) if part)


def _linked_path(match: str) -> str:
    return match[match.rindex('(') + 1:match.rindex(')')]


def convert_image_links(text: str, vault: Vault, origin_path: str) -> tuple[str, list[Asset]]:
    """Rewrite image embeds to publish paths and collect their encoded bytes.

    Matches are found on the input text; each one is replaced at its first
    occurrence in the running output. Unresolvable or unreadable images are
    left as written.
    """
    assets: list[Asset] = []
    image_text = text

    for image_match in [m.group(0) for m in TRANSCLUDED_IMAGE_RE.finditer(text)]:
        try:
            image_name, *tokens = inner_text(image_match).split('|')
            meta, size = _split_meta(tokens)
            linked = vault.first_linkpath_dest(image_name, origin_path)
            if linked is None:
                continue
            content = base64.b64encode(vault.read_binary(linked.path)).decode('ascii')
            path = publish_path(linked.path)
            assets.append(Asset(path=path, content=content))
            image_text = image_text.replace(
                image_match, f"![{_alt_text(image_name, meta, size)}]({encode_uri(path)})", 1)
        except Exception as e:
            logger.debug("Skipping image %s: %s", image_match, e)

    for m in list(LINKED_IMAGE_RE.finditer(text)):
        image_match = m.group(0)
        try:
            image_path = _linked_path(image_match)
            if image_path.startswith('http'):
                continue
            linked = vault.first_linkpath_dest(unquote(image_path), origin_path)
            if linked is None:
                continue
            content = base64.b64encode(vault.read_binary(linked.path)).decode('ascii')
            path = publish_path(linked.path)
            assets.append(Asset(path=path, content=content))
            image_text = image_text.replace(image_match, f"![{m.group(1)}]({encode_uri(path)})", 1)
        except Exception as e:
            logger.debug("Skipping image %s: %s", image_match, e)

    return image_text, assets


def extract_image_links(note: Note) -> list[str]:
    """Vault paths of the images a note embeds, without reading or rewriting anything."""
    text = note.text
    vault = note.vault
    found: list[str] = []

    for image_match in [m.group(0) for m in TRANSCLUDED_IMAGE_RE.finditer(text)]:
        image_name = inner_text(image_match).split('|')[0]
        if linked := vault.first_linkpath_dest(image_name, note.path):
            found.append(linked.path)

    for m in LINKED_IMAGE_RE.finditer(text):
        image_path = _linked_path(m.group(0))
        if image_path.startswith('http'):
            continue
        if linked := vault.first_linkpath_dest(unquote(image_path), note.path):
            found.append(linked.path)

    return found
