"""Inline raw SVG for ![[x.svg|size]] and ![alt|size](x.svg) embeds"""

import logging
import re
import xml.etree.ElementTree as ET
from urllib.parse import unquote

from mdgarden.core.regexes import LINKED_SVG_RE, TRANSCLUDED_SVG_RE, inner_text
from mdgarden.core.vault import Vault


logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

ET.register_namespace("", SVG_NS)
ET.register_namespace("xlink", XLINK_NS)

_XML_DECL_RE = re.compile(r'^\s*<\?xml[^>]*\?>\s*')


def set_width(svg_text: str, size: str) -> str:
    """Set width on the root <svg> and serialize it back for embedding in HTML.

    Empty <style> elements get a placeholder body so they are not written
    self-closed, which HTML parsers would misread.
    """
    root = ET.fromstring(_XML_DECL_RE.sub('', svg_text))
    root.set("width", size)
    for style in root.iter():
        if style.tag in ("style", f"{{{SVG_NS}}}style") and not (style.text or "").strip():
            style.text = "/**/"
    return ET.tostring(root, encoding="unicode")


def _inline(vault: Vault, link: str, size: str | None, origin_path: str) -> str | None:
    linked = vault.first_linkpath_dest(link, origin_path)
    if linked is None:
        return None
    svg_text = vault.read_text(linked.path)
    if svg_text and size:
        svg_text = set_width(svg_text, size)
    return svg_text


def create_svg_embeds(text: str, vault: Vault, origin_path: str) -> str:
    """Replace svg embeds with the file's markup; unresolved or broken ones stay as written."""
    for svg in [m.group(0) for m in TRANSCLUDED_SVG_RE.finditer(text)]:
        try:
            name, _, size = inner_text(svg).partition('|')
            svg_text = _inline(vault, name, size or None, origin_path)
            if svg_text is not None:
                text = text.replace(svg, svg_text, 1)
        except Exception as e:
            logger.debug("Skipping svg embed %s: %s", svg, e)

    for m in list(LINKED_SVG_RE.finditer(text)):
        svg = m.group(0)
        try:
            _, _, size = m.group(1).partition('|')
            path = svg[svg.rindex('(') + 1:svg.rindex(')')]
            if path.startswith('http'):
                continue
            svg_text = _inline(vault, unquote(path), size or None, origin_path)
            if svg_text is not None:
                text = text.replace(svg, svg_text, 1)
        except Exception as e:
            logger.debug("Skipping svg link %s: %s", svg, e)

    return text
