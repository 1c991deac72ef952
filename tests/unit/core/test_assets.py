"""Unit tests for core/assets.py"""

import base64

from mdgarden.core.assets import convert_image_links, encode_uri, extract_image_links, publish_path
from mdgarden.core.vault import MemoryVault


PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


def test_publish_path():
    assert publish_path("assets/pic.png") == "/img/user/assets/pic.png"


def test_encode_uri_keeps_separators():
    assert encode_uri("/img/user/my pic.png") == "/img/user/my%20pic.png"


def test_transcluded_image_with_size(vault):
    text, assets = convert_image_links("![[pic.png|200]]", vault, "home.md")
    assert text == "![pic.png|200](/img/user/assets/pic.png)"
    assert [a.path for a in assets] == ["/img/user/assets/pic.png"]
    assert base64.b64decode(assets[0].content) == PNG_BYTES


def test_transcluded_image_meta_and_size(vault):
    text, _ = convert_image_links("![[pic.png|left|100]]", vault, "home.md")
    assert text == "![pic.png|left|100](/img/user/assets/pic.png)"


def test_linked_image(vault):
    text, assets = convert_image_links("![a cat](assets/pic.png)", vault, "home.md")
    assert text == "![a cat](/img/user/assets/pic.png)"
    assert len(assets) == 1


def test_image_path_with_space_is_encoded():
    v = MemoryVault(files={"n.md": "", "img/my pic.png": PNG_BYTES})
    text, assets = convert_image_links("![[my pic.png]]", v, "n.md")
    assert text == "![my pic.png](/img/user/img/my%20pic.png)"
    assert assets[0].path == "/img/user/img/my pic.png"


def test_remote_image_untouched(vault):
    text = "![x](https://example.com/a.png)"
    assert convert_image_links(text, vault, "home.md") == (text, [])


def test_missing_image_untouched(vault):
    text = "![[gone.png]] ![y](nowhere/gone.png)"
    assert convert_image_links(text, vault, "home.md") == (text, [])


def test_same_image_twice(vault):
    """Each occurrence is rewritten and yields one asset."""
    text, assets = convert_image_links("![[pic.png]]\n![[pic.png]]", vault, "home.md")
    assert text.count("(/img/user/assets/pic.png)") == 2
    assert len(assets) == 2


def test_extract_image_links():
    v = MemoryVault(files={
        "n.md": "![[pic.png|50]] ![alt](assets/pic.png) ![r](http://x/y.png) ![[gone.png]]",
        "assets/pic.png": PNG_BYTES,
    })
    assert extract_image_links(v.get_note("n.md")) == ["assets/pic.png", "assets/pic.png"]
