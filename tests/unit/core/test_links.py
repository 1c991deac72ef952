"""Unit tests for core/links.py"""

from mdgarden.core.links import is_size, parse_reference, resolve


def test_parse_reference_plain():
    """A bare name has no fragment, display, or size."""
    ref = parse_reference("Topic")
    assert ref.target == "Topic"
    assert ref.header is None and ref.block is None
    assert ref.display is None and ref.size is None


def test_parse_reference_header_and_display():
    """name#Header|Label splits into target, header and display."""
    ref = parse_reference("Topic#Intro|Label")
    assert ref.target == "Topic"
    assert ref.header == "Intro"
    assert ref.display == "Label"
    assert ref.link == "Topic#Intro"


def test_parse_reference_block_takes_precedence():
    """'#^' marks a block fragment, not a header."""
    ref = parse_reference("Topic#^abc-1")
    assert ref.block == "abc-1"
    assert ref.header is None
    assert ref.fragment == "#^abc-1"


def test_parse_reference_single_fragment_level():
    """Only the first heading level of a nested path is kept."""
    ref = parse_reference("Topic#A#B")
    assert ref.header == "A"


def test_parse_reference_trailing_size():
    """A trailing numeric segment is the size; the rest stays display metadata."""
    ref = parse_reference("pic.png|left|wide|200")
    assert ref.size == "200"
    assert ref.display == "left|wide"


def test_parse_reference_strips_escape_backslash():
    """A trailing backslash (table-escaped pipe) is removed from the target."""
    assert parse_reference("Topic\\|Label").target == "Topic"


def test_is_size():
    assert is_size("200")
    assert is_size("200px")
    assert not is_size("wide")


def test_resolve_nearest_markdown(vault):
    """A bare name resolves across folders to the markdown note."""
    target = resolve("Topic#Intro", vault, "home.md")
    assert target.note.path == "notes/Topic.md"
    assert target.reference.header == "Intro"


def test_resolve_missing_returns_none(vault):
    assert resolve("nonexistent", vault, "home.md") is None


def test_resolve_non_markdown_returns_none(vault):
    """Images are left to the asset pass."""
    assert resolve("pic.png", vault, "home.md") is None
