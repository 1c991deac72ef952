"""User-defined pattern/replacement filters"""

import logging
import re

from mdgarden.config import CustomFilter


logger = logging.getLogger(__name__)

_FLAGS = {'i': re.IGNORECASE, 'm': re.MULTILINE, 's': re.DOTALL, 'g': 0, 'u': 0}
_TOKEN_RE = re.compile(r'\$(\d\d?|&|\$)')


class FilterError(ValueError):
    """A custom filter could not be compiled."""


def compile_filter(custom: CustomFilter) -> tuple[re.Pattern, str, int]:
    """Translate a JavaScript-style filter into (pattern, replacement, count).

    Flags 'i', 'm', 's' map to re flags; without 'g' only the first match
    is replaced. '$1' and '$&' in the replacement become group references;
    '$N' naming a group the pattern does not have stays literal text.
    """
    flags = 0
    for char in custom.flags:
        if char not in _FLAGS:
            raise FilterError(f"unsupported flag {char!r}")
        flags |= _FLAGS[char]
    try:
        pattern = re.compile(custom.pattern, flags)
    except re.error as e:
        raise FilterError(str(e)) from e

    def _token(m: re.Match) -> str:
        token = m.group(1)
        if token == '$':
            return '$'
        if token == '&':
            return r'\g<0>'
        if 1 <= int(token) <= pattern.groups:
            return rf'\g<{int(token)}>'
        # '$12' with fewer than 12 groups is '$1' followed by '2'
        if len(token) == 2 and 1 <= int(token[0]) <= pattern.groups:
            return rf'\g<{token[0]}>{token[1]}'
        return m.group(0)

    replacement = _TOKEN_RE.sub(_token, custom.replace.replace('\\', '\\\\'))
    return pattern, replacement, 0 if 'g' in custom.flags else 1


def apply_filters(text: str, filters: list[CustomFilter], notify=None) -> str:
    """Apply each filter in order; a filter that fails to compile is skipped."""
    for custom in filters:
        try:
            pattern, replacement, count = compile_filter(custom)
            text = pattern.sub(replacement, text, count=count)
        except (FilterError, re.error, IndexError) as e:
            logger.warning("Invalid regex: %s %s (%s)", custom.pattern, custom.flags, e)
            if notify:
                notify(f"Your custom filters contains an invalid regex: {custom.pattern}. Skipping it.")
    return text
