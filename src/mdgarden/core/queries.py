"""Computed query blocks: delegate rendering to a pluggable evaluator"""

import logging
import re
from abc import ABC, abstractmethod
from enum import Enum

from mdgarden.config import Settings


logger = logging.getLogger(__name__)

BLOCK_QUERY_SUFFIX = "\n{ .block-language-dataview}"


class QueryKind(str, Enum):
    block = "block"
    block_script = "block_script"
    inline = "inline"
    inline_script = "inline_script"


class QueryEvaluator(ABC):
    """Renders a query found in a note into markup. May raise on bad queries."""

    @abstractmethod
    def render(self, query: str, path: str, kind: QueryKind) -> str:
        raise NotImplementedError


def query_patterns(settings: Settings) -> list[tuple[QueryKind, re.Pattern]]:
    """Patterns for the four query shapes, in evaluation order."""
    return [
        (QueryKind.block, re.compile(
            "```" + re.escape(settings.block_query_keyword) + r"\s(.+?)```", re.DOTALL)),
        (QueryKind.block_script, re.compile(
            "```" + re.escape(settings.script_query_keyword) + r"\s(.+?)```", re.DOTALL)),
        (QueryKind.inline, re.compile(
            "`" + re.escape(settings.inline_query_prefix) + "(.+?)`", re.DOTALL)),
        (QueryKind.inline_script, re.compile(
            "`" + re.escape(settings.inline_script_prefix) + "(.+?)`", re.DOTALL)),
    ]


def convert_queries(text: str, path: str, evaluator: QueryEvaluator | None, settings: Settings,
                    notify=None) -> str:
    """Replace each query with its rendered markup; failed queries stay unexpanded."""
    if evaluator is None:
        return text

    replaced = text
    for kind, pattern in query_patterns(settings):
        for m in pattern.finditer(text):
            block, query = m.group(0), m.group(1)
            try:
                markup = evaluator.render(query, path, kind)
            except Exception as e:
                logger.warning("Unable to render %s query in %s: %s", kind.value, path, e)
                if notify:
                    notify(f"Unable to render {kind.value} query in {path}.")
                continue
            if kind in (QueryKind.inline, QueryKind.inline_script) and not markup:
                continue
            if kind == QueryKind.block:
                markup = f"{markup}{BLOCK_QUERY_SUFFIX}"
            replaced = replaced.replace(block, str(markup), 1)
    return replaced
