"""Helpers shared by the Hemnet field extractors.

Each field is read by an ordered list of small strategies. A strategy gets
the parsed document (or a fragment of it, or a page wrapper that also carries
the raw markup) and returns a value or something
falsy. ``cascade`` walks the list and returns the first non-empty value, so a
missing marker on the page only empties that one field.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Iterable, Iterator, Optional, Sequence, TypeVar

from bs4 import BeautifulSoup, Comment, NavigableString, Tag
from bs4.element import Script, Stylesheet, TemplateString

logger = logging.getLogger("hemnet.extractors")

S = TypeVar("S")
T = TypeVar("T")
Strategy = Callable[[S], Optional[T]]

# Errors a strategy may hit on unexpected markup; they only skip the strategy.
PARSE_ERRORS = (AttributeError, IndexError, KeyError, TypeError, ValueError)

MAX_RESULTS = 25


def parse_html(html: Optional[str]) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def cascade(target: S, strategies: Sequence[Strategy[S, T]], default: T) -> T:
    """Return the first non-empty strategy result, or ``default``."""
    for strategy in strategies:
        try:
            value = strategy(target)
        except PARSE_ERRORS as exc:
            logger.debug("Strategy %s failed: %s", getattr(strategy, "__name__", strategy), exc)
            continue
        if value:
            return value
    return default


def text_of(tag: Optional[Tag]) -> str:
    return tag.get_text().strip() if tag is not None else ""


def first_text(target: Tag, selector: str) -> str:
    """Stripped text of the first element matching ``selector``."""
    return text_of(target.select_one(selector))


NON_VISIBLE_STRINGS = (Comment, Script, Stylesheet, TemplateString)
NON_VISIBLE_PARENTS = ("script", "style", "template")


def is_visible_text(node: object) -> bool:
    """True for text a reader would see; comments and script or style bodies are not."""
    if not isinstance(node, NavigableString) or isinstance(node, NON_VISIBLE_STRINGS):
        return False
    return node.parent is None or node.parent.name not in NON_VISIBLE_PARENTS


def visible_string(pattern: re.Pattern[str]) -> Callable[[object], bool]:
    """String filter for ``find``/``find_all`` matching visible text only."""

    def matches(node: object) -> bool:
        return is_visible_text(node) and pattern.search(str(node)) is not None

    return matches


def text_nodes(target: Tag) -> Iterator[str]:
    """Yield every visible text node below ``target`` one at a time."""
    for node in target.descendants:
        if is_visible_text(node):
            yield str(node)


def search_group(pattern: re.Pattern[str], text: str, group: int = 0) -> str:
    match = pattern.search(text)
    return match.group(group).strip() if match else ""


def search_text_nodes(target: Tag, pattern: re.Pattern[str]) -> str:
    """Match ``pattern`` against each text node separately.

    Scanning nodes one by one keeps digits from neighbouring elements from
    being glued into a single bogus number.
    """
    for text in text_nodes(target):
        match = pattern.search(text)
        if match:
            return match.group(0).strip()
    return ""


def unique(values: Iterable[str], limit: int) -> list[str]:
    seen: list[str] = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
            if len(seen) >= limit:
                break
    return seen
