# === FILE: menu_scout/extractor.py ===
"""Heuristic extraction of primary navigation menus from arbitrary HTML.

The extractor does not try to understand the page.  It knows a short,
prioritised list of structural patterns that themes (WordPress ones in
particular) use for the main navigation container:

* ``<header>`` with a ``<nav>`` descendant;
* ``#site-navigation``, ``.main-navigation``;
* ``.menu-primary``, ``.primary-menu``, ``.nav-menu``;
* ``.header-menu``, ``.top-menu``.

All patterns are evaluated in a single unioned CSS query, so an anchor
matching any of them is a candidate and candidates come out in document
order.  Extending the heuristics means adding a :class:`MenuRule` to
:data:`DEFAULT_MENU_RULES` (or passing a custom list to :func:`extract`).
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

from bs4 import BeautifulSoup
from bs4.element import Tag

from menu_scout.models import MenuEntry

__all__: Sequence[str] = ("MenuRule", "DEFAULT_MENU_RULES", "extract", "is_file_link")


@dataclass(frozen=True, slots=True)
class MenuRule:
    """One navigation pattern: anchors inside *container*, optionally scoped.

    ``scope=None`` means the container is looked up anywhere in the document.
    """

    name: str
    container: str
    scope: Optional[str] = None

    @property
    def selector(self) -> str:
        parts = [self.scope, self.container, "a"] if self.scope else [self.container, "a"]
        return " ".join(parts)


DEFAULT_MENU_RULES: tuple[MenuRule, ...] = (
    MenuRule("header-nav", "nav", scope="header"),
    MenuRule("site-navigation", "#site-navigation"),
    MenuRule("main-navigation", ".main-navigation"),
    MenuRule("menu-primary", ".menu-primary"),
    MenuRule("primary-menu", ".primary-menu"),
    MenuRule("nav-menu", ".nav-menu"),
    MenuRule("header-menu", ".header-menu"),
    MenuRule("top-menu", ".top-menu"),
)

_FILE_EXT_RE = re.compile(r"\.(pdf|doc|docx|xls|xlsx|zip|rar|jpg|jpeg|png|gif)$", re.IGNORECASE)


def is_file_link(href: str) -> bool:
    """True when the path of *href* ends with a known document/image extension."""
    try:
        path = urlsplit(href).path
    except ValueError:
        path = href
    return bool(_FILE_EXT_RE.search(path))


def _entry_from_anchor(tag: Tag) -> Optional[MenuEntry]:
    text = tag.get_text().strip()
    href = tag.get("href")
    if not text or not href or href.startswith("#"):
        return None
    if is_file_link(href):
        return None
    return MenuEntry(
        text=text,
        url=href,
        target=tag.get("target") or None,
        rel=tag.get("rel") or None,
    )


def extract(html: str, rules: Iterable[MenuRule] = DEFAULT_MENU_RULES) -> list[MenuEntry]:
    """Return the deduplicated menu entries found in *html*.

    Never raises for odd markup; no match simply yields ``[]``.  Entries
    equal by ``(url, text)`` are collapsed onto the first occurrence.
    """
    selector = ", ".join(rule.selector for rule in rules)
    if not selector:
        return []

    # multi_valued_attributes=None keeps "rel" as the raw attribute string
    soup = BeautifulSoup(html, "html.parser", multi_valued_attributes=None)

    entries: dict[MenuEntry, None] = {}
    for tag in soup.select(selector):
        entry = _entry_from_anchor(tag)
        if entry is not None and entry not in entries:
            entries[entry] = None
    return list(entries)
