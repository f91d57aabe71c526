"""
Immutable page snapshot over serialized DOM markup.

The page driver serializes the live document after it has expanded collapsed
sections; extraction strategies then read this snapshot instead of the live
page, so a single extraction pass always sees one consistent document.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

SKIP_TAGS = frozenset({"script", "style", "noscript", "template", "head", "meta", "link", "iframe", "svg"})

BLOCK_TAGS = frozenset(
    {
        "address",
        "article",
        "aside",
        "blockquote",
        "body",
        "dd",
        "details",
        "dialog",
        "div",
        "dl",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hr",
        "html",
        "li",
        "main",
        "nav",
        "ol",
        "p",
        "pre",
        "section",
        "summary",
        "table",
        "tr",
        "ul",
    }
)

_HIDDEN_STYLE = re.compile(r"display\s*:\s*none|visibility\s*:\s*hidden", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")
_LINE_SPACES = re.compile(r"[ \t\f\v\r\u00a0]+")
_EXTRA_BLANK_LINES = re.compile(r"\n{3,}")


def is_hidden(tag: Tag) -> bool:
    """True when the element's own markup hides it from display."""
    if tag.has_attr("hidden"):
        return True
    style = tag.get("style")
    return bool(style) and bool(_HIDDEN_STYLE.search(str(style)))


def render_text(node: Tag, *, honor_visibility: bool = True) -> str:
    """Render ``node``'s content roughly the way a browser's ``innerText`` does.

    Block elements start new lines, paragraphs are separated by a blank line,
    inline whitespace collapses to single spaces.
    """
    parts: List[Union[str, int]] = []
    _collect(node, parts, honor_visibility)

    out: List[str] = []
    pending = 0
    for part in parts:
        if isinstance(part, int):
            pending = max(pending, part)
            continue
        if not part.strip() and part != "\n":
            if pending == 0 and out and not out[-1].endswith((" ", "\n")):
                out.append(" ")
            continue
        if pending and out:
            out.append("\n" * pending)
        pending = 0
        out.append(part)

    lines = [_LINE_SPACES.sub(" ", line).strip() for line in "".join(out).split("\n")]
    return _EXTRA_BLANK_LINES.sub("\n\n", "\n".join(lines)).strip()


def _collect(node: Tag, parts: List[Union[str, int]], honor_visibility: bool) -> None:
    for child in node.children:
        if isinstance(child, PreformattedString):
            continue
        if isinstance(child, NavigableString):
            parts.append(_WHITESPACE.sub(" ", str(child)))
            continue
        if not isinstance(child, Tag):
            continue

        name = (child.name or "").lower()
        if name in SKIP_TAGS:
            continue
        if honor_visibility and is_hidden(child):
            continue
        if name == "br":
            parts.append("\n")
            continue
        if name in BLOCK_TAGS:
            breaks = 2 if name == "p" else 1
            parts.append(breaks)
            _collect(child, parts, honor_visibility)
            parts.append(breaks)
        else:
            _collect(child, parts, honor_visibility)


class HtmlElement:
    """A snapshot element backed by a BeautifulSoup tag."""

    __slots__ = ("_node", "_snapshot")

    def __init__(self, node: Tag, snapshot: HtmlSnapshot) -> None:
        self._node = node
        self._snapshot = snapshot

    def __eq__(self, other: object) -> bool:
        return isinstance(other, HtmlElement) and other._node is self._node

    def __hash__(self) -> int:
        return id(self._node)

    def __repr__(self) -> str:
        classes = self.get_attribute("class")
        return f"<HtmlElement {self.tag}{'.' + classes.replace(' ', '.') if classes else ''}>"

    @property
    def tag(self) -> str:
        return (self._node.name or "").lower()

    def get_attribute(self, name: str) -> Optional[str]:
        value = self._node.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def displayed_text(self) -> str:
        return self._snapshot._displayed_text(self._node)

    def detached_text(self) -> str:
        fragment = BeautifulSoup(self._node.decode_contents(), self._snapshot.parser)
        return render_text(fragment, honor_visibility=False)

    def select(self, selector: str) -> List[HtmlElement]:
        return [HtmlElement(node, self._snapshot) for node in self._node.select(selector)]

    def iter_ancestors(self) -> Iterator[HtmlElement]:
        for parent in self._node.parents:
            if isinstance(parent, BeautifulSoup):
                return
            yield HtmlElement(parent, self._snapshot)


class HtmlSnapshot:
    """Read-only snapshot of a rendered page.

    Displayed text is memoized per element; the markup never changes after
    construction.
    """

    def __init__(
        self,
        html: str,
        *,
        url: Optional[str] = None,
        parser: str = "html.parser",
        captured_at: Optional[datetime] = None,
    ) -> None:
        self.url = url
        self.parser = parser
        self.captured_at = captured_at or datetime.now(timezone.utc)
        self._html = html
        self._soup = BeautifulSoup(html, parser)
        self._text_cache: Dict[int, str] = {}

    @classmethod
    def from_file(cls, path: Path, *, url: Optional[str] = None) -> HtmlSnapshot:
        return cls(Path(path).read_text(encoding="utf-8"), url=url)

    @property
    def html(self) -> str:
        return self._html

    def select_one(self, selector: str) -> Optional[HtmlElement]:
        node = self._soup.select_one(selector)
        return HtmlElement(node, self) if node is not None else None

    def select(self, selector: str) -> List[HtmlElement]:
        return [HtmlElement(node, self) for node in self._soup.select(selector)]

    def _displayed_text(self, node: Tag) -> str:
        key = id(node)
        cached = self._text_cache.get(key)
        if cached is None:
            cached = render_text(node)
            self._text_cache[key] = cached
        return cached
