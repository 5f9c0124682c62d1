"""
Read-only query wrapper around a parsed HTML document.
Every scorer queries the page through this class; nothing mutates the tree.
"""
from __future__ import annotations

from typing import Optional, Union

from bs4 import BeautifulSoup, Tag

from errors import ParseError


class Document:
    """Parsed HTML body exposing selector-based queries."""

    def __init__(self, body: Union[str, bytes]) -> None:
        if isinstance(body, bytes):
            try:
                body = body.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise ParseError(f"Body is not valid UTF-8: {exc}") from exc
        if not isinstance(body, str):
            raise ParseError(f"Cannot parse body of type {type(body).__name__}")

        self.html = body
        try:
            self._soup = BeautifulSoup(body, "lxml")
        except Exception:
            self._soup = BeautifulSoup(body, "html.parser")

    @classmethod
    def empty(cls) -> "Document":
        return cls("")

    # ── Queries ───────────────────────────────────────────────────────────────

    def select(self, selector: str) -> list[Tag]:
        return self._soup.select(selector)

    def select_one(self, selector: str) -> Optional[Tag]:
        return self._soup.select_one(selector)

    def count(self, selector: str) -> int:
        return len(self._soup.select(selector))

    def first_attr(self, selector: str, name: str) -> Optional[str]:
        """Attribute `name` of the first node matching `selector`, if any."""
        node = self.select_one(selector)
        return self.attr(node, name) if node is not None else None

    def root_attr(self, name: str) -> Optional[str]:
        html = self._soup.find("html")
        return self.attr(html, name) if html is not None else None

    def body_text(self) -> str:
        body = self._soup.find("body")
        return (body or self._soup).get_text(separator=" ")

    # ── Node helpers ──────────────────────────────────────────────────────────

    @staticmethod
    def text(node: Tag) -> str:
        return node.get_text(" ", strip=True)

    @staticmethod
    def attr(node: Tag, name: str) -> Optional[str]:
        value = node.get(name)
        if value is None:
            return None
        # Multi-valued attributes (class, rel) come back as lists
        if isinstance(value, list):
            return " ".join(value)
        return value
