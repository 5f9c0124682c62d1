"""
Base envelope extraction: title, meta tags, headings, links, media, social
metadata, detected technologies, language and a response-header summary.
"""
from __future__ import annotations

import re
from typing import Any, Mapping, Optional

from analyzers.seo import iter_links
from config import (
    DEFAULT_LANGUAGE,
    LANGUAGE_STOP_WORDS,
    LANGUAGES,
    MAX_EXTERNAL_LINKS_LISTED,
    MAX_INTERNAL_LINKS_LISTED,
    TECHNOLOGY_RULES,
)
from loader.parser import Document

_WORD_RE = re.compile(r"\w+", re.UNICODE)


# ── Meta ──────────────────────────────────────────────────────────────────────

def extract_meta(doc: Document) -> dict[str, Optional[str]]:
    title_node = doc.select_one("title")
    title = Document.text(title_node) if title_node is not None else ""
    return {
        "title": title or None,
        "meta_description": doc.first_attr('meta[name="description"]', "content"),
        "meta_keywords": doc.first_attr('meta[name="keywords"]', "content"),
        "canonical": doc.first_attr('link[rel~="canonical"]', "href"),
        "robots": doc.first_attr('meta[name="robots"]', "content"),
    }


def extract_headings(doc: Document) -> dict[str, list[str]]:
    return {
        f"h{level}": [Document.text(node) for node in doc.select(f"h{level}")]
        for level in range(1, 7)
    }


# ── Links & media ─────────────────────────────────────────────────────────────

def extract_links(doc: Document, page_url: str) -> dict[str, Any]:
    internal: list[dict[str, str]] = []
    external: list[dict[str, str]] = []

    for url, node, is_internal in iter_links(doc, page_url):
        entry = {
            "url": url,
            "text": Document.text(node),
            "title": Document.attr(node, "title") or "",
        }
        (internal if is_internal else external).append(entry)

    return {
        "internal": len(internal),
        "external": len(external),
        "internal_list": internal[:MAX_INTERNAL_LINKS_LISTED],
        "external_list": external[:MAX_EXTERNAL_LINKS_LISTED],
    }


def extract_media(doc: Document) -> dict[str, int]:
    return {
        "images": doc.count("img"),
        "videos": doc.count("video"),
        "audios": doc.count("audio"),
        "iframes": doc.count("iframe"),
    }


def extract_social_meta(doc: Document) -> dict[str, Optional[str]]:
    return {
        "og_title": doc.first_attr('meta[property="og:title"]', "content"),
        "og_description": doc.first_attr('meta[property="og:description"]', "content"),
        "og_image": doc.first_attr('meta[property="og:image"]', "content"),
        "twitter_card": doc.first_attr('meta[name="twitter:card"]', "content"),
        "twitter_title": doc.first_attr('meta[name="twitter:title"]', "content"),
        "twitter_description": doc.first_attr('meta[name="twitter:description"]', "content"),
    }


def detect_technologies(doc: Document, headers: Mapping[str, str]) -> list[str]:
    found = [label for selector, label in TECHNOLOGY_RULES if doc.count(selector) > 0]
    server = headers.get("server")
    if server:
        found.append(server)
    return found


# ── Headers summary ───────────────────────────────────────────────────────────

def summarize_headers(headers: Mapping[str, str]) -> dict[str, str]:
    def get(name: str, default: str = "Not set") -> str:
        return headers.get(name) or default

    return {
        "server": get("server"),
        "content_type": get("content-type"),
        "content_length": get("content-length"),
        "last_modified": get("last-modified"),
        "etag": get("etag"),
        "cache_control": get("cache-control"),
        "expires": get("expires"),
        "content_encoding": get("content-encoding", "None"),
        "hsts": "Enabled" if headers.get("strict-transport-security") else "Disabled",
        "csp": "Enabled" if headers.get("content-security-policy") else "Disabled",
    }


# ── Language ──────────────────────────────────────────────────────────────────

def detect_language(doc: Document) -> str:
    """
    Two-letter language code of the page: <html lang>, then the
    content-language meta, then a stop-word vote over the body text.
    """
    html_lang = (doc.root_attr("lang") or "").strip()
    if html_lang:
        return html_lang[:2].lower()

    for meta in doc.select("meta[http-equiv]"):
        if (Document.attr(meta, "http-equiv") or "").lower() == "content-language":
            content = (Document.attr(meta, "content") or "").strip()
            if content:
                return content[:2].lower()

    words = set(_WORD_RE.findall(doc.body_text().lower()))
    votes = {
        lang: sum(1 for w in stop_words if w in words)
        for lang, stop_words in LANGUAGE_STOP_WORDS.items()
    }
    best = max(votes.values(), default=0)
    leaders = [lang for lang, v in votes.items() if v == best]
    # A tie, or no signal at all, falls back to the default
    if best == 0 or len(leaders) > 1:
        return DEFAULT_LANGUAGE
    return leaders[0]


def resolve_language(doc: Document, requested: str) -> dict[str, str]:
    detected = detect_language(doc) if requested == "auto" else requested
    return {
        "detected": detected,
        "requested": requested,
        "name": LANGUAGES.get(detected, "Unknown"),
    }


def word_count(doc: Document) -> int:
    return len(doc.body_text().split())
