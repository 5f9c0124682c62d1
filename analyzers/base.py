"""
Base class for all page scorers, plus the shared page context they consume.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Mapping, Optional
from urllib.parse import urljoin, urlparse

import tldextract

from loader.parser import Document
from models import ScoreReport
from scoring.scorer import clamp_score, score_label

# Offline extractor: bundled public suffix snapshot, no network, no disk cache
_EXTRACT = tldextract.TLDExtract(cache_dir=None, suffix_list_urls=())


@dataclass(frozen=True)
class PageContext:
    """Everything a scorer may look at for one fetched page."""
    url: str                                  # normalized URL
    document: Document
    headers: Mapping[str, str] = field(default_factory=dict)
    elapsed_ms: int = 0
    redirect_count: int = 0

    @property
    def hostname(self) -> str:
        return (urlparse(self.url).hostname or "").lower()

    @property
    def scheme(self) -> str:
        return urlparse(self.url).scheme.lower()

    def header(self, name: str) -> Optional[str]:
        # Plain dicts in tests are not case-insensitive
        value = self.headers.get(name)
        if value is None:
            value = self.headers.get(name.lower())
        return value


class BaseScorer(ABC):
    """All scorers inherit from this class."""

    module: str = "uncategorized"

    @abstractmethod
    def score(self, ctx: PageContext) -> ScoreReport:
        """Score a single page."""
        ...

    # ── Convenience factory ───────────────────────────────────────────────────

    def _report(self, raw_score: float, issues: list[str], good_points: list[str], **kwargs) -> ScoreReport:
        score = clamp_score(raw_score)
        return ScoreReport(
            score=score,
            level=score_label(score, self.module),
            issues=issues,
            good_points=good_points,
            **kwargs,
        )


# ── Shared helpers ────────────────────────────────────────────────────────────

def site_of(hostname: str) -> str:
    """Registered domain of `hostname`, or the hostname itself (IPs, localhost)."""
    ext = _EXTRACT(hostname)
    if ext.domain and ext.suffix:
        return f"{ext.domain}.{ext.suffix}".lower()
    return hostname.lower()


def top_level_domain(hostname: str) -> str:
    """Last label of the public suffix, e.g. "tk" for "shop.example.tk"."""
    ext = _EXTRACT(hostname)
    suffix = ext.suffix or hostname.rsplit(".", 1)[-1]
    return suffix.rsplit(".", 1)[-1].lower()


def is_same_site(url: str, page_url: str) -> bool:
    host = (urlparse(url).hostname or "").lower()
    page_host = (urlparse(page_url).hostname or "").lower()
    if not host or not page_host:
        return False
    return site_of(host) == site_of(page_host)


def third_party_scripts(ctx: PageContext) -> list[str]:
    """Absolute script URLs served from another site than the page."""
    out: list[str] = []
    for script in ctx.document.select("script[src]"):
        src = (Document.attr(script, "src") or "").strip()
        if not src:
            continue
        resolved = urljoin(ctx.url, src)
        if urlparse(resolved).scheme not in ("http", "https"):
            continue
        if not is_same_site(resolved, ctx.url):
            out.append(resolved)
    return out
