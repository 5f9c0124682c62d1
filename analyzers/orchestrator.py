"""
Single-request orchestration: validate → cache check → fetch → parse →
score → cache → done. Scorers run independently; one failing never stops
the others or the request.
"""
from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from analyzers.accessibility import AccessibilityScorer
from analyzers.base import BaseScorer, PageContext
from analyzers.page_info import (
    detect_technologies,
    extract_headings,
    extract_links,
    extract_media,
    extract_meta,
    extract_social_meta,
    resolve_language,
    summarize_headers,
    word_count,
)
from analyzers.performance import PerformanceScorer
from analyzers.security import SecurityScorer
from analyzers.seo import SEOScorer
from analyzers.suspicious import SuspiciousSiteScorer
from cache.result_cache import ResultCache
from errors import AnalysisError, InvalidRequestError, InvalidUrlError, ParseError, error_payload
from loader.fetcher import fetch_page, normalize_url
from loader.parser import Document
from models import AnalysisOptions, AnalysisRequest, AnalysisResult, FetchResult

logger = logging.getLogger(__name__)

Fetcher = Callable[[str, AnalysisOptions], FetchResult]

# (result field, option toggle, scorer) in execution order
_SCORERS: list[tuple[str, str, BaseScorer]] = [
    ("suspicious", "detect_suspicious", SuspiciousSiteScorer()),
    ("seo", "seo_analysis", SEOScorer()),
    ("performance", "performance_analysis", PerformanceScorer()),
    ("accessibility", "accessibility_analysis", AccessibilityScorer()),
    ("security", "security_analysis", SecurityScorer()),
]


class AnalysisEngine:
    """Analyzes one page per call, backed by a shared ResultCache."""

    def __init__(self, cache: Optional[ResultCache] = None, fetcher: Fetcher = fetch_page) -> None:
        self.cache = cache if cache is not None else ResultCache()
        self.fetcher = fetcher

    def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """Run a full analysis. Raises AnalysisError subclasses on failure."""
        options = request.options

        # ── Validating ────────────────────────────────────────────────────────
        if not request.url or not request.url.strip():
            raise InvalidUrlError("URL is required")
        url = normalize_url(request.url)

        # ── CacheCheck ────────────────────────────────────────────────────────
        key = ResultCache.make_key(url, options)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", url)
            return cached.data

        # ── Fetching ──────────────────────────────────────────────────────────
        logger.info("Analyzing %s", url)
        fetched = self.fetcher(url, options)

        # ── Parsing ───────────────────────────────────────────────────────────
        try:
            doc = Document(fetched.body)
        except ParseError as exc:
            logger.warning("Could not parse body of %s, analyzing an empty document: %s", url, exc)
            doc = Document.empty()

        result = _build_envelope(url, options, fetched, doc)

        # ── Scoring ───────────────────────────────────────────────────────────
        ctx = PageContext(
            url=url,
            document=doc,
            headers=fetched.headers,
            elapsed_ms=fetched.elapsed_ms,
            redirect_count=fetched.redirect_count,
        )
        for name, toggle, scorer in _SCORERS:
            if not getattr(options, toggle):
                continue
            try:
                setattr(result, name, scorer.score(ctx))
            except Exception as exc:
                # Never let one scorer sink the whole analysis
                logger.exception("%s scoring failed for %s", name, url)
                result.module_errors[name] = str(exc)

        # ── Caching ───────────────────────────────────────────────────────────
        self.cache.put(key, result)
        return result

    def handle_request(self, payload: Mapping[str, Any]) -> tuple[int, dict[str, Any]]:
        """
        POST-style contract: {"url": ..., "options": {...}} in,
        (status code, JSON-ready body) out. Never raises for analysis failures.
        """
        try:
            if not isinstance(payload, Mapping):
                raise InvalidRequestError("request body must be an object")
            request = AnalysisRequest(
                url=str(payload.get("url") or ""),
                options=AnalysisOptions.from_dict(payload.get("options")),
            )
            result = self.analyze(request)
        except AnalysisError as exc:
            logger.warning("Analysis failed: %s (%s)", exc.code, exc)
            return 400, error_payload(exc)
        return 200, result.to_dict()

    def clear_cache(self) -> None:
        self.cache.clear()

    def cache_size(self) -> int:
        return self.cache.size()


def _build_envelope(
    url: str,
    options: AnalysisOptions,
    fetched: FetchResult,
    doc: Document,
) -> AnalysisResult:
    meta = extract_meta(doc)
    body = fetched.body
    raw = body if isinstance(body, bytes) else body.encode("utf-8")
    title = meta["title"]
    description = meta["meta_description"]

    return AnalysisResult(
        url=url,
        status=fetched.status,
        response_time=fetched.elapsed_ms,
        language=resolve_language(doc, options.language),
        html_size=round(len(raw) / 1024),
        word_count=word_count(doc),
        title=title,
        title_length=len(title or ""),
        meta_description=description,
        meta_description_length=len(description or ""),
        meta_keywords=meta["meta_keywords"],
        canonical=meta["canonical"],
        robots=meta["robots"],
        headings=extract_headings(doc),
        links=extract_links(doc, url),
        media=extract_media(doc),
        social_meta=extract_social_meta(doc),
        technologies=detect_technologies(doc, fetched.headers),
        headers=summarize_headers(fetched.headers),
        redirect_chain=list(fetched.redirect_chain),
        timestamp=datetime.now(timezone.utc).isoformat(),
        options=asdict(options),
    )
