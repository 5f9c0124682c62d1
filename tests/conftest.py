"""
Shared fixtures: page contexts built from inline HTML and a fake fetcher
so no test touches the network.
"""
from typing import Optional

import pytest
from requests.structures import CaseInsensitiveDict

from analyzers.base import PageContext
from loader.parser import Document
from models import AnalysisOptions, FetchResult

ALL_SECURITY_HEADERS = {
    "Strict-Transport-Security": "max-age=31536000",
    "Content-Security-Policy": "default-src 'self'",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


def build_context(
    html: str,
    url: str = "https://example.com/",
    headers: Optional[dict] = None,
    elapsed_ms: int = 200,
    redirect_count: int = 0,
) -> PageContext:
    return PageContext(
        url=url,
        document=Document(html),
        headers=CaseInsensitiveDict(headers or {}),
        elapsed_ms=elapsed_ms,
        redirect_count=redirect_count,
    )


@pytest.fixture
def make_context():
    return build_context


class FakeFetcher:
    """Stands in for loader.fetcher.fetch_page and records every call."""

    def __init__(self, body: str = "<html><head><title>Home</title></head><body><h1>Hi</h1></body></html>",
                 status: int = 200, headers: Optional[dict] = None, elapsed_ms: int = 120,
                 redirect_chain: tuple = (), error: Optional[Exception] = None):
        self.body = body
        self.status = status
        self.headers = headers or {"Content-Type": "text/html; charset=utf-8"}
        self.elapsed_ms = elapsed_ms
        self.redirect_chain = redirect_chain
        self.error = error
        self.calls: list[tuple[str, AnalysisOptions]] = []

    def __call__(self, url: str, options: AnalysisOptions) -> FetchResult:
        self.calls.append((url, options))
        if self.error is not None:
            raise self.error
        return FetchResult(
            url=url,
            status=self.status,
            headers=CaseInsensitiveDict(self.headers),
            body=self.body,
            elapsed_ms=self.elapsed_ms,
            final_url=url,
            redirect_count=len(self.redirect_chain),
            redirect_chain=tuple(self.redirect_chain),
        )


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()


class FakeClock:
    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()
