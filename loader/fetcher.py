"""
Single-page HTTP fetcher. Normalizes the target URL, applies the requested
client identity and locale headers, times the request and maps transport
failures onto typed errors.
"""
from __future__ import annotations

import logging
import re
import socket
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeout
from typing import Iterator, Optional
from urllib.parse import urlsplit, urlunsplit

import requests
from requests.compat import chardet
from requests.structures import CaseInsensitiveDict

from config import (
    DEFAULT_ACCEPT,
    DEFAULT_ACCEPT_ENCODING,
    DEFAULT_IDENTITY_PROFILE,
    DEFAULT_LOCALE_PROFILE,
    FETCH_CHUNK_SIZE,
    FETCH_WORKERS,
    IDENTITY_PROFILES,
    LOCALE_PROFILES,
    MAX_REDIRECTS,
    REQUEST_TIMEOUT,
)
from errors import (
    CertificateExpiredError,
    CertificateUntrustedError,
    ConnectionRefusedFetchError,
    DnsError,
    FetchError,
    FetchTimeoutError,
    GenericFetchError,
    InvalidUrlError,
)
from models import AnalysisOptions, FetchResult

logger = logging.getLogger(__name__)

# Downloads run here so the caller can stop waiting at the deadline
_EXECUTOR = ThreadPoolExecutor(max_workers=FETCH_WORKERS, thread_name_prefix="fetch")

_HOST_RE = re.compile(r"^(\[[0-9a-fA-F:.]+\]|[A-Za-z0-9_.-]+)$")

_DNS_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "temporary failure in name resolution",
    "no address associated with hostname",
    "failed to resolve",
    "nameresolutionerror",
)
_REFUSED_MARKERS = ("connection refused", "actively refused", "errno 111", "errno 61")
_EXPIRED_MARKERS = ("certificate has expired", "certificate expired")
_UNTRUSTED_MARKERS = (
    "certificate verify failed",
    "unable to get local issuer",
    "self signed certificate",
    "self-signed certificate",
    "unable to verify the first certificate",
    "hostname mismatch",
)


# ── URL normalization ─────────────────────────────────────────────────────────

def normalize_url(url: str) -> str:
    """
    Return the canonical absolute form of `url`.
    A missing scheme defaults to https; an empty path becomes "/".
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidUrlError("URL is empty", url=url)

    candidate = url.strip()
    if not candidate.lower().startswith(("http://", "https://")):
        candidate = "https://" + candidate

    try:
        parts = urlsplit(candidate)
        host = parts.hostname
        port = parts.port
    except ValueError as exc:
        raise InvalidUrlError(f"Cannot parse URL: {url}", url=url) from exc

    if host and ":" not in host and not host.isascii():
        try:
            host = host.encode("idna").decode("ascii")
        except UnicodeError as exc:
            raise InvalidUrlError(f"Invalid host in URL: {url}", url=url) from exc

    if not host or not _HOST_RE.match(host if ":" not in host else f"[{host}]"):
        raise InvalidUrlError(f"Invalid host in URL: {url}", url=url)

    netloc = f"[{host}]" if ":" in host else host
    if parts.username:
        userinfo = parts.username + (f":{parts.password}" if parts.password else "")
        netloc = f"{userinfo}@{netloc}"
    if port is not None:
        netloc = f"{netloc}:{port}"

    return urlunsplit((
        parts.scheme.lower(),
        netloc,
        parts.path or "/",
        parts.query,
        parts.fragment,
    ))


# ── Request configuration ─────────────────────────────────────────────────────

def build_request_headers(options: AnalysisOptions) -> dict[str, str]:
    """Outbound headers for the selected identity and locale profiles."""
    user_agent = IDENTITY_PROFILES.get(
        options.identity_profile, IDENTITY_PROFILES[DEFAULT_IDENTITY_PROFILE]
    )
    locale = LOCALE_PROFILES.get(options.locale_profile, LOCALE_PROFILES[DEFAULT_LOCALE_PROFILE])

    headers = {
        "User-Agent": user_agent,
        "Accept": DEFAULT_ACCEPT,
        "Accept-Encoding": DEFAULT_ACCEPT_ENCODING,
        "DNT": "1",
        "Upgrade-Insecure-Requests": "1",
    }
    headers.update(locale)
    return headers


def _make_session(follow_redirects: bool) -> requests.Session:
    session = requests.Session()
    session.max_redirects = MAX_REDIRECTS if follow_redirects else 0
    return session


# ── Fetch ─────────────────────────────────────────────────────────────────────

def fetch_page(
    url: str,
    options: AnalysisOptions,
    session: Optional[requests.Session] = None,
    timeout: int = REQUEST_TIMEOUT,
) -> FetchResult:
    """
    GET `url` once and return its status, headers, body and timing.
    Any status below 500 is returned as a result; the rest raise FetchError.
    `timeout` bounds the whole exchange, body download included.
    """
    own_session = session is None
    if own_session:
        session = _make_session(options.follow_redirects)

    cancelled = threading.Event()
    inflight: dict = {}
    t0 = time.perf_counter()
    future = _EXECUTOR.submit(
        _download, session, url, options, timeout, t0 + timeout, cancelled, inflight
    )
    try:
        resp, raw = future.result(timeout=timeout)
        elapsed_ms = int((time.perf_counter() - t0) * 1000)
    except FuturesTimeout:
        # The worker may still be blocked on a socket read; stop it and move on
        cancelled.set()
        _close_quietly(inflight.get("response"))
        logger.info("Fetch of %s exceeded %ss", url, timeout)
        raise FetchTimeoutError(f"No complete response within {timeout}s", url=url)
    except requests.exceptions.RequestException as exc:
        error = classify_exception(exc, url)
        logger.info("Fetch of %s failed: %s (%s)", url, error.code, exc)
        raise error from exc
    finally:
        if own_session:
            session.close()

    if resp.status_code >= 500:
        raise GenericFetchError(
            f"Server responded with HTTP {resp.status_code}",
            url=url,
            status=resp.status_code,
        )

    chain = tuple(r.url for r in resp.history)
    return FetchResult(
        url=url,
        status=resp.status_code,
        headers=CaseInsensitiveDict(resp.headers),
        body=_decode_body(resp, raw),
        elapsed_ms=elapsed_ms,
        final_url=resp.url or url,
        redirect_count=len(chain),
        redirect_chain=chain,
    )


def _download(
    session: requests.Session,
    url: str,
    options: AnalysisOptions,
    timeout: int,
    deadline: float,
    cancelled: threading.Event,
    inflight: dict,
) -> tuple[requests.Response, bytes]:
    """Stream the response body, giving up once `deadline` has passed."""
    resp = session.get(
        url,
        headers=build_request_headers(options),
        timeout=timeout,
        allow_redirects=options.follow_redirects,
        stream=True,
    )
    inflight["response"] = resp
    chunks: list[bytes] = []
    try:
        for chunk in resp.iter_content(chunk_size=FETCH_CHUNK_SIZE):
            if cancelled.is_set() or time.perf_counter() > deadline:
                raise FetchTimeoutError(f"No complete response within {timeout}s", url=url)
            if chunk:
                chunks.append(chunk)
    finally:
        _close_quietly(resp)
    return resp, b"".join(chunks)


def _decode_body(resp: requests.Response, raw: bytes) -> str:
    """Decode the way `Response.text` does: declared charset, then detection."""
    encoding = resp.encoding
    if not encoding and raw and chardet is not None:
        encoding = chardet.detect(raw)["encoding"]
    try:
        return raw.decode(encoding or "utf-8", errors="replace")
    except LookupError:
        return raw.decode("utf-8", errors="replace")


def _close_quietly(resp: Optional[requests.Response]) -> None:
    if resp is None:
        return
    try:
        resp.close()
    except Exception:
        logger.debug("Closing response failed", exc_info=True)


# ── Error classification ──────────────────────────────────────────────────────

def classify_exception(exc: Exception, url: str = "") -> FetchError:
    """Map a requests exception onto the typed fetch error it represents."""
    message = str(exc)

    if isinstance(exc, requests.exceptions.Timeout):
        return FetchTimeoutError(message, url=url)

    if isinstance(exc, requests.exceptions.TooManyRedirects):
        return GenericFetchError(f"Too many redirects: {message}", url=url)

    causes = list(_iter_causes(exc))
    text = " ".join(str(c) for c in causes).lower()

    if isinstance(exc, requests.exceptions.SSLError):
        if any(m in text for m in _EXPIRED_MARKERS):
            return CertificateExpiredError(message, url=url)
        if any(m in text for m in _UNTRUSTED_MARKERS):
            return CertificateUntrustedError(message, url=url)
        return GenericFetchError(f"SSL error: {message}", url=url)

    if isinstance(exc, requests.exceptions.ConnectionError):
        if any(isinstance(c, socket.gaierror) for c in causes) or any(m in text for m in _DNS_MARKERS):
            return DnsError(message, url=url)
        if any(isinstance(c, ConnectionRefusedError) for c in causes) or any(m in text for m in _REFUSED_MARKERS):
            return ConnectionRefusedFetchError(message, url=url)
        if "timed out" in text:
            return FetchTimeoutError(message, url=url)

    return GenericFetchError(message, url=url)


def _iter_causes(exc: BaseException, depth: int = 0) -> Iterator[BaseException]:
    """Walk the exception, its wrapped reasons and its chain."""
    if exc is None or depth > 8:
        return
    yield exc
    nested = [getattr(exc, "reason", None), exc.__cause__, exc.__context__]
    nested.extend(a for a in getattr(exc, "args", ()) if isinstance(a, BaseException))
    for inner in nested:
        if isinstance(inner, BaseException) and inner is not exc:
            yield from _iter_causes(inner, depth + 1)
