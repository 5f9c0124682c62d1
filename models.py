"""
Core data models for the Site Analyzer.
All modules import from here; it depends only on config and errors.

NOTE: `from __future__ import annotations` is omitted on purpose; dataclasses
in this module are built while the module is still being registered, and the
future import trips a dataclasses regression on Python 3.13.0.
"""

import json
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Mapping, Optional

from config import DEFAULT_IDENTITY_PROFILE, DEFAULT_LOCALE_PROFILE
from errors import InvalidRequestError


# ── Options ───────────────────────────────────────────────────────────────────

# Accepted external spellings → field name
_OPTION_ALIASES = {
    "language": "language",
    "userAgent": "identity_profile",
    "identityProfile": "identity_profile",
    "identity_profile": "identity_profile",
    "location": "locale_profile",
    "localeProfile": "locale_profile",
    "locale_profile": "locale_profile",
    "followRedirects": "follow_redirects",
    "follow_redirects": "follow_redirects",
    "detectSuspicious": "detect_suspicious",
    "detect_suspicious": "detect_suspicious",
    "seoAnalysis": "seo_analysis",
    "seo_analysis": "seo_analysis",
    "performanceAnalysis": "performance_analysis",
    "performance_analysis": "performance_analysis",
    "accessibilityAnalysis": "accessibility_analysis",
    "accessibility_analysis": "accessibility_analysis",
    "securityAnalysis": "security_analysis",
    "security_analysis": "security_analysis",
}


@dataclass(frozen=True)
class AnalysisOptions:
    language: str = "auto"
    identity_profile: str = DEFAULT_IDENTITY_PROFILE
    locale_profile: str = DEFAULT_LOCALE_PROFILE
    follow_redirects: bool = True
    detect_suspicious: bool = True
    seo_analysis: bool = True
    performance_analysis: bool = True
    accessibility_analysis: bool = True
    security_analysis: bool = True

    @classmethod
    def from_dict(cls, raw: Optional[Mapping[str, Any]] = None) -> "AnalysisOptions":
        """
        Merge caller-supplied options over the canonical defaults.
        Omitted keys keep their default whether `raw` is None, empty or partial.
        Raises InvalidRequestError when `raw` is not a mapping or a toggle
        cannot be read as a boolean.
        """
        if raw is None:
            return cls()
        if not isinstance(raw, Mapping):
            raise InvalidRequestError(f"options must be an object, got {type(raw).__name__}")

        bool_fields = {f.name for f in fields(cls) if f.type in (bool, "bool")}
        values: dict[str, Any] = {}
        for key, value in raw.items():
            name = _OPTION_ALIASES.get(key)
            if name is None or value is None:
                continue
            values[name] = _parse_bool(key, value) if name in bool_fields else str(value)
        return cls(**values)

    def cache_fragment(self) -> str:
        return json.dumps(asdict(self), sort_keys=True, separators=(",", ":"))


_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off", ""}


def _parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise InvalidRequestError(f"option {key!r} expects a boolean, got {value!r}")


@dataclass(frozen=True)
class AnalysisRequest:
    url: str
    options: AnalysisOptions = field(default_factory=AnalysisOptions)


# ── Fetch ─────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FetchResult:
    url: str
    status: int
    headers: Mapping[str, str]        # case-insensitive mapping
    body: str
    elapsed_ms: int
    final_url: str = ""
    redirect_count: int = 0
    redirect_chain: tuple[str, ...] = ()


# ── Reports ───────────────────────────────────────────────────────────────────

@dataclass
class ScoreReport:
    score: int
    level: str
    issues: list[str] = field(default_factory=list)
    good_points: list[str] = field(default_factory=list)
    details: dict[str, Any] = field(default_factory=dict)
    recommendations: list[str] = field(default_factory=list)


@dataclass
class SuspiciousReport(ScoreReport):
    is_suspicious: bool = False


@dataclass
class AnalysisResult:
    url: str
    status: int = 0
    response_time: int = 0
    language: dict[str, str] = field(default_factory=dict)
    html_size: int = 0                # KB
    word_count: int = 0

    title: Optional[str] = None
    title_length: int = 0
    meta_description: Optional[str] = None
    meta_description_length: int = 0
    meta_keywords: Optional[str] = None
    canonical: Optional[str] = None
    robots: Optional[str] = None

    headings: dict[str, list[str]] = field(default_factory=dict)
    links: dict[str, Any] = field(default_factory=dict)
    media: dict[str, int] = field(default_factory=dict)
    social_meta: dict[str, Optional[str]] = field(default_factory=dict)
    technologies: list[str] = field(default_factory=list)
    headers: dict[str, str] = field(default_factory=dict)
    redirect_chain: list[str] = field(default_factory=list)
    timestamp: str = ""
    options: dict[str, Any] = field(default_factory=dict)

    # Optional module reports, present only when enabled
    suspicious: Optional[SuspiciousReport] = None
    seo: Optional[ScoreReport] = None
    performance: Optional[ScoreReport] = None
    accessibility: Optional[ScoreReport] = None
    security: Optional[ScoreReport] = None

    module_errors: dict[str, str] = field(default_factory=dict)

    @property
    def reports(self) -> dict[str, ScoreReport]:
        out: dict[str, ScoreReport] = {}
        for name in ("suspicious", "seo", "performance", "accessibility", "security"):
            report = getattr(self, name)
            if report is not None:
                out[name] = report
        return out

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for name in ("suspicious", "seo", "performance", "accessibility", "security"):
            if data[name] is None:
                del data[name]
        return data


# ── Cache ─────────────────────────────────────────────────────────────────────

@dataclass
class CacheEntry:
    key: str
    data: AnalysisResult
    created_at: float
