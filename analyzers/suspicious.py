"""
Suspicious-site scorer. Additive: higher scores mean more suspicious.
"""
from __future__ import annotations

import re

from analyzers.base import BaseScorer, PageContext, third_party_scripts, top_level_domain
from config import (
    MAX_REDIRECTS_BEFORE_SUSPICIOUS,
    MIN_PARAGRAPHS,
    SHORT_DOMAIN_LENGTH,
    SUSPICIOUS_MISSING_HEADERS,
    SUSPICIOUS_THIRD_PARTY_SCRIPTS,
    SUSPICIOUS_TLDS,
)
from models import SuspiciousReport
from scoring.scorer import clamp_score, is_suspicious, score_label

_DIGIT_RUN_RE = re.compile(r"\d{4,}")


class SuspiciousSiteScorer(BaseScorer):
    module = "suspicious"

    def score(self, ctx: PageContext) -> SuspiciousReport:
        doc = ctx.document
        domain = ctx.hostname
        score = 0
        indicators: list[str] = []
        good: list[str] = []

        if ctx.scheme != "https":
            score += 30
            indicators.append("No HTTPS - insecure connection")
        else:
            good.append("Served over HTTPS")

        if f".{top_level_domain(domain)}" in SUSPICIOUS_TLDS:
            score += 25
            indicators.append("Suspicious domain extension")

        if len(domain) < SHORT_DOMAIN_LENGTH or _DIGIT_RUN_RE.search(domain):
            score += 20
            indicators.append("Suspicious domain name")

        if ctx.redirect_count > MAX_REDIRECTS_BEFORE_SUSPICIOUS:
            score += 15
            indicators.append(f"Too many redirects ({ctx.redirect_count})")

        external_scripts = len(third_party_scripts(ctx))
        if external_scripts > SUSPICIOUS_THIRD_PARTY_SCRIPTS:
            score += 20
            indicators.append("Many third-party scripts")

        title_node = doc.select_one("title")
        title = title_node.get_text(strip=True) if title_node is not None else ""
        h1_count = doc.count("h1")
        paragraphs = doc.count("p")
        if not title or h1_count == 0 or paragraphs < MIN_PARAGRAPHS:
            score += 15
            indicators.append("Insufficient structured content")
        else:
            good.append("Page has structured content")

        missing = [label for header, label in SUSPICIOUS_MISSING_HEADERS.items() if not ctx.header(header)]
        if len(missing) >= 2:
            score += 10
            indicators.append(f"Missing security headers: {', '.join(missing)}")

        final = clamp_score(score)
        return SuspiciousReport(
            score=final,
            level=score_label(final, self.module),
            issues=indicators,
            good_points=good,
            details={
                "domain": domain,
                "redirect_count": ctx.redirect_count,
                "external_scripts": external_scripts,
                "paragraphs": paragraphs,
                "missing_security_headers": missing,
            },
            is_suspicious=is_suspicious(final),
        )
