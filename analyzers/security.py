"""
Security scorer: HTTPS, security response headers, insecure form targets and
third-party script exposure.
"""
from __future__ import annotations

from urllib.parse import urljoin, urlparse

from analyzers.base import BaseScorer, PageContext, third_party_scripts
from config import (
    SECURITY_HEADERS,
    SECURITY_THIRD_PARTY_SCRIPT_LIMIT,
    SECURITY_THIRD_PARTY_SCRIPT_MAX_PENALTY,
)
from loader.parser import Document
from models import ScoreReport


class SecurityScorer(BaseScorer):
    module = "security"

    def score(self, ctx: PageContext) -> ScoreReport:
        score = 100
        issues: list[str] = []
        good: list[str] = []

        # ── HTTPS ─────────────────────────────────────────────────────────────
        if ctx.scheme != "https":
            score -= 30
            issues.append("Insecure site (HTTP instead of HTTPS)")
        else:
            good.append("Secure HTTPS connection")

        # ── Security headers ──────────────────────────────────────────────────
        present: dict[str, bool] = {}
        for header, description in SECURITY_HEADERS.items():
            present[header] = bool(ctx.header(header))
            if present[header]:
                good.append(f"{description} enabled")
            else:
                score -= 10
                issues.append(f"{description} missing")

        # ── Forms ─────────────────────────────────────────────────────────────
        insecure_forms = insecure_form_count(ctx)
        if insecure_forms > 0:
            score -= insecure_forms * 15
            issues.append(f"{insecure_forms} form(s) potentially submitted without HTTPS")

        # ── Third-party scripts ───────────────────────────────────────────────
        external_scripts = len(third_party_scripts(ctx))
        if external_scripts > SECURITY_THIRD_PARTY_SCRIPT_LIMIT:
            score -= min(SECURITY_THIRD_PARTY_SCRIPT_MAX_PENALTY, external_scripts * 2)
            issues.append(f"{external_scripts} third-party scripts - security risk")

        return self._report(
            score, issues, good,
            details={
                "protocol": f"{ctx.scheme}:",
                "security_headers": present,
                "insecure_forms": insecure_forms,
                "external_scripts": external_scripts,
            },
        )


def insecure_form_count(ctx: PageContext) -> int:
    """Forms whose resolved submission target is not HTTPS."""
    count = 0
    for form in ctx.document.select("form"):
        action = (Document.attr(form, "action") or "").strip()
        target = urljoin(ctx.url, action) if action else ctx.url
        if urlparse(target).scheme.lower() != "https":
            count += 1
    return count
