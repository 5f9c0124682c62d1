"""
Performance scorer: response time, resource counts, caching and compression.
Penalties apply first, then the caching/compression bonuses, then the clamp.
"""
from __future__ import annotations

from analyzers.base import BaseScorer, PageContext, third_party_scripts
from config import (
    MAX_IMAGES,
    MAX_SCRIPTS,
    MAX_THIRD_PARTY_SCRIPTS,
    SLOW_RESPONSE_TIME_MS,
    VERY_SLOW_RESPONSE_TIME_MS,
)
from models import ScoreReport


class PerformanceScorer(BaseScorer):
    module = "performance"

    def score(self, ctx: PageContext) -> ScoreReport:
        doc = ctx.document
        rt = ctx.elapsed_ms
        issues: list[str] = []
        good: list[str] = []

        images = doc.count("img")
        scripts = doc.count("script")
        stylesheets = doc.count('link[rel~="stylesheet"]')
        external_scripts = len(third_party_scripts(ctx))

        score = 100

        # ── Response time ─────────────────────────────────────────────────────
        if rt > VERY_SLOW_RESPONSE_TIME_MS:
            score -= 30
            issues.append(f"Very slow response time ({rt} ms)")
        elif rt > SLOW_RESPONSE_TIME_MS:
            score -= 15
            issues.append(f"Slow response time ({rt} ms)")
        else:
            good.append(f"Fast response time ({rt} ms)")

        # ── Resource counts ───────────────────────────────────────────────────
        if images > MAX_IMAGES:
            score -= 10
            issues.append(f"Many images ({images})")
        if scripts > MAX_SCRIPTS:
            score -= 10
            issues.append(f"Too many scripts ({scripts})")
        if external_scripts > MAX_THIRD_PARTY_SCRIPTS:
            score -= 15
            issues.append(f"Many third-party scripts ({external_scripts})")

        # ── Caching ───────────────────────────────────────────────────────────
        cache_control = ctx.header("cache-control")
        cache_bonus = 0
        if cache_control:
            cache_bonus = 20 if "max-age" in cache_control.lower() else 10
            good.append("Cache-Control header present")

        # ── Compression ───────────────────────────────────────────────────────
        encoding = ctx.header("content-encoding")
        compression_bonus = 0
        if encoding:
            lowered = encoding.lower()
            compression_bonus = 20 if ("gzip" in lowered or "br" in lowered) else 10
            good.append(f"Response compressed ({encoding})")

        score += cache_bonus + compression_bonus

        report = self._report(
            score, issues, good,
            details={
                "response_time": rt,
                "images": images,
                "scripts": scripts,
                "stylesheets": stylesheets,
                "external_scripts": external_scripts,
                "has_compression": compression_bonus > 0,
                "has_caching": cache_bonus > 0,
            },
        )
        report.recommendations = performance_recommendations(
            report.score, rt, images, scripts, external_scripts
        )
        return report


def performance_recommendations(
    score: int,
    response_time: int,
    images: int,
    scripts: int,
    external_scripts: int,
) -> list[str]:
    recommendations: list[str] = []

    if response_time > VERY_SLOW_RESPONSE_TIME_MS:
        recommendations.append("Very slow response time (>3s) - optimize the server")
    elif response_time > SLOW_RESPONSE_TIME_MS:
        recommendations.append("Slow response time (>1s) - consider optimizing")

    if images > MAX_IMAGES:
        recommendations.append(f"Many images ({images}) - optimize and compress them")

    if scripts > MAX_SCRIPTS:
        recommendations.append(f"Too many scripts ({scripts}) - minify and bundle them")

    if external_scripts > MAX_THIRD_PARTY_SCRIPTS:
        recommendations.append(f"Many third-party scripts ({external_scripts}) - reduce dependencies")

    if score < 60:
        recommendations.append("Enable gzip/brotli compression")
        recommendations.append("Configure caching for static resources")

    return recommendations
