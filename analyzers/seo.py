"""
SEO scorer: title, meta description, headings, image alt coverage, linking,
robots, canonical, social metadata, structured data and sitemap declaration.

Additive model starting at 0; the rule total can exceed 100 before the cap.
"""
from __future__ import annotations

from urllib.parse import urljoin, urlparse

from analyzers.base import BaseScorer, PageContext, is_same_site
from config import (
    DESCRIPTION_MAX_CHARS,
    DESCRIPTION_MIN_CHARS,
    TITLE_MAX_CHARS,
    TITLE_MIN_CHARS,
)
from loader.parser import Document
from models import ScoreReport

_SKIPPED_HREF_PREFIXES = ("mailto:", "tel:", "javascript:", "#")


class SEOScorer(BaseScorer):
    module = "seo"

    def score(self, ctx: PageContext) -> ScoreReport:
        doc = ctx.document
        score = 0
        issues: list[str] = []
        good: list[str] = []

        # ── Title ─────────────────────────────────────────────────────────────
        title_node = doc.select_one("title")
        title = Document.text(title_node) if title_node is not None else ""
        if title:
            length = len(title)
            if TITLE_MIN_CHARS <= length <= TITLE_MAX_CHARS:
                score += 20
                good.append(f"Title has an optimal length ({TITLE_MIN_CHARS}-{TITLE_MAX_CHARS} characters)")
            else:
                score += 10
                verdict = "too short" if length < TITLE_MIN_CHARS else "too long"
                issues.append(f"Title {verdict} ({length} characters)")
        else:
            issues.append("Missing title - critical for SEO")

        # ── Meta description ──────────────────────────────────────────────────
        description = doc.first_attr('meta[name="description"]', "content") or ""
        if description:
            length = len(description)
            if DESCRIPTION_MIN_CHARS <= length <= DESCRIPTION_MAX_CHARS:
                score += 20
                good.append(
                    f"Meta description has an optimal length ({DESCRIPTION_MIN_CHARS}-{DESCRIPTION_MAX_CHARS} characters)"
                )
            else:
                score += 10
                verdict = "too short" if length < DESCRIPTION_MIN_CHARS else "too long"
                issues.append(f"Meta description {verdict} ({length} characters)")
        else:
            issues.append("Missing meta description - important for search results")

        # ── Headings ──────────────────────────────────────────────────────────
        h1_count = doc.count("h1")
        h2_count = doc.count("h2")
        h3_count = doc.count("h3")

        if h1_count == 1:
            score += 15
            good.append("Perfect H1 structure (exactly one H1)")
        elif h1_count == 0:
            issues.append("No H1 found - essential for page structure")
        else:
            issues.append(f"Multiple H1 found ({h1_count}) - only one recommended")

        if h2_count > 0:
            score += 10
            good.append(f"Good structure with H2 headings ({h2_count})")

        if h3_count > 0:
            score += 5
            good.append(f"Hierarchical structure with H3 headings ({h3_count})")

        # ── Image alt coverage ────────────────────────────────────────────────
        images = doc.select("img")
        images_with_alt = sum(1 for img in images if Document.attr(img, "alt"))
        if images:
            ratio = images_with_alt / len(images) * 100
            if ratio >= 90:
                score += 15
                good.append("Excellent use of alt attributes (>90%)")
            elif ratio >= 70:
                score += 10
                good.append(f"Good use of alt attributes ({round(ratio)}%)")
            elif ratio >= 50:
                score += 5
                issues.append(f"Average use of alt attributes ({round(ratio)}%)")
            else:
                issues.append(f"Poor use of alt attributes ({round(ratio)}%) - needs improvement")

        # ── Links ─────────────────────────────────────────────────────────────
        internal_links, external_links = count_links(doc, ctx.url)

        if internal_links > 0:
            score += 10
            good.append(f"Internal linking present ({internal_links} links)")
        else:
            issues.append("No internal links - internal linking missing")

        if external_links > 0:
            score += 5
            good.append(f"External links present ({external_links})")

        # ── Meta robots ───────────────────────────────────────────────────────
        robots = doc.first_attr('meta[name="robots"]', "content")
        if robots and "noindex" not in robots.lower():
            score += 5
            good.append("Meta robots configured correctly")
        elif robots:
            issues.append("Page blocked from indexing (noindex)")

        # ── Canonical ─────────────────────────────────────────────────────────
        canonical = doc.first_attr('link[rel~="canonical"]', "href")
        if canonical:
            score += 5
            good.append("Canonical URL defined")
        else:
            issues.append("Missing canonical URL - risk of duplicate content")

        # ── Open Graph ────────────────────────────────────────────────────────
        og_title = doc.first_attr('meta[property="og:title"]', "content")
        og_description = doc.first_attr('meta[property="og:description"]', "content")
        og_image = doc.first_attr('meta[property="og:image"]', "content")

        if og_title and og_description and og_image:
            score += 10
            good.append("Complete Open Graph metadata")
        elif og_title or og_description or og_image:
            score += 5
            issues.append("Partial Open Graph metadata")
        else:
            issues.append("Missing Open Graph metadata")

        # ── Twitter card ──────────────────────────────────────────────────────
        twitter_card = doc.first_attr('meta[name="twitter:card"]', "content")
        if twitter_card:
            score += 5
            good.append("Twitter Card configured")

        # ── Structured data ───────────────────────────────────────────────────
        has_structured_data = doc.count('script[type="application/ld+json"]') > 0
        if has_structured_data:
            score += 10
            good.append("Structured data detected (JSON-LD)")
        else:
            issues.append("Missing structured data - improves search visibility")

        # ── Sitemap ───────────────────────────────────────────────────────────
        has_sitemap = doc.count('link[rel~="sitemap"]') > 0
        if has_sitemap:
            score += 5
            good.append("Sitemap declared in the HTML")

        return self._report(
            min(score, 100), issues, good,
            details={
                "title": title or None,
                "title_length": len(title),
                "meta_description": description or None,
                "meta_description_length": len(description),
                "h1_count": h1_count,
                "h2_count": h2_count,
                "h3_count": h3_count,
                "images_total": len(images),
                "images_with_alt": images_with_alt,
                "internal_links": internal_links,
                "external_links": external_links,
                "canonical": canonical,
                "has_open_graph": bool(og_title and og_description and og_image),
                "has_twitter_card": bool(twitter_card),
                "has_structured_data": has_structured_data,
                "has_sitemap": has_sitemap,
            },
        )


def iter_links(doc: Document, page_url: str):
    """Yield (absolute_url, anchor node, is_internal) for every followable link."""
    for node in doc.select("a[href]"):
        href = (Document.attr(node, "href") or "").strip()
        if not href or href.lower().startswith(_SKIPPED_HREF_PREFIXES):
            continue
        absolute = urljoin(page_url, href)
        if urlparse(absolute).scheme not in ("http", "https"):
            continue
        yield absolute, node, is_same_site(absolute, page_url)


def count_links(doc: Document, page_url: str) -> tuple[int, int]:
    internal = external = 0
    for _, _, is_internal in iter_links(doc, page_url):
        if is_internal:
            internal += 1
        else:
            external += 1
    return internal, external
