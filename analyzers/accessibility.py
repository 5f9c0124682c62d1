"""
Accessibility scorer: alt text, link text, heading structure, form labels,
inline low-contrast colours and the document language.
"""
from __future__ import annotations

import re

from analyzers.base import BaseScorer, PageContext
from config import LOW_CONTRAST_COLORS, UNLABELED_INPUT_TYPES
from loader.parser import Document
from models import ScoreReport

# `color:` declarations only, not background-color / border-color
_COLOR_DECL_RE = re.compile(r"(?<![\w-])color\s*:\s*([^;]+)", re.IGNORECASE)


class AccessibilityScorer(BaseScorer):
    module = "accessibility"

    def score(self, ctx: PageContext) -> ScoreReport:
        doc = ctx.document
        score = 100.0
        issues: list[str] = []
        good: list[str] = []

        # ── Images without alt ────────────────────────────────────────────────
        total_images = doc.count("img")
        missing_alt = doc.count("img:not([alt])")
        if missing_alt > 0:
            score -= missing_alt / total_images * 20
            issues.append(f"{missing_alt} of {total_images} images have no alt attribute")
        elif total_images > 0:
            good.append("All images have an alt attribute")

        # ── Links without discernible text ────────────────────────────────────
        empty_links = sum(1 for a in doc.select("a") if not _has_discernible_text(a))
        if empty_links > 0:
            score -= empty_links * 5
            issues.append(f"{empty_links} links without descriptive text")

        # ── Heading structure ─────────────────────────────────────────────────
        h1_count = doc.count("h1")
        if h1_count == 0:
            score -= 15
            issues.append("No H1 heading found")
        elif h1_count > 1:
            score -= 10
            issues.append(f"Multiple H1 found ({h1_count}) - only one recommended")
        else:
            good.append("Correct heading structure (one H1)")

        # ── Form labels ───────────────────────────────────────────────────────
        unlabeled = unlabeled_inputs(doc)
        if unlabeled > 0:
            score -= unlabeled * 10
            issues.append(f"{unlabeled} form fields without a label")

        # ── Contrast (inline styles only) ─────────────────────────────────────
        low_contrast = low_contrast_elements(doc)
        if low_contrast > 0:
            score -= 10
            issues.append("Elements with potentially low contrast detected")

        # ── Document language ─────────────────────────────────────────────────
        lang = doc.root_attr("lang")
        if not lang:
            score -= 10
            issues.append("Missing lang attribute on the html element")
        else:
            good.append("Document language declared")

        return self._report(
            score, issues, good,
            details={
                "images_total": total_images,
                "images_missing_alt": missing_alt,
                "links_without_text": empty_links,
                "h1_count": h1_count,
                "unlabeled_inputs": unlabeled,
                "low_contrast_elements": low_contrast,
                "lang": lang,
            },
        )


def _has_discernible_text(link) -> bool:
    if Document.text(link):
        return True
    if (Document.attr(link, "aria-label") or "").strip():
        return True
    if (Document.attr(link, "aria-labelledby") or "").strip():
        return True
    if (Document.attr(link, "title") or "").strip():
        return True
    return any((Document.attr(img, "alt") or "").strip() for img in link.find_all("img"))


def unlabeled_inputs(doc: Document) -> int:
    label_targets = {
        Document.attr(label, "for") for label in doc.select("label[for]")
    }
    count = 0
    for node in doc.select("input"):
        input_type = (Document.attr(node, "type") or "text").lower()
        if input_type in UNLABELED_INPUT_TYPES:
            continue
        if node.has_attr("aria-label") or node.has_attr("aria-labelledby"):
            continue
        input_id = Document.attr(node, "id")
        if input_id and input_id in label_targets:
            continue
        if node.find_parent("label") is not None:
            continue
        count += 1
    return count


def low_contrast_elements(doc: Document) -> int:
    count = 0
    for node in doc.select("[style]"):
        style = Document.attr(node, "style") or ""
        for match in _COLOR_DECL_RE.finditer(style):
            value = match.group(1).strip().lower()
            if any(_matches_token(value, token) for token in LOW_CONTRAST_COLORS):
                count += 1
                break
    return count


def _matches_token(value: str, token: str) -> bool:
    # "#ccc" must not match "#cccddd"; "gray" must not match "darkgray"
    return re.search(rf"(?<![\w#-]){re.escape(token)}(?![\w-])", value) is not None
