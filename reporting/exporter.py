"""
Converts AnalysisResult data to Pandas DataFrames and CSV bytes for export.
"""
from __future__ import annotations

import io

import pandas as pd

from models import AnalysisResult

_MODULE_LABELS = {
    "suspicious": "Suspicious site",
    "seo": "SEO",
    "performance": "Performance",
    "accessibility": "Accessibility",
    "security": "Security",
}

_FINDING_ORDER = {"Issue": 0, "Recommendation": 1, "Good point": 2}


# ── Findings DataFrame ─────────────────────────────────────────────────────────

def findings_to_df(result: AnalysisResult) -> pd.DataFrame:
    """One row per issue, recommendation and good point across all modules."""
    rows = []
    for name, report in result.reports.items():
        module = _MODULE_LABELS.get(name, name)
        for message in report.issues:
            rows.append({"Module": module, "Type": "Issue", "Message": message})
        for message in report.recommendations:
            rows.append({"Module": module, "Type": "Recommendation", "Message": message})
        for message in report.good_points:
            rows.append({"Module": module, "Type": "Good point", "Message": message})

    if not rows:
        return pd.DataFrame(columns=["Module", "Type", "Message"])

    df = pd.DataFrame(rows)
    # Stable sort keeps rule order inside each (module, type) group
    df["_order"] = df["Type"].map(_FINDING_ORDER)
    df = df.sort_values(["Module", "_order"], kind="stable").drop(columns=["_order"])
    return df.reset_index(drop=True)


# ── Summary table ──────────────────────────────────────────────────────────────

def scores_summary_df(result: AnalysisResult) -> pd.DataFrame:
    """Score, level and finding counts per enabled module."""
    rows = []
    for name, report in result.reports.items():
        rows.append({
            "Module":      _MODULE_LABELS.get(name, name),
            "Score":       report.score,
            "Level":       report.level,
            "Issues":      len(report.issues),
            "Good points": len(report.good_points),
        })
    for name, error in result.module_errors.items():
        rows.append({
            "Module":      _MODULE_LABELS.get(name, name),
            "Score":       None,
            "Level":       f"Error: {error}",
            "Issues":      0,
            "Good points": 0,
        })

    if not rows:
        return pd.DataFrame(columns=["Module", "Score", "Level", "Issues", "Good points"])
    return pd.DataFrame(rows)


def links_to_df(result: AnalysisResult) -> pd.DataFrame:
    rows = []
    for kind, key in (("Internal", "internal_list"), ("External", "external_list")):
        for link in result.links.get(key, []):
            rows.append({
                "Kind":  kind,
                "URL":   link["url"],
                "Text":  link["text"],
                "Title": link["title"],
            })
    if not rows:
        return pd.DataFrame(columns=["Kind", "URL", "Text", "Title"])
    return pd.DataFrame(rows)


# ── CSV export ─────────────────────────────────────────────────────────────────

def to_csv_bytes(df: pd.DataFrame) -> bytes:
    buf = io.StringIO()
    df.to_csv(buf, index=False)
    return buf.getvalue().encode("utf-8")
