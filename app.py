"""
Site Analyzer — Streamlit Application
Analyzes a single web page: SEO, accessibility, performance, security and
suspicious-site signals.
"""
from __future__ import annotations

import logging
from typing import Optional

import streamlit as st

from analyzers.orchestrator import AnalysisEngine
from cache.result_cache import CacheSweeper, ResultCache
from config import IDENTITY_PROFILES, LANGUAGES, LOCALE_LABELS
from errors import AnalysisError
from models import AnalysisOptions, AnalysisRequest, AnalysisResult, ScoreReport, SuspiciousReport
from reporting.exporter import findings_to_df, links_to_df, scores_summary_df, to_csv_bytes
from scoring.scorer import score_color
from ui.charts import media_donut, module_scores_bar, score_gauge

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

MODULE_LABELS = {
    "suspicious": "Suspicious site",
    "seo": "SEO",
    "performance": "Performance",
    "accessibility": "Accessibility",
    "security": "Security",
}

# ── Page config ────────────────────────────────────────────────────────────────
st.set_page_config(
    page_title="Site Analyzer",
    page_icon="🔍",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
.block-container { padding-top: 1rem; }
.metric-card {
    background: #1A1D27;
    border-radius: 10px;
    padding: 1rem 1.2rem;
    margin-bottom: 0.5rem;
    border-left: 4px solid #6C63FF;
}
.metric-val  { font-size: 1.6rem; font-weight: 700; margin: 0; }
.metric-lbl  { font-size: 0.8rem; color: #888; text-transform: uppercase; letter-spacing: 0.05em; }
.modebar { display: none !important; }
.sidebar-logo { font-size: 1.5rem; font-weight: 800; color: #6C63FF; margin-bottom: 0.5rem; }
</style>
""", unsafe_allow_html=True)


# ── Engine (one per server process) ────────────────────────────────────────────

@st.cache_resource
def get_engine() -> AnalysisEngine:
    cache = ResultCache()
    CacheSweeper(cache).start()
    return AnalysisEngine(cache=cache)


# ── Sidebar ────────────────────────────────────────────────────────────────────

def render_sidebar(engine: AnalysisEngine) -> Optional[AnalysisRequest]:
    with st.sidebar:
        st.markdown('<div class="sidebar-logo">🔍 Site Analyzer</div>', unsafe_allow_html=True)
        st.caption("Single-page quality analysis")
        st.divider()

        url = st.text_input("Page URL", placeholder="example.com", help="https:// is added when omitted")

        st.subheader("Client")
        identity = st.selectbox("Identity", options=list(IDENTITY_PROFILES.keys()), index=0)
        st.caption(f"`{IDENTITY_PROFILES[identity]}`")
        locale = st.selectbox(
            "Location",
            options=list(LOCALE_LABELS.keys()),
            format_func=lambda k: LOCALE_LABELS[k],
        )
        language = st.selectbox("Language", options=list(LANGUAGES.keys()), format_func=lambda k: LANGUAGES[k])
        follow_redirects = st.toggle("Follow redirects", value=True)

        st.subheader("Modules")
        seo = st.toggle("SEO", value=True)
        performance = st.toggle("Performance", value=True)
        accessibility = st.toggle("Accessibility", value=True)
        security = st.toggle("Security", value=True)
        suspicious = st.toggle("Suspicious site detection", value=True)

        st.divider()
        start = st.button("Analyze", type="primary", use_container_width=True)

        st.divider()
        st.caption(f"Cached results: {engine.cache_size()}")
        if st.button("Clear cache", use_container_width=True):
            engine.clear_cache()
            st.session_state.pop("analysis_result", None)
            st.rerun()

    if start and url:
        return AnalysisRequest(
            url=url,
            options=AnalysisOptions(
                language=language,
                identity_profile=identity,
                locale_profile=locale,
                follow_redirects=follow_redirects,
                detect_suspicious=suspicious,
                seo_analysis=seo,
                performance_analysis=performance,
                accessibility_analysis=accessibility,
                security_analysis=security,
            ),
        )
    return None


# ── Run analysis ───────────────────────────────────────────────────────────────

def run_analysis(engine: AnalysisEngine, request: AnalysisRequest) -> None:
    with st.status(f"Analyzing {request.url}…", expanded=False) as status_widget:
        try:
            result = engine.analyze(request)
        except AnalysisError as exc:
            status_widget.update(label="Analysis failed", state="error")
            st.error(f"{exc.user_message} ({exc.code})")
            st.caption(str(exc))
            return
        status_widget.update(label="Analysis complete!", state="complete")

    st.session_state.analysis_result = result
    st.rerun()


# ── Dashboard ──────────────────────────────────────────────────────────────────

def _metric_card(col, label: str, value) -> None:
    with col:
        st.markdown(
            f'<div class="metric-card"><div class="metric-lbl">{label}</div>'
            f'<div class="metric-val">{value}</div></div>',
            unsafe_allow_html=True,
        )


def render_overview(result: AnalysisResult) -> None:
    c1, c2, c3, c4 = st.columns(4)
    _metric_card(c1, "Status", result.status)
    _metric_card(c2, "Response", f"{result.response_time} ms")
    _metric_card(c3, "HTML size", f"{result.html_size} KB")
    _metric_card(c4, "Language", result.language.get("name", "Unknown"))

    c5, c6, c7, c8 = st.columns(4)
    _metric_card(c5, "Words", result.word_count)
    _metric_card(c6, "Internal links", result.links.get("internal", 0))
    _metric_card(c7, "External links", result.links.get("external", 0))
    _metric_card(c8, "H1", len(result.headings.get("h1", [])))

    st.divider()
    left, right = st.columns(2)
    with left:
        st.plotly_chart(module_scores_bar(result, MODULE_LABELS), use_container_width=True)
    with right:
        st.plotly_chart(media_donut(result.media), use_container_width=True)

    st.markdown(f"**Title:** {result.title or 'Not set'} ({result.title_length} chars)")
    st.markdown(
        f"**Description:** {result.meta_description or 'Not set'} "
        f"({result.meta_description_length} chars)"
    )
    if result.canonical:
        st.markdown(f"**Canonical:** `{result.canonical}`")
    if result.technologies:
        st.markdown("**Technologies:** " + ", ".join(result.technologies))
    if result.redirect_chain:
        st.markdown(f"**Redirect chain:** {' → '.join(result.redirect_chain)} → {result.url}")

    for name, error in result.module_errors.items():
        st.warning(f"{MODULE_LABELS.get(name, name)} analysis failed: {error}")


def render_report(name: str, report: ScoreReport) -> None:
    col_gauge, col_findings = st.columns([1, 2])
    with col_gauge:
        st.plotly_chart(score_gauge(report, name, MODULE_LABELS[name]), use_container_width=True)
        color = score_color(report.score, name)
        st.markdown(
            f'<div style="text-align:center;font-size:1.1rem;font-weight:700;color:{color}">{report.level}</div>',
            unsafe_allow_html=True,
        )
        if isinstance(report, SuspiciousReport) and report.is_suspicious:
            st.error("This site looks suspicious.")

    with col_findings:
        if report.issues:
            st.markdown("**Issues**")
            for issue in report.issues:
                st.markdown(f"- 🔴 {issue}")
        if report.recommendations:
            st.markdown("**Recommendations**")
            for rec in report.recommendations:
                st.markdown(f"- 🟡 {rec}")
        if report.good_points:
            st.markdown("**Good points**")
            for point in report.good_points:
                st.markdown(f"- 🟢 {point}")

    with st.expander("Details"):
        st.json(report.details)


def render_export(result: AnalysisResult) -> None:
    st.subheader("Scores")
    summary = scores_summary_df(result)
    st.dataframe(summary, use_container_width=True, hide_index=True)

    findings = findings_to_df(result)
    st.subheader("Findings")
    st.dataframe(findings, use_container_width=True, hide_index=True)

    c1, c2, c3 = st.columns(3)
    with c1:
        st.download_button("Download scores (CSV)", to_csv_bytes(summary), "scores.csv", "text/csv")
    with c2:
        st.download_button("Download findings (CSV)", to_csv_bytes(findings), "findings.csv", "text/csv")
    with c3:
        st.download_button("Download links (CSV)", to_csv_bytes(links_to_df(result)), "links.csv", "text/csv")

    with st.expander("Raw result"):
        st.json(result.to_dict())


# ── Main ───────────────────────────────────────────────────────────────────────

def main():
    engine = get_engine()
    request = render_sidebar(engine)

    if request is not None:
        st.session_state.pop("analysis_result", None)
        run_analysis(engine, request)
        return

    result: Optional[AnalysisResult] = st.session_state.get("analysis_result")
    if result is None:
        st.title("Site Analyzer")
        st.caption("Enter a URL in the sidebar and click **Analyze**.")
        return

    st.title(f"Analysis: {result.url}")
    st.caption(f"HTTP {result.status} · {result.response_time} ms · {result.timestamp}")

    reports = result.reports
    tab_names = ["Overview"] + [MODULE_LABELS[n] for n in reports] + ["Export"]
    tabs = st.tabs(tab_names)

    with tabs[0]:
        render_overview(result)
    for tab, (name, report) in zip(tabs[1:-1], reports.items()):
        with tab:
            render_report(name, report)
    with tabs[-1]:
        render_export(result)


if __name__ == "__main__":
    main()
