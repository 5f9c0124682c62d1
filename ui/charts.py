"""
Plotly chart builders for the Site Analyzer dashboard.
All functions return plotly Figure objects.
"""
from __future__ import annotations

import plotly.graph_objects as go

from models import AnalysisResult, ScoreReport
from scoring.scorer import score_color

_BG = "#1A1D27"
_PAPER = "#0E1117"
_GRID = "#2A2D3A"
_TEXT = "#FAFAFA"

_MEDIA_COLORS = ["#6C63FF", "#00C9A7", "#FFA500", "#4B9EFF"]


def _base_layout(**kwargs) -> dict:
    return {
        "paper_bgcolor": _PAPER,
        "plot_bgcolor":  _BG,
        "font": {"color": _TEXT, "family": "sans-serif"},
        "margin": {"l": 20, "r": 20, "t": 40, "b": 20},
        **kwargs,
    }


def _title(text: str) -> dict:
    return {"text": text, "x": 0.5, "xanchor": "center", "font": {"size": 14, "color": _TEXT}}


# ── Module score gauge ─────────────────────────────────────────────────────────

def score_gauge(report: ScoreReport, module: str, title: str) -> go.Figure:
    color = score_color(report.score, module)
    if module == "suspicious":
        steps = [
            {"range": [0, 25],   "color": "#1A3A1A"},
            {"range": [25, 50],  "color": "#2A3A1A"},
            {"range": [50, 70],  "color": "#3A2E1A"},
            {"range": [70, 100], "color": "#3A1A1A"},
        ]
    else:
        steps = [
            {"range": [0, 50],   "color": "#3A1A1A"},
            {"range": [50, 70],  "color": "#3A2E1A"},
            {"range": [70, 90],  "color": "#2A3A1A"},
            {"range": [90, 100], "color": "#1A3A1A"},
        ]

    fig = go.Figure(go.Indicator(
        mode="gauge+number",
        value=report.score,
        domain={"x": [0, 1], "y": [0, 1]},
        number={"font": {"size": 40, "color": color}},
        gauge={
            "axis": {"range": [0, 100], "tickcolor": _TEXT, "tickfont": {"color": _TEXT}},
            "bar": {"color": color, "thickness": 0.25},
            "bgcolor": _BG,
            "borderwidth": 2,
            "bordercolor": _GRID,
            "steps": steps,
        },
    ))
    fig.update_layout(
        **_base_layout(height=240),
        title=_title(f"{title} — {report.level}"),
    )
    return fig


# ── Scores overview ────────────────────────────────────────────────────────────

def module_scores_bar(result: AnalysisResult, labels: dict[str, str]) -> go.Figure:
    reports = result.reports
    if not reports:
        return _empty_chart("No analysis module enabled")

    names = list(reports)
    fig = go.Figure(go.Bar(
        x=[labels.get(n, n) for n in names],
        y=[reports[n].score for n in names],
        marker_color=[score_color(reports[n].score, n) for n in names],
        text=[reports[n].level for n in names],
        textposition="outside",
        hovertemplate="<b>%{x}</b><br>Score: %{y}<extra></extra>",
    ))
    fig.update_layout(
        **_base_layout(height=300),
        title=_title("Scores by Module"),
        xaxis={"gridcolor": _GRID, "color": _TEXT},
        yaxis={"title": "Score", "range": [0, 110], "gridcolor": _GRID, "color": _TEXT},
        showlegend=False,
    )
    return fig


# ── Media donut ────────────────────────────────────────────────────────────────

def media_donut(media: dict[str, int]) -> go.Figure:
    total = sum(media.values())
    if total == 0:
        return _empty_chart("No media found")

    fig = go.Figure(go.Pie(
        labels=[k.capitalize() for k in media],
        values=list(media.values()),
        hole=0.6,
        marker={"colors": _MEDIA_COLORS[:len(media)], "line": {"color": _BG, "width": 2}},
        hovertemplate="<b>%{label}</b>: %{value}<extra></extra>",
    ))
    fig.update_layout(
        **_base_layout(height=260),
        title=_title("Media Elements"),
        annotations=[{
            "text": f"<b>{total}</b><br>Total",
            "x": 0.5, "y": 0.5,
            "font_size": 18,
            "font_color": _TEXT,
            "showarrow": False,
        }],
        legend={"font": {"color": _TEXT}},
    )
    return fig


# ── Helper ─────────────────────────────────────────────────────────────────────

def _empty_chart(message: str) -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(text=message, x=0.5, y=0.5, showarrow=False, font={"color": _TEXT, "size": 14})
    fig.update_layout(**_base_layout(height=260))
    return fig
