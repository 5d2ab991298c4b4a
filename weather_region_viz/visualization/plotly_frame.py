#!/usr/bin/env python3
"""
Plotly Frame Rendition

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Replay a render Frame into a plotly Figure, for the
/api/figure endpoint and for standalone HTML snapshots.

Key Patterns:
- One go.Scatter trace per polygon / line / marker group
- Screen-space coordinates; the y axis is reversed so the origin is top-left
- Background and label boxes become layout shapes, text becomes annotations
- Gradients are flattened to their first color

Navigation Guide:
- Use VS Code outline (Ctrl+Shift+O) to jump between functions
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import plotly.graph_objects as go

from weather_region_viz.visualization.render import (
    Circle,
    FillRect,
    Frame,
    Line,
    PolygonShape,
    Text,
)

logger = logging.getLogger(__name__)


def _dash_style(dash: tuple) -> str:
    return "dash" if dash else "solid"


def _polygon_trace(cmd: PolygonShape) -> go.Scatter:
    xs = [p.x for p in cmd.points] + [cmd.points[0].x]
    ys = [p.y for p in cmd.points] + [cmd.points[0].y]
    return go.Scatter(
        x=xs,
        y=ys,
        mode="lines",
        fill="toself",
        fillcolor=cmd.fill or "rgba(0, 0, 0, 0)",
        line=dict(color=cmd.stroke or "rgba(0, 0, 0, 0)", width=cmd.stroke_width),
        name=cmd.region_id or "shadow",
        hoverinfo="name" if cmd.region_id else "skip",
        showlegend=False,
    )


def _line_trace(cmd: Line) -> go.Scatter:
    return go.Scatter(
        x=[p.x for p in cmd.points],
        y=[p.y for p in cmd.points],
        mode="lines",
        line=dict(color=cmd.color, width=cmd.width, dash=_dash_style(cmd.dash)),
        opacity=cmd.alpha,
        hoverinfo="skip",
        showlegend=False,
    )


def _circle_trace(cmd: Circle) -> go.Scatter:
    return go.Scatter(
        x=[cmd.center.x],
        y=[cmd.center.y],
        mode="markers",
        marker=dict(size=cmd.radius * 2, color=cmd.fill, line=dict(width=0)),
        hoverinfo="skip",
        showlegend=False,
    )


def _rect_shape(cmd: FillRect) -> Dict[str, Any]:
    return dict(
        type="rect",
        xref="x",
        yref="y",
        x0=cmd.x,
        y0=cmd.y,
        x1=cmd.x + cmd.width,
        y1=cmd.y + cmd.height,
        fillcolor=cmd.color,
        line=dict(color=cmd.stroke or "rgba(0, 0, 0, 0)", width=1 if cmd.stroke else 0),
        layer="below" if cmd.gradient_to else "above",
    )


def _text_annotation(cmd: Text) -> Dict[str, Any]:
    return dict(
        x=cmd.position.x,
        y=cmd.position.y,
        text=cmd.text,
        showarrow=False,
        font=dict(size=cmd.size, color=cmd.color),
        xanchor="left" if cmd.align == "left" else "center",
    )


def build_frame_figure(frame: Frame) -> go.Figure:
    """
    Build a plotly Figure that mirrors the frame's paint order.

    Args:
        frame: Display list from render_frame()

    Returns:
        go.Figure sized to the frame, y axis reversed to screen space
    """
    traces: List[go.Scatter] = []
    shapes: List[Dict[str, Any]] = []
    annotations: List[Dict[str, Any]] = []

    for cmd in frame.commands:
        if isinstance(cmd, PolygonShape):
            traces.append(_polygon_trace(cmd))
        elif isinstance(cmd, Line):
            traces.append(_line_trace(cmd))
        elif isinstance(cmd, Circle):
            traces.append(_circle_trace(cmd))
        elif isinstance(cmd, FillRect):
            shapes.append(_rect_shape(cmd))
        elif isinstance(cmd, Text):
            annotations.append(_text_annotation(cmd))

    fig = go.Figure(data=traces)
    fig.update_layout(
        width=int(frame.width) or None,
        height=int(frame.height) or None,
        margin=dict(l=0, r=0, t=0, b=0),
        shapes=shapes,
        annotations=annotations,
        plot_bgcolor="rgba(0, 0, 0, 0)",
        showlegend=False,
    )
    fig.update_xaxes(range=[0, frame.width], visible=False)
    fig.update_yaxes(range=[frame.height, 0], visible=False)
    return fig


def write_frame_html(frame: Frame, path: Union[str, Path]) -> Path:
    """Write a standalone HTML snapshot of the frame; returns the path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    build_frame_figure(frame).write_html(str(path), include_plotlyjs="cdn")
    logger.info(f"📸 Frame snapshot written: {path}")
    return path
