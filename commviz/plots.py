from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np
import plotly.graph_objects as go

from commviz.d2d import Segment
from commviz.utils import Spectrum

_MARGIN = dict(l=50, r=30, t=50, b=40)


def plot_signal(t, x, title, grid=False, step=False, x_dtick=1, y_dtick=1, y_range=None, y_title="Amplitude (V)"):
    fig = go.Figure()
    if step:
        fig.add_trace(go.Scatter(x=t, y=x, mode="lines", line_shape="hv", name=title))
    else:
        fig.add_trace(go.Scatter(x=t, y=x, mode="lines", name=title))
    fig.update_layout(title=title, xaxis_title="Time (s)", yaxis_title=y_title, margin=_MARGIN)
    if y_range is not None:
        fig.update_yaxes(range=list(y_range))
    if grid:
        fig.update_xaxes(showgrid=True, tickmode="linear", dtick=x_dtick)
        fig.update_yaxes(showgrid=True, tickmode="linear", dtick=y_dtick)

    return fig


def plot_modulated(t, modulated, modulating, scheme: str, Ac: float, title: str):
    fig = go.Figure()
    fig.add_trace(go.Scatter(x=t, y=modulated, mode="lines", name=scheme))

    # Scaled/offset copy of the modulating signal for context
    if scheme == "ASK":
        overlay = np.asarray(modulating) * Ac * 0.5 + Ac * 0.1
    else:
        overlay = np.asarray(modulating) * Ac * 0.8
    fig.add_trace(go.Scatter(
        x=t, y=overlay, mode="lines",
        line=dict(dash="dot", color="red", shape="hv"),
        name="Modulating (scaled)",
    ))
    fig.update_layout(
        title=title, xaxis_title="Time (s)", yaxis_title="Amplitude (V)",
        margin=_MARGIN, legend=dict(y=0.95),
    )
    return fig


def plot_spectrum(spec: Spectrum, title: str, x_range: Optional[Tuple[float, float]] = None):
    fig = go.Figure()
    fig.add_trace(go.Scatter(x=spec.f, y=spec.mag, mode="lines", name="Spectrum"))
    fig.update_layout(title=title, xaxis_title="Frequency (Hz)", yaxis_title="Magnitude", margin=_MARGIN)
    if x_range is not None:
        fig.update_xaxes(range=list(x_range))
    return fig


def segments_xy(segments: Sequence[Segment], Tb: float = 1.0, amp: float = 1.0) -> Tuple[List[float], List[float]]:
    """Segment points scaled to seconds and display amplitude."""
    xs = [s.t * Tb for s in segments]
    ys = [s.level * amp for s in segments]
    return xs, ys


def plot_line_code(segments: Sequence[Segment], title: str, Tb: float = 1.0, amp: float = 1.0, grid=False, bits=None):
    xs, ys = segments_xy(segments, Tb=Tb, amp=amp)
    fig = go.Figure()
    # Points already carry the vertical edges, so draw them piecewise-linear
    fig.add_trace(go.Scatter(x=xs, y=ys, mode="lines", name=title))
    fig.update_layout(title=title, xaxis_title="Time (s)", yaxis_title="Level", margin=_MARGIN)
    fig.update_yaxes(range=[-1.5 * amp, 1.5 * amp])
    if bits is not None:
        for i, b in enumerate(bits):
            fig.add_annotation(x=(i + 0.5) * Tb, y=1.3 * amp, text=str(b), showarrow=False)
    if grid:
        fig.update_xaxes(showgrid=True, tickmode="linear", dtick=Tb)
        fig.update_yaxes(showgrid=True, tickmode="linear", dtick=amp)
    return fig
