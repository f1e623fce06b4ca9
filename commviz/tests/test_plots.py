import numpy as np
import plotly.graph_objects as go
import pytest

from commviz.d2a import simulate_d2a
from commviz.d2d import line_encode
from commviz.plots import plot_line_code, plot_modulated, plot_signal, plot_spectrum, segments_xy
from commviz.utils import SimParams


def make_params(**kw) -> SimParams:
    base = dict(fs=100.0, Tb=1.0, Ac=2.0, fc=10.0, fd=2.0)
    base.update(kw)
    return SimParams(**base)


def test_plot_signal_step_uses_hv():
    fig = plot_signal([0, 1, 2], [0, 1, 0], "bits", step=True, y_range=(-0.2, 1.2))
    assert isinstance(fig, go.Figure)
    assert fig.data[0].line.shape == "hv"
    assert tuple(fig.layout.yaxis.range) == (-0.2, 1.2)


def test_plot_signal_grid_ticks():
    fig = plot_signal([0, 1], [0, 1], "x", grid=True, x_dtick=0.5, y_dtick=2)
    assert fig.layout.xaxis.dtick == 0.5
    assert fig.layout.yaxis.dtick == 2


@pytest.mark.parametrize("scheme,scale,offset", [("ASK", 0.5, 0.1), ("PSK", 0.8, 0.0)])
def test_plot_modulated_overlay_scaling(scheme, scale, offset):
    params = make_params()
    res = simulate_d2a([1, 0], scheme, params)
    fig = plot_modulated(res.t, res.signals["modulated"], res.signals["modulating"], scheme, params.Ac, "t")
    assert len(fig.data) == 2
    overlay = np.asarray(fig.data[1].y)
    expected = res.signals["modulating"] * params.Ac * scale + params.Ac * offset
    assert np.allclose(overlay, expected)
    assert fig.data[1].line.dash == "dot"


def test_plot_spectrum_range():
    res = simulate_d2a([1, 0, 1], "FSK", make_params())
    fig = plot_spectrum(res.spectrum, "spec", x_range=res.meta["freq_range"])
    assert len(fig.data[0].x) == res.spectrum.n_fft
    assert tuple(fig.layout.xaxis.range) == pytest.approx(res.meta["freq_range"])


def test_segments_xy_scaling():
    segs = line_encode([1, 0], "NRZ-L")
    xs, ys = segments_xy(segs, Tb=0.5, amp=3.0)
    assert xs == [0.0, 0.5, 0.5, 1.0]
    assert ys == [3.0, 3.0, -3.0, -3.0]


def test_plot_line_code_annotates_bits():
    bits = [1, 0, 1]
    segs = line_encode(bits, "Manchester")
    fig = plot_line_code(segs, "m", Tb=2.0, bits=bits)
    assert [a.text for a in fig.layout.annotations] == ["1", "0", "1"]
    assert fig.layout.annotations[1].x == pytest.approx(3.0)
    assert list(fig.data[0].x) == [s.t * 2.0 for s in segs]
