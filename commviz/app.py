from __future__ import annotations

import logging
import os

import streamlit as st

from commviz.d2a import MOD_SCHEMES, simulate_d2a
from commviz.d2d import LINE_SCHEMES, simulate_d2d
from commviz.plots import plot_line_code, plot_modulated, plot_signal, plot_spectrum
from commviz.utils import (
    DEFAULT_AC,
    DEFAULT_BITS,
    DEFAULT_FC,
    DEFAULT_FD,
    DEFAULT_FS,
    DEFAULT_TB,
    MAX_FS,
    MAX_SAMPLES,
    MAX_TB,
    SimParams,
    bits_from_string,
    bits_to_string,
    gen_random_bits,
)

logging.basicConfig(level=os.getenv("COMMVIZ_LOG_LEVEL", "WARNING").upper())

st.set_page_config(layout="wide")

SCHEME_DESCRIPTIONS = {
    "NRZ-L": "Non-Return-to-Zero Level: '1' is a high level and '0' a low level for the whole bit.",
    "NRZ-I": "Non-Return-to-Zero Inverted: a '1' inverts the level at the start of the bit, a '0' keeps it.",
    "RZ": "Return-to-Zero: a '1' is high for the first half and returns to zero at mid-bit; a '0' stays low.",
    "Manchester": "Manchester: every bit has a mid-bit transition; low-to-high for '1', high-to-low for '0'.",
    "Differential Manchester": (
        "Differential Manchester: always a mid-bit transition; a '0' adds a transition at the start "
        "of the bit, a '1' does not."
    ),
}

MOD_DESCRIPTIONS = {
    "ASK": "Amplitude Shift Keying: the carrier is switched on for '1' and off for '0' (unipolar NRZ).",
    "FSK": "Frequency Shift Keying: the carrier frequency moves to fc + fd for '1' and fc - fd for '0'.",
    "PSK": "Binary Phase Shift Keying: the carrier phase flips by 180° for '0' (bipolar NRZ).",
}


def empty_state(message: str):
    st.markdown(
        """
        <div style="text-align:center; padding: 6rem 1rem; opacity: 0.95;">
            <div style="font-size: 4rem; line-height: 1;">📡</div>
            <div style="font-size: 1.05rem; margin-top: 0.5rem;">
        """
        + message +
        """
            </div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def show_warnings(meta: dict):
    for w in meta.get("warnings", []):
        st.warning(str(w))


st.title("Modulation & Line Coding Visualizer")

with st.sidebar:
    st.header("Controls")

    mode = st.selectbox("Mode", ["Line Coding", "Modulation"], key="mode")
    show_grid = st.checkbox("Show grid", value=True)

    st.divider()
    st.subheader("Digital input")

    if "bitstr" not in st.session_state:
        st.session_state["bitstr"] = DEFAULT_BITS

    st.slider("Random bits N", 4, 64, 8, step=4, key="rand_n")
    st.text_input("Seed (optional)", value="", key="rand_seed")

    seed_txt = st.session_state.get("rand_seed", "").strip()
    seed_invalid = seed_txt != "" and (seed_txt == "-" or not seed_txt.lstrip("-").isdigit())
    if seed_invalid:
        st.error("Seed must be an integer.")

    def _gen_bits_cb():
        seed_txt = st.session_state.get("rand_seed", "").strip()
        if seed_txt != "" and (seed_txt == "-" or not seed_txt.lstrip("-").isdigit()):
            return  # sidebar error already shown
        s = int(seed_txt) if seed_txt else None
        n = int(st.session_state.get("rand_n", 8))
        st.session_state["bitstr"] = bits_to_string(gen_random_bits(n, seed=s))

    st.button("Generate random bits", on_click=_gen_bits_cb, disabled=seed_invalid)
    st.text_input("Bitstring", key="bitstr")

bits = None
try:
    bits = bits_from_string(st.session_state["bitstr"])
except ValueError as e:
    with st.sidebar:
        st.error(str(e))


if mode == "Line Coding":
    with st.sidebar:
        st.subheader("Technique")
        scheme = st.selectbox("Line code", list(LINE_SCHEMES), key="d2d_scheme")
        st.caption(SCHEME_DESCRIPTIONS[scheme])
        line_amp = st.slider("Line amplitude (±A)", 1.0, 10.0, 1.0, step=0.5, key="d2d_line_amp")
        Tb = st.number_input("Bit duration Tb (s)", min_value=0.001, max_value=MAX_TB, value=DEFAULT_TB, step=0.1, key="d2d_tb")
        Ns = st.slider("Samples per bit (Ns)", 8, 128, 32, step=8, key="d2d_ns")
        compare_mode = st.checkbox("Compare mode (show all schemes)", value=False, key="d2d_compare")

    if bits is None:
        empty_state("Enter a bitstring made of 0 and 1 to see the encoded waveform.")
    else:
        params = SimParams(fs=Ns / Tb, Tb=Tb, Ac=1.0, fc=DEFAULT_FC)
        try:
            res = simulate_d2d(bits, scheme, params)
        except ValueError as e:
            st.error(str(e))
            res = None

        if res is not None:
            st.subheader(f"{scheme} encoding of {bits_to_string(bits)}")
            show_warnings(res.meta)
            tab1, tab2, tab3 = st.tabs(["Waveforms", "Frequency", "Details"])

            with tab1:
                st.plotly_chart(
                    plot_line_code(res.meta["segments"], f"Encoded waveform ({scheme})",
                                   Tb=Tb, amp=line_amp, grid=show_grid, bits=bits),
                    width='stretch',
                )
                if compare_mode:
                    cols = st.columns(2)
                    for idx, s2 in enumerate(LINE_SCHEMES):
                        r2 = simulate_d2d(bits, s2, params)
                        with cols[idx % 2]:
                            st.plotly_chart(
                                plot_line_code(r2.meta["segments"], s2, Tb=Tb, amp=line_amp, grid=show_grid),
                                width='stretch',
                            )

            with tab2:
                st.plotly_chart(plot_spectrum(res.spectrum, "Spectrum of encoded waveform"), width='stretch')

            with tab3:
                st.json({
                    "scheme": res.meta["scheme"],
                    "input_len": res.meta["input_len"],
                    "start_level": res.meta["start_level"],
                    "samples_per_bit": res.meta["samples_per_bit"],
                    "n_fft": res.meta["n_fft"],
                })
                st.write("Segments (t in bit units, level):")
                st.json([list(s) for s in res.meta["segments"]])

elif mode == "Modulation":
    with st.sidebar:
        st.subheader("Technique")
        scheme = st.selectbox("Modulation", list(MOD_SCHEMES), key="d2a_scheme")
        st.caption(MOD_DESCRIPTIONS[scheme])

        st.subheader("Carrier parameters")
        Ac = st.number_input("Carrier amplitude Vc (V)", min_value=0.1, max_value=100.0, value=DEFAULT_AC, step=0.1, key="d2a_ac")
        fc = st.number_input("Carrier frequency fc (Hz)", min_value=0.1, max_value=MAX_FS, value=DEFAULT_FC, step=1.0, key="d2a_fc")
        Tb = st.number_input("Bit duration Tb (s)", min_value=0.001, max_value=MAX_TB, value=DEFAULT_TB, step=0.1, key="d2a_tb")
        fs = st.number_input("Sampling frequency fs (Hz)", min_value=1.0, max_value=MAX_FS, value=DEFAULT_FS, step=10.0, key="d2a_fs")
        fd = None
        if scheme == "FSK":
            fd = st.number_input("Frequency deviation fd (Hz)", min_value=0.0, max_value=MAX_FS, value=DEFAULT_FD, step=0.5, key="d2a_fd")

    if bits is None:
        empty_state("Enter a bitstring made of 0 and 1 to see the modulated waveform.")
    elif len(bits) * Tb * fs > MAX_SAMPLES:
        st.error(
            f"{len(bits)} bits x {Tb:g} s at {fs:g} Hz is more than {MAX_SAMPLES} samples; "
            "lower fs, Tb or the number of bits."
        )
    else:
        params = SimParams(fs=fs, Tb=Tb, Ac=Ac, fc=fc, fd=fd)
        try:
            res = simulate_d2a(bits, scheme, params)
        except ValueError as e:
            st.error(str(e))
            res = None

        if res is not None:
            st.subheader(f"{scheme} Modulation Plots")
            show_warnings(res.meta)
            line_code = res.meta["modulate"]["line_code"]
            tab1, tab2, tab3 = st.tabs(["Waveforms", "Frequency", "Details"])

            with tab1:
                st.plotly_chart(plot_signal(res.t, res.signals["carrier"], "Carrier Signal (v_c)", grid=show_grid,
                                            x_dtick=Tb, y_dtick=Ac), width='stretch')
                y_range = (-0.2, 1.2) if scheme == "ASK" else (-1.2, 1.2)
                st.plotly_chart(plot_signal(res.t, res.signals["modulating"],
                                            f"Modulating Signal ({line_code}: {bits_to_string(bits)})",
                                            step=True, y_range=y_range), width='stretch')
                st.plotly_chart(plot_modulated(res.t, res.signals["modulated"], res.signals["modulating"],
                                               scheme, Ac, f"{scheme} Signal"), width='stretch')

            with tab2:
                st.plotly_chart(plot_spectrum(res.spectrum, f"Spectrum of {scheme} Signal",
                                              x_range=res.meta["freq_range"]), width='stretch')

            with tab3:
                st.json({
                    "scheme": res.meta["scheme"],
                    "input_len": res.meta["input_len"],
                    "samples": res.meta["samples"],
                    "n_fft": res.meta["n_fft"],
                    "pad_samples": res.meta["pad_samples"],
                    "freq_range": list(res.meta["freq_range"]),
                    "max_freq": res.meta["modulate"]["max_freq"],
                })
