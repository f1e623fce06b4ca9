from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple

import numpy as np

from commviz.spectrum import magnitude_spectrum
from commviz.utils import (
    Advisory,
    InvalidInput,
    SimParams,
    SimResult,
    UnsupportedScheme,
    require_positive,
    time_axis_for,
    validate_bits,
)

logger = logging.getLogger(__name__)

MOD_SCHEMES = ("ASK", "FSK", "PSK")

_ALIASES = {
    "BFSK": "FSK",
    "BPSK": "PSK",
}

# ----------------------------
# Small utilities / validation
# ----------------------------

def resolve_scheme(scheme: str) -> str:
    name = str(scheme).strip().upper()
    name = _ALIASES.get(name, name)
    if name not in MOD_SCHEMES:
        raise UnsupportedScheme(f"Unknown modulation scheme: {scheme}")
    return name


def _validate_params(params: SimParams, scheme: str) -> Tuple[float, float, float, float, float]:
    """Return (Ac, fc, Tb, fs, fd) as floats, raising InvalidInput on bad values."""
    Ac = require_positive("Ac", params.Ac)
    fc = require_positive("fc", params.fc)
    Tb = require_positive("Tb", params.Tb)
    fs = require_positive("fs", params.fs)

    if scheme == "FSK":
        if params.fd is None:
            raise InvalidInput("FSK requires a frequency deviation fd.")
        fd = require_positive("fd", params.fd, allow_zero=True)
    else:
        fd = 0.0
    return Ac, fc, Tb, fs, fd


def _aliasing_advisories(fs: float, max_freq: float) -> List[Advisory]:
    if fs <= 2.0 * max_freq:
        return [Advisory(
            "aliasing",
            f"Sampling frequency (Fs={fs:g} Hz) should be well above 2 x max signal "
            f"frequency (~{max_freq:g} Hz) to avoid aliasing.",
        )]
    return []


def _bit_index(t: np.ndarray, Tb: float, nbits: int) -> np.ndarray:
    # Bit active at each sample time, clamped to the last bit
    idx = np.floor(np.round(t / Tb, 9)).astype(int)
    return np.minimum(idx, nbits - 1)


# ----------------------------
# Modulation
# ----------------------------

def modulate(bits: List[int], scheme: str, params: SimParams) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
    """
    Build carrier, NRZ modulating signal and modulated signal for ASK/FSK/PSK.

    Returns (signals, meta); signals holds "t", "carrier", "modulating" and
    "modulated", all the same length. Nothing is computed until bits and
    parameters have been validated.
    """
    validate_bits(bits)
    scheme = resolve_scheme(scheme)
    Ac, fc, Tb, fs, fd = _validate_params(params, scheme)

    nbits = len(bits)
    t = time_axis_for(nbits * Tb, fs)
    b = np.asarray(bits, dtype=float)[_bit_index(t, Tb, nbits)]

    carrier = Ac * np.sin(2 * np.pi * fc * t)

    if scheme == "ASK":
        # Unipolar NRZ gates the carrier on/off
        line_code = "Unipolar NRZ"
        modulating = b
        modulated = carrier * modulating
        max_freq = fc
    elif scheme == "PSK":
        # Sign flip == phase shift of pi
        line_code = "Bipolar NRZ"
        modulating = 2.0 * b - 1.0
        modulated = carrier * modulating
        max_freq = fc
    else:
        line_code = "Bipolar NRZ"
        modulating = 2.0 * b - 1.0
        modulated = Ac * np.sin(2 * np.pi * (fc + modulating * fd) * t)
        max_freq = fc + fd

    warnings = _aliasing_advisories(fs, max_freq)
    for w in warnings:
        logger.info("%s: %s", scheme, w.message)
    logger.debug("modulate %s: nbits=%d samples=%d", scheme, nbits, len(t))

    signals = {
        "t": t,
        "carrier": carrier,
        "modulating": modulating,
        "modulated": modulated,
    }
    meta: Dict[str, Any] = {
        "scheme": scheme,
        "line_code": line_code,
        "max_freq": max_freq,
        "fd": fd,
        "warnings": warnings,
    }
    return signals, meta


def spectrum_range(scheme: str, params: SimParams) -> Tuple[float, float]:
    """Suggested x-range for plotting the spectrum. Rendering hint only."""
    scheme = resolve_scheme(scheme)
    fc = require_positive("fc", params.fc)
    fs = require_positive("fs", params.fs)
    Tb = require_positive("Tb", params.Tb)
    fd = 0.0 if params.fd is None else require_positive("fd", params.fd, allow_zero=True)

    if scheme == "FSK":
        lo, hi = -(fc + fd) * 2, (fc + fd) * 2
    else:
        lo, hi = -fc * 3, fc * 3

    # Cover the main lobes without going excessively wide
    max_visible = max(fc + fd + 5 * (1 / Tb), fc + 5 * (1 / Tb))
    lo = -min(abs(lo), max_visible * 1.5)
    hi = min(hi, max_visible * 1.5)

    if lo >= hi:
        lo, hi = -fs / 4, fs / 4
    return lo, hi


# ----------------------------
# End-to-end simulation wrapper
# ----------------------------

def simulate_d2a(bits: List[int], scheme: str, params: SimParams) -> SimResult:
    signals, meta_mod = modulate(bits, scheme, params)
    t = signals.pop("t")

    spec, spec_warnings = magnitude_spectrum(signals["modulated"], params.fs)

    meta: Dict[str, Any] = {
        "scheme": meta_mod["scheme"],
        "modulate": meta_mod,
        "input_len": len(bits),
        "samples": len(t),
        "n_fft": spec.n_fft,
        "pad_samples": spec.pad_samples,
        "freq_range": spectrum_range(meta_mod["scheme"], params),
        "warnings": meta_mod["warnings"] + spec_warnings,
    }

    return SimResult(
        t=t,
        signals=signals,
        bits={"input": list(bits)},
        meta=meta,
        spectrum=spec,
    )
