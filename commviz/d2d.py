from __future__ import annotations

import logging
from typing import Any, Dict, List, NamedTuple, Tuple

import numpy as np

from commviz.spectrum import magnitude_spectrum
from commviz.utils import (
    InvalidInput,
    SimParams,
    SimResult,
    UnsupportedScheme,
    make_time_axis,
    require_positive,
    validate_bits,
)

logger = logging.getLogger(__name__)

LINE_SCHEMES = ("NRZ-L", "NRZ-I", "RZ", "Manchester", "Differential Manchester")

_ALIASES = {
    "NRZI": "NRZ-I",
    "DiffManchester": "Differential Manchester",
}


class Segment(NamedTuple):
    t: float      # bit index + fraction within the bit
    level: int    # -1, 0 or +1


# Upper-cased name -> canonical name
_LOOKUP = {s.upper(): s for s in LINE_SCHEMES}
_LOOKUP.update((a.upper(), s) for a, s in _ALIASES.items())


def resolve_scheme(scheme: str) -> str:
    name = _LOOKUP.get(str(scheme).strip().upper())
    if name is None:
        raise UnsupportedScheme(f"Unknown scheme: {scheme}")
    return name


# ---------- Per-bit transition rules ----------
# Each returns points at fractions within one bit and the level carried forward.

def _hold(level: int) -> List[Segment]:
    return [Segment(0.0, level), Segment(1.0, level)]


def _split(first: int, second: int) -> List[Segment]:
    return [Segment(0.0, first), Segment(0.5, first), Segment(0.5, second), Segment(1.0, second)]


def _nrzl(level: int, bit: int) -> Tuple[List[Segment], int]:
    return _hold(+1 if bit == 1 else -1), level


def _nrzi(level: int, bit: int) -> Tuple[List[Segment], int]:
    if bit == 1:
        level = -level  # transition at start
    return _hold(level), level


def _rz(level: int, bit: int) -> Tuple[List[Segment], int]:
    if bit == 1:
        return _split(+1, 0), level
    return _hold(-1), level


def _manchester(level: int, bit: int) -> Tuple[List[Segment], int]:
    # 1 = low->high, 0 = high->low
    if bit == 1:
        return _split(-1, +1), level
    return _split(+1, -1), level


def _diff_manchester(level: int, bit: int) -> Tuple[List[Segment], int]:
    # 0 => transition at start; always a mid-bit transition
    if bit == 0:
        level = -level
    return _split(level, -level), -level


_RULES = {
    "NRZ-L": _nrzl,
    "NRZ-I": _nrzi,
    "RZ": _rz,
    "Manchester": _manchester,
    "Differential Manchester": _diff_manchester,
}


# ---------- Public API ----------

def encode_bit(scheme: str, level: int, bit: int) -> Tuple[List[Segment], int]:
    """One step of the encoder: (prior level, bit) -> (segments in [0, 1], new level)."""
    return _RULES[resolve_scheme(scheme)](level, bit)


def line_encode(bits: List[int], scheme: str, *, start_level: int = +1) -> List[Segment]:
    """
    Encode `bits` into an ordered list of (t, level) points.

    Times are in bit units (bit i spans [i, i + 1]). The level carried between
    bits starts at `start_level`; only NRZ-I and Differential Manchester
    depend on it.
    """
    validate_bits(bits)
    rule = _RULES[resolve_scheme(scheme)]
    if start_level not in (-1, +1):
        raise InvalidInput(f"start_level must be +1 or -1, got {start_level!r}.")

    segments: List[Segment] = []
    level = start_level
    for i, b in enumerate(bits):
        step, level = rule(level, b)
        segments.extend(Segment(i + s.t, s.level) for s in step)
    return segments


def sample_segments(segments: List[Segment], samples_per_bit: int) -> np.ndarray:
    """Render step segments as a sampled waveform, `samples_per_bit` samples per bit."""
    Ns = int(samples_per_bit)
    if Ns <= 0:
        raise InvalidInput("samples_per_bit must be positive.")
    if not segments:
        return np.array([], dtype=float)

    nbits = int(round(segments[-1].t))
    # Sample at the centre of each slot so mid-bit edges fall between samples
    ts = (np.arange(nbits * Ns, dtype=float) + 0.5) / Ns
    times = np.array([s.t for s in segments], dtype=float)
    levels = np.array([s.level for s in segments], dtype=float)
    # Last point at or before each sample time wins
    idx = np.searchsorted(times, ts, side="right") - 1
    return levels[idx]


def simulate_d2d(
    bits: List[int],
    scheme: str,
    params: SimParams,
    *,
    start_level: int = +1,
) -> SimResult:
    require_positive("Tb", params.Tb)
    fs = require_positive("fs", params.fs)
    segments = line_encode(bits, scheme, start_level=start_level)
    Ns = params.samples_per_bit
    tx = sample_segments(segments, Ns)
    t = make_time_axis(len(tx), fs)

    spec, spec_warnings = magnitude_spectrum(tx, fs)
    logger.debug("simulate_d2d %s: nbits=%d segments=%d samples=%d",
                 scheme, len(bits), len(segments), len(tx))

    meta: Dict[str, Any] = {
        "scheme": resolve_scheme(scheme),
        "segments": segments,
        "start_level": start_level,
        "samples_per_bit": Ns,
        "input_len": len(bits),
        "n_fft": spec.n_fft,
        "warnings": spec_warnings,
    }
    return SimResult(
        t=t,
        signals={"tx": tx},
        bits={"input": list(bits)},
        meta=meta,
        spectrum=spec,
    )
