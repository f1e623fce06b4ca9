"""
Radix-2 Cooley-Tukey FFT and the centered magnitude spectrum built on it.

Only power-of-two lengths are transformed directly; anything else is
zero-padded on the right to the next power of two.
"""
from __future__ import annotations

import logging
import math
import warnings
from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

import numpy as np

from commviz.utils import Advisory, Spectrum, require_positive

logger = logging.getLogger(__name__)


class FFTPaddingWarning(UserWarning):
    """Input length was not a power of two and has been zero-padded."""


@dataclass(frozen=True)
class Complex:
    re: float
    im: float = 0.0

    def __add__(self, other: "Complex") -> "Complex":
        return Complex(self.re + other.re, self.im + other.im)

    def __sub__(self, other: "Complex") -> "Complex":
        return Complex(self.re - other.re, self.im - other.im)

    def __mul__(self, other: "Complex") -> "Complex":
        return Complex(self.re * other.re - self.im * other.im,
                       self.re * other.im + self.im * other.re)

    def magnitude(self) -> float:
        return math.hypot(self.re, self.im)

    def __complex__(self) -> complex:
        return complex(self.re, self.im)


Sample = Union[float, Complex]


def _lift(x: Sample) -> Complex:
    return x if isinstance(x, Complex) else Complex(float(x), 0.0)


def is_pow2(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def next_pow2(n: int) -> int:
    p = 1
    while p < n:
        p <<= 1
    return p


def pad_to_pow2(x: Sequence[Sample]) -> Tuple[List[Sample], int]:
    """Pad with zeros to the next power of two. Return (padded, pad_count)."""
    xs = list(x)
    pad = next_pow2(len(xs)) - len(xs) if xs else 0
    if pad:
        return xs + [0.0] * pad, pad
    return xs, 0


def _fft(x: List[Sample]) -> List[Complex]:
    N = len(x)
    if N <= 1:
        return [_lift(v) for v in x]

    even = _fft(x[0::2])
    odd = _fft(x[1::2])

    half = N // 2
    out: List[Complex] = [Complex(0.0)] * N
    for k in range(half):
        angle = -2.0 * math.pi * k / N
        term = Complex(math.cos(angle), math.sin(angle)) * odd[k]
        out[k] = even[k] + term
        out[k + half] = even[k] - term
    return out


def fft(x: Sequence[Sample]) -> List[Complex]:
    """
    Discrete Fourier transform of `x` (standard DFT ordering: index 0 is DC).

    Lengths 0 and 1 come back lifted to Complex unchanged. Other lengths that
    are not a power of two are zero-padded first and an FFTPaddingWarning is
    issued; use len(result) as N for any frequency axis.
    """
    xs = list(x)
    n = len(xs)
    if n > 1 and not is_pow2(n):
        xs, pad = pad_to_pow2(xs)
        warnings.warn(
            f"FFT input size {n} is not a power of 2; zero-padded to {len(xs)}.",
            FFTPaddingWarning,
            stacklevel=2,
        )
        logger.debug("fft: padded %d -> %d samples", n, len(xs))
    return _fft(xs)


def fftshift(X: Sequence[Complex]) -> List[Complex]:
    """Move the zero-frequency bin to the center (odd N: extra bin before center)."""
    # out[i] = X[i + N//2] for i < ceil(N/2), then X[0:N//2]
    xs = list(X)
    lo = len(xs) // 2
    return xs[lo:] + xs[:lo]


def frequency_axis(n_fft: int, fs: float) -> np.ndarray:
    df = fs / n_fft
    return -fs / 2.0 + np.arange(n_fft, dtype=float) * df


def magnitude_spectrum(x: Sequence[float], fs: float) -> Tuple[Spectrum, List[Advisory]]:
    """
    Centered, amplitude-normalized magnitude spectrum of a real signal.

    Returns (spectrum, advisories). mag[i] = |X[i]| / N and
    f[i] = -fs/2 + i * fs/N, where N is the padded length.
    """
    fs = require_positive("fs", fs)
    xs = [float(v) for v in x]
    n = len(xs)
    advisories: List[Advisory] = []

    if n == 0:
        return Spectrum(f=np.array([]), mag=np.array([]), n_fft=0, pad_samples=0), advisories

    padded, pad = pad_to_pow2(xs)
    n_fft = len(padded)
    if pad:
        msg = f"Padding signal from {n} to {n_fft} samples for FFT."
        advisories.append(Advisory("fft_zero_padding", msg))
        logger.info(msg)

    X = fftshift(_fft(padded))
    mag = np.array([c.magnitude() for c in X], dtype=float) / n_fft
    f = frequency_axis(n_fft, fs)
    logger.debug("magnitude_spectrum: n=%d n_fft=%d df=%.6g", n, n_fft, fs / n_fft)
    return Spectrum(f=f, mag=mag, n_fft=n_fft, pad_samples=pad), advisories
