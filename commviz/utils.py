from __future__ import annotations

import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Dict, List, Optional

import numpy as np


# Defaults used to seed the UI
DEFAULT_BITS = "10110010"
DEFAULT_AC = 1.0
DEFAULT_FC = 10.0
DEFAULT_TB = 1.0
DEFAULT_FS = 100.0
DEFAULT_FD = 2.0

# UI bounds; the pure-Python FFT gets slow past a few tens of thousands of samples
MAX_FS = 5000.0
MAX_TB = 10.0
MAX_SAMPLES = 1 << 16


class InvalidInput(ValueError):
    """Bad bit string or parameter; raised before anything is computed."""


class UnsupportedScheme(ValueError):
    """Modulation type or line code that is not in the supported set."""


@dataclass(frozen=True)
class Advisory:
    code: str       # "fft_zero_padding" | "aliasing"
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class SimParams:
    fs: float                    # sample rate (Hz)
    Tb: float                    # bit duration (s)
    Ac: float                    # carrier amplitude
    fc: float                    # carrier frequency (Hz)
    fd: Optional[float] = None   # FSK frequency deviation (Hz)

    @property
    def samples_per_bit(self) -> int:
        return max(1, int(round(float(self.fs) * float(self.Tb))))


@dataclass
class Spectrum:
    f: np.ndarray           # frequency axis (Hz), centered on DC
    mag: np.ndarray         # |X| / N
    n_fft: int              # padded length
    pad_samples: int = 0    # zeros appended before the transform


@dataclass
class SimResult:
    t: np.ndarray
    signals: Dict[str, np.ndarray]     # named waveforms
    bits: Dict[str, List[int]]         # named bit lists
    meta: Dict[str, Any]               # intermediate details
    spectrum: Optional[Spectrum] = field(default=None)


def bits_from_string(bitstr: str) -> List[int]:
    s = bitstr.strip()
    if not s:
        raise InvalidInput("Bitstring is empty.")
    if any(c not in "01" for c in s):
        raise InvalidInput("Bitstring must contain only 0 and 1.")
    return [1 if c == "1" else 0 for c in s]


def bits_to_string(bits: List[int]) -> str:
    return "".join("1" if b else "0" for b in bits)


def gen_random_bits(n: int, seed: Optional[int] = None) -> List[int]:
    rng = np.random.default_rng(seed)
    return [int(x) for x in rng.integers(0, 2, size=n)]


def validate_bits(bits: List[int]) -> None:
    if not bits:
        raise InvalidInput("Bits list is empty.")
    if any(b not in (0, 1) for b in bits):
        raise InvalidInput("Bits must be a list of 0/1 integers.")


def require_positive(name: str, value: Any, allow_zero: bool = False) -> float:
    """Return `value` as float, or raise InvalidInput if it is not a usable number."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInput(f"{name} must be a number, got {value!r}.")
    x = float(value)
    if not math.isfinite(x):
        raise InvalidInput(f"{name} must be finite, got {x}.")
    if x < 0 or (x == 0 and not allow_zero):
        bound = ">= 0" if allow_zero else "> 0"
        raise InvalidInput(f"{name} must be {bound}, got {x:g}.")
    return x


def make_time_axis(num_samples: int, fs: float) -> np.ndarray:
    return np.arange(num_samples, dtype=float) / float(fs)


def time_axis_for(duration: float, fs: float) -> np.ndarray:
    # Every k/fs strictly below duration; rounding absorbs products like 3 * 0.2 * 50
    n = int(math.ceil(round(duration * fs, 9)))
    return make_time_axis(n, fs)

