# src/stft/real_fft.py
"""
Real-input FFT engines working on the interleaved half-spectrum layout

    [Re(0), Re(N/2), Re(1), Im(1), Re(2), Im(2), ..., Re(N/2-1), Im(N/2-1)]

Bins 0 and N/2 of a real signal are purely real, so N real numbers hold the
whole non-redundant spectrum. Every encoder/decoder in this package reads and
writes this ordering; pack_spectrum/unpack_spectrum convert to and from the
complex half spectrum returned by scipy/numpy.
"""
import numpy as np
from scipy import fft as sp_fft

from .errors import DimensionMismatch, UnsupportedFftSize


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def pack_spectrum(spec: np.ndarray) -> np.ndarray:
    """Complex half spectrum (..., N/2+1) -> interleaved real layout (..., N)."""
    spec = np.asarray(spec)
    half = spec.shape[-1] - 1
    packed = np.empty(spec.shape[:-1] + (2 * half,), dtype=np.float64)
    packed[..., 0] = spec[..., 0].real
    packed[..., 1] = spec[..., half].real
    packed[..., 2::2] = spec[..., 1:half].real
    packed[..., 3::2] = spec[..., 1:half].imag
    return packed


def unpack_spectrum(packed: np.ndarray) -> np.ndarray:
    """Interleaved real layout (..., N) -> complex half spectrum (..., N/2+1)."""
    packed = np.asarray(packed, dtype=np.float64)
    n = packed.shape[-1]
    if n % 2 != 0:
        raise DimensionMismatch(f"Interleaved spectrum length must be even, got {n}")
    half = n // 2
    spec = np.zeros(packed.shape[:-1] + (half + 1,), dtype=np.complex128)
    spec[..., 0] = packed[..., 0]
    spec[..., half] = packed[..., 1]
    spec[..., 1:half] = packed[..., 2::2] + 1j * packed[..., 3::2]
    return spec


class RealFft:
    """Base class for in-place real FFTs of a fixed even length."""

    def __init__(self, n: int):
        if n < 2 or n % 2 != 0:
            raise DimensionMismatch(f"FFT length must be even and >= 2, got {n}")
        self.n = n

    def transform(self, buffer: np.ndarray, forward: bool) -> None:
        """
        Transform buffer in place.

        forward=True maps n real samples to the interleaved spectrum.
        forward=False maps the interleaved spectrum back to samples scaled by n
        (unnormalized inverse; the caller divides by n).
        """
        if buffer.shape != (self.n,):
            raise DimensionMismatch(
                f"FFT buffer has shape {buffer.shape}, expected ({self.n},)"
            )
        if forward:
            buffer[:] = self._forward(buffer)
        else:
            buffer[:] = self._inverse(buffer)

    def _forward(self, samples: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def _inverse(self, packed: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def __copy__(self):
        # Tables are rebuilt, never shared between copies.
        return type(self)(self.n)

    def __deepcopy__(self, memo):
        return self.__copy__()


class SplitRadixRealFft(RealFft):
    """Power-of-two fast path."""

    def __init__(self, n: int):
        if not is_power_of_two(n):
            raise UnsupportedFftSize(f"FFT size {n} is not a power of two")
        super().__init__(n)

    def _forward(self, samples):
        return pack_spectrum(sp_fft.rfft(samples, n=self.n))

    def _inverse(self, packed):
        return sp_fft.irfft(unpack_spectrum(packed), n=self.n) * self.n


class GeneralRealFft(RealFft):
    """Direct real DFT for any even length, using owned cosine/sine tables."""

    def __init__(self, n: int):
        super().__init__(n)
        k = np.arange(n // 2 + 1)[:, None]
        t = np.arange(n)[None, :]
        angle = 2.0 * np.pi * ((k * t) % n) / n
        self._cos = np.cos(angle)
        self._sin = np.sin(angle)
        # Hermitian weights for the inverse: DC and Nyquist once, others twice.
        self._weights = np.full(n // 2 + 1, 2.0)
        self._weights[0] = 1.0
        self._weights[-1] = 1.0

    def _forward(self, samples):
        re = self._cos @ samples
        im = -(self._sin @ samples)
        return pack_spectrum(re + 1j * im)

    def _inverse(self, packed):
        spec = unpack_spectrum(packed) * self._weights
        return spec.real @ self._cos - spec.imag @ self._sin


def make_real_fft(n: int) -> RealFft:
    """Pick the fast path when n is a power of two, else the general DFT."""
    if is_power_of_two(n):
        return SplitRadixRealFft(n)
    return GeneralRealFft(n)
