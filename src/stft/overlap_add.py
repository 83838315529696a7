# src/stft/overlap_add.py
import warnings

import numpy as np
from typing import Optional

from .errors import ConfigurationError, DimensionMismatch, NonFiniteValue, UnsupportedFftSize
from .real_fft import SplitRadixRealFft, is_power_of_two, pack_spectrum
from .window import generate_window

# Waveforms are kept in int16 range rather than [-1, 1].
WAVE_SAMPLE_MAX = 32767.0
WAVE_SAMPLE_MIN = -32768.0


def spectrum_from_lps(lps: np.ndarray, phase: np.ndarray) -> np.ndarray:
    """
    Inverse of the power/phase decomposition.

    Args:
        lps (np.ndarray): Log-power spectrum, shape (..., N/2+1).
        phase (np.ndarray): Phase in radians, same shape.

    Returns:
        np.ndarray: Interleaved spectrum, shape (..., N).

    Raises:
        DimensionMismatch: If shapes differ.
        NonFiniteValue: If exp(lps/2) overflows.
    """
    lps = np.asarray(lps, dtype=np.float64)
    phase = np.asarray(phase, dtype=np.float64)
    if lps.shape != phase.shape:
        raise DimensionMismatch(f"LPS shape {lps.shape} != phase shape {phase.shape}")
    with np.errstate(over="ignore"):
        amplitude = np.exp(0.5 * lps)
    if not np.all(np.isfinite(amplitude)):
        raise NonFiniteValue("Amplitude exp(lps/2) is not finite")
    # Bins 0 and N/2 keep only the real part.
    return pack_spectrum(amplitude * np.exp(1j * phase))


class OverlapAddSynthesizer:
    """
    Rebuild a waveform from per-frame (LPS, phase) by weighted overlap-add.

    Each frame is inverse transformed, multiplied by the synthesis window and
    accumulated at r * window_shift. The sum is divided by the accumulated
    squared window, so analysis frames windowed with the same window are
    reconstructed exactly wherever at least one frame contributes.
    """

    def __init__(
        self,
        fft_size: int = 512,
        window_shift: int = 256,
        window_type: str = "hamming",
        samp_freq: float = 16000.0,
    ):
        if not is_power_of_two(fft_size) or fft_size < 2:
            raise UnsupportedFftSize(f"Only power-of-two FFT sizes are supported, got {fft_size}")
        if not 1 <= window_shift <= fft_size:
            raise ConfigurationError(
                f"window_shift must lie in [1, fft_size={fft_size}], got {window_shift}"
            )
        self.fft_size = fft_size
        self.window_shift = window_shift
        self.window_type = window_type
        self.samp_freq = samp_freq
        self.window = generate_window(window_type, fft_size)
        self.window_sq = self.window ** 2
        self._fft = SplitRadixRealFft(fft_size)

    @property
    def lps_dim(self) -> int:
        return self.fft_size // 2 + 1

    def signal_length(self, num_frames: int) -> int:
        return self.fft_size + (num_frames - 1) * self.window_shift

    def synthesize(self, lps: np.ndarray, phase: np.ndarray, key: Optional[str] = None) -> np.ndarray:
        """
        Args:
            lps (np.ndarray): (num_frames, fft_size/2+1) log-power spectra.
            phase (np.ndarray): Matching phase matrix.
            key (str, optional): Utterance key, used in clipping warnings.

        Returns:
            np.ndarray: Integer-valued float64 samples in int16 range.

        Raises:
            DimensionMismatch: On shape problems or zero frames.
            NonFiniteValue: If an LPS row overflows on exponentiation.
        """
        lps = np.asarray(lps, dtype=np.float64)
        phase = np.asarray(phase, dtype=np.float64)
        if lps.shape != phase.shape:
            raise DimensionMismatch(f"LPS shape {lps.shape} != phase shape {phase.shape}")
        if lps.ndim != 2 or lps.shape[1] != self.lps_dim:
            raise DimensionMismatch(
                f"Expected LPS with {self.lps_dim} columns for fft_size {self.fft_size}, got shape {lps.shape}"
            )
        num_frames = lps.shape[0]
        if num_frames == 0:
            raise DimensionMismatch("Cannot synthesize a waveform from zero frames")

        length = self.signal_length(num_frames)
        wav = np.zeros(length, dtype=np.float64)
        denominator = np.zeros(length, dtype=np.float64)
        for r in range(num_frames):
            frame = spectrum_from_lps(lps[r], phase[r])
            self._fft.transform(frame, forward=False)
            frame *= self.window / self.fft_size
            begin = r * self.window_shift
            wav[begin:begin + self.fft_size] += frame
            denominator[begin:begin + self.fft_size] += self.window_sq

        wav /= denominator
        return self.clip(wav, key)

    def clip(self, wav: np.ndarray, key: Optional[str] = None) -> np.ndarray:
        """Round to the nearest integer and clamp to int16 range, warning on overflow."""
        wav = np.rint(wav)
        name = f" in utt {key}" if key is not None else ""
        peak, trough = wav.max(), wav.min()
        if peak > WAVE_SAMPLE_MAX:
            warnings.warn(f"Maximum {peak} exceeds ceiling{name}", RuntimeWarning)
        if trough < WAVE_SAMPLE_MIN:
            warnings.warn(f"Minimum {trough} exceeds floor{name}", RuntimeWarning)
        return np.clip(wav, WAVE_SAMPLE_MIN, WAVE_SAMPLE_MAX)
