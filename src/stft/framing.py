# src/stft/framing.py
import numpy as np
import librosa
from typing import Optional, Tuple

from .errors import ConfigurationError, UnsupportedWindowType
from .window import WINDOW_TYPES, generate_window

FLT_MIN = float(np.finfo(np.float32).tiny)


class FrameExtractionOptions:
    """Framing parameters shared by every frame-level feature computer."""

    def __init__(
        self,
        samp_freq: float = 16000.0,
        frame_shift_ms: float = 10.0,
        frame_length_ms: float = 25.0,
        dither: float = 0.0,
        preemph_coeff: float = 0.97,
        remove_dc_offset: bool = True,
        window_type: str = "hamming",
        round_to_power_of_two: bool = True,
    ):
        self.samp_freq = samp_freq
        self.frame_shift_ms = frame_shift_ms
        self.frame_length_ms = frame_length_ms
        self.dither = dither
        self.preemph_coeff = preemph_coeff
        self.remove_dc_offset = remove_dc_offset
        self.window_type = window_type
        self.round_to_power_of_two = round_to_power_of_two
        if self.window_shift < 1 or self.window_size < 2:
            raise ConfigurationError(
                f"Frame shift {self.window_shift} / length {self.window_size} samples are too small"
            )
        if not 0.0 <= preemph_coeff <= 1.0:
            raise ConfigurationError(f"preemph_coeff must lie in [0, 1], got {preemph_coeff}")
        if window_type not in WINDOW_TYPES:
            raise UnsupportedWindowType(f"Unsupported window type: {window_type!r}")

    @property
    def window_shift(self) -> int:
        return int(round(self.samp_freq * 0.001 * self.frame_shift_ms))

    @property
    def window_size(self) -> int:
        return int(round(self.samp_freq * 0.001 * self.frame_length_ms))

    @property
    def padded_window_size(self) -> int:
        if self.round_to_power_of_two:
            return 1 << int(self.window_size - 1).bit_length()
        return self.window_size


def num_frames(num_samples: int, opts: FrameExtractionOptions) -> int:
    """Number of whole frames that fit; partial frames at the end are dropped."""
    if num_samples < opts.window_size:
        return 0
    return 1 + (num_samples - opts.window_size) // opts.window_shift


def preemphasize(frames: np.ndarray, coeff: float) -> None:
    """In place: x[i] -= coeff * x[i-1], and x[0] -= coeff * x[0]."""
    if coeff == 0.0:
        return
    frames[:, 1:] -= coeff * frames[:, :-1]
    frames[:, 0] -= coeff * frames[:, 0]


def extract_frames(
    waveform: np.ndarray,
    opts: FrameExtractionOptions,
    need_raw_log_energy: bool = False,
    rng: Optional[np.random.Generator] = None,
) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    """
    Cut a waveform into windowed, zero-padded frames.

    Args:
        waveform (np.ndarray): 1-D signal, int16 dynamic range expected.
        opts (FrameExtractionOptions): Framing parameters.
        need_raw_log_energy (bool): Also return per-frame log energy measured
            after DC removal but before pre-emphasis and windowing.
        rng (np.random.Generator, optional): Source for dithering.

    Returns:
        Tuple[np.ndarray, Optional[np.ndarray]]: frames of shape
        (num_frames, padded_window_size) and the raw log energies (or None).

    Raises:
        ValueError: If waveform is not 1-D.
    """
    waveform = np.ascontiguousarray(waveform, dtype=np.float64)
    if waveform.ndim != 1:
        raise ValueError("Input waveform must be 1-D (mono)")
    n = num_frames(len(waveform), opts)
    padded = opts.padded_window_size
    size = opts.window_size
    if n == 0:
        return np.zeros((0, padded)), (np.zeros(0) if need_raw_log_energy else None)

    frames = librosa.util.frame(
        waveform, frame_length=size, hop_length=opts.window_shift, axis=0
    )[:n].copy()

    if opts.dither != 0.0:
        rng = rng if rng is not None else np.random.default_rng()
        frames += opts.dither * rng.standard_normal(frames.shape)
    if opts.remove_dc_offset:
        frames -= frames.mean(axis=1, keepdims=True)

    raw_log_energy = None
    if need_raw_log_energy:
        raw_log_energy = np.log(np.maximum(np.sum(frames ** 2, axis=1), FLT_MIN))

    preemphasize(frames, opts.preemph_coeff)
    frames *= generate_window(opts.window_type, size)

    if padded > size:
        frames = np.pad(frames, ((0, 0), (0, padded - size)))
    return frames, raw_log_energy
