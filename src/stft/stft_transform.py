# src/stft/stft_transform.py
import numpy as np
from typing import Optional

from .framefft import FrameFftComputer, FrameOptions, compute_features
from .framing import FrameExtractionOptions
from .overlap_add import OverlapAddSynthesizer


def compute_stft(
    audio: np.ndarray,
    sr: int = 16000,
    frame_length_ms: float = 32.0,
    frame_shift_ms: float = 16.0,
    window_type: str = "hamming",
    preemph_coeff: float = 0.0,
    remove_dc_offset: bool = False,
    raw_energy: bool = True,
) -> np.ndarray:
    """
    Encode a waveform into sign-log frame FFT features.

    Defaults give 512-sample frames with a 256-sample hop at 16 kHz and no
    pre-emphasis or DC removal, so overlap-add can undo the analysis.

    Args:
        audio (np.ndarray): Audio signal in int16 range.
        sr (int): Sample rate.
        frame_length_ms (float): Frame length.
        frame_shift_ms (float): Hop between frames.
        window_type (str): Analysis window.
        preemph_coeff (float): Pre-emphasis coefficient, 0 disables.
        remove_dc_offset (bool): Subtract each frame's mean.
        raw_energy (bool): Measure energy before windowing.

    Returns:
        np.ndarray: Features of shape (num_frames, padded_window_size).

    Raises:
        ValueError: If audio is not 1-D or parameters are invalid.
    """
    if np.ndim(audio) != 1:
        raise ValueError("Input audio must be 1-D (mono)")
    frame_opts = FrameExtractionOptions(
        samp_freq=sr,
        frame_shift_ms=frame_shift_ms,
        frame_length_ms=frame_length_ms,
        preemph_coeff=preemph_coeff,
        remove_dc_offset=remove_dc_offset,
        window_type=window_type,
    )
    computer = FrameFftComputer(FrameOptions(frame_opts=frame_opts, raw_energy=raw_energy))
    return compute_features(audio, computer)


def reconstruct_audio(
    lps: np.ndarray,
    phase: np.ndarray,
    hop: int = 256,
    win: str = "hamming",
    sr: int = 16000,
    key: Optional[str] = None,
) -> np.ndarray:
    """
    Inverse transform and overlap-add (LPS, phase) back to a waveform.

    The FFT size is implied by the LPS width, (dim - 1) * 2.

    Returns:
        np.ndarray: Reconstructed samples in int16 range.

    Raises:
        UnsupportedFftSize: If the implied FFT size is not a power of two.
    """
    fft_size = (np.shape(lps)[-1] - 1) * 2
    synthesizer = OverlapAddSynthesizer(fft_size=fft_size, window_shift=hop, window_type=win, samp_freq=sr)
    return synthesizer.synthesize(lps, phase, key=key)
