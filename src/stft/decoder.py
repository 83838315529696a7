# src/stft/decoder.py
import numpy as np
from typing import Tuple, Union

from .errors import DimensionMismatch, NonFiniteValue
from .real_fft import unpack_spectrum

EPSILON = float(np.finfo(np.float32).eps)


def invert_sign_log(feats: np.ndarray) -> np.ndarray:
    """
    Undo y = sign(x) * log(|x| + 1).

    Raises:
        NonFiniteValue: If exp(|y|) overflows anywhere.
    """
    feats = np.asarray(feats, dtype=np.float64)
    with np.errstate(over="ignore", invalid="ignore"):
        magnitude = np.exp(np.abs(feats))
    if not np.all(np.isfinite(magnitude)):
        raise NonFiniteValue(
            "Decoded FFT magnitude is not finite; the feature is corrupted or out of range"
        )
    return np.sign(feats) * (magnitude - 1.0)


def power_spectrum(packed: np.ndarray) -> np.ndarray:
    """|X|^2 per bin of an interleaved spectrum, last axis N -> N/2+1."""
    spec = unpack_spectrum(packed)
    return spec.real ** 2 + spec.imag ** 2


def phase_spectrum(packed: np.ndarray) -> np.ndarray:
    """atan2(Im, Re) per bin; bins 0 and N/2 come out as 0 or pi."""
    spec = unpack_spectrum(packed)
    return np.arctan2(spec.imag, spec.real)


def frame_features_to_lps(
    feats: np.ndarray, combine: bool = False
) -> Union[Tuple[np.ndarray, np.ndarray], np.ndarray]:
    """
    Recover log-power spectrum and phase from sign-log frame FFT features.

    Args:
        feats (np.ndarray): Matrix (num_frames, N) from FrameFftComputer.
        combine (bool): Return one matrix [lps | phase] instead of a tuple.

    Returns:
        (lps, phase), each (num_frames, N/2+1), or the (num_frames, N+2)
        concatenation when combine is True.

    Raises:
        DimensionMismatch: If feats is not 2-D with an even column count.
        NonFiniteValue: If decoding overflows.
    """
    feats = np.asarray(feats, dtype=np.float64)
    if feats.ndim != 2 or feats.shape[1] % 2 != 0 or feats.shape[1] < 2:
        raise DimensionMismatch(
            f"Frame FFT features must be 2-D with an even column count, got shape {feats.shape}"
        )
    packed = invert_sign_log(feats)
    lps = np.log(np.maximum(power_spectrum(packed), EPSILON))
    phase = phase_spectrum(packed)
    if combine:
        return np.hstack([lps, phase])
    return lps, phase


def phase_deducted_lps(feats: np.ndarray) -> np.ndarray:
    """
    Approximate LPS straight from the encoded features, without decoding.

    For large |x|, y_re + y_im ~ 2*log(A) + log|sin(2*phi)/2|, so interior bins
    keep a phase-dependent term. The first and last output columns are
    2 * y[0] and 2 * y[1] (plain 2*log(A)).

    Args:
        feats (np.ndarray): Matrix (num_frames, D), D a multiple of 4.

    Returns:
        np.ndarray: Matrix (num_frames, D/4 + 1).

    Raises:
        DimensionMismatch: If D is not a multiple of 4.
    """
    feats = np.asarray(feats, dtype=np.float64)
    if feats.ndim != 2 or feats.shape[1] == 0 or feats.shape[1] % 4 != 0:
        raise DimensionMismatch(
            f"Phase-deducted LPS needs a column count that is a multiple of 4, got shape {feats.shape}"
        )
    lps_dim = feats.shape[1] // 4 + 1
    lps = np.empty((feats.shape[0], lps_dim), dtype=np.float64)
    lps[:, 0] = 2.0 * feats[:, 0]
    lps[:, -1] = 2.0 * feats[:, 1]
    interior = np.arange(1, lps_dim - 1)
    lps[:, 1:-1] = feats[:, 2 * interior] + feats[:, 2 * interior + 1]
    return lps
