# src/masks/gain.py
"""
Log-domain gains and sigmoid masks over LPS features.

The geometric gain is the lossless counterpart of a ratio mask: with
gain = clean_lps - noisy_lps, adding it back to the noisy LPS reproduces the
clean LPS exactly. The sigmoid mask maps (mean-normalized) predicted LPS to
(0, 1) and can scale a noisy LPS in either the log or the linear domain.
"""
from typing import Optional

import numpy as np

from stft.errors import NonFiniteValue
from .irm import check_same_shape


def compute_geometric_gain(clean_lps: np.ndarray, noisy_lps: np.ndarray) -> np.ndarray:
    """2 * log of the geometric gain, i.e. clean_lps - noisy_lps."""
    clean = np.asarray(clean_lps, dtype=np.float64)
    noisy = np.asarray(noisy_lps, dtype=np.float64)
    check_same_shape(clean, noisy)
    return clean - noisy


def apply_geometric_gain(gain: np.ndarray, noisy_lps: np.ndarray) -> np.ndarray:
    """Enhanced LPS from a (predicted) log gain: gain + noisy_lps."""
    gain = np.asarray(gain, dtype=np.float64)
    noisy = np.asarray(noisy_lps, dtype=np.float64)
    check_same_shape(gain, noisy)
    return gain + noisy


def sigmoid_mask(
    feats: np.ndarray,
    alpha: float = 1.0,
    beta: float = 1.0,
    floor: float = -20.0,
    online_mean: bool = False,
) -> np.ndarray:
    """
    Logistic mask (1 + exp(-alpha * (x - beta * mean))) ** -1.

    Args:
        feats (np.ndarray): LPS features, assumed mean-normalized unless
            online_mean is set.
        alpha (float): Growth rate of the sigmoid.
        beta (float): With online_mean, beta times the utterance mean is
            subtracted before the sigmoid.
        floor (float): The exponent is capped at -floor, so inputs below
            floor / alpha saturate instead of overflowing.
        online_mean (bool): Normalize by the global utterance mean.

    Returns:
        np.ndarray: Mask in (0, 1), same shape as feats.

    Raises:
        NonFiniteValue: If the exponential is not finite.
    """
    x = np.array(feats, dtype=np.float64)
    if online_mean and x.size:
        x -= beta * x.mean()
    with np.errstate(over="ignore", invalid="ignore"):
        decay = np.exp(np.minimum(-alpha * x, -floor))
    if not np.all(np.isfinite(decay)):
        raise NonFiniteValue("Sigmoid mask exponent is not finite")
    return 1.0 / (1.0 + decay)


def sigmoid_mask_post_process(
    pred_lps: np.ndarray,
    noisy_lps: Optional[np.ndarray] = None,
    alpha: float = 1.0,
    beta: float = 1.0,
    gamma: float = 0.0,
    floor: float = -20.0,
    online_mean: bool = False,
    linear: bool = False,
) -> np.ndarray:
    """
    Sigmoid mask of pred_lps, optionally applied to noisy_lps.

    Without noisy_lps the mask itself is returned. Otherwise the result is
    mask * (noisy_lps + gamma) in the log domain, or
    log(mask * (exp(noisy_lps) + gamma)) when linear is True.

    Raises:
        DimensionMismatch: If pred_lps and noisy_lps differ in shape.
        NonFiniteValue: If the mask or the masked output is not finite.
    """
    if noisy_lps is not None:
        check_same_shape(pred_lps, noisy_lps)
    mask = sigmoid_mask(pred_lps, alpha=alpha, beta=beta, floor=floor, online_mean=online_mean)
    if noisy_lps is None:
        return mask

    noisy = np.asarray(noisy_lps, dtype=np.float64)
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        if linear:
            out = np.log(mask * (np.exp(noisy) + gamma))
        else:
            out = mask * (noisy + gamma)
    if not np.all(np.isfinite(out)):
        raise NonFiniteValue("Sigmoid-masked LPS is not finite")
    return out
