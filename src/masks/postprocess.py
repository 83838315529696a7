# src/masks/postprocess.py
import numpy as np
from typing import Tuple

from stft.errors import ConfigurationError, MaskRangeError
from .irm import check_same_shape, unit_step


def validate_bounds(upper_bound: float, lower_bound: float) -> None:
    """Require 0 < lower_bound < upper_bound < 1."""
    if upper_bound == lower_bound:
        raise ConfigurationError(
            f"upper_bound and lower_bound must differ, both are {upper_bound}"
        )
    if not 0.0 < lower_bound < upper_bound < 1.0:
        raise ConfigurationError(
            f"Need 0 < lower_bound < upper_bound < 1, got lower={lower_bound}, upper={upper_bound}"
        )


def regime_indicators(
    mask: np.ndarray, upper_bound: float, lower_bound: float
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Split bins into high/medium/low SNR regimes by mask value.

    Returns:
        (high, mid, low) 0/1 matrices; high + mid + low == 1 everywhere.
    """
    validate_bounds(upper_bound, lower_bound)
    mask = np.asarray(mask, dtype=np.float64)
    high = unit_step(mask - upper_bound)
    low = unit_step(lower_bound - mask)
    mid = 1.0 - high - low
    return high, mid, low


def irm_post_process(
    noisy_lps: np.ndarray,
    pred_lps: np.ndarray,
    mask: np.ndarray,
    upper_bound: float = 0.75,
    lower_bound: float = 0.1,
) -> np.ndarray:
    """
    Blend noisy and enhanced LPS using a predicted IRM.

    Bins with mask > upper_bound keep the noisy value, bins with
    mask < lower_bound take the prediction, and the rest take their average.

    Raises:
        ConfigurationError: On invalid bounds.
        DimensionMismatch: If the three inputs differ in shape.
        MaskRangeError: If the mask leaves [0, 1].
    """
    validate_bounds(upper_bound, lower_bound)
    noisy = np.asarray(noisy_lps, dtype=np.float64)
    pred = np.asarray(pred_lps, dtype=np.float64)
    mask = np.asarray(mask, dtype=np.float64)
    check_same_shape(noisy, pred, mask)
    if mask.size and (mask.min() < 0.0 or mask.max() > 1.0):
        raise MaskRangeError(f"Mask out of range [0, 1]: [{mask.min()}, {mask.max()}]")

    high, mid, low = regime_indicators(mask, upper_bound, lower_bound)
    return high * noisy + mid * 0.5 * (noisy + pred) + low * pred
