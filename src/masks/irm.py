# src/masks/irm.py
import numpy as np

from stft.errors import ConfigurationError, DimensionMismatch, MaskRangeError, NonFiniteValue

FLOORING_MODES = ("none", "mean", "custom")
TINY = float(np.finfo(np.float64).tiny)


def check_same_shape(*mats: np.ndarray) -> None:
    """Paired streams must agree frame-for-frame and bin-for-bin."""
    shapes = [np.shape(m) for m in mats]
    if any(s != shapes[0] for s in shapes[1:]):
        raise DimensionMismatch(f"Paired matrices differ in shape: {shapes}")


def unit_step(x: np.ndarray) -> np.ndarray:
    """1 where x > 0, else 0."""
    return np.heaviside(x, 0.0)


def binarize_mask(mask: np.ndarray, threshold: float) -> np.ndarray:
    """
    Ideal binary mask from an IRM: 1 where Ps/Pn > threshold.

    Since irm = sqrt(Ps / (Ps + Pn)), the ratio test is the same as
    irm > sqrt(T / (T + 1)).
    """
    if threshold <= 0:
        raise ConfigurationError(f"IBM threshold must be positive, got {threshold}")
    return unit_step(np.asarray(mask, dtype=np.float64) - np.sqrt(threshold / (threshold + 1.0)))


def compute_irm(
    clean_lps: np.ndarray,
    noise_lps: np.ndarray,
    flooring: str = "none",
    lps_floor: float = 0.0,
    ibm_threshold: float = 0.0,
) -> np.ndarray:
    """
    Ideal ratio mask from clean and noise (not noisy) log-power spectra.

    mask = (exp(noise_lps - clean_lps) + 1) ** -0.5

    Args:
        clean_lps (np.ndarray): Clean speech LPS (num_frames, dim).
        noise_lps (np.ndarray): Noise LPS, same shape.
        flooring (str): "none"; "mean" zeroes bins whose clean LPS is not
            above the utterance mean; "custom" uses lps_floor instead.
        lps_floor (float): Threshold for flooring="custom".
        ibm_threshold (float): If > 0, output an ideal binary mask that is 1
            where Ps/Pn > ibm_threshold.

    Returns:
        np.ndarray: Mask in [0, 1], or in {0, 1} for the binary variant.

    Raises:
        ConfigurationError: On an unknown flooring mode.
        DimensionMismatch: If the inputs differ in shape.
    """
    if flooring not in FLOORING_MODES:
        raise ConfigurationError(f"Unknown flooring {flooring!r}; expected one of {FLOORING_MODES}")
    clean = np.asarray(clean_lps, dtype=np.float64)
    noise = np.asarray(noise_lps, dtype=np.float64)
    check_same_shape(clean, noise)

    with np.errstate(over="ignore"):
        # exp overflow -> inf -> mask 0, which is the right limit.
        mask = 1.0 / np.sqrt(np.exp(noise - clean) + 1.0)

    if flooring != "none":
        if flooring == "mean":
            lps_floor = float(clean.mean()) if clean.size else 0.0
        mask *= unit_step(clean - lps_floor)

    if ibm_threshold > 0:
        mask = binarize_mask(mask, ibm_threshold)
    return mask


def noise_from_mask(clean_lps: np.ndarray, mask: np.ndarray, mask_floor: float = 1e-12) -> np.ndarray:
    """
    Recover noise LPS from clean LPS and its IRM.

    noise = log(mask ** -2 - 1) + clean, with mask and the pre-log term both
    floored at mask_floor.

    Raises:
        MaskRangeError: If any mask value is outside (0, 1].
        NonFiniteValue: If the result is not finite.
    """
    clean = np.asarray(clean_lps, dtype=np.float64)
    mask = np.asarray(mask, dtype=np.float64)
    check_same_shape(clean, mask)
    if mask.size and not (mask.min() > 0.0 and mask.max() <= 1.0):
        raise MaskRangeError(
            f"Mask must lie in (0, 1], got range [{mask.min()}, {mask.max()}]"
        )
    with np.errstate(over="ignore"):
        ratio = np.maximum(mask, mask_floor) ** -2.0 - 1.0
    noise = np.log(np.maximum(ratio, mask_floor)) + clean
    if not np.all(np.isfinite(noise)):
        raise NonFiniteValue("Noise LPS is not finite")
    return noise


def apply_mask(noisy_lps: np.ndarray, mask: np.ndarray, ignore_range: bool = False) -> np.ndarray:
    """
    Predict clean LPS by applying a (learned) IRM to noisy LPS.

    Power is scaled by mask ** 2 and floored at a tenth of the smallest noisy
    power (never below the smallest positive double) so the log stays finite.

    Raises:
        MaskRangeError: If the mask leaves [0, 1] and ignore_range is False.
    """
    noisy = np.asarray(noisy_lps, dtype=np.float64)
    mask = np.asarray(mask, dtype=np.float64)
    check_same_shape(noisy, mask)
    if not ignore_range and mask.size and (mask.min() < 0.0 or mask.max() > 1.0):
        raise MaskRangeError(
            f"Mask out of range [0, 1]: [{mask.min()}, {mask.max()}]"
        )
    power = np.exp(noisy)
    floor = max(power.min() / 10.0, TINY) if power.size else TINY
    return np.log(np.maximum(power * mask ** 2, floor))
