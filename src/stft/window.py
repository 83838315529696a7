# src/stft/window.py
import numpy as np
from scipy.signal import windows

from .errors import UnsupportedWindowType

WINDOW_TYPES = ("rectangular", "hamming")


def generate_window(window_type: str, length: int) -> np.ndarray:
    """
    Build an analysis/synthesis window.

    Args:
        window_type (str): "rectangular" or "hamming".
        length (int): Number of samples.

    Returns:
        np.ndarray: Window of shape (length,), float64.

    Raises:
        UnsupportedWindowType: If window_type is not one of WINDOW_TYPES.
        ValueError: If length < 1.
    """
    if length < 1:
        raise ValueError(f"Window length must be positive, got {length}")
    if window_type == "rectangular":
        return np.ones(length, dtype=np.float64)
    if window_type == "hamming":
        # 0.54 - 0.46*cos(2*pi*i/(length-1))
        return windows.hamming(length, sym=True).astype(np.float64)
    raise UnsupportedWindowType(
        f"Unsupported window type: {window_type!r} (expected one of {', '.join(WINDOW_TYPES)})"
    )
