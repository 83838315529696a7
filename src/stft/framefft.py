# src/stft/framefft.py
"""
Frame-level feature computers.

All computers share one call signature, compute(signal_log_energy, vtln_warp,
signal_frame), so the same extraction loop drives every feature type. Each
computer ignores the arguments it has no use for.
"""
import copy

import numpy as np
from typing import Optional

from .errors import DimensionMismatch
from .framing import FrameExtractionOptions, extract_frames
from .real_fft import make_real_fft

EPSILON = float(np.finfo(np.float32).eps)


class FrameOptions:
    """Options for FrameComputer and FrameFftComputer."""

    def __init__(
        self,
        frame_opts: Optional[FrameExtractionOptions] = None,
        energy_floor: float = 0.0,
        raw_energy: bool = True,
    ):
        self.frame_opts = frame_opts if frame_opts is not None else FrameExtractionOptions()
        # Absolute, not log scale; 0 disables the floor.
        self.energy_floor = energy_floor
        # If True, energy is measured before pre-emphasis and windowing.
        self.raw_energy = raw_energy


FrameFftOptions = FrameOptions


class FeatureComputer:
    """Base class for per-frame feature computers."""

    def __init__(self, opts: FrameOptions):
        self.opts = opts
        self.log_energy_floor = np.log(opts.energy_floor) if opts.energy_floor > 0.0 else None

    @property
    def frame_options(self) -> FrameExtractionOptions:
        return self.opts.frame_opts

    @property
    def dim(self) -> int:
        raise NotImplementedError

    @property
    def need_raw_log_energy(self) -> bool:
        return self.opts.raw_energy

    def compute(
        self,
        signal_log_energy: float,
        vtln_warp: float,
        signal_frame: np.ndarray,
        out: Optional[np.ndarray] = None,
    ) -> np.ndarray:
        """
        Compute one feature vector from one extracted frame.

        Args:
            signal_log_energy (float): Log energy of the frame prior to
                windowing, used only by computers that need it.
            vtln_warp (float): Warp factor, used only by computers that need it.
            signal_frame (np.ndarray): Frame of length padded_window_size, as
                returned by extract_frames. It is not modified.
            out (np.ndarray, optional): Pre-allocated output of shape (dim,).

        Returns:
            np.ndarray: Feature vector of shape (dim,).

        Raises:
            DimensionMismatch: If the frame or out buffer has the wrong size.
        """
        raise NotImplementedError

    def _check_buffers(self, signal_frame, out):
        padded = self.frame_options.padded_window_size
        if np.shape(signal_frame) != (padded,):
            raise DimensionMismatch(
                f"Frame has shape {np.shape(signal_frame)}, expected ({padded},)"
            )
        if out is None:
            return np.empty(self.dim, dtype=np.float64)
        if out.shape != (self.dim,):
            raise DimensionMismatch(f"Output buffer has shape {out.shape}, expected ({self.dim},)")
        return out


class FrameComputer(FeatureComputer):
    """Passes the windowed frame through unchanged."""

    @property
    def dim(self) -> int:
        return self.frame_options.padded_window_size

    def compute(self, signal_log_energy, vtln_warp, signal_frame, out=None):
        out = self._check_buffers(signal_frame, out)
        out[:] = signal_frame
        return out


class FrameFftComputer(FeatureComputer):
    """
    Sign-log encoded FFT of each frame.

    The feature holds all padded_window_size FFT coefficients in the
    interleaved layout [Re(0), Re(N/2), Re(1), Im(1), ...], each mapped through
    y = sign(x) * log(|x| + 1). Magnitude and phase both survive, so
    decoder.frame_features_to_lps can recover LPS and phase exactly.

    Waveforms should be in int16 range; features of [-1, 1] audio cluster
    near zero and lose most of their spread.
    """

    def __init__(self, opts: FrameOptions):
        super().__init__(opts)
        self._fft = make_real_fft(opts.frame_opts.padded_window_size)

    def __copy__(self):
        return type(self)(self.opts)

    def __deepcopy__(self, memo):
        return type(self)(copy.deepcopy(self.opts, memo))

    @property
    def dim(self) -> int:
        return self.frame_options.padded_window_size

    def compute(self, signal_log_energy, vtln_warp, signal_frame, out=None):
        out = self._check_buffers(signal_frame, out)
        frame = np.array(signal_frame, dtype=np.float64)

        if not self.opts.raw_energy:
            signal_log_energy = np.log(max(float(frame @ frame), EPSILON))
        if self.log_energy_floor is not None:
            signal_log_energy = max(signal_log_energy, self.log_energy_floor)
        # Energy is not part of this feature; it is accepted so every
        # computer shares one signature.

        self._fft.transform(frame, forward=True)
        np.multiply(np.sign(frame), np.log1p(np.abs(frame)), out=out)
        return out


def compute_features(
    waveform: np.ndarray,
    computer: FeatureComputer,
    vtln_warp: float = 1.0,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """
    Run frame extraction and a feature computer over a whole utterance.

    Returns:
        np.ndarray: Feature matrix of shape (num_frames, computer.dim).
    """
    frames, raw_log_energy = extract_frames(
        waveform, computer.frame_options, computer.need_raw_log_energy, rng=rng
    )
    feats = np.empty((frames.shape[0], computer.dim), dtype=np.float64)
    for r in range(frames.shape[0]):
        energy = raw_log_energy[r] if raw_log_energy is not None else 0.0
        computer.compute(energy, vtln_warp, frames[r], out=feats[r])
    return feats
