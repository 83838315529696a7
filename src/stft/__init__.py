# STFT module
from .errors import (
    SpectralError, ConfigurationError, UnsupportedWindowType, UnsupportedFftSize,
    DimensionMismatch, NonFiniteValue, MaskRangeError,
)
from .window import generate_window
from .real_fft import RealFft, SplitRadixRealFft, GeneralRealFft, make_real_fft, pack_spectrum, unpack_spectrum
from .framing import FrameExtractionOptions, extract_frames, num_frames
from .framefft import FeatureComputer, FrameComputer, FrameFftComputer, FrameOptions, FrameFftOptions, compute_features
from .decoder import invert_sign_log, frame_features_to_lps, phase_deducted_lps, power_spectrum, phase_spectrum
from .overlap_add import OverlapAddSynthesizer, spectrum_from_lps
from .stft_transform import compute_stft, reconstruct_audio
