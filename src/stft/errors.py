# src/stft/errors.py


class SpectralError(ValueError):
    """Base class for errors raised by the spectral feature pipeline."""


class ConfigurationError(SpectralError):
    """Invalid option values; fatal at startup."""


class UnsupportedWindowType(ConfigurationError):
    pass


class UnsupportedFftSize(ConfigurationError):
    pass


class DimensionMismatch(SpectralError):
    """Frame, feature or paired-stream shapes do not agree."""


class NonFiniteValue(SpectralError):
    """A decoded value overflowed to inf/NaN, usually corrupted upstream data."""


class MaskRangeError(SpectralError):
    """A mask value lies outside the range its operation requires."""
