import numpy as np
import pytest
from stft.decoder import frame_features_to_lps, invert_sign_log, phase_deducted_lps
from stft.real_fft import pack_spectrum
from stft.errors import DimensionMismatch, NonFiniteValue


def test_sign_log_round_trip():
    x = np.random.randn(20, 512) * 10 ** np.random.uniform(-3, 6, size=(20, 512))
    y = np.sign(x) * np.log(np.abs(x) + 1)
    assert np.allclose(invert_sign_log(y), x, rtol=1e-9, atol=1e-12)


def test_lps_and_phase_recovery():
    spec = (np.random.randn(5, 257) + 1j * np.random.randn(5, 257)) * 500
    spec[:, 0] = spec[:, 0].real
    spec[:, -1] = spec[:, -1].real
    x = pack_spectrum(spec)
    feats = np.sign(x) * np.log1p(np.abs(x))
    lps, phase = frame_features_to_lps(feats)
    assert lps.shape == (5, 257)
    assert np.allclose(lps, np.log(np.abs(spec) ** 2))
    assert np.allclose(np.exp(0.5 * lps) * np.exp(1j * phase), spec)


def test_boundary_bins_phase_is_zero_or_pi():
    x = np.zeros(8)
    x[0], x[1] = -5.0, 3.0
    feats = (np.sign(x) * np.log1p(np.abs(x)))[None, :]
    _, phase = frame_features_to_lps(feats)
    assert np.isclose(phase[0, 0], np.pi)
    assert phase[0, -1] == 0.0


def test_combined_output():
    feats = np.random.randn(3, 16)
    combined = frame_features_to_lps(feats, combine=True)
    lps, phase = frame_features_to_lps(feats)
    assert combined.shape == (3, 18)
    assert np.allclose(combined[:, :9], lps)
    assert np.allclose(combined[:, 9:], phase)


def test_zero_features_are_floored():
    lps, _ = frame_features_to_lps(np.zeros((2, 8)))
    assert np.all(np.isfinite(lps))
    assert np.allclose(lps, np.log(np.finfo(np.float32).eps))


def test_overflow_is_a_hard_failure():
    feats = np.zeros((2, 8))
    feats[1, 3] = 1000.0
    with pytest.raises(NonFiniteValue):
        frame_features_to_lps(feats)


def test_odd_width_rejected():
    with pytest.raises(DimensionMismatch):
        frame_features_to_lps(np.zeros((2, 7)))


def test_phase_deducted_lps():
    feats = np.arange(32, dtype=float).reshape(2, 16)
    lps = phase_deducted_lps(feats)
    assert lps.shape == (2, 5)
    assert np.allclose(lps[:, 0], 2 * feats[:, 0])
    assert np.allclose(lps[:, -1], 2 * feats[:, 1])
    for c in range(1, 4):
        assert np.allclose(lps[:, c], feats[:, 2 * c] + feats[:, 2 * c + 1])
    with pytest.raises(DimensionMismatch):
        phase_deducted_lps(np.zeros((2, 10)))
