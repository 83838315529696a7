import numpy as np
import pytest
from masks.gain import apply_geometric_gain, compute_geometric_gain, sigmoid_mask, sigmoid_mask_post_process
from masks.irm import apply_mask, binarize_mask, compute_irm, noise_from_mask
from masks.postprocess import irm_post_process, regime_indicators, validate_bounds
from stft.errors import ConfigurationError, DimensionMismatch, MaskRangeError, NonFiniteValue


def test_irm_range():
    clean = np.random.randn(50, 257) * 5
    noise = np.random.randn(50, 257) * 5
    mask = compute_irm(clean, noise)
    assert mask.shape == clean.shape
    assert mask.min() >= 0 and mask.max() <= 1


def test_irm_at_zero_db():
    lps = np.random.randn(10, 129)
    mask = compute_irm(lps, lps.copy())
    assert np.allclose(mask, 1 / np.sqrt(2))


def test_irm_extreme_noise_does_not_overflow():
    mask = compute_irm(np.zeros((1, 2)), np.array([[1000.0, -1000.0]]))
    assert np.allclose(mask, [[0.0, 1.0]])


def test_ibm_threshold():
    # Ps/Pn = 2 and 0.5 per bin
    clean = np.log(np.array([[2.0, 1.0]]))
    noise = np.log(np.array([[1.0, 2.0]]))
    assert np.array_equal(compute_irm(clean, noise, ibm_threshold=1.0), [[1.0, 0.0]])
    # A higher threshold turns both off
    assert np.array_equal(compute_irm(clean, noise, ibm_threshold=3.0), [[0.0, 0.0]])
    ibm = compute_irm(np.random.randn(20, 33) * 4, np.random.randn(20, 33) * 4, ibm_threshold=1.0)
    assert set(np.unique(ibm)) <= {0.0, 1.0}


def test_binarize_rejects_nonpositive_threshold():
    with pytest.raises(ConfigurationError):
        binarize_mask(np.zeros(3), 0.0)


def test_irm_flooring():
    clean = np.array([[0.0, 10.0], [0.0, 10.0]])
    noise = np.zeros((2, 2))
    mask = compute_irm(clean, noise, flooring='mean')
    assert np.all(mask[:, 0] == 0)
    assert np.all(mask[:, 1] > 0.9)
    mask = compute_irm(clean, noise, flooring='custom', lps_floor=-1.0)
    assert np.all(mask > 0)
    with pytest.raises(ConfigurationError):
        compute_irm(clean, noise, flooring='median')


def test_irm_shape_mismatch():
    with pytest.raises(DimensionMismatch):
        compute_irm(np.zeros((3, 5)), np.zeros((3, 6)))


def test_noise_from_mask_inverts_irm():
    clean = np.random.randn(20, 65) * 2
    noise = np.random.randn(20, 65) * 2
    mask = compute_irm(clean, noise)
    assert np.allclose(noise_from_mask(clean, mask), noise, atol=1e-6)


def test_noise_from_mask_range():
    clean = np.zeros((1, 3))
    with pytest.raises(MaskRangeError):
        noise_from_mask(clean, np.array([[0.0, 0.5, 1.0]]))
    with pytest.raises(MaskRangeError):
        noise_from_mask(clean, np.array([[0.2, 0.5, 1.2]]))
    # mask == 1 means no noise; the floor keeps the log finite
    noise = noise_from_mask(clean, np.ones((1, 3)))
    assert np.allclose(noise, np.log(1e-12))


def test_apply_mask():
    noisy = np.random.randn(4, 9)
    assert np.allclose(apply_mask(noisy, np.ones_like(noisy)), noisy)
    assert np.allclose(apply_mask(noisy, np.full_like(noisy, 0.5)), noisy + np.log(0.25))
    with pytest.raises(MaskRangeError):
        apply_mask(noisy, np.full_like(noisy, 1.5))
    out = apply_mask(noisy, np.full_like(noisy, 1.5), ignore_range=True)
    assert np.allclose(out, noisy + np.log(2.25))


def test_regimes_partition_every_bin():
    mask = np.random.uniform(0, 1, size=(30, 257))
    mask[0, :3] = [0.75, 0.1, 0.5]
    high, mid, low = regime_indicators(mask, 0.75, 0.1)
    total = high + mid + low
    assert np.all(total == 1)
    for ind in (high, mid, low):
        assert set(np.unique(ind)) <= {0.0, 1.0}
    # Exactly on a bound falls in the middle regime
    assert np.all(mid[0, :3] == 1)


def test_post_process_blend():
    noisy = np.ones((1, 3))
    pred = np.full((1, 3), 3.0)
    mask = np.array([[0.9, 0.5, 0.05]])
    out = irm_post_process(noisy, pred, mask, upper_bound=0.75, lower_bound=0.1)
    assert np.allclose(out, [[1.0, 2.0, 3.0]])


def test_post_process_errors():
    noisy = np.ones((2, 3))
    with pytest.raises(MaskRangeError):
        irm_post_process(noisy, noisy, np.full((2, 3), -0.1))
    with pytest.raises(DimensionMismatch):
        irm_post_process(noisy, np.ones((2, 4)), np.zeros((2, 3)))


@pytest.mark.parametrize("upper,lower", [(0.5, 0.5), (0.2, 0.6), (1.0, 0.1), (0.75, 0.0)])
def test_invalid_bounds(upper, lower):
    with pytest.raises(ConfigurationError):
        validate_bounds(upper, lower)


def test_apply_mask_stays_finite_when_power_underflows():
    noisy = np.full((2, 5), -1000.0)
    out = apply_mask(noisy, np.full_like(noisy, 0.5))
    assert np.all(np.isfinite(out))
    assert np.allclose(out, np.log(np.finfo(np.float64).tiny))


def test_geometric_gain_reconstructs_clean():
    clean = np.random.randn(6, 17) * 3
    noisy = np.random.randn(6, 17) * 3
    gain = compute_geometric_gain(clean, noisy)
    assert np.allclose(gain, clean - noisy)
    assert np.allclose(apply_geometric_gain(gain, noisy), clean)
    with pytest.raises(DimensionMismatch):
        compute_geometric_gain(clean, noisy[:, :5])


def test_sigmoid_mask_values():
    assert np.allclose(sigmoid_mask(np.zeros((2, 3))), 0.5)
    mask = sigmoid_mask(np.random.randn(10, 33) * 5, alpha=2.0)
    assert mask.min() > 0 and mask.max() < 1
    # Utterance mean is removed before the sigmoid
    assert np.allclose(sigmoid_mask(np.full((2, 3), 7.0), online_mean=True), 0.5)
    assert np.allclose(sigmoid_mask(np.full((1, 2), 4.0), beta=0.5, online_mean=True), 1 / (1 + np.exp(-2.0)))


def test_sigmoid_mask_floor():
    # The exponent is capped at -floor, so very negative inputs saturate
    assert np.allclose(sigmoid_mask(np.array([[-1000.0]])), 1 / (1 + np.exp(20.0)))
    with pytest.raises(NonFiniteValue):
        sigmoid_mask(np.array([[-1000.0]]), floor=-1000.0)


def test_sigmoid_mask_post_process():
    pred = np.zeros((3, 4))
    noisy = np.random.randn(3, 4)
    assert np.allclose(sigmoid_mask_post_process(pred), 0.5)
    assert np.allclose(sigmoid_mask_post_process(pred, noisy, gamma=1.0), 0.5 * (noisy + 1.0))
    assert np.allclose(sigmoid_mask_post_process(pred, noisy, linear=True), noisy + np.log(0.5))
    with pytest.raises(DimensionMismatch):
        sigmoid_mask_post_process(pred, noisy[:2])
    with pytest.raises(NonFiniteValue):
        sigmoid_mask_post_process(pred, noisy, gamma=-1e6, linear=True)
