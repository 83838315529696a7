import copy

import numpy as np
import pytest
from stft.real_fft import (
    GeneralRealFft, SplitRadixRealFft, make_real_fft, pack_spectrum, unpack_spectrum
)
from stft.errors import DimensionMismatch, UnsupportedFftSize


def test_pack_layout():
    spec = np.array([1.0, 2 + 3j, 4 - 5j, 6.0])
    packed = pack_spectrum(spec)
    # Re(0), Re(N/2), Re(1), Im(1), Re(2), Im(2)
    assert np.allclose(packed, [1.0, 6.0, 2.0, 3.0, 4.0, -5.0])
    assert np.allclose(unpack_spectrum(packed), spec)


@pytest.mark.parametrize("n", [512, 400, 6])
def test_forward_matches_numpy(n):
    x = np.random.randn(n) * 1000
    buf = x.copy()
    make_real_fft(n).transform(buf, forward=True)
    assert np.allclose(buf, pack_spectrum(np.fft.rfft(x)), atol=1e-6)


@pytest.mark.parametrize("n", [256, 400])
def test_inverse_is_unnormalized(n):
    x = np.random.randn(n)
    engine = make_real_fft(n)
    buf = x.copy()
    engine.transform(buf, forward=True)
    engine.transform(buf, forward=False)
    assert np.allclose(buf / n, x, atol=1e-9)


def test_variant_selection():
    assert isinstance(make_real_fft(1024), SplitRadixRealFft)
    assert isinstance(make_real_fft(400), GeneralRealFft)
    with pytest.raises(UnsupportedFftSize):
        SplitRadixRealFft(400)
    with pytest.raises(DimensionMismatch):
        make_real_fft(401)


def test_copy_rebuilds_tables():
    engine = GeneralRealFft(40)
    clone = copy.deepcopy(engine)
    assert clone is not engine
    assert clone._cos is not engine._cos
    assert np.array_equal(clone._cos, engine._cos)


def test_wrong_buffer_size():
    with pytest.raises(DimensionMismatch):
        make_real_fft(64).transform(np.zeros(32), forward=True)
