import numpy as np
import pytest
from stft.window import generate_window
from stft.errors import UnsupportedWindowType


def test_rectangular_window():
    w = generate_window('rectangular', 16)
    assert w.shape == (16,)
    assert np.all(w == 1.0)


def test_hamming_window_formula():
    n = 512
    w = generate_window('hamming', n)
    i = np.arange(n)
    expected = 0.54 - 0.46 * np.cos(2 * np.pi * i / (n - 1))
    assert np.allclose(w, expected)
    # Symmetric, 0.08 at both ends
    assert np.isclose(w[0], 0.08)
    assert np.isclose(w[-1], 0.08)


def test_unknown_window_type():
    with pytest.raises(UnsupportedWindowType):
        generate_window('blackman', 64)
