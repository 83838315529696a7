import numpy as np
import pytest
from audioio.archive import (
    MatrixArchiveWriter, WaveArchiveWriter, WaveDirectoryWriter, iterate_paired,
    read_matrix_archive, read_wave_archive
)
from audioio.audio_io import load_audio


def write_archive(path, items):
    with MatrixArchiveWriter(str(path)) as writer:
        for key, value in items:
            writer.write(key, value)


def test_matrix_archive_preserves_order(tmp_path):
    items = [('utt_b', np.random.randn(3, 4)), ('utt_a', np.random.randn(2, 4)), ('file', np.zeros((1, 4)))]
    write_archive(tmp_path / 'feats.npz', items)
    read = list(read_matrix_archive(str(tmp_path / 'feats.npz')))
    assert [k for k, _ in read] == ['utt_b', 'utt_a', 'file']
    for (_, a), (_, b) in zip(items, read):
        assert np.array_equal(a, b)


def test_duplicate_key(tmp_path):
    writer = MatrixArchiveWriter(str(tmp_path / 'x.npz'))
    writer.write('a', np.zeros(2))
    with pytest.raises(KeyError):
        writer.write('a', np.zeros(2))


def test_failed_run_writes_nothing(tmp_path):
    path = tmp_path / 'partial.npz'
    with pytest.raises(RuntimeError):
        with MatrixArchiveWriter(str(path)) as writer:
            writer.write('a', np.zeros(2))
            raise RuntimeError("boom")
    assert not path.exists()


def test_iterate_paired_flags_mismatched_keys(tmp_path):
    write_archive(tmp_path / 'a.npz', [('u1', np.zeros(1)), ('u2', np.zeros(1)), ('u3', np.zeros(1))])
    write_archive(tmp_path / 'b.npz', [('u1', np.ones(1)), ('x2', np.ones(1)), ('u3', np.ones(1))])
    result = list(iterate_paired(str(tmp_path / 'a.npz'), str(tmp_path / 'b.npz')))
    assert [k for k, _ in result] == ['u1', 'u2', 'u3']
    assert result[1][1] is None
    assert np.array_equal(result[2][1][1], np.ones(1))


def test_wave_archive(tmp_path):
    path = str(tmp_path / 'wav.npz')
    with WaveArchiveWriter(path, 8000) as writer:
        writer.write('utt', np.array([0.4, 1.6, -40000.0]))
    sr, waves = read_wave_archive(path)
    assert sr == 8000
    waves = list(waves)
    assert len(waves) == 1
    key, samples = waves[0]
    assert key == 'utt'
    assert samples.dtype == np.int16
    assert list(samples) == [0, 2, -32768]


def test_wave_directory(tmp_path):
    samples = np.rint(1000 * np.sin(np.arange(800) / 5.0))
    with WaveDirectoryWriter(str(tmp_path / 'out'), 16000) as writer:
        writer.write('utt1', samples)
    audio = load_audio(str(tmp_path / 'out' / 'utt1.wav'), 16000)
    assert np.array_equal(audio, samples)


def test_iterate_paired_looks_keys_up_by_name(tmp_path):
    write_archive(tmp_path / 'a.npz', [('u1', np.zeros(1)), ('u2', np.zeros(1)), ('u3', np.zeros(1))])
    write_archive(tmp_path / 'b.npz', [('u3', np.full(1, 3.0)), ('u1', np.ones(1))])
    result = list(iterate_paired(str(tmp_path / 'a.npz'), str(tmp_path / 'b.npz')))
    assert [k for k, _ in result] == ['u1', 'u2', 'u3']
    assert np.array_equal(result[0][1][1], np.ones(1))
    assert result[1][1] is None
    assert np.array_equal(result[2][1][1], np.full(1, 3.0))
