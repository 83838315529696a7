# src/audioio/archive.py
"""
Keyed archives of per-utterance matrices.

An archive is a numpy .npz file whose entries are stored in write order;
readers yield (key, matrix) pairs in that same order, and paired readers look
keys up by name in the partner archives. Waveform archives hold
int16 sample buffers plus one SAMPLE_RATE_KEY entry.
"""
import os
import zipfile
from contextlib import ExitStack
from typing import Dict, Iterator, Optional, Sequence, Tuple

import numpy as np

from .audio_io import save_audio

SAMPLE_RATE_KEY = "__sample_rate__"


class MatrixArchiveWriter:
    """Collects matrices by key and writes them to one .npz on close."""

    def __init__(self, path: str):
        self.path = path
        self._entries: Dict[str, np.ndarray] = {}

    def write(self, key: str, value: np.ndarray) -> None:
        if key in self._entries:
            raise KeyError(f"Duplicate key {key!r} in archive {self.path}")
        self._entries[key] = np.asarray(value)

    def __len__(self):
        return len(self._entries)

    def close(self) -> None:
        out_dir = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(out_dir, exist_ok=True)
        # Same container np.savez writes, without its reserved keyword names.
        with zipfile.ZipFile(self.path, "w", compression=zipfile.ZIP_STORED, allowZip64=True) as zf:
            for key, value in self._entries.items():
                with zf.open(key + ".npy", "w", force_zip64=True) as f:
                    np.lib.format.write_array(f, value, allow_pickle=False)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        # Partial archives are not written when the run fails.
        if exc_type is None:
            self.close()
        return False


class WaveArchiveWriter(MatrixArchiveWriter):
    """Archive of mono int16 waveforms sharing one sample rate."""

    def __init__(self, path: str, sample_rate: float):
        super().__init__(path)
        self.sample_rate = sample_rate

    def write(self, key: str, value: np.ndarray) -> None:
        if key == SAMPLE_RATE_KEY:
            raise KeyError(f"{SAMPLE_RATE_KEY!r} is reserved")
        samples = np.clip(np.rint(value), -32768, 32767).astype(np.int16)
        super().write(key, samples)

    def close(self) -> None:
        self._entries[SAMPLE_RATE_KEY] = np.asarray(self.sample_rate, dtype=np.float64)
        super().close()


def read_matrix_archive(path: str) -> Iterator[Tuple[str, np.ndarray]]:
    """Yield (key, matrix) pairs in archive order."""
    with np.load(path, allow_pickle=False) as data:
        for key in data.files:
            if key == SAMPLE_RATE_KEY:
                continue
            yield key, data[key]


def read_wave_archive(path: str) -> Tuple[float, Iterator[Tuple[str, np.ndarray]]]:
    """Return the archive sample rate and a (key, samples) iterator."""
    with np.load(path, allow_pickle=False) as data:
        if SAMPLE_RATE_KEY not in data.files:
            raise KeyError(f"{path} is not a waveform archive (no {SAMPLE_RATE_KEY})")
        sample_rate = float(data[SAMPLE_RATE_KEY])
    return sample_rate, read_matrix_archive(path)


def iterate_paired(*paths: str) -> Iterator[Tuple[str, Optional[Sequence[np.ndarray]]]]:
    """
    Walk the first archive in order and look each key up in the others.

    Yields (key, values) for every key of the first archive. When any other
    archive lacks the key, values is None and the caller is expected to skip
    the utterance. Keys present only in the other archives are never yielded.
    """
    with ExitStack() as stack:
        archives = [stack.enter_context(np.load(p, allow_pickle=False)) for p in paths]
        for key in archives[0].files:
            if key == SAMPLE_RATE_KEY:
                continue
            if any(key not in data.files for data in archives[1:]):
                yield key, None
                continue
            yield key, [data[key] for data in archives]


class WaveDirectoryWriter:
    """Writes each waveform to <output_dir>/<key>.wav."""

    def __init__(self, output_dir: str, sample_rate: float):
        self.output_dir = output_dir
        self.sample_rate = sample_rate
        os.makedirs(output_dir, exist_ok=True)

    def write(self, key: str, value: np.ndarray) -> None:
        save_audio(value, self.sample_rate, os.path.join(self.output_dir, key + ".wav"))

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False
