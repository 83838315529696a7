# src/audioio/audio_io.py
import os
from glob import glob
from typing import List

import numpy as np
import soundfile as sf
import librosa


def load_audio(path: str, sr: int) -> np.ndarray:
    """
    Read an audio file, convert to mono, and resample to target rate.

    Samples keep int16 scale (range [-32768, 32767]) as float64; the frame
    FFT features are designed around that dynamic range.

    Args:
        path (str): File path to audio file.
        sr (int): Target sample rate.
    Returns:
        np.ndarray: Audio signal (mono, shape (n,)).
    Raises:
        FileNotFoundError: If file does not exist.
        ValueError: If audio cannot be loaded or resampled.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Audio file not found: {path}")
    audio, file_sr = sf.read(path, dtype='int16')
    audio = audio.astype(np.float64)
    if audio.ndim > 1:
        audio = np.mean(audio, axis=1)
    if file_sr != sr:
        audio = librosa.resample(audio, orig_sr=file_sr, target_sr=sr)
    return audio


def save_audio(audio: np.ndarray, sr: int, out_path: str) -> None:
    """
    Export int16-range samples as 16-bit PCM WAV.
    Args:
        audio (np.ndarray): Audio signal in int16 range.
        sr (int): Sample rate.
        out_path (str): Output file path.
    Raises:
        IOError: If file cannot be written.
    """
    samples = np.clip(np.rint(audio), -32768, 32767).astype(np.int16)
    sf.write(out_path, samples, int(sr), subtype='PCM_16')


def list_audio_files(input_dir: str) -> List[str]:
    """All .wav and .flac files below input_dir, sorted."""
    return sorted(glob(os.path.join(input_dir, '**', '*.flac'), recursive=True) +
                  glob(os.path.join(input_dir, '**', '*.wav'), recursive=True))


def utterance_key(path: str) -> str:
    return os.path.splitext(os.path.basename(path))[0]
