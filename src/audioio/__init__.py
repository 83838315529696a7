# Audio and archive I/O
from .audio_io import load_audio, save_audio, list_audio_files, utterance_key
from .archive import (
    MatrixArchiveWriter, WaveArchiveWriter, WaveDirectoryWriter, read_matrix_archive, read_wave_archive,
    iterate_paired, SAMPLE_RATE_KEY,
)
