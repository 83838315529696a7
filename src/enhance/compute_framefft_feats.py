# src/enhance/compute_framefft_feats.py
import argparse
import os
import sys

import numpy as np
from librosa.util.exceptions import ParameterError

from audioio.archive import MatrixArchiveWriter
from audioio.audio_io import list_audio_files, load_audio, utterance_key
from stft.errors import ConfigurationError, DimensionMismatch
from stft.framefft import FrameFftComputer, FrameOptions, compute_features
from .common import UtteranceCounter, add_config_argument, add_frame_options, frame_options_from_args, load_config

EXAMPLE_USAGE = """
Examples:
  compute-framefft-feats --input utt1.wav feats.npz
  compute-framefft-feats --input-dir wavs/ --frame-length 32 --frame-shift 16 --preemphasis-coefficient 0 feats.npz
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compute sign-log encoded frame FFT features, one matrix per utterance.",
        epilog=EXAMPLE_USAGE,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('output', type=str, help='Output feature archive (.npz)')
    parser.add_argument('--input', type=str, help='Input audio file')
    parser.add_argument('--input-dir', type=str, help='Input directory (all .wav/.flac below it)')
    parser.add_argument('--energy-floor', type=float, default=0.0,
                        help='Floor on energy (absolute, not relative); 0 disables')
    parser.add_argument('--raw-energy', action=argparse.BooleanOptionalAction, default=True,
                        help='Compute energy before pre-emphasis and windowing')
    add_frame_options(parser)
    add_config_argument(parser)
    return parser


def main(argv=None) -> int:
    args = load_config(build_parser().parse_args(argv))
    if args.input_dir:
        audio_files = list_audio_files(args.input_dir)
    elif args.input:
        audio_files = [args.input]
    else:
        print("--input or --input-dir required")
        return 1

    try:
        opts = FrameOptions(frame_opts=frame_options_from_args(args),
                            energy_floor=args.energy_floor, raw_energy=args.raw_energy)
        computer = FrameFftComputer(opts)
    except ConfigurationError as e:
        print(f"[ERROR] {e}")
        return 1
    print(f"[INFO] Frame FFT dim {computer.dim}, {len(audio_files)} input files")

    counter = UtteranceCounter()
    sr = int(args.sample_frequency)
    with MatrixArchiveWriter(args.output) as writer:
        for path in audio_files:
            key = utterance_key(path)
            try:
                audio = load_audio(path, sr)
                feats = compute_features(audio, computer)
            except (OSError, RuntimeError, ParameterError, DimensionMismatch) as e:
                print(f"[WARN] Failed to compute features for {path}: {e}")
                counter.skipped += 1
                continue
            if feats.shape[0] == 0:
                print(f"[WARN] Utterance {key} is shorter than one frame ({len(audio)} samples)")
                counter.skipped += 1
                continue
            try:
                writer.write(key, feats.astype(np.float32))
            except KeyError as e:
                print(f"[WARN] {e.args[0]}; skipping {path}")
                counter.skipped += 1
                continue
            counter.done += 1
    print(f"[INFO] Features written to {os.path.abspath(args.output)}")
    return counter.report("computing frame FFT features")


if __name__ == "__main__":
    sys.exit(main())
