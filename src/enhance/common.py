# src/enhance/common.py
import argparse
import json
import warnings
from typing import Callable, Optional, Sequence, Tuple, Type

import numpy as np
import yaml

from audioio.archive import iterate_paired
from stft.errors import DimensionMismatch
from stft.framing import FrameExtractionOptions


def add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--config', type=str, help='YAML/JSON config file for parameters (optional)')


def load_config(args: argparse.Namespace) -> argparse.Namespace:
    """Override parsed arguments with the keys of --config, if given."""
    if getattr(args, 'config', None):
        with open(args.config, 'r') as f:
            config = yaml.safe_load(f) if args.config.endswith('.yaml') or args.config.endswith('.yml') else json.load(f)
        for k, v in (config or {}).items():
            k = k.replace('-', '_')
            if hasattr(args, k):
                setattr(args, k, v)
    return args


def add_frame_options(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group('frame extraction')
    group.add_argument('--sample-frequency', type=float, default=16000.0, help='Waveform sample rate in Hz')
    group.add_argument('--frame-shift', type=float, default=10.0, help='Frame shift in milliseconds')
    group.add_argument('--frame-length', type=float, default=25.0, help='Frame length in milliseconds')
    group.add_argument('--dither', type=float, default=0.0, help='Dithering constant (0 disables)')
    group.add_argument('--preemphasis-coefficient', type=float, default=0.97, help='Pre-emphasis coefficient')
    group.add_argument('--remove-dc-offset', action=argparse.BooleanOptionalAction, default=True,
                       help='Subtract the mean of each frame before processing')
    group.add_argument('--window-type', type=str, default='hamming', help='Window type ("hamming" or "rectangular")')
    group.add_argument('--round-to-power-of-two', action=argparse.BooleanOptionalAction, default=True,
                       help='Zero-pad each frame to the next power of two')


def frame_options_from_args(args: argparse.Namespace) -> FrameExtractionOptions:
    return FrameExtractionOptions(
        samp_freq=args.sample_frequency,
        frame_shift_ms=args.frame_shift,
        frame_length_ms=args.frame_length,
        dither=args.dither,
        preemph_coeff=args.preemphasis_coefficient,
        remove_dc_offset=args.remove_dc_offset,
        window_type=args.window_type,
        round_to_power_of_two=args.round_to_power_of_two,
    )


class UtteranceCounter:
    """Per-run tallies; the run succeeds if at least one utterance was done."""

    def __init__(self):
        self.done = 0
        self.no_key = 0
        self.skipped = 0

    def report(self, what: str) -> int:
        print(f"[RESULT] Done {what} for {self.done} utterances with {self.no_key} missing key errors "
              f"and {self.skipped} skipped utterances.")
        return 0 if self.done > 0 else 1


def print_warnings(caught: Sequence[warnings.WarningMessage]) -> None:
    for w in caught:
        print(f"[WARN] {w.message}")


def run_paired(
    paths: Sequence[str],
    writer,
    transform: Callable[..., np.ndarray],
    counter: Optional[UtteranceCounter] = None,
    skip_on: Tuple[Type[Exception], ...] = (DimensionMismatch,),
) -> UtteranceCounter:
    """
    Apply transform(key, *matrices) to each utterance of the first archive,
    paired by key with the others.

    Mismatched keys, empty matrices and the exceptions in skip_on are warned
    about, counted and skipped; any other exception aborts the run.
    """
    counter = counter if counter is not None else UtteranceCounter()
    for key, values in iterate_paired(*paths):
        if values is None:
            print(f"[WARN] Missing key: {key} in paired archives.")
            counter.no_key += 1
            continue
        if any(np.size(v) == 0 for v in values):
            print(f"[WARN] Empty feature matrix for key {key}")
            counter.skipped += 1
            continue
        try:
            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter('always')
                result = transform(key, *values)
            print_warnings(caught)
        except skip_on as e:
            print(f"[WARN] Skipping {key}: {e}")
            counter.skipped += 1
            continue
        writer.write(key, result)
        counter.done += 1
    return counter
