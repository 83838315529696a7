# src/enhance/overlap_add.py
import argparse
import os
import sys

from audioio.archive import WaveArchiveWriter, WaveDirectoryWriter
from stft.errors import ConfigurationError
from stft.overlap_add import OverlapAddSynthesizer
from .common import add_config_argument, load_config, run_paired

EXAMPLE_USAGE = """
If no output archive is given, each waveform is written to <output-dir>/<key>.wav.

Examples:
  overlap-add --output-dir /tmp/wavs lps.npz phase.npz
  overlap-add --fft-size 512 --window-shift 256 lps.npz phase.npz wavs.npz
"""


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Waveform reconstruction from LPS and phase by overlap-add.",
        epilog=EXAMPLE_USAGE,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('lps', type=str, help='LPS archive')
    parser.add_argument('phase', type=str, help='Phase archive')
    parser.add_argument('output', type=str, nargs='?', help='Waveform archive (optional)')
    parser.add_argument('--fs', type=float, default=16000, help='Sampling frequency')
    parser.add_argument('--window-shift', type=int, default=256, help='Window shift in samples')
    parser.add_argument('--fft-size', type=int, default=512, help='Inverse FFT size (power of two)')
    parser.add_argument('--window-type', type=str, default='hamming', help='Synthesis window ("hamming" or "rectangular")')
    parser.add_argument('--output-dir', type=str, default='./', help='Output directory when no archive is given')
    add_config_argument(parser)
    args = load_config(parser.parse_args(argv))

    try:
        synthesizer = OverlapAddSynthesizer(fft_size=args.fft_size, window_shift=args.window_shift,
                                            window_type=args.window_type, samp_freq=args.fs)
    except ConfigurationError as e:
        print(f"[ERROR] {e}")
        return 1

    if args.output:
        writer = WaveArchiveWriter(args.output, args.fs)
    else:
        writer = WaveDirectoryWriter(args.output_dir, args.fs)
    with writer:
        counter = run_paired([args.lps, args.phase], writer,
                             lambda key, lps, phase: synthesizer.synthesize(lps, phase, key=key))
    if not args.output:
        print(f"[INFO] Output wav written to {os.path.abspath(args.output_dir)}")
    return counter.report("reconstructing wavs")


if __name__ == "__main__":
    sys.exit(main())
