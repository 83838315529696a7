# src/enhance/compute_geometric_gain.py
import argparse
import sys

from audioio.archive import MatrixArchiveWriter
from masks.gain import apply_geometric_gain, compute_geometric_gain
from .common import add_config_argument, load_config, run_paired

EXAMPLE_USAGE = """
Examples:
  compute-geometric-gain clean_lps.npz noisy_lps.npz gain.npz
  compute-geometric-gain --predict gain.npz noisy_lps.npz enhanced_lps.npz
"""


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Compute the log geometric gain (clean LPS - noisy LPS), or with --predict add a "
                    "gain back to noisy LPS.",
        epilog=EXAMPLE_USAGE,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('first', type=str, help='Clean LPS archive (gain archive with --predict)')
    parser.add_argument('noisy', type=str, help='Noisy LPS archive')
    parser.add_argument('output', type=str, help='Output gain archive (enhanced LPS with --predict)')
    parser.add_argument('--predict', action='store_true', help='Apply a gain to noisy LPS instead of computing it')
    add_config_argument(parser)
    args = load_config(parser.parse_args(argv))
    op = apply_geometric_gain if args.predict else compute_geometric_gain

    with MatrixArchiveWriter(args.output) as writer:
        counter = run_paired([args.first, args.noisy], writer, lambda key, x, y: op(x, y))
    return counter.report("applying geometric gain" if args.predict else "calculating geometric gain")


if __name__ == "__main__":
    sys.exit(main())
