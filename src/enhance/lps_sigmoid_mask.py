# src/enhance/lps_sigmoid_mask.py
import argparse
import sys

from audioio.archive import MatrixArchiveWriter, read_matrix_archive
from masks.gain import sigmoid_mask_post_process
from .common import UtteranceCounter, add_config_argument, load_config, run_paired

EXAMPLE_USAGE = """
Examples:
  lps-sigmoid-mask-post-processing pred_lps.npz mask.npz
  lps-sigmoid-mask-post-processing --online-mean --alpha 0.5 pred_lps.npz noisy_lps.npz post_lps.npz
"""


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Turn (mean-normalized) predicted LPS into a sigmoid mask. With a noisy LPS archive, "
                    "output the noisy LPS scaled by that mask instead.",
        epilog=EXAMPLE_USAGE,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('input', type=str, help='Predicted LPS archive')
    parser.add_argument('noisy', type=str, help='Noisy LPS archive, or the output archive if only two are given')
    parser.add_argument('output', type=str, nargs='?', help='Output post-processed LPS archive')
    parser.add_argument('--alpha', type=float, default=1.0, help='Growth rate of the sigmoid')
    parser.add_argument('--beta', type=float, default=1.0, help='beta * feature mean is the sigmoid offset')
    parser.add_argument('--gamma', type=float, default=0.0, help='Offset added to the noisy feature')
    parser.add_argument('--floor', type=float, default=-20.0, help='Inputs are floored to this value')
    parser.add_argument('--online-mean', action='store_true',
                        help='Normalize unnormalized input by its utterance mean')
    parser.add_argument('--linear', action='store_true', help='Apply the mask in the linear domain')
    add_config_argument(parser)
    args = load_config(parser.parse_args(argv))
    params = dict(alpha=args.alpha, beta=args.beta, gamma=args.gamma, floor=args.floor,
                  online_mean=args.online_mean, linear=args.linear)

    if args.output is None:
        counter = UtteranceCounter()
        with MatrixArchiveWriter(args.noisy) as writer:
            for key, pred in read_matrix_archive(args.input):
                if pred.size == 0:
                    print(f"[WARN] Empty feature matrix for key {key}")
                    counter.skipped += 1
                    continue
                writer.write(key, sigmoid_mask_post_process(pred, **params))
                counter.done += 1
        return counter.report("computing sigmoid masks")

    with MatrixArchiveWriter(args.output) as writer:
        counter = run_paired([args.input, args.noisy], writer,
                             lambda key, pred, noisy: sigmoid_mask_post_process(pred, noisy, **params))
    return counter.report("sigmoid mask post-processing")


if __name__ == "__main__":
    sys.exit(main())
