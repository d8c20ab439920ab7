# -*- coding: utf-8 -*-
"""
Synthetic Alignment Example - Recover a known warp from a generated image pair.

Builds a smooth textured template, warps it with a known ground-truth
transform to produce the target, then steps ``ForwardAdditiveAligner``
from identity and prints the residual and parameters at every step.

Usage:
  python align_synthetic.py
  python align_synthetic.py --warp-type euclidean --iterations 30
  python align_synthetic.py --warp-type translation --truth 3.5 -2.0
  python align_synthetic.py --help

Dependencies
------------
scipy

Author
------
Duane Smalley, PhD
duane.d.smalley@gmail.com

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-19

Modified
--------
2026-10-19
"""

# Standard library
import argparse
import logging
import sys
from pathlib import Path

# Third-party
import numpy as np
from scipy.ndimage import gaussian_filter

# lkalign
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from lkalign import ForwardAdditiveAligner, WarpType, create_warp, warp_image


# ── CLI ──────────────────────────────────────────────────────────────


_DEFAULT_TRUTH = {
    WarpType.TRANSLATION: [2.5, -1.5],
    WarpType.EUCLIDEAN: [1.5, -1.0, 0.03],
    WarpType.SIMILARITY: [1.5, -1.0, 0.02, 0.02],
    WarpType.AFFINE: [0.02, 0.01, -0.01, 0.02, 1.5, -1.0],
    WarpType.PROJECTIVE: [0.02, 0.01, -0.01, 0.02, 1.5, -1.0, 1e-5, -1e-5],
}


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Recover a known warp with forward-additive Lucas-Kanade.",
    )
    parser.add_argument(
        '--warp-type', default='translation',
        choices=[t.value for t in WarpType],
        help="Motion family to estimate (default: translation).",
    )
    parser.add_argument(
        '--iterations', type=int, default=20,
        help="Number of alignment steps (default: 20).",
    )
    parser.add_argument(
        '--size', type=int, default=96,
        help="Side length of the synthetic template in pixels (default: 96).",
    )
    parser.add_argument(
        '--truth', type=float, nargs='+', default=None,
        help="Ground-truth warp parameters (default depends on warp type).",
    )
    parser.add_argument(
        '--seed', type=int, default=0,
        help="Random seed for the template texture (default: 0).",
    )
    parser.add_argument(
        '-v', '--verbose', action='store_true',
        help="Enable DEBUG logging.",
    )
    return parser.parse_args()


def make_texture(size: int, seed: int) -> np.ndarray:
    """Smooth random texture with intensities in [0, 255]."""
    rng = np.random.default_rng(seed)
    img = gaussian_filter(rng.random((size, size)), sigma=3.0)
    img -= img.min()
    return 255.0 * img / img.max()


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    warp_type = WarpType(args.warp_type)
    truth = create_warp(warp_type, args.truth or _DEFAULT_TRUTH[warp_type])

    template = make_texture(args.size, args.seed)
    # Target sampled so that target(W_truth(x)) == template(x).
    target = warp_image(template, truth.inverse())

    warp = create_warp(warp_type)
    aligner = ForwardAdditiveAligner(warp_type=warp_type)
    aligner.prepare(template, target)

    for step in range(1, args.iterations + 1):
        residual = aligner.align(warp)
        params = ', '.join(f"{v:+.4f}" for v in warp.get_parameters())
        print(f"step {step:3d}  residual {residual:+.5f}  params [{params}]")

    truth_text = ', '.join(f"{v:+.4f}" for v in truth.get_parameters())
    print(f"truth              params [{truth_text}]")
    return 0


if __name__ == '__main__':
    sys.exit(main())
