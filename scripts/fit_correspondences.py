"""Fit a transform from a YAML correspondence set and optionally warp an image with it."""

from __future__ import annotations

import argparse
from pathlib import Path

from loguru import logger

from corrpoints.config import load_config
from corrpoints.geometry import warp_image
from corrpoints.pipeline import CorrespondencePipeline
from corrpoints.utils.image_io import load_image, save_image
from corrpoints.utils.logging_setup import configure_logging


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fit a 2D transform to correspondence points")
    parser.add_argument("--config", type=Path, required=True, help="Path to correspondence YAML configuration")
    parser.add_argument("--image", type=Path, default=None, help="Image to resample through the fitted transform")
    parser.add_argument("--warped", type=Path, default=None, help="Where to write the resampled image")
    parser.add_argument(
        "--size",
        type=int,
        nargs=2,
        metavar=("WIDTH", "HEIGHT"),
        default=None,
        help="Output image size (defaults to the input size)",
    )
    parser.add_argument(
        "--inverse",
        action="store_true",
        help="Sample through the inverse transform instead of the forward one",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    cfg = load_config(args.config)
    configure_logging(cfg.logging)

    outcome = CorrespondencePipeline.from_config(cfg).run()
    logger.info(f"Transform: {outcome.transform}")

    if args.image is None:
        return
    if args.warped is None:
        raise SystemExit("--warped is required when --image is given")

    image = load_image(args.image)
    size = tuple(args.size) if args.size else (image.shape[1], image.shape[0])
    warped = warp_image(image, outcome.transform, size, inverse=args.inverse)
    save_image(warped, args.warped)
    logger.info(f"Warped image written to {args.warped}")


if __name__ == "__main__":
    main()
