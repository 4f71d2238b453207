"""Image IO helper routines for the warp command."""

from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np
from loguru import logger


def load_image(path: str | Path) -> np.ndarray:
    """Read an image from disk as stored (color images come back BGR)."""
    image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise FileNotFoundError(f"Could not read image: {path}")
    logger.debug(f"Loaded image {path} with shape {image.shape}")
    return image


def save_image(image: np.ndarray, path: str | Path) -> Path:
    """Persist an image to disk, creating the parent directory."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(path), image):
        raise RuntimeError(f"Failed to write image to {path}")
    logger.debug(f"Saved image to {path}")
    return path
