"""Apply fitted transforms to point arrays and images."""

from __future__ import annotations

from typing import Tuple

import cv2
import numpy as np

from corrpoints.transforms.base import Transform22


def warp_points(points, transform: Transform22, inverse: bool = False) -> np.ndarray:
    """Map an ``(N, 2)`` point array through ``transform`` (or its inverse)."""
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    evaluate = transform.invert if inverse else transform.apply
    u, v = evaluate(pts[:, 0], pts[:, 1])
    return np.column_stack([u, v])


def reprojection_errors(transform: Transform22, from_points, to_points) -> np.ndarray:
    """Euclidean distance between each mapped ``from`` point and its ``to`` point."""
    mapped = warp_points(from_points, transform)
    target = np.asarray(to_points, dtype=np.float64).reshape(-1, 2)
    return np.linalg.norm(mapped - target, axis=1)


def build_remap(
    transform: Transform22,
    size: Tuple[int, int],
    inverse: bool = False,
) -> Tuple[np.ndarray, np.ndarray]:
    """Build ``cv2.remap`` lookup grids of shape ``(height, width)``.

    Destination pixel ``(x, y)`` samples the source image at
    ``transform(x, y)``, so the transform must map output coordinates to
    input coordinates. Pass ``inverse=True`` to use the inverse direction.
    """
    width, height = size
    xs, ys = np.meshgrid(np.arange(width, dtype=np.float64), np.arange(height, dtype=np.float64))
    evaluate = transform.invert if inverse else transform.apply
    map_x, map_y = evaluate(xs, ys)
    return np.asarray(map_x, dtype=np.float32), np.asarray(map_y, dtype=np.float32)


def warp_image(
    image: np.ndarray,
    transform: Transform22,
    size: Tuple[int, int],
    inverse: bool = False,
    interpolation: int = cv2.INTER_LINEAR,
    border_value: float = 0,
) -> np.ndarray:
    """Resample ``image`` into a ``size`` = ``(width, height)`` frame through ``transform``."""
    map_x, map_y = build_remap(transform, size, inverse=inverse)
    return cv2.remap(
        image,
        map_x,
        map_y,
        interpolation,
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=border_value,
    )
