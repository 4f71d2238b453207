"""Point and image warping through fitted transforms."""

from .warp import build_remap, reprojection_errors, warp_image, warp_points  # noqa: F401
