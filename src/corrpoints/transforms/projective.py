"""2D projective transform (homography)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Sequence, Tuple

import numpy as np

from corrpoints.transforms.base import Transform22, TransformFamily, frozen_coeffs, require


def _apply_homography(coeffs: np.ndarray, x, y) -> Tuple:
    # Unguarded division: points on the vanishing line map to infinity.
    a = coeffs[0] * x + coeffs[1] * y + coeffs[2]
    b = coeffs[3] * x + coeffs[4] * y + coeffs[5]
    c = coeffs[6] * x + coeffs[7] * y + coeffs[8]
    with np.errstate(divide="ignore", invalid="ignore"):
        return a / c, b / c


@dataclass(frozen=True, slots=True, eq=False, init=False)
class ProjectiveTransform(Transform22):
    """Homography stored as 9 row-major coefficients ``[A B C D E F G H I]``.

    ``u = (Ax + By + C) / (Gx + Hy + I)``, ``v = (Dx + Ey + F) / (Gx + Hy + I)``.
    The backward coefficients use the same layout.
    """

    forward: Optional[np.ndarray]
    backward: Optional[np.ndarray]

    family: ClassVar[TransformFamily] = TransformFamily.PROJECTIVE

    def __init__(
        self,
        forward: Optional[Sequence[float]],
        backward: Optional[Sequence[float]] = None,
    ) -> None:
        object.__setattr__(self, "forward", frozen_coeffs(forward, 9, "Projective forward"))
        object.__setattr__(self, "backward", frozen_coeffs(backward, 9, "Projective backward"))

    def is_applicable(self) -> bool:
        return self.forward is not None

    def is_invertible(self) -> bool:
        return self.backward is not None

    def apply(self, x, y) -> Tuple:
        return _apply_homography(require(self.forward, "forward"), x, y)

    def invert(self, x, y) -> Tuple:
        return _apply_homography(require(self.backward, "backward"), x, y)

    def forward_matrix(self) -> np.ndarray:
        """Return the forward mapping as a 3x3 homography."""
        return require(self.forward, "forward").reshape(3, 3).copy()

    def backward_matrix(self) -> np.ndarray:
        """Return the inverse mapping as a 3x3 homography."""
        return require(self.backward, "backward").reshape(3, 3).copy()
