"""Shared interface for 2D -> 2D mapping functions."""

from __future__ import annotations

import abc
from enum import Enum
from typing import Optional, Sequence, Tuple

import numpy as np

from corrpoints.errors import UnsupportedTransformOperation

# Rank tolerance handed to the least-squares kernel and the threshold below
# which a linear determinant counts as zero.
MACHINE_EPSILON_DOUBLE = 1.1102230246251565e-16


class TransformFamily(str, Enum):
    LINEAR = "linear"
    PROJECTIVE = "projective"
    POLY2 = "poly2"
    POLY3 = "poly3"
    POLYN = "polyn"


# Degree implied by each fixed-degree polynomial family.
FIXED_DEGREES = {
    TransformFamily.LINEAR: 1,
    TransformFamily.POLY2: 2,
    TransformFamily.POLY3: 3,
}


class Transform22(abc.ABC):
    """Maps 2D input points to 2D output points, and possibly back.

    ``apply`` and ``invert`` accept scalars or equally shaped numpy arrays and
    evaluate element-wise.
    """

    family: TransformFamily

    @abc.abstractmethod
    def is_applicable(self) -> bool:
        """True iff a forward mapping exists and ``apply`` may be called."""

    @abc.abstractmethod
    def is_invertible(self) -> bool:
        """True iff an inverse mapping exists and ``invert`` may be called."""

    @abc.abstractmethod
    def apply(self, x, y) -> Tuple:
        """Map ``(x, y)`` forward.

        Raises:
            UnsupportedTransformOperation: if ``not is_applicable()``.
        """

    @abc.abstractmethod
    def invert(self, x, y) -> Tuple:
        """Map ``(x, y)`` through the inverse of ``apply``.

        Raises:
            UnsupportedTransformOperation: if ``not is_invertible()``.
        """


class PolyTransform(Transform22):
    """A polynomial mapping of fixed degree."""

    degree: int


def frozen_coeffs(values: Optional[Sequence[float]], expected: int, name: str) -> Optional[np.ndarray]:
    """Copy coefficients into a read-only float64 array of length ``expected``."""
    if values is None:
        return None
    coeffs = np.array(values, dtype=np.float64).ravel()
    if coeffs.size != expected:
        raise ValueError(f"{name} needs {expected} coefficients, got {coeffs.size}")
    coeffs.flags.writeable = False
    return coeffs


def require(coeffs: Optional[np.ndarray], direction: str) -> np.ndarray:
    if coeffs is None:
        raise UnsupportedTransformOperation(f"Transform has no {direction} mapping")
    return coeffs
