"""Polynomial transforms of degree 2, 3 and arbitrary degree N."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Sequence, Tuple

import numpy as np

from corrpoints.transforms.base import PolyTransform, TransformFamily, frozen_coeffs, require
from corrpoints.transforms.terms import coeff_count


def evaluate_interleaved(degree: int, coeffs: np.ndarray, x, y) -> Tuple:
    """Evaluate interleaved ``(axis0, axis1)`` coefficients in general term order.

    Walks the same term sequence as
    :func:`corrpoints.transforms.terms.monomial_exponents`.
    """
    u = 0.0
    v = 0.0
    idx = 0
    yy = 1.0
    for py in range(degree + 1):
        xx = 1.0
        for _ in range(degree - py + 1):
            u = u + xx * yy * coeffs[idx]
            v = v + xx * yy * coeffs[idx + 1]
            idx += 2
            xx = xx * x
        yy = yy * y
    return u, v


def _apply_poly2(c: np.ndarray, x, y) -> Tuple:
    u = c[0] + c[1] * x + c[2] * x * x + c[3] * y + c[4] * y * x + c[5] * y * y
    v = c[6] + c[7] * x + c[8] * x * x + c[9] * y + c[10] * y * x + c[11] * y * y
    return u, v


def _apply_poly3(c: np.ndarray, x, y) -> Tuple:
    xx = x * x
    yy = y * y
    u = (
        c[0]
        + c[1] * x
        + c[2] * y
        + c[3] * x * y
        + c[4] * xx
        + c[5] * yy
        + c[6] * xx * y
        + c[7] * yy * x
        + c[8] * xx * x
        + c[9] * yy * y
    )
    v = (
        c[10]
        + c[11] * x
        + c[12] * y
        + c[13] * x * y
        + c[14] * xx
        + c[15] * yy
        + c[16] * xx * y
        + c[17] * yy * x
        + c[18] * xx * x
        + c[19] * yy * y
    )
    return u, v


@dataclass(frozen=True, slots=True, eq=False, init=False)
class Poly2Transform(PolyTransform):
    """Second-degree polynomial transform.

    12 coefficients, ``[1, x, x², y, xy, y²]`` for u followed by the same six
    terms for v.
    """

    forward: Optional[np.ndarray]
    backward: Optional[np.ndarray]

    family: ClassVar[TransformFamily] = TransformFamily.POLY2
    degree: ClassVar[int] = 2

    def __init__(
        self,
        forward: Optional[Sequence[float]],
        backward: Optional[Sequence[float]] = None,
    ) -> None:
        object.__setattr__(self, "forward", frozen_coeffs(forward, 12, "Poly2 forward"))
        object.__setattr__(self, "backward", frozen_coeffs(backward, 12, "Poly2 backward"))

    def is_applicable(self) -> bool:
        return self.forward is not None

    def is_invertible(self) -> bool:
        return self.backward is not None

    def apply(self, x, y) -> Tuple:
        return _apply_poly2(require(self.forward, "forward"), x, y)

    def invert(self, x, y) -> Tuple:
        return _apply_poly2(require(self.backward, "backward"), x, y)


@dataclass(frozen=True, slots=True, eq=False, init=False)
class Poly3Transform(PolyTransform):
    """Third-degree polynomial transform.

    20 coefficients, ``[1, x, y, xy, x², y², x²y, xy², x³, y³]`` for u
    followed by the same ten terms for v.
    """

    forward: Optional[np.ndarray]
    backward: Optional[np.ndarray]

    family: ClassVar[TransformFamily] = TransformFamily.POLY3
    degree: ClassVar[int] = 3

    def __init__(
        self,
        forward: Optional[Sequence[float]],
        backward: Optional[Sequence[float]] = None,
    ) -> None:
        object.__setattr__(self, "forward", frozen_coeffs(forward, 20, "Poly3 forward"))
        object.__setattr__(self, "backward", frozen_coeffs(backward, 20, "Poly3 backward"))

    def is_applicable(self) -> bool:
        return self.forward is not None

    def is_invertible(self) -> bool:
        return self.backward is not None

    def apply(self, x, y) -> Tuple:
        return _apply_poly3(require(self.forward, "forward"), x, y)

    def invert(self, x, y) -> Tuple:
        return _apply_poly3(require(self.backward, "backward"), x, y)


@dataclass(frozen=True, slots=True, eq=False, init=False)
class PolyNTransform(PolyTransform):
    """Arbitrary degree polynomial transform.

    Coefficients are interleaved per term: term i contributes ``coeffs[2i]``
    to u and ``coeffs[2i + 1]`` to v. Slower than the fixed-degree variants.
    """

    degree: int
    forward: Optional[np.ndarray]
    backward: Optional[np.ndarray]

    family: ClassVar[TransformFamily] = TransformFamily.POLYN

    def __init__(
        self,
        degree: int,
        forward: Optional[Sequence[float]],
        backward: Optional[Sequence[float]] = None,
    ) -> None:
        if degree < 1:
            raise ValueError(f"Polynomial degree must be at least 1, got {degree}")
        count = coeff_count(degree)
        object.__setattr__(self, "degree", int(degree))
        object.__setattr__(self, "forward", frozen_coeffs(forward, count, "PolyN forward"))
        object.__setattr__(self, "backward", frozen_coeffs(backward, count, "PolyN backward"))

    def is_applicable(self) -> bool:
        return self.forward is not None

    def is_invertible(self) -> bool:
        return self.backward is not None

    def apply(self, x, y) -> Tuple:
        return evaluate_interleaved(self.degree, require(self.forward, "forward"), x, y)

    def invert(self, x, y) -> Tuple:
        return evaluate_interleaved(self.degree, require(self.backward, "backward"), x, y)
