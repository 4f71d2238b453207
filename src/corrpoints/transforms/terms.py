"""Monomial term layouts shared by polynomial fitting and evaluation.

A term is an ``(x_power, y_power)`` pair. The general-degree order visits
``y_power`` from 0 to the degree and, for each, ``x_power`` rising from 0 to
``degree - y_power``. Design-matrix columns built by the fitter and the
coefficient walk in :class:`~corrpoints.transforms.polynomial.PolyNTransform`
both follow :func:`monomial_exponents`, so the two never drift apart.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np

Term = Tuple[int, int]

# Poly2Transform storage order per axis: 1, x, x², y, xy, y²
POLY2_TERMS: Tuple[Term, ...] = ((0, 0), (1, 0), (2, 0), (0, 1), (1, 1), (0, 2))

# Poly3Transform storage order per axis: 1, x, y, xy, x², y², x²y, xy², x³, y³
POLY3_TERMS: Tuple[Term, ...] = (
    (0, 0),
    (1, 0),
    (0, 1),
    (1, 1),
    (2, 0),
    (0, 2),
    (2, 1),
    (1, 2),
    (3, 0),
    (0, 3),
)

# Poly3Transform slot i takes general-order term DEGREE3_REORDER[i].
DEGREE3_REORDER: Tuple[int, ...] = (0, 1, 4, 5, 2, 7, 6, 8, 3, 9)


def term_count(degree: int) -> int:
    """Number of monomial terms per output axis for a polynomial of ``degree``."""
    return (degree + 1) * (degree + 2) // 2


def coeff_count(degree: int) -> int:
    """Total coefficient count of a two-axis polynomial of ``degree``."""
    return 2 * term_count(degree)


def monomial_exponents(degree: int) -> List[Term]:
    terms: List[Term] = []
    for py in range(degree + 1):
        for px in range(degree - py + 1):
            terms.append((px, py))
    return terms


def monomial_design_matrix(points: np.ndarray, terms: Sequence[Term]) -> np.ndarray:
    """Evaluate ``terms`` at each row of an ``(N, 2)`` point array.

    Returns:
        ``(N, len(terms))`` array, one column per term in the given order.
    """
    x = points[:, 0]
    y = points[:, 1]
    design = np.empty((points.shape[0], len(terms)), dtype=np.float64)
    for col, (px, py) in enumerate(terms):
        design[:, col] = x**px * y**py
    return design
