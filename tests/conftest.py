"""pytest configuration and fixtures for the corrpoints test suite."""

from __future__ import annotations

from typing import Callable, Tuple

import numpy as np
import pytest

from corrpoints.transforms.polynomial import evaluate_interleaved
from corrpoints.transforms.terms import coeff_count, term_count

# Exact fits must reproduce correspondences to this absolute tolerance.
EXACT_TOL = 1e-5


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(4)


def make_poly_corr_points(
    rng: np.random.Generator, degree: int, n_points: int = -1
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Sample a random degree-``degree`` polynomial at random points.

    Returns flat interleaved ``from`` and ``to`` buffers plus the interleaved
    generating coefficients. ``n_points < 0`` means exactly the minimum count.
    """
    if n_points < 0:
        n_points = term_count(degree)
    coeffs = rng.uniform(-1.5, 1.5, size=coeff_count(degree))
    src = rng.uniform(-2.5, 2.5, size=(n_points, 2))
    u, v = evaluate_interleaved(degree, coeffs, src[:, 0], src[:, 1])
    dst = np.column_stack([u, v])
    return src.ravel(), dst.ravel(), coeffs


@pytest.fixture
def poly_corr_points(rng: np.random.Generator) -> Callable[..., Tuple[np.ndarray, np.ndarray, np.ndarray]]:
    def factory(degree: int, n_points: int = -1):
        return make_poly_corr_points(rng, degree, n_points)

    return factory
