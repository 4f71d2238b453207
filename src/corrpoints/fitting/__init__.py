"""Least-squares fitting of transforms to correspondence points."""

from .fitter import (  # noqa: F401
    fit_linear,
    fit_poly,
    fit_poly2,
    fit_poly3,
    fit_projective,
    fit_transform,
)
from .solver import LeastSquaresSolution, MatrixInverse, invert_square_matrix, solve_least_squares  # noqa: F401
