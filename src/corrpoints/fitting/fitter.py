"""Fit mapping functions to 2D correspondence points.

Every fit follows the same steps: check the point count, build a design
matrix for the family, solve it with the least-squares kernel, translate the
kernel status into a :class:`~corrpoints.errors.FitError`, and decode the
solution into the family's coefficient layout.

Point buffers are flat interleaved ``(x0, y0, x1, y1, ...)`` sequences read
from an offset, so correspondences can live inside a larger array. Any
array-like works; ``(N, 2)`` arrays are flattened row by row.

Expected failures (too few points, degenerate geometry, kernel errors) never
raise: the fit returns ``None`` and, when ``error_out`` is given, stores the
code in ``error_out[0]``. Successful fits store ``FitError.OK``.
"""

from __future__ import annotations

from typing import MutableSequence, Optional

import numpy as np
from loguru import logger

from corrpoints.errors import FitError
from corrpoints.fitting import solver
from corrpoints.transforms.base import (
    FIXED_DEGREES,
    MACHINE_EPSILON_DOUBLE,
    PolyTransform,
    Transform22,
    TransformFamily,
)
from corrpoints.transforms.linear import LinearTransform
from corrpoints.transforms.polynomial import Poly2Transform, Poly3Transform, PolyNTransform
from corrpoints.transforms.projective import ProjectiveTransform
from corrpoints.transforms.terms import (
    DEGREE3_REORDER,
    POLY2_TERMS,
    POLY3_TERMS,
    monomial_design_matrix,
    monomial_exponents,
    term_count,
)
from corrpoints.utils.matformat import format_to_screen

ErrorSlot = Optional[MutableSequence]

PROJECTIVE_MIN_POINTS = 4


def _report(error_out: ErrorSlot, code: FitError) -> None:
    if error_out is not None:
        error_out[0] = code


def _fail(error_out: ErrorSlot, code: FitError, family: str) -> None:
    logger.debug(f"{family} fit failed: {code.name}")
    _report(error_out, code)
    return None


def _flatten(buffer) -> np.ndarray:
    return np.asarray(buffer, dtype=np.float64).ravel()


def _count_points(values: np.ndarray, offset: int) -> int:
    return max(0, (values.size - offset) // 2)


def _shared_count(src_values: np.ndarray, from_offset: int, dst_values: np.ndarray, to_offset: int) -> int:
    n_from = _count_points(src_values, from_offset)
    n_to = _count_points(dst_values, to_offset)
    if n_from != n_to:
        raise ValueError(
            f"from_points holds {n_from} points but to_points holds {n_to}; pass n_points to fit a prefix"
        )
    return n_from


def _read_points(values: np.ndarray, offset: int, n_points: int, name: str) -> np.ndarray:
    end = offset + 2 * n_points
    if offset < 0:
        raise ValueError(f"{name} offset must be non-negative, got {offset}")
    if values.size < end:
        raise ValueError(f"{name} holds {values.size} values; {end} needed for {n_points} points at offset {offset}")
    return values[offset:end].reshape(n_points, 2)


def _solve(
    design: np.ndarray,
    rhs: np.ndarray,
    error_out: ErrorSlot,
    family: str,
) -> Optional[np.ndarray]:
    """Run the kernel; returns the ``(n, nrhs)`` solution or ``None`` after reporting."""
    n_unknowns = design.shape[1]
    result = solver.solve_least_squares(design, rhs, rank_tolerance=MACHINE_EPSILON_DOUBLE)
    if result.status < 0:
        return _fail(error_out, FitError.ILLEGAL_VALUE, family)
    if result.status > 0:
        return _fail(error_out, FitError.DID_NOT_CONVERGE, family)
    if result.rank < n_unknowns:
        logger.debug(f"{family} fit reached rank {result.rank} of {n_unknowns}")
        return _fail(error_out, FitError.INSUFFICIENT_RANK, family)
    logger.opt(lazy=True).debug("{} coefficients:\n{}", lambda: family, lambda: format_to_screen(result.solution))
    return result.solution


def fit_projective(
    from_points,
    to_points,
    n_points: Optional[int] = None,
    *,
    from_offset: int = 0,
    to_offset: int = 0,
    error_out: ErrorSlot = None,
) -> Optional[ProjectiveTransform]:
    """Find the projective transform mapping ``from_points`` onto ``to_points``.

    At least 4 correspondences are required; degenerate sets (duplicated or
    collinear points) may need more. With more points the result minimizes the
    squared error of the linearized equations.

    The backward homography is the inverse of the forward one. A singular
    forward homography still counts as a successful fit; the transform is
    simply not invertible.
    """
    # u = (Ax + By + C) / (Gx + Hy + I), v = (Dx + Ey + F) / (Gx + Hy + I)
    # With I = 1 and both sides multiplied by the denominator:
    #   u = [x y 1 0 0 0 -ux -uy] . [A B C D E F G H]
    #   v = [0 0 0 x y 1 -vx -vy] . [A B C D E F G H]
    # All u rows are stacked above all v rows.
    src_values = _flatten(from_points)
    dst_values = _flatten(to_points)
    if n_points is None:
        n_points = _shared_count(src_values, from_offset, dst_values, to_offset)
    if n_points < PROJECTIVE_MIN_POINTS:
        return _fail(error_out, FitError.INSUFFICIENT_RANK, "projective")

    src = _read_points(src_values, from_offset, n_points, "from_points")
    dst = _read_points(dst_values, to_offset, n_points, "to_points")
    x, y = src[:, 0], src[:, 1]
    u, v = dst[:, 0], dst[:, 1]

    n = n_points
    design = np.zeros((2 * n, 8), dtype=np.float64)
    design[:n, 0] = x
    design[:n, 1] = y
    design[:n, 2] = 1.0
    design[:n, 6] = -u * x
    design[:n, 7] = -u * y
    design[n:, 3] = x
    design[n:, 4] = y
    design[n:, 5] = 1.0
    design[n:, 6] = -v * x
    design[n:, 7] = -v * y
    rhs = np.concatenate([u, v])

    solution = _solve(design, rhs, error_out, "projective")
    if solution is None:
        return None

    forward = np.append(solution[:8, 0], 1.0)
    inverse = solver.invert_square_matrix(forward.reshape(3, 3))
    backward = inverse.inverse.ravel() if inverse.ok else None
    if backward is None:
        logger.debug(f"Projective forward matrix is singular (status {inverse.status}); no inverse")

    _report(error_out, FitError.OK)
    return ProjectiveTransform(forward, backward)


def _fit_fixed_poly(from_points, to_points, n_points, from_offset, to_offset, error_out, terms, family):
    src_values = _flatten(from_points)
    dst_values = _flatten(to_points)
    if n_points is None:
        n_points = _shared_count(src_values, from_offset, dst_values, to_offset)
    k = len(terms)
    if n_points < k:
        return _fail(error_out, FitError.INSUFFICIENT_RANK, family)

    src = _read_points(src_values, from_offset, n_points, "from_points")
    dst = _read_points(dst_values, to_offset, n_points, "to_points")
    solution = _solve(monomial_design_matrix(src, terms), dst, error_out, family)
    if solution is None:
        return None
    return np.concatenate([solution[:k, 0], solution[:k, 1]])


def fit_poly2(
    from_points,
    to_points,
    n_points: Optional[int] = None,
    *,
    from_offset: int = 0,
    to_offset: int = 0,
    error_out: ErrorSlot = None,
) -> Optional[Poly2Transform]:
    """Fit a second-degree polynomial transform; needs at least 6 points."""
    # [u v] = [1 x x² y xy y²] . coeffs_6x2
    coeffs = _fit_fixed_poly(
        from_points, to_points, n_points, from_offset, to_offset, error_out, POLY2_TERMS, "poly2"
    )
    if coeffs is None:
        return None
    _report(error_out, FitError.OK)
    return Poly2Transform(coeffs, None)


def fit_poly3(
    from_points,
    to_points,
    n_points: Optional[int] = None,
    *,
    from_offset: int = 0,
    to_offset: int = 0,
    error_out: ErrorSlot = None,
) -> Optional[Poly3Transform]:
    """Fit a third-degree polynomial transform; needs at least 10 points."""
    # Columns are built directly in Poly3Transform order, so no reordering.
    coeffs = _fit_fixed_poly(
        from_points, to_points, n_points, from_offset, to_offset, error_out, POLY3_TERMS, "poly3"
    )
    if coeffs is None:
        return None
    _report(error_out, FitError.OK)
    return Poly3Transform(coeffs, None)


def fit_poly(
    from_points,
    to_points,
    n_points: Optional[int] = None,
    degree: int = 2,
    *,
    from_offset: int = 0,
    to_offset: int = 0,
    error_out: ErrorSlot = None,
) -> Optional[PolyTransform]:
    """Fit a polynomial transform of any degree >= 1.

    Needs at least ``(degree + 1)(degree + 2) / 2`` points. Degrees 1, 2 and
    3 come back as the specialized :class:`LinearTransform`,
    :class:`Poly2Transform` and :class:`Poly3Transform`; higher degrees as
    :class:`PolyNTransform`.
    """
    family = f"degree-{degree} polynomial"
    if degree < 1:
        return _fail(error_out, FitError.ILLEGAL_VALUE, family)

    src_values = _flatten(from_points)
    dst_values = _flatten(to_points)
    if n_points is None:
        n_points = _shared_count(src_values, from_offset, dst_values, to_offset)
    k = term_count(degree)
    if n_points < k:
        return _fail(error_out, FitError.INSUFFICIENT_RANK, family)

    src = _read_points(src_values, from_offset, n_points, "from_points")
    dst = _read_points(dst_values, to_offset, n_points, "to_points")
    solution = _solve(monomial_design_matrix(src, monomial_exponents(degree)), dst, error_out, family)
    if solution is None:
        return None
    solution = solution[:k]

    transform: PolyTransform
    if degree == 1:
        transform = LinearTransform(
            tx=solution[0, 0],
            sxx=solution[1, 0],
            syx=solution[2, 0],
            ty=solution[0, 1],
            sxy=solution[1, 1],
            syy=solution[2, 1],
        )
    elif degree == 2:
        transform = Poly2Transform(np.concatenate([solution[:, 0], solution[:, 1]]), None)
    elif degree == 3:
        order = list(DEGREE3_REORDER)
        transform = Poly3Transform(np.concatenate([solution[order, 0], solution[order, 1]]), None)
    else:
        # Row-major (k, 2) flattens to interleaved (axis0, axis1) pairs.
        transform = PolyNTransform(degree, solution.ravel(), None)

    _report(error_out, FitError.OK)
    return transform


def fit_linear(
    from_points,
    to_points,
    n_points: Optional[int] = None,
    *,
    from_offset: int = 0,
    to_offset: int = 0,
    error_out: ErrorSlot = None,
) -> Optional[LinearTransform]:
    """Fit an affine transform; needs at least 3 points."""
    return fit_poly(
        from_points,
        to_points,
        n_points,
        1,
        from_offset=from_offset,
        to_offset=to_offset,
        error_out=error_out,
    )


def fit_transform(
    family: TransformFamily | str,
    from_points,
    to_points,
    n_points: Optional[int] = None,
    *,
    degree: Optional[int] = None,
    from_offset: int = 0,
    to_offset: int = 0,
    error_out: ErrorSlot = None,
) -> Optional[Transform22]:
    """Fit a transform of the requested family.

    ``degree`` is required for :attr:`TransformFamily.POLYN`. Projective fits
    take no degree, and the fixed-degree families accept only their own.
    """
    family = TransformFamily(family)
    if family is TransformFamily.PROJECTIVE and degree is not None:
        raise ValueError("projective transforms take no degree")
    if family in FIXED_DEGREES and degree is not None and degree != FIXED_DEGREES[family]:
        raise ValueError(f"{family.value} transforms have degree {FIXED_DEGREES[family]}, got {degree}")
    kwargs = {"from_offset": from_offset, "to_offset": to_offset, "error_out": error_out}
    if family is TransformFamily.LINEAR:
        return fit_linear(from_points, to_points, n_points, **kwargs)
    if family is TransformFamily.PROJECTIVE:
        return fit_projective(from_points, to_points, n_points, **kwargs)
    if family is TransformFamily.POLY2:
        return fit_poly2(from_points, to_points, n_points, **kwargs)
    if family is TransformFamily.POLY3:
        return fit_poly3(from_points, to_points, n_points, **kwargs)
    if degree is None:
        raise ValueError("A degree is required to fit a polyn transform")
    return fit_poly(from_points, to_points, n_points, degree, **kwargs)
