"""Thin seam over the LAPACK routines the fitter depends on.

Only two operations cross this boundary: a minimum-norm least-squares solve
via divide-and-conquer SVD (``gelsd``) and square-matrix inversion via LU
factorization (``getrf`` + ``getri``). Both report LAPACK's ``info`` status
instead of raising, so the fitter can translate it into a fit error code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from loguru import logger
from scipy.linalg.lapack import get_lapack_funcs

# Status returned for inputs rejected before reaching LAPACK (non-finite values).
STATUS_REJECTED = -1


@dataclass(slots=True)
class LeastSquaresSolution:
    solution: np.ndarray  # (n, nrhs)
    rank: int
    status: int
    singular_values: np.ndarray


@dataclass(slots=True)
class MatrixInverse:
    inverse: Optional[np.ndarray]
    status: int

    @property
    def ok(self) -> bool:
        return self.status == 0 and self.inverse is not None


def solve_least_squares(a: np.ndarray, b: np.ndarray, rank_tolerance: float) -> LeastSquaresSolution:
    """Solve ``a @ x ≈ b`` for the minimum-norm least-squares ``x``.

    Args:
        a: ``(m, n)`` design matrix.
        b: ``(m,)`` or ``(m, nrhs)`` right-hand side.
        rank_tolerance: Singular values at or below ``rank_tolerance * max(s)``
            are treated as zero.

    Returns:
        Solution of shape ``(n, nrhs)``, the numerical rank, LAPACK's status
        (0 success, <0 illegal argument, >0 SVD did not converge) and the
        singular values.
    """
    a = np.array(a, dtype=np.float64, order="F")
    b = np.asarray(b, dtype=np.float64)
    if b.ndim == 1:
        b = b[:, np.newaxis]
    m, n = a.shape
    nrhs = b.shape[1]
    if b.shape[0] != m:
        raise ValueError(f"Right-hand side has {b.shape[0]} rows, design matrix has {m}")

    if not (np.isfinite(a).all() and np.isfinite(b).all()):
        logger.warning("Least-squares input contains non-finite values; skipping solve")
        return LeastSquaresSolution(
            solution=np.zeros((n, nrhs)), rank=0, status=STATUS_REJECTED, singular_values=np.zeros(0)
        )

    # gelsd writes the solution into the right-hand side buffer, which must hold max(m, n) rows.
    rhs = np.zeros((max(m, n), nrhs), dtype=np.float64, order="F")
    rhs[:m] = b

    gelsd, gelsd_lwork = get_lapack_funcs(("gelsd", "gelsd_lwork"), (a, rhs))
    work, iwork, info = gelsd_lwork(m, n, nrhs, rank_tolerance)
    if info != 0:
        return LeastSquaresSolution(
            solution=np.zeros((n, nrhs)), rank=0, status=int(info), singular_values=np.zeros(0)
        )
    lwork = max(1, int(np.ceil(np.real(work))))
    liwork = max(1, int(iwork))

    x, s, rank, info = gelsd(a, rhs, lwork, liwork, rank_tolerance, False, False)
    logger.debug(f"gelsd solved {m}x{n} system with {nrhs} rhs: rank={int(rank)}, info={int(info)}")
    return LeastSquaresSolution(
        solution=np.array(x[:n]),
        rank=int(rank),
        status=int(info),
        singular_values=np.array(s),
    )


def invert_square_matrix(a: np.ndarray) -> MatrixInverse:
    """Invert a square matrix through LU factorization.

    A positive status means the matrix is exactly singular and no inverse is
    returned.
    """
    a = np.array(a, dtype=np.float64)
    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise ValueError(f"Expected a square matrix, got shape {a.shape}")
    if not np.isfinite(a).all():
        logger.warning("Matrix to invert contains non-finite values")
        return MatrixInverse(inverse=None, status=STATUS_REJECTED)

    getrf, getri, getri_lwork = get_lapack_funcs(("getrf", "getri", "getri_lwork"), (a,))
    lu, piv, info = getrf(a, overwrite_a=False)
    if info != 0:
        return MatrixInverse(inverse=None, status=int(info))

    work, info = getri_lwork(a.shape[0])
    lwork = max(1, int(np.ceil(np.real(work)))) if info == 0 else max(1, a.shape[0])
    inverse, info = getri(lu, piv, lwork=lwork, overwrite_lu=True)
    if info != 0:
        return MatrixInverse(inverse=None, status=int(info))
    return MatrixInverse(inverse=np.array(inverse), status=0)
