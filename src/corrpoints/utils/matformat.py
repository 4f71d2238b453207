"""Render matrices as text for debug output."""

from __future__ import annotations

import numpy as np


def _as_matrix(matrix) -> np.ndarray:
    mat = np.asarray(matrix, dtype=np.float64)
    if mat.ndim == 1:
        mat = mat[:, np.newaxis]
    if mat.ndim != 2:
        raise ValueError(f"Expected a 1D or 2D array, got {mat.ndim} dimensions")
    return mat


def format_to_matlab(matrix) -> str:
    """Format as a MATLAB literal, e.g. ``[ 1.000000   2.000000;  3.000000   4.000000; ]``."""
    mat = _as_matrix(matrix)
    rows = ["  ".join(f"{value: 6.6f}" for value in row) + "; " for row in mat]
    return "[" + "".join(rows) + "]"


def format_to_screen(matrix, prefix: str = "") -> str:
    """Format as a header line followed by one line per row."""
    mat = _as_matrix(matrix)
    m, n = mat.shape
    lines = [f"{prefix}Matrix ({m}x{n})"]
    for row in mat:
        lines.append(prefix + "".join(f" {value: 8.4f}" for value in row))
    return "\n".join(lines) + "\n"
