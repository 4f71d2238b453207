"""Tests for the mapping types and their capability contract."""

from __future__ import annotations

import numpy as np
import pytest

from corrpoints.errors import UnsupportedTransformOperation
from corrpoints.transforms import (
    LinearTransform,
    Poly2Transform,
    Poly3Transform,
    PolyNTransform,
    ProjectiveTransform,
    TransformFamily,
)
from corrpoints.transforms.polynomial import evaluate_interleaved
from corrpoints.transforms.terms import DEGREE3_REORDER, coeff_count


def test_linear_apply_and_invert() -> None:
    t = LinearTransform(tx=3.0, sxx=2.0, syx=0.5, ty=-1.0, sxy=0.25, syy=1.5)

    u, v = t.apply(1.0, 2.0)
    assert u == pytest.approx(2.0 * 1.0 + 0.5 * 2.0 + 3.0)
    assert v == pytest.approx(0.25 * 1.0 + 1.5 * 2.0 - 1.0)

    x, y = t.invert(u, v)
    assert x == pytest.approx(1.0)
    assert y == pytest.approx(2.0)
    assert t.degree == 1
    assert t.family is TransformFamily.LINEAR


def test_linear_singular_is_not_invertible() -> None:
    t = LinearTransform(tx=0.0, sxx=1.0, syx=2.0, ty=0.0, sxy=2.0, syy=4.0)

    assert t.is_applicable()
    assert not t.is_invertible()
    with pytest.raises(UnsupportedTransformOperation):
        t.invert(1.0, 1.0)


def test_linear_near_singular_determinant_treated_as_zero() -> None:
    t = LinearTransform(tx=0.0, sxx=1e-9, syx=0.0, ty=0.0, sxy=0.0, syy=1e-9)

    assert t.det == 0.0
    assert not t.is_invertible()


def test_linear_is_immutable() -> None:
    t = LinearTransform(tx=0.0, sxx=1.0, syx=0.0, ty=0.0, sxy=0.0, syy=1.0)
    with pytest.raises(AttributeError):
        t.tx = 5.0  # type: ignore[misc]


def test_projective_identity_and_inverse() -> None:
    forward = [2.0, 0.0, 1.0, 0.0, 3.0, -2.0, 0.0, 0.0, 1.0]
    backward = np.linalg.inv(np.array(forward).reshape(3, 3)).ravel()
    t = ProjectiveTransform(forward, backward)

    u, v = t.apply(1.0, 1.0)
    assert (u, v) == pytest.approx((3.0, 1.0))
    assert t.invert(u, v) == pytest.approx((1.0, 1.0))
    np.testing.assert_allclose(t.forward_matrix(), np.array(forward).reshape(3, 3))


def test_projective_forward_only() -> None:
    t = ProjectiveTransform([1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0], None)

    assert t.is_applicable()
    assert not t.is_invertible()
    with pytest.raises(UnsupportedTransformOperation):
        t.invert(0.0, 0.0)
    with pytest.raises(UnsupportedTransformOperation):
        t.backward_matrix()


def test_projective_without_forward_is_not_applicable() -> None:
    t = ProjectiveTransform(None, None)

    assert not t.is_applicable()
    with pytest.raises(UnsupportedTransformOperation):
        t.apply(0.0, 0.0)


def test_projective_zero_denominator_is_non_finite() -> None:
    # Denominator is x, so every point with x == 0 maps to infinity.
    t = ProjectiveTransform([1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 1.0, 0.0, 0.0])

    u, v = t.apply(0.0, 1.0)
    assert not np.isfinite(u)
    assert np.isinf(v)


def test_projective_coefficients_are_read_only() -> None:
    t = ProjectiveTransform(np.eye(3).ravel())
    with pytest.raises(ValueError):
        t.forward[0] = 5.0


def test_wrong_coefficient_count_rejected() -> None:
    with pytest.raises(ValueError):
        Poly2Transform([1.0, 2.0, 3.0])
    with pytest.raises(ValueError):
        PolyNTransform(4, np.zeros(coeff_count(4) - 1))


def test_poly2_matches_general_evaluator(rng: np.random.Generator) -> None:
    general = rng.uniform(-1.0, 1.0, size=coeff_count(2))
    t = Poly2Transform(np.concatenate([general[0::2], general[1::2]]))
    x = rng.uniform(-3.0, 3.0, size=25)
    y = rng.uniform(-3.0, 3.0, size=25)

    np.testing.assert_allclose(t.apply(x, y), evaluate_interleaved(2, general, x, y), atol=1e-12)


def test_poly3_matches_general_evaluator_after_reorder(rng: np.random.Generator) -> None:
    general = rng.uniform(-1.0, 1.0, size=coeff_count(3))
    axis0, axis1 = general[0::2], general[1::2]
    order = list(DEGREE3_REORDER)
    t = Poly3Transform(np.concatenate([axis0[order], axis1[order]]))
    x = rng.uniform(-3.0, 3.0, size=25)
    y = rng.uniform(-3.0, 3.0, size=25)

    np.testing.assert_allclose(t.apply(x, y), evaluate_interleaved(3, general, x, y), atol=1e-12)


def test_polyn_backward_direction() -> None:
    # Degree 1 in interleaved order: (1, x, y) terms for (u, v).
    forward = [1.0, 2.0, 1.0, 0.0, 0.0, 1.0]
    backward = [-1.0, -2.0, 1.0, 0.0, 0.0, 1.0]
    t = PolyNTransform(1, forward, backward)

    u, v = t.apply(3.0, 4.0)
    assert (u, v) == pytest.approx((4.0, 6.0))
    assert t.invert(u, v) == pytest.approx((3.0, 4.0))


def test_polynomials_without_backward_are_not_invertible() -> None:
    for t in (
        Poly2Transform(np.zeros(12)),
        Poly3Transform(np.zeros(20)),
        PolyNTransform(5, np.zeros(coeff_count(5))),
    ):
        assert t.is_applicable()
        assert not t.is_invertible()
        with pytest.raises(UnsupportedTransformOperation):
            t.invert(1.0, 2.0)


def test_polyn_rejects_degree_below_one() -> None:
    with pytest.raises(ValueError):
        PolyNTransform(0, [1.0, 1.0])
