"""Tests for the end-to-end correspondence pipeline."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from corrpoints.config import CorrPointsConfig
from corrpoints.errors import FitError, TransformFitError
from corrpoints.pipeline import CorrespondencePipeline
from corrpoints.transforms import Poly2Transform, ProjectiveTransform, TransformFamily, load_transform

from conftest import make_poly_corr_points

QUAD_FROM = [[0.0, 0.0], [10.0, 0.0], [10.0, 10.0], [0.0, 10.0]]
QUAD_TO = [[1.0, 2.0], [12.0, 1.0], [11.5, 13.0], [0.5, 11.0]]


def test_projective_run_saves_transform(tmp_path: Path) -> None:
    cfg = CorrPointsConfig.model_validate(
        {
            "fit": {"family": "projective"},
            "correspondences": {"from_points": QUAD_FROM, "to_points": QUAD_TO},
            "output": {"transform_path": str(tmp_path / "out" / "h.json")},
        }
    )

    outcome = CorrespondencePipeline.from_config(cfg).run()

    assert isinstance(outcome.transform, ProjectiveTransform)
    assert outcome.rms_error < 1e-6
    assert outcome.max_error < 1e-6
    assert outcome.saved_to == tmp_path / "out" / "h.json"
    loaded = load_transform(outcome.saved_to)
    np.testing.assert_allclose(loaded.forward, outcome.transform.forward)


def test_poly2_run_without_output(rng: np.random.Generator) -> None:
    src, dst, _ = make_poly_corr_points(rng, 2)

    outcome = CorrespondencePipeline(TransformFamily.POLY2, src, dst).run()

    assert isinstance(outcome.transform, Poly2Transform)
    assert outcome.saved_to is None
    assert outcome.max_error < 1e-6


def test_too_few_points_raises_with_code() -> None:
    pipeline = CorrespondencePipeline(TransformFamily.PROJECTIVE, QUAD_FROM[:3], QUAD_TO[:3])

    with pytest.raises(TransformFitError) as excinfo:
        pipeline.run()

    assert excinfo.value.code is FitError.INSUFFICIENT_RANK
    assert excinfo.value.family == "projective"


def test_mismatched_shapes_rejected() -> None:
    with pytest.raises(ValueError):
        CorrespondencePipeline(TransformFamily.LINEAR, QUAD_FROM, QUAD_TO[:3])
