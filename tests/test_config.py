"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from corrpoints.config import load_config
from corrpoints.transforms import TransformFamily


def _write(path: Path, data: dict) -> Path:
    with path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle)
    return path


def _square(offset: float = 0.0) -> list:
    return [[0.0 + offset, 0.0], [1.0 + offset, 0.0], [1.0 + offset, 1.0], [0.0 + offset, 1.0]]


def test_load_config_creates_output_directory(tmp_path: Path) -> None:
    out_path = tmp_path / "results" / "transform.json"
    config_path = _write(
        tmp_path / "config.yaml",
        {
            "logging": {"level": "DEBUG", "output": "stderr"},
            "fit": {"family": "projective"},
            "correspondences": {"from_points": _square(), "to_points": _square(2.0)},
            "output": {"transform_path": str(out_path)},
        },
    )

    cfg = load_config(config_path)

    assert cfg.fit.family is TransformFamily.PROJECTIVE
    assert cfg.correspondences.n_points == 4
    assert cfg.output.transform_path == out_path
    assert out_path.parent.exists()
    assert cfg.logging.level == "DEBUG"


def test_defaults_applied(tmp_path: Path) -> None:
    config_path = _write(
        tmp_path / "config.yaml",
        {
            "fit": {"family": "polyn", "degree": 4},
            "correspondences": {"from_points": _square(), "to_points": _square()},
        },
    )

    cfg = load_config(config_path)

    assert cfg.fit.degree == 4
    assert cfg.logging.output == "stdout"
    assert cfg.output.transform_path is None


@pytest.mark.parametrize(
    "fit",
    [
        {"family": "polyn"},
        {"family": "polyn", "degree": 0},
        {"family": "projective", "degree": 2},
        {"family": "poly3", "degree": 2},
        {"family": "spline"},
    ],
)
def test_invalid_fit_settings(tmp_path: Path, fit: dict) -> None:
    config_path = _write(
        tmp_path / "config.yaml",
        {"fit": fit, "correspondences": {"from_points": _square(), "to_points": _square()}},
    )

    with pytest.raises(ValidationError):
        load_config(config_path)


def test_mismatched_correspondences(tmp_path: Path) -> None:
    config_path = _write(
        tmp_path / "config.yaml",
        {
            "fit": {"family": "linear"},
            "correspondences": {"from_points": _square(), "to_points": _square()[:3]},
        },
    )

    with pytest.raises(ValidationError):
        load_config(config_path)


def test_points_must_be_pairs(tmp_path: Path) -> None:
    config_path = _write(
        tmp_path / "config.yaml",
        {
            "fit": {"family": "linear"},
            "correspondences": {"from_points": [[0.0, 0.0, 1.0]], "to_points": [[0.0, 0.0]]},
        },
    )

    with pytest.raises(ValidationError):
        load_config(config_path)
