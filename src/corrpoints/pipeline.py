"""High-level orchestration: fit a configured correspondence set and persist it."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np
from loguru import logger

from corrpoints.config import CorrPointsConfig
from corrpoints.errors import FitError, TransformFitError
from corrpoints.fitting import fit_transform
from corrpoints.geometry import reprojection_errors
from corrpoints.transforms import Transform22, TransformFamily, save_transform


@dataclass(slots=True)
class FitOutcome:
    transform: Transform22
    rms_error: float
    max_error: float
    saved_to: Optional[Path] = None


class CorrespondencePipeline:
    """Fits one transform from a correspondence set and reports its quality."""

    def __init__(
        self,
        family: TransformFamily,
        from_points: np.ndarray,
        to_points: np.ndarray,
        degree: Optional[int] = None,
        output_path: Optional[Path] = None,
    ) -> None:
        self._family = TransformFamily(family)
        self._from = np.asarray(from_points, dtype=np.float64).reshape(-1, 2)
        self._to = np.asarray(to_points, dtype=np.float64).reshape(-1, 2)
        if self._from.shape != self._to.shape:
            raise ValueError("from_points and to_points must share shape")
        self._degree = degree
        self._output_path = output_path

    @classmethod
    def from_config(cls, config: CorrPointsConfig) -> "CorrespondencePipeline":
        logger.info(
            f"Pipeline initialized for {config.fit.family.value} fit "
            f"with {config.correspondences.n_points} correspondence(s)"
        )
        return cls(
            family=config.fit.family,
            from_points=np.array(config.correspondences.from_points, dtype=np.float64),
            to_points=np.array(config.correspondences.to_points, dtype=np.float64),
            degree=config.fit.degree,
            output_path=config.output.transform_path,
        )

    def run(self) -> FitOutcome:
        """Fit, measure and optionally save the transform.

        Raises:
            TransformFitError: if the fit returns no transform.
        """
        error = [FitError.OK]
        transform = fit_transform(
            self._family,
            self._from,
            self._to,
            degree=self._degree,
            error_out=error,
        )
        if transform is None:
            raise TransformFitError(error[0], self._family.value)

        errors = reprojection_errors(transform, self._from, self._to)
        rms = float(np.sqrt(np.mean(errors**2)))
        worst = float(errors.max())
        logger.info(f"Fitted {self._family.value} transform: rms={rms:.6f}, max={worst:.6f}")
        if not transform.is_invertible():
            logger.warning(f"{self._family.value} transform has no inverse ({FitError.SINGULAR.name})")

        saved_to = None
        if self._output_path is not None:
            saved_to = save_transform(self._output_path, transform)
        return FitOutcome(transform=transform, rms_error=rms, max_error=worst, saved_to=saved_to)
