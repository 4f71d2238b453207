"""Fit 2D mapping functions to point correspondences."""

from .config import CorrPointsConfig, load_config  # noqa: F401
from .errors import FitError, TransformFitError, UnsupportedTransformOperation  # noqa: F401
from .fitting import fit_linear, fit_poly, fit_poly2, fit_poly3, fit_projective, fit_transform  # noqa: F401
from .pipeline import CorrespondencePipeline, FitOutcome  # noqa: F401
from .transforms import (  # noqa: F401
    LinearTransform,
    Poly2Transform,
    Poly3Transform,
    PolyNTransform,
    ProjectiveTransform,
    Transform22,
    TransformFamily,
)
