"""Mapping types produced by the correspondence fitter."""

from .base import MACHINE_EPSILON_DOUBLE, PolyTransform, Transform22, TransformFamily  # noqa: F401
from .linear import LinearTransform  # noqa: F401
from .polynomial import Poly2Transform, Poly3Transform, PolyNTransform  # noqa: F401
from .projective import ProjectiveTransform  # noqa: F401
from .serialization import load_transform, save_transform  # noqa: F401
from .terms import coeff_count, term_count  # noqa: F401
