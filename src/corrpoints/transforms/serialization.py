"""JSON persistence for fitted transforms."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
from loguru import logger

from corrpoints.transforms.base import Transform22, TransformFamily
from corrpoints.transforms.linear import LinearTransform
from corrpoints.transforms.polynomial import Poly2Transform, Poly3Transform, PolyNTransform
from corrpoints.transforms.projective import ProjectiveTransform

_LINEAR_FIELDS = ("tx", "sxx", "syx", "ty", "sxy", "syy")


def _as_list(coeffs: Optional[np.ndarray]) -> Optional[List[float]]:
    return None if coeffs is None else [float(value) for value in coeffs]


def transform_to_dict(transform: Transform22) -> Dict[str, object]:
    if isinstance(transform, LinearTransform):
        payload: Dict[str, object] = {"family": transform.family.value, "degree": 1}
        payload.update({name: float(getattr(transform, name)) for name in _LINEAR_FIELDS})
        return payload
    if isinstance(transform, (ProjectiveTransform, Poly2Transform, Poly3Transform, PolyNTransform)):
        return {
            "family": transform.family.value,
            "degree": getattr(transform, "degree", None),
            "forward": _as_list(transform.forward),
            "backward": _as_list(transform.backward),
        }
    raise TypeError(f"Cannot serialize transform of type {type(transform).__name__}")


def transform_from_dict(payload: Dict[str, object]) -> Transform22:
    family = TransformFamily(payload["family"])
    if family is TransformFamily.LINEAR:
        return LinearTransform(**{name: float(payload[name]) for name in _LINEAR_FIELDS})
    forward = payload.get("forward")
    backward = payload.get("backward")
    if family is TransformFamily.PROJECTIVE:
        return ProjectiveTransform(forward, backward)
    if family is TransformFamily.POLY2:
        return Poly2Transform(forward, backward)
    if family is TransformFamily.POLY3:
        return Poly3Transform(forward, backward)
    return PolyNTransform(int(payload["degree"]), forward, backward)


def save_transform(path: str | Path, transform: Transform22) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(transform_to_dict(transform), handle, indent=2)
    logger.info(f"{transform.family.value} transform saved to {path}")
    return path


def load_transform(path: str | Path) -> Transform22:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Transform file missing: {path}")
    with open(path, "r", encoding="utf-8") as handle:
        payload = json.load(handle)
    return transform_from_dict(payload)
