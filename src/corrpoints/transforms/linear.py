"""First-degree polynomial (affine) transform."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Tuple

from corrpoints.errors import UnsupportedTransformOperation
from corrpoints.transforms.base import MACHINE_EPSILON_DOUBLE, PolyTransform, TransformFamily


@dataclass(frozen=True, slots=True)
class LinearTransform(PolyTransform):
    """``u = sxx*x + syx*y + tx``, ``v = sxy*x + syy*y + ty``.

    Always applicable. Invertible when the 2x2 linear part has a determinant
    whose magnitude exceeds machine epsilon; anything smaller is stored as 0.
    """

    tx: float
    sxx: float
    syx: float
    ty: float
    sxy: float
    syy: float
    det: float = field(init=False, repr=False)

    family: ClassVar[TransformFamily] = TransformFamily.LINEAR
    degree: ClassVar[int] = 1

    def __post_init__(self) -> None:
        det = self.sxx * self.syy - self.sxy * self.syx
        object.__setattr__(self, "det", det if abs(det) > MACHINE_EPSILON_DOUBLE else 0.0)

    def is_applicable(self) -> bool:
        return True

    def is_invertible(self) -> bool:
        return self.det != 0.0

    def apply(self, x, y) -> Tuple:
        return (
            self.sxx * x + self.syx * y + self.tx,
            self.sxy * x + self.syy * y + self.ty,
        )

    def invert(self, x, y) -> Tuple:
        if self.det == 0.0:
            raise UnsupportedTransformOperation("Linear transform is singular")
        x = x - self.tx
        y = y - self.ty
        return (
            (self.syy * x - self.syx * y) / self.det,
            (-self.sxy * x + self.sxx * y) / self.det,
        )
