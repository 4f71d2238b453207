"""Error codes and exceptions shared by the fitter and the mapping types."""

from __future__ import annotations

from enum import IntEnum


class FitError(IntEnum):
    """Result code written into a fit call's ``error_out`` slot."""

    OK = 0
    SINGULAR = 1
    DID_NOT_CONVERGE = 2
    ILLEGAL_VALUE = 3
    INSUFFICIENT_RANK = 4


class UnsupportedTransformOperation(RuntimeError):
    """Raised when evaluating a direction a transform does not have."""


class TransformFitError(RuntimeError):
    """Raised by the pipeline when a configured fit does not produce a transform."""

    def __init__(self, code: FitError, family: str) -> None:
        super().__init__(f"Fitting a {family} transform failed with {code.name}")
        self.code = code
        self.family = family
