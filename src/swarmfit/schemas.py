from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Generic, Sequence, TypeVar

import torch
from torch import Tensor

from .coordinates import as_vector, check_dimensions

# Fitness value returned for rejected points.
# Compares worse than every finite value under minimization.
REJECTED_FITNESS = math.inf

ExtensionT = TypeVar("ExtensionT")


@dataclass
class FitnessParameters(Generic[ExtensionT]):
    """
    Per-context record passed into every fitness evaluation.

    `minimum` and `range` are fixed after construction and may be shared by
    several records. `real_coordinates` and `evaluation_occurred` are
    overwritten in place by each evaluation; do not read them while an
    evaluation on the same record is in flight.

    After a rejected evaluation, `real_coordinates` is left unchanged, i.e.
    it still holds the point of the last successful evaluation (or NaN if
    there has been none).
    """

    minimum: Tensor
    range: Tensor
    real_coordinates: Tensor
    evaluation_occurred: bool = False
    extension: ExtensionT | None = None

    def __post_init__(self):
        check_dimensions(
            minimum=self.minimum,
            range=self.range,
            real_coordinates=self.real_coordinates,
        )

        if self.dimensionality == 0:
            raise ValueError("Search space must have at least one dimension")

        if not bool(torch.isfinite(self.minimum).all()):
            raise ValueError("All minimum values must be finite")

        if not bool((torch.isfinite(self.range) & (self.range > 0)).all()):
            raise ValueError(
                f"All range values must be finite and strictly positive, got {self.range.tolist()}"
            )

    @classmethod
    def create(
        cls,
        minimum: Sequence[float] | Tensor,
        range: Sequence[float] | Tensor,
        extension: ExtensionT | None = None,
    ) -> FitnessParameters[ExtensionT]:
        minimum = as_vector(minimum)
        range = as_vector(range)

        return cls(
            minimum=minimum,
            range=range,
            # Undefined until the first successful evaluation.
            real_coordinates=torch.full_like(minimum, math.nan),
            extension=extension,
        )

    @property
    def dimensionality(self) -> int:
        return self.minimum.shape[0]

    def clone_context(self) -> FitnessParameters[ExtensionT]:
        """
        Returns a sibling record for another evaluation context. The bounds and
        the extension are shared, the output buffer and flag are not.
        """
        return replace(
            self,
            real_coordinates=torch.full_like(self.minimum, math.nan),
            evaluation_occurred=False,
        )


@dataclass(frozen=True)
class FitnessResult:
    """
    Snapshot of one evaluation, safe to keep after the record has moved on.

    - `value`: fitness value (`REJECTED_FITNESS` if the point was rejected)
    - `real_coordinates`: de-normalized point, or None if rejected
    - `display`: string shown to the user in the console
    """

    value: float
    evaluation_occurred: bool
    real_coordinates: list[float] | None
    display: str = field(default="")

    @classmethod
    def from_parameters(
        cls,
        value: float,
        params: FitnessParameters,
    ) -> FitnessResult:
        if params.evaluation_occurred:
            return cls(
                value=value,
                evaluation_occurred=True,
                real_coordinates=params.real_coordinates.tolist(),
                display=f"{value:.6g}",
            )

        return cls(
            value=value,
            evaluation_occurred=False,
            real_coordinates=None,
            display="rejected",
        )
