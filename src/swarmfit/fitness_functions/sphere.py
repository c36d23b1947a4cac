from __future__ import annotations

from pydantic import Field
from torch import Tensor

from swarmfit.coordinates import DimensionalityMismatchError, as_vector
from swarmfit.fitness import FitnessFunction
from swarmfit.schemas import FitnessParameters


class Sphere(FitnessFunction["Sphere.Settings"]):
    """
    Sum of squared distances from `center` (the origin by default).
    """

    name = "Sphere"

    class Settings(FitnessFunction.Settings):
        center: list[float] | None = Field(
            default=None,
            description="Location of the minimum in real coordinates (defaults to the origin).",
        )

    def check_parameters(self, params: FitnessParameters[Settings]) -> None:
        center = params.extension.center if params.extension is not None else None
        if center is not None and len(center) != params.dimensionality:
            raise DimensionalityMismatchError(
                f"Sphere center has {len(center)} coordinates, "
                f"search space has {params.dimensionality}"
            )

    def compute(self, real_coordinates: Tensor, extension: Settings | None) -> float:
        if extension is None or extension.center is None:
            return float(real_coordinates.square().sum())

        return float((real_coordinates - as_vector(extension.center)).square().sum())
