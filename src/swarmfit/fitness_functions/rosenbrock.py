from __future__ import annotations

from pydantic import Field
from torch import Tensor

from swarmfit.fitness import FitnessFunction


class Rosenbrock(FitnessFunction["Rosenbrock.Settings"]):
    """
    Curved valley function. Global minimum 0 at (a, a^2, ...), i.e. at (1, ..., 1)
    for the default parameters.
    """

    name = "Rosenbrock"

    class Settings(FitnessFunction.Settings):
        a: float = Field(default=1.0, description="Position of the valley floor.")

        b: float = Field(default=100.0, description="Steepness of the valley walls.")

    def compute(self, real_coordinates: Tensor, extension: Settings | None) -> float:
        a = extension.a if extension is not None else 1.0
        b = extension.b if extension is not None else 100.0

        # In one dimension there is no valley, only the (a - x)^2 term.
        x = real_coordinates[:-1]
        y = real_coordinates[1:]

        return float(
            (b * (y - x.square()).square() + (a - x).square()).sum()
            if real_coordinates.shape[0] > 1
            else (a - real_coordinates).square().sum()
        )
