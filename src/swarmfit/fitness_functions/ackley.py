from __future__ import annotations

import math

import torch
from pydantic import Field
from torch import Tensor

from swarmfit.fitness import FitnessFunction


class Ackley(FitnessFunction["Ackley.Settings"]):
    """
    Nearly flat outer region with a deep hole at the origin (global minimum 0).
    """

    name = "Ackley"

    class Settings(FitnessFunction.Settings):
        a: float = Field(default=20.0)

        b: float = Field(default=0.2)

        c: float = Field(default=2 * math.pi)

    def compute(self, real_coordinates: Tensor, extension: Settings | None) -> float:
        settings = extension if extension is not None else Ackley.Settings()
        a, b, c = settings.a, settings.b, settings.c

        mean_square = real_coordinates.square().mean()
        mean_cos = torch.cos(c * real_coordinates).mean()

        # Clamp guards against a tiny negative mean from roundoff before the sqrt.
        return float(
            -a * torch.exp(-b * torch.sqrt(mean_square.clamp(min=0.0)))
            - torch.exp(mean_cos)
            + a
            + math.e
        )
