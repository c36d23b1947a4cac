from __future__ import annotations

import math

import torch
from pydantic import Field
from torch import Tensor

from swarmfit.fitness import FitnessFunction


class Rastrigin(FitnessFunction["Rastrigin.Settings"]):
    """
    Highly multimodal function with a regular grid of local minima.
    Global minimum 0 at the origin. Usually searched over [-5.12, 5.12]^n.
    """

    name = "Rastrigin"

    class Settings(FitnessFunction.Settings):
        amplitude: float = Field(
            default=10.0,
            description="Amplitude of the cosine modulation (A).",
        )

    def compute(self, real_coordinates: Tensor, extension: Settings | None) -> float:
        amplitude = extension.amplitude if extension is not None else 10.0
        n = real_coordinates.shape[0]

        return float(
            amplitude * n
            + (
                real_coordinates.square()
                - amplitude * torch.cos(2 * math.pi * real_coordinates)
            ).sum()
        )
