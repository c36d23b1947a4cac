"""Shared fixtures for the swarmfit test suite."""

from __future__ import annotations

import pytest
from pydantic import BaseModel, Field
from torch import Tensor

from swarmfit.config import DimensionSpecification, Settings
from swarmfit.fitness import FitnessFunction


class ShiftedQuadratic(FitnessFunction["ShiftedQuadratic.Settings"]):
    """
    Minimal plugin that counts how often its objective actually runs.
    """

    name = "ShiftedQuadratic"

    class Settings(BaseModel):
        offset: float = Field(default=0.0)

    def __init__(self, plugin_settings=None):
        super().__init__(plugin_settings=plugin_settings)
        self.calls = 0

    def compute(self, real_coordinates: Tensor, extension: Settings | None) -> float:
        self.calls += 1
        offset = extension.offset if extension is not None else 0.0
        return float((real_coordinates - offset).square().sum())


@pytest.fixture
def quadratic() -> ShiftedQuadratic:
    return ShiftedQuadratic(plugin_settings=ShiftedQuadratic.Settings(offset=1.0))


@pytest.fixture
def make_settings():
    def _make(**overrides) -> Settings:
        # model_construct skips the CLI source, which would otherwise parse pytest's argv.
        values = {
            "fitness": "Sphere",
            "dimensions": [
                DimensionSpecification(name="x", minimum=0.0, range=1.0),
                DimensionSpecification(name="y", minimum=10.0, range=5.0),
            ],
            "n_trials": 20,
            "n_startup_trials": 5,
            "n_jobs": 1,
            "seed": 0,
            "search_margin": 0.0,
            "print_evaluations": False,
        }
        values.update(overrides)
        return Settings.model_construct(**values)

    return _make
