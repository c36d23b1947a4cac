# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025  Philipp Emanuel Weidmann <pew@worldwidemann.com>

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Generic, Sequence, TypeVar

from pydantic import BaseModel
from torch import Tensor

from .coordinates import (
    DimensionalityMismatchError,
    as_vector,
    denormalize,
    is_within_unit_hypercube,
)
from .plugin import Plugin
from .schemas import REJECTED_FITNESS, FitnessParameters

SettingsT = TypeVar("SettingsT", bound=BaseModel)


class ExtensionTypeError(TypeError):
    """
    Raised when a parameter record carries an extension block
    that does not belong to the fitness function it is bound to.
    """

    pass


class FitnessFunction(Plugin, ABC, Generic[SettingsT]):
    """
    Abstract base class for fitness function plugins.

    The optimizer only ever sees normalized coordinates in the unit hypercube.
    `evaluate()` rejects points outside of it and maps the rest to real
    coordinates before handing them to `compute()`, which subclasses implement.

    Example: the Rastrigin function over [-5.12, 5.12]^n.
    """

    def __init__(self, plugin_settings: SettingsT | None = None):
        super().__init__(plugin_settings=plugin_settings)

    @abstractmethod
    def compute(self, real_coordinates: Tensor, extension: SettingsT | None) -> float:
        """
        Computes the objective for a valid point, given in real coordinates.

        Must return a finite value. Lower is better.
        """
        pass

    def check_parameters(self, params: FitnessParameters[SettingsT]) -> None:
        """
        Hook for checks that depend on both the extension block and the search
        space, e.g. a vector setting that must have one entry per dimension.
        Runs once when a record is created or bound, never per evaluation.
        """
        pass

    def create_parameters(
        self,
        minimum: Sequence[float] | Tensor,
        range: Sequence[float] | Tensor,
    ) -> FitnessParameters[SettingsT]:
        """
        Builds a parameter record whose extension slot holds this plugin's settings.
        """
        params = FitnessParameters.create(
            minimum,
            range,
            extension=self.plugin_settings,
        )
        return self.bind(params)

    def bind(self, params: FitnessParameters) -> FitnessParameters[SettingsT]:
        """
        Checks that a record carries an extension block this plugin understands
        and suits its search space, and returns it unchanged.
        """
        self._check_extension(params.extension)
        self.check_parameters(params)
        return params

    def _check_extension(self, extension: object) -> None:
        extension_type = self.extension_type()

        if extension is None:
            if extension_type is not None:
                raise ExtensionTypeError(
                    f"{type(self).__name__} requires an extension block of type "
                    f"{extension_type.__name__}, but the record has none"
                )
        elif extension_type is None or not isinstance(extension, extension_type):
            raise ExtensionTypeError(
                f"{type(self).__name__} cannot use an extension block of type "
                f"{type(extension).__name__}"
            )

    def evaluate(
        self,
        normalized: Sequence[float] | Tensor,
        params: FitnessParameters[SettingsT],
    ) -> float:
        """
        Evaluates one candidate point given in normalized coordinates.

        Returns the fitness value and sets `params.evaluation_occurred` to True
        if the point lies within the unit hypercube. Otherwise returns
        `REJECTED_FITNESS`, sets the flag to False, and leaves
        `params.real_coordinates` untouched.

        Raises `ExtensionTypeError` if the record's extension block does not
        belong to this plugin, before anything is computed.
        """
        normalized = as_vector(normalized)

        if normalized.dim() != 1 or normalized.shape[0] != params.dimensionality:
            raise DimensionalityMismatchError(
                f"Expected {params.dimensionality} normalized coordinates, "
                f"got shape {tuple(normalized.shape)}"
            )

        # Settings models with overlapping field names would otherwise be read
        # without complaint, so the block's type is checked on every call.
        self._check_extension(params.extension)

        # Cleared first so that a failing computation never leaves
        # a stale True next to a buffer holding a different point.
        params.evaluation_occurred = False

        if not is_within_unit_hypercube(normalized):
            return REJECTED_FITNESS

        denormalize(
            normalized,
            params.minimum,
            params.range,
            out=params.real_coordinates,
        )

        value = float(self.compute(params.real_coordinates, params.extension))

        if not math.isfinite(value):
            raise ValueError(
                f"{type(self).__name__}.compute() returned non-finite value {value}"
            )

        params.evaluation_occurred = True
        return value
