# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025  Philipp Emanuel Weidmann <pew@worldwidemann.com>

import threading
from typing import Any, Sequence

from pydantic import BaseModel
from torch import Tensor

from .config import Settings
from .coordinates import as_vector
from .fitness import FitnessFunction
from .schemas import FitnessParameters, FitnessResult
from .utils import format_vector, load_plugin, print


class Evaluator:
    """
    Connects an optimizer to the configured fitness function.

    The search space bounds are built once and shared. Every thread that calls
    `evaluate()` gets its own parameter record, so parallel trials never write
    into the same output buffer.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

        print()
        print("Loading fitness function plugin...")
        self.fitness_function = self._load_fitness_function()

        self.minimum = as_vector([dimension.minimum for dimension in settings.dimensions])
        self.range = as_vector([dimension.range for dimension in settings.dimensions])
        print(
            f"* Search space: [bold]{len(settings.dimensions)}[/] dimensions "
            + ", ".join(
                f"{dimension.name} ∈ [{dimension.minimum:g}, {dimension.maximum:g}]"
                for dimension in settings.dimensions
            )
        )

        # Template record. Each thread receives a sibling of it that shares
        # the bounds and extension block but owns its output buffer.
        self._template = self.fitness_function.create_parameters(self.minimum, self.range)
        self._local = threading.local()

        self._lock = threading.Lock()
        self.evaluation_count = 0
        self.rejection_count = 0

    def _load_fitness_function(self) -> FitnessFunction:
        fitness_class = load_plugin(
            name=self.settings.fitness,
            base_class=FitnessFunction,
        )
        print(f"* Loaded fitness function plugin: [bold]{fitness_class.__name__}[/bold]")
        fitness_class.validate_contract()

        # Validate/resolve plugin settings from namespaced config: `[<plugin.name>]`
        plugin_config = self._get_plugin_namespace(fitness_class.name)
        # None for plugins without settings fields: their records carry no extension block.
        plugin_settings: BaseModel | None = fitness_class.validate_settings(plugin_config)

        if plugin_settings is not None:
            for key, value in plugin_settings.model_dump().items():
                print(f"  * {key} = [bold]{value}[/]")

        return fitness_class(plugin_settings=plugin_settings)

    def _get_plugin_namespace(self, namespace: str) -> dict[str, Any]:
        """
        Returns the config dict from the `[<namespace>]` TOML table (or {} if missing).
        """
        extra = self.settings.model_extra or {}
        value = extra.get(namespace)
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise TypeError(
                f"Plugin namespace [{namespace}] must be a table/object, got {type(value).__name__}"
            )
        return value

    @property
    def parameters(self) -> FitnessParameters:
        """
        The parameter record belonging to the calling thread.
        """
        params = getattr(self._local, "params", None)
        if params is None:
            params = self.fitness_function.bind(self._template.clone_context())
            self._local.params = params
        return params

    def evaluate(self, normalized: Sequence[float] | Tensor) -> FitnessResult:
        params = self.parameters
        value = self.fitness_function.evaluate(normalized, params)
        result = FitnessResult.from_parameters(value, params)

        with self._lock:
            self.evaluation_count += 1
            if not result.evaluation_occurred:
                self.rejection_count += 1

        if self.settings.print_evaluations:
            print(
                f"  * {format_vector(as_vector(normalized).tolist())} -> "
                f"{format_vector(result.real_coordinates)}: [bold]{result.display}[/]"
            )

        return result
