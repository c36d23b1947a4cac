# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025  Philipp Emanuel Weidmann <pew@worldwidemann.com>

import importlib
from typing import TypeVar

from optuna import Trial
from rich.console import Console

print = Console(highlight=False).print


def format_duration(seconds: float) -> str:
    seconds = round(seconds)
    hours, seconds = divmod(seconds, 3600)
    minutes, seconds = divmod(seconds, 60)

    if hours > 0:
        return f"{hours}h {minutes}m"
    elif minutes > 0:
        return f"{minutes}m {seconds}s"
    else:
        return f"{seconds}s"


def format_vector(values: list[float] | None) -> str:
    if values is None:
        return "-"
    return "[" + ", ".join(f"{value:.4g}" for value in values) + "]"


T = TypeVar("T")


def load_plugin(name: str, base_class: type[T]) -> type[T]:
    """
    Resolves a plugin class from its name.

    - `package.module:ClassName` imports the module and takes the class
    - `package.module` imports the module and takes its `PLUGIN_CLASS`
    - anything else is looked up among the built-in fitness functions
      by their `name` attribute
    """
    if ":" in name:
        module_name, class_name = name.split(":", 1)
        module = importlib.import_module(module_name)
        plugin = getattr(module, class_name, None)
        if plugin is None:
            raise ValueError(f"Module {module_name} has no attribute {class_name}")
    elif "." in name:
        module = importlib.import_module(name)
        plugin = getattr(module, "PLUGIN_CLASS", None)
        if plugin is None:
            raise ValueError(f"Module {name} does not define PLUGIN_CLASS")
    else:
        from . import fitness_functions

        builtins = {
            cls.name: cls
            for cls in (
                getattr(fitness_functions, attribute)
                for attribute in fitness_functions.__all__
            )
        }

        plugin = builtins.get(name)
        if plugin is None:
            raise ValueError(
                f"Unknown plugin {name!r}. Built-in plugins: "
                + ", ".join(sorted(builtins))
            )

    if not isinstance(plugin, type) or not issubclass(plugin, base_class):
        raise TypeError(
            f"{name} does not resolve to a subclass of {base_class.__name__}"
        )

    return plugin


def get_trial_parameters(trial: Trial) -> dict[str, str]:
    params = {}

    for name, value in trial.params.items():
        params[f"{name} (normalized)"] = f"{value:.4f}"

    real_coordinates = trial.user_attrs.get("real_coordinates")
    if real_coordinates is not None:
        for name, value in zip(trial.params, real_coordinates):
            params[name] = f"{value:.4g}"

    return params
