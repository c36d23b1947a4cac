# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025  Philipp Emanuel Weidmann <pew@worldwidemann.com>

import threading
import time
import warnings
from importlib.metadata import version

import optuna
from optuna import Study, Trial
from optuna.exceptions import ExperimentalWarning
from optuna.samplers import TPESampler
from optuna.study import StudyDirection
from pydantic import ValidationError
from rich.traceback import install

from .config import Settings
from .evaluator import Evaluator
from .utils import format_duration, get_trial_parameters, print


def optimize(settings: Settings, evaluator: Evaluator) -> Study:
    trial_index = 0
    index_lock = threading.Lock()
    start_time = time.perf_counter()

    def objective(trial: Trial) -> float:
        nonlocal trial_index
        with index_lock:
            trial_index += 1
            index = trial_index
        trial.set_user_attr("index", index)

        # The sampler works in normalized coordinates only. With a nonzero margin
        # it may overshoot the unit hypercube, which the fitness function rejects.
        normalized = [
            trial.suggest_float(
                dimension.name,
                -settings.search_margin,
                1.0 + settings.search_margin,
            )
            for dimension in settings.dimensions
        ]

        result = evaluator.evaluate(normalized)

        trial.set_user_attr("evaluation_occurred", result.evaluation_occurred)
        trial.set_user_attr("real_coordinates", result.real_coordinates)

        if settings.print_evaluations or index % max(settings.n_trials // 10, 1) == 0:
            elapsed_time = time.perf_counter() - start_time
            print(
                f"[grey50]Trial [bold]{index}[/] / [bold]{settings.n_trials}[/] "
                f"({format_duration(elapsed_time)} elapsed)[/]"
            )

        return result.value

    study = optuna.create_study(
        sampler=TPESampler(
            n_startup_trials=settings.n_startup_trials,
            multivariate=True,
            seed=settings.seed,
        ),
        direction=StudyDirection.MINIMIZE,
    )

    study.optimize(objective, n_trials=settings.n_trials, n_jobs=settings.n_jobs)

    return study


def run():
    print(f"[cyan]swarmfit[/] v{version('swarmfit')}")
    print()

    try:
        settings = Settings()
    except ValidationError as error:
        print(f"Configuration contains [bold]{error.error_count()}[/] errors:")

        for error in error.errors():
            location = ".".join(str(part) for part in error["loc"])
            print(f"[bold]{location}[/]: [yellow]{error['msg']}[/]")

        print()
        print(
            "Run [bold]swarmfit --help[/] or see [bold]config.default.toml[/] for details about configuration parameters."
        )
        return

    # We do our own trial logging, so we don't need
    # INFO messages about parameters and results.
    optuna.logging.set_verbosity(optuna.logging.WARNING)

    # Suppress warning about multivariate TPE being experimental.
    warnings.filterwarnings("ignore", category=ExperimentalWarning)

    evaluator = Evaluator(settings)

    print()
    print(
        f"Running [bold]{settings.n_trials}[/] trials "
        f"with [bold]{settings.n_jobs}[/] parallel evaluation context(s)..."
    )
    start_time = time.perf_counter()
    study = optimize(settings, evaluator)

    print()
    print(
        f"[bold green]Optimization finished[/] in {format_duration(time.perf_counter() - start_time)}"
    )
    print(
        f"* Evaluations: [bold]{evaluator.evaluation_count}[/], "
        f"rejected: [bold]{evaluator.rejection_count}[/]"
    )

    completed = [
        trial
        for trial in study.trials
        if trial.user_attrs.get("evaluation_occurred")
    ]
    if not completed:
        print("[yellow]No trial produced a valid point.[/]")
        return

    best_trial = study.best_trial
    print(
        f"* Best trial: [bold]{best_trial.user_attrs['index']}[/] "
        f"with fitness [bold]{best_trial.value:.6g}[/]"
    )
    for name, value in get_trial_parameters(best_trial).items():
        print(f"  * {name} = [bold]{value}[/]")


def main():
    # Install Rich traceback handler.
    install()

    try:
        run()
    except KeyboardInterrupt:
        print()
        print("[red]Shutting down...[/]")
