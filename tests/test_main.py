"""End-to-end runs of the optimizer driver."""

from __future__ import annotations

import math

import pytest

from swarmfit.evaluator import Evaluator
from swarmfit.main import optimize


@pytest.mark.parametrize("n_jobs", [1, 2])
def test_optimize_runs_all_trials(make_settings, n_jobs) -> None:
    settings = make_settings(n_trials=20, n_jobs=n_jobs)
    evaluator = Evaluator(settings)

    study = optimize(settings, evaluator)

    assert len(study.trials) == 20
    assert evaluator.evaluation_count == 20
    assert evaluator.rejection_count == 0
    assert sorted(trial.user_attrs["index"] for trial in study.trials) == list(range(1, 21))

    best = study.best_trial
    assert best.user_attrs["evaluation_occurred"] is True
    real = best.user_attrs["real_coordinates"]
    assert 0.0 <= real[0] <= 1.0
    assert 10.0 <= real[1] <= 15.0


def test_overshooting_points_are_rejected(make_settings) -> None:
    settings = make_settings(n_trials=30, search_margin=0.5)
    evaluator = Evaluator(settings)

    study = optimize(settings, evaluator)

    rejected = [trial for trial in study.trials if math.isinf(trial.value)]
    assert len(rejected) == evaluator.rejection_count

    for trial in study.trials:
        inside = all(0.0 <= value <= 1.0 for value in trial.params.values())
        assert trial.user_attrs["evaluation_occurred"] is inside
        if inside:
            assert math.isfinite(trial.value)
        else:
            assert trial.user_attrs["real_coordinates"] is None
