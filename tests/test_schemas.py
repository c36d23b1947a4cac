"""Tests for the fitness parameter record and evaluation results."""

from __future__ import annotations

import math

import pytest
import torch

from swarmfit.coordinates import DimensionalityMismatchError
from swarmfit.schemas import REJECTED_FITNESS, FitnessParameters, FitnessResult


def test_create_allocates_undefined_output_buffer() -> None:
    params = FitnessParameters.create([0.0, 10.0], [1.0, 5.0])

    assert params.dimensionality == 2
    assert params.evaluation_occurred is False
    assert params.extension is None
    assert params.real_coordinates.dtype == torch.float64
    assert bool(torch.isnan(params.real_coordinates).all())


def test_rejected_fitness_is_worse_than_any_finite_value() -> None:
    assert REJECTED_FITNESS == math.inf
    assert REJECTED_FITNESS > 1e308


@pytest.mark.parametrize("range", [[1.0, 0.0], [1.0, -2.0], [math.inf, 1.0], [math.nan, 1.0]])
def test_non_positive_or_non_finite_range_is_rejected(range) -> None:
    with pytest.raises(ValueError, match="range values"):
        FitnessParameters.create([0.0, 0.0], range)


def test_non_finite_minimum_is_rejected() -> None:
    with pytest.raises(ValueError, match="minimum"):
        FitnessParameters.create([-math.inf, 0.0], [1.0, 1.0])


def test_minimum_and_range_lengths_must_match() -> None:
    with pytest.raises(DimensionalityMismatchError):
        FitnessParameters.create([0.0, 10.0], [1.0])


def test_empty_search_space_is_rejected() -> None:
    with pytest.raises(ValueError, match="at least one dimension"):
        FitnessParameters.create([], [])


def test_clone_context_shares_bounds_but_not_outputs() -> None:
    extension = object()
    params = FitnessParameters.create([0.0, 10.0], [1.0, 5.0], extension=extension)
    params.real_coordinates.copy_(torch.tensor([0.5, 11.0], dtype=torch.float64))
    params.evaluation_occurred = True

    sibling = params.clone_context()

    assert sibling.minimum is params.minimum
    assert sibling.range is params.range
    assert sibling.extension is extension
    assert sibling.real_coordinates is not params.real_coordinates
    assert sibling.evaluation_occurred is False
    assert bool(torch.isnan(sibling.real_coordinates).all())
    assert params.real_coordinates.tolist() == [0.5, 11.0]


def test_result_snapshot_copies_real_coordinates() -> None:
    params = FitnessParameters.create([0.0, 10.0], [1.0, 5.0])
    params.real_coordinates.copy_(torch.tensor([0.5, 11.0], dtype=torch.float64))
    params.evaluation_occurred = True

    result = FitnessResult.from_parameters(0.25, params)
    params.real_coordinates.fill_(0.0)

    assert result.evaluation_occurred is True
    assert result.real_coordinates == [0.5, 11.0]
    assert result.value == 0.25


def test_result_for_rejected_point_has_no_coordinates() -> None:
    params = FitnessParameters.create([0.0, 10.0], [1.0, 5.0])

    result = FitnessResult.from_parameters(REJECTED_FITNESS, params)

    assert result.evaluation_occurred is False
    assert result.real_coordinates is None
    assert result.display == "rejected"
