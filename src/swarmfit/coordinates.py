# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025  Philipp Emanuel Weidmann <pew@worldwidemann.com>

from typing import Sequence

import torch
from torch import Tensor

DTYPE = torch.float64


class DimensionalityMismatchError(ValueError):
    """
    Raised when coordinate, minimum, range or output vectors
    do not all have the same length.
    """

    pass


def as_vector(values: Sequence[float] | Tensor) -> Tensor:
    """
    Returns `values` as a float64 tensor, without copying if it already is one.
    """
    return torch.as_tensor(values, dtype=DTYPE)


def check_dimensions(**vectors: Tensor) -> int:
    """
    Returns the common length of all given vectors, or raises
    `DimensionalityMismatchError` naming the vectors that disagree.
    """
    for label, vector in vectors.items():
        if vector.dim() != 1:
            raise DimensionalityMismatchError(
                f"{label} must be a one-dimensional vector, got shape {tuple(vector.shape)}"
            )

    lengths = {label: vector.shape[0] for label, vector in vectors.items()}

    if len(set(lengths.values())) > 1:
        raise DimensionalityMismatchError(
            "Vector lengths disagree: "
            + ", ".join(f"{label}={length}" for label, length in lengths.items())
        )

    return next(iter(lengths.values()))


def denormalize(
    normalized: Sequence[float] | Tensor,
    minimum: Tensor,
    range: Tensor,
    out: Tensor,
) -> Tensor:
    """
    Maps unit-hypercube coordinates to real coordinates, writing
    `minimum + normalized * range` into `out` and returning it.

    No range check is performed here, so out-of-range points can still be
    mapped for diagnostic purposes. Use `is_within_unit_hypercube` for that.
    """
    normalized = as_vector(normalized)
    check_dimensions(normalized=normalized, minimum=minimum, range=range, out=out)

    torch.mul(normalized, range, out=out)
    out.add_(minimum)
    return out


def normalize(
    real: Sequence[float] | Tensor,
    minimum: Tensor,
    range: Tensor,
    out: Tensor | None = None,
) -> Tensor:
    """
    Inverse of `denormalize`: `(real - minimum) / range`.
    """
    real = as_vector(real)

    if out is None:
        out = torch.empty_like(real)

    check_dimensions(real=real, minimum=minimum, range=range, out=out)

    torch.sub(real, minimum, out=out)
    out.div_(range)
    return out


def is_within_unit_hypercube(normalized: Sequence[float] | Tensor) -> bool:
    # Both bounds are inclusive. NaN fails both comparisons and is therefore rejected.
    normalized = as_vector(normalized)
    return bool(((normalized >= 0.0) & (normalized <= 1.0)).all())
