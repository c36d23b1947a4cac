"""Out-of-tree fitness plugin, loaded through its PLUGIN_CLASS attribute."""

from torch import Tensor

from swarmfit.fitness import FitnessFunction


class L1Norm(FitnessFunction):
    name = "L1Norm"

    def compute(self, real_coordinates: Tensor, extension) -> float:
        return float(real_coordinates.abs().sum())


PLUGIN_CLASS = L1Norm
