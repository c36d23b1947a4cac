from .ackley import Ackley
from .rastrigin import Rastrigin
from .rosenbrock import Rosenbrock
from .sphere import Sphere

__all__ = [
    "Ackley",
    "Rastrigin",
    "Rosenbrock",
    "Sphere",
]
