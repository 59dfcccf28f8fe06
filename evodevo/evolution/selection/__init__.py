from evodevo.evolution.selection.mating import choose_partners
from evodevo.evolution.selection.ranking import NumpyRanking
from evodevo.evolution.selection.substages import (
    EXECUTORS,
    GenerationContext,
    execute_substage,
    random_permutation,
)

__all__ = [
    "EXECUTORS",
    "GenerationContext",
    "NumpyRanking",
    "choose_partners",
    "execute_substage",
    "random_permutation",
]
