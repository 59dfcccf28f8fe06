"""Collaborator contracts consumed by the generational scheduler.

The genome codec, the developmental simulator, the fitness function and the
ranking algorithms all live outside the core. Only their call shapes are
fixed here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

import numpy as np

Genome = np.ndarray
"""Fixed-size ``uint8`` record; size and segmentation are constant for a run."""


@dataclass
class Body:
    """Developed phenotype: voxel coordinates of every living cell."""

    cells: np.ndarray = field(default_factory=lambda: np.empty((0, 3), dtype=np.int64))
    count: int = 0


class GenomeCodec(Protocol):
    def generate(self) -> Genome:
        """Return a freshly generated random genome."""

    def mutate(self, genome: Genome, probability: float) -> None:
        """Mutate *genome* in place, each locus with *probability*."""

    def crossover_two_point(
        self, first: Genome, second: Genome, loci: np.ndarray
    ) -> Genome:
        pass

    def crossover_uniform(
        self, first: Genome, second: Genome, loci: np.ndarray
    ) -> Genome:
        pass


class GeneticDistance(Protocol):
    def __call__(self, first: Genome, second: Genome) -> int:
        pass


class FitnessFunction(Protocol):
    def __call__(self, body: Body, targets: Any, weights: Any) -> float:
        pass


class DevelopmentSimulator(Protocol):
    """Stateful simulator; one genome may be loaded into a context at a time."""

    def create_context(self) -> Any:
        """Create the simulation context. Raise on failure."""

    def destroy_context(self, context: Any) -> None:
        pass

    def load(self, context: Any, genome: Genome) -> None:
        pass

    def develop(self, context: Any, steps: int) -> None:
        pass

    def extract_body(self, context: Any) -> np.ndarray:
        """Return the raw voxel buffer of the currently developed body."""

    def isolate_body(self, voxels: np.ndarray) -> Body:
        """Project a raw voxel buffer into a :class:`Body`."""


class RankingAlgorithms(Protocol):
    """Winner selection schemes. Every method samples with replacement."""

    def roulette(
        self, fitness: np.ndarray, count: int, rng: np.random.Generator
    ) -> np.ndarray:
        pass

    def linear(
        self,
        fitness: np.ndarray,
        maximize: bool,
        selection_pressure: float,
        count: int,
        rng: np.random.Generator,
    ) -> np.ndarray:
        pass

    def exponential(
        self,
        fitness: np.ndarray,
        maximize: bool,
        base: float,
        count: int,
        rng: np.random.Generator,
    ) -> np.ndarray:
        pass

    def tournament(
        self,
        fitness: np.ndarray,
        maximize: bool,
        tournament_size: int,
        count: int,
        rng: np.random.Generator,
    ) -> np.ndarray:
        pass
