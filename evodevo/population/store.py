from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
from loguru import logger

from evodevo.interfaces import Body, DevelopmentSimulator


@dataclass
class PopulationBuffers:
    """One full set of per-slot buffers."""

    genomes: np.ndarray
    voxels: list[np.ndarray]
    fitness: np.ndarray

    @classmethod
    def allocate(
        cls, population_size: int, genome_size: int, voxel_capacity: int
    ) -> "PopulationBuffers":
        return cls(
            genomes=np.zeros((population_size, genome_size), dtype=np.uint8),
            voxels=[
                np.zeros(voxel_capacity, dtype=np.uint8)
                for _ in range(population_size)
            ],
            fitness=np.zeros(population_size, dtype=np.float64),
        )


class PopulationStore:
    """Double-buffered population: ``current`` is read, ``next`` is written.

    Committing a generation swaps the two buffer-set handles; no element is
    copied. Survivors move their voxel buffer into the next set instead of
    copying it, so only redeveloped slots pay for fresh phenotypes.
    """

    def __init__(
        self,
        genomes: np.ndarray,
        voxel_capacity: int,
        fitness: np.ndarray | None = None,
    ):
        population_size, genome_size = genomes.shape
        self.population_size = population_size
        self.voxel_capacity = voxel_capacity
        if fitness is None:
            fitness = np.zeros(population_size, dtype=np.float64)
        self.current = PopulationBuffers(
            genomes=genomes,
            voxels=[
                np.zeros(voxel_capacity, dtype=np.uint8)
                for _ in range(population_size)
            ],
            fitness=fitness,
        )
        self.next = PopulationBuffers.allocate(
            population_size, genome_size, voxel_capacity
        )
        self._moved: dict[int, int] = {}

    def carry_over(self, winners: Sequence[int], start: int) -> None:
        """Copy winners from ``current`` into ``next`` starting at slot *start*.

        A winner's voxel buffer is moved the first time it is picked in this
        generation; later picks copy the contents from the slot it moved to.
        """
        for offset, winner in enumerate(winners):
            winner = int(winner)
            slot = start + offset
            self.next.genomes[slot] = self.current.genomes[winner]
            self.next.fitness[slot] = self.current.fitness[winner]
            if winner in self._moved:
                np.copyto(self.next.voxels[slot], self.next.voxels[self._moved[winner]])
            else:
                self.next.voxels[slot], self.current.voxels[winner] = (
                    self.current.voxels[winner],
                    self.next.voxels[slot],
                )
                self._moved[winner] = slot

    def commit_generation(self) -> None:
        self.current, self.next = self.next, self.current
        self._moved.clear()

    def write_voxels(self, slot: int, voxels: np.ndarray) -> None:
        """Overwrite a slot's phenotype buffer; the tail past *voxels* is cleared."""
        buffer = self.current.voxels[slot]
        voxels = np.ravel(voxels)
        if voxels.size > buffer.size:
            raise ValueError(
                f"Body of {voxels.size} voxels exceeds capacity {buffer.size}"
            )
        buffer[: voxels.size] = voxels
        buffer[voxels.size :] = 0

    def finalize(
        self,
        simulator: DevelopmentSimulator,
        genomes_out: np.ndarray | None = None,
        fitness_out: np.ndarray | None = None,
    ) -> tuple[np.ndarray, list[Body], np.ndarray]:
        """Hand the authoritative buffers to the caller and drop the scratch set."""
        genomes = self.current.genomes
        if genomes_out is not None and genomes_out is not genomes:
            np.copyto(genomes_out, genomes)
            genomes = genomes_out
        fitness = self.current.fitness
        if fitness_out is not None and fitness_out is not fitness:
            np.copyto(fitness_out, fitness)
            fitness = fitness_out
        bodies = [simulator.isolate_body(v) for v in self.current.voxels]
        self.next = None
        logger.debug("[PopulationStore] Finalized {} slots", self.population_size)
        return genomes, bodies, fitness
