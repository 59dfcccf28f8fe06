"""Byte-level genome operators for the toy blob problem."""

import numpy as np

from evodevo.genome.loci import GenomeLayout


class ByteGenomeCodec:
    def __init__(self, stem_cell_types: int = 4, fields_number: int = 3, seed: int | None = None):
        self.layout = GenomeLayout(stem_cell_types=stem_cell_types, fields_number=fields_number)
        self.rng = np.random.default_rng(seed)

    def generate(self) -> np.ndarray:
        return self.rng.integers(0, 256, size=self.layout.genome_size, dtype=np.uint8)

    def mutate(self, genome: np.ndarray, probability: float) -> None:
        mask = self.rng.random(genome.size) < probability
        genome[mask] = self.rng.integers(0, 256, size=int(mask.sum()), dtype=np.uint8)

    def crossover_two_point(self, first, second, loci) -> np.ndarray:
        start, end = np.sort(self.rng.choice(loci, size=2, replace=False)).astype(int)
        child = first.copy()
        child[start:end] = second[start:end]
        return child

    def crossover_uniform(self, first, second, loci) -> np.ndarray:
        child = first.copy()
        bounds = np.append(loci.astype(int), first.size)
        for start, end in zip(bounds[:-1], bounds[1:]):
            if self.rng.random() < 0.5:
                child[start:end] = second[start:end]
        return child


def hamming_distance(first: np.ndarray, second: np.ndarray) -> int:
    return int(np.unpackbits(np.bitwise_xor(first, second)).sum())
