from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

import numpy as np
from loguru import logger

from evodevo.evolution.plan import (
    ExponentialSubstage,
    LinearSubstage,
    MutationSubstage,
    RouletteSubstage,
    Substage,
    SubstageKind,
    TournamentSubstage,
    TwoPointCrossoverSubstage,
    UniformCrossoverSubstage,
)
from evodevo.evolution.selection.mating import choose_partners
from evodevo.interfaces import GeneticDistance, GenomeCodec, RankingAlgorithms
from evodevo.population.store import PopulationStore


@dataclass
class GenerationContext:
    """Everything a substage needs to fill its slice of the next generation."""

    store: PopulationStore
    codec: GenomeCodec
    distance: GeneticDistance
    ranking: RankingAlgorithms
    rng: np.random.Generator
    loci: np.ndarray
    maximize: bool
    invalidated: set[int] = field(default_factory=set)


def random_permutation(size: int, rng: np.random.Generator) -> np.ndarray:
    """Inside-out Fisher-Yates shuffle of ``range(size)``."""
    permutation = np.empty(size, dtype=np.int64)
    for l in range(size):  # noqa: E741
        index = int(rng.integers(0, l + 1))
        if index != l:
            permutation[l] = permutation[index]
        permutation[index] = l
    return permutation


def _roulette(substage: RouletteSubstage, ctx: GenerationContext) -> np.ndarray:
    return ctx.ranking.roulette(ctx.store.current.fitness, substage.individuals, ctx.rng)


def _linear(substage: LinearSubstage, ctx: GenerationContext) -> np.ndarray:
    return ctx.ranking.linear(
        ctx.store.current.fitness,
        ctx.maximize,
        substage.selection_pressure,
        substage.individuals,
        ctx.rng,
    )


def _exponential(substage: ExponentialSubstage, ctx: GenerationContext) -> np.ndarray:
    return ctx.ranking.exponential(
        ctx.store.current.fitness,
        ctx.maximize,
        substage.base,
        substage.individuals,
        ctx.rng,
    )


def _tournament(substage: TournamentSubstage, ctx: GenerationContext) -> np.ndarray:
    return ctx.ranking.tournament(
        ctx.store.current.fitness,
        ctx.maximize,
        substage.tournament_size,
        substage.individuals,
        ctx.rng,
    )


def _ranked(select: Callable[[Substage, GenerationContext], np.ndarray]):
    def execute(substage: Substage, ctx: GenerationContext, start: int) -> None:
        winners = select(substage, ctx)
        ctx.store.carry_over(winners, start)
        logger.debug(
            "[Substage] {} -> slots [{}, {}) winners={}",
            substage.kind.value,
            start,
            start + substage.individuals,
            [int(w) for w in winners],
        )

    return execute


def _recombine(crossover: Callable[[GenomeCodec], Callable]):
    def execute(
        substage: TwoPointCrossoverSubstage | UniformCrossoverSubstage,
        ctx: GenerationContext,
        start: int,
    ) -> None:
        current = ctx.store.current
        parents = ctx.ranking.roulette(current.fitness, substage.individuals, ctx.rng)
        partners = choose_partners(
            parents, current.genomes, ctx.distance, substage.desired_distance
        )
        operator = crossover(ctx.codec)
        for offset, (parent, partner) in enumerate(zip(parents, partners)):
            slot = start + offset
            ctx.store.next.genomes[slot] = operator(
                current.genomes[parent], current.genomes[partner], ctx.loci
            )
            ctx.invalidated.add(slot)
        logger.debug(
            "[Substage] {} -> slots [{}, {}) pairs={}",
            substage.kind.value,
            start,
            start + substage.individuals,
            [(int(p), int(m)) for p, m in zip(parents, partners)],
        )

    return execute


def _mutate(substage: MutationSubstage, ctx: GenerationContext, start: int) -> None:
    store = ctx.store
    chosen = random_permutation(store.population_size, ctx.rng)[: substage.individuals]
    for offset, source in enumerate(chosen):
        slot = start + offset
        genome = store.current.genomes[source].copy()
        ctx.codec.mutate(genome, substage.probability)
        store.next.genomes[slot] = genome
        ctx.invalidated.add(slot)
    logger.debug(
        "[Substage] mutate -> slots [{}, {}) sources={}",
        start,
        start + substage.individuals,
        [int(s) for s in chosen],
    )


EXECUTORS: dict[SubstageKind, Callable[[Substage, GenerationContext, int], None]] = {
    SubstageKind.ROULETTE: _ranked(_roulette),
    SubstageKind.LINEAR: _ranked(_linear),
    SubstageKind.EXPONENTIAL: _ranked(_exponential),
    SubstageKind.TOURNAMENT: _ranked(_tournament),
    SubstageKind.TWO_POINT_CROSSOVER: _recombine(lambda codec: codec.crossover_two_point),
    SubstageKind.UNIFORM_CROSSOVER: _recombine(lambda codec: codec.crossover_uniform),
    SubstageKind.MUTATE: _mutate,
}

_missing = set(SubstageKind) - set(EXECUTORS)
if _missing:
    raise RuntimeError(f"No executor for substage kinds: {sorted(k.value for k in _missing)}")


def execute_substage(substage: Substage, ctx: GenerationContext, start: int) -> None:
    EXECUTORS[substage.kind](substage, ctx, start)
