from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from loguru import logger

from evodevo.evolution.engine.config import EngineConfig
from evodevo.evolution.engine.development import DevelopmentSession
from evodevo.evolution.engine.metrics import EngineMetrics
from evodevo.evolution.plan import SelectionPlan, SelectionStage, weights_equal
from evodevo.evolution.selection.ranking import NumpyRanking
from evodevo.evolution.selection.substages import GenerationContext, execute_substage
from evodevo.exceptions import ValidationError
from evodevo.genome.loci import GenomeLayout, build_locus_table
from evodevo.interfaces import (
    Body,
    DevelopmentSimulator,
    FitnessFunction,
    GeneticDistance,
    GenomeCodec,
    RankingAlgorithms,
)
from evodevo.population.store import PopulationStore

__all__ = ["EvolutionEngine", "EvolutionResult", "evolve"]


@dataclass
class EvolutionResult:
    genomes: np.ndarray
    bodies: list[Body]
    fitness: np.ndarray
    metrics: EngineMetrics


class EvolutionEngine:
    """
    Generational scheduler:
    - Walks the plan stage by stage, repeat by repeat, substage by substage.
    - Each repeat fills the next buffers, commits them, then redevelops and
      rescores only what the generation invalidated.
    """

    def __init__(
        self,
        plan: SelectionPlan,
        *,
        population_size: int,
        development_steps: int,
        codec: GenomeCodec,
        simulator: DevelopmentSimulator,
        fitness_function: FitnessFunction,
        genetic_distance: GeneticDistance,
        layout: GenomeLayout,
        ranking: RankingAlgorithms | None = None,
        config: EngineConfig | None = None,
    ):
        if population_size <= 0:
            raise ValidationError(f"population_size must be positive, got {population_size}")
        if development_steps < 0:
            raise ValidationError(
                f"development_steps must be non-negative, got {development_steps}"
            )
        plan.validate_for_population(population_size)

        self.plan = plan
        self.population_size = population_size
        self.development_steps = development_steps
        self.codec = codec
        self.simulator = simulator
        self.fitness_function = fitness_function
        self.genetic_distance = genetic_distance
        self.layout = layout
        self.ranking = ranking or NumpyRanking()
        self.config = config or EngineConfig()

        self.loci = build_locus_table(layout)
        self.metrics = EngineMetrics()

        logger.info(
            "[EvolutionEngine] Init | population={}, stages={}, generations={}, steps={}, ranking={}",
            population_size,
            len(plan.stages),
            plan.total_generations,
            development_steps,
            type(self.ranking).__name__,
        )

    def run(
        self,
        genomes: np.ndarray | None = None,
        fitness: np.ndarray | None = None,
    ) -> EvolutionResult:
        with DevelopmentSession(self.simulator, self.development_steps) as session:
            rng = np.random.default_rng(self.config.seed)
            pregenerated = genomes is not None and len(genomes) > 0
            working_genomes = self._working_genomes(genomes)
            working_fitness = self._working_fitness(fitness)
            store = PopulationStore(
                working_genomes, self.config.voxel_capacity, working_fitness
            )

            weights = self.plan.stages[0].base_weights
            self._initialize(session, store, weights)

            ctx = GenerationContext(
                store=store,
                codec=self.codec,
                distance=self.genetic_distance,
                ranking=self.ranking,
                rng=rng,
                loci=self.loci,
                maximize=self.plan.maximize_fitness,
            )
            for i, stage in enumerate(self.plan.stages):
                for j in range(stage.repeats):
                    logger.info("[EvolutionEngine] Stage {}, repeat {}", i, j)
                    weights = self._generation(session, ctx, stage, j, weights)

            result_genomes, bodies, result_fitness = store.finalize(
                self.simulator,
                genomes_out=genomes if pregenerated else None,
                fitness_out=fitness,
            )

        logger.info("[EvolutionEngine] Done | {}", self._format_metrics())
        return EvolutionResult(result_genomes, bodies, result_fitness, self.metrics)

    def _initialize(
        self,
        session: DevelopmentSession,
        store: PopulationStore,
        weights: Any,
    ) -> None:
        slots = range(self.population_size)
        for slot in slots:
            session.develop_into(store, slot)
        self.metrics.record_development(self.population_size)
        scored = session.score(
            store, slots, self.fitness_function, self.plan.targets, weights
        )
        self.metrics.record_scoring(scored, full=True)

    def _generation(
        self,
        session: DevelopmentSession,
        ctx: GenerationContext,
        stage: SelectionStage,
        repeat: int,
        previous_weights: Any,
    ) -> Any:
        """Run one repeat of *stage*; return the weights used for scoring."""
        store = ctx.store
        ctx.invalidated.clear()
        individuals_generated = 0
        for substage in stage.substages:
            execute_substage(substage, ctx, individuals_generated)
            individuals_generated += substage.individuals

        store.commit_generation()

        developed = session.redevelop(store, ctx.invalidated)
        self.metrics.record_development(len(developed))

        weights = stage.effective_weights(repeat)
        if weights_equal(weights, previous_weights):
            slots, full = developed, False
        else:
            slots, full = range(self.population_size), True
            logger.debug("[EvolutionEngine] Weights changed, rescoring all slots")
        scored = session.score(
            store, slots, self.fitness_function, self.plan.targets, weights
        )
        self.metrics.record_scoring(scored, full=full)
        self.metrics.record_generation(len(developed))

        if self.metrics.total_generations % self.config.log_interval == 0:
            logger.info(
                "[EvolutionEngine] Generation {} | redeveloped={}, rescored={}, best={:.4f}",
                self.metrics.total_generations,
                len(developed),
                scored,
                self._best(store.current.fitness),
            )
        return weights

    def _working_genomes(self, genomes: np.ndarray | None) -> np.ndarray:
        if genomes is None or len(genomes) == 0:
            logger.info("[EvolutionEngine] Generating {} genomes", self.population_size)
            genomes = np.stack(
                [
                    np.asarray(self.codec.generate(), dtype=np.uint8)
                    for _ in range(self.population_size)
                ]
            )
        elif genomes.ndim != 2 or genomes.shape[0] != self.population_size:
            raise ValidationError(
                f"Expected genomes of shape ({self.population_size}, genome_size), "
                f"got {genomes.shape}"
            )
        if genomes.shape[1] < self.layout.genome_size:
            raise ValidationError(
                f"Genome size {genomes.shape[1]} is smaller than the layout "
                f"requires ({self.layout.genome_size})"
            )
        return genomes

    def _working_fitness(self, fitness: np.ndarray | None) -> np.ndarray | None:
        if fitness is None:
            return None
        if fitness.shape != (self.population_size,):
            raise ValidationError(
                f"Expected fitness of shape ({self.population_size},), got {fitness.shape}"
            )
        return fitness

    def _best(self, fitness: np.ndarray) -> float:
        return float(fitness.max() if self.plan.maximize_fitness else fitness.min())

    def _format_metrics(self) -> str:
        return " | ".join(f"{k}={v}" for k, v in self.metrics.to_dict().items())


def evolve(
    genomes: np.ndarray | None,
    population_size: int,
    development_steps: int,
    plan: SelectionPlan,
    fitness_function: FitnessFunction,
    genetic_distance: GeneticDistance,
    *,
    codec: GenomeCodec,
    simulator: DevelopmentSimulator,
    layout: GenomeLayout,
    ranking: RankingAlgorithms | None = None,
    config: EngineConfig | None = None,
    fitness: np.ndarray | None = None,
) -> EvolutionResult:
    """Run a whole selection plan and return the final population.

    *genomes* may be pre-populated (shape ``(population_size, genome_size)``)
    or empty/None, in which case the codec generates the initial population.
    Pre-populated *genomes* and a given *fitness* array receive the final
    values in place.
    """
    engine = EvolutionEngine(
        plan,
        population_size=population_size,
        development_steps=development_steps,
        codec=codec,
        simulator=simulator,
        fitness_function=fitness_function,
        genetic_distance=genetic_distance,
        layout=layout,
        ranking=ranking,
        config=config,
    )
    return engine.run(genomes, fitness)
