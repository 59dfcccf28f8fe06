from __future__ import annotations

import numpy as np
from loguru import logger


def _ranks(fitness: np.ndarray, maximize: bool) -> np.ndarray:
    """Rank of each individual, 0 for the worst and n-1 for the best."""
    order = np.argsort(fitness if maximize else -fitness, kind="stable")
    ranks = np.empty(len(fitness), dtype=np.int64)
    ranks[order] = np.arange(len(fitness))
    return ranks


def _draw(probabilities: np.ndarray, count: int, rng: np.random.Generator) -> np.ndarray:
    return rng.choice(len(probabilities), size=count, replace=True, p=probabilities)


class NumpyRanking:
    """Default winner selection schemes; all sample with replacement."""

    def roulette(
        self, fitness: np.ndarray, count: int, rng: np.random.Generator
    ) -> np.ndarray:
        """Fitness-proportional choice; larger fitness always wins more often.

        There is no ``maximize`` flag: under a minimizing plan, roulette
        substages and crossover first parents favour the worst individuals.
        """
        values = np.asarray(fitness, dtype=np.float64)
        if values.min() < 0:
            values = values - values.min() + 1e-6  # shift to positive space
        total = values.sum()
        if total <= 0 or not np.isfinite(total):
            logger.debug("[Ranking] roulette: degenerate fitness, uniform choice")
            return rng.integers(0, len(values), size=count)
        return _draw(values / total, count, rng)

    def linear(
        self,
        fitness: np.ndarray,
        maximize: bool,
        selection_pressure: float,
        count: int,
        rng: np.random.Generator,
    ) -> np.ndarray:
        n = len(fitness)
        if n == 1:
            return np.zeros(count, dtype=np.int64)
        ranks = _ranks(np.asarray(fitness), maximize)
        s = selection_pressure
        probabilities = (2.0 - s) / n + 2.0 * ranks * (s - 1.0) / (n * (n - 1))
        return _draw(probabilities / probabilities.sum(), count, rng)

    def exponential(
        self,
        fitness: np.ndarray,
        maximize: bool,
        base: float,
        count: int,
        rng: np.random.Generator,
    ) -> np.ndarray:
        n = len(fitness)
        ranks = _ranks(np.asarray(fitness), maximize)
        weights = np.power(base, (n - 1) - ranks, dtype=np.float64)
        return _draw(weights / weights.sum(), count, rng)

    def tournament(
        self,
        fitness: np.ndarray,
        maximize: bool,
        tournament_size: int,
        count: int,
        rng: np.random.Generator,
    ) -> np.ndarray:
        values = np.asarray(fitness)
        contestants = rng.integers(0, len(values), size=(count, tournament_size))
        scores = values[contestants]
        best = scores.argmax(axis=1) if maximize else scores.argmin(axis=1)
        return contestants[np.arange(count), best]
