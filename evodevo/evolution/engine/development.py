from __future__ import annotations

from typing import Any, Iterable

from loguru import logger

from evodevo.exceptions import SimulatorInitializationError
from evodevo.interfaces import DevelopmentSimulator, FitnessFunction
from evodevo.population.store import PopulationStore


class DevelopmentSession:
    """Owns the simulator context for the lifetime of one run.

    Creating the context is the one fatal failure of a run; it happens before
    any population buffer is allocated.
    """

    def __init__(self, simulator: DevelopmentSimulator, development_steps: int):
        self.simulator = simulator
        self.development_steps = development_steps
        self.context: Any = None

    def __enter__(self) -> "DevelopmentSession":
        try:
            self.context = self.simulator.create_context()
        except Exception as exc:
            raise SimulatorInitializationError(
                f"Could not create simulator context: {exc}"
            ) from exc
        if self.context is None:
            raise SimulatorInitializationError("Simulator returned no context")
        logger.info("[Development] Simulator context created")
        return self

    def __exit__(self, *exc_info) -> None:
        if self.context is not None:
            self.simulator.destroy_context(self.context)
            self.context = None
            logger.info("[Development] Simulator context destroyed")

    def develop_into(self, store: PopulationStore, slot: int) -> None:
        """Develop the genome in *slot* of the current buffers into its body."""
        logger.debug("[Development] Developing genome {}", slot)
        self.simulator.load(self.context, store.current.genomes[slot])
        self.simulator.develop(self.context, self.development_steps)
        store.write_voxels(slot, self.simulator.extract_body(self.context))

    def redevelop(self, store: PopulationStore, slots: Iterable[int]) -> list[int]:
        """Redevelop *slots* in ascending order; return the order used."""
        ordered = sorted(slots)
        for slot in ordered:
            self.develop_into(store, slot)
        return ordered

    def score(
        self,
        store: PopulationStore,
        slots: Iterable[int],
        fitness_function: FitnessFunction,
        targets: Any,
        weights: Any,
    ) -> int:
        scored = 0
        for slot in slots:
            body = self.simulator.isolate_body(store.current.voxels[slot])
            store.current.fitness[slot] = fitness_function(body, targets, weights)
            scored += 1
        return scored
