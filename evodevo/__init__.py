"""EvoDevo – incremental generational scheduler for developmental evolution."""

from evodevo.evolution.engine import EngineConfig, EvolutionEngine, EvolutionResult, evolve
from evodevo.evolution.plan import SelectionPlan, SelectionStage
from evodevo.genome.loci import GenomeLayout, build_locus_table
from evodevo.interfaces import Body

__all__ = [
    "Body",
    "EngineConfig",
    "EvolutionEngine",
    "EvolutionResult",
    "GenomeLayout",
    "SelectionPlan",
    "SelectionStage",
    "build_locus_table",
    "evolve",
]
