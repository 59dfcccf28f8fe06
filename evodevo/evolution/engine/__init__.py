from __future__ import annotations

from evodevo.evolution.engine.config import EngineConfig
from evodevo.evolution.engine.core import EvolutionEngine, EvolutionResult, evolve
from evodevo.evolution.engine.development import DevelopmentSession
from evodevo.evolution.engine.metrics import EngineMetrics
