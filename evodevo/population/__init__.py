from evodevo.population.store import PopulationBuffers, PopulationStore

__all__ = ["PopulationBuffers", "PopulationStore"]
