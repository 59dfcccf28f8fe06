class EvoDevoError(Exception):
    """Base for all EvoDevo exceptions."""

    pass


# High-level families
class ValidationError(EvoDevoError):
    """Data validation failures."""

    pass


class EvolutionError(EvoDevoError):
    """Evolution process failures."""

    pass


class DevelopmentError(EvoDevoError):
    """Developmental simulator failures."""

    pass


# Validation subtypes
class PlanValidationError(ValidationError):
    """Raised when a selection plan breaks its contract with the population."""

    pass


# Evolution subtypes
class MatingError(EvolutionError):
    """Raised when no mating partner can be chosen for a first parent."""

    pass


# Development subtypes
class SimulatorInitializationError(DevelopmentError):
    """Fatal: the simulator context could not be created."""

    pass
