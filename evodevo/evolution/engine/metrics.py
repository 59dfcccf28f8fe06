from __future__ import annotations

from pydantic import BaseModel, Field


class EngineMetrics(BaseModel):
    """Counters accumulated over one evolutionary run."""

    total_generations: int = Field(
        default=0, description="Total number of generations run"
    )
    genomes_developed: int = Field(
        default=0, description="Total number of developmental simulations"
    )
    individuals_scored: int = Field(
        default=0, description="Total number of fitness evaluations"
    )
    full_rescores: int = Field(
        default=0, description="Generations where every slot was rescored"
    )
    invalidated_per_generation: list[int] = Field(
        default_factory=list, description="Invalidated slots in each generation"
    )

    def record_generation(self, invalidated: int) -> None:
        self.total_generations += 1
        self.invalidated_per_generation.append(invalidated)

    def record_development(self, developed: int) -> None:
        self.genomes_developed += developed

    def record_scoring(self, scored: int, full: bool) -> None:
        self.individuals_scored += scored
        if full:
            self.full_rescores += 1

    def to_dict(self) -> dict[str, int]:
        return self.model_dump(exclude={"invalidated_per_generation"})
