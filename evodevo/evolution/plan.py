from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator

from evodevo.exceptions import PlanValidationError


class SubstageKind(str, Enum):
    """Closed set of substage kinds."""

    ROULETTE = "roulette"
    LINEAR = "linear"
    EXPONENTIAL = "exponential"
    TOURNAMENT = "tournament"
    TWO_POINT_CROSSOVER = "two_point_crossover"
    UNIFORM_CROSSOVER = "uniform_crossover"
    MUTATE = "mutate"


RANKING_KINDS = frozenset(
    {
        SubstageKind.ROULETTE,
        SubstageKind.LINEAR,
        SubstageKind.EXPONENTIAL,
        SubstageKind.TOURNAMENT,
    }
)
RECOMBINATION_KINDS = frozenset(
    {SubstageKind.TWO_POINT_CROSSOVER, SubstageKind.UNIFORM_CROSSOVER}
)


def _substage_tag(value: Any) -> str | None:
    kind = value.get("kind") if isinstance(value, dict) else getattr(value, "kind", None)
    try:
        return SubstageKind(kind).value
    except ValueError:
        return None


class _Substage(BaseModel):
    kind: SubstageKind
    individuals: int = Field(
        ..., gt=0, description="Number of next-generation slots this substage fills"
    )
    model_config = ConfigDict(frozen=True)

    @field_validator("kind")
    @classmethod
    def check_own_kind(cls, v: SubstageKind) -> SubstageKind:
        expected = cls.model_fields["kind"].default
        if v is not expected:
            raise ValueError(f"{cls.__name__} requires kind={expected.value!r}, got {v.value!r}")
        return v


class RouletteSubstage(_Substage):
    kind: SubstageKind = SubstageKind.ROULETTE


class LinearSubstage(_Substage):
    kind: SubstageKind = SubstageKind.LINEAR
    selection_pressure: float = Field(..., ge=1.0, le=2.0)


class ExponentialSubstage(_Substage):
    kind: SubstageKind = SubstageKind.EXPONENTIAL
    base: float = Field(..., gt=0.0, lt=1.0, description="Exponential base k1")


class TournamentSubstage(_Substage):
    kind: SubstageKind = SubstageKind.TOURNAMENT
    tournament_size: int = Field(..., gt=0)


class TwoPointCrossoverSubstage(_Substage):
    kind: SubstageKind = SubstageKind.TWO_POINT_CROSSOVER
    desired_distance: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="Target genetic distance, relative to each parent's farthest candidate",
    )


class UniformCrossoverSubstage(_Substage):
    kind: SubstageKind = SubstageKind.UNIFORM_CROSSOVER
    desired_distance: float = Field(..., ge=0.0, le=1.0)


class MutationSubstage(_Substage):
    kind: SubstageKind = SubstageKind.MUTATE
    probability: float = Field(..., ge=0.0, le=1.0, description="Per-locus probability")


Substage = Annotated[
    Union[
        Annotated[RouletteSubstage, Tag(SubstageKind.ROULETTE.value)],
        Annotated[LinearSubstage, Tag(SubstageKind.LINEAR.value)],
        Annotated[ExponentialSubstage, Tag(SubstageKind.EXPONENTIAL.value)],
        Annotated[TournamentSubstage, Tag(SubstageKind.TOURNAMENT.value)],
        Annotated[TwoPointCrossoverSubstage, Tag(SubstageKind.TWO_POINT_CROSSOVER.value)],
        Annotated[UniformCrossoverSubstage, Tag(SubstageKind.UNIFORM_CROSSOVER.value)],
        Annotated[MutationSubstage, Tag(SubstageKind.MUTATE.value)],
    ],
    Discriminator(_substage_tag),
]


class SelectionStage(BaseModel):
    """Substages repeated ``repeats`` times with linearly interpolated weights."""

    substages: list[Substage] = Field(..., min_length=1)
    base_weights: Any = Field(..., description="Fitness weights at repeat 0")
    weight_increment: Any = Field(..., description="Added to the weights per repeat")
    repeats: int = Field(default=1, gt=0)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @field_validator("base_weights", "weight_increment", mode="before")
    @classmethod
    def lists_to_arrays(cls, v: Any) -> Any:
        """Sequences become float arrays so weights add element-wise."""
        if isinstance(v, (list, tuple)):
            return np.asarray(v, dtype=np.float64)
        return v

    def effective_weights(self, repeat: int) -> Any:
        return self.base_weights + self.weight_increment * repeat

    @property
    def individuals(self) -> int:
        return sum(s.individuals for s in self.substages)


class SelectionPlan(BaseModel):
    stages: list[SelectionStage] = Field(..., min_length=1)
    maximize_fitness: bool = True
    targets: Any = Field(default=None, description="Opaque fitness targets")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @property
    def total_generations(self) -> int:
        return sum(stage.repeats for stage in self.stages)

    def validate_for_population(self, population_size: int) -> None:
        """Check the caller contract against a concrete population size."""
        if not self.stages:
            raise PlanValidationError("Selection plan has no stages")
        for i, stage in enumerate(self.stages):
            if stage.individuals != population_size:
                raise PlanValidationError(
                    f"Stage {i} produces {stage.individuals} individuals, "
                    f"population size is {population_size}"
                )
            for k, substage in enumerate(stage.substages):
                if (
                    substage.kind in RECOMBINATION_KINDS
                    and substage.individuals >= population_size
                ):
                    raise PlanValidationError(
                        f"Stage {i} substage {k} ({substage.kind.value}) selects "
                        f"{substage.individuals} first parents, leaving no mating "
                        f"candidates in a population of {population_size}"
                    )


def weights_equal(first: Any, second: Any) -> bool:
    """Exact equality of two weight values, element-wise for arrays."""
    if isinstance(first, np.ndarray) or isinstance(second, np.ndarray):
        return np.array_equal(first, second)
    return bool(first == second)
