import numpy as np
import pytest
from pydantic import TypeAdapter

from evodevo.evolution.engine import evolve
from evodevo.evolution.plan import (
    MutationSubstage,
    RouletteSubstage,
    SelectionPlan,
    SelectionStage,
    Substage,
    SubstageKind,
    TournamentSubstage,
    TwoPointCrossoverSubstage,
    weights_equal,
)
from evodevo.evolution.selection.substages import EXECUTORS
from evodevo.exceptions import PlanValidationError
from tests.stubs import StubRanking, byte_distance


def _stage(*substages, base=1.0, increment=0.0, repeats=1):
    return SelectionStage(
        substages=list(substages),
        base_weights=base,
        weight_increment=increment,
        repeats=repeats,
    )


def test_substage_payload_is_selected_by_kind():
    adapter = TypeAdapter(Substage)

    tournament = adapter.validate_python(
        {"kind": "tournament", "tournament_size": 3, "individuals": 2}
    )
    mutate = adapter.validate_python(
        {"kind": "mutate", "probability": 0.25, "individuals": 1}
    )

    assert isinstance(tournament, TournamentSubstage)
    assert tournament.tournament_size == 3
    assert isinstance(mutate, MutationSubstage)
    assert mutate.kind is SubstageKind.MUTATE


def test_substage_rejects_payload_of_another_kind():
    adapter = TypeAdapter(Substage)
    with pytest.raises(ValueError):
        adapter.validate_python({"kind": "tournament", "individuals": 2})
    with pytest.raises(ValueError):
        adapter.validate_python(
            {"kind": "mutate", "probability": 1.5, "individuals": 2}
        )


def test_every_kind_has_an_executor():
    assert set(EXECUTORS) == set(SubstageKind)


def test_effective_weights_interpolate_per_repeat():
    stage = _stage(
        RouletteSubstage(individuals=4),
        base=np.array([1.0, 0.0]),
        increment=np.array([0.0, 0.5]),
        repeats=3,
    )

    np.testing.assert_array_equal(stage.effective_weights(0), [1.0, 0.0])
    np.testing.assert_array_equal(stage.effective_weights(2), [1.0, 1.0])



def test_sequence_weights_interpolate_element_wise():
    stage = _stage(
        RouletteSubstage(individuals=4),
        base=[1.0, 0.0],
        increment=(0.0, 0.5),
        repeats=3,
    )

    assert isinstance(stage.base_weights, np.ndarray)
    assert stage.base_weights.dtype == np.float64
    np.testing.assert_array_equal(stage.effective_weights(2), [1.0, 1.0])


def test_fitness_receives_interpolated_sequence_weights(
    codec, simulator, layout, engine_config
):
    seen = []

    def fitness(body, targets, weights):
        seen.append(np.asarray(weights).copy())
        return float(np.dot(weights, [body.count, 1.0]))

    plan = SelectionPlan(
        stages=[
            _stage(
                RouletteSubstage(individuals=4),
                base=[1.0, 0.0],
                increment=[0.0, 0.5],
                repeats=2,
            )
        ]
    )

    evolve(
        None,
        4,
        1,
        plan,
        fitness,
        byte_distance,
        codec=codec,
        simulator=simulator,
        layout=layout,
        ranking=StubRanking(),
        config=engine_config,
    )

    assert all(w.shape == (2,) for w in seen)
    np.testing.assert_array_equal(seen[-1], [1.0, 0.5])


def test_weights_equal_is_exact():
    assert weights_equal(1.5, 1.5)
    assert not weights_equal(1.5, 1.5 + 1e-12)
    assert weights_equal(np.array([1.0, 2.0]), np.array([1.0, 2.0]))
    assert not weights_equal(np.array([1.0, 2.0]), np.array([1.0, 2.5]))


def test_plan_requires_counts_matching_population():
    plan = SelectionPlan(
        stages=[_stage(RouletteSubstage(individuals=3), MutationSubstage(probability=0.1, individuals=2))]
    )
    plan.validate_for_population(5)
    with pytest.raises(PlanValidationError):
        plan.validate_for_population(4)


def test_plan_requires_mating_candidates():
    plan = SelectionPlan(
        stages=[_stage(TwoPointCrossoverSubstage(desired_distance=0.5, individuals=4))]
    )
    with pytest.raises(PlanValidationError):
        plan.validate_for_population(4)


def test_plan_requires_stages():
    with pytest.raises(ValueError):
        SelectionPlan(stages=[])


def test_total_generations_sums_repeats():
    plan = SelectionPlan(
        stages=[
            _stage(RouletteSubstage(individuals=2), repeats=3),
            _stage(RouletteSubstage(individuals=2), repeats=4),
        ]
    )
    assert plan.total_generations == 7
