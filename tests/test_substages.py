from collections import Counter
import math

import numpy as np
import pytest

from evodevo.evolution.plan import (
    ExponentialSubstage,
    LinearSubstage,
    MutationSubstage,
    RouletteSubstage,
    TournamentSubstage,
    TwoPointCrossoverSubstage,
    UniformCrossoverSubstage,
)
from evodevo.evolution.selection.substages import (
    GenerationContext,
    execute_substage,
    random_permutation,
)
from evodevo.genome.loci import build_locus_table
from evodevo.population.store import PopulationStore
from tests.stubs import StubCodec, StubRanking, byte_distance


@pytest.fixture
def make_context(layout):
    def make(ranking=None, size=4, seed=0):
        codec = StubCodec(layout)
        genomes = np.stack([codec.generate() for _ in range(size)])
        store = PopulationStore(genomes, voxel_capacity=8)
        for slot in range(size):
            store.write_voxels(slot, np.full(8, slot + 1, dtype=np.uint8))
            store.current.fitness[slot] = slot + 0.5
        return GenerationContext(
            store=store,
            codec=codec,
            distance=byte_distance,
            ranking=ranking or StubRanking(),
            rng=np.random.default_rng(seed),
            loci=build_locus_table(layout),
            maximize=True,
        )

    return make


def test_random_permutation_is_a_permutation():
    rng = np.random.default_rng(3)
    for size in (1, 2, 7, 50):
        assert sorted(random_permutation(size, rng).tolist()) == list(range(size))


def test_random_permutation_covers_all_orders():
    rng = np.random.default_rng(11)
    counts = Counter(tuple(random_permutation(3, rng).tolist()) for _ in range(3000))
    assert len(counts) == math.factorial(3)
    assert min(counts.values()) > 350


@pytest.mark.parametrize(
    "substage, scheme",
    [
        (RouletteSubstage(individuals=2), "roulette"),
        (LinearSubstage(selection_pressure=1.5, individuals=2), "linear"),
        (ExponentialSubstage(base=0.5, individuals=2), "exponential"),
        (TournamentSubstage(tournament_size=2, individuals=2), "tournament"),
    ],
)
def test_ranking_substages_carry_survivors(make_context, substage, scheme):
    ctx = make_context(StubRanking(**{scheme: [3, 0]}))
    store = ctx.store
    survivor_buffer = store.current.voxels[3]

    execute_substage(substage, ctx, start=1)

    assert ctx.ranking.calls == [scheme]
    assert ctx.invalidated == set()
    np.testing.assert_array_equal(store.next.genomes[1], store.current.genomes[3])
    np.testing.assert_array_equal(store.next.genomes[2], store.current.genomes[0])
    np.testing.assert_array_equal(store.next.fitness[1:3], [3.5, 0.5])
    assert store.next.voxels[1] is survivor_buffer


def test_mutation_invalidates_and_leaves_current_untouched(make_context):
    ctx = make_context(seed=5)
    before = ctx.store.current.genomes.copy()
    expected = random_permutation(4, np.random.default_rng(5))[:2]

    execute_substage(MutationSubstage(probability=1.0, individuals=2), ctx, start=2)

    assert ctx.invalidated == {2, 3}
    np.testing.assert_array_equal(ctx.store.current.genomes, before)
    np.testing.assert_array_equal(ctx.store.next.genomes[2], ~before[expected[0]])
    np.testing.assert_array_equal(ctx.store.next.genomes[3], ~before[expected[1]])
    assert ctx.codec.mutations == [1.0, 1.0]


@pytest.mark.parametrize(
    "substage, operator",
    [
        (TwoPointCrossoverSubstage(desired_distance=0.0, individuals=2), "two_point"),
        (UniformCrossoverSubstage(desired_distance=0.0, individuals=2), "uniform"),
    ],
)
def test_recombination_uses_roulette_parents_and_mates(make_context, substage, operator):
    # Genomes are filled with 1..4; parents are slots 0 and 1 (values 1, 2)
    ctx = make_context(StubRanking(roulette=[0, 1]))

    execute_substage(substage, ctx, start=0)

    assert ctx.ranking.calls == ["roulette"]
    assert ctx.invalidated == {0, 1}
    # Closest candidate outside {0, 1} is slot 2 (value 3) for both parents
    assert ctx.codec.crossovers == [(operator, 1, 3), (operator, 2, 3)]
    assert ctx.store.next.genomes[0][0] == 1
