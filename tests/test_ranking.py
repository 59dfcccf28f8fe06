import numpy as np
import pytest

from evodevo.evolution.selection.ranking import NumpyRanking

FITNESS = np.array([0.5, 3.0, -1.0, 2.0, 0.0, 1.5])


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.mark.parametrize(
    "scheme, args",
    [
        ("roulette", ()),
        ("linear", (True, 1.5)),
        ("exponential", (False, 0.8)),
        ("tournament", (True, 3)),
    ],
)
def test_winner_count_and_range(rng, scheme, args):
    select = getattr(NumpyRanking(), scheme)
    winners = select(FITNESS, *args, 40, rng)

    assert len(winners) == 40
    assert winners.min() >= 0
    assert winners.max() < len(FITNESS)


def test_roulette_only_picks_individuals_with_fitness(rng):
    winners = NumpyRanking().roulette(np.array([0.0, 0.0, 4.0, 0.0]), 25, rng)
    assert set(winners.tolist()) == {2}


def test_roulette_favours_larger_fitness_regardless_of_direction(rng):
    # Under a minimizing plan -10 is the best, yet roulette still prefers -1
    winners = NumpyRanking().roulette(np.array([-10.0, -1.0]), 200, rng)
    assert np.count_nonzero(winners == 1) > 190


def test_roulette_with_zero_fitness_is_uniform_over_population(rng):
    winners = NumpyRanking().roulette(np.zeros(3), 300, rng)
    assert set(winners.tolist()) == {0, 1, 2}


def test_selection_is_with_replacement(rng):
    winners = NumpyRanking().roulette(np.ones(2), 10, rng)
    assert len(winners) == 10


def test_linear_full_pressure_never_picks_worst(rng):
    ranking = NumpyRanking()

    maximizing = ranking.linear(FITNESS, True, 2.0, 200, rng)
    minimizing = ranking.linear(FITNESS, False, 2.0, 200, rng)

    assert 2 not in maximizing  # lowest fitness
    assert 1 not in minimizing  # highest fitness


def test_exponential_favours_best(rng):
    winners = NumpyRanking().exponential(FITNESS, True, 0.01, 100, rng)
    counts = np.bincount(winners, minlength=len(FITNESS))
    assert counts.argmax() == 1


def test_full_size_tournament_prefers_best(rng):
    fitness = np.array([1.0, 5.0, 2.0])
    winners = NumpyRanking().tournament(fitness, False, 30, 20, rng)
    # 30 contestants from 3 individuals: the minimum is virtually always present
    assert np.bincount(winners, minlength=3).argmax() == 0
