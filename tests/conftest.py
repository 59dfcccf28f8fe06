from __future__ import annotations

import pytest

from evodevo.evolution.engine.config import EngineConfig
from evodevo.genome.loci import GenomeLayout
from tests.stubs import VOXELS, CountingFitness, CountingSimulator, StubCodec


@pytest.fixture
def layout() -> GenomeLayout:
    return GenomeLayout(stem_cell_types=1, fields_number=1)


@pytest.fixture
def codec(layout) -> StubCodec:
    return StubCodec(layout)


@pytest.fixture
def simulator() -> CountingSimulator:
    return CountingSimulator()


@pytest.fixture
def fitness_function() -> CountingFitness:
    return CountingFitness()


@pytest.fixture
def engine_config() -> EngineConfig:
    return EngineConfig(voxel_capacity=VOXELS, seed=7)
