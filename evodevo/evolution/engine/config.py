from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

MAX_VOXEL_VOLUME = 256 * 256 * 256


class EngineConfig(BaseModel):
    """Configuration options controlling EvolutionEngine behaviour."""

    voxel_capacity: int = Field(
        default=MAX_VOXEL_VOLUME,
        gt=0,
        description="Capacity of each phenotype buffer, in voxels",
    )
    seed: int | None = Field(
        default=None,
        description="Seed for the run generator (None = fresh entropy)",
    )
    log_interval: int = Field(
        default=1, gt=0, description="Log metrics every N generations"
    )
    model_config = ConfigDict(frozen=True)
