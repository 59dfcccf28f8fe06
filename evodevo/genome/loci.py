from __future__ import annotations

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

# Bytes per (stem cell type, field) record and per global field record.
CELL_FIELD_BYTES = 8
GLOBAL_FIELD_LOCI = 7
GLOBAL_LOCUS_STRIDE = 2


class GenomeLayout(BaseModel):
    """Segmentation of the genome byte layout."""

    stem_cell_types: int = Field(..., gt=0, description="Number of stem cell types")
    fields_number: int = Field(..., gt=0, description="Fields per stem cell type")

    model_config = ConfigDict(frozen=True)

    @property
    def cell_loci(self) -> int:
        return CELL_FIELD_BYTES * self.stem_cell_types * self.fields_number

    @property
    def global_loci(self) -> int:
        return GLOBAL_FIELD_LOCI * self.fields_number

    @property
    def genome_size(self) -> int:
        """Smallest genome size that holds every breakpoint of the table."""
        return self.cell_loci + GLOBAL_LOCUS_STRIDE * self.global_loci


def build_locus_table(layout: GenomeLayout) -> np.ndarray:
    """Build the breakpoint table used by the recombination operators.

    The per-cell-type region is cut at every byte, so its breakpoints are
    ``0 .. 8*T*F - 1``. The global region follows with ``7*F`` breakpoints
    spaced two bytes apart, starting at ``8*T*F``. The table has
    ``8*T*F + 7*F`` strictly increasing entries and is returned read-only.
    """
    cell_loci = np.arange(layout.cell_loci, dtype=np.uint64)
    global_loci = layout.cell_loci + GLOBAL_LOCUS_STRIDE * np.arange(
        layout.global_loci, dtype=np.uint64
    )
    table = np.concatenate([cell_loci, global_loci])
    table.flags.writeable = False
    return table
