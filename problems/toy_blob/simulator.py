"""CPU stand-in for the developmental simulator: a genome-driven growing blob."""

import numpy as np

from evodevo.interfaces import Body

_NEIGHBOURS = np.array(
    [[1, 0, 0], [-1, 0, 0], [0, 1, 0], [0, -1, 0], [0, 0, 1], [0, 0, -1]]
)


class BlobSimulator:
    def __init__(self, side: int = 16):
        self.side = side

    def create_context(self) -> dict:
        return {"grid": None, "genome": None}

    def destroy_context(self, context: dict) -> None:
        context.clear()

    def load(self, context: dict, genome: np.ndarray) -> None:
        grid = np.zeros((self.side,) * 3, dtype=np.uint8)
        grid[(self.side // 2,) * 3] = 1
        context["grid"] = grid
        context["genome"] = genome.copy()

    def develop(self, context: dict, steps: int) -> None:
        grid, genome = context["grid"], context["genome"]
        # Growth thresholds per direction come from the first six genes
        thresholds = genome[:6].astype(np.int64)
        for step in range(steps):
            cells = np.argwhere(grid)
            gene = genome[(6 + step) % genome.size]
            for direction, offset in enumerate(_NEIGHBOURS):
                if (int(gene) + 37 * direction) % 256 >= thresholds[direction]:
                    continue
                targets = np.clip(cells + offset, 0, self.side - 1)
                grid[tuple(targets.T)] = 1

    def extract_body(self, context: dict) -> np.ndarray:
        return context["grid"].ravel().copy()

    def isolate_body(self, voxels: np.ndarray) -> Body:
        grid = voxels[: self.side**3].reshape((self.side,) * 3)
        cells = np.argwhere(grid)
        return Body(cells=cells, count=len(cells))
