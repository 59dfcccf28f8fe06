import numpy as np

from evodevo.interfaces import Body


def blob_fitness(body: Body, targets, weights) -> float:
    """Negative weighted error against target cell count and height."""
    if body.count == 0:
        return -float(np.sum(np.asarray(weights) * np.asarray(targets)))
    height = int(np.ptp(body.cells[:, 2])) + 1
    errors = np.abs(np.array([body.count, height]) - np.asarray(targets))
    return -float(np.dot(np.asarray(weights), errors))
