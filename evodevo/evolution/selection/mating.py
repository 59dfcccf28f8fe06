from __future__ import annotations

from typing import Sequence

import numpy as np
from loguru import logger

from evodevo.exceptions import MatingError
from evodevo.interfaces import GeneticDistance


def choose_partners(
    parents: Sequence[int],
    genomes: np.ndarray,
    distance: GeneticDistance,
    desired_distance: float,
) -> list[int]:
    """Pick one mate per first parent, aiming at a normalised genetic distance.

    Candidates are every individual outside the first-parent set. Distances
    are normalised by the largest distance from that same parent to any
    candidate. The candidate closest to *desired_distance* wins; an exact
    match ends the scan, so the first exact match found is kept.
    """
    excluded = set(int(p) for p in parents)
    candidates = [m for m in range(len(genomes)) if m not in excluded]
    if not candidates:
        raise MatingError(
            f"{len(excluded)} first parents cover the whole population of {len(genomes)}"
        )

    partners = []
    for parent in parents:
        max_distance = 0
        for m in candidates:
            max_distance = max(max_distance, distance(genomes[parent], genomes[m]))

        best_delta = float("inf")
        best_match = candidates[0]
        for m in candidates:
            if max_distance:
                normalised = distance(genomes[parent], genomes[m]) / max_distance
            else:
                normalised = 0.0
            delta = abs(desired_distance - normalised)
            if delta < best_delta:
                best_delta, best_match = delta, m
                if delta == 0:
                    break
        partners.append(best_match)
        logger.debug(
            "[Mating] parent={} partner={} delta={:.4f} max_distance={}",
            int(parent),
            best_match,
            best_delta,
            max_distance,
        )
    return partners
