"""Tiny helper functions for Hydra config computations."""

import numpy as np
from omegaconf import DictConfig, ListConfig, OmegaConf

from evodevo.evolution.plan import SelectionPlan


def build_plan(plan_cfg: DictConfig | dict) -> SelectionPlan:
    """Build a validated SelectionPlan from a plain or Hydra config node.

    Example:
        build_plan({
            "maximize_fitness": True,
            "targets": [32, 32, 32],
            "stages": [{
                "base_weights": [1.0, 0.0],
                "weight_increment": [0.0, 0.1],
                "repeats": 10,
                "substages": [
                    {"kind": "tournament", "tournament_size": 3, "individuals": 8},
                    {"kind": "uniform_crossover", "desired_distance": 0.5, "individuals": 4},
                    {"kind": "mutate", "probability": 0.05, "individuals": 4},
                ],
            }],
        })
    """
    if isinstance(plan_cfg, (DictConfig, ListConfig)):
        plan_cfg = OmegaConf.to_container(plan_cfg, resolve=True)
    data = dict(plan_cfg)
    if isinstance(data.get("targets"), (list, tuple)):
        data["targets"] = np.asarray(data["targets"])
    return SelectionPlan.model_validate(data)
