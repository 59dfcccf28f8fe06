import time

import hydra
from hydra.utils import instantiate
from loguru import logger
from omegaconf import DictConfig

from evodevo.config.helpers import build_plan
from evodevo.evolution.engine import evolve
from evodevo.utils.logger_setup import setup_logger


def run_experiment(cfg: DictConfig) -> None:
    start_time = time.time()

    logger.info("=" * 80)
    logger.info("EvoDevo Evolution Experiment")
    logger.info("=" * 80)

    logger.info("Step 1/3: Initializing components...")
    codec = instantiate(cfg.codec)
    simulator = instantiate(cfg.simulator)
    fitness_function = instantiate(cfg.fitness_function)
    genetic_distance = instantiate(cfg.genetic_distance)
    engine_config = instantiate(cfg.engine)
    plan = build_plan(cfg.plan)
    logger.info(f"  Population size: {cfg.population_size}")
    logger.info(f"  Generations: {plan.total_generations}")

    logger.info("Step 2/3: Running selection plan...")
    result = evolve(
        None,
        cfg.population_size,
        cfg.development_steps,
        plan,
        fitness_function,
        genetic_distance,
        codec=codec,
        simulator=simulator,
        layout=codec.layout,
        config=engine_config,
    )

    logger.info("Step 3/3: Final population")
    order = result.fitness.argsort()
    if plan.maximize_fitness:
        order = order[::-1]
    for rank, slot in enumerate(order):
        logger.info(
            f"  #{rank:<3} slot={slot:<3} fitness={result.fitness[slot]:.4f} cells={result.bodies[slot].count}"
        )
    duration = time.time() - start_time
    logger.info(f"Total experiment duration: {duration:.2f} seconds")


@hydra.main(version_base=None, config_path="config", config_name="config")
def main(cfg: DictConfig) -> None:
    """Main entrypoint with Hydra configuration management."""
    log_file_path = setup_logger(
        run_name=cfg.logging.run_name,
        log_dir=cfg.logging.log_dir,
        level=cfg.logging.level,
        rotation=cfg.logging.rotation,
        retention=cfg.logging.retention,
    )
    logger.info(f"Log file: {log_file_path}")
    run_experiment(cfg)


if __name__ == "__main__":
    main()
