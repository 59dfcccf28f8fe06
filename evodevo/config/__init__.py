from evodevo.config.helpers import build_plan

__all__ = ["build_plan"]
