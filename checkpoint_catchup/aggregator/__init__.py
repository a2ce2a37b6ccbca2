from .state import ConvergenceState
from .aggregator import StateAggregator

__all__ = ["ConvergenceState", "StateAggregator"]
