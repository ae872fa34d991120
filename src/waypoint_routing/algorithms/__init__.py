from .aco_search import AcoSearch
from .astar import AStarSearch
from .delivery_planner import DeliveryLeg, DeliveryPlan, DeliveryPlanner
from .heuristic import Heuristic, euclidean_heuristic, get_heuristic, zero_heuristic

__all__ = [
    "AcoSearch",
    "AStarSearch",
    "DeliveryPlanner",
    "DeliveryPlan",
    "DeliveryLeg",
    "Heuristic",
    "euclidean_heuristic",
    "zero_heuristic",
    "get_heuristic",
]
