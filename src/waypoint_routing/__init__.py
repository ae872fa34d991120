"""
Waypoint Routing Package

ウェイポイントグラフ上の経路探索パッケージ
- 往路：フェロモンで誘導される確率的探索（ACO）
- 帰路：決定的な最適探索（A*）
"""

__version__ = "1.0.0"

from .algorithms.aco_search import AcoSearch
from .algorithms.astar import AStarSearch
from .algorithms.delivery_planner import DeliveryPlan, DeliveryPlanner
from .algorithms.heuristic import euclidean_heuristic, zero_heuristic
from .config import AcoParams, load_config
from .core.connection import Connection
from .core.graph import WaypointGraph
from .core.node import Waypoint
from .core.records import PathfindingList, SearchRecord
from .modules.pheromone import PheromoneEvaporator, PheromoneUpdater
from .utils.metrics import MetricsCalculator

__all__ = [
    "AcoSearch",
    "AStarSearch",
    "DeliveryPlanner",
    "DeliveryPlan",
    "AcoParams",
    "load_config",
    "Connection",
    "WaypointGraph",
    "Waypoint",
    "PathfindingList",
    "SearchRecord",
    "PheromoneUpdater",
    "PheromoneEvaporator",
    "MetricsCalculator",
    "euclidean_heuristic",
    "zero_heuristic",
]
