"""
配送プランナー

ACO探索とA*探索を組み合わせて、配送ルート全体を計画します。
探索アルゴリズム自体は互いを呼び出さず、このプランナーが順序を管理します。

【処理の流れ】
1. 起点から各ゴールへ順番にACOで往路を探索（失敗時はmax_aco_attempts回まで再試行）
2. 全ゴールに到達したら、最後のゴールから起点へA*で帰路を探索
3. あるゴールへの経路がどうしても見つからない場合、残りのゴールは未配送として
   その時点の位置から帰路を探索する
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..config import AcoParams
from ..core.connection import Connection
from ..core.graph import WaypointGraph
from ..core.node import Waypoint
from .aco_search import AcoSearch
from .astar import AStarSearch
from .heuristic import Heuristic, euclidean_heuristic, get_heuristic

logger = logging.getLogger(__name__)


@dataclass
class DeliveryLeg:
    """往路の1区間（1つのゴールへの経路）"""

    goal: Waypoint
    path: List[Waypoint]
    distance: float
    attempts: int


@dataclass
class DeliveryPlan:
    """
    配送計画

    Attributes:
        origin: 起点
        legs: 往路の区間のリスト（到達できたゴールのみ）
        undelivered: 到達できなかったゴール（以降のゴールを含む）
        return_path: 帰路のコネクション列（見つからない場合はNone）
    """

    origin: Waypoint
    legs: List[DeliveryLeg] = field(default_factory=list)
    undelivered: List[Waypoint] = field(default_factory=list)
    return_path: Optional[List[Connection]] = None

    @property
    def completed(self) -> bool:
        return not self.undelivered and self.return_path is not None

    @property
    def outbound_distance(self) -> float:
        return sum(leg.distance for leg in self.legs)

    @property
    def return_distance(self) -> Optional[float]:
        if self.return_path is None:
            return None
        return WaypointGraph.path_cost(self.return_path)

    @property
    def total_distance(self) -> float:
        return self.outbound_distance + (self.return_distance or 0.0)


class DeliveryPlanner:
    """
    往路ACO・帰路A*の配送プランナー

    Attributes:
        graph (WaypointGraph): 共有するウェイポイントグラフ
        aco_search (AcoSearch): 往路の探索器（フェロモンはグラフ上で蓄積される）
        astar_search (AStarSearch): 帰路の探索器
        heuristic (Heuristic): 帰路A*のヒューリスティック
        max_aco_attempts (int): 1つのゴールに対するACOの最大試行回数
    """

    def __init__(
        self,
        graph: WaypointGraph,
        aco_search: AcoSearch,
        astar_search: Optional[AStarSearch] = None,
        heuristic: Heuristic = euclidean_heuristic,
        max_aco_attempts: int = 1,
    ):
        if max_aco_attempts <= 0:
            raise ValueError(f"max_aco_attempts must be positive, got {max_aco_attempts}")
        self.graph = graph
        self.aco_search = aco_search
        self.astar_search = astar_search or AStarSearch()
        self.heuristic = heuristic
        self.max_aco_attempts = max_aco_attempts

    @classmethod
    def from_config(cls, config: Dict, graph: WaypointGraph, rng=None) -> "DeliveryPlanner":
        """
        設定辞書のaco・deliveryセクションからプランナーを生成します。

        Args:
            config: 設定辞書
            graph: ウェイポイントグラフ
            rng: ACOに渡す乱数生成器
        """
        delivery = config.get("delivery", {})
        return cls(
            graph,
            AcoSearch(AcoParams.from_config(config), rng),
            heuristic=get_heuristic(delivery.get("heuristic", "euclidean")),
            max_aco_attempts=delivery.get("max_aco_attempts", 1),
        )

    def plan(self, origin: Waypoint, goals: Sequence[Waypoint]) -> DeliveryPlan:
        """
        配送ルートを計画します。

        Args:
            origin: 起点（帰路の目的地）
            goals: 訪問するゴールの列（この順序で訪問）

        Returns:
            配送計画
        """
        plan = DeliveryPlan(origin=origin)
        current = origin

        for index, goal in enumerate(goals):
            leg = self._plan_leg(current, goal)
            if leg is None:
                logger.warning(
                    "Could not find a path to goal %d/%d (%s); returning to %s",
                    index + 1,
                    len(goals),
                    goal.name,
                    origin.name,
                )
                plan.undelivered = list(goals[index:])
                break

            plan.legs.append(leg)
            current = goal
            logger.info(
                "Goal %d/%d (%s) reached: %d nodes, %.2f",
                index + 1,
                len(goals),
                goal.name,
                len(leg.path),
                leg.distance,
            )

        plan.return_path = self.astar_search.find_path(
            self.graph, current, origin, self.heuristic
        )
        if plan.return_path is None:
            logger.warning("No return path from %s to %s", current.name, origin.name)

        return plan

    def _plan_leg(self, start: Waypoint, goal: Waypoint) -> Optional[DeliveryLeg]:
        for attempt in range(1, self.max_aco_attempts + 1):
            path = self.aco_search.find_path(self.graph, start, goal)
            if path is not None:
                return DeliveryLeg(
                    goal=goal,
                    path=path,
                    distance=WaypointGraph.path_distance(path),
                    attempts=attempt,
                )
        return None
