"""
ACO探索モジュール

往路（配送）に使用する確率的な経路探索です。

【アルゴリズム概要】
1. 1回の探索でants_per_search匹のアリを順番に歩かせる
2. 各アリは未訪問のノードへ向かうコネクションから、
   フェロモン×距離ヒューリスティックに比例した確率で次の移動先を選ぶ
3. 選択したコネクションには即座にフェロモンを付加（オンライン更新）
4. ゴールに到達したアリのうち、幾何学的な移動距離が最短の経路を採用
5. 全てのアリが歩き終えた後に、全コネクションのフェロモンを1度だけ揮発

【選択重み】
    weight = pheromone^alpha * (1 / dist(next, goal))^beta
    dist が0以下の場合は distance_epsilon を使用し、重みが0以下または有限でない（オーバーフローを含む）コネクションは候補から除外

【失敗】
- 行き止まり（未訪問の候補がない）、ステップ上限到達はそのアリの失敗
- 全てのアリが失敗した場合はNone（揮発は行われる）。
  フェロモンと乱数の状態が変わるため、呼び出し側は再試行できる
"""

import logging
import math
import random
from collections import deque
from typing import Deque, Dict, List, Optional, Tuple

from ..config import AcoParams
from ..core.ant import Ant
from ..core.connection import Connection
from ..core.graph import WaypointGraph
from ..core.node import Waypoint
from ..modules.pheromone import PheromoneEvaporator, PheromoneUpdater
from .heuristic import Heuristic, euclidean_heuristic

logger = logging.getLogger(__name__)


class AcoSearch:
    """
    ACO探索

    グラフのフェロモン（トレイル）は呼び出しをまたいで保持され、
    探索のたびに付加・揮発によって変化します。

    Attributes:
        params (AcoParams): ACOパラメータ
        rng (random.Random): 乱数生成器（シード固定で再現可能）
        distance (Heuristic): ゴールまでの距離の推定関数
        pheromone_updater (PheromoneUpdater): フェロモン付加ロジック
        pheromone_evaporator (PheromoneEvaporator): フェロモン揮発ロジック
        history (Deque[Dict]): 直近の探索呼び出しの要約（古いものから破棄）
    """

    def __init__(
        self,
        params: Optional[AcoParams] = None,
        rng: Optional[random.Random] = None,
        distance: Heuristic = euclidean_heuristic,
        history_limit: int = 1000,
    ):
        """
        Args:
            params: ACOパラメータ（Noneの場合はデフォルト値）
            rng: 乱数生成器（Noneの場合はシードなしで生成）
            distance: 選択重みに使う (node, goal) -> 距離 の関数
            history_limit: historyに保持する要約の最大件数

        Raises:
            ValueError: history_limitが正でない場合
        """
        if history_limit <= 0:
            raise ValueError(f"history_limit must be positive, got {history_limit}")
        self.params = params or AcoParams()
        self.rng = rng or random.Random()
        self.distance = distance
        self.pheromone_updater = PheromoneUpdater(self.params)
        self.pheromone_evaporator = PheromoneEvaporator(self.params)
        self.history: Deque[Dict] = deque(maxlen=history_limit)

    def find_path(
        self, graph: WaypointGraph, start: Waypoint, goal: Waypoint
    ) -> Optional[List[Waypoint]]:
        """
        startからgoalへの経路をACOで探索します。

        Args:
            graph: ウェイポイントグラフ
            start: 開始ノード
            goal: 目的地ノード

        Returns:
            最短の経路（ウェイポイントのリスト）。どのアリも到達できなかった場合はNone

        Raises:
            nx.NodeNotFound: startまたはgoalがグラフに存在しない場合
        """
        graph.require_waypoint(start)
        graph.require_waypoint(goal)

        best_path: Optional[List[Waypoint]] = None
        shortest_distance = math.inf
        successful_ants = 0

        for ant_id in range(self.params.ants_per_search):
            ant = self._walk(graph, start, goal, ant_id)
            if not ant.has_reached_goal():
                continue

            successful_ants += 1
            # 選択重みではなく実際の移動距離で比較
            if ant.travelled_distance < shortest_distance:
                shortest_distance = ant.travelled_distance
                best_path = list(ant.route)

        # 全てのアリが歩き終えた後に1度だけ揮発
        self.pheromone_evaporator.evaporate(graph)

        self.history.append(
            {
                "start": start.name,
                "goal": goal.name,
                "successful_ants": successful_ants,
                "best_distance": shortest_distance if best_path else None,
            }
        )

        if best_path is None:
            logger.warning(
                "[ACO] Search failed: no ant reached %s from %s (%d ants)",
                goal.name,
                start.name,
                self.params.ants_per_search,
            )
            return None

        logger.info(
            "[ACO] Search complete: %s -> %s, shortest=%.2f (%d nodes, %d/%d ants)",
            start.name,
            goal.name,
            shortest_distance,
            len(best_path),
            successful_ants,
            self.params.ants_per_search,
        )
        return best_path

    def walk_once(
        self, graph: WaypointGraph, start: Waypoint, goal: Waypoint
    ) -> List[Waypoint]:
        """
        1匹のアリを歩かせます（フェロモンは付加されますが、揮発は行いません）。

        Returns:
            ゴールに到達した場合はその経路、失敗した場合は空リスト
        """
        graph.require_waypoint(start)
        graph.require_waypoint(goal)
        ant = self._walk(graph, start, goal, ant_id=0)
        return list(ant.route) if ant.has_reached_goal() else []

    def _walk(
        self, graph: WaypointGraph, start: Waypoint, goal: Waypoint, ant_id: int
    ) -> Ant:
        ant = Ant(ant_id, start, goal, self.params.max_walk_steps)

        while not ant.has_reached_goal() and ant.is_alive():
            candidates, weights = self._candidates(graph, ant, goal)
            if not candidates:
                logger.debug("[ACO] %r stuck at a dead end", ant)
                break

            connection = self._select(candidates, weights)
            self.pheromone_updater.deposit(graph, connection)
            ant.move_to(connection)

        return ant

    def _candidates(
        self, graph: WaypointGraph, ant: Ant, goal: Waypoint
    ) -> Tuple[List[Connection], List[float]]:
        """
        未訪問ノードへ向かうコネクションと、その選択重みを列挙

        Returns:
            (候補コネクションのリスト, 重みのリスト)
        """
        alpha, beta = self.params.alpha, self.params.beta
        candidates: List[Connection] = []
        weights: List[float] = []

        for connection in graph.get_connections(ant.current_node):
            if ant.has_visited(connection.to_node):
                continue

            dist_to_goal = self.distance(connection.to_node, goal)
            if dist_to_goal <= 0:
                dist_to_goal = self.params.distance_epsilon

            try:
                weight = (connection.pheromone**alpha) * ((1.0 / dist_to_goal) ** beta)
            except OverflowError:
                # floatの累乗はinfを返さず例外になる
                weight = math.inf
            if weight <= 0 or not math.isfinite(weight):
                continue

            candidates.append(connection)
            weights.append(weight)

        return candidates, weights

    def _select(self, candidates: List[Connection], weights: List[float]) -> Connection:
        """
        ルーレット選択

        [0, 重みの合計) から一様に値を引き、重みを列挙順に累積して
        初めて累積値が引いた値以上になった候補を選ぶ
        """
        draw = self.rng.random() * sum(weights)
        cumulative = 0.0
        for connection, weight in zip(candidates, weights):
            cumulative += weight
            if draw <= cumulative:
                return connection
        # 浮動小数点の丸め誤差で累積値が届かなかった場合
        return candidates[-1]
