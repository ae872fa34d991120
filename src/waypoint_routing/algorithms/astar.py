"""
A*探索モジュール

帰路に使用する決定的な最良優先探索です。
2ノード間の最小コスト経路（コネクションの列）を求めます。

【アルゴリズム概要】
1. 開始ノードのレコードをオープンリストに追加
2. オープンリストから推定総コスト最小のレコードを取り出す（ゴールなら終了）
3. 出ていく各コネクションについて、より安いコストで到達できる場合のみレコードを更新
   - クローズドリストにあれば取り出して再オープン（ヒューリスティック残差を再利用）
   - オープンリストにあればヒューリスティック残差を再利用して更新
   - 未発見ならヒューリスティックを新たに計算
4. 取り出したレコードをクローズドリストへ移動
5. オープンリストが空になったら経路なし（None）

フェロモンは読み書きしないため、同じグラフを複数の呼び出し元から並行して使えます。
"""

import logging
from typing import List, Optional

from ..core.connection import Connection
from ..core.graph import WaypointGraph
from ..core.node import Waypoint
from ..core.records import PathfindingList, SearchRecord
from .heuristic import Heuristic, euclidean_heuristic

logger = logging.getLogger(__name__)


class AStarSearch:
    """
    A*探索

    Attributes:
        last_expanded (int): 直前の探索で展開したノード数（分析用）
    """

    def __init__(self):
        self.last_expanded = 0

    def find_path(
        self,
        graph: WaypointGraph,
        start: Waypoint,
        goal: Waypoint,
        heuristic: Heuristic = euclidean_heuristic,
    ) -> Optional[List[Connection]]:
        """
        startからgoalへの最小コスト経路を探索します。

        Args:
            graph: ウェイポイントグラフ
            start: 開始ノード
            goal: 目的地ノード
            heuristic: 推定関数 (node, goal) -> 0以上のfloat

        Returns:
            start→goal順のコネクションのリスト。経路がない場合はNone
            （start == goal の場合は空リスト）

        Raises:
            nx.NodeNotFound: startまたはgoalがグラフに存在しない場合
            ValueError: ヒューリスティックが負の値を返した場合
        """
        graph.require_waypoint(start)
        graph.require_waypoint(goal)
        self.last_expanded = 0

        logger.debug("[A*] Starting pathfinding from %s to %s", start.name, goal.name)

        open_list = PathfindingList()
        closed_list = PathfindingList()
        open_list.add(
            SearchRecord(
                node=start,
                connection=None,
                cost_so_far=0.0,
                estimated_total=self._estimate(heuristic, start, goal),
            )
        )

        current = None
        while len(open_list) > 0:
            current = open_list.smallest()

            if current.node == goal:
                break

            for connection in graph.get_connections(current.node):
                end_node = connection.to_node
                end_node_cost = current.cost_so_far + connection.cost

                end_record = closed_list.find(end_node)
                if end_record is not None:
                    if end_record.cost_so_far <= end_node_cost:
                        continue
                    # より安い経路が見つかったので再オープン
                    closed_list.remove(end_record)
                    end_node_heuristic = end_record.heuristic_remainder
                    logger.debug("[A*] Reopening node %s", end_node.name)
                elif end_node in open_list:
                    end_record = open_list.find(end_node)
                    if end_record.cost_so_far <= end_node_cost:
                        continue
                    end_node_heuristic = end_record.heuristic_remainder
                else:
                    end_record = SearchRecord(node=end_node)
                    end_node_heuristic = self._estimate(heuristic, end_node, goal)

                end_record.cost_so_far = end_node_cost
                end_record.connection = connection
                end_record.estimated_total = end_node_cost + end_node_heuristic

                if end_node not in open_list:
                    open_list.add(end_record)

            open_list.remove(current)
            closed_list.add(current)
            self.last_expanded += 1

        if current is None or current.node != goal:
            logger.warning("[A*] No path found from %s to %s", start.name, goal.name)
            return None

        # 経路を再構築（ゴールからクローズドリストを逆にたどる）
        # 再オープン後に未展開のノードはオープンリスト側にある
        path: List[Connection] = []
        while current.node != start:
            path.append(current.connection)
            previous = current.connection.from_node
            current = closed_list.find(previous) or open_list.find(previous)
        path.reverse()

        logger.debug(
            "[A*] Path found: %d connections, cost=%.2f",
            len(path),
            WaypointGraph.path_cost(path),
        )
        return path

    @staticmethod
    def _estimate(heuristic: Heuristic, node: Waypoint, goal: Waypoint) -> float:
        estimate = heuristic(node, goal)
        if estimate < 0:
            raise ValueError(
                f"Heuristic returned a negative estimate for {node.name}: {estimate}"
            )
        return estimate
