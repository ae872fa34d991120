"""
アリ（Ant）クラス

ACOにおける仮想アリ（1回の確率的歩行）を表現するモジュール。

【アリの役割】
スタートノードからゴールノードへ向かって歩行し、
訪問済みノードと移動距離を記録する。

【主要機能】
1. 経路記憶（タブーリスト）：訪問済みノードを記録し、再訪問を防止
2. ステップ上限：最大ステップ数を超えた歩行は失敗として扱う
3. 移動距離：ノード座標間の幾何学的距離を累積（最良経路の比較に使用）
"""

from typing import List, Set

from .connection import Connection
from .node import Waypoint


class Ant:
    """
    ACOにおけるアリを表現するクラス

    Attributes:
        ant_id (int): アリの識別子
        start_node (Waypoint): 開始ノード
        destination_node (Waypoint): 目的地ノード
        current_node (Waypoint): 現在のノード
        max_steps (int): 最大ステップ数
        remaining_steps (int): 残りのステップ数
        route (List[Waypoint]): 歩行したノードの列
        visited (Set[Waypoint]): 訪問済みノードの集合（タブーリスト）
        travelled_distance (float): 幾何学的な累積移動距離

    Example:
        >>> ant = Ant(ant_id=0, start_node=a, destination_node=c, max_steps=200)
        >>> ant.move_to(connection_ab)
        >>> ant.has_reached_goal()
        False
    """

    def __init__(
        self,
        ant_id: int,
        start_node: Waypoint,
        destination_node: Waypoint,
        max_steps: int = 200,
    ):
        """
        Args:
            ant_id: アリの識別子（探索呼び出し内で一意）
            start_node: 開始ノード
            destination_node: 目的地ノード
            max_steps: 最大ステップ数。このステップ数を使い切ったアリは死亡します。
        """
        self.ant_id = ant_id
        self.start_node = start_node
        self.destination_node = destination_node
        self.current_node = start_node
        self.max_steps = max_steps
        self.remaining_steps = max_steps

        self.route: List[Waypoint] = [start_node]
        self.visited: Set[Waypoint] = {start_node}
        self.travelled_distance: float = 0.0

    def move_to(self, connection: Connection) -> None:
        """
        コネクションに沿って次のノードへ移動します。

        Args:
            connection: 現在のノードから出ていくコネクション

        Note:
            - 移動先はrouteとvisitedに追加されます
            - remaining_stepsが1減少します
            - 移動距離はコネクションのコストではなく座標間距離で累積します
        """
        next_node = connection.to_node
        self.travelled_distance += self.current_node.distance_to(next_node)
        self.route.append(next_node)
        self.visited.add(next_node)
        self.current_node = next_node
        self.remaining_steps -= 1

    def has_visited(self, node: Waypoint) -> bool:
        return node in self.visited

    def is_alive(self) -> bool:
        return self.remaining_steps > 0

    def has_reached_goal(self) -> bool:
        return self.current_node == self.destination_node

    @property
    def steps_taken(self) -> int:
        return self.max_steps - self.remaining_steps

    def __repr__(self) -> str:
        return (
            f"Ant(id={self.ant_id}, at={self.current_node.name}, "
            f"steps={self.steps_taken}/{self.max_steps})"
        )
