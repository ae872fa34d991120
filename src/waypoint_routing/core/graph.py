"""
グラフモジュール

NetworkXをベースとしたウェイポイントグラフの構築と管理を行います。
各エッジにConnectionインスタンスを持たせ、A*とACOの両方に必要な機能を提供します。

【主要機能】
1. トポロジ管理：ウェイポイントと有向コネクションの登録（削除操作はなし）
2. 隣接取得：ノードから出ていくコネクションを安定した順序で列挙
3. フェロモン管理：付加・揮発・初期化（フェロモンを書き換える唯一の窓口）
4. 距離計算：経路の幾何学的距離、最寄りウェイポイントの探索
5. 設定からの構築：config.yamlのgraphセクションからグラフを生成
"""

import logging
import math
from typing import Dict, Iterator, List, Optional, Sequence

import networkx as nx

from .connection import DEFAULT_PHEROMONE, Connection
from .node import Position, Waypoint, as_position

logger = logging.getLogger(__name__)


class WaypointGraph:
    """
    経路探索用のグラフクラス（NetworkXラッパー）

    NetworkXのMultiDiGraphをラップし、各エッジの"connection"属性に
    Connectionオブジェクトを保持します。同じノード対に複数のコネクションを
    張ることもできます。

    Attributes:
        default_pheromone (float): 新規コネクションとリセット時のフェロモン初期値
        graph (nx.MultiDiGraph): NetworkXの有向マルチグラフ

    Example:
        >>> graph = WaypointGraph()
        >>> a, b = Waypoint("A", (0, 0, 0)), Waypoint("B", (1, 0, 0))
        >>> graph.connect(a, b)
        Connection(A -> B, cost=lazy, pheromone=1.0000)
        >>> [c.to_node.name for c in graph.get_connections(a)]
        ['B']
    """

    def __init__(self, default_pheromone: float = DEFAULT_PHEROMONE):
        """
        Args:
            default_pheromone: フェロモン初期値（0以上）

        Raises:
            ValueError: default_pheromoneが負の場合
        """
        if default_pheromone < 0:
            raise ValueError(
                f"default_pheromone must be non-negative, got {default_pheromone}"
            )
        self.default_pheromone = default_pheromone
        self.graph = nx.MultiDiGraph()

    # ---- トポロジ ---------------------------------------------------------

    def add_waypoint(self, waypoint: Waypoint) -> None:
        """
        ウェイポイントを登録します（出ていくコネクションがなくても探索対象になります）。

        Raises:
            ValueError: waypointがNoneの場合
        """
        if waypoint is None:
            raise ValueError("Waypoint must not be None")
        self.graph.add_node(waypoint)

    def add_connection(self, connection: Connection) -> Connection:
        """
        コネクションを始点の隣接リストの末尾に追加します。

        Args:
            connection: 追加するコネクション（両端点は自動的に登録されます）

        Returns:
            追加したコネクション
        """
        self.graph.add_edge(
            connection.from_node, connection.to_node, connection=connection
        )
        return connection

    def connect(
        self,
        from_node: Waypoint,
        to_node: Waypoint,
        cost: Optional[float] = None,
        bidirectional: bool = False,
    ) -> Connection:
        """
        フェロモン初期値を設定したコネクションを生成して追加します。

        Args:
            from_node: 始点
            to_node: 終点
            cost: 静的コスト（Noneなら端点間距離）
            bidirectional: Trueの場合、逆向きのコネクションも追加

        Returns:
            from_node -> to_node のコネクション
        """
        connection = self.add_connection(
            Connection(from_node, to_node, cost, self.default_pheromone)
        )
        if bidirectional:
            self.add_connection(
                Connection(to_node, from_node, cost, self.default_pheromone)
            )
        return connection

    def get_connections(self, node: Waypoint) -> List[Connection]:
        """
        ノードから出ていくコネクションを取得します。

        Args:
            node: ウェイポイント

        Returns:
            コネクションのリスト（行き止まりの場合は空リスト）

        Raises:
            nx.NodeNotFound: ノードがグラフに存在しない場合（Noneを含む）

        Note:
            列挙順序は追加順に基づき、探索中に変化しません。
            乱数シードを固定した場合の再現性はこの順序に依存します。
        """
        self.require_waypoint(node)
        return [
            data["connection"]
            for _, _, data in self.graph.out_edges(node, data=True)
        ]

    def connections(self) -> Iterator[Connection]:
        """全コネクションを列挙します。"""
        for _, _, data in self.graph.edges(data=True):
            yield data["connection"]

    @property
    def waypoints(self) -> List[Waypoint]:
        return list(self.graph.nodes())

    def find_waypoint(self, name: str) -> Waypoint:
        """
        名前でウェイポイントを検索します。

        Raises:
            KeyError: 該当するウェイポイントがない場合
        """
        for waypoint in self.graph.nodes():
            if waypoint.name == name:
                return waypoint
        raise KeyError(f"Unknown waypoint: {name}")

    def require_waypoint(self, node: Waypoint) -> None:
        """
        ノードがグラフに登録されていることを確認します。

        Raises:
            nx.NodeNotFound: ノードが存在しない場合（Noneを含む）
        """
        if node is None or node not in self.graph:
            raise nx.NodeNotFound(f"Waypoint {node} not in graph")

    # ---- フェロモン --------------------------------------------------------

    def deposit_pheromone(self, connection: Connection, amount: float) -> None:
        """
        コネクションにフェロモンを付加します。

        Args:
            connection: 対象のコネクション
            amount: 付加量（結果は0以上に制限されます）
        """
        connection.pheromone = connection.pheromone + amount

    def evaporate_pheromone(
        self, evaporation_rate: float, min_pheromone: float = 0.0
    ) -> None:
        """
        全コネクションのフェロモンを揮発させます。

        Args:
            evaporation_rate: 揮発率（0.0 ~ 1.0）。1.0に近いほど揮発が激しくなります
            min_pheromone: フェロモンの下限値

        Note:
            - 各コネクションのフェロモン値が (1 - evaporation_rate) 倍されます
            - フェロモン値はmin_pheromoneを下回らないように制限されます
        """
        for connection in self.connections():
            evaporated = connection.pheromone * (1.0 - evaporation_rate)
            connection.pheromone = max(evaporated, min_pheromone)

    def reset_pheromone(self, value: Optional[float] = None) -> None:
        """
        全コネクションのフェロモンを初期値に戻します。

        Args:
            value: 設定する値（Noneの場合はdefault_pheromone）
        """
        value = self.default_pheromone if value is None else value
        for connection in self.connections():
            connection.pheromone = value

    def pheromone_snapshot(self) -> Dict[Connection, float]:
        """全コネクションのフェロモン値を辞書で取得します（分析・テスト用）。"""
        return {connection: connection.pheromone for connection in self.connections()}

    # ---- 距離 --------------------------------------------------------------

    def nearest_waypoint(self, position: Sequence[float]) -> Optional[Waypoint]:
        """
        指定座標に最も近いウェイポイントを取得します。

        Args:
            position: 座標（2要素または3要素）

        Returns:
            最寄りのウェイポイント（グラフが空の場合はNone）
        """
        target: Position = as_position(position)
        nearest = None
        min_distance = math.inf
        for waypoint in self.graph.nodes():
            distance = math.dist(waypoint.position, target)
            if distance < min_distance:
                min_distance = distance
                nearest = waypoint
        return nearest

    @staticmethod
    def path_distance(path: Sequence[Waypoint]) -> float:
        """
        ノード列の幾何学的な累積距離を計算します。

        Args:
            path: ウェイポイントのリスト

        Returns:
            連続するウェイポイント間のユークリッド距離の合計
        """
        return sum(a.distance_to(b) for a, b in zip(path[:-1], path[1:]))

    @staticmethod
    def path_cost(connections: Sequence[Connection]) -> float:
        """コネクション列の静的コストの合計を計算します。"""
        return sum(connection.cost for connection in connections)

    @staticmethod
    def path_nodes(start: Waypoint, connections: Sequence[Connection]) -> List[Waypoint]:
        """
        コネクション列をノード列に変換します。

        Args:
            start: 開始ノード（空のコネクション列でも経路の先頭になる）
            connections: start から連続するコネクションの列

        Returns:
            [start, connections[0].to_node, ...]

        Note:
            A*の経路（コネクション列）とACOの経路（ノード列）を
            path_distanceで同じ尺度の長さとして比較するために使用します。
        """
        return [start] + [connection.to_node for connection in connections]

    # ---- 構築 --------------------------------------------------------------

    @classmethod
    def from_config(cls, config: Dict) -> "WaypointGraph":
        """
        設定辞書のgraphセクションからグラフを構築します。

        Args:
            config: 設定辞書（config.yamlから読み込んだもの）

        Returns:
            構築されたグラフ

        Raises:
            KeyError: コネクションが未定義のウェイポイントを参照した場合

        Note:
            コネクションは以下のどちらの形式でも記述できます:
            - [from, to]
            - {from: A, to: B, cost: 5.0, bidirectional: true}
        """
        graph_config = config["graph"]
        graph = cls(graph_config.get("default_pheromone", DEFAULT_PHEROMONE))
        default_bidirectional = graph_config.get("bidirectional", False)

        by_name: Dict[str, Waypoint] = {}
        for entry in graph_config["waypoints"]:
            waypoint = Waypoint(entry["name"], entry.get("position", (0.0, 0.0, 0.0)))
            by_name[waypoint.name] = waypoint
            graph.add_waypoint(waypoint)

        for entry in graph_config.get("connections", []):
            if isinstance(entry, dict):
                from_name, to_name = entry["from"], entry["to"]
                cost = entry.get("cost")
                bidirectional = entry.get("bidirectional", default_bidirectional)
            else:
                from_name, to_name = entry
                cost = None
                bidirectional = default_bidirectional

            if from_name not in by_name or to_name not in by_name:
                raise KeyError(f"Connection {from_name} -> {to_name} refers to an unknown waypoint")
            graph.connect(by_name[from_name], by_name[to_name], cost, bidirectional)

        logger.info("Graph initialized: %r", graph)
        return graph

    def __contains__(self, node: Waypoint) -> bool:
        return node in self.graph

    def __len__(self) -> int:
        return self.graph.number_of_nodes()

    def __repr__(self) -> str:
        return (
            f"WaypointGraph(nodes={self.graph.number_of_nodes()}, "
            f"connections={self.graph.number_of_edges()})"
        )
