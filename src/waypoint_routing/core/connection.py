"""
コネクション（有向エッジ）モジュール

2つのウェイポイントを結ぶ有向エッジを表現します。

【属性】
- コスト：A*が使用する静的な重み。省略時は端点間のユークリッド距離を
  初回参照時に計算してキャッシュします（以後は固定）
- フェロモン：ACOが更新する唯一の可変値。書き込みのたびに0以上に制限されます
"""

from typing import Optional

from .node import Waypoint

DEFAULT_PHEROMONE = 1.0


class Connection:
    """
    ウェイポイント間の有向エッジ

    Attributes:
        from_node (Waypoint): 始点
        to_node (Waypoint): 終点
        cost (float): 静的コスト（0以上）
        pheromone (float): フェロモン量（常に0以上）

    Example:
        >>> a = Waypoint("A", (0, 0, 0))
        >>> b = Waypoint("B", (3, 4, 0))
        >>> c = Connection(a, b)
        >>> c.cost
        5.0
        >>> c.pheromone = -1.0
        >>> c.pheromone
        0.0
    """

    def __init__(
        self,
        from_node: Waypoint,
        to_node: Waypoint,
        cost: Optional[float] = None,
        pheromone: float = DEFAULT_PHEROMONE,
    ):
        """
        Args:
            from_node: 始点ウェイポイント
            to_node: 終点ウェイポイント
            cost: 静的コスト。Noneの場合は初回参照時に端点間距離から計算
            pheromone: フェロモン初期値

        Raises:
            ValueError: 端点がNoneの場合、またはコストが負の場合
        """
        if from_node is None or to_node is None:
            raise ValueError("Connection endpoints must not be None")
        if cost is not None and cost < 0:
            raise ValueError(f"Connection cost must be non-negative, got {cost}")

        self.from_node = from_node
        self.to_node = to_node
        self._cost: Optional[float] = None if cost is None else float(cost)
        self._pheromone = 0.0
        self.pheromone = pheromone

    @property
    def cost(self) -> float:
        """
        静的コストを取得します。

        Note:
            明示的に与えられていない場合、最初の参照時点の座標から
            ユークリッド距離を計算し、以後はその値を使い続けます。
        """
        if self._cost is None:
            self._cost = self.from_node.distance_to(self.to_node)
        return self._cost

    @property
    def pheromone(self) -> float:
        return self._pheromone

    @pheromone.setter
    def pheromone(self, value: float) -> None:
        # 負のフェロモンは存在しない
        self._pheromone = max(0.0, float(value))

    def __repr__(self) -> str:
        cost = "lazy" if self._cost is None else f"{self._cost:.2f}"
        return (
            f"Connection({self.from_node.name} -> {self.to_node.name}, "
            f"cost={cost}, pheromone={self._pheromone:.4f})"
        )
