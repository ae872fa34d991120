"""
ヒューリスティック関数

A*の探索順序と、ACOの距離ヒューリスティックに使用する推定関数です。
探索アルゴリズムには関数として注入するため、アルゴリズムを変更せずに差し替えられます。

【契約】
- (node, goal) -> 0以上のfloat
- A*の最適性のためには許容的（実際の残りコストを過大評価しない）である必要があります
  コストが座標間距離である場合、直線距離は許容的です
"""

from typing import Callable, Dict

from ..core.node import Waypoint

Heuristic = Callable[[Waypoint, Waypoint], float]


def euclidean_heuristic(node: Waypoint, goal: Waypoint) -> float:
    """直線距離による推定値"""
    return node.distance_to(goal)


def zero_heuristic(node: Waypoint, goal: Waypoint) -> float:
    """常に0を返す推定値（A*がDijkstra法と等価になる）"""
    return 0.0


HEURISTICS: Dict[str, Heuristic] = {
    "euclidean": euclidean_heuristic,
    "zero": zero_heuristic,
}


def get_heuristic(name: str) -> Heuristic:
    """
    名前からヒューリスティック関数を取得します。

    Args:
        name: "euclidean" または "zero"

    Raises:
        ValueError: 未知の名前が指定された場合
    """
    try:
        return HEURISTICS[name]
    except KeyError:
        raise ValueError(f"Unknown heuristic: {name}") from None
