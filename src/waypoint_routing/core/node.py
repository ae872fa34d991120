"""
ウェイポイント（ノード）モジュール

経路探索グラフ上の地点を表現します。
各ウェイポイントは3次元座標を持ち、距離計算とヒューリスティックにのみ使用されます。

【同一性】
- 等価比較とハッシュはオブジェクトの同一性に基づきます
- 名前や座標が同じでも、別のウェイポイントは等しくなりません
"""

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

Position = Tuple[float, float, float]


def as_position(values: Sequence[float]) -> Position:
    """
    座標列を3次元座標のタプルに変換します。

    Args:
        values: 2要素または3要素の座標列（2要素の場合 z=0.0）

    Returns:
        (x, y, z) のタプル

    Raises:
        ValueError: 要素数が2でも3でもない場合
    """
    coords = [float(v) for v in values]
    if len(coords) == 2:
        coords.append(0.0)
    if len(coords) != 3:
        raise ValueError(f"Position must have 2 or 3 coordinates, got {len(coords)}")
    return (coords[0], coords[1], coords[2])


@dataclass(eq=False)
class Waypoint:
    """
    経路探索グラフのノード

    Attributes:
        name (str): 表示用の名前（ログ・設定ファイルでの参照に使用）
        position (Position): 3次元座標

    Example:
        >>> a = Waypoint("A", (0.0, 0.0, 0.0))
        >>> b = Waypoint("B", (3.0, 4.0, 0.0))
        >>> a.distance_to(b)
        5.0
    """

    name: str
    position: Position = (0.0, 0.0, 0.0)

    def __post_init__(self):
        self.position = as_position(self.position)

    def distance_to(self, other: "Waypoint") -> float:
        """
        他のウェイポイントとのユークリッド距離を計算します。

        Args:
            other: 距離を測る相手のウェイポイント

        Returns:
            ユークリッド距離
        """
        return math.dist(self.position, other.position)

    def __repr__(self) -> str:
        x, y, z = self.position
        return f"Waypoint({self.name}, pos=({x:.2f}, {y:.2f}, {z:.2f}))"
