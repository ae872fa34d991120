"""
探索レコードモジュール

A*のオープンリスト・クローズドリストに格納する探索レコードと、
その集合（PathfindingList）を提供します。

【PathfindingList】
- ノードをキーとする挿入順の辞書
- smallest(): 推定総コストが最小のレコードを取得
  同値の場合は挿入順で最初に見つかったものを返す（結果の経路を決定的にするため）
- レコードをその場で更新しても挿入順は変わらない
"""

from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from .connection import Connection
from .node import Waypoint


@dataclass(eq=False)
class SearchRecord:
    """
    A*の探索レコード

    Attributes:
        node: 対象ノード
        connection: このノードに到達したコネクション（開始ノードはNone）
        cost_so_far: 開始ノードからの確定コスト
        estimated_total: cost_so_far + ヒューリスティック推定値
    """

    node: Waypoint
    connection: Optional[Connection] = None
    cost_so_far: float = 0.0
    estimated_total: float = 0.0

    @property
    def heuristic_remainder(self) -> float:
        return self.estimated_total - self.cost_so_far


class PathfindingList:
    """ノード→探索レコードの集合（オープンリスト・クローズドリスト共通）"""

    def __init__(self):
        self._records: Dict[Waypoint, SearchRecord] = {}

    def add(self, record: SearchRecord) -> None:
        self._records[record.node] = record

    def remove(self, record: SearchRecord) -> None:
        del self._records[record.node]

    def contains(self, node: Waypoint) -> bool:
        return node in self._records

    def find(self, node: Waypoint) -> Optional[SearchRecord]:
        return self._records.get(node)

    def smallest(self) -> SearchRecord:
        """
        推定総コストが最小のレコードを取得します。

        Returns:
            最小のレコード（同値なら挿入順で先のもの）

        Raises:
            IndexError: リストが空の場合
        """
        if not self._records:
            raise IndexError("smallest() on an empty PathfindingList")
        # minは同値の要素のうち最初のものを返す
        return min(self._records.values(), key=lambda record: record.estimated_total)

    def __contains__(self, node: Waypoint) -> bool:
        return self.contains(node)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[SearchRecord]:
        return iter(list(self._records.values()))
