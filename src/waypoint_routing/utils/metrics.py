"""
評価指標モジュール

ACO探索の結果（最良経路長）を集計し、A*による最適解やフェロモン無効時の
ベースラインと比較するための指標を計算します。
"""

from typing import Dict, List, Optional, Sequence

import numpy as np

from ..core.graph import WaypointGraph
from ..core.node import Waypoint


class MetricsCalculator:
    """
    評価指標を計算するクラス

    - 経路長の統計量（平均・標準偏差・最小・最大）
    - 探索成功率
    - 最適解との差（optimality gap）
    - ベースラインに対する改善率
    """

    @staticmethod
    def path_lengths(paths: Sequence[Optional[List[Waypoint]]]) -> List[Optional[float]]:
        """
        経路のリストを幾何学的な経路長のリストに変換

        Args:
            paths: 経路のリスト（失敗した探索はNone）

        Returns:
            経路長のリスト（失敗した探索はNone）
        """
        return [
            None if path is None else WaypointGraph.path_distance(path)
            for path in paths
        ]

    @staticmethod
    def summarize(lengths: Sequence[Optional[float]]) -> Dict[str, float]:
        """
        経路長の統計量を計算（失敗した探索は除外）

        Returns:
            {"count", "mean", "std", "min", "max"} の辞書。
            成功した探索がない場合、count以外はnan
        """
        values = np.array([x for x in lengths if x is not None], dtype=float)
        if values.size == 0:
            return {
                "count": 0,
                "mean": float("nan"),
                "std": float("nan"),
                "min": float("nan"),
                "max": float("nan"),
            }
        return {
            "count": int(values.size),
            "mean": float(values.mean()),
            "std": float(values.std()),
            "min": float(values.min()),
            "max": float(values.max()),
        }

    @staticmethod
    def success_rate(results: Sequence[Optional[object]]) -> float:
        """探索結果のうちNoneでないものの割合（0.0 ~ 1.0）"""
        if not results:
            return 0.0
        return sum(1 for result in results if result is not None) / len(results)

    @staticmethod
    def optimality_gap(length: float, optimal_length: float) -> float:
        """
        最適解に対する相対的な超過（0.0なら最適）

        Raises:
            ValueError: optimal_lengthが負の場合
        """
        if optimal_length < 0:
            raise ValueError(f"optimal_length must be non-negative, got {optimal_length}")
        if optimal_length == 0:
            return 0.0 if length == 0 else float("inf")
        return (length - optimal_length) / optimal_length

    def improvement_over_baseline(
        self,
        reinforced: Sequence[Optional[float]],
        baseline: Sequence[Optional[float]],
    ) -> float:
        """
        ベースライン（フェロモン無効）に対する平均経路長の改善率

        Returns:
            (baseline_mean - reinforced_mean) / baseline_mean
            正の値ならフェロモンによる強化が経路を短くしている
        """
        reinforced_mean = self.summarize(reinforced)["mean"]
        baseline_mean = self.summarize(baseline)["mean"]
        if not baseline_mean > 0:
            return float("nan")
        return (baseline_mean - reinforced_mean) / baseline_mean

    @staticmethod
    def moving_average(values: Sequence[float], window: int = 5) -> List[float]:
        """収束曲線の平滑化用の移動平均（先頭は利用可能な分だけで平均）"""
        array = np.asarray(values, dtype=float)
        cumulative = np.cumsum(np.insert(array, 0, 0.0))
        result = []
        for i in range(1, array.size + 1):
            lo = max(0, i - window)
            result.append(float((cumulative[i] - cumulative[lo]) / (i - lo)))
        return result
