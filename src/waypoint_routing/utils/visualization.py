"""
可視化モジュール

ACO探索の収束推移やフェロモン分布をグラフとして保存します（分析用）。
"""

from pathlib import Path
from typing import Dict, List, Optional

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from ..core.graph import WaypointGraph  # noqa: E402


class Visualizer:
    """可視化を行うクラス"""

    def __init__(self, output_dir: Path):
        """
        Args:
            output_dir: 出力ディレクトリ
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def plot_convergence(
        self,
        series: Dict[str, List[Optional[float]]],
        filename: str = "convergence.png",
        ylabel: str = "Best path length",
    ) -> Path:
        """
        探索回ごとの最良経路長の推移

        Args:
            series: ラベル→探索回ごとの値（失敗した探索はNone）
            filename: 保存するファイル名
            ylabel: 縦軸ラベル

        Returns:
            保存したファイルのパス
        """
        fig, ax = plt.subplots(figsize=(10, 6))

        for label, values in series.items():
            xs = [i + 1 for i, v in enumerate(values) if v is not None]
            ys = [v for v in values if v is not None]
            ax.plot(xs, ys, marker="o", markersize=3, label=label)

        ax.set_xlabel("Search call", fontsize=12)
        ax.set_ylabel(ylabel, fontsize=12)
        ax.legend()
        ax.grid(True, alpha=0.3)

        output_path = self.output_dir / filename
        plt.tight_layout()
        plt.savefig(output_path, dpi=150)
        plt.close(fig)
        print(f"Saved: {output_path}")
        return output_path

    def plot_pheromone_distribution(
        self, graph: WaypointGraph, filename: str = "pheromone.png"
    ) -> Path:
        """
        コネクションごとのフェロモン量の棒グラフ

        Args:
            graph: ウェイポイントグラフ
            filename: 保存するファイル名

        Returns:
            保存したファイルのパス
        """
        connections = list(graph.connections())
        labels = [f"{c.from_node.name}->{c.to_node.name}" for c in connections]
        values = [c.pheromone for c in connections]

        fig, ax = plt.subplots(figsize=(max(6, len(labels) * 0.4), 6))
        ax.bar(range(len(values)), values, color="purple", alpha=0.7)
        ax.set_xticks(range(len(labels)))
        ax.set_xticklabels(labels, rotation=90, fontsize=8)
        ax.set_ylabel("Pheromone", fontsize=12)
        ax.grid(True, axis="y", alpha=0.3)

        output_path = self.output_dir / filename
        plt.tight_layout()
        plt.savefig(output_path, dpi=150)
        plt.close(fig)
        print(f"Saved: {output_path}")
        return output_path
