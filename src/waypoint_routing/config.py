"""
設定モジュール

config.yamlの読み込みと、ACOパラメータの型付きビューを提供します。

【設定ファイルのセクション】
- experiment: 実験名、乱数シード、試行回数
- graph: ウェイポイント、コネクション、フェロモン初期値
- aco: ACOパラメータ（AcoParams）
- delivery: 配送の起点・ゴール列・再試行回数・帰路のヒューリスティック
- output: 結果の出力先
- logging: ログレベル
"""

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Union

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "config.yaml"


def load_config(config_path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> Dict:
    """
    設定ファイルを読み込む

    Args:
        config_path: 設定ファイルのパス

    Returns:
        設定辞書
    """
    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f)
    return config


@dataclass(frozen=True)
class AcoParams:
    """
    ACOのパラメータ

    Attributes:
        alpha: フェロモンの重み
        beta: 距離ヒューリスティックの重み
        deposit_q: 選択したコネクションに付加するフェロモン量
        evaporation_rate: 揮発率（0.0 ~ 1.0）
        ants_per_search: 1回の探索で歩かせるアリの数
        min_pheromone: 揮発後のフェロモン下限値
        max_walk_steps: 1匹のアリの最大ステップ数
        distance_epsilon: ゴールまでの距離が0の場合の代替値

    Raises:
        ValueError: パラメータが許容範囲外の場合
    """

    alpha: float = 1.0
    beta: float = 0.0001
    deposit_q: float = 0.0006
    evaporation_rate: float = 0.1
    ants_per_search: int = 50
    min_pheromone: float = 0.01
    max_walk_steps: int = 200
    distance_epsilon: float = 0.001

    def __post_init__(self):
        if self.alpha < 0 or self.beta < 0:
            raise ValueError("alpha and beta must be non-negative")
        if self.deposit_q < 0:
            raise ValueError(f"deposit_q must be non-negative, got {self.deposit_q}")
        if not 0.0 <= self.evaporation_rate <= 1.0:
            raise ValueError(
                f"evaporation_rate must be in [0, 1], got {self.evaporation_rate}"
            )
        if self.ants_per_search <= 0:
            raise ValueError(
                f"ants_per_search must be positive, got {self.ants_per_search}"
            )
        if self.min_pheromone < 0:
            raise ValueError(
                f"min_pheromone must be non-negative, got {self.min_pheromone}"
            )
        if self.max_walk_steps <= 0:
            raise ValueError(
                f"max_walk_steps must be positive, got {self.max_walk_steps}"
            )
        if self.distance_epsilon <= 0:
            raise ValueError(
                f"distance_epsilon must be positive, got {self.distance_epsilon}"
            )

    @classmethod
    def from_config(cls, config: Dict) -> "AcoParams":
        """
        設定辞書のacoセクションからパラメータを生成します。

        Note:
            省略されたキーはデフォルト値を使用します。
        """
        aco_config = config.get("aco", {})
        defaults = asdict(cls())
        return cls(**{key: aco_config.get(key, value) for key, value in defaults.items()})

    def with_changes(self, **changes) -> "AcoParams":
        """一部のパラメータを変更したコピーを返します（比較実験用）。"""
        values = asdict(self)
        values.update(changes)
        return AcoParams(**values)
