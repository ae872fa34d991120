"""
フェロモン更新・揮発ロジック

【フェロモン付加（オンライン）】
アリがコネクションを選択した直後に、そのコネクションへ一定量Qを付加します。
付加は歩行中に行われるため、同じ探索の後続のアリの選択に影響します。

【フェロモン揮発（バッチ）】
1回の探索で全てのアリが歩き終えた後に、全コネクションを1度だけ揮発させます。
揮発の速さはアリの数に依存しません。

どちらもWaypointGraphの書き込み操作を経由し、グラフ以外からフェロモンを直接書き換えません。
"""

from ..config import AcoParams
from ..core.connection import Connection
from ..core.graph import WaypointGraph


class PheromoneUpdater:
    """
    フェロモン付加を管理するクラス

    Attributes:
        deposit_q (float): 1回の選択で付加するフェロモン量
    """

    def __init__(self, params: AcoParams):
        self.deposit_q = params.deposit_q

    def deposit(self, graph: WaypointGraph, connection: Connection) -> None:
        """
        アリが選択したコネクションにフェロモンを付加

        Args:
            graph: ウェイポイントグラフ
            connection: アリが選択したコネクション
        """
        graph.deposit_pheromone(connection, self.deposit_q)


class PheromoneEvaporator:
    """
    フェロモン揮発を管理するクラス

    Attributes:
        evaporation_rate (float): 揮発率
        min_pheromone (float): 揮発後の下限値
    """

    def __init__(self, params: AcoParams):
        self.evaporation_rate = params.evaporation_rate
        self.min_pheromone = params.min_pheromone

    def evaporate(self, graph: WaypointGraph) -> None:
        """
        全コネクションのフェロモンを揮発

        Note:
            pheromone = max(pheromone * (1 - evaporation_rate), min_pheromone)
            evaporation_rate = 0 の場合、下限値以上のフェロモンは変化しません。
        """
        graph.evaporate_pheromone(self.evaporation_rate, self.min_pheromone)
