"""
ACO探索のテスト

乱数シードを固定し、確率的な性質は複数回の試行で検証します。
"""

import random

import networkx as nx
import pytest

from waypoint_routing.algorithms.aco_search import AcoSearch
from waypoint_routing.config import AcoParams
from waypoint_routing.core.graph import WaypointGraph
from waypoint_routing.core.node import Waypoint
from waypoint_routing.modules.pheromone import PheromoneEvaporator, PheromoneUpdater
from waypoint_routing.utils.metrics import MetricsCalculator


class TestAcoScenarios:
    """代表的なグラフでのテスト"""

    def test_diamond_prefers_short_route(self, diamond):
        """ダイヤモンド型グラフでは高い確率で A→B→D を返す"""
        trials = 20
        short_route_count = 0

        for seed in range(trials):
            graph, n = diamond
            graph.reset_pheromone()
            path = AcoSearch(AcoParams(), random.Random(seed)).find_path(graph, n["A"], n["D"])
            if path == [n["A"], n["B"], n["D"]]:
                short_route_count += 1

        assert short_route_count >= trials - 1

    def test_diamond_reinforces_short_edge(self, diamond):
        """A→Bのフェロモンは揮発分を除いて強化される"""
        graph, n = diamond
        ab = graph.get_connections(n["A"])[0]
        params = AcoParams()

        for seed in range(10):
            graph.reset_pheromone()
            before = ab.pheromone
            AcoSearch(params, random.Random(seed)).find_path(graph, n["A"], n["D"])
            assert ab.pheromone > before * (1.0 - params.evaporation_rate)

            # 揮発なしでは呼び出し前の値を下回らない
            graph.reset_pheromone()
            AcoSearch(params.with_changes(evaporation_rate=0.0), random.Random(seed)).find_path(
                graph, n["A"], n["D"]
            )
            assert ab.pheromone >= before

    def test_start_equals_goal(self, diamond):
        """開始ノード＝目的地は開始ノードのみの経路"""
        graph, n = diamond
        assert AcoSearch(rng=random.Random(0)).find_path(graph, n["B"], n["B"]) == [n["B"]]

    def test_start_without_connections(self, diamond):
        """出ていくコネクションがない開始ノードはNone（揮発は行われる）"""
        graph, n = diamond
        search = AcoSearch(AcoParams(ants_per_search=5), random.Random(0))

        assert search.find_path(graph, n["D"], n["A"]) is None
        assert all(value == pytest.approx(0.9) for value in graph.pheromone_snapshot().values())
        assert search.history[-1]["successful_ants"] == 0
        assert search.history[-1]["best_distance"] is None

    def test_unknown_nodes(self, diamond):
        """未登録のノードは契約違反"""
        graph, n = diamond
        search = AcoSearch(rng=random.Random(0))
        with pytest.raises(nx.NodeNotFound):
            search.find_path(graph, n["A"], Waypoint("X"))
        with pytest.raises(nx.NodeNotFound):
            search.walk_once(graph, None, n["D"])

    def test_history(self, diamond):
        """探索呼び出しごとの要約"""
        graph, n = diamond
        search = AcoSearch(AcoParams(ants_per_search=10), random.Random(1))
        path = search.find_path(graph, n["A"], n["D"])

        assert list(search.history) == [
            {
                "start": "A",
                "goal": "D",
                "successful_ants": 10,
                "best_distance": pytest.approx(WaypointGraph.path_distance(path)),
            }
        ]

    def test_history_is_bounded(self, diamond):
        """historyは直近history_limit件のみ保持する"""
        graph, n = diamond
        search = AcoSearch(AcoParams(ants_per_search=2), random.Random(0), history_limit=3)
        for goal in ("B", "C", "D", "B", "D"):
            search.find_path(graph, n["A"], n[goal])

        assert [entry["goal"] for entry in search.history] == ["D", "B", "D"]

        with pytest.raises(ValueError):
            AcoSearch(history_limit=0)

    def test_overflowing_weight_is_excluded(self):
        """累乗がオーバーフローする候補は例外にせず除外する"""
        graph = WaypointGraph()
        a, b = Waypoint("A"), Waypoint("B", (1, 0, 0))
        ab = graph.connect(a, b)
        # ゴール上では距離がdistance_epsilonに置き換わり (1 / 0.001) ** 150 が溢れる
        search = AcoSearch(AcoParams(beta=150.0, ants_per_search=1), random.Random(0))

        assert search.find_path(graph, a, b) is None
        # 付加はされず、揮発は行われる
        assert ab.pheromone == pytest.approx(0.9)
        assert search.history[-1]["successful_ants"] == 0
        assert search.walk_once(graph, a, b) == []

    def test_overflow_only_excludes_that_candidate(self):
        """溢れない候補は引き続き選択される"""
        graph = WaypointGraph()
        a = Waypoint("A")
        b = Waypoint("B", (1, 0, 0))
        c = Waypoint("C", (0, 1, 0))
        d = Waypoint("D", (1, 1, 0))
        graph.connect(a, b)
        graph.connect(a, c)
        graph.connect(b, d)
        graph.connect(c, d)
        ab = graph.get_connections(a)[0]
        # A→B だけフェロモンを大きくし、alpha乗で溢れさせる
        ab.pheromone = 1e10
        params = AcoParams(alpha=40.0, ants_per_search=5, evaporation_rate=0.0)

        path = AcoSearch(params, random.Random(0)).find_path(graph, a, d)

        assert path == [a, c, d]


class TestAcoProperties:
    """ACOの性質のテスト"""

    def test_walk_terminates_within_step_limit(self, chain_factory):
        """ステップ上限に達したアリは失敗し、それ以上進まない"""
        graph, nodes = chain_factory(300)
        params = AcoParams(ants_per_search=3, max_walk_steps=200, evaporation_rate=0.0)
        search = AcoSearch(params, random.Random(0))

        assert search.walk_once(graph, nodes[0], nodes[-1]) == []
        assert search.find_path(graph, nodes[0], nodes[-1]) is None

        connections = list(graph.connections())
        # 1匹目（walk_once）と3匹の合計4匹が先頭から200本ずつ通過
        assert connections[199].pheromone == pytest.approx(1.0 + 4 * params.deposit_q)
        assert connections[200].pheromone == 1.0

    def test_walk_terminates_on_cycles(self, grid_factory):
        """閉路があっても到達不能なゴールへの歩行は終了する"""
        graph, grid = grid_factory(4)
        unreachable = Waypoint("Island", (100.0, 100.0, 0.0))
        graph.add_waypoint(unreachable)

        search = AcoSearch(AcoParams(ants_per_search=20), random.Random(0))
        assert search.find_path(graph, grid[0][0], unreachable) is None
        assert search.walk_once(graph, grid[0][0], unreachable) == []

    def test_walk_is_simple_path(self, grid_factory):
        """アリは同じノードを再訪問しない"""
        graph, grid = grid_factory(4)
        search = AcoSearch(rng=random.Random(3))
        for _ in range(20):
            route = search.walk_once(graph, grid[0][0], grid[3][3])
            if route:
                assert len(route) == len(set(route))
                assert route[0] is grid[0][0]
                assert route[-1] is grid[3][3]

    def test_pheromone_bounds(self, grid_factory):
        """探索を繰り返してもフェロモンは下限値以上"""
        graph, grid = grid_factory(4)
        params = AcoParams(evaporation_rate=0.5, min_pheromone=0.05, ants_per_search=10)
        search = AcoSearch(params, random.Random(0))

        for _ in range(30):
            search.find_path(graph, grid[0][0], grid[3][3])
            values = graph.pheromone_snapshot().values()
            assert min(values) >= params.min_pheromone

    def test_deposit_without_evaporation(self):
        """揮発率0では各アリの付加がそのまま蓄積される"""
        graph = WaypointGraph()
        a, b, c = Waypoint("A"), Waypoint("B", (1, 0, 0)), Waypoint("C", (5, 5, 0))
        ab = graph.connect(a, b)
        untouched = graph.connect(c, a)
        params = AcoParams(evaporation_rate=0.0)

        path = AcoSearch(params, random.Random(0)).find_path(graph, a, b)

        assert path == [a, b]
        assert ab.pheromone == pytest.approx(1.0 + params.ants_per_search * params.deposit_q)
        assert untouched.pheromone == 1.0

    def test_reproducible_with_seed(self, grid_factory):
        """同じシードでは同じ経路とフェロモン"""
        results = []
        for _ in range(2):
            graph, grid = grid_factory(4)
            search = AcoSearch(rng=random.Random(42))
            paths = [
                [node.name for node in search.find_path(graph, grid[0][0], grid[3][3])]
                for _ in range(3)
            ]
            pheromone = [c.pheromone for c in graph.connections()]
            results.append((paths, pheromone))

        assert results[0] == results[1]

    def test_reinforcement_not_worse_than_baseline(self, grid_factory):
        """フェロモン有効時の最良経路長はalpha = 0 の場合と比べて悪化しない"""
        metrics = MetricsCalculator()
        series = {}
        for alpha in (1.0, 0.0):
            graph, grid = grid_factory(4)
            search = AcoSearch(AcoParams(alpha=alpha), random.Random(7))
            paths = [search.find_path(graph, grid[0][0], grid[3][3]) for _ in range(20)]
            series[alpha] = metrics.path_lengths(paths)

        improvement = metrics.improvement_over_baseline(series[1.0], series[0.0])
        assert improvement >= -0.1


class TestPheromoneModules:
    """フェロモン付加・揮発クラスのテスト"""

    def test_updater(self, diamond):
        graph, n = diamond
        ab = graph.get_connections(n["A"])[0]
        PheromoneUpdater(AcoParams(deposit_q=0.25)).deposit(graph, ab)
        assert ab.pheromone == pytest.approx(1.25)

    def test_evaporator(self, diamond):
        graph, _ = diamond
        PheromoneEvaporator(AcoParams(evaporation_rate=1.0, min_pheromone=0.2)).evaporate(graph)
        assert all(value == pytest.approx(0.2) for value in graph.pheromone_snapshot().values())
