"""
テスト共通のフィクスチャ
"""

import math

import pytest

from waypoint_routing.core.graph import WaypointGraph
from waypoint_routing.core.node import Waypoint


@pytest.fixture
def diamond():
    """
    ダイヤモンド型グラフ（A→B→D, A→C→D）

    座標は AB = BD = 1, AC = CD = 5 となるように配置し、
    コストは座標間距離から計算されます。

    Returns:
        (graph, {"A": ..., "B": ..., "C": ..., "D": ...})
    """
    nodes = {
        "A": Waypoint("A", (0.0, 0.0, 0.0)),
        "B": Waypoint("B", (0.6, 0.8, 0.0)),
        "C": Waypoint("C", (0.6, -math.sqrt(24.64), 0.0)),
        "D": Waypoint("D", (1.2, 0.0, 0.0)),
    }
    graph = WaypointGraph()
    graph.connect(nodes["A"], nodes["B"])
    graph.connect(nodes["A"], nodes["C"])
    graph.connect(nodes["B"], nodes["D"])
    graph.connect(nodes["C"], nodes["D"])
    return graph, nodes


def build_grid(size: int, spacing: float = 1.0):
    """
    size×size の格子グラフ（双方向、コストは座標間距離）

    Returns:
        (graph, 行列状のウェイポイントのリスト)
    """
    graph = WaypointGraph()
    grid = [
        [Waypoint(f"G{row}_{col}", (col * spacing, row * spacing, 0.0)) for col in range(size)]
        for row in range(size)
    ]
    for row in range(size):
        for col in range(size):
            graph.add_waypoint(grid[row][col])
            if col + 1 < size:
                graph.connect(grid[row][col], grid[row][col + 1], bidirectional=True)
            if row + 1 < size:
                graph.connect(grid[row][col], grid[row + 1][col], bidirectional=True)
    return graph, grid


def build_chain(length: int):
    """
    一直線に並んだ有向チェーン N0 → N1 → ... → N(length-1)

    Returns:
        (graph, ウェイポイントのリスト)
    """
    graph = WaypointGraph()
    nodes = [Waypoint(f"N{i}", (float(i), 0.0, 0.0)) for i in range(length)]
    for node in nodes:
        graph.add_waypoint(node)
    for a, b in zip(nodes[:-1], nodes[1:]):
        graph.connect(a, b)
    return graph, nodes


@pytest.fixture
def grid_factory():
    return build_grid


@pytest.fixture
def chain_factory():
    return build_chain
