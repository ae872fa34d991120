"""
実験実行スクリプト

config.yamlの設定に基づき、配送シミュレーション（往路ACO・帰路A*）を実行し、
ACOの経路長をA*の最適解と比較評価します。
さらに、フェロモン有効時と無効時（alpha = 0）の収束推移を比較します。
"""

import csv
import random
import sys
from datetime import datetime
from pathlib import Path

# プロジェクトルートをPythonパスに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from waypoint_routing.algorithms.aco_search import AcoSearch
from waypoint_routing.algorithms.astar import AStarSearch
from waypoint_routing.algorithms.delivery_planner import DeliveryPlanner
from waypoint_routing.config import AcoParams, load_config
from waypoint_routing.core.graph import WaypointGraph
from waypoint_routing.utils.logging_setup import setup_logging
from waypoint_routing.utils.metrics import MetricsCalculator
from waypoint_routing.utils.visualization import Visualizer


def run_single_simulation(
    config: dict,
    sim: int,
    num_simulations: int,
    rng: random.Random,
    metrics_calculator: MetricsCalculator,
) -> dict:
    """
    1回の配送シミュレーションを実行

    Args:
        config: 設定辞書
        sim: シミュレーション番号（0-indexed）
        num_simulations: 総シミュレーション数
        rng: 乱数生成器
        metrics_calculator: 評価指標計算オブジェクト

    Returns:
        シミュレーション結果の辞書
    """
    print(f"\n{'='*80}")
    print(f"Simulation {sim + 1}/{num_simulations}")
    print(f"{'='*80}")

    # シミュレーションごとにグラフを作り直す（フェロモンを初期状態に戻す）
    graph = WaypointGraph.from_config(config)
    origin = graph.find_waypoint(config["delivery"]["origin"])
    goals = [graph.find_waypoint(name) for name in config["delivery"]["goals"]]

    planner = DeliveryPlanner.from_config(config, graph, rng)
    plan = planner.plan(origin, goals)

    # 各区間のA*最適解と比較（どちらも幾何学的な経路長で比較）
    astar = AStarSearch()
    gaps = []
    for leg_start, leg in zip([origin] + [leg.goal for leg in plan.legs], plan.legs):
        optimal = astar.find_path(graph, leg_start, leg.goal, planner.heuristic)
        optimal_length = WaypointGraph.path_distance(
            WaypointGraph.path_nodes(leg_start, optimal)
        )
        gap = metrics_calculator.optimality_gap(leg.distance, optimal_length)
        gaps.append(gap)
        route = " -> ".join(node.name for node in leg.path)
        print(
            f"  {leg_start.name} -> {leg.goal.name}: {route} "
            f"({leg.distance:.1f}, optimal {optimal_length:.1f}, gap {gap:.3f})"
        )

    current = plan.legs[-1].goal if plan.legs else origin
    if plan.return_path is not None:
        route = " -> ".join(
            node.name for node in WaypointGraph.path_nodes(current, plan.return_path)
        )
        print(f"  Return: {route} ({plan.return_distance:.1f})")
    else:
        print("  ⚠️  Warning: No return path found")

    if plan.undelivered:
        print(f"  ⚠️  Undelivered: {[goal.name for goal in plan.undelivered]}")

    return {
        "simulation": sim + 1,
        "delivered": len(plan.legs),
        "undelivered": len(plan.undelivered),
        "outbound_distance": plan.outbound_distance,
        "return_distance": plan.return_distance,
        "total_distance": plan.total_distance,
        "mean_gap": sum(gaps) / len(gaps) if gaps else None,
    }


def run_convergence_comparison(config: dict, seed: int) -> dict:
    """
    同じ区間を繰り返し探索し、フェロモン有効時と無効時の最良経路長を比較

    Args:
        config: 設定辞書
        seed: 乱数シード（両条件で同じ値を使用）

    Returns:
        ラベル→探索回ごとの最良経路長のリスト
    """
    params = AcoParams.from_config(config)
    searches = config["experiment"]["searches_per_trial"]
    series = {}

    for label, alpha in (("pheromone", params.alpha), ("no pheromone (alpha=0)", 0.0)):
        graph = WaypointGraph.from_config(config)
        start = graph.find_waypoint(config["delivery"]["origin"])
        goal = graph.find_waypoint(config["delivery"]["goals"][-1])
        aco = AcoSearch(params.with_changes(alpha=alpha), random.Random(seed))

        lengths = []
        for _ in range(searches):
            path = aco.find_path(graph, start, goal)
            lengths.append(None if path is None else WaypointGraph.path_distance(path))
        series[label] = lengths

    return series


def main():
    """メイン実験ループ"""
    # ===== 設定読み込み =====
    config = load_config(project_root / "config" / "config.yaml")
    setup_logging(config=config)

    print("=" * 80)
    print(f"Experiment: {config['experiment']['name']}")
    print(f"Origin: {config['delivery']['origin']}, Goals: {config['delivery']['goals']}")
    print("=" * 80)

    # ===== 出力ディレクトリの作成 =====
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    results_dir = project_root / config["output"]["results_dir"] / timestamp
    results_dir.mkdir(parents=True, exist_ok=True)
    print(f"Results directory: {results_dir}\n")

    seed = config["experiment"].get("seed")
    rng = random.Random(seed)
    metrics_calculator = MetricsCalculator()

    # ===== シミュレーション実行 =====
    num_simulations = config["experiment"]["simulations"]
    results = [
        run_single_simulation(config, sim, num_simulations, rng, metrics_calculator)
        for sim in range(num_simulations)
    ]

    log_csv_path = results_dir / "delivery_results.csv"
    with open(log_csv_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(results[0].keys()))
        writer.writeheader()
        writer.writerows(results)

    # ===== 結果の集計 =====
    print(f"\n{'='*80}")
    print("Summary of All Simulations")
    print(f"{'='*80}")
    outbound = metrics_calculator.summarize([r["outbound_distance"] for r in results])
    gaps = metrics_calculator.summarize([r["mean_gap"] for r in results])
    completed = sum(1 for r in results if r["undelivered"] == 0)
    print(f"Completed deliveries: {completed}/{num_simulations}")
    print(f"Outbound distance: {outbound['mean']:.1f} ± {outbound['std']:.1f}")
    print(f"Mean optimality gap: {gaps['mean']:.3f}")

    # ===== 収束比較 =====
    series = run_convergence_comparison(config, seed)
    reinforced, baseline = series.values()
    improvement = metrics_calculator.improvement_over_baseline(reinforced, baseline)
    print(f"Improvement over alpha=0 baseline: {improvement:.3%}")

    if config["output"]["save_graphs"]:
        visualizer = Visualizer(results_dir)
        visualizer.plot_convergence(series, filename="convergence.png")

        graph = WaypointGraph.from_config(config)
        DeliveryPlanner.from_config(config, graph, random.Random(seed)).plan(
            graph.find_waypoint(config["delivery"]["origin"]),
            [graph.find_waypoint(name) for name in config["delivery"]["goals"]],
        )
        visualizer.plot_pheromone_distribution(graph, filename="pheromone.png")

    print(f"\n✅ Experiment completed! Results saved to: {results_dir}")
    print(f"📊 CSV Log: {log_csv_path}")


if __name__ == "__main__":
    main()
