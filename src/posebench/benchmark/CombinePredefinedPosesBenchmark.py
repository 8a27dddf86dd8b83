# coding: utf-8

"""
A simple benchmark that plans trajectories for all combinations of specified predefined poses.

License: Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
See: http://creativecommons.org/licenses/by-nc/4.0/
"""

from posebench.benchmark.BenchmarkExecutor import BenchmarkExecutor
from posebench.benchmark.PlanningSceneProvider import PlanningSceneProvider
from posebench.benchmark.PoseQueryBuilder import build_queries_from_options


class CombinePredefinedPosesBenchmark(BenchmarkExecutor):
    """
    Benchmark whose queries are every pairing of the configured predefined poses.

    Each pose is used as start state and as goal. No path constraints, trajectory
    constraints or custom queries are generated.
    """

    def load_benchmark_query_data(self, opts, scene_msg):
        if self.scene_provider is None:
            self.scene_provider = PlanningSceneProvider(robot_description=opts.robot_description)
        return build_queries_from_options(self.scene_provider, opts, scene_msg)
