import logging
import os
import time
from datetime import datetime

import numpy as np
import pandas as pd
from tqdm.auto import tqdm

from posebench.benchmark.PlannerBase import PLANNER_REGISTRY
from posebench.benchmark.PoseQueryBuilder import ERROR
from posebench.benchmark.ResultCollection import ResultCollection
from posebench.messages import BenchmarkRequest

logger = logging.getLogger(__name__)

RESULT_COLUMNS = ["Pipeline", "Planner", "Group", "Query", "Start", "Goal", "RunID",
                  "Success", "Time", "TrajectoryPoints", "PathLength", "Error"]


class BenchmarkExecutor:
    """
    Runs every start/goal combination through the configured planning pipelines.

    Subclasses provide the query data by overriding ``load_benchmark_query_data``.
    """

    def __init__(self, scene_provider=None, planner_registry=None, show_progress=True):
        self.scene_provider = scene_provider
        self.planner_registry = planner_registry if planner_registry is not None else PLANNER_REGISTRY
        self.show_progress = show_progress
        # pipeline name -> {planner id -> planner class}
        self.pipelines = {}
        self.results = pd.DataFrame(columns=RESULT_COLUMNS)
        self.output_file = None
        self._post_run_events = []

    def initialize(self, pipeline_names):
        self.pipelines = {}
        for name in pipeline_names:
            if name not in self.planner_registry:
                logger.error(f"Planning pipeline '{name}' is not available, skipping it")
                continue
            self.pipelines[name] = dict(self.planner_registry[name])
        logger.info(f"Initialized planning pipelines: {list(self.pipelines)}")

    def add_post_run_event(self, func):
        """``func(result_collection, row)`` is called after every run and may add columns to ``row``."""
        self._post_run_events.append(func)

    def load_benchmark_query_data(self, opts, scene_msg):
        """Returns a QueryBuildResult with the start states and goal constraints to combine."""
        raise NotImplementedError

    @staticmethod
    def create_request_combinations(start_states, goal_constraints, group_name, skip_identical_pairs=False):
        """
        Pair every start state with every goal constraint.

        Args:
            start_states (list): StartState entries
            goal_constraints (list): GoalConstraint entries
            group_name (str): planning group of all requests
            skip_identical_pairs (bool): leave out pairs whose start and goal share a name

        Returns:
            list: BenchmarkRequest entries, ordered start-major
        """
        requests = []
        for start in start_states:
            for goal in goal_constraints:
                if skip_identical_pairs and start.name == goal.name:
                    continue
                requests.append(BenchmarkRequest(
                    name=f"{start.name} -> {goal.name}",
                    group_name=group_name,
                    start_state=start,
                    goal=goal,
                ))
        return requests

    def run_benchmarks(self, opts):
        """
        Load the query data, build all combinations and run them.

        Returns:
            bool: False if no query data could be loaded or no pipeline is available
        """
        scene_msg = {}
        query_data = self.load_benchmark_query_data(opts, scene_msg)
        for diagnostic in query_data.diagnostics:
            if diagnostic.level == ERROR:
                logger.error(diagnostic.message)
            else:
                logger.warning(diagnostic.message)
        if not query_data.ok:
            logger.error("Failed to load benchmark query data")
            return False

        if not self.pipelines:
            logger.error("No planning pipelines initialized")
            return False

        requests = self.create_request_combinations(query_data.start_states, query_data.goal_constraints,
                                                    query_data.group_name, opts.skip_identical_pairs)
        if not requests:
            logger.error("No benchmark requests left after combining start states and goals")
            return False
        logger.info(f"Benchmarking {len(requests)} queries of group '{query_data.group_name}' "
                    f"from {len(query_data.start_states)} predefined poses")

        robot_model = self.scene_provider.getRobotModel()
        planners = self._selected_planners(opts)
        if not planners:
            logger.error("None of the configured planners is available")
            return False
        total_iterations = len(requests) * len(planners) * opts.runs
        pbar = tqdm(total=total_iterations, desc=f"Running {opts.benchmark_name}", disable=not self.show_progress)

        data = []
        for pipeline_name, planner_id, planner_class in planners:
            config = opts.getPipelineConfig(pipeline_name)
            for request in requests:
                for run_id in range(opts.runs):
                    data.append(self._run_once(robot_model, pipeline_name, planner_id, planner_class,
                                               config, request, run_id, opts.timeout))
                    pbar.update(1)
        pbar.close()

        self.results = pd.DataFrame(data, columns=self._columns(data))
        if opts.output_directory:
            self.write_output(opts)
        return True

    def _selected_planners(self, opts):
        planners = []
        for pipeline_name, available in self.pipelines.items():
            planner_ids = opts.getPlannerIds(pipeline_name)
            if not planner_ids:
                planner_ids = list(available)
            for planner_id in planner_ids:
                if planner_id not in available:
                    logger.warning(f"Pipeline '{pipeline_name}' has no planner '{planner_id}', skipping it")
                    continue
                planners.append((pipeline_name, planner_id, available[planner_id]))
        return planners

    def _run_once(self, robot_model, pipeline_name, planner_id, planner_class, config, request, run_id, timeout):
        # Fresh planner per run, no state carried over between runs
        planner = planner_class(robot_model)

        start_time = time.perf_counter()
        try:
            response = planner.planPath(request, config)
            error = response.error
        except Exception as e:
            logger.warning(f"{pipeline_name}/{planner_id} raised on '{request.name}': {e}")
            response = None
            error = f"{type(e).__name__}: {e}"
        duration = time.perf_counter() - start_time

        success = response is not None and response.success
        if success and duration > timeout:
            success = False
            error = "timeout"

        row = {
            "Pipeline": pipeline_name,
            "Planner": planner_id,
            "Group": request.group_name,
            "Query": request.name,
            "Start": request.start_state.name,
            "Goal": request.goal.name,
            "RunID": run_id,
            "Success": success,
            "Time": duration,
            "TrajectoryPoints": len(response.trajectory) if success else np.nan,
            "PathLength": response.pathLength() if success else np.nan,
            "Error": error or "",
        }
        result = ResultCollection(pipeline_name, planner_id, request, response, run_id, duration)
        for event in self._post_run_events:
            event(result, row)
        return row

    @staticmethod
    def _columns(data):
        columns = list(RESULT_COLUMNS)
        for row in data:
            for key in row:
                if key not in columns:
                    columns.append(key)
        return columns

    def write_output(self, opts):
        os.makedirs(opts.output_directory, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S-%f")
        self.output_file = os.path.join(opts.output_directory, f"{opts.benchmark_name}_{timestamp}.csv")
        self.results.to_csv(self.output_file, index=False, mode="x")
        logger.info(f"Saved benchmark results to {self.output_file}")
        return self.output_file
