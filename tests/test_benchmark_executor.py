import logging
import time

import pandas as pd
import pytest

from posebench.benchmark.BenchmarkExecutor import RESULT_COLUMNS, BenchmarkExecutor
from posebench.benchmark.CombinePredefinedPosesBenchmark import CombinePredefinedPosesBenchmark
from posebench.benchmark.PlannerBase import JointInterpolationPlanner, MotionPlanResponse, PlanerBase
from posebench.benchmark.PlanningSceneProvider import PlanningSceneProvider
from posebench.messages import GoalConstraint, StartState


class FailingPlanner(PlanerBase):
    def planPath(self, request, config):
        return MotionPlanResponse(False, error="no solution")


class CrashingPlanner(PlanerBase):
    def planPath(self, request, config):
        raise RuntimeError("boom")


class SlowPlanner(JointInterpolationPlanner):
    def planPath(self, request, config):
        time.sleep(0.05)
        return super().planPath(request, config)


REGISTRY = {
    "joint_interpolation": {"linear": JointInterpolationPlanner},
    "broken": {"fail": FailingPlanner, "crash": CrashingPlanner},
}


def _server(model, registry=None):
    return CombinePredefinedPosesBenchmark(PlanningSceneProvider(robot_model=model),
                                           planner_registry=registry, show_progress=False)


# ---------------------------------------------------------------------------
# Request combinations
# ---------------------------------------------------------------------------


def _names(*names):
    return [StartState(n) for n in names], [GoalConstraint(n) for n in names]


def test_full_cross_product_start_major():
    starts, goals = _names("a", "b", "c")
    requests = BenchmarkExecutor.create_request_combinations(starts, goals, "arm")

    assert len(requests) == 9
    assert [r.name for r in requests[:3]] == ["a -> a", "a -> b", "a -> c"]
    assert all(r.group_name == "arm" for r in requests)


def test_identical_pairs_can_be_skipped():
    starts, goals = _names("a", "b", "c")
    requests = BenchmarkExecutor.create_request_combinations(starts, goals, "arm", skip_identical_pairs=True)

    assert len(requests) == 6
    assert all(r.start_state.name != r.goal.name for r in requests)


def test_single_pose_with_skipping_gives_nothing():
    starts, goals = _names("a")
    assert BenchmarkExecutor.create_request_combinations(starts, goals, "arm", True) == []


# ---------------------------------------------------------------------------
# Runs
# ---------------------------------------------------------------------------


def test_run_records_one_row_per_request_planner_and_run(arm_model, make_options):
    server = _server(arm_model)
    server.initialize(["joint_interpolation"])

    assert server.run_benchmarks(make_options(runs=2))

    results = server.results
    assert isinstance(results, pd.DataFrame)
    assert list(results.columns) == RESULT_COLUMNS
    assert len(results) == 2 * 2 * 2
    assert results["Success"].all()
    assert set(results["Query"]) == {"home -> home", "home -> ready", "ready -> home", "ready -> ready"}
    assert (results["Error"] == "").all()


def test_skip_identical_pairs_option(arm_model, make_options):
    server = _server(arm_model)
    server.initialize(["joint_interpolation"])

    assert server.run_benchmarks(make_options(skip_identical_pairs=True))
    assert set(server.results["Query"]) == {"home -> ready", "ready -> home"}


def test_builder_failure_aborts_run(arm_model, make_options, caplog):
    server = _server(arm_model)
    server.initialize(["joint_interpolation"])

    with caplog.at_level(logging.WARNING):
        assert not server.run_benchmarks(make_options(predefined_poses=["bad"]))

    assert "Failed to set robot state to named target 'bad'" in caplog.text
    assert "Failed to load benchmark query data" in caplog.text
    assert server.results.empty


def test_unknown_group_is_reported(arm_model, make_options, caplog):
    server = _server(arm_model)
    server.initialize(["joint_interpolation"])

    with caplog.at_level(logging.ERROR):
        assert not server.run_benchmarks(make_options(predefined_poses_group="legs"))
    assert "no joint model group named 'legs'" in caplog.text


def test_skipped_pose_is_logged_but_run_continues(arm_model, make_options, caplog):
    server = _server(arm_model)
    server.initialize(["joint_interpolation"])

    with caplog.at_level(logging.WARNING):
        assert server.run_benchmarks(make_options(predefined_poses=["home", "bad", "ready"]))
    assert "'bad'" in caplog.text
    assert len(server.results) == 4


def test_failures_and_crashes_are_recorded(arm_model, make_options):
    server = _server(arm_model, REGISTRY)
    server.initialize(["broken"])

    assert server.run_benchmarks(make_options(predefined_poses=["home"]))

    results = server.results.set_index("Planner")
    assert not results["Success"].any()
    assert results.loc["fail", "Error"] == "no solution"
    assert results.loc["crash", "Error"] == "RuntimeError: boom"
    assert results["PathLength"].isna().all()


def test_configured_planner_subset(arm_model, make_options):
    server = _server(arm_model, REGISTRY)
    server.initialize(["broken"])
    opts = make_options(predefined_poses=["home"],
                        planning_pipelines={"pipelines": ["broken"], "broken": {"planners": ["fail", "missing"]}})

    assert server.run_benchmarks(opts)
    assert list(server.results["Planner"]) == ["fail"]


def test_pipeline_config_is_passed_to_planner(arm_model, make_options):
    server = _server(arm_model)
    server.initialize(["joint_interpolation"])
    opts = make_options(predefined_poses=["home"],
                        planning_pipelines={"pipelines": ["joint_interpolation"],
                                            "joint_interpolation": {"steps": 3}})

    assert server.run_benchmarks(opts)
    assert list(server.results["TrajectoryPoints"]) == [4]


def test_slow_runs_count_as_timeout(arm_model, make_options):
    server = _server(arm_model, {"slow": {"sleepy": SlowPlanner}})
    server.initialize(["slow"])

    assert server.run_benchmarks(make_options(predefined_poses=["home"], timeout=0.001))
    assert not server.results["Success"].iloc[0]
    assert server.results["Error"].iloc[0] == "timeout"


def test_post_run_event_adds_columns(arm_model, make_options):
    server = _server(arm_model)
    server.initialize(["joint_interpolation"])
    seen = []

    def on_run(result, row):
        seen.append(result.request.name)
        row["Final"] = result.response.trajectory[-1].tolist()

    server.add_post_run_event(on_run)
    assert server.run_benchmarks(make_options(predefined_poses=["home"]))
    assert seen == ["home -> home"]
    assert "Final" in server.results.columns


def test_results_written_to_csv(arm_model, make_options, tmp_path):
    server = _server(arm_model)
    server.initialize(["joint_interpolation"])

    opts = make_options(name="arm_poses")
    opts.output_directory = str(tmp_path / "out")
    assert server.run_benchmarks(opts)

    assert server.output_file.startswith(str(tmp_path / "out" / "arm_poses_"))
    written = pd.read_csv(server.output_file)
    assert len(written) == len(server.results)


def test_back_to_back_runs_keep_both_outputs(arm_model, make_options, tmp_path):
    server = _server(arm_model)
    server.initialize(["joint_interpolation"])
    opts = make_options(predefined_poses=["home"])
    opts.output_directory = str(tmp_path)

    assert server.run_benchmarks(opts)
    first = server.output_file
    assert server.run_benchmarks(opts)

    assert server.output_file != first
    assert len(list(tmp_path.glob("*.csv"))) == 2


# ---------------------------------------------------------------------------
# Pipelines
# ---------------------------------------------------------------------------


def test_unknown_pipeline_is_ignored(arm_model, caplog):
    server = _server(arm_model)
    with caplog.at_level(logging.ERROR):
        server.initialize(["ompl", "joint_interpolation"])
    assert list(server.pipelines) == ["joint_interpolation"]
    assert "'ompl'" in caplog.text


def test_no_pipeline_fails(arm_model, make_options):
    server = _server(arm_model)
    server.initialize([])
    assert not server.run_benchmarks(make_options())


def test_query_data_is_reported_without_pipelines(arm_model, make_options, caplog):
    server = _server(arm_model)
    server.initialize([])

    with caplog.at_level(logging.WARNING):
        assert not server.run_benchmarks(make_options(predefined_poses=["home", "bad"]))
    assert "named target 'bad'" in caplog.text
    assert "No planning pipelines initialized" in caplog.text


def test_default_scene_provider_uses_builtin_robot(make_options):
    server = CombinePredefinedPosesBenchmark(show_progress=False)
    server.initialize(["joint_interpolation"])

    assert server.run_benchmarks(make_options(predefined_poses=["home", "ready", "folded"]))
    assert len(server.results) == 9


def test_base_executor_needs_query_data(make_options):
    server = BenchmarkExecutor(show_progress=False)
    server.initialize(["joint_interpolation"])
    with pytest.raises(NotImplementedError):
        server.run_benchmarks(make_options())
