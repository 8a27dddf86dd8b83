# coding: utf-8

"""
Query generation from predefined poses.

Every named state of a joint group becomes both a start state (full robot state)
and a goal constraint (joint goal for the group). The benchmark executor pairs
them up afterwards.

Based on 'Introduction to robot path planning' course (Author: Bjoern Hein).
License: Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
See: http://creativecommons.org/licenses/by-nc/4.0/
"""

from dataclasses import dataclass, field
from typing import List, Optional

from posebench.errors import EmptyResultError, ModelLoadError, QueryBuildError, UnknownGroupError
from posebench.messages import (
    DEFAULT_JOINT_TOLERANCE,
    GoalConstraint,
    PathConstraints,
    StartState,
    TrajectoryConstraints,
    construct_goal_constraints,
    robot_state_to_msg,
)
from posebench.robot_model import RobotState

WARNING = "warning"
ERROR = "error"

# diagnostic kinds
GROUP_FALLBACK = "group_fallback"
POSE_SKIPPED = "pose_skipped"
FATAL = "fatal"


@dataclass(frozen=True)
class Diagnostic:
    """Notice produced while building queries. The builder never logs itself."""

    level: str
    kind: str
    message: str
    subject: Optional[str] = None


@dataclass
class QueryBuildResult:
    """
    Outcome of a query build: either ``error`` is set, or the query lists are filled.

    Diagnostics are kept in both cases. Path constraints, trajectory constraints and
    custom queries are always empty, the executor only combines starts and goals.
    """

    group_name: str = ""
    start_states: List[StartState] = field(default_factory=list)
    goal_constraints: List[GoalConstraint] = field(default_factory=list)
    path_constraints: List[PathConstraints] = field(default_factory=list)
    traj_constraints: List[TrajectoryConstraints] = field(default_factory=list)
    queries: list = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    error: Optional[QueryBuildError] = None

    @property
    def ok(self):
        return self.error is None

    @property
    def warnings(self):
        return [d for d in self.diagnostics if d.level == WARNING]

    @property
    def skipped_poses(self):
        return [d.subject for d in self.diagnostics if d.kind == POSE_SKIPPED]

    def unwrap(self):
        """Returns (start_states, goal_constraints) or raises the fatal error."""
        if self.error is not None:
            raise self.error
        return self.start_states, self.goal_constraints

    def _fail(self, error):
        self.error = error
        self.diagnostics.append(Diagnostic(ERROR, FATAL, error.message, error.subject))
        self.start_states = []
        self.goal_constraints = []
        return self


def build_queries(robot_model, group_name, configuration_names, default_group_name="",
                  tolerance=DEFAULT_JOINT_TOLERANCE):
    """
    Turn named configurations of a joint group into start states and goal constraints.

    Args:
        robot_model (RobotModel): loaded model, None is reported as ModelLoadError
        group_name (str): group the predefined poses belong to; if empty,
            ``default_group_name`` is used and a warning is recorded
        configuration_names (list): names of the group's named states, in output order
        default_group_name (str): fallback group, normally the planning group
        tolerance (float): joint tolerance of the generated goal constraints

    Returns:
        QueryBuildResult: names that do not resolve are skipped with a warning;
        an unknown group or an empty outcome is a fatal error.
    """
    result = QueryBuildResult()

    if robot_model is None:
        return result._fail(ModelLoadError("Failed to load robot model"))

    # Select planning group to use for predefined poses
    if not group_name:
        group_name = default_group_name
        result.diagnostics.append(Diagnostic(
            WARNING, GROUP_FALLBACK,
            f"Parameter predefined_poses_group is not set, using default planning group '{group_name}' instead",
            group_name))
    result.group_name = group_name

    group = robot_model.getJointModelGroup(group_name) if group_name else None
    if group is None:
        return result._fail(UnknownGroupError(
            f"Robot model has no joint model group named '{group_name}'", group_name))

    # One working state for all poses. Each named state overwrites the group's joints,
    # the remaining joints keep their default values.
    robot_state = RobotState(robot_model)
    for pose_id in configuration_names:
        if not robot_state.setToDefaultValues(group, pose_id):
            result.diagnostics.append(Diagnostic(
                WARNING, POSE_SKIPPED, f"Failed to set robot state to named target '{pose_id}'", pose_id))
            continue

        result.start_states.append(StartState(name=pose_id, state=robot_state_to_msg(robot_state)))
        result.goal_constraints.append(GoalConstraint(
            name=pose_id,
            constraints=[construct_goal_constraints(robot_state, group, tolerance, tolerance)]))

    if not result.start_states or not result.goal_constraints:
        return result._fail(EmptyResultError(
            f"Failed to init start and goal states from predefined_poses {list(configuration_names)} "
            f"of group '{group_name}'", group_name))

    return result


def build_queries_from_options(scene_provider, opts, scene_msg=None):
    """
    Load the planning scene and build the query set described by the benchmark options.

    Args:
        scene_provider (PlanningSceneProvider): source of robot model and scene message
        opts (BenchmarkOptions): predefined poses, their group and the fallback group
        scene_msg (dict): filled with the planning scene, if given

    Returns:
        QueryBuildResult
    """
    if scene_msg is None:
        scene_msg = {}
    if scene_provider is None or not scene_provider.newPlanningSceneMessage(scene_msg):
        return QueryBuildResult()._fail(ModelLoadError("Failed to load planning scene"))

    return build_queries(scene_provider.getRobotModel(),
                         opts.getPredefinedPosesGroup(),
                         opts.getPredefinedPoses(),
                         default_group_name=opts.getGroupName())
