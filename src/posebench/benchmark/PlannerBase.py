# coding: utf-8

"""
Base class for planning pipelines run by the benchmark executor.

Handles common functionality like start/goal extraction and validation against
the robot model's joint bounds.

Based on 'Introduction to robot path planning' course (Author: Bjoern Hein).
License: Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
See: http://creativecommons.org/licenses/by-nc/4.0/
"""

import numpy as np

from posebench.messages import robot_state_from_msg
from posebench.robot_model import RobotState


class MotionPlanResponse:
    def __init__(self, success, trajectory=None, error=""):
        self.success = success
        self.trajectory = trajectory if trajectory is not None else []
        self.error = error

    def pathLength(self):
        """Sum of euclidean joint-space distances between consecutive waypoints."""
        if len(self.trajectory) < 2:
            return 0.0
        points = np.asarray(self.trajectory, dtype=float)
        return float(np.linalg.norm(np.diff(points, axis=0), axis=1).sum())


class PlanerBase:
    """
    Abstract base class for planning pipelines.

    Subclasses implement ``planPath``. Start and goal of a request are validated
    against the joint bounds of the robot model before planning.
    """

    def __init__(self, robot_model):
        """
        Args:
            robot_model (RobotModel): shared, read-only robot model
        """
        self._robotModel = robot_model

    def _checkStartGoal(self, request):
        """
        Turn a benchmark request into a start state and a goal state and validate both.

        The goal state is the start state with every joint constraint of the goal
        applied, so joints outside the planning group keep their start values.

        Args:
            request (BenchmarkRequest): start state message and goal constraints

        Returns:
            tuple: (startState, goalState, error) - error is "" if both are valid
        """
        group = self._robotModel.getJointModelGroup(request.group_name)
        if group is None:
            return None, None, f"unknown group '{request.group_name}'"

        start = RobotState(self._robotModel)
        try:
            robot_state_from_msg(request.start_state.state, start)
        except KeyError as e:
            return None, None, f"start state references unknown joint {e}"
        # Check joint bounds
        if not start.satisfiesBounds():
            return None, None, "start state violates joint bounds"

        goal = start.copy()
        for constraints in request.goal.constraints:
            for jc in constraints.joint_constraints:
                if jc.joint_name not in group.joint_names:
                    return None, None, f"goal constrains joint '{jc.joint_name}' outside group '{group.name}'"
                goal.setVariablePositions({jc.joint_name: jc.position})
        if not goal.satisfiesBounds(group):
            return None, None, "goal state violates joint bounds"

        return start, goal, ""

    def planPath(self, request, config):
        raise NotImplementedError


class JointInterpolationPlanner(PlanerBase):
    """
    Baseline pipeline: straight line in joint space from start to goal.

    No collision checking. Every waypoint lies inside the joint bounds because
    start and goal do and the bounds are convex.
    """

    DEFAULT_STEPS = 10

    @staticmethod
    def interpolate_linear(start, end, steps):
        """Linear interpolation between two configurations, start and end inclusive."""
        s = np.asarray(start, dtype=float)
        e = np.asarray(end, dtype=float)
        trajectory = [s.copy()]
        for i in range(1, steps + 1):
            alpha = i / steps
            trajectory.append(s * (1 - alpha) + e * alpha)
        return trajectory

    def planPath(self, request, config):
        """
        Args:
            request (BenchmarkRequest): query to solve
            config (dict): pipeline options

        Example:

            config["steps"] = 10
        """
        steps = int(config.get("steps", self.DEFAULT_STEPS))
        if steps < 1:
            return MotionPlanResponse(False, error=f"invalid steps {steps}")

        start, goal, error = self._checkStartGoal(request)
        if error:
            return MotionPlanResponse(False, error=error)

        trajectory = self.interpolate_linear(start.positions, goal.positions, steps)
        return MotionPlanResponse(True, trajectory)


# pipeline name -> {planner id -> planner class}
PLANNER_REGISTRY = {
    "joint_interpolation": {
        "linear": JointInterpolationPlanner,
    },
}
