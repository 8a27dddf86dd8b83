"""
Message types exchanged between the query builder and the benchmark executor.

The layout follows the usual motion planning message conventions: a start state
is a serialized joint state, a goal is a list of constraint sets where each set
holds one joint constraint per joint of the planning group.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

import numpy as np

# Same default as the goal constraint helpers of common planning frameworks:
# the goal must be reached exactly up to float precision.
DEFAULT_JOINT_TOLERANCE = float(np.finfo(float).eps)


@dataclass
class JointConstraint:
    joint_name: str
    position: float
    tolerance_above: float = DEFAULT_JOINT_TOLERANCE
    tolerance_below: float = DEFAULT_JOINT_TOLERANCE
    weight: float = 1.0

    def isSatisfied(self, value):
        return self.position - self.tolerance_below <= value <= self.position + self.tolerance_above


@dataclass
class Constraints:
    name: str = ""
    joint_constraints: List[JointConstraint] = field(default_factory=list)


@dataclass
class StartState:
    name: str
    state: Dict[str, Any] = field(default_factory=dict)


@dataclass
class GoalConstraint:
    name: str
    constraints: List[Constraints] = field(default_factory=list)


@dataclass
class PathConstraints:
    name: str
    constraints: List[Constraints] = field(default_factory=list)


@dataclass
class TrajectoryConstraints:
    name: str
    constraints: List[Constraints] = field(default_factory=list)


@dataclass
class BenchmarkRequest:
    """A single planning query: one start state paired with one goal."""

    name: str
    group_name: str
    start_state: StartState
    goal: GoalConstraint
    path_constraints: List[Constraints] = field(default_factory=list)


def robot_state_to_msg(robot_state):
    """Serialize the full robot state (all joints, not only a group)."""
    return {
        "joint_state": {
            "name": list(robot_state.robot_model.variable_names),
            "position": robot_state.positions.tolist(),
        }
    }


def robot_state_from_msg(msg, robot_state):
    """Write the joint values of a serialized state into ``robot_state``."""
    joint_state = msg["joint_state"]
    robot_state.setVariablePositions(dict(zip(joint_state["name"], joint_state["position"])))
    return robot_state


def construct_goal_constraints(robot_state, group, tolerance_below=DEFAULT_JOINT_TOLERANCE,
                               tolerance_above=DEFAULT_JOINT_TOLERANCE):
    """
    Build joint-space goal constraints from the group's joint values in ``robot_state``.

    Args:
        robot_state (RobotState): state holding the goal configuration
        group (JointModelGroup): only the joints of this group are constrained
        tolerance_below (float): allowed deviation below each goal position
        tolerance_above (float): allowed deviation above each goal position

    Returns:
        Constraints: one JointConstraint per group joint, in group order
    """
    goal = Constraints(name=group.name)
    for joint_name in group.joint_names:
        goal.joint_constraints.append(JointConstraint(
            joint_name=joint_name,
            position=robot_state.getVariablePosition(joint_name),
            tolerance_above=tolerance_above,
            tolerance_below=tolerance_below,
        ))
    return goal
