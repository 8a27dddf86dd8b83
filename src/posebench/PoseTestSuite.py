# coding: utf-8
"""
Built-in robot for pose benchmarks: planar mobile manipulator (5-DOF).

Used whenever the benchmark configuration names no URDF/SRDF pair.
"""

import numpy as np

from posebench.robot_model import JointModel, JointModelGroup, RobotModel

# --------------------------------------------------------------------------------
# LIMITS DEFINITION
# --------------------------------------------------------------------------------
LIMITS = [-5, 5]

# --------------------------------------------------------------------------------
# ROBOT DEFINITION
# --------------------------------------------------------------------------------
ROBOT_NAME = "mobile_manipulator"
BASE_JOINTS = ["base_x", "base_y", "base_theta"]
# [name, [lower, upper]]
ROBOT_ARM_CONFIG = [
    ["joint_1", [0, 3.14]],
    ["joint_2", [-3.14, 3.14]],
]
ARM_JOINTS = [name for name, _ in ROBOT_ARM_CONFIG]

# --------------------------------------------------------------------------------
# NAMED STATES
# --------------------------------------------------------------------------------
ARM_STATES = {
    "home":      [0.0, 0.0],
    "ready":     [np.pi/4, -np.pi/4],
    "folded":    [1.5, -1.5],
    "upright":   [np.pi/2, 0.0],
}

BASE_STATES = {
    "origin":    [0.0, 0.0, 0.0],
    "dock":      [-3.0, -4.0, 0.0],
}

WHOLE_BODY_STATES = {
    "start":     [-3.0, -4.0, 0.0, np.pi/4, -np.pi/4],
    "shelf":     [2.0, 3.0, 0.0, np.pi/2, -np.pi/4],
    "table":     [3.0, -4.0, 0.0, 0.0, -np.pi/2],
}

PREDEFINED_POSES = list(ARM_STATES.keys())
DEFAULT_GROUP = "arm"


def _states(joint_names, table):
    return {name: dict(zip(joint_names, values)) for name, values in table.items()}


def create_robot_model():
    """Helper that assembles the mobile manipulator model with all of its groups."""
    joints = [
        JointModel("base_x", LIMITS[0], LIMITS[1]),
        JointModel("base_y", LIMITS[0], LIMITS[1]),
        JointModel("base_theta", -np.pi, np.pi),
    ]
    for name, (lower, upper) in ROBOT_ARM_CONFIG:
        joints.append(JointModel(name, lower, upper))

    all_joints = BASE_JOINTS + ARM_JOINTS
    groups = [
        JointModelGroup("base", BASE_JOINTS, _states(BASE_JOINTS, BASE_STATES)),
        JointModelGroup("arm", ARM_JOINTS, _states(ARM_JOINTS, ARM_STATES)),
        JointModelGroup("whole_body", all_joints, _states(all_joints, WHOLE_BODY_STATES)),
    ]
    return RobotModel(ROBOT_NAME, joints, groups)
