"""Shared pytest fixtures: robot models, description strings and option factories."""

import pytest

from posebench import PoseTestSuite
from posebench.benchmark.BenchmarkOptions import BenchmarkOptions
from posebench.robot_model import JointModel, JointModelGroup, RobotModel

URDF = """<?xml version="1.0"?>
<robot name="two_link">
  <link name="base_link"/>
  <link name="link_1"/>
  <link name="link_2"/>
  <link name="tool"/>
  <joint name="shoulder" type="revolute">
    <parent link="base_link"/><child link="link_1"/>
    <limit lower="-1.5" upper="1.5" effort="10" velocity="1"/>
  </joint>
  <joint name="elbow" type="continuous">
    <parent link="link_1"/><child link="link_2"/>
  </joint>
  <joint name="tool_fixed" type="fixed">
    <parent link="link_2"/><child link="tool"/>
  </joint>
  <joint name="slider" type="prismatic">
    <parent link="base_link"/><child link="tool"/>
    <limit lower="0.0" upper="0.5"/>
  </joint>
</robot>
"""

SRDF = """<?xml version="1.0"?>
<robot name="two_link">
  <group name="arm">
    <joint name="shoulder"/>
    <joint name="elbow"/>
    <joint name="tool_fixed"/>
  </group>
  <group name="rail">
    <joint name="slider"/>
  </group>
  <group name="everything">
    <group name="arm"/>
    <group name="rail"/>
  </group>
  <group_state name="home" group="arm">
    <joint name="shoulder" value="0"/>
    <joint name="elbow" value="0"/>
  </group_state>
  <group_state name="ready" group="arm">
    <joint name="shoulder" value="0.5"/>
    <joint name="elbow" value="-1.0"/>
  </group_state>
  <group_state name="half" group="arm">
    <joint name="shoulder" value="0.5"/>
  </group_state>
  <group_state name="out" group="rail">
    <joint name="slider" value="0.4"/>
  </group_state>
</robot>
"""


def make_arm_model():
    """Three joint model whose 'arm' group knows 'home', 'ready' and an incomplete 'half'."""
    joints = [
        JointModel("lift", 0.0, 1.0, default=0.2),
        JointModel("shoulder", -2.0, 2.0),
        JointModel("elbow", -2.0, 2.0),
    ]
    arm = JointModelGroup("arm", ["shoulder", "elbow"], {
        "home": {"shoulder": 0.0, "elbow": 0.0},
        "ready": {"shoulder": 1.0, "elbow": -0.5},
        "half": {"shoulder": 1.0},
    })
    lift = JointModelGroup("lift", ["lift"], {"up": {"lift": 0.9}})
    return RobotModel("test_robot", joints, [arm, lift])


@pytest.fixture
def arm_model():
    return make_arm_model()


@pytest.fixture
def mobile_manipulator():
    return PoseTestSuite.create_robot_model()


@pytest.fixture
def make_options():
    def factory(**parameters):
        pipelines = parameters.pop("planning_pipelines", {"pipelines": ["joint_interpolation"]})
        params = {"group": "arm", "runs": 1, "predefined_poses_group": "arm",
                  "predefined_poses": ["home", "ready"]}
        params.update(parameters)
        return BenchmarkOptions(params, pipelines)
    return factory


@pytest.fixture
def urdf():
    return URDF


@pytest.fixture
def srdf():
    return SRDF
