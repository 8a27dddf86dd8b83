"""
Robot model loader for URDF (joints and limits) and SRDF (groups and named states).

Only what the pose benchmarks need is read: actuated joints with their limits,
the link tree spanned by all joints, planning groups built from joints, links,
chains and nested groups, and ``group_state`` entries. Geometry and collision
pairs are ignored.
"""

import logging
import math
import os
import xml.etree.ElementTree as ET

from posebench.errors import RobotDescriptionError
from posebench.robot_model import JointModel, JointModelGroup, RobotModel

logger = logging.getLogger(__name__)

ACTUATED_JOINT_TYPES = ("revolute", "prismatic", "continuous")


def _parse_xml(source, kind):
    """Accepts either an XML string or a path to an XML file."""
    try:
        if source.lstrip().startswith("<"):
            return ET.fromstring(source)
        if not os.path.isfile(source):
            raise RobotDescriptionError(f"{kind} file not found: {source}")
        # binary parse, the XML declaration decides the encoding
        return ET.parse(source).getroot()
    except ET.ParseError as e:
        raise RobotDescriptionError(f"Malformed {kind}: {e}") from e
    except OSError as e:
        raise RobotDescriptionError(f"Cannot read {kind} file {source}: {e}") from e


def _parse_urdf_joints(root):
    joints = []
    for elem in root.findall("joint"):
        name = elem.get("name")
        joint_type = elem.get("type")
        if joint_type not in ACTUATED_JOINT_TYPES:
            continue

        if joint_type == "continuous":
            joints.append(JointModel(name, -math.pi, math.pi))
            continue

        limit = elem.find("limit")
        if limit is None or limit.get("lower") is None or limit.get("upper") is None:
            raise RobotDescriptionError(f"Joint '{name}' of type '{joint_type}' has no lower/upper limit")
        try:
            joints.append(JointModel(name, float(limit.get("lower")), float(limit.get("upper"))))
        except ValueError as e:
            raise RobotDescriptionError(f"Joint '{name}': {e}") from e
    return joints


def _parse_urdf_tree(root):
    """Returns {child_link: (joint_name, parent_link)} over all joints, fixed ones included."""
    tree = {}
    for elem in root.findall("joint"):
        parent = elem.find("parent")
        child = elem.find("child")
        if parent is None or child is None:
            continue
        tree[child.get("link")] = (elem.get("name"), parent.get("link"))
    return tree


def _chain_joints(base_link, tip_link, tree):
    joint_names = []
    link = tip_link
    while link != base_link:
        if link not in tree:
            raise RobotDescriptionError(f"Link '{tip_link}' is not below '{base_link}' in the URDF")
        joint_name, link = tree[link]
        joint_names.append(joint_name)
    joint_names.reverse()
    return joint_names


class _GroupResolver:
    """Expands SRDF group members into the actuated joints they span."""

    def __init__(self, group_elems, actuated, tree):
        self.group_elems = group_elems
        self.actuated = actuated
        self.tree = tree
        self.urdf_joints = {joint_name for joint_name, _ in tree.values()} | actuated
        self.links = set(tree) | {parent for _, parent in tree.values()}

    def resolve(self, group_name, visiting=()):
        if group_name in visiting:
            raise RobotDescriptionError(f"Group '{group_name}' includes itself")
        elem = self.group_elems.get(group_name)
        if elem is None:
            raise RobotDescriptionError(f"Unknown group '{group_name}' referenced in SRDF")

        joint_names = []
        for child in elem:
            if child.tag == "joint":
                if child.get("name") not in self.urdf_joints:
                    raise RobotDescriptionError(
                        f"Group '{group_name}' references joint '{child.get('name')}' missing in the URDF")
                joint_names.append(child.get("name"))
            elif child.tag == "link":
                link = child.get("name")
                if link not in self.links:
                    raise RobotDescriptionError(f"Group '{group_name}' references unknown link '{link}'")
                # a link contributes the joint that moves it
                if link in self.tree:
                    joint_names.append(self.tree[link][0])
            elif child.tag == "chain":
                joint_names.extend(_chain_joints(child.get("base_link"), child.get("tip_link"), self.tree))
            elif child.tag == "group":
                joint_names.extend(self.resolve(child.get("name"), visiting + (group_name,)))
            else:
                raise RobotDescriptionError(f"Group '{group_name}' has unsupported member <{child.tag}>")

        # fixed joints carry no variable; keep first occurrence
        return list(dict.fromkeys(j for j in joint_names if j in self.actuated))


def _parse_srdf_groups(root, actuated, tree):
    group_elems = {g.get("name"): g for g in root.findall("group")}
    resolver = _GroupResolver(group_elems, actuated, tree)

    states = {}
    for elem in root.findall("group_state"):
        group_name = elem.get("group")
        values = {}
        for joint in elem.findall("joint"):
            try:
                values[joint.get("name")] = float(joint.get("value").split()[0])
            except (AttributeError, ValueError, IndexError) as e:
                raise RobotDescriptionError(
                    f"group_state '{elem.get('name')}': bad value for joint '{joint.get('name')}'") from e
        states.setdefault(group_name, {})[elem.get("name")] = values

    groups = []
    for group_name in group_elems:
        joint_names = resolver.resolve(group_name)
        if not joint_names:
            raise RobotDescriptionError(f"Group '{group_name}' contains no actuated joints")
        groups.append(JointModelGroup(group_name, joint_names, states.get(group_name)))

    for group_name in states:
        if group_name not in group_elems:
            logger.warning(f"SRDF defines group_state entries for unknown group '{group_name}'")
    return groups


def load_robot_model(urdf, srdf):
    """
    Build a RobotModel from a URDF and an SRDF.

    Args:
        urdf (str): URDF file path or XML string
        srdf (str): SRDF file path or XML string

    Returns:
        RobotModel

    Raises:
        RobotDescriptionError: missing or unreadable file, malformed XML or inconsistent definitions
    """
    urdf_root = _parse_xml(urdf, "URDF")
    srdf_root = _parse_xml(srdf, "SRDF")

    joints = _parse_urdf_joints(urdf_root)
    actuated = {j.name for j in joints}
    groups = _parse_srdf_groups(srdf_root, actuated, _parse_urdf_tree(urdf_root))

    try:
        model = RobotModel(urdf_root.get("name", "robot"), joints, groups)
    except ValueError as e:
        raise RobotDescriptionError(str(e)) from e

    logger.debug(f"Loaded robot model {model}")
    return model
