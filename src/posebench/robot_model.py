import numpy as np


class JointModel:
    """
    Single actuated joint with position bounds.

    The default position is 0 clamped into the bounds, so a joint whose range
    does not contain 0 defaults to its nearest bound.
    """

    def __init__(self, name, lower, upper, default=None):
        if lower > upper:
            raise ValueError(f"Joint '{name}': lower bound {lower} is above upper bound {upper}")
        self.name = name
        self.lower = float(lower)
        self.upper = float(upper)
        if default is None:
            default = min(max(0.0, self.lower), self.upper)
        self.default = float(default)

    def satisfiesBounds(self, value, margin=0.0):
        return self.lower - margin <= value <= self.upper + margin

    def __repr__(self):
        return f"JointModel({self.name!r}, [{self.lower}, {self.upper}])"


class JointModelGroup:
    """Named, ordered subset of the robot's joints plus its named states."""

    def __init__(self, name, joint_names, default_states=None):
        self.name = name
        self.joint_names = list(joint_names)
        # {state_name: {joint_name: value}}
        self.default_states = dict(default_states or {})

    def getDefaultStateNames(self):
        return list(self.default_states.keys())

    def getVariableDefaultPositions(self, state_name):
        """
        Look up a named state of this group.

        Returns:
            dict or None: {joint_name: value} for every joint of the group, or None
            if the name is unknown or the named state leaves a group joint undefined.
        """
        values = self.default_states.get(state_name)
        if values is None:
            return None
        if any(j not in values for j in self.joint_names):
            return None
        return {j: values[j] for j in self.joint_names}

    def __repr__(self):
        return f"JointModelGroup({self.name!r}, {self.joint_names})"


class RobotModel:
    """
    Static kinematic description: joints, joint groups and named group states.

    The model is treated as immutable once built. Several RobotState instances
    and the benchmark executor share one model read-only.
    """

    def __init__(self, name, joints, groups):
        self.name = name
        self._joints = list(joints)
        self._joint_index = {}
        for i, joint in enumerate(self._joints):
            if joint.name in self._joint_index:
                raise ValueError(f"Robot model '{name}' defines joint '{joint.name}' twice")
            self._joint_index[joint.name] = i

        self._groups = {}
        for group in groups:
            unknown = [j for j in group.joint_names if j not in self._joint_index]
            if unknown:
                raise ValueError(f"Group '{group.name}' references unknown joints {unknown}")
            self._groups[group.name] = group

    # --- Model queries ---

    @property
    def variable_names(self):
        return [j.name for j in self._joints]

    def getDim(self):
        return len(self._joints)

    def getJointModel(self, joint_name):
        return self._joints[self._joint_index[joint_name]]

    def getJointIndex(self, joint_name):
        return self._joint_index[joint_name]

    def hasJointModelGroup(self, group_name):
        return group_name in self._groups

    def getJointModelGroup(self, group_name):
        """Returns the group or None, the model never raises for unknown group names."""
        return self._groups.get(group_name)

    def getJointModelGroupNames(self):
        return list(self._groups.keys())

    def getDefaultPositions(self):
        return np.array([j.default for j in self._joints], dtype=float)

    def __repr__(self):
        return f"RobotModel({self.name!r}, joints={self.getDim()}, groups={self.getJointModelGroupNames()})"


class RobotState:
    """
    Full assignment of a value to every joint of a RobotModel.

    Values are kept in a numpy vector ordered like ``RobotModel.variable_names``.
    """

    def __init__(self, robot_model):
        self.robot_model = robot_model
        self.positions = robot_model.getDefaultPositions()

    def setToDefaultValues(self, group=None, state_name=None):
        """
        Without arguments, reset every joint to its default position.

        With a group and a state name, overwrite the group's joints with the named
        state and leave all other joints untouched.

        Args:
            group (JointModelGroup): group the named state belongs to
            state_name (str): name of the group state, e.g. "home"

        Returns:
            bool: False if the named state is unknown or incomplete; the state is
            not modified in that case.
        """
        if group is None and state_name is None:
            self.positions = self.robot_model.getDefaultPositions()
            return True

        values = group.getVariableDefaultPositions(state_name)
        if values is None:
            return False
        for joint_name, value in values.items():
            self.positions[self.robot_model.getJointIndex(joint_name)] = value
        return True

    def getVariablePosition(self, joint_name):
        return float(self.positions[self.robot_model.getJointIndex(joint_name)])

    def setVariablePositions(self, values):
        for joint_name, value in values.items():
            self.positions[self.robot_model.getJointIndex(joint_name)] = value

    def getJointGroupPositions(self, group):
        idx = [self.robot_model.getJointIndex(j) for j in group.joint_names]
        return self.positions[idx].copy()

    def satisfiesBounds(self, group=None, margin=0.0):
        names = group.joint_names if group is not None else self.robot_model.variable_names
        for joint_name in names:
            joint = self.robot_model.getJointModel(joint_name)
            if not joint.satisfiesBounds(self.getVariablePosition(joint_name), margin):
                return False
        return True

    def copy(self):
        other = RobotState(self.robot_model)
        other.positions = self.positions.copy()
        return other

    def __eq__(self, other):
        if not isinstance(other, RobotState):
            return NotImplemented
        return self.robot_model is other.robot_model and np.array_equal(self.positions, other.positions)

    def __repr__(self):
        return f"RobotState({dict(zip(self.robot_model.variable_names, self.positions.tolist()))})"
