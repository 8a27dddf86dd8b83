import logging

from posebench import PoseTestSuite
from posebench.errors import RobotDescriptionError
from posebench.messages import robot_state_to_msg
from posebench.robot_description import load_robot_model
from posebench.robot_model import RobotState

logger = logging.getLogger(__name__)


class PlanningSceneProvider:
    """
    Owns the robot model of a benchmark session and produces planning scene messages.

    The model is loaded lazily on first access, from a URDF/SRDF pair if one is given,
    otherwise the built-in mobile manipulator is used. A failed load leaves the model
    at None, which callers report as a model load error.
    """

    def __init__(self, robot_description=None, robot_model=None, scene_name="default"):
        self.robot_description = robot_description
        self.scene_name = scene_name
        self._robot_model = robot_model
        self._load_attempted = robot_model is not None

    def getRobotModel(self):
        if not self._load_attempted:
            self._load_attempted = True
            self._robot_model = self._load()
        return self._robot_model

    def _load(self):
        if self.robot_description is None:
            logger.info("No robot description configured, using built-in mobile manipulator")
            return PoseTestSuite.create_robot_model()
        try:
            return load_robot_model(self.robot_description["urdf"], self.robot_description["srdf"])
        except RobotDescriptionError as e:
            logger.error(f"Could not load robot description: {e}")
            return None

    def newPlanningSceneMessage(self, scene_msg):
        """
        Fill ``scene_msg`` (a dict) with the scene name, robot name and default robot state.

        Returns:
            bool: False if no robot model is available
        """
        robot_model = self.getRobotModel()
        if robot_model is None:
            return False
        scene_msg.clear()
        scene_msg["name"] = self.scene_name
        scene_msg["robot_model_name"] = robot_model.name
        scene_msg["robot_state"] = robot_state_to_msg(RobotState(robot_model))
        scene_msg["is_diff"] = False
        return True
