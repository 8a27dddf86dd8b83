# coding: utf-8

"""
Benchmark options read from a YAML file.

Expected layout::

    benchmark_config:
      robot_description: {urdf: robot.urdf, srdf: robot.srdf}   # optional
      parameters:
        name: predefined_poses
        runs: 10
        group: arm
        timeout: 1.0
        output_directory: results
        predefined_poses_group: arm
        predefined_poses: [home, ready]
        skip_identical_pairs: false
      planning_pipelines:
        pipelines: [joint_interpolation]
        joint_interpolation:
          planners: [linear]
          steps: 10
"""

import logging
import os

import yaml

from posebench.errors import OptionsError

logger = logging.getLogger(__name__)

DEFAULT_BENCHMARK_NAME = "predefined_poses"
DEFAULT_RUNS = 10
DEFAULT_TIMEOUT = 1.0


class BenchmarkOptions:
    """
    Options of one benchmark session.

    Relative paths (description files, output directory) are resolved against the
    directory of the options file.
    """

    def __init__(self, parameters=None, planning_pipelines=None, robot_description=None, base_dir="."):
        parameters = dict(parameters or {})
        planning_pipelines = dict(planning_pipelines or {})

        self.benchmark_name = str(parameters.get("name", DEFAULT_BENCHMARK_NAME))
        self.group_name = str(parameters.get("group", "") or "")
        self.predefined_poses_group = str(parameters.get("predefined_poses_group", "") or "")
        predefined_poses = parameters.get("predefined_poses") or []
        if not isinstance(predefined_poses, list):
            raise OptionsError(f"Parameter 'predefined_poses' must be a list, got {predefined_poses!r}")
        self.predefined_poses = [str(p) for p in predefined_poses]
        self.skip_identical_pairs = parameters.get("skip_identical_pairs", False)
        if not isinstance(self.skip_identical_pairs, bool):
            raise OptionsError(
                f"Parameter 'skip_identical_pairs' must be true or false, got {self.skip_identical_pairs!r}")

        try:
            self.runs = int(parameters.get("runs", DEFAULT_RUNS))
            self.timeout = float(parameters.get("timeout", DEFAULT_TIMEOUT))
        except (TypeError, ValueError) as e:
            raise OptionsError(f"Invalid runs/timeout parameter: {e}") from e
        if self.runs < 1:
            raise OptionsError(f"Parameter 'runs' must be positive, got {self.runs}")
        if self.timeout <= 0:
            raise OptionsError(f"Parameter 'timeout' must be positive, got {self.timeout}")

        output_directory = parameters.get("output_directory")
        self.output_directory = os.path.join(base_dir, output_directory) if output_directory else None

        self.robot_description = None
        if robot_description:
            if "urdf" not in robot_description or "srdf" not in robot_description:
                raise OptionsError("robot_description needs both 'urdf' and 'srdf'")
            self.robot_description = {
                key: _resolve(robot_description[key], base_dir) for key in ("urdf", "srdf")
            }

        self._pipelines = {}
        for name in planning_pipelines.get("pipelines") or []:
            pipeline_config = dict(planning_pipelines.get(name) or {})
            planners = pipeline_config.pop("planners", None)
            pipeline_config.pop("name", None)
            self._pipelines[str(name)] = {
                "planners": [str(p) for p in planners] if planners else [],
                "config": pipeline_config,
            }

    @classmethod
    def from_file(cls, path):
        if not os.path.isfile(path):
            raise OptionsError(f"Options file not found: {path}")
        with open(path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise OptionsError(f"Malformed options file {path}: {e}") from e
        logger.info(f"Loaded benchmark options from {path}")
        return cls.from_dict(data, base_dir=os.path.dirname(os.path.abspath(path)))

    @classmethod
    def from_dict(cls, data, base_dir="."):
        config = data.get("benchmark_config") if isinstance(data, dict) else None
        if not isinstance(config, dict) or not isinstance(config.get("parameters"), dict):
            raise OptionsError("Options need a 'benchmark_config.parameters' section")
        return cls(config["parameters"], config.get("planning_pipelines"), config.get("robot_description"),
                   base_dir=base_dir)

    # --- Options provider interface ---

    def getPredefinedPosesGroup(self):
        return self.predefined_poses_group

    def getGroupName(self):
        return self.group_name

    def getPredefinedPoses(self):
        return list(self.predefined_poses)

    def getPlanningPipelineNames(self):
        return list(self._pipelines.keys())

    def getPlannerIds(self, pipeline_name):
        """Empty list means: every planner the pipeline provides."""
        return list(self._pipelines.get(pipeline_name, {}).get("planners", []))

    def getPipelineConfig(self, pipeline_name):
        return dict(self._pipelines.get(pipeline_name, {}).get("config", {}))


def _resolve(path, base_dir):
    # inline XML is passed through untouched
    if path.lstrip().startswith("<") or os.path.isabs(path):
        return path
    return os.path.join(base_dir, path)
