class PosebenchError(Exception):
    """Base class of all errors raised by posebench."""


class OptionsError(PosebenchError):
    """Benchmark options file is missing or malformed."""


class RobotDescriptionError(PosebenchError):
    """URDF or SRDF input could not be turned into a robot model."""


class QueryBuildError(PosebenchError):
    """
    Fatal failure while building the benchmark query set.

    Carries the offending name (group or pose) in ``subject`` so the operator can
    fix the configuration from the message alone.
    """

    def __init__(self, message, subject=None):
        super().__init__(message)
        self.message = message
        self.subject = subject


class ModelLoadError(QueryBuildError):
    """No planning scene or robot model available."""


class UnknownGroupError(QueryBuildError):
    """The robot model has no joint group with the configured name."""


class EmptyResultError(QueryBuildError):
    """None of the configured predefined poses could be resolved."""
