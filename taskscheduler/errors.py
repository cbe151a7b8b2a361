from __future__ import annotations


class SchedulerError(RuntimeError):
    """Base class for failures of one scheduling run."""


class TaskValidationError(SchedulerError, ValueError):
    pass


class SerializationError(SchedulerError):
    pass


class EngineStartError(SchedulerError):
    pass


class ArtifactTimeoutError(SchedulerError):
    def __init__(self, message: str, *, missing: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.missing = missing


class RunCancelledError(SchedulerError):
    pass


class ResultDecodeError(SchedulerError, ValueError):
    pass


class RunAlreadyActiveError(SchedulerError):
    pass
