"""Error kinds surfaced to callers of the engine."""


class TaskboardError(Exception):
    """Base class for all taskboard errors."""

    pass


class SourceUnavailable(TaskboardError):
    """The task histories could not be fetched. The refresh is abandoned."""

    pass


class AuxiliaryUnavailable(TaskboardError):
    """Metadata or logs could not be fetched. Recovered as an empty collection."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"{source} unavailable: {reason}")
        self.source = source


class EditRejected(TaskboardError):
    """An edit targeted a frozen day or was malformed. Nothing was written."""

    pass


class WriteFailed(TaskboardError):
    """A backend write did not succeed. `stage` names the write that failed."""

    def __init__(self, stage: str, reason: str):
        super().__init__(f"Failed to write {stage}: {reason}")
        self.stage = stage
