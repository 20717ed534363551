class BuildSketchError(Exception):
    """Base exception for the BuildSketch backend."""

    pass


class ProjectNotFoundError(BuildSketchError):
    """Raised when a referenced project does not exist."""

    def __init__(self, project_id):
        self.project_id = project_id
        super().__init__(f"Project {project_id} not found")


class PolicyViolationError(BuildSketchError):
    """Raised when an update breaks the delay accountability rule."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class ConflictRetryError(BuildSketchError):
    """Raised when a concurrent writer changed the project first.

    The caller should reload and resubmit the whole update.
    """

    def __init__(self, project_id):
        self.project_id = project_id
        super().__init__(f"Project {project_id} was modified concurrently; reload and retry")


class InvalidUpdateError(BuildSketchError):
    """Raised when a change set is well-formed but semantically invalid."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class ActorRequiredError(BuildSketchError):
    """Raised when a mutation is attempted without an authenticated actor."""

    def __init__(self):
        super().__init__("An authenticated actor is required to modify projects")
