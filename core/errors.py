"""Error taxonomy for the workflow engine"""

from typing import Optional


class WorkflowError(Exception):
    """Base class for errors raised by workflow steps"""
    pass


class ValidationError(WorkflowError):
    """Raised before a run starts when its inputs or config are invalid."""
    pass


class NotFoundError(WorkflowError):
    """Raised when a required reference (e.g. a template) does not exist."""
    pass


class GenerationError(WorkflowError):
    """Raised when a script section could not be generated."""

    def __init__(self, section_id: str, cause: Optional[BaseException] = None):
        self.section_id = section_id
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to generate section '{section_id}'{detail}")


class PersistenceError(WorkflowError):
    """Raised when a mandatory write to the storage backend fails."""
    pass


class StepTimeoutError(WorkflowError):
    """Raised when an external capability call exceeds its timeout."""

    def __init__(self, capability: str, timeout: float):
        self.capability = capability
        self.timeout = timeout
        super().__init__(f"{capability} timed out after {timeout:g}s")


class WorkflowCancelled(WorkflowError):
    """Raised internally when a run is cancelled at a step boundary or before a store write."""
    pass
