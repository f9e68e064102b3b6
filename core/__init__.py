"""Core components - workflow building blocks and infrastructure"""

from .claude_client import ClaudeClient
from .errors import (
    WorkflowError,
    ValidationError,
    NotFoundError,
    GenerationError,
    PersistenceError,
    StepTimeoutError,
    WorkflowCancelled,
)

# Note: WorkflowController is NOT imported here to avoid circular imports
# Import it directly: from workflows import WorkflowController

__all__ = [
    # Claude client
    "ClaudeClient",

    # Errors
    "WorkflowError",
    "ValidationError",
    "NotFoundError",
    "GenerationError",
    "PersistenceError",
    "StepTimeoutError",
    "WorkflowCancelled",
]
