"""Engine error types.

Every failure mode of the engine degrades to a documented default at its
own boundary; these exceptions exist so the boundaries can tell the
failure modes apart.
"""


class EngineError(Exception):
    """Base exception for all engine errors."""

    pass


class MalformedExternalPlan(EngineError):
    """Raised when the generative collaborator's plan payload is missing or invalid."""

    pass


class InvariantViolation(EngineError):
    """Raised when a post-enforcement invariant does not hold (internal defect)."""

    pass


class CollaboratorFailure(EngineError):
    """Raised by collaborator adapters when the generative or persistence service fails."""

    pass
