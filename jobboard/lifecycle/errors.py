# ========================================
# jobboard/lifecycle/errors.py
# ========================================
"""Errors raised by the lifecycle core.

Each error carries the HTTP status the API layer answers with and whatever
context (current state, attempted state, ids) a client needs to render a
precise message. None of them are retried by the core.
"""

from typing import Any, Dict, List


class LifecycleError(Exception):
    status_code = 400

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, "error": type(self).__name__, **self.context}


class InvalidTransition(LifecycleError):
    """Attempted status edge is not in the transition table."""

    status_code = 400

    def __init__(self, entity: str, current: str, target: str, message: str = None):
        self.entity = entity
        self.current = current
        self.target = target
        super().__init__(
            message or f"Cannot transition {entity} from '{current}' to '{target}'",
            entity=entity,
            current_status=current,
            target_status=target,
        )


class NotFound(LifecycleError):
    status_code = 404


class Unauthorized(LifecycleError):
    status_code = 403


class ValidationError(LifecycleError):
    status_code = 422

    @classmethod
    def from_pydantic(cls, exc) -> "ValidationError":
        errors: List[str] = []
        for err in exc.errors():
            loc = ".".join(str(part) for part in err.get("loc", ()))
            msg = err.get("msg", "invalid value")
            errors.append(f"{loc}: {msg}" if loc else msg)
        return cls("Validation error", errors=errors)


class Conflict(LifecycleError):
    status_code = 409


class StaleState(Conflict):
    """Document changed since it was read; re-read and try again."""
