"""
Exceptions for SlideCreator.

Launch-time errors are raised to the caller and mapped to HTTP responses by
the API layer. Step-time errors are caught by the run engine and recorded
into the run record instead of propagating.
"""

from __future__ import annotations


class SlideCreatorError(Exception):
    """Base exception for SlideCreator errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message}


class NotFoundError(SlideCreatorError):
    """Raised when a referenced record does not exist."""

    status_code = 404

    def __init__(self, kind: str, identifier: str, *, by: str = "id"):
        if by == "name":
            message = f'{kind.capitalize()} not found: "{identifier}"'
        else:
            message = f"{kind.capitalize()} not found"
        super().__init__(message)
        self.kind = kind
        self.identifier = identifier


class ValidationError(SlideCreatorError):
    """Raised for invalid input (empty pipeline, step without a prompt, ...)."""

    status_code = 400


class NameConflictError(SlideCreatorError):
    """Raised when a name is already held by another named record."""

    status_code = 409

    def __init__(self, name: str, kind_label: str):
        super().__init__(f'Name "{name}" is already used by a {kind_label}')
        self.name = name
        self.kind_label = kind_label


class GenerationError(SlideCreatorError):
    """Raised when the generation service fails or returns nothing."""

    status_code = 502


class MalformedOutputError(GenerationError):
    """
    Raised when generated text is not a valid presentation document.

    The raw response is kept for diagnostics.
    """

    def __init__(self, message: str, raw_response: str):
        super().__init__(message)
        self.raw_response = raw_response

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message, "raw_response": self.raw_response}


class ConcurrentUpdateError(SlideCreatorError):
    """Raised when a run record was modified by another writer."""

    status_code = 409

    def __init__(self, run_id: str, expected_version: int):
        super().__init__(
            f"Pipeline run {run_id} was modified concurrently "
            f"(expected version {expected_version})"
        )
        self.run_id = run_id
        self.expected_version = expected_version
