"""
Error taxonomy for the data layer.
Every mutating service call either returns the stored record or raises one of these.
"""
from typing import Dict, List, Optional


class TalentFlowError(Exception):
    """Base class for errors raised by the services."""


class ValidationError(TalentFlowError, ValueError):
    """Bad or missing input. Raised before any state is touched."""

    def __init__(self, message: str, fields: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.fields = dict(fields or {})


class AssessmentValidationError(ValidationError):
    """One or more visible questions failed validation on submit."""

    def __init__(self, issues: List):
        fields = {issue.question_id: issue.message for issue in issues}
        super().__init__(f"{len(issues)} question(s) failed validation", fields)
        self.issues = list(issues)


class NotFoundError(TalentFlowError, LookupError):
    """An id referenced by the caller does not exist."""


class StorageError(TalentFlowError):
    """The backend failed to read or write. Not retried here."""
