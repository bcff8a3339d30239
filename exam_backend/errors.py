"""
Error taxonomy for the exam service.

Every failure raised by the exam operations carries an HTTP status code and a
machine-readable ``kind`` so the exception handlers registered in
``exam_backend.index`` can answer with a structured body instead of crashing.
"""

from __future__ import annotations


class ExamServiceError(Exception):
    """Base class for all errors surfaced to API callers."""

    status_code: int = 500
    kind: str = "ServerFault"
    default_message: str = "Something went wrong"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"success": False, "error": self.kind, "message": self.message}


class InvalidInput(ExamServiceError):
    status_code = 400
    kind = "InvalidInput"
    default_message = "Invalid exam data"


class NotFound(ExamServiceError):
    status_code = 404
    kind = "NotFound"
    default_message = "Exam not found"


class OutOfRange(NotFound):
    kind = "OutOfRange"
    default_message = "Question index out of range"


class InvalidState(ExamServiceError):
    status_code = 409
    kind = "InvalidState"
    default_message = "Exam cannot be graded in its current state"


class ServerFault(ExamServiceError):
    pass
