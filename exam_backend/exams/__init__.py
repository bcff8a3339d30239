"""
Exam store and grading service.

Teachers upload questions with answer keys, students fetch redacted questions
and submit answers that are graded on the server, and teachers review the
results. Records live in an in-memory store behind the ``ExamStore`` protocol.
"""

from .router import router  # noqa: F401
