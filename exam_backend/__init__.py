"""Exam administration backend: upload, redact, grade, review."""

__version__ = "0.1.0"
