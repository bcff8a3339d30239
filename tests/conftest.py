"""
Pytest configuration and fixtures
"""
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add project root to Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from exam_backend.exams.service import ExamService, get_exam_service  # noqa: E402
from exam_backend.exams.store import InMemoryExamStore  # noqa: E402
from exam_backend.index import create_app  # noqa: E402


@pytest.fixture
def exam_store():
    """A fresh, empty store per test"""
    return InMemoryExamStore()


@pytest.fixture
def exam_service(exam_store):
    return ExamService(exam_store)


@pytest.fixture
def app(exam_service):
    """App wired to the per-test service instead of the process-wide one"""
    application = create_app()
    application.dependency_overrides[get_exam_service] = lambda: exam_service
    yield application
    application.dependency_overrides = {}


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def exam_payload():
    """Four-question exam mixing single and multiple answers"""
    return {
        "examKey": "MATH-7A",
        "examInfo": {"title": "Algebra quiz", "subject": "Math", "duration": 45},
        "questions": [
            {
                "text": "2 + 2 = ?",
                "image": None,
                "options": ["3", "4", "5", "22"],
                "correctAnswers": ["B"],
            },
            {
                "text": "Which numbers are prime?",
                "image": "data:image/png;base64,iVBORw0KGgo=",
                "options": ["2", "3", "4", "9"],
                "correctAnswers": ["A", "B"],
            },
            {
                "text": "Solve x - 1 = 2",
                "options": ["1", "2", "3", "4"],
                "correctAnswers": ["C"],
            },
            {
                "text": "Which are even?",
                "options": ["2", "3", "5", "8"],
                "correctAnswers": ["D", "A"],
            },
        ],
    }


@pytest.fixture
def student_data():
    return {"name": "Budi Santoso", "nis": "10234", "class": "7A"}
