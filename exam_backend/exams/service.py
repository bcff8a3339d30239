from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from ..errors import InvalidInput, NotFound, OutOfRange
from .grading import compute_score, count_correct, redact_questions
from .schemas import (
    CreateExamRequest,
    CreateExamResponse,
    Exam,
    QRData,
    Result,
    ResultsResponse,
    StudentExamResponse,
    SubmitExamRequest,
    SubmitExamResponse,
    VerifyAnswerResponse,
)
from .store import ExamStore, store

logger = logging.getLogger(__name__)

TEACHER_ONLY_NOTE = "Teacher only - never shared with students"


class ExamService:
    """The exam operations, independent of the HTTP layer."""

    def __init__(self, exam_store: ExamStore) -> None:
        self._store = exam_store

    async def _require(self, exam_key: str) -> Exam:
        exam = await self._store.get(exam_key)
        if exam is None:
            raise NotFound(f"Exam '{exam_key}' not found")
        return exam

    async def create_exam(self, request: CreateExamRequest) -> CreateExamResponse:
        if not request.exam_key or not request.exam_key.strip():
            raise InvalidInput("examKey is required")
        if not request.questions:
            raise InvalidInput("At least one question is required")

        exam = Exam(
            exam_key=request.exam_key,
            exam_info=request.exam_info,
            questions=tuple(request.questions),
            created_at=datetime.now(timezone.utc),
        )
        await self._store.create_or_replace(exam)
        logger.info(
            f"Created exam {exam.exam_key} with {len(exam.questions)} question(s)"
        )
        return CreateExamResponse(
            message="Exam created successfully", exam_key=exam.exam_key
        )

    async def get_exam_for_student(self, exam_key: str) -> StudentExamResponse:
        exam = await self._require(exam_key)
        return StudentExamResponse(
            exam_info=exam.exam_info, questions=redact_questions(exam.questions)
        )

    async def submit_exam(self, request: SubmitExamRequest) -> SubmitExamResponse:
        student = request.student_data

        def build_result(exam: Exam) -> Result:
            total = len(exam.questions)
            correct = count_correct(exam.questions, request.answers)
            return Result(
                result_id=uuid.uuid4().hex,
                student_name=student.name,
                student_nis=student.nis,
                student_class=student.class_,
                score=compute_score(correct, total),
                correct_count=correct,
                total_questions=total,
                violations=request.violations,
                timestamp=datetime.now(timezone.utc),
            )

        result = await self._store.append_result(request.exam_key, build_result)
        if result is None:
            raise NotFound(f"Exam '{request.exam_key}' not found")

        logger.info(
            f"Graded submission {result.result_id} for exam {request.exam_key}: "
            f"{result.correct_count}/{result.total_questions} ({result.score})"
        )
        return SubmitExamResponse(
            score=result.score,
            correct_count=result.correct_count,
            total_questions=result.total_questions,
            qr_data=QRData(
                exam_key=request.exam_key,
                student_nis=result.student_nis,
                score=result.score,
                timestamp=result.timestamp,
            ),
            result_id=result.result_id,
        )

    async def get_results(self, exam_key: str) -> ResultsResponse:
        exam = await self._require(exam_key)
        return ResultsResponse(exam_info=exam.exam_info, results=list(exam.results))

    async def verify_answer(
        self, exam_key: str, question_index: int
    ) -> VerifyAnswerResponse:
        exam = await self._require(exam_key)
        if not 0 <= question_index < len(exam.questions):
            raise OutOfRange(
                f"Question index {question_index} is out of range "
                f"(exam has {len(exam.questions)} question(s))"
            )
        question = exam.questions[question_index]
        return VerifyAnswerResponse(
            question=question.text,
            correct_answers=list(question.correct_answers),
            note=TEACHER_ONLY_NOTE,
        )


exam_service = ExamService(store)


def get_exam_service() -> ExamService:
    return exam_service
