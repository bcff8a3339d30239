from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

# An answer option is identified either by its label ("A") or its position (0).
OptionId = Union[int, str]

# Surrounding whitespace is dropped; a blank key is rejected.
ExamKey = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Question(CamelModel):
    text: str
    image: Optional[str] = None
    options: List[str] = Field(default_factory=list)
    correct_answers: List[OptionId]


class StudentQuestion(CamelModel):
    """Question as shown to students. Has no answer key field at all."""

    text: str
    image: Optional[str] = None
    options: List[str] = Field(default_factory=list)


class StudentData(CamelModel):
    # NIS is often sent as a number.
    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str
    nis: str
    class_: Optional[str] = Field(default=None, alias="class")


class Result(CamelModel):
    result_id: str
    student_name: str
    student_nis: str
    student_class: Optional[str] = None
    score: int = Field(..., ge=0, le=100)
    correct_count: int = Field(..., ge=0)
    total_questions: int = Field(..., ge=0)
    violations: Any = None
    timestamp: datetime


class Exam(CamelModel):
    exam_key: str
    exam_info: Any = None
    questions: Tuple[Question, ...]
    created_at: datetime
    results: List[Result] = Field(default_factory=list)


# Requests


class CreateExamRequest(CamelModel):
    exam_key: ExamKey
    exam_info: Any = None
    questions: List[Question] = Field(..., min_length=1)


class ExamKeyRequest(CamelModel):
    exam_key: ExamKey


class SubmitExamRequest(CamelModel):
    exam_key: ExamKey
    student_data: StudentData
    answers: List[Optional[List[OptionId]]] = Field(default_factory=list)
    violations: Any = None


class VerifyAnswerRequest(CamelModel):
    exam_key: ExamKey
    question_index: int


# Responses


class CreateExamResponse(CamelModel):
    success: bool = True
    message: str
    exam_key: str


class StudentExamResponse(CamelModel):
    success: bool = True
    exam_info: Any = None
    questions: List[StudentQuestion]


class QRData(CamelModel):
    exam_key: str
    student_nis: str
    score: int
    timestamp: datetime
    verified: bool = True


class SubmitExamResponse(CamelModel):
    success: bool = True
    score: int
    correct_count: int
    total_questions: int
    qr_data: QRData
    result_id: str


class ResultsResponse(CamelModel):
    success: bool = True
    exam_info: Any = None
    results: List[Result]


class VerifyAnswerResponse(CamelModel):
    success: bool = True
    question: str
    correct_answers: List[OptionId]
    note: str


class ErrorResponse(CamelModel):
    success: bool = False
    error: str
    message: str
