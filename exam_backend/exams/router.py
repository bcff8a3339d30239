from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Path

from .schemas import (
    CreateExamRequest,
    CreateExamResponse,
    ErrorResponse,
    ExamKeyRequest,
    ResultsResponse,
    StudentExamResponse,
    SubmitExamRequest,
    SubmitExamResponse,
    VerifyAnswerRequest,
    VerifyAnswerResponse,
)
from .service import ExamService, get_exam_service


router = APIRouter(tags=["Exams"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Exam not found"}}
_BAD_INPUT = {400: {"model": ErrorResponse, "description": "Invalid request body"}}


@router.post(
    "/teacher/create-exam",
    response_model=CreateExamResponse,
    responses=_BAD_INPUT,
    summary="Upload an exam with its answer key",
)
async def create_exam(
    payload: CreateExamRequest = Body(...),
    service: ExamService = Depends(get_exam_service),
) -> CreateExamResponse:
    return await service.create_exam(payload)


@router.post(
    "/student/get-exam",
    response_model=StudentExamResponse,
    responses={**_BAD_INPUT, **_NOT_FOUND},
    summary="Fetch exam questions without answers",
)
async def get_exam(
    payload: ExamKeyRequest = Body(...),
    service: ExamService = Depends(get_exam_service),
) -> StudentExamResponse:
    return await service.get_exam_for_student(payload.exam_key)


@router.post(
    "/student/submit-exam",
    response_model=SubmitExamResponse,
    responses={
        **_BAD_INPUT,
        **_NOT_FOUND,
        409: {"model": ErrorResponse, "description": "Exam has no questions"},
    },
    summary="Submit answers for server-side grading",
)
async def submit_exam(
    payload: SubmitExamRequest = Body(...),
    service: ExamService = Depends(get_exam_service),
) -> SubmitExamResponse:
    return await service.submit_exam(payload)


@router.get(
    "/teacher/results/{exam_key}",
    response_model=ResultsResponse,
    responses=_NOT_FOUND,
    summary="List all submissions for an exam",
)
async def get_results(
    exam_key: str = Path(..., description="Exam key used at creation."),
    service: ExamService = Depends(get_exam_service),
) -> ResultsResponse:
    return await service.get_results(exam_key)


@router.post(
    "/teacher/verify-answer",
    response_model=VerifyAnswerResponse,
    responses={**_BAD_INPUT, **_NOT_FOUND},
    summary="Show the answer key of one question (teacher only)",
)
async def verify_answer(
    payload: VerifyAnswerRequest = Body(...),
    service: ExamService = Depends(get_exam_service),
) -> VerifyAnswerResponse:
    return await service.verify_answer(payload.exam_key, payload.question_index)
