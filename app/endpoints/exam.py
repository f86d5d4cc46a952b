from typing import List, Union
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.schemas.response import APIResponse
from app.utils import deps
from app.schemas.exam import Exam, ExamCreate, ExamDetail, ExamPublicDetail, ExamUpdate
from app.schemas.submission import Submission
from app.schemas.user import UserContext
from app.services.exam import ExamService
from app.services.submission import SubmissionService

router = APIRouter()

@router.post("/", response_model=APIResponse[ExamDetail], status_code=status.HTTP_201_CREATED)
async def create_exam(
    *,
    db: Session = Depends(deps.get_transactional_db),
    exam_in: ExamCreate,
    context: UserContext = Depends(deps.get_current_user_with_context),
    exam_service: ExamService = Depends(deps.get_exam_service)
):
    new_exam = exam_service.create_exam(db, exam_in=exam_in, current_user_context=context)
    return APIResponse(message="Exam created successfully", data=new_exam)


@router.get("/", response_model=APIResponse[List[Exam]])
async def get_all_exams(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_with_context),
    exam_service: ExamService = Depends(deps.get_exam_service),
    skip: int = 0,
    limit: int = 100
):
    exams = exam_service.get_all_exams(db, current_user_context=context, skip=skip, limit=limit)
    return APIResponse(message="Exams retrieved successfully", data=[Exam.model_validate(e) for e in exams])


@router.get("/{exam_id}", response_model=APIResponse[Union[ExamDetail, ExamPublicDetail]])
async def get_exam(
    *,
    db: Session = Depends(deps.get_db),
    exam_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context),
    exam_service: ExamService = Depends(deps.get_exam_service)
):
    """Exam with its questions. Students get the questions without the answer key."""
    exam = exam_service.get_exam(db, exam_id=exam_id, current_user_context=context)
    return APIResponse(message="Exam retrieved successfully", data=exam)


@router.put("/{exam_id}", response_model=APIResponse[ExamDetail])
async def update_exam(
    *,
    db: Session = Depends(deps.get_transactional_db),
    exam_id: int,
    exam_in: ExamUpdate,
    context: UserContext = Depends(deps.get_current_user_with_context),
    exam_service: ExamService = Depends(deps.get_exam_service)
):
    updated_exam = exam_service.update_exam(db, exam_id=exam_id, exam_in=exam_in, current_user_context=context)
    return APIResponse(message="Exam updated successfully", data=updated_exam)


@router.delete("/{exam_id}", response_model=APIResponse[Exam])
async def delete_exam(
    *,
    db: Session = Depends(deps.get_transactional_db),
    exam_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context),
    exam_service: ExamService = Depends(deps.get_exam_service)
):
    deleted_exam = exam_service.delete_exam(db, exam_id=exam_id, current_user_context=context)
    return APIResponse(message="Exam deleted successfully", data=Exam.model_validate(deleted_exam))


@router.post("/{exam_id}/start", response_model=APIResponse[Submission], status_code=status.HTTP_201_CREATED)
async def start_exam(
    *,
    db: Session = Depends(deps.get_transactional_db),
    exam_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context),
    submission_service: SubmissionService = Depends(deps.get_submission_service)
):
    """Start the exam, or hand back the submission already in progress."""
    submission = submission_service.start_exam(db, exam_id=exam_id, current_user_context=context)
    return APIResponse(message="Exam started successfully", data=Submission.model_validate(submission))
